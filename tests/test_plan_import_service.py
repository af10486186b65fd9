import unittest
from services.plan_import_service import (
    PlanImportService, PlanImportError, EmptyFileError, NoDataRowsError, MissingColumnsError,
    normalize_header, parse_vs_azimuth
)
from utils.data_conversion import import_result_to_records, convert_plan_to_survey_stations


CSV_PLAN = """MD (m),Inc,Azi,TVD,NS,EW,VS
0,0,0,0,0,0,0
1000,10,45,995.0,61.5,61.5,87.0
500,0,0,500,0,0,0
"""

TSV_PLAN = (
    "# Plan export\n"
    "# Vertical Section Azimuth: 285.761 °(TRUE North)\n"
    "Measured Depth\tInclination (°)\tAzimuth (°)\tTVD (m)\t+N/-S\t+E/-W\n"
    "0.00\t0.00\t0.00\t0.00\t0.00\t0.00\n"
    "1,200.50\t12.50\t285.76\t1,195.10\t20.10\t-70.30\n"
    "\n"
    "#EOF\n"
)


class PlanImportServiceTests(unittest.TestCase):

    def setUp(self):
        self.service = PlanImportService()

    def test_csv_import_sorts_by_md(self):
        result = self.service.import_plan(CSV_PLAN, "well-A plan.csv")

        self.assertEqual([s.md for s in result.stations], [0.0, 500.0, 1000.0])
        self.assertEqual(result.name, "well-A plan")
        self.assertEqual(result.source_file_name, "well-A plan.csv")
        self.assertIsNone(result.vs_azimuth_deg)
        last = result.stations[-1]
        self.assertEqual((last.inc, last.azi, last.tvd, last.ns_m, last.ew_m, last.vs_m),
                         (10.0, 45.0, 995.0, 61.5, 61.5, 87.0))

    def test_tab_separated_import_with_metadata(self):
        result = self.service.import_plan(TSV_PLAN, "plan.txt")

        self.assertEqual(len(result.stations), 2)
        self.assertAlmostEqual(result.vs_azimuth_deg, 285.761)
        second = result.stations[1]
        self.assertEqual(second.md, 1200.5)
        self.assertEqual(second.tvd, 1195.1)
        self.assertEqual(second.ew_m, -70.3)
        self.assertIsNone(second.vs_m)

    def test_bad_rows_are_skipped(self):
        text = "MD,Inc,Azi,TVD,NS,EW\n0,0,0,0,0,0\n100,abc,0,100,0,0\n200,,0,200,0,0\n300,0,0,300,0,0\n"
        result = self.service.import_plan(text, "plan.csv")

        self.assertEqual([s.md for s in result.stations], [0.0, 300.0])

    def test_extra_trailing_fields_are_ignored(self):
        text = ("MD,Inc,Azi,TVD,NS,EW\n"
                "0,0,0,0,0,0\n"
                "100,1,10,99.9,0.8,0.1,comment,x\n"
                "200,2,10,199.9,3.2,0.6\n")
        result = self.service.import_plan(text, "plan.csv")

        self.assertEqual([s.md for s in result.stations], [0.0, 100.0, 200.0])
        self.assertEqual(result.stations[1].ew_m, 0.1)

    def test_every_row_with_trailing_tab(self):
        text = "MD\tInc\tAzi\tTVD\tNS\tEW\n0\t0\t0\t0\t0\t0\t\n100\t1\t10\t99.9\t0.8\t0.1\t\n"
        result = self.service.import_plan(text, "plan.txt")

        self.assertEqual([s.md for s in result.stations], [0.0, 100.0])

    def test_quoted_headers_with_embedded_newlines(self):
        text = ('"MD\n(m)"\t"Inc\n(deg)"\t"Azi\n(deg)"\t"TVD\n(m)"\t"NS\n(m)"\t"EW\n(m)"\n'
                "0\t0\t0\t0\t0\t0\n"
                "100\t1\t10\t99.9\t0.8\t0.1\n")
        result = self.service.import_plan(text, "plan.txt")

        self.assertEqual([s.md for s in result.stations], [0.0, 100.0])
        self.assertEqual(result.stations[1].tvd, 99.9)

    def test_optional_vs_left_empty(self):
        text = "MD,Inc,Azi,TVD,NS,EW,VS\n0,0,0,0,0,0,\n100,0,0,100,0,0,5\n"
        result = self.service.import_plan(text, "plan.csv")

        self.assertIsNone(result.stations[0].vs_m)
        self.assertEqual(result.stations[1].vs_m, 5.0)

    def test_empty_file(self):
        for text in ("", "   \n\n"):
            with self.assertRaises(EmptyFileError):
                self.service.import_plan(text, "empty.csv")

    def test_header_only_has_no_data_rows(self):
        with self.assertRaises(NoDataRowsError):
            self.service.import_plan("MD,Inc,Azi,TVD,NS,EW\n", "plan.csv")

    def test_all_rows_invalid(self):
        with self.assertRaises(NoDataRowsError):
            self.service.import_plan("MD,Inc,Azi,TVD,NS,EW\nx,y,z,,,\n", "plan.csv")

    def test_missing_required_columns(self):
        with self.assertRaises(MissingColumnsError) as ctx:
            self.service.import_plan("MD,Inc,Azi\n0,0,0\n100,1,1\n", "plan.csv")

        self.assertEqual(ctx.exception.missing, ["TVD", "NS/North-South", "EW/East-West"])
        self.assertIn("Missing required columns", str(ctx.exception))
        self.assertIsInstance(ctx.exception, PlanImportError)
        self.assertIsInstance(ctx.exception, ValueError)

    def test_default_name(self):
        result = self.service.import_plan(CSV_PLAN, "")

        self.assertEqual(result.name, "Imported Plan")

    def test_import_feeds_plan_and_survey_conversion(self):
        result = self.service.import_plan(CSV_PLAN, "plan.csv")
        plan = result.to_plan()
        records = import_result_to_records(result)
        surveys = convert_plan_to_survey_stations(plan.stations)

        self.assertEqual(plan.max_md, 1000.0)
        self.assertEqual(records[1]['md'], 500.0)
        self.assertEqual(records[2]['vs'], 87.0)
        self.assertEqual([(s.md, s.inc, s.azi) for s in surveys],
                         [(0.0, 0.0, 0.0), (500.0, 0.0, 0.0), (1000.0, 10.0, 45.0)])
        self.assertIsNone(surveys[0].tvd)


class HeaderParsingTests(unittest.TestCase):

    def test_normalize_header(self):
        self.assertEqual(normalize_header("\ufeffMD"), "MD")
        self.assertEqual(normalize_header(" Inc\n(deg) "), "Inc (deg)")
        self.assertEqual(normalize_header("TVD   (m)"), "TVD (m)")

    def test_vs_azimuth_variants(self):
        self.assertEqual(parse_vs_azimuth("VS Azimuth: 12.5"), 12.5)
        self.assertEqual(parse_vs_azimuth("vsd 90"), 90.0)
        self.assertEqual(parse_vs_azimuth("V.S. Azimuth: 180.25"), 180.25)
        self.assertIsNone(parse_vs_azimuth("MD,Inc,Azi"))


if __name__ == '__main__':
    unittest.main()
