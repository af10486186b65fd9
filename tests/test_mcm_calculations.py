import unittest
import math
from utils.mcm_calculations import (
    minimum_curvature, calculate_vs, normalize_azimuth_delta, departure, direction, calculate_rates
)
from models.survey_schemas import SurveyStation, PlanStation


class MinimumCurvatureTests(unittest.TestCase):

    def test_straight_hold_uses_tangential_ratio_factor(self):
        result = minimum_curvature(500, 30, 45, 600, 30, 45)

        self.assertEqual(result.dls_deg_per30m, 0.0)
        self.assertAlmostEqual(result.d_tvd, 86.603, delta=0.001)
        self.assertAlmostEqual(result.d_ns, 35.355, delta=0.001)
        self.assertAlmostEqual(result.d_ew, 35.355, delta=0.001)

    def test_build_and_turn_from_vertical(self):
        result = minimum_curvature(0, 0, 0, 100, 10, 30)

        # 10 degree dogleg over 100 m
        self.assertAlmostEqual(result.dls_deg_per30m, 3.00, delta=0.01)
        self.assertAlmostEqual(result.d_tvd, 99.49, delta=0.01)
        self.assertAlmostEqual(result.d_ns, 7.54, delta=0.01)
        self.assertAlmostEqual(result.d_ew, 4.35, delta=0.01)

    def test_textbook_case(self):
        # 15/40 -> 45/170 over 500 m, reference end point N=-135.3 E=78.54 V=454.46
        result = minimum_curvature(0, 15, 40, 500, 45, 170)

        self.assertAlmostEqual(result.d_ns, -135.3, delta=1.0)
        self.assertAlmostEqual(result.d_ew, 78.54, delta=1.0)
        self.assertAlmostEqual(result.d_tvd, 454.46, delta=1.0)

    def test_non_increasing_md_returns_zeros(self):
        for md2 in (100.0, 90.0):
            result = minimum_curvature(100, 10, 20, md2, 40, 200)
            self.assertEqual(tuple(result), (0.0, 0.0, 0.0, 0.0))

    def test_opposite_directions_do_not_produce_nan(self):
        # cos(dogleg) lands at -1; the clamp keeps arccos defined
        result = minimum_curvature(0, 90, 0, 100, 90, 180)

        for value in result:
            self.assertFalse(math.isnan(value))
        self.assertAlmostEqual(result.dls_deg_per30m, 54.0, delta=1e-6)

    def test_tiny_dogleg_stays_finite(self):
        result = minimum_curvature(0, 20, 100, 30, 20 + 1e-9, 100)

        self.assertAlmostEqual(result.d_tvd, 30 * math.cos(math.radians(20)), delta=1e-6)


class HelperTests(unittest.TestCase):

    def test_vertical_section_projection(self):
        self.assertAlmostEqual(calculate_vs(100, 0, 0), 100)
        self.assertAlmostEqual(calculate_vs(0, 100, math.pi / 2), 100)
        self.assertAlmostEqual(calculate_vs(10, 10, math.radians(45)), math.sqrt(200))

    def test_azimuth_delta_wraps_the_short_way(self):
        self.assertEqual(normalize_azimuth_delta(10 - 350), 20)
        self.assertEqual(normalize_azimuth_delta(350 - 10), -20)
        self.assertEqual(normalize_azimuth_delta(720 + 15), 15)
        self.assertEqual(normalize_azimuth_delta(180), 180)

    def test_departure_and_direction(self):
        self.assertAlmostEqual(departure(3, 4), 5)
        self.assertEqual(direction(0, 0), 0.0)
        self.assertAlmostEqual(direction(0, 10), 90)
        self.assertAlmostEqual(direction(-10, 0), 180)
        self.assertAlmostEqual(direction(0, -10), 270)

    def test_station_departure_and_direction(self):
        station = SurveyStation(md=100, inc=10, azi=0, ns_m=-3, ew_m=-4)
        plan_station = PlanStation(md=100, inc=10, azi=0, tvd=99, ns_m=0.0005, ew_m=0.0)

        self.assertAlmostEqual(station.departure_m, 5)
        self.assertAlmostEqual(station.direction_deg, direction(-3, -4))
        self.assertGreater(station.direction_deg, 180)
        self.assertEqual(SurveyStation(md=0, inc=0, azi=0).direction_deg, 0.0)
        self.assertEqual(plan_station.direction_deg, 0.0)

    def test_inclination_outside_range_rejected(self):
        with self.assertRaises(ValueError):
            SurveyStation(md=100, inc=-1, azi=0)

    def test_rates_between_stations(self):
        dls, br, tr = calculate_rates(10, 350, 13, 10, 30)

        self.assertAlmostEqual(br, 3.0)
        self.assertAlmostEqual(tr, 20.0)
        self.assertGreater(dls, 0)

    def test_rates_zero_for_non_positive_interval(self):
        self.assertEqual(calculate_rates(10, 10, 20, 20, 0), (0.0, 0.0, 0.0))


if __name__ == '__main__':
    unittest.main()
