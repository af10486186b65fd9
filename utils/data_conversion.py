"""
Utilities for converting between raw survey records, plan stations and survey stations
"""
from typing import Any, Dict, Iterable, List
from models.survey_schemas import SurveyStation, PlanStation, PlanImportResult


def convert_records_to_survey_stations(records: Iterable[Dict[str, float]]) -> List[SurveyStation]:
    """
    Convert survey rows to survey stations

    Args:
        records: Dictionaries with keys MD, Inc, Azi (as in spreadsheet exports)

    Returns:
        List of SurveyStation objects sorted by MD
    """
    stations = [
        SurveyStation(md=float(r['MD']), inc=float(r['Inc']), azi=float(r['Azi']))
        for r in records
    ]
    return sorted(stations, key=lambda s: s.md)


def convert_plan_to_survey_stations(plan_stations: Iterable[PlanStation]) -> List[SurveyStation]:
    """
    Raw md/inc/azi of plan stations as survey stations ready for recalculation

    Planned TVD/NS/EW are dropped; recalculation recomputes them from the angles.
    """
    return [SurveyStation(md=s.md, inc=s.inc, azi=s.azi)
            for s in sorted(plan_stations, key=lambda s: s.md)]


def import_result_to_records(result: PlanImportResult) -> List[Dict[str, Any]]:
    """Flatten imported plan stations to (md, inc, azi, tvd, ns, ew, vs) dictionaries"""
    return [
        {
            'md': s.md,
            'inc': s.inc,
            'azi': s.azi,
            'tvd': s.tvd,
            'ns': s.ns_m,
            'ew': s.ew_m,
            'vs': s.vs_m
        }
        for s in result.stations
    ]


def stations_to_records(stations: Iterable[SurveyStation]) -> List[Dict[str, Any]]:
    """Survey stations as plain dictionaries, derived fields included"""
    return [s.model_dump() for s in stations]
