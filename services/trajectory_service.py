"""
Trajectory recalculation service using the minimum curvature method
"""
import logging
from typing import List, Optional, Sequence
import numpy as np
from config import Config
from models.survey_schemas import SurveyStation, TieIn
from utils.mcm_calculations import minimum_curvature, calculate_vs, normalize_azimuth_delta
from utils.tvd_sampler import TvdSampler

logger = logging.getLogger(__name__)


class TrajectoryRecalculationService:
    """Service for recomputing derived survey values along an ordered station list"""

    def __init__(self):
        self.r = np.pi / 180  # Degree to radian conversion

    def recalculate(self, stations: Sequence[SurveyStation], vsd_direction: float,
                    kb_elevation: Optional[float] = None,
                    tie_in: Optional[TieIn] = None) -> List[SurveyStation]:
        """
        Recalculate TVD, NS/EW, VS, DLS, build/turn rate and subsea for every station

        Args:
            stations: Survey stations sorted by MD (ascending)
            vsd_direction: Vertical section direction in degrees
            kb_elevation: Reference elevation above sea level (m); subsea is only
                computed when given
            tie_in: Starting coordinates for the first station, (0, 0, 0) by default

        Returns:
            New list of stations with derived fields filled in. The input stations
            are not modified.
        """
        if not stations:
            return []

        tie_in = tie_in or TieIn()
        vsd_rad = vsd_direction * self.r
        per = Config.DLS_COURSE_LENGTH_M

        first = stations[0]
        results = [first.model_copy(update={
            'tvd': tie_in.tvd,
            'ns_m': tie_in.ns,
            'ew_m': tie_in.ew,
            'vs_m': calculate_vs(tie_in.ns, tie_in.ew, vsd_rad),
            'dls_deg_per30m': 0.0,
            'build_rate_deg_per30m': 0.0,
            'turn_rate_deg_per30m': 0.0,
            'subsea_m': kb_elevation - tie_in.tvd if kb_elevation is not None else None
        })]

        for i in range(1, len(stations)):
            prev_raw = stations[i - 1]
            curr = stations[i]
            prev = results[i - 1]

            result = minimum_curvature(prev_raw.md, prev_raw.inc, prev_raw.azi,
                                       curr.md, curr.inc, curr.azi)

            tvd = prev.tvd + result.d_tvd
            ns = prev.ns_m + result.d_ns
            ew = prev.ew_m + result.d_ew

            # Build/turn from raw angle changes, not from the curvature geometry
            course_length = curr.md - prev_raw.md
            if course_length > 0:
                build_rate = (curr.inc - prev_raw.inc) / course_length * per
                turn_rate = normalize_azimuth_delta(curr.azi - prev_raw.azi) / course_length * per
            else:
                build_rate = 0.0
                turn_rate = 0.0

            results.append(curr.model_copy(update={
                'tvd': tvd,
                'ns_m': ns,
                'ew_m': ew,
                'vs_m': calculate_vs(ns, ew, vsd_rad),
                'dls_deg_per30m': result.dls_deg_per30m,
                'build_rate_deg_per30m': build_rate,
                'turn_rate_deg_per30m': turn_rate,
                'subsea_m': kb_elevation - tvd if kb_elevation is not None else None
            }))

        logger.debug(f"Recalculated {len(results)} stations "
                     f"(VSD {vsd_direction:.2f} deg, tie-in TVD {tie_in.tvd:.2f} m)")

        return results

    def tvd_sampler(self, stations: Sequence[SurveyStation]) -> TvdSampler:
        """TVD lookup over stations that have already been recalculated"""
        return TvdSampler(stations)
