"""
TVD lookup at arbitrary measured depth along a surveyed wellbore
"""
from typing import Iterable
import numpy as np
from models.survey_schemas import SurveyStation


class TvdSampler:
    """Piecewise-linear MD -> TVD map built from survey stations"""

    def __init__(self, stations: Iterable[SurveyStation]):
        md, tvd = [], []
        last_md = -np.inf
        for station in sorted(stations, key=lambda s: s.md):
            # keep strictly increasing MD only
            if station.md <= last_md:
                continue
            md.append(station.md)
            tvd.append(station.tvd if station.tvd is not None else station.md)
            last_md = station.md
        self._md = np.array(md, dtype=float)
        self._tvd = np.array(tvd, dtype=float)

    def __len__(self):
        return len(self._md)

    def tvd(self, md: float) -> float:
        """TVD at md; end values are held outside the surveyed range"""
        if len(self._md) == 0:
            return md
        return float(np.interp(md, self._md, self._tvd))
