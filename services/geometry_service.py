"""
Wellbore geometry lookup by measured depth for hydraulics and swab/surge engines
"""
import logging
from abc import ABC, abstractmethod
from typing import Iterable, Optional, Sequence, Tuple
import numpy as np
from models.geometry_schemas import AnnulusSection, DrillStringSection

logger = logging.getLogger(__name__)


class GeometryService(ABC):
    """
    Hole and pipe diameters (m) at a measured depth.

    Subclasses implement hole_od_m, pipe_od_m and pipe_id_m; the derived
    areas and gap are built on top of those three queries.
    """

    @abstractmethod
    def hole_od_m(self, md: float) -> float:
        raise NotImplementedError

    @abstractmethod
    def pipe_od_m(self, md: float) -> float:
        raise NotImplementedError

    @abstractmethod
    def pipe_id_m(self, md: float) -> float:
        raise NotImplementedError

    def annulus_gap_m(self, md: float) -> float:
        """Annular gap (m); never negative"""
        return max(self.hole_od_m(md) - self.pipe_od_m(md), 0.0)

    def pipe_area_m2(self, md: float) -> float:
        """Area enclosed by the pipe OD (m²)"""
        d = max(self.pipe_od_m(md), 0.0)
        return np.pi * d * d / 4.0

    def annulus_area_m2(self, md: float) -> float:
        """Annular flow area (m²); clamped to >= 0"""
        dh = max(self.hole_od_m(md), 0.0)
        do = max(self.pipe_od_m(md), 0.0)
        return max(0.0, np.pi * (dh * dh - do * do) / 4.0)


def _first_covering(tops: np.ndarray, bottoms: np.ndarray, md: float) -> Optional[int]:
    """Index of the first interval with top <= md <= bottom, or None"""
    covering = np.flatnonzero((tops <= md) & (md <= bottoms))
    if covering.size == 0:
        return None
    return int(covering[0])


class ProjectGeometryService(GeometryService):
    """
    Geometry backed by annulus and drill-string section lists.

    Sections are sorted by top depth once at construction. Overlapping
    sections are accepted as-is; the first one in sorted order wins.
    current_string_bottom_md marks how far the string extends: below it
    there is no pipe regardless of section coverage.
    """

    def __init__(self, annulus: Iterable[AnnulusSection],
                 string: Iterable[DrillStringSection],
                 current_string_bottom_md: float):
        self._annulus = tuple(sorted(annulus, key=lambda s: s.top_depth_m))
        self._string = tuple(sorted(string, key=lambda s: s.top_depth_m))
        self._current_string_bottom_md = float(current_string_bottom_md)

        self._annulus_tops = np.array([s.top_depth_m for s in self._annulus], dtype=float)
        self._annulus_bottoms = np.array([s.bottom_depth_m for s in self._annulus], dtype=float)
        self._string_tops = np.array([s.top_depth_m for s in self._string], dtype=float)
        self._string_bottoms = np.array([s.bottom_depth_m for s in self._string], dtype=float)

        logger.debug(f"Geometry built from {len(self._annulus)} annulus and "
                     f"{len(self._string)} string sections, string bottom at "
                     f"{self._current_string_bottom_md:.1f} m")

    @property
    def annulus(self) -> Tuple[AnnulusSection, ...]:
        return self._annulus

    @property
    def string(self) -> Tuple[DrillStringSection, ...]:
        return self._string

    @property
    def current_string_bottom_md(self) -> float:
        return self._current_string_bottom_md

    def hole_od_m(self, md: float) -> float:
        """Hole inner diameter at MD (m). Returns 0 if no section covers the MD."""
        idx = _first_covering(self._annulus_tops, self._annulus_bottoms, md)
        if idx is None:
            return 0.0
        return max(self._annulus[idx].inner_diameter_m, 0.0)

    def _string_section(self, md: float) -> Optional[DrillStringSection]:
        # String has not reached this depth (early RIH) or was pulled above it
        if md > self._current_string_bottom_md:
            return None
        idx = _first_covering(self._string_tops, self._string_bottoms, md)
        if idx is None:
            return None
        return self._string[idx]

    def pipe_od_m(self, md: float) -> float:
        """Pipe outer diameter at MD (m). Returns 0 below the string bottom or outside any section."""
        section = self._string_section(md)
        return max(section.outer_diameter_m, 0.0) if section is not None else 0.0

    def pipe_id_m(self, md: float) -> float:
        """Pipe inner diameter at MD (m). Returns 0 below the string bottom or outside any section."""
        section = self._string_section(md)
        return max(section.inner_diameter_m, 0.0) if section is not None else 0.0

    def with_string_bottom(self, current_string_bottom_md: float) -> 'ProjectGeometryService':
        """Same sections, different string depth (one instance per simulation step)"""
        return ProjectGeometryService(self._annulus, self._string, current_string_bottom_md)

    def sample(self, mds: Sequence[float]) -> dict:
        """Hole ID, pipe OD and pipe ID at each depth, as numpy arrays"""
        return {
            'md': np.asarray(mds, dtype=float),
            'hole_od_m': np.array([self.hole_od_m(md) for md in mds]),
            'pipe_od_m': np.array([self.pipe_od_m(md) for md in mds]),
            'pipe_id_m': np.array([self.pipe_id_m(md) for md in mds])
        }
