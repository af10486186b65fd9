"""
Minimum Curvature Method calculations
"""
from typing import NamedTuple, Tuple
import numpy as np
from config import Config


class MinCurvResult(NamedTuple):
    d_tvd: float
    d_ns: float
    d_ew: float
    dls_deg_per30m: float


ZERO_RESULT = MinCurvResult(0.0, 0.0, 0.0, 0.0)


def minimum_curvature(md1, inc1, azi1, md2, inc2, azi2) -> MinCurvResult:
    """
    Position change and dogleg severity between two adjacent survey stations

    Args:
        md1, md2: Measured depths (m)
        inc1, inc2: Inclinations in degrees
        azi1, azi2: Azimuths in degrees

    Returns:
        MinCurvResult with dTVD, dNS, dEW (m) and DLS (deg/30m).
        All zero when md2 <= md1.
    """
    course_length = md2 - md1
    if course_length <= 0:
        return ZERO_RESULT

    I1, I2 = np.radians(inc1), np.radians(inc2)
    A1, A2 = np.radians(azi1), np.radians(azi2)

    # Dogleg angle, cosine clamped against floating point overshoot
    cos_dl = np.cos(I2 - I1) - np.sin(I1)*np.sin(I2)*(1 - np.cos(A2 - A1))
    dogleg = np.arccos(np.clip(cos_dl, -1.0, 1.0))

    dls = np.degrees(dogleg) / course_length * Config.DLS_COURSE_LENGTH_M

    # Ratio factor; tangential for a (near) straight course
    if dogleg < Config.MIN_DOGLEG_RAD:
        rf = 1.0
    else:
        rf = 2/dogleg * np.tan(dogleg/2)

    half = course_length / 2
    d_tvd = half * (np.cos(I1) + np.cos(I2)) * rf
    d_ns = half * (np.sin(I1)*np.cos(A1) + np.sin(I2)*np.cos(A2)) * rf
    d_ew = half * (np.sin(I1)*np.sin(A1) + np.sin(I2)*np.sin(A2)) * rf

    return MinCurvResult(float(d_tvd), float(d_ns), float(d_ew), float(dls))


def calculate_vs(ns, ew, vsd_rad) -> float:
    """Vertical section: VS = NS*cos(VSD) + EW*sin(VSD)"""
    return float(ns*np.cos(vsd_rad) + ew*np.sin(vsd_rad))


def normalize_azimuth_delta(delta) -> float:
    """Wrap an azimuth difference into [-180, 180] degrees"""
    while delta > 180:
        delta -= 360
    while delta < -180:
        delta += 360
    return delta


def departure(ns, ew) -> float:
    """Total horizontal departure from NS/EW"""
    return float(np.hypot(ns, ew))


def direction(ns, ew) -> float:
    """Closure azimuth (deg, 0-360) from NS/EW; 0 at the origin"""
    if ns == 0 and ew == 0:
        return 0.0
    deg = np.degrees(np.arctan2(ew, ns))
    if deg < 0:
        deg += 360
    return float(deg)


def calculate_rates(inc1, azi1, inc2, azi2, interval_md) -> Tuple[float, float, float]:
    """
    DLS, build rate and turn rate between two stations

    Returns:
        (dls, build_rate, turn_rate) all in deg/30m; zeros when interval_md <= 0
    """
    if interval_md <= 0:
        return 0.0, 0.0, 0.0

    per = Config.DLS_COURSE_LENGTH_M
    d_azi = normalize_azimuth_delta(azi2 - azi1)
    br = (inc2 - inc1) / interval_md * per
    tr = d_azi / interval_md * per

    I1, I2 = np.radians(inc1), np.radians(inc2)
    cos_dl = np.cos(I2 - I1) - np.sin(I1)*np.sin(I2)*(1 - np.cos(np.radians(d_azi)))
    dl = np.arccos(np.clip(cos_dl, -1.0, 1.0))
    dls = np.degrees(dl) / interval_md * per

    return float(dls), br, tr
