"""
Schemas for survey stations, directional plans and plan variance
"""
import math
from enum import Enum
from typing import List, Optional
from pydantic import BaseModel, Field, field_validator
from utils.mcm_calculations import normalize_azimuth_delta, departure, direction


class SurveyStation(BaseModel):
    """Single survey station; raw md/inc/azi plus fields derived by recalculation"""
    md: float = Field(..., description="Measured depth (m)")
    inc: float = Field(..., description="Inclination in degrees")
    azi: float = Field(..., description="Azimuth in degrees")

    tvd: Optional[float] = Field(None, description="True vertical depth (m)")
    ns_m: Optional[float] = Field(None, description="North-South displacement from tie-in (m)")
    ew_m: Optional[float] = Field(None, description="East-West displacement from tie-in (m)")
    vs_m: Optional[float] = Field(None, description="Vertical section (m)")
    dls_deg_per30m: Optional[float] = Field(None, description="Dogleg severity (deg/30m)")
    build_rate_deg_per30m: Optional[float] = Field(None, description="Build rate (deg/30m)")
    turn_rate_deg_per30m: Optional[float] = Field(None, description="Turn rate (deg/30m)")
    subsea_m: Optional[float] = Field(None, description="Depth below sea level (m)")

    @field_validator('inc')
    @classmethod
    def validate_inc(cls, v):
        if not 0.0 <= v <= 180.0:
            raise ValueError("Inclination must be between 0 and 180 degrees")
        return v

    @property
    def departure_m(self) -> float:
        return departure(self.ns_m or 0.0, self.ew_m or 0.0)

    @property
    def direction_deg(self) -> float:
        return direction(self.ns_m or 0.0, self.ew_m or 0.0)


class TieIn(BaseModel):
    """Starting coordinates the first station is anchored to"""
    ns: float = Field(0.0, description="North-South coordinate (m)")
    ew: float = Field(0.0, description="East-West coordinate (m)")
    tvd: float = Field(0.0, description="True vertical depth (m)")


class PlanStation(BaseModel):
    """Directional plan station as delivered by the planning package"""
    md: float = Field(..., description="Measured depth (m)")
    inc: float = Field(..., description="Inclination in degrees")
    azi: float = Field(..., description="Azimuth in degrees")
    tvd: float = Field(..., description="True vertical depth (m)")
    ns_m: float = Field(..., description="North-South coordinate (m)")
    ew_m: float = Field(..., description="East-West coordinate (m)")
    vs_m: Optional[float] = Field(None, description="Vertical section (m)")

    @property
    def departure_m(self) -> float:
        return departure(self.ns_m, self.ew_m)

    @property
    def direction_deg(self) -> float:
        if self.departure_m <= 0.001:
            return 0.0
        return direction(self.ns_m, self.ew_m)


class DirectionalPlan(BaseModel):
    """Directional plan for a well"""
    name: str = Field("", description="Plan name")
    source_file_name: Optional[str] = Field(None, description="File the plan was imported from")
    vs_azimuth_deg: Optional[float] = Field(None, description="Vertical section azimuth (deg)")
    stations: List[PlanStation] = Field(default_factory=list, description="Plan stations")

    @property
    def sorted_stations(self) -> List[PlanStation]:
        return sorted(self.stations, key=lambda s: s.md)

    @property
    def min_md(self) -> float:
        stations = self.sorted_stations
        return stations[0].md if stations else 0.0

    @property
    def max_md(self) -> float:
        stations = self.sorted_stations
        return stations[-1].md if stations else 0.0


class PlanImportResult(BaseModel):
    """Stations and metadata parsed from a delimited plan export"""
    stations: List[PlanStation] = Field(..., description="Stations sorted by measured depth")
    name: str = Field(..., description="Plan name derived from the file name")
    source_file_name: str = Field(..., description="Original file name")
    vs_azimuth_deg: Optional[float] = Field(None, description="Vertical section azimuth from metadata")

    def to_plan(self) -> DirectionalPlan:
        return DirectionalPlan(
            name=self.name,
            source_file_name=self.source_file_name,
            vs_azimuth_deg=self.vs_azimuth_deg,
            stations=list(self.stations)
        )


class DirectionalLimits(BaseModel):
    """Alarm and warning thresholds for plan variance"""
    max_dls_deg_per30m: float = Field(6.0, description="Max allowed dogleg severity (deg/30m)")
    warning_dls_deg_per30m: float = Field(4.5, description="Warning dogleg severity (deg/30m)")
    max_distance_3d_m: float = Field(10.0, description="Max allowed 3D offset from plan (m)")
    warning_distance_3d_m: float = Field(5.0, description="Warning 3D offset from plan (m)")
    max_tvd_variance_m: Optional[float] = Field(None, description="Max allowed TVD variance (m)")
    warning_tvd_variance_m: Optional[float] = Field(None, description="Warning TVD variance (m)")
    max_closure_distance_m: Optional[float] = Field(None, description="Max allowed closure distance (m)")
    warning_closure_distance_m: Optional[float] = Field(None, description="Warning closure distance (m)")


class VarianceStatus(str, Enum):
    OK = "ok"
    WARNING = "warning"
    ALARM = "alarm"

    @property
    def label(self) -> str:
        return {"ok": "OK", "warning": "Warning", "alarm": "Alarm"}[self.value]


class SurveyVariance(BaseModel):
    """Survey station compared against the plan interpolated at the same MD"""
    survey_md: float
    survey_tvd: float
    survey_ns: float
    survey_ew: float
    survey_vs: float
    survey_inc: float
    survey_azi: float
    survey_dls: float = Field(..., description="Actual DLS at this station (deg/30m)")
    survey_br: float = Field(..., description="Actual build rate (deg/30m)")
    survey_tr: float = Field(..., description="Actual turn rate (deg/30m)")

    plan_tvd: float
    plan_ns: float
    plan_ew: float
    plan_vs: float
    plan_inc: float
    plan_azi: float
    plan_dls: float
    plan_br: float
    plan_tr: float

    required_br: float = Field(..., description="Build rate required to intercept plan (deg/30m)")
    required_tr: float = Field(..., description="Turn rate required to intercept plan (deg/30m)")
    projection_distance: float = Field(..., description="Distance used for the required rates (m)")

    @property
    def tvd_variance(self) -> float:
        """Positive when deeper than plan"""
        return self.survey_tvd - self.plan_tvd

    @property
    def vs_variance(self) -> float:
        return self.survey_vs - self.plan_vs

    @property
    def closure_distance(self) -> float:
        return math.hypot(self.survey_ns - self.plan_ns, self.survey_ew - self.plan_ew)

    @property
    def distance_3d(self) -> float:
        return math.sqrt((self.survey_tvd - self.plan_tvd) ** 2
                         + (self.survey_ns - self.plan_ns) ** 2
                         + (self.survey_ew - self.plan_ew) ** 2)

    @property
    def inc_variance(self) -> float:
        return self.survey_inc - self.plan_inc

    @property
    def azi_variance(self) -> float:
        return normalize_azimuth_delta(self.survey_azi - self.plan_azi)

    @property
    def br_variance(self) -> float:
        return self.survey_br - self.plan_br

    @property
    def tr_variance(self) -> float:
        return self.survey_tr - self.plan_tr

    @property
    def dls_variance(self) -> float:
        return self.survey_dls - self.plan_dls

    def status(self, limits: DirectionalLimits) -> VarianceStatus:
        """Overall status; DLS is checked first, then 3D distance, TVD and closure"""
        if self.survey_dls > limits.max_dls_deg_per30m:
            return VarianceStatus.ALARM
        if self.survey_dls > limits.warning_dls_deg_per30m:
            return VarianceStatus.WARNING

        if self.distance_3d > limits.max_distance_3d_m:
            return VarianceStatus.ALARM
        if self.distance_3d > limits.warning_distance_3d_m:
            return VarianceStatus.WARNING

        if limits.max_tvd_variance_m is not None and abs(self.tvd_variance) > limits.max_tvd_variance_m:
            return VarianceStatus.ALARM
        if limits.warning_tvd_variance_m is not None and abs(self.tvd_variance) > limits.warning_tvd_variance_m:
            return VarianceStatus.WARNING

        if limits.max_closure_distance_m is not None and self.closure_distance > limits.max_closure_distance_m:
            return VarianceStatus.ALARM
        if limits.warning_closure_distance_m is not None and self.closure_distance > limits.warning_closure_distance_m:
            return VarianceStatus.WARNING

        return VarianceStatus.OK

    def dls_status(self, limits: DirectionalLimits) -> VarianceStatus:
        if self.survey_dls > limits.max_dls_deg_per30m:
            return VarianceStatus.ALARM
        if self.survey_dls > limits.warning_dls_deg_per30m:
            return VarianceStatus.WARNING
        return VarianceStatus.OK

    def distance_3d_status(self, limits: DirectionalLimits) -> VarianceStatus:
        if self.distance_3d > limits.max_distance_3d_m:
            return VarianceStatus.ALARM
        if self.distance_3d > limits.warning_distance_3d_m:
            return VarianceStatus.WARNING
        return VarianceStatus.OK

    def tvd_status(self, limits: DirectionalLimits) -> VarianceStatus:
        if limits.max_tvd_variance_m is not None and abs(self.tvd_variance) > limits.max_tvd_variance_m:
            return VarianceStatus.ALARM
        if limits.warning_tvd_variance_m is not None and abs(self.tvd_variance) > limits.warning_tvd_variance_m:
            return VarianceStatus.WARNING
        # No dedicated TVD limit, use the 3D distance
        if limits.max_tvd_variance_m is None:
            return self.distance_3d_status(limits)
        return VarianceStatus.OK

    def closure_status(self, limits: DirectionalLimits) -> VarianceStatus:
        if limits.max_closure_distance_m is not None and self.closure_distance > limits.max_closure_distance_m:
            return VarianceStatus.ALARM
        if limits.warning_closure_distance_m is not None and self.closure_distance > limits.warning_closure_distance_m:
            return VarianceStatus.WARNING
        if limits.max_closure_distance_m is None:
            return self.distance_3d_status(limits)
        return VarianceStatus.OK


class VarianceSummary(BaseModel):
    """Summary statistics over a set of survey variances"""
    max_distance_3d: float = 0.0
    avg_distance_3d: float = 0.0
    max_dls: float = 0.0
    max_tvd_variance: float = 0.0
    max_closure_distance: float = 0.0
    station_count: int = 0
    alarm_count: int = 0
    warning_count: int = 0


class BitProjection(BaseModel):
    """Wellbore position projected from the last survey to the bit"""
    survey_md: float = Field(..., description="MD of the last survey")
    survey_to_bit_distance: float = Field(..., description="Distance from survey tool to bit (m)")
    bit_md: float

    bit_tvd: float
    bit_ns: float
    bit_ew: float
    bit_vs: float
    bit_inc: float
    bit_azi: float

    plan_tvd: float
    plan_ns: float
    plan_ew: float
    plan_vs: float
    plan_inc: float
    plan_azi: float

    required_br: float = Field(..., description="Build rate required to intercept plan (deg/30m)")
    required_tr: float = Field(..., description="Turn rate required to intercept plan (deg/30m)")
    projection_to_target_md: float

    target_tvd: Optional[float] = None
    target_landing_inc: Optional[float] = None
    user_distance_to_land: Optional[float] = None
    calculated_distance_to_land: Optional[float] = None
    required_br_to_target: Optional[float] = None

    @property
    def tvd_variance(self) -> float:
        return self.bit_tvd - self.plan_tvd

    @property
    def vs_variance(self) -> float:
        return self.bit_vs - self.plan_vs

    @property
    def closure_distance(self) -> float:
        return math.hypot(self.bit_ns - self.plan_ns, self.bit_ew - self.plan_ew)

    @property
    def distance_3d(self) -> float:
        return math.sqrt((self.bit_tvd - self.plan_tvd) ** 2
                         + (self.bit_ns - self.plan_ns) ** 2
                         + (self.bit_ew - self.plan_ew) ** 2)

    @property
    def inc_variance(self) -> float:
        return self.bit_inc - self.plan_inc

    @property
    def azi_variance(self) -> float:
        return normalize_azimuth_delta(self.bit_azi - self.plan_azi)

    def status(self, limits: DirectionalLimits) -> VarianceStatus:
        if self.distance_3d > limits.max_distance_3d_m:
            return VarianceStatus.ALARM
        if self.distance_3d > limits.warning_distance_3d_m:
            return VarianceStatus.WARNING
        if limits.max_tvd_variance_m is not None and abs(self.tvd_variance) > limits.max_tvd_variance_m:
            return VarianceStatus.ALARM
        if limits.warning_tvd_variance_m is not None and abs(self.tvd_variance) > limits.warning_tvd_variance_m:
            return VarianceStatus.WARNING
        return VarianceStatus.OK
