"""
Schemas for wellbore (annulus) and drill-string sections
"""
import math
from typing import Optional
from pydantic import BaseModel, Field

GRAVITY = 9.80665  # m/s²


class AnnulusSection(BaseModel):
    """Open hole or cased interval; inner diameter is the hole/casing ID"""
    name: str = Field("", description="Section name")
    top_depth_m: float = Field(..., description="MD at top of section (m)")
    length_m: float = Field(..., description="Section length (m)")
    inner_diameter_m: float = Field(..., description="Casing/wellbore ID (m)")
    outer_diameter_m: float = Field(0.0, description="String OD in this section (m)")

    @property
    def bottom_depth_m(self) -> float:
        return self.top_depth_m + self.length_m

    @property
    def flow_area_m2(self) -> float:
        """Concentric annulus area π/4 (ID² − OD²), zero when OD fills the hole"""
        if self.inner_diameter_m <= self.outer_diameter_m:
            return 0.0
        return math.pi * 0.25 * (self.inner_diameter_m ** 2 - self.outer_diameter_m ** 2)

    @property
    def wetted_perimeter_m(self) -> float:
        return math.pi * (self.inner_diameter_m + self.outer_diameter_m)

    @property
    def hydraulic_radius_m(self) -> float:
        perimeter = self.wetted_perimeter_m
        return self.flow_area_m2 / perimeter if perimeter > 0 else 0.0

    @property
    def equivalent_diameter_m(self) -> float:
        return max(self.inner_diameter_m - self.outer_diameter_m, 0.0)

    @property
    def volume_m3(self) -> float:
        return self.flow_area_m2 * self.length_m


class DrillStringSection(BaseModel):
    """Drill-string component run over a depth interval"""
    name: str = Field("", description="Section name")
    top_depth_m: float = Field(..., description="MD at top of section (m)")
    length_m: float = Field(..., description="Section length (m)")
    outer_diameter_m: float = Field(..., description="Pipe OD (m)")
    inner_diameter_m: float = Field(..., description="Pipe ID (m)")
    steel_density_kg_per_m3: float = Field(7850.0, description="Steel density (kg/m³)")
    unit_weight_kg_per_m: Optional[float] = Field(None, description="Tabulated unit weight (kg/m)")

    @property
    def bottom_depth_m(self) -> float:
        return self.top_depth_m + self.length_m

    @property
    def metal_area_m2(self) -> float:
        ro = self.outer_diameter_m * 0.5
        ri = self.inner_diameter_m * 0.5
        return math.pi * (ro * ro - ri * ri)

    @property
    def weight_air_kdan_per_m(self) -> float:
        """Self-weight in air (kDaN/m); 1 kDaN = 10 kN"""
        if self.unit_weight_kg_per_m is not None:
            mass_per_m = self.unit_weight_kg_per_m
        else:
            mass_per_m = self.steel_density_kg_per_m3 * self.metal_area_m2
        return mass_per_m * GRAVITY / 10_000.0
