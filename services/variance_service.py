"""
Variance between actual surveys and a directional plan, and projection to the bit
"""
import logging
from typing import Dict, List, Optional, Sequence, Tuple
import numpy as np
from config import Config
from models.survey_schemas import (
    SurveyStation, PlanStation, DirectionalPlan, DirectionalLimits,
    SurveyVariance, VarianceSummary, VarianceStatus, BitProjection
)
from utils.mcm_calculations import (
    minimum_curvature, calculate_vs, calculate_rates, normalize_azimuth_delta
)

logger = logging.getLogger(__name__)


class DirectionalVarianceService:
    """Service for comparing survey stations against a directional plan"""

    def __init__(self):
        self.r = np.pi / 180  # Degree to radian conversion

    def calculate_variances(self, surveys: Sequence[SurveyStation], plan: DirectionalPlan,
                            project_vsd_direction: float) -> List[SurveyVariance]:
        """
        Variance for each survey station inside the plan's MD range

        Args:
            surveys: Recalculated survey stations
            plan: Plan to compare against
            project_vsd_direction: VS direction (deg) used when the plan has none

        Returns:
            List of SurveyVariance, one per survey station within the plan range
        """
        plan_stations = plan.sorted_stations
        sorted_surveys = sorted(surveys, key=lambda s: s.md)
        if not plan_stations or not sorted_surveys:
            return []

        vsd_direction = plan.vs_azimuth_deg if plan.vs_azimuth_deg is not None else project_vsd_direction
        vsd_rad = vsd_direction * self.r
        plan_start, plan_end = plan_stations[0].md, plan_stations[-1].md

        results = []
        for index, survey in enumerate(sorted_surveys):
            if survey.md < plan_start or survey.md > plan_end:
                continue

            interpolated = self.interpolate_plan(survey.md, plan_stations, vsd_rad)

            survey_br = survey_tr = 0.0
            if index > 0:
                prev = sorted_surveys[index - 1]
                _, survey_br, survey_tr = calculate_rates(prev.inc, prev.azi, survey.inc, survey.azi,
                                                          survey.md - prev.md)

            # Target a point on the plan a short distance ahead
            projection_md = min(Config.DEFAULT_PROJECTION_MD, plan_end - survey.md)
            target_md = survey.md + max(projection_md, Config.MIN_PROJECTION_MD)
            target = self.interpolate_plan(min(target_md, plan_end), plan_stations, vsd_rad)
            projection_distance = projection_md if projection_md > 0 else Config.DEFAULT_PROJECTION_MD

            required_br, required_tr = self.calculate_required_rates(
                survey.inc, survey.azi, target['inc'], target['azi'], projection_distance
            )

            results.append(SurveyVariance(
                survey_md=survey.md,
                survey_tvd=survey.tvd or 0.0,
                survey_ns=survey.ns_m or 0.0,
                survey_ew=survey.ew_m or 0.0,
                survey_vs=survey.vs_m or 0.0,
                survey_inc=survey.inc,
                survey_azi=survey.azi,
                survey_dls=survey.dls_deg_per30m or 0.0,
                survey_br=survey_br,
                survey_tr=survey_tr,
                plan_tvd=interpolated['tvd'],
                plan_ns=interpolated['ns'],
                plan_ew=interpolated['ew'],
                plan_vs=interpolated['vs'],
                plan_inc=interpolated['inc'],
                plan_azi=interpolated['azi'],
                plan_dls=interpolated['dls'],
                plan_br=interpolated['br'],
                plan_tr=interpolated['tr'],
                required_br=required_br,
                required_tr=required_tr,
                projection_distance=projection_distance
            ))

        logger.debug(f"Calculated {len(results)} variances against plan '{plan.name}' "
                     f"({len(sorted_surveys) - len(results)} surveys outside plan range)")

        return results

    def interpolate_plan(self, md: float, plan_stations: Sequence[PlanStation],
                         vsd_rad: float) -> Dict[str, float]:
        """
        Plan position and attitude at md

        Position follows the minimum curvature delta between the bracketing
        stations scaled by the MD fraction; inclination is linear and azimuth
        is interpolated the short way round.
        """
        if not plan_stations:
            return dict(tvd=0.0, ns=0.0, ew=0.0, vs=0.0, inc=0.0, azi=0.0, dls=0.0, br=0.0, tr=0.0)

        lower = upper = None
        for station in plan_stations:
            if station.md <= md:
                lower = station
            if station.md >= md and upper is None:
                upper = station
            if lower is not None and upper is not None:
                break
        lower = lower or plan_stations[0]
        upper = upper or plan_stations[-1]

        dls, br, tr = calculate_rates(lower.inc, lower.azi, upper.inc, upper.azi, upper.md - lower.md)

        tol = Config.INTERPOLATION_TOLERANCE_M
        for station, hit in ((lower, lower.md == upper.md or abs(md - lower.md) < tol),
                             (upper, abs(md - upper.md) < tol)):
            if hit:
                vs = station.vs_m
                if vs is None:
                    vs = calculate_vs(station.ns_m, station.ew_m, vsd_rad)
                return dict(tvd=station.tvd, ns=station.ns_m, ew=station.ew_m, vs=vs,
                            inc=station.inc, azi=station.azi, dls=dls, br=br, tr=tr)

        fraction = (md - lower.md) / (upper.md - lower.md)
        delta = minimum_curvature(lower.md, lower.inc, lower.azi, upper.md, upper.inc, upper.azi)

        tvd = lower.tvd + fraction * delta.d_tvd
        ns = lower.ns_m + fraction * delta.d_ns
        ew = lower.ew_m + fraction * delta.d_ew

        inc = lower.inc + fraction * (upper.inc - lower.inc)
        azi = lower.azi + fraction * normalize_azimuth_delta(upper.azi - lower.azi)
        azi = azi % 360

        return dict(tvd=tvd, ns=ns, ew=ew, vs=calculate_vs(ns, ew, vsd_rad),
                    inc=inc, azi=azi, dls=dls, br=br, tr=tr)

    def calculate_required_rates(self, current_inc: float, current_azi: float,
                                 target_inc: float, target_azi: float,
                                 projection_md: float) -> Tuple[float, float]:
        """Build and turn rate (deg/30m) needed to match the target attitude over projection_md"""
        if projection_md <= 0:
            return 0.0, 0.0
        per = Config.DLS_COURSE_LENGTH_M
        required_br = (target_inc - current_inc) / projection_md * per
        required_tr = normalize_azimuth_delta(target_azi - current_azi) / projection_md * per
        return required_br, required_tr

    def calculate_target_rates(self, current_tvd: float, current_inc: float,
                               target_tvd: Optional[float] = None,
                               target_inc: Optional[float] = None,
                               user_distance: Optional[float] = None,
                               plan_stations: Sequence[PlanStation] = ()) -> Optional[Dict[str, float]]:
        """
        Build rate required to land at a target

        Returns:
            Dictionary with required_br, distance and landing_inc, or None when
            neither target nor distance allows a calculation
        """
        if target_tvd is None and user_distance is None and target_inc is None:
            return None

        if target_inc is not None:
            landing_inc = target_inc
        elif target_tvd is not None:
            landing_inc = current_inc
            for station in plan_stations:
                if station.tvd >= target_tvd:
                    landing_inc = station.inc
                    break
            if plan_stations and landing_inc == current_inc:
                landing_inc = plan_stations[-1].inc
        else:
            landing_inc = current_inc  # hold angle

        if user_distance is not None and user_distance > 0:
            distance = user_distance
        elif target_tvd is not None:
            tvd_remaining = target_tvd - current_tvd
            if tvd_remaining <= 0:
                return None
            cos_avg_inc = np.cos((current_inc + landing_inc) / 2.0 * self.r)
            if abs(cos_avg_inc) < 0.05:
                # Near horizontal: TVD barely changes, estimate from the angle change
                distance = abs(landing_inc - current_inc) * 10
                if distance < 10:
                    return None
            else:
                distance = tvd_remaining / cos_avg_inc
        else:
            return None

        if distance <= 0:
            return None

        required_br = (landing_inc - current_inc) / distance * Config.DLS_COURSE_LENGTH_M
        return {'required_br': float(required_br), 'distance': float(distance), 'landing_inc': landing_inc}

    def summarize(self, variances: Sequence[SurveyVariance], limits: DirectionalLimits) -> VarianceSummary:
        """Summary statistics and alarm/warning counts for a set of variances"""
        if not variances:
            return VarianceSummary()

        statuses = [v.status(limits) for v in variances]
        distances = [v.distance_3d for v in variances]

        return VarianceSummary(
            max_distance_3d=max(distances),
            avg_distance_3d=sum(distances) / len(variances),
            max_dls=max(0.0, max(v.survey_dls for v in variances)),
            max_tvd_variance=max(abs(v.tvd_variance) for v in variances),
            max_closure_distance=max(v.closure_distance for v in variances),
            station_count=len(variances),
            alarm_count=statuses.count(VarianceStatus.ALARM),
            warning_count=statuses.count(VarianceStatus.WARNING)
        )

    def project_to_bit(self, last_survey: SurveyStation, previous_survey: Optional[SurveyStation],
                       survey_to_bit_distance: float, plan: DirectionalPlan, vsd_direction: float,
                       use_rates: bool = True, target_tvd: Optional[float] = None,
                       target_landing_inc: Optional[float] = None,
                       user_distance_to_land: Optional[float] = None) -> Optional[BitProjection]:
        """
        Project the wellbore from the last survey to the bit and compare with the plan

        With use_rates the build/turn rate between the last two surveys is carried
        to the bit, otherwise inclination and azimuth are held.

        Returns:
            BitProjection, or None when the plan is empty or the bit is past the plan end
        """
        plan_stations = plan.sorted_stations
        if not plan_stations:
            return None

        vsd_rad = vsd_direction * self.r
        bit_md = last_survey.md + survey_to_bit_distance
        plan_end = plan_stations[-1].md
        if bit_md > plan_end:
            return None

        current_br = current_tr = 0.0
        if use_rates and previous_survey is not None:
            _, current_br, current_tr = calculate_rates(
                previous_survey.inc, previous_survey.azi, last_survey.inc, last_survey.azi,
                last_survey.md - previous_survey.md
            )

        per = Config.DLS_COURSE_LENGTH_M
        bit_inc = last_survey.inc + current_br / per * survey_to_bit_distance
        bit_azi = (last_survey.azi + current_tr / per * survey_to_bit_distance) % 360

        projection = minimum_curvature(last_survey.md, last_survey.inc, last_survey.azi,
                                       bit_md, bit_inc, bit_azi)
        bit_tvd = (last_survey.tvd or 0.0) + projection.d_tvd
        bit_ns = (last_survey.ns_m or 0.0) + projection.d_ns
        bit_ew = (last_survey.ew_m or 0.0) + projection.d_ew

        plan_at_bit = self.interpolate_plan(bit_md, plan_stations, vsd_rad)

        projection_md = Config.DEFAULT_PROJECTION_MD
        target_md = min(bit_md + projection_md, plan_end)
        target = self.interpolate_plan(target_md, plan_stations, vsd_rad)
        actual_projection_md = target_md - bit_md
        projection_to_target = actual_projection_md if actual_projection_md > 0 else projection_md

        required_br, required_tr = self.calculate_required_rates(
            bit_inc, bit_azi, target['inc'], target['azi'], projection_to_target
        )

        target_calcs = self.calculate_target_rates(
            bit_tvd, bit_inc, target_tvd=target_tvd, target_inc=target_landing_inc,
            user_distance=user_distance_to_land, plan_stations=plan_stations
        )

        return BitProjection(
            survey_md=last_survey.md,
            survey_to_bit_distance=survey_to_bit_distance,
            bit_md=bit_md,
            bit_tvd=bit_tvd,
            bit_ns=bit_ns,
            bit_ew=bit_ew,
            bit_vs=calculate_vs(bit_ns, bit_ew, vsd_rad),
            bit_inc=bit_inc,
            bit_azi=bit_azi,
            plan_tvd=plan_at_bit['tvd'],
            plan_ns=plan_at_bit['ns'],
            plan_ew=plan_at_bit['ew'],
            plan_vs=plan_at_bit['vs'],
            plan_inc=plan_at_bit['inc'],
            plan_azi=plan_at_bit['azi'],
            required_br=required_br,
            required_tr=required_tr,
            projection_to_target_md=projection_to_target,
            target_tvd=target_tvd,
            target_landing_inc=target_calcs['landing_inc'] if target_calcs else target_landing_inc,
            user_distance_to_land=user_distance_to_land,
            calculated_distance_to_land=target_calcs['distance'] if target_calcs else None,
            required_br_to_target=target_calcs['required_br'] if target_calcs else None
        )

    def calculate_boundary_corridors(self, plan_stations: Sequence[PlanStation], warning_radius: float,
                                     alarm_radius: float) -> Dict[str, List[Tuple[float, float]]]:
        """TVD (upper, lower) bounds around each plan station for the warning and alarm radii"""
        return {
            'warning': [(s.tvd + warning_radius, s.tvd - warning_radius) for s in plan_stations],
            'alarm': [(s.tvd + alarm_radius, s.tvd - alarm_radius) for s in plan_stations]
        }
