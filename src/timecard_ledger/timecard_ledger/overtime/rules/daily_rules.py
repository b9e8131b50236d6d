from __future__ import annotations

from ...core.enums import Tier, TierBasis
from ..model import LaborThresholds, TierDecision
from .base import TierRule


class DoubleTimeRule(TierRule):
    """More than 12 hours in the day."""

    def matches(self, *, daily_hours: float, week_to_date_hours: float, limits: LaborThresholds) -> bool:
        return daily_hours > limits.double_time_daily

    def decide(self, *, daily_hours: float, week_to_date_hours: float, limits: LaborThresholds) -> TierDecision:
        return TierDecision(
            tier=Tier.DOUBLE_TIME,
            basis=TierBasis.DAILY,
            extra_hours=daily_hours - limits.double_time_daily,
            multiplier=limits.double_time_multiplier,
            message=f"Double Time ({limits.double_time_daily:g}+ hours today)",
        )


class DailyOvertimeRule(TierRule):
    """More than 8 hours in the day."""

    def matches(self, *, daily_hours: float, week_to_date_hours: float, limits: LaborThresholds) -> bool:
        return daily_hours > limits.overtime_daily

    def decide(self, *, daily_hours: float, week_to_date_hours: float, limits: LaborThresholds) -> TierDecision:
        extra = daily_hours - limits.overtime_daily
        return TierDecision(
            tier=Tier.OVERTIME,
            basis=TierBasis.DAILY,
            extra_hours=extra,
            multiplier=limits.overtime_multiplier,
            message=f"Overtime ({extra:.1f} hours over {limits.overtime_daily:g} today)",
        )


class ApproachingRule(TierRule):
    """Informational only: close to the daily overtime limit, no pay impact."""

    def matches(self, *, daily_hours: float, week_to_date_hours: float, limits: LaborThresholds) -> bool:
        return daily_hours > limits.approaching_daily

    def decide(self, *, daily_hours: float, week_to_date_hours: float, limits: LaborThresholds) -> TierDecision:
        return TierDecision(
            tier=Tier.APPROACHING,
            basis=TierBasis.DAILY,
            message=f"Approaching overtime ({limits.overtime_daily:g} hour limit)",
        )
