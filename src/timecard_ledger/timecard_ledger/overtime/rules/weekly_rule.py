from __future__ import annotations

from ...core.enums import Tier, TierBasis
from ..model import LaborThresholds, TierDecision
from .base import TierRule


class WeeklyOvertimeRule(TierRule):
    """Week-to-date (excluding today) plus today goes over 40 hours."""

    def matches(self, *, daily_hours: float, week_to_date_hours: float, limits: LaborThresholds) -> bool:
        return week_to_date_hours + daily_hours > limits.overtime_weekly

    def decide(self, *, daily_hours: float, week_to_date_hours: float, limits: LaborThresholds) -> TierDecision:
        extra = week_to_date_hours + daily_hours - limits.overtime_weekly
        return TierDecision(
            tier=Tier.OVERTIME,
            basis=TierBasis.WEEKLY,
            extra_hours=extra,
            multiplier=limits.overtime_multiplier,
            message=f"Weekly overtime ({extra:.1f} hours over {limits.overtime_weekly:g} this week)",
        )


class RegularRule(TierRule):
    """Fallback: always matches."""

    def matches(self, *, daily_hours: float, week_to_date_hours: float, limits: LaborThresholds) -> bool:
        return True

    def decide(self, *, daily_hours: float, week_to_date_hours: float, limits: LaborThresholds) -> TierDecision:
        return TierDecision(tier=Tier.REGULAR)
