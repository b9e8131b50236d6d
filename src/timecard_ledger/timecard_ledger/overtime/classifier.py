from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Sequence

from .model import LaborThresholds, TierDecision
from .rules.base import TierRule
from .rules.daily_rules import ApproachingRule, DailyOvertimeRule, DoubleTimeRule
from .rules.weekly_rule import RegularRule, WeeklyOvertimeRule


def default_rules() -> tuple[TierRule, ...]:
    # Daily rules come first: the daily status takes precedence for display.
    # Hour buckets for payroll are computed separately by aggregation.
    return (
        DoubleTimeRule(),
        DailyOvertimeRule(),
        ApproachingRule(),
        WeeklyOvertimeRule(),
        RegularRule(),
    )


@dataclass
class OvertimeClassifier:
    """Chain of tier rules; the first one that matches wins."""

    limits: LaborThresholds = field(default_factory=LaborThresholds)
    rules: Sequence[TierRule] = field(default_factory=default_rules)

    def rule_for(self, *, daily_hours: float, week_to_date_hours: float) -> TierRule:
        for rule in self.rules:
            if rule.matches(daily_hours=daily_hours, week_to_date_hours=week_to_date_hours, limits=self.limits):
                return rule
        return RegularRule()

    def classify(self, daily_hours: float, week_to_date_hours: float = 0.0) -> TierDecision:
        daily_hours = max(float(daily_hours), 0.0)
        week_to_date_hours = max(float(week_to_date_hours), 0.0)
        rule = self.rule_for(daily_hours=daily_hours, week_to_date_hours=week_to_date_hours)
        return rule.decide(daily_hours=daily_hours, week_to_date_hours=week_to_date_hours, limits=self.limits)


_default = OvertimeClassifier()


def classify(daily_hours: float, week_to_date_hours: float = 0.0, *, limits: Optional[LaborThresholds] = None) -> TierDecision:
    """Map (today's hours, week-to-date hours excluding today) to a labor tier."""
    if limits is None:
        return _default.classify(daily_hours, week_to_date_hours)
    return OvertimeClassifier(limits=limits).classify(daily_hours, week_to_date_hours)
