from __future__ import annotations

from ...overtime.model import LaborThresholds
from ..model import HourBuckets
from .base import BucketCalculator


class StandardBucketCalculator(BucketCalculator):
    """Standard rule: first 8h regular, 8-12h overtime, beyond 12h double time.

    Weekly overtime is regular time past 40h in the week; daily overtime and
    double time are never counted twice.
    """

    def split_day(self, total_hours: float, limits: LaborThresholds) -> HourBuckets:
        total = max(float(total_hours), 0.0)
        overtime_span = limits.double_time_daily - limits.overtime_daily
        return HourBuckets(
            regular_hours=min(total, limits.overtime_daily),
            overtime_hours=min(max(total - limits.overtime_daily, 0.0), overtime_span),
            double_time_hours=max(total - limits.double_time_daily, 0.0),
        )

    def weekly_overtime(self, regular_hours: float, limits: LaborThresholds) -> float:
        return max(float(regular_hours) - limits.overtime_weekly, 0.0)
