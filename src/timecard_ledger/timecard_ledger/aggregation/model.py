from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Optional

from ..core.enums import TimecardStatus
from ..core.exceptions import MalformedEventError
from ..ledger.model import AnomalyFlag
from ..overtime.model import TierDecision


@dataclass(frozen=True)
class HourBuckets:
    regular_hours: float
    overtime_hours: float
    double_time_hours: float

    @property
    def total_hours(self) -> float:
        return self.regular_hours + self.overtime_hours + self.double_time_hours


@dataclass(frozen=True)
class DaySummary:
    """Derived read-model for one worker-day; always recomputable from events."""

    worker_id: str
    date: date
    total_hours: float
    regular_hours: float
    overtime_hours: float
    double_time_hours: float
    entry_count: int
    anomalies: tuple[AnomalyFlag, ...] = field(default_factory=tuple)
    tier: Optional[TierDecision] = None
    status: TimecardStatus = TimecardStatus.DRAFT
    in_progress: bool = False


@dataclass(frozen=True)
class WeekSummary:
    worker_id: str
    week_start: date
    week_end: date
    total_hours: float
    regular_hours: float
    overtime_hours: float
    double_time_hours: float
    weekly_overtime_hours: float
    entry_count: int
    day_count: int
    anomalies: tuple[AnomalyFlag, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class AggregationResult:
    days: list[DaySummary]
    errors: list[MalformedEventError]
