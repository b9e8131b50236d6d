from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional

from ..common.datetime_utils import hours_between
from ..core.enums import AnomalyKind, LedgerState


@dataclass(frozen=True)
class AnomalyFlag:
    """Non-fatal data-quality flag attached to a day for supervisor review."""

    kind: AnomalyKind
    event_id: Optional[str] = None
    detail: str = ""

    def to_dict(self) -> dict:
        return {"kind": self.kind.value, "event_id": self.event_id, "detail": self.detail}


@dataclass(frozen=True)
class DayLedger:
    """Result of folding one worker-day's events.

    ``clock_in_at``/``lunch_out_at`` are the still-open markers at the end of
    the event stream; the ledger state is derived from them.
    """

    worker_id: str
    work_date: date
    raw_hours: float
    event_count: int
    clock_in_at: Optional[datetime] = None
    lunch_out_at: Optional[datetime] = None
    finalized: bool = True
    anomalies: tuple[AnomalyFlag, ...] = field(default_factory=tuple)

    @property
    def state(self) -> LedgerState:
        return state_for(self.clock_in_at, self.lunch_out_at)

    @property
    def accumulated_hours(self) -> float:
        return max(self.raw_hours, 0.0)

    @property
    def is_open(self) -> bool:
        return self.clock_in_at is not None or self.lunch_out_at is not None

    def projected_hours(self, as_of: datetime) -> float:
        """Hours worked if the open interval were closed at ``as_of``."""
        hours = self.raw_hours
        if self.clock_in_at is not None and as_of > self.clock_in_at:
            hours += hours_between(self.clock_in_at, as_of)
        if self.lunch_out_at is not None and as_of > self.lunch_out_at:
            hours -= hours_between(self.lunch_out_at, as_of)
        return max(hours, 0.0)


def state_for(clock_in_at: Optional[datetime], lunch_out_at: Optional[datetime]) -> LedgerState:
    if lunch_out_at is not None:
        return LedgerState.ON_LUNCH
    if clock_in_at is not None:
        return LedgerState.WORKING
    return LedgerState.IDLE
