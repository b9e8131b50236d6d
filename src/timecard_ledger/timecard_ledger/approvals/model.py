from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date, datetime
from typing import Optional

from ..core.enums import TimecardStatus

# Allowed approval-state changes. Approved is terminal except for archival.
TRANSITIONS: dict[TimecardStatus, frozenset[TimecardStatus]] = {
    TimecardStatus.DRAFT: frozenset({TimecardStatus.SUBMITTED}),
    TimecardStatus.SUBMITTED: frozenset({TimecardStatus.APPROVED, TimecardStatus.REJECTED}),
    TimecardStatus.APPROVED: frozenset({TimecardStatus.ARCHIVED}),
    TimecardStatus.REJECTED: frozenset({TimecardStatus.DRAFT, TimecardStatus.SUBMITTED, TimecardStatus.ARCHIVED}),
    TimecardStatus.ARCHIVED: frozenset(),
}


def can_transition(current: TimecardStatus, target: TimecardStatus) -> bool:
    return target in TRANSITIONS.get(current, frozenset())


@dataclass(frozen=True)
class ApprovalRecord:
    """One per timecard group (worker, date).

    ``version`` is the compare-and-write token: 0 means "not stored yet",
    every saved transition bumps it by one.
    """

    worker_id: str
    date: date
    status: TimecardStatus = TimecardStatus.DRAFT
    submitted_at: Optional[datetime] = None
    approver_id: Optional[str] = None
    decided_at: Optional[datetime] = None
    archived_at: Optional[datetime] = None
    version: int = 0

    @property
    def key(self) -> tuple[str, date]:
        return (self.worker_id, self.date)

    def advance(self, status: TimecardStatus, **changes) -> "ApprovalRecord":
        return replace(self, status=status, version=self.version + 1, **changes)

    def to_dict(self) -> dict:
        return {
            "worker_id": self.worker_id,
            "date": self.date.isoformat(),
            "status": self.status.value,
            "submitted_at": self.submitted_at.isoformat() if self.submitted_at else None,
            "approver_id": self.approver_id,
            "decided_at": self.decided_at.isoformat() if self.decided_at else None,
            "archived_at": self.archived_at.isoformat() if self.archived_at else None,
            "version": self.version,
        }
