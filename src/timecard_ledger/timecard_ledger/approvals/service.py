from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Optional

from ..aggregation.model import DaySummary
from ..aggregation.service import AggregationService
from ..common.datetime_utils import now_utc
from ..common.validators import require_non_empty, require_positive
from ..core.constants import DEFAULT_PENDING_LIMIT, DEFAULT_RETENTION_DAYS
from ..core.enums import TimecardStatus
from ..core.exceptions import ConcurrentModificationError, InvalidTransitionError, ValidationError
from ..events.repository import EventRepository
from .model import ApprovalRecord, can_transition
from .repository import ApprovalRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PendingTimecard:
    record: ApprovalRecord
    summary: Optional[DaySummary]


class ApprovalService:
    """Approval state machine for timecard groups (worker, date).

    Every transition re-reads the record, validates the move, then saves
    with compare-and-write on ``version``; the repository restamps the
    group's events in the same write. Losing that race raises
    ConcurrentModificationError and leaves the record and events untouched.
    Role checks are the caller's job.
    """

    def __init__(
        self,
        approvals: ApprovalRepository,
        events: EventRepository,
        *,
        aggregation: Optional[AggregationService] = None,
    ):
        self._approvals = approvals
        self._events = events
        self._aggregation = aggregation

    def get_record(self, worker_id: str, work_date: date) -> ApprovalRecord:
        record = self._approvals.load_approval(worker_id, work_date)
        return record or ApprovalRecord(worker_id=worker_id, date=work_date)

    def get_status(self, worker_id: str, work_date: date) -> TimecardStatus:
        return self.get_record(worker_id, work_date).status

    def _transition(
        self,
        worker_id: str,
        work_date: date,
        target: TimecardStatus,
        *,
        actor_id: Optional[str] = None,
        at: datetime,
        **changes,
    ) -> ApprovalRecord:
        current = self.get_record(worker_id, work_date)
        if not can_transition(current.status, target):
            raise InvalidTransitionError(current.status, target)

        updated = current.advance(target, **changes)
        saved = self._approvals.save_approval(updated, expected_version=current.version, actor_id=actor_id, at=at)
        if not saved:
            logger.info("Lost compare-and-write on %s/%s -> %s", worker_id, work_date, target.value)
            raise ConcurrentModificationError(
                f"Timecard {worker_id}/{work_date.isoformat()} was changed concurrently; reload and retry"
            )

        logger.info("Timecard %s/%s: %s -> %s", worker_id, work_date, current.status.value, target.value)
        return updated

    def submit(self, worker_id: str, work_date: date, *, now: Optional[datetime] = None) -> ApprovalRecord:
        worker_id = require_non_empty(worker_id, "worker_id")
        if not self._events.load_group(worker_id, work_date):
            raise ValidationError(f"No time events to submit for {work_date.isoformat()}")

        now = now or now_utc()
        return self._transition(
            worker_id,
            work_date,
            TimecardStatus.SUBMITTED,
            at=now,
            submitted_at=now,
            approver_id=None,
            decided_at=None,
        )

    def approve(self, approver_id: str, worker_id: str, work_date: date, *, now: Optional[datetime] = None) -> ApprovalRecord:
        approver_id = require_non_empty(approver_id, "approver_id")
        now = now or now_utc()
        return self._transition(
            worker_id,
            work_date,
            TimecardStatus.APPROVED,
            actor_id=approver_id,
            at=now,
            approver_id=approver_id,
            decided_at=now,
        )

    def reject(self, approver_id: str, worker_id: str, work_date: date, *, now: Optional[datetime] = None) -> ApprovalRecord:
        """Send the group back to the worker; events are kept for resubmission."""

        approver_id = require_non_empty(approver_id, "approver_id")
        now = now or now_utc()
        return self._transition(
            worker_id,
            work_date,
            TimecardStatus.REJECTED,
            actor_id=approver_id,
            at=now,
            approver_id=approver_id,
            decided_at=now,
        )

    def reopen(self, worker_id: str, work_date: date, *, now: Optional[datetime] = None) -> ApprovalRecord:
        """Rejected -> Draft, so the worker can fix entries before resubmitting."""

        return self._transition(worker_id, work_date, TimecardStatus.DRAFT, at=now or now_utc())

    def archive(
        self,
        as_of: date,
        retention_days: int = DEFAULT_RETENTION_DAYS,
        *,
        now: Optional[datetime] = None,
    ) -> list[tuple[str, date]]:
        """Archive approved/rejected groups older than the retention window.

        Groups that change underneath us are skipped and picked up by the next
        run. Returns the archived (worker_id, date) keys.
        """

        if retention_days < 0:
            raise ValidationError("retention_days must be >= 0")

        now = now or now_utc()
        cutoff = as_of - timedelta(days=int(retention_days))
        archived: list[tuple[str, date]] = []
        for record in self._approvals.list_decided_before(cutoff):
            try:
                self._transition(record.worker_id, record.date, TimecardStatus.ARCHIVED, at=now, archived_at=now)
            except (ConcurrentModificationError, InvalidTransitionError) as exc:
                logger.warning("Skipping archive of %s/%s: %s", record.worker_id, record.date, exc)
                continue
            archived.append(record.key)

        logger.info("Archived %d timecard groups older than %s", len(archived), cutoff)
        return archived

    def pending(self, *, limit: int = DEFAULT_PENDING_LIMIT) -> list[PendingTimecard]:
        """Submitted groups awaiting a supervisor, oldest first."""

        limit = int(require_positive(limit, "limit"))
        records = sorted(
            self._approvals.list_by_status(TimecardStatus.SUBMITTED, limit=limit),
            key=lambda r: (r.date, r.worker_id),
        )
        out: list[PendingTimecard] = []
        for record in records:
            summary = None
            if self._aggregation:
                summary = self._aggregation.day_summary(record.worker_id, record.date)
            out.append(PendingTimecard(record=record, summary=summary))
        return out
