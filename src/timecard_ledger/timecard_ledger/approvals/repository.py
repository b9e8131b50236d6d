from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import TimecardStatus
from .model import ApprovalRecord


class ApprovalRepository(Protocol):
    def load_approval(self, worker_id: str, work_date: date) -> Optional[ApprovalRecord]:
        raise NotImplementedError

    def save_approval(
        self,
        record: ApprovalRecord,
        *,
        expected_version: int,
        actor_id: Optional[str] = None,
        at: Optional[datetime] = None,
    ) -> bool:
        """Compare-and-write the record and restamp its events, atomically.

        Stores ``record`` only if the stored version still equals
        ``expected_version`` (0 = no stored record yet) and, in the same
        transaction, sets ``record.status`` (plus approver metadata from
        ``actor_id``/``at``) on every event of the worker-day. Returns False,
        writing nothing, when another writer got there first.
        """

        raise NotImplementedError

    def list_by_status(self, status: TimecardStatus, *, limit: int = 200) -> Sequence[ApprovalRecord]:
        raise NotImplementedError

    def list_decided_before(self, cutoff: date) -> Sequence[ApprovalRecord]:
        """Approved/rejected groups whose date is strictly before ``cutoff``."""

        raise NotImplementedError
