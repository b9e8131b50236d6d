from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Sequence

import mysql.connector

from ..core.enums import TimecardStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, from_db_datetime, to_db_datetime
from ..events.mysql_event_repository import stamp_group_status
from .model import ApprovalRecord
from .repository import ApprovalRepository

_COLUMNS = "worker_id, work_date, status, submitted_at, approver_id, decided_at, archived_at, version"


def _to_record(r: dict) -> ApprovalRecord:
    return ApprovalRecord(
        worker_id=str(r["worker_id"]),
        date=r["work_date"],
        status=TimecardStatus(r["status"]),
        submitted_at=from_db_datetime(r.get("submitted_at")),
        approver_id=r.get("approver_id"),
        decided_at=from_db_datetime(r.get("decided_at")),
        archived_at=from_db_datetime(r.get("archived_at")),
        version=int(r["version"]),
    )


class MySQLApprovalRepository(ApprovalRepository):
    """Compare-and-write on the ``version`` column.

    The first save of a group is a plain INSERT on the (worker_id, work_date)
    primary key, so two first-time writers cannot both win either. The
    group's time_events rows are restamped inside the same transaction.
    """

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def load_approval(self, worker_id: str, work_date: date) -> Optional[ApprovalRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM approval_records WHERE worker_id=%s AND work_date=%s",
                (worker_id, work_date),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def save_approval(
        self,
        record: ApprovalRecord,
        *,
        expected_version: int,
        actor_id: Optional[str] = None,
        at: Optional[datetime] = None,
    ) -> bool:
        values = (
            record.status.value,
            to_db_datetime(record.submitted_at),
            record.approver_id,
            to_db_datetime(record.decided_at),
            to_db_datetime(record.archived_at),
            record.version,
        )
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                if expected_version == 0:
                    cur.execute(
                        f"INSERT INTO approval_records({_COLUMNS}) VALUES(%s,%s,%s,%s,%s,%s,%s,%s)",
                        (record.worker_id, record.date, *values),
                    )
                else:
                    cur.execute(
                        """
                        UPDATE approval_records
                        SET status=%s, submitted_at=%s, approver_id=%s, decided_at=%s, archived_at=%s, version=%s
                        WHERE worker_id=%s AND work_date=%s AND version=%s
                        """,
                        (*values, record.worker_id, record.date, int(expected_version)),
                    )
                    if cur.rowcount != 1:
                        return False

                # Same transaction: the record and its events commit or roll back together.
                stamp_group_status(
                    cur,
                    worker_id=record.worker_id,
                    work_date=record.date,
                    status=record.status,
                    actor_id=actor_id,
                    at=at,
                )
        except mysql.connector.IntegrityError:
            # Another first-time writer inserted the (worker_id, work_date) row.
            return False
        return True

    def list_by_status(self, status: TimecardStatus, *, limit: int = 200) -> Sequence[ApprovalRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS} FROM approval_records
                WHERE status=%s
                ORDER BY work_date, worker_id
                LIMIT %s
                """,
                (status.value, int(limit)),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def list_decided_before(self, cutoff: date) -> Sequence[ApprovalRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS} FROM approval_records
                WHERE status IN (%s, %s) AND work_date < %s
                ORDER BY work_date, worker_id
                """,
                (TimecardStatus.APPROVED.value, TimecardStatus.REJECTED.value, cutoff),
            )
            return [_to_record(r) for r in fetchall(cur)]
