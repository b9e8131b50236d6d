from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Sequence

from ..core.enums import EventKind, TimecardStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, from_db_datetime, to_db_datetime
from ..geo.model import GeoPoint
from .model import TimeEvent
from .repository import EventRepository

_COLUMNS = """
    event_id, worker_id, kind, event_ts, calendar_date, job_site_id, task_id,
    latitude, longitude, accuracy, photo_ref, status,
    approved_by, approved_at, rejected_by, rejected_at
"""


def _to_event(r: dict) -> TimeEvent:
    location = None
    if r.get("latitude") is not None and r.get("longitude") is not None:
        location = GeoPoint(
            latitude=float(r["latitude"]),
            longitude=float(r["longitude"]),
            accuracy=float(r["accuracy"]) if r.get("accuracy") is not None else None,
        )
    return TimeEvent(
        event_id=str(r["event_id"]),
        worker_id=str(r["worker_id"]),
        kind=EventKind(r["kind"]),
        timestamp=from_db_datetime(r["event_ts"]),
        calendar_date=r["calendar_date"],
        job_site_id=r.get("job_site_id"),
        task_id=r.get("task_id"),
        location=location,
        photo_ref=r.get("photo_ref"),
        status=TimecardStatus(r["status"]),
        approved_by=r.get("approved_by"),
        approved_at=from_db_datetime(r.get("approved_at")),
        rejected_by=r.get("rejected_by"),
        rejected_at=from_db_datetime(r.get("rejected_at")),
    )


class MySQLEventRepository(EventRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def load_events(self, worker_id: str, start_date: date, end_date: date) -> Sequence[TimeEvent]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM time_events
                WHERE worker_id=%s AND calendar_date BETWEEN %s AND %s
                ORDER BY event_ts
                """,
                (worker_id, start_date, end_date),
            )
            return [_to_event(r) for r in fetchall(cur)]

    def load_events_between(self, start_date: date, end_date: date) -> Sequence[TimeEvent]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM time_events
                WHERE calendar_date BETWEEN %s AND %s
                ORDER BY event_ts
                """,
                (start_date, end_date),
            )
            return [_to_event(r) for r in fetchall(cur)]

    def load_group(self, worker_id: str, work_date: date) -> Sequence[TimeEvent]:
        return self.load_events(worker_id, work_date, work_date)

    def append_event(self, event: TimeEvent) -> None:
        loc = event.location
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO time_events(
                    event_id, worker_id, kind, event_ts, calendar_date, job_site_id, task_id,
                    latitude, longitude, accuracy, photo_ref, status
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    event.event_id,
                    event.worker_id,
                    event.kind.value,
                    to_db_datetime(event.timestamp),
                    event.calendar_date,
                    event.job_site_id,
                    event.task_id,
                    loc.latitude if loc else None,
                    loc.longitude if loc else None,
                    loc.accuracy if loc else None,
                    event.photo_ref,
                    event.status.value,
                ),
            )


def stamp_group_status(
    cur,
    *,
    worker_id: str,
    work_date: date,
    status: TimecardStatus,
    actor_id: Optional[str] = None,
    at: Optional[datetime] = None,
) -> int:
    """Set status (and approver metadata) on every event of a worker-day.

    Runs on the caller's cursor so it commits or rolls back together with the
    approval record write.
    """

    if status == TimecardStatus.APPROVED:
        extra, params = ", approved_by=%s, approved_at=%s", (actor_id, to_db_datetime(at))
    elif status == TimecardStatus.REJECTED:
        extra, params = ", rejected_by=%s, rejected_at=%s", (actor_id, to_db_datetime(at))
    else:
        extra, params = "", ()

    cur.execute(
        f"UPDATE time_events SET status=%s{extra} WHERE worker_id=%s AND calendar_date=%s",
        (status.value, *params, worker_id, work_date),
    )
    return int(cur.rowcount)
