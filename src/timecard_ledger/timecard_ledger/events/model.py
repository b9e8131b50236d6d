from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date, datetime
from typing import Any, Optional

from ..common.datetime_utils import parse_iso_date, parse_timestamp
from ..core.enums import EventKind, TimecardStatus
from ..core.exceptions import MalformedEventError
from ..geo.model import GeoPoint


@dataclass(frozen=True)
class TimeEvent:
    """Thực thể miền (domain): một thao tác chấm công của công nhân.

    Events are append-only. Only ``status`` and the approval metadata change
    after creation, and only through the approval workflow.
    """

    event_id: str
    worker_id: str
    kind: EventKind
    timestamp: datetime
    calendar_date: date
    job_site_id: Optional[str] = None
    task_id: Optional[str] = None
    location: Optional[GeoPoint] = None
    photo_ref: Optional[str] = None
    status: TimecardStatus = TimecardStatus.DRAFT
    approved_by: Optional[str] = None
    approved_at: Optional[datetime] = None
    rejected_by: Optional[str] = None
    rejected_at: Optional[datetime] = None

    @property
    def key(self) -> tuple[str, date]:
        return (self.worker_id, self.calendar_date)

    def with_status(self, status: TimecardStatus, *, actor_id: Optional[str] = None, at: Optional[datetime] = None) -> "TimeEvent":
        if status == TimecardStatus.APPROVED:
            return replace(self, status=status, approved_by=actor_id, approved_at=at)
        if status == TimecardStatus.REJECTED:
            return replace(self, status=status, rejected_by=actor_id, rejected_at=at)
        return replace(self, status=status)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TimeEvent":
        """Build an event from a stored/wire payload.

        Raises MalformedEventError when any field cannot be converted: missing
        or unparseable timestamp or calendar date, unknown kind or status,
        bad approval instants, or a location without numeric coordinates.
        """

        if not isinstance(data, dict):
            raise MalformedEventError(None, f"expected a mapping, got {type(data).__name__}")

        event_id = data.get("event_id") or data.get("id")
        raw_ts = data.get("timestamp")
        raw_date = data.get("calendar_date") or data.get("date")

        if not raw_ts:
            raise MalformedEventError(event_id, "missing timestamp")
        if not raw_date:
            raise MalformedEventError(event_id, "missing calendar date")

        timestamp = _instant(event_id, "timestamp", raw_ts)

        if isinstance(raw_date, date) and not isinstance(raw_date, datetime):
            calendar_date = raw_date
        else:
            try:
                calendar_date = parse_iso_date(str(raw_date))
            except ValueError:
                raise MalformedEventError(event_id, f"unparseable calendar date {raw_date!r}")

        raw_kind = data.get("kind") or data.get("type")
        try:
            kind = EventKind(raw_kind)
        except ValueError:
            raise MalformedEventError(event_id, f"unknown event kind {raw_kind!r}")

        raw_status = data.get("status") or TimecardStatus.DRAFT.value
        try:
            status = TimecardStatus(raw_status)
        except ValueError:
            raise MalformedEventError(event_id, f"unknown status {raw_status!r}")

        try:
            location = GeoPoint.from_dict(data.get("location"))
        except (AttributeError, KeyError, TypeError, ValueError):
            raise MalformedEventError(event_id, "location needs numeric latitude and longitude")

        return cls(
            event_id=str(event_id),
            worker_id=str(data.get("worker_id") or data.get("userId") or ""),
            kind=kind,
            timestamp=timestamp,
            calendar_date=calendar_date,
            job_site_id=data.get("job_site_id"),
            task_id=data.get("task_id"),
            location=location,
            photo_ref=data.get("photo_ref"),
            status=status,
            approved_by=data.get("approved_by"),
            approved_at=_instant(event_id, "approved_at", data["approved_at"]) if data.get("approved_at") else None,
            rejected_by=data.get("rejected_by"),
            rejected_at=_instant(event_id, "rejected_at", data["rejected_at"]) if data.get("rejected_at") else None,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "event_id": self.event_id,
            "worker_id": self.worker_id,
            "kind": self.kind.value,
            "timestamp": self.timestamp.isoformat(),
            "calendar_date": self.calendar_date.isoformat(),
            "job_site_id": self.job_site_id,
            "task_id": self.task_id,
            "location": self.location.to_dict() if self.location else None,
            "photo_ref": self.photo_ref,
            "status": self.status.value,
            "approved_by": self.approved_by,
            "approved_at": self.approved_at.isoformat() if self.approved_at else None,
            "rejected_by": self.rejected_by,
            "rejected_at": self.rejected_at.isoformat() if self.rejected_at else None,
        }


def _instant(event_id: object, field_name: str, raw: Any) -> datetime:
    # Only ISO strings and datetimes; epoch numbers and the like are rejected.
    if not isinstance(raw, (str, datetime)):
        raise MalformedEventError(event_id, f"unparseable {field_name} {raw!r}")
    try:
        return parse_timestamp(raw)
    except ValueError:
        raise MalformedEventError(event_id, f"unparseable {field_name} {raw!r}")
