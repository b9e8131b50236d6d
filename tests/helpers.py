from __future__ import annotations

from datetime import date, datetime, timezone
from itertools import count
from typing import Optional

from src.timecard_ledger.timecard_ledger.core.enums import EventKind, TimecardStatus
from src.timecard_ledger.timecard_ledger.events.model import TimeEvent

_ids = count(1)

DAY = date(2026, 2, 2)  # a Monday


def at(day: date, hh: int, mm: int = 0) -> datetime:
    return datetime(day.year, day.month, day.day, hh, mm, tzinfo=timezone.utc)


def ev(
    kind: EventKind,
    hh: int,
    mm: int = 0,
    *,
    day: date = DAY,
    worker_id: str = "w1",
    status: TimecardStatus = TimecardStatus.DRAFT,
    event_id: Optional[str] = None,
) -> TimeEvent:
    return TimeEvent(
        event_id=event_id or f"e{next(_ids)}",
        worker_id=worker_id,
        kind=kind,
        timestamp=at(day, hh, mm),
        calendar_date=day,
        job_site_id="1",
        status=status,
    )


def shift(start_hh: int, end_hh: int, *, day: date = DAY, worker_id: str = "w1") -> list[TimeEvent]:
    return [
        ev(EventKind.CLOCK_IN, start_hh, day=day, worker_id=worker_id),
        ev(EventKind.CLOCK_OUT, end_hh, day=day, worker_id=worker_id),
    ]


class InMemoryEvents:
    def __init__(self, events=()):
        self.events: list[TimeEvent] = list(events)

    def load_events(self, worker_id, start_date, end_date):
        items = [e for e in self.events if e.worker_id == worker_id and start_date <= e.calendar_date <= end_date]
        return sorted(items, key=lambda e: e.timestamp)

    def load_events_between(self, start_date, end_date):
        items = [e for e in self.events if start_date <= e.calendar_date <= end_date]
        return sorted(items, key=lambda e: e.timestamp)

    def load_group(self, worker_id, work_date):
        return self.load_events(worker_id, work_date, work_date)

    def append_event(self, event):
        self.events.append(event)

    def stamp_group_status(self, *, worker_id, work_date, status, actor_id=None, at=None):
        n = 0
        for i, e in enumerate(self.events):
            if e.worker_id == worker_id and e.calendar_date == work_date:
                self.events[i] = e.with_status(status, actor_id=actor_id, at=at)
                n += 1
        return n
