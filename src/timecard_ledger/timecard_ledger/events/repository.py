from __future__ import annotations

from datetime import date
from typing import Protocol, Sequence

from .model import TimeEvent


class EventRepository(Protocol):
    def load_events(self, worker_id: str, start_date: date, end_date: date) -> Sequence[TimeEvent]:
        """Events whose calendar date lies in [start_date, end_date], by timestamp."""

        raise NotImplementedError

    def load_group(self, worker_id: str, work_date: date) -> Sequence[TimeEvent]:
        raise NotImplementedError

    def append_event(self, event: TimeEvent) -> None:
        raise NotImplementedError

    def load_events_between(self, start_date: date, end_date: date) -> Sequence[TimeEvent]:
        """All workers' events in [start_date, end_date]; used by bulk export."""

        raise NotImplementedError
