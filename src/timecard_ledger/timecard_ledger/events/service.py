from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..aggregation.engine import derive_status
from ..aggregation.service import AggregationService
from ..approvals.repository import ApprovalRepository
from ..common.datetime_utils import local_date, now_utc
from ..common.validators import require_non_empty
from ..core.enums import EventKind, LedgerState, TimecardStatus
from ..core.exceptions import NotFoundError, TimecardLockedError, ValidationError
from ..geo.model import GeoPoint
from ..geo.service import assert_within_site, find_nearest_site, validate_coordinates
from ..jobsites.model import JobSite
from ..jobsites.repository import JobSiteRepository
from ..ledger.reducer import current_state
from ..overtime.model import TierDecision
from .model import TimeEvent
from .repository import EventRepository

logger = logging.getLogger(__name__)

# Days that still accept new events; the new event takes the day's status.
OPEN_STATUSES = frozenset({TimecardStatus.DRAFT, TimecardStatus.REJECTED})


@dataclass(frozen=True)
class TodayStatus:
    clocked_in: bool
    state: LedgerState
    current_job_site_id: Optional[str]
    current_task_id: Optional[str]
    today_hours: float
    week_hours: float
    last_event_at: Optional[datetime]
    tier: TierDecision

    def to_dict(self) -> dict:
        return {
            "clocked_in": self.clocked_in,
            "state": self.state.value,
            "current_job_site_id": self.current_job_site_id,
            "current_task_id": self.current_task_id,
            "today_hours": self.today_hours,
            "week_hours": self.week_hours,
            "last_event_at": self.last_event_at.isoformat() if self.last_event_at else None,
            "tier": self.tier.to_dict(),
        }


class TimeclockService:
    """Records worker actions coming from the capture flow.

    Photos and coordinates arrive already captured; this layer checks the
    clock-in geofence, stamps the worker-local calendar day and appends the
    event.
    """

    def __init__(
        self,
        events: EventRepository,
        job_sites: JobSiteRepository,
        aggregation: AggregationService,
        *,
        approvals: Optional[ApprovalRepository] = None,
        worker_timezone: str = "UTC",
    ):
        self._events = events
        self._job_sites = job_sites
        self._aggregation = aggregation
        self._approvals = approvals
        self._tz = worker_timezone

    def _group_status(self, worker_id: str, work_date: date) -> TimecardStatus:
        if self._approvals is not None:
            record = self._approvals.load_approval(worker_id, work_date)
            return record.status if record else TimecardStatus.DRAFT
        existing = self._events.load_group(worker_id, work_date)
        return derive_status(existing) if existing else TimecardStatus.DRAFT

    def _resolve_site(self, job_site_id: Optional[str], location: Optional[GeoPoint]) -> Optional[JobSite]:
        if job_site_id:
            site = self._job_sites.get_by_id(job_site_id)
            if not site:
                raise NotFoundError(f"Job site {job_site_id} does not exist")
            return site
        if location is not None:
            return find_nearest_site(location, self._job_sites.load_job_sites())
        return None

    def record(
        self,
        worker_id: str,
        kind: EventKind,
        *,
        job_site_id: Optional[str] = None,
        task_id: Optional[str] = None,
        location: Optional[GeoPoint] = None,
        photo_ref: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> TimeEvent:
        worker_id = require_non_empty(worker_id, "worker_id")
        kind = EventKind(kind)
        now = now or now_utc()

        if location is not None:
            validate_coordinates(location.latitude, location.longitude)

        site = self._resolve_site(job_site_id, location)
        if kind == EventKind.CLOCK_IN:
            if site is None:
                raise ValidationError("A job site is required to clock in")
            if location is not None and site.location is not None:
                assert_within_site(location, site)

        if site is not None and task_id and site.tasks and site.find_task(task_id) is None:
            raise ValidationError(f"Task {task_id} does not belong to {site.name}")

        work_date = local_date(now, self._tz)
        status = self._group_status(worker_id, work_date)
        if status not in OPEN_STATUSES:
            raise TimecardLockedError(worker_id, work_date, status)

        event = TimeEvent(
            event_id=uuid.uuid4().hex,
            worker_id=worker_id,
            kind=kind,
            timestamp=now,
            calendar_date=work_date,
            job_site_id=site.job_site_id if site else None,
            task_id=task_id,
            location=location,
            photo_ref=photo_ref,
            status=status,
        )
        self._events.append_event(event)
        logger.info("Recorded %s for worker %s on %s", kind.value, worker_id, event.calendar_date)
        return event

    def clock_in(self, worker_id: str, **kwargs) -> TimeEvent:
        return self.record(worker_id, EventKind.CLOCK_IN, **kwargs)

    def clock_out(self, worker_id: str, **kwargs) -> TimeEvent:
        return self.record(worker_id, EventKind.CLOCK_OUT, **kwargs)

    def lunch_out(self, worker_id: str, **kwargs) -> TimeEvent:
        return self.record(worker_id, EventKind.LUNCH_OUT, **kwargs)

    def lunch_in(self, worker_id: str, **kwargs) -> TimeEvent:
        return self.record(worker_id, EventKind.LUNCH_IN, **kwargs)

    def today_status(self, worker_id: str, *, now: Optional[datetime] = None) -> TodayStatus:
        """Live status for the worker's home screen."""

        now = now or now_utc()
        today = local_date(now, self._tz)
        today_events = list(self._events.load_group(worker_id, today))

        days, week = self._aggregation.worker_week(worker_id, today, as_of=now)
        today_summary = next((d for d in days if d.date == today), None)
        today_hours = today_summary.total_hours if today_summary else 0.0
        week_to_date = sum(d.total_hours for d in days if d.date < today)

        state = current_state(today_events) or LedgerState.IDLE
        last_clock_in = None
        for event in sorted(today_events, key=lambda e: e.timestamp):
            if event.kind == EventKind.CLOCK_IN:
                last_clock_in = event

        clocked_in = state != LedgerState.IDLE
        return TodayStatus(
            clocked_in=clocked_in,
            state=state,
            current_job_site_id=last_clock_in.job_site_id if clocked_in and last_clock_in else None,
            current_task_id=last_clock_in.task_id if clocked_in and last_clock_in else None,
            today_hours=today_hours,
            week_hours=week.total_hours,
            last_event_at=max((e.timestamp for e in today_events), default=None),
            tier=self._aggregation.classifier.classify(today_hours, week_to_date),
        )
