from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from ..approvals.repository import ApprovalRepository
from ..common.datetime_utils import local_date, week_bounds
from ..core.enums import TimecardStatus, WeekStart
from ..core.exceptions import NotFoundError
from ..events.repository import EventRepository
from ..overtime.classifier import OvertimeClassifier
from .calculator.base import BucketCalculator
from .calculator.standard_calculator import StandardBucketCalculator
from .engine import GroupKey, aggregate, group_by_worker_and_date, summarize_day, summarize_week
from .model import AggregationResult, DaySummary, WeekSummary


class AggregationService:
    """Repository-backed entry points over the pure aggregation engine."""

    def __init__(
        self,
        events: EventRepository,
        approvals: Optional[ApprovalRepository] = None,
        *,
        classifier: Optional[OvertimeClassifier] = None,
        calculator: Optional[BucketCalculator] = None,
        week_start: WeekStart = WeekStart.MONDAY,
        worker_timezone: str = "UTC",
    ):
        self._events = events
        self._approvals = approvals
        self._classifier = classifier or OvertimeClassifier()
        self._calculator = calculator or StandardBucketCalculator()
        self._week_start = WeekStart(week_start)
        self._tz = worker_timezone

    @property
    def week_start(self) -> WeekStart:
        return self._week_start

    @property
    def classifier(self) -> OvertimeClassifier:
        return self._classifier

    def today(self, as_of: datetime) -> date:
        return local_date(as_of, self._tz)

    def _status_for(self, key: GroupKey) -> Optional[TimecardStatus]:
        if not self._approvals:
            return None
        record = self._approvals.load_approval(key[0], key[1])
        return record.status if record else None

    def _empty_week(self, worker_id: str, start: date, end: date) -> WeekSummary:
        return WeekSummary(
            worker_id=worker_id,
            week_start=start,
            week_end=end,
            total_hours=0.0,
            regular_hours=0.0,
            overtime_hours=0.0,
            double_time_hours=0.0,
            weekly_overtime_hours=0.0,
            entry_count=0,
            day_count=0,
        )

    def worker_week(
        self,
        worker_id: str,
        day: date,
        *,
        as_of: Optional[datetime] = None,
    ) -> tuple[list[DaySummary], WeekSummary]:
        """Day summaries and the week total for the week containing ``day``.

        Each day's tier is classified with the earlier days of the same week
        as week-to-date hours.
        """

        start, end = week_bounds(day, self._week_start)
        events = self._events.load_events(worker_id, start, end)
        today = self.today(as_of) if as_of else None

        days: list[DaySummary] = []
        week_to_date = 0.0
        for key, group in sorted(group_by_worker_and_date(events).items(), key=lambda kv: kv[0][1]):
            summary = summarize_day(
                group,
                as_of=as_of,
                today=today,
                week_to_date_hours=week_to_date,
                status=self._status_for(key),
                classifier=self._classifier,
                calculator=self._calculator,
            )
            week_to_date += summary.total_hours
            days.append(summary)

        if not days:
            return days, self._empty_week(worker_id, start, end)

        week = summarize_week(
            days,
            on=day,
            week_start=self._week_start,
            classifier=self._classifier,
            calculator=self._calculator,
        )
        return days, week

    def day_summary(self, worker_id: str, work_date: date, *, as_of: Optional[datetime] = None) -> DaySummary:
        days, _ = self.worker_week(worker_id, work_date, as_of=as_of)
        for summary in days:
            if summary.date == work_date:
                return summary
        raise NotFoundError(f"No events for worker {worker_id} on {work_date.isoformat()}")

    def summaries_between(
        self,
        start: date,
        end: date,
        *,
        worker_id: Optional[str] = None,
        as_of: Optional[datetime] = None,
    ) -> AggregationResult:
        """Day summaries for a date range (bulk export).

        Loading starts at the beginning of ``start``'s week so week-to-date
        tiers are right for the first days of the range.
        """

        load_from = week_bounds(start, self._week_start)[0]
        if worker_id:
            events = self._events.load_events(worker_id, load_from, end)
        else:
            events = self._events.load_events_between(load_from, end)

        statuses: dict[GroupKey, TimecardStatus] = {}
        for key in group_by_worker_and_date(events):
            status = self._status_for(key)
            if status:
                statuses[key] = status

        result = aggregate(
            events,
            as_of=as_of,
            today=self.today(as_of) if as_of else None,
            week_start=self._week_start,
            statuses=statuses,
            classifier=self._classifier,
            calculator=self._calculator,
        )
        days = [d for d in result.days if start <= d.date <= end]
        return AggregationResult(days=days, errors=result.errors)
