"""Pure aggregation: group raw events by worker-day, reduce, split and classify.

Nothing here touches a repository; every function is a deterministic
function of its inputs, so independent worker-days can be summarized in any
order or in parallel.
"""

from __future__ import annotations

import logging
from collections import OrderedDict
from datetime import date, datetime
from typing import Any, Iterable, Optional, Sequence, Union

from ..common.datetime_utils import week_bounds
from ..core.enums import TimecardStatus, WeekStart
from ..core.exceptions import MalformedEventError, ValidationError
from ..events.model import TimeEvent
from ..ledger.reducer import reduce_day
from ..overtime.classifier import OvertimeClassifier
from .calculator.base import BucketCalculator
from .calculator.standard_calculator import StandardBucketCalculator
from .model import AggregationResult, DaySummary, WeekSummary

logger = logging.getLogger(__name__)

GroupKey = tuple[str, date]


def group_by_worker_and_date(events: Iterable[TimeEvent]) -> "OrderedDict[GroupKey, list[TimeEvent]]":
    """Group events by (worker_id, calendar_date), keeping first-seen key order."""

    groups: "OrderedDict[GroupKey, list[TimeEvent]]" = OrderedDict()
    for event in events:
        groups.setdefault(event.key, []).append(event)
    return groups


def derive_status(events: Sequence[TimeEvent]) -> TimecardStatus:
    statuses = {e.status for e in events}
    if len(statuses) == 1:
        return statuses.pop()
    return TimecardStatus.DRAFT


def summarize_day(
    events: Sequence[TimeEvent],
    *,
    as_of: Optional[datetime] = None,
    today: Optional[date] = None,
    week_to_date_hours: float = 0.0,
    status: Optional[TimecardStatus] = None,
    classifier: Optional[OvertimeClassifier] = None,
    calculator: Optional[BucketCalculator] = None,
) -> DaySummary:
    """Summarize one worker-day.

    The day is treated as in progress only when ``as_of`` is given and the
    day is ``today`` (defaults to ``as_of.date()``); its open interval is then
    projected up to ``as_of``. Every other day is finalized.
    """

    if not events:
        raise ValidationError("summarize_day needs at least one event")
    keys = {e.key for e in events}
    if len(keys) != 1:
        raise ValidationError("summarize_day expects events of a single worker-day")

    classifier = classifier or OvertimeClassifier()
    calculator = calculator or StandardBucketCalculator()

    worker_id, work_date = next(iter(keys))
    if as_of is not None and today is None:
        today = as_of.date()
    in_progress = as_of is not None and work_date == today

    ledger = reduce_day(events, finalized=not in_progress)
    total = ledger.projected_hours(as_of) if in_progress else ledger.accumulated_hours

    buckets = calculator.split_day(total, classifier.limits)
    return DaySummary(
        worker_id=worker_id,
        date=work_date,
        total_hours=total,
        regular_hours=buckets.regular_hours,
        overtime_hours=buckets.overtime_hours,
        double_time_hours=buckets.double_time_hours,
        entry_count=ledger.event_count,
        anomalies=ledger.anomalies,
        tier=classifier.classify(total, week_to_date_hours),
        status=status or derive_status(events),
        in_progress=in_progress,
    )


def summarize_week(
    daily_summaries: Iterable[DaySummary],
    *,
    on: Optional[date] = None,
    week_start: WeekStart = WeekStart.MONDAY,
    classifier: Optional[OvertimeClassifier] = None,
    calculator: Optional[BucketCalculator] = None,
) -> WeekSummary:
    """Sum one worker's day buckets across the week containing ``on``.

    ``on`` defaults to the earliest day given. Days outside that week are
    ignored.
    """

    days = sorted(daily_summaries, key=lambda d: d.date)
    if not days:
        raise ValidationError("summarize_week needs at least one day")
    workers = {d.worker_id for d in days}
    if len(workers) != 1:
        raise ValidationError("summarize_week expects a single worker")

    classifier = classifier or OvertimeClassifier()
    calculator = calculator or StandardBucketCalculator()

    start, end = week_bounds(on or days[0].date, week_start)
    in_week = [d for d in days if start <= d.date <= end]

    regular = sum(d.regular_hours for d in in_week)
    anomalies = tuple(a for d in in_week for a in d.anomalies)
    return WeekSummary(
        worker_id=days[0].worker_id,
        week_start=start,
        week_end=end,
        total_hours=sum(d.total_hours for d in in_week),
        regular_hours=regular,
        overtime_hours=sum(d.overtime_hours for d in in_week),
        double_time_hours=sum(d.double_time_hours for d in in_week),
        weekly_overtime_hours=calculator.weekly_overtime(regular, classifier.limits),
        entry_count=sum(d.entry_count for d in in_week),
        day_count=len(in_week),
        anomalies=anomalies,
    )


def coerce_event(raw: Union[TimeEvent, dict[str, Any]]) -> TimeEvent:
    """Accept a TimeEvent or a raw payload; raise MalformedEventError if unusable."""

    if isinstance(raw, TimeEvent):
        if not isinstance(raw.timestamp, datetime):
            raise MalformedEventError(raw.event_id, "unparseable timestamp")
        if not isinstance(raw.calendar_date, date):
            raise MalformedEventError(raw.event_id, "missing calendar date")
        return raw
    return TimeEvent.from_dict(raw)


def aggregate(
    raw_events: Iterable[Union[TimeEvent, dict[str, Any]]],
    *,
    as_of: Optional[datetime] = None,
    today: Optional[date] = None,
    week_start: WeekStart = WeekStart.MONDAY,
    statuses: Optional[dict[GroupKey, TimecardStatus]] = None,
    classifier: Optional[OvertimeClassifier] = None,
    calculator: Optional[BucketCalculator] = None,
) -> AggregationResult:
    """Summarize a batch of events into one DaySummary per worker-day.

    Malformed events are dropped and returned in ``errors``; the rest of the
    batch is still aggregated. Each day's tier uses the worker's earlier days
    in the same week as week-to-date hours. Days come back sorted by
    (date, worker_id).
    """

    events: list[TimeEvent] = []
    errors: list[MalformedEventError] = []
    for raw in raw_events:
        try:
            events.append(coerce_event(raw))
        except MalformedEventError as exc:
            logger.warning("Skipping event: %s", exc)
            errors.append(exc)

    groups = group_by_worker_and_date(events)
    statuses = statuses or {}

    days: list[DaySummary] = []
    week_totals: dict[tuple[str, date], float] = {}
    for key in sorted(groups, key=lambda k: (k[1], k[0])):
        worker_id, work_date = key
        week_key = (worker_id, week_bounds(work_date, week_start)[0])
        week_to_date = week_totals.get(week_key, 0.0)

        summary = summarize_day(
            groups[key],
            as_of=as_of,
            today=today,
            week_to_date_hours=week_to_date,
            status=statuses.get(key),
            classifier=classifier,
            calculator=calculator,
        )
        week_totals[week_key] = week_to_date + summary.total_hours
        days.append(summary)

    return AggregationResult(days=days, errors=errors)


def summarize_weeks(
    days: Iterable[DaySummary],
    *,
    week_start: WeekStart = WeekStart.MONDAY,
    classifier: Optional[OvertimeClassifier] = None,
    calculator: Optional[BucketCalculator] = None,
) -> list[WeekSummary]:
    """One WeekSummary per (worker, week), sorted by (week_start, worker_id)."""

    buckets: dict[tuple[str, date], list[DaySummary]] = {}
    for day in days:
        start = week_bounds(day.date, week_start)[0]
        buckets.setdefault((day.worker_id, start), []).append(day)

    return [
        summarize_week(buckets[key], on=key[1], week_start=week_start, classifier=classifier, calculator=calculator)
        for key in sorted(buckets, key=lambda k: (k[1], k[0]))
    ]
