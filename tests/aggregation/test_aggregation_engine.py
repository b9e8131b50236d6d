from datetime import timedelta

import pytest

from src.timecard_ledger.timecard_ledger.aggregation.calculator.standard_calculator import StandardBucketCalculator
from src.timecard_ledger.timecard_ledger.aggregation.engine import (
    aggregate,
    group_by_worker_and_date,
    summarize_day,
    summarize_week,
    summarize_weeks,
)
from src.timecard_ledger.timecard_ledger.core.enums import AnomalyKind, EventKind, Tier, TierBasis, TimecardStatus, WeekStart
from src.timecard_ledger.timecard_ledger.core.exceptions import ValidationError
from src.timecard_ledger.timecard_ledger.overtime.model import LaborThresholds
from tests.helpers import DAY, at, ev, shift


@pytest.mark.parametrize("total", [0, 3.25, 8, 8.5, 11.99, 12, 13.75, 20])
def test_buckets_always_add_up_to_total(total):
    buckets = StandardBucketCalculator().split_day(total, LaborThresholds())

    assert buckets.total_hours == pytest.approx(total)
    assert buckets.regular_hours <= 8
    assert buckets.overtime_hours <= 4


def test_summarize_day_splits_overtime_and_classifies():
    summary = summarize_day(shift(6, 19))

    assert summary.total_hours == pytest.approx(13)
    assert summary.regular_hours == pytest.approx(8)
    assert summary.overtime_hours == pytest.approx(4)
    assert summary.double_time_hours == pytest.approx(1)
    assert summary.tier.tier == Tier.DOUBLE_TIME
    assert summary.entry_count == 2
    assert not summary.in_progress


def test_summarize_day_rejects_mixed_groups():
    with pytest.raises(ValidationError):
        summarize_day(shift(8, 16) + shift(8, 16, worker_id="w2"))
    with pytest.raises(ValidationError):
        summarize_day([])


def test_today_is_projected_but_other_days_are_finalized():
    open_today = [ev(EventKind.CLOCK_IN, 8)]
    as_of = at(DAY, 10)

    live = summarize_day(open_today, as_of=as_of)
    later = summarize_day(open_today, as_of=as_of + timedelta(days=1))

    assert live.in_progress
    assert live.total_hours == pytest.approx(2)
    assert live.anomalies == ()
    assert not later.in_progress
    assert later.total_hours == 0
    assert [a.kind for a in later.anomalies] == [AnomalyKind.UNTERMINATED_DAY]


def test_week_sums_days_and_computes_weekly_overtime():
    days = [summarize_day(shift(7, 17, day=DAY + timedelta(days=i))) for i in range(5)]

    week = summarize_week(days)

    assert week.week_start == DAY
    assert week.week_end == DAY + timedelta(days=6)
    assert week.total_hours == pytest.approx(50)
    assert week.regular_hours == pytest.approx(40)
    assert week.overtime_hours == pytest.approx(10)
    assert week.weekly_overtime_hours == 0
    assert week.day_count == 5


def test_weekly_overtime_counts_regular_hours_past_forty():
    days = [summarize_day(shift(8, 16, day=DAY + timedelta(days=i))) for i in range(6)]

    week = summarize_week(days)

    assert week.regular_hours == pytest.approx(48)
    assert week.weekly_overtime_hours == pytest.approx(8)


def test_week_totals_match_sum_of_day_totals():
    events = []
    for i, (start, end) in enumerate([(8, 17), (6, 19), (9, 12), (7, 16)]):
        events += shift(start, end, day=DAY + timedelta(days=i))

    result = aggregate(events)
    week = summarize_week(result.days)

    for field in ("total_hours", "regular_hours", "overtime_hours", "double_time_hours"):
        assert getattr(week, field) == pytest.approx(sum(getattr(d, field) for d in result.days))


def test_sunday_week_start_moves_the_boundary():
    sunday = DAY - timedelta(days=1)
    days = [summarize_day(shift(8, 16, day=sunday)), summarize_day(shift(8, 16))]

    monday_weeks = summarize_weeks(days, week_start=WeekStart.MONDAY)
    sunday_weeks = summarize_weeks(days, week_start=WeekStart.SUNDAY)

    assert len(monday_weeks) == 2
    assert len(sunday_weeks) == 1
    assert sunday_weeks[0].week_start == sunday


def test_aggregate_skips_malformed_events_and_reports_them():
    good = [e.to_dict() for e in shift(8, 16)]
    bad = [
        {"event_id": "bad-1", "worker_id": "w1", "kind": "clock_in", "calendar_date": DAY.isoformat()},
        {"event_id": "bad-2", "worker_id": "w1", "kind": "clock_out", "timestamp": "not-a-time", "calendar_date": DAY.isoformat()},
    ]

    result = aggregate(good + bad)

    assert [e.event_id for e in result.errors] == ["bad-1", "bad-2"]
    assert len(result.days) == 1
    assert result.days[0].total_hours == pytest.approx(8)


def test_aggregate_uses_earlier_days_as_week_to_date():
    events = []
    for i in range(4):
        events += shift(7, 17, day=DAY + timedelta(days=i))
    events += shift(9, 15, day=DAY + timedelta(days=4))

    result = aggregate(events)
    friday = result.days[-1]

    assert friday.total_hours == pytest.approx(6)
    assert friday.tier.tier == Tier.OVERTIME
    assert friday.tier.basis == TierBasis.WEEKLY


def test_grouping_keeps_workers_and_days_separate():
    events = shift(8, 12) + shift(8, 12, worker_id="w2") + shift(8, 12, day=DAY + timedelta(days=1))

    groups = group_by_worker_and_date(events)

    assert list(groups) == [("w1", DAY), ("w2", DAY), ("w1", DAY + timedelta(days=1))]
    result = aggregate(reversed(events))
    assert [(d.date, d.worker_id) for d in result.days] == [
        (DAY, "w1"),
        (DAY, "w2"),
        (DAY + timedelta(days=1), "w1"),
    ]


def test_status_comes_from_events_unless_given():
    events = [ev(EventKind.CLOCK_IN, 8, status=TimecardStatus.SUBMITTED), ev(EventKind.CLOCK_OUT, 9, status=TimecardStatus.SUBMITTED)]

    assert summarize_day(events).status == TimecardStatus.SUBMITTED
    assert summarize_day(events, status=TimecardStatus.APPROVED).status == TimecardStatus.APPROVED


def _raw(event_id, **overrides):
    payload = {
        "event_id": event_id,
        "worker_id": "w1",
        "kind": "clock_in",
        "timestamp": "2026-02-03T08:00:00Z",
        "calendar_date": "2026-02-03",
    }
    payload.update(overrides)
    return payload


def test_numeric_epoch_timestamp_is_reported_not_fatal():
    good = [e.to_dict() for e in shift(8, 16)]
    epoch = _raw("epoch", timestamp=1770019200000)

    result = aggregate(good + [epoch])

    assert [e.event_id for e in result.errors] == ["epoch"]
    assert "timestamp" in result.errors[0].reason
    assert result.days[0].total_hours == pytest.approx(8)


@pytest.mark.parametrize(
    "overrides",
    [
        {"status": "pending"},
        {"approved_at": "yesterday"},
        {"rejected_at": 12345},
        {"location": {"latitude": 37.77}},
        {"location": {"latitude": 37.77, "longitude": "west"}},
        {"kind": "coffee_break"},
        {"calendar_date": "02/03/2026"},
    ],
)
def test_bad_payload_fields_are_reported_and_batch_continues(overrides):
    good = [e.to_dict() for e in shift(8, 16)]

    result = aggregate(good + [_raw("bad", **overrides)])

    assert [e.event_id for e in result.errors] == ["bad"]
    assert len(result.days) == 1
    assert result.days[0].total_hours == pytest.approx(8)


def test_non_mapping_payload_is_reported():
    result = aggregate([None, *shift(8, 10)])

    assert len(result.errors) == 1
    assert result.days[0].total_hours == pytest.approx(2)
