from datetime import timedelta

import pytest

from src.timecard_ledger.timecard_ledger.aggregation.service import AggregationService
from src.timecard_ledger.timecard_ledger.core.enums import EventKind, TimecardStatus
from src.timecard_ledger.timecard_ledger.core.exceptions import NotFoundError
from src.timecard_ledger.timecard_ledger.approvals.model import ApprovalRecord
from tests.helpers import DAY, InMemoryEvents, at, ev, shift


class InMemoryApprovals:
    def __init__(self, records=()):
        self.records = {r.key: r for r in records}

    def load_approval(self, worker_id, work_date):
        return self.records.get((worker_id, work_date))


def test_worker_week_returns_empty_week_without_events():
    service = AggregationService(InMemoryEvents())

    days, week = service.worker_week("w1", DAY)

    assert days == []
    assert week.total_hours == 0
    assert week.week_start == DAY


def test_worker_week_projects_today_and_finalizes_earlier_days():
    events = shift(8, 16) + [ev(EventKind.CLOCK_IN, 8, day=DAY + timedelta(days=1))]
    service = AggregationService(InMemoryEvents(events))

    days, week = service.worker_week("w1", DAY + timedelta(days=1), as_of=at(DAY + timedelta(days=1), 12))

    assert [d.in_progress for d in days] == [False, True]
    assert week.total_hours == pytest.approx(12)


def test_day_summary_uses_stored_approval_status():
    approvals = InMemoryApprovals([ApprovalRecord("w1", DAY, status=TimecardStatus.APPROVED, version=3)])
    service = AggregationService(InMemoryEvents(shift(8, 16)), approvals)

    assert service.day_summary("w1", DAY).status == TimecardStatus.APPROVED
    with pytest.raises(NotFoundError):
        service.day_summary("w1", DAY + timedelta(days=1))


def test_summaries_between_loads_from_week_start_for_tiers():
    events = []
    for i in range(4):
        events += shift(7, 17, day=DAY + timedelta(days=i))
    events += shift(9, 15, day=DAY + timedelta(days=4))
    service = AggregationService(InMemoryEvents(events))

    result = service.summaries_between(DAY + timedelta(days=4), DAY + timedelta(days=4))

    assert len(result.days) == 1
    assert result.days[0].tier.extra_hours == pytest.approx(6)
