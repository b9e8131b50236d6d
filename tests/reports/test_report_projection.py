from datetime import timedelta
from decimal import Decimal

from src.timecard_ledger.timecard_ledger.aggregation.engine import aggregate, summarize_weeks
from src.timecard_ledger.timecard_ledger.aggregation.model import DaySummary
from src.timecard_ledger.timecard_ledger.core.enums import TimecardStatus
from src.timecard_ledger.timecard_ledger.reports.model import BASE_COLUMNS, ReportOptions
from src.timecard_ledger.timecard_ledger.reports.service import ReportProjection, round_hours, to_csv, to_json
from tests.helpers import DAY, shift


def _day(worker_id, day, total, status=TimecardStatus.DRAFT):
    return DaySummary(
        worker_id=worker_id,
        date=day,
        total_hours=total,
        regular_hours=min(total, 8),
        overtime_hours=max(total - 8, 0.0),
        double_time_hours=0.0,
        entry_count=2,
        status=status,
    )


def test_rounding_is_half_up_to_two_decimals():
    assert round_hours(2.675) == Decimal("2.68")
    assert round_hours(8.125) == Decimal("8.13")
    assert round_hours(1 / 3) == Decimal("0.33")
    assert round_hours(0) == Decimal("0.00")


def test_projection_is_deterministic_regardless_of_input_order():
    summaries = aggregate(shift(8, 16) + shift(9, 17, worker_id="w0") + shift(7, 12, day=DAY + timedelta(days=1))).days

    first = ReportProjection().project(summaries)
    second = ReportProjection().project(list(reversed(summaries)))

    assert first == second
    assert to_csv(first) == to_csv(second)
    assert [(r["date"], r["worker_id"]) for r in first.rows] == [
        (DAY.isoformat(), "w0"),
        (DAY.isoformat(), "w1"),
        ((DAY + timedelta(days=1)).isoformat(), "w1"),
    ]


def test_total_row_is_sum_of_rounded_values():
    summaries = [_day("w1", DAY, 1 / 3), _day("w2", DAY, 1 / 3), _day("w3", DAY, 1 / 3)]

    report = ReportProjection().project(summaries)

    assert [r["total_hours"] for r in report.rows] == ["0.33", "0.33", "0.33"]
    assert report.total["date"] == "TOTAL"
    assert report.total["total_hours"] == "0.99"
    assert report.total["entry_count"] == 6


def test_filters_and_optional_columns():
    summaries = [
        _day("w1", DAY, 8, TimecardStatus.ARCHIVED),
        _day("w1", DAY + timedelta(days=1), 8),
        _day("w2", DAY + timedelta(days=1), 8),
    ]
    options = ReportOptions(worker_id="w1", include_archived=False, include_tier=True, include_anomalies=True)

    report = ReportProjection().project(summaries, options)

    assert report.columns == BASE_COLUMNS + ("tier", "anomalies")
    assert len(report.rows) == 1
    assert report.rows[0]["date"] == (DAY + timedelta(days=1)).isoformat()
    assert list(report.rows[0]) == list(report.columns)


def test_csv_has_header_rows_and_total_with_crlf():
    report = ReportProjection().project([_day("w1", DAY, 8.5)])

    lines = to_csv(report).split("\r\n")

    assert lines[0] == ",".join(BASE_COLUMNS)
    assert lines[1] == f"{DAY.isoformat()},w1,8.50,8.00,0.50,0.00,2,draft"
    assert lines[2].startswith("TOTAL,,8.50,")
    assert lines[3] == ""


def test_week_rows_sort_after_day_rows_on_the_same_date():
    days = aggregate(shift(8, 16)).days
    weeks = summarize_weeks(days)

    report = ReportProjection().project(weeks + days)

    assert [r["status"] for r in report.rows] == ["draft", ""]
    assert '"columns"' in to_json(report)


def test_week_rows_export_weekly_overtime():
    days = aggregate([e for i in range(6) for e in shift(8, 16, day=DAY + timedelta(days=i))]).days
    weeks = summarize_weeks(days)

    report = ReportProjection().project(weeks)

    assert "weekly_overtime_hours" in report.columns
    assert report.columns.index("weekly_overtime_hours") == report.columns.index("double_time_hours") + 1
    assert report.rows[0]["weekly_overtime_hours"] == "8.00"
    assert report.total["weekly_overtime_hours"] == "8.00"
    assert "weekly_overtime_hours" in to_csv(report).split("\r\n")[0]


def test_day_rows_leave_weekly_overtime_blank_when_mixed_with_weeks():
    days = aggregate(shift(8, 16)).days

    report = ReportProjection().project(summarize_weeks(days) + days)

    assert [r["weekly_overtime_hours"] for r in report.rows] == ["", "0.00"]
    assert "weekly_overtime_hours" not in ReportProjection().project(days).columns


def test_row_total_is_sum_of_rounded_buckets():
    summary = DaySummary(
        worker_id="w1",
        date=DAY,
        total_hours=8.335,
        regular_hours=8.0,
        overtime_hours=8.335 - 8.0,
        double_time_hours=0.0,
        entry_count=2,
    )

    row = ReportProjection().project([summary]).rows[0]

    buckets = sum(Decimal(row[f]) for f in ("regular_hours", "overtime_hours", "double_time_hours"))
    assert Decimal(row["total_hours"]) == buckets
