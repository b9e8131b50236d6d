from __future__ import annotations

import csv
import io
import json
from dataclasses import replace
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Optional, Union

from ..aggregation.model import DaySummary, WeekSummary
from ..core.constants import REPORT_DECIMALS
from ..core.enums import TimecardStatus
from .model import TOTAL_LABEL, ReportData, ReportOptions

BUCKET_FIELDS = ("regular_hours", "overtime_hours", "double_time_hours")
HOUR_FIELDS = ("total_hours", *BUCKET_FIELDS)
WEEKLY_FIELD = "weekly_overtime_hours"
_QUANT = Decimal(1).scaleb(-REPORT_DECIMALS)

Summary = Union[DaySummary, WeekSummary]


def round_hours(value: float) -> Decimal:
    # Go through str() so 2.675 rounds like people expect, not like its binary float.
    return Decimal(str(value)).quantize(_QUANT, rounding=ROUND_HALF_UP)


def _row_date(summary: Summary) -> date:
    return summary.date if isinstance(summary, DaySummary) else summary.week_start


def _row_status(summary: Summary) -> str:
    return summary.status.value if isinstance(summary, DaySummary) else ""


def _row_tier(summary: Summary) -> str:
    if isinstance(summary, DaySummary) and summary.tier is not None:
        return summary.tier.tier.value
    return ""


class ReportProjection:
    """Deterministic rows for the CSV/JSON/HTML exporters.

    Same input, same rows: sort order, column order and 2-decimal half-up
    rounding are all fixed. A row's total is the sum of its rounded buckets
    and the grand total sums the rounded row values, so rows and columns
    always add up. Week rows add a weekly_overtime_hours column.
    """

    def _keep(self, summary: Summary, options: ReportOptions) -> bool:
        when = _row_date(summary)
        if options.start and when < options.start:
            return False
        if options.end and when > options.end:
            return False
        if options.worker_id and summary.worker_id != options.worker_id:
            return False
        if not options.include_archived and isinstance(summary, DaySummary):
            return summary.status != TimecardStatus.ARCHIVED
        return True

    def project(self, summaries: Iterable[Summary], options: Optional[ReportOptions] = None) -> ReportData:
        options = options or ReportOptions()

        kept = [s for s in summaries if self._keep(s, options)]
        kept.sort(key=lambda s: (_row_date(s), str(s.worker_id), isinstance(s, WeekSummary)))
        if not options.include_weekly_overtime and any(isinstance(s, WeekSummary) for s in kept):
            options = replace(options, include_weekly_overtime=True)
        columns = options.columns

        totals = {f: Decimal(0).quantize(_QUANT) for f in (*HOUR_FIELDS, WEEKLY_FIELD)}
        entry_total = 0
        anomaly_total = 0

        rows: list[dict] = []
        for s in kept:
            values = {
                "date": _row_date(s).isoformat(),
                "worker_id": str(s.worker_id),
                "entry_count": int(s.entry_count),
                "status": _row_status(s),
                "tier": _row_tier(s),
                "anomalies": len(s.anomalies),
            }
            rounded = {f: round_hours(getattr(s, f)) for f in BUCKET_FIELDS}
            # The row total is the sum of its rounded buckets so every row adds up.
            rounded["total_hours"] = sum(rounded.values(), Decimal(0).quantize(_QUANT))
            if isinstance(s, WeekSummary):
                rounded[WEEKLY_FIELD] = round_hours(s.weekly_overtime_hours)
            for f, value in rounded.items():
                totals[f] += value
                values[f] = str(value)
            values.setdefault(WEEKLY_FIELD, "")
            entry_total += int(s.entry_count)
            anomaly_total += len(s.anomalies)
            rows.append({c: values[c] for c in columns})

        total_values = {
            "date": TOTAL_LABEL,
            "worker_id": "",
            "entry_count": entry_total,
            "status": "",
            "tier": "",
            "anomalies": anomaly_total,
            **{f: str(totals[f]) for f in (*HOUR_FIELDS, WEEKLY_FIELD)},
        }
        return ReportData(columns=columns, rows=rows, total={c: total_values[c] for c in columns})


def to_csv(report: ReportData) -> str:
    """RFC 4180 CSV (quoted where needed, CRLF line endings)."""

    out = io.StringIO()
    writer = csv.DictWriter(out, fieldnames=list(report.columns), lineterminator="\r\n")
    writer.writeheader()
    for row in report.all_rows():
        writer.writerow(row)
    return out.getvalue()


def to_json(report: ReportData, **extra) -> str:
    payload = {"columns": list(report.columns), "rows": report.rows, "total": report.total, **extra}
    return json.dumps(payload, ensure_ascii=False)
