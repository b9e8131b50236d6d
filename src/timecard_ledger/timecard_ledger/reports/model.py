from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

BASE_COLUMNS: tuple[str, ...] = (
    "date",
    "worker_id",
    "total_hours",
    "regular_hours",
    "overtime_hours",
    "double_time_hours",
    "entry_count",
    "status",
)

TOTAL_LABEL = "TOTAL"


@dataclass(frozen=True)
class ReportOptions:
    start: Optional[date] = None
    end: Optional[date] = None
    worker_id: Optional[str] = None
    include_archived: bool = True
    include_tier: bool = False
    include_anomalies: bool = False
    include_weekly_overtime: bool = False

    @property
    def columns(self) -> tuple[str, ...]:
        cols = BASE_COLUMNS
        if self.include_weekly_overtime:
            # Week rows carry the 40-hour bucket next to the daily ones.
            cols = cols[:6] + ("weekly_overtime_hours",) + cols[6:]
        if self.include_tier:
            cols += ("tier",)
        if self.include_anomalies:
            cols += ("anomalies",)
        return cols


@dataclass(frozen=True)
class ReportData:
    """Rows in fixed column order, plus the grand-total row."""

    columns: tuple[str, ...]
    rows: list[dict]
    total: dict

    def all_rows(self) -> list[dict]:
        return [*self.rows, self.total]
