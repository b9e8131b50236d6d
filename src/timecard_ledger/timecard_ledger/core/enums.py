from __future__ import annotations

from enum import Enum


class EventKind(str, Enum):
    """Loại sự kiện chấm công do công nhân thực hiện."""

    CLOCK_IN = "clock_in"
    CLOCK_OUT = "clock_out"
    LUNCH_OUT = "lunch_out"
    LUNCH_IN = "lunch_in"


class TimecardStatus(str, Enum):
    """Trạng thái duyệt của một nhóm chấm công (worker, ngày) và các sự kiện của nó."""

    DRAFT = "draft"
    SUBMITTED = "submitted"
    APPROVED = "approved"
    REJECTED = "rejected"
    ARCHIVED = "archived"


class LedgerState(str, Enum):
    IDLE = "idle"
    WORKING = "working"
    ON_LUNCH = "on_lunch"


class AnomalyKind(str, Enum):
    UNEXPECTED_TRANSITION = "unexpected-transition"
    UNTERMINATED_DAY = "unterminated-day"


class Tier(str, Enum):
    """Labor-rule classification of a worker-day."""

    REGULAR = "regular"
    APPROACHING = "approaching"
    OVERTIME = "overtime"
    DOUBLE_TIME = "double_time"


class TierBasis(str, Enum):
    NONE = "none"
    DAILY = "daily"
    WEEKLY = "weekly"


class WeekStart(str, Enum):
    MONDAY = "monday"
    SUNDAY = "sunday"
