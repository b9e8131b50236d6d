from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from zoneinfo import ZoneInfo

from ..core.enums import WeekStart


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def parse_timestamp(value: str | datetime) -> datetime:
    """Parse an ISO-8601 instant into an aware UTC datetime.

    Naive values are taken to be UTC already. A trailing ``Z`` is accepted.
    """

    if isinstance(value, datetime):
        dt = value
    elif not isinstance(value, str):
        raise TypeError(f"expected an ISO-8601 string or datetime, got {type(value).__name__}")
    else:
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        dt = datetime.fromisoformat(text)

    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def hours_between(start: datetime, end: datetime) -> float:
    return (end - start).total_seconds() / 3600.0


def local_date(instant: datetime, tz_name: str) -> date:
    """Worker-local calendar day of an instant."""
    return instant.astimezone(ZoneInfo(tz_name)).date()


def week_bounds(day: date, week_start: WeekStart = WeekStart.MONDAY) -> tuple[date, date]:
    """First and last day of the week containing ``day``."""
    if week_start == WeekStart.SUNDAY:
        offset = (day.weekday() + 1) % 7
    else:
        offset = day.weekday()
    start = day - timedelta(days=offset)
    return start, start + timedelta(days=6)


def now_utc() -> datetime:
    """Current UTC time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now(timezone.utc)
