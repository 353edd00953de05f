from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Optional

from ..common.datetime_utils import ensure_utc, to_local


def day_of_week(value: datetime) -> int:
    """0 = Sunday .. 6 = Saturday (Python's weekday() starts on Monday)."""
    return (value.weekday() + 1) % 7


def week_bounds_utc(week_start_day: int, now: datetime) -> tuple[datetime, datetime]:
    """Half-open UTC window [start, end) of the week containing ``now``'s UTC date."""
    now = ensure_utc(now)
    today = datetime(now.year, now.month, now.day, tzinfo=timezone.utc)
    days_back = (day_of_week(today) - week_start_day + 7) % 7
    start = today - timedelta(days=days_back)
    return start, start + timedelta(days=7)


def local_day_of_week(value: datetime, tz_name: Optional[str] = None) -> int:
    """Day of week of an instant in the given zone (server local zone if None)."""
    return day_of_week(to_local(value, tz_name))


def day_offset(dow: int, week_start_day: int) -> int:
    """Column index of a day of week in a week starting at ``week_start_day``."""
    return (dow - week_start_day + 7) % 7
