from __future__ import annotations

from datetime import datetime, timezone, tzinfo
from decimal import ROUND_HALF_DOWN, ROUND_HALF_UP, Decimal
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from ..core.exceptions import ValidationError


def now_utc() -> datetime:
    """Current UTC instant.

    Note: Wrapped so tests can patch/mock easier.
    """
    return datetime.now(timezone.utc)


def ensure_utc(value: datetime) -> datetime:
    """Tag naive values as UTC, convert aware ones."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def hours_between(start: datetime, end: datetime) -> float:
    """Elapsed hours to 2 decimal places, halves rounded up (negative if end < start)."""
    seconds = (ensure_utc(end) - ensure_utc(start)).total_seconds()
    hours = Decimal(str(seconds / 3600))
    # halves go toward +infinity on both sides of zero
    rounding = ROUND_HALF_UP if hours >= 0 else ROUND_HALF_DOWN
    return float(hours.quantize(Decimal("0.01"), rounding=rounding))


def resolve_zone(tz_name: Optional[str]) -> Optional[tzinfo]:
    """ZoneInfo for an IANA name; ``None`` means the server's local zone."""
    if not tz_name:
        return None
    try:
        return ZoneInfo(tz_name)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise ValidationError(f"Unknown timezone: {tz_name}") from e


def to_local(value: datetime, tz_name: Optional[str] = None) -> datetime:
    zone = resolve_zone(tz_name)
    return ensure_utc(value).astimezone(zone)


def parse_datetime_input(value: str, tz_name: Optional[str] = None) -> datetime:
    """Parse an ISO-8601 string from a form into a UTC instant.

    Values without an offset (e.g. from ``<input type="datetime-local">``) are
    read in the display timezone.
    """
    raw = (value or "").strip()
    if not raw:
        raise ValidationError("Date/time is required")
    if raw.endswith("Z"):
        raw = raw[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(raw)
    except ValueError as e:
        raise ValidationError(f"Invalid date/time: {value}") from e

    if parsed.tzinfo is None:
        zone = resolve_zone(tz_name)
        parsed = parsed.replace(tzinfo=zone) if zone else parsed.astimezone()
    return parsed.astimezone(timezone.utc)


def format_local(value: Optional[datetime], tz_name: Optional[str] = None, fmt: str = "%Y-%m-%d %H:%M") -> str:
    if value is None:
        return "-"
    return to_local(value, tz_name).strftime(fmt)
