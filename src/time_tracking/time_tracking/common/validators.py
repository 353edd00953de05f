from __future__ import annotations

import math
import re
from typing import Optional

from ..core.constants import PIN_PATTERN
from ..core.exceptions import ValidationError

_PIN_RE = re.compile(PIN_PATTERN)
_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def require_non_empty(value: Optional[str], field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def validate_pin(value: Optional[str]) -> str:
    pin = (value or "").strip()
    if not _PIN_RE.match(pin):
        raise ValidationError("PIN must be 4-8 digits")
    return pin


def parse_optional_amount(value, field_name: str) -> Optional[float]:
    """Blank means "not set"; anything else must be a finite number >= 0."""
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    try:
        amount = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be a number")
    if not math.isfinite(amount) or amount < 0:
        raise ValidationError(f"{field_name} must be zero or more")
    return amount


def parse_hours(value) -> float:
    """Blank means no hours scheduled."""
    if value is None or str(value).strip() == "":
        return 0.0
    try:
        hours = float(value)
    except (TypeError, ValueError):
        raise ValidationError("Hours must be a number")
    if not math.isfinite(hours) or hours < 0:
        raise ValidationError("Hours must be zero or more")
    return hours


def validate_day_of_week(value) -> int:
    try:
        day = int(value)
    except (TypeError, ValueError):
        raise ValidationError("Invalid day")
    if day < 0 or day > 6:
        raise ValidationError("Invalid day")
    return day


def validate_email(value: Optional[str]) -> Optional[str]:
    email = (value or "").strip()
    if not email:
        return None
    if not _EMAIL_RE.match(email):
        raise ValidationError("Invalid email address")
    return email
