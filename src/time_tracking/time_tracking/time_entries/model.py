from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class TimeEntry:
    """Domain entity: one shift. Open while clock_out_time is None."""

    entry_id: int
    user_id: int
    clock_in_time: datetime
    clock_out_time: Optional[datetime] = None
    total_hours: Optional[float] = None
    is_edited: bool = False

    @property
    def is_open(self) -> bool:
        return self.clock_out_time is None


@dataclass(frozen=True)
class AuditLog:
    """Append-only record of the values an entry had before an admin edit."""

    audit_id: int
    entry_id: int
    edited_by_user_id: int
    edited_at: datetime
    previous_clock_in: datetime
    previous_clock_out: Optional[datetime] = None


@dataclass(frozen=True)
class EntryRow:
    """Read-model for the admin entries table / CSV."""

    entry: TimeEntry
    user_name: str


@dataclass(frozen=True)
class AuditRow:
    audit: AuditLog
    editor_name: str


@dataclass(frozen=True)
class ActiveShiftRow:
    """Who is clocked in right now (clock page)."""

    user_id: int
    user_name: str
    clock_in_time: datetime
    pin_length: int


@dataclass(frozen=True)
class ClosedShiftRow:
    """Read-model for weekly aggregation."""

    user_id: int
    user_name: str
    clock_in_time: datetime
    total_hours: float
