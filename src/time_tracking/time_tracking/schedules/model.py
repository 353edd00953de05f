from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ScheduleDay:
    """Expected hours for one employee on one day of week (0=Sunday..6=Saturday)."""

    user_id: int
    day_of_week: int
    hours: float


@dataclass(frozen=True)
class ScheduleGridRow:
    """One row of the settings grid: hours indexed by day of week."""

    user_id: int
    user_name: str
    by_day: tuple[float, ...]

    @property
    def total(self) -> float:
        return sum(self.by_day)
