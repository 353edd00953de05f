from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

from ..common.datetime_utils import now_utc
from ..core.constants import WEEKDAY_NAMES
from ..schedules.service import EMPTY_WEEK, ScheduleService
from ..settings.service import SettingsService
from ..time_entries.repository import TimeEntryRepository
from ..users.repository import UserRepository
from .calculator import HourlyPayCalculator, PayCalculator
from .week import day_offset, local_day_of_week, week_bounds_utc

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WeeklyRow:
    user_id: int
    user_name: str
    total_hours: float
    scheduled_total: float
    actual_by_day: tuple[float, ...]
    scheduled_by_day: tuple[float, ...]
    hourly_pay: Optional[float] = None
    estimated_pay: Optional[float] = None

    @property
    def over_week(self) -> bool:
        return self.scheduled_total > 0 and self.total_hours > self.scheduled_total

    @property
    def over_by_day(self) -> tuple[bool, ...]:
        return tuple(s > 0 and a > s for a, s in zip(self.actual_by_day, self.scheduled_by_day))


@dataclass(frozen=True)
class WeeklyReport:
    week_start_day: int
    start: datetime
    end: datetime
    timezone: Optional[str]
    rows: list[WeeklyRow]

    @property
    def day_labels(self) -> list[str]:
        return [WEEKDAY_NAMES[(self.week_start_day + i) % 7][:3] for i in range(7)]


class WeeklyReportService:
    """Read-only weekly aggregation of closed shifts against the schedule grid."""

    def __init__(
        self,
        entries: TimeEntryRepository,
        users: UserRepository,
        schedules: ScheduleService,
        settings: SettingsService,
        *,
        calculator: Optional[PayCalculator] = None,
        clock: Callable[[], datetime] = now_utc,
    ):
        self._entries = entries
        self._users = users
        self._schedules = schedules
        self._settings = settings
        self._calculator = calculator or HourlyPayCalculator()
        self._clock = clock

    def build_weekly_report(self, *, now: Optional[datetime] = None) -> WeeklyReport:
        week_start_day = self._settings.get_week_start_day()
        tz_name = self._settings.get_display_timezone()
        start, end = week_bounds_utc(week_start_day, now or self._clock())

        actual: dict[int, list[float]] = {}
        names: dict[int, str] = {}
        for shift in self._entries.list_closed_between(start=start, end=end):
            offset = day_offset(local_day_of_week(shift.clock_in_time, tz_name), week_start_day)
            actual.setdefault(shift.user_id, [0.0] * 7)[offset] += shift.total_hours
            names[shift.user_id] = shift.user_name

        employees = {u.user_id: u for u in self._users.list_active_employees()}
        schedules = self._schedules.hours_by_user(employees.keys())
        scheduled_ids = {user_id for user_id, by_day in schedules.items() if any(h > 0 for h in by_day)}

        pay_rates: dict[int, Optional[float]] = {u.user_id: u.hourly_pay for u in employees.values()}
        for user_id in set(actual) - set(employees):
            user = self._users.get_by_id(user_id)
            pay_rates[user_id] = user.hourly_pay if user else None

        rows: list[WeeklyRow] = []
        for user_id in set(actual) | scheduled_ids:
            by_dow = schedules.get(user_id, EMPTY_WEEK)
            scheduled_by_day = tuple(by_dow[(week_start_day + i) % 7] for i in range(7))
            actual_by_day = tuple(round(h, 2) for h in actual.get(user_id, [0.0] * 7))
            total_hours = round(sum(actual.get(user_id, [])), 2)
            user = employees.get(user_id)
            hourly_pay = pay_rates.get(user_id)
            rows.append(
                WeeklyRow(
                    user_id=user_id,
                    user_name=names.get(user_id) or (user.name if user else "-"),
                    total_hours=total_hours,
                    scheduled_total=round(sum(scheduled_by_day), 2),
                    actual_by_day=actual_by_day,
                    scheduled_by_day=scheduled_by_day,
                    hourly_pay=hourly_pay,
                    estimated_pay=self._calculator.estimated_pay(total_hours, hourly_pay),
                )
            )

        rows.sort(key=lambda r: r.user_name.casefold())
        logger.debug("Weekly report %s..%s: %d rows", start.isoformat(), end.isoformat(), len(rows))
        return WeeklyReport(week_start_day=week_start_day, start=start, end=end, timezone=tz_name, rows=rows)
