from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

import pytest

from src.time_tracking.time_tracking.core.constants import SETTING_TIMEZONE, SETTING_WEEK_START_DAY
from src.time_tracking.time_tracking.core.enums import Role
from src.time_tracking.time_tracking.reports.service import WeeklyReportService
from src.time_tracking.time_tracking.reports.week import week_bounds_utc
from src.time_tracking.time_tracking.schedules.model import ScheduleDay
from src.time_tracking.time_tracking.schedules.service import ScheduleService
from src.time_tracking.time_tracking.settings.service import SettingsService
from src.time_tracking.time_tracking.time_entries.model import ClosedShiftRow
from src.time_tracking.time_tracking.users.model import User


class InMemoryClosedShifts:
    def __init__(self, rows: list[ClosedShiftRow]):
        self.rows = rows

    def list_closed_between(self, *, start: datetime, end: datetime):
        return [r for r in self.rows if start <= r.clock_in_time < end]


class InMemoryUsers:
    def __init__(self, *users: User):
        self.users_by_id = {u.user_id: u for u in users}

    def get_by_id(self, user_id: int) -> Optional[User]:
        return self.users_by_id.get(user_id)

    def list_active_employees(self):
        return sorted(
            (u for u in self.users_by_id.values() if u.is_active and u.role == Role.EMPLOYEE),
            key=lambda u: u.name,
        )


class InMemorySchedules:
    def __init__(self, days: list[ScheduleDay]):
        self.days = days

    def list_for_users(self, user_ids):
        ids = set(user_ids)
        return [d for d in self.days if d.user_id in ids]


class InMemorySettings:
    def __init__(self, values: dict[str, str]):
        self.values = dict(values)

    def get(self, key: str) -> Optional[str]:
        return self.values.get(key)


def _utc(*args) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


def _service(users, shifts, schedule_days=(), settings=None, default_timezone="UTC"):
    users_repo = InMemoryUsers(*users)
    return WeeklyReportService(
        InMemoryClosedShifts(list(shifts)),
        users_repo,
        ScheduleService(InMemorySchedules(list(schedule_days)), users_repo),
        SettingsService(InMemorySettings(settings or {}), default_timezone=default_timezone),
    )


JANE = User(user_id=2, name="Jane", role=Role.EMPLOYEE, pin_code="5678", hourly_pay=20.0)
NOW = _utc(2025, 1, 8, 12, 0)  # Wednesday


def test_week_bounds_monday_start():
    start, end = week_bounds_utc(1, NOW)
    assert start == _utc(2025, 1, 6)
    assert end == _utc(2025, 1, 13)


def test_week_bounds_when_today_is_the_start_day():
    start, end = week_bounds_utc(3, NOW)
    assert start == _utc(2025, 1, 8)
    assert end == _utc(2025, 1, 15)


def test_monday_start_buckets_tuesday_and_thursday():
    svc = _service(
        [JANE],
        [
            ClosedShiftRow(user_id=2, user_name="Jane", clock_in_time=_utc(2025, 1, 7, 9, 0), total_hours=3.0),
            ClosedShiftRow(user_id=2, user_name="Jane", clock_in_time=_utc(2025, 1, 9, 9, 0), total_hours=2.0),
            # previous week, ignored
            ClosedShiftRow(user_id=2, user_name="Jane", clock_in_time=_utc(2025, 1, 3, 9, 0), total_hours=7.0),
        ],
        settings={SETTING_WEEK_START_DAY: "1"},
    )

    report = svc.build_weekly_report(now=NOW)

    assert report.day_labels[0] == "Mon"
    [row] = report.rows
    assert row.actual_by_day == (0.0, 3.0, 0.0, 2.0, 0.0, 0.0, 0.0)
    assert row.total_hours == 5.0
    assert row.estimated_pay == 100.0


def test_schedule_is_rotated_to_week_start_and_over_flags():
    svc = _service(
        [JANE],
        [ClosedShiftRow(user_id=2, user_name="Jane", clock_in_time=_utc(2025, 1, 7, 9, 0), total_hours=3.0)],
        schedule_days=[ScheduleDay(2, 1, 4.0), ScheduleDay(2, 2, 2.0)],
        settings={SETTING_WEEK_START_DAY: "1"},
    )

    [row] = svc.build_weekly_report(now=NOW).rows

    assert row.scheduled_by_day == (4.0, 2.0, 0.0, 0.0, 0.0, 0.0, 0.0)
    assert row.scheduled_total == 6.0
    assert row.over_by_day[1] is True
    assert row.over_by_day[0] is False
    assert row.over_week is False


def test_local_timezone_moves_late_shift_to_previous_day():
    # 02:00Z Wednesday is 21:00 Tuesday in New York
    svc = _service(
        [JANE],
        [ClosedShiftRow(user_id=2, user_name="Jane", clock_in_time=_utc(2025, 1, 8, 2, 0), total_hours=4.0)],
        settings={SETTING_WEEK_START_DAY: "0", SETTING_TIMEZONE: "America/New_York"},
    )

    report = svc.build_weekly_report(now=NOW)

    assert report.timezone == "America/New_York"
    assert report.rows[0].actual_by_day == (0.0, 0.0, 4.0, 0.0, 0.0, 0.0, 0.0)


def test_rows_include_scheduled_employees_without_hours_sorted_by_name():
    amy = User(user_id=5, name="amy", role=Role.EMPLOYEE, pin_code="1111")
    zed = User(user_id=6, name="Zed", role=Role.EMPLOYEE, pin_code="2222")
    idle = User(user_id=7, name="Idle", role=Role.EMPLOYEE, pin_code="3333")
    svc = _service(
        [JANE, amy, zed, idle],
        [ClosedShiftRow(user_id=6, user_name="Zed", clock_in_time=_utc(2025, 1, 7, 9, 0), total_hours=1.0)],
        schedule_days=[ScheduleDay(2, 3, 8.0), ScheduleDay(5, 1, 4.0), ScheduleDay(7, 1, 0.0)],
    )

    report = svc.build_weekly_report(now=NOW)

    assert [r.user_name for r in report.rows] == ["amy", "Jane", "Zed"]
    jane_row = report.rows[1]
    assert jane_row.total_hours == 0.0
    assert jane_row.scheduled_total == 8.0
    assert report.rows[0].estimated_pay is None


def test_week_start_falls_back_to_sunday_on_garbage():
    svc = _service([JANE], [], settings={SETTING_WEEK_START_DAY: "funday"})
    report = svc.build_weekly_report(now=NOW)
    assert report.week_start_day == 0
    assert report.start == _utc(2025, 1, 5)


@pytest.mark.parametrize("hours,rate,expected", [(5.0, 20.0, 100.0), (1.5, 15.0, 22.5), (3.0, None, None)])
def test_hourly_pay_calculator(hours, rate, expected):
    from src.time_tracking.time_tracking.reports.calculator import HourlyPayCalculator

    assert HourlyPayCalculator().estimated_pay(hours, rate) == expected
