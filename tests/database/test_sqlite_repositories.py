from __future__ import annotations

import sqlite3
from datetime import datetime, timezone

import pytest

from src.time_tracking.time_tracking.core.enums import Role
from src.time_tracking.time_tracking.core.exceptions import ShiftAlreadyOpen
from src.time_tracking.time_tracking.database.bootstrap import apply_schema, ensure_demo_users, list_tables
from src.time_tracking.time_tracking.schedules.model import ScheduleDay
from src.time_tracking.time_tracking.schedules.sql_schedule_repository import SQLScheduleRepository
from src.time_tracking.time_tracking.settings.sql_settings_repository import SQLSettingsRepository
from src.time_tracking.time_tracking.time_entries.sql_time_entry_repository import SQLTimeEntryRepository
from src.time_tracking.time_tracking.users.sql_user_repository import SQLUserRepository


def _utc(*args) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


@pytest.fixture
def users(sqlite_conn):
    return SQLUserRepository(sqlite_conn)


@pytest.fixture
def entries(sqlite_conn):
    return SQLTimeEntryRepository(sqlite_conn)


def test_schema_is_idempotent_and_seed_runs_once(sqlite_conn):
    apply_schema(sqlite_conn)
    ensure_demo_users(sqlite_conn)
    ensure_demo_users(sqlite_conn)

    assert {"users", "time_entries", "audit_logs", "schedules", "settings"} <= set(list_tables(sqlite_conn))
    names = [u.name for u in SQLUserRepository(sqlite_conn).list_all()]
    assert names == ["Admin", "Jane Employee"]


def test_find_first_by_pin_prefers_lowest_id(users):
    first = users.create_user(name="Amy", role=Role.EMPLOYEE, pin_code="1111")
    users.create_user(name="Ben", role=Role.EMPLOYEE, pin_code="1111", hourly_pay=12.5)

    assert users.find_first_by_pin("1111").user_id == first
    assert users.find_first_by_pin("1111", role=Role.ADMIN) is None


def test_only_one_open_entry_per_user(users, entries):
    user_id = users.create_user(name="Jane", role=Role.EMPLOYEE, pin_code="5678")

    assert entries.create_open_entry(user_id=user_id, clock_in_time=_utc(2025, 1, 8, 9, 0)) is not None
    assert entries.create_open_entry(user_id=user_id, clock_in_time=_utc(2025, 1, 8, 9, 5)) is None
    assert len(entries.list_open()) == 1


def test_close_entry_round_trips_utc(users, entries):
    user_id = users.create_user(name="Jane", role=Role.EMPLOYEE, pin_code="5678")
    entry_id = entries.create_open_entry(user_id=user_id, clock_in_time=_utc(2025, 1, 8, 9, 0))

    assert entries.close_entry(entry_id=entry_id, clock_out_time=_utc(2025, 1, 8, 17, 30), total_hours=8.5)
    assert not entries.close_entry(entry_id=entry_id, clock_out_time=_utc(2025, 1, 8, 18, 0), total_hours=9.0)

    entry = entries.get_by_id(entry_id)
    assert entry.clock_in_time == _utc(2025, 1, 8, 9, 0)
    assert entry.clock_out_time == _utc(2025, 1, 8, 17, 30)
    assert entry.total_hours == 8.5
    assert entries.get_open_for_user(user_id) is None


def test_list_closed_between_is_half_open(users, entries):
    user_id = users.create_user(name="Jane", role=Role.EMPLOYEE, pin_code="5678")
    for day in (5, 6, 12):
        entry_id = entries.create_open_entry(user_id=user_id, clock_in_time=_utc(2025, 1, day, 0, 0))
        entries.close_entry(entry_id=entry_id, clock_out_time=_utc(2025, 1, day, 2, 0), total_hours=2.0)

    rows = entries.list_closed_between(start=_utc(2025, 1, 6), end=_utc(2025, 1, 12))

    assert [r.clock_in_time.day for r in rows] == [6]


def test_update_with_audit_is_atomic(users, entries):
    admin_id = users.create_user(name="Admin", role=Role.ADMIN, pin_code="1234")
    user_id = users.create_user(name="Jane", role=Role.EMPLOYEE, pin_code="5678")
    entry_id = entries.create_open_entry(user_id=user_id, clock_in_time=_utc(2025, 1, 8, 9, 0))

    with pytest.raises(sqlite3.IntegrityError):
        entries.update_with_audit(
            entry_id=entry_id,
            edited_by_user_id=admin_id,
            edited_at=_utc(2025, 1, 9),
            previous_clock_in=_utc(2025, 1, 8, 9, 0),
            previous_clock_out=None,
            clock_in_time=None,  # NOT NULL violation after the audit insert
            clock_out_time=_utc(2025, 1, 8, 17, 0),
            total_hours=None,
        )

    assert entries.list_audits_for_entry(entry_id) == []
    assert entries.get_by_id(entry_id).is_edited is False


def test_reopening_edit_with_another_open_shift_is_rejected(users, entries):
    admin_id = users.create_user(name="Admin", role=Role.ADMIN, pin_code="1234")
    user_id = users.create_user(name="Jane", role=Role.EMPLOYEE, pin_code="5678")
    closed_id = entries.create_open_entry(user_id=user_id, clock_in_time=_utc(2025, 1, 7, 9, 0))
    entries.close_entry(entry_id=closed_id, clock_out_time=_utc(2025, 1, 7, 17, 0), total_hours=8.0)
    entries.create_open_entry(user_id=user_id, clock_in_time=_utc(2025, 1, 8, 9, 0))

    with pytest.raises(ShiftAlreadyOpen):
        entries.update_with_audit(
            entry_id=closed_id,
            edited_by_user_id=admin_id,
            edited_at=_utc(2025, 1, 9),
            previous_clock_in=_utc(2025, 1, 7, 9, 0),
            previous_clock_out=_utc(2025, 1, 7, 17, 0),
            clock_in_time=_utc(2025, 1, 7, 9, 0),
            clock_out_time=None,
            total_hours=None,
        )

    assert entries.list_audits_for_entry(closed_id) == []
    assert entries.get_by_id(closed_id).clock_out_time == _utc(2025, 1, 7, 17, 0)
    assert len(entries.list_open()) == 1


def test_update_with_audit_records_previous_values(users, entries):
    admin_id = users.create_user(name="Admin", role=Role.ADMIN, pin_code="1234")
    user_id = users.create_user(name="Jane", role=Role.EMPLOYEE, pin_code="5678")
    entry_id = entries.create_open_entry(user_id=user_id, clock_in_time=_utc(2025, 1, 8, 9, 0))

    entries.update_with_audit(
        entry_id=entry_id,
        edited_by_user_id=admin_id,
        edited_at=_utc(2025, 1, 9),
        previous_clock_in=_utc(2025, 1, 8, 9, 0),
        previous_clock_out=None,
        clock_in_time=_utc(2025, 1, 8, 8, 0),
        clock_out_time=_utc(2025, 1, 8, 16, 0),
        total_hours=8.0,
    )

    [row] = entries.list_audits_for_entry(entry_id)
    assert row.editor_name == "Admin"
    assert row.audit.previous_clock_in == _utc(2025, 1, 8, 9, 0)
    assert row.audit.previous_clock_out is None
    assert entries.get_by_id(entry_id).is_edited is True


def test_deleting_user_cascades(sqlite_conn, users, entries):
    admin_id = users.create_user(name="Admin", role=Role.ADMIN, pin_code="1234")
    user_id = users.create_user(name="Jane", role=Role.EMPLOYEE, pin_code="5678")
    entry_id = entries.create_open_entry(user_id=user_id, clock_in_time=_utc(2025, 1, 8, 9, 0))
    entries.update_with_audit(
        entry_id=entry_id,
        edited_by_user_id=admin_id,
        edited_at=_utc(2025, 1, 9),
        previous_clock_in=_utc(2025, 1, 8, 9, 0),
        previous_clock_out=None,
        clock_in_time=_utc(2025, 1, 8, 8, 0),
        clock_out_time=None,
        total_hours=None,
    )
    schedules = SQLScheduleRepository(sqlite_conn)
    schedules.upsert_many([ScheduleDay(user_id, 1, 8.0)])

    assert users.delete_by_id(user_id)

    assert entries.get_by_id(entry_id) is None
    assert entries.list_audits(limit=10) == []
    assert schedules.list_for_users([user_id]) == []


def test_schedule_upsert_overwrites(sqlite_conn, users):
    user_id = users.create_user(name="Jane", role=Role.EMPLOYEE, pin_code="5678")
    schedules = SQLScheduleRepository(sqlite_conn)

    schedules.upsert_many([ScheduleDay(user_id, 1, 8.0), ScheduleDay(user_id, 2, 4.0)])
    schedules.upsert_many([ScheduleDay(user_id, 1, 6.0)])

    assert schedules.list_for_users([user_id]) == [ScheduleDay(user_id, 1, 6.0), ScheduleDay(user_id, 2, 4.0)]


def test_settings_set_get_delete(sqlite_conn):
    settings = SQLSettingsRepository(sqlite_conn)

    assert settings.get("timezone") is None
    settings.set("timezone", "UTC")
    settings.set("timezone", "Europe/Paris")
    assert settings.get("timezone") == "Europe/Paris"
    assert settings.delete("timezone") is True
    assert settings.get("timezone") is None
