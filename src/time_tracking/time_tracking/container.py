from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .auth.session import AuthSession, SignedCookieSession
from .database.connection import DBConfig, DatabaseConnection
from .database.export import SnapshotExporter
from .reports.service import WeeklyReportService
from .schedules.service import ScheduleService
from .schedules.sql_schedule_repository import SQLScheduleRepository
from .settings.service import SettingsService
from .settings.sql_settings_repository import SQLSettingsRepository
from .time_entries.service import ClockService, ShiftService
from .time_entries.sql_time_entry_repository import SQLTimeEntryRepository
from .users.service import AuthService, UserService
from .users.sql_user_repository import SQLUserRepository


@dataclass(frozen=True)
class Container:
    conn: DatabaseConnection
    exporter: SnapshotExporter
    auth_session: AuthSession

    users_repo: SQLUserRepository
    entries_repo: SQLTimeEntryRepository
    schedules_repo: SQLScheduleRepository
    settings_repo: SQLSettingsRepository

    auth_service: AuthService
    user_service: UserService
    shift_service: ShiftService
    clock_service: ClockService
    schedule_service: ScheduleService
    settings_service: SettingsService
    report_service: WeeklyReportService


def build_container(
    *,
    db_config: dict,
    secret_key: str,
    export_dir: str = "exports",
    export_in_background: bool = True,
    default_timezone: Optional[str] = None,
) -> Container:
    conn = DatabaseConnection(DBConfig.from_dict(db_config))
    exporter = SnapshotExporter(conn, export_dir, background=export_in_background)

    users_repo = SQLUserRepository(conn)
    entries_repo = SQLTimeEntryRepository(conn)
    schedules_repo = SQLScheduleRepository(conn)
    settings_repo = SQLSettingsRepository(conn)

    auth_service = AuthService(users_repo)
    user_service = UserService(users_repo, exporter=exporter)
    shift_service = ShiftService(entries_repo, exporter=exporter)
    clock_service = ClockService(auth_service, shift_service)
    schedule_service = ScheduleService(schedules_repo, users_repo, exporter=exporter)
    settings_service = SettingsService(settings_repo, default_timezone=default_timezone, exporter=exporter)
    report_service = WeeklyReportService(entries_repo, users_repo, schedule_service, settings_service)

    return Container(
        conn=conn,
        exporter=exporter,
        auth_session=SignedCookieSession(secret_key),
        users_repo=users_repo,
        entries_repo=entries_repo,
        schedules_repo=schedules_repo,
        settings_repo=settings_repo,
        auth_service=auth_service,
        user_service=user_service,
        shift_service=shift_service,
        clock_service=clock_service,
        schedule_service=schedule_service,
        settings_service=settings_service,
        report_service=report_service,
    )
