from __future__ import annotations

from typing import Optional

import pytest

from src.time_tracking.time_tracking.core.constants import SETTING_TIMEZONE
from src.time_tracking.time_tracking.core.enums import Role
from src.time_tracking.time_tracking.core.exceptions import NotAuthorized, ValidationError
from src.time_tracking.time_tracking.settings.service import SettingsService


class InMemorySettings:
    def __init__(self):
        self.values: dict[str, str] = {}

    def get(self, key: str) -> Optional[str]:
        return self.values.get(key)

    def set(self, key: str, value: str) -> None:
        self.values[key] = value

    def delete(self, key: str) -> bool:
        return self.values.pop(key, None) is not None


def test_week_start_round_trip_and_validation():
    svc = SettingsService(InMemorySettings())
    assert svc.get_week_start_day() == 0

    svc.set_week_start_day(current_role=Role.ADMIN, day="1")
    assert svc.get_week_start_day() == 1

    with pytest.raises(ValidationError):
        svc.set_week_start_day(current_role=Role.ADMIN, day=7)
    with pytest.raises(NotAuthorized):
        svc.set_week_start_day(current_role=Role.EMPLOYEE, day=2)


def test_timezone_fallback_order():
    repo = InMemorySettings()
    svc = SettingsService(repo, default_timezone="Europe/Berlin")
    assert svc.get_timezone() is None
    assert svc.get_display_timezone() == "Europe/Berlin"

    svc.set_timezone(current_role=Role.ADMIN, tz_name="America/Chicago")
    assert svc.get_display_timezone() == "America/Chicago"

    svc.set_timezone(current_role=Role.ADMIN, tz_name="  ")
    assert SETTING_TIMEZONE not in repo.values
    assert svc.get_display_timezone() == "Europe/Berlin"


def test_unknown_timezone_is_rejected():
    svc = SettingsService(InMemorySettings())
    with pytest.raises(ValidationError):
        svc.set_timezone(current_role=Role.ADMIN, tz_name="Mars/Olympus_Mons")


def test_email_report_settings():
    svc = SettingsService(InMemorySettings())
    assert svc.get_email_report().recipient is None

    svc.set_email_report(current_role=Role.ADMIN, recipient="boss@example.com", body="Weekly hours")
    saved = svc.get_email_report()
    assert saved.recipient == "boss@example.com"
    assert saved.body == "Weekly hours"

    with pytest.raises(ValidationError):
        svc.set_email_report(current_role=Role.ADMIN, recipient="not-an-email", body=None)
