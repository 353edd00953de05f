from __future__ import annotations

import logging
from typing import Optional

from ..common.datetime_utils import resolve_zone
from ..common.validators import validate_day_of_week, validate_email
from ..core.constants import (
    DEFAULT_WEEK_START_DAY,
    SETTING_EMAIL_BODY,
    SETTING_EMAIL_RECIPIENT,
    SETTING_TIMEZONE,
    SETTING_WEEK_START_DAY,
)
from ..core.enums import Role
from ..database.export import SnapshotExporter
from ..users.service import require_admin
from .model import EmailReportSettings
from .repository import SettingsRepository

logger = logging.getLogger(__name__)


class SettingsService:
    """Admin settings: week start, display timezone, email report."""

    def __init__(
        self,
        settings: SettingsRepository,
        *,
        default_timezone: Optional[str] = None,
        exporter: Optional[SnapshotExporter] = None,
    ):
        self._settings = settings
        self._default_timezone = default_timezone or None
        self._exporter = exporter

    def _changed(self) -> None:
        if self._exporter is not None:
            self._exporter.schedule()

    def _put(self, key: str, value: Optional[str]) -> None:
        if value is None or value == "":
            self._settings.delete(key)
        else:
            self._settings.set(key, value)

    def get_week_start_day(self) -> int:
        """0 = Sunday ... 6 = Saturday. Missing or garbled values fall back to Sunday."""
        raw = self._settings.get(SETTING_WEEK_START_DAY)
        if raw is None:
            return DEFAULT_WEEK_START_DAY
        try:
            day = int(raw)
        except ValueError:
            return DEFAULT_WEEK_START_DAY
        return day if 0 <= day <= 6 else DEFAULT_WEEK_START_DAY

    def set_week_start_day(self, *, current_role: Role, day) -> int:
        require_admin(current_role)
        day = validate_day_of_week(day)
        self._settings.set(SETTING_WEEK_START_DAY, str(day))
        logger.info("Week start day set to %s", day)
        self._changed()
        return day

    def get_timezone(self) -> Optional[str]:
        """Stored IANA name, or None (use the server default)."""
        return self._settings.get(SETTING_TIMEZONE) or None

    def get_display_timezone(self) -> Optional[str]:
        """Timezone used for day bucketing and display: stored > configured default > server local (None)."""
        return self.get_timezone() or self._default_timezone

    def set_timezone(self, *, current_role: Role, tz_name: Optional[str]) -> Optional[str]:
        require_admin(current_role)
        tz_name = (tz_name or "").strip() or None
        if tz_name:
            resolve_zone(tz_name)
        self._put(SETTING_TIMEZONE, tz_name)
        logger.info("Display timezone set to %s", tz_name or "server default")
        self._changed()
        return tz_name

    def get_email_report(self) -> EmailReportSettings:
        return EmailReportSettings(
            recipient=self._settings.get(SETTING_EMAIL_RECIPIENT) or None,
            body=self._settings.get(SETTING_EMAIL_BODY) or None,
        )

    def set_email_report(self, *, current_role: Role, recipient: Optional[str], body: Optional[str]) -> EmailReportSettings:
        require_admin(current_role)
        recipient = validate_email(recipient)
        body = (body or "").strip() or None
        self._put(SETTING_EMAIL_RECIPIENT, recipient)
        self._put(SETTING_EMAIL_BODY, body)
        logger.info("Email report settings updated")
        self._changed()
        return EmailReportSettings(recipient=recipient, body=body)
