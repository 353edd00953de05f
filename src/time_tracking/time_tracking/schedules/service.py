from __future__ import annotations

import logging
from typing import Iterable, Mapping, Optional, Sequence

from ..common.validators import parse_hours, validate_day_of_week
from ..core.enums import Role
from ..core.exceptions import ValidationError
from ..database.export import SnapshotExporter
from ..users.repository import UserRepository
from ..users.service import require_admin
from .model import ScheduleDay, ScheduleGridRow
from .repository import ScheduleRepository

logger = logging.getLogger(__name__)

EMPTY_WEEK = (0.0,) * 7


class ScheduleService:
    def __init__(
        self,
        schedules: ScheduleRepository,
        users: UserRepository,
        *,
        exporter: Optional[SnapshotExporter] = None,
    ):
        self._schedules = schedules
        self._users = users
        self._exporter = exporter

    def hours_by_user(self, user_ids: Iterable[int]) -> dict[int, tuple[float, ...]]:
        """Expected hours indexed by day of week (0=Sunday), per user id."""
        out: dict[int, list[float]] = {}
        for d in self._schedules.list_for_users(user_ids):
            if 0 <= d.day_of_week <= 6:
                out.setdefault(d.user_id, list(EMPTY_WEEK))[d.day_of_week] = d.hours
        return {user_id: tuple(days) for user_id, days in out.items()}

    def get_grid(self, *, current_role: Role) -> Sequence[ScheduleGridRow]:
        """Active employees (sorted by name) with their weekly schedule; zeros when unset."""
        require_admin(current_role)
        employees = self._users.list_active_employees()
        by_user = self.hours_by_user(u.user_id for u in employees)
        return [
            ScheduleGridRow(user_id=u.user_id, user_name=u.name, by_day=by_user.get(u.user_id, EMPTY_WEEK))
            for u in employees
        ]

    def set_grid(self, *, current_role: Role, updates: Iterable[Mapping]) -> int:
        """Upsert ``{"user_id", "day_of_week", "hours"}`` items; all or nothing."""
        require_admin(current_role)

        days: list[ScheduleDay] = []
        for item in updates:
            try:
                user_id = int(item["user_id"])
            except (KeyError, TypeError, ValueError):
                raise ValidationError("Invalid employee")
            days.append(
                ScheduleDay(
                    user_id=user_id,
                    day_of_week=validate_day_of_week(item.get("day_of_week")),
                    hours=parse_hours(item.get("hours")),
                )
            )

        if not days:
            return 0

        written = self._schedules.upsert_many(days)
        logger.info("Schedule grid saved (%d cells)", written)
        if self._exporter is not None:
            self._exporter.schedule()
        return written
