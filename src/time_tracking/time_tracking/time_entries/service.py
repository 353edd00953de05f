from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional, Sequence

from ..common.datetime_utils import ensure_utc, hours_between, now_utc
from ..core.constants import RECENT_AUDITS_LIMIT, RECENT_ENTRIES_LIMIT
from ..core.enums import Role
from ..core.exceptions import EntryNotFound, NoOpenShift, ShiftAlreadyOpen
from ..database.export import SnapshotExporter
from ..users.model import User
from ..users.service import AuthService, require_admin
from .model import ActiveShiftRow, AuditRow, EntryRow, TimeEntry
from .repository import TimeEntryRepository

logger = logging.getLogger(__name__)


class ShiftService:
    """Shift engine: clock in/out, status, and audited manual edits.

    All instants are UTC. ``clock`` is injectable so tests can pin "now".
    """

    def __init__(
        self,
        entries: TimeEntryRepository,
        *,
        exporter: Optional[SnapshotExporter] = None,
        clock: Callable[[], datetime] = now_utc,
    ):
        self._entries = entries
        self._exporter = exporter
        self._clock = clock

    def _now(self, now: Optional[datetime]) -> datetime:
        return ensure_utc(now) if now is not None else self._clock()

    def _changed(self) -> None:
        if self._exporter is not None:
            self._exporter.schedule()

    def get_status(self, user: User) -> Optional[TimeEntry]:
        return self._entries.get_open_for_user(user.user_id)

    def clock_in(self, user: User, *, now: Optional[datetime] = None) -> TimeEntry:
        if self._entries.get_open_for_user(user.user_id):
            raise ShiftAlreadyOpen()

        clock_in_time = self._now(now)
        entry_id = self._entries.create_open_entry(user_id=user.user_id, clock_in_time=clock_in_time)
        if entry_id is None:
            # Lost a race with a concurrent clock-in; the unique index kept the invariant.
            raise ShiftAlreadyOpen()

        logger.info("Clock IN user=%s entry=%s at %s", user.user_id, entry_id, clock_in_time.isoformat())
        self._changed()
        return TimeEntry(entry_id=entry_id, user_id=user.user_id, clock_in_time=clock_in_time)

    def clock_out(self, user: User, *, now: Optional[datetime] = None) -> TimeEntry:
        entry = self._entries.get_open_for_user(user.user_id)
        if not entry:
            raise NoOpenShift()

        clock_out_time = self._now(now)
        total_hours = hours_between(entry.clock_in_time, clock_out_time)
        if not self._entries.close_entry(entry_id=entry.entry_id, clock_out_time=clock_out_time, total_hours=total_hours):
            raise NoOpenShift()

        logger.info("Clock OUT user=%s entry=%s hours=%.2f", user.user_id, entry.entry_id, total_hours)
        self._changed()
        return TimeEntry(
            entry_id=entry.entry_id,
            user_id=entry.user_id,
            clock_in_time=entry.clock_in_time,
            clock_out_time=clock_out_time,
            total_hours=total_hours,
            is_edited=entry.is_edited,
        )

    def edit_entry(
        self,
        *,
        current_role: Role,
        entry_id: int,
        editor_id: int,
        new_clock_in: datetime,
        new_clock_out: Optional[datetime] = None,
        now: Optional[datetime] = None,
    ) -> TimeEntry:
        """Overwrite an entry's times, recording the previous values first.

        Note: clock-out before clock-in is accepted and yields negative hours.
        """
        require_admin(current_role)

        entry = self._entries.get_by_id(int(entry_id))
        if not entry:
            raise EntryNotFound()

        if new_clock_out is None:
            current = self._entries.get_open_for_user(entry.user_id)
            if current and current.entry_id != entry.entry_id:
                raise ShiftAlreadyOpen("This employee already has an active shift")

        clock_in = ensure_utc(new_clock_in)
        clock_out = ensure_utc(new_clock_out) if new_clock_out is not None else None
        total_hours = hours_between(clock_in, clock_out) if clock_out is not None else None
        if total_hours is not None and total_hours < 0:
            logger.warning("Entry %s edited with clock-out before clock-in (%.2f h)", entry.entry_id, total_hours)

        audit_id = self._entries.update_with_audit(
            entry_id=entry.entry_id,
            edited_by_user_id=int(editor_id),
            edited_at=self._now(now),
            previous_clock_in=entry.clock_in_time,
            previous_clock_out=entry.clock_out_time,
            clock_in_time=clock_in,
            clock_out_time=clock_out,
            total_hours=total_hours,
        )

        logger.info("Entry %s edited by %s (audit=%s)", entry.entry_id, editor_id, audit_id)
        self._changed()
        return TimeEntry(
            entry_id=entry.entry_id,
            user_id=entry.user_id,
            clock_in_time=clock_in,
            clock_out_time=clock_out,
            total_hours=total_hours,
            is_edited=True,
        )

    def list_recent(self, *, limit: int = RECENT_ENTRIES_LIMIT) -> Sequence[EntryRow]:
        return self._entries.list_recent(limit=limit)

    def list_audits(self, *, limit: int = RECENT_AUDITS_LIMIT) -> Sequence[AuditRow]:
        return self._entries.list_audits(limit=limit)

    def list_active_now(self) -> Sequence[ActiveShiftRow]:
        return self._entries.list_open()


@dataclass(frozen=True)
class ClockStatus:
    user: User
    active_entry: Optional[TimeEntry]


class ClockService:
    """Employee-facing actions: identify by PIN (optionally with the selected
    employee id), then hand over to the shift engine."""

    def __init__(self, auth: AuthService, shifts: ShiftService):
        self._auth = auth
        self._shifts = shifts

    def _identify(self, pin_code: str, user_id: Optional[int]) -> User:
        if user_id is not None:
            return self._auth.resolve_pin_for_user(int(user_id), pin_code)
        return self._auth.resolve_pin(pin_code)

    def status(self, pin_code: str, user_id: Optional[int] = None) -> ClockStatus:
        user = self._identify(pin_code, user_id)
        return ClockStatus(user=user, active_entry=self._shifts.get_status(user))

    def clock_in(self, pin_code: str, user_id: Optional[int] = None, *, now: Optional[datetime] = None) -> TimeEntry:
        user = self._identify(pin_code, user_id)
        return self._shifts.clock_in(user, now=now)

    def clock_out(self, pin_code: str, user_id: Optional[int] = None, *, now: Optional[datetime] = None) -> TimeEntry:
        user = self._identify(pin_code, user_id)
        return self._shifts.clock_out(user, now=now)
