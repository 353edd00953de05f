from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from .model import ActiveShiftRow, AuditRow, ClosedShiftRow, EntryRow, TimeEntry


class TimeEntryRepository(Protocol):
    def get_by_id(self, entry_id: int) -> Optional[TimeEntry]:
        raise NotImplementedError

    def get_open_for_user(self, user_id: int) -> Optional[TimeEntry]:
        """Most recent open entry (clock_in_time DESC)."""

        raise NotImplementedError

    def create_open_entry(self, *, user_id: int, clock_in_time: datetime) -> Optional[int]:
        """Insert an open entry.

        Returns None when the storage-level "one open entry per user" constraint
        rejects the insert.
        """

        raise NotImplementedError

    def close_entry(self, *, entry_id: int, clock_out_time: datetime, total_hours: float) -> bool:
        """Close an entry that is still open; False if it was closed meanwhile."""

        raise NotImplementedError

    def update_with_audit(
        self,
        *,
        entry_id: int,
        edited_by_user_id: int,
        edited_at: datetime,
        previous_clock_in: datetime,
        previous_clock_out: Optional[datetime],
        clock_in_time: datetime,
        clock_out_time: Optional[datetime],
        total_hours: Optional[float],
    ) -> int:
        """Write the audit row and overwrite the entry in one transaction. Returns audit_id."""

        raise NotImplementedError

    def list_recent(self, *, limit: int) -> Sequence[EntryRow]:
        raise NotImplementedError

    def list_open(self) -> Sequence[ActiveShiftRow]:
        raise NotImplementedError

    def list_closed_between(self, *, start: datetime, end: datetime) -> Sequence[ClosedShiftRow]:
        """Closed entries with start <= clock_in_time < end."""

        raise NotImplementedError

    def list_audits(self, *, limit: int) -> Sequence[AuditRow]:
        raise NotImplementedError

    def list_audits_for_entry(self, entry_id: int) -> Sequence[AuditRow]:
        raise NotImplementedError
