from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional, Sequence

from ..core.exceptions import ShiftAlreadyOpen
from ..database.connection import DatabaseConnection
from ..database.sql_base import db_cursor, fetchall, fetchone, from_db_datetime, to_db_datetime, to_float
from .model import ActiveShiftRow, AuditLog, AuditRow, ClosedShiftRow, EntryRow, TimeEntry
from .repository import TimeEntryRepository

logger = logging.getLogger(__name__)

_ENTRY_COLUMNS = "te.entry_id, te.user_id, te.clock_in_time, te.clock_out_time, te.total_hours, te.is_edited"
_AUDIT_COLUMNS = (
    "al.audit_id, al.entry_id, al.edited_by_user_id, al.edited_at, al.previous_clock_in, al.previous_clock_out"
)


def _to_entry(r: dict) -> TimeEntry:
    return TimeEntry(
        entry_id=int(r["entry_id"]),
        user_id=int(r["user_id"]),
        clock_in_time=from_db_datetime(r["clock_in_time"]),
        clock_out_time=from_db_datetime(r.get("clock_out_time")),
        total_hours=to_float(r.get("total_hours")),
        is_edited=bool(r.get("is_edited")),
    )


def _to_audit(r: dict) -> AuditLog:
    return AuditLog(
        audit_id=int(r["audit_id"]),
        entry_id=int(r["entry_id"]),
        edited_by_user_id=int(r["edited_by_user_id"]),
        edited_at=from_db_datetime(r["edited_at"]),
        previous_clock_in=from_db_datetime(r["previous_clock_in"]),
        previous_clock_out=from_db_datetime(r.get("previous_clock_out")),
    )


class SQLTimeEntryRepository(TimeEntryRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, entry_id: int) -> Optional[TimeEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_ENTRY_COLUMNS} FROM time_entries te WHERE te.entry_id=%s", (int(entry_id),))
            r = fetchone(cur)
            return _to_entry(r) if r else None

    def get_open_for_user(self, user_id: int) -> Optional[TimeEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_ENTRY_COLUMNS}
                FROM time_entries te
                WHERE te.user_id=%s AND te.clock_out_time IS NULL
                ORDER BY te.clock_in_time DESC
                LIMIT 1
                """,
                (int(user_id),),
            )
            r = fetchone(cur)
            return _to_entry(r) if r else None

    def create_open_entry(self, *, user_id: int, clock_in_time: datetime) -> Optional[int]:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO time_entries(user_id, clock_in_time, clock_out_time, total_hours, is_edited)
                    VALUES(%s,%s,NULL,NULL,0)
                    """,
                    (int(user_id), to_db_datetime(clock_in_time)),
                )
                return int(cur.lastrowid)
        except self._conn_factory.integrity_errors as e:
            logger.info("Open-shift constraint rejected clock-in for user %s: %s", user_id, e)
            return None

    def close_entry(self, *, entry_id: int, clock_out_time: datetime, total_hours: float) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE time_entries
                SET clock_out_time=%s, total_hours=%s
                WHERE entry_id=%s AND clock_out_time IS NULL
                """,
                (to_db_datetime(clock_out_time), total_hours, int(entry_id)),
            )
            return cur.rowcount > 0

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
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO audit_logs(entry_id, edited_by_user_id, edited_at, previous_clock_in, previous_clock_out)
                    VALUES(%s,%s,%s,%s,%s)
                    """,
                    (
                        int(entry_id),
                        int(edited_by_user_id),
                        to_db_datetime(edited_at),
                        to_db_datetime(previous_clock_in),
                        to_db_datetime(previous_clock_out),
                    ),
                )
                audit_id = int(cur.lastrowid)
                cur.execute(
                    """
                    UPDATE time_entries
                    SET clock_in_time=%s, clock_out_time=%s, total_hours=%s, is_edited=1
                    WHERE entry_id=%s
                    """,
                    (to_db_datetime(clock_in_time), to_db_datetime(clock_out_time), total_hours, int(entry_id)),
                )
                return audit_id
        except self._conn_factory.integrity_errors as e:
            if clock_out_time is not None:
                raise
            # Reopening would give the user a second open shift.
            logger.info("Open-shift constraint rejected edit of entry %s: %s", entry_id, e)
            raise ShiftAlreadyOpen("This employee already has an active shift") from e

    def list_recent(self, *, limit: int) -> Sequence[EntryRow]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_ENTRY_COLUMNS}, u.name AS user_name
                FROM time_entries te
                JOIN users u ON u.user_id = te.user_id
                ORDER BY te.clock_in_time DESC
                LIMIT %s
                """,
                (int(limit),),
            )
            return [EntryRow(entry=_to_entry(r), user_name=r["user_name"]) for r in fetchall(cur)]

    def list_open(self) -> Sequence[ActiveShiftRow]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT te.user_id, u.name AS user_name, u.pin_code, te.clock_in_time
                FROM time_entries te
                JOIN users u ON u.user_id = te.user_id
                WHERE te.clock_out_time IS NULL
                ORDER BY te.clock_in_time ASC
                """
            )
            return [
                ActiveShiftRow(
                    user_id=int(r["user_id"]),
                    user_name=r["user_name"],
                    clock_in_time=from_db_datetime(r["clock_in_time"]),
                    pin_length=len(str(r["pin_code"])),
                )
                for r in fetchall(cur)
            ]

    def list_closed_between(self, *, start: datetime, end: datetime) -> Sequence[ClosedShiftRow]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT te.user_id, u.name AS user_name, te.clock_in_time, te.total_hours
                FROM time_entries te
                JOIN users u ON u.user_id = te.user_id
                WHERE te.clock_in_time >= %s AND te.clock_in_time < %s
                  AND te.clock_out_time IS NOT NULL
                ORDER BY te.clock_in_time ASC
                """,
                (to_db_datetime(start), to_db_datetime(end)),
            )
            return [
                ClosedShiftRow(
                    user_id=int(r["user_id"]),
                    user_name=r["user_name"],
                    clock_in_time=from_db_datetime(r["clock_in_time"]),
                    total_hours=to_float(r.get("total_hours")) or 0.0,
                )
                for r in fetchall(cur)
            ]

    def list_audits(self, *, limit: int) -> Sequence[AuditRow]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_AUDIT_COLUMNS}, u.name AS editor_name
                FROM audit_logs al
                LEFT JOIN users u ON u.user_id = al.edited_by_user_id
                ORDER BY al.edited_at DESC
                LIMIT %s
                """,
                (int(limit),),
            )
            return [AuditRow(audit=_to_audit(r), editor_name=r.get("editor_name") or "-") for r in fetchall(cur)]

    def list_audits_for_entry(self, entry_id: int) -> Sequence[AuditRow]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_AUDIT_COLUMNS}, u.name AS editor_name
                FROM audit_logs al
                LEFT JOIN users u ON u.user_id = al.edited_by_user_id
                WHERE al.entry_id=%s
                ORDER BY al.audit_id ASC
                """,
                (int(entry_id),),
            )
            return [AuditRow(audit=_to_audit(r), editor_name=r.get("editor_name") or "-") for r in fetchall(cur)]
