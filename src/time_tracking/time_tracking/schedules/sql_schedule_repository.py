from __future__ import annotations

from typing import Iterable, Sequence

from ..database.connection import DatabaseConnection
from ..database.sql_base import db_cursor, fetchall
from .model import ScheduleDay
from .repository import ScheduleRepository

_UPSERT_SQLITE = """
    INSERT INTO schedules(user_id, day_of_week, hours)
    VALUES(%s,%s,%s)
    ON CONFLICT(user_id, day_of_week) DO UPDATE SET hours=excluded.hours
"""

_UPSERT_MYSQL = """
    INSERT INTO schedules(user_id, day_of_week, hours)
    VALUES(%s,%s,%s)
    ON DUPLICATE KEY UPDATE hours=VALUES(hours)
"""


class SQLScheduleRepository(ScheduleRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_for_users(self, user_ids: Iterable[int]) -> Sequence[ScheduleDay]:
        ids = [int(i) for i in user_ids]
        if not ids:
            return []

        placeholders = ",".join(["%s"] * len(ids))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT user_id, day_of_week, hours
                FROM schedules
                WHERE user_id IN ({placeholders})
                ORDER BY user_id ASC, day_of_week ASC
                """,
                tuple(ids),
            )
            return [
                ScheduleDay(user_id=int(r["user_id"]), day_of_week=int(r["day_of_week"]), hours=float(r["hours"]))
                for r in fetchall(cur)
            ]

    def upsert_many(self, days: Iterable[ScheduleDay]) -> int:
        sql = _UPSERT_SQLITE if self._conn_factory.is_embedded else _UPSERT_MYSQL
        written = 0
        with db_cursor(self._conn_factory) as (_, cur):
            for d in days:
                cur.execute(sql, (int(d.user_id), int(d.day_of_week), float(d.hours)))
                written += 1
        return written
