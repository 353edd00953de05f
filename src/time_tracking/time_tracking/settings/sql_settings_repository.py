from __future__ import annotations

from typing import Optional

from ..database.connection import DatabaseConnection
from ..database.sql_base import db_cursor, fetchone
from .repository import SettingsRepository


class SQLSettingsRepository(SettingsRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self, key: str) -> Optional[str]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT setting_value FROM settings WHERE setting_key=%s", (key,))
            r = fetchone(cur)
            return str(r["setting_value"]) if r else None

    def set(self, key: str, value: str) -> None:
        if self._conn_factory.is_embedded:
            sql = """
                INSERT INTO settings(setting_key, setting_value) VALUES(%s,%s)
                ON CONFLICT(setting_key) DO UPDATE SET setting_value=excluded.setting_value
            """
        else:
            sql = """
                INSERT INTO settings(setting_key, setting_value) VALUES(%s,%s)
                ON DUPLICATE KEY UPDATE setting_value=VALUES(setting_value)
            """
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, (key, value))

    def delete(self, key: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM settings WHERE setting_key=%s", (key,))
            return cur.rowcount > 0
