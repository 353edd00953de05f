from __future__ import annotations

import sqlite3
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Optional, Sequence

import mysql.connector

ENGINE_SQLITE = "sqlite"
ENGINE_MYSQL = "mysql"

SQLITE_DATETIME_FORMAT = "%Y-%m-%d %H:%M:%S.%f"


@dataclass
class DBConfig:
    engine: str = ENGINE_SQLITE
    path: str = "timetracking.db"
    host: str = "localhost"
    port: int = 3306
    user: str = "root"
    password: str = ""
    database: str = "timetracking"

    @classmethod
    def from_dict(cls, db_config: dict) -> "DBConfig":
        return cls(
            engine=str(db_config.get("engine", ENGINE_SQLITE)).lower(),
            path=str(db_config.get("path", "timetracking.db")),
            host=str(db_config.get("host", "localhost")),
            port=int(db_config.get("port", 3306)),
            user=str(db_config.get("user", "root")),
            password=str(db_config.get("password", "")),
            database=str(db_config.get("database", "timetracking")),
        )

    def describe(self) -> str:
        if self.engine == ENGINE_SQLITE:
            return f"sqlite:{self.path}"
        return f"mysql:{self.user}@{self.host}:{self.port}/{self.database}"


def _dict_row(cursor, row) -> dict:
    return {col[0]: row[idx] for idx, col in enumerate(cursor.description)}


def _adapt_param(value: Any) -> Any:
    # Fixed-width text keeps lexical order == chronological order in SQLite.
    if isinstance(value, datetime):
        return value.strftime(SQLITE_DATETIME_FORMAT)
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, bool):
        return int(value)
    return value


class _SQLiteCursor:
    """Gives sqlite3 cursors the ``%s`` placeholder style used by the repositories."""

    def __init__(self, cursor: sqlite3.Cursor):
        self._cursor = cursor

    def execute(self, sql: str, params: Sequence[Any] = ()):
        return self._cursor.execute(sql.replace("%s", "?"), tuple(_adapt_param(p) for p in params))

    def __getattr__(self, name: str):
        return getattr(self._cursor, name)


class _SQLiteConnection:
    def __init__(self, conn: sqlite3.Connection):
        self._conn = conn

    def cursor(self, dictionary: bool = False) -> _SQLiteCursor:
        cur = self._conn.cursor()
        if dictionary:
            cur.row_factory = _dict_row
        return _SQLiteCursor(cur)

    def __getattr__(self, name: str):
        return getattr(self._conn, name)


class DatabaseConnection:
    """DB connection factory.

    Note: We create short-lived connections per operation (safe for simple Flask apps).
    One instance is built by the container and handed to every repository.
    """

    def __init__(self, config: DBConfig):
        self._config = config

    @property
    def config(self) -> DBConfig:
        return self._config

    @property
    def is_embedded(self) -> bool:
        """True for the file-based SQLite store."""
        return self._config.engine == ENGINE_SQLITE

    @property
    def integrity_errors(self) -> tuple[type[Exception], ...]:
        return (sqlite3.IntegrityError, mysql.connector.errors.IntegrityError)

    def connect(self):
        if self.is_embedded:
            conn = sqlite3.connect(self._config.path, timeout=10)
            conn.execute("PRAGMA foreign_keys = ON")
            return _SQLiteConnection(conn)

        if self._config.engine != ENGINE_MYSQL:
            raise ValueError(f"Unsupported database engine: {self._config.engine!r}")

        return mysql.connector.connect(
            host=self._config.host,
            port=int(self._config.port),
            user=self._config.user,
            password=self._config.password,
            database=self._config.database,
        )

    def connect_raw_sqlite(self) -> Optional[sqlite3.Connection]:
        """Plain sqlite3 connection (used for dumps); ``None`` for MySQL."""
        if not self.is_embedded:
            return None
        return sqlite3.connect(self._config.path, timeout=10)
