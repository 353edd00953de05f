from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterable

import mysql.connector

from .connection import DBConfig, DatabaseConnection

logger = logging.getLogger(__name__)

SCHEMA_DIR = Path(__file__).resolve().parents[4] / "database"

DEMO_USERS = (
    # name, role, pin
    ("Admin", "ADMIN", "1234"),
    ("Jane Employee", "EMPLOYEE", "5678"),
)


def schema_path_for(config: DBConfig) -> Path:
    return SCHEMA_DIR / f"schema.{config.engine}.sql"


def _strip_create_db_and_use(sql: str) -> str:
    # Keep schema files compatible regardless of DB name.
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)
    return sql


def _iter_sql_statements(sql: str) -> Iterable[str]:
    # Minimal SQL splitter for schema/seed files (handles ';' inside quotes).
    buf: list[str] = []
    in_single = False
    in_double = False
    escape = False

    for ch in sql:
        if escape:
            buf.append(ch)
            escape = False
            continue

        if ch == "\\":
            buf.append(ch)
            escape = True
            continue

        if ch == "'" and not in_double:
            in_single = not in_single
            buf.append(ch)
            continue

        if ch == '"' and not in_single:
            in_double = not in_double
            buf.append(ch)
            continue

        if ch == ";" and not in_single and not in_double:
            stmt = "".join(buf).strip()
            buf.clear()
            if stmt:
                yield stmt
            continue

        buf.append(ch)

    tail = "".join(buf).strip()
    if tail:
        yield tail


def ensure_database_exists(config: DBConfig) -> None:
    """Create the MySQL database if missing. SQLite creates its file on connect,
    so only the parent directory is made here."""
    if config.engine != "mysql":
        Path(config.path).parent.mkdir(parents=True, exist_ok=True)
        return

    conn = mysql.connector.connect(
        host=config.host,
        port=config.port,
        user=config.user,
        password=config.password,
        use_pure=True,
    )
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{config.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci;"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(conn_factory: DatabaseConnection, *, schema_path: str | Path | None = None) -> None:
    """Apply the schema file for the configured engine (idempotent: CREATE ... IF NOT EXISTS)."""
    config = conn_factory.config
    ensure_database_exists(config)

    schema_path = Path(schema_path) if schema_path else schema_path_for(config)
    sql = _strip_create_db_and_use(schema_path.read_text(encoding="utf-8"))

    conn = conn_factory.connect()
    try:
        cur = conn.cursor()
        for stmt in _iter_sql_statements(sql):
            cur.execute(stmt)
        conn.commit()
    finally:
        conn.close()
    logger.info("Schema applied from %s to %s", schema_path.name, config.describe())


def ensure_demo_users(conn_factory: DatabaseConnection) -> None:
    """Insert the demo admin/employee once (matched by name and role)."""
    conn = conn_factory.connect()
    try:
        cur = conn.cursor(dictionary=True)
        for name, role, pin in DEMO_USERS:
            cur.execute("SELECT user_id FROM users WHERE name=%s AND role=%s", (name, role))
            if cur.fetchone():
                continue
            cur.execute(
                "INSERT INTO users(name, role, pin_code, is_active) VALUES(%s,%s,%s,1)",
                (name, role, pin),
            )
            logger.info("Seeded demo user %s (%s)", name, role)
        conn.commit()
    finally:
        conn.close()


def list_tables(conn_factory: DatabaseConnection) -> list[str]:
    conn = conn_factory.connect()
    try:
        cur = conn.cursor()
        if conn_factory.is_embedded:
            cur.execute("SELECT name FROM sqlite_master WHERE type='table' AND name NOT LIKE 'sqlite_%' ORDER BY name")
        else:
            cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
    finally:
        conn.close()
