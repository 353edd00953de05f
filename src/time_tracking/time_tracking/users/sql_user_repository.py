from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.sql_base import db_cursor, fetchall, fetchone, to_float
from .model import User
from .repository import UserRepository

_COLUMNS = "user_id, name, role, pin_code, is_active, hourly_pay"


def _to_user(row: dict) -> User:
    return User(
        user_id=int(row["user_id"]),
        name=row["name"],
        role=Role(row["role"]),
        pin_code=str(row["pin_code"]),
        is_active=bool(row.get("is_active", True)),
        hourly_pay=to_float(row.get("hourly_pay")),
    )


class SQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, user_id: int) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM users WHERE user_id=%s", (int(user_id),))
            row = fetchone(cur)
            return _to_user(row) if row else None

    def find_first_by_pin(self, pin_code: str, *, role: Optional[Role] = None, active_only: bool = False) -> Optional[User]:
        clauses = ["pin_code=%s"]
        params: list[object] = [pin_code]
        if role is not None:
            clauses.append("role=%s")
            params.append(role.value)
        if active_only:
            clauses.append("is_active=1")

        where = " AND ".join(clauses)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM users WHERE {where} ORDER BY user_id ASC LIMIT 1",
                tuple(params),
            )
            row = fetchone(cur)
            return _to_user(row) if row else None

    def list_all(self) -> Sequence[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM users ORDER BY role ASC, name ASC")
            return [_to_user(r) for r in fetchall(cur)]

    def list_active_employees(self) -> Sequence[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM users WHERE role=%s AND is_active=1 ORDER BY name ASC",
                (Role.EMPLOYEE.value,),
            )
            return [_to_user(r) for r in fetchall(cur)]

    def create_user(self, *, name: str, role: Role, pin_code: str, hourly_pay: Optional[float] = None) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO users(name, role, pin_code, is_active, hourly_pay)
                VALUES(%s,%s,%s,1,%s)
                """,
                (name, role.value, pin_code, hourly_pay),
            )
            return int(cur.lastrowid)

    def update_user(self, user_id: int, *, name: str, hourly_pay: Optional[float]) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE users SET name=%s, hourly_pay=%s WHERE user_id=%s",
                (name, hourly_pay, int(user_id)),
            )
            return cur.rowcount > 0

    def set_active(self, user_id: int, *, is_active: bool) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE users SET is_active=%s WHERE user_id=%s", (1 if is_active else 0, int(user_id)))
            return cur.rowcount > 0

    def set_pin(self, user_id: int, *, pin_code: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE users SET pin_code=%s WHERE user_id=%s", (pin_code, int(user_id)))
            return cur.rowcount > 0

    def delete_by_id(self, user_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM users WHERE user_id=%s", (int(user_id),))
            return cur.rowcount > 0
