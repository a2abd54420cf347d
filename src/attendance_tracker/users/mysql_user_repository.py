from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict, Optional, Sequence

from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_decimal, as_int, db_cursor, fetchall, fetchone
from .model import User
from .repository import UserRepository

_COLUMNS = """
    user_id, name, username, password_hash, role, is_active,
    accumulated_overtime_minutes, accumulated_night_diff_minutes, mpl_credits
"""


def _to_user(row: Dict[str, Any]) -> User:
    return User(
        user_id=int(row["user_id"]),
        name=row["name"],
        username=row["username"],
        password_hash=row["password_hash"],
        role=Role(row["role"]),
        is_active=bool(row.get("is_active", True)),
        accumulated_overtime_minutes=as_int(row.get("accumulated_overtime_minutes")),
        accumulated_night_diff_minutes=as_int(row.get("accumulated_night_diff_minutes")),
        mpl_credits=as_decimal(row.get("mpl_credits")),
    )


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, user_id: int) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM users WHERE user_id=%s", (int(user_id),))
            row = fetchone(cur)
            return _to_user(row) if row else None

    def get_by_username(self, username: str) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM users WHERE username=%s", (username,))
            row = fetchone(cur)
            return _to_user(row) if row else None

    def list_admin_ids(self) -> Sequence[int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT user_id FROM users WHERE role=%s AND is_active=1", (Role.ADMIN.value,))
            return [int(r["user_id"]) for r in fetchall(cur)]

    def add_accumulators(self, *, user_id: int, overtime_minutes: int = 0, night_diff_minutes: int = 0) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE users
                SET accumulated_overtime_minutes = accumulated_overtime_minutes + %s,
                    accumulated_night_diff_minutes = accumulated_night_diff_minutes + %s
                WHERE user_id=%s
                """,
                (max(int(overtime_minutes), 0), max(int(night_diff_minutes), 0), int(user_id)),
            )
            return cur.rowcount > 0

    def add_mpl_credits(self, *, user_id: int, units: Decimal) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE users SET mpl_credits = mpl_credits + %s WHERE user_id=%s",
                (max(Decimal(units), Decimal(0)), int(user_id)),
            )
            return cur.rowcount > 0
