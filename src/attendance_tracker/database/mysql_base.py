from __future__ import annotations

from contextlib import contextmanager
from contextvars import ContextVar
from datetime import time, timedelta
from decimal import Decimal
from typing import Any, Dict, Iterator, List, Optional

from .connection import DatabaseConnection

# Connection owned by the innermost open `transaction()` block, if any.
_active_conn: ContextVar[Optional[Any]] = ContextVar("attendance_tracker_active_conn", default=None)


def in_transaction() -> bool:
    return _active_conn.get() is not None


@contextmanager
def transaction(conn_factory: DatabaseConnection) -> Iterator[Any]:
    """One connection for every repository call in the block.

    Commits on exit, rolls back on error. Nested blocks join the outer one.
    """
    shared = _active_conn.get()
    if shared is not None:
        yield shared
        return

    conn = conn_factory.connect()
    token = _active_conn.set(conn)
    try:
        conn.start_transaction()
        yield conn
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        _active_conn.reset(token)
        conn.close()


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    shared = _active_conn.get()
    if shared is not None:
        cur = shared.cursor(dictionary=dictionary)
        try:
            yield shared, cur
        finally:
            cur.close()
        return

    conn = conn_factory.connect()
    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def lock_clause() -> str:
    """Row lock suffix for reads that precede a write in the same transaction."""
    return " FOR UPDATE" if in_transaction() else ""


def fetchone(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return row if row else None


def fetchall(cur) -> List[Dict[str, Any]]:
    rows = cur.fetchall()
    return list(rows or [])


def as_int(value: Any, default: int = 0) -> int:
    return default if value is None else int(value)


def as_decimal(value: Any) -> Decimal:
    if value is None:
        return Decimal("0")
    return value if isinstance(value, Decimal) else Decimal(str(value))


def normalize_mysql_time(value: Any) -> Optional[time]:
    """Normalize MySQL TIME values across connector implementations.

    mysql-connector can return TIME as:
    - datetime.time
    - datetime.timedelta
    - string (e.g. '08:30:00')
    """

    if value is None:
        return None

    if isinstance(value, time):
        return value

    if isinstance(value, timedelta):
        total_seconds = int(value.total_seconds()) % 86400
        hours = total_seconds // 3600
        minutes = (total_seconds % 3600) // 60
        seconds = total_seconds % 60
        return time(hour=hours, minute=minutes, second=seconds)

    if isinstance(value, str):
        parts = value.strip().split(":")
        if len(parts) < 2:
            raise ValueError(f"Invalid time string: {value!r}")
        hours = int(parts[0])
        minutes = int(parts[1])
        seconds = int(parts[2]) if len(parts) >= 3 and parts[2] else 0
        return time(hour=hours, minute=minutes, second=seconds)

    raise TypeError(f"Unsupported MySQL TIME value type: {type(value)!r}")
