from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Any, Dict, Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_decimal, as_int, db_cursor, fetchall, fetchone
from .model import OvertimeMplConversion
from .repository import MplConversionRepository

_COLUMNS = """
    conversion_id, user_id, cutoff_start, cutoff_end, total_overtime_hours,
    mpl_converted, residual_overtime_hours, conversion_date, converted_by
"""


def _to_conversion(r: Dict[str, Any]) -> OvertimeMplConversion:
    return OvertimeMplConversion(
        conversion_id=int(r["conversion_id"]),
        user_id=int(r["user_id"]),
        cutoff_start=r["cutoff_start"],
        cutoff_end=r["cutoff_end"],
        total_overtime_hours=as_decimal(r["total_overtime_hours"]),
        mpl_converted=as_int(r["mpl_converted"]),
        residual_overtime_hours=as_decimal(r["residual_overtime_hours"]),
        conversion_date=r["conversion_date"],
        converted_by=int(r["converted_by"]) if r.get("converted_by") is not None else None,
    )


class MySQLMplConversionRepository(MplConversionRepository):
    """Append-only: rows are inserted and read, never updated."""

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def sum_converted(self, *, user_id: int, cutoff_start: date, cutoff_end: date) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT COALESCE(SUM(mpl_converted), 0) AS total
                FROM overtime_mpl_conversions
                WHERE user_id=%s AND cutoff_start=%s AND cutoff_end=%s
                """,
                (int(user_id), cutoff_start, cutoff_end),
            )
            r = fetchone(cur)
            return as_int(r["total"]) if r else 0

    def sum_converted_overlapping(self, *, user_id: int, start_date: date, end_date: date) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT COALESCE(SUM(mpl_converted), 0) AS total
                FROM overtime_mpl_conversions
                WHERE user_id=%s AND cutoff_start <= %s AND cutoff_end >= %s
                """,
                (int(user_id), end_date, start_date),
            )
            r = fetchone(cur)
            return as_int(r["total"]) if r else 0

    def append(
        self,
        *,
        user_id: int,
        cutoff_start: date,
        cutoff_end: date,
        total_overtime_hours: Decimal,
        mpl_converted: int,
        residual_overtime_hours: Decimal,
        conversion_date: datetime,
        converted_by: Optional[int],
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO overtime_mpl_conversions(
                    user_id, cutoff_start, cutoff_end, total_overtime_hours,
                    mpl_converted, residual_overtime_hours, conversion_date, converted_by
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(user_id),
                    cutoff_start,
                    cutoff_end,
                    total_overtime_hours,
                    int(mpl_converted),
                    residual_overtime_hours,
                    conversion_date,
                    converted_by,
                ),
            )
            return int(cur.lastrowid)

    def get_by_id(self, conversion_id: int) -> Optional[OvertimeMplConversion]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM overtime_mpl_conversions WHERE conversion_id=%s",
                (int(conversion_id),),
            )
            r = fetchone(cur)
            return _to_conversion(r) if r else None

    def list_for_user(self, user_id: int, *, limit: int = 200) -> Sequence[OvertimeMplConversion]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM overtime_mpl_conversions
                WHERE user_id=%s
                ORDER BY conversion_date DESC
                LIMIT %s
                """,
                (int(user_id), int(limit)),
            )
            return [_to_conversion(r) for r in fetchall(cur)]

    def list_within(self, *, start_date: date, end_date: date, limit: int = 200) -> Sequence[OvertimeMplConversion]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM overtime_mpl_conversions
                WHERE cutoff_start >= %s AND cutoff_end <= %s
                ORDER BY conversion_date DESC
                LIMIT %s
                """,
                (start_date, end_date, int(limit)),
            )
            return [_to_conversion(r) for r in fetchall(cur)]
