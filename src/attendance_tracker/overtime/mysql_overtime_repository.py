from __future__ import annotations

from datetime import date, datetime, time
from typing import Any, Dict, Optional, Sequence

from ..core.enums import OvertimeRequestStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_int, db_cursor, fetchall, fetchone, lock_clause, normalize_mysql_time
from .model import OvertimeConfig, OvertimeRequest
from .repository import OvertimeConfigRepository, OvertimeRepository

_REQUEST_COLUMNS = """
    request_id, user_id, work_date, start_time, end_time, reason, expected_output,
    status, reviewed_by, rejection_reason, created_at, updated_at
"""


def _to_request(r: Dict[str, Any]) -> OvertimeRequest:
    return OvertimeRequest(
        request_id=int(r["request_id"]),
        user_id=int(r["user_id"]),
        work_date=r["work_date"],
        start_time=normalize_mysql_time(r["start_time"]),
        end_time=normalize_mysql_time(r["end_time"]),
        reason=r.get("reason") or "",
        expected_output=r.get("expected_output"),
        status=OvertimeRequestStatus(r["status"]),
        reviewed_by=int(r["reviewed_by"]) if r.get("reviewed_by") is not None else None,
        rejection_reason=r.get("rejection_reason"),
        created_at=r["created_at"],
        updated_at=r.get("updated_at"),
    )


class MySQLOvertimeConfigRepository(OvertimeConfigRepository):
    """The configuration lives in a single row with config_id=1."""

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self) -> Optional[OvertimeConfig]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT office_start_time, office_end_time, break_max_minutes,
                       night_diff_start_time, night_diff_end_time, overtime_daily_max_minutes, updated_at
                FROM overtime_config
                WHERE config_id=1{lock_clause()}
                """
            )
            r = fetchone(cur)
            if not r:
                return None
            return OvertimeConfig(
                office_start_time=normalize_mysql_time(r["office_start_time"]),
                office_end_time=normalize_mysql_time(r["office_end_time"]),
                break_max_minutes=as_int(r["break_max_minutes"]),
                night_diff_start_time=normalize_mysql_time(r["night_diff_start_time"]),
                night_diff_end_time=normalize_mysql_time(r["night_diff_end_time"]),
                overtime_daily_max_minutes=as_int(r["overtime_daily_max_minutes"]),
                updated_at=r.get("updated_at"),
            )

    def save(self, config: OvertimeConfig) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE overtime_config
                SET office_start_time=%s, office_end_time=%s, break_max_minutes=%s,
                    night_diff_start_time=%s, night_diff_end_time=%s, overtime_daily_max_minutes=%s,
                    updated_at=%s
                WHERE config_id=1
                """,
                (
                    config.office_start_time,
                    config.office_end_time,
                    int(config.break_max_minutes),
                    config.night_diff_start_time,
                    config.night_diff_end_time,
                    int(config.overtime_daily_max_minutes),
                    config.updated_at,
                ),
            )
            return cur.rowcount > 0


class MySQLOvertimeRepository(OvertimeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(
        self,
        *,
        user_id: int,
        work_date: date,
        start_time: time,
        end_time: time,
        reason: str,
        expected_output: Optional[str],
        created_at: datetime,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO overtime_requests(user_id, work_date, start_time, end_time, reason, expected_output, created_at)
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                (int(user_id), work_date, start_time, end_time, reason, expected_output, created_at),
            )
            return int(cur.lastrowid)

    def get_by_id(self, request_id: int) -> Optional[OvertimeRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_REQUEST_COLUMNS} FROM overtime_requests WHERE request_id=%s{lock_clause()}",
                (int(request_id),),
            )
            r = fetchone(cur)
            return _to_request(r) if r else None

    def get_approved_for(self, *, user_id: int, work_date: date) -> Optional[OvertimeRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_REQUEST_COLUMNS}
                FROM overtime_requests
                WHERE user_id=%s AND work_date=%s AND status='APPROVED'
                ORDER BY updated_at DESC, request_id DESC
                LIMIT 1
                """,
                (int(user_id), work_date),
            )
            r = fetchone(cur)
            return _to_request(r) if r else None

    def save(self, request: OvertimeRequest) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE overtime_requests
                SET work_date=%s, start_time=%s, end_time=%s, reason=%s, expected_output=%s,
                    status=%s, reviewed_by=%s, rejection_reason=%s, updated_at=%s
                WHERE request_id=%s
                """,
                (
                    request.work_date,
                    request.start_time,
                    request.end_time,
                    request.reason,
                    request.expected_output,
                    request.status.value,
                    request.reviewed_by,
                    request.rejection_reason,
                    request.updated_at,
                    int(request.request_id),
                ),
            )
            return cur.rowcount > 0

    def list_requests(
        self,
        *,
        status: Optional[OvertimeRequestStatus] = None,
        user_id: Optional[int] = None,
        limit: int = 200,
    ) -> Sequence[OvertimeRequest]:
        clauses: list[str] = []
        params: list[object] = []
        if status is not None:
            clauses.append("status=%s")
            params.append(status.value)
        if user_id is not None:
            clauses.append("user_id=%s")
            params.append(int(user_id))
        where = ("WHERE " + " AND ".join(clauses)) if clauses else ""
        params.append(int(limit))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_REQUEST_COLUMNS}
                FROM overtime_requests
                {where}
                ORDER BY created_at DESC
                LIMIT %s
                """,
                tuple(params),
            )
            return [_to_request(r) for r in fetchall(cur)]
