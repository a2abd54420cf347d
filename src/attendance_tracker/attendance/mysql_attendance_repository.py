from __future__ import annotations

from datetime import date, datetime
from typing import Any, Dict, Optional, Sequence

from ..core.enums import AttendanceStatus, VisibilityStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_int, db_cursor, fetchall, fetchone, lock_clause
from .model import AttendanceRecord, AttendanceReportRow
from .repository import AttendanceRepository

_COLUMNS = """
    attendance_id, user_id, work_date, clock_in, clock_out, break_start, break_finish,
    status, late_minutes, overtime_minutes, night_diff_minutes,
    accrued_overtime_minutes, accrued_night_diff_minutes, visibility, remarks, updated_at
"""


def _to_record(r: Dict[str, Any]) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=int(r["attendance_id"]),
        user_id=int(r["user_id"]),
        work_date=r["work_date"],
        clock_in=r.get("clock_in"),
        clock_out=r.get("clock_out"),
        break_start=r.get("break_start"),
        break_finish=r.get("break_finish"),
        status=AttendanceStatus(r["status"]),
        late_minutes=as_int(r.get("late_minutes")),
        overtime_minutes=as_int(r.get("overtime_minutes")),
        night_diff_minutes=as_int(r.get("night_diff_minutes")),
        accrued_overtime_minutes=as_int(r.get("accrued_overtime_minutes")),
        accrued_night_diff_minutes=as_int(r.get("accrued_night_diff_minutes")),
        visibility=VisibilityStatus(r.get("visibility") or VisibilityStatus.ENABLED.value),
        remarks=r.get("remarks"),
        updated_at=r.get("updated_at"),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance_records WHERE attendance_id=%s{lock_clause()}",
                (int(attendance_id),),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def get_for_user_and_date(self, user_id: int, work_date: date) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance_records WHERE user_id=%s AND work_date=%s{lock_clause()}",
                (int(user_id), work_date),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def get_recent_for_user(
        self, user_id: int, limit: int, *, include_hidden: bool = False
    ) -> Sequence[AttendanceRecord]:
        where = "user_id=%s" if include_hidden else "user_id=%s AND visibility='ENABLED'"
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE {where}
                ORDER BY work_date DESC
                LIMIT %s
                """,
                (int(user_id), int(limit)),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def list_records(
        self,
        *,
        user_id: Optional[int] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        include_hidden: bool = False,
        limit: int = 200,
    ) -> Sequence[AttendanceRecord]:
        clauses = ["1=1"]
        params: list[object] = []
        if user_id is not None:
            clauses.append("user_id=%s")
            params.append(int(user_id))
        if start_date is not None:
            clauses.append("work_date >= %s")
            params.append(start_date)
        if end_date is not None:
            clauses.append("work_date <= %s")
            params.append(end_date)
        if not include_hidden:
            clauses.append("visibility='ENABLED'")
        params.append(int(limit))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE {" AND ".join(clauses)}
                ORDER BY work_date DESC, attendance_id DESC
                LIMIT %s
                """,
                tuple(params),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def create_clock_in(
        self,
        *,
        user_id: int,
        work_date: date,
        clock_in: datetime,
        status: AttendanceStatus,
        late_minutes: int,
        remarks: Optional[str] = None,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_records(user_id, work_date, clock_in, status, late_minutes, remarks, updated_at)
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                (int(user_id), work_date, clock_in, status.value, int(late_minutes), remarks, clock_in),
            )
            return int(cur.lastrowid)

    def save(self, record: AttendanceRecord) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_records
                SET clock_in=%s, clock_out=%s, break_start=%s, break_finish=%s,
                    status=%s, late_minutes=%s, overtime_minutes=%s, night_diff_minutes=%s,
                    accrued_overtime_minutes=%s, accrued_night_diff_minutes=%s,
                    remarks=%s, updated_at=%s
                WHERE attendance_id=%s
                """,
                (
                    record.clock_in,
                    record.clock_out,
                    record.break_start,
                    record.break_finish,
                    record.status.value,
                    int(record.late_minutes),
                    int(record.overtime_minutes),
                    int(record.night_diff_minutes),
                    int(record.accrued_overtime_minutes),
                    int(record.accrued_night_diff_minutes),
                    record.remarks,
                    record.updated_at,
                    int(record.attendance_id),
                ),
            )
            return cur.rowcount > 0

    def set_visibility(self, *, attendance_id: int, visibility: VisibilityStatus) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE attendance_records SET visibility=%s WHERE attendance_id=%s",
                (visibility.value, int(attendance_id)),
            )
            return cur.rowcount > 0

    def sum_overtime_minutes(self, *, user_id: int, start_date: date, end_date: date) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT COALESCE(SUM(overtime_minutes), 0) AS total
                FROM attendance_records
                WHERE user_id=%s AND work_date BETWEEN %s AND %s
                """,
                (int(user_id), start_date, end_date),
            )
            r = fetchone(cur)
            return as_int(r["total"]) if r else 0

    def get_report_rows(
        self,
        *,
        start_date: date,
        end_date: date,
        user_id: Optional[int] = None,
        include_hidden: bool = False,
    ) -> Sequence[AttendanceReportRow]:
        clauses = ["ar.work_date BETWEEN %s AND %s"]
        params: list[object] = [start_date, end_date]

        if user_id is not None:
            clauses.append("u.user_id=%s")
            params.append(int(user_id))
        if not include_hidden:
            clauses.append("ar.visibility='ENABLED'")

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT
                    ar.attendance_id, u.user_id, u.name,
                    ar.work_date, ar.clock_in, ar.clock_out, ar.break_start, ar.break_finish,
                    ar.status, ar.late_minutes, ar.overtime_minutes, ar.night_diff_minutes, ar.remarks
                FROM attendance_records ar
                JOIN users u ON u.user_id = ar.user_id
                WHERE {where}
                ORDER BY u.name ASC, ar.work_date ASC
                """,
                tuple(params),
            )
            return [
                AttendanceReportRow(
                    user_id=int(r["user_id"]),
                    name=r["name"],
                    work_date=r["work_date"],
                    clock_in=r.get("clock_in"),
                    clock_out=r.get("clock_out"),
                    break_start=r.get("break_start"),
                    break_finish=r.get("break_finish"),
                    status=AttendanceStatus(r["status"]),
                    late_minutes=as_int(r.get("late_minutes")),
                    overtime_minutes=as_int(r.get("overtime_minutes")),
                    night_diff_minutes=as_int(r.get("night_diff_minutes")),
                    attendance_id=int(r["attendance_id"]),
                    remarks=r.get("remarks"),
                )
                for r in fetchall(cur)
            ]
