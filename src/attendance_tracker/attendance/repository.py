from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import AttendanceStatus, VisibilityStatus
from .model import AttendanceRecord, AttendanceReportRow


class AttendanceRepository(Protocol):
    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def get_for_user_and_date(self, user_id: int, work_date: date) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def get_recent_for_user(
        self, user_id: int, limit: int, *, include_hidden: bool = False
    ) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def list_records(
        self,
        *,
        user_id: Optional[int] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        include_hidden: bool = False,
        limit: int = 200,
    ) -> Sequence[AttendanceRecord]:
        """Newest first; every filter left as None is not applied."""

        raise NotImplementedError

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
        """Insert the day's record. (user_id, work_date) is unique in the store."""

        raise NotImplementedError

    def save(self, record: AttendanceRecord) -> bool:
        """Persist every mutable column of an existing record."""

        raise NotImplementedError

    def set_visibility(self, *, attendance_id: int, visibility: VisibilityStatus) -> bool:
        raise NotImplementedError

    def sum_overtime_minutes(self, *, user_id: int, start_date: date, end_date: date) -> int:
        """Sum of capped overtime minutes over [start_date, end_date], inclusive."""

        raise NotImplementedError

    def get_report_rows(
        self,
        *,
        start_date: date,
        end_date: date,
        user_id: Optional[int] = None,
        include_hidden: bool = False,
    ) -> Sequence[AttendanceReportRow]:
        raise NotImplementedError
