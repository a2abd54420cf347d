from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date, datetime
from typing import Optional

from ..common.intervals import minutes_between
from ..core.enums import AttendanceStage, AttendanceStatus, VisibilityStatus


@dataclass(frozen=True)
class AccountingSnapshot:
    """Derived fields of one record, computed together at a transition."""

    status: AttendanceStatus
    late_minutes: int = 0
    overtime_minutes: int = 0
    night_diff_minutes: int = 0
    actual_overtime_minutes: int = 0
    worked_minutes: int = 0
    break_minutes: int = 0


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one attendance record per (user, work date)."""

    attendance_id: int
    user_id: int
    work_date: date
    clock_in: Optional[datetime]
    clock_out: Optional[datetime] = None
    break_start: Optional[datetime] = None
    break_finish: Optional[datetime] = None
    status: AttendanceStatus = AttendanceStatus.PRESENT
    late_minutes: int = 0
    overtime_minutes: int = 0
    night_diff_minutes: int = 0
    # Highest totals ever added to the user accumulators for this record.
    accrued_overtime_minutes: int = 0
    accrued_night_diff_minutes: int = 0
    visibility: VisibilityStatus = VisibilityStatus.ENABLED
    remarks: Optional[str] = None
    updated_at: Optional[datetime] = None

    @property
    def stage(self) -> Optional[AttendanceStage]:
        """Lifecycle stage; None for a placeholder row without a clock-in."""
        if self.clock_in is None:
            return None
        if self.clock_out is not None:
            return AttendanceStage.CLOCKED_OUT
        if self.break_finish is not None:
            return AttendanceStage.BACK_FROM_BREAK
        if self.break_start is not None:
            return AttendanceStage.ON_BREAK
        return AttendanceStage.CLOCKED_IN

    @property
    def break_minutes(self) -> int:
        return minutes_between(self.break_start, self.break_finish)

    @property
    def worked_minutes(self) -> int:
        if self.clock_out is None:
            return 0
        return max(minutes_between(self.clock_in, self.clock_out) - self.break_minutes, 0)

    def closed_at(self, clock_out: datetime) -> "AttendanceRecord":
        """Close the day at `clock_out`; an unfinished break ends with it."""
        break_finish = self.break_finish
        if self.break_start is not None and break_finish is None:
            break_finish = clock_out
        return replace(self, clock_out=clock_out, break_finish=break_finish)

    @property
    def is_visible(self) -> bool:
        return self.visibility == VisibilityStatus.ENABLED

    def apply(self, snapshot: AccountingSnapshot, *, at: Optional[datetime] = None) -> "AttendanceRecord":
        return replace(
            self,
            status=snapshot.status,
            late_minutes=snapshot.late_minutes,
            overtime_minutes=snapshot.overtime_minutes,
            night_diff_minutes=snapshot.night_diff_minutes,
            updated_at=at or self.updated_at,
        )


@dataclass(frozen=True)
class AttendanceResult:
    """What lifecycle operations hand back: the stored record plus its snapshot."""

    record: AttendanceRecord
    snapshot: Optional[AccountingSnapshot] = None
    over_break_minutes: int = 0
    early_minutes: int = 0


@dataclass(frozen=True)
class AttendanceReportRow:
    """Read-model used by the summary report (record joined with user name)."""

    user_id: int
    name: str
    work_date: date
    clock_in: Optional[datetime]
    clock_out: Optional[datetime]
    break_start: Optional[datetime]
    break_finish: Optional[datetime]
    status: AttendanceStatus
    late_minutes: int = 0
    overtime_minutes: int = 0
    night_diff_minutes: int = 0
    attendance_id: Optional[int] = None
    remarks: Optional[str] = None
