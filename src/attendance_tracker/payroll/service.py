from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..attendance.model import AttendanceReportRow
from ..attendance.repository import AttendanceRepository
from ..core.constants import EARLY_DEPARTURE_REMARK, MPL_HOURS_PER_UNIT
from ..core.enums import AttendanceStatus
from ..mpl.repository import MplConversionRepository
from .calculator.base import PayrollCalculator
from .calculator.standard_calculator import StandardPayrollCalculator


@dataclass(frozen=True)
class ReportData:
    rows: list[dict]
    summary: list[dict]


def _hhmm(minutes: int) -> str:
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def _fmt(value) -> str:
    return value.strftime("%H:%M") if value else "-"


class PayrollReportService:
    def __init__(
        self,
        attendance: AttendanceRepository,
        conversions: MplConversionRepository,
        *,
        calculator: Optional[PayrollCalculator] = None,
    ):
        self._attendance = attendance
        self._conversions = conversions
        self._calculator = calculator or StandardPayrollCalculator()

    def build_attendance_summary(
        self,
        *,
        start: date,
        end: date,
        user_id: Optional[int] = None,
        include_hidden: bool = False,
    ) -> ReportData:
        """Per-user attendance totals with late arrivals offset by overtime.

        Overtime left after MPL conversion forms a pool; late arrivals are
        walked in date order and each one the pool covers in full is forgiven
        and deducted from it.
        """
        query_rows = self._attendance.get_report_rows(
            start_date=start, end_date=end, user_id=user_id, include_hidden=include_hidden
        )
        days_in_range = max((end - start).days + 1, 0)

        grouped: dict[int, list[AttendanceReportRow]] = {}
        out_rows: list[dict] = []
        for r in query_rows:
            minutes = self._calculator.worked_minutes(r)
            out_rows.append(
                {
                    "attendance_id": r.attendance_id,
                    "user_id": r.user_id,
                    "name": r.name,
                    "work_date": r.work_date.strftime("%Y-%m-%d"),
                    "clock_in": _fmt(r.clock_in),
                    "clock_out": _fmt(r.clock_out),
                    "worked_hours": _hhmm(minutes),
                    "status": r.status.value,
                    "late_minutes": r.late_minutes,
                    "overtime_minutes": r.overtime_minutes,
                    "night_diff_minutes": r.night_diff_minutes,
                    "remarks": r.remarks,
                }
            )
            grouped.setdefault(r.user_id, []).append(r)

        summary = [self._summarize(rows, start=start, end=end, days_in_range=days_in_range) for rows in grouped.values()]
        summary.sort(key=lambda x: x["name"])
        return ReportData(rows=out_rows, summary=summary)

    def _summarize(self, rows: list[AttendanceReportRow], *, start: date, end: date, days_in_range: int) -> dict:
        first = rows[0]
        present = sum(1 for r in rows if r.clock_in and r.status in (AttendanceStatus.PRESENT, AttendanceStatus.LATE))
        on_leave = sum(1 for r in rows if r.status == AttendanceStatus.ON_LEAVE)
        early_departures = sum(1 for r in rows if r.remarks == EARLY_DEPARTURE_REMARK)
        worked = sum(self._calculator.worked_minutes(r) for r in rows)
        overtime = sum(int(r.overtime_minutes) for r in rows)
        night_diff = sum(int(r.night_diff_minutes) for r in rows)

        mpl_units = int(
            self._conversions.sum_converted_overlapping(user_id=first.user_id, start_date=start, end_date=end)
        )
        pool = max(overtime - mpl_units * MPL_HOURS_PER_UNIT * 60, 0)
        remaining_after_mpl = pool

        late_rows = sorted(
            (r for r in rows if r.status == AttendanceStatus.LATE and r.late_minutes > 0),
            key=lambda r: r.work_date,
        )
        offset_count = 0
        late_count = 0
        late_minutes = 0
        for r in late_rows:
            if pool >= r.late_minutes:
                pool -= r.late_minutes
                offset_count += 1
            else:
                late_count += 1
                late_minutes += r.late_minutes

        return {
            "user_id": first.user_id,
            "name": first.name,
            "days_present": present,
            "days_on_leave": on_leave,
            "days_absent": max(days_in_range - present - on_leave, 0),
            "worked_minutes": worked,
            "worked_hours": _hhmm(worked),
            "overtime_minutes": overtime,
            "mpl_converted": mpl_units,
            "overtime_after_mpl_minutes": remaining_after_mpl,
            "late_offset_count": offset_count,
            "late_count": late_count,
            "late_minutes": late_minutes,
            "early_departures": early_departures,
            "final_overtime_minutes": pool,
            "night_diff_minutes": night_diff,
        }
