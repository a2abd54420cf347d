from __future__ import annotations

from ...attendance.model import AttendanceReportRow
from ...common.intervals import minutes_between
from .base import PayrollCalculator


class StandardPayrollCalculator(PayrollCalculator):
    """Standard rule: (out - in) - break, not below 0. Open days count as 0."""

    def worked_minutes(self, row: AttendanceReportRow) -> int:
        if row.clock_in is None or row.clock_out is None:
            return 0
        minutes = minutes_between(row.clock_in, row.clock_out)
        minutes -= minutes_between(row.break_start, row.break_finish)
        return max(minutes, 0)
