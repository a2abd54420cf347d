from datetime import date, datetime

from attendance_tracker.attendance.model import AttendanceReportRow
from attendance_tracker.core.enums import AttendanceStatus
from attendance_tracker.payroll.calculator.standard_calculator import StandardPayrollCalculator


def _row(**overrides):
    values = dict(
        user_id=1,
        name="A",
        work_date=date(2025, 1, 1),
        clock_in=datetime(2025, 1, 1, 8, 0),
        clock_out=datetime(2025, 1, 1, 17, 0),
        break_start=datetime(2025, 1, 1, 12, 0),
        break_finish=datetime(2025, 1, 1, 13, 0),
        status=AttendanceStatus.PRESENT,
    )
    values.update(overrides)
    return AttendanceReportRow(**values)


def test_standard_calculator_subtracts_break():
    assert StandardPayrollCalculator().worked_minutes(_row()) == 8 * 60


def test_standard_calculator_open_day_counts_zero():
    assert StandardPayrollCalculator().worked_minutes(_row(clock_out=None)) == 0


def test_standard_calculator_ignores_unfinished_break():
    assert StandardPayrollCalculator().worked_minutes(_row(break_finish=None)) == 9 * 60
