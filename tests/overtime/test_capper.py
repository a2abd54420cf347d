from dataclasses import replace
from datetime import date, datetime, time

from attendance_tracker.core.enums import OvertimeRequestStatus
from attendance_tracker.overtime.capper import OvertimeAccrualCapper
from attendance_tracker.overtime.model import OvertimeRequest

from conftest import make_config

DAY = date(2024, 3, 4)


def approved(start=time(17, 0), end=time(19, 0), status=OvertimeRequestStatus.APPROVED):
    return OvertimeRequest(
        request_id=1,
        user_id=2,
        work_date=DAY,
        start_time=start,
        end_time=end,
        reason="release",
        status=status,
        created_at=datetime(2024, 3, 4, 8, 0),
    )


def at(hour, minute=0):
    return datetime.combine(DAY, time(hour, minute))


def test_capper_with_approved_window():
    accrual = OvertimeAccrualCapper().compute(
        work_start=at(9),
        work_end=at(19),
        break_minutes=60,
        config=make_config(),
        approved_request=approved(),
    )

    assert accrual.regular_minutes == 420
    assert accrual.worked_minutes == 540
    assert accrual.actual_overtime_minutes == 120
    assert accrual.capped_overtime_minutes == 120


def test_capper_without_approval_accrues_nothing():
    accrual = OvertimeAccrualCapper().compute(
        work_start=at(9), work_end=at(21), break_minutes=60, config=make_config(), approved_request=None
    )

    assert accrual.actual_overtime_minutes == 240
    assert accrual.capped_overtime_minutes == 0
    assert not accrual.has_approval


def test_capper_ignores_pending_request():
    accrual = OvertimeAccrualCapper().compute(
        work_start=at(9),
        work_end=at(19),
        break_minutes=60,
        config=make_config(),
        approved_request=approved(status=OvertimeRequestStatus.PENDING),
    )
    assert accrual.capped_overtime_minutes == 0


def test_capper_bounded_by_approved_window():
    accrual = OvertimeAccrualCapper().compute(
        work_start=at(9),
        work_end=at(20),
        break_minutes=60,
        config=make_config(),
        approved_request=approved(end=time(18, 0)),
    )
    assert accrual.actual_overtime_minutes == 180
    assert accrual.capped_overtime_minutes == 60


def test_capper_bounded_by_daily_max():
    accrual = OvertimeAccrualCapper().compute(
        work_start=at(9),
        work_end=at(22),
        break_minutes=60,
        config=replace(make_config(), overtime_daily_max_minutes=90),
        approved_request=approved(end=time(22, 0)),
    )
    assert accrual.actual_overtime_minutes == 300
    assert accrual.capped_overtime_minutes == 90


def test_capper_short_break_does_not_raise_regular_time():
    # Regular time always deducts the allowed break, whatever was actually taken.
    accrual = OvertimeAccrualCapper().compute(
        work_start=at(9),
        work_end=at(17),
        break_minutes=0,
        config=make_config(),
        approved_request=approved(),
    )
    assert accrual.worked_minutes == 480
    assert accrual.actual_overtime_minutes == 60
    assert accrual.capped_overtime_minutes == 60


def test_capper_short_day_has_no_overtime():
    accrual = OvertimeAccrualCapper().compute(
        work_start=at(10), work_end=at(15), break_minutes=30, config=make_config(), approved_request=approved()
    )
    assert accrual.actual_overtime_minutes == 0
    assert accrual.capped_overtime_minutes == 0
