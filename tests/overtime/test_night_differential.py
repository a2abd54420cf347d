from dataclasses import replace
from datetime import date, datetime, time

import pytest

from attendance_tracker.core.enums import OvertimeRequestStatus
from attendance_tracker.overtime.model import OvertimeRequest
from attendance_tracker.overtime.night_differential import NightDifferentialCalculator

from conftest import make_config


def request(start, end, status=OvertimeRequestStatus.APPROVED):
    return OvertimeRequest(
        request_id=1,
        user_id=2,
        work_date=date(2024, 3, 4),
        start_time=start,
        end_time=end,
        reason="cutover",
        status=status,
        created_at=datetime(2024, 3, 4, 8, 0),
    )


def test_night_differential_of_evening_overtime():
    minutes = NightDifferentialCalculator().compute(
        config=make_config(), approved_request=request(time(21, 0), time(23, 30))
    )
    assert minutes == 90


def test_night_differential_of_early_morning_window():
    minutes = NightDifferentialCalculator().compute(
        config=make_config(), approved_request=request(time(4, 0), time(8, 0))
    )
    assert minutes == 120


def test_night_differential_zero_without_approval():
    calc = NightDifferentialCalculator()
    assert calc.compute(config=make_config(), approved_request=None) == 0
    rejected = request(time(21, 0), time(23, 30), OvertimeRequestStatus.REJECTED)
    assert calc.compute(config=make_config(), approved_request=rejected) == 0


@pytest.mark.parametrize(
    "night_start,night_end,expected",
    [
        (time(20, 0), time(23, 0), 120),
        (time(23, 0), time(2, 0), 30),
        (time(0, 0), time(6, 0), 0),
    ],
)
def test_night_differential_follows_configured_window(night_start, night_end, expected):
    config = replace(make_config(), night_diff_start_time=night_start, night_diff_end_time=night_end)
    minutes = NightDifferentialCalculator().compute(
        config=config, approved_request=request(time(21, 0), time(23, 30))
    )
    assert minutes == expected
