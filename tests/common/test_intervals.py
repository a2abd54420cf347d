from datetime import date, datetime, time, timedelta

import pytest

from attendance_tracker.common.intervals import (
    anchor_window,
    minutes_between,
    overlap,
    overlap_minutes,
    recurring_window_overlap,
    window_minutes,
)


def dt(hour, minute=0, day=1):
    return datetime(2024, 3, day, hour, minute)


def test_overlap_of_partially_overlapping_intervals():
    assert overlap(dt(9), dt(12), dt(11), dt(15)) == timedelta(hours=1)


def test_overlap_is_symmetric():
    a = (dt(9), dt(12, 30))
    b = (dt(11), dt(15))
    assert overlap(*a, *b) == overlap(*b, *a)


@pytest.mark.parametrize(
    "a_start,a_end,b_start,b_end",
    [
        (dt(9), dt(10), dt(10), dt(11)),  # touching
        (dt(9), dt(10), dt(12), dt(13)),  # disjoint
        (dt(12), dt(9), dt(8), dt(13)),  # reversed
        (None, dt(10), dt(8), dt(13)),
        (dt(9), None, dt(8), dt(13)),
    ],
)
def test_overlap_is_zero_for_degenerate_input(a_start, a_end, b_start, b_end):
    assert overlap(a_start, a_end, b_start, b_end) == timedelta(0)


def test_overlap_minutes_truncates_seconds():
    assert overlap_minutes(dt(9), datetime(2024, 3, 1, 9, 1, 59), dt(8), dt(10)) == 1


def test_minutes_between_never_negative():
    assert minutes_between(dt(13), dt(12)) == 0
    assert minutes_between(dt(12), dt(13)) == 60
    assert minutes_between(dt(12), None) == 0


def test_anchor_window_wraps_past_midnight():
    start, end = anchor_window(date(2024, 3, 1), time(22, 0), time(6, 0))
    assert start == dt(22)
    assert end == dt(6, day=2)


def test_window_minutes_for_wrapping_and_plain_windows():
    assert window_minutes(time(22, 0), time(6, 0)) == 8 * 60
    assert window_minutes(time(9, 0), time(17, 0)) == 8 * 60


def test_recurring_window_reaches_previous_night():
    # 04:00-07:00 meets the tail of the 22:00-06:00 window that started the day before.
    total = recurring_window_overlap(dt(4, day=2), dt(7, day=2), time(22, 0), time(6, 0))
    assert total == timedelta(hours=2)


def test_recurring_window_spanning_two_nights():
    total = recurring_window_overlap(dt(21), dt(23, day=2), time(22, 0), time(6, 0))
    assert total == timedelta(hours=9)
