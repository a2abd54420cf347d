"""Interval arithmetic over absolute instants.

Every function here is total: missing or reversed bounds contribute a zero
duration instead of raising, so partially edited records still compute.
"""

from __future__ import annotations

from datetime import date, datetime, time, timedelta
from typing import Optional

from .datetime_utils import at, whole_minutes

ZERO = timedelta(0)


def overlap(
    a_start: Optional[datetime],
    a_end: Optional[datetime],
    b_start: Optional[datetime],
    b_end: Optional[datetime],
) -> timedelta:
    """max(0, min(a_end, b_end) - max(a_start, b_start))."""
    if a_start is None or a_end is None or b_start is None or b_end is None:
        return ZERO
    span = min(a_end, b_end) - max(a_start, b_start)
    return span if span > ZERO else ZERO


def overlap_minutes(
    a_start: Optional[datetime],
    a_end: Optional[datetime],
    b_start: Optional[datetime],
    b_end: Optional[datetime],
) -> int:
    return whole_minutes(overlap(a_start, a_end, b_start, b_end))


def minutes_between(start: Optional[datetime], end: Optional[datetime]) -> int:
    """Length of [start, end] in whole minutes; 0 when reversed or open."""
    return overlap_minutes(start, end, start, end)


def anchor_window(day: date, start: time, end: time) -> tuple[datetime, datetime]:
    """Anchor a time-of-day window on `day`.

    A window whose end is not after its start wraps past midnight, e.g.
    22:00-06:00 on D becomes [D 22:00, D+1 06:00].
    """
    window_start = at(day, start)
    window_end = at(day, end)
    if end <= start:
        window_end += timedelta(days=1)
    return window_start, window_end


def window_minutes(start: time, end: time) -> int:
    """Length of a time-of-day window, wrapping past midnight if needed."""
    ws, we = anchor_window(date(2000, 1, 1), start, end)
    return minutes_between(ws, we)


def recurring_window_overlap(
    start: Optional[datetime],
    end: Optional[datetime],
    window_start: time,
    window_end: time,
) -> timedelta:
    """Overlap of [start, end] with a daily window, summed over every day it touches.

    The window is anchored on the day before `start` as well, so an interval at
    04:00 meets the tail of the previous night's 22:00-06:00 window.
    """
    if start is None or end is None or end <= start:
        return ZERO

    total = ZERO
    day = start.date() - timedelta(days=1)
    while day <= end.date():
        ws, we = anchor_window(day, window_start, window_end)
        total += overlap(start, end, ws, we)
        day += timedelta(days=1)
    return total
