from __future__ import annotations

from datetime import date, datetime, time, timedelta


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def at(day: date, t: time) -> datetime:
    return datetime.combine(day, t)


def whole_minutes(delta: timedelta) -> int:
    """Whole minutes in a duration, never negative."""
    seconds = int(delta.total_seconds())
    return seconds // 60 if seconds > 0 else 0


def format_minutes(minutes: int) -> str:
    """Render minutes as 'Xh Ym' for notification text."""
    minutes = max(int(minutes), 0)
    return f"{minutes // 60}h {minutes % 60}m"


def format_hhmm(value: time) -> str:
    return value.strftime("%H:%M")
