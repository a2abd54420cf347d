from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Protocol

from .datetime_utils import now_local


class Clock(Protocol):
    """Source of "now" injected into every service that reads the time."""

    def now(self) -> datetime:
        raise NotImplementedError


class SystemClock:
    """Local wall-clock time (office schedules are local time-of-day values)."""

    def now(self) -> datetime:
        return now_local()


@dataclass
class FixedClock:
    """Deterministic clock for tests and replays."""

    current: datetime

    def now(self) -> datetime:
        return self.current

    def set(self, value: datetime) -> None:
        self.current = value

    def advance(self, **kwargs) -> datetime:
        self.current = self.current + timedelta(**kwargs)
        return self.current
