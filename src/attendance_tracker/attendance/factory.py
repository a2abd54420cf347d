from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime

from ..overtime.model import OvertimeConfig
from .strategies.base import AttendanceStrategy
from .strategies.early_strategy import EarlyClockOutStrategy
from .strategies.late_strategy import LateStrategy
from .strategies.normal_strategy import NormalStrategy


@dataclass
class AttendanceStrategyFactory:
    """Factory Pattern: choose appropriate strategy based on the office schedule."""

    def for_clock_in(self, *, now: datetime, today: date, config: OvertimeConfig) -> AttendanceStrategy:
        if now > config.office_start_on(today):
            return LateStrategy()
        return NormalStrategy()

    def for_clock_out(self, *, now: datetime, today: date, config: OvertimeConfig) -> AttendanceStrategy:
        if now < config.office_end_on(today):
            return EarlyClockOutStrategy()
        return NormalStrategy()
