from __future__ import annotations

from datetime import date, datetime

from ...core.enums import AttendanceStatus
from ...overtime.model import OvertimeConfig
from .base import AttendanceStrategy, StatusDecision


class NormalStrategy(AttendanceStrategy):
    """On-time clock-in, clock-out at or after office end."""

    def decide_clock_in(self, *, now: datetime, today: date, config: OvertimeConfig) -> StatusDecision:
        return StatusDecision(status=AttendanceStatus.PRESENT)

    def decide_clock_out(
        self, *, now: datetime, today: date, config: OvertimeConfig, current: AttendanceStatus
    ) -> StatusDecision:
        return StatusDecision(status=current)
