from __future__ import annotations

from datetime import date, datetime

from ...common.intervals import minutes_between
from ...core.enums import AttendanceStatus
from ...overtime.model import OvertimeConfig
from .base import AttendanceStrategy, StatusDecision


class LateStrategy(AttendanceStrategy):
    """Clock-in after office start: LATE, with whole minutes past the start."""

    def decide_clock_in(self, *, now: datetime, today: date, config: OvertimeConfig) -> StatusDecision:
        late_minutes = minutes_between(config.office_start_on(today), now)
        return StatusDecision(status=AttendanceStatus.LATE, late_minutes=late_minutes)

    def decide_clock_out(
        self, *, now: datetime, today: date, config: OvertimeConfig, current: AttendanceStatus
    ) -> StatusDecision:
        return StatusDecision(status=current)
