from __future__ import annotations

from datetime import date, datetime

from ...common.intervals import minutes_between
from ...core.constants import EARLY_DEPARTURE_REMARK
from ...core.enums import AttendanceStatus
from ...overtime.model import OvertimeConfig
from .base import AttendanceStrategy, StatusDecision


class EarlyClockOutStrategy(AttendanceStrategy):
    """Clock-out before office end: status is kept, the shortfall is reported."""

    def decide_clock_in(self, *, now: datetime, today: date, config: OvertimeConfig) -> StatusDecision:
        return StatusDecision(status=AttendanceStatus.PRESENT)

    def decide_clock_out(
        self, *, now: datetime, today: date, config: OvertimeConfig, current: AttendanceStatus
    ) -> StatusDecision:
        shortfall = minutes_between(now, config.office_end_on(today))
        return StatusDecision(status=current, early_minutes=shortfall, note=EARLY_DEPARTURE_REMARK)
