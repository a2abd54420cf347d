from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..common.intervals import minutes_between
from .model import OvertimeConfig, OvertimeRequest


@dataclass(frozen=True)
class OvertimeAccrual:
    regular_minutes: int
    worked_minutes: int
    actual_overtime_minutes: int
    approved_window_minutes: int
    capped_overtime_minutes: int

    @property
    def has_approval(self) -> bool:
        return self.approved_window_minutes > 0


class OvertimeAccrualCapper:
    """Bounds worked overtime by the day's approved window and the daily max.

    Unapproved overtime never accrues, however long the day was; the actual
    figure is kept only for display.
    """

    def compute(
        self,
        *,
        work_start: Optional[datetime],
        work_end: Optional[datetime],
        break_minutes: int,
        config: OvertimeConfig,
        approved_request: Optional[OvertimeRequest] = None,
    ) -> OvertimeAccrual:
        regular = config.regular_minutes
        worked = max(minutes_between(work_start, work_end) - max(int(break_minutes), 0), 0)
        actual = max(0, worked - regular)

        if approved_request is not None and approved_request.is_approved:
            window = approved_request.window_minutes
            capped = min(actual, window, max(int(config.overtime_daily_max_minutes), 0))
        else:
            window = 0
            capped = 0

        return OvertimeAccrual(
            regular_minutes=regular,
            worked_minutes=worked,
            actual_overtime_minutes=actual,
            approved_window_minutes=window,
            capped_overtime_minutes=capped,
        )
