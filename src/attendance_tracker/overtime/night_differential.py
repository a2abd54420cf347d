from __future__ import annotations

from typing import Optional

from ..common.datetime_utils import whole_minutes
from ..common.intervals import recurring_window_overlap
from .model import OvertimeConfig, OvertimeRequest


class NightDifferentialCalculator:
    """Minutes of the approved overtime window that fall in the night window.

    Only approved overtime earns night differential; the rest of the workday
    is never considered.
    """

    def compute(self, *, config: OvertimeConfig, approved_request: Optional[OvertimeRequest]) -> int:
        if approved_request is None or not approved_request.is_approved:
            return 0
        start, end = approved_request.window()
        return whole_minutes(
            recurring_window_overlap(start, end, config.night_diff_start_time, config.night_diff_end_time)
        )
