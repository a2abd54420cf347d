from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Optional

from ..common.datetime_utils import at
from ..common.intervals import anchor_window, minutes_between, window_minutes
from ..core.enums import OvertimeRequestStatus


@dataclass(frozen=True)
class OvertimeConfig:
    """Singleton office schedule read by every derived-field computation."""

    office_start_time: time
    office_end_time: time
    break_max_minutes: int
    night_diff_start_time: time
    night_diff_end_time: time
    overtime_daily_max_minutes: int
    updated_at: Optional[datetime] = None

    def office_start_on(self, day: date) -> datetime:
        return at(day, self.office_start_time)

    def office_end_on(self, day: date) -> datetime:
        return at(day, self.office_end_time)

    @property
    def office_minutes(self) -> int:
        return minutes_between(self.office_start_on(date(2000, 1, 1)), self.office_end_on(date(2000, 1, 1)))

    @property
    def regular_minutes(self) -> int:
        """Office window minus the allowed break."""
        return max(self.office_minutes - int(self.break_max_minutes), 0)

    @property
    def night_window_minutes(self) -> int:
        return window_minutes(self.night_diff_start_time, self.night_diff_end_time)

    def night_window_on(self, day: date) -> tuple[datetime, datetime]:
        return anchor_window(day, self.night_diff_start_time, self.night_diff_end_time)


@dataclass(frozen=True)
class OvertimeRequest:
    request_id: int
    user_id: int
    work_date: date
    start_time: time
    end_time: time
    reason: str
    status: OvertimeRequestStatus
    created_at: datetime
    expected_output: Optional[str] = None
    reviewed_by: Optional[int] = None
    rejection_reason: Optional[str] = None
    updated_at: Optional[datetime] = None

    @property
    def is_pending(self) -> bool:
        return self.status == OvertimeRequestStatus.PENDING

    @property
    def is_approved(self) -> bool:
        return self.status == OvertimeRequestStatus.APPROVED

    def window(self) -> tuple[datetime, datetime]:
        return at(self.work_date, self.start_time), at(self.work_date, self.end_time)

    @property
    def window_minutes(self) -> int:
        start, end = self.window()
        return minutes_between(start, end)
