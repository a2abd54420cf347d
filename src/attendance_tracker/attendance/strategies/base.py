from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ...core.enums import AttendanceStatus
from ...overtime.model import OvertimeConfig


@dataclass(frozen=True)
class StatusDecision:
    status: AttendanceStatus
    late_minutes: int = 0
    early_minutes: int = 0
    note: Optional[str] = None


class AttendanceStrategy(ABC):
    """Strategy Pattern: encapsulate how we decide an attendance status."""

    @abstractmethod
    def decide_clock_in(self, *, now: datetime, today: date, config: OvertimeConfig) -> StatusDecision:
        raise NotImplementedError

    @abstractmethod
    def decide_clock_out(
        self, *, now: datetime, today: date, config: OvertimeConfig, current: AttendanceStatus
    ) -> StatusDecision:
        raise NotImplementedError
