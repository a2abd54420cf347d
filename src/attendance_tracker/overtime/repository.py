from __future__ import annotations

from datetime import date, datetime, time
from typing import Optional, Protocol, Sequence

from ..core.enums import OvertimeRequestStatus
from .model import OvertimeConfig, OvertimeRequest


class OvertimeConfigRepository(Protocol):
    def get(self) -> Optional[OvertimeConfig]:
        raise NotImplementedError

    def save(self, config: OvertimeConfig) -> bool:
        raise NotImplementedError


class OvertimeRepository(Protocol):
    def create(
        self,
        *,
        user_id: int,
        work_date: date,
        start_time: time,
        end_time: time,
        reason: str,
        expected_output: Optional[str],
        created_at: datetime,
    ) -> int:
        raise NotImplementedError

    def get_by_id(self, request_id: int) -> Optional[OvertimeRequest]:
        raise NotImplementedError

    def get_approved_for(self, *, user_id: int, work_date: date) -> Optional[OvertimeRequest]:
        raise NotImplementedError

    def save(self, request: OvertimeRequest) -> bool:
        raise NotImplementedError

    def list_requests(
        self,
        *,
        status: Optional[OvertimeRequestStatus] = None,
        user_id: Optional[int] = None,
        limit: int = 200,
    ) -> Sequence[OvertimeRequest]:
        raise NotImplementedError
