from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from .model import Notification


class NotificationRepository(Protocol):
    def create(
        self,
        *,
        user_id: int,
        title: str,
        message: str,
        type: str,
        link: Optional[str],
        created_at: datetime,
        created_by: Optional[int] = None,
    ) -> int:
        raise NotImplementedError

    def list_for_user(self, user_id: int, *, limit: int = 50) -> Sequence[Notification]:
        raise NotImplementedError
