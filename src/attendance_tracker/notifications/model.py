from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class Notification:
    notification_id: int
    user_id: int
    title: str
    message: str
    type: str
    link: Optional[str]
    created_at: datetime
    is_read: bool = False
    created_by: Optional[int] = None
