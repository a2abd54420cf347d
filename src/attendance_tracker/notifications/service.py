from __future__ import annotations

from typing import Optional, Protocol

from ..common.clock import Clock, SystemClock
from ..common.events import EventLogger
from ..core.constants import NOTIFICATION_LINK
from ..users.repository import UserRepository
from .repository import NotificationRepository


class Notifier(Protocol):
    def notify_user(self, user_id: int, title: str, message: str, type: str, link: str = NOTIFICATION_LINK) -> None:
        raise NotImplementedError

    def notify_admins(
        self,
        title: str,
        message: str,
        type: str,
        link: str = NOTIFICATION_LINK,
        exclude_user_id: Optional[int] = None,
    ) -> None:
        raise NotImplementedError


class NotificationService:
    """Store-backed notifier: one notification row per recipient."""

    def __init__(self, notifications: NotificationRepository, users: UserRepository, *, clock: Optional[Clock] = None):
        self._notifications = notifications
        self._users = users
        self._clock = clock or SystemClock()

    def notify_user(self, user_id: int, title: str, message: str, type: str, link: str = NOTIFICATION_LINK) -> None:
        self._notifications.create(
            user_id=int(user_id),
            title=title,
            message=message,
            type=type,
            link=link,
            created_at=self._clock.now(),
        )

    def notify_admins(
        self,
        title: str,
        message: str,
        type: str,
        link: str = NOTIFICATION_LINK,
        exclude_user_id: Optional[int] = None,
    ) -> None:
        now = self._clock.now()
        for admin_id in self._users.list_admin_ids():
            if exclude_user_id is not None and int(admin_id) == int(exclude_user_id):
                continue
            self._notifications.create(
                user_id=int(admin_id),
                title=title,
                message=message,
                type=type,
                link=link,
                created_at=now,
                created_by=exclude_user_id,
            )


class SafeNotifier:
    """Fire-and-forget wrapper: delivery failures are logged, never raised.

    Attendance state changes are already committed when notifications go out,
    so a broken notifier must not surface as a failed clock event.
    """

    def __init__(self, inner: Notifier, *, events: Optional[EventLogger] = None):
        self._inner = inner
        self._events = events or EventLogger("notifications")

    def notify_user(self, user_id: int, title: str, message: str, type: str, link: str = NOTIFICATION_LINK) -> None:
        try:
            self._inner.notify_user(user_id, title, message, type, link)
        except Exception:
            self._events.failure("notify_user", user_id=user_id, title=title)

    def notify_admins(
        self,
        title: str,
        message: str,
        type: str,
        link: str = NOTIFICATION_LINK,
        exclude_user_id: Optional[int] = None,
    ) -> None:
        try:
            self._inner.notify_admins(title, message, type, link, exclude_user_id)
        except Exception:
            self._events.failure("notify_admins", title=title, exclude_user_id=exclude_user_id)
