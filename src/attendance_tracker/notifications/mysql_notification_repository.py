from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .model import Notification
from .repository import NotificationRepository


class MySQLNotificationRepository(NotificationRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

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
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO notifications(user_id, title, message, type, link, created_by, created_at)
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                (int(user_id), title, message, type, link or "", created_by, created_at),
            )
            notification_id = int(cur.lastrowid)
            # The link points at the row itself, so it is known only after insert.
            if link and "{id}" in link:
                cur.execute(
                    "UPDATE notifications SET link=%s WHERE notification_id=%s",
                    (link.format(id=notification_id), notification_id),
                )
            return notification_id

    def list_for_user(self, user_id: int, *, limit: int = 50) -> Sequence[Notification]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT notification_id, user_id, title, message, type, link, created_at, is_read, created_by
                FROM notifications
                WHERE user_id=%s
                ORDER BY created_at DESC, notification_id DESC
                LIMIT %s
                """,
                (int(user_id), int(limit)),
            )
            return [
                Notification(
                    notification_id=int(r["notification_id"]),
                    user_id=int(r["user_id"]),
                    title=r["title"],
                    message=r["message"],
                    type=r["type"],
                    link=r.get("link"),
                    created_at=r["created_at"],
                    is_read=bool(r.get("is_read")),
                    created_by=int(r["created_by"]) if r.get("created_by") is not None else None,
                )
                for r in fetchall(cur)
            ]
