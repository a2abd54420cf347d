import logging
from datetime import datetime

from attendance_tracker.common.clock import FixedClock
from attendance_tracker.common.events import EventLogger
from attendance_tracker.notifications.service import NotificationService, SafeNotifier

from conftest import ADMIN_ID, EMPLOYEE_ID, OTHER_ADMIN_ID, RecordingNotifier


class InMemoryNotifications:
    def __init__(self):
        self.rows = []

    def create(self, **fields) -> int:
        self.rows.append(fields)
        return len(self.rows)

    def list_for_user(self, user_id, *, limit=50):
        return [r for r in self.rows if r["user_id"] == user_id][:limit]


def test_notify_admins_skips_the_actor(users):
    store = InMemoryNotifications()
    service = NotificationService(store, users, clock=FixedClock(datetime(2024, 3, 4, 12, 0)))

    service.notify_admins("Configuration Update", "changed", "CONFIG_UPDATE", exclude_user_id=ADMIN_ID)

    assert [r["user_id"] for r in store.rows] == [OTHER_ADMIN_ID]
    assert store.rows[0]["created_by"] == ADMIN_ID
    assert store.rows[0]["created_at"] == datetime(2024, 3, 4, 12, 0)


def test_notify_user(users):
    store = InMemoryNotifications()
    service = NotificationService(store, users)

    service.notify_user(EMPLOYEE_ID, "Overtime Review Result", "approved", "OVERTIME_REVIEW")

    (row,) = store.rows
    assert row["user_id"] == EMPLOYEE_ID
    assert row["title"] == "Overtime Review Result"


def test_safe_notifier_logs_and_swallows_failures(caplog):
    events = EventLogger("notifications", logger=logging.getLogger("tests.notifications"))
    notifier = SafeNotifier(RecordingNotifier(fail=True), events=events)

    with caplog.at_level(logging.ERROR, logger="tests.notifications"):
        notifier.notify_user(EMPLOYEE_ID, "title", "message", "TYPE")
        notifier.notify_admins("title", "message", "TYPE", exclude_user_id=ADMIN_ID)

    assert [r.event for r in caplog.records] == ["notify_user.failed", "notify_admins.failed"]
    assert caplog.records[0].exc_info is not None


def test_safe_notifier_passes_through():
    inner = RecordingNotifier()

    SafeNotifier(inner).notify_admins("title", "message", "TYPE", exclude_user_id=ADMIN_ID)

    assert inner.sent == [
        {"to": "admins", "title": "title", "message": "message", "type": "TYPE", "exclude_user_id": ADMIN_ID}
    ]
