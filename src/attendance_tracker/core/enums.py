from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User role used by admin-gated operations."""

    ADMIN = "admin"
    EMPLOYEE = "employee"


class AttendanceStatus(str, Enum):
    """Attendance status persisted on each daily record."""

    PRESENT = "PRESENT"
    ABSENT = "ABSENT"
    LATE = "LATE"
    ON_LEAVE = "ON_LEAVE"


class AttendanceStage(str, Enum):
    """Lifecycle stage of a daily record, derived from its timestamps."""

    CLOCKED_IN = "CLOCKED_IN"
    ON_BREAK = "ON_BREAK"
    BACK_FROM_BREAK = "BACK_FROM_BREAK"
    CLOCKED_OUT = "CLOCKED_OUT"


class VisibilityStatus(str, Enum):
    """Admin-only soft delete flag."""

    ENABLED = "ENABLED"
    DISABLED = "DISABLED"


class OvertimeRequestStatus(str, Enum):
    """Overtime request workflow. Every state except PENDING is terminal."""

    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    CANCELED = "CANCELED"
