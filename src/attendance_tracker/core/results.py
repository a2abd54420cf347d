from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Generic, Mapping, Optional, TypeVar

T = TypeVar("T")


class RejectionCode(str, Enum):
    """Stable rejection codes. Callers map them to HTTP statuses."""

    ALREADY_CLOCKED_IN = "ALREADY_CLOCKED_IN"
    NOT_CLOCKED_IN = "NOT_CLOCKED_IN"
    ALREADY_CLOCKED_OUT = "ALREADY_CLOCKED_OUT"
    BREAK_ALREADY_TAKEN = "BREAK_ALREADY_TAKEN"
    BREAK_NOT_STARTED = "BREAK_NOT_STARTED"
    BREAK_ALREADY_ENDED = "BREAK_ALREADY_ENDED"
    RECORD_NOT_FOUND = "RECORD_NOT_FOUND"
    INVALID_RECORD_TIMES = "INVALID_RECORD_TIMES"
    VISIBILITY_UNCHANGED = "VISIBILITY_UNCHANGED"
    USER_NOT_FOUND = "USER_NOT_FOUND"
    CONFIG_MISSING = "CONFIG_MISSING"
    INVALID_CONFIG = "INVALID_CONFIG"
    NOT_AUTHORIZED = "NOT_AUTHORIZED"
    REQUEST_NOT_FOUND = "REQUEST_NOT_FOUND"
    REQUEST_NOT_PENDING = "REQUEST_NOT_PENDING"
    NOT_REQUEST_OWNER = "NOT_REQUEST_OWNER"
    INVALID_TIME_RANGE = "INVALID_TIME_RANGE"
    REJECTION_REASON_REQUIRED = "REJECTION_REASON_REQUIRED"
    INVALID_MPL_UNITS = "INVALID_MPL_UNITS"
    MPL_QUOTA_EXCEEDED = "MPL_QUOTA_EXCEEDED"


DEFAULT_MESSAGES: dict[RejectionCode, str] = {
    RejectionCode.ALREADY_CLOCKED_IN: "You have already clocked in today.",
    RejectionCode.NOT_CLOCKED_IN: "You haven't clocked in yet.",
    RejectionCode.ALREADY_CLOCKED_OUT: "You have already clocked out.",
    RejectionCode.BREAK_ALREADY_TAKEN: "Break has already been started or ended.",
    RejectionCode.BREAK_NOT_STARTED: "Cannot end break because break has not been started.",
    RejectionCode.BREAK_ALREADY_ENDED: "Break has already been ended.",
    RejectionCode.RECORD_NOT_FOUND: "Attendance record not found.",
    RejectionCode.INVALID_RECORD_TIMES: "Clock-out must be after clock-in and break finish after break start.",
    RejectionCode.VISIBILITY_UNCHANGED: "Visibility status is already set to the requested value.",
    RejectionCode.USER_NOT_FOUND: "User not found.",
    RejectionCode.CONFIG_MISSING: "Overtime configuration not found.",
    RejectionCode.INVALID_CONFIG: "Overtime configuration values are invalid.",
    RejectionCode.NOT_AUTHORIZED: "You are not allowed to perform this action.",
    RejectionCode.REQUEST_NOT_FOUND: "Overtime request not found.",
    RejectionCode.REQUEST_NOT_PENDING: "Only pending overtime requests can be changed.",
    RejectionCode.NOT_REQUEST_OWNER: "You can only change your own overtime request.",
    RejectionCode.INVALID_TIME_RANGE: "Start time must be before end time.",
    RejectionCode.REJECTION_REASON_REQUIRED: "Rejection reason is required when status is Rejected.",
    RejectionCode.INVALID_MPL_UNITS: "Requested MPL conversion must be at least 1 unit.",
    RejectionCode.MPL_QUOTA_EXCEEDED: (
        "Requested MPL conversion exceeds the remaining convertible MPL based on overtime hours."
    ),
}


@dataclass(frozen=True)
class Rejection:
    """A recoverable refusal carrying a display-ready reason."""

    code: RejectionCode
    message: str
    details: Mapping[str, Any] = field(default_factory=dict)

    @classmethod
    def of(cls, code: RejectionCode, message: Optional[str] = None, **details: Any) -> "Rejection":
        return cls(code=code, message=message or DEFAULT_MESSAGES[code], details=dict(details))

    @property
    def is_fatal(self) -> bool:
        # Nothing else can be computed without the overtime configuration.
        return self.code == RejectionCode.CONFIG_MISSING


@dataclass(frozen=True)
class Outcome(Generic[T]):
    """Result of a service operation: either a value or a rejection."""

    value: Optional[T] = None
    rejection: Optional[Rejection] = None
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.rejection is None

    @classmethod
    def success(cls, value: Optional[T] = None, message: str = "Request was successful") -> "Outcome[T]":
        return cls(value=value, message=message)

    @classmethod
    def failed(cls, rejection: Rejection) -> "Outcome[T]":
        return cls(rejection=rejection, message=rejection.message)

    @classmethod
    def reject(cls, code: RejectionCode, message: Optional[str] = None, **details: Any) -> "Outcome[T]":
        return cls.failed(Rejection.of(code, message, **details))
