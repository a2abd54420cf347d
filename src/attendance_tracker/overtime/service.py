from __future__ import annotations

from contextlib import nullcontext
from dataclasses import replace
from datetime import date, time
from typing import Callable, ContextManager, Optional, Sequence

from ..common.clock import Clock, SystemClock
from ..common.datetime_utils import format_hhmm
from ..common.events import EventLogger
from ..common.validators import clean_text
from ..core.actor import Actor
from ..core.constants import DEFAULT_LIST_LIMIT, NOTIFY_OVERTIME_REQUEST, NOTIFY_OVERTIME_REVIEW
from ..core.enums import OvertimeRequestStatus
from ..core.results import Outcome, RejectionCode
from ..notifications.service import Notifier, SafeNotifier
from .model import OvertimeRequest
from .repository import OvertimeRepository


class OvertimeRequestService:
    """PENDING -> APPROVED | REJECTED | CANCELED. Every terminal state is final."""

    def __init__(
        self,
        requests: OvertimeRepository,
        notifier: Notifier,
        *,
        clock: Optional[Clock] = None,
        events: Optional[EventLogger] = None,
        transaction: Optional[Callable[[], ContextManager]] = None,
    ):
        self._requests = requests
        self._events = events or EventLogger("overtime")
        self._notifier = SafeNotifier(notifier, events=self._events)
        self._clock = clock or SystemClock()
        self._transaction = transaction or nullcontext

    def _reject(self, operation: str, code: RejectionCode, message: Optional[str] = None, **details) -> Outcome:
        outcome = Outcome.reject(code, message, **details)
        self._events.rejected(operation, outcome.rejection)
        return outcome

    def _check_window(self, operation: str, start_time: Optional[time], end_time: Optional[time]) -> Optional[Outcome]:
        if start_time is None or end_time is None or start_time >= end_time:
            return self._reject(
                operation,
                RejectionCode.INVALID_TIME_RANGE,
                start_time=format_hhmm(start_time) if start_time else None,
                end_time=format_hhmm(end_time) if end_time else None,
            )
        return None

    def request_overtime(
        self,
        actor: Actor,
        *,
        work_date: date,
        start_time: time,
        end_time: time,
        reason: str,
        expected_output: Optional[str] = None,
    ) -> Outcome[OvertimeRequest]:
        invalid = self._check_window("request_overtime", start_time, end_time)
        if invalid:
            return invalid

        now = self._clock.now()
        with self._transaction():
            request_id = self._requests.create(
                user_id=actor.user_id,
                work_date=work_date,
                start_time=start_time,
                end_time=end_time,
                reason=clean_text(reason) or "",
                expected_output=clean_text(expected_output),
                created_at=now,
            )
        request = OvertimeRequest(
            request_id=request_id,
            user_id=actor.user_id,
            work_date=work_date,
            start_time=start_time,
            end_time=end_time,
            reason=clean_text(reason) or "",
            expected_output=clean_text(expected_output),
            status=OvertimeRequestStatus.PENDING,
            created_at=now,
        )

        self._events.transition("request_overtime", request_id=request_id, user_id=actor.user_id, work_date=work_date)
        name = actor.name or f"User {actor.user_id}"
        self._notifier.notify_admins(
            "New Overtime Request",
            f"{name} has requested overtime on {work_date.strftime('%B %d, %Y')} "
            f"from {format_hhmm(start_time)} to {format_hhmm(end_time)}.",
            NOTIFY_OVERTIME_REQUEST,
            exclude_user_id=actor.user_id,
        )
        return Outcome.success(request, "Overtime request submitted successfully.")

    def _owned_pending(self, operation: str, actor: Actor, request_id: int):
        request = self._requests.get_by_id(request_id)
        if not request:
            return None, self._reject(operation, RejectionCode.REQUEST_NOT_FOUND, request_id=request_id)
        if request.user_id != actor.user_id:
            return None, self._reject(operation, RejectionCode.NOT_REQUEST_OWNER, request_id=request_id)
        if not request.is_pending:
            return None, self._reject(
                operation, RejectionCode.REQUEST_NOT_PENDING, request_id=request_id, status=request.status
            )
        return request, None

    def update_request(
        self,
        actor: Actor,
        request_id: int,
        *,
        work_date: Optional[date] = None,
        start_time: Optional[time] = None,
        end_time: Optional[time] = None,
        reason: Optional[str] = None,
        expected_output: Optional[str] = None,
    ) -> Outcome[OvertimeRequest]:
        with self._transaction():
            request, rejected = self._owned_pending("update_request", actor, request_id)
            if rejected:
                return rejected

            updated = replace(
                request,
                work_date=work_date or request.work_date,
                start_time=start_time or request.start_time,
                end_time=end_time or request.end_time,
                reason=clean_text(reason) or request.reason,
                expected_output=clean_text(expected_output) or request.expected_output,
                updated_at=self._clock.now(),
            )
            invalid = self._check_window("update_request", updated.start_time, updated.end_time)
            if invalid:
                return invalid
            self._requests.save(updated)

        self._events.transition("update_request", request_id=request_id, user_id=actor.user_id)
        return Outcome.success(updated, "Overtime request updated successfully.")

    def cancel_request(self, actor: Actor, request_id: int) -> Outcome[OvertimeRequest]:
        with self._transaction():
            request, rejected = self._owned_pending("cancel_request", actor, request_id)
            if rejected:
                return rejected
            canceled = replace(request, status=OvertimeRequestStatus.CANCELED, updated_at=self._clock.now())
            self._requests.save(canceled)

        self._events.transition("cancel_request", request_id=request_id, user_id=actor.user_id)
        return Outcome.success(canceled, "Overtime request canceled successfully.")

    def approve(self, actor: Actor, request_id: int) -> Outcome[OvertimeRequest]:
        return self._review("approve", actor, request_id, OvertimeRequestStatus.APPROVED, None)

    def reject(self, actor: Actor, request_id: int, reason: Optional[str]) -> Outcome[OvertimeRequest]:
        return self._review("reject", actor, request_id, OvertimeRequestStatus.REJECTED, clean_text(reason))

    def _review(
        self,
        operation: str,
        actor: Actor,
        request_id: int,
        status: OvertimeRequestStatus,
        rejection_reason: Optional[str],
    ) -> Outcome[OvertimeRequest]:
        if not actor.is_admin:
            return self._reject(operation, RejectionCode.NOT_AUTHORIZED, actor_id=actor.user_id)
        if status == OvertimeRequestStatus.REJECTED and not rejection_reason:
            return self._reject(operation, RejectionCode.REJECTION_REASON_REQUIRED, request_id=request_id)

        with self._transaction():
            request = self._requests.get_by_id(request_id)
            if not request:
                return self._reject(operation, RejectionCode.REQUEST_NOT_FOUND, request_id=request_id)
            if not request.is_pending:
                return self._reject(
                    operation, RejectionCode.REQUEST_NOT_PENDING, request_id=request_id, status=request.status
                )
            reviewed = replace(
                request,
                status=status,
                reviewed_by=actor.user_id,
                rejection_reason=rejection_reason,
                updated_at=self._clock.now(),
            )
            self._requests.save(reviewed)

        self._events.transition(operation, request_id=request_id, admin_id=actor.user_id, status=status)

        action = "approved" if status == OvertimeRequestStatus.APPROVED else "rejected"
        admin_name = actor.name or f"Admin {actor.user_id}"
        message = (
            f"{admin_name} has {action} your overtime on {request.work_date.strftime('%B %d, %Y')} "
            f"from {format_hhmm(request.start_time)} to {format_hhmm(request.end_time)}."
        )
        if rejection_reason:
            message = f"{message} Reason: {rejection_reason}"
        self._notifier.notify_user(request.user_id, "Overtime Review Result", message, NOTIFY_OVERTIME_REVIEW)

        return Outcome.success(reviewed, f"Overtime request {action} successfully.")

    def list_for_user(self, user_id: int, *, limit: int = DEFAULT_LIST_LIMIT) -> Sequence[OvertimeRequest]:
        return self._requests.list_requests(user_id=user_id, limit=limit)

    def list_pending(self, *, limit: int = DEFAULT_LIST_LIMIT) -> Sequence[OvertimeRequest]:
        return self._requests.list_requests(status=OvertimeRequestStatus.PENDING, limit=limit)
