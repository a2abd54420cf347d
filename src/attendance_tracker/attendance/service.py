from __future__ import annotations

from contextlib import nullcontext
from dataclasses import replace
from datetime import date, datetime, timedelta
from typing import Callable, ContextManager, Optional, Sequence

from ..common.clock import Clock, SystemClock
from ..common.datetime_utils import format_minutes
from ..common.events import EventLogger
from ..common.intervals import minutes_between
from ..core.actor import Actor
from ..core.constants import (
    DEFAULT_HISTORY_LIMIT,
    DEFAULT_LIST_LIMIT,
    NOTIFY_ATTENDANCE_ALERT,
    NOTIFY_ATTENDANCE_UPDATE,
)
from ..core.enums import AttendanceStatus, VisibilityStatus
from ..core.results import Outcome, RejectionCode
from ..notifications.service import Notifier, SafeNotifier
from ..overtime.capper import OvertimeAccrualCapper
from ..overtime.model import OvertimeConfig, OvertimeRequest
from ..overtime.night_differential import NightDifferentialCalculator
from ..overtime.repository import OvertimeConfigRepository, OvertimeRepository
from ..users.repository import UserRepository
from .factory import AttendanceStrategyFactory
from .model import AccountingSnapshot, AttendanceRecord, AttendanceResult
from .repository import AttendanceRepository


class AttendanceService:
    """Per-user, per-day lifecycle: clock-in, break, clock-out and admin edits.

    Every refusal comes back as a rejected Outcome; nothing here raises for a
    precondition. Mutations run inside `transaction()` and notifications are
    sent only after it closes.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        users: UserRepository,
        overtime: OvertimeRepository,
        configs: OvertimeConfigRepository,
        notifier: Notifier,
        *,
        clock: Optional[Clock] = None,
        events: Optional[EventLogger] = None,
        transaction: Optional[Callable[[], ContextManager]] = None,
        strategy_factory: Optional[AttendanceStrategyFactory] = None,
        capper: Optional[OvertimeAccrualCapper] = None,
        night_calculator: Optional[NightDifferentialCalculator] = None,
    ):
        self._attendance = attendance
        self._users = users
        self._overtime = overtime
        self._configs = configs
        self._events = events or EventLogger("attendance")
        self._notifier = SafeNotifier(notifier, events=self._events)
        self._clock = clock or SystemClock()
        self._transaction = transaction or nullcontext
        self._factory = strategy_factory or AttendanceStrategyFactory()
        self._capper = capper or OvertimeAccrualCapper()
        self._night = night_calculator or NightDifferentialCalculator()

    def _reject(self, operation: str, code: RejectionCode, message: Optional[str] = None, **details) -> Outcome:
        outcome = Outcome.reject(code, message, **details)
        self._events.rejected(operation, outcome.rejection)
        return outcome

    def _open_record(self, user_id: int, today: date) -> Optional[AttendanceRecord]:
        """Today's record, or yesterday's if it is still open (night shift)."""
        record = self._attendance.get_for_user_and_date(user_id, today)
        if record is not None and record.clock_in is not None:
            return record
        previous = self._attendance.get_for_user_and_date(user_id, today - timedelta(days=1))
        if previous is not None and previous.clock_in is not None and previous.clock_out is None:
            return previous
        return record

    def _accounting(
        self,
        record: AttendanceRecord,
        config: OvertimeConfig,
        approved: Optional[OvertimeRequest],
        *,
        status: AttendanceStatus,
        late_minutes: int,
    ) -> AccountingSnapshot:
        if record.clock_in is None or record.clock_out is None:
            return AccountingSnapshot(status=status, late_minutes=late_minutes, break_minutes=record.break_minutes)

        accrual = self._capper.compute(
            work_start=record.clock_in,
            work_end=record.clock_out,
            break_minutes=record.break_minutes,
            config=config,
            approved_request=approved,
        )
        return AccountingSnapshot(
            status=status,
            late_minutes=late_minutes,
            overtime_minutes=accrual.capped_overtime_minutes,
            night_diff_minutes=self._night.compute(config=config, approved_request=approved),
            actual_overtime_minutes=accrual.actual_overtime_minutes,
            worked_minutes=accrual.worked_minutes,
            break_minutes=record.break_minutes,
        )

    def _accrue(self, record: AttendanceRecord, snapshot: AccountingSnapshot) -> AttendanceRecord:
        """Add to the user totals only what this record has never accrued before."""
        overtime = max(snapshot.overtime_minutes - record.accrued_overtime_minutes, 0)
        night = max(snapshot.night_diff_minutes - record.accrued_night_diff_minutes, 0)
        if overtime or night:
            self._users.add_accumulators(user_id=record.user_id, overtime_minutes=overtime, night_diff_minutes=night)
        return replace(
            record,
            accrued_overtime_minutes=record.accrued_overtime_minutes + overtime,
            accrued_night_diff_minutes=record.accrued_night_diff_minutes + night,
        )

    def clock_in(self, user_id: int, *, remarks: Optional[str] = None) -> Outcome[AttendanceResult]:
        now = self._clock.now()
        today = now.date()

        user = self._users.get_by_id(user_id)
        if not user:
            return self._reject("clock_in", RejectionCode.USER_NOT_FOUND, user_id=user_id)

        config = self._configs.get()
        if config is None:
            return self._reject("clock_in", RejectionCode.CONFIG_MISSING)

        with self._transaction():
            existing = self._attendance.get_for_user_and_date(user_id, today)
            if existing and existing.clock_in is not None:
                return self._reject("clock_in", RejectionCode.ALREADY_CLOCKED_IN, user_id=user_id)

            strategy = self._factory.for_clock_in(now=now, today=today, config=config)
            decision = strategy.decide_clock_in(now=now, today=today, config=config)

            if existing:
                record = replace(
                    existing,
                    clock_in=now,
                    status=decision.status,
                    late_minutes=decision.late_minutes,
                    remarks=remarks or existing.remarks,
                    updated_at=now,
                )
                self._attendance.save(record)
            else:
                attendance_id = self._attendance.create_clock_in(
                    user_id=user_id,
                    work_date=today,
                    clock_in=now,
                    status=decision.status,
                    late_minutes=decision.late_minutes,
                    remarks=remarks,
                )
                record = AttendanceRecord(
                    attendance_id=attendance_id,
                    user_id=user_id,
                    work_date=today,
                    clock_in=now,
                    status=decision.status,
                    late_minutes=decision.late_minutes,
                    remarks=remarks,
                )

        self._events.transition(
            "clock_in", user_id=user_id, attendance_id=record.attendance_id, status=record.status, late=record.late_minutes
        )

        message = "Clock-in recorded successfully."
        if decision.late_minutes > 0:
            late = format_minutes(decision.late_minutes)
            message = f"Clock-in recorded successfully. However, you are late by {late}."
            self._notifier.notify_admins("Employee Late Clock-in", f"{user.name} has clocked in {late} late.", NOTIFY_ATTENDANCE_ALERT)
            self._notifier.notify_user(user_id, "Late Clock-in", f"You clocked in {late} late.", NOTIFY_ATTENDANCE_ALERT)

        snapshot = AccountingSnapshot(status=decision.status, late_minutes=decision.late_minutes)
        return Outcome.success(AttendanceResult(record=record, snapshot=snapshot), message)

    def start_break(self, user_id: int) -> Outcome[AttendanceResult]:
        now = self._clock.now()

        with self._transaction():
            record = self._open_record(user_id, now.date())
            if record is None or record.clock_in is None:
                return self._reject("start_break", RejectionCode.NOT_CLOCKED_IN, user_id=user_id)
            if record.clock_out is not None:
                return self._reject(
                    "start_break",
                    RejectionCode.ALREADY_CLOCKED_OUT,
                    "Cannot start break because you are already clocked out.",
                    user_id=user_id,
                )
            if record.break_start is not None or record.break_finish is not None:
                return self._reject("start_break", RejectionCode.BREAK_ALREADY_TAKEN, user_id=user_id)

            record = replace(record, break_start=now, updated_at=now)
            self._attendance.save(record)

        self._events.transition("start_break", user_id=user_id, attendance_id=record.attendance_id)
        return Outcome.success(AttendanceResult(record=record), "Break has started.")

    def end_break(self, user_id: int) -> Outcome[AttendanceResult]:
        now = self._clock.now()

        config = self._configs.get()
        if config is None:
            return self._reject("end_break", RejectionCode.CONFIG_MISSING)

        with self._transaction():
            record = self._open_record(user_id, now.date())
            if record is None or record.clock_in is None:
                return self._reject("end_break", RejectionCode.NOT_CLOCKED_IN, user_id=user_id)
            if record.break_start is None:
                return self._reject("end_break", RejectionCode.BREAK_NOT_STARTED, user_id=user_id)
            if record.clock_out is not None:
                return self._reject(
                    "end_break",
                    RejectionCode.ALREADY_CLOCKED_OUT,
                    "Cannot end break because you are already clocked out.",
                    user_id=user_id,
                )
            if record.break_finish is not None:
                return self._reject("end_break", RejectionCode.BREAK_ALREADY_ENDED, user_id=user_id)

            record = replace(record, break_finish=now, updated_at=now)
            self._attendance.save(record)

        break_minutes = minutes_between(record.break_start, record.break_finish)
        over_break = max(break_minutes - int(config.break_max_minutes), 0)
        self._events.transition(
            "end_break", user_id=user_id, attendance_id=record.attendance_id, break_minutes=break_minutes, over=over_break
        )

        message = "Break has ended."
        if over_break > 0:
            over = format_minutes(over_break)
            message = f"Break has ended. However, you exceeded the maximum break time by {over}."
            user = self._users.get_by_id(user_id)
            name = user.name if user else f"User {user_id}"
            self._notifier.notify_admins(
                "Employee Break Time Exceeded", f"{name} exceeded the maximum break time by {over}.", NOTIFY_ATTENDANCE_ALERT
            )
            self._notifier.notify_user(
                user_id, "Break Time Exceeded", f"You exceeded the maximum break time by {over}.", NOTIFY_ATTENDANCE_ALERT
            )

        return Outcome.success(AttendanceResult(record=record, over_break_minutes=over_break), message)

    def clock_out(self, user_id: int) -> Outcome[AttendanceResult]:
        now = self._clock.now()

        config = self._configs.get()
        if config is None:
            return self._reject("clock_out", RejectionCode.CONFIG_MISSING)

        user = self._users.get_by_id(user_id)
        if not user:
            return self._reject("clock_out", RejectionCode.USER_NOT_FOUND, user_id=user_id)

        with self._transaction():
            record = self._open_record(user_id, now.date())
            if record is None or record.clock_in is None:
                return self._reject("clock_out", RejectionCode.NOT_CLOCKED_IN, user_id=user_id)
            if record.clock_out is not None:
                return self._reject("clock_out", RejectionCode.ALREADY_CLOCKED_OUT, user_id=user_id)

            closed = record.closed_at(now)
            approved = self._overtime.get_approved_for(user_id=user_id, work_date=record.work_date)
            snapshot = self._accounting(
                closed, config, approved, status=record.status, late_minutes=record.late_minutes
            )
            strategy = self._factory.for_clock_out(now=now, today=record.work_date, config=config)
            decision = strategy.decide_clock_out(now=now, today=record.work_date, config=config, current=snapshot.status)

            closed = closed.apply(snapshot, at=now)
            if decision.note:
                closed = replace(closed, remarks=decision.note)
            closed = self._accrue(closed, snapshot)
            self._attendance.save(closed)

        self._events.transition(
            "clock_out",
            user_id=user_id,
            attendance_id=closed.attendance_id,
            worked=snapshot.worked_minutes,
            actual_overtime=snapshot.actual_overtime_minutes,
            overtime=snapshot.overtime_minutes,
            night_diff=snapshot.night_diff_minutes,
            approved=approved is not None,
        )

        message = "You have clocked out successfully."
        if decision.early_minutes > 0:
            early = format_minutes(decision.early_minutes)
            message = f"Clock-out recorded successfully. However, you clocked out {early} early."
            self._notifier.notify_admins(
                "Employee Early Clock-out", f"{user.name} has clocked out {early} early.", NOTIFY_ATTENDANCE_ALERT
            )
            self._notifier.notify_user(user_id, "Early Clock-out", f"You clocked out {early} early.", NOTIFY_ATTENDANCE_ALERT)

        return Outcome.success(
            AttendanceResult(record=closed, snapshot=snapshot, early_minutes=decision.early_minutes), message
        )

    def admin_edit(
        self,
        actor: Actor,
        attendance_id: int,
        *,
        clock_in: Optional[datetime] = None,
        clock_out: Optional[datetime] = None,
        break_start: Optional[datetime] = None,
        break_finish: Optional[datetime] = None,
    ) -> Outcome[AttendanceResult]:
        """Apply edited timestamps and recompute every derived field.

        Accumulators receive only the increase over the most the record has
        ever accrued, so lowering and raising an edit never accrues twice.
        """
        if not actor.is_admin:
            return self._reject("admin_edit", RejectionCode.NOT_AUTHORIZED, actor_id=actor.user_id)

        config = self._configs.get()
        if config is None:
            return self._reject("admin_edit", RejectionCode.CONFIG_MISSING)

        now = self._clock.now()
        with self._transaction():
            record = self._attendance.get_by_id(attendance_id)
            if not record:
                return self._reject("admin_edit", RejectionCode.RECORD_NOT_FOUND, attendance_id=attendance_id)

            edited = replace(
                record,
                clock_in=clock_in or record.clock_in,
                clock_out=clock_out or record.clock_out,
                break_start=break_start or record.break_start,
                break_finish=break_finish or record.break_finish,
            )
            if edited.clock_out is not None:
                edited = edited.closed_at(edited.clock_out)
            if edited.clock_in is None:
                return self._reject(
                    "admin_edit", RejectionCode.INVALID_RECORD_TIMES, "Clock-in is required.", attendance_id=attendance_id
                )
            if edited.clock_out is not None and edited.clock_out <= edited.clock_in:
                return self._reject(
                    "admin_edit",
                    RejectionCode.INVALID_RECORD_TIMES,
                    "Clock-out must be after clock-in.",
                    clock_in=edited.clock_in.isoformat(),
                    clock_out=edited.clock_out.isoformat(),
                )
            if (
                edited.break_start is not None
                and edited.break_finish is not None
                and edited.break_finish <= edited.break_start
            ):
                return self._reject(
                    "admin_edit",
                    RejectionCode.INVALID_RECORD_TIMES,
                    "Break finish must be after break start.",
                    break_start=edited.break_start.isoformat(),
                    break_finish=edited.break_finish.isoformat(),
                )

            user = self._users.get_by_id(record.user_id)
            if not user:
                return self._reject("admin_edit", RejectionCode.USER_NOT_FOUND, user_id=record.user_id)

            strategy = self._factory.for_clock_in(now=edited.clock_in, today=record.work_date, config=config)
            decision = strategy.decide_clock_in(now=edited.clock_in, today=record.work_date, config=config)
            approved = self._overtime.get_approved_for(user_id=record.user_id, work_date=record.work_date)
            snapshot = self._accounting(
                edited, config, approved, status=decision.status, late_minutes=decision.late_minutes
            )

            edited = self._accrue(edited.apply(snapshot, at=now), snapshot)
            self._attendance.save(edited)

        self._events.transition(
            "admin_edit",
            attendance_id=attendance_id,
            admin_id=actor.user_id,
            status=snapshot.status,
            late=snapshot.late_minutes,
            overtime=snapshot.overtime_minutes,
            night_diff=snapshot.night_diff_minutes,
        )

        day = record.work_date.strftime("%B %d, %Y")
        admin_name = actor.name or f"Admin {actor.user_id}"
        self._notifier.notify_admins(
            "Attendance Record Update",
            f"{admin_name} has edited the attendance record of {user.name} for {day}.",
            NOTIFY_ATTENDANCE_UPDATE,
            exclude_user_id=actor.user_id,
        )
        self._notifier.notify_user(
            record.user_id,
            "Attendance Record Update",
            f"{admin_name} has edited your attendance record for {day}.",
            NOTIFY_ATTENDANCE_UPDATE,
        )

        return Outcome.success(AttendanceResult(record=edited, snapshot=snapshot), "Attendance Record updated successfully.")

    def set_visibility(self, actor: Actor, attendance_id: int, visibility: VisibilityStatus) -> Outcome[AttendanceRecord]:
        if not actor.is_admin:
            return self._reject("set_visibility", RejectionCode.NOT_AUTHORIZED, actor_id=actor.user_id)

        with self._transaction():
            record = self._attendance.get_by_id(attendance_id)
            if not record:
                return self._reject("set_visibility", RejectionCode.RECORD_NOT_FOUND, attendance_id=attendance_id)
            if record.visibility == visibility:
                return self._reject("set_visibility", RejectionCode.VISIBILITY_UNCHANGED, attendance_id=attendance_id)
            self._attendance.set_visibility(attendance_id=attendance_id, visibility=visibility)

        self._events.transition(
            "set_visibility", attendance_id=attendance_id, admin_id=actor.user_id, visibility=visibility
        )
        return Outcome.success(
            replace(record, visibility=visibility), "Attendance record visibility status updated successfully."
        )

    def get_today_record(self, user_id: int) -> Optional[AttendanceRecord]:
        return self._attendance.get_for_user_and_date(user_id, self._clock.now().date())

    def get_history(
        self, user_id: int, *, limit: int = DEFAULT_HISTORY_LIMIT, include_hidden: bool = False
    ) -> Sequence[AttendanceRecord]:
        return self._attendance.get_recent_for_user(user_id, limit, include_hidden=include_hidden)

    def get_record(self, actor: Actor, attendance_id: int) -> Outcome[AttendanceRecord]:
        """Admins read any record; employees read their own visible records."""
        record = self._attendance.get_by_id(attendance_id)
        if record is None or (not actor.is_admin and not record.is_visible):
            return self._reject("get_record", RejectionCode.RECORD_NOT_FOUND, attendance_id=attendance_id)
        if not actor.is_admin and record.user_id != actor.user_id:
            return self._reject("get_record", RejectionCode.NOT_AUTHORIZED, actor_id=actor.user_id)
        return Outcome.success(record)

    def list_records(
        self,
        actor: Actor,
        *,
        user_id: Optional[int] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        include_hidden: bool = False,
        limit: int = DEFAULT_LIST_LIMIT,
    ) -> Outcome[Sequence[AttendanceRecord]]:
        if not actor.is_admin:
            return self._reject("list_records", RejectionCode.NOT_AUTHORIZED, actor_id=actor.user_id)
        records = self._attendance.list_records(
            user_id=user_id,
            start_date=start_date,
            end_date=end_date,
            include_hidden=include_hidden,
            limit=limit,
        )
        return Outcome.success(records)
