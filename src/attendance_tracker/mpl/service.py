from __future__ import annotations

from contextlib import nullcontext
from datetime import date
from decimal import ROUND_FLOOR, Decimal
from typing import Callable, ContextManager, Optional, Sequence

from ..attendance.repository import AttendanceRepository
from ..common.clock import Clock, SystemClock
from ..common.events import EventLogger
from ..core.actor import Actor
from ..core.constants import DEFAULT_LIST_LIMIT, MPL_HOURS_PER_UNIT, NOTIFY_MPL_CONVERSION
from ..core.results import Outcome, RejectionCode
from ..notifications.service import Notifier, SafeNotifier
from ..users.repository import UserRepository
from .cutoff import cutoff_for
from .model import ConversionQuota, CutoffPeriod, OvertimeMplConversion
from .repository import MplConversionRepository

MINUTES_PER_UNIT = MPL_HOURS_PER_UNIT * 60
HOURS_PRECISION = Decimal("0.01")


class MplConversionService:
    """Converts a cutoff's approved overtime into MPL units, 8 hours per unit.

    The quota is rebuilt from attendance rows and the ledger on every call;
    nothing about it is cached.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        conversions: MplConversionRepository,
        users: UserRepository,
        notifier: Notifier,
        *,
        clock: Optional[Clock] = None,
        events: Optional[EventLogger] = None,
        transaction: Optional[Callable[[], ContextManager]] = None,
    ):
        self._attendance = attendance
        self._conversions = conversions
        self._users = users
        self._events = events or EventLogger("mpl")
        self._notifier = SafeNotifier(notifier, events=self._events)
        self._clock = clock or SystemClock()
        self._transaction = transaction or nullcontext

    def _reject(self, operation: str, code: RejectionCode, message: Optional[str] = None, **details) -> Outcome:
        outcome = Outcome.reject(code, message, **details)
        self._events.rejected(operation, outcome.rejection)
        return outcome

    def _quota(self, user_id: int, cutoff: CutoffPeriod) -> ConversionQuota:
        total_minutes = self._attendance.sum_overtime_minutes(
            user_id=user_id, start_date=cutoff.start, end_date=cutoff.end
        )
        total_hours = (Decimal(int(total_minutes)) / Decimal(60)).quantize(HOURS_PRECISION)
        already = self._conversions.sum_converted(user_id=user_id, cutoff_start=cutoff.start, cutoff_end=cutoff.end)
        return ConversionQuota(
            cutoff=cutoff,
            total_overtime_hours=total_hours,
            max_convertible=int(total_minutes) // MINUTES_PER_UNIT,
            already_converted=int(already),
        )

    def quota(self, user_id: int, *, cutoff: Optional[CutoffPeriod] = None) -> ConversionQuota:
        return self._quota(user_id, cutoff or cutoff_for(self._clock.now().date()))

    def convert(
        self,
        actor: Actor,
        user_id: int,
        requested_units: int,
        *,
        cutoff: Optional[CutoffPeriod] = None,
    ) -> Outcome[OvertimeMplConversion]:
        if not actor.is_admin:
            return self._reject("convert", RejectionCode.NOT_AUTHORIZED, actor_id=actor.user_id)
        if int(requested_units) < 1:
            return self._reject("convert", RejectionCode.INVALID_MPL_UNITS, requested=requested_units)

        user = self._users.get_by_id(user_id)
        if not user:
            return self._reject("convert", RejectionCode.USER_NOT_FOUND, user_id=user_id)

        now = self._clock.now()
        cutoff = cutoff or cutoff_for(now.date())
        units = int(requested_units)

        with self._transaction():
            quota = self._quota(user_id, cutoff)
            if units > quota.remaining:
                return self._reject(
                    "convert", RejectionCode.MPL_QUOTA_EXCEEDED, requested=units, **quota.as_dict()
                )

            used_hours = Decimal((quota.already_converted + units) * MPL_HOURS_PER_UNIT)
            residual = (quota.total_overtime_hours - used_hours).to_integral_value(rounding=ROUND_FLOOR)
            residual = max(residual, Decimal(0))

            conversion_id = self._conversions.append(
                user_id=user_id,
                cutoff_start=cutoff.start,
                cutoff_end=cutoff.end,
                total_overtime_hours=quota.total_overtime_hours,
                mpl_converted=units,
                residual_overtime_hours=residual,
                conversion_date=now,
                converted_by=actor.user_id,
            )
            self._users.add_mpl_credits(user_id=user_id, units=Decimal(units))

        conversion = OvertimeMplConversion(
            conversion_id=conversion_id,
            user_id=user_id,
            cutoff_start=cutoff.start,
            cutoff_end=cutoff.end,
            total_overtime_hours=quota.total_overtime_hours,
            mpl_converted=units,
            residual_overtime_hours=residual,
            conversion_date=now,
            converted_by=actor.user_id,
        )
        self._events.transition(
            "convert",
            conversion_id=conversion_id,
            user_id=user_id,
            admin_id=actor.user_id,
            units=units,
            total_hours=quota.total_overtime_hours,
            residual=residual,
        )

        admin_name = actor.name or f"Admin {actor.user_id}"
        self._notifier.notify_user(
            user_id,
            "Overtime to MPL Conversion",
            f"{admin_name} has converted your overtime hours for this cutoff to {units} MPL/s. "
            f"Your remaining convertible overtime hours is {residual}.",
            NOTIFY_MPL_CONVERSION,
        )
        return Outcome.success(conversion, "Overtime converted to MPL successfully.")

    def history(self, user_id: int, *, limit: int = DEFAULT_LIST_LIMIT) -> Sequence[OvertimeMplConversion]:
        return self._conversions.list_for_user(user_id, limit=limit)

    def list_for_period(
        self, start_date: date, end_date: date, *, limit: int = DEFAULT_LIST_LIMIT
    ) -> Sequence[OvertimeMplConversion]:
        return self._conversions.list_within(start_date=start_date, end_date=end_date, limit=limit)
