from __future__ import annotations

from contextlib import nullcontext
from dataclasses import replace
from datetime import time
from typing import Callable, ContextManager, Optional

from ..common.clock import Clock, SystemClock
from ..common.events import EventLogger
from ..core.actor import Actor
from ..core.constants import NOTIFY_CONFIG_UPDATE
from ..core.results import Outcome, RejectionCode
from ..notifications.service import Notifier, SafeNotifier
from .model import OvertimeConfig
from .repository import OvertimeConfigRepository


class OvertimeConfigService:
    """Read and maintain the overtime configuration singleton."""

    def __init__(
        self,
        configs: OvertimeConfigRepository,
        notifier: Notifier,
        *,
        clock: Optional[Clock] = None,
        events: Optional[EventLogger] = None,
        transaction: Optional[Callable[[], ContextManager]] = None,
    ):
        self._configs = configs
        self._events = events or EventLogger("overtime_config")
        self._notifier = SafeNotifier(notifier, events=self._events)
        self._clock = clock or SystemClock()
        self._transaction = transaction or nullcontext

    def get_config(self) -> Outcome[OvertimeConfig]:
        config = self._configs.get()
        if config is None:
            outcome = Outcome.reject(RejectionCode.CONFIG_MISSING)
            self._events.rejected("get_config", outcome.rejection)
            return outcome
        return Outcome.success(config)

    def update_config(
        self,
        actor: Actor,
        *,
        office_start_time: Optional[time] = None,
        office_end_time: Optional[time] = None,
        break_max_minutes: Optional[int] = None,
        night_diff_start_time: Optional[time] = None,
        night_diff_end_time: Optional[time] = None,
        overtime_daily_max_minutes: Optional[int] = None,
    ) -> Outcome[OvertimeConfig]:
        """Partial update: omitted fields keep their stored values."""
        if not actor.is_admin:
            outcome = Outcome.reject(RejectionCode.NOT_AUTHORIZED, actor_id=actor.user_id)
            self._events.rejected("update_config", outcome.rejection)
            return outcome

        with self._transaction():
            current = self._configs.get()
            if current is None:
                outcome = Outcome.reject(RejectionCode.CONFIG_MISSING)
                self._events.rejected("update_config", outcome.rejection)
                return outcome

            updated = replace(
                current,
                office_start_time=office_start_time or current.office_start_time,
                office_end_time=office_end_time or current.office_end_time,
                break_max_minutes=current.break_max_minutes if break_max_minutes is None else int(break_max_minutes),
                night_diff_start_time=night_diff_start_time or current.night_diff_start_time,
                night_diff_end_time=night_diff_end_time or current.night_diff_end_time,
                overtime_daily_max_minutes=(
                    current.overtime_daily_max_minutes
                    if overtime_daily_max_minutes is None
                    else int(overtime_daily_max_minutes)
                ),
                updated_at=self._clock.now(),
            )

            problem = _validate(updated)
            if problem:
                outcome = Outcome.reject(RejectionCode.INVALID_CONFIG, problem)
                self._events.rejected("update_config", outcome.rejection)
                return outcome

            self._configs.save(updated)

        self._events.transition(
            "update_config",
            admin_id=actor.user_id,
            office_start=updated.office_start_time,
            office_end=updated.office_end_time,
            break_max=updated.break_max_minutes,
            night_start=updated.night_diff_start_time,
            night_end=updated.night_diff_end_time,
            daily_max=updated.overtime_daily_max_minutes,
        )
        admin_name = actor.name or f"Admin {actor.user_id}"
        self._notifier.notify_admins(
            "Configuration Update",
            f"{admin_name} has updated the overtime configuration.",
            NOTIFY_CONFIG_UPDATE,
            exclude_user_id=actor.user_id,
        )
        return Outcome.success(updated, "Overtime configuration updated successfully.")


def _validate(config: OvertimeConfig) -> Optional[str]:
    if config.break_max_minutes < 0:
        return "Break max minutes cannot be negative."
    if config.overtime_daily_max_minutes < 0:
        return "Overtime daily max minutes cannot be negative."
    if config.office_end_time <= config.office_start_time:
        return "Office end time must be after office start time."
    return None
