"""Event-bus observer that keeps scheduled low-time warnings in sync."""

from __future__ import annotations

import logging
from typing import Iterable, Optional

from screentime.constants import (
    DEFAULT_WARNING_THRESHOLDS_SECONDS,
    EVENT_BACKGROUND_TIME_PROCESSED,
    EVENT_CREDITS_ADDED,
    EVENT_CREDITS_REMOVED,
    EVENT_RESET,
    EVENT_TIME_EXPIRED,
    EVENT_TIME_LOADED,
    EVENT_TRACKING_STARTED,
    EVENT_TRACKING_STOPPED,
    RUN_RUNNING,
)
from screentime.events import TimerEvent

from .contracts import ReminderScheduler
from .messages import credits_added_reminder, expired_reminder, warning_reminder

# Ticks leave the projected expiry instant unchanged, so `time-update` is absent.
_RESCHEDULE_EVENTS: frozenset[str] = frozenset(
    {
        EVENT_TIME_LOADED,
        EVENT_TRACKING_STARTED,
        EVENT_TRACKING_STOPPED,
        EVENT_CREDITS_ADDED,
        EVENT_CREDITS_REMOVED,
        EVENT_RESET,
        EVENT_BACKGROUND_TIME_PROCESSED,
    }
)


class ReminderPlanner:
    """Cancels and re-plans warnings whenever the budget or run state moves.

    Warnings are only meaningful while the budget is depleting; when tracking
    is stopped every pending warning is cancelled and nothing is re-planned.
    """

    def __init__(
        self,
        scheduler: ReminderScheduler,
        *,
        thresholds_seconds: Iterable[int] = DEFAULT_WARNING_THRESHOLDS_SECONDS,
        announce_credits: bool = False,
        logger: Optional[logging.Logger] = None,
    ):
        self._scheduler = scheduler
        self._thresholds = tuple(sorted({int(value) for value in thresholds_seconds if int(value) > 0}, reverse=True))
        self._announce_credits = announce_credits
        self._logger = logger or logging.getLogger("reminders")

    @property
    def thresholds_seconds(self) -> tuple[int, ...]:
        return self._thresholds

    def __call__(self, event: TimerEvent) -> None:
        if event.kind == EVENT_TIME_EXPIRED:
            self._scheduler.cancel_all()
            self._scheduler.schedule_at(event.timestamp, expired_reminder())
            return

        if event.kind not in _RESCHEDULE_EVENTS:
            return

        self._reschedule(event)

        if event.kind == EVENT_CREDITS_ADDED and self._announce_credits:
            added = int(event.details.get("added_seconds", 0))
            if added > 0:
                self._scheduler.schedule_at(event.timestamp, credits_added_reminder(added))

    def _reschedule(self, event: TimerEvent) -> None:
        self._scheduler.cancel_all()
        if event.run_state != RUN_RUNNING or event.remaining_seconds <= 0:
            return

        planned = 0
        for threshold in self._thresholds:
            if event.remaining_seconds > threshold:
                fire_time = event.timestamp + (event.remaining_seconds - threshold)
                self._scheduler.schedule_at(fire_time, warning_reminder(threshold))
                planned += 1
        self._logger.debug(
            "Planned %d warning(s) for %ss remaining",
            planned,
            event.remaining_seconds,
        )
