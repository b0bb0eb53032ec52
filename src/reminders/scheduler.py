"""In-process reminder scheduler backed by `threading.Timer`."""

from __future__ import annotations

import logging
import threading
from typing import Callable, Optional

from screentime.clock import ClockSource, SystemClock

from .contracts import ReminderPayload

ReminderDelivery = Callable[[ReminderPayload], None]


class ThreadedReminderScheduler:
    """Fires reminders on timer threads and hands them to `deliver`.

    Reminders whose fire time has already passed are delivered immediately on
    the calling thread, so a following `cancel_all()` cannot swallow them.
    """

    def __init__(
        self,
        deliver: ReminderDelivery,
        *,
        clock: Optional[ClockSource] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self._deliver = deliver
        self._clock = clock or SystemClock()
        self._logger = logger or logging.getLogger("reminder_scheduler")
        self._timers: set[threading.Timer] = set()
        self._lock = threading.Lock()

    @property
    def pending_count(self) -> int:
        with self._lock:
            return len(self._timers)

    def schedule_at(self, fire_time: float, payload: ReminderPayload) -> None:
        delay = fire_time - self._clock.now()
        if delay <= 0:
            self._fire(payload, None)
            return

        timer = threading.Timer(delay, lambda: self._fire(payload, timer))
        timer.daemon = True
        timer.name = f"reminder-{payload.kind}"
        with self._lock:
            self._timers.add(timer)
        timer.start()
        self._logger.debug("Scheduled %s in %.1fs", payload.title, delay)

    def cancel_all(self) -> None:
        with self._lock:
            timers = tuple(self._timers)
            self._timers.clear()
        for timer in timers:
            timer.cancel()
        if timers:
            self._logger.debug("Cancelled %d pending reminder(s)", len(timers))

    def _fire(self, payload: ReminderPayload, timer: Optional[threading.Timer]) -> None:
        if timer is not None:
            with self._lock:
                if timer not in self._timers:
                    return
                self._timers.discard(timer)
        try:
            self._deliver(payload)
        except Exception as error:
            self._logger.error("Reminder delivery failed: %s", error, exc_info=True)
