"""Runtime loop that serializes signals, commands, and ticks onto one thread."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from queue import Empty, Queue
from typing import Any, Callable, Optional

from reminders import ReminderScheduler
from screentime import ScreenTimeBudget
from signals import ForegroundSignal, LockSignal, LockStateProbe, QueueSignalPublisher

from .commands import (
    AddCreditsCommand,
    RemoveCreditsCommand,
    ResetCommand,
    ShutdownRequest,
    StatusRequest,
)
from .ui import RuntimeUIPublisher, UIServerLike


@dataclass(frozen=True)
class RuntimeHooks:
    """Injectable lifecycle hooks used by runtime startup."""
    setup_signal_handlers: Callable[[QueueSignalPublisher], None]


@dataclass(frozen=True)
class RuntimeBootstrap:
    """Dependency bundle required to construct the runtime engine."""
    logger: logging.Logger
    budget: ScreenTimeBudget
    event_queue: Queue[Any]
    hooks: RuntimeHooks
    tick_interval_seconds: float = 1.0
    ui_server: Optional[UIServerLike] = None
    lock_probe: Optional[LockStateProbe] = None
    reminder_scheduler: Optional[ReminderScheduler] = None


class RuntimeEngine:
    """Single owner of the budget: every mutation happens on the loop thread.

    Other threads (websocket bridge, lock probe, OS signal handlers) only put
    events on the queue. Between events the loop calls `tick()`, so a tick and
    a concurrently arriving signal are always applied one after the other.
    """

    def __init__(self, bootstrap: RuntimeBootstrap):
        if bootstrap.tick_interval_seconds <= 0:
            raise ValueError("tick_interval_seconds must be greater than zero")
        self._bootstrap = bootstrap
        self._logger = bootstrap.logger
        self._budget = bootstrap.budget
        self._queue = bootstrap.event_queue
        self._publisher = QueueSignalPublisher(bootstrap.event_queue)
        self._ui = RuntimeUIPublisher(bootstrap.ui_server)
        self._unsubscribe_ui: Optional[Callable[[], None]] = None
        if bootstrap.ui_server is not None:
            self._unsubscribe_ui = self._budget.bus.subscribe(self._ui)

    @property
    def publisher(self) -> QueueSignalPublisher:
        return self._publisher

    @property
    def ui(self) -> RuntimeUIPublisher:
        return self._ui

    def run(self) -> int:
        try:
            self._bootstrap.hooks.setup_signal_handlers(self._publisher)
            status = self._budget.start()
            self._logger.info(
                "Budget loaded: %s remaining (%s)",
                status.formatted_time,
                status.run_state,
            )
            self._ui.publish_status(status)

            lock_probe = self._bootstrap.lock_probe
            if lock_probe is not None:
                self._logger.info("Starting lock probe...")
                lock_probe.start()

            while True:
                loop_exit = self.step(self._bootstrap.tick_interval_seconds)
                if loop_exit is not None:
                    return loop_exit

        except KeyboardInterrupt:
            self._logger.info("Shutdown requested by keyboard interrupt.")
            return 0
        except Exception as error:
            self._logger.error("Unexpected error: %s", error, exc_info=True)
            return 1
        finally:
            self._shutdown()

    def step(self, timeout: float) -> Optional[int]:
        """Handle at most one queued event, then tick once."""
        event = self._poll_event(timeout)
        if event is not None:
            event_exit = self._handle_event(event)
            if event_exit is not None:
                return event_exit
        self._budget.tick()
        return None

    def _poll_event(self, timeout: float) -> Optional[Any]:
        try:
            if timeout <= 0:
                return self._queue.get_nowait()
            return self._queue.get(timeout=timeout)
        except Empty:
            return None

    def _handle_event(self, event: Any) -> Optional[int]:
        try:
            if isinstance(event, LockSignal):
                self._budget.set_lock_state(event.state, at=event.occurred_at_epoch)
                return None

            if isinstance(event, ForegroundSignal):
                self._budget.set_foreground_state(event.state, at=event.occurred_at_epoch)
                return None

            if isinstance(event, AddCreditsCommand):
                self._budget.add_credits(event.seconds)
                return None

            if isinstance(event, RemoveCreditsCommand):
                self._budget.remove_credits(event.seconds)
                return None

            if isinstance(event, ResetCommand):
                self._budget.reset()
                return None

            if isinstance(event, StatusRequest):
                self._ui.publish_status(self._budget.status())
                return None

            if isinstance(event, ShutdownRequest):
                self._logger.info("Shutdown requested: %s", event.reason)
                return event.exit_code

        except ValueError as error:
            self._logger.warning("Rejected %s: %s", type(event).__name__, error)
            self._ui.publish_error(f"Rejected {type(event).__name__}: {error}")
            return None

        self._logger.warning("Ignoring unknown event type: %s", type(event).__name__)
        return None

    def _shutdown(self) -> None:
        lock_probe = self._bootstrap.lock_probe
        if lock_probe is not None:
            self._logger.info("Stopping lock probe...")
            lock_probe.stop()

        try:
            self._budget.shutdown()
        except Exception as error:
            self._logger.error("Error flushing budget: %s", error, exc_info=True)

        scheduler = self._bootstrap.reminder_scheduler
        if scheduler is not None:
            scheduler.cancel_all()

        if self._unsubscribe_ui is not None:
            self._unsubscribe_ui()
            self._unsubscribe_ui = None

        ui_server = self._bootstrap.ui_server
        if ui_server is not None:
            self._logger.info("Stopping UI server...")
            try:
                ui_server.stop(timeout_seconds=5.0)
            except Exception as error:
                self._logger.error("Error stopping UI server: %s", error, exc_info=True)
