from __future__ import annotations

from typing import Any, Optional, Protocol

from contracts.ui_protocol import EVENT_BUDGET, EVENT_ERROR, EVENT_REMINDER, EVENT_STATUS
from reminders import ReminderPayload
from screentime import BudgetStatus, TimerEvent


class UIServerLike(Protocol):
    def publish(self, event_type: str, **payload: Any) -> None:
        ...

    def stop(self, timeout_seconds: float = 5.0) -> None:
        ...


class RuntimeUIPublisher:
    """Forwards budget events, status snapshots, and reminders to the UI server."""

    def __init__(self, ui_server: Optional[UIServerLike]):
        self._ui_server = ui_server

    def publish(self, event_type: str, **payload: Any) -> None:
        if self._ui_server:
            self._ui_server.publish(event_type, **payload)

    def __call__(self, event: TimerEvent) -> None:
        self.publish_budget_event(event)

    def publish_budget_event(self, event: TimerEvent) -> None:
        self.publish(EVENT_BUDGET, **event.to_payload())

    def publish_status(self, status: BudgetStatus) -> None:
        self.publish(
            EVENT_STATUS,
            remaining_seconds=status.remaining_seconds,
            formatted_time=status.formatted_time,
            foreground_state=status.foreground_state,
            lock_state=status.lock_state,
            run_state=status.run_state,
        )

    def publish_reminder(self, reminder: ReminderPayload) -> None:
        self.publish(EVENT_REMINDER, **reminder.to_payload())

    def publish_error(self, message: str) -> None:
        self.publish(EVENT_ERROR, message=message)
