"""Reminder payloads and the scheduler contract used by the reminder planner."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Protocol

REMINDER_TIME_WARNING = "time-warning"
REMINDER_TIME_EXPIRED = "time-expired"
REMINDER_TIME_ADDED = "time-added"


@dataclass(frozen=True)
class ReminderPayload:
    """User-visible alert content handed to the scheduler."""
    kind: str
    title: str
    message: str
    seconds_remaining: Optional[int] = None
    seconds_added: Optional[int] = None

    def to_payload(self) -> dict[str, object]:
        payload: dict[str, object] = {
            "kind": self.kind,
            "title": self.title,
            "message": self.message,
        }
        if self.seconds_remaining is not None:
            payload["seconds_remaining"] = self.seconds_remaining
        if self.seconds_added is not None:
            payload["seconds_added"] = self.seconds_added
        return payload


class ReminderScheduler(Protocol):
    """Fire-and-forget alert scheduling keyed on wall-clock epoch seconds."""

    def schedule_at(self, fire_time: float, payload: ReminderPayload) -> None:
        ...

    def cancel_all(self) -> None:
        ...
