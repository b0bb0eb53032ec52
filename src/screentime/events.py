"""In-process publish/subscribe fan-out for budget events."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Mapping, Optional

Observer = Callable[["TimerEvent"], None]


@dataclass(frozen=True)
class TimerEvent:
    """Tagged event record delivered to every bus observer."""
    kind: str
    remaining_seconds: int
    timestamp: float
    run_state: str = "stopped"
    details: Mapping[str, Any] = field(default_factory=dict)

    def to_payload(self) -> dict[str, Any]:
        """Flatten into a JSON-ready mapping; detail keys never shadow core fields."""
        payload: dict[str, Any] = dict(self.details)
        payload.update(
            {
                "kind": self.kind,
                "remaining_seconds": self.remaining_seconds,
                "run_state": self.run_state,
                "occurred_at": datetime.fromtimestamp(
                    self.timestamp, tz=timezone.utc
                ).isoformat(),
            }
        )
        return payload


class EventBus:
    """Delivers events to observers in registration order.

    A failing observer is logged and skipped; it never prevents delivery to
    the observers registered after it.
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        self._logger = logger or logging.getLogger("event_bus")
        self._observers: list[Observer] = []
        self._lock = threading.Lock()

    def subscribe(self, observer: Observer) -> Callable[[], None]:
        with self._lock:
            self._observers.append(observer)

        def unsubscribe() -> None:
            with self._lock:
                if observer in self._observers:
                    self._observers.remove(observer)

        return unsubscribe

    @property
    def observer_count(self) -> int:
        with self._lock:
            return len(self._observers)

    def publish(self, event: TimerEvent) -> None:
        with self._lock:
            observers = tuple(self._observers)

        for observer in observers:
            try:
                observer(event)
            except Exception as error:
                self._logger.error(
                    "Observer %r failed on %s event: %s",
                    observer,
                    event.kind,
                    error,
                    exc_info=True,
                )
