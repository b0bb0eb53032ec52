"""Bridge event envelopes and the replay cache handed to newly connected clients."""

from __future__ import annotations

import json
import threading
from datetime import datetime, timezone
from typing import Any, Callable, Optional

from contracts.ui_protocol import (
    EVENT_BUDGET,
    EVENT_REMINDER,
    STICKY_EVENT_ORDER,
    STICKY_EVENT_TYPES,
)
from screentime.constants import EVENT_CREDITS_ADDED, EVENT_RESET

# Budget kinds after which a cached low-time reminder no longer applies.
REMINDER_INVALIDATING_KINDS = frozenset({EVENT_CREDITS_ADDED, EVENT_RESET})


def make_event(
    event_type: str,
    *,
    now_fn: Callable[[], datetime] | None = None,
    **payload: Any,
) -> str:
    """Wrap a payload in the `{"type", "timestamp", ...}` envelope sent to host bridges.

    Output is strict JSON: native bridges reject `NaN`/`Infinity`, so those
    raise `ValueError` here instead of reaching a client.
    """
    sent_at = now_fn() if now_fn is not None else datetime.now(timezone.utc)
    envelope = {"type": event_type, "timestamp": sent_at.isoformat()}
    envelope.update(payload)
    return json.dumps(envelope, allow_nan=False)


class StickyEventStore:
    """Latest budget, status, reminder, and error message per type.

    A reconnecting host app gets the current balance without waiting for the
    next tick. Reminders are dropped once credits or a reset make them stale.
    """

    def __init__(self):
        self._latest: dict[str, str] = {}
        self._lock = threading.Lock()

    def remember(self, event_type: str, message: str, *, kind: Optional[str] = None) -> None:
        if event_type not in STICKY_EVENT_TYPES:
            return
        with self._lock:
            self._latest[event_type] = message
            if event_type == EVENT_BUDGET and kind in REMINDER_INVALIDATING_KINDS:
                self._latest.pop(EVENT_REMINDER, None)

    def snapshot(self) -> list[str]:
        with self._lock:
            return [self._latest[name] for name in STICKY_EVENT_ORDER if name in self._latest]
