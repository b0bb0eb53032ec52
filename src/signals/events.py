"""Host lifecycle and device lock signals, plus the queue publisher that carries them."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from queue import Queue
from typing import Any, Optional, Protocol

from screentime.constants import (
    FOREGROUND_BACKGROUND,
    FOREGROUND_STATES,
    LOCK_LOCKED,
    LOCK_STATES,
    LOCK_UNLOCKED,
)


class SignalParseError(ValueError):
    """Raised when an inbound signal value cannot be understood."""


@dataclass(frozen=True)
class LockSignal:
    """Level-triggered device lock state reported by the host."""
    state: str
    occurred_at: Optional[datetime] = None

    def __post_init__(self) -> None:
        if self.state not in LOCK_STATES:
            raise SignalParseError(f"Unknown lock state: {self.state!r}")

    @property
    def occurred_at_epoch(self) -> Optional[float]:
        return self.occurred_at.timestamp() if self.occurred_at is not None else None


@dataclass(frozen=True)
class ForegroundSignal:
    """Host application lifecycle value (`active`, `inactive`, `background`)."""
    state: str
    occurred_at: Optional[datetime] = None

    def __post_init__(self) -> None:
        if self.state not in FOREGROUND_STATES:
            raise SignalParseError(f"Unknown foreground state: {self.state!r}")

    @property
    def occurred_at_epoch(self) -> Optional[float]:
        return self.occurred_at.timestamp() if self.occurred_at is not None else None


_LOCK_ALIASES = {
    "locked": LOCK_LOCKED,
    "lock": LOCK_LOCKED,
    "devicelocked": LOCK_LOCKED,
    "unlocked": LOCK_UNLOCKED,
    "unlock": LOCK_UNLOCKED,
    "deviceunlocked": LOCK_UNLOCKED,
}

_FOREGROUND_ALIASES = {
    "active": "active",
    "foreground": "active",
    "inactive": "inactive",
    "background": FOREGROUND_BACKGROUND,
}


def parse_lock_state(value: Any) -> str:
    """Normalize `locked`/`unlocked` strings, native event names, or booleans."""
    if isinstance(value, bool):
        return LOCK_LOCKED if value else LOCK_UNLOCKED
    if isinstance(value, str):
        normalized = _LOCK_ALIASES.get(value.strip().lower().replace("_", ""))
        if normalized is not None:
            return normalized
    raise SignalParseError(f"Unknown lock state: {value!r}")


def parse_foreground_state(value: Any) -> str:
    if isinstance(value, str):
        normalized = _FOREGROUND_ALIASES.get(value.strip().lower())
        if normalized is not None:
            return normalized
    raise SignalParseError(f"Unknown foreground state: {value!r}")


class SignalPublisher(Protocol):
    def publish(self, event: Any) -> None: ...


class QueueSignalPublisher:
    """Signal publisher that pushes events onto the runtime queue."""

    def __init__(self, queue: Queue):
        self._queue = queue

    def publish(self, event: Any) -> None:
        self._queue.put(event)
