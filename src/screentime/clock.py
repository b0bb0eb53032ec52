"""Wall-clock sources used by the reconciliation logic."""

from __future__ import annotations

import time
from typing import Protocol


class ClockSource(Protocol):
    """Anything that can report the current wall-clock time in epoch seconds."""

    def now(self) -> float:
        ...


class SystemClock:
    """Reads `time.time()`; survives process restarts unlike a monotonic clock."""

    def now(self) -> float:
        return time.time()


class ManualClock:
    """Settable clock for simulations and tests."""

    def __init__(self, start: float = 0.0):
        self._now = float(start)

    def now(self) -> float:
        return self._now

    def set(self, value: float) -> None:
        self._now = float(value)

    def advance(self, seconds: float) -> float:
        self._now += float(seconds)
        return self._now
