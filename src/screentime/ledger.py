"""Integer budget bookkeeping with clamping at zero."""

from __future__ import annotations

from dataclasses import dataclass

from .state import TimerState


@dataclass(frozen=True)
class LedgerChange:
    """Outcome of one ledger mutation."""
    previous_seconds: int
    remaining_seconds: int

    @property
    def applied_seconds(self) -> int:
        return abs(self.previous_seconds - self.remaining_seconds)

    @property
    def crossed_zero(self) -> bool:
        return self.previous_seconds > 0 and self.remaining_seconds == 0


def validate_amount(seconds: int) -> int:
    if isinstance(seconds, bool) or not isinstance(seconds, int):
        raise ValueError(f"seconds must be an integer, got: {seconds!r}")
    if seconds <= 0:
        raise ValueError(f"seconds must be greater than zero, got: {seconds}")
    return seconds


class Ledger:
    """Owns every change to `TimerState.remaining_seconds`."""

    def __init__(self, state: TimerState):
        self._state = state

    @property
    def remaining_seconds(self) -> int:
        return self._state.remaining_seconds

    def credit(self, seconds: int) -> LedgerChange:
        previous = self._state.remaining_seconds
        self._state.remaining_seconds = previous + validate_amount(seconds)
        return LedgerChange(previous, self._state.remaining_seconds)

    def debit(self, seconds: int) -> LedgerChange:
        previous = self._state.remaining_seconds
        self._state.remaining_seconds = max(0, previous - validate_amount(seconds))
        return LedgerChange(previous, self._state.remaining_seconds)

    def restore(self, seconds: int) -> None:
        """Set the balance from persisted data, clamping corrupt negatives."""
        self._state.remaining_seconds = max(0, int(seconds))

    def clear(self) -> int:
        previous = self._state.remaining_seconds
        self._state.remaining_seconds = 0
        return previous
