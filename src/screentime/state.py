"""Mutable budget aggregate and the immutable status snapshot derived from it."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Optional

from .conditions import should_run
from .constants import (
    FOREGROUND_ACTIVE,
    LOCK_UNLOCKED,
    RUN_RUNNING,
    RUN_STOPPED,
)
from .formatting import format_clock

ForegroundState = Literal["active", "inactive", "background"]
LockState = Literal["locked", "unlocked"]
RunState = Literal["stopped", "running"]


@dataclass
class TimerState:
    """Single source of truth for the budget, owned by one `ScreenTimeBudget`."""
    remaining_seconds: int = 0
    foreground_state: ForegroundState = FOREGROUND_ACTIVE
    lock_state: LockState = LOCK_UNLOCKED
    run_state: RunState = RUN_STOPPED
    last_checkpoint: Optional[float] = None
    background_since: Optional[float] = None
    # Depletion before this instant is already settled.
    last_transition_at: Optional[float] = None

    @property
    def is_running(self) -> bool:
        return self.run_state == RUN_RUNNING

    def wants_to_run(self) -> bool:
        return should_run(self.foreground_state, self.lock_state, self.remaining_seconds)


@dataclass(frozen=True)
class BudgetStatus:
    """Immutable snapshot exposed to the runtime, websocket clients, and tests."""
    remaining_seconds: int
    formatted_time: str
    foreground_state: ForegroundState
    lock_state: LockState
    run_state: RunState
    last_checkpoint: Optional[float]
    background_since: Optional[float]

    @property
    def is_running(self) -> bool:
        return self.run_state == RUN_RUNNING

    @classmethod
    def from_state(cls, state: TimerState) -> "BudgetStatus":
        return cls(
            remaining_seconds=state.remaining_seconds,
            formatted_time=format_clock(state.remaining_seconds),
            foreground_state=state.foreground_state,
            lock_state=state.lock_state,
            run_state=state.run_state,
            last_checkpoint=state.last_checkpoint,
            background_since=state.background_since,
        )
