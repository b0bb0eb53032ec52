"""Idempotent stopped/running state machine for the depletion tick process."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from .clock import ClockSource
from .constants import RUN_RUNNING, RUN_STOPPED
from .reconciliation import Reconciliation, ReconciliationEngine
from .state import RunState, TimerState


@dataclass(frozen=True)
class RunTransition:
    """A run-state change; `flushed` is the final reconciliation of a stop."""
    run_state: RunState
    reason: str
    flushed: Optional[Reconciliation] = None

    @property
    def started(self) -> bool:
        return self.run_state == RUN_RUNNING


class RunController:
    """Keeps `run_state` equal to the depletion condition.

    Re-requesting the current state is a no-op, so duplicate lock or
    foreground callbacks never produce duplicate transitions.
    """

    def __init__(
        self,
        state: TimerState,
        reconciler: ReconciliationEngine,
        clock: ClockSource,
        *,
        logger: Optional[logging.Logger] = None,
    ):
        self._state = state
        self._reconciler = reconciler
        self._clock = clock
        self._logger = logger or logging.getLogger("run_controller")
        self._ticking = False

    @property
    def ticking(self) -> bool:
        return self._ticking

    def sync(self, reason: str, *, at: Optional[float] = None) -> Optional[RunTransition]:
        wants_to_run = self._state.wants_to_run()
        if wants_to_run and not self._state.is_running:
            return self._start(reason, at=at)
        if not wants_to_run and self._state.is_running:
            return self._stop(reason, at=at, flush=True)
        return None

    def halt(self, reason: str) -> Optional[RunTransition]:
        """Stop without flushing, regardless of the depletion condition."""
        if not self._state.is_running:
            self.cancel_ticks()
            return None
        return self._stop(reason, at=None, flush=False)

    def cancel_ticks(self) -> None:
        if self._ticking:
            self._logger.debug("Tick process cancelled")
        self._ticking = False

    def effective_time(self, at: Optional[float] = None) -> float:
        """Clamp a signal time into [last transition, now].

        Late or out-of-order signals may carry an `at` that predates the last
        start or stop; that span is already settled and must not be charged
        again.
        """
        now = self._clock.now()
        moment = now if at is None else min(at, now)
        floor = self._state.last_transition_at
        if floor is not None and moment < floor:
            self._logger.debug(
                "Signal time %.3f predates last transition %.3f; clamping",
                moment,
                floor,
            )
            moment = min(floor, now)
        return moment

    def _start(self, reason: str, *, at: Optional[float]) -> RunTransition:
        started_at = self.effective_time(at)
        self._state.run_state = RUN_RUNNING
        self._state.last_checkpoint = started_at
        self._state.last_transition_at = started_at
        self._ticking = True
        self._logger.info(
            "Tracking started: remaining=%ss reason=%s",
            self._state.remaining_seconds,
            reason,
        )
        return RunTransition(RUN_RUNNING, reason)

    def _stop(self, reason: str, *, at: Optional[float], flush: bool) -> RunTransition:
        self.cancel_ticks()
        stopped_at = self.effective_time(at)
        checkpoint = self._state.last_checkpoint
        if checkpoint is not None and stopped_at < checkpoint:
            stopped_at = checkpoint
        flushed: Optional[Reconciliation] = None
        if flush:
            flushed = self._reconciler.reconcile(now=stopped_at)
        self._state.run_state = RUN_STOPPED
        self._state.last_checkpoint = None
        self._state.last_transition_at = stopped_at
        self._logger.info(
            "Tracking stopped: remaining=%ss reason=%s",
            self._state.remaining_seconds,
            reason,
        )
        return RunTransition(RUN_STOPPED, reason, flushed)
