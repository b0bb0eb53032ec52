"""Recovers elapsed wall-clock time from checkpoints and debits it once.

Ticks are only an optimization: the host may suspend or kill the process at
any moment while depletion conditions still hold. Elapsed time is therefore
always derived from the stored checkpoint, never from counting ticks.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Optional

from .clock import ClockSource
from .ledger import Ledger
from .state import TimerState


@dataclass(frozen=True)
class Reconciliation:
    """What one reconciliation pass observed and applied."""
    elapsed_seconds: int
    previous_seconds: int
    remaining_seconds: int

    @property
    def debited_seconds(self) -> int:
        return self.previous_seconds - self.remaining_seconds

    @property
    def applied(self) -> bool:
        return self.elapsed_seconds > 0

    @property
    def crossed_zero(self) -> bool:
        return self.previous_seconds > 0 and self.remaining_seconds == 0


class ReconciliationEngine:
    def __init__(
        self,
        state: TimerState,
        ledger: Ledger,
        clock: ClockSource,
        *,
        logger: Optional[logging.Logger] = None,
    ):
        self._state = state
        self._ledger = ledger
        self._clock = clock
        self._logger = logger or logging.getLogger("reconciliation")

    def reconcile(self, *, now: Optional[float] = None) -> Reconciliation:
        """Debit whole seconds elapsed since the checkpoint.

        The checkpoint advances by exactly the debited whole seconds so the
        fractional remainder carries into the next pass instead of drifting.
        """
        previous = self._state.remaining_seconds
        checkpoint = self._state.last_checkpoint
        if checkpoint is None:
            return Reconciliation(0, previous, previous)

        current = self._clock.now() if now is None else now
        elapsed = current - checkpoint
        if elapsed < 0:
            self._logger.warning(
                "Checkpoint %.3f is %.3fs ahead of the clock; rebasing without debit",
                checkpoint,
                -elapsed,
            )
            self._state.last_checkpoint = current
            return Reconciliation(0, previous, previous)

        whole_seconds = int(math.floor(elapsed))
        if whole_seconds < 1:
            return Reconciliation(0, previous, previous)

        change = self._ledger.debit(whole_seconds)
        self._state.last_checkpoint = checkpoint + whole_seconds
        self._logger.debug(
            "Reconciled %ss: %ss -> %ss",
            whole_seconds,
            change.previous_seconds,
            change.remaining_seconds,
        )
        return Reconciliation(
            whole_seconds,
            change.previous_seconds,
            change.remaining_seconds,
        )

    def reconcile_from(self, checkpoint: float, *, now: Optional[float] = None) -> Reconciliation:
        """Reconcile against an externally restored checkpoint (process restart)."""
        self._state.last_checkpoint = checkpoint
        return self.reconcile(now=now)
