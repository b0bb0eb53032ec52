"""Background-aware screen-time budget: the public operations of the core."""

from __future__ import annotations

import logging
import threading
from typing import Any, Optional

from .clock import ClockSource, SystemClock
from .constants import (
    EVENT_BACKGROUND_TIME_PROCESSED,
    EVENT_CREDITS_ADDED,
    EVENT_CREDITS_REMOVED,
    EVENT_RESET,
    EVENT_TIME_EXPIRED,
    EVENT_TIME_LOADED,
    EVENT_TIME_UPDATE,
    EVENT_TRACKING_STARTED,
    EVENT_TRACKING_STOPPED,
    FOREGROUND_ACTIVE,
    FOREGROUND_BACKGROUND,
    FOREGROUND_STATES,
    LOCK_STATES,
    LOCK_UNLOCKED,
    REASON_CONDITIONS,
    REASON_EXPIRED,
    REASON_FOREGROUND,
    REASON_RESET,
    REASON_RESTART,
)
from .controller import RunController, RunTransition
from .events import EventBus, TimerEvent
from .ledger import Ledger, validate_amount
from .persistence import CheckpointStore
from .reconciliation import Reconciliation, ReconciliationEngine
from .state import BudgetStatus, ForegroundState, LockState, TimerState


class ScreenTimeBudget:
    """Owns one `TimerState` and applies every signal to it sequentially.

    Lifecycle is explicit: `start()` loads and reconciles persisted state,
    `shutdown()` flushes it. Every public operation leaves `run_state` equal
    to the depletion condition and `remaining_seconds` non-negative.
    """

    def __init__(
        self,
        *,
        store: CheckpointStore,
        bus: EventBus,
        clock: Optional[ClockSource] = None,
        foreground_state: ForegroundState = FOREGROUND_ACTIVE,
        lock_state: LockState = LOCK_UNLOCKED,
        logger: Optional[logging.Logger] = None,
    ):
        _validate_foreground_state(foreground_state)
        _validate_lock_state(lock_state)

        self._store = store
        self._bus = bus
        self._clock = clock or SystemClock()
        self._logger = logger or logging.getLogger("screentime")
        self._lock = threading.RLock()

        self._state = TimerState(foreground_state=foreground_state, lock_state=lock_state)
        if foreground_state == FOREGROUND_BACKGROUND:
            self._state.background_since = self._clock.now()
        self._ledger = Ledger(self._state)
        self._reconciler = ReconciliationEngine(
            self._state,
            self._ledger,
            self._clock,
            logger=self._logger.getChild("reconciliation"),
        )
        self._controller = RunController(
            self._state,
            self._reconciler,
            self._clock,
            logger=self._logger.getChild("controller"),
        )
        self._started = False

    @property
    def bus(self) -> EventBus:
        return self._bus

    @property
    def is_ticking(self) -> bool:
        return self._controller.ticking

    def status(self) -> BudgetStatus:
        with self._lock:
            return BudgetStatus.from_state(self._state)

    def start(self) -> BudgetStatus:
        """Load the persisted budget, reconcile a pending checkpoint, resume."""
        with self._lock:
            if self._started:
                self._logger.warning("Budget already started")
                return BudgetStatus.from_state(self._state)
            self._started = True

            stored = self._store.load()
            self._ledger.restore(stored.remaining_seconds)
            if stored.was_running and stored.checkpoint is not None:
                now = self._clock.now()
                result = self._reconciler.reconcile_from(stored.checkpoint, now=now)
                self._state.last_checkpoint = None
                self._state.last_transition_at = now
                self._logger.info(
                    "Recovered %ss of untracked depletion after restart: %ss -> %ss",
                    result.elapsed_seconds,
                    result.previous_seconds,
                    result.remaining_seconds,
                )
                self._emit(
                    EVENT_BACKGROUND_TIME_PROCESSED,
                    elapsed_seconds=result.elapsed_seconds,
                    debited_seconds=result.debited_seconds,
                    previous_seconds=result.previous_seconds,
                    reason=REASON_RESTART,
                )
                if result.crossed_zero:
                    self._emit_expired()

            self._emit(EVENT_TIME_LOADED, stored_seconds=stored.remaining_seconds)
            transition = self._controller.sync(REASON_RESTART)
            if transition is not None:
                self._apply_transition(transition)
            else:
                self._persist()
            return BudgetStatus.from_state(self._state)

    def shutdown(self) -> BudgetStatus:
        """Flush pending depletion and persist; a live checkpoint is kept.

        Keeping the checkpoint lets the next `start()` charge for the time the
        process was gone while the depletion conditions still held.
        """
        with self._lock:
            if self._state.is_running:
                self._apply_reconciliation(self._reconciler.reconcile())
            self._controller.cancel_ticks()
            self._persist()
            self._started = False
            self._logger.info("Budget shut down: remaining=%ss", self._state.remaining_seconds)
            return BudgetStatus.from_state(self._state)

    def tick(self) -> Optional[Reconciliation]:
        """One periodic pass; a no-op unless the tick process is live."""
        with self._lock:
            if not self._controller.ticking:
                return None
            result = self._reconciler.reconcile()
            self._apply_reconciliation(result)
            return result

    def set_lock_state(self, lock_state: LockState, *, at: Optional[float] = None) -> bool:
        """Apply a level-triggered lock signal; returns False for a repeat."""
        _validate_lock_state(lock_state)
        with self._lock:
            if lock_state == self._state.lock_state:
                self._logger.debug("Ignoring repeated lock signal: %s", lock_state)
                return False
            self._logger.info("Lock state: %s -> %s", self._state.lock_state, lock_state)
            self._state.lock_state = lock_state
            self._sync(REASON_CONDITIONS, at=at)
            return True

    def set_foreground_state(
        self,
        foreground_state: ForegroundState,
        *,
        at: Optional[float] = None,
    ) -> bool:
        """Apply a host lifecycle signal; returns False for a repeat."""
        _validate_foreground_state(foreground_state)
        with self._lock:
            previous = self._state.foreground_state
            if foreground_state == previous:
                self._logger.debug("Ignoring repeated foreground signal: %s", foreground_state)
                return False
            self._logger.info("Foreground state: %s -> %s", previous, foreground_state)
            now = self._controller.effective_time(at)
            self._state.foreground_state = foreground_state

            if foreground_state == FOREGROUND_BACKGROUND and self._state.background_since is None:
                self._state.background_since = now

            if foreground_state != FOREGROUND_ACTIVE:
                self._sync(REASON_CONDITIONS, at=at)
                return True

            transition = self._controller.sync(REASON_FOREGROUND, at=at)
            flushed = transition.flushed if transition is not None else None
            background_since = self._state.background_since
            self._state.background_since = None
            details: dict[str, Any] = {
                "previous_state": previous,
                "elapsed_seconds": flushed.elapsed_seconds if flushed else 0,
                "debited_seconds": flushed.debited_seconds if flushed else 0,
                "reason": REASON_FOREGROUND,
            }
            if background_since is not None:
                details["background_seconds"] = max(0, int(now - background_since))
            if transition is not None:
                self._apply_transition(transition, announce_expiry=False)
            self._emit(EVENT_BACKGROUND_TIME_PROCESSED, **details)
            if flushed is not None and flushed.crossed_zero:
                self._emit_expired()
            return True

    def add_credits(self, seconds: int) -> int:
        validate_amount(seconds)
        with self._lock:
            self._catch_up()
            change = self._ledger.credit(seconds)
            self._logger.info("Added %ss credits. Total: %ss", seconds, change.remaining_seconds)
            self._persist()
            self._emit(
                EVENT_CREDITS_ADDED,
                previous_seconds=change.previous_seconds,
                added_seconds=seconds,
            )
            self._sync(REASON_CONDITIONS)
            return self._state.remaining_seconds

    def remove_credits(self, seconds: int) -> int:
        validate_amount(seconds)
        with self._lock:
            self._catch_up()
            change = self._ledger.debit(seconds)
            self._logger.info("Removed %ss credits. Total: %ss", seconds, change.remaining_seconds)
            self._persist()
            self._emit(
                EVENT_CREDITS_REMOVED,
                previous_seconds=change.previous_seconds,
                removed_seconds=change.applied_seconds,
            )
            if change.crossed_zero:
                self._sync(REASON_EXPIRED)
                self._emit_expired()
            return self._state.remaining_seconds

    def reset(self) -> BudgetStatus:
        """Zero the budget and wipe persisted keys before returning."""
        with self._lock:
            transition = self._controller.halt(REASON_RESET)
            if transition is not None:
                self._emit(EVENT_TRACKING_STOPPED, reason=REASON_RESET)
            previous = self._ledger.clear()
            self._state.last_checkpoint = None
            self._state.last_transition_at = self._clock.now()
            if not self._store.clear():
                self._logger.error("Reset completed in memory but persisted keys may survive")
            self._logger.info("Budget reset (discarded %ss)", previous)
            self._emit(EVENT_RESET, previous_seconds=previous)
            return BudgetStatus.from_state(self._state)

    def _catch_up(self) -> None:
        if self._controller.ticking:
            self._apply_reconciliation(self._reconciler.reconcile())

    def _sync(self, reason: str, *, at: Optional[float] = None) -> None:
        transition = self._controller.sync(reason, at=at)
        if transition is not None:
            self._apply_transition(transition)

    def _apply_reconciliation(self, result: Reconciliation) -> None:
        if not result.applied:
            return
        self._persist()
        self._emit(EVENT_TIME_UPDATE, elapsed_seconds=result.elapsed_seconds)
        if result.crossed_zero:
            self._logger.info("Time expired")
            self._sync(REASON_EXPIRED)
            self._emit_expired()

    def _apply_transition(self, transition: RunTransition, *, announce_expiry: bool = True) -> None:
        if transition.started:
            self._persist()
            self._emit(EVENT_TRACKING_STARTED, reason=transition.reason)
            return

        flushed = transition.flushed
        if flushed is not None and flushed.applied:
            self._emit(EVENT_TIME_UPDATE, elapsed_seconds=flushed.elapsed_seconds)
        self._persist()
        self._emit(EVENT_TRACKING_STOPPED, reason=transition.reason)
        if announce_expiry and flushed is not None and flushed.crossed_zero:
            self._emit_expired()

    def _emit_expired(self) -> None:
        self._emit(EVENT_TIME_EXPIRED)

    def _persist(self) -> None:
        self._store.save(self._state.remaining_seconds, self._state.last_checkpoint)

    def _emit(self, kind: str, **details: Any) -> None:
        self._bus.publish(
            TimerEvent(
                kind=kind,
                remaining_seconds=self._state.remaining_seconds,
                timestamp=self._clock.now(),
                run_state=self._state.run_state,
                details=details,
            )
        )


def _validate_foreground_state(value: str) -> None:
    if value not in FOREGROUND_STATES:
        allowed = ", ".join(sorted(FOREGROUND_STATES))
        raise ValueError(f"foreground_state must be one of: {allowed}; got {value!r}")


def _validate_lock_state(value: str) -> None:
    if value not in LOCK_STATES:
        allowed = ", ".join(sorted(LOCK_STATES))
        raise ValueError(f"lock_state must be one of: {allowed}; got {value!r}")
