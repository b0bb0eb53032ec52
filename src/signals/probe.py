"""Cancellable periodic lock-state probe for hosts without lock events."""

from __future__ import annotations

import logging
import shlex
import subprocess
import threading
from datetime import datetime, timezone
from typing import Callable, Optional

from screentime.constants import LOCK_LOCKED, LOCK_UNLOCKED

from .events import LockSignal, SignalPublisher

LockProbe = Callable[[], bool]


def command_lock_probe(command: str, *, timeout_seconds: float = 5.0) -> LockProbe:
    """Build a probe that runs `command`; exit status 0 means the device is locked."""
    argv = shlex.split(command)
    if not argv:
        raise ValueError("lock probe command cannot be empty")

    def probe() -> bool:
        completed = subprocess.run(
            argv,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            timeout=timeout_seconds,
            check=False,
        )
        return completed.returncode == 0

    return probe


class LockStateProbe:
    """Polls `probe` on its own thread and publishes only state changes.

    Nothing runs until `start()`; `stop()` is idempotent.
    """

    def __init__(
        self,
        probe: LockProbe,
        publisher: SignalPublisher,
        *,
        interval_seconds: float = 2.0,
        logger: Optional[logging.Logger] = None,
    ):
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be greater than zero")
        self._probe = probe
        self._publisher = publisher
        self._interval_seconds = float(interval_seconds)
        self._logger = logger or logging.getLogger("lock_probe")
        self._thread: Optional[threading.Thread] = None
        self._stop_event = threading.Event()
        self._last_state: Optional[str] = None

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if self.is_running:
            self._logger.warning("Lock probe is already running")
            return
        self._stop_event.clear()
        self._last_state = None
        self._thread = threading.Thread(target=self._run, daemon=True, name="lock-probe")
        self._thread.start()

    def stop(self, timeout_seconds: float = 5.0) -> None:
        if self._thread is None:
            return
        self._stop_event.set()
        self._thread.join(timeout=timeout_seconds)
        if self._thread.is_alive():
            self._logger.error("Lock probe thread did not stop within %.1fs", timeout_seconds)
        self._thread = None

    def poll_once(self) -> Optional[LockSignal]:
        """Probe once and publish if the state changed; returns the published signal."""
        try:
            locked = self._probe()
        except Exception as error:
            self._logger.warning("Lock probe failed: %s", error)
            return None

        state = LOCK_LOCKED if locked else LOCK_UNLOCKED
        if state == self._last_state:
            return None
        self._last_state = state
        signal = LockSignal(state=state, occurred_at=datetime.now(timezone.utc))
        self._publisher.publish(signal)
        return signal

    def _run(self) -> None:
        self._logger.debug("Lock probe started (interval=%.1fs)", self._interval_seconds)
        self.poll_once()
        while not self._stop_event.wait(self._interval_seconds):
            self.poll_once()
        self._logger.debug("Lock probe stopped")
