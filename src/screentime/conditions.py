"""Depletion condition shared by the run controller and status reporting."""

from __future__ import annotations

from .constants import FOREGROUND_ACTIVE, LOCK_UNLOCKED


def should_run(foreground_state: str, lock_state: str, remaining_seconds: int) -> bool:
    """Return whether the budget should currently deplete.

    Time is only spent while the host app is out of the foreground and the
    device is unlocked. `inactive` counts as out of the foreground.
    """
    return (
        remaining_seconds > 0
        and lock_state == LOCK_UNLOCKED
        and foreground_state != FOREGROUND_ACTIVE
    )
