"""State, event-kind, and storage-key constants used by the budget core."""

from __future__ import annotations

FOREGROUND_ACTIVE = "active"
FOREGROUND_INACTIVE = "inactive"
FOREGROUND_BACKGROUND = "background"

FOREGROUND_STATES: frozenset[str] = frozenset(
    {FOREGROUND_ACTIVE, FOREGROUND_INACTIVE, FOREGROUND_BACKGROUND}
)

LOCK_LOCKED = "locked"
LOCK_UNLOCKED = "unlocked"

LOCK_STATES: frozenset[str] = frozenset({LOCK_LOCKED, LOCK_UNLOCKED})

RUN_STOPPED = "stopped"
RUN_RUNNING = "running"

EVENT_TIME_LOADED = "time-loaded"
EVENT_TIME_UPDATE = "time-update"
EVENT_TRACKING_STARTED = "tracking-started"
EVENT_TRACKING_STOPPED = "tracking-stopped"
EVENT_TIME_EXPIRED = "time-expired"
EVENT_CREDITS_ADDED = "credits-added"
EVENT_CREDITS_REMOVED = "credits-removed"
EVENT_RESET = "reset"
EVENT_BACKGROUND_TIME_PROCESSED = "background-time-processed"

EVENT_KINDS: tuple[str, ...] = (
    EVENT_TIME_LOADED,
    EVENT_TIME_UPDATE,
    EVENT_TRACKING_STARTED,
    EVENT_TRACKING_STOPPED,
    EVENT_TIME_EXPIRED,
    EVENT_CREDITS_ADDED,
    EVENT_CREDITS_REMOVED,
    EVENT_RESET,
    EVENT_BACKGROUND_TIME_PROCESSED,
)

# Why a run-controller transition happened; carried in event details.
REASON_CONDITIONS = "conditions"
REASON_EXPIRED = "expired"
REASON_RESET = "reset"
REASON_RESTART = "restart"
REASON_FOREGROUND = "foreground"

STORAGE_KEY_REMAINING = "@timer_remaining"
STORAGE_KEY_CHECKPOINT = "@timer_start_time"

STORAGE_KEYS: tuple[str, ...] = (STORAGE_KEY_REMAINING, STORAGE_KEY_CHECKPOINT)

DEFAULT_TICK_INTERVAL_SECONDS = 1.0
DEFAULT_WARNING_THRESHOLDS_SECONDS: tuple[int, ...] = (5 * 60, 60, 30)
