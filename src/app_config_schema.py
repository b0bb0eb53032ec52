"""Dataclass schema objects used by runtime configuration loading."""

from __future__ import annotations

from dataclasses import dataclass

from screentime.constants import (
    DEFAULT_TICK_INTERVAL_SECONDS,
    DEFAULT_WARNING_THRESHOLDS_SECONDS,
    FOREGROUND_ACTIVE,
    LOCK_UNLOCKED,
)

DEFAULT_CONFIG_FILE = "config.toml"
DEFAULT_STORAGE_FILE = "screentime_state.json"

STORAGE_BACKEND_JSON = "json"
STORAGE_BACKEND_MEMORY = "memory"


class AppConfigurationError(Exception):
    """Raised when application configuration fails."""


@dataclass(frozen=True)
class BudgetSettings:
    """Initial host signals and loop cadence loaded from `[budget]`."""
    initial_foreground_state: str = FOREGROUND_ACTIVE
    initial_lock_state: str = LOCK_UNLOCKED
    tick_interval_seconds: float = DEFAULT_TICK_INTERVAL_SECONDS


@dataclass(frozen=True)
class StorageSettings:
    """Checkpoint persistence backend loaded from `[storage]`."""
    backend: str = STORAGE_BACKEND_JSON
    path: str = ""


@dataclass(frozen=True)
class RemindersSettings:
    """Low-time warning settings loaded from `[reminders]`."""
    enabled: bool = True
    thresholds_seconds: tuple[int, ...] = DEFAULT_WARNING_THRESHOLDS_SECONDS
    announce_credits: bool = True


@dataclass(frozen=True)
class LockProbeSettings:
    """Optional polled lock detection loaded from `[lock_probe]`."""
    enabled: bool = False
    interval_seconds: float = 2.0
    command: str = ""


@dataclass(frozen=True)
class UIServerSettings:
    """Websocket bridge settings loaded from `[ui_server]`."""
    enabled: bool = True
    host: str = "127.0.0.1"
    port: int = 8765


@dataclass(frozen=True)
class LoggingSettings:
    level: str = "INFO"


@dataclass(frozen=True)
class AppConfig:
    """Fully parsed application configuration."""
    budget: BudgetSettings
    storage: StorageSettings
    reminders: RemindersSettings
    lock_probe: LockProbeSettings
    ui_server: UIServerSettings
    logging: LoggingSettings
    source_file: str
