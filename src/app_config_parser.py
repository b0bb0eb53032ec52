"""Typed parser for config.toml sections into immutable app settings."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Mapping

from app_config_schema import (
    DEFAULT_STORAGE_FILE,
    STORAGE_BACKEND_JSON,
    STORAGE_BACKEND_MEMORY,
    AppConfig,
    AppConfigurationError,
    BudgetSettings,
    LockProbeSettings,
    LoggingSettings,
    RemindersSettings,
    StorageSettings,
    UIServerSettings,
)
from screentime.constants import (
    DEFAULT_TICK_INTERVAL_SECONDS,
    DEFAULT_WARNING_THRESHOLDS_SECONDS,
    FOREGROUND_ACTIVE,
    FOREGROUND_STATES,
    LOCK_STATES,
    LOCK_UNLOCKED,
)

_ALLOWED_STORAGE_BACKENDS = {STORAGE_BACKEND_JSON, STORAGE_BACKEND_MEMORY}
_ALLOWED_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


def parse_app_config(
    raw: Mapping[str, Any],
    *,
    base_dir: Path,
    source_file: str,
) -> AppConfig:
    """Parse raw TOML mappings into strongly typed application settings."""
    return AppConfig(
        budget=_parse_budget_settings(_section(raw, "budget")),
        storage=_parse_storage_settings(_section(raw, "storage"), base_dir=base_dir),
        reminders=_parse_reminders_settings(_section(raw, "reminders")),
        lock_probe=_parse_lock_probe_settings(_section(raw, "lock_probe")),
        ui_server=_parse_ui_server_settings(_section(raw, "ui_server")),
        logging=_parse_logging_settings(_section(raw, "logging")),
        source_file=source_file,
    )


def _parse_budget_settings(section: Mapping[str, Any]) -> BudgetSettings:
    tick_interval = _as_float(
        section.get("tick_interval_seconds", DEFAULT_TICK_INTERVAL_SECONDS),
        "budget.tick_interval_seconds",
    )
    if tick_interval <= 0:
        raise AppConfigurationError("budget.tick_interval_seconds must be greater than zero.")
    return BudgetSettings(
        initial_foreground_state=_as_choice(
            section.get("initial_foreground_state", FOREGROUND_ACTIVE),
            "budget.initial_foreground_state",
            FOREGROUND_STATES,
        ),
        initial_lock_state=_as_choice(
            section.get("initial_lock_state", LOCK_UNLOCKED),
            "budget.initial_lock_state",
            LOCK_STATES,
        ),
        tick_interval_seconds=tick_interval,
    )


def _parse_storage_settings(
    section: Mapping[str, Any],
    *,
    base_dir: Path,
) -> StorageSettings:
    backend = _as_choice(
        section.get("backend", STORAGE_BACKEND_JSON),
        "storage.backend",
        _ALLOWED_STORAGE_BACKENDS,
    )
    path = _as_str(section.get("path", DEFAULT_STORAGE_FILE), "storage.path")
    if backend == STORAGE_BACKEND_JSON and not path:
        raise AppConfigurationError("storage.path is required for the json backend.")
    return StorageSettings(
        backend=backend,
        path=_resolve_path(base_dir, path),
    )


def _parse_reminders_settings(section: Mapping[str, Any]) -> RemindersSettings:
    thresholds = _as_int_list(
        section.get("thresholds_seconds", list(DEFAULT_WARNING_THRESHOLDS_SECONDS)),
        "reminders.thresholds_seconds",
    )
    if any(value <= 0 for value in thresholds):
        raise AppConfigurationError("reminders.thresholds_seconds must be positive.")
    return RemindersSettings(
        enabled=_as_bool(section.get("enabled", True), "reminders.enabled"),
        thresholds_seconds=tuple(sorted(set(thresholds), reverse=True)),
        announce_credits=_as_bool(
            section.get("announce_credits", True),
            "reminders.announce_credits",
        ),
    )


def _parse_lock_probe_settings(section: Mapping[str, Any]) -> LockProbeSettings:
    enabled = _as_bool(section.get("enabled", False), "lock_probe.enabled")
    interval = _as_float(
        section.get("interval_seconds", 2.0),
        "lock_probe.interval_seconds",
    )
    if interval <= 0:
        raise AppConfigurationError("lock_probe.interval_seconds must be greater than zero.")
    command = _as_str(section.get("command", ""), "lock_probe.command")
    if enabled and not command:
        raise AppConfigurationError("lock_probe.command is required when the probe is enabled.")
    return LockProbeSettings(
        enabled=enabled,
        interval_seconds=interval,
        command=command,
    )


def _parse_ui_server_settings(section: Mapping[str, Any]) -> UIServerSettings:
    return UIServerSettings(
        enabled=_as_bool(section.get("enabled", True), "ui_server.enabled"),
        host=_as_str(section.get("host", "127.0.0.1"), "ui_server.host"),
        port=_as_int(section.get("port", 8765), "ui_server.port"),
    )


def _parse_logging_settings(section: Mapping[str, Any]) -> LoggingSettings:
    level = _as_str(section.get("level", "INFO"), "logging.level").upper()
    if level not in _ALLOWED_LOG_LEVELS:
        allowed = ", ".join(sorted(_ALLOWED_LOG_LEVELS))
        raise AppConfigurationError(f"logging.level must be one of: {allowed}.")
    return LoggingSettings(level=level)


def log_level(settings: LoggingSettings) -> int:
    return getattr(logging, settings.level)


def _section(root: Mapping[str, Any], name: str) -> Mapping[str, Any]:
    raw = root.get(name, {})
    if raw is None:
        return {}
    if not isinstance(raw, Mapping):
        raise AppConfigurationError(f"[{name}] must be a table.")
    return raw


def _as_str(value: Any, field: str) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value.strip()
    raise AppConfigurationError(f"{field} must be a string.")


def _as_choice(value: Any, field: str, allowed) -> str:
    name = _as_str(value, field).lower()
    if name not in allowed:
        joined = ", ".join(sorted(allowed))
        raise AppConfigurationError(f"{field} must be one of: {joined}.")
    return name


def _as_bool(value: Any, field: str) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in ("true", "1", "yes", "on"):
            return True
        if lowered in ("false", "0", "no", "off"):
            return False
    raise AppConfigurationError(f"{field} must be a boolean.")


def _as_int(value: Any, field: str) -> int:
    if isinstance(value, bool):
        raise AppConfigurationError(f"{field} must be an integer.")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError as error:
            raise AppConfigurationError(f"{field} must be an integer.") from error
    raise AppConfigurationError(f"{field} must be an integer.")


def _as_int_list(value: Any, field: str) -> list[int]:
    if not isinstance(value, (list, tuple)):
        raise AppConfigurationError(f"{field} must be a list of integers.")
    return [_as_int(item, f"{field}[{index}]") for index, item in enumerate(value)]


def _as_float(value: Any, field: str) -> float:
    if isinstance(value, bool):
        raise AppConfigurationError(f"{field} must be a float.")
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value.strip())
        except ValueError as error:
            raise AppConfigurationError(f"{field} must be a float.") from error
    raise AppConfigurationError(f"{field} must be a float.")


def _resolve_path(base_dir: Path, raw: str) -> str:
    if not raw:
        return ""
    path = Path(raw).expanduser()
    if not path.is_absolute():
        path = (base_dir / path).resolve()
    return str(path)
