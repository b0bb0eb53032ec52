"""Typed checkpoint persistence on top of a string key-value store."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from storage.contracts import KeyValueStore, StorageError

from .constants import STORAGE_KEY_CHECKPOINT, STORAGE_KEY_REMAINING, STORAGE_KEYS


@dataclass(frozen=True)
class StoredCheckpoint:
    """Values recovered at startup; `checkpoint` is present only if tracking was live."""
    remaining_seconds: int = 0
    checkpoint: Optional[float] = None

    @property
    def was_running(self) -> bool:
        return self.checkpoint is not None


class CheckpointStore:
    """Reads and writes the remaining budget and the depletion checkpoint.

    Failures never propagate: unreadable values load as absent, and failed
    writes are logged while the in-memory state stays authoritative.
    """

    def __init__(self, store: KeyValueStore, *, logger: Optional[logging.Logger] = None):
        self._store = store
        self._logger = logger or logging.getLogger("checkpoint_store")

    def load(self) -> StoredCheckpoint:
        raw_remaining = self._load_raw(STORAGE_KEY_REMAINING)
        raw_checkpoint = self._load_raw(STORAGE_KEY_CHECKPOINT)
        remaining = _parse_remaining(raw_remaining)
        if raw_remaining is not None and remaining is None:
            self._logger.warning("Ignoring malformed stored remaining time: %r", raw_remaining)
        checkpoint = _parse_checkpoint(raw_checkpoint)
        if raw_checkpoint is not None and checkpoint is None:
            self._logger.warning("Ignoring malformed stored checkpoint: %r", raw_checkpoint)
        return StoredCheckpoint(
            remaining_seconds=remaining or 0,
            checkpoint=checkpoint if remaining else None,
        )

    def save(self, remaining_seconds: int, checkpoint: Optional[float]) -> bool:
        ok = self._save_raw(STORAGE_KEY_REMAINING, str(int(remaining_seconds)))
        if checkpoint is None:
            ok = self._remove_raw(STORAGE_KEY_CHECKPOINT) and ok
        else:
            ok = self._save_raw(STORAGE_KEY_CHECKPOINT, str(int(round(checkpoint * 1000)))) and ok
        return ok

    def clear(self) -> bool:
        try:
            self._store.remove_all(STORAGE_KEYS)
        except (StorageError, OSError) as error:
            self._logger.error("Failed to clear persisted budget: %s", error)
            return False
        return True

    def _load_raw(self, key: str) -> Optional[str]:
        try:
            return self._store.load(key)
        except (StorageError, OSError) as error:
            self._logger.error("Failed to load %s: %s", key, error)
            return None

    def _save_raw(self, key: str, value: str) -> bool:
        try:
            saved = self._store.save(key, value)
        except (StorageError, OSError) as error:
            self._logger.error("Failed to save %s: %s", key, error)
            return False
        if not saved:
            self._logger.error("Store rejected write of %s", key)
        return bool(saved)

    def _remove_raw(self, key: str) -> bool:
        try:
            self._store.remove(key)
        except (StorageError, OSError) as error:
            self._logger.error("Failed to remove %s: %s", key, error)
            return False
        return True


def _parse_remaining(raw: Optional[str]) -> Optional[int]:
    if raw is None:
        return None
    try:
        value = int(raw.strip())
    except (AttributeError, ValueError):
        return None
    if value < 0:
        return None
    return value


def _parse_checkpoint(raw: Optional[str]) -> Optional[float]:
    """Epoch milliseconds; ISO-8601 strings written by older builds are accepted too."""
    if raw is None:
        return None
    text = raw.strip()
    try:
        return int(text) / 1000.0
    except ValueError:
        pass
    try:
        parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.timestamp()
