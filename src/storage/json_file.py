"""Single-document JSON key-value store with atomic replacement on write."""

from __future__ import annotations

import json
import logging
import os
import threading
from pathlib import Path
from typing import Iterable, Optional

from .contracts import StorageError


class JsonFileKeyValueStore:
    """Keeps every key in one JSON object on disk.

    Writes go to a sibling temp file that is then renamed over the target, so a
    crash mid-write leaves either the old or the new document, never a torn one.
    """

    def __init__(self, path: str | Path, *, logger: Optional[logging.Logger] = None):
        self._path = Path(path)
        self._logger = logger or logging.getLogger("storage")
        self._lock = threading.Lock()

    @property
    def path(self) -> Path:
        return self._path

    def load(self, key: str) -> Optional[str]:
        with self._lock:
            return self._read().get(key)

    def save(self, key: str, value: str) -> bool:
        with self._lock:
            try:
                values = self._read()
                values[key] = str(value)
                self._write(values)
            except StorageError as error:
                self._logger.error("Failed to save %s: %s", key, error)
                return False
        return True

    def remove(self, key: str) -> None:
        self.remove_all((key,))

    def remove_all(self, keys: Iterable[str]) -> None:
        with self._lock:
            values = self._read()
            changed = False
            for key in keys:
                if key in values:
                    del values[key]
                    changed = True
            if changed:
                self._write(values)

    def _read(self) -> dict[str, str]:
        if not self._path.exists():
            return {}
        try:
            with open(self._path, "r", encoding="utf-8") as fh:
                raw = json.load(fh)
        except json.JSONDecodeError:
            self._logger.warning(
                "Store file %s is not valid JSON; treating it as empty",
                self._path,
                exc_info=True,
            )
            return {}
        except OSError as error:
            raise StorageError(f"Cannot read {self._path}: {error}") from error

        if not isinstance(raw, dict):
            self._logger.warning("Store file %s is not a JSON object; treating it as empty", self._path)
            return {}
        return {str(key): str(value) for key, value in raw.items() if value is not None}

    def _write(self, values: dict[str, str]) -> None:
        temp_path = self._path.with_suffix(self._path.suffix + ".tmp")
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with open(temp_path, "w", encoding="utf-8") as fh:
                json.dump(values, fh, indent=2, sort_keys=True)
                fh.flush()
                os.fsync(fh.fileno())
            os.replace(temp_path, self._path)
        except OSError as error:
            raise StorageError(f"Cannot write {self._path}: {error}") from error
