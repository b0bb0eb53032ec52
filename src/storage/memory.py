from __future__ import annotations

import threading
from typing import Iterable, Optional


class InMemoryKeyValueStore:
    """Process-local store; contents vanish with the process."""

    def __init__(self, initial: Optional[dict[str, str]] = None):
        self._values: dict[str, str] = dict(initial or {})
        self._lock = threading.Lock()

    def load(self, key: str) -> Optional[str]:
        with self._lock:
            return self._values.get(key)

    def save(self, key: str, value: str) -> bool:
        with self._lock:
            self._values[key] = str(value)
        return True

    def remove(self, key: str) -> None:
        with self._lock:
            self._values.pop(key, None)

    def remove_all(self, keys: Iterable[str]) -> None:
        with self._lock:
            for key in keys:
                self._values.pop(key, None)

    def snapshot(self) -> dict[str, str]:
        with self._lock:
            return dict(self._values)
