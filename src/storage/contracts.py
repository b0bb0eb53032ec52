"""Key-value persistence contract consumed by the budget core."""

from __future__ import annotations

from typing import Iterable, Optional, Protocol


class StorageError(Exception):
    """Raised when the backing store cannot be read or modified."""


class KeyValueStore(Protocol):
    """Scoped string key-value store without cross-key transactions."""

    def load(self, key: str) -> Optional[str]:
        ...

    def save(self, key: str, value: str) -> bool:
        ...

    def remove(self, key: str) -> None:
        ...

    def remove_all(self, keys: Iterable[str]) -> None:
        ...
