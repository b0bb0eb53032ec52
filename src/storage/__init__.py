"""Key-value persistence backends for the budget checkpoint."""

from .contracts import KeyValueStore, StorageError
from .json_file import JsonFileKeyValueStore
from .memory import InMemoryKeyValueStore

__all__ = [
    "InMemoryKeyValueStore",
    "JsonFileKeyValueStore",
    "KeyValueStore",
    "StorageError",
]
