"""Local persistence: key-value stores and preferences."""

from src.storage.kv import KeyValueStore, MemoryKeyValueStore, SqliteKeyValueStore
from src.storage.preferences import ThemePreference

__all__ = ["KeyValueStore", "MemoryKeyValueStore", "SqliteKeyValueStore", "ThemePreference"]
