"""Synchronous string key-value stores used as the persistence port."""

import logging
from pathlib import Path
from typing import Protocol

from src.storage.database import get_connection, initialize_database

logger = logging.getLogger(__name__)


class KeyValueStore(Protocol):
    """Minimal synchronous key-value storage with string keys and values."""

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...

    def delete(self, key: str) -> None: ...


class MemoryKeyValueStore:
    """Dict-backed store for tests and ephemeral sessions."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)


class SqliteKeyValueStore:
    """Key-value store persisted in the ``kv_store`` SQLite table.

    Each call opens its own connection and commits before returning, so
    a caller regaining control can rely on the value being on disk.

    Args:
        db_path: Path to the SQLite database file. Created if missing.
    """

    def __init__(self, db_path: str | Path) -> None:
        self._db_path = Path(db_path)
        initialize_database(self._db_path)

    def get(self, key: str) -> str | None:
        conn = get_connection(self._db_path)
        try:
            row = conn.execute("SELECT value FROM kv_store WHERE key = ?", (key,)).fetchone()
        finally:
            conn.close()
        return None if row is None else row["value"]

    def set(self, key: str, value: str) -> None:
        conn = get_connection(self._db_path)
        try:
            conn.execute(
                """
                INSERT INTO kv_store (key, value, updated_at)
                VALUES (?, ?, CURRENT_TIMESTAMP)
                ON CONFLICT(key) DO UPDATE SET
                    value = excluded.value,
                    updated_at = excluded.updated_at
                """,
                (key, value),
            )
            conn.commit()
        finally:
            conn.close()
        logger.debug("Wrote %d chars to key %s", len(value), key)

    def delete(self, key: str) -> None:
        conn = get_connection(self._db_path)
        try:
            conn.execute("DELETE FROM kv_store WHERE key = ?", (key,))
            conn.commit()
        finally:
            conn.close()
