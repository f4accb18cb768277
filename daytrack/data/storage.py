"""SQLite-backed JSON key-value store for DayTrack."""

import sqlite3
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Optional

from daytrack.utils.config import config
from daytrack.utils.exceptions import StaleWriteError, StorageReadError, StorageWriteError


class KeyValueStore:
    """Key-value medium holding one JSON document per key.

    Each key carries a version that increases on every write. Passing
    ``expected_version`` to :meth:`set_item` turns the write into a
    compare-and-swap: it is rejected with :class:`StaleWriteError` when
    another writer got there first.
    """

    def __init__(self, db_path: Optional[Path] = None):
        self.db_path = Path(db_path or config.db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_db()

    @contextmanager
    def _get_connection(self):
        """Context manager for database connections."""
        conn = sqlite3.connect(self.db_path, timeout=10)
        conn.row_factory = sqlite3.Row
        try:
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def _init_db(self) -> None:
        """Initialize database schema."""
        with self._get_connection() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS kv_store (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL,
                    version INTEGER NOT NULL DEFAULT 0,
                    updated_at TEXT NOT NULL
                )
            """)

    def read(self, key: str) -> tuple[Optional[str], int]:
        """Return ``(value, version)``; a missing key reads as ``(None, 0)``.

        Raises:
            StorageReadError: If the underlying database cannot be read.
        """
        try:
            with self._get_connection() as conn:
                row = conn.execute(
                    "SELECT value, version FROM kv_store WHERE key = ?", (key,)
                ).fetchone()
        except sqlite3.Error as e:
            raise StorageReadError(key, str(e)) from e
        if row is None:
            return None, 0
        return row["value"], row["version"]

    def get_item(self, key: str) -> Optional[str]:
        """Get the stored value for a key."""
        value, _ = self.read(key)
        return value

    def set_item(self, key: str, value: str, expected_version: Optional[int] = None) -> int:
        """Store a value and return its new version.

        Raises:
            StaleWriteError: If ``expected_version`` no longer matches.
            StorageWriteError: If the underlying database cannot be written.
        """
        try:
            with self._get_connection() as conn:
                conn.execute("BEGIN IMMEDIATE")
                row = conn.execute(
                    "SELECT version FROM kv_store WHERE key = ?", (key,)
                ).fetchone()
                current = row["version"] if row else 0
                if expected_version is not None and current != expected_version:
                    raise StaleWriteError(key, expected_version, current)

                new_version = current + 1
                conn.execute("""
                    INSERT INTO kv_store (key, value, version, updated_at)
                    VALUES (?, ?, ?, ?)
                    ON CONFLICT(key) DO UPDATE SET
                        value = excluded.value,
                        version = excluded.version,
                        updated_at = excluded.updated_at
                """, (key, value, new_version, datetime.now().isoformat()))
                return new_version
        except sqlite3.Error as e:
            raise StorageWriteError(key, str(e)) from e

    def remove_item(self, key: str) -> None:
        """Remove a key. Removing a missing key is a no-op."""
        try:
            with self._get_connection() as conn:
                conn.execute("DELETE FROM kv_store WHERE key = ?", (key,))
        except sqlite3.Error as e:
            raise StorageWriteError(key, str(e)) from e

    def keys(self) -> list[str]:
        """List stored keys."""
        try:
            with self._get_connection() as conn:
                rows = conn.execute("SELECT key FROM kv_store ORDER BY key").fetchall()
        except sqlite3.Error as e:
            raise StorageReadError("*", str(e)) from e
        return [row["key"] for row in rows]
