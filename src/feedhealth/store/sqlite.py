"""SQLite key-value store - zero-config persistent storage.

Example:
    >>> from feedhealth.store.sqlite import SQLiteStore
    >>> store = SQLiteStore(":memory:")
    >>> store.set("feedSlowThreshold", b"15.0")
    >>> store.get("feedSlowThreshold")
    b'15.0'
    >>> store.close()
"""

from __future__ import annotations

import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from feedhealth.core.exceptions import StoreError


class SQLiteStore:
    """SQLite key-value store with auto-schema creation.

    The ``kv`` table is created on first use.

    Args:
        path: Database file path, or ":memory:" for in-memory.
        timeout: Lock timeout in seconds (default 30).
    """

    SCHEMA = "CREATE TABLE IF NOT EXISTS kv (key TEXT PRIMARY KEY, value BLOB NOT NULL)"

    def __init__(self, path: str | Path = ":memory:", *, timeout: float = 30.0) -> None:
        self._path = str(path)
        self._timeout = timeout
        self._conn: sqlite3.Connection | None = None

    def _connect(self) -> sqlite3.Connection:
        if self._conn is None:
            if self._path != ":memory:":
                Path(self._path).parent.mkdir(parents=True, exist_ok=True)
            conn = sqlite3.connect(self._path, timeout=self._timeout, check_same_thread=False)
            try:
                conn.execute(self.SCHEMA)
                conn.commit()
            except sqlite3.Error:
                conn.close()
                raise
            self._conn = conn
        return self._conn

    @contextmanager
    def _cursor(self) -> Iterator[sqlite3.Cursor]:
        """Get a cursor with automatic commit/rollback."""
        try:
            conn = self._connect()
            cursor = conn.cursor()
            try:
                yield cursor
                conn.commit()
            except sqlite3.Error:
                conn.rollback()
                raise
            finally:
                cursor.close()
        except (sqlite3.Error, OSError) as e:
            raise StoreError(f"SQLite store {self._path}: {e}") from e

    def get(self, key: str) -> bytes | None:
        with self._cursor() as cursor:
            cursor.execute("SELECT value FROM kv WHERE key = ?", (key,))
            row = cursor.fetchone()
        return bytes(row[0]) if row else None

    def set(self, key: str, value: bytes) -> None:
        with self._cursor() as cursor:
            cursor.execute(
                "INSERT INTO kv (key, value) VALUES (?, ?) "
                "ON CONFLICT(key) DO UPDATE SET value = excluded.value",
                (key, sqlite3.Binary(value)),
            )

    def close(self) -> None:
        """Close the connection. The store reconnects on next use."""
        if self._conn is not None:
            self._conn.close()
            self._conn = None
