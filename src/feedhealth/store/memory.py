"""In-memory key-value store.

Useful for testing and for trackers that should not outlive the process.

Example:
    >>> from feedhealth.store.memory import MemoryStore
    >>> store = MemoryStore()
    >>> store.set("k", b"v")
    >>> store.get("k")
    b'v'
    >>> store.get("missing") is None
    True
"""

from __future__ import annotations


class MemoryStore:
    """Dictionary-backed key-value store."""

    def __init__(self, initial: dict[str, bytes] | None = None) -> None:
        self._data: dict[str, bytes] = dict(initial or {})

    def get(self, key: str) -> bytes | None:
        return self._data.get(key)

    def set(self, key: str, value: bytes) -> None:
        self._data[key] = bytes(value)

    def __len__(self) -> int:
        return len(self._data)

    def __contains__(self, key: object) -> bool:
        return key in self._data
