"""Key-value store protocol.

Defines the durable storage the tracker persists to. Keys are opaque
strings and values are opaque byte payloads.

Example:
    >>> from feedhealth.protocols.store import KeyValueStore
    >>> from feedhealth.store.memory import MemoryStore
    >>> isinstance(MemoryStore(), KeyValueStore)
    True
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class KeyValueStore(Protocol):
    """Durable key-value store protocol.

    Implementations raise ``StoreError`` when the backing medium fails.
    The tracker also treats a bare ``OSError`` as a failed read or write;
    any other exception is a bug in the store and propagates.
    """

    def get(self, key: str) -> bytes | None:
        """Get the payload stored under key, or None if absent."""
        ...

    def set(self, key: str, value: bytes) -> None:
        """Store payload under key, replacing any previous value."""
        ...
