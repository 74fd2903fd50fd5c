"""JSON file key-value store.

Keeps every entry in one JSON document on disk, keyed by store key with
base64-encoded payloads. Each write replaces the whole file atomically.

Example:
    >>> import tempfile
    >>> from pathlib import Path
    >>> from feedhealth.store.file import JsonFileStore
    >>> with tempfile.TemporaryDirectory() as tmpdir:
    ...     store = JsonFileStore(Path(tmpdir) / "health.json")
    ...     store.set("slowOrFailedFeeds", b'{"A":1}')
    ...     JsonFileStore(Path(tmpdir) / "health.json").get("slowOrFailedFeeds")
    b'{"A":1}'
"""

from __future__ import annotations

import base64
import binascii
import json
import os
import tempfile
from pathlib import Path

from feedhealth.core.exceptions import StoreError


class JsonFileStore:
    """Single-file JSON key-value store.

    Best for: Desktop and single-user deployments.

    Args:
        path: JSON file path. Missing file reads as empty.
        create_dirs: Create parent directories on first write.
    """

    def __init__(self, path: str | Path, create_dirs: bool = True) -> None:
        self._path = Path(path)
        self._create_dirs = create_dirs

    @property
    def path(self) -> Path:
        return self._path

    def get(self, key: str) -> bytes | None:
        """Get payload for key.

        Raises:
            StoreError: If the file cannot be read or is not a store document.
        """
        encoded = self._read().get(key)
        if encoded is None:
            return None
        try:
            return base64.b64decode(encoded, validate=True)
        except (binascii.Error, TypeError) as e:
            raise StoreError(f"Corrupt entry {key!r} in {self._path}") from e

    def set(self, key: str, value: bytes) -> None:
        """Store payload under key, rewriting the file.

        Raises:
            StoreError: If the file cannot be written.
        """
        data = self._read()
        data[key] = base64.b64encode(value).decode("ascii")
        self._write(data)

    def _read(self) -> dict[str, str]:
        if not self._path.exists():
            return {}
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            raise StoreError(f"Cannot read store file {self._path}: {e}") from e
        if not isinstance(data, dict):
            raise StoreError(f"Store file {self._path} is not a JSON object")
        return data

    def _write(self, data: dict[str, str]) -> None:
        try:
            if self._create_dirs:
                self._path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self._path.parent, prefix=f".{self._path.name}.", suffix=".tmp"
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(data, f, indent=2, sort_keys=True)
                os.replace(tmp_name, self._path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise StoreError(f"Cannot write store file {self._path}: {e}") from e
