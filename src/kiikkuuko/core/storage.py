from __future__ import annotations

import json
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from kiikkuuko.core.errors import PersistenceReadFailure, PersistenceWriteFailure

"""
Simple on-disk JSON key-value store.

This store is intentionally lightweight:
- Each key is one JSON file under `.kiikkuuko/` by default, so values survive restarts.
- Writes go through a temporary file + atomic replace; a crash never leaves half a file.
- There is no TTL: values live until overwritten.

It backs the favorites set, which is small and written on every toggle.
"""

_SAFE_KEY = re.compile(r"^[A-Za-z0-9_.-]+$")


@dataclass(frozen=True)
class StoredValue:
    """Serialized envelope stored on disk."""

    value: Any


class JsonFileStore:
    """A filesystem-backed key-value store."""

    def __init__(self, base_dir: Path):
        self._base_dir = base_dir

    def _key_path(self, key: str) -> Path:
        if not key or not _SAFE_KEY.match(key):
            raise ValueError(f"Invalid storage key: {key!r}")
        return self._base_dir / f"{key}.json"

    def read(self, key: str) -> StoredValue | None:
        """Return the stored envelope for `key`, or None if nothing was ever written.

        Raises:
            PersistenceReadFailure: If the file exists but is unreadable or corrupt.
        """
        path = self._key_path(key)
        if not path.exists():
            return None
        try:
            raw = json.loads(path.read_text(encoding="utf-8"))
            return StoredValue(value=raw["value"])
        except (OSError, ValueError, KeyError, TypeError) as exc:
            raise PersistenceReadFailure(f"Stored value for '{key}' is unreadable: {exc}") from exc

    def set(self, key: str, value: Any) -> None:
        """Write a JSON-serializable value to disk.

        Raises:
            PersistenceWriteFailure: If the directory or file cannot be written.
        """
        path = self._key_path(key)
        payload = {"value": value}
        tmp = path.with_suffix(".tmp")
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            tmp.write_text(json.dumps(payload, ensure_ascii=False), encoding="utf-8")
            tmp.replace(path)
        except (OSError, TypeError, ValueError) as exc:
            raise PersistenceWriteFailure(f"Could not store '{key}': {exc}") from exc
