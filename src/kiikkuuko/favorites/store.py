"""
Favorites ("visited") store.

The set of favorited unit ids lives under a single key in a `JsonFileStore`, as a
plain list of integers. It is loaded once, kept in memory, and written back
synchronously on every toggle, so the file and the in-memory set never disagree
once `toggle()` has returned.
"""

from __future__ import annotations

import logging
import threading

from kiikkuuko.core.errors import PersistenceReadFailure, PersistenceWriteFailure
from kiikkuuko.core.storage import JsonFileStore

logger = logging.getLogger(__name__)

DEFAULT_KEY = "favorites"


def _decode_ids(value: object) -> frozenset[int]:
    if not isinstance(value, list):
        raise PersistenceReadFailure(f"expected a list of unit ids, got {type(value).__name__}")
    # bool is an int subclass; a stored `true` is corruption, not unit 1.
    if not all(isinstance(v, int) and not isinstance(v, bool) for v in value):
        raise PersistenceReadFailure("favorites list contains non-integer ids")
    return frozenset(value)


class FavoritesStore:
    """Persists the favorited unit ids. Safe to call from several handlers."""

    def __init__(self, storage: JsonFileStore, *, key: str = DEFAULT_KEY):
        self._storage = storage
        self._key = key
        self._lock = threading.Lock()
        self._favorites: frozenset[int] | None = None

    def _read(self) -> frozenset[int]:
        try:
            entry = self._storage.read(self._key)
            if entry is None:
                return frozenset()
            return _decode_ids(entry.value)
        except PersistenceReadFailure as exc:
            logger.warning("Ignoring unreadable favorites under '%s': %s", self._key, exc)
            return frozenset()

    def _loaded(self) -> frozenset[int]:
        if self._favorites is None:
            self._favorites = self._read()
        return self._favorites

    def load(self) -> frozenset[int]:
        """Return the persisted favorites (empty when absent or malformed)."""
        with self._lock:
            return self._loaded()

    def contains(self, unit_id: int) -> bool:
        return unit_id in self.load()

    def toggle(self, unit_id: int) -> frozenset[int]:
        """Flip `unit_id` in the set, persist it, and return the new set.

        If the write fails the set is left as it was and the unchanged set is returned.
        """
        with self._lock:
            current = self._loaded()
            updated = current - {unit_id} if unit_id in current else current | {unit_id}
            try:
                self._storage.set(self._key, sorted(updated))
            except PersistenceWriteFailure as exc:
                logger.error("Favorite toggle for unit %s not saved: %s", unit_id, exc)
                return current
            self._favorites = updated
            logger.debug("Unit %s favorite=%s", unit_id, unit_id in updated)
            return updated
