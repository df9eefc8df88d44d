"""
Unit repository: bundled snapshot first, then the network.

The repository owns the in-memory list of units. `load_snapshot()` fills it from the
packaged copy so the list is visible immediately; `refresh()` fetches the live dataset
and replaces the list.

Change detection is deliberately coarse: the fetched envelope only replaces the held
units when its `count` differs from the number of units currently held. Edits that keep
the count the same are not picked up until the count changes. A content hash would fix
that; until then the behaviour is kept as-is.

Neither operation raises. Every failure is logged and the previous units stay in place.
"""

from __future__ import annotations

import enum
import logging
from pathlib import Path

from kiikkuuko.catalog.snapshot import load_snapshot
from kiikkuuko.core.errors import DecodeFailure, NetworkFailure
from kiikkuuko.domain.models import Unit
from kiikkuuko.ingestion.servicemap_client import ServiceMapClient

logger = logging.getLogger(__name__)


class RefreshStatus(str, enum.Enum):
    REPLACED = "replaced"
    UNCHANGED = "unchanged"
    FAILED = "failed"


class UnitRepository:
    """Holds the current units and reconciles them against the Service Map."""

    def __init__(self, client: ServiceMapClient, *, snapshot_path: str | Path | None = None):
        self._client = client
        self._snapshot_path = snapshot_path
        self._units: list[Unit] = []
        self._last_refresh: RefreshStatus | None = None

    @property
    def units(self) -> list[Unit]:
        return list(self._units)

    @property
    def last_refresh(self) -> RefreshStatus | None:
        return self._last_refresh

    def load_snapshot(self) -> list[Unit]:
        """Populate from the bundled snapshot. A missing/corrupt asset yields []."""
        self._units = load_snapshot(self._snapshot_path)
        return self.units

    async def refresh(self) -> list[Unit]:
        """Fetch the live dataset and return the units held afterwards."""
        try:
            response = await self._client.fetch_units()
        except (NetworkFailure, DecodeFailure) as exc:
            logger.warning("Refresh failed, keeping %d previously loaded units: %s", len(self._units), exc)
            self._last_refresh = RefreshStatus.FAILED
            return self.units

        if response.count == len(self._units):
            logger.info("Refresh returned count=%d, same as held; keeping current units", response.count)
            self._last_refresh = RefreshStatus.UNCHANGED
            return self.units

        logger.info("Refresh replaced %d units with %d (count=%d)", len(self._units), len(response.results), response.count)
        self._units = list(response.results)
        self._last_refresh = RefreshStatus.REPLACED
        return self.units
