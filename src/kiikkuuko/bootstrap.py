"""
Object wiring from `Settings`.

The CLI and the API build the same graph: storage -> favorites store, client ->
repository, both -> controller. Keeping it here means both entrypoints honor the
same configuration.
"""

from __future__ import annotations

import httpx

from kiikkuuko.config.settings import Settings
from kiikkuuko.core.env import resolve_project_path
from kiikkuuko.core.storage import JsonFileStore
from kiikkuuko.favorites.store import FavoritesStore
from kiikkuuko.ingestion.servicemap_client import ServiceMapClient
from kiikkuuko.location.provider import LocationProvider
from kiikkuuko.repository.units import UnitRepository
from kiikkuuko.state.controller import UnitsController


def build_storage(settings: Settings) -> JsonFileStore:
    return JsonFileStore(resolve_project_path(settings.storage.dir))


def build_favorites_store(settings: Settings) -> FavoritesStore:
    return FavoritesStore(build_storage(settings), key=settings.storage.favorites_key)


def build_repository(
    settings: Settings,
    *,
    transport: httpx.AsyncBaseTransport | httpx.BaseTransport | None = None,
) -> UnitRepository:
    client = ServiceMapClient(settings, transport=transport)
    return UnitRepository(client, snapshot_path=settings.snapshot.path)


def build_controller(
    settings: Settings,
    *,
    location_provider: LocationProvider | None = None,
    refresh_on_start: bool | None = None,
    transport: httpx.AsyncBaseTransport | httpx.BaseTransport | None = None,
) -> UnitsController:
    return UnitsController(
        build_repository(settings, transport=transport),
        build_favorites_store(settings),
        location_provider=location_provider,
        stop_after_first_fix=settings.location.stop_after_first_fix,
        refresh_on_start=settings.servicemap.refresh_on_start if refresh_on_start is None else refresh_on_start,
    )
