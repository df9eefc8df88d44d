"""
Units controller: the single owner of `AppState`.

All state changes go through `dispatch`, which runs on the controller's event loop.
Background work never touches the state directly:
- the network refresh task and the location task put events on `self._inbox`;
- one pump task reads the inbox and dispatches them in arrival order.

`start()` loads favorites and the bundled snapshot synchronously, so the first
projection is available before any network I/O; the refresh then runs in the
background and replaces the units when it returns something new.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Callable

from kiikkuuko.domain.models import UnitView
from kiikkuuko.favorites.store import FavoritesStore
from kiikkuuko.location.provider import (
    AuthorizationChanged,
    LocationEvent,
    LocationFailed,
    LocationProvider,
    LocationUpdated,
)
from kiikkuuko.repository.units import RefreshStatus, UnitRepository
from kiikkuuko.state.app_state import AppEvent, AppState, FavoritesChanged, UnitsLoaded, reduce
from kiikkuuko.viewmodel.projector import project_state

logger = logging.getLogger(__name__)

Listener = Callable[[AppState], None]


class UnitsController:
    def __init__(
        self,
        repository: UnitRepository,
        favorites: FavoritesStore,
        *,
        location_provider: LocationProvider | None = None,
        stop_after_first_fix: bool = True,
        refresh_on_start: bool = True,
    ):
        self._repository = repository
        self._favorites = favorites
        self._location_provider = location_provider
        self._stop_after_first_fix = stop_after_first_fix
        self._refresh_on_start = refresh_on_start

        self._state = AppState()
        self._listeners: list[Listener] = []
        self._inbox: asyncio.Queue[AppEvent] = asyncio.Queue()
        self._pump_task: asyncio.Task | None = None
        self._refresh_task: asyncio.Task | None = None
        self._location_task: asyncio.Task | None = None

    @property
    def state(self) -> AppState:
        return self._state

    @property
    def last_refresh(self) -> RefreshStatus | None:
        return self._repository.last_refresh

    def views(self) -> list[UnitView]:
        return project_state(self._state)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call `listener(state)` after every transition; returns an unsubscribe function."""
        self._listeners.append(listener)
        return lambda: self._listeners.remove(listener)

    def dispatch(self, event: AppEvent) -> AppState:
        self._state = reduce(self._state, event)
        for listener in list(self._listeners):
            listener(self._state)
        return self._state

    def post(self, event: AppEvent) -> None:
        """Queue an event for the pump (used by background tasks and push sources)."""
        self._inbox.put_nowait(event)

    async def start(self) -> None:
        self.dispatch(FavoritesChanged(self._favorites.load()))
        self.dispatch(UnitsLoaded(tuple(self._repository.load_snapshot()), source="snapshot"))

        self._pump_task = asyncio.create_task(self._pump())
        if self._refresh_on_start:
            self._refresh_task = asyncio.create_task(self._refresh())
        if self._location_provider is not None:
            self._location_task = asyncio.create_task(self._track_location(self._location_provider))

    async def refresh(self) -> RefreshStatus | None:
        """Run one refresh now and wait until its result has been applied."""
        if self._pump_task is None:
            raise RuntimeError("UnitsController.start() must be called before refresh()")
        await self._refresh()
        await self._inbox.join()
        return self._repository.last_refresh

    def toggle_favorite(self, unit_id: int) -> bool:
        """Flip a unit's favorite flag; the write is durable before the state changes.

        Returns the unit's new favorite flag.
        """
        favorites = self._favorites.toggle(unit_id)
        self.dispatch(FavoritesChanged(favorites))
        return unit_id in favorites

    async def settle(self, *, wait_for_location: bool = False) -> None:
        """Wait for the start-up refresh, then drain the inbox.

        With `wait_for_location`, also wait for the location stream to end; only use that
        with a finite provider or `stop_after_first_fix`.
        """
        pending = [self._refresh_task]
        if wait_for_location:
            pending.append(self._location_task)
        pending = [t for t in pending if t is not None]
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)
        await self._inbox.join()

    async def stop(self) -> None:
        if self._location_provider is not None:
            self._location_provider.stop()
        tasks = [t for t in (self._refresh_task, self._location_task, self._pump_task) if t is not None]
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        self._pump_task = self._refresh_task = self._location_task = None

    async def _pump(self) -> None:
        while True:
            event = await self._inbox.get()
            try:
                self.dispatch(event)
            except Exception:
                logger.exception("Failed to apply %r", event)
            finally:
                self._inbox.task_done()

    async def _refresh(self) -> None:
        units = await self._repository.refresh()
        if self._repository.last_refresh is RefreshStatus.REPLACED:
            self.post(UnitsLoaded(tuple(units), source="network"))

    async def _track_location(self, provider: LocationProvider) -> None:
        async for event in provider.events():
            self._log_location_event(event)
            self.post(event)
            if isinstance(event, LocationUpdated) and self._stop_after_first_fix:
                provider.stop()
                break

    @staticmethod
    def _log_location_event(event: LocationEvent) -> None:
        if isinstance(event, LocationFailed):
            logger.warning("Location update error: %s", event.message)
        elif isinstance(event, AuthorizationChanged) and not event.status.allows_location:
            logger.info("Location authorization is %s; showing units without distances", event.status.value)
