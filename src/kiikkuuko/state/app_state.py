"""
Application state and its transitions.

`AppState` is immutable. Every change is an event applied by `reduce(state, event)`,
which returns a new state. Favorites are stored here only as the id set; whether a
unit is a favorite is decided at projection time.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Union

from kiikkuuko.core.geo import Coordinate
from kiikkuuko.domain.models import Unit
from kiikkuuko.location.provider import (
    AuthorizationChanged,
    AuthorizationStatus,
    LocationFailed,
    LocationUpdated,
)


@dataclass(frozen=True)
class UnitsLoaded:
    units: tuple[Unit, ...]
    source: str


@dataclass(frozen=True)
class FavoritesChanged:
    favorites: frozenset[int]


AppEvent = Union[UnitsLoaded, FavoritesChanged, AuthorizationChanged, LocationUpdated, LocationFailed]


@dataclass(frozen=True)
class AppState:
    units: tuple[Unit, ...] = ()
    units_source: str | None = None
    location: Coordinate | None = None
    authorization: AuthorizationStatus = AuthorizationStatus.NOT_DETERMINED
    favorites: frozenset[int] = frozenset()
    last_location_error: str | None = None


def reduce(state: AppState, event: AppEvent) -> AppState:
    """Apply one event and return the next state."""
    if isinstance(event, UnitsLoaded):
        return replace(state, units=tuple(event.units), units_source=event.source)
    if isinstance(event, FavoritesChanged):
        return replace(state, favorites=frozenset(event.favorites))
    if isinstance(event, AuthorizationChanged):
        # Without permission there is no location, same as having no fix yet.
        location = state.location if event.status.allows_location else None
        return replace(state, authorization=event.status, location=location)
    if isinstance(event, LocationUpdated):
        if state.authorization in (AuthorizationStatus.DENIED, AuthorizationStatus.RESTRICTED):
            return state
        return replace(state, location=event.coordinate, last_location_error=None)
    if isinstance(event, LocationFailed):
        # Keep the last good fix; a failed update does not mean the user moved.
        return replace(state, last_location_error=event.message)
    raise TypeError(f"Unsupported event: {event!r}")
