"""
Location providers.

A provider is an async stream of events: authorization changes, position fixes and
failures. The controller consumes the stream and turns it into state transitions;
it never asks a provider for "the current position" directly.

Two implementations ship here:
- `QueueLocationProvider`: events are pushed in from outside (a platform callback,
  a browser posting its geolocation, a test).
- `FixedLocationProvider`: a single known coordinate (CLI `--lat/--lon`).
"""

from __future__ import annotations

import asyncio
import enum
from dataclasses import dataclass
from typing import AsyncIterator, Protocol, Union

from kiikkuuko.core.geo import Coordinate


class AuthorizationStatus(str, enum.Enum):
    NOT_DETERMINED = "not_determined"
    DENIED = "denied"
    RESTRICTED = "restricted"
    AUTHORIZED = "authorized"

    @property
    def allows_location(self) -> bool:
        return self is AuthorizationStatus.AUTHORIZED


@dataclass(frozen=True)
class AuthorizationChanged:
    status: AuthorizationStatus


@dataclass(frozen=True)
class LocationUpdated:
    coordinate: Coordinate


@dataclass(frozen=True)
class LocationFailed:
    message: str


LocationEvent = Union[AuthorizationChanged, LocationUpdated, LocationFailed]


class LocationProvider(Protocol):
    def events(self) -> AsyncIterator[LocationEvent]: ...

    def stop(self) -> None: ...


class QueueLocationProvider:
    """Push-based provider; `events()` yields pushed events until `stop()`."""

    def __init__(self) -> None:
        self._queue: asyncio.Queue[LocationEvent | None] = asyncio.Queue()
        self._stopped = False

    @property
    def stopped(self) -> bool:
        return self._stopped

    def push(self, event: LocationEvent) -> None:
        if self._stopped:
            return
        self._queue.put_nowait(event)

    def stop(self) -> None:
        if self._stopped:
            return
        self._stopped = True
        self._queue.put_nowait(None)

    async def events(self) -> AsyncIterator[LocationEvent]:
        while True:
            event = await self._queue.get()
            if event is None:
                return
            yield event


class FixedLocationProvider:
    """Reports authorization and one fix at a known coordinate."""

    def __init__(self, coordinate: Coordinate):
        self._coordinate = coordinate
        self._stopped = False

    def stop(self) -> None:
        self._stopped = True

    async def events(self) -> AsyncIterator[LocationEvent]:
        yield AuthorizationChanged(AuthorizationStatus.AUTHORIZED)
        if not self._stopped:
            yield LocationUpdated(self._coordinate)
