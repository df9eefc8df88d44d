"""
Projection from raw state to the display list.

`project` is pure: same inputs, same output, no I/O. It is the only place where
distances and favorite flags are attached to units.

Two modes, and the difference between them is intentional:
- no user location: every unit, in the order the data source gave them;
- with a location: only units that have a coordinate, nearest first.
"""

from __future__ import annotations

from typing import AbstractSet, Iterable

from kiikkuuko.core.geo import Coordinate, haversine_m
from kiikkuuko.domain.models import Unit, UnitView
from kiikkuuko.state.app_state import AppState


def project(
    units: Iterable[Unit],
    user_location: Coordinate | None,
    favorites: AbstractSet[int],
) -> list[UnitView]:
    """Build display records for `units` relative to `user_location`."""
    if user_location is None:
        return [UnitView(unit=u, distance_m=None, is_favorite=u.id in favorites) for u in units]

    views: list[UnitView] = []
    for u in units:
        coordinate = u.coordinate
        if coordinate is None:
            continue
        views.append(
            UnitView(
                unit=u,
                distance_m=haversine_m(user_location, coordinate),
                is_favorite=u.id in favorites,
            )
        )
    # list.sort is stable: equal distances keep source order.
    views.sort(key=lambda v: v.distance_m)
    return views


def project_state(state: AppState) -> list[UnitView]:
    return project(state.units, state.location, state.favorites)
