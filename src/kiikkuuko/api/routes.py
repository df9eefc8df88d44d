"""
API routes.

Endpoints:
- GET  `/api/units`: the projected unit list (nearest first when a location is known).
- GET  `/api/favorites`: favorited unit ids.
- POST `/api/favorites/{unit_id}/toggle`: flip one unit's favorite flag.
- POST `/api/location`: report the browser's position (or a failure / denial).
- GET  `/api/map-region`: map area centered on the user.
- GET  `/api/status`: where the current units came from and the last refresh outcome.

Handlers are `async` so they run on the same event loop as the controller that owns
the state.
"""

from __future__ import annotations

from functools import lru_cache

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from kiikkuuko.bootstrap import build_controller
from kiikkuuko.config.settings import get_settings
from kiikkuuko.core.geo import Coordinate
from kiikkuuko.domain.models import MapRegion, UnitView
from kiikkuuko.location.provider import AuthorizationChanged, AuthorizationStatus, LocationFailed, LocationUpdated
from kiikkuuko.state.controller import UnitsController
from kiikkuuko.viewmodel.display import format_distance_km, map_region, walking_directions_url
from kiikkuuko.viewmodel.projector import project

router = APIRouter()


@lru_cache
def get_controller() -> UnitsController:
    return build_controller(get_settings())


class LocationReport(BaseModel):
    """A position report from the client. Omit lat/lon to report an error or a denial."""

    lat: float | None = Field(default=None, ge=-90, le=90)
    lon: float | None = Field(default=None, ge=-180, le=180)
    authorization: AuthorizationStatus | None = None
    error: str | None = None


def _query_location(lat: float | None, lon: float | None) -> Coordinate | None:
    if lat is None and lon is None:
        return None
    if lat is None or lon is None:
        raise HTTPException(
            status_code=400,
            detail={"code": "VALIDATION_ERROR", "message": "lat and lon must be given together"},
        )
    if not (-90 <= lat <= 90 and -180 <= lon <= 180):
        raise HTTPException(
            status_code=400,
            detail={"code": "VALIDATION_ERROR", "message": "lat/lon out of range"},
        )
    return Coordinate(lat=lat, lon=lon)


def _view_payload(view: UnitView, language: str) -> dict:
    unit = view.unit
    coordinate = unit.coordinate
    return {
        "id": unit.id,
        "name": unit.display_name(language),
        "street_address": unit.street_address.get(language) if unit.street_address else None,
        "municipality": unit.municipality,
        "lat": coordinate.lat if coordinate else None,
        "lon": coordinate.lon if coordinate else None,
        "distance_m": view.distance_m,
        "distance_label": format_distance_km(view.distance_m),
        "is_favorite": view.is_favorite,
        "directions_url": walking_directions_url(coordinate),
    }


@router.get("/api/units")
async def get_units(lat: float | None = None, lon: float | None = None) -> dict:
    """Return display records; `lat`/`lon` override the last reported location."""
    settings = get_settings()
    controller = get_controller()
    state = controller.state
    location = _query_location(lat, lon) or state.location
    views = project(state.units, location, state.favorites)
    return {
        "count": len(views),
        "location": {"lat": location.lat, "lon": location.lon} if location else None,
        "units": [_view_payload(v, settings.app.language) for v in views],
    }


@router.get("/api/favorites")
async def get_favorites() -> dict:
    return {"favorites": sorted(get_controller().state.favorites)}


@router.post("/api/favorites/{unit_id}/toggle")
async def post_toggle_favorite(unit_id: int) -> dict:
    controller = get_controller()
    is_favorite = controller.toggle_favorite(unit_id)
    return {"unit_id": unit_id, "is_favorite": is_favorite, "favorites": sorted(controller.state.favorites)}


@router.post("/api/location")
async def post_location(report: LocationReport) -> dict:
    """Apply a client location report immediately and return the resulting location."""
    controller = get_controller()
    if report.authorization is not None:
        controller.dispatch(AuthorizationChanged(report.authorization))
    if report.error:
        controller.dispatch(LocationFailed(report.error))
    if report.lat is not None or report.lon is not None:
        coordinate = _query_location(report.lat, report.lon)
        controller.dispatch(LocationUpdated(coordinate))
    location = controller.state.location
    return {
        "authorization": controller.state.authorization.value,
        "location": {"lat": location.lat, "lon": location.lon} if location else None,
    }


@router.get("/api/map-region", response_model=MapRegion)
async def get_map_region(lat: float | None = None, lon: float | None = None) -> MapRegion:
    location = _query_location(lat, lon) or get_controller().state.location
    return map_region(location, get_settings().map.span_delta)


@router.get("/api/status")
async def get_status() -> dict:
    controller = get_controller()
    state = controller.state
    last_refresh = controller.last_refresh
    return {
        "unit_count": len(state.units),
        "units_source": state.units_source,
        "last_refresh": last_refresh.value if last_refresh else None,
        "authorization": state.authorization.value,
        "has_location": state.location is not None,
        "favorite_count": len(state.favorites),
    }
