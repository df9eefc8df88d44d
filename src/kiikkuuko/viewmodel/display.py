"""Small formatting helpers shared by the CLI and the API."""

from __future__ import annotations

from urllib.parse import urlencode

from kiikkuuko.core.geo import Coordinate
from kiikkuuko.domain.models import MapRegion

APPLE_MAPS_URL = "https://maps.apple.com/"


def format_distance_km(distance_m: float | None) -> str | None:
    """`1234.5` -> `"1.23 km"`; None stays None."""
    if distance_m is None:
        return None
    return f"{distance_m / 1000:.2f} km"


def map_region(location: Coordinate | None, span_delta: float = 0.05) -> MapRegion:
    """Map area centered on the user; (0, 0) until a location is known."""
    center = location or Coordinate(lat=0.0, lon=0.0)
    return MapRegion(center_lat=center.lat, center_lon=center.lon, lat_delta=span_delta, lon_delta=span_delta)


def walking_directions_url(coordinate: Coordinate | None) -> str | None:
    """Apple Maps link with walking directions to `coordinate`."""
    if coordinate is None:
        return None
    query = urlencode({"daddr": f"{coordinate.lat},{coordinate.lon}", "dirflg": "w"})
    return f"{APPLE_MAPS_URL}?{query}"
