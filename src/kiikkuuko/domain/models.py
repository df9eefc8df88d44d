"""
Domain models (Pydantic).

These types represent the stable "contract" between layers:
- Service Map payloads (`UnitsResponse`, `Unit` and its nested records)
- display output (`UnitView`, `MapRegion`)

Payload field names are snake_case on the wire and map one-to-one onto these models.
Unknown fields are ignored so upstream additions never break decoding.
"""

from __future__ import annotations

from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field

from kiikkuuko.core.geo import Coordinate


class _Record(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)


class LocalizedText(_Record):
    """Text in the languages the Service Map publishes."""

    LANGUAGES: ClassVar[tuple[str, ...]] = ("fi", "sv", "en")

    fi: str | None = None
    sv: str | None = None
    en: str | None = None

    def get(self, language: str = "fi") -> str | None:
        """Return text in `language`, falling back to any other available language."""
        preferred = getattr(self, language) if language in self.LANGUAGES else None
        if preferred:
            return preferred
        for value in (self.fi, self.sv, self.en):
            if value:
                return value
        return None


class ContractType(_Record):
    id: str
    description: LocalizedText | None = None


class ServiceNode(_Record):
    id: int
    name: LocalizedText | None = None
    root: int | None = None
    service_reference: str | None = None
    level: int | None = None


class GeoJsonPoint(_Record):
    """GeoJSON geometry; `coordinates` are in `[lon, lat]` order."""

    type: str | None = None
    coordinates: list[float] | None = None


class Department(_Record):
    id: str
    name: LocalizedText | None = None
    street_address: LocalizedText | None = None
    municipality: str | None = None


class Service(_Record):
    id: int
    name: LocalizedText | None = None
    clarification: str | None = None
    root_service_node: int | None = None


class Unit(_Record):
    """One playground (a Service Map "unit")."""

    id: int
    name: LocalizedText
    location: GeoJsonPoint | None = None

    organizer_type: str | None = None
    contract_type: ContractType | None = None
    street_address: LocalizedText | None = None
    municipality: str | None = None
    service_nodes: list[ServiceNode] = Field(default_factory=list)
    geometry: GeoJsonPoint | None = None
    department: Department | None = None
    root_department: Department | None = None
    services: list[Service] = Field(default_factory=list)
    accessibility_properties: list[dict[str, Any]] | None = None
    accessibility_shortcoming_count: dict[str, Any] | None = None

    @property
    def coordinate(self) -> Coordinate | None:
        """The unit's position, or None when the payload carries no usable point."""
        coords = self.location.coordinates if self.location else None
        if not coords or len(coords) < 2:
            return None
        return Coordinate(lat=float(coords[1]), lon=float(coords[0]))

    def display_name(self, language: str = "fi") -> str:
        return self.name.get(language) or f"#{self.id}"


class UnitsResponse(_Record):
    """Paged envelope returned by `/servicemap/v2/unit/` (and stored as the bundled snapshot)."""

    count: int
    next: str | None = None
    previous: str | None = None
    results: list[Unit] = Field(default_factory=list)


class UnitView(BaseModel):
    """A unit as displayed: distance and favorite flag are computed per projection."""

    model_config = ConfigDict(frozen=True)

    unit: Unit
    distance_m: float | None = None
    is_favorite: bool = False

    @property
    def id(self) -> int:
        return self.unit.id


class MapRegion(BaseModel):
    """Visible map area: a center point and a lat/lon span in degrees."""

    model_config = ConfigDict(frozen=True)

    center_lat: float
    center_lon: float
    lat_delta: float
    lon_delta: float
