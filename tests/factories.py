from __future__ import annotations

from typing import Any

from kiikkuuko.domain.models import Unit


def unit_payload(unit_id: int, name: str, lat: float | None = None, lon: float | None = None, **extra: Any) -> dict:
    payload: dict[str, Any] = {"id": unit_id, "name": {"fi": name}, "municipality": "helsinki"}
    payload["location"] = {"type": "Point", "coordinates": [lon, lat]} if lat is not None else None
    payload.update(extra)
    return payload


def make_unit(unit_id: int, name: str | None = None, lat: float | None = None, lon: float | None = None) -> Unit:
    return Unit.model_validate(unit_payload(unit_id, name or f"Unit {unit_id}", lat, lon))


def envelope(results: list[dict], count: int | None = None, next_url: str | None = None) -> dict:
    return {
        "count": len(results) if count is None else count,
        "next": next_url,
        "previous": None,
        "results": results,
    }
