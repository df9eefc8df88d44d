"""
Bundled unit snapshot loader.

The snapshot is a copy of the Service Map response shipped inside the package
(`kiikkuuko/data/static_units.json`) so the list can be shown immediately, before
the network refresh returns. A deployment may point `snapshot.path` at its own file.

`read_snapshot` is strict and raises `AssetUnavailable`; `load_snapshot` is what the
repository uses and never raises.
"""

from __future__ import annotations

import json
import logging
from importlib import resources
from pathlib import Path

from pydantic import ValidationError

from kiikkuuko.core.env import resolve_project_path
from kiikkuuko.core.errors import AssetUnavailable
from kiikkuuko.domain.models import Unit, UnitsResponse

logger = logging.getLogger(__name__)

BUNDLED_SNAPSHOT = "static_units.json"


def _read_text(path: str | Path | None) -> str:
    if path is None:
        return resources.files("kiikkuuko.data").joinpath(BUNDLED_SNAPSHOT).read_text(encoding="utf-8")
    return resolve_project_path(path).read_text(encoding="utf-8")


def read_snapshot(path: str | Path | None = None) -> UnitsResponse:
    """Read and validate a snapshot envelope (`None` = the bundled one).

    Raises:
        AssetUnavailable: If the file is missing, unreadable, not JSON or off-schema.
    """
    where = str(path) if path is not None else f"package:{BUNDLED_SNAPSHOT}"
    try:
        text = _read_text(path)
    except (OSError, UnicodeDecodeError) as exc:
        raise AssetUnavailable(f"Snapshot {where} not found: {exc}") from exc
    try:
        return UnitsResponse.model_validate(json.loads(text))
    except (ValueError, ValidationError) as exc:
        raise AssetUnavailable(f"Snapshot {where} could not be decoded: {exc}") from exc


def load_snapshot(path: str | Path | None = None) -> list[Unit]:
    """Best-effort variant of `read_snapshot`: returns [] instead of raising."""
    try:
        response = read_snapshot(path)
    except AssetUnavailable as exc:
        logger.error("%s", exc)
        return []
    logger.info("Loaded %d units from snapshot", len(response.results))
    return list(response.results)


def write_snapshot(response: UnitsResponse, path: str | Path) -> Path:
    """Write an envelope to disk in the same shape `read_snapshot` expects."""
    resolved = resolve_project_path(path)
    resolved.parent.mkdir(parents=True, exist_ok=True)
    payload = response.model_dump(mode="json", exclude_none=True)
    tmp = resolved.with_suffix(".tmp")
    tmp.write_text(json.dumps(payload, ensure_ascii=False, indent=1), encoding="utf-8")
    tmp.replace(resolved)
    return resolved
