"""
Kiikkuuko CLI entrypoint.

This CLI is intended for quick local checks and maintenance without a front end:
- `units`: print the projected list (snapshot, then refresh, optionally from a location)
- `favorite` / `favorites`: toggle and list favorited units
- `snapshot-update`: regenerate a snapshot file from the live API
- `serve`: run the HTTP API with uvicorn
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from typing import Any

from kiikkuuko.bootstrap import build_controller, build_favorites_store
from kiikkuuko.catalog.snapshot import write_snapshot
from kiikkuuko.config.settings import get_settings
from kiikkuuko.core.errors import KiikkuukoError
from kiikkuuko.core.geo import Coordinate
from kiikkuuko.core.logging import configure_logging
from kiikkuuko.domain.models import UnitView
from kiikkuuko.ingestion.servicemap_client import ServiceMapClient
from kiikkuuko.location.provider import FixedLocationProvider
from kiikkuuko.viewmodel.display import format_distance_km


def _location_from_args(args: argparse.Namespace) -> Coordinate | None:
    if args.lat is None and args.lon is None:
        return None
    if args.lat is None or args.lon is None:
        raise ValueError("--lat and --lon must be given together")
    return Coordinate(lat=float(args.lat), lon=float(args.lon))


async def _collect_views(location: Coordinate | None, refresh: bool) -> list[UnitView]:
    settings = get_settings()
    provider = FixedLocationProvider(location) if location else None
    controller = build_controller(settings, location_provider=provider, refresh_on_start=refresh)
    await controller.start()
    try:
        await controller.settle(wait_for_location=True)
        return controller.views()
    finally:
        await controller.stop()


def _cmd_units(args: argparse.Namespace) -> int:
    """Handle the `units` subcommand."""
    settings = get_settings()
    language = settings.app.language
    location = _location_from_args(args)
    views = asyncio.run(_collect_views(location, refresh=not args.no_refresh))
    if args.limit is not None:
        views = views[: int(args.limit)]

    if args.json:
        payload = [
            {
                "id": v.unit.id,
                "name": v.unit.display_name(language),
                "distance_m": v.distance_m,
                "is_favorite": v.is_favorite,
            }
            for v in views
        ]
        print(json.dumps(payload, ensure_ascii=False, indent=2))
        return 0

    for i, v in enumerate(views, start=1):
        star = "*" if v.is_favorite else " "
        distance = format_distance_km(v.distance_m)
        suffix = f"  {distance}" if distance else ""
        print(f"{i:>3}. {star} {v.unit.display_name(language)} (#{v.unit.id}){suffix}")
    return 0


def _cmd_favorite(args: argparse.Namespace) -> int:
    store = build_favorites_store(get_settings())
    favorites = store.toggle(int(args.unit_id))
    state = "favorite" if int(args.unit_id) in favorites else "not favorite"
    print(f"Unit {args.unit_id}: {state}")
    return 0


def _cmd_favorites(_: argparse.Namespace) -> int:
    store = build_favorites_store(get_settings())
    for unit_id in sorted(store.load()):
        print(unit_id)
    return 0


def _cmd_snapshot_update(args: argparse.Namespace) -> int:
    settings = get_settings()
    client = ServiceMapClient(settings)
    try:
        response = client.fetch_units_sync()
    except KiikkuukoError as exc:
        print(f"Snapshot not updated: {exc}", file=sys.stderr)
        return 1
    path = write_snapshot(response, args.output)
    print(f"Wrote {len(response.results)} units (count={response.count}) to {path}")
    return 0


def _cmd_serve(args: argparse.Namespace) -> int:
    import uvicorn

    uvicorn.run("kiikkuuko.api.app:app", host=args.host, port=int(args.port), log_config=None)
    return 0


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the Kiikkuuko CLI."""
    parser = argparse.ArgumentParser(prog="kiikkuuko")
    sub = parser.add_subparsers(dest="command", required=True)

    units = sub.add_parser("units", help="List playgrounds, nearest first when a location is given.")
    units.add_argument("--lat", type=float, default=None)
    units.add_argument("--lon", type=float, default=None)
    units.add_argument("--no-refresh", action="store_true", help="Only use the bundled snapshot.")
    units.add_argument("--limit", type=int, default=None)
    units.add_argument("--json", action="store_true", help="Output machine-readable JSON")
    units.set_defaults(func=_cmd_units)

    fav = sub.add_parser("favorite", help="Toggle a unit's favorite flag.")
    fav.add_argument("unit_id", type=int)
    fav.set_defaults(func=_cmd_favorite)

    favs = sub.add_parser("favorites", help="List favorited unit ids.")
    favs.set_defaults(func=_cmd_favorites)

    snap = sub.add_parser("snapshot-update", help="Fetch the live dataset and write it as a snapshot file.")
    snap.add_argument("--output", default="src/kiikkuuko/data/static_units.json")
    snap.set_defaults(func=_cmd_snapshot_update)

    serve = sub.add_parser("serve", help="Run the HTTP API.")
    serve.add_argument("--host", default="127.0.0.1")
    serve.add_argument("--port", type=int, default=8000)
    serve.set_defaults(func=_cmd_serve)
    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint callable used by `python -m kiikkuuko.cli`."""
    configure_logging()
    parser = build_parser()
    args = parser.parse_args(argv)
    func: Any = getattr(args, "func")
    try:
        return int(func(args))
    except ValueError as exc:
        parser.error(str(exc))
        return 2


if __name__ == "__main__":
    raise SystemExit(main())
