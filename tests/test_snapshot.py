import json

import pytest

from kiikkuuko.catalog.snapshot import load_snapshot, read_snapshot, write_snapshot
from kiikkuuko.core.errors import AssetUnavailable
from kiikkuuko.domain.models import UnitsResponse

from factories import envelope, unit_payload


def test_bundled_snapshot_loads_and_has_unique_ids():
    units = load_snapshot()
    assert units
    ids = [u.id for u in units]
    assert len(ids) == len(set(ids))
    assert any(u.coordinate is None for u in units)
    assert any(u.coordinate is not None for u in units)


def test_snapshot_maps_geojson_lon_lat_order(tmp_path):
    path = tmp_path / "units.json"
    path.write_text(json.dumps(envelope([unit_payload(1, "A", lat=60.18, lon=24.95)])), encoding="utf-8")

    (unit,) = load_snapshot(path)
    assert unit.coordinate.lat == 60.18
    assert unit.coordinate.lon == 24.95
    assert unit.display_name() == "A"


def test_missing_snapshot_yields_empty_list(tmp_path, caplog):
    assert load_snapshot(tmp_path / "missing.json") == []
    assert "not found" in caplog.text


@pytest.mark.parametrize(
    "content",
    [
        "not json at all",
        json.dumps({"results": []}),
        json.dumps({"count": 1, "results": [{"id": "x"}]}),
        json.dumps([1, 2, 3]),
    ],
)
def test_malformed_snapshot_yields_empty_list(tmp_path, content):
    path = tmp_path / "units.json"
    path.write_text(content, encoding="utf-8")

    assert load_snapshot(path) == []
    with pytest.raises(AssetUnavailable):
        read_snapshot(path)


def test_unknown_fields_are_ignored(tmp_path):
    path = tmp_path / "units.json"
    record = unit_payload(5, "E", lat=60.2, lon=24.9, www={"fi": "https://example.test"}, picture_url="x.jpg")
    path.write_text(json.dumps({**envelope([record]), "extra": True}), encoding="utf-8")

    (unit,) = load_snapshot(path)
    assert unit.id == 5


def test_write_snapshot_produces_a_readable_file(tmp_path):
    response = UnitsResponse.model_validate(envelope([unit_payload(1, "A", lat=60.1, lon=24.9), unit_payload(2, "B")]))
    path = write_snapshot(response, tmp_path / "out" / "units.json")

    again = read_snapshot(path)
    assert again.count == 2
    assert [u.id for u in again.results] == [1, 2]
    assert again.results[1].coordinate is None
