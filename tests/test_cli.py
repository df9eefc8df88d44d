import json

import pytest

from kiikkuuko import cli
from kiikkuuko.config.settings import get_settings

from factories import envelope, unit_payload


@pytest.fixture
def offline_settings(monkeypatch, tmp_path):
    snapshot_path = tmp_path / "static_units.json"
    snapshot_path.write_text(
        json.dumps(
            envelope(
                [
                    unit_payload(1, "Leikkipuisto Brahe", lat=60.1877, lon=24.9508),
                    unit_payload(2, "Leikkipaikka ilman sijaintia"),
                    unit_payload(3, "Leikkipuisto Linja", lat=60.1852, lon=24.9457),
                ]
            )
        ),
        encoding="utf-8",
    )
    settings = get_settings()
    settings = settings.model_copy(
        update={
            "snapshot": settings.snapshot.model_copy(update={"path": str(snapshot_path)}),
            "storage": settings.storage.model_copy(update={"dir": str(tmp_path / "storage")}),
        }
    )
    monkeypatch.setattr(cli, "get_settings", lambda: settings)
    return settings


def test_cli_units_json_without_location(offline_settings, capsys):
    assert cli.main(["units", "--no-refresh", "--json"]) == 0
    rows = json.loads(capsys.readouterr().out)
    assert [r["id"] for r in rows] == [1, 2, 3]
    assert all(r["distance_m"] is None for r in rows)


def test_cli_units_with_location_sorted_and_limited(offline_settings, capsys):
    assert cli.main(["units", "--no-refresh", "--lat", "60.185", "--lon", "24.945", "--limit", "1"]) == 0
    out = capsys.readouterr().out.strip().splitlines()
    assert len(out) == 1
    assert "Leikkipuisto Linja (#3)" in out[0]
    assert out[0].endswith(" km")


def test_cli_favorite_toggle_is_reflected_in_listing(offline_settings, capsys):
    assert cli.main(["favorite", "2"]) == 0
    assert "Unit 2: favorite" in capsys.readouterr().out

    assert cli.main(["favorites"]) == 0
    assert capsys.readouterr().out.split() == ["2"]

    cli.main(["units", "--no-refresh"])
    lines = capsys.readouterr().out.splitlines()
    assert lines[1].startswith("  2. * ")


def test_cli_rejects_half_a_coordinate(offline_settings):
    with pytest.raises(SystemExit):
        cli.main(["units", "--no-refresh", "--lat", "60.1"])
