import json

from kiikkuuko.core.errors import PersistenceWriteFailure
from kiikkuuko.core.storage import JsonFileStore
from kiikkuuko.favorites.store import FavoritesStore


def _stored_ids(tmp_path, key="favorites"):
    raw = json.loads((tmp_path / f"{key}.json").read_text(encoding="utf-8"))
    return raw["value"]


def test_load_is_empty_without_prior_data(tmp_path):
    assert FavoritesStore(JsonFileStore(tmp_path)).load() == frozenset()


def test_toggle_persists_immediately_and_survives_restart(tmp_path):
    store = FavoritesStore(JsonFileStore(tmp_path))

    assert store.toggle(7) == frozenset({7})
    assert store.toggle(3) == frozenset({3, 7})
    assert sorted(_stored_ids(tmp_path)) == [3, 7]

    restarted = FavoritesStore(JsonFileStore(tmp_path))
    assert restarted.load() == frozenset({3, 7})
    assert restarted.contains(3)
    assert not restarted.contains(4)


def test_toggle_twice_restores_previous_set_and_file(tmp_path):
    store = FavoritesStore(JsonFileStore(tmp_path))
    store.toggle(1)
    before_set = store.load()
    before_file = sorted(_stored_ids(tmp_path))

    store.toggle(42)
    after = store.toggle(42)

    assert after == before_set
    assert sorted(_stored_ids(tmp_path)) == before_file


def test_load_treats_malformed_data_as_empty(tmp_path):
    storage = JsonFileStore(tmp_path)
    for bad in [{"ids": [1]}, "1,2,3", [1, "2"], [True, 2], None]:
        storage.set("favorites", bad)
        assert FavoritesStore(storage).load() == frozenset()


def test_load_treats_corrupt_file_as_empty(tmp_path):
    (tmp_path / "favorites.json").write_text("\x00garbage", encoding="utf-8")
    store = FavoritesStore(JsonFileStore(tmp_path))

    assert store.load() == frozenset()
    # A toggle on top of a corrupt file writes a fresh, valid list.
    assert store.toggle(5) == frozenset({5})
    assert _stored_ids(tmp_path) == [5]


def test_custom_key_is_used(tmp_path):
    store = FavoritesStore(JsonFileStore(tmp_path), key="visited")
    store.toggle(9)
    assert _stored_ids(tmp_path, key="visited") == [9]


def test_failed_write_leaves_memory_and_disk_unchanged(monkeypatch, tmp_path):
    storage = JsonFileStore(tmp_path)
    store = FavoritesStore(storage)
    store.toggle(1)

    def broken_set(key, value):
        raise PersistenceWriteFailure("disk full")

    monkeypatch.setattr(storage, "set", broken_set)

    assert store.toggle(2) == frozenset({1})
    assert store.load() == frozenset({1})
    assert _stored_ids(tmp_path) == [1]
