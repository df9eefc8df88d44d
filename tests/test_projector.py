from kiikkuuko.core.geo import Coordinate
from kiikkuuko.domain.models import Unit
from kiikkuuko.viewmodel.projector import project

from factories import make_unit, unit_payload

USER = Coordinate(lat=60.1700, lon=24.9400)


def _units():
    return [
        make_unit(1, "far", lat=60.2000, lon=24.9400),
        make_unit(2, "no location"),
        make_unit(3, "near", lat=60.1710, lon=24.9400),
        make_unit(4, "middle", lat=60.1800, lon=24.9400),
    ]


def test_project_without_location_keeps_every_unit_in_source_order():
    units = _units()
    views = project(units, None, frozenset())

    assert [v.id for v in views] == [1, 2, 3, 4]
    assert all(v.distance_m is None for v in views)
    assert all(v.is_favorite is False for v in views)


def test_project_with_location_drops_units_without_coordinates_and_sorts():
    views = project(_units(), USER, frozenset())

    assert [v.id for v in views] == [3, 4, 1]
    assert all(v.distance_m is not None for v in views)
    assert [v.distance_m for v in views] == sorted(v.distance_m for v in views)


def test_project_keeps_source_order_for_equal_distances():
    units = [
        make_unit(10, "a", lat=60.1800, lon=24.9400),
        make_unit(11, "b", lat=60.1800, lon=24.9400),
        make_unit(12, "closer", lat=60.1750, lon=24.9400),
        make_unit(13, "c", lat=60.1800, lon=24.9400),
    ]
    views = project(units, USER, frozenset())
    assert [v.id for v in views] == [12, 10, 11, 13]


def test_project_marks_favorites_in_both_modes():
    favorites = frozenset({2, 4})

    without = {v.id: v.is_favorite for v in project(_units(), None, favorites)}
    assert without == {1: False, 2: True, 3: False, 4: True}

    with_location = {v.id: v.is_favorite for v in project(_units(), USER, favorites)}
    assert with_location == {3: False, 4: True, 1: False}


def test_project_favorite_flag_follows_the_set_not_previous_views():
    units = _units()
    first = project(units, None, frozenset({1}))
    second = project(units, None, frozenset())

    assert first[0].is_favorite is True
    assert second[0].is_favorite is False


def test_project_empty_input():
    assert project([], None, frozenset()) == []
    assert project([], USER, frozenset({1})) == []


def test_project_does_not_mutate_input_order():
    units = _units()
    project(units, USER, frozenset())
    assert [u.id for u in units] == [1, 2, 3, 4]


def _units_with_unusable_points():
    return [
        make_unit(1, "has point", lat=60.1710, lon=24.9400),
        Unit.model_validate(unit_payload(2, "null coordinates", location={"type": "Point", "coordinates": None})),
        Unit.model_validate(unit_payload(3, "empty coordinates", location={"type": "Point", "coordinates": []})),
        Unit.model_validate(unit_payload(4, "one coordinate", location={"type": "Point", "coordinates": [24.94]})),
    ]


def test_project_without_location_keeps_units_whose_point_has_no_coordinates():
    views = project(_units_with_unusable_points(), None, frozenset({3}))

    assert [v.id for v in views] == [1, 2, 3, 4]
    assert all(v.distance_m is None for v in views)
    assert [v.is_favorite for v in views] == [False, False, True, False]


def test_project_with_location_drops_units_whose_point_has_no_coordinates():
    views = project(_units_with_unusable_points(), USER, frozenset({3}))

    assert [v.id for v in views] == [1]
    assert views[0].distance_m is not None
