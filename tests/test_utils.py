import pytest

from conftest import ScriptedRandom
from popsim.population.models import Activity, Coordinates, Person, age_band_of
from popsim.population.timeutils import format_minutes, hour_of, normalize_minutes, to_minutes
from popsim.population.utils import make_random_source, random_element, random_int, weighted_choice


def test_weighted_choice_walks_table_in_order():
    table = [("a", 1), ("b", 3)]
    assert weighted_choice(table, ScriptedRandom([0.2])) == "a"   # r = 0.8
    assert weighted_choice(table, ScriptedRandom([0.5])) == "b"   # r = 2.0
    assert weighted_choice(table, ScriptedRandom([0.0])) == "a"


def test_weighted_choice_falls_back_to_last_option():
    # A draw of exactly 1.0 leaves r == 0 after the walk.
    assert weighted_choice([("a", 1), ("b", 3)], ScriptedRandom([1.0])) == "b"


def test_weighted_choice_skips_zero_weight():
    assert weighted_choice([("never", 0), ("always", 2)], ScriptedRandom([0.0])) == "always"


def test_weighted_choice_rejects_empty_table():
    with pytest.raises(ValueError):
        weighted_choice([], ScriptedRandom([0.5]))


def test_random_int_bounds_inclusive():
    assert random_int(3, 5, ScriptedRandom([0.0])) == 3
    assert random_int(3, 5, ScriptedRandom([0.999999])) == 5
    assert random_int(3, 5, ScriptedRandom([1.0])) == 5
    assert random_element(["x", "y"], ScriptedRandom([0.7])) == "y"


def test_seeded_random_source_is_reproducible():
    a, b = make_random_source(42), make_random_source(42)
    assert [a() for _ in range(5)] == [b() for _ in range(5)]


@pytest.mark.parametrize("total, expected", [(-10, 1430), (1450, 10), (0, 0), (1439, 1439), (1440, 0), (-1440, 0), (-2890, 1430)])
def test_normalize_minutes_wraps(total, expected):
    assert normalize_minutes(total) == expected


def test_minute_formatting():
    assert to_minutes("21:00") == 1260
    assert to_minutes("00:30") == 30
    assert to_minutes("24:00") == 0
    assert format_minutes(1439) == "23:59"
    assert format_minutes(-10) == "23:50"
    assert hour_of(1380) == 23


@pytest.mark.parametrize("age, band", [(0, "0-17"), (17, "0-17"), (18, "18-25"), (25, "18-25"), (26, "26-34"),
                                       (34, "26-34"), (35, "35-64"), (64, "35-64"), (65, "65+"), (99, "65+")])
def test_age_bands(age, band):
    assert age_band_of(age) == band


def test_person_record_round_trip():
    person = Person(
        id=7, age=33, sex="male", first_name="Hugo", last_name="Martin",
        activities=(
            Activity("home", "00:00", "07:10", "west", Coordinates(48.85, 2.31)),
            Activity("work", "08:05", "17:00", "east", Coordinates(48.86, 2.37), "bike"),
        ),
    )
    record = person.to_record()
    assert record["firstName"] == "Hugo"
    assert record["activities"][0]["transport"] is None
    assert record["activities"][1] == {
        "kind": "work",
        "startTime": "08:05",
        "endTime": "17:00",
        "zoneName": "east",
        "coordinates": {"lat": 48.86, "lng": 2.37},
        "transport": "bike",
    }
    assert Person.from_record(record) == person


def test_activity_spanning_midnight():
    a = Activity("leisure", "21:00", "00:30", "z", Coordinates(0, 0), "walk")
    assert a.spans_midnight
    assert (a.start_minutes, a.end_minutes) == (1260, 30)
