import pytest
from shapely.geometry import Polygon

from conftest import ScriptedRandom, square_feature
from popsim.errors import ConfigurationError
from popsim.population.models import ACTIVITY_KINDS, LEISURE, PERSONAL_CAR, SEXES, TRANSPORT_MODES
from popsim.population.utils import make_random_source
from popsim.spatial.sampling import covers_point
from popsim.spatial.zones import ZoneCatalog
from popsim.synthetic.pipeline import GenerationParams, draw_age, draw_sex, generate_person, generate_population


@pytest.fixture
def population(paris_catalog):
    return generate_population(400, paris_catalog, rng=make_random_source(7))


def test_ids_are_sequential(population):
    assert [p.id for p in population] == list(range(1, 401))


def test_people_fields(population):
    for p in population:
        assert p.age >= 0
        assert p.sex in SEXES
        assert p.first_name and p.last_name
        assert all(a.kind in ACTIVITY_KINDS for a in p.activities)


def test_chains_are_ordered_and_cover_the_day(population):
    for p in population:
        acts = p.activities
        assert acts[0].start_time == "00:00"
        assert acts[-1].end_time == "23:59"
        for prev, cur in zip(acts, acts[1:]):
            assert cur.start_minutes >= prev.end_minutes


def test_home_is_shared_by_all_home_activities(population):
    for p in population:
        homes = p.home_activities()
        assert len(homes) >= 2
        assert len({a.zone for a in homes}) == 1
        assert len({a.coordinates for a in homes}) == 1


def test_points_lie_in_their_zone(population, paris_catalog):
    for p in population:
        for a in p.activities:
            assert covers_point(paris_catalog[a.zone], a.coordinates.lat, a.coordinates.lng)


def test_transport_only_between_activities(population):
    for p in population:
        assert p.activities[0].transport is None
        assert all(a.transport in TRANSPORT_MODES for a in p.activities[1:])


def test_minors_never_travel_by_car(population):
    minors = [p for p in population if p.age < 18]
    assert minors
    for p in minors:
        assert all(a.transport != PERSONAL_CAR for a in p.activities)


def test_age_pyramid_is_skewed_to_school_and_working_age(population):
    school_or_working = sum(1 for p in population if 6 <= p.age <= 65)
    assert school_or_working > len(population) * 0.6


def test_single_zone_covering_everything():
    catalog = ZoneCatalog.load([square_feature("paris", 2.22, 48.81, 2.47, 48.91)])
    people = generate_population(100, catalog, rng=make_random_source(11))
    assert len(people) == 100
    for p in people:
        assert {a.zone for a in p.home_activities()} == {"paris"}


def test_leisure_near_home(paris_catalog):
    params = GenerationParams(leisure_near_home=1.0)
    people = generate_population(60, paris_catalog, rng=make_random_source(5), params=params)
    for p in people:
        home_zone = p.home_activities()[0].zone
        assert all(a.zone == home_zone for a in p.activities if a.kind == LEISURE)


def test_seeded_generation_is_reproducible(paris_catalog):
    a = generate_population(20, paris_catalog, rng=make_random_source(99))
    b = generate_population(20, paris_catalog, rng=make_random_source(99))
    assert a == b


def test_catalog_is_not_mutated(paris_catalog):
    before = dict(paris_catalog)
    generate_population(10, paris_catalog, rng=make_random_source(1))
    assert dict(paris_catalog) == before


def test_generate_zero_people(paris_catalog):
    assert generate_population(0, paris_catalog) == []


def test_negative_count_is_a_configuration_error(paris_catalog):
    with pytest.raises(ConfigurationError):
        generate_population(-1, paris_catalog)


def test_failed_sampling_falls_back_to_a_point_inside():
    catalog = ZoneCatalog.load([({"name": "tri"}, Polygon([(0, 0), (1, 0), (0, 1)]))])
    # Every draw lands at (0.99, 0.99), outside the triangle.
    person = generate_person(1, catalog, ScriptedRandom([0.99]), GenerationParams(max_sampling_attempts=5))
    assert person.age == 90
    for a in person.activities:
        assert a.zone == "tri"
        assert (a.coordinates.lng, a.coordinates.lat) == pytest.approx((1 / 3, 1 / 3))
        assert covers_point(catalog["tri"], a.coordinates.lat, a.coordinates.lng)


def test_draw_sex_and_age():
    assert draw_sex(ScriptedRandom([0.5])) == "female"
    assert draw_sex(ScriptedRandom([0.6])) == "male"
    # First band (0-2) has weight 3 out of 100; r = 0.0 selects it and then the lowest age.
    assert draw_age(ScriptedRandom([0.0])) == 0
    assert draw_age(ScriptedRandom([0.9999])) == 90
