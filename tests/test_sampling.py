import logging

import numpy as np
import pytest
from shapely.geometry import Polygon, box

from conftest import ScriptedRandom
from popsim.errors import GeometryError
from popsim.population.models import Coordinates
from popsim.population.utils import make_random_source
from popsim.spatial.sampling import (
    covers_point,
    great_circle_km,
    random_point_in_zone,
    representative_coordinates,
    sample_point_in_polygon,
)

TRIANGLE = Polygon([(0, 0), (1, 0), (0, 1)])


def test_great_circle_distance():
    assert great_circle_km(48.8566, 2.3522, 48.8566, 2.3522) == pytest.approx(0.0)
    # Paris -> London
    assert great_circle_km(48.8566, 2.3522, 51.5074, -0.1278) == pytest.approx(343.5, abs=2.0)
    lats = np.array([0.0, 0.0])
    assert great_circle_km(lats, lats, lats, lats + 1).tolist() == pytest.approx([111.19, 111.19], abs=0.1)


def test_covers_point_uses_lng_lat_order_and_includes_boundary():
    square = box(2.0, 48.0, 3.0, 49.0)
    assert covers_point(square, 48.5, 2.5)
    assert not covers_point(square, 2.5, 48.5)
    assert covers_point(square, 48.0, 2.5)


def test_sampled_points_are_inside():
    rng = make_random_source(3)
    for _ in range(200):
        c = sample_point_in_polygon(TRIANGLE, rng)
        assert covers_point(TRIANGLE, c.lat, c.lng)


def test_rejection_sampling_redraws_until_inside():
    # First draw (0.9, 0.9) is outside the triangle, second (0.1, 0.2) inside.
    rng = ScriptedRandom([0.9, 0.9, 0.1, 0.2])
    assert sample_point_in_polygon(TRIANGLE, rng) == Coordinates(lat=pytest.approx(0.2), lng=pytest.approx(0.1))
    assert rng.calls == 4


def test_sampling_is_bounded():
    rng = ScriptedRandom([0.99])
    with pytest.raises(GeometryError):
        sample_point_in_polygon(TRIANGLE, rng, max_attempts=25)
    assert rng.calls == 50


def test_exhausted_sampling_falls_back_to_centroid(caplog):
    with caplog.at_level(logging.WARNING, logger="popsim.spatial.sampling"):
        c = random_point_in_zone("tri", TRIANGLE, ScriptedRandom([0.99]), max_attempts=10)
    assert c.lat == pytest.approx(1 / 3)
    assert c.lng == pytest.approx(1 / 3)
    assert "tri" in caplog.text


def test_representative_point_for_concave_polygon():
    # U shape: the centroid falls in the notch, outside the polygon.
    u_shape = Polygon([(0, 0), (3, 0), (3, 3), (2, 3), (2, 1), (1, 1), (1, 3), (0, 3)])
    c = representative_coordinates(u_shape)
    assert covers_point(u_shape, c.lat, c.lng)
