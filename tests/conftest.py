from typing import Iterable, List, Sequence, Tuple

import matplotlib
matplotlib.use("Agg")

import pytest
from shapely.geometry import Polygon, box

from popsim.population.models import HOME, Activity, Coordinates, Person
from popsim.spatial.zones import ZoneCatalog


class ScriptedRandom:
    """Random source replaying fixed values in order, then repeating the last one."""

    def __init__(self, values: Sequence[float]):
        self.values = list(values)
        self.calls = 0

    def __call__(self) -> float:
        idx = min(self.calls, len(self.values) - 1)
        self.calls += 1
        return self.values[idx]


def square_feature(name: str, min_lng: float, min_lat: float, max_lng: float, max_lat: float) -> dict:
    return {
        "type": "Feature",
        "properties": {"name": name},
        "geometry": box(min_lng, min_lat, max_lng, max_lat).__geo_interface__,
    }


def make_person(person_id: int, age: int, stays: Iterable[Tuple[str, str, str, Tuple[float, float]]], sex: str = "female") -> Person:
    """stays: (kind, start "HH:MM", end "HH:MM", (lat, lng))"""
    activities: List[Activity] = []
    for idx, (kind, start, end, (lat, lng)) in enumerate(stays):
        activities.append(Activity(
            kind=kind,
            start_time=start,
            end_time=end,
            zone="z",
            coordinates=Coordinates(lat, lng),
            transport=None if idx == 0 else "walk",
        ))
    return Person(id=person_id, age=age, sex=sex, activities=tuple(activities))


@pytest.fixture
def paris_catalog() -> ZoneCatalog:
    return ZoneCatalog.load({
        "type": "FeatureCollection",
        "features": [
            square_feature("west", 2.30, 48.84, 2.35, 48.88),
            square_feature("east", 2.35, 48.84, 2.40, 48.88),
            {
                "type": "Feature",
                "properties": {"name": "triangle"},
                "geometry": Polygon([(2.40, 48.84), (2.44, 48.84), (2.40, 48.88)]).__geo_interface__,
            },
        ],
    })


@pytest.fixture
def commuter() -> Person:
    """Home in the unit square, works far outside it."""
    return make_person(1, 40, [
        (HOME, "00:00", "07:00", (0.5, 0.5)),
        ("work", "08:00", "17:00", (10.0, 10.0)),
        (HOME, "18:00", "23:59", (0.5, 0.5)),
    ])
