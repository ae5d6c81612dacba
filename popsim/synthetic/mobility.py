"""
Transport mode choice for a leg between two consecutive activities.

The mode depends on the leg distance and on the traveller's age class. Each
(age class, distance bucket) pair owns a weighted option table; the random draw
is the only side-effecting step and comes from the injected random source.
"""

from typing import Dict, List, Optional, Tuple

from popsim.population.models import (
    BIKE,
    PERSONAL_CAR,
    PUBLIC_TRANSPORT,
    RIDE_HAIL,
    TAXI,
    WALK,
    Coordinates,
)
from popsim.population.utils import RandomSource, weighted_choice
from popsim.spatial.sampling import great_circle_km


ADULT_AGE = 18
SENIOR_AGE = 65

# Upper bounds (exclusive, km) of the distance buckets; past the last one is "far".
DISTANCE_BUCKETS_KM = (0.5, 2.0, 5.0)

MINOR = "minor"
ADULT = "adult"
SENIOR = "senior"

TRANSPORT_TABLES: Dict[str, Tuple[List[Tuple[str, float]], ...]] = {
    MINOR: (
        [(WALK, 80), (BIKE, 15), (PUBLIC_TRANSPORT, 5)],
        [(WALK, 40), (BIKE, 30), (PUBLIC_TRANSPORT, 30)],
        [(BIKE, 20), (PUBLIC_TRANSPORT, 70), (WALK, 5), (TAXI, 5)],
        [(PUBLIC_TRANSPORT, 80), (TAXI, 10), (RIDE_HAIL, 10)],
    ),
    ADULT: (
        [(WALK, 85), (BIKE, 10), (PERSONAL_CAR, 5)],
        [(WALK, 35), (BIKE, 25), (PUBLIC_TRANSPORT, 25), (PERSONAL_CAR, 15)],
        [(BIKE, 15), (PUBLIC_TRANSPORT, 45), (PERSONAL_CAR, 30), (TAXI, 5), (RIDE_HAIL, 5)],
        [(PUBLIC_TRANSPORT, 45), (PERSONAL_CAR, 40), (TAXI, 7), (RIDE_HAIL, 8)],
    ),
    SENIOR: (
        [(WALK, 90), (PUBLIC_TRANSPORT, 10)],
        [(WALK, 45), (PUBLIC_TRANSPORT, 40), (PERSONAL_CAR, 10), (TAXI, 5)],
        [(PUBLIC_TRANSPORT, 55), (PERSONAL_CAR, 25), (TAXI, 15), (RIDE_HAIL, 5)],
        [(PUBLIC_TRANSPORT, 50), (PERSONAL_CAR, 30), (TAXI, 15), (RIDE_HAIL, 5)],
    ),
}


def age_class(age: int) -> str:
    if age < ADULT_AGE:
        return MINOR
    if age < SENIOR_AGE:
        return ADULT
    return SENIOR


def distance_bucket(distance_km: float) -> int:
    for idx, upper in enumerate(DISTANCE_BUCKETS_KM):
        if distance_km < upper:
            return idx
    return len(DISTANCE_BUCKETS_KM)


def transport_options(distance_km: float, age: int) -> List[Tuple[str, float]]:
    options = TRANSPORT_TABLES[age_class(age)][distance_bucket(distance_km)]
    if age < ADULT_AGE:
        options = [(mode, w) for mode, w in options if mode != PERSONAL_CAR]
    return options


def choose_transport(distance_km: float, age: int, rng: RandomSource) -> str:
    return weighted_choice(transport_options(distance_km, age), rng)


def transport_for_leg(previous: Optional[Coordinates], current: Coordinates, age: int, rng: RandomSource) -> Optional[str]:
    """Mode of the leg previous -> current, None when there is no previous activity."""
    if previous is None:
        return None
    distance_km = great_circle_km(previous.lat, previous.lng, current.lat, current.lng)
    return choose_transport(distance_km, age, rng)
