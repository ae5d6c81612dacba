from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from popsim.errors import ConfigurationError
from popsim.population.models import FEMALE, HOME, LEISURE, MALE, Activity, Coordinates, Person
from popsim.population.timeutils import format_minutes
from popsim.population.utils import RandomSource, make_random_source, random_element, random_int, weighted_choice
from popsim.spatial.sampling import MAX_SAMPLING_ATTEMPTS, random_point_in_zone
from popsim.spatial.zones import ZoneCatalog
from popsim.synthetic.mobility import transport_for_leg
from popsim.synthetic.timelines import EMPLOYMENT_RATE, realize_schedule, template_for


# (min_age, max_age) inclusive -> relative weight; skewed towards school and working age.
AGE_PYRAMID: List[Tuple[Tuple[int, int], float]] = [
    ((0, 2), 3.0),
    ((3, 5), 3.5),
    ((6, 18), 16.0),
    ((19, 34), 24.0),
    ((35, 65), 37.0),
    ((66, 90), 16.5),
]

FIRST_NAMES: Dict[str, Tuple[str, ...]] = {
    MALE: ("Lucas", "Hugo", "Louis", "Gabriel", "Arthur", "Jules", "Adam", "Paul", "Nathan", "Raphaël",
           "Thomas", "Antoine", "Mathis", "Léo", "Victor"),
    FEMALE: ("Emma", "Jade", "Louise", "Alice", "Chloé", "Lina", "Léa", "Manon", "Camille", "Inès",
             "Sarah", "Juliette", "Zoé", "Clara", "Margaux"),
}

LAST_NAMES: Tuple[str, ...] = (
    "Martin", "Bernard", "Dubois", "Thomas", "Robert", "Richard", "Petit", "Durand", "Leroy", "Moreau",
    "Simon", "Laurent", "Lefebvre", "Michel", "Garcia", "David", "Bertrand", "Roux", "Vincent", "Fournier",
)


@dataclass
class GenerationParams:
    female_share: float = 0.515
    employment_rate: float = EMPLOYMENT_RATE
    leisure_near_home: float = 0.3  # chance a leisure stay happens in the home zone
    max_sampling_attempts: int = MAX_SAMPLING_ATTEMPTS


def draw_age(rng: RandomSource) -> int:
    low, high = weighted_choice(AGE_PYRAMID, rng)
    return random_int(low, high, rng)


def draw_sex(rng: RandomSource, female_share: float = 0.515) -> str:
    return FEMALE if rng() < female_share else MALE


def _pick_zone(catalog: ZoneCatalog, rng: RandomSource) -> str:
    return random_element(catalog.names, rng)


def generate_person(person_id: int, catalog: ZoneCatalog, rng: RandomSource, params: Optional[GenerationParams] = None) -> Person:
    """
    Generate one person and its daily activity chain.

    Every home activity shares the same zone and point. Work and school stays
    go to a random zone; leisure stays in the home zone with probability
    params.leisure_near_home, and elsewhere otherwise. Each leg after the first
    activity gets a transport mode from the leg distance and the person's age.
    """
    params = params or GenerationParams()
    age = draw_age(rng)
    sex = draw_sex(rng, params.female_share)
    first_name = random_element(FIRST_NAMES[sex], rng)
    last_name = random_element(LAST_NAMES, rng)

    home_zone = _pick_zone(catalog, rng)
    home_point = random_point_in_zone(home_zone, catalog[home_zone], rng, params.max_sampling_attempts)

    stays = realize_schedule(template_for(age, rng, params.employment_rate), rng)
    activities: List[Activity] = []
    previous: Optional[Coordinates] = None
    for kind, start, end in stays:
        if kind == HOME:
            zone, point = home_zone, home_point
        else:
            if kind == LEISURE and rng() < params.leisure_near_home:
                zone = home_zone
            else:
                zone = _pick_zone(catalog, rng)
            point = random_point_in_zone(zone, catalog[zone], rng, params.max_sampling_attempts)
        activities.append(Activity(
            kind=kind,
            start_time=format_minutes(start),
            end_time=format_minutes(end),
            zone=zone,
            coordinates=point,
            transport=transport_for_leg(previous, point, age, rng),
        ))
        previous = point

    return Person(
        id=person_id,
        age=age,
        sex=sex,
        first_name=first_name,
        last_name=last_name,
        activities=tuple(activities),
    )


def generate_population(count: int, catalog: ZoneCatalog, rng: Optional[RandomSource] = None,
                        params: Optional[GenerationParams] = None) -> List[Person]:
    """
    Generate `count` people with ids 1..count.

    Args:
        count: Number of people
        catalog: Zones used for homes and activity locations (read only)
        rng: Uniform random source; a fresh unseeded numpy generator when None
        params: Generation tunables

    Returns:
        List of Person

    Raises:
        ConfigurationError: If count is negative or the catalog has no zones
    """
    if count < 0:
        raise ConfigurationError(f"Population size must be >= 0, got {count}")
    if catalog is None or len(catalog) == 0:
        raise ConfigurationError("Cannot generate a population without zones")
    rng = rng or make_random_source()
    params = params or GenerationParams()
    return [generate_person(i, catalog, rng, params) for i in range(1, count + 1)]
