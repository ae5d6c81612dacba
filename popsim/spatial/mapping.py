from typing import Optional

from shapely.geometry import LineString, Point
from shapely.geometry.base import BaseGeometry

from popsim.population.models import Person


def activity_chain_line(person: Person) -> Optional[BaseGeometry]:
    """
    Geometry through a person's activity points in chain order, (lng, lat) coordinates.

    A LineString for two or more activities, a Point for one, None for none.
    """
    coords = [(a.coordinates.lng, a.coordinates.lat) for a in person.activities]
    if not coords:
        return None
    if len(coords) == 1:
        return Point(coords[0])
    return LineString(coords)
