import logging
from typing import Tuple

import numpy as np
import shapely
from shapely.geometry import Point
from shapely.geometry.base import BaseGeometry

from popsim.errors import GeometryError
from popsim.population.models import Coordinates
from popsim.population.utils import RandomSource, uniform

logger = logging.getLogger(__name__)

MAX_SAMPLING_ATTEMPTS = 1000
EARTH_RADIUS_KM = 6371.0


def great_circle_km(lat1, lon1, lat2, lon2):
    """
    Haversine distance in kilometres. Accepts scalars or numpy arrays.
    """
    phi1 = np.radians(lat1)
    phi2 = np.radians(lat2)
    delta_phi = np.radians(lat2 - lat1)
    delta_lambda = np.radians(lon2 - lon1)
    a = np.sin(delta_phi / 2) ** 2 + np.cos(phi1) * np.cos(phi2) * np.sin(delta_lambda / 2) ** 2
    return EARTH_RADIUS_KM * 2 * np.arctan2(np.sqrt(a), np.sqrt(1 - a))


def covers_point(polygon: BaseGeometry, lat: float, lng: float) -> bool:
    """Point-in-polygon test, boundary included. Geometry coordinates are (lng, lat)."""
    return bool(shapely.intersects_xy(polygon, lng, lat))


def sample_point_in_polygon(polygon: BaseGeometry, rng: RandomSource, max_attempts: int = MAX_SAMPLING_ATTEMPTS) -> Coordinates:
    """
    Rejection-sample a uniform point inside a polygon.

    Draws points in the polygon's bounding box until one falls inside the boundary.

    Args:
        polygon: Polygon or MultiPolygon with (lng, lat) coordinates
        rng: Uniform random source
        max_attempts: Number of draws before giving up

    Returns:
        Coordinates of the accepted point

    Raises:
        GeometryError: If no draw landed inside within max_attempts (degenerate or empty polygon)
    """
    if polygon.is_empty:
        raise GeometryError("Cannot sample a point in an empty geometry")
    min_lng, min_lat, max_lng, max_lat = polygon.bounds
    for _ in range(max_attempts):
        lng = uniform(min_lng, max_lng, rng)
        lat = uniform(min_lat, max_lat, rng)
        if covers_point(polygon, lat, lng):
            return Coordinates(lat=lat, lng=lng)
    raise GeometryError(f"No point found inside polygon after {max_attempts} attempts (area={polygon.area:.3g})")


def representative_coordinates(polygon: BaseGeometry) -> Coordinates:
    """Centroid when it lies inside the polygon, otherwise shapely's representative point."""
    point: Point = polygon.centroid
    if point.is_empty or not polygon.covers(point):
        point = polygon.representative_point()
    return Coordinates(lat=point.y, lng=point.x)


def random_point_in_zone(zone_name: str, polygon: BaseGeometry, rng: RandomSource, max_attempts: int = MAX_SAMPLING_ATTEMPTS) -> Coordinates:
    try:
        return sample_point_in_polygon(polygon, rng, max_attempts=max_attempts)
    except GeometryError as e:
        logger.warning("Point sampling failed in zone %r, using its representative point: %s", zone_name, e)
        return representative_coordinates(polygon)


def bounds_of(polygons) -> Tuple[float, float, float, float]:
    """(min_lng, min_lat, max_lng, max_lat) over several geometries."""
    return tuple(shapely.total_bounds(list(polygons)))
