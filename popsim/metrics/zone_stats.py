"""
Descriptive statistics of the activities falling inside an arbitrary polygon.
"""

from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Union

import numpy as np
import shapely
from shapely.geometry import MultiPolygon, Polygon, shape
from shapely.geometry.base import BaseGeometry

from popsim.errors import GeometryError
from popsim.population.models import AGE_BANDS, HOME, Activity, Person, age_band_of
from popsim.population.timeutils import hour_of


@dataclass
class ZoneMetrics:
    total_activities: int = 0
    unique_visitors: int = 0
    activities_by_hour: List[int] = field(default_factory=lambda: [0] * 24)
    age_distribution: Dict[str, int] = field(default_factory=lambda: {band: 0 for band in AGE_BANDS})
    activity_type_counts: Dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalActivities": self.total_activities,
            "uniqueVisitors": self.unique_visitors,
            "activitiesByHour": [{"hour": h, "count": c} for h, c in enumerate(self.activities_by_hour)],
            "ageDistribution": [{"ageGroup": g, "count": c} for g, c in self.age_distribution.items()],
            "activityTypes": [{"type": t, "count": c} for t, c in self.activity_type_counts.items()],
        }


def as_polygon(zone: Union[BaseGeometry, Mapping[str, Any]]) -> BaseGeometry:
    """Accept a shapely geometry, a GeoJSON geometry or a GeoJSON feature; only polygons pass."""
    geom = zone
    if isinstance(zone, Mapping):
        geom = shape(zone["geometry"] if zone.get("type") == "Feature" else zone)
    if not isinstance(geom, (Polygon, MultiPolygon)):
        raise GeometryError(f"Zone geometry must be a Polygon, got {getattr(geom, 'geom_type', type(geom).__name__)}")
    return geom


def merge_home_stays(activities: List[Activity]) -> List[Activity]:
    """
    Merge runs of consecutive home activities at identical coordinates.

    The merged stay keeps the first activity's start and takes the last one's end,
    so "home, work, home" with work outside the zone counts as one home visit.
    """
    merged: List[Activity] = []
    for a in activities:
        prev = merged[-1] if merged else None
        if prev is not None and prev.kind == HOME and a.kind == HOME and prev.coordinates == a.coordinates:
            merged[-1] = Activity(
                kind=prev.kind,
                start_time=prev.start_time,
                end_time=a.end_time,
                zone=prev.zone,
                coordinates=prev.coordinates,
                transport=prev.transport,
            )
        else:
            merged.append(a)
    return merged


def hours_touched(start_minutes: int, end_minutes: int) -> List[int]:
    start_hour, end_hour = hour_of(start_minutes), hour_of(end_minutes)
    if end_hour < start_hour:
        return list(range(start_hour, 24)) + list(range(0, end_hour + 1))
    return list(range(start_hour, end_hour + 1))


def compute_zone_metrics(zone: Union[BaseGeometry, Mapping[str, Any]], population: Iterable[Person]) -> ZoneMetrics:
    """
    Aggregate the population's activities located inside `zone`.

    Args:
        zone: Polygon (shapely or GeoJSON mapping), not necessarily a catalog zone
        population: People to scan; not modified

    Returns:
        ZoneMetrics with hourly load, age bands, activity kinds and unique visitors
    """
    polygon = as_polygon(zone)
    people = list(population)
    activities = [a for p in people for a in p.activities]
    metrics = ZoneMetrics()
    if not activities:
        return metrics

    lngs = np.fromiter((a.coordinates.lng for a in activities), dtype=float, count=len(activities))
    lats = np.fromiter((a.coordinates.lat for a in activities), dtype=float, count=len(activities))
    inside = shapely.intersects_xy(polygon, lngs, lats)

    hours = np.zeros(24, dtype=int)
    kinds: Counter = Counter()
    offset = 0
    for person in people:
        n = len(person.activities)
        in_zone = [a for a, hit in zip(person.activities, inside[offset:offset + n]) if hit]
        offset += n
        visits = merge_home_stays(in_zone)
        if not visits:
            continue
        metrics.unique_visitors += 1
        band = age_band_of(person.age)
        for a in visits:
            metrics.total_activities += 1
            hours[hours_touched(a.start_minutes, a.end_minutes)] += 1
            metrics.age_distribution[band] += 1
            kinds[a.kind] += 1

    metrics.activities_by_hour = hours.tolist()
    metrics.activity_type_counts = dict(kinds)
    return metrics
