"""
Activity-point view of a population and its time / demographic filters.

One row per activity, times as minutes since midnight. A stay whose end is
before its start spans midnight and is active on both sides of it.
"""

from dataclasses import dataclass
from typing import Any, Dict, Iterable, Mapping, Optional

import numpy as np
import pandas as pd

from popsim.errors import InvalidPredicate
from popsim.population.models import ACTIVITY_KINDS, AGE_BANDS, ALL, HOME, LEISURE, SCHOOL, SEXES, WORK, Person
from popsim.population.timeutils import LAST_MINUTE, normalize_minutes, to_minutes


POINT_COLUMNS = ["id", "age", "sex", "kind", "zone", "transport", "lat", "lng", "start", "end"]

# Snapshot groups: school stays are reported as education.
SNAPSHOT_GROUPS = {HOME: "home", WORK: "work", SCHOOL: "education", LEISURE: "leisure"}


def flatten_population(population: Iterable[Person]) -> pd.DataFrame:
    rows = []
    for person in population:
        for a in person.activities:
            rows.append((
                person.id, person.age, person.sex, a.kind, a.zone, a.transport,
                a.coordinates.lat, a.coordinates.lng, a.start_minutes, a.end_minutes,
            ))
    return pd.DataFrame(rows, columns=POINT_COLUMNS)


@dataclass(frozen=True)
class FilterPredicate:
    age_band: str = ALL
    sex: str = ALL
    activity_kind: str = ALL
    minute_of_day: Optional[int] = None


def _parse_minute(value: Any) -> int:
    if isinstance(value, str):
        try:
            return to_minutes(value)
        except ValueError as e:
            raise InvalidPredicate(f"Invalid time of day {value!r}, expected HH:MM") from e
    if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
        raise InvalidPredicate(f"minuteOfDay must be an integer, got {value!r}")
    if not 0 <= value <= LAST_MINUTE:
        raise InvalidPredicate(f"minuteOfDay must be in [0, {LAST_MINUTE}], got {value}")
    return int(value)


def parse_predicate(raw: Mapping[str, Any]) -> FilterPredicate:
    """
    Validate a filter request at the boundary.

    Accepts camelCase keys (ageBand, sex, activityKind, minuteOfDay) as sent by
    the front-end, or the snake_case field names. Missing keys mean "all".

    Raises:
        InvalidPredicate: On an unknown age band, sex or activity kind, or an out of range time
    """
    def get(camel: str, snake: str, default=None):
        return raw.get(camel, raw.get(snake, default))

    age_band = get("ageBand", "age_band", ALL)
    if age_band != ALL and age_band not in AGE_BANDS:
        raise InvalidPredicate(f"Unknown age band {age_band!r}; expected one of {[ALL, *AGE_BANDS]}")
    sex = get("sex", "sex", ALL)
    if sex != ALL and sex not in SEXES:
        raise InvalidPredicate(f"Unknown sex {sex!r}; expected one of {[ALL, *SEXES]}")
    kind = get("activityKind", "activity_kind", ALL)
    if kind != ALL and kind not in ACTIVITY_KINDS:
        raise InvalidPredicate(f"Unknown activity kind {kind!r}; expected one of {[ALL, *ACTIVITY_KINDS]}")
    minute = get("minuteOfDay", "minute_of_day")
    return FilterPredicate(
        age_band=age_band,
        sex=sex,
        activity_kind=kind,
        minute_of_day=None if minute is None else _parse_minute(minute),
    )


def matches_minute(start: int, end: int, t: int) -> bool:
    if start <= end:
        return start <= t <= end
    return t >= start or t <= end


def time_window_mask(start: pd.Series, end: pd.Series, t: int) -> pd.Series:
    t = normalize_minutes(t)
    same_day = start <= end
    return (same_day & (start <= t) & (t <= end)) | (~same_day & ((t >= start) | (t <= end)))


def age_band_mask(age: pd.Series, band: str) -> pd.Series:
    low, high = AGE_BANDS[band]
    mask = age >= low
    if high is not None:
        mask &= age <= high
    return mask


def filter_activity_points(points: pd.DataFrame, predicate: FilterPredicate) -> pd.DataFrame:
    """
    Rows of `points` matching every active predicate dimension ("all" / None disables one).

    Assumes a predicate validated by parse_predicate. Returns a new DataFrame; the input is untouched.
    """
    mask = pd.Series(True, index=points.index)
    if predicate.age_band != ALL:
        mask &= age_band_mask(points["age"], predicate.age_band)
    if predicate.sex != ALL:
        mask &= points["sex"] == predicate.sex
    if predicate.activity_kind != ALL:
        mask &= points["kind"] == predicate.activity_kind
    if predicate.minute_of_day is not None:
        mask &= time_window_mask(points["start"], points["end"], predicate.minute_of_day)
    return points.loc[mask].copy()


def zone_activity_snapshot(points: pd.DataFrame, zone: str, predicate: FilterPredicate) -> Dict[str, int]:
    """
    Count filtered activity points of one catalog zone per group, plus their total.

    Returns:
        {"total", "home", "work", "education", "leisure"} -> count
    """
    subset = filter_activity_points(points, predicate)
    subset = subset[subset["zone"] == zone]
    counts = subset["kind"].map(SNAPSHOT_GROUPS).value_counts()
    snapshot = {"total": int(len(subset))}
    for group in SNAPSHOT_GROUPS.values():
        snapshot[group] = int(counts.get(group, 0))
    return snapshot
