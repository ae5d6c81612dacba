"""
Daily schedule templates per age group, and their realisation into minute-of-day stays.
"""

from dataclasses import dataclass
from typing import List, Tuple

from popsim.population.models import HOME, LEISURE, SCHOOL, WORK
from popsim.population.timeutils import LAST_MINUTE, normalize_minutes
from popsim.population.utils import RandomSource, uniform


EMPLOYMENT_RATE = 0.72
MIN_STAY_MINUTES = 15


@dataclass(frozen=True)
class ActivityTemplate:
    kind: str
    base_start: int
    base_end: int
    jitter_minutes: int = 0

    @property
    def spans_midnight(self) -> bool:
        return self.base_end < self.base_start


def _t(kind: str, start: str, end: str, jitter: int) -> ActivityTemplate:
    sh, sm = start.split(":")
    eh, em = end.split(":")
    return ActivityTemplate(kind, int(sh) * 60 + int(sm), int(eh) * 60 + int(em), jitter)


INFANT = (
    _t(HOME, "00:00", "09:30", 30),
    _t(LEISURE, "10:00", "11:30", 30),
    _t(HOME, "12:00", "23:59", 0),
)

PRESCHOOL = (
    _t(HOME, "00:00", "08:00", 30),
    _t(SCHOOL, "08:30", "16:30", 30),
    _t(LEISURE, "17:00", "18:30", 30),
    _t(HOME, "19:00", "23:59", 0),
)

SCHOOL_AGE = (
    _t(HOME, "00:00", "07:30", 20),
    _t(SCHOOL, "08:00", "16:30", 20),
    _t(LEISURE, "17:30", "19:30", 45),
    _t(HOME, "20:00", "23:59", 0),
)

EMPLOYED = (
    _t(HOME, "00:00", "07:00", 45),
    _t(WORK, "08:30", "17:00", 60),
    _t(LEISURE, "18:30", "21:00", 60),
    _t(HOME, "21:30", "23:59", 0),
)

# Unemployed adults come and go more: two outings split by a stay at home.
UNEMPLOYED = (
    _t(HOME, "00:00", "09:30", 60),
    _t(LEISURE, "11:00", "13:00", 90),
    _t(HOME, "14:00", "18:00", 60),
    _t(LEISURE, "19:00", "22:00", 90),
    _t(HOME, "22:30", "23:59", 0),
)

RETIRED = (
    _t(HOME, "00:00", "09:00", 45),
    _t(LEISURE, "10:00", "12:00", 60),
    _t(HOME, "12:30", "16:00", 45),
    _t(LEISURE, "16:30", "18:30", 45),
    _t(HOME, "19:00", "23:59", 0),
)


def template_for(age: int, rng: RandomSource, employment_rate: float = EMPLOYMENT_RATE) -> Tuple[ActivityTemplate, ...]:
    """
    Select the schedule template of an age group.

    Args:
        age: Age in years
        rng: Uniform random source, only drawn for working-age people (employment)
        employment_rate: Probability that a working-age person follows the employed schedule

    Returns:
        Ordered tuple of ActivityTemplate covering one day
    """
    if age < 3:
        return INFANT
    if age <= 5:
        return PRESCHOOL
    if age <= 18:
        return SCHOOL_AGE
    if age <= 65:
        return EMPLOYED if rng() < employment_rate else UNEMPLOYED
    return RETIRED


def _jitter(base: int, jitter_minutes: int, rng: RandomSource) -> int:
    if jitter_minutes <= 0:
        return normalize_minutes(base)
    return normalize_minutes(base + int(round(uniform(-jitter_minutes, jitter_minutes, rng))))


def realize_schedule(templates: Tuple[ActivityTemplate, ...], rng: RandomSource) -> List[Tuple[str, int, int]]:
    """
    Turn templates into (kind, start, end) stays in minutes since midnight.

    The first stay starts at 00:00 and the last one ends at 23:59. A start that
    jitters before the previous end is pushed to that end so the chain stays ordered.
    """
    stays: List[Tuple[str, int, int]] = []
    last_idx = len(templates) - 1
    prev_end = None
    for idx, tpl in enumerate(templates):
        start = 0 if idx == 0 else _jitter(tpl.base_start, tpl.jitter_minutes, rng)
        end = LAST_MINUTE if idx == last_idx else _jitter(tpl.base_end, tpl.jitter_minutes, rng)
        if prev_end is not None and start < prev_end:
            start = prev_end
        if end < start and not tpl.spans_midnight:
            end = min(start + MIN_STAY_MINUTES, LAST_MINUTE)
        stays.append((tpl.kind, start, end))
        prev_end = end
    return stays
