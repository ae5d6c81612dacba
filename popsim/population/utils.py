from typing import Callable, Optional, Sequence, Tuple, TypeVar
import numpy as np


T = TypeVar("T")

# Any zero-argument callable returning a uniform float in [0, 1).
RandomSource = Callable[[], float]


def make_random_source(seed: Optional[int] = None) -> RandomSource:
    return np.random.default_rng(seed).random


def weighted_choice(options: Sequence[Tuple[T, float]], rng: RandomSource) -> T:
    """
    Pick one value from a table of (value, weight) pairs.

    Draws r in [0, total_weight) and walks the table in order, subtracting each
    weight until r goes negative. Falls back to the last option when rounding
    leaves r non-negative after the walk.

    Args:
        options: Non-empty sequence of (value, weight) with non-negative weights
        rng: Uniform random source

    Returns:
        The selected value
    """
    if not options:
        raise ValueError("weighted_choice needs at least one option")
    total = sum(weight for _, weight in options)
    r = rng() * total
    for value, weight in options:
        r -= weight
        if r < 0:
            return value
    return options[-1][0]


def uniform(low: float, high: float, rng: RandomSource) -> float:
    return low + (high - low) * rng()


def random_int(low: int, high: int, rng: RandomSource) -> int:
    """Uniform integer in [low, high], both inclusive."""
    return min(high, low + int(rng() * (high - low + 1)))


def random_element(items: Sequence[T], rng: RandomSource) -> T:
    return items[random_int(0, len(items) - 1, rng)]
