"""Minute-of-day helpers. Times of day are ints in [0, 1439] or "HH:MM" strings."""

MINUTES_PER_DAY = 24 * 60
LAST_MINUTE = MINUTES_PER_DAY - 1


def normalize_minutes(total: int) -> int:
    """Wrap any minute count into [0, 1439], negatives included (-10 -> 1430)."""
    return ((total % MINUTES_PER_DAY) + MINUTES_PER_DAY) % MINUTES_PER_DAY


def to_minutes(hhmm: str) -> int:
    hours, minutes = (int(part) for part in hhmm.strip().split(":")[:2])
    return (hours % 24) * 60 + (minutes % 60)


def format_minutes(minutes: int) -> str:
    m = normalize_minutes(int(minutes))
    return f"{m // 60:02d}:{m % 60:02d}"


def hour_of(minutes: int) -> int:
    return normalize_minutes(minutes) // 60
