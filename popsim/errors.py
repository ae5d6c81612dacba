"""
Error taxonomy for population generation and querying.
"""


class PopulationError(Exception):
    """Base class for errors raised by popsim."""


class ConfigurationError(PopulationError):
    """Generation cannot proceed (no zones available, negative count)."""


class GeometryError(PopulationError):
    """A geometry cannot be used: unsupported type or exhausted point sampling."""


class InvalidPredicate(PopulationError, ValueError):
    """A filter request references an unknown band, sex, kind or time."""


class MalformedInputWarning(UserWarning):
    """A zone record has missing or unusable name properties."""
