"""
Catalog of named polygonal zones.

Zone names are the join key used by generated activities and per-zone queries,
so the catalog guarantees they are unique.
"""
import math
import numbers
import warnings
from collections.abc import Mapping
from dataclasses import dataclass, fields
from typing import Any, Dict, Iterator, List, Optional, Tuple

from shapely.geometry import MultiPolygon, Polygon, shape
from shapely.geometry.base import BaseGeometry

from popsim.errors import ConfigurationError, MalformedInputWarning
from popsim.spatial.sampling import bounds_of

# Consulted in this order; the first usable value names the zone.
NAME_CANDIDATE_KEYS = ("nom", "name", "l_ar", "l_aroff")


def _usable_name(value: Any) -> Optional[str]:
    if isinstance(value, bool):
        return None
    if isinstance(value, str):
        return value.strip() or None
    if isinstance(value, numbers.Integral):
        return str(int(value))
    if isinstance(value, numbers.Real) and not math.isnan(value) and float(value).is_integer():
        return str(int(value))
    return None


@dataclass(frozen=True)
class ZoneProperties:
    """Name-bearing properties of a raw zone record; every field is optional."""
    nom: Any = None
    name: Any = None
    l_ar: Any = None
    l_aroff: Any = None

    @classmethod
    def from_mapping(cls, props: Optional[Dict[str, Any]]) -> "ZoneProperties":
        if not isinstance(props, dict):
            return cls()
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in props.items() if k in known})

    def display_name(self) -> Optional[str]:
        for key in NAME_CANDIDATE_KEYS:
            raw = getattr(self, key)
            if raw is None:
                continue
            name = _usable_name(raw)
            if name is not None:
                return name
            warnings.warn(f"Ignoring unusable zone name {key}={raw!r}", MalformedInputWarning, stacklevel=3)
        return None


def _iter_raw_zones(raw: Any) -> Iterator[Tuple[Any, Any]]:
    """Yield (properties, geometry) from a FeatureCollection, a feature list or pairs."""
    if isinstance(raw, dict):
        raw = raw.get("features", [])
    for item in raw:
        if isinstance(item, dict):
            yield item.get("properties"), item.get("geometry")
        else:
            props, geometry = item
            yield props, geometry


def _as_polygon(geometry: Any) -> Optional[BaseGeometry]:
    if geometry is None:
        return None
    geom = geometry if isinstance(geometry, BaseGeometry) else shape(geometry)
    if not isinstance(geom, (Polygon, MultiPolygon)) or geom.is_empty:
        return None
    return geom


class ZoneCatalog(Mapping):
    """Read-only mapping zone name -> Polygon/MultiPolygon, in load order."""

    def __init__(self, zones: Dict[str, BaseGeometry]):
        if not zones:
            raise ConfigurationError("Zone catalog is empty: at least one polygonal zone is required")
        self._zones = dict(zones)
        self._names = tuple(self._zones)

    @classmethod
    def load(cls, raw: Any) -> "ZoneCatalog":
        """
        Build a catalog from raw geometry records.

        Args:
            raw: GeoJSON-like FeatureCollection dict, iterable of feature dicts,
                or iterable of (properties, geometry) pairs

        Returns:
            ZoneCatalog

        Raises:
            ConfigurationError: If no polygonal zone could be loaded
        """
        zones: Dict[str, BaseGeometry] = {}
        for idx, (props, geometry) in enumerate(_iter_raw_zones(raw), start=1):
            polygon = _as_polygon(geometry)
            if polygon is None:
                warnings.warn(f"Skipping zone record {idx}: geometry is not a non-empty polygon", MalformedInputWarning, stacklevel=2)
                continue
            name = ZoneProperties.from_mapping(props).display_name()
            if name is None:
                name = f"zone-{idx}"
                warnings.warn(f"Zone record {idx} has no name property, using {name!r}", MalformedInputWarning, stacklevel=2)
            while name in zones:
                name = f"{name}-{idx}"
            zones[name] = polygon
        return cls(zones)

    def __getitem__(self, name: str) -> BaseGeometry:
        return self._zones[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._names)

    def __len__(self) -> int:
        return len(self._names)

    @property
    def names(self) -> Tuple[str, ...]:
        return self._names

    @property
    def polygons(self) -> List[BaseGeometry]:
        return [self._zones[n] for n in self._names]

    @property
    def bounds(self) -> Tuple[float, float, float, float]:
        return bounds_of(self.polygons)
