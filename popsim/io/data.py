import json
import math
from typing import Any, Dict, List

import geopandas as gpd
import pandas as pd

from popsim.population.models import Person
from popsim.spatial.mapping import activity_chain_line
from popsim.spatial.zones import ZoneCatalog

WGS84 = "EPSG:4326"


def _is_missing(value: Any) -> bool:
    return value is None or (isinstance(value, float) and math.isnan(value))


def read_zones(filepath: str) -> ZoneCatalog:
    """Read zone polygons from any file geopandas can open, reprojected to WGS84 lon/lat."""
    gdf = gpd.read_file(filepath)
    if gdf.empty:
        return ZoneCatalog.load([])
    if gdf.crs is not None and gdf.crs.to_epsg() != 4326:
        gdf = gdf.to_crs(WGS84)
    records: List[Dict[str, Any]] = gdf.drop(columns=gdf.geometry.name).to_dict("records")
    pairs = [
        ({k: v for k, v in props.items() if not _is_missing(v)}, geom)
        for props, geom in zip(records, gdf.geometry)
    ]
    return ZoneCatalog.load(pairs)


def write_population(population: List[Person], filepath: str) -> None:
    with open(filepath, "w", encoding="utf-8") as f:
        json.dump([p.to_record() for p in population], f, indent=2, ensure_ascii=False)


def read_population(filepath: str) -> List[Person]:
    with open(filepath, "r", encoding="utf-8") as f:
        records = json.load(f)
    return [Person.from_record(r) for r in records]


def activity_points_to_gdf(points: pd.DataFrame) -> gpd.GeoDataFrame:
    return gpd.GeoDataFrame(points, geometry=gpd.points_from_xy(points["lng"], points["lat"]), crs=WGS84)


def write_activity_points(points: pd.DataFrame, filepath: str) -> None:
    activity_points_to_gdf(points).to_file(filepath, driver="GeoJSON")


def write_activity_chains(population: List[Person], filepath: str) -> None:
    rows = [
        {"id": p.id, "age": p.age, "sex": p.sex, "geometry": activity_chain_line(p)}
        for p in population if p.activities
    ]
    gdf = gpd.GeoDataFrame(rows, columns=["id", "age", "sex", "geometry"], geometry="geometry", crs=WGS84)
    gdf.to_file(filepath, driver="GeoJSON")
