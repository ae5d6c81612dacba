import os
import argparse
from dataclasses import dataclass
from typing import Optional


DEFAULT_POPULATION_SIZE = 10000


@dataclass
class PathsConfig:
    zones_path: str = 'data/sample-zones.geojson'
    output_path: str = 'data/population.json'
    points_path: Optional[str] = None  # GeoJSON export of the activity points (None = skip)
    chains_path: Optional[str] = None  # GeoJSON export of one activity-chain line per person (None = skip)
    count: int = DEFAULT_POPULATION_SIZE

    def output_dir(self) -> str:
        return os.path.dirname(self.output_path) or '.'


def ensure_output_structure(paths: PathsConfig) -> None:
    for path in (paths.output_path, paths.points_path, paths.chains_path):
        if path:
            os.makedirs(os.path.dirname(path) or '.', exist_ok=True)


def _non_negative_int(text: str) -> int:
    value = int(text)
    if value < 0:
        raise argparse.ArgumentTypeError(f"population size must be >= 0, got {value}")
    return value


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description='Generate a synthetic population with daily activity chains.')
    parser.add_argument('count', nargs='?', type=_non_negative_int, default=None, help=f'Number of people to generate (default: {DEFAULT_POPULATION_SIZE}).')
    parser.add_argument('--zones', default=None, help='Zone polygons file (GeoJSON, Shapefile, GeoPackage...).')
    parser.add_argument('--out', default=None, help='Output population JSON path.')
    parser.add_argument('--points-out', default=None, help='Optional GeoJSON export of the flattened activity points.')
    parser.add_argument('--chains-out', default=None, help='Optional GeoJSON export of the activity-chain lines.')
    parser.add_argument('--seed', type=int, default=None, help='Random seed for reproducibility (default: unseeded).')
    args = parser.parse_args(argv)

    return PathsConfig(
        zones_path=args.zones if args.zones is not None else PathsConfig.zones_path,
        output_path=args.out if args.out is not None else PathsConfig.output_path,
        points_path=args.points_out,
        chains_path=args.chains_out,
        count=args.count if args.count is not None else PathsConfig.count,
    ), args.seed
