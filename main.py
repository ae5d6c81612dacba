#!/usr/bin/env python3
"""
Entry point: generate a synthetic population with daily activity chains.

Usage:
    python main.py                 # 10000 people
    python main.py 500 --seed 42   # 500 people, reproducible
"""

import logging
import sys
from datetime import datetime

from popsim.errors import PopulationError
from popsim.io.data import read_zones, write_activity_chains, write_activity_points, write_population
from popsim.io.paths import ensure_output_structure, parse_args
from popsim.metrics.filters import flatten_population
from popsim.population.utils import make_random_source
from popsim.synthetic.pipeline import generate_population


def main(argv=None) -> int:
    paths, seed = parse_args(argv)
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    print(f"=" * 60)
    print(f"Synthetic Population Generation")
    print(f"Started: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")
    print(f"=" * 60)

    try:
        print(f"  → Loading zones from {paths.zones_path}...")
        catalog = read_zones(paths.zones_path)
        print(f"  ✓ Loaded {len(catalog)} zones")

        if seed is not None:
            print(f"  Random seed set to: {seed}")
        rng = make_random_source(seed)

        print(f"  → Generating {paths.count} people...")
        population = generate_population(paths.count, catalog, rng=rng)

        ensure_output_structure(paths)
        write_population(population, paths.output_path)
        print(f"  ✓ Population saved: {paths.output_path}")

        if paths.points_path:
            write_activity_points(flatten_population(population), paths.points_path)
            print(f"  ✓ Activity points saved: {paths.points_path}")
        if paths.chains_path:
            write_activity_chains(population, paths.chains_path)
            print(f"  ✓ Activity chains saved: {paths.chains_path}")
    except PopulationError as e:
        print()
        print(f"ERROR: Generation failed: {e}", file=sys.stderr)
        return 1

    print(f"=" * 60)
    print(f"Population generated: {len(population)} people")
    print(f"Finished: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")
    print(f"=" * 60)
    return 0


if __name__ == "__main__":
    sys.exit(main())
