#!/usr/bin/env python3
"""
Query a generated population for one zone.

Computes zone metrics for a catalog zone (--zone with --zones) or a drawn polygon
(--polygon GeoJSON file), and optionally the filtered activity snapshot of a
catalog zone at a given time.

Usage:
    python zone_report.py --population data/population.json --zones data/sample-zones.geojson --zone Nord-Est
    python zone_report.py --population data/population.json --polygon drawn.geojson --report-dir results
    python zone_report.py --population data/population.json --zones data/sample-zones.geojson --zone Sud-Ouest --time 08:00 --age-band 65+
"""

import argparse
import json
import sys

from popsim.errors import PopulationError
from popsim.io.data import read_population, read_zones
from popsim.metrics.filters import flatten_population, parse_predicate, zone_activity_snapshot
from popsim.metrics.zone_stats import compute_zone_metrics
from popsim.visualization.reports import zone_metrics_report


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='Per-zone statistics of a synthetic population.')
    parser.add_argument('--population', required=True, help='Population JSON written by main.py')
    parser.add_argument('--zones', default=None, help='Zone polygons file, needed with --zone')
    parser.add_argument('--zone', default=None, help='Catalog zone name to query')
    parser.add_argument('--polygon', default=None, help='GeoJSON file holding a single polygon (geometry or feature)')
    parser.add_argument('--time', default=None, help='Time of day HH:MM for the activity snapshot of --zone')
    parser.add_argument('--age-band', default='all', help='Age band filter for the snapshot (all, 0-17, 18-25, 26-34, 35-64, 65+)')
    parser.add_argument('--sex', default='all', help='Sex filter for the snapshot (all, male, female)')
    parser.add_argument('--activity', default='all', help='Activity kind filter for the snapshot')
    parser.add_argument('--report-dir', default=None, help='Write a PNG + JSON report to this directory')
    return parser


def _print_metrics(label: str, metrics) -> None:
    print(f"Zone: {label}")
    print(f"  Total activities: {metrics.total_activities}")
    print(f"  Unique visitors:  {metrics.unique_visitors}")
    print(f"  By hour: {metrics.activities_by_hour}")
    print(f"  Age distribution: {metrics.age_distribution}")
    print(f"  Activity types:   {metrics.activity_type_counts}")


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if (args.zone is None) == (args.polygon is None):
        parser.error("exactly one of --zone or --polygon is required")
    if args.zone is not None and args.zones is None:
        parser.error("--zone needs --zones")

    try:
        print(f"  → Loading population from {args.population}...")
        population = read_population(args.population)
        print(f"  ✓ Loaded {len(population)} people")

        if args.zone is not None:
            catalog = read_zones(args.zones)
            if args.zone not in catalog:
                print(f"ERROR: Unknown zone {args.zone!r}. Available: {list(catalog.names)}", file=sys.stderr)
                return 1
            polygon, label = catalog[args.zone], args.zone
        else:
            with open(args.polygon, "r", encoding="utf-8") as f:
                polygon = json.load(f)
            if polygon.get("type") == "FeatureCollection":
                polygon = polygon["features"][0]
            label = "drawn zone"

        metrics = compute_zone_metrics(polygon, population)
        _print_metrics(label, metrics)

        if args.time is not None and args.zone is not None:
            predicate = parse_predicate({
                "ageBand": args.age_band,
                "sex": args.sex,
                "activityKind": args.activity,
                "minuteOfDay": args.time,
            })
            snapshot = zone_activity_snapshot(flatten_population(population), args.zone, predicate)
            print(f"  Current activity ({args.time}): {snapshot}")

        if args.report_dir:
            zone_metrics_report(metrics, label, args.report_dir)
    except PopulationError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
