#!/usr/bin/env python3
"""
Street Geometry CLI

Command-line interface for diagnosing street geometry resolution: resolve
intersections, extract street sections, or run a whole batch of street
sections from a file. Results are printed as JSON.
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .config_manager import ConfigManager
from .errors import ConfigurationError, StreetGeometryError
from .models import Coordinates
from .resolver import find_missing_endpoints
from .utils.section_loader import SectionLoader
from .wiring import build_resolver

logger = logging.getLogger(__name__)


def parse_coordinates(value: str) -> Coordinates:
    """Parse "lat,lng"."""
    try:
        lat, lng = (float(part) for part in value.split(","))
    except ValueError:
        raise argparse.ArgumentTypeError(f"Expected 'lat,lng', got '{value}'")
    return Coordinates(lat=lat, lng=lng)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="street-geometry",
        description="Street Geometry - resolve street intersections and sections from OpenStreetMap",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Intersection of two streets
  %(prog)s intersect "ул. Оборище ∩ ул. Граф Игнатиев"

  # Section of a street between two points
  %(prog)s section "бул. Васил Левски" --start 42.6953,23.3289 --end 42.6898,23.3332

  # Endpoints and sections for a batch of street sections
  %(prog)s streets sections.csv --progress

  # Run offline against recorded responses
  %(prog)s -c offline.yaml streets sections.json
        """,
    )
    parser.add_argument(
        "-c", "--config",
        type=Path,
        help="Resolver configuration YAML file (default: built-in config)",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    intersect = subparsers.add_parser("intersect", help="Resolve 'A ∩ B' intersections")
    intersect.add_argument("intersections", nargs="+", help="Intersection queries")

    section = subparsers.add_parser("section", help="Extract a street section")
    section.add_argument("street", help="Street name")
    section.add_argument("--start", type=parse_coordinates, required=True, help="Start point 'lat,lng'")
    section.add_argument("--end", type=parse_coordinates, required=True, help="End point 'lat,lng'")

    streets = subparsers.add_parser("streets", help="Resolve a CSV/JSON batch of street sections")
    streets.add_argument("input_file", type=Path, help="CSV or JSON file with street sections")
    streets.add_argument("--progress", action="store_true", help="Show progress bars")

    example = subparsers.add_parser("example-config", help="Write an example configuration file")
    example.add_argument("output", type=Path, help="Where to write the YAML file")

    return parser


def _print_json(data) -> None:
    print(json.dumps(data, ensure_ascii=False, indent=2))


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="[%(levelname)s] %(message)s",
        stream=sys.stderr,
    )

    if args.command == "example-config":
        ConfigManager().save_example_config(args.output)
        logger.info(f"Saved example configuration to {args.output}")
        return 0

    try:
        config = ConfigManager(args.config).load()
        resolver = build_resolver(config, show_progress=getattr(args, "progress", False))
    except (FileNotFoundError, ConfigurationError) as e:
        logger.error(f"Configuration error: {e}")
        return 2

    if args.command == "intersect":
        results = resolver.geocode_intersections(args.intersections)
        _print_json([address.to_dict() for address in results])
        return 0 if len(results) == len(args.intersections) else 1

    if args.command == "section":
        try:
            path = resolver.street_section(args.street, args.start, args.end)
        except StreetGeometryError as e:
            logger.error(f"Could not fetch '{args.street}': {e}")
            return 1
        _print_json({"street": args.street, "coordinates": [list(pos) for pos in path] if path else None})
        return 0 if path else 1

    # streets
    try:
        sections = SectionLoader().load(args.input_file)
    except (FileNotFoundError, ValueError) as e:
        logger.error(f"Could not load street sections: {e}")
        return 2

    endpoints = resolver.geocode_intersections_for_streets(sections)
    missing = find_missing_endpoints(sections, endpoints)
    paths = resolver.resolve_street_sections(sections, endpoints)

    _print_json({
        "endpoints": {name: coords.to_dict() for name, coords in endpoints.items()},
        "missing_endpoints": missing,
        "sections": [
            {
                "street": section.street,
                "from": section.from_,
                "to": section.to,
                "coordinates": [list(pos) for pos in paths[index]] if index in paths else None,
            }
            for index, section in enumerate(sections)
        ],
    })
    return 0


if __name__ == "__main__":
    sys.exit(main())
