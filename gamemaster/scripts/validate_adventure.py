#!/usr/bin/env python3
"""CLI script for validating and inspecting adventure JSON files."""

import argparse
import json
import sys
from pathlib import Path
from typing import Optional

from gamemaster.adventure.models import AdventureData
from gamemaster.adventure.spatial import describe_location
from gamemaster.adventure.validator import (
    format_validation_errors,
    validate_adventure_structure,
)


def validate_file(
    path: Path,
    inspect_ids: list[str],
    max_errors: int,
    verbose: bool,
) -> bool:
    """Validate one adventure file and print a report.

    Returns:
        True if the file is a valid adventure.
    """
    print(f"=== {path.name} ===")

    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except OSError as e:
        print(f"Error: cannot read file: {e}")
        return False
    except json.JSONDecodeError as e:
        print(f"Error: invalid JSON at line {e.lineno}, column {e.colno}: {e.msg}")
        return False

    result = validate_adventure_structure(data)

    if result.valid:
        print("Valid adventure")
    else:
        print(f"INVALID ({len(result.errors)} errors)")
        print(format_validation_errors(result.errors, max_errors=max_errors))

    if result.warnings:
        print(f"Warnings: {len(result.warnings)}")
        if verbose:
            for warning in result.warnings:
                print(f"  - {warning.path}: {warning.message}")

    if result.valid and inspect_ids:
        adventure = AdventureData.model_validate(data)
        for location_id in inspect_ids:
            print()
            for line in describe_location(adventure, location_id):
                print(line)

    print()
    return result.valid


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point for CLI."""
    parser = argparse.ArgumentParser(
        description="Validate adventure JSON files and inspect their location graph"
    )
    parser.add_argument(
        "files",
        nargs="+",
        type=Path,
        help="Adventure JSON files to validate",
    )
    parser.add_argument(
        "-i", "--inspect",
        action="append",
        default=[],
        metavar="LOCATION_ID",
        help="Print region and connections of a location (repeatable)",
    )
    parser.add_argument(
        "--max-errors",
        type=int,
        default=5,
        help="Maximum number of errors to print per file",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Print every data-integrity warning",
    )

    args = parser.parse_args(argv)

    all_valid = True
    for path in args.files:
        if not validate_file(path, args.inspect, args.max_errors, args.verbose):
            all_valid = False

    return 0 if all_valid else 1


if __name__ == "__main__":
    sys.exit(main())
