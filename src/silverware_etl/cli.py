#!/usr/bin/env python3
"""Command-line entry point: pull one week from Silverware into Firestore.

Examples:
  # Current week, all locations configured in the environment
  silverware-week

  # A specific week in EDT, without writing to Firestore
  silverware-week --week 2025-10-06 --tz-offset -240 --dry-run -v

  # Locations from a JSON file instead of SILVERWARE_BASE_*/SILVERWARE_TOKEN_*
  silverware-week --locations-json utils/locations.json

Command-line flags override the corresponding environment variables
(see silverware_etl.config).
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from collections import ChainMap
from pathlib import Path

from silverware_etl.config import RunSettings, load_locations_from_env, load_locations_from_json
from silverware_etl.exceptions import ConfigError
from silverware_etl.overrides import make_firestore_client
from silverware_etl.pipeline import run_week

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Silverware weekly override sync")
    p.add_argument("--week", help="Monday of the week to process (YYYY-MM-DD)")
    p.add_argument("--tz-offset", help="Local offset from UTC in minutes (e.g. -240)")
    p.add_argument("--food-hints", help="Comma-separated food category aliases")
    p.add_argument("--tenant", help="Firestore company document")
    p.add_argument("--timeout", help="Per-request API timeout in seconds")
    p.add_argument("--locations-json", type=Path, help="JSON file of location settings")
    p.add_argument("--dry-run", action="store_true", help="Compute totals without writing")
    p.add_argument("-v", "--verbose", action="store_true")
    return p


def resolve_settings(args: argparse.Namespace) -> RunSettings:
    """Merge command-line flags over environment settings.

    Each flag that is given replaces its environment variable before
    anything is parsed, so only the winning value is validated.

    Raises:
        ConfigError: If the week, timezone offset or timeout is invalid.

    """
    flags = {
        "WEEK_OF": args.week,
        "SILVERWARE_TZ_OFFSET_MINUTES": args.tz_offset,
        "FOOD_CATEGORY_HINTS": args.food_hints,
        "SILVERWARE_TENANT": args.tenant,
        "SILVERWARE_TIMEOUT": args.timeout,
    }
    given = {name: value for name, value in flags.items() if value is not None}
    settings = RunSettings.from_env(ChainMap(given, os.environ))
    settings.dry_run = args.dry_run
    return settings


def main(argv: list[str] | None = None) -> int:
    """Run the weekly sync.

    Returns:
        0 once every location has been attempted (individual failures are
        logged, not fatal), 2 on a configuration error, 1 on anything else.

    """
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s: %(message)s",
    )

    try:
        settings = resolve_settings(args)
        if args.locations_json:
            locations = load_locations_from_json(args.locations_json)
        else:
            locations = load_locations_from_env()

        db = None
        if not settings.dry_run:
            db = make_firestore_client(os.environ.get("FIREBASE_SERVICE_ACCOUNT_JSON"))

        results = run_week(locations, settings, db)
    except ConfigError as e:
        logger.error("Configuration error: %s", e)
        return 2
    except Exception:
        logger.exception("Weekly sync failed")
        return 1

    failed = [r.location for r in results if r.status == "failed"]
    if failed:
        logger.warning("Finished with failures: %s", ", ".join(failed))
    return 0


if __name__ == "__main__":
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        sys.exit(130)
