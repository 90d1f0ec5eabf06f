"""Silverware weekly ETL - POS order totals into Firestore overrides.

This package pulls a week of orders per restaurant location from the
Silverware third-party API, classifies order lines and writes the weekly
totals into a Firestore override document:

- **Extract**: paged GetOrders / GetOrder calls (silverware_etl.client)
- **Classify**: schema-tolerant field lookup (silverware_etl.extractors)
- **Aggregate**: fact_order_line -> weekly totals (silverware_etl.aggregate)
- **Load**: merge-write per location/week (silverware_etl.overrides)

Module Structure:
    silverware_etl.weeks: Week start and UTC window resolution
    silverware_etl.config: Locations and run settings
    silverware_etl.pipeline: Per-location run with failure isolation
    silverware_etl.cli: Command-line entry point

Quick Start:
    >>> from silverware_etl import RunSettings, load_locations_from_env, run_week
    >>> from silverware_etl.overrides import make_firestore_client
    >>>
    >>> settings = RunSettings(week_of="2025-10-06", tz_offset_minutes=-240)
    >>> results = run_week(load_locations_from_env(), settings, make_firestore_client())
    >>> [(r.location, r.status) for r in results]
"""

__version__ = "0.1.0"

from silverware_etl.aggregate import WeeklyTotals, collect_for_week
from silverware_etl.config import Location, RunSettings, load_locations_from_env
from silverware_etl.exceptions import ConfigError, ETLError, ExtractionError, SilverwareError
from silverware_etl.pipeline import LocationResult, run_week
from silverware_etl.weeks import WeekWindow, current_week_start, week_window

__all__ = [
    "ConfigError",
    "ETLError",
    "ExtractionError",
    "Location",
    "LocationResult",
    "RunSettings",
    "SilverwareError",
    "WeekWindow",
    "WeeklyTotals",
    "__version__",
    "collect_for_week",
    "current_week_start",
    "load_locations_from_env",
    "run_week",
    "week_window",
]
