"""Weekly run over all configured locations.

Locations are processed one at a time in configured order. A location
missing its base URL or token is skipped with a warning; a location whose
fetch or write fails is logged and reported as failed. Neither stops the
remaining locations.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from datetime import datetime, timezone
from functools import partial
from typing import Any

from silverware_etl.aggregate import WeeklyTotals, collect_for_week
from silverware_etl.client import SilverwareClient
from silverware_etl.config import Location, RunSettings
from silverware_etl.overrides import write_overrides
from silverware_etl.weeks import week_window

logger = logging.getLogger(__name__)


@dataclass
class LocationResult:
    """Outcome of one location's weekly run.

    Attributes:
        location: Location key.
        week_of: ISO Monday processed.
        status: "ok", "failed" or "skipped".
        totals: Totals when status is "ok", else None.
        error: Error message when status is "failed", else None.
        last_run: ISO timestamp of when the location finished.
        path: Firestore document written, if any.
    """

    location: str
    week_of: str
    status: str
    totals: WeeklyTotals | None = None
    error: str | None = None
    last_run: str = ""
    path: str | None = None


def run_location(
    location: Location,
    settings: RunSettings,
    db: Any,
    client_factory: Callable[[Location], SilverwareClient] | None = None,
) -> LocationResult:
    """Collect and write one location's week.

    The API client is closed once the week has been read. Exceptions
    propagate; ``run_week`` turns them into failed results.
    """
    if client_factory is None:
        client_factory = partial(SilverwareClient, timeout=settings.timeout)
    window = week_window(settings.week_of, settings.tz_offset_minutes)
    client = client_factory(location)
    try:
        totals = collect_for_week(client, window, settings.food_hints)
    finally:
        client.close()

    path = None
    if settings.dry_run:
        logger.info("[%s] dry run: skipping Firestore write", location.key)
    else:
        path = write_overrides(db, settings.tenant, location.key, settings.week_of, totals)

    logger.info(
        "[%s] orders=%d food=$%.2f voids=$%.2f promos=$%.2f",
        location.key,
        totals.orders,
        totals.food,
        totals.voids,
        totals.promos,
    )
    return LocationResult(
        location=location.key,
        week_of=settings.week_of,
        status="ok",
        totals=totals,
        last_run=datetime.now(timezone.utc).isoformat(),
        path=path,
    )


def run_week(
    locations: Iterable[Location],
    settings: RunSettings,
    db: Any,
    client_factory: Callable[[Location], SilverwareClient] | None = None,
) -> list[LocationResult]:
    """Run the weekly aggregation for every location.

    Args:
        locations: Locations in processing order.
        settings: Shared run settings (week, offset, hints, tenant).
        db: Firestore client; unused on dry runs and may be None then.
        client_factory: Builds the API client for a location. Defaults to
            SilverwareClient with the settings' request timeout.

    Returns:
        One LocationResult per location, in the same order.

    """
    logger.info("Processing week of %s", settings.week_of)
    results = []
    for location in locations:
        if not location.is_configured:
            logger.warning("[%s] skipped: missing base/token", location.key)
            results.append(
                LocationResult(location=location.key, week_of=settings.week_of, status="skipped")
            )
            continue

        try:
            results.append(run_location(location, settings, db, client_factory))
        except Exception as e:
            logger.error("[%s] FAILED: %s", location.key, e)
            results.append(
                LocationResult(
                    location=location.key,
                    week_of=settings.week_of,
                    status="failed",
                    error=str(e),
                    last_run=datetime.now(timezone.utc).isoformat(),
                )
            )
    return results
