"""Firestore writer for weekly override documents.

Each location/week gets one document at::

    companies/{tenant}/locations/{location}/overrides/{week_of}

The write is a merge, so fields maintained by other jobs (labour, manual
adjustments) on the same document are left alone. Re-running a week
overwrites only the fields below.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any

from google.cloud import firestore

from silverware_etl.exceptions import ConfigError
from silverware_etl.weeks import DAYS_IN_WEEK, format_instant

if TYPE_CHECKING:
    from silverware_etl.aggregate import WeeklyTotals

logger = logging.getLogger(__name__)

SOURCE_FIELD = "source_silverware"


def make_firestore_client(service_account_json: str | None = None) -> firestore.Client:
    """Create a Firestore client.

    Args:
        service_account_json: Service account key as JSON text. When empty,
            ambient Google credentials (GOOGLE_APPLICATION_CREDENTIALS,
            metadata server) are used.

    Returns:
        Firestore client.

    Raises:
        ConfigError: If the service account JSON cannot be parsed.

    """
    if not service_account_json:
        return firestore.Client()
    try:
        info = json.loads(service_account_json)
    except json.JSONDecodeError as e:
        raise ConfigError(f"FIREBASE_SERVICE_ACCOUNT_JSON is not valid JSON: {e}") from e
    return firestore.Client.from_service_account_info(info)


def override_path(tenant: str, location_key: str, week_of: str) -> str:
    return f"companies/{tenant}/locations/{location_key}/overrides/{week_of}"


def override_payload(totals: WeeklyTotals, now: datetime | None = None) -> dict[str, Any]:
    """Build the merge payload for one week's totals."""
    if now is None:
        now = datetime.now(timezone.utc)
    return {
        "food_sales": totals.food,
        "voids": totals.voids,
        "comps": totals.promos,
        SOURCE_FIELD: {
            "orders": totals.orders,
            "days_scanned": DAYS_IN_WEEK,
            "last_run": format_instant(now),
        },
    }


def write_overrides(
    db: firestore.Client,
    tenant: str,
    location_key: str,
    week_of: str,
    totals: WeeklyTotals,
    now: datetime | None = None,
) -> str:
    """Merge-write the weekly override document for a location.

    Args:
        db: Firestore client (anything exposing ``document(path).set``).
        tenant: Company document the locations live under.
        location_key: Location key.
        week_of: ISO Monday of the week.
        totals: Totals to persist.
        now: Timestamp recorded as ``last_run``. Defaults to now (UTC).

    Returns:
        The document path written.

    """
    path = override_path(tenant, location_key, week_of)
    db.document(path).set(override_payload(totals, now), merge=True)
    logger.debug("Wrote override: %s", path)
    return path
