"""Run configuration for the Silverware weekly ETL.

Everything is read from the environment so the job can run unattended from a
scheduler. Secrets never live in code.

Environment:
  SILVERWARE_LOCATIONS            comma-separated location keys
                                  (default: beacon,tulia,prohibition,cesoir)
  SILVERWARE_BASE_<KEY>           API base URL for a location
  SILVERWARE_TOKEN_<KEY>          bearer token for a location
  FOOD_CATEGORY_HINTS             comma-separated category aliases (default: food,kitchen)
  SILVERWARE_TZ_OFFSET_MINUTES    local offset from UTC, e.g. -240 for EDT (default: 0)
  SILVERWARE_TENANT               Firestore company document (default: aidan)
  WEEK_OF                         Monday of the week to process (default: current week)
  SILVERWARE_TIMEOUT              per-request timeout in seconds (default: none)
  FIREBASE_SERVICE_ACCOUNT_JSON   service account key, as JSON text
"""

from __future__ import annotations

import json
import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from silverware_etl.exceptions import ConfigError
from silverware_etl.extractors import DEFAULT_FOOD_HINTS, parse_food_hints
from silverware_etl.weeks import current_week_start, parse_date

DEFAULT_LOCATION_KEYS = ("beacon", "tulia", "prohibition", "cesoir")
DEFAULT_TENANT = "aidan"


@dataclass(frozen=True)
class Location:
    """One restaurant site and its Silverware connection settings.

    Attributes:
        key: Location key used in the Firestore path (e.g. "beacon").
        base_url: Silverware API base URL. May be empty when unconfigured.
        token: Bearer token. May be empty when unconfigured.
    """

    key: str
    base_url: str = ""
    token: str = ""

    @property
    def is_configured(self) -> bool:
        return bool(self.base_url) and bool(self.token)


@dataclass
class RunSettings:
    """Settings shared by every location in a run.

    Attributes:
        week_of: ISO date of the Monday to process.
        tz_offset_minutes: Local offset from UTC used to build the week window.
        food_hints: Lowercase substrings identifying food categories.
        tenant: Firestore company document the overrides live under.
        dry_run: If True, totals are computed and logged but not written.
        timeout: Per-request API timeout in seconds; None means no timeout.
    """

    week_of: str
    tz_offset_minutes: int = 0
    food_hints: tuple[str, ...] = DEFAULT_FOOD_HINTS
    tenant: str = DEFAULT_TENANT
    dry_run: bool = False
    timeout: float | None = None

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> RunSettings:
        """Build settings from environment variables.

        Args:
            environ: Mapping to read from. Defaults to ``os.environ``.

        Returns:
            RunSettings instance.

        Raises:
            ConfigError: If WEEK_OF is not a date, the timezone offset is
                not an integer or the timeout is not a positive number.

        """
        env = os.environ if environ is None else environ
        week_of = env.get("WEEK_OF") or current_week_start()
        return cls(
            week_of=validate_week(week_of),
            tz_offset_minutes=parse_tz_offset(env.get("SILVERWARE_TZ_OFFSET_MINUTES")),
            food_hints=parse_food_hints(env.get("FOOD_CATEGORY_HINTS")),
            tenant=env.get("SILVERWARE_TENANT") or DEFAULT_TENANT,
            timeout=parse_timeout(env.get("SILVERWARE_TIMEOUT")),
        )


def validate_week(week_of: str) -> str:
    """Return ``week_of`` unchanged if it is a YYYY-MM-DD date.

    Raises:
        ConfigError: If the value does not parse.

    """
    try:
        parse_date(week_of)
    except ValueError as e:
        raise ConfigError(f"Invalid week {week_of!r}: expected YYYY-MM-DD") from e
    return week_of


def parse_tz_offset(raw: str | None) -> int:
    """Parse a timezone offset in minutes; empty or missing means 0."""
    if raw is None or not raw.strip():
        return 0
    try:
        return int(raw.strip())
    except ValueError as e:
        raise ConfigError(f"Invalid timezone offset {raw!r}: expected integer minutes") from e


def parse_timeout(raw: str | None) -> float | None:
    """Parse a request timeout in seconds; empty or missing means no timeout."""
    if raw is None or not raw.strip():
        return None
    try:
        seconds = float(raw.strip())
    except ValueError as e:
        raise ConfigError(f"Invalid timeout {raw!r}: expected seconds") from e
    if not seconds > 0:
        raise ConfigError(f"Invalid timeout {raw!r}: must be positive")
    return seconds


def load_locations_from_env(environ: Mapping[str, str] | None = None) -> list[Location]:
    """Load locations from SILVERWARE_BASE_<KEY> / SILVERWARE_TOKEN_<KEY>.

    Locations with missing settings are still returned (unconfigured) so the
    run can report them as skipped.

    Args:
        environ: Mapping to read from. Defaults to ``os.environ``.

    Returns:
        Locations in configured order.

    """
    env = os.environ if environ is None else environ
    raw_keys = env.get("SILVERWARE_LOCATIONS")
    if raw_keys and raw_keys.strip():
        keys = [k.strip() for k in raw_keys.split(",") if k.strip()]
    else:
        keys = list(DEFAULT_LOCATION_KEYS)

    locations = []
    for key in keys:
        suffix = key.upper()
        locations.append(
            Location(
                key=key,
                base_url=env.get(f"SILVERWARE_BASE_{suffix}", "") or "",
                token=env.get(f"SILVERWARE_TOKEN_{suffix}", "") or "",
            )
        )
    return locations


def load_locations_from_json(path: Path) -> list[Location]:
    """Load locations from a JSON file.

    Expected shape::

      {
        "beacon": {"base": "https://beacon.example.com", "token": "..."},
        "tulia":  {"base": "https://tulia.example.com",  "token": "..."}
      }

    Args:
        path: Path to the JSON file.

    Returns:
        Locations in file order.

    Raises:
        ConfigError: If the file cannot be read or has the wrong shape.

    """
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigError(f"Failed to load locations from {path}: {e}") from e

    if not isinstance(raw, dict):
        raise ConfigError(f"{path} must be a JSON object mapping location key -> settings")

    locations = []
    for key, rec in raw.items():
        if not isinstance(rec, dict):
            raise ConfigError(
                f"Entry {key!r} has unsupported type {type(rec).__name__} "
                f"(expected object with 'base' and 'token')"
            )
        locations.append(
            Location(
                key=str(key),
                base_url=str(rec.get("base") or ""),
                token=str(rec.get("token") or ""),
            )
        )
    return locations
