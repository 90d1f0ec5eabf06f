"""Tests for environment and JSON configuration loading."""

import json
from pathlib import Path
from tempfile import TemporaryDirectory

import pytest

from silverware_etl.config import (
    DEFAULT_LOCATION_KEYS,
    Location,
    RunSettings,
    load_locations_from_env,
    load_locations_from_json,
    parse_timeout,
    parse_tz_offset,
)
from silverware_etl.exceptions import ConfigError


def test_default_locations_from_env() -> None:
    env = {
        "SILVERWARE_BASE_BEACON": "https://beacon.example.com",
        "SILVERWARE_TOKEN_BEACON": "tok-b",
        "SILVERWARE_BASE_TULIA": "https://tulia.example.com",
    }
    locations = load_locations_from_env(env)

    assert [loc.key for loc in locations] == list(DEFAULT_LOCATION_KEYS)
    assert locations[0] == Location("beacon", "https://beacon.example.com", "tok-b")
    assert locations[0].is_configured
    assert not locations[1].is_configured  # token missing
    assert not locations[2].is_configured


def test_location_keys_override() -> None:
    env = {"SILVERWARE_LOCATIONS": " east , west,", "SILVERWARE_BASE_EAST": "u", "SILVERWARE_TOKEN_EAST": "t"}
    locations = load_locations_from_env(env)
    assert [loc.key for loc in locations] == ["east", "west"]
    assert locations[0].is_configured


def test_settings_from_env() -> None:
    env = {
        "WEEK_OF": "2025-10-06",
        "SILVERWARE_TZ_OFFSET_MINUTES": "-240",
        "FOOD_CATEGORY_HINTS": "Food,Kitchen,Grill",
        "SILVERWARE_TENANT": "acme",
    }
    settings = RunSettings.from_env(env)
    assert settings.week_of == "2025-10-06"
    assert settings.tz_offset_minutes == -240
    assert settings.food_hints == ("food", "kitchen", "grill")
    assert settings.tenant == "acme"
    assert settings.dry_run is False


def test_settings_defaults() -> None:
    settings = RunSettings.from_env({})
    assert settings.tz_offset_minutes == 0
    assert settings.food_hints == ("food", "kitchen")
    assert settings.tenant == "aidan"
    assert len(settings.week_of) == 10


def test_invalid_week_raises_config_error() -> None:
    with pytest.raises(ConfigError, match="Invalid week"):
        RunSettings.from_env({"WEEK_OF": "next monday"})


def test_parse_tz_offset() -> None:
    assert parse_tz_offset(None) == 0
    assert parse_tz_offset("  ") == 0
    assert parse_tz_offset(" -300 ") == -300
    with pytest.raises(ConfigError):
        parse_tz_offset("-4h")


def test_locations_from_json() -> None:
    with TemporaryDirectory() as tmpdir:
        path = Path(tmpdir) / "locations.json"
        path.write_text(
            json.dumps(
                {
                    "beacon": {"base": "https://beacon.example.com", "token": "b"},
                    "tulia": {"base": "https://tulia.example.com"},
                }
            )
        )
        locations = load_locations_from_json(path)

    assert [loc.key for loc in locations] == ["beacon", "tulia"]
    assert locations[0].is_configured
    assert not locations[1].is_configured


def test_locations_from_json_errors() -> None:
    with TemporaryDirectory() as tmpdir:
        missing = Path(tmpdir) / "missing.json"
        with pytest.raises(ConfigError):
            load_locations_from_json(missing)

        bad_shape = Path(tmpdir) / "list.json"
        bad_shape.write_text("[1, 2]")
        with pytest.raises(ConfigError, match="JSON object"):
            load_locations_from_json(bad_shape)

        bad_entry = Path(tmpdir) / "entry.json"
        bad_entry.write_text('{"beacon": "https://beacon.example.com"}')
        with pytest.raises(ConfigError, match="unsupported type"):
            load_locations_from_json(bad_entry)


def test_parse_timeout() -> None:
    assert parse_timeout(None) is None
    assert parse_timeout("") is None
    assert parse_timeout(" 45 ") == 45.0
    assert parse_timeout("2.5") == 2.5
    with pytest.raises(ConfigError, match="expected seconds"):
        parse_timeout("60s")
    with pytest.raises(ConfigError, match="positive"):
        parse_timeout("0")


def test_settings_timeout_from_env() -> None:
    assert RunSettings.from_env({"WEEK_OF": "2025-10-06"}).timeout is None
    assert RunSettings.from_env({"WEEK_OF": "2025-10-06", "SILVERWARE_TIMEOUT": "60"}).timeout == 60.0
    with pytest.raises(ConfigError):
        RunSettings.from_env({"WEEK_OF": "2025-10-06", "SILVERWARE_TIMEOUT": "60s"})
