"""
Pytest fixtures for the battery planner tests.
"""

import json
import os
from datetime import datetime, timedelta, timezone

import pytest

from battery_planner.models.battery import Battery
from battery_planner.models.config import BatteryConfig
from battery_planner.models.records import ForecastPoint, PricePoint

DATA_DIR = os.path.join(os.path.dirname(__file__), "data")
HORIZON_START = datetime(2022, 12, 12, tzinfo=timezone.utc)


@pytest.fixture
def config_toml():
    """Path to the sample TOML configuration."""
    return os.path.join(DATA_DIR, "config.toml")


@pytest.fixture
def config_yaml():
    """Path to the sample YAML configuration."""
    return os.path.join(DATA_DIR, "config.yaml")


@pytest.fixture
def forecasts_json():
    """Path to a two-hour forecast sample (8 intervals)."""
    return os.path.join(DATA_DIR, "forecasts.json")


@pytest.fixture
def prices_json():
    """Path to a two-hour day-ahead price sample (2 hourly records)."""
    return os.path.join(DATA_DIR, "day-ahead.json")


@pytest.fixture
def battery_config():
    """Fixture that returns the standard site configuration."""
    return BatteryConfig(
        capacity=3.0,
        initial_charge=1.5,
        max_rate=1.5,
        efficiency=0.9,
        grid_limit=7.8,
    )


@pytest.fixture
def battery(battery_config):
    """A fresh battery built from the standard configuration."""
    return Battery.from_config(battery_config)


@pytest.fixture
def write_json(tmp_path):
    """Write a JSON document to a temporary file and return its path."""

    def _write(payload, name="input.json"):
        path = tmp_path / name
        path.write_text(json.dumps(payload) if not isinstance(payload, str) else payload)
        return path

    return _write


def make_forecasts(powers, start=HORIZON_START):
    """15-minute forecasts with the given average powers."""
    return [
        ForecastPoint(
            start=start + timedelta(minutes=15 * i),
            end=start + timedelta(minutes=15 * (i + 1)),
            average_power=power,
        )
        for i, power in enumerate(powers)
    ]


def make_prices(values, start=HORIZON_START, currency="EUR"):
    """15-minute prices with the given values."""
    return [
        PricePoint(
            start=start + timedelta(minutes=15 * i),
            end=start + timedelta(minutes=15 * (i + 1)),
            currency=currency,
            price_per_unit=value,
        )
        for i, value in enumerate(values)
    ]


@pytest.fixture(name="forecasts")
def forecasts_factory():
    """Factory fixture for in-memory forecasts."""
    return make_forecasts


@pytest.fixture(name="prices")
def prices_factory():
    """Factory fixture for in-memory prices."""
    return make_prices
