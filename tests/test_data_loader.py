"""
Test the forecast and day-ahead price loaders.
"""

from datetime import datetime, timedelta, timezone

import pytest

from battery_planner.errors import ParseError, ReadError, ValidationError
from battery_planner.io.forecasts import load_forecasts
from battery_planner.io.prices import (
    expand_to_fifteen_minute_intervals,
    load_day_ahead_prices,
)
from battery_planner.models.records import PricePoint


def forecast_record(power=5.0, start="2022-12-12T00:00:00Z", end="2022-12-12T00:15:00Z"):
    return {"start": start, "end": end, "consumption_average_power_interval": power}


def price_record(price=0.25, start="2022-12-12T23:00:00Z", end="2022-12-13T00:00:00Z"):
    return {
        "start": start,
        "end": end,
        "market_price_currency": "EUR",
        "market_price_per_kwh": price,
    }


def test_load_forecasts_sample(forecasts_json):
    forecasts = load_forecasts(forecasts_json)

    assert len(forecasts) == 8
    assert forecasts[0].average_power == 5.0
    assert forecasts[0].start == datetime(2022, 12, 12, tzinfo=timezone.utc)
    assert forecasts[-1].end == datetime(2022, 12, 12, 2, tzinfo=timezone.utc)


def test_load_forecasts_valid_data(write_json):
    path = write_json({"forecasts": [forecast_record()]})

    result = load_forecasts(path)

    assert len(result) == 1
    assert result[0].average_power == 5.0


def test_load_forecasts_accepts_short_field_names(write_json):
    path = write_json(
        [{"start": "2022-12-12T00:00:00Z", "end": "2022-12-12T00:15:00Z", "average_power": 2.5}]
    )

    assert load_forecasts(path)[0].average_power == 2.5


def test_load_forecasts_normalizes_to_utc(write_json):
    path = write_json(
        {
            "forecasts": [
                forecast_record(
                    start="2022-12-12T01:00:00+01:00", end="2022-12-12T01:15:00+01:00"
                )
            ]
        }
    )

    forecast = load_forecasts(path)[0]
    assert forecast.start == datetime(2022, 12, 12, tzinfo=timezone.utc)
    assert forecast.start.utcoffset() == timedelta(0)


def test_load_forecasts_invalid_file(tmp_path):
    with pytest.raises(ReadError, match="Unable to read forecasts file"):
        load_forecasts(tmp_path / "non_existent_file.json")


def test_load_forecasts_invalid_json(write_json):
    path = write_json("invalid json data")

    with pytest.raises(ParseError, match="JSON parsing error in forecasts"):
        load_forecasts(path)


@pytest.mark.parametrize(
    "payload",
    [
        {"data": []},
        {"forecasts": [{"start": "2022-12-12T00:00:00Z", "end": "2022-12-12T00:15:00Z"}]},
        {"forecasts": [forecast_record(power="lots")]},
        {"forecasts": [forecast_record(start="2022-12-12T00:00:00")]},
    ],
)
def test_load_forecasts_malformed_records(write_json, payload):
    with pytest.raises(ParseError):
        load_forecasts(write_json(payload))


def test_load_forecasts_negative_consumption(write_json):
    path = write_json({"forecasts": [forecast_record(), forecast_record(power=-1.0)]})

    with pytest.raises(ValidationError, match="non-negative"):
        load_forecasts(path)


@pytest.mark.parametrize("literal", ["NaN", "Infinity"])
def test_load_forecasts_non_finite_consumption(write_json, literal):
    path = write_json(
        '{"forecasts": [{"start": "2022-12-12T00:00:00Z", "end": "2022-12-12T00:15:00Z", '
        f'"average_power": {literal}}}]}}'
    )

    with pytest.raises(ValidationError, match="must be a non-negative number"):
        load_forecasts(path)


@pytest.mark.parametrize("end", ["2022-12-12T00:00:00Z", "2022-12-11T23:45:00Z"])
def test_load_forecasts_start_not_before_end(write_json, end):
    path = write_json({"forecasts": [forecast_record(end=end)]})

    with pytest.raises(ValidationError, match="start time must be before end time"):
        load_forecasts(path)


def test_load_prices_valid_data(write_json):
    path = write_json({"prices": [price_record()]})

    prices, average = load_day_ahead_prices(path)

    # four 15-minute intervals from one hourly entry
    assert len(prices) == 4
    for price in prices:
        assert price.price_per_unit == 0.25
        assert price.currency == "EUR"
    assert average == pytest.approx(0.25)


def test_load_prices_sample(prices_json):
    prices, average = load_day_ahead_prices(prices_json)

    assert len(prices) == 8
    assert [p.price_per_unit for p in prices] == [0.1] * 4 + [0.3] * 4
    assert average == pytest.approx(0.2)


def test_load_prices_invalid_file(tmp_path):
    with pytest.raises(ReadError, match="Unable to read day-ahead prices file"):
        load_day_ahead_prices(tmp_path / "non_existent_file.json")


def test_load_prices_invalid_json(write_json):
    with pytest.raises(ParseError, match="JSON parsing error in day-ahead prices"):
        load_day_ahead_prices(write_json("invalid json data"))


def test_load_prices_negative_price(write_json):
    path = write_json({"prices": [price_record(price=-0.01)]})

    with pytest.raises(ValidationError, match="must be a non-negative number"):
        load_day_ahead_prices(path)


@pytest.mark.parametrize("literal", ["NaN", "Infinity"])
def test_load_prices_non_finite_price(write_json, literal):
    path = write_json(
        '{"prices": [{"start": "2022-12-12T23:00:00Z", "end": "2022-12-13T00:00:00Z", '
        f'"currency": "EUR", "price_per_unit": {literal}}}]}}'
    )

    with pytest.raises(ValidationError, match="Market price per kWh must be a non-negative"):
        load_day_ahead_prices(path)


def test_load_prices_start_not_before_end(write_json):
    path = write_json(
        {"prices": [price_record(start="2022-12-13T00:00:00Z", end="2022-12-13T00:00:00Z")]}
    )

    with pytest.raises(ValidationError, match="start time must be before end time"):
        load_day_ahead_prices(path)


def test_load_prices_empty(write_json):
    prices, average = load_day_ahead_prices(write_json({"prices": []}))

    assert prices == []
    assert average != average  # NaN


def test_expand_to_fifteen_minute_intervals():
    start = datetime(2022, 12, 12, 23, tzinfo=timezone.utc)
    hourly = [
        PricePoint(
            start=start,
            end=start + timedelta(hours=1),
            currency="EUR",
            price_per_unit=0.25,
        ),
        PricePoint(
            start=start + timedelta(hours=1),
            end=start + timedelta(hours=2),
            currency="EUR",
            price_per_unit=0.40,
        ),
    ]

    prices = expand_to_fifteen_minute_intervals(hourly)

    assert len(prices) == 8
    for i, price in enumerate(prices):
        assert price.start == start + timedelta(minutes=15 * i)
        assert price.end == price.start + timedelta(minutes=15)
    assert [p.price_per_unit for p in prices] == [0.25] * 4 + [0.40] * 4
    assert {p.currency for p in prices} == {"EUR"}
