"""
Loading of day-ahead electricity prices.

Day-ahead prices are published per hour while the planner works in
15-minute intervals, so every hourly record is expanded into four.
"""

import logging
import math
from pathlib import Path
from typing import List, Sequence, Tuple, Union

import pandas as pd
import pydantic

from battery_planner.errors import ParseError, ValidationError
from battery_planner.io._json import read_json, records_under
from battery_planner.models.planning import average_price
from battery_planner.models.records import PricePoint

logger = logging.getLogger(__name__)

INTERVAL = pd.Timedelta(minutes=15)
INTERVALS_PER_HOUR = 4


def load_day_ahead_prices(
    file_path: Union[str, Path],
) -> Tuple[List[PricePoint], float]:
    """
    Load day-ahead prices from a JSON file and convert them to 15-minute intervals.

    Args:
        file_path: Path to a JSON file holding ``{"prices": [...]}``

    Returns:
        The 15-minute prices and their average

    Raises:
        ReadError: if the file cannot be read
        ParseError: if the content is not valid JSON or a record is malformed
        ValidationError: if a price is negative or not finite, or a record does
            not end after it starts
    """
    data = read_json(file_path, "day-ahead prices")

    hourly = []
    for i, raw in enumerate(records_under(data, "prices", "prices")):
        try:
            price = PricePoint.model_validate(raw)
        except pydantic.ValidationError as exc:
            raise ParseError(f"Malformed price record #{i}") from exc
        validate_price(price)
        hourly.append(price)

    prices = expand_to_fifteen_minute_intervals(hourly)
    mean_price = average_price(prices)

    logger.info(
        "Successfully converted %d hourly prices into %d 15-minute intervals "
        "from %s (average %s)",
        len(hourly),
        len(prices),
        file_path,
        mean_price,
    )
    return prices, mean_price


def expand_to_fifteen_minute_intervals(
    hourly_prices: Sequence[PricePoint],
) -> List[PricePoint]:
    """Split every hourly price into four consecutive 15-minute prices."""
    prices = []
    for price in hourly_prices:
        starts = pd.date_range(price.start, periods=INTERVALS_PER_HOUR, freq=INTERVAL)
        for start in starts:
            prices.append(
                PricePoint(
                    start=start.to_pydatetime(),
                    end=(start + INTERVAL).to_pydatetime(),
                    currency=price.currency,
                    price_per_unit=price.price_per_unit,
                )
            )
    return prices


def validate_price(price: PricePoint) -> None:
    if not (math.isfinite(price.price_per_unit) and price.price_per_unit >= 0.0):
        raise ValidationError(
            f"Market price per kWh must be a non-negative number, got {price.price_per_unit}."
        )
    if price.start >= price.end:
        raise ValidationError("Price start time must be before end time.")
