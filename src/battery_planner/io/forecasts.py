"""Loading of consumption forecasts from JSON files."""

import logging
import math
from pathlib import Path
from typing import List, Union

import pydantic

from battery_planner.errors import ParseError, ValidationError
from battery_planner.io._json import read_json, records_under
from battery_planner.models.records import ForecastPoint

logger = logging.getLogger(__name__)


def load_forecasts(file_path: Union[str, Path]) -> List[ForecastPoint]:
    """
    Load forecasts from a JSON file.

    The file holds ``{"forecasts": [...]}`` where every record has ``start``,
    ``end`` and ``consumption_average_power_interval`` (or ``average_power``).

    Parameters
    ----------
    file_path : str or Path
        Path to the JSON file containing the forecasts

    Returns
    -------
    list of ForecastPoint
        The forecasts in file order

    Raises
    ------
    ReadError
        If the file cannot be read
    ParseError
        If the content is not valid JSON or a record is malformed
    ValidationError
        If any record has negative or non-finite consumption or does not end
        after it starts
    """
    data = read_json(file_path, "forecasts")
    logger.info("Successfully read forecasts from file: %s", file_path)

    forecasts = []
    for i, raw in enumerate(records_under(data, "forecasts", "forecasts")):
        try:
            forecast = ForecastPoint.model_validate(raw)
        except pydantic.ValidationError as exc:
            raise ParseError(f"Malformed forecast record #{i}") from exc
        validate_forecast(forecast)
        forecasts.append(forecast)

    logger.info("Successfully parsed %d forecasts.", len(forecasts))
    return forecasts


def validate_forecast(forecast: ForecastPoint) -> None:
    """Reject negative or non-finite consumption and empty or inverted intervals."""
    if not (math.isfinite(forecast.average_power) and forecast.average_power >= 0.0):
        raise ValidationError(
            "Consumption average power interval must be a non-negative number, "
            f"got {forecast.average_power}."
        )
    if forecast.start >= forecast.end:
        raise ValidationError("Forecast start time must be before end time.")
