"""
Record types flowing through a planning run.

``ForecastPoint`` and ``PricePoint`` are parsed from the input files;
``PlanEntry`` is one row of the finished plan.
"""

from dataclasses import asdict, dataclass
from datetime import datetime, timezone

from pydantic import AliasChoices, AwareDatetime, BaseModel, ConfigDict, Field, field_validator


class _IntervalRecord(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    start: AwareDatetime
    end: AwareDatetime

    @field_validator("start", "end")
    def to_utc(cls, v):
        return v.astimezone(timezone.utc)


class ForecastPoint(_IntervalRecord):
    """Forecast consumption for one interval."""

    average_power: float = Field(
        validation_alias=AliasChoices(
            "average_power", "consumption_average_power_interval"
        ),
        description="Average power consumption during the interval in MW",
    )


class PricePoint(_IntervalRecord):
    """Day-ahead electricity price for one interval."""

    currency: str = Field(
        validation_alias=AliasChoices("currency", "market_price_currency"),
        description="Currency of the price, e.g. EUR",
    )
    price_per_unit: float = Field(
        validation_alias=AliasChoices("price_per_unit", "market_price_per_kwh"),
        description="Price of electricity per kWh",
    )


@dataclass(frozen=True)
class PlanEntry:
    """Planned battery usage for one interval, energies in Wh."""

    start: datetime
    end: datetime
    energy_from_battery: float
    energy_to_battery: float

    def to_dict(self) -> dict:
        record = asdict(self)
        record["start"] = format_timestamp(self.start)
        record["end"] = format_timestamp(self.end)
        return record


def format_timestamp(ts: datetime) -> str:
    """ISO 8601 in UTC with a ``Z`` suffix."""
    return ts.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")
