#!/usr/bin/env python3
"""
Greedy battery dispatch over a forecast horizon.

Strategy
--------
* Walk the forecast and price sequences interval by interval.
* At each step:
    - If consumption > grid limit  → **discharge** the excess
    - Elif price ≤ reference price → **charge** at the policy power (1.5 MW)
    - Else                         → hold
* No look-ahead: a decision depends only on the current interval and the
  battery state left by the previous one.
"""

import logging
import math
from typing import List, Optional, Sequence

import numpy as np

from battery_planner.errors import InvalidInput, PlanningError
from battery_planner.models.battery import Battery
from battery_planner.models.config import DispatchPolicy
from battery_planner.models.records import ForecastPoint, PlanEntry, PricePoint

logger = logging.getLogger(__name__)

WH_PER_MWH = 1_000_000


def to_reported_wh(energy_mwh: float) -> float:
    """Convert MWh to Wh, truncated to whole multiples of 10 Wh."""
    return float(math.floor(energy_mwh * WH_PER_MWH / 10) * 10)


def average_price(prices: Sequence[PricePoint]) -> float:
    """Mean price of the horizon, used as the charging reference."""
    if not prices:
        logger.warning("No prices supplied, the reference price is undefined")
        return float("nan")
    return float(np.mean([p.price_per_unit for p in prices]))


def plan_battery_usage(
    forecasts: Sequence[ForecastPoint],
    prices: Sequence[PricePoint],
    battery: Battery,
    grid_limit: float,
    reference_price: float,
    policy: Optional[DispatchPolicy] = None,
) -> List[PlanEntry]:
    """
    Build a charge/discharge plan and apply it to ``battery``.

    Forecasts and prices are paired by position; when their lengths differ the
    tail of the longer sequence is ignored.

    Args:
        forecasts: Consumption forecast per interval
        prices: Day-ahead price per interval
        battery: Battery driven by the plan, mutated in place
        grid_limit: Maximum grid draw in MW
        reference_price: Price at or below which the battery charges
        policy: Interval length and charging power (default: DispatchPolicy())

    Returns:
        One PlanEntry per processed interval, in input order

    Raises:
        PlanningError: if a battery operation fails; no partial plan is returned
    """
    if len(forecasts) != len(prices):
        logger.warning(
            "Forecast and price horizons differ (%d vs %d intervals), planning %d",
            len(forecasts),
            len(prices),
            min(len(forecasts), len(prices)),
        )

    if policy is None:
        policy = DispatchPolicy()
    duration = policy.interval_hours
    plan = []

    for forecast, price in zip(forecasts, prices):
        consumption = forecast.average_power
        logger.debug("%s - %s", consumption, grid_limit)

        if consumption > grid_limit:
            logger.info(
                "Consumption of %s exceeds the grid limit %s", consumption, grid_limit
            )
            excess = consumption - grid_limit
            try:
                discharged = battery.discharge_battery(excess, duration)
            except InvalidInput as exc:
                raise PlanningError("Failed to discharge battery") from exc

            energy_from = to_reported_wh(discharged)
            logger.info("Discharging battery: %s Wh at %s", energy_from, forecast.start)
            plan.append(
                PlanEntry(
                    start=forecast.start,
                    end=forecast.end,
                    energy_from_battery=energy_from,
                    energy_to_battery=0.0,
                )
            )
        elif price.price_per_unit <= reference_price:
            try:
                stored = battery.charge_battery(policy.charge_power_mw, duration)
            except InvalidInput as exc:
                raise PlanningError("Failed to charge battery") from exc

            energy_to = to_reported_wh(stored)
            logger.info(
                "Charging battery: %s Wh at %s (Price: %s %s/kWh)",
                energy_to,
                forecast.start,
                price.price_per_unit,
                price.currency,
            )
            plan.append(
                PlanEntry(
                    start=forecast.start,
                    end=forecast.end,
                    energy_from_battery=0.0,
                    energy_to_battery=energy_to,
                )
            )
        else:
            plan.append(
                PlanEntry(
                    start=forecast.start,
                    end=forecast.end,
                    energy_from_battery=0.0,
                    energy_to_battery=0.0,
                )
            )

    logger.info(
        "Planned %d intervals, final charge %.4f MWh", len(plan), battery.charge
    )
    return plan
