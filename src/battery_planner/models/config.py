#!/usr/bin/env python3
"""
Battery Configuration Model

This module defines the configuration models shared by the loaders, the
planner and the command-line interface.
"""

from pydantic import BaseModel, Field, model_validator


class BatteryConfig(BaseModel):
    """Physical battery parameters and the site's grid connection limit."""

    capacity: float = Field(gt=0, description="Maximum energy storage capacity in MWh")

    initial_charge: float = Field(
        ge=0, description="Stored energy at the start of the horizon in MWh"
    )

    max_rate: float = Field(
        gt=0, description="Maximum charge/discharge power in MW"
    )

    efficiency: float = Field(
        gt=0, le=1.0, description="Round-trip efficiency applied on charge and discharge (0-1]"
    )

    grid_limit: float = Field(
        gt=0, description="Contractual maximum power drawn from the grid in MW"
    )

    @model_validator(mode="after")
    def initial_charge_within_capacity(self):
        if self.initial_charge > self.capacity:
            raise ValueError(
                f"initial_charge ({self.initial_charge} MWh) exceeds capacity "
                f"({self.capacity} MWh)"
            )
        return self

    def as_dict(self) -> dict:
        return self.model_dump()


class DispatchPolicy(BaseModel):
    """Constants of the greedy dispatch rule."""

    interval_hours: float = Field(
        default=0.25,
        gt=0,
        description="Time interval in hours (e.g., 0.25 for 15-min intervals)",
    )

    charge_power_mw: float = Field(
        default=1.5,
        ge=0,
        description="Power requested from the battery whenever the price is favorable",
    )

    def as_dict(self) -> dict:
        return self.model_dump()


class PlannerConfig(BaseModel):
    """Complete configuration of a planning run."""

    settings: BatteryConfig
    policy: DispatchPolicy = Field(default_factory=DispatchPolicy)

    def as_dict(self) -> dict:
        """Convert to a section → values mapping."""
        return {"settings": self.settings.as_dict(), "policy": self.policy.as_dict()}
