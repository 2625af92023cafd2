"""
Physical state model of a single storage unit.

Energy is tracked in MWh, power in MW and durations in hours. The same
efficiency scalar is applied multiplicatively to energy entering storage and
divisively to energy leaving it.
"""

import logging

from battery_planner.errors import InvalidInput
from battery_planner.models.config import BatteryConfig

logger = logging.getLogger(__name__)


class Battery:
    """A battery with a bounded state of charge.

    The stored energy ``charge`` always satisfies ``0 <= charge <= capacity``
    and is only changed by :meth:`charge_battery` and :meth:`discharge_battery`.
    """

    def __init__(
        self,
        capacity: float,
        initial_charge: float,
        max_rate: float,
        efficiency: float,
    ):
        if capacity <= 0:
            raise ValueError(f"capacity must be positive, got {capacity}")
        if not 0 <= initial_charge <= capacity:
            raise ValueError(
                f"initial_charge must be within [0, {capacity}], got {initial_charge}"
            )
        if max_rate <= 0:
            raise ValueError(f"max_rate must be positive, got {max_rate}")
        if not 0 < efficiency <= 1:
            raise ValueError(f"efficiency must be within (0, 1], got {efficiency}")

        self.capacity = capacity
        self.max_rate = max_rate
        self.efficiency = efficiency
        self._charge = initial_charge

    @classmethod
    def from_config(cls, cfg: BatteryConfig) -> "Battery":
        return cls(
            capacity=cfg.capacity,
            initial_charge=cfg.initial_charge,
            max_rate=cfg.max_rate,
            efficiency=cfg.efficiency,
        )

    @property
    def charge(self) -> float:
        """Stored energy in MWh."""
        return self._charge

    @property
    def state_of_charge(self) -> float:
        """Stored energy as a fraction of capacity."""
        return self._charge / self.capacity

    def charge_battery(self, power: float, duration: float) -> float:
        """
        Charge with ``power`` MW for ``duration`` hours.

        The power is clamped to ``max_rate``, the efficiency loss is applied on
        the way in and the result is limited by the remaining capacity.

        Returns:
            Energy actually added to storage in MWh

        Raises:
            InvalidInput: if ``power`` is negative; the state is left unchanged
        """
        if power < 0:
            logger.warning("Attempted to charge with a negative power: %s", power)
            raise InvalidInput(f"Attempted to charge with a negative power: {power}")

        effective_power = min(power, self.max_rate)
        energy_in = effective_power * duration
        energy_after_losses = energy_in * self.efficiency

        available_capacity = self.capacity - self._charge
        stored = min(energy_after_losses, available_capacity)

        logger.debug(
            "Charging with %s MW for %s h: %s MWh in, %s MWh after losses, "
            "%s MWh free, %s MWh stored",
            effective_power,
            duration,
            energy_in,
            energy_after_losses,
            available_capacity,
            stored,
        )

        # clamp against floating-point drift
        self._charge = min(self._charge + stored, self.capacity)

        logger.debug("New charge after charging: %s MWh", self._charge)
        return stored

    def discharge_battery(self, power: float, duration: float) -> float:
        """
        Discharge with ``power`` MW at the terminals for ``duration`` hours.

        Because of losses more energy leaves storage than is delivered. If the
        battery holds less than that, it is drained completely.

        Returns:
            Energy removed from storage in MWh (not the energy delivered)

        Raises:
            InvalidInput: if ``power`` is negative; the state is left unchanged
        """
        if power < 0:
            logger.warning("Attempted to discharge with a negative power: %s", power)
            raise InvalidInput(f"Attempted to discharge with a negative power: {power}")

        effective_power = min(power, self.max_rate)
        energy_at_terminal = effective_power * duration
        energy_from_storage = energy_at_terminal / self.efficiency

        logger.debug(
            "Discharging with %s MW for %s h: %s MWh delivered needs %s MWh from storage",
            effective_power,
            duration,
            energy_at_terminal,
            energy_from_storage,
        )

        if self._charge < energy_from_storage:
            drained = self._charge
            self._charge = 0.0
            logger.debug("Battery drained, %s MWh removed", drained)
            return drained

        self._charge -= energy_from_storage
        logger.debug("New charge after discharging: %s MWh", self._charge)
        return energy_from_storage

    def __repr__(self) -> str:
        return (
            f"Battery(capacity={self.capacity}, charge={self._charge}, "
            f"max_rate={self.max_rate}, efficiency={self.efficiency})"
        )
