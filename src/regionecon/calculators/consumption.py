# src/regionecon/calculators/consumption.py
"""
Consumption – expected consumption, unmet demand and unrest
"""
from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

import numpy as np

from regionecon.config.validator import ConfigurationError
from regionecon.helpers import as_float_array, clip_nonneg, unwrap, update_params
from regionecon.typing import FloatLike


@dataclass(slots=True)
class ConsumptionCalculator:
    """
    Consumption as a sub-linear function of wealth::

        C = base_consumption_rate · W^wealth_consumption_exponent

    An exponent below 1 models a diminishing marginal propensity to consume.
    When supply cannot cover expected consumption, the shortfall (unmet
    demand) turns into unrest::

        unmet  = max(0, C − supply)
        unrest = unmet · unmet_demand_unrest_factor
    """

    base_consumption_rate: float = 0.2
    wealth_consumption_exponent: float = 0.8
    unmet_demand_unrest_factor: float = 0.05

    def __post_init__(self) -> None:
        self._validate()

    def _validate(self) -> None:
        for name in ("base_consumption_rate", "wealth_consumption_exponent"):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ConfigurationError(f"{name} must be in [0, 1], got {value}")
        if not self.unmet_demand_unrest_factor > 0:
            raise ConfigurationError(
                "unmet_demand_unrest_factor must be > 0, "
                f"got {self.unmet_demand_unrest_factor}"
            )

    def update(self, **params: Any) -> None:
        """Re-tune parameters; invalid values leave the calculator unchanged."""
        update_params(self, params)

    def calculate_expected_consumption(self, wealth: FloatLike) -> FloatLike:
        return unwrap(
            self.base_consumption_rate
            * np.power(clip_nonneg(wealth), self.wealth_consumption_exponent)
        )

    def calculate_unmet_demand(
        self, expected_consumption: FloatLike, supply: FloatLike
    ) -> FloatLike:
        return unwrap(
            np.maximum(as_float_array(expected_consumption) - as_float_array(supply), 0.0)
        )

    def calculate_unrest_delta(self, unmet_demand: FloatLike) -> FloatLike:
        return unwrap(clip_nonneg(unmet_demand) * self.unmet_demand_unrest_factor)

    def calculate_unmet_demand_ratio(
        self, expected_consumption: float, actual_consumption: float
    ) -> float:
        """Share of expected consumption that went unsatisfied, in [0, 1]."""
        if expected_consumption <= 0.0:
            return 0.0
        ratio = (expected_consumption - actual_consumption) / expected_consumption
        return float(np.clip(ratio, 0.0, 1.0))

    def calculate_unrest_from_ratio(self, unmet_ratio: float) -> float:
        """
        Non-linear unrest from a shortage ratio.

        Small shortages barely register; large ones cause disproportionately
        more unrest (quadratic in the ratio).
        """
        ratio = float(np.clip(unmet_ratio, 0.0, 1.0))
        return ratio * ratio * self.unmet_demand_unrest_factor * 100.0

    def allocate_consumption(
        self, total_consumption: float, allocation: Mapping[str, float]
    ) -> dict[str, float]:
        """
        Split a consumption total across resource types.

        Weights are normalized; an allocation whose weights sum to <= 0
        yields an empty dict.
        """
        total_weight = sum(allocation.values())
        if total_weight <= 0.0:
            return {}
        return {
            resource: total_consumption * weight / total_weight
            for resource, weight in allocation.items()
        }

    def process_region_consumption(
        self,
        wealth: float,
        available: Mapping[str, float],
        allocation: Mapping[str, float],
        *,
        expected: float | None = None,
    ) -> tuple[float, float, float]:
        """
        Consume each resource up to what the region can get hold of.

        Parameters
        ----------
        wealth : float
            Region wealth; sets expected consumption unless *expected*
            is given (e.g. already scaled by the cycle).
        available : mapping
            Amount of each resource the region has access to. Resources
            missing from the mapping are unavailable. Not modified.
        allocation : mapping
            Preference weights used to split expected consumption.

        Returns
        -------
        (actual, unmet_ratio, unrest)
            Units actually consumed, the unsatisfied share of expected
            consumption, and the quadratic unrest from that share.
        """
        if expected is None:
            expected = float(self.calculate_expected_consumption(wealth))
        wanted = self.allocate_consumption(expected, allocation)

        actual = 0.0
        for resource, amount in wanted.items():
            actual += min(amount, max(available.get(resource, 0.0), 0.0))

        ratio = self.calculate_unmet_demand_ratio(expected, actual)
        return actual, ratio, self.calculate_unrest_from_ratio(ratio)
