# src/regionecon/calculators/price.py
"""
Prices – supply/demand driven price index per resource type
"""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any

import numpy as np

from regionecon.config.validator import ConfigurationError
from regionecon.helpers import as_float_array, clip_nonneg, unwrap, update_params
from regionecon.logging import getLogger
from regionecon.typing import FloatLike

log = getLogger(__name__)

NEUTRAL_ELASTICITY = 1.0
SUPPLY_FLOOR = 0.1  # keeps the imbalance ratio finite when supply is ~0


@dataclass(slots=True)
class PriceCalculator:
    """
    Price moves away from a base price with the supply/demand imbalance::

        price = base · (1 + volatility_factor · e_r · (D − S) / max(S, 0.1))

    ``e_r`` is the elasticity registered for resource ``r`` (1.0 when the
    resource is unknown). Prices are floored at 0 and have no ceiling;
    callers apply their own display clamps.

    Parameters
    ----------
    volatility_factor : float
        Shared sensitivity of every price to imbalance (> 0).
    elasticities : dict
        Resource type → price elasticity (> 0).
    income_elasticities : dict
        Resource type → income elasticity of demand, used by
        :meth:`adjust_demand_by_income`.
    """

    volatility_factor: float = 1.0
    elasticities: dict[str, float] = field(default_factory=dict)
    income_elasticities: dict[str, float] = field(default_factory=dict)

    def __post_init__(self) -> None:
        self._validate()

    def _validate(self) -> None:
        if not self.volatility_factor > 0:
            raise ConfigurationError(
                f"volatility_factor must be > 0, got {self.volatility_factor}"
            )
        for resource, value in self.elasticities.items():
            if not value > 0:
                raise ConfigurationError(
                    f"elasticity for '{resource}' must be > 0, got {value}"
                )

    def update(self, **params: Any) -> None:
        """Re-tune parameters; invalid values leave the calculator unchanged."""
        update_params(self, params)

    # ── elasticity table ─────────────────────────────────────────────────
    def get_resource_elasticity(self, resource_type: str | None = None) -> float:
        if not resource_type:
            return NEUTRAL_ELASTICITY
        return self.elasticities.get(resource_type, NEUTRAL_ELASTICITY)

    def set_resource_elasticity(self, resource_type: str, elasticity: float) -> None:
        """Register or replace the elasticity of *resource_type*."""
        if not resource_type:
            return
        if not elasticity > 0:
            raise ConfigurationError(
                f"elasticity for '{resource_type}' must be > 0, got {elasticity}"
            )
        self.elasticities[resource_type] = float(elasticity)

    # ── pricing ──────────────────────────────────────────────────────────
    def calculate_price(
        self,
        base_price: FloatLike,
        supply: FloatLike,
        demand: FloatLike,
        resource_type: str | None = None,
    ) -> FloatLike:
        elasticity = self.get_resource_elasticity(resource_type)
        s = clip_nonneg(supply)
        imbalance = (clip_nonneg(demand) - s) / np.maximum(s, SUPPLY_FLOOR)

        factor = 1.0 + self.volatility_factor * elasticity * imbalance
        price = as_float_array(base_price) * factor

        log.deep(
            "  price[%s]: base=%s supply=%s demand=%s factor=%s",
            resource_type,
            base_price,
            supply,
            demand,
            factor,
        )
        return unwrap(np.maximum(price, 0.0))

    def adjust_demand_by_income(
        self, base_demand: float, wealth: float, resource_type: str | None = None
    ) -> float:
        """
        Scale demand with wealth according to the resource's income elasticity.

        Necessities (low income elasticity) barely react to wealth; luxuries
        react strongly.
        """
        income_elasticity = (
            self.income_elasticities.get(resource_type, 1.0) if resource_type else 1.0
        )
        wealth_modifier = math.log10(max(10.0, wealth)) * 0.5
        return base_demand * (1.0 + wealth_modifier * income_elasticity)

    @staticmethod
    def calculate_substitution_effect(
        base_demand: float,
        substitute_price: float,
        normalized_base_price: float,
        cross_price_elasticity: float,
    ) -> float:
        """
        Demand adjusted for the price of a substitute (positive cross
        elasticity) or complement (negative). The effect is clamped to
        [0.5, 2.0] × base demand.
        """
        if normalized_base_price <= 0.0:
            return base_demand
        price_ratio = substitute_price / normalized_base_price
        effect = 1.0 + (price_ratio - 1.0) * cross_price_elasticity
        return base_demand * float(np.clip(effect, 0.5, 2.0))

    @staticmethod
    def calculate_price_shock(
        current_price: float,
        supply_shock: float,
        consumption_trend: float,
        volatility_factor: float = 0.2,
    ) -> float:
        """
        Apply a market shock: ``price · (1 + v · (shock − trend))``.

        ``v`` is clamped to [0, 1] and the result to
        [0.75, 1.5] × *current_price*.
        """
        v = float(np.clip(volatility_factor, 0.0, 1.0))
        current = float(clip_nonneg(current_price))
        new_price = current * (1.0 + v * (supply_shock - consumption_trend))
        return float(np.clip(new_price, current * 0.75, current * 1.5))
