# src/regionecon/calculators/infrastructure.py
"""
Infrastructure – efficiency boost, maintenance, decay and growth
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import numpy as np

from regionecon.config.validator import ConfigurationError
from regionecon.helpers import as_float_array, clip_nonneg, unwrap, update_params
from regionecon.logging import getLogger
from regionecon.typing import FloatLike

log = getLogger(__name__)


@dataclass(slots=True)
class InfrastructureCalculator:
    """
    Infrastructure effects on a region.

    The canonical representation is the infrastructure *level* (``>= 0``).
    Quality in [0, 1] is a view of the same value::

        quality = clip(level / max_level, 0, 1)
        level   = clip(quality, 0, 1) · max_level

    Per-tick update rule::

        required = level² · maintenance_cost_factor
        ratio    = min(1, maintenance / required)          (1 if required == 0)
        decayed  = level · (1 − decay_rate · (1 − ratio))
        growth   = development · growth_rate / (1 + decayed · growth_diminishing)
        new      = decayed + growth

    Maintenance beyond ``required`` counts as development investment.

    Parameters
    ----------
    efficiency_modifier : float
        Efficiency boost per level (> 0).
    decay_rate : float
        Fraction of level lost per tick without maintenance, in [0, 1].
    maintenance_cost_factor : float
        Wealth cost per squared level (> 0).
    max_level : float
        Level that maps to quality 1.0 (> 0).
    growth_rate : float
        Level gained per unit of development at level 0 (>= 0).
    growth_diminishing : float
        Strength of diminishing returns on development (>= 0).
    """

    efficiency_modifier: float = 0.1
    decay_rate: float = 0.02
    maintenance_cost_factor: float = 0.05
    max_level: float = 10.0
    growth_rate: float = 0.05
    growth_diminishing: float = 0.1

    def __post_init__(self) -> None:
        self._validate()

    def _validate(self) -> None:
        if not self.efficiency_modifier > 0:
            raise ConfigurationError(
                f"efficiency_modifier must be > 0, got {self.efficiency_modifier}"
            )
        if not 0.0 <= self.decay_rate <= 1.0:
            raise ConfigurationError(
                f"decay_rate must be in [0, 1], got {self.decay_rate}"
            )
        if not self.maintenance_cost_factor > 0:
            raise ConfigurationError(
                "maintenance_cost_factor must be > 0, "
                f"got {self.maintenance_cost_factor}"
            )
        if not self.max_level > 0:
            raise ConfigurationError(f"max_level must be > 0, got {self.max_level}")
        for name in ("growth_rate", "growth_diminishing"):
            if getattr(self, name) < 0:
                raise ConfigurationError(
                    f"{name} must be >= 0, got {getattr(self, name)}"
                )

    def update(self, **params: Any) -> None:
        """Re-tune parameters; invalid values leave the calculator unchanged."""
        update_params(self, params)

    # ── representation ───────────────────────────────────────────────────
    def level_to_quality(self, level: FloatLike) -> FloatLike:
        return unwrap(np.clip(as_float_array(level) / self.max_level, 0.0, 1.0))

    def quality_to_level(self, quality: FloatLike) -> FloatLike:
        return unwrap(np.clip(as_float_array(quality), 0.0, 1.0) * self.max_level)

    # ── effects ──────────────────────────────────────────────────────────
    def calculate_efficiency_boost(self, level: FloatLike) -> FloatLike:
        """Production multiplier ``1 + level · efficiency_modifier`` (1.0 at 0)."""
        return unwrap(1.0 + clip_nonneg(level) * self.efficiency_modifier)

    def calculate_maintenance_cost(self, level: FloatLike) -> FloatLike:
        """Wealth needed this tick to fully offset decay at *level*."""
        lvl = clip_nonneg(level)
        return unwrap(lvl * lvl * self.maintenance_cost_factor)

    def calculate_decay(
        self, level: FloatLike, maintenance_invested: FloatLike = 0.0
    ) -> FloatLike:
        """Level after one tick of decay, reduced by maintenance."""
        lvl = clip_nonneg(level)
        required = as_float_array(self.calculate_maintenance_cost(lvl))
        invested = clip_nonneg(maintenance_invested)

        ratio = np.ones(np.broadcast(required, invested).shape, dtype=np.float64)
        np.divide(invested, required, out=ratio, where=required > 0.0)
        np.minimum(ratio, 1.0, out=ratio)

        new_level = lvl * (1.0 - self.decay_rate * (1.0 - ratio))

        log.deep(
            "  decay: level=%s required=%s ratio=%s -> %s",
            lvl,
            required,
            ratio,
            new_level,
        )
        return unwrap(np.maximum(new_level, 0.0))

    def calculate_growth(
        self, investment_amount: FloatLike, current_level: FloatLike
    ) -> FloatLike:
        """Level increase from development investment (diminishing returns)."""
        diminishing = 1.0 / (1.0 + clip_nonneg(current_level) * self.growth_diminishing)
        return unwrap(clip_nonneg(investment_amount) * diminishing * self.growth_rate)

    def update_infrastructure(
        self,
        level: FloatLike,
        maintenance_invested: FloatLike = 0.0,
        development_invested: FloatLike = 0.0,
    ) -> FloatLike:
        """
        Level after one tick: decay (offset by maintenance), then growth.

        Maintenance above the required cost is treated as development.
        """
        required = as_float_array(self.calculate_maintenance_cost(level))
        maintenance = clip_nonneg(maintenance_invested)
        surplus = np.maximum(maintenance - required, 0.0)

        decayed = as_float_array(self.calculate_decay(level, maintenance))
        growth = as_float_array(
            self.calculate_growth(clip_nonneg(development_invested) + surplus, decayed)
        )
        return unwrap(decayed + growth)
