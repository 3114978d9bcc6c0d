"""
Configuration dataclass for simulation parameters.

This module defines the Config dataclass, which groups all economic
parameters in one immutable object. Config instances are created by
Simulation.init() after merging defaults, user config, and kwargs.

Design Notes
------------
- Immutable (frozen=True) to prevent accidental modification
- Memory-efficient (slots=True)
- Simple dataclass, no validation - validation happens in ConfigValidator

See Also
--------
ConfigValidator : Centralized validation for configuration parameters
regionecon.simulation.Simulation.init : Creates Config from merged parameters
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(slots=True, frozen=True)
class Config:
    """
    Immutable configuration for the region economy.

    Parameters
    ----------
    productivity_factor : float
        Total factor productivity ``A`` of the Cobb-Douglas function (> 0).
    labor_elasticity : float
        Output elasticity of labor (0, 1].
    capital_elasticity : float
        Output elasticity of capital (infrastructure) (0, 1].
    efficiency_modifier : float
        Efficiency boost per infrastructure level (> 0).
    decay_rate : float
        Fraction of infrastructure lost per tick without maintenance [0, 1].
    maintenance_cost_factor : float
        Wealth cost per squared infrastructure level (> 0).
    max_infrastructure_level : float
        Level that maps to infrastructure quality 1.0 (> 0).
    infrastructure_growth_rate : float
        Level gained per unit of development investment at level 0 (>= 0).
    infrastructure_growth_diminishing : float
        How quickly development returns diminish with level (>= 0).
    apply_infrastructure_upkeep : bool
        Whether Simulation.step() applies one tick of infrastructure decay
        (offset by any investments) to every region before the economic pass.
    base_consumption_rate : float
        Consumption scale [0, 1].
    wealth_consumption_exponent : float
        Exponent applied to wealth [0, 1].
    unmet_demand_unrest_factor : float
        Unrest per unit of unmet demand (> 0).
    resource_types : tuple of str
        Resource types whose prices are tracked.
    initial_price : float
        Starting price of every tracked resource (>= 0).
    volatility_factor : float
        Shared price sensitivity to supply/demand imbalance (> 0).
    resource_elasticities : dict
        Per-resource price elasticity (> 0); unknown resources use 1.0.
    income_elasticities : dict
        Per-resource income elasticity of demand; unknown resources use 1.0.
    income_adjusted_demand : bool
        Whether regional demand is scaled by wealth before pricing.
    shared_market : bool
        Whether regions consume from the pooled supply (wealth shares)
        instead of only their own production.
    price_shock_volatility : float
        Volatility of the random market shock applied after pricing [0, 1].
        0 disables the shock.
    enable_economic_cycles : bool
        Whether cycle coefficients scale outputs and the clock advances.
    cycle_length : int
        Ticks per full economic cycle (>= 1).
    phase_coefficients : dict
        ``{phase_name: {effect_name: coefficient}}``; unset entries are 1.0.
    n_ticks : int
        Default run length for Simulation.run().
    """

    # Production
    productivity_factor: float
    labor_elasticity: float
    capital_elasticity: float

    # Infrastructure
    efficiency_modifier: float
    decay_rate: float
    maintenance_cost_factor: float

    # Consumption
    base_consumption_rate: float
    wealth_consumption_exponent: float
    unmet_demand_unrest_factor: float

    # Cycle
    cycle_length: int

    # Optional parameters
    max_infrastructure_level: float = 10.0
    infrastructure_growth_rate: float = 0.05
    infrastructure_growth_diminishing: float = 0.1
    apply_infrastructure_upkeep: bool = True

    resource_types: tuple[str, ...] = ("Food", "Luxury", "RawMaterial", "Manufacturing")
    initial_price: float = 100.0
    volatility_factor: float = 1.0
    resource_elasticities: dict[str, float] = field(default_factory=dict)
    income_elasticities: dict[str, float] = field(default_factory=dict)
    income_adjusted_demand: bool = False
    shared_market: bool = False
    price_shock_volatility: float = 0.0

    enable_economic_cycles: bool = True
    phase_coefficients: dict[str, dict[str, float]] = field(default_factory=dict)

    n_ticks: int = 100

    @classmethod
    def from_dict(cls, cfg: dict[str, Any]) -> Config:
        """Build a Config from a merged dict, ignoring non-parameter keys."""
        names = set(cls.__dataclass_fields__)
        params = {k: v for k, v in cfg.items() if k in names}
        if "resource_types" in params:
            params["resource_types"] = tuple(params["resource_types"])
        return cls(**params)
