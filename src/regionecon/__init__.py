"""
regionecon - Regional Economy Core for Turn-Based Strategy Simulations
======================================================================

regionecon computes the per-tick economy of a set of regions: how much
each region produces, how its infrastructure decays and grows, how much
it consumes, how much unrest unmet demand creates, how resource prices
move with supply and demand, and how a shared four-phase economic cycle
scales all of it.

Quick Start
-----------
Basic simulation with default configuration:

>>> import regionecon as rc
>>> sim = rc.Simulation.init(
...     regions=[
...         rc.Region("north", wealth=100, labor_available=100.0,
...                   infrastructure_level=5.0, nation_id="A"),
...         rc.Region("south", wealth=50, labor_available=60.0,
...                   infrastructure_level=2.0, nation_id="B"),
...     ],
...     seed=42,
... )
>>> results = sim.run(n_ticks=24)
>>> results.economy_data["total_wealth"][-1]

Custom configuration via YAML file or keyword arguments:

>>> sim = rc.Simulation.init(config="my_economy.yml", cycle_length=8)

Using the calculators directly:

>>> prod = rc.ProductionCalculator(productivity_factor=1.0)
>>> prod.calculate_output(100.0, 5.0)
22.360679774997898

Key Concepts
------------
**Calculators**
  Stateless (apart from their own parameters) and vectorized: each
  accepts scalars or NumPy arrays.

**Economic Cycle**
  A single shared clock (Expansion → Peak → Contraction → Trough) whose
  per-phase coefficients scale production, consumption, investment,
  price inflation and unrest. It advances exactly once per tick.

**Region Snapshots**
  Regions are immutable values; a tick returns updated copies and writes
  them back through a :class:`RegionStore`.

Public API
----------
Simulation
    Facade that owns configuration, calculators, cycle and regions.
TickProcessor
    Per-tick orchestrator over region snapshots.
ProductionCalculator, InfrastructureCalculator, ConsumptionCalculator,
PriceCalculator, EconomicCycleCalculator
    The economic calculators.
Region, RegionStore, InMemoryRegionStore
    Region snapshot and storage contract.
SimulationResults
    Time series collected by :meth:`Simulation.run`.
logging
    Custom logging with DEEP_DEBUG level and per-module configuration.
"""

from __future__ import annotations

__version__: str = "0.1.0"

# ============================================================================
# Standard library imports
# ============================================================================
from typing import TypeAlias

import numpy as np

Rng: TypeAlias = np.random.Generator

# ============================================================================
# Logging (must be before any module that creates a logger)
# ============================================================================
from . import logging  # noqa: E402 (circular‑safe)


def make_rng(seed: int | None = None) -> Rng:
    """Create a new random number generator.

    Pass the result as ``rng=`` to :class:`TickProcessor` to drive the
    random market shock from a stream you control.

    Parameters
    ----------
    seed : int | None
        Seed for reproducibility. If `None`, uses a random seed.

    Returns
    -------
    Rng
        A NumPy random number generator (np.random.Generator).
    """
    return np.random.default_rng(seed)


# ============================================================================
# Calculators, regions and orchestration
# ============================================================================
from .aggregation import (  # noqa: E402
    nation_average_infrastructure,
    nation_production,
    nation_wealth,
    strongest_nation_summary,
    total_production,
    total_wealth,
)
from .calculators import (  # noqa: E402
    DEFAULT_PHASE_COEFFICIENTS,
    ConsumptionCalculator,
    CyclePhase,
    EconomicCycleCalculator,
    Effect,
    InfrastructureCalculator,
    PriceCalculator,
    ProductionCalculator,
)
from .config import Config, ConfigurationError, ConfigValidator  # noqa: E402
from .region import InMemoryRegionStore, Region, RegionStore  # noqa: E402
from .results import SimulationResults  # noqa: E402
from .tick import RegionOutcome, TickProcessor, TickResult  # noqa: E402

# ============================================================================
# Simulation facade (imports after dependencies)
# ============================================================================
from .simulation import Simulation  # noqa: E402  (circular‑safe)

# ============================================================================
# Public API exports
# ============================================================================
__all__ = [
    # Version
    "__version__",
    # Core
    "Simulation",
    "SimulationResults",
    "TickProcessor",
    "TickResult",
    "RegionOutcome",
    # Regions
    "Region",
    "RegionStore",
    "InMemoryRegionStore",
    # Calculators
    "ProductionCalculator",
    "InfrastructureCalculator",
    "ConsumptionCalculator",
    "PriceCalculator",
    "EconomicCycleCalculator",
    "CyclePhase",
    "Effect",
    "DEFAULT_PHASE_COEFFICIENTS",
    # Configuration
    "Config",
    "ConfigValidator",
    "ConfigurationError",
    # Aggregation
    "total_wealth",
    "total_production",
    "nation_wealth",
    "nation_production",
    "nation_average_infrastructure",
    "strongest_nation_summary",
    # Utilities
    "logging",
    "make_rng",
    "Rng",
]
