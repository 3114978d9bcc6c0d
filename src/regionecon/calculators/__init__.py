"""
Stateless economic calculators.

Each calculator owns only its own parameters and never holds a reference
to a region. All of them accept scalars (one region) or 1-D arrays (many
regions at once).
"""

from regionecon.calculators.consumption import ConsumptionCalculator
from regionecon.calculators.cycle import (
    DEFAULT_PHASE_COEFFICIENTS,
    CyclePhase,
    EconomicCycleCalculator,
    Effect,
)
from regionecon.calculators.infrastructure import InfrastructureCalculator
from regionecon.calculators.price import PriceCalculator
from regionecon.calculators.production import ProductionCalculator

__all__ = [
    "ConsumptionCalculator",
    "CyclePhase",
    "DEFAULT_PHASE_COEFFICIENTS",
    "EconomicCycleCalculator",
    "Effect",
    "InfrastructureCalculator",
    "PriceCalculator",
    "ProductionCalculator",
]
