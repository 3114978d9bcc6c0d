# src/regionecon/calculators/production.py
"""
Production – Cobb-Douglas output of a region
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import numpy as np

from regionecon.config.validator import ConfigurationError, ConfigValidator
from regionecon.helpers import clip_nonneg, round_half_even, unwrap, update_params
from regionecon.logging import getLogger
from regionecon.typing import FloatLike

if TYPE_CHECKING:  # pragma: no cover
    from regionecon.region import Region

log = getLogger(__name__)


@dataclass(slots=True)
class ProductionCalculator:
    """
    Cobb-Douglas production function::

        Y = A · L^α · K^β

    where ``A`` is ``productivity_factor``, ``L`` the labor available,
    ``K`` the capital (the region's infrastructure level), ``α`` the
    ``labor_elasticity`` and ``β`` the ``capital_elasticity``.

    Parameters
    ----------
    productivity_factor : float
        Total factor productivity, must be > 0.
    labor_elasticity : float
        Output elasticity of labor, in (0, 1].
    capital_elasticity : float
        Output elasticity of capital, in (0, 1].

    Notes
    -----
    α + β is conventionally close to 1.0 (constant returns to scale). Other
    sums are legal; they only produce a warning, see
    :meth:`elasticity_sum_warning`.

    Examples
    --------
    >>> calc = ProductionCalculator(1.0, 0.5, 0.5)
    >>> round(calc.calculate_output(100, 5), 2)
    22.36
    """

    productivity_factor: float = 1.0
    labor_elasticity: float = 0.5
    capital_elasticity: float = 0.5

    def __post_init__(self) -> None:
        self._validate()

    def _validate(self) -> None:
        if not self.productivity_factor > 0:
            raise ConfigurationError(
                f"productivity_factor must be > 0, got {self.productivity_factor}"
            )
        for name in ("labor_elasticity", "capital_elasticity"):
            value = getattr(self, name)
            if not 0.0 < value <= 1.0:
                raise ConfigurationError(f"{name} must be in (0, 1], got {value}")

        message = self.elasticity_sum_warning()
        if message is not None:
            log.warning(message)

    def update(self, **params: Any) -> None:
        """
        Re-tune parameters; new values take effect on the next call.

        Raises
        ------
        ConfigurationError
            If a name is unknown or a value is invalid. The previous
            parameters are kept in that case.
        """
        update_params(self, params)

    def elasticity_sum_warning(
        self, tolerance: float = ConfigValidator.ELASTICITY_SUM_TOLERANCE
    ) -> str | None:
        """Return a warning message when α + β is not ≈ 1.0, else ``None``."""
        total = self.labor_elasticity + self.capital_elasticity
        if abs(total - 1.0) <= tolerance:
            return None
        return (
            f"labor_elasticity + capital_elasticity = {total:.3f} "
            f"(expected ≈ 1.0 ± {tolerance})"
        )

    def calculate_output(self, labor: FloatLike, capital: FloatLike) -> FloatLike:
        """
        Output for the given labor and capital.

        Negative inputs are clamped to 0, and zero labor or zero capital
        yields zero output. Works element-wise on arrays.
        """
        output = (
            self.productivity_factor
            * np.power(clip_nonneg(labor), self.labor_elasticity)
            * np.power(clip_nonneg(capital), self.capital_elasticity)
        )
        return unwrap(output)

    def calculate_region_production(self, region: Region) -> int:
        """Rounded output of a region from its labor and infrastructure level."""
        output = self.calculate_output(
            region.labor_available, region.infrastructure_level
        )
        return round_half_even(output)  # type: ignore[arg-type]
