# src/regionecon/calculators/cycle.py
"""
Economic cycle – a four-phase clock that scales economic outputs
"""
from __future__ import annotations

import enum
import numbers
from collections.abc import Mapping
from dataclasses import dataclass, field

from regionecon.config.validator import ConfigurationError
from regionecon.helpers import as_float_array, unwrap
from regionecon.logging import getLogger
from regionecon.typing import FloatLike

log = getLogger(__name__)

N_PHASES = 4


class CyclePhase(enum.IntEnum):
    """Ordered, cyclic macro-economic regimes."""

    EXPANSION = 0
    PEAK = 1
    CONTRACTION = 2
    TROUGH = 3

    @property
    def label(self) -> str:
        """Name as used in configuration files (``"Expansion"``, ...)."""
        return self.name.capitalize()

    def next(self) -> CyclePhase:
        """Following phase; TROUGH wraps to EXPANSION."""
        return CyclePhase((self.value + 1) % N_PHASES)

    @classmethod
    def from_name(cls, name: str | CyclePhase) -> CyclePhase:
        if isinstance(name, CyclePhase):
            return name
        try:
            return cls[name.upper()]
        except KeyError:
            raise ConfigurationError(
                f"Unknown cycle phase '{name}'. "
                f"Must be one of {[p.label for p in cls]}"
            ) from None


class Effect:
    """Effect names consulted by the tick processor."""

    PRODUCTION = "Production"
    CONSUMPTION = "Consumption"
    INVESTMENT = "Investment"
    PRICE_INFLATION = "PriceInflation"
    UNREST = "Unrest"


DEFAULT_PHASE_COEFFICIENTS: dict[str, dict[str, float]] = {
    "Expansion": {
        Effect.PRODUCTION: 1.15,
        Effect.CONSUMPTION: 1.10,
        Effect.INVESTMENT: 1.25,
        Effect.PRICE_INFLATION: 1.05,
        Effect.UNREST: 0.9,
    },
    "Peak": {
        Effect.PRODUCTION: 1.2,
        Effect.CONSUMPTION: 1.3,
        Effect.INVESTMENT: 1.1,
        Effect.PRICE_INFLATION: 1.15,
        Effect.UNREST: 0.95,
    },
    "Contraction": {
        Effect.PRODUCTION: 0.9,
        Effect.CONSUMPTION: 0.85,
        Effect.INVESTMENT: 0.7,
        Effect.PRICE_INFLATION: 0.95,
        Effect.UNREST: 1.2,
    },
    "Trough": {
        Effect.PRODUCTION: 0.8,
        Effect.CONSUMPTION: 0.75,
        Effect.INVESTMENT: 0.8,
        Effect.PRICE_INFLATION: 0.9,
        Effect.UNREST: 1.4,
    },
}

_DESCRIPTIONS = {
    CyclePhase.EXPANSION: (
        "Economic Expansion",
        "The economy is growing steadily with increasing production "
        "and investment.",
    ),
    CyclePhase.PEAK: (
        "Economic Peak",
        "The economy is at its strongest point, with high consumption "
        "but rising inflation.",
    ),
    CyclePhase.CONTRACTION: (
        "Economic Contraction",
        "The economy is slowing down with falling production and investment.",
    ),
    CyclePhase.TROUGH: (
        "Economic Trough",
        "The economy is at its weakest point, with low consumption "
        "and high unrest.",
    ),
}


@dataclass(slots=True)
class EconomicCycleCalculator:
    """
    Finite, cyclic state machine over :class:`CyclePhase`.

    A cycle of ``cycle_length`` ticks is split into four near-equal phases:
    phase *i* covers cycle positions ``[ceil(i·L/4), ceil((i+1)·L/4))``.
    With ``L < 4`` some phases are skipped. The clock starts at tick 0 in
    EXPANSION with progress 0.

    The cycle is shared, process-wide state with a single mutating
    operation, :meth:`advance_cycle`. Call it exactly once per tick, from
    one thread; every other method is a read.

    Parameters
    ----------
    cycle_length : int
        Ticks per full revolution (>= 1).
    coefficients : mapping, optional
        ``{phase: {effect: value}}`` with phases given as
        :class:`CyclePhase` or names. Unset entries are neutral (1.0).

    Raises
    ------
    ConfigurationError
        If ``cycle_length`` is not a positive integer.

    Examples
    --------
    >>> cycle = EconomicCycleCalculator(cycle_length=8)
    >>> cycle.set_phase_coefficient(CyclePhase.EXPANSION, "Production", 1.2)
    >>> cycle.apply_cycle_effect(100.0, "Production")
    120.0
    >>> cycle.apply_cycle_effect(100.0, "Unset")
    100.0
    """

    cycle_length: int = 12
    coefficients: Mapping[CyclePhase | str, Mapping[str, float]] | None = None

    _tick: int = field(default=0, init=False)
    _phase: CyclePhase = field(default=CyclePhase.EXPANSION, init=False)
    _progress: float = field(default=0.0, init=False)
    _table: dict[CyclePhase, dict[str, float]] = field(
        default_factory=dict, init=False
    )

    def __post_init__(self) -> None:
        if isinstance(self.cycle_length, bool) or not isinstance(
            self.cycle_length, numbers.Integral
        ):
            raise ConfigurationError(
                f"cycle_length must be int, got {type(self.cycle_length).__name__}"
            )
        self.cycle_length = int(self.cycle_length)
        if self.cycle_length <= 0:
            raise ConfigurationError(
                f"cycle_length must be >= 1, got {self.cycle_length}"
            )
        self._table = {phase: {} for phase in CyclePhase}
        for phase, effects in (self.coefficients or {}).items():
            for effect_name, value in effects.items():
                self.set_phase_coefficient(phase, effect_name, value)
        self._recompute()

    @classmethod
    def with_default_coefficients(cls, cycle_length: int = 12) -> EconomicCycleCalculator:
        """Cycle pre-loaded with the stock boom/bust coefficient table."""
        return cls(cycle_length=cycle_length, coefficients=DEFAULT_PHASE_COEFFICIENTS)

    # ── clock ────────────────────────────────────────────────────────────
    def _phase_start(self, index: int) -> int:
        # ceil(index * L / 4) without floats
        return -(-index * self.cycle_length // N_PHASES)

    def _recompute(self) -> None:
        position = self._tick % self.cycle_length
        index = position * N_PHASES // self.cycle_length
        start = self._phase_start(index)
        end = self._phase_start(index + 1)

        self._phase = CyclePhase(index)
        self._progress = (position - start) / (end - start)

    def advance_cycle(self) -> None:
        """Advance the clock by one tick. Not idempotent."""
        previous = self._phase
        self._tick += 1
        self._recompute()

        if self._phase is not previous:
            log.debug(
                "Economic cycle: %s -> %s at tick %d",
                previous.label,
                self._phase.label,
                self._tick,
            )

    def reset(self) -> None:
        """Return the clock to tick 0 (coefficients are kept)."""
        self._tick = 0
        self._recompute()

    @property
    def current_tick(self) -> int:
        return self._tick

    @property
    def current_phase(self) -> CyclePhase:
        return self._phase

    @property
    def phase_progress(self) -> float:
        """Position within the current phase, in [0, 1)."""
        return self._progress

    # ── coefficients ─────────────────────────────────────────────────────
    def set_phase_coefficient(
        self, phase: CyclePhase | str, effect_name: str, value: float
    ) -> None:
        if value < 0:
            raise ConfigurationError(
                f"coefficient {effect_name} must be >= 0, got {value}"
            )
        self._table[CyclePhase.from_name(phase)][effect_name] = float(value)

    def get_phase_coefficient(self, phase: CyclePhase | str, effect_name: str) -> float:
        return self._table[CyclePhase.from_name(phase)].get(effect_name, 1.0)

    def apply_cycle_effect(self, base_value: FloatLike, effect_name: str) -> FloatLike:
        """``base_value`` × coefficient of *effect_name* in the current phase."""
        coefficient = self.get_phase_coefficient(self._phase, effect_name)
        return unwrap(as_float_array(base_value) * coefficient)

    def coefficient_table(self) -> dict[str, dict[str, float]]:
        """Copy of the coefficient table keyed by phase label."""
        return {phase.label: dict(effects) for phase, effects in self._table.items()}

    # ── reporting ────────────────────────────────────────────────────────
    def get_economic_condition_description(self) -> str:
        title, body = _DESCRIPTIONS[self._phase]
        if self._progress < 1.0 / 3.0:
            stage = "early"
        elif self._progress < 2.0 / 3.0:
            stage = "middle"
        else:
            stage = "late"
        return f"{title} ({stage} stage): {body}"
