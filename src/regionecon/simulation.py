# src/regionecon/simulation.py
from __future__ import annotations

import dataclasses
from collections.abc import Iterable
from dataclasses import dataclass
from importlib import resources
from pathlib import Path
from typing import Any, Dict, Mapping

import yaml
from numpy.random import Generator

from regionecon import logging as relog
from regionecon.calculators import (
    ConsumptionCalculator,
    CyclePhase,
    EconomicCycleCalculator,
    InfrastructureCalculator,
    PriceCalculator,
    ProductionCalculator,
)
from regionecon.config import Config, ConfigValidator
from regionecon.helpers import make_generator
from regionecon.logging import getLogger
from regionecon.region import InMemoryRegionStore, Region
from regionecon.results import SimulationResults, _DataCollector
from regionecon.tick import TickProcessor, TickResult

__all__ = ["Simulation"]

log = getLogger(__name__)


# helpers
# ---------------------------------------------------------------------------
def _read_yaml(obj: str | Path | Mapping[str, Any] | None) -> Dict[str, Any]:
    """Return a plain dict – {} if *obj* is None."""
    if obj is None:
        return {}
    if isinstance(obj, Mapping):
        return dict(obj)
    p = Path(obj)
    with p.open("rt", encoding="utf-8") as fh:
        data = yaml.safe_load(fh) or {}
    if not isinstance(data, Mapping):
        raise TypeError(f"config root must be mapping, got {type(data)!r}")
    return dict(data)


def _package_defaults() -> Dict[str, Any]:
    """Load regionecon/defaults.yml"""
    txt = resources.files("regionecon").joinpath("defaults.yml").read_text()
    return yaml.safe_load(txt) or {}


def _merge(base: Dict[str, Any], update: Mapping[str, Any]) -> None:
    """Merge *update* into *base*; the logging section merges one level deep."""
    for key, value in update.items():
        if key == "logging" and isinstance(value, Mapping) and "logging" in base:
            base["logging"] = {**base["logging"], **value}
        else:
            base[key] = value


# Simulation
# ---------------------------------------------------------------------
@dataclass(slots=True)
class Simulation:
    """
    Facade that drives a set of regions through consecutive economic ticks.

    One call to `run` → *n* calls to `step`.
    """

    config: Config
    processor: TickProcessor
    store: InMemoryRegionStore
    rng: Generator
    t: int  # ticks completed
    _seed: int | None = dataclasses.field(default=None, init=False, repr=False)

    # ---------------------------------------------------------------------
    @classmethod
    def init(
        cls,
        config: str | Path | Mapping[str, Any] | None = None,
        *,
        regions: Iterable[Region] | None = None,
        **overrides: Any,  # anything here wins last
    ) -> Simulation:
        """
        Build a Simulation.

        Order of precedence (later overrides earlier):

            1. package defaults  (regionecon/defaults.yml)
            2. *config*  (Path / str / Mapping / None)
            3. explicit keyword arguments (**overrides)

        Raises
        ------
        ConfigurationError
            If the merged configuration is invalid.
        """
        # 1 + 2 + 3 → one merged dict
        cfg_dict: Dict[str, Any] = _package_defaults()
        _merge(cfg_dict, _read_yaml(config))
        _merge(cfg_dict, overrides)

        ConfigValidator.validate_config(cfg_dict)

        seed_val = cfg_dict.pop("seed", None)
        rng = make_generator(seed_val)

        log_config = cfg_dict.pop("logging", None)
        if log_config:
            relog.configure(log_config)

        cfg = Config.from_dict(cfg_dict)
        return cls._from_config(cfg, rng=rng, regions=regions, seed=seed_val)

    @classmethod
    def _from_config(
        cls,
        cfg: Config,
        *,
        rng: Generator,
        regions: Iterable[Region] | None,
        seed: int | None = None,
    ) -> Simulation:
        production = ProductionCalculator(
            productivity_factor=cfg.productivity_factor,
            labor_elasticity=cfg.labor_elasticity,
            capital_elasticity=cfg.capital_elasticity,
        )
        infrastructure = InfrastructureCalculator(
            efficiency_modifier=cfg.efficiency_modifier,
            decay_rate=cfg.decay_rate,
            maintenance_cost_factor=cfg.maintenance_cost_factor,
            max_level=cfg.max_infrastructure_level,
            growth_rate=cfg.infrastructure_growth_rate,
            growth_diminishing=cfg.infrastructure_growth_diminishing,
        )
        consumption = ConsumptionCalculator(
            base_consumption_rate=cfg.base_consumption_rate,
            wealth_consumption_exponent=cfg.wealth_consumption_exponent,
            unmet_demand_unrest_factor=cfg.unmet_demand_unrest_factor,
        )
        price = PriceCalculator(
            volatility_factor=cfg.volatility_factor,
            elasticities=dict(cfg.resource_elasticities),
            income_elasticities=dict(cfg.income_elasticities),
        )
        cycle = EconomicCycleCalculator(
            cycle_length=cfg.cycle_length,
            coefficients=cfg.phase_coefficients,
        )

        processor = TickProcessor(
            production,
            infrastructure,
            consumption,
            price,
            cycle,
            resource_types=cfg.resource_types,
            base_prices=cfg.initial_price,
            enable_cycles=cfg.enable_economic_cycles,
            income_adjusted_demand=cfg.income_adjusted_demand,
            shared_market=cfg.shared_market,
            price_shock_volatility=cfg.price_shock_volatility,
            rng=rng,
        )

        log.info(
            "Economy initialized: cycle_length=%d, resources=%s",
            cfg.cycle_length,
            list(cfg.resource_types),
        )
        sim = cls(
            config=cfg,
            processor=processor,
            store=InMemoryRegionStore(regions or ()),
            rng=rng,
            t=0,
        )
        sim._seed = seed
        return sim

    # convenience accessors
    # ---------------------------------------------------------------------
    @property
    def cycle(self) -> EconomicCycleCalculator:
        return self.processor.cycle

    @property
    def phase(self) -> CyclePhase:
        return self.processor.cycle.current_phase

    @property
    def prices(self) -> dict[str, float]:
        return dict(self.processor.prices)

    @property
    def regions(self) -> list[Region]:
        return self.store.get_all_regions()

    def add_region(self, region: Region) -> None:
        self.store.register_region(region)

    def get_region(self, region_id: str) -> Region | None:
        return self.store.get_region(region_id)

    def describe_economy(self) -> str:
        cycle = self.processor.cycle
        return (
            f"{cycle.get_economic_condition_description()} "
            f"[tick {cycle.current_tick}, progress {cycle.phase_progress:.0%}]"
        )

    # public API
    # ---------------------------------------------------------------------
    def step(
        self, investments: Mapping[str, tuple[float, float]] | None = None
    ) -> TickResult:
        """
        Advance the economy by exactly one tick.

        Parameters
        ----------
        investments : mapping, optional
            ``region_id -> (maintenance, development)`` spent from the
            region's wealth before the economic pass. Regions not listed
            invest nothing (and their infrastructure decays when
            ``apply_infrastructure_upkeep`` is enabled).
        """
        investments = investments or {}
        unknown = set(investments) - set(self.store.get_all_region_ids())
        if unknown:
            raise KeyError(f"Investments for unknown region(s): {sorted(unknown)}")

        if self.config.apply_infrastructure_upkeep or investments:
            for region in self.store.get_all_regions():
                if region.region_id in investments:
                    maintenance, development = investments[region.region_id]
                elif self.config.apply_infrastructure_upkeep:
                    maintenance, development = 0.0, 0.0
                else:
                    continue
                self.store.update_region(
                    self.processor.invest_in_infrastructure(
                        region, maintenance, development
                    )
                )

        result = self.processor.process_store(self.store)
        self.t += 1
        return result

    def run(self, n_ticks: int | None = None) -> SimulationResults:
        """
        Advance the simulation *n_ticks* steps
        (defaults to the configured ``n_ticks``) and collect time series.
        """
        n = n_ticks if n_ticks is not None else self.config.n_ticks
        collector = _DataCollector()
        for _ in range(int(n)):
            collector.capture(self.step())

        return collector.finalize(
            config=dataclasses.asdict(self.config),
            metadata={
                "seed": self._seed,
                "start_tick": self.t - int(n),
                "end_tick": self.t,
            },
        )
