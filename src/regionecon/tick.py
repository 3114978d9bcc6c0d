# src/regionecon/tick.py
"""
Per-tick orchestration.

One economic tick threads every region through the calculators in a fixed
order:

1. infrastructure efficiency multiplier from the region's level
2. Cobb-Douglas output × efficiency, scaled by the ``Production`` effect
3. output is added to wealth and becomes the region's ``production``
4. expected consumption from the new wealth (``Consumption`` effect),
   unmet demand and unrest (``Unrest`` effect); realized consumption,
   the part of expected consumption that supply covered, is removed from
   wealth; wealth and production are clamped at 0
5. resource prices from summed production (supply) and expected
   consumption (demand), scaled by the ``PriceInflation`` effect
6. the shared cycle advances exactly once

Steps 1–4 are a pure function of one region snapshot (``process_region``)
and may run in parallel. In shared-market mode step 4 draws on the pooled
production of every region, so steps 1–3 finish for all regions first.
Steps 5–6 run once per tick on the calling thread.
"""
from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from concurrent.futures import Executor
from dataclasses import dataclass, field

import numpy as np
from numpy.random import Generator

from regionecon.calculators import (
    ConsumptionCalculator,
    CyclePhase,
    EconomicCycleCalculator,
    Effect,
    InfrastructureCalculator,
    PriceCalculator,
    ProductionCalculator,
)
from regionecon.helpers import make_generator, round_half_even
from regionecon.logging import getLogger
from regionecon.region import Region, RegionStore

__all__ = ["RegionOutcome", "TickProcessor", "TickResult"]

log = getLogger(__name__)

# Bounds of the random market shock (fractions of price)
SUPPLY_SHOCK_RANGE = (-0.1, 0.1)
DEMAND_TREND_RANGE = (-0.05, 0.05)


@dataclass(slots=True, frozen=True)
class RegionOutcome:
    """Everything one region's pass produced, including its new snapshot."""

    region: Region
    efficiency: float
    raw_output: float
    output: float
    expected_consumption: float
    realized_consumption: int
    unmet_demand: float
    unrest_delta: float
    supply: dict[str, float] = field(default_factory=dict)
    demand: dict[str, float] = field(default_factory=dict)


@dataclass(slots=True, frozen=True)
class _Produced:
    region: Region
    level: float
    efficiency: float
    raw_output: float
    output: float
    production: int
    wealth: int


@dataclass(slots=True)
class TickResult:
    """Output of one tick across all regions."""

    tick: int
    regions: list[Region]
    outcomes: list[RegionOutcome]
    prices: dict[str, float]
    supply: dict[str, float]
    demand: dict[str, float]
    phase: CyclePhase  # phase whose coefficients applied this tick
    next_phase: CyclePhase  # phase after the cycle advanced

    @property
    def total_wealth(self) -> int:
        return sum(r.wealth for r in self.regions)

    @property
    def total_production(self) -> int:
        return sum(r.production for r in self.regions)

    @property
    def total_unrest_delta(self) -> float:
        return float(sum(o.unrest_delta for o in self.outcomes))


class TickProcessor:
    """
    Runs economic ticks over region snapshots.

    The cycle calculator is passed in explicitly; several processors (or
    tests) can each own an independent cycle.

    Parameters
    ----------
    production, infrastructure, consumption, price : calculators
        Leaf calculators.
    cycle : EconomicCycleCalculator
        Shared cycle; advanced once per :meth:`process_tick`.
    resource_types : sequence of str
        Resources whose prices are tracked. Regional supply and demand
        are split evenly across them.
    base_prices : mapping or float
        Base price per resource (a single float applies to all).
    enable_cycles : bool
        If False, every cycle effect is neutral and the clock never moves.
    income_adjusted_demand : bool
        Scale regional demand by wealth (see
        :meth:`PriceCalculator.adjust_demand_by_income`).
    shared_market : bool
        If True, regions consume from the pooled supply of all regions,
        each getting its wealth share of every resource, and unrest
        grows with the square of the unmet share. Otherwise a region
        only consumes its own production.
    price_shock_volatility : float
        Volatility of the random market shock; 0 disables it.
    rng : Generator or int, optional
        Random source for the market shock.
    """

    def __init__(
        self,
        production: ProductionCalculator,
        infrastructure: InfrastructureCalculator,
        consumption: ConsumptionCalculator,
        price: PriceCalculator,
        cycle: EconomicCycleCalculator,
        *,
        resource_types: Sequence[str] = (
            "Food",
            "Luxury",
            "RawMaterial",
            "Manufacturing",
        ),
        base_prices: Mapping[str, float] | float = 100.0,
        enable_cycles: bool = True,
        income_adjusted_demand: bool = False,
        shared_market: bool = False,
        price_shock_volatility: float = 0.0,
        rng: Generator | int | None = None,
    ) -> None:
        self.production = production
        self.infrastructure = infrastructure
        self.consumption = consumption
        self.price = price
        self.cycle = cycle

        self.resource_types = tuple(resource_types)
        if isinstance(base_prices, Mapping):
            self.base_prices = {
                r: float(base_prices.get(r, 100.0)) for r in self.resource_types
            }
        else:
            self.base_prices = {r: float(base_prices) for r in self.resource_types}
        self.prices = dict(self.base_prices)

        self.enable_cycles = enable_cycles
        self.income_adjusted_demand = income_adjusted_demand
        self.shared_market = shared_market
        self.price_shock_volatility = price_shock_volatility
        self.rng = make_generator(rng)
        self.tick = 0

    # helpers
    # ---------------------------------------------------------------------
    def _cycle_effect(self, value: float, effect_name: str) -> float:
        if not self.enable_cycles:
            return value
        return float(self.cycle.apply_cycle_effect(value, effect_name))

    def _split(self, amount: float) -> dict[str, float]:
        if not self.resource_types:
            return {}
        share = amount / len(self.resource_types)
        return {r: share for r in self.resource_types}

    def get_resource_price(self, resource_type: str) -> float:
        """Current price of *resource_type* (its base price if never computed)."""
        return self.prices.get(
            resource_type, self.base_prices.get(resource_type, 100.0)
        )

    # per-region pass
    # ---------------------------------------------------------------------
    def _produce(self, region: Region) -> _Produced:
        """Steps 1–3: efficiency, cycle-scaled output, production into wealth."""
        level = max(region.infrastructure_level, 0.0)

        # 1. infrastructure efficiency
        efficiency = float(self.infrastructure.calculate_efficiency_boost(level))

        # 2. production
        raw_output = float(
            self.production.calculate_output(region.labor_available, level)
        )
        output = self._cycle_effect(raw_output * efficiency, Effect.PRODUCTION)

        # 3. production feeds wealth
        production = max(round_half_even(output), 0)
        return _Produced(
            region=region,
            level=level,
            efficiency=efficiency,
            raw_output=raw_output,
            output=output,
            production=production,
            wealth=region.wealth + production,
        )

    def _consume(
        self, produced: _Produced, available: Mapping[str, float] | None = None
    ) -> RegionOutcome:
        """
        Step 4. Without *available* the region lives off its own
        production; otherwise it draws each resource from *available*.
        """
        region = produced.region
        production = produced.production
        wealth = produced.wealth

        expected = self._cycle_effect(
            float(self.consumption.calculate_expected_consumption(wealth)),
            Effect.CONSUMPTION,
        )
        if available is None:
            unmet = float(
                self.consumption.calculate_unmet_demand(expected, production)
            )
            unrest = float(self.consumption.calculate_unrest_delta(unmet))
            consumed = expected - unmet
        else:
            allocation = {r: 1.0 for r in self.resource_types}
            consumed, _, unrest = self.consumption.process_region_consumption(
                wealth, available, allocation, expected=expected
            )
            unmet = max(expected - consumed, 0.0)
        unrest_delta = self._cycle_effect(unrest, Effect.UNREST)

        # only what was actually obtained is paid for
        realized = min(round_half_even(consumed), max(wealth, 0))
        wealth = max(wealth - realized, 0)

        updated = region.evolve(
            wealth=wealth,
            production=production,
            unrest=region.unrest + unrest_delta,
        )

        # supply / demand contribution for step 5
        supply = self._split(float(production))
        demand = self._split(expected)
        if self.income_adjusted_demand:
            demand = {
                r: self.price.adjust_demand_by_income(d, wealth, r)
                for r, d in demand.items()
            }

        log.deep(
            "  %s: level=%.3f eff=%.4f raw=%.4f out=%.4f expected=%.4f unmet=%.4f",
            region.region_id,
            produced.level,
            produced.efficiency,
            produced.raw_output,
            produced.output,
            expected,
            unmet,
        )
        log.debug(
            "  Region %s: production=%d wealth %d -> %d, unrest %+.3f",
            region.region_id,
            production,
            region.wealth,
            wealth,
            unrest_delta,
        )

        return RegionOutcome(
            region=updated,
            efficiency=produced.efficiency,
            raw_output=produced.raw_output,
            output=produced.output,
            expected_consumption=expected,
            realized_consumption=realized,
            unmet_demand=unmet,
            unrest_delta=unrest_delta,
            supply=supply,
            demand=demand,
        )

    def process_region(self, region: Region) -> RegionOutcome:
        """
        Run steps 1–4 for one region. Pure: reads only the snapshot, the
        calculators and the (unchanging within a tick) cycle phase.
        """
        return self._consume(self._produce(region))

    def _shared_market_outcomes(
        self, snapshot: list[Region], executor: Executor | None
    ) -> list[RegionOutcome]:
        """
        Steps 1–4 with consumption drawn from the pooled supply: each
        region may use its wealth share of every resource produced.
        """
        if executor is None:
            produced = [self._produce(r) for r in snapshot]
        else:
            produced = list(executor.map(self._produce, snapshot))

        pooled = self._split(float(sum(p.production for p in produced)))
        total = sum(max(p.wealth, 0) for p in produced)

        def available(p: _Produced) -> dict[str, float]:
            share = max(p.wealth, 0) / total if total > 0 else 0.0
            return {r: amount * share for r, amount in pooled.items()}

        if executor is None:
            return [self._consume(p, available(p)) for p in produced]
        return list(
            executor.map(self._consume, produced, [available(p) for p in produced])
        )

    # global steps
    # ---------------------------------------------------------------------
    def update_prices(
        self, supply: Mapping[str, float], demand: Mapping[str, float]
    ) -> dict[str, float]:
        """Step 5: refresh every tracked price from total supply and demand."""
        for resource in self.resource_types:
            s = supply.get(resource, 0.0)
            d = demand.get(resource, 0.0)
            new_price = float(
                self.price.calculate_price(self.base_prices[resource], s, d, resource)
            )
            new_price = self._cycle_effect(new_price, Effect.PRICE_INFLATION)

            if self.price_shock_volatility > 0.0:
                supply_shock = self.rng.uniform(*SUPPLY_SHOCK_RANGE)
                demand_trend = self.rng.uniform(*DEMAND_TREND_RANGE)
                new_price = self.price.calculate_price_shock(
                    new_price, supply_shock, demand_trend, self.price_shock_volatility
                )

            log.debug(
                "  Resource %s: supply=%.2f demand=%.2f price %.2f -> %.2f",
                resource,
                s,
                d,
                self.prices.get(resource, 0.0),
                new_price,
            )
            self.prices[resource] = new_price
        return dict(self.prices)

    def process_tick(
        self, regions: Iterable[Region], executor: Executor | None = None
    ) -> TickResult:
        """
        Run one full tick over *regions* and return the updated snapshots.

        Parameters
        ----------
        regions : iterable of Region
            Snapshots to process; they are not modified.
        executor : concurrent.futures.Executor, optional
            If given, the per-region pass is fanned out with
            ``executor.map``. The cycle still advances once, here.
        """
        snapshot = list(regions)
        phase = self.cycle.current_phase
        self.tick += 1
        log.info(
            "----- Economic tick %d (%s, %d regions) -----",
            self.tick,
            phase.label,
            len(snapshot),
        )

        if self.shared_market:
            outcomes = self._shared_market_outcomes(snapshot, executor)
        elif executor is None:
            outcomes = [self.process_region(r) for r in snapshot]
        else:
            outcomes = list(executor.map(self.process_region, snapshot))

        supply = {r: 0.0 for r in self.resource_types}
        demand = {r: 0.0 for r in self.resource_types}
        for outcome in outcomes:
            for r in self.resource_types:
                supply[r] += outcome.supply.get(r, 0.0)
                demand[r] += outcome.demand.get(r, 0.0)

        prices = self.update_prices(supply, demand)

        # 6. the cycle is global: advance once per tick, never per region
        if self.enable_cycles:
            self.cycle.advance_cycle()

        updated = [o.region for o in outcomes]
        if updated:
            log.info(
                "  total wealth=%d total production=%d mean unrest delta=%.3f",
                sum(r.wealth for r in updated),
                sum(r.production for r in updated),
                float(np.mean([o.unrest_delta for o in outcomes])),
            )
        else:
            log.warning("No regions available for economic processing")

        return TickResult(
            tick=self.tick,
            regions=updated,
            outcomes=outcomes,
            prices=prices,
            supply=supply,
            demand=demand,
            phase=phase,
            next_phase=self.cycle.current_phase,
        )

    def process_store(
        self, store: RegionStore, executor: Executor | None = None
    ) -> TickResult:
        """Run one tick over every region in *store* and write results back."""
        regions = []
        for region_id in store.get_all_region_ids():
            region = store.get_region(region_id)
            if region is not None:
                regions.append(region)
        result = self.process_tick(regions, executor=executor)
        for region in result.regions:
            store.update_region(region)
        return result

    # investment
    # ---------------------------------------------------------------------
    def invest_in_infrastructure(
        self, region: Region, maintenance: float = 0.0, development: float = 0.0
    ) -> Region:
        """
        Pay for infrastructure upkeep and development out of the region's
        wealth and apply one tick of decay/growth.

        Spending is capped at the available wealth, maintenance first.
        Development is scaled by the ``Investment`` cycle effect. With no
        investment at all this is plain decay.
        """
        wealth = max(region.wealth, 0)
        spent_maintenance = min(int(max(maintenance, 0.0)), wealth)
        wealth -= spent_maintenance
        spent_development = min(int(max(development, 0.0)), wealth)
        wealth -= spent_development

        effective_development = self._cycle_effect(
            float(spent_development), Effect.INVESTMENT
        )
        new_level = float(
            self.infrastructure.update_infrastructure(
                region.infrastructure_level, spent_maintenance, effective_development
            )
        )
        log.debug(
            "  Region %s infrastructure: %.3f -> %.3f (maintenance=%d, development=%d)",
            region.region_id,
            region.infrastructure_level,
            new_level,
            spent_maintenance,
            spent_development,
        )
        return region.evolve(wealth=wealth, infrastructure_level=new_level)
