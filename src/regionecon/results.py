"""
Simulation results container for regionecon.

This module provides the SimulationResults class that holds the per-tick
time series of a run and exports them to pandas DataFrames.

Note: pandas is an optional dependency. It is only required for
``SimulationResults.to_dataframe``. Install with:
pip install regionecon[pandas] or pip install pandas
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

import numpy as np
from numpy.typing import NDArray

if TYPE_CHECKING:  # pragma: no cover
    from pandas import DataFrame

    from regionecon.tick import TickResult


REGION_VARIABLES = ("wealth", "production", "unrest", "infrastructure_level")


def _import_pandas() -> Any:
    """
    Lazily import pandas with helpful error message if not installed.

    Raises
    ------
    ImportError
        If pandas is not installed.
    """
    try:
        import pandas as pd

        return pd
    except ImportError:  # pragma: no cover
        raise ImportError(
            "pandas is required for DataFrame export methods. "
            "Install it with: pip install pandas"
        ) from None


class _DataCollector:
    """
    Internal helper that records one row per tick.

    Regions may join a run late; their earlier ticks are filled with NaN
    when the collector is finalized.
    """

    def __init__(self) -> None:
        self.economy_data: dict[str, list[float]] = defaultdict(list)
        self.price_data: dict[str, list[float]] = defaultdict(list)
        self.region_rows: list[dict[str, dict[str, float]]] = []
        self.region_ids: list[str] = []

    def capture(self, result: TickResult) -> None:
        self.economy_data["tick"].append(result.tick)
        self.economy_data["total_wealth"].append(result.total_wealth)
        self.economy_data["total_production"].append(result.total_production)
        self.economy_data["total_unrest_delta"].append(result.total_unrest_delta)
        self.economy_data["phase"].append(int(result.phase))

        for resource, price in result.prices.items():
            self.price_data[resource].append(price)

        row: dict[str, dict[str, float]] = {}
        for region in result.regions:
            if region.region_id not in self.region_ids:
                self.region_ids.append(region.region_id)
            row[region.region_id] = {
                name: float(getattr(region, name)) for name in REGION_VARIABLES
            }
        self.region_rows.append(row)

    def finalize(
        self, config: dict[str, Any], metadata: dict[str, Any]
    ) -> SimulationResults:
        n_ticks = len(self.region_rows)
        index = {rid: j for j, rid in enumerate(self.region_ids)}

        region_data: dict[str, NDArray[np.float64]] = {
            name: np.full((n_ticks, len(self.region_ids)), np.nan)
            for name in REGION_VARIABLES
        }
        for t, row in enumerate(self.region_rows):
            for rid, values in row.items():
                for name, value in values.items():
                    region_data[name][t, index[rid]] = value

        return SimulationResults(
            economy_data={k: np.asarray(v) for k, v in self.economy_data.items()},
            price_data={k: np.asarray(v, dtype=np.float64) for k, v in self.price_data.items()},
            region_data=region_data,
            region_ids=list(self.region_ids),
            config=config,
            metadata={**metadata, "n_ticks": n_ticks},
        )


@dataclass(slots=True)
class SimulationResults:
    """
    Container for simulation results with convenient data access methods.

    Attributes
    ----------
    economy_data : dict
        Economy-wide series with shape (n_ticks,): ``tick``,
        ``total_wealth``, ``total_production``, ``total_unrest_delta``,
        ``phase`` (CyclePhase value that applied during the tick).
    price_data : dict
        Price series per resource type, shape (n_ticks,).
    region_data : dict
        Per-region series with shape (n_ticks, n_regions) for
        ``wealth``, ``production``, ``unrest``, ``infrastructure_level``.
        Column order follows ``region_ids``.
    region_ids : list of str
        Region identifiers in column order.
    config : dict
        Configuration parameters used for this simulation.
    metadata : dict
        Run metadata (seed, n_ticks, ...).

    Examples
    --------
    >>> sim = rc.Simulation.init(regions=[rc.Region("north", 100, 0, 100.0, 5.0)])
    >>> results = sim.run(n_ticks=24)
    >>> results.economy_data["total_wealth"][-1]
    >>> df = results.to_dataframe()
    """

    economy_data: dict[str, NDArray[Any]] = field(default_factory=dict)
    price_data: dict[str, NDArray[np.float64]] = field(default_factory=dict)
    region_data: dict[str, NDArray[np.float64]] = field(default_factory=dict)
    region_ids: list[str] = field(default_factory=list)
    config: dict[str, Any] = field(default_factory=dict)
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def n_ticks(self) -> int:
        return int(self.metadata.get("n_ticks", 0))

    def region_series(self, region_id: str, variable: str = "wealth") -> NDArray[np.float64]:
        """
        Time series of one variable for one region.

        Raises
        ------
        KeyError
            If the region or variable is unknown.
        """
        if variable not in self.region_data:
            raise KeyError(
                f"Unknown region variable '{variable}'. "
                f"Available: {list(self.region_data)}"
            )
        try:
            column = self.region_ids.index(region_id)
        except ValueError:
            raise KeyError(f"Region '{region_id}' not in results") from None
        return self.region_data[variable][:, column]

    def to_dataframe(
        self,
        include_prices: bool = True,
        include_regions: bool = False,
        variables: list[str] | None = None,
    ) -> DataFrame:
        """
        Export results to a pandas DataFrame indexed by tick.

        Parameters
        ----------
        include_prices : bool, default=True
            Add one ``price_<resource>`` column per tracked resource.
        include_regions : bool, default=False
            Add ``<region_id>.<variable>`` columns.
        variables : list of str, optional
            Region variables to include (default: all).

        Raises
        ------
        ImportError
            If pandas is not installed.
        """
        pd = _import_pandas()

        columns: dict[str, Any] = {
            k: v for k, v in self.economy_data.items() if k != "tick"
        }
        if include_prices:
            for resource, series in self.price_data.items():
                columns[f"price_{resource}"] = series
        if include_regions:
            for name in variables or list(self.region_data):
                data = self.region_data[name]
                for j, rid in enumerate(self.region_ids):
                    columns[f"{rid}.{name}"] = data[:, j]

        index = self.economy_data.get("tick", np.arange(1, self.n_ticks + 1))
        return pd.DataFrame(columns, index=pd.Index(index, name="tick"))

    def __repr__(self) -> str:
        """String representation showing summary information."""
        resources = ", ".join(self.price_data) if self.price_data else "None"
        return (
            f"SimulationResults("
            f"ticks={self.n_ticks}, "
            f"regions={len(self.region_ids)}, "
            f"resources=[{resources}])"
        )
