"""
Region snapshot and the region-store contract.

The economic core does not own region persistence. It consumes immutable
:class:`Region` snapshots and hands back updated copies; whoever stores
regions implements :class:`RegionStore`.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, replace
from typing import Protocol, runtime_checkable

import numpy as np

from regionecon.logging import getLogger

log = getLogger(__name__)


@dataclass(slots=True, frozen=True)
class Region:
    """
    Value snapshot of one region.

    Parameters
    ----------
    region_id : str
        Identifier, unique within a store.
    wealth : int
        Accumulated wealth; never negative after a tick.
    production : int
        Output computed by the last tick; never negative after a tick.
    labor_available : float
        Labor supplied by the population layer (external).
    infrastructure_level : float
        Canonical infrastructure measure (0..N). Quality is derived from
        it, see :meth:`infrastructure_quality`.
    unrest : float
        Accumulated unrest; each tick adds its unrest delta.
    nation_id : str, optional
        Owning nation, used by aggregation only.
    name : str, optional
        Display name.
    """

    region_id: str
    wealth: int = 0
    production: int = 0
    labor_available: float = 0.0
    infrastructure_level: float = 0.0
    unrest: float = 0.0
    nation_id: str | None = None
    name: str | None = None

    def infrastructure_quality(self, max_level: float = 10.0) -> float:
        """Infrastructure as a 0..1 quality (``level / max_level``, clipped)."""
        return float(np.clip(self.infrastructure_level / max_level, 0.0, 1.0))

    def with_infrastructure_quality(
        self, quality: float, max_level: float = 10.0
    ) -> Region:
        """Copy with the level set from a 0..1 quality."""
        level = float(np.clip(quality, 0.0, 1.0)) * max_level
        return replace(self, infrastructure_level=level)

    def evolve(self, **changes: object) -> Region:
        """Copy with *changes* applied (``dataclasses.replace``)."""
        return replace(self, **changes)  # type: ignore[arg-type]


@runtime_checkable
class RegionStore(Protocol):
    """
    External region storage, readable and writable by identifier.
    """

    def get_region(self, region_id: str) -> Region | None:
        """Region with *region_id*, or ``None`` if unknown."""
        ...

    def get_all_region_ids(self) -> list[str]:
        """Identifiers of every stored region."""
        ...

    def update_region(self, region: Region) -> None:
        """Store *region*, registering it if its id is new."""
        ...


class InMemoryRegionStore:
    """Dict-backed :class:`RegionStore` preserving registration order."""

    def __init__(self, regions: Iterable[Region] = ()) -> None:
        self._regions: dict[str, Region] = {}
        for region in regions:
            self.register_region(region)

    def register_region(self, region: Region) -> None:
        """Add *region* unless its id is already registered."""
        if region.region_id in self._regions:
            log.debug("Region '%s' already registered", region.region_id)
            return
        self._regions[region.region_id] = region

    def get_region(self, region_id: str) -> Region | None:
        return self._regions.get(region_id)

    def get_all_region_ids(self) -> list[str]:
        return list(self._regions)

    def get_all_regions(self) -> list[Region]:
        return list(self._regions.values())

    def update_region(self, region: Region) -> None:
        self._regions[region.region_id] = region

    def total_wealth(self) -> int:
        return sum(r.wealth for r in self._regions.values())

    def __len__(self) -> int:
        return len(self._regions)

    def __iter__(self) -> Iterator[Region]:
        return iter(list(self._regions.values()))

    def __contains__(self, region_id: object) -> bool:
        return region_id in self._regions
