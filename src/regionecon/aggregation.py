# src/regionecon/aggregation.py
"""
Nation and global totals over region snapshots.

Read-only consumers of tick output: nothing here writes to a region.
Regions without a ``nation_id`` count towards global totals only.
"""
from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable

import numpy as np

from regionecon.region import Region


def total_wealth(regions: Iterable[Region]) -> int:
    return int(np.sum([r.wealth for r in regions], dtype=np.int64))


def total_production(regions: Iterable[Region]) -> int:
    return int(np.sum([r.production for r in regions], dtype=np.int64))


def _by_nation(regions: Iterable[Region]) -> dict[str, list[Region]]:
    grouped: dict[str, list[Region]] = defaultdict(list)
    for region in regions:
        if region.nation_id is not None:
            grouped[region.nation_id].append(region)
    return dict(grouped)


def nation_wealth(regions: Iterable[Region]) -> dict[str, int]:
    return {
        nation: total_wealth(members)
        for nation, members in _by_nation(regions).items()
    }


def nation_production(regions: Iterable[Region]) -> dict[str, int]:
    return {
        nation: total_production(members)
        for nation, members in _by_nation(regions).items()
    }


def nation_average_infrastructure(regions: Iterable[Region]) -> dict[str, float]:
    return {
        nation: float(np.mean([r.infrastructure_level for r in members]))
        for nation, members in _by_nation(regions).items()
    }


def strongest_nation_summary(regions: Iterable[Region]) -> str:
    """Multi-line summary of the wealthiest nation."""
    grouped = _by_nation(regions)
    if not grouped:
        return "No nations available"

    wealth = {nation: total_wealth(members) for nation, members in grouped.items()}
    # ties resolve to the first nation encountered
    strongest = max(wealth, key=wealth.__getitem__)
    members = grouped[strongest]
    avg_infra = float(np.mean([r.infrastructure_level for r in members]))

    return (
        f"Strongest Nation: {strongest}\n"
        f"Total Wealth: {wealth[strongest]}\n"
        f"Total Production: {total_production(members)}\n"
        f"Average Infrastructure: {avg_infra:.1f}\n"
        f"Regions: {len(members)}"
    )
