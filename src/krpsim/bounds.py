"""Rbounds: the most of each intermediate resource any eligible process needs."""

from __future__ import annotations

from typing import Iterable

from krpsim.types import ProcessDefinition


def compute_rbounds(
    eligible: Iterable[ProcessDefinition],
    goals: Iterable[str],
) -> dict[str, int]:
    """Max need per resource over `eligible`, goal resources excluded.

    Holding more than this of an intermediate resource cannot help any single
    launch, so the scheduler stops feeding it once the bound is reached.
    """
    goal_set = set(goals)
    bounds: dict[str, int] = {}
    for process in eligible:
        for resource, qty in process.need.items():
            if resource in goal_set:
                continue
            bounds[resource] = max(bounds.get(resource, qty), qty)
    return bounds
