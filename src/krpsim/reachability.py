"""Backward reachability from the goal resources.

Finds the processes that can contribute, directly or through intermediate
resources, to producing a goal, and how far each needed resource sits from
the goal.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from typing import Iterable

from krpsim.types import ProcessDefinition

# Priority given to goal resources once traversal is done.
GOAL_PRIORITY = -2


@dataclass(frozen=True)
class Reachability:
    """Result of the backward walk. Computed once per scheduling run."""

    eligible: tuple[ProcessDefinition, ...]
    priority: dict[str, int] = field(default_factory=dict)

    @property
    def names(self) -> list[str]:
        return [p.name for p in self.eligible]

    def __bool__(self) -> bool:
        return bool(self.eligible)


def producers_by_resource(
    catalog: Iterable[ProcessDefinition],
) -> dict[str, list[ProcessDefinition]]:
    """Adjacency resource -> processes whose output contains it, catalog order."""
    producers: dict[str, list[ProcessDefinition]] = {}
    for process in catalog:
        for resource in process.output:
            producers.setdefault(resource, []).append(process)
    return producers


def filter_processes(
    catalog: list[ProcessDefinition],
    goals: list[str],
) -> Reachability:
    """Walk need-dependencies backwards from `goals`.

    A worklist of (resource, depth) pairs starts with every goal at depth 0.
    Each producer of a searched resource lowers the priority of its needed
    resources to the current depth; the first time a producer is seen it is
    marked eligible and its needs are queued at depth + 1. Processes are
    keyed by name in the visited set, so cyclic graphs terminate.

    Args:
        catalog: Every known process, in description order.
        goals: Resources to optimize.

    Returns:
        Reachability with eligible processes in catalog order and the
        priority map. Goal resources get GOAL_PRIORITY.
    """
    producers = producers_by_resource(catalog)
    priority: dict[str, int] = {}
    visited: set[str] = set()

    worklist: deque[tuple[str, int]] = deque((goal, 0) for goal in goals)
    while worklist:
        resource, depth = worklist.popleft()
        for process in producers.get(resource, ()):
            for needed in process.need:
                priority[needed] = min(priority.get(needed, depth), depth)
            if process.name in visited:
                continue
            visited.add(process.name)
            worklist.extend((needed, depth + 1) for needed in process.need)

    for goal in goals:
        priority[goal] = GOAL_PRIORITY

    eligible = tuple(p for p in catalog if p.name in visited)
    return Reachability(eligible=eligible, priority=priority)
