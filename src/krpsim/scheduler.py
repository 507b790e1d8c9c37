"""Greedy parallel schedule generation.

At each decision cycle the scheduler credits every process that has finished,
then launches as many affordable eligible processes as the heuristic accepts.
Time jumps straight to the next finish cycle, so idle cycles cost nothing.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Mapping

from krpsim.bounds import compute_rbounds
from krpsim.ledger import Ledger
from krpsim.reachability import Reachability, filter_processes
from krpsim.types import ActiveEntry, CompletedEntry, ProcessDefinition

STOP_DELAY = "delay"
STOP_MAX_CYCLE = "max_cycle"
STOP_STARVATION = "starvation"

LaunchHook = Callable[[int, ProcessDefinition, Mapping[str, int]], None]


@dataclass(frozen=True)
class SchedulerConfig:
    """Caller-supplied limits for one run.

    delay is a wall-clock budget in seconds. max_cycle=None means no cycle
    limit. verbose and log_file are read by the presentation layer only.
    """

    delay: float
    max_cycle: int | None = None
    verbose: bool = False
    log_file: Path | None = None

    def __post_init__(self) -> None:
        if self.delay < 0:
            raise ValueError(f"delay must be >= 0, got {self.delay}")
        if self.max_cycle is not None and self.max_cycle < 0:
            raise ValueError(f"max_cycle must be >= 0, got {self.max_cycle}")


@dataclass
class ScheduleResult:
    """Outcome of a run. Every stop reason is a normal termination."""

    trace: list[CompletedEntry]
    stocks: dict[str, int]
    last_cycle: int
    stop_reason: str
    active: list[ActiveEntry] = field(default_factory=list)
    reachability: Reachability | None = None
    rbounds: dict[str, int] = field(default_factory=dict)

    @property
    def eligible(self) -> tuple[ProcessDefinition, ...]:
        return self.reachability.eligible if self.reachability else ()

    @property
    def priority(self) -> dict[str, int]:
        return dict(self.reachability.priority) if self.reachability else {}

    @property
    def no_more_cycle(self) -> int:
        """Cycle reported by the 'no more process doable' marker."""
        return self.last_cycle + 1


def selection_key(process: ProcessDefinition, goals: list[str]) -> tuple:
    """Sort key, larger is better.

    For each goal in order: the process's net score on that goal (-inf when
    it does not need the goal), then the sum of its scores on every other
    needed resource.
    """
    score = process.score
    key: list[float] = []
    for goal in goals:
        key.append(score.get(goal, float("-inf")))
        key.append(sum(v for r, v in score.items() if r != goal))
    return tuple(key)


class Scheduler:
    """Owns the committed and theoretical ledgers for one scheduling run.

    The committed ledger is debited at launch and credited at finish. The
    theoretical ledger is resynced to the committed one after each batch of
    completions and then also receives the outputs of processes launched in
    the current cycle, so the Rbound check sees their eventual effect.
    """

    def __init__(
        self,
        stocks: Mapping[str, int],
        catalog: list[ProcessDefinition],
        goals: list[str],
        config: SchedulerConfig,
        clock: Callable[[], float] = time.monotonic,
        on_launch: LaunchHook | None = None,
    ) -> None:
        self.goals = list(goals)
        self.config = config
        self.reachability = filter_processes(list(catalog), self.goals)
        self.rbounds = compute_rbounds(self.reachability.eligible, self.goals)

        self.committed = Ledger(dict(stocks))
        self.theoretical = self.committed.copy()
        self.cycle = 0
        self.active: list[ActiveEntry] = []
        self.completed: list[CompletedEntry] = []

        self._clock = clock
        self._on_launch = on_launch
        self._began: float | None = None
        self._free_cycle: int | None = None
        self._free_launched: set[str] = set()

    # -- termination -------------------------------------------------------

    def _out_of_time(self) -> bool:
        return (
            self._began is not None
            and self._clock() - self._began > self.config.delay
        )

    def stop_reason(self, first_iteration: bool) -> str | None:
        """Why the main loop should stop now, or None to keep going."""
        if self._out_of_time():
            return STOP_DELAY
        if self.config.max_cycle is not None and self.cycle >= self.config.max_cycle:
            return STOP_MAX_CYCLE
        if not first_iteration and not self.active:
            return STOP_STARVATION
        return None

    # -- one decision cycle ------------------------------------------------

    def next_cycle(self) -> int:
        """Earliest finish among active entries; current cycle when idle."""
        if not self.active:
            return self.cycle
        return min(entry.finish for entry in self.active)

    def complete_due(self) -> list[CompletedEntry]:
        """Credit and retire every active entry finished by the current cycle."""
        done = [e for e in self.active if e.finish <= self.cycle]
        if not done:
            return []
        finished: list[CompletedEntry] = []
        for entry in done:
            self.committed.credit(entry.process.output)
            finished.append(CompletedEntry(entry.start, entry.process.name))
        self.active = [e for e in self.active if e.finish > self.cycle]
        self.completed.extend(finished)
        self.theoretical = self.committed.copy()
        return finished

    def affordable(self) -> list[ProcessDefinition]:
        """Eligible processes the committed ledger can pay for, best first.

        The sort is stable: candidates with equal keys keep catalog order.
        """
        candidates = [
            p for p in self.reachability.eligible if self.committed.covers(p.need)
        ]
        return sorted(
            candidates, key=lambda p: selection_key(p, self.goals), reverse=True
        )

    def select(self, candidates: list[ProcessDefinition]) -> ProcessDefinition | None:
        """Pick the process to launch from candidates sorted by `affordable`.

        A process producing a goal wins outright. Otherwise take the first
        process with an output that is unbounded or still below its Rbound
        in the theoretical ledger. None when nothing qualifies.
        """
        for process in candidates:
            if any(process.produces(goal) for goal in self.goals):
                return process
        for process in candidates:
            for resource in process.output:
                bound = self.rbounds.get(resource)
                if bound is None or self.theoretical[resource] < bound:
                    return process
        return None

    def launch(self, process: ProcessDefinition) -> ActiveEntry:
        """Commit `process` at the current cycle."""
        if self._on_launch is not None:
            self._on_launch(self.cycle, process, self.committed.snapshot())
        entry = ActiveEntry(self.cycle, process)
        self.active.append(entry)
        self.committed.debit(process.need)
        self.theoretical.debit(process.need)
        self.theoretical.credit(process.output)
        return entry

    def launch_affordable(self) -> list[ActiveEntry]:
        """Launch processes at the current cycle until none is selected.

        A free process (one that consumes nothing) is launched at most once
        per cycle, otherwise it would stay affordable forever.
        """
        if self._free_cycle != self.cycle:
            self._free_cycle = self.cycle
            self._free_launched = set()

        def candidates() -> list[ProcessDefinition]:
            return [p for p in self.affordable() if p.name not in self._free_launched]

        launched: list[ActiveEntry] = []
        pending = candidates()
        while pending:
            process = self.select(pending)
            if process is None or self._out_of_time():
                break
            launched.append(self.launch(process))
            if process.free:
                self._free_launched.add(process.name)
            pending = candidates()
        return launched

    # -- driver ------------------------------------------------------------

    def run(self) -> ScheduleResult:
        """Run to termination and return the trace sorted by cycle.

        Resources consumed by processes still active at the end are not
        refunded: `stocks` is the committed ledger as it stands.
        """
        self._began = self._clock()
        first_iteration = True
        while True:
            reason = self.stop_reason(first_iteration)
            if reason is not None:
                break
            first_iteration = False
            self.cycle = self.next_cycle()
            self.complete_due()
            self.launch_affordable()

        trace = sorted(self.completed, key=lambda e: e.cycle)
        return ScheduleResult(
            trace=trace,
            stocks=self.committed.snapshot(),
            last_cycle=self.cycle,
            stop_reason=reason,
            active=list(self.active),
            reachability=self.reachability,
            rbounds=dict(self.rbounds),
        )


def schedule(
    stocks: Mapping[str, int],
    catalog: list[ProcessDefinition],
    goals: list[str],
    config: SchedulerConfig,
    clock: Callable[[], float] = time.monotonic,
) -> ScheduleResult:
    """Build a Scheduler and run it once."""
    return Scheduler(stocks, catalog, goals, config, clock=clock).run()
