"""Shared test fixtures and data loading for krpsim.

All test data lives in data/fixtures/: description files in catalogs/,
trace files in traces/ and expected results as JSON in scenarios/.
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest

# ---------------------------------------------------------------------------
# Paths
# ---------------------------------------------------------------------------
FIXTURES_DIR = Path(__file__).resolve().parent.parent / "data" / "fixtures"
CATALOGS_DIR = FIXTURES_DIR / "catalogs"
TRACES_DIR = FIXTURES_DIR / "traces"
SCENARIOS_DIR = FIXTURES_DIR / "scenarios"


# ---------------------------------------------------------------------------
# Data loaders
# ---------------------------------------------------------------------------
def _load_json(path: Path):
    with open(path) as f:
        return json.load(f)


def load_scenarios(name: str):
    """Load a scenario file from data/fixtures/scenarios/{name}.json."""
    return _load_json(SCENARIOS_DIR / f"{name}.json")


def catalog_path(name: str) -> Path:
    return CATALOGS_DIR / f"{name}.krpsim"


def trace_path(name: str) -> Path:
    return TRACES_DIR / f"{name}.trace"


def load_catalog(name: str):
    """Parse data/fixtures/catalogs/{name}.krpsim into a Description."""
    from krpsim.loaders import load_description

    return load_description(catalog_path(name))


def resolve(desc, trace: list[list]) -> list:
    """[[cycle, name], ...] from JSON -> [(cycle, ProcessDefinition), ...]."""
    from krpsim.loaders import resolve_trace

    return resolve_trace(desc, [(int(c), n) for c, n in trace])


# ---------------------------------------------------------------------------
# Clocks
# ---------------------------------------------------------------------------
class StepClock:
    """Fake monotonic clock: every read advances by `step` seconds."""

    def __init__(self, step: float = 1.0) -> None:
        self.now = 0.0
        self.step = step
        self.reads = 0

    def __call__(self) -> float:
        value = self.now
        self.now += self.step
        self.reads += 1
        return value


def frozen_clock() -> float:
    """Time never passes: only the cycle limit or starvation can stop a run."""
    return 0.0


def run_catalog(name: str, max_cycle: int | None = None):
    """Schedule a fixture catalog with a frozen clock."""
    from krpsim.scheduler import SchedulerConfig, schedule

    desc = load_catalog(name)
    config = SchedulerConfig(delay=1.0, max_cycle=max_cycle)
    return desc, schedule(desc.stocks, desc.processes, desc.goals, config,
                          clock=frozen_clock)


# ---------------------------------------------------------------------------
# pytest fixtures
# ---------------------------------------------------------------------------
@pytest.fixture
def buy_description():
    return load_catalog("buy")


@pytest.fixture
def simple_description():
    return load_catalog("simple")


@pytest.fixture
def workshop_description():
    return load_catalog("workshop")


@pytest.fixture
def step_clock():
    return StepClock()
