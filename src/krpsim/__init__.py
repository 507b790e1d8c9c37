"""krpsim: greedy scheduling and trace verification for production networks."""

from krpsim.bounds import compute_rbounds
from krpsim.ledger import Ledger, TimedLedger
from krpsim.loaders import (
    Description,
    load_description,
    load_trace,
    parse_description,
    parse_trace,
    resolve_trace,
)
from krpsim.reachability import GOAL_PRIORITY, Reachability, filter_processes
from krpsim.scheduler import ScheduleResult, Scheduler, SchedulerConfig, schedule
from krpsim.types import ActiveEntry, CompletedEntry, DefinitionError, ProcessDefinition
from krpsim.verifier import VerificationResult, verify_trace

__all__ = [
    "ActiveEntry",
    "CompletedEntry",
    "DefinitionError",
    "Description",
    "GOAL_PRIORITY",
    "Ledger",
    "ProcessDefinition",
    "Reachability",
    "ScheduleResult",
    "Scheduler",
    "SchedulerConfig",
    "TimedLedger",
    "VerificationResult",
    "compute_rbounds",
    "filter_processes",
    "load_description",
    "load_trace",
    "parse_description",
    "parse_trace",
    "resolve_trace",
    "schedule",
    "verify_trace",
]
