"""Shared types: ProcessDefinition, run entries and DefinitionError."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class ProcessDefinition:
    """Immutable description of one process.

    Invariants:
        - duration >= 0
        - All quantities in need and output are >= 0
    """

    name: str
    need: dict[str, int] = field(default_factory=dict)
    output: dict[str, int] = field(default_factory=dict)
    duration: int = 0

    @property
    def score(self) -> dict[str, int]:
        """Net effect on every needed resource: output[r] - need[r]."""
        return {r: self.output.get(r, 0) - qty for r, qty in self.need.items()}

    @property
    def free(self) -> bool:
        """True when launching consumes nothing."""
        return not any(qty > 0 for qty in self.need.values())

    def produces(self, resource: str) -> bool:
        return resource in self.output

    def __hash__(self) -> int:
        return hash(self.name)

    def __str__(self) -> str:
        need = ";".join(f"{k}:{v}" for k, v in self.need.items())
        output = ";".join(f"{k}:{v}" for k, v in self.output.items())
        return f"{self.name}:({need}):({output}):{self.duration}"


@dataclass(frozen=True)
class ActiveEntry:
    """A process launched at `start` and not yet credited."""

    start: int
    process: ProcessDefinition

    @property
    def finish(self) -> int:
        return self.start + self.process.duration


@dataclass(frozen=True)
class CompletedEntry:
    """One line of the trace: the launch cycle of a finished process."""

    cycle: int
    process_name: str

    def __str__(self) -> str:
        return f"{self.cycle}:{self.process_name}"


class DefinitionError(ValueError):
    """Raised when a description or trace file cannot be turned into the model."""

    def __init__(self, errors: list[str], source: str | None = None) -> None:
        self.errors = list(errors)
        self.source = source
        where = f" in {source}" if source else ""
        if len(self.errors) == 1:
            message = f"Definition error{where}: {self.errors[0]}"
        else:
            message = f"Definition errors{where}:\n" + "\n".join(
                f"  - {e}" for e in self.errors
            )
        super().__init__(message)
