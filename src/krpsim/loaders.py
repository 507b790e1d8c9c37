"""Loading description files and trace files into the data model."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from krpsim.schema import (
    OPTIMIZE_RE,
    PROCESS_RE,
    STOCK_RE,
    TRACE_RE,
    classify_line,
    parse_quantities,
    validate_catalog,
)
from krpsim.types import DefinitionError, ProcessDefinition


@dataclass
class Description:
    """Parsed description: initial stock, process catalog and goals."""

    stocks: dict[str, int] = field(default_factory=dict)
    processes: list[ProcessDefinition] = field(default_factory=list)
    goals: list[str] = field(default_factory=list)

    def process(self, name: str) -> ProcessDefinition | None:
        return next((p for p in self.processes if p.name == name), None)

    def summary(self) -> str:
        return (
            f"{len(self.processes)} processes, {len(self.stocks)} stocks, "
            f"{len(self.goals)} to optimize"
        )


def _content_lines(text: str) -> list[tuple[int, str]]:
    """(line number, stripped line) for every non-blank, non-comment line."""
    lines: list[tuple[int, str]] = []
    for lineno, raw in enumerate(text.splitlines(), start=1):
        line = raw.strip()
        if line and not line.startswith("#"):
            lines.append((lineno, line))
    return lines


def parse_description(text: str, source: str | None = None) -> Description:
    """Parse description text.

    Stocks first, then processes, then a single optimize line. Resources that
    processes mention but no stock line declares start at 0.

    Raises DefinitionError listing every problem found.
    """
    lines = _content_lines(text)
    if not lines:
        raise DefinitionError(["File is empty."], source)

    desc = Description()
    errors: list[str] = []
    section = "stock"
    for lineno, line in lines:
        kind = classify_line(line)
        if kind is None:
            errors.append(f"line {lineno}: unrecognized line format: {line!r}")
            continue

        if kind == "optimize":
            if not desc.processes:
                errors.append(f"line {lineno}: can't optimize before having any process")
            elif section == "optimize":
                errors.append(f"line {lineno}: optimize is declared more than once")
            section = "optimize"
            goals = OPTIMIZE_RE.match(line)["goals"]
            desc.goals = [g for g in goals.split(";") if g]
            continue

        if section == "optimize":
            errors.append(f"line {lineno}: {kind} line after optimize: {line!r}")
            continue

        if kind == "process":
            section = "process"
            m = PROCESS_RE.match(line)
            desc.processes.append(
                ProcessDefinition(
                    name=m["name"],
                    need=parse_quantities(m["need"]),
                    output=parse_quantities(m["output"]),
                    duration=int(m["duration"]),
                )
            )
        else:
            if section != "stock":
                errors.append(f"line {lineno}: stock line after processes: {line!r}")
                continue
            m = STOCK_RE.match(line)
            desc.stocks[m["name"]] = int(m["qty"])

    for process in desc.processes:
        for resource in (*process.need, *process.output):
            desc.stocks.setdefault(resource, 0)

    errors.extend(validate_catalog(desc.stocks, desc.processes, desc.goals))
    if errors:
        raise DefinitionError(errors, source)
    return desc


def load_description(path: str | Path) -> Description:
    """Load a description file. Raises DefinitionError if it is invalid."""
    path = Path(path)
    with open(path) as f:
        return parse_description(f.read(), source=path.name)


def parse_trace(text: str, source: str | None = None) -> list[tuple[int, str]]:
    """Parse 'cycle:name' lines. '#' starts a comment anywhere on a line."""
    trace: list[tuple[int, str]] = []
    errors: list[str] = []
    for lineno, raw in enumerate(text.splitlines(), start=1):
        line = raw.split("#", 1)[0].strip()
        if not line:
            continue
        m = TRACE_RE.match(line)
        if m is None:
            errors.append(f"line {lineno}: expected '<cycle>:<process>', got {line!r}")
            continue
        trace.append((int(m["cycle"]), m["name"]))
    if errors:
        raise DefinitionError(errors, source)
    return trace


def load_trace(path: str | Path) -> list[tuple[int, str]]:
    """Load a trace file. Raises DefinitionError on malformed lines."""
    path = Path(path)
    with open(path) as f:
        return parse_trace(f.read(), source=path.name)


def resolve_trace(
    desc: Description,
    trace: list[tuple[int, str]],
) -> list[tuple[int, ProcessDefinition]]:
    """Replace process names with their definitions.

    Raises DefinitionError naming every unknown process.
    """
    by_name = {p.name: p for p in desc.processes}
    resolved: list[tuple[int, ProcessDefinition]] = []
    errors: list[str] = []
    for index, (cycle, name) in enumerate(trace):
        process = by_name.get(name)
        if process is None:
            errors.append(f"step {index} ({cycle}:{name}): unknown process {name!r}")
            continue
        resolved.append((cycle, process))
    if errors:
        raise DefinitionError(errors)
    return resolved
