"""Input validation for description and trace lines."""

from __future__ import annotations

import re

from krpsim.types import ProcessDefinition

NAME = r"\w+"
_QTY = rf"{NAME}:\d+"
_GROUP = rf"(?:\((?P<{{}}>(?:{_QTY}(?:;{_QTY})*)?;?)\))?"

STOCK_RE = re.compile(rf"^(?P<name>{NAME}):(?P<qty>\d+)$")
PROCESS_RE = re.compile(
    rf"^(?P<name>{NAME}):{_GROUP.format('need')}:{_GROUP.format('output')}"
    rf":(?P<duration>\d+)$"
)
OPTIMIZE_RE = re.compile(rf"^optimize:\((?P<goals>{NAME}(?:;{NAME})*);?\)$")
TRACE_RE = re.compile(rf"^(?P<cycle>\d+)\s*:\s*(?P<name>{NAME})$")


def classify_line(line: str) -> str | None:
    """Kind of a description line: 'optimize', 'process', 'stock' or None."""
    if OPTIMIZE_RE.match(line):
        return "optimize"
    if PROCESS_RE.match(line):
        return "process"
    if STOCK_RE.match(line):
        return "stock"
    return None


def parse_quantities(group: str | None) -> dict[str, int]:
    """'a:1;b:2' -> {'a': 1, 'b': 2}. Empty or missing group -> {}."""
    quantities: dict[str, int] = {}
    if not group:
        return quantities
    for item in group.split(";"):
        if not item:
            continue
        name, qty = item.split(":")
        quantities[name] = quantities.get(name, 0) + int(qty)
    return quantities


def validate_catalog(
    stocks: dict[str, int],
    processes: list[ProcessDefinition],
    goals: list[str],
) -> list[str]:
    """Validate a parsed description. Returns list of error messages (empty = valid).

    Checks:
    - At least one process
    - Process names are unique
    - A goal is declared and every goal resource is a known stock
    - Quantities and durations are non-negative
    """
    errors: list[str] = []

    if not processes:
        errors.append("Expected at least one process.")

    seen: set[str] = set()
    for process in processes:
        if process.name in seen:
            errors.append(f"Duplicate process name: {process.name!r}")
        seen.add(process.name)

        if process.duration < 0:
            errors.append(
                f"Process {process.name!r}: negative duration {process.duration}"
            )
        for label, amounts in (("need", process.need), ("output", process.output)):
            for resource, qty in amounts.items():
                if qty < 0:
                    errors.append(
                        f"Process {process.name!r}: negative {label} "
                        f"{resource}:{qty}"
                    )

    if not goals:
        errors.append("No stock to optimize.")
    for goal in goals:
        if goal not in stocks:
            errors.append(f"Stocks don't have optimize parameter: {goal!r}")

    for name, qty in stocks.items():
        if qty < 0:
            errors.append(f"Stock {name!r}: negative quantity {qty}")

    return errors
