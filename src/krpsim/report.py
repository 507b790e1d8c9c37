"""Plain-text rendering of descriptions, schedules and verification results.

Every function returns lines or a string; printing is left to the caller.
"""

from __future__ import annotations

from typing import Mapping

from krpsim.loaders import Description
from krpsim.scheduler import ScheduleResult
from krpsim.verifier import VerificationResult


def describe(desc: Description) -> str:
    """Commented summary of a description, one item per line."""
    lines = [
        "# Simulation description:",
        f"# {desc.summary()}",
        "# === Stocks:",
    ]
    lines.extend(f"# {name}: {qty}" for name, qty in desc.stocks.items())
    lines.append("# === Processes:")
    lines.extend(f"# {process}" for process in desc.processes)
    lines.append("# === Optimizing:")
    lines.extend(f"# {goal}" for goal in desc.goals)
    return "\n".join(lines)


def stock_lines(stocks: Mapping[str, int]) -> list[str]:
    """'# Stock:' header then one '#  name => qty' line per resource."""
    return ["# Stock:"] + [f"#  {name} => {qty}" for name, qty in stocks.items()]


def schedule_lines(result: ScheduleResult) -> list[str]:
    """Main walk, terminal marker and stock dump, in output order."""
    lines = ["# Main walk"]
    lines.extend(str(entry) for entry in result.trace)
    lines.append(f"# No more process doable at cycle {result.no_more_cycle}")
    lines.extend(stock_lines(result.stocks))
    return lines


def analysis_lines(result: ScheduleResult) -> list[str]:
    """Verbose-mode details: eligible set, priorities, Rbounds, stop reason."""
    lines: list[str] = []
    reach = result.reachability
    if reach is not None:
        names = ", ".join(reach.names) or "(none)"
        lines.append(f"# Eligible processes: {names}")
        for resource, depth in sorted(reach.priority.items(), key=lambda kv: kv[1]):
            lines.append(f"#  priority {resource} => {depth}")
    for resource, bound in result.rbounds.items():
        lines.append(f"#  rbound {resource} => {bound}")
    lines.append(
        f"# Stopped at cycle {result.last_cycle}: {result.stop_reason}"
        f" ({len(result.active)} still running)"
    )
    return lines


def verification_lines(result: VerificationResult) -> list[str]:
    if result.ok:
        return [result.describe()]
    lines = [f"====== Error detected at step {result.index}", result.describe()]
    for resource, missing in result.shortfall.items():
        lines.append(f"  missing {missing} {resource}")
    return lines
