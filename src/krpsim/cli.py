"""Command-line entry points: `krpsim` (schedule) and `krpsim-verif` (verify)."""

from __future__ import annotations

from contextlib import ExitStack
from pathlib import Path
from typing import Annotated, Iterable

import typer
from rich.console import Console
from rich.markup import escape

from krpsim.loaders import Description, load_description, load_trace, resolve_trace
from krpsim.report import (
    analysis_lines,
    describe,
    schedule_lines,
    verification_lines,
)
from krpsim.scheduler import SchedulerConfig, schedule
from krpsim.types import DefinitionError
from krpsim.verifier import verify_trace

console = Console()
app = typer.Typer(add_completion=False, no_args_is_help=True)
verif_app = typer.Typer(add_completion=False, no_args_is_help=True)


def _emit(lines: Iterable[str], *consoles: Console) -> None:
    """Print lines verbatim to every console."""
    for line in lines:
        for c in consoles:
            c.print(line, markup=False, highlight=False, emoji=False, soft_wrap=True)


def _load(path: Path) -> Description:
    try:
        return load_description(path)
    except DefinitionError as exc:
        console.print(f"[red]Invalid description:[/red] {escape(str(exc))}")
        raise typer.Exit(1)


def _log_target(file: Path, log: bool, log_file: Path | None) -> Path | None:
    if log_file is not None:
        return log_file
    if log:
        return file.with_name(file.name + ".log")
    return None


@app.command()
def run(
    file: Path = typer.Argument(
        ..., exists=True, dir_okay=False, help="Path to the description file."
    ),
    delay: float = typer.Argument(
        ...,
        min=0,
        help="Wall-clock budget for the search, in seconds (not milliseconds).",
    ),
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Also print the description and search details."),
    ] = False,
    log: Annotated[
        bool,
        typer.Option("--log", "-l", help="Duplicate the output to FILE.log."),
    ] = False,
    log_file: Annotated[
        Path | None,
        typer.Option("--log-file", help="Duplicate the output to this file instead."),
    ] = None,
    cycle: Annotated[
        int | None,
        typer.Option("--cycle", "-c", min=0, help="Stop once this cycle is reached."),
    ] = None,
) -> None:
    """Compute a schedule for FILE within DELAY seconds."""
    desc = _load(file)
    config = SchedulerConfig(
        delay=delay,
        max_cycle=cycle,
        verbose=verbose,
        log_file=_log_target(file, log, log_file),
    )
    console.print(f"Nice file! {escape(desc.summary())}")
    if config.verbose:
        _emit(describe(desc).splitlines(), console)

    result = schedule(desc.stocks, desc.processes, desc.goals, config)

    with ExitStack() as stack:
        sinks = [console]
        if config.log_file is not None:
            fh = stack.enter_context(open(config.log_file, "a"))
            sinks.append(Console(file=fh, no_color=True, highlight=False))
        if config.verbose:
            _emit(analysis_lines(result), console)
        _emit(schedule_lines(result), *sinks)


@verif_app.command()
def verify(
    file: Path = typer.Argument(
        ..., exists=True, dir_okay=False, help="Path to the description file."
    ),
    trace_file: Path = typer.Argument(
        ..., exists=True, dir_okay=False, help="Path to the trace to check."
    ),
) -> None:
    """Check that TRACE_FILE is feasible for the description in FILE."""
    desc = _load(file)
    try:
        steps = resolve_trace(desc, load_trace(trace_file))
    except DefinitionError as exc:
        console.print(f"[red]Invalid trace:[/red] {escape(str(exc))}")
        raise typer.Exit(1)

    _emit(describe(desc).splitlines(), console)
    result = verify_trace(desc.stocks, steps)
    _emit(verification_lines(result), console)
    if not result.ok:
        raise typer.Exit(1)


def main() -> None:
    app()


def verif_main() -> None:
    verif_app()
