"""Trace verification against a time-bucketed ledger.

Replays (cycle, process) steps in the order given. Each step must find its
needs in the bucket for its cycle, after older pending buckets have been
folded into it. Outputs land in the bucket for cycle + duration.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Mapping

from krpsim.ledger import TimedLedger
from krpsim.types import ProcessDefinition


@dataclass(frozen=True)
class VerificationResult:
    """All-or-nothing verdict.

    When ok is False, index is the 0-based position of the first infeasible
    step and shortfall maps each missing resource to the missing amount.
    """

    ok: bool
    steps_checked: int
    index: int | None = None
    cycle: int | None = None
    process_name: str | None = None
    shortfall: dict[str, int] = field(default_factory=dict)

    def describe(self) -> str:
        if self.ok:
            return "Trace completed, no error detected."
        return f"at {self.cycle}: {self.process_name} stock insufficient"


def verify_trace(
    stocks: Mapping[str, int],
    steps: Iterable[tuple[int, ProcessDefinition]],
) -> VerificationResult:
    """Check that every step of `steps` can pay for its needs.

    Args:
        stocks: Initial stock, available from cycle 0.
        steps: (cycle, process) pairs, already resolved from names. Cycles
            need not be sorted.

    Returns:
        VerificationResult, failing at the first step whose bucket is missing
        or cannot cover the process's needs. The caller's stocks are not
        modified, so verifying twice gives the same result.
    """
    ledger = TimedLedger.from_stocks(stocks)
    checked = 0
    for index, (cycle, process) in enumerate(steps):
        ledger.merge_forward(cycle)

        bucket = ledger.buckets.get(cycle)
        if bucket is None or not bucket.covers(process.need):
            return VerificationResult(
                ok=False,
                steps_checked=checked,
                index=index,
                cycle=cycle,
                process_name=process.name,
                shortfall=dict(process.need) if bucket is None
                else bucket.shortfall(process.need),
            )

        bucket.debit(process.need)
        ledger.credit_at(cycle + process.duration, process.output)
        checked += 1

    return VerificationResult(ok=True, steps_checked=checked)
