"""Stock bookkeeping: Ledger and the time-bucketed TimedLedger.

Quantities are signed integers. Going below zero is never an exception here;
callers check `covers` before they `debit`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, Mapping


@dataclass
class Ledger:
    """Mutable mapping from resource name to quantity.

    Missing resources read as 0. Insertion order is preserved so dumps
    follow the order resources were first declared.
    """

    stocks: dict[str, int] = field(default_factory=dict)

    def __getitem__(self, resource: str) -> int:
        return self.stocks.get(resource, 0)

    def __contains__(self, resource: object) -> bool:
        return resource in self.stocks

    def __iter__(self) -> Iterator[str]:
        return iter(self.stocks)

    def __len__(self) -> int:
        return len(self.stocks)

    def credit(self, amounts: Mapping[str, int]) -> None:
        """Add every amount to its resource."""
        for resource, qty in amounts.items():
            self.stocks[resource] = self.stocks.get(resource, 0) + qty

    def debit(self, amounts: Mapping[str, int]) -> None:
        """Subtract every amount from its resource. May go negative."""
        for resource, qty in amounts.items():
            self.stocks[resource] = self.stocks.get(resource, 0) - qty

    def covers(self, needs: Mapping[str, int]) -> bool:
        """True if every need is available in full.

        A resource never seen by this ledger does not cover any need,
        not even a need of 0.
        """
        return all(
            resource in self.stocks and self.stocks[resource] >= qty
            for resource, qty in needs.items()
        )

    def shortfall(self, needs: Mapping[str, int]) -> dict[str, int]:
        """Missing amount per resource; empty when `covers(needs)`."""
        missing: dict[str, int] = {}
        for resource, qty in needs.items():
            have = self.stocks.get(resource)
            if have is None:
                missing[resource] = qty
            elif have < qty:
                missing[resource] = qty - have
        return missing

    def copy(self) -> Ledger:
        """Independent copy for tentative planning."""
        return Ledger(dict(self.stocks))

    def snapshot(self) -> dict[str, int]:
        return dict(self.stocks)


@dataclass
class TimedLedger:
    """Ledgers keyed by the cycle at which their stock becomes available.

    `pending` holds cycles whose bucket has not yet been folded forward
    into a later cycle. Cycle 0 starts pending with the initial stock.
    """

    buckets: dict[int, Ledger] = field(default_factory=dict)
    pending: set[int] = field(default_factory=set)

    @classmethod
    def from_stocks(cls, stocks: Mapping[str, int]) -> TimedLedger:
        return cls(buckets={0: Ledger(dict(stocks))}, pending={0})

    def bucket(self, cycle: int) -> Ledger:
        """Bucket for `cycle`, created empty on first use."""
        if cycle not in self.buckets:
            self.buckets[cycle] = Ledger()
        return self.buckets[cycle]

    def merge_forward(self, cycle: int) -> None:
        """Fold every pending bucket older than `cycle` into `cycle`.

        Stock produced at an earlier cycle is still available later. The
        folded cycles are dropped, so a later step that goes back to one of
        them finds no bucket. `cycle` becomes pending so its leftover stock
        carries on to later steps.
        """
        older = sorted(c for c in self.pending if c < cycle)
        if not older:
            return
        target = self.bucket(cycle)
        for c in older:
            target.credit(self.buckets.pop(c, Ledger()).stocks)
            self.pending.discard(c)
        self.pending.add(cycle)

    def credit_at(self, cycle: int, amounts: Mapping[str, int]) -> None:
        """Make `amounts` available from `cycle` on."""
        self.bucket(cycle).credit(amounts)
        self.pending.add(cycle)
