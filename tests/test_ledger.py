"""Tests for Ledger and TimedLedger."""

from __future__ import annotations

from krpsim.ledger import Ledger, TimedLedger


class TestLedger:
    """Signed bookkeeping; insufficiency is checked, never raised."""

    def test_missing_reads_zero(self):
        assert Ledger()["anything"] == 0

    def test_credit_and_debit(self):
        ledger = Ledger({"euro": 10})
        ledger.debit({"euro": 4})
        ledger.credit({"euro": 1, "material": 2})
        assert ledger.snapshot() == {"euro": 7, "material": 2}

    def test_debit_can_go_negative(self):
        ledger = Ledger({"euro": 1})
        ledger.debit({"euro": 3, "wood": 1})
        assert ledger.snapshot() == {"euro": -2, "wood": -1}

    def test_covers(self):
        ledger = Ledger({"euro": 10, "wood": 0})
        assert ledger.covers({"euro": 10})
        assert ledger.covers({})
        assert not ledger.covers({"euro": 11})
        assert not ledger.covers({"euro": 1, "wood": 1})

    def test_unknown_resource_never_covered(self):
        """Even a need of 0 requires the resource to be known."""
        assert not Ledger({"euro": 1}).covers({"gold": 0})

    def test_shortfall(self):
        ledger = Ledger({"euro": 3, "wood": 5})
        assert ledger.shortfall({"euro": 10, "wood": 2, "gold": 1}) == {
            "euro": 7,
            "gold": 1,
        }
        assert ledger.shortfall({"wood": 5}) == {}

    def test_copy_is_independent(self):
        ledger = Ledger({"euro": 10})
        twin = ledger.copy()
        twin.debit({"euro": 10})
        assert ledger["euro"] == 10
        assert twin["euro"] == 0

    def test_preserves_declaration_order(self):
        ledger = Ledger({"b": 1, "a": 2})
        ledger.credit({"c": 3})
        assert list(ledger) == ["b", "a", "c"]


class TestTimedLedger:
    """Buckets keyed by availability cycle, folded forward on demand."""

    def test_initial_stock_at_cycle_zero(self):
        timed = TimedLedger.from_stocks({"euro": 10})
        assert timed.pending == {0}
        assert timed.buckets[0].snapshot() == {"euro": 10}

    def test_from_stocks_copies(self):
        stocks = {"euro": 10}
        timed = TimedLedger.from_stocks(stocks)
        timed.buckets[0].debit({"euro": 10})
        assert stocks == {"euro": 10}

    def test_merge_forward_folds_older_buckets(self):
        timed = TimedLedger.from_stocks({"euro": 10})
        timed.credit_at(4, {"wood": 1})
        timed.credit_at(9, {"wood": 5})
        timed.merge_forward(6)

        assert timed.buckets[6].snapshot() == {"euro": 10, "wood": 1}
        assert 0 not in timed.buckets
        assert 4 not in timed.buckets
        assert timed.pending == {6, 9}

    def test_merged_leftover_reaches_later_cycles(self):
        timed = TimedLedger.from_stocks({"euro": 10})
        timed.merge_forward(2)
        timed.buckets[2].debit({"euro": 4})
        timed.merge_forward(5)
        assert timed.buckets[5]["euro"] == 6

    def test_merge_forward_keeps_same_cycle(self):
        timed = TimedLedger.from_stocks({"euro": 10})
        timed.merge_forward(0)
        assert timed.pending == {0}
        assert timed.buckets[0]["euro"] == 10

    def test_merge_forward_without_older_creates_nothing(self):
        timed = TimedLedger.from_stocks({"euro": 10})
        timed.credit_at(5, {"wood": 1})
        timed.merge_forward(5)
        timed.merge_forward(2)
        assert 2 not in timed.buckets

    def test_credit_at_marks_pending(self):
        timed = TimedLedger()
        timed.credit_at(3, {"wood": 2})
        timed.credit_at(3, {"wood": 1})
        assert timed.pending == {3}
        assert timed.buckets[3]["wood"] == 3
