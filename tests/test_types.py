"""Tests for ProcessDefinition, run entries and DefinitionError."""

from __future__ import annotations

import pytest

from krpsim.types import ActiveEntry, CompletedEntry, DefinitionError, ProcessDefinition


def _buy() -> ProcessDefinition:
    return ProcessDefinition("buy", need={"euro": 10}, output={"material": 1}, duration=10)


# ---------------------------------------------------------------------------
# ProcessDefinition
# ---------------------------------------------------------------------------
class TestProcessDefinition:

    def test_score_covers_needed_resources_only(self):
        """score[r] = output[r] - need[r] for every needed r."""
        p = ProcessDefinition(
            "refine",
            need={"ore": 3, "fuel": 1},
            output={"ore": 1, "metal": 2},
            duration=4,
        )
        assert p.score == {"ore": -2, "fuel": -1}

    def test_score_empty_without_needs(self):
        assert ProcessDefinition("mint", output={"coin": 1}).score == {}

    def test_free_when_every_need_is_zero(self):
        assert ProcessDefinition("mint", output={"coin": 1}).free
        assert ProcessDefinition("idle", need={"coin": 0}).free
        assert not _buy().free

    def test_produces(self):
        p = _buy()
        assert p.produces("material")
        assert not p.produces("euro")

    def test_str_uses_description_syntax(self):
        assert str(_buy()) == "buy:(euro:10):(material:1):10"

    def test_frozen_dataclass(self):
        p = _buy()
        with pytest.raises(AttributeError):
            p.duration = 3  # type: ignore[misc]

    def test_hashable_by_name(self):
        assert len({_buy(), _buy()}) == 1


# ---------------------------------------------------------------------------
# ActiveEntry / CompletedEntry
# ---------------------------------------------------------------------------
class TestEntries:

    def test_active_finish(self):
        assert ActiveEntry(start=5, process=_buy()).finish == 15

    def test_zero_duration_finishes_at_start(self):
        p = ProcessDefinition("flip", need={"a": 1}, output={"b": 1}, duration=0)
        assert ActiveEntry(start=7, process=p).finish == 7

    def test_completed_str_is_trace_line(self):
        assert str(CompletedEntry(cycle=0, process_name="buy")) == "0:buy"


# ---------------------------------------------------------------------------
# DefinitionError
# ---------------------------------------------------------------------------
class TestDefinitionError:

    def test_is_value_error(self):
        assert issubclass(DefinitionError, ValueError)

    def test_single_error_message(self):
        err = DefinitionError(["File is empty."], source="x.krpsim")
        assert err.errors == ["File is empty."]
        assert str(err) == "Definition error in x.krpsim: File is empty."

    def test_multiple_errors_listed(self):
        err = DefinitionError(["first", "second"])
        assert "  - first" in str(err)
        assert "  - second" in str(err)

    def test_raise_and_catch(self):
        with pytest.raises(DefinitionError) as exc_info:
            raise DefinitionError(["boom"])
        assert exc_info.value.errors == ["boom"]
