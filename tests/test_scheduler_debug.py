"""Tests for calculator debug output at different verbosity levels."""

from datetime import date
from io import StringIO

import pytest

from teamline.logger import (
    changes_enabled,
    checks_enabled,
    debug_enabled,
    get_logger,
    is_silent,
    reset_logger,
    setup_logger,
)
from teamline.scheduler import compute_timelines
from tests.conftest import developer, make_use_case

USE_CASES = [
    make_use_case("a", 10, ["alice"]),
    make_use_case("b", 10, ["alice"], start=date(2025, 1, 13)),
]


def _run(verbosity: int) -> str:
    output_stream = StringIO()
    setup_logger(verbosity, stream=output_stream)
    try:
        compute_timelines(USE_CASES, [developer("alice")])
        return output_stream.getvalue()
    finally:
        reset_logger()


def test_verbosity_0_silent():
    """Test that verbosity 0 produces no output."""
    assert _run(0) == ""


def test_verbosity_1_shows_end_day_changes():
    """Test that verbosity 1 shows estimates and how end days move."""
    output = _run(1)

    assert "Initial estimates: a=10, b=15" in output
    assert "Iteration 1: b end day 15 -> 18" in output
    assert "Iteration 1: a end day 10 -> 15" in output
    assert "Converged after 3 iteration(s)" in output
    assert "Conflict:" not in output
    assert "velocity" not in output


def test_segment_messages_skipped_below_checks_level(monkeypatch: pytest.MonkeyPatch):
    """Test that per-segment messages are not built when checks are off."""
    calls: list[str] = []
    monkeypatch.setattr(get_logger(), "checks", lambda msg, *args, **kwargs: calls.append(msg))

    _run(1)

    assert calls == []


def test_verbosity_2_shows_segments_and_conflicts():
    """Test that verbosity 2 adds per-segment velocity checks."""
    output = _run(2)

    assert "a [5, 15): velocity 0.500" in output
    assert "b [15, 20): velocity 1.000" in output
    assert "Conflict: a, b overlap on alice (days 0-20)" in output
    assert "Change points" not in output


def test_verbosity_3_shows_debug():
    """Test that verbosity 3 adds change points and item details."""
    output = _run(3)

    assert "Change points: [0, 5, 15, 20]" in output
    assert "Item a: start day 0, 10.0 man-days, developers alice" in output


def test_level_helpers():
    """Test the verbosity helper functions."""
    setup_logger(0, stream=StringIO())
    assert is_silent()
    assert not changes_enabled()

    setup_logger(2, stream=StringIO())
    assert changes_enabled()
    assert checks_enabled()
    assert not debug_enabled()

    reset_logger()
    assert is_silent()
