"""Tests for the effort estimation formula."""

import pytest

from teamline.effort import EffortConfig, FormulaParams, calculate_man_days
from teamline.models import Complexity, GapLevel


def test_default_formula() -> None:
    """base + complexity_weight * gap_weight * multiplier."""
    assert calculate_man_days(Complexity.MEDIUM, GapLevel.MODERATE_EXTENSION) == 19.5
    assert calculate_man_days(Complexity.LOW, GapLevel.SDK_NATIVE) == 11
    assert calculate_man_days(Complexity.HIGH, GapLevel.CUSTOM_IMPLEMENTATION) == 30


def test_accepts_string_levels() -> None:
    assert calculate_man_days("low", "minor-extension") == 12


def test_unknown_level_raises() -> None:
    with pytest.raises(ValueError):
        calculate_man_days("extreme", GapLevel.SDK_NATIVE)
    with pytest.raises(ValueError):
        calculate_man_days(Complexity.LOW, "rewrite-everything")


def test_partial_override_keeps_defaults() -> None:
    config = EffortConfig.model_validate(
        {"formula_params": {"low": {"base": 5, "multiplier": 1}}, "gap_weights": {"sdk-native": 0}}
    )

    assert config.formula_params[Complexity.LOW] == FormulaParams(base=5, multiplier=1)
    assert calculate_man_days(Complexity.LOW, GapLevel.MINOR_EXTENSION, config) == 6
    assert calculate_man_days(Complexity.MEDIUM, GapLevel.MODERATE_EXTENSION, config) == 19.5
    assert calculate_man_days(Complexity.HIGH, GapLevel.SDK_NATIVE, config) == 20
