"""Effort estimation from complexity and SDK gap level."""

from pydantic import BaseModel, Field

from .models import Complexity, GapLevel


class FormulaParams(BaseModel):
    """Base effort and multiplier for one complexity level."""

    base: float
    multiplier: float


def _default_complexity_weights() -> dict[Complexity, float]:
    return {
        Complexity.LOW: 1.0,
        Complexity.MEDIUM: 1.5,
        Complexity.HIGH: 2.0,
    }


def _default_gap_weights() -> dict[GapLevel, float]:
    return {
        GapLevel.SDK_NATIVE: 0.5,  # No development needed
        GapLevel.MINOR_EXTENSION: 1.0,
        GapLevel.MODERATE_EXTENSION: 1.5,
        GapLevel.SIGNIFICANT_EXTENSION: 2.0,
        GapLevel.CUSTOM_IMPLEMENTATION: 2.5,  # Full custom development
    }


def _default_formula_params() -> dict[Complexity, FormulaParams]:
    return {
        Complexity.LOW: FormulaParams(base=10, multiplier=2.0),
        Complexity.MEDIUM: FormulaParams(base=15, multiplier=2.0),
        Complexity.HIGH: FormulaParams(base=20, multiplier=2.0),
    }


class EffortConfig(BaseModel):
    """Weights and per-complexity parameters of the effort formula.

    Partial overrides are merged over the defaults, so a config file only
    needs to list the values it changes.
    """

    complexity_weights: dict[Complexity, float] = Field(
        default_factory=_default_complexity_weights
    )
    gap_weights: dict[GapLevel, float] = Field(default_factory=_default_gap_weights)
    formula_params: dict[Complexity, FormulaParams] = Field(
        default_factory=_default_formula_params
    )

    def model_post_init(self, __context: object) -> None:
        """Fill in defaults for any level the config left out."""
        self.complexity_weights = {**_default_complexity_weights(), **self.complexity_weights}
        self.gap_weights = {**_default_gap_weights(), **self.gap_weights}
        self.formula_params = {**_default_formula_params(), **self.formula_params}


GAP_LEVEL_LABELS: dict[GapLevel, str] = {
    GapLevel.SDK_NATIVE: "SDK Native",
    GapLevel.MINOR_EXTENSION: "Minor Extension",
    GapLevel.MODERATE_EXTENSION: "Moderate Extension",
    GapLevel.SIGNIFICANT_EXTENSION: "Significant Extension",
    GapLevel.CUSTOM_IMPLEMENTATION: "Custom Implementation",
}

COMPLEXITY_LABELS: dict[Complexity, str] = {
    Complexity.LOW: "Low",
    Complexity.MEDIUM: "Medium",
    Complexity.HIGH: "High",
}


def calculate_man_days(
    complexity: Complexity | str,
    gap: GapLevel | str,
    config: EffortConfig | None = None,
) -> float:
    """Calculate man-days for a use case.

    Formula: base + complexity_weight * gap_weight * multiplier, where base
    and multiplier depend on the complexity level.

    Raises:
        ValueError: If complexity or gap is not a known level
    """
    config = config or EffortConfig()
    complexity = Complexity(complexity)
    gap = GapLevel(gap)

    params = config.formula_params[complexity]
    complexity_weight = config.complexity_weights[complexity]
    gap_weight = config.gap_weights[gap]
    return params.base + complexity_weight * gap_weight * params.multiplier
