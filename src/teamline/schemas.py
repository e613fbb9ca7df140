"""Pydantic schemas for planning YAML validation."""

from __future__ import annotations

from datetime import date
from typing import Any

from pydantic import BaseModel, Field, field_validator, model_validator

from .models import Complexity, GapLevel, UseCaseStatus


class DeveloperSchema(BaseModel):
    """Schema for a developer entry."""

    name: str
    weekly_capacity_hours: float = Field(default=40.0, alias="capacity")
    email: str | None = None

    model_config = {"populate_by_name": True}


class UseCaseSchema(BaseModel):
    """Schema for a use case entry.

    Effort is either given directly as ``man_days`` or derived from
    ``complexity`` and ``gap`` by the effort formula.
    """

    title: str
    man_days: float | None = None
    complexity: Complexity | None = None
    gap: GapLevel | None = None
    assigned_developers: list[str] = Field(default_factory=list)
    start_date: date | None = None
    status: UseCaseStatus = UseCaseStatus.HIGH_LEVEL_DEFINITION
    progress_percent: float | None = Field(default=None, ge=0, le=100)
    last_progress_update: date | None = None
    # Written back by `teamline schedule --annotate-yaml`; ignored on input
    estimated_start: date | None = None
    estimated_end: date | None = None

    @field_validator("assigned_developers", mode="before")
    @classmethod
    def ensure_list(cls, v: Any) -> list[str]:
        """Accept a single developer ID as well as a list."""
        if v is None:
            return []
        if isinstance(v, list):
            return [str(item) for item in v]  # type: ignore[misc]
        return [str(v)]

    @model_validator(mode="after")
    def require_effort(self) -> UseCaseSchema:
        """Ensure effort can be determined."""
        if self.man_days is None and (self.complexity is None or self.gap is None):
            raise ValueError("either 'man_days' or both 'complexity' and 'gap' are required")
        return self


class MetadataSchema(BaseModel):
    """Schema for planning metadata."""

    version: str = "1.0"
    project_start_date: date | None = None
    team: str | None = None

    @field_validator("version", mode="before")
    @classmethod
    def coerce_version_to_string(cls, v: Any) -> str:
        """Ensure version is a string."""
        return str(v)


class PlanningSchema(BaseModel):
    """Schema for the entire planning YAML document."""

    metadata: MetadataSchema = Field(default_factory=MetadataSchema)
    developers: dict[str, DeveloperSchema] = Field(default_factory=dict)
    use_cases: dict[str, UseCaseSchema] = Field(default_factory=dict)
