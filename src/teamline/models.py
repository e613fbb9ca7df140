"""Data models for Teamline planning snapshots."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import Enum


class Complexity(str, Enum):
    """Use case complexity."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class GapLevel(str, Enum):
    """How far a use case is from what the SDK provides out of the box."""

    SDK_NATIVE = "sdk-native"
    MINOR_EXTENSION = "minor-extension"
    MODERATE_EXTENSION = "moderate-extension"
    SIGNIFICANT_EXTENSION = "significant-extension"
    CUSTOM_IMPLEMENTATION = "custom-implementation"


class UseCaseStatus(str, Enum):
    """Lifecycle status of a use case."""

    HIGH_LEVEL_DEFINITION = "high-level definition"
    GROOMED = "groomed"
    DEFINED = "defined"
    IN_DEVELOPMENT = "in development"
    COMPLETED = "completed"


@dataclass
class Developer:
    """A developer with a weekly capacity in hours."""

    id: str
    name: str
    weekly_capacity_hours: float
    email: str | None = None


@dataclass
class UseCase:
    """A schedulable unit of work, estimated in man-days."""

    id: str
    title: str
    man_days: float
    assigned_developer_ids: list[str] = field(default_factory=list)
    start_date: date | None = None
    status: UseCaseStatus = UseCaseStatus.HIGH_LEVEL_DEFINITION
    complexity: Complexity | None = None
    gap: GapLevel | None = None
    progress_percent: float | None = None
    last_progress_update: date | None = None

    @property
    def is_schedulable(self) -> bool:
        """True if the use case has both a start date and at least one assignee."""
        return self.start_date is not None and bool(self.assigned_developer_ids)


@dataclass
class PlanningMetadata:
    """Metadata about the planning snapshot."""

    version: str = "1.0"
    project_start_date: date | None = None
    team: str | None = None


@dataclass
class PlanningData:
    """A full planning snapshot: developer roster plus use cases."""

    metadata: PlanningMetadata = field(default_factory=PlanningMetadata)
    developers: list[Developer] = field(default_factory=list)
    use_cases: list[UseCase] = field(default_factory=list)

    def get_developer(self, developer_id: str) -> Developer | None:
        """Get a developer by ID."""
        for developer in self.developers:
            if developer.id == developer_id:
                return developer
        return None

    def get_use_case(self, use_case_id: str) -> UseCase | None:
        """Get a use case by ID."""
        for use_case in self.use_cases:
            if use_case.id == use_case_id:
                return use_case
        return None
