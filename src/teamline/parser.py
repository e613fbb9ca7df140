"""YAML parser for planning snapshots."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any

import yaml
from pydantic import ValidationError as PydanticValidationError

from .effort import calculate_man_days
from .exceptions import ParseError, ValidationError
from .models import Developer, PlanningData, PlanningMetadata, UseCase
from .schemas import PlanningSchema
from .unified_config import discover_config

if TYPE_CHECKING:
    from .effort import EffortConfig
    from .unified_config import UnifiedConfig


class PlanningParser:
    """Parser for planning YAML files.

    Developer references are not checked here: a use case assigned to an
    unknown developer still loads, and the calculator reports it.
    """

    def __init__(self, effort_config: EffortConfig | None = None):
        self.effort_config = effort_config

    def parse_file(self, file_path: Path | str) -> PlanningData:
        """Parse a YAML file into PlanningData."""
        path = Path(file_path)
        if not path.exists():
            raise ParseError(f"File not found: {file_path}")

        try:
            with path.open(encoding="utf-8") as f:
                data: Any = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ParseError(f"Failed to parse YAML: {e}") from e

        if not isinstance(data, dict):
            raise ParseError("YAML must contain a dictionary at the root level")

        return self.parse_data(data)  # type: ignore[arg-type]

    def parse_data(self, data: dict[str, Any]) -> PlanningData:
        """Convert already-loaded YAML data into PlanningData."""
        try:
            schema = PlanningSchema(**data)
        except PydanticValidationError as e:
            raise ValidationError(f"Invalid planning data: {e}") from e

        metadata = PlanningMetadata(
            version=schema.metadata.version,
            project_start_date=schema.metadata.project_start_date,
            team=schema.metadata.team,
        )

        developers = [
            Developer(
                id=developer_id,
                name=developer.name,
                weekly_capacity_hours=developer.weekly_capacity_hours,
                email=developer.email,
            )
            for developer_id, developer in schema.developers.items()
        ]

        use_cases: list[UseCase] = []
        for use_case_id, entry in schema.use_cases.items():
            man_days = entry.man_days
            if man_days is None:
                # Schema guarantees complexity and gap are both present here
                assert entry.complexity is not None and entry.gap is not None
                man_days = calculate_man_days(entry.complexity, entry.gap, self.effort_config)

            use_cases.append(
                UseCase(
                    id=use_case_id,
                    title=entry.title,
                    man_days=man_days,
                    assigned_developer_ids=list(entry.assigned_developers),
                    start_date=entry.start_date,
                    status=entry.status,
                    complexity=entry.complexity,
                    gap=entry.gap,
                    progress_percent=entry.progress_percent,
                    last_progress_update=entry.last_progress_update,
                )
            )

        return PlanningData(metadata=metadata, developers=developers, use_cases=use_cases)


def load_planning_data(
    path: Path | str,
    config_path: Path | None = None,
    *,
    config: UnifiedConfig | None = None,
) -> PlanningData:
    """Load a planning snapshot from YAML.

    Args:
        path: Path to the planning YAML file
        config_path: Optional explicit path to config file
        config: Optional explicit unified config (overrides discovery)

    Returns:
        Parsed PlanningData
    """
    path = Path(path)
    if config is None:
        config = discover_config(path, config_path)

    parser = PlanningParser(config.effort if config else None)
    return parser.parse_file(path)
