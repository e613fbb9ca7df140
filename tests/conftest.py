"""Pytest configuration and fixtures for teamline tests."""

from __future__ import annotations

from collections.abc import Iterator
from datetime import date
from pathlib import Path

import pytest

from teamline import context
from teamline.logger import reset_logger
from teamline.models import Developer, UseCase

# A Monday, so day offsets and dates line up with week boundaries
MONDAY = date(2025, 1, 6)


def developer(developer_id: str, hours: float = 40.0, name: str | None = None) -> Developer:
    """Create a developer; 40 hours/week is a velocity of 1 man-day per day."""
    return Developer(id=developer_id, name=name or developer_id.title(), weekly_capacity_hours=hours)


def make_use_case(
    use_case_id: str,
    man_days: float,
    developers: list[str] | None = None,
    start: date | None = MONDAY,
    **kwargs: object,
) -> UseCase:
    """Create a use case assigned to the given developer IDs."""
    return UseCase(
        id=use_case_id,
        title=kwargs.pop("title", use_case_id.upper()),  # type: ignore[arg-type]
        man_days=man_days,
        assigned_developer_ids=list(developers or []),
        start_date=start,
        **kwargs,  # type: ignore[arg-type]
    )


PLANNING_YAML = """\
metadata:
  version: 1.0
  team: Platform

developers:
  alice:
    name: Alice
    weekly_capacity_hours: 40
  bob:
    name: Bob
    weekly_capacity_hours: 20

use_cases:
  login:
    title: Login flow
    man_days: 10
    assigned_developers: [alice]
    start_date: 2025-01-06
    status: in development
    progress_percent: 30
    last_progress_update: 2025-01-10
  search:
    title: Search
    man_days: 10
    assigned_developers: [alice]
    start_date: 2025-01-13
  reports:
    title: Reports
    complexity: low
    gap: sdk-native
    assigned_developers: bob
    start_date: 2025-01-06
  backlog:
    title: Backlog item
    man_days: 5
"""


@pytest.fixture
def planning_file(tmp_path: Path) -> Path:
    """A planning YAML file with overlapping work on one developer."""
    path = tmp_path / "planning.yaml"
    path.write_text(PLANNING_YAML, encoding="utf-8")
    return path


@pytest.fixture(autouse=True)
def _clean_global_state() -> Iterator[None]:
    """Reset logger and CLI config path between tests."""
    yield
    reset_logger()
    context.set_config_path(None)
