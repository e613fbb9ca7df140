"""Unified configuration loader.

A single ``teamline_config.yaml`` combines calculator settings, the effort
formula, progress thresholds and Gantt chart defaults. Every section is
optional.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field

from . import context
from .effort import EffortConfig
from .progress import ProgressThresholds
from .scheduler import TimelineConfig
from .timescale import TimeScale

CONFIG_FILENAME = "teamline_config.yaml"


class GanttConfig(BaseModel):
    """Configuration for Gantt chart generation."""

    title: str = "Project Timeline"
    scale: TimeScale | None = None  # None = pick from the timeline range
    group_by_developer: bool = False


class UnifiedConfig(BaseModel):
    """Unified configuration for all Teamline commands."""

    scheduler: TimelineConfig = Field(default_factory=TimelineConfig)
    effort: EffortConfig = Field(default_factory=EffortConfig)
    progress: ProgressThresholds = Field(default_factory=ProgressThresholds)
    gantt: GanttConfig = Field(default_factory=GanttConfig)


def load_unified_config(config_path: Path | str) -> UnifiedConfig:
    """Load unified configuration from YAML file.

    Args:
        config_path: Path to teamline_config.yaml

    Returns:
        UnifiedConfig with defaults for any missing section

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If config is empty or invalid
    """
    config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with config_path.open() as f:
        data: Any = yaml.safe_load(f)

    if not data:
        raise ValueError("Empty configuration file")
    if not isinstance(data, dict):
        raise ValueError("Configuration must be a mapping at the root level")

    return UnifiedConfig.model_validate(data)


def discover_config(
    planning_path: Path | None = None,
    config_path: Path | None = None,
) -> UnifiedConfig | None:
    """Discover unified config from various locations.

    Search order:
    1. Explicit config_path argument
    2. Global context (set via CLI --config)
    3. planning file directory / teamline_config.yaml
    4. Current directory / teamline_config.yaml
    """
    if config_path and config_path.exists():
        return load_unified_config(config_path)

    ctx_config = context.get_config_path()
    if ctx_config and ctx_config.exists():
        return load_unified_config(ctx_config)

    if planning_path is not None:
        dir_config = Path(planning_path).parent / CONFIG_FILENAME
        if dir_config.exists():
            return load_unified_config(dir_config)

    cwd_config = Path(CONFIG_FILENAME)
    if cwd_config.exists():
        return load_unified_config(cwd_config)

    return None
