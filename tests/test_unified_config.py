"""Tests for unified configuration loading."""

from pathlib import Path

import pytest

from teamline import context
from teamline.models import Complexity
from teamline.scheduler import MultiDeveloperRule
from teamline.timescale import TimeScale
from teamline.unified_config import UnifiedConfig, discover_config, load_unified_config


def test_load_all_sections(tmp_path: Path) -> None:
    """Test loading a config with every section present."""
    config_path = tmp_path / "teamline_config.yaml"
    config_path.write_text(
        """
scheduler:
  max_iterations: 25
  hours_per_day: 7.5
  multi_developer_rule: primary

effort:
  complexity_weights:
    high: 3

progress:
  behind_threshold: 5
  stale_update_days: 14

gantt:
  title: Q1 Plan
  scale: month
  group_by_developer: true
""",
        encoding="utf-8",
    )

    unified = load_unified_config(config_path)

    assert unified.scheduler.max_iterations == 25
    assert unified.scheduler.hours_per_day == 7.5
    assert unified.scheduler.multi_developer_rule == MultiDeveloperRule.PRIMARY
    assert unified.effort.complexity_weights[Complexity.HIGH] == 3
    assert unified.effort.complexity_weights[Complexity.LOW] == 1.0
    assert unified.progress.behind_threshold == 5
    assert unified.progress.ahead_threshold == 10
    assert unified.progress.stale_update_days == 14
    assert unified.gantt.title == "Q1 Plan"
    assert unified.gantt.scale == TimeScale.MONTH
    assert unified.gantt.group_by_developer


def test_missing_sections_use_defaults(tmp_path: Path) -> None:
    config_path = tmp_path / "teamline_config.yaml"
    config_path.write_text("gantt:\n  title: Only a title\n", encoding="utf-8")

    unified = load_unified_config(config_path)

    assert unified.scheduler.max_iterations == 10
    assert unified.scheduler.skip_weekends
    assert unified.gantt.scale is None


def test_missing_file(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_unified_config(tmp_path / "nope.yaml")


def test_empty_file(tmp_path: Path) -> None:
    config_path = tmp_path / "teamline_config.yaml"
    config_path.write_text("", encoding="utf-8")

    with pytest.raises(ValueError, match="Empty"):
        load_unified_config(config_path)


def test_invalid_value(tmp_path: Path) -> None:
    config_path = tmp_path / "teamline_config.yaml"
    config_path.write_text("scheduler:\n  max_iterations: 0\n", encoding="utf-8")

    with pytest.raises(ValueError):
        load_unified_config(config_path)


class TestDiscoverConfig:
    """Test config discovery order."""

    def _write(self, path: Path, title: str) -> Path:
        path.write_text(f"gantt:\n  title: {title}\n", encoding="utf-8")
        return path

    def test_explicit_path_wins(self, tmp_path: Path) -> None:
        explicit = self._write(tmp_path / "explicit.yaml", "Explicit")
        context.set_config_path(self._write(tmp_path / "context.yaml", "Context"))

        unified = discover_config(tmp_path / "planning.yaml", explicit)

        assert unified is not None
        assert unified.gantt.title == "Explicit"

    def test_context_before_planning_directory(self, tmp_path: Path) -> None:
        self._write(tmp_path / "teamline_config.yaml", "Directory")
        context.set_config_path(self._write(tmp_path / "context.yaml", "Context"))

        unified = discover_config(tmp_path / "planning.yaml")

        assert unified is not None
        assert unified.gantt.title == "Context"

    def test_planning_directory_before_cwd(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        planning_dir = tmp_path / "plans"
        planning_dir.mkdir()
        self._write(planning_dir / "teamline_config.yaml", "Directory")
        self._write(tmp_path / "teamline_config.yaml", "Cwd")
        monkeypatch.chdir(tmp_path)

        unified = discover_config(planning_dir / "planning.yaml")

        assert unified is not None
        assert unified.gantt.title == "Directory"

    def test_cwd(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        self._write(tmp_path / "teamline_config.yaml", "Cwd")
        monkeypatch.chdir(tmp_path)

        unified = discover_config()

        assert unified is not None
        assert unified.gantt.title == "Cwd"

    def test_nothing_found(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.chdir(tmp_path)

        assert discover_config(tmp_path / "planning.yaml") is None

    def test_defaults_when_nothing_found(self) -> None:
        assert UnifiedConfig().gantt.title == "Project Timeline"
