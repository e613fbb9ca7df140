"""Tests for Mermaid Gantt chart generation."""

from datetime import date
from pathlib import Path

import pytest

from teamline.exceptions import MissingReferenceError
from teamline.gantt import GanttRenderer
from teamline.models import PlanningData, UseCaseStatus
from teamline.parser import PlanningParser
from teamline.scheduler import TimelineResult, compute_timelines
from teamline.timescale import TimeScale
from teamline.unified_config import GanttConfig
from tests.conftest import developer, make_use_case

TODAY = date(2025, 1, 15)


def _render(path: Path, config: GanttConfig | None = None) -> GanttRenderer:
    planning = PlanningParser().parse_file(path)
    result = compute_timelines(planning.use_cases, planning.developers)
    return GanttRenderer(planning, result, config, current_date=TODAY)


class TestGanttRenderer:
    """Test chart structure and task lines."""

    def test_header(self, planning_file: Path) -> None:
        output = _render(planning_file).generate_mermaid()
        lines = output.split("\n")

        assert lines[:6] == [
            "gantt",
            "    title Project Timeline",
            "    dateFormat YYYY-MM-DD",
            "    tickInterval 1week",
            "    axisFormat %b %d",
            "    todayMarker 2025-01-15",
        ]

    def test_task_lines(self, planning_file: Path) -> None:
        output = _render(planning_file).generate_mermaid()

        assert "    Login flow (Alice) :active, crit, login, 2025-01-06, 19d" in output
        assert "    Reports (Bob) :reports, 2025-01-06, 30d" in output
        assert "    Search (Alice) :crit, search, 2025-01-13, 19d" in output
        assert "backlog" not in output
        assert "section" not in output

    def test_tasks_ordered_by_start(self, planning_file: Path) -> None:
        output = _render(planning_file).generate_mermaid()

        assert output.index(":active, crit, login") < output.index(":reports,")
        assert output.index(":reports,") < output.index(":crit, search")

    def test_title_and_scale_override(self, planning_file: Path) -> None:
        output = _render(planning_file).generate_mermaid(title="Roadmap", scale=TimeScale.QUARTER)

        assert "    title Roadmap" in output
        assert "    tickInterval 3month" in output
        assert "    axisFormat %b %Y" in output

    def test_config_defaults(self, planning_file: Path) -> None:
        config = GanttConfig(title="From config", scale=TimeScale.MONTH)
        output = _render(planning_file, config).generate_mermaid()

        assert "    title From config" in output
        assert "    tickInterval 1month" in output

    def test_group_by_developer(self, planning_file: Path) -> None:
        output = _render(planning_file).generate_mermaid(group_by_developer=True)

        alice = output.index("    section Alice")
        bob = output.index("    section Bob")
        assert alice < output.index(", login,") < output.index(", search,") < bob
        assert bob < output.index(":reports,")

    def test_shared_task_ids_unique_per_section(self) -> None:
        planning = PlanningData(
            developers=[developer("alice"), developer("bob")],
            use_cases=[make_use_case("pair", 4, ["alice", "bob"])],
        )
        result = compute_timelines(planning.use_cases, planning.developers)

        output = GanttRenderer(planning, result, current_date=TODAY).generate_mermaid(
            group_by_developer=True
        )

        assert ":pair_alice, 2025-01-06, 2d" in output
        assert ":pair_bob, 2025-01-06, 2d" in output

    def test_zero_effort_is_milestone(self) -> None:
        planning = PlanningData(
            developers=[developer("alice")],
            use_cases=[make_use_case("launch", 0, ["alice"], title="Launch")],
        )
        result = compute_timelines(planning.use_cases, planning.developers)

        output = GanttRenderer(planning, result, current_date=TODAY).generate_mermaid()

        assert "    Launch (Alice) :milestone, launch, 2025-01-06, 0d" in output

    def test_done_tag(self) -> None:
        planning = PlanningData(
            developers=[developer("alice")],
            use_cases=[make_use_case("a", 2, ["alice"], status=UseCaseStatus.COMPLETED)],
        )
        result = compute_timelines(planning.use_cases, planning.developers)

        output = GanttRenderer(planning, result, current_date=TODAY).generate_mermaid()

        assert ":done, a, 2025-01-06, 2d" in output

    def test_labels_sanitized(self) -> None:
        planning = PlanningData(
            developers=[developer("alice")],
            use_cases=[make_use_case("a", 1, ["alice"], title="Auth: SSO #2")],
        )
        result = compute_timelines(planning.use_cases, planning.developers)

        output = GanttRenderer(planning, result, current_date=TODAY).generate_mermaid()

        assert "    Auth - SSO 2 (Alice) :a, 2025-01-06, 1d" in output

    def test_empty_result(self) -> None:
        renderer = GanttRenderer(PlanningData(), TimelineResult(), current_date=TODAY)

        output = renderer.generate_mermaid()

        assert output.startswith("gantt\n")
        assert "tickInterval 1week" in output
        assert renderer.chart_range() is None

    def test_chart_range_padded(self, planning_file: Path) -> None:
        renderer = _render(planning_file)

        assert renderer.chart_range() == (date(2025, 1, 6), date(2025, 3, 4))
        assert renderer.chart_range(TimeScale.MONTH) == (date(2025, 1, 6), date(2025, 5, 4))

    def test_timeline_without_use_case(self) -> None:
        result = compute_timelines([make_use_case("a", 1, ["alice"])], [developer("alice")])

        with pytest.raises(MissingReferenceError):
            GanttRenderer(PlanningData(), result)
