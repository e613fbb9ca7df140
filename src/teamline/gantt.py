"""Mermaid Gantt chart rendering for computed timelines."""

from __future__ import annotations

from datetime import date
from typing import TYPE_CHECKING

from .exceptions import MissingReferenceError
from .models import UseCaseStatus
from .timescale import TimeScale, extend_timeline_end, optimal_time_scale, timeline_bounds
from .unified_config import GanttConfig

if TYPE_CHECKING:
    from .models import PlanningData, UseCase
    from .scheduler import Timeline, TimelineResult

# Mermaid tickInterval / axisFormat per scale; Mermaid has no year interval
SCALE_AXIS: dict[TimeScale, tuple[str, str]] = {
    TimeScale.DAY: ("1day", "%b %d"),
    TimeScale.WEEK: ("1week", "%b %d"),
    TimeScale.MONTH: ("1month", "%b %Y"),
    TimeScale.QUARTER: ("3month", "%b %Y"),
    TimeScale.YEAR: ("12month", "%Y"),
}


class GanttRenderer:
    """Renders a TimelineResult as a Mermaid gantt chart."""

    def __init__(
        self,
        planning: PlanningData,
        result: TimelineResult,
        config: GanttConfig | None = None,
        *,
        current_date: date | None = None,
    ):
        """Initialize the renderer.

        Args:
            planning: The snapshot the result was computed from
            result: Calculation result to render
            config: Optional chart defaults
            current_date: Date for the today marker; defaults to today
        """
        self.planning = planning
        self.result = result
        self.config = config or GanttConfig()
        self.current_date = current_date or date.today()  # noqa: DTZ011

        self.use_cases_by_id = {uc.id: uc for uc in planning.use_cases}
        for timeline in result.timelines:
            if timeline.item_id not in self.use_cases_by_id:
                raise MissingReferenceError(
                    f"Timeline for '{timeline.item_id}' has no matching use case"
                )

        self.conflicting_ids = {
            item_id for conflict in result.conflicts for item_id in conflict.item_ids
        }

    def resolve_scale(self, scale: TimeScale | str | None = None) -> TimeScale:
        """Explicit scale, else configured scale, else the best fit for the timeline range."""
        if scale is not None:
            return TimeScale(scale)
        if self.config.scale is not None:
            return self.config.scale
        bounds = timeline_bounds(self.result.timelines)
        if bounds is None:
            return TimeScale.WEEK
        return optimal_time_scale(*bounds)

    def _build_mermaid_header(self, title: str, scale: TimeScale) -> list[str]:
        tick_interval, axis_format = SCALE_AXIS[scale]
        return [
            "gantt",
            f"    title {title}",
            "    dateFormat YYYY-MM-DD",
            f"    tickInterval {tick_interval}",
            f"    axisFormat {axis_format}",
            f"    todayMarker {self.current_date:%Y-%m-%d}",
        ]

    def generate_mermaid(
        self,
        *,
        title: str | None = None,
        scale: TimeScale | str | None = None,
        group_by_developer: bool | None = None,
    ) -> str:
        """Generate Mermaid gantt chart syntax.

        Args:
            title: Chart title (default from config)
            scale: Time scale for the axis (default from config, else automatic)
            group_by_developer: One section per developer instead of a flat list

        Returns:
            Mermaid gantt chart syntax as a string
        """
        title = title or self.config.title
        if group_by_developer is None:
            group_by_developer = self.config.group_by_developer
        resolved = self.resolve_scale(scale)

        lines = self._build_mermaid_header(title, resolved)
        lines.append("")

        timelines = sorted(self.result.timelines, key=lambda t: (t.start_day, t.item_id))
        if group_by_developer:
            self._render_by_developer(lines, timelines)
        else:
            for timeline in timelines:
                self._add_task(lines, timeline, timeline.item_id)

        return "\n".join(lines)

    def chart_range(self, scale: TimeScale | str | None = None) -> tuple[date, date] | None:
        """Visible chart range: first start to last end, padded for the scale."""
        bounds = timeline_bounds(self.result.timelines)
        if bounds is None:
            return None
        start, end = bounds
        return start, extend_timeline_end(end, self.resolve_scale(scale))

    def _render_by_developer(self, lines: list[str], timelines: list[Timeline]) -> None:
        for developer in self.planning.developers:
            assigned = [t for t in timelines if developer.id in t.developer_ids]
            if not assigned:
                continue
            lines.append(f"    section {_sanitize(developer.name)}")
            for timeline in assigned:
                # Shared items appear once per developer; Mermaid task IDs must be unique
                task_id = timeline.item_id
                if len(timeline.developer_ids) > 1:
                    task_id = f"{timeline.item_id}_{developer.id}"
                self._add_task(lines, timeline, task_id)

    def _build_task_label(self, use_case: UseCase, timeline: Timeline) -> str:
        names = []
        for developer_id in timeline.developer_ids:
            developer = self.planning.get_developer(developer_id)
            names.append(developer.name if developer else developer_id)
        label = use_case.title
        if names:
            label += f" ({', '.join(names)})"
        return _sanitize(label)

    def _get_task_tags(self, use_case: UseCase, timeline: Timeline) -> list[str]:
        tags: list[str] = []
        if use_case.status == UseCaseStatus.COMPLETED:
            tags.append("done")
        elif use_case.status == UseCaseStatus.IN_DEVELOPMENT:
            tags.append("active")
        if timeline.item_id in self.conflicting_ids:
            tags.append("crit")
        return tags

    def _add_task(self, lines: list[str], timeline: Timeline, task_id: str) -> None:
        use_case = self.use_cases_by_id[timeline.item_id]
        label = self._build_task_label(use_case, timeline)
        start_str = timeline.start_date.strftime("%Y-%m-%d")

        if timeline.duration <= 0:
            lines.append(f"    {label} :milestone, {task_id}, {start_str}, 0d")
            return

        tags = self._get_task_tags(use_case, timeline)
        tags_str = ", ".join(tags) + ", " if tags else ""
        # end_date is inclusive, Mermaid durations are not
        calendar_duration = (timeline.end_date - timeline.start_date).days + 1
        lines.append(f"    {label} :{tags_str}{task_id}, {start_str}, {calendar_duration}d")


def _sanitize(text: str) -> str:
    """Strip characters Mermaid treats as syntax in labels."""
    return text.replace(":", " -").replace("#", "").replace(";", ",")
