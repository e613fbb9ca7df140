"""Concurrency-aware timeline calculator.

A developer assigned to several use cases at once splits their velocity
evenly across them. How long each use case takes therefore depends on which
other use cases are still running, which in turn depends on how long those
take. The calculator resolves that circular dependency by fixed-point
iteration:

1. Estimate every end day assuming no concurrency.
2. Collect the change points: every start day and every current end day.
3. Walk each item through the segments between change points, splitting
   each shared developer's velocity by the number of items active on them,
   until the item's effort is done.
4. Repeat step 2-3 with the new end days until nothing moves or the
   iteration cap is reached.

All arithmetic is done on integer day offsets produced by a
WorkingDayCalendar; dates are only attached to the final timelines.
"""

import bisect
import math
from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING

from teamline.logger import changes_enabled, checks_enabled, debug_enabled, get_logger

from .config import MultiDeveloperRule, TimelineConfig
from .conflicts import detect_conflicts
from .core import (
    IssueKind,
    PlannedItem,
    SchedulingIssue,
    Segment,
    Timeline,
    TimelineResult,
)
from .validator import SchedulerInputValidator
from .working_days import WorkingDayCalendar

logger = get_logger()

if TYPE_CHECKING:
    from teamline.models import Developer, UseCase

# Tolerance for float comparisons of accumulated work
EPSILON = 1e-9


def days_needed(work: float, velocity: float) -> int:
    """Whole working days needed to complete ``work`` at ``velocity``.

    Partial days round up: work is never complete with a fraction of a
    day remaining.
    """
    if work <= EPSILON:
        return 0
    return max(1, math.ceil(work / velocity - EPSILON))


class TimelineCalculator:
    """Computes start/end dates and capacity conflicts for a planning snapshot.

    The calculator is a pure function of its inputs: it never mutates the
    use cases or developers it is given, and calling calculate() twice
    yields identical results.
    """

    def __init__(
        self,
        use_cases: Sequence["UseCase"],
        developers: Sequence["Developer"],
        *,
        config: TimelineConfig | None = None,
        calendar: WorkingDayCalendar | None = None,
    ):
        """Initialize the calculator.

        Args:
            use_cases: All use cases; those without a start date or assignees are skipped
            developers: The full developer roster
            config: Optional calculator configuration
            calendar: Optional working-day model; defaults to one anchored at the
                earliest start date
        """
        self.use_cases = list(use_cases)
        self.developers = list(developers)
        self.config = config or TimelineConfig()
        self.calendar = calendar
        self.validator = SchedulerInputValidator(self.config)

    def calculate(self) -> TimelineResult:
        """Run the fixed-point iteration and build timelines and conflicts."""
        items, issues, stalled, calendar = self.validator.extract_items(
            self.use_cases, self.developers, self.calendar
        )
        if not items or calendar is None:
            return TimelineResult(issues=issues, stalled_item_ids=stalled)

        by_developer = self._index_by_developer(items)
        ends = self._initial_estimates(items)
        logger.changes(f"Initial estimates: {self._format_ends(items, ends)}")

        converged = False
        iterations = 0
        segments: dict[str, list[Segment]] = {}
        for iteration in range(1, self.config.max_iterations + 1):
            iterations = iteration
            new_ends, segments = self._relax(items, by_developer, ends)

            moved = [item.id for item in items if new_ends[item.id] != ends[item.id]]
            if moved and changes_enabled():
                for item_id in moved:
                    logger.changes(
                        f"Iteration {iteration}: {item_id} end day "
                        f"{ends[item_id]} -> {new_ends[item_id]}"
                    )
            ends = new_ends
            if not moved:
                converged = True
                logger.changes(f"Converged after {iteration} iteration(s)")
                break

        if not converged:
            issues.append(
                SchedulingIssue(
                    kind=IssueKind.NOT_CONVERGED,
                    message=(
                        f"Timelines did not stabilize within {self.config.max_iterations} "
                        "iterations - end dates are best estimates"
                    ),
                )
            )

        timelines = [
            self._build_timeline(item, ends[item.id], segments[item.id], calendar)
            for item in items
        ]
        conflicts = detect_conflicts(timelines)

        return TimelineResult(
            timelines=timelines,
            conflicts=conflicts,
            converged=converged,
            iterations=iterations,
            issues=issues,
            stalled_item_ids=stalled,
        )

    def _index_by_developer(self, items: list[PlannedItem]) -> dict[str, list[PlannedItem]]:
        by_developer: dict[str, list[PlannedItem]] = {}
        for item in items:
            for developer_id in item.developer_ids:
                by_developer.setdefault(developer_id, []).append(item)
        return by_developer

    def _driving_developers(self, item: PlannedItem) -> list[tuple[str, float]]:
        """Developers whose velocity counts toward the item's progress."""
        pairs = list(zip(item.developer_ids, item.velocities, strict=True))
        if self.config.multi_developer_rule == MultiDeveloperRule.PRIMARY:
            return pairs[:1]
        return pairs

    def _initial_estimates(self, items: list[PlannedItem]) -> dict[str, int]:
        """End day of every item assuming it has its developers to itself."""
        estimates: dict[str, int] = {}
        for item in items:
            velocity = sum(v for _, v in self._driving_developers(item))
            estimates[item.id] = item.start_day + days_needed(item.man_days, velocity)
        return estimates

    def _relax(
        self,
        items: list[PlannedItem],
        by_developer: Mapping[str, list[PlannedItem]],
        ends: Mapping[str, int],
    ) -> tuple[dict[str, int], dict[str, list[Segment]]]:
        """One relaxation pass: recompute every end day against the current estimates."""
        change_points = sorted({item.start_day for item in items} | set(ends.values()))
        if debug_enabled():
            logger.debug(f"  Change points: {change_points}")

        new_ends: dict[str, int] = {}
        segments: dict[str, list[Segment]] = {}
        for item in items:
            end_day, item_segments = self._walk_segments(item, by_developer, ends, change_points)
            new_ends[item.id] = end_day
            segments[item.id] = item_segments
        return new_ends, segments

    def _walk_segments(
        self,
        item: PlannedItem,
        by_developer: Mapping[str, list[PlannedItem]],
        ends: Mapping[str, int],
        change_points: list[int],
    ) -> tuple[int, list[Segment]]:
        """Consume the item's effort segment by segment until it is done."""
        if item.man_days <= EPSILON:
            return item.start_day, []

        segments: list[Segment] = []
        remaining = item.man_days
        segment_start = item.start_day

        # Zero-length spans never appear: only points after the start are visited
        first = bisect.bisect_right(change_points, segment_start)
        for segment_end in change_points[first:]:
            velocity, concurrent = self._effective_velocity(
                item, by_developer, ends, segment_start, segment_end
            )
            capacity = (segment_end - segment_start) * velocity
            if checks_enabled():
                logger.checks(
                    f"    {item.id} [{segment_start}, {segment_end}): velocity {velocity:.3f}, "
                    f"capacity {capacity:.3f}, remaining {remaining:.3f}"
                )

            if capacity >= remaining - EPSILON:
                end_day = segment_start + days_needed(remaining, velocity)
                segments.append(Segment(segment_start, end_day, velocity, remaining, concurrent))
                return end_day, segments

            segments.append(Segment(segment_start, segment_end, velocity, capacity, concurrent))
            remaining -= capacity
            segment_start = segment_end

        # Past the last change point: only items still running compete
        velocity, concurrent = self._effective_velocity(
            item, by_developer, ends, segment_start, None
        )
        end_day = segment_start + days_needed(remaining, velocity)
        if checks_enabled():
            logger.checks(
                f"    {item.id} [{segment_start}, {end_day}): extended at velocity {velocity:.3f}"
            )
        segments.append(Segment(segment_start, end_day, velocity, remaining, concurrent))
        return end_day, segments

    def _effective_velocity(
        self,
        item: PlannedItem,
        by_developer: Mapping[str, list[PlannedItem]],
        ends: Mapping[str, int],
        segment_start: int,
        segment_end: int | None,
    ) -> tuple[float, tuple[str, ...]]:
        """Velocity of the item over a span, given the items competing for its developers.

        Args:
            segment_end: Exclusive end of the span, or None for an open-ended span

        Returns:
            Tuple of (velocity, IDs of other items sharing a developer in the span)
        """
        velocity = 0.0
        concurrent: list[str] = []
        for developer_id, developer_velocity in self._driving_developers(item):
            # The item always competes with itself, so the count is at least 1
            count = 1
            for other in by_developer.get(developer_id, []):
                if other.id == item.id:
                    continue
                starts_in_time = segment_end is None or other.start_day < segment_end
                if starts_in_time and ends[other.id] > segment_start:
                    count += 1
                    if other.id not in concurrent:
                        concurrent.append(other.id)
            velocity += developer_velocity / count
        return velocity, tuple(concurrent)

    def _build_timeline(
        self,
        item: PlannedItem,
        end_day: int,
        segments: list[Segment],
        calendar: WorkingDayCalendar,
    ) -> Timeline:
        duration = end_day - item.start_day
        if duration > 0:
            first_day = calendar.date_of(item.start_day)
            end_date = calendar.date_of(end_day - 1)
            calendar_days = (end_date - first_day).days + 1
            average_velocity = item.man_days / duration
        else:
            end_date = item.start_date
            calendar_days = 0
            average_velocity = sum(v for _, v in self._driving_developers(item))

        dated = [
            Segment(
                start_day=segment.start_day,
                end_day=segment.end_day,
                velocity=segment.velocity,
                work_done=segment.work_done,
                concurrent_item_ids=segment.concurrent_item_ids,
                start_date=calendar.date_of(segment.start_day),
                end_date=calendar.date_of(segment.end_day - 1),
            )
            for segment in _merge_segments(segments)
        ]

        return Timeline(
            item_id=item.id,
            start_date=item.start_date,
            end_date=end_date,
            start_day=item.start_day,
            end_day=end_day,
            duration=duration,
            calendar_days=calendar_days,
            man_days=item.man_days,
            average_velocity=average_velocity,
            developer_ids=item.developer_ids,
            segments=tuple(dated),
        )

    def _format_ends(self, items: list[PlannedItem], ends: Mapping[str, int]) -> str:
        return ", ".join(f"{item.id}={ends[item.id]}" for item in items)


def _merge_segments(segments: list[Segment]) -> list[Segment]:
    """Merge adjacent segments whose velocity and competitors are the same."""
    merged: list[Segment] = []
    for segment in segments:
        if segment.length <= 0:
            continue
        if merged:
            last = merged[-1]
            if (
                last.end_day == segment.start_day
                and math.isclose(last.velocity, segment.velocity)
                and set(last.concurrent_item_ids) == set(segment.concurrent_item_ids)
            ):
                merged[-1] = Segment(
                    start_day=last.start_day,
                    end_day=segment.end_day,
                    velocity=last.velocity,
                    work_done=last.work_done + segment.work_done,
                    concurrent_item_ids=last.concurrent_item_ids,
                )
                continue
        merged.append(segment)
    return merged


def compute_timelines(
    use_cases: Sequence["UseCase"],
    developers: Sequence["Developer"],
    config: TimelineConfig | None = None,
    calendar: WorkingDayCalendar | None = None,
) -> TimelineResult:
    """Compute timelines and capacity conflicts for a planning snapshot.

    Convenience wrapper around TimelineCalculator.
    """
    return TimelineCalculator(use_cases, developers, config=config, calendar=calendar).calculate()


def get_use_case_timeline(
    use_case_id: str,
    use_cases: Sequence["UseCase"],
    developers: Sequence["Developer"],
    config: TimelineConfig | None = None,
) -> Timeline | None:
    """Get the timeline of a single use case, computed against the whole snapshot."""
    return compute_timelines(use_cases, developers, config).get(use_case_id)
