"""Input validation and use-case-to-item conversion."""

from collections.abc import Sequence
from typing import TYPE_CHECKING

from teamline.logger import get_logger

from .config import TimelineConfig
from .core import IssueKind, PlannedItem, SchedulingIssue
from .working_days import WorkingDayCalendar

logger = get_logger()

if TYPE_CHECKING:
    from teamline.models import Developer, UseCase


class SchedulerInputValidator:
    """Turns a planning snapshot into the items the calculator works on.

    Every data problem is handled here and reported as a SchedulingIssue,
    never raised, so one bad use case cannot sink the whole calculation.
    """

    def __init__(self, config: TimelineConfig | None = None):
        self.config = config or TimelineConfig()

    def build_calendar(self, use_cases: Sequence["UseCase"]) -> WorkingDayCalendar | None:
        """Build a calendar anchored at the earliest start date, or None if nothing starts."""
        start_dates = [uc.start_date for uc in use_cases if uc.is_schedulable and uc.start_date]
        if not start_dates:
            return None
        return WorkingDayCalendar(min(start_dates), skip_weekends=self.config.skip_weekends)

    def extract_items(
        self,
        use_cases: Sequence["UseCase"],
        developers: Sequence["Developer"],
        calendar: WorkingDayCalendar | None = None,
    ) -> tuple[list[PlannedItem], list[SchedulingIssue], list[str], WorkingDayCalendar | None]:
        """Extract schedulable items from use cases.

        Returns:
            Tuple of (items, issues, stalled_item_ids, calendar)
            - items: validated items in input order
            - issues: problems found (unknown developers, zero capacity, bad effort)
            - stalled_item_ids: items that cannot make progress at all
            - calendar: the calendar used to compute day offsets
        """
        roster = {developer.id: developer for developer in developers}
        if calendar is None:
            calendar = self.build_calendar(use_cases)

        items: list[PlannedItem] = []
        issues: list[SchedulingIssue] = []
        stalled: list[str] = []

        for use_case in use_cases:
            # No start date or nobody assigned: no timeline, and not an error
            if not use_case.is_schedulable or calendar is None:
                continue
            assert use_case.start_date is not None

            if use_case.man_days < 0:
                issues.append(
                    SchedulingIssue(
                        kind=IssueKind.NEGATIVE_EFFORT,
                        item_id=use_case.id,
                        message=(
                            f"Use case '{use_case.id}' has negative effort "
                            f"({use_case.man_days} man-days) - excluded from schedule"
                        ),
                    )
                )
                continue

            developer_ids, velocities, known = self._resolve_assignments(use_case, roster, issues)

            if not known:
                issues.append(
                    SchedulingIssue(
                        kind=IssueKind.UNASSIGNED,
                        item_id=use_case.id,
                        message=(
                            f"Use case '{use_case.id}' has no assigned developer in the roster "
                            "- excluded from schedule"
                        ),
                    )
                )
                continue

            if not developer_ids:
                stalled.append(use_case.id)
                issues.append(
                    SchedulingIssue(
                        kind=IssueKind.STALLED,
                        item_id=use_case.id,
                        message=(
                            f"Use case '{use_case.id}' cannot progress: no assigned developer "
                            "has weekly capacity"
                        ),
                    )
                )
                continue

            item = PlannedItem(
                id=use_case.id,
                start_date=use_case.start_date,
                start_day=calendar.offset_of(use_case.start_date),
                man_days=float(use_case.man_days),
                developer_ids=tuple(developer_ids),
                velocities=tuple(velocities),
            )
            logger.debug(
                f"  Item {item.id}: start day {item.start_day}, {item.man_days} man-days, "
                f"developers {', '.join(item.developer_ids)}"
            )
            items.append(item)

        return items, issues, stalled, calendar

    def _resolve_assignments(
        self,
        use_case: "UseCase",
        roster: dict[str, "Developer"],
        issues: list[SchedulingIssue],
    ) -> tuple[list[str], list[float], bool]:
        """Resolve assigned developer IDs against the roster.

        Returns:
            Tuple of (developer_ids, velocities, any_known)
            - developer_ids: assignments that contribute velocity, in assignment order
            - velocities: daily velocity of each of those developers
            - any_known: True if at least one assigned ID exists in the roster
        """
        developer_ids: list[str] = []
        velocities: list[float] = []
        any_known = False

        for developer_id in use_case.assigned_developer_ids:
            if developer_id in developer_ids:
                continue

            developer = roster.get(developer_id)
            if developer is None:
                issues.append(
                    SchedulingIssue(
                        kind=IssueKind.UNKNOWN_DEVELOPER,
                        item_id=use_case.id,
                        developer_id=developer_id,
                        message=(
                            f"Use case '{use_case.id}' is assigned to unknown developer "
                            f"'{developer_id}' - assignment ignored"
                        ),
                    )
                )
                logger.warning(f"Unknown developer '{developer_id}' on use case '{use_case.id}'")
                continue

            any_known = True
            velocity = self.config.daily_velocity(developer.weekly_capacity_hours)
            if velocity <= 0:
                issues.append(
                    SchedulingIssue(
                        kind=IssueKind.ZERO_CAPACITY,
                        item_id=use_case.id,
                        developer_id=developer_id,
                        message=(
                            f"Developer '{developer_id}' has no weekly capacity - "
                            f"contributes nothing to use case '{use_case.id}'"
                        ),
                    )
                )
                continue

            developer_ids.append(developer_id)
            velocities.append(velocity)

        return developer_ids, velocities, any_known
