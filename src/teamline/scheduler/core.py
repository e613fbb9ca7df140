"""Core dataclasses for the timeline calculator."""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum


def _default_str_list() -> list[str]:
    return []


class IssueKind(str, Enum):
    """Categories of input problems the calculator handles locally."""

    UNKNOWN_DEVELOPER = "unknown_developer"  # Assignment to an ID not in the roster
    UNASSIGNED = "unassigned"  # No valid assignment left after dropping unknown IDs
    ZERO_CAPACITY = "zero_capacity"  # Assigned developer has no weekly hours
    STALLED = "stalled"  # Item cannot progress at all (total velocity is zero)
    NEGATIVE_EFFORT = "negative_effort"  # man_days < 0, item rejected
    NOT_CONVERGED = "not_converged"  # Iteration cap reached


@dataclass(frozen=True)
class SchedulingIssue:
    """A problem found while preparing or running the calculation."""

    kind: IssueKind
    message: str
    item_id: str | None = None
    developer_id: str | None = None


@dataclass(frozen=True)
class PlannedItem:
    """A validated, schedulable item expressed in day offsets."""

    id: str
    start_date: date
    start_day: int
    man_days: float
    developer_ids: tuple[str, ...]
    velocities: tuple[float, ...]  # Daily velocity per developer_ids entry


@dataclass(frozen=True)
class Segment:
    """A span [start_day, end_day) during which an item's velocity is constant."""

    start_day: int
    end_day: int
    velocity: float  # Man-days completed per working day
    work_done: float  # Man-days completed within the span
    concurrent_item_ids: tuple[str, ...] = ()  # Other items competing for a shared developer
    start_date: date | None = None
    end_date: date | None = None  # Last working day of the span (inclusive)

    @property
    def length(self) -> int:
        """Length of the span in working days."""
        return self.end_day - self.start_day


@dataclass(frozen=True)
class Timeline:
    """Computed schedule for one item."""

    item_id: str
    start_date: date
    end_date: date  # Last working day of the work (inclusive)
    start_day: int
    end_day: int  # Exclusive
    duration: int  # Working days
    calendar_days: int
    man_days: float
    average_velocity: float
    developer_ids: tuple[str, ...]
    segments: tuple[Segment, ...] = ()

    def overlaps(self, other: "Timeline") -> bool:
        """True if the two [start_day, end_day) spans share at least one day."""
        return self.start_day < other.end_day and self.end_day > other.start_day


@dataclass(frozen=True)
class CapacityConflict:
    """Items whose computed spans overlap on one or more shared developers.

    Groups are transitive: each item overlaps at least one other in
    ``item_ids``, but not every pair needs to run at the same time.
    """

    developer_ids: tuple[str, ...]
    item_ids: tuple[str, ...]
    start_day: int
    end_day: int
    start_date: date
    end_date: date


@dataclass
class TimelineResult:
    """Complete result of a timeline calculation."""

    timelines: list[Timeline] = field(default_factory=list)
    conflicts: list[CapacityConflict] = field(default_factory=list)
    converged: bool = True
    iterations: int = 0
    issues: list[SchedulingIssue] = field(default_factory=list)
    stalled_item_ids: list[str] = field(default_factory=_default_str_list)

    @property
    def warnings(self) -> list[str]:
        """Human-readable messages for every issue."""
        return [issue.message for issue in self.issues]

    def get(self, item_id: str) -> Timeline | None:
        """Get the timeline computed for an item, if any."""
        for timeline in self.timelines:
            if timeline.item_id == item_id:
                return timeline
        return None
