"""Scheduler package - concurrency-aware timeline calculation.

This package turns a planning snapshot (developers with weekly capacity,
use cases with effort estimates, assignees and start dates) into timelines:
- Working-day arithmetic and day-offset calendars
- Input validation that reports, rather than raises, data problems
- Fixed-point timeline calculation with segment-level velocity splitting
- Capacity conflict detection over the computed spans

Main entry points:
- compute_timelines(): One-shot calculation for a snapshot
- TimelineCalculator: Same, as an object for repeated use
- TimelineConfig: Iteration cap, velocity conversion and calendar settings
"""

from .calculator import TimelineCalculator, compute_timelines, get_use_case_timeline
from .config import MultiDeveloperRule, TimelineConfig
from .conflicts import detect_conflicts
from .core import (
    CapacityConflict,
    IssueKind,
    PlannedItem,
    SchedulingIssue,
    Segment,
    Timeline,
    TimelineResult,
)
from .validator import SchedulerInputValidator
from .working_days import (
    WorkingDayCalendar,
    add_working_days,
    count_working_days,
    is_weekend,
    is_working_day,
    next_working_day,
    previous_working_day,
    subtract_working_days,
    working_days_between,
)

__all__ = [
    # Core dataclasses
    "CapacityConflict",
    "IssueKind",
    "PlannedItem",
    "SchedulingIssue",
    "Segment",
    "Timeline",
    "TimelineResult",
    # Configuration
    "MultiDeveloperRule",
    "TimelineConfig",
    # Calculation
    "TimelineCalculator",
    "compute_timelines",
    "get_use_case_timeline",
    "detect_conflicts",
    # Input validation
    "SchedulerInputValidator",
    # Working days
    "WorkingDayCalendar",
    "add_working_days",
    "count_working_days",
    "is_weekend",
    "is_working_day",
    "next_working_day",
    "previous_working_day",
    "subtract_working_days",
    "working_days_between",
]
