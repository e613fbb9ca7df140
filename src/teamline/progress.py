"""Schedule health: expected vs. actual progress of use cases."""

from __future__ import annotations

import math
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from datetime import date
from enum import Enum

from pydantic import BaseModel

from .models import UseCase, UseCaseStatus
from .scheduler.working_days import count_working_days


class ScheduleStatus(str, Enum):
    """Where a use case stands relative to its timeline."""

    NOT_STARTED = "not-started"
    AHEAD = "ahead"
    ON_TRACK = "on-track"
    BEHIND = "behind"
    AT_RISK = "at-risk"
    COMPLETED = "completed"


class ProgressThresholds(BaseModel):
    """Thresholds, in percentage points, for classifying schedule status."""

    ahead_threshold: float = 10.0  # More than 10% ahead of expected
    behind_threshold: float = 10.0  # More than 10% behind expected
    at_risk_threshold: float = 25.0  # More than 25% behind expected
    stale_update_days: int = 7  # Flag if not updated in 7 days


@dataclass(frozen=True)
class ProgressSummary:
    """Counts of use cases per schedule status."""

    total: int
    not_started: int
    ahead: int
    on_track: int
    behind: int
    at_risk: int
    completed: int
    stale_updates: int
    average_progress: float


def _round_tenth(value: float) -> float:
    """Round to one decimal with halves going up (``round`` goes to even)."""
    return math.floor(value * 10 + 0.5) / 10


def expected_progress(
    start_date: date | None,
    end_date: date | None,
    man_days: float,
    as_of: date,
) -> float:
    """Expected progress percentage of a use case on a given date.

    With an end date (typically the capacity-adjusted one from the
    calculator) this is the calendar position within [start, end]. Without
    one it falls back to elapsed business days over man-days, which ignores
    capacity.

    Returns:
        Percentage between 0 and 100, rounded to one decimal
    """
    if start_date is None or man_days <= 0:
        return 0.0
    if as_of < start_date:
        return 0.0

    if end_date is not None:
        if as_of >= end_date:
            return 100.0
        total_days = (end_date - start_date).days
        if total_days <= 0:
            return 100.0
        elapsed_days = (as_of - start_date).days
        return min(100.0, _round_tenth(elapsed_days / total_days * 100))

    elapsed_business_days = count_working_days(start_date, as_of)
    return min(100.0, _round_tenth(elapsed_business_days / man_days * 100))


def schedule_status(
    use_case: UseCase,
    end_date: date | None,
    as_of: date,
    thresholds: ProgressThresholds | None = None,
) -> ScheduleStatus:
    """Compare actual progress against expected progress."""
    thresholds = thresholds or ProgressThresholds()
    actual = use_case.progress_percent or 0.0

    if use_case.status == UseCaseStatus.COMPLETED or actual >= 100:
        return ScheduleStatus.COMPLETED

    if use_case.start_date is None or as_of < use_case.start_date:
        return ScheduleStatus.NOT_STARTED

    expected = expected_progress(use_case.start_date, end_date, use_case.man_days, as_of)
    difference = actual - expected

    if difference >= thresholds.ahead_threshold:
        return ScheduleStatus.AHEAD
    if difference <= -thresholds.at_risk_threshold:
        return ScheduleStatus.AT_RISK
    if difference <= -thresholds.behind_threshold:
        return ScheduleStatus.BEHIND
    return ScheduleStatus.ON_TRACK


def days_since_last_update(last_update: date | None, as_of: date) -> int | None:
    """Days since the last progress update, or None if there never was one."""
    if last_update is None:
        return None
    return (as_of - last_update).days


def is_progress_stale(
    last_update: date | None,
    as_of: date,
    thresholds: ProgressThresholds | None = None,
) -> bool:
    """True if progress was never reported or not reported recently."""
    thresholds = thresholds or ProgressThresholds()
    days = days_since_last_update(last_update, as_of)
    return days is None or days > thresholds.stale_update_days


def progress_summary(
    use_cases: Sequence[UseCase],
    end_dates: Mapping[str, date],
    as_of: date,
    thresholds: ProgressThresholds | None = None,
) -> ProgressSummary:
    """Summarize schedule status over a set of use cases.

    Args:
        use_cases: Use cases to summarize
        end_dates: Capacity-adjusted end date per use case ID, where known
        as_of: Date to evaluate progress on
        thresholds: Optional status thresholds
    """
    thresholds = thresholds or ProgressThresholds()
    counts = dict.fromkeys(ScheduleStatus, 0)
    stale = 0
    total_progress = 0.0

    for use_case in use_cases:
        status = schedule_status(use_case, end_dates.get(use_case.id), as_of, thresholds)
        counts[status] += 1

        active = status not in (ScheduleStatus.COMPLETED, ScheduleStatus.NOT_STARTED)
        if active and is_progress_stale(use_case.last_progress_update, as_of, thresholds):
            stale += 1

        total_progress += use_case.progress_percent or 0.0

    average = _round_tenth(total_progress / len(use_cases)) if use_cases else 0.0
    return ProgressSummary(
        total=len(use_cases),
        not_started=counts[ScheduleStatus.NOT_STARTED],
        ahead=counts[ScheduleStatus.AHEAD],
        on_track=counts[ScheduleStatus.ON_TRACK],
        behind=counts[ScheduleStatus.BEHIND],
        at_risk=counts[ScheduleStatus.AT_RISK],
        completed=counts[ScheduleStatus.COMPLETED],
        stale_updates=stale,
        average_progress=average,
    )


def format_progress(percent: float | None) -> str:
    """Format a progress percentage for display."""
    if percent is None:
        return "-"
    return f"{math.floor(percent + 0.5)}%"
