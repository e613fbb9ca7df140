"""Time scale helpers for placing timelines on a chart.

Maps dates to proportional positions between the overall start and end of a
set of timelines, and produces axis labels for day, week, month, quarter and
year scales.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from datetime import date, timedelta
from enum import Enum

from .scheduler.core import Timeline
from .scheduler.working_days import count_working_days, is_weekend, working_days_between

MONTHS_PER_YEAR = 12
MONTHS_PER_QUARTER = 3
WORKING_DAYS_PER_WEEK = 5

# optimal_time_scale() limits
MAX_DAY_SCALE_WORKING_DAYS = 14
MAX_WEEK_SCALE_WEEKS = 12
MAX_MONTH_SCALE_MONTHS = 12
MAX_QUARTER_SCALE_MONTHS = 48


class TimeScale(str, Enum):
    """Granularity of a chart's time axis."""

    DAY = "day"
    WEEK = "week"
    MONTH = "month"
    QUARTER = "quarter"
    YEAR = "year"


@dataclass(frozen=True)
class DateLabel:
    """An axis label at a proportional position."""

    date: date
    position: float
    label: str
    is_weekend: bool = False


def _add_months(d: date, months: int) -> date:
    """Add months to a first-of-month date."""
    month_index = d.month - 1 + months
    return date(d.year + month_index // MONTHS_PER_YEAR, month_index % MONTHS_PER_YEAR + 1, 1)


def _month_start(d: date) -> date:
    return date(d.year, d.month, 1)


def _quarter_start(d: date) -> date:
    return date(d.year, (d.month - 1) // MONTHS_PER_QUARTER * MONTHS_PER_QUARTER + 1, 1)


def _week_start(d: date) -> date:
    return d - timedelta(days=d.weekday())


def _short_day(d: date) -> str:
    return f"{d:%b} {d.day}"


def _quarter_label(d: date) -> str:
    return f"Q{(d.month - 1) // MONTHS_PER_QUARTER + 1} {d.year}"


def timeline_bounds(timelines: Sequence[Timeline]) -> tuple[date, date] | None:
    """Overall (min start date, max end date) across timelines, or None if empty."""
    if not timelines:
        return None
    return (
        min(t.start_date for t in timelines),
        max(t.end_date for t in timelines),
    )


def generate_day_labels(start: date, end: date, width: float) -> list[DateLabel]:
    """One label per working day, plus weekends falling on multiples of 7."""
    total = working_days_between(start, end)
    if total == 0:
        return []

    labels: list[DateLabel] = []
    current = start
    working_days_seen = 0
    while current <= end:
        weekend = is_weekend(current)
        if not weekend or current.day % 7 == 0:
            labels.append(
                DateLabel(
                    date=current,
                    position=working_days_seen / total * width,
                    label=_short_day(current),
                    is_weekend=weekend,
                )
            )
        if not weekend:
            working_days_seen += 1
        current += timedelta(days=1)
    return labels


def generate_week_labels(start: date, end: date, width: float) -> list[DateLabel]:
    """One label per week, starting from the Monday of the start week."""
    total_weeks = -(-working_days_between(start, end) // WORKING_DAYS_PER_WEEK)
    if total_weeks == 0:
        return []

    labels: list[DateLabel] = []
    current = _week_start(start)
    index = 0
    while current <= end:
        labels.append(
            DateLabel(
                date=current,
                position=index / total_weeks * width,
                label=f"Week {index + 1} ({_short_day(current)})",
            )
        )
        current += timedelta(weeks=1)
        index += 1
    return labels


def _period_labels(
    first: date, stop: date, step_months: int, width: float, fmt: Callable[[date], str]
) -> list[DateLabel]:
    total_periods = ((stop.year - first.year) * MONTHS_PER_YEAR + stop.month - first.month) // (
        step_months
    )
    labels: list[DateLabel] = []
    current = first
    index = 0
    while current < stop:
        position = index / total_periods * width if total_periods > 0 else 0.0
        labels.append(DateLabel(date=current, position=position, label=fmt(current)))
        current = _add_months(current, step_months)
        index += 1
    return labels


def generate_month_labels(start: date, end: date, width: float) -> list[DateLabel]:
    """One label per month, including the month containing ``end``."""
    first = _month_start(start)
    stop = _add_months(_month_start(end), 1)
    return _period_labels(first, stop, 1, width, lambda d: f"{d:%b %Y}")


def generate_quarter_labels(start: date, end: date, width: float) -> list[DateLabel]:
    """One label per quarter, including the quarter containing ``end``."""
    first = _quarter_start(start)
    stop = _add_months(_quarter_start(end), MONTHS_PER_QUARTER)
    return _period_labels(first, stop, MONTHS_PER_QUARTER, width, _quarter_label)


def generate_year_labels(start: date, end: date, width: float) -> list[DateLabel]:
    """One label per year, including the year containing ``end``."""
    first = date(start.year, 1, 1)
    stop = date(end.year + 1, 1, 1)
    return _period_labels(first, stop, MONTHS_PER_YEAR, width, lambda d: str(d.year))


def generate_date_labels(
    start: date, end: date, scale: TimeScale | str, width: float = 100.0
) -> list[DateLabel]:
    """Generate axis labels for the given scale."""
    scale = TimeScale(scale)
    if scale == TimeScale.DAY:
        return generate_day_labels(start, end, width)
    if scale == TimeScale.WEEK:
        return generate_week_labels(start, end, width)
    if scale == TimeScale.MONTH:
        return generate_month_labels(start, end, width)
    if scale == TimeScale.QUARTER:
        return generate_quarter_labels(start, end, width)
    return generate_year_labels(start, end, width)


def calculate_date_position(
    target: date, start: date, end: date, scale: TimeScale | str, width: float = 100.0
) -> float:
    """Position of a date between ``start`` and ``end``, scaled to ``width``.

    Day and week scales interpolate over working days, so weekends take no
    space. Coarser scales interpolate over calendar days.
    """
    scale = TimeScale(scale)
    if scale in (TimeScale.DAY, TimeScale.WEEK):
        total = count_working_days(start, end)
        elapsed = count_working_days(start, target)
    else:
        total = (end - start).days
        elapsed = (target - start).days
    if total <= 0:
        return 0.0
    return elapsed / total * width


def optimal_time_scale(start: date, end: date) -> TimeScale:
    """Pick the scale that keeps the chart readable for the given range."""
    total_days = working_days_between(start, end)
    total_weeks = total_days / WORKING_DAYS_PER_WEEK
    total_months = (end.year - start.year) * MONTHS_PER_YEAR + (end.month - start.month) + 1

    if total_days <= MAX_DAY_SCALE_WORKING_DAYS:
        return TimeScale.DAY
    if total_weeks <= MAX_WEEK_SCALE_WEEKS:
        return TimeScale.WEEK
    if total_months <= MAX_MONTH_SCALE_MONTHS:
        return TimeScale.MONTH
    if total_months <= MAX_QUARTER_SCALE_MONTHS:
        return TimeScale.QUARTER
    return TimeScale.YEAR


def format_date_for_scale(d: date, scale: TimeScale | str) -> str:
    """Format a date for display on a bar at the given scale."""
    scale = TimeScale(scale)
    if scale in (TimeScale.DAY, TimeScale.WEEK):
        return _short_day(d)
    if scale == TimeScale.MONTH:
        return f"{d:%b %Y}"
    if scale == TimeScale.QUARTER:
        return _quarter_label(d)
    return str(d.year)


def extend_timeline_end(end: date, scale: TimeScale | str) -> date:
    """Push a chart's end date out so future periods are visible."""
    scale = TimeScale(scale)
    if scale in (TimeScale.DAY, TimeScale.WEEK):
        return end + timedelta(weeks=4)

    months = {TimeScale.MONTH: 3, TimeScale.QUARTER: 6, TimeScale.YEAR: 12}[scale]
    month_index = end.month - 1 + months
    year = end.year + month_index // MONTHS_PER_YEAR
    month = month_index % MONTHS_PER_YEAR + 1
    # Clamp to the last day of the target month (Jan 31 + 3 months -> Apr 30)
    last_day = (_add_months(date(year, month, 1), 1) - timedelta(days=1)).day
    return date(year, month, min(end.day, last_day))
