"""Working-day arithmetic.

Only Monday through Friday count as working days. Saturday and Sunday are
skipped by every calculation in this module.
"""

from datetime import date, timedelta

WORKING_DAYS_PER_WEEK = 5
SATURDAY = 5  # date.weekday() value
SUNDAY = 6


def is_weekend(d: date) -> bool:
    """Check if a date falls on Saturday or Sunday."""
    return d.weekday() >= SATURDAY


def is_working_day(d: date) -> bool:
    """Check if a date is a business day (Monday-Friday)."""
    return not is_weekend(d)


def next_working_day(d: date) -> date:
    """Move a weekend date forward to Monday. Working days are returned unchanged."""
    if d.weekday() == SATURDAY:
        return d + timedelta(days=2)
    if d.weekday() == SUNDAY:
        return d + timedelta(days=1)
    return d


def previous_working_day(d: date) -> date:
    """Move a weekend date back to Friday. Working days are returned unchanged."""
    if d.weekday() == SATURDAY:
        return d - timedelta(days=1)
    if d.weekday() == SUNDAY:
        return d - timedelta(days=2)
    return d


def add_working_days(start: date, working_days: int) -> date:
    """Add N working days to a date, skipping weekends.

    The (normalized) start date counts as the first working day, so adding
    5 working days to a Monday yields the Friday of the same week.

    Args:
        start: Starting date (moved to the next Monday if on a weekend)
        working_days: Number of working days to add

    Returns:
        The date of the last working day, or ``start`` unchanged if
        ``working_days <= 0``
    """
    if working_days <= 0:
        return start

    current = next_working_day(start)
    remaining = working_days - 1
    while remaining > 0:
        current += timedelta(days=1)
        if is_working_day(current):
            remaining -= 1
    return current


def subtract_working_days(start: date, working_days: int) -> date:
    """Subtract N working days from a date, skipping weekends.

    Mirror image of add_working_days(): the (normalized) start date counts as
    the first working day.
    """
    if working_days <= 0:
        return start

    current = previous_working_day(start)
    remaining = working_days - 1
    while remaining > 0:
        current -= timedelta(days=1)
        if is_working_day(current):
            remaining -= 1
    return current


def count_working_days(start: date, end: date) -> int:
    """Count working days in the half-open range [start, end)."""
    if end <= start:
        return 0

    total_days = (end - start).days
    full_weeks, extra_days = divmod(total_days, 7)
    count = full_weeks * WORKING_DAYS_PER_WEEK
    tail_start = start + timedelta(weeks=full_weeks)
    for i in range(extra_days):
        if is_working_day(tail_start + timedelta(days=i)):
            count += 1
    return count


def working_days_between(start: date, end: date) -> int:
    """Count working days between two dates, both ends inclusive."""
    if start > end:
        return 0
    return count_working_days(start, end + timedelta(days=1))


class WorkingDayCalendar:
    """Maps calendar dates to integer day offsets from an anchor date.

    Offset 0 is the anchor (normalized to a working day). With
    ``skip_weekends`` disabled every calendar day is a working day and
    offsets are plain day differences.
    """

    def __init__(self, anchor: date, *, skip_weekends: bool = True) -> None:
        self.skip_weekends = skip_weekends
        self.anchor = self.normalize(anchor)

    def normalize(self, d: date) -> date:
        """Return the first working day on or after ``d``."""
        if self.skip_weekends:
            return next_working_day(d)
        return d

    def offset_of(self, d: date) -> int:
        """Get the day offset of ``d`` (weekend dates map to the following Monday)."""
        d = self.normalize(d)
        if not self.skip_weekends:
            return (d - self.anchor).days
        if d >= self.anchor:
            return count_working_days(self.anchor, d)
        return -count_working_days(d, self.anchor)

    def date_of(self, offset: int) -> date:
        """Get the date of a day offset."""
        if not self.skip_weekends:
            return self.anchor + timedelta(days=offset)

        step = 1 if offset >= 0 else -1
        weeks, remaining = divmod(abs(offset), WORKING_DAYS_PER_WEEK)
        current = self.anchor + timedelta(weeks=weeks * step)
        while remaining > 0:
            current += timedelta(days=step)
            if is_working_day(current):
                remaining -= 1
        return current

    def days_between(self, start: date, end: date) -> int:
        """Number of day offsets in [start, end)."""
        return self.offset_of(end) - self.offset_of(start)
