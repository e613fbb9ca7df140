"""Tests for working-day arithmetic."""

from datetime import date

import pytest

from teamline.scheduler.working_days import (
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

MONDAY = date(2025, 1, 6)
FRIDAY = date(2025, 1, 10)
SATURDAY = date(2025, 1, 11)
SUNDAY = date(2025, 1, 12)


class TestDayClassification:
    """Test weekend detection and normalization."""

    def test_weekend(self) -> None:
        assert is_weekend(SATURDAY)
        assert is_weekend(SUNDAY)
        assert not is_weekend(FRIDAY)

    def test_working_day(self) -> None:
        assert is_working_day(MONDAY)
        assert not is_working_day(SUNDAY)

    def test_next_working_day(self) -> None:
        assert next_working_day(SATURDAY) == date(2025, 1, 13)
        assert next_working_day(SUNDAY) == date(2025, 1, 13)
        assert next_working_day(FRIDAY) == FRIDAY

    def test_previous_working_day(self) -> None:
        assert previous_working_day(SATURDAY) == FRIDAY
        assert previous_working_day(SUNDAY) == FRIDAY
        assert previous_working_day(MONDAY) == MONDAY


class TestAddSubtract:
    """Test adding and subtracting working days."""

    def test_start_counts_as_first_day(self) -> None:
        assert add_working_days(MONDAY, 1) == MONDAY
        assert add_working_days(MONDAY, 5) == FRIDAY

    def test_add_crosses_weekend(self) -> None:
        assert add_working_days(FRIDAY, 2) == date(2025, 1, 13)
        assert add_working_days(MONDAY, 10) == date(2025, 1, 17)

    def test_add_from_weekend(self) -> None:
        assert add_working_days(SATURDAY, 1) == date(2025, 1, 13)

    def test_add_nothing(self) -> None:
        assert add_working_days(SATURDAY, 0) == SATURDAY
        assert add_working_days(MONDAY, -3) == MONDAY

    def test_subtract(self) -> None:
        assert subtract_working_days(FRIDAY, 5) == MONDAY
        assert subtract_working_days(date(2025, 1, 13), 2) == FRIDAY
        assert subtract_working_days(SUNDAY, 1) == FRIDAY


class TestCounting:
    """Test counting working days in a range."""

    def test_half_open_range(self) -> None:
        assert count_working_days(MONDAY, FRIDAY) == 4
        assert count_working_days(MONDAY, date(2025, 1, 13)) == 5

    def test_empty_range(self) -> None:
        assert count_working_days(FRIDAY, MONDAY) == 0
        assert count_working_days(MONDAY, MONDAY) == 0

    def test_weekend_only_range(self) -> None:
        assert count_working_days(SATURDAY, date(2025, 1, 13)) == 0

    def test_several_weeks(self) -> None:
        assert count_working_days(MONDAY, date(2025, 2, 3)) == 20

    def test_inclusive_between(self) -> None:
        assert working_days_between(MONDAY, FRIDAY) == 5
        assert working_days_between(FRIDAY, date(2025, 1, 13)) == 2
        assert working_days_between(FRIDAY, MONDAY) == 0


class TestWorkingDayCalendar:
    """Test mapping between dates and day offsets."""

    def test_anchor_is_normalized(self) -> None:
        calendar = WorkingDayCalendar(SATURDAY)
        assert calendar.anchor == date(2025, 1, 13)
        assert calendar.offset_of(date(2025, 1, 13)) == 0

    def test_offsets_skip_weekends(self) -> None:
        calendar = WorkingDayCalendar(MONDAY)
        assert calendar.offset_of(FRIDAY) == 4
        assert calendar.offset_of(SATURDAY) == 5
        assert calendar.offset_of(date(2025, 1, 13)) == 5

    def test_negative_offsets(self) -> None:
        calendar = WorkingDayCalendar(date(2025, 1, 13))
        assert calendar.offset_of(FRIDAY) == -1
        assert calendar.date_of(-1) == FRIDAY
        assert calendar.date_of(-5) == MONDAY

    @pytest.mark.parametrize("offset", [0, 1, 4, 5, 9, 23, 61])
    def test_date_of_inverts_offset_of(self, offset: int) -> None:
        calendar = WorkingDayCalendar(date(2025, 1, 8))
        d = calendar.date_of(offset)
        assert is_working_day(d)
        assert calendar.offset_of(d) == offset

    def test_calendar_days_when_weekends_not_skipped(self) -> None:
        calendar = WorkingDayCalendar(FRIDAY, skip_weekends=False)
        assert calendar.offset_of(SUNDAY) == 2
        assert calendar.date_of(1) == SATURDAY

    def test_days_between(self) -> None:
        calendar = WorkingDayCalendar(MONDAY)
        assert calendar.days_between(MONDAY, date(2025, 1, 20)) == 10
