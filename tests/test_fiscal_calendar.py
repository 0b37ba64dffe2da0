"""Tests for the Saturday-start business week calendar."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from datetime import date, datetime, timedelta

import pytest

from engine.fiscal_calendar import (
    CalendarInputError,
    week_start_of,
    week_range,
    week_of,
    is_cross_month_week,
    valid_weeks_in_month,
    weeks_assigned_to_month,
    majority_week_of,
    assigned_month_by_majority,
    weeks_in_month,
    week_key,
    year_week_number,
)

YEARS = [2023, 2024, 2025, 2026]
SATURDAY = 5


def all_days(year):
    day = date(year, 1, 1)
    while day.year == year:
        yield day
        day += timedelta(days=1)


class TestWeekStart:
    def test_saturday_is_its_own_start(self):
        assert week_start_of(date(2025, 6, 21)) == date(2025, 6, 21)

    def test_friday_walks_back_six_days(self):
        assert week_start_of(date(2025, 8, 1)) == date(2025, 7, 26)

    def test_sunday_walks_back_one_day(self):
        assert week_start_of(date(2025, 6, 1)) == date(2025, 5, 31)

    def test_datetime_is_truncated(self):
        assert week_start_of(datetime(2025, 8, 1, 23, 59)) == date(2025, 7, 26)

    def test_non_date_rejected(self):
        with pytest.raises(CalendarInputError):
            week_start_of("2025-08-01")


class TestWeekRange:
    def test_week_one_of_august_2025(self):
        week = week_range(2025, 8, 1)
        assert week.start_date == date(2025, 7, 26)
        assert week.end_date == date(2025, 8, 1)
        assert (week.year, week.month, week.week_in_month) == (2025, 8, 1)

    def test_month_starting_on_saturday(self):
        week = week_range(2025, 11, 1)
        assert week.start_date == date(2025, 11, 1)
        assert week.end_date == date(2025, 11, 7)

    def test_later_weeks_step_by_seven_days(self):
        assert week_range(2025, 6, 4).start_date == date(2025, 6, 21)
        assert week_range(2025, 6, 4).end_date == date(2025, 6, 27)

    def test_span_and_weekday_for_all_inputs(self):
        for year in YEARS:
            for month in range(1, 13):
                for w in range(1, 6):
                    week = week_range(year, month, w)
                    assert week.start_date.weekday() == SATURDAY
                    assert week.end_date - week.start_date == timedelta(days=6)

    @pytest.mark.parametrize("month", [0, 13, -1])
    def test_invalid_month(self, month):
        with pytest.raises(CalendarInputError):
            week_range(2025, month, 1)

    @pytest.mark.parametrize("week_in_month", [0, 6])
    def test_invalid_week(self, week_in_month):
        with pytest.raises(CalendarInputError):
            week_range(2025, 6, week_in_month)

    def test_input_error_is_value_error(self):
        with pytest.raises(ValueError):
            week_range(2025, 6, 7)

    def test_week_key(self):
        assert week_range(2024, 7, 2).week_key == "2024-07-W02"
        assert week_key(2024, 7, 2) == "2024-07-W02"

    def test_to_dict_uses_iso_dates(self):
        payload = week_range(2025, 8, 1).to_dict()
        assert payload["startDate"] == "2025-07-26"
        assert payload["endDate"] == "2025-08-01"
        assert payload["weekInMonth"] == 1


class TestWeekOf:
    def test_week_labelled_by_tuesday(self):
        # Jul 26 - Aug 1 2025: Tuesday is Jul 29, so the week is July's.
        week = week_of(date(2025, 8, 1))
        assert (week.year, week.month) == (2025, 7)
        assert week.week_in_month == 5
        assert week.start_date == date(2025, 7, 26)

    def test_trailing_saturday_moves_to_next_month(self):
        # Jun 28 2025 is a Saturday whose Tuesday is Jul 1.
        week = week_of(date(2025, 6, 28))
        assert (week.year, week.month, week.week_in_month) == (2025, 7, 1)

    def test_year_boundary(self):
        week = week_of(date(2026, 1, 1))
        assert (week.year, week.month, week.week_in_month) == (2025, 12, 5)
        week = week_of(date(2026, 1, 3))
        assert (week.year, week.month, week.week_in_month) == (2026, 1, 2)

    def test_week_in_month_always_between_one_and_five(self):
        for year in YEARS:
            for day in all_days(year):
                week = week_of(day)
                assert 1 <= week.week_in_month <= 5
                assert week.contains(day)

    def test_round_trip_over_valid_weeks(self):
        for year in YEARS:
            for month in range(1, 13):
                for w in valid_weeks_in_month(year, month):
                    start = week_range(year, month, w).start_date
                    week = week_of(start)
                    assert (week.year, week.month, week.week_in_month) == (year, month, w)


class TestCrossMonthWeeks:
    def test_leading_week_starting_in_previous_month(self):
        assert is_cross_month_week(2025, 8, 1) is True

    def test_trailing_week_whose_tuesday_is_next_month(self):
        assert is_cross_month_week(2025, 6, 5) is True

    def test_clean_week(self):
        assert is_cross_month_week(2025, 6, 3) is False

    def test_valid_weeks_examples(self):
        assert valid_weeks_in_month(2025, 6) == [2, 3, 4]
        assert valid_weeks_in_month(2025, 8) == [2, 3, 4, 5]
        assert valid_weeks_in_month(2025, 11) == [1, 2, 3, 4]

    def test_valid_weeks_non_empty_and_increasing(self):
        for year in YEARS:
            for month in range(1, 13):
                weeks = valid_weeks_in_month(year, month)
                assert weeks
                assert all(a < b for a, b in zip(weeks, weeks[1:]))

    def test_invalid_month(self):
        with pytest.raises(CalendarInputError):
            valid_weeks_in_month(2025, 0)


class TestMajorityWeeks:
    def test_majority_month(self):
        assert assigned_month_by_majority(date(2025, 7, 26)) == (2025, 7)
        assert assigned_month_by_majority(date(2025, 5, 31)) == (2025, 6)

    def test_august_2025(self):
        weeks = weeks_assigned_to_month(2025, 8)
        assert [w.start_date for w in weeks] == [
            date(2025, 8, 2), date(2025, 8, 9), date(2025, 8, 16), date(2025, 8, 23),
        ]
        assert [w.week_in_month for w in weeks] == [1, 2, 3, 4]

    def test_leading_week_from_previous_month_counts(self):
        weeks = weeks_assigned_to_month(2025, 6)
        assert weeks[0].start_date == date(2025, 5, 31)
        assert len(weeks) == 4

    def test_five_week_month(self):
        assert weeks_in_month(2025, 9) == 5

    def test_numbering_differs_from_anchor_rule(self):
        # Aug 2 2025 is anchor week 2 but majority week 1.
        assert week_of(date(2025, 8, 2)).week_in_month == 2
        assert majority_week_of(date(2025, 8, 2)).week_in_month == 1

    def test_every_saturday_assigned_exactly_once(self):
        for year in YEARS:
            for day in all_days(year):
                if day.weekday() != SATURDAY:
                    continue
                week = majority_week_of(day)
                assert week.start_date == day
                owners = [
                    (y, m)
                    for (y, m) in {(day.year, day.month), assigned_month_by_majority(day)}
                    if any(w.start_date == day for w in weeks_assigned_to_month(y, m))
                ]
                assert owners == [(week.year, week.month)]


class TestYearWeekNumber:
    def test_first_week_of_year(self):
        assert year_week_number(date(2026, 1, 3)) == (2026, 2)
        assert year_week_number(date(2025, 12, 27)) == (2025, 53)

    def test_early_january_belongs_to_previous_year(self):
        assert year_week_number(date(2025, 1, 1)) == (2024, 53)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
