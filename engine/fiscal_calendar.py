"""Saturday-start business week calendar: dates <-> (year, month, week-in-month) labels.

Two month-ownership rules live side by side here:

* Anchor rule (``week_range``, ``week_of``, ``is_cross_month_week``,
  ``valid_weeks_in_month``): week 1 is the Saturday-start week containing the 1st.
  Weeks whose Saturday falls outside the month, or whose Tuesday lands in another
  month, are cross-month weeks.
* Majority rule (``weeks_assigned_to_month``, ``majority_week_of``): every raw week
  belongs to the month holding 4+ of its 7 days, and weeks are numbered in the
  order they are assigned.

The two numberings disagree whenever the 1st of a month falls on Wednesday through
Friday, so callers must pick one and stick to it.
"""

from collections import Counter
from datetime import date, datetime, timedelta
from typing import List, Tuple

from models.week import WeekDescriptor
from config.defaults import (
    WEEK_START_WEEKDAY, DAYS_PER_WEEK, NOMINAL_DAY_OFFSET,
    MAX_WEEKS_PER_MONTH, MAX_CANDIDATE_WEEKS,
)


class CalendarInputError(ValueError):
    """Raised when a caller passes a month, week or date outside the calendar's contract."""


def _check_month(year: int, month: int) -> None:
    if not isinstance(year, int) or isinstance(year, bool):
        raise CalendarInputError(f"year must be an int, got {year!r}")
    if not isinstance(month, int) or isinstance(month, bool) or not 1 <= month <= 12:
        raise CalendarInputError(f"month must be an int in 1-12, got {month!r}")


def _check_week(week_in_month: int) -> None:
    if (
        not isinstance(week_in_month, int)
        or isinstance(week_in_month, bool)
        or not 1 <= week_in_month <= MAX_WEEKS_PER_MONTH
    ):
        raise CalendarInputError(
            f"week_in_month must be an int in 1-{MAX_WEEKS_PER_MONTH}, got {week_in_month!r}"
        )


def as_date(value) -> date:
    """Coerce a date or datetime to a date; anything else is a CalendarInputError."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    raise CalendarInputError(f"expected a date, got {type(value).__name__}: {value!r}")


def _make_week(year: int, month: int, week_in_month: int, start: date) -> WeekDescriptor:
    return WeekDescriptor(
        year=year,
        month=month,
        week_in_month=week_in_month,
        start_date=start,
        end_date=start + timedelta(days=DAYS_PER_WEEK - 1),
    )


def week_start_of(day: date) -> date:
    """Saturday on or before ``day``."""
    day = as_date(day)
    offset = (day.weekday() - WEEK_START_WEEKDAY) % DAYS_PER_WEEK
    return day - timedelta(days=offset)


def _first_week_start(year: int, month: int) -> date:
    return week_start_of(date(year, month, 1))


def nominal_month(week_start: date) -> Tuple[int, int]:
    """(year, month) of the Tuesday of the week starting on ``week_start``."""
    tuesday = week_start + timedelta(days=NOMINAL_DAY_OFFSET)
    return tuesday.year, tuesday.month


def assigned_month_by_majority(week_start: date) -> Tuple[int, int]:
    """(year, month) holding most of the seven days starting at ``week_start``."""
    week_start = as_date(week_start)
    counts = Counter()
    for i in range(DAYS_PER_WEEK):
        d = week_start + timedelta(days=i)
        counts[(d.year, d.month)] += 1
    (year, month), _ = counts.most_common(1)[0]
    return year, month


def week_range(year: int, month: int, week_in_month: int) -> WeekDescriptor:
    """Saturday-Friday bounds of week ``week_in_month`` anchored on the 1st of the month."""
    _check_month(year, month)
    _check_week(week_in_month)
    start = _first_week_start(year, month) + timedelta(days=(week_in_month - 1) * DAYS_PER_WEEK)
    return _make_week(year, month, week_in_month, start)


def week_of(day: date) -> WeekDescriptor:
    """Week containing ``day``, labelled with the month of its Tuesday."""
    start = week_start_of(day)
    year, month = nominal_month(start)
    first = week_range(year, month, 1).start_date
    week_in_month = (start - first).days // DAYS_PER_WEEK + 1
    return _make_week(year, month, week_in_month, start)


def is_cross_month_week(year: int, month: int, week_in_month: int) -> bool:
    week = week_range(year, month, week_in_month)
    if (week.start_date.year, week.start_date.month) != (year, month):
        return True
    # Trailing week: Saturday is still in this month but the Tuesday is already next month's.
    return nominal_month(week.start_date) != (year, month)


def valid_weeks_in_month(year: int, month: int) -> List[int]:
    """Anchor-rule week numbers that belong cleanly to the month, ascending."""
    _check_month(year, month)
    return [
        w for w in range(1, MAX_WEEKS_PER_MONTH + 1)
        if not is_cross_month_week(year, month, w)
    ]


def weeks_assigned_to_month(year: int, month: int) -> List[WeekDescriptor]:
    """Weeks whose majority of days fall in the month, numbered 1.. in calendar order."""
    _check_month(year, month)
    first = _first_week_start(year, month)
    weeks = []
    for i in range(MAX_CANDIDATE_WEEKS):
        start = first + timedelta(days=i * DAYS_PER_WEEK)
        if assigned_month_by_majority(start) == (year, month):
            weeks.append(_make_week(year, month, len(weeks) + 1, start))
    return weeks


def majority_week_of(day: date) -> WeekDescriptor:
    """Week containing ``day``, numbered by its position among its month's majority weeks."""
    start = week_start_of(day)
    year, month = assigned_month_by_majority(start)
    for week in weeks_assigned_to_month(year, month):
        if week.start_date == start:
            return week
    # Unreachable: the week's own majority month always lists it.
    raise AssertionError(f"week starting {start} missing from {year}-{month:02d}")


def weeks_in_month(year: int, month: int) -> int:
    return len(weeks_assigned_to_month(year, month))


def week_key(year: int, month: int, week_in_month: int) -> str:
    _check_month(year, month)
    _check_week(week_in_month)
    return f"{year}-{month:02d}-W{week_in_month:02d}"


def year_week_number(day: date) -> Tuple[int, int]:
    """(year, week_in_year) for the Saturday-start week containing ``day``.

    The week belongs to the year of its Tuesday; week 1 is the week containing Jan 1.
    """
    start = week_start_of(day)
    year, _ = nominal_month(start)
    first = week_start_of(date(year, 1, 1))
    return year, (start - first).days // DAYS_PER_WEEK + 1
