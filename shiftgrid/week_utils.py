"""
Week utility functions for the Saturday-to-Friday scheduling week.

This module maps a week anchor (the Saturday that starts the visible week)
and a day index (0=Saturday ... 6=Friday) to calendar dates and labels.
"""

from datetime import date, datetime, timedelta
from typing import List, Optional

from .models import DAYS_PER_WEEK

DAY_NAMES = ['Saturday', 'Sunday', 'Monday', 'Tuesday', 'Wednesday', 'Thursday', 'Friday']

# date.weekday() value of the first day of the week
SATURDAY = 5


class WeekParseError(Exception):
    """Exception raised when a week anchor cannot be parsed."""
    pass


def validate_day_index(day: int) -> None:
    """
    Raises:
        ValueError: If day is not an integer in [0, 6]
    """
    if isinstance(day, bool) or not isinstance(day, int) or not (0 <= day < DAYS_PER_WEEK):
        raise ValueError(f"Day index must be between 0 and 6, got: {day!r}")


def week_start_for(day: date) -> date:
    """
    Get the Saturday that starts the week containing a date.

    Examples:
        >>> week_start_for(date(2024, 1, 17))  # a Wednesday
        datetime.date(2024, 1, 13)
        >>> week_start_for(date(2024, 1, 13))
        datetime.date(2024, 1, 13)
    """
    return day - timedelta(days=(day.weekday() - SATURDAY) % 7)


def current_week_start(today: Optional[date] = None) -> date:
    """Week anchor of today (or of the given date)."""
    return week_start_for(today or date.today())


def week_dates(anchor: date) -> List[date]:
    """
    Get the seven dates of a week, Saturday first.

    Args:
        anchor: Saturday that starts the week

    Returns:
        List of 7 dates
    """
    return [anchor + timedelta(days=i) for i in range(DAYS_PER_WEEK)]


def date_for(anchor: date, day: int) -> date:
    """Calendar date of a day index within the anchored week."""
    validate_day_index(day)
    return anchor + timedelta(days=day)


def shift_week(anchor: date, weeks: int) -> date:
    """
    Move an anchor forward (positive) or backward (negative) by whole weeks.

    Examples:
        >>> shift_week(date(2024, 1, 13), -1)
        datetime.date(2024, 1, 6)
    """
    return anchor + timedelta(weeks=weeks)


def day_header(anchor: date, day: int) -> str:
    """
    Column label of a day: "<DayName> <MM/DD>".

    Examples:
        >>> day_header(date(2024, 1, 13), 2)
        'Monday 01/15'
    """
    return f"{DAY_NAMES[day]} {date_for(anchor, day).strftime('%m/%d')}"


def format_week_range(anchor: date) -> str:
    """
    Human-readable span of a week, e.g. "Jan 13 - Jan 19, 2024".
    """
    end = anchor + timedelta(days=DAYS_PER_WEEK - 1)
    return f"{anchor.strftime('%b %d')} - {end.strftime('%b %d, %Y')}"


def parse_week_anchor(week_text: str) -> date:
    """
    Parse an ISO date into the anchor of the week containing it.

    Any day of the week is accepted and normalized to its Saturday.

    Args:
        week_text: Date text such as "2024-01-13"

    Returns:
        Saturday that starts the week

    Raises:
        WeekParseError: If the text is empty or not an ISO date

    Examples:
        >>> parse_week_anchor("2024-01-17")
        datetime.date(2024, 1, 13)
    """
    if not week_text or not week_text.strip():
        raise WeekParseError("Week specification cannot be empty")

    try:
        parsed = datetime.strptime(week_text.strip(), '%Y-%m-%d').date()
    except ValueError:
        raise WeekParseError(
            f"Invalid week '{week_text}'. Expected format: YYYY-MM-DD"
        )

    return week_start_for(parsed)
