"""Date parsing and calendar period utilities.

Weeks run Monday to Sunday.
"""

from datetime import date, timedelta
from typing import Optional

from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

WEEKDAY_NAMES = ["monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday"]

PERIODS = (
    "this-week",
    "last-week",
    "next-week",
    "this-month",
    "last-month",
    "next-month",
    "this-year",
    "last-year",
)


def week_bounds(day: date) -> tuple[date, date]:
    """Monday and Sunday of the week containing ``day``."""
    monday = day - timedelta(days=day.weekday())
    return (monday, monday + timedelta(days=6))


def month_bounds(day: date) -> tuple[date, date]:
    """First and last day of the month containing ``day``."""
    first = day.replace(day=1)
    return (first, first + relativedelta(months=1) - timedelta(days=1))


def year_bounds(day: date) -> tuple[date, date]:
    """January 1 and December 31 of the year containing ``day``."""
    return (day.replace(month=1, day=1), day.replace(month=12, day=31))


def parse_date(date_str: str, today: Optional[date] = None) -> date:
    """Parse a date string into a date object.

    Supports various formats including relative dates:
    - Absolute dates: "2024-01-15", "15/01/2024", "January 15, 2024", etc.
    - Relative dates: "today", "yesterday", "tomorrow", "last monday",
      "next friday", "this week", "last month", etc.

    Numeric dates are read day first ("03/04/2024" is 3 April).

    Args:
        date_str: Date string in various formats
        today: Reference date for relative forms (defaults to today)

    Returns:
        Date object

    Raises:
        ValueError: If date string cannot be parsed
    """
    date_str = date_str.strip().lower()
    if today is None:
        today = date.today()

    relative_dates = {
        "today": today,
        "yesterday": today - timedelta(days=1),
        "tomorrow": today + timedelta(days=1),
    }
    if date_str in relative_dates:
        return relative_dates[date_str]

    prefix, _, period = date_str.partition(" ")
    if prefix in ("last", "this", "next") and period:
        if period in WEEKDAY_NAMES:
            target = WEEKDAY_NAMES.index(period)
            if prefix == "last":
                return today - timedelta(days=(today.weekday() - target) % 7 or 7)
            if prefix == "next":
                return today + timedelta(days=(target - today.weekday()) % 7 or 7)
            return week_bounds(today)[0] + timedelta(days=target)

        # "last/this/next week|month|year" resolve to the first day of that period
        if period in ("week", "month", "year"):
            return get_date_range(f"{prefix}-{period}", today=today)[0]

    try:
        return date.fromisoformat(date_str)
    except ValueError:
        pass

    try:
        return date_parser.parse(date_str, dayfirst=True).date()
    except (ValueError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")


def get_date_range(period: str, today: Optional[date] = None) -> tuple[date, date]:
    """Get start and end dates for a named calendar period.

    Args:
        period: One of this-week, last-week, next-week, this-month,
            last-month, next-month, this-year, last-year
        today: Reference date (defaults to today)

    Returns:
        Tuple of (start_date, end_date), both inclusive

    Raises:
        ValueError: If period string is not recognized
    """
    period = period.strip().lower()
    if today is None:
        today = date.today()

    if period == "this-week":
        return week_bounds(today)
    elif period == "last-week":
        return week_bounds(today - timedelta(days=7))
    elif period == "next-week":
        return week_bounds(today + timedelta(days=7))
    elif period == "this-month":
        return month_bounds(today)
    elif period == "last-month":
        return month_bounds(today - relativedelta(months=1))
    elif period == "next-month":
        return month_bounds(today + relativedelta(months=1))
    elif period == "this-year":
        return year_bounds(today)
    elif period == "last-year":
        return year_bounds(today - relativedelta(years=1))
    else:
        raise ValueError(f"Unknown period: '{period}'. Supported periods: {', '.join(PERIODS)}")
