"""Tests for date parser with relative dates."""

import pytest
from datetime import date, timedelta
from cleanops.utils.date_parser import get_date_range, month_bounds, parse_date, week_bounds

# A Wednesday
TODAY = date(2024, 3, 6)


def test_parse_absolute_date():
    """Test parsing absolute dates."""
    result = parse_date("2024-01-15")
    assert result == date(2024, 1, 15)


def test_parse_iso_date_is_not_read_day_first():
    """Test that ISO dates keep month and day in place."""
    assert parse_date("2024-03-04") == date(2024, 3, 4)


def test_parse_today():
    """Test parsing 'today'."""
    assert parse_date("today") == date.today()
    assert parse_date("Today", today=TODAY) == TODAY


def test_parse_yesterday_and_tomorrow():
    """Test parsing 'yesterday' and 'tomorrow'."""
    assert parse_date("yesterday", today=TODAY) == date(2024, 3, 5)
    assert parse_date("tomorrow", today=TODAY) == date(2024, 3, 7)


def test_parse_weekdays():
    """Test parsing 'last/this/next <weekday>'."""
    assert parse_date("last monday", today=TODAY) == date(2024, 3, 4)
    assert parse_date("last wednesday", today=TODAY) == date(2024, 2, 28)
    assert parse_date("next wednesday", today=TODAY) == date(2024, 3, 13)
    assert parse_date("next friday", today=TODAY) == date(2024, 3, 8)
    assert parse_date("this sunday", today=TODAY) == date(2024, 3, 10)
    assert parse_date("this monday", today=TODAY) == date(2024, 3, 4)


def test_parse_last_month():
    """Test parsing 'last month'."""
    assert parse_date("last month", today=TODAY) == date(2024, 2, 1)
    assert parse_date("last month", today=date(2024, 1, 20)) == date(2023, 12, 1)


def test_parse_week_periods():
    """Test parsing 'last/this/next week' as the Monday of that week."""
    assert parse_date("last week", today=TODAY) == date(2024, 2, 26)
    assert parse_date("this week", today=TODAY) == date(2024, 3, 4)
    assert parse_date("next week", today=TODAY) == date(2024, 3, 11)
    assert parse_date("next week", today=TODAY).weekday() == 0


def test_parse_year_periods():
    """Test parsing 'this year' and 'last year'."""
    assert parse_date("this year", today=TODAY) == date(2024, 1, 1)
    assert parse_date("last year", today=TODAY) == date(2023, 1, 1)


def test_parse_invalid_relative():
    """Test parsing invalid relative date."""
    with pytest.raises(ValueError):
        parse_date("last invalid")


def test_parse_standard_formats():
    """Test parsing various standard date formats."""
    # These should all work via dateutil parser
    assert parse_date("January 15, 2024") == date(2024, 1, 15)
    assert parse_date("15/01/2024") == date(2024, 1, 15)
    # Day first, as written in the UK
    assert parse_date("03/04/2024") == date(2024, 4, 3)


def test_parse_garbage():
    with pytest.raises(ValueError, match="Could not parse date"):
        parse_date("not a date at all")


def test_week_bounds():
    """Test that weeks run Monday to Sunday."""
    assert week_bounds(TODAY) == (date(2024, 3, 4), date(2024, 3, 10))
    assert week_bounds(date(2024, 3, 4)) == (date(2024, 3, 4), date(2024, 3, 10))
    assert week_bounds(date(2024, 3, 10)) == (date(2024, 3, 4), date(2024, 3, 10))


def test_month_bounds_leap_year():
    assert month_bounds(date(2024, 2, 10)) == (date(2024, 2, 1), date(2024, 2, 29))
    assert month_bounds(date(2023, 2, 10)) == (date(2023, 2, 1), date(2023, 2, 28))
    assert month_bounds(date(2024, 12, 31)) == (date(2024, 12, 1), date(2024, 12, 31))


def test_get_date_range_this_month():
    """Test get_date_range for this-month covers the whole month."""
    start, end = get_date_range("this-month", today=TODAY)
    assert start == date(2024, 3, 1)
    assert end == date(2024, 3, 31)


def test_get_date_range_this_year():
    """Test get_date_range for this-year."""
    start, end = get_date_range("this-year", today=TODAY)
    assert start == date(2024, 1, 1)
    assert end == date(2024, 12, 31)


def test_get_date_range_this_week():
    """Test get_date_range for this-week."""
    start, end = get_date_range("this-week", today=TODAY)
    assert start == date(2024, 3, 4)
    assert start.weekday() == 0  # Should be Monday
    assert end == date(2024, 3, 10)
    assert end.weekday() == 6  # Sunday


def test_get_date_range_last_week():
    """Test get_date_range for last-week."""
    start, end = get_date_range("last-week", today=TODAY)
    assert start == date(2024, 2, 26)
    assert end == date(2024, 3, 3)
    assert (end - start).days == 6


def test_get_date_range_next_week_and_month():
    assert get_date_range("next-week", today=TODAY) == (date(2024, 3, 11), date(2024, 3, 17))
    assert get_date_range("next-month", today=date(2024, 1, 31)) == (date(2024, 2, 1), date(2024, 2, 29))


def test_get_date_range_last_month():
    """Test get_date_range for last-month."""
    start, end = get_date_range("last-month", today=date(2024, 3, 31))
    assert start == date(2024, 2, 1)
    assert end == date(2024, 2, 29)


def test_get_date_range_last_month_in_january():
    start, end = get_date_range("last-month", today=date(2024, 1, 15))
    assert start == date(2023, 12, 1)
    assert end == date(2023, 12, 31)


def test_get_date_range_last_year():
    """Test get_date_range for last-year."""
    start, end = get_date_range("last-year", today=TODAY)
    assert start == date(2023, 1, 1)
    assert end == date(2023, 12, 31)


def test_get_date_range_defaults_to_today():
    today = date.today()
    start, end = get_date_range("this-week")
    assert start == today - timedelta(days=today.weekday())
    assert start <= today <= end


def test_get_date_range_invalid_period():
    """Test get_date_range with invalid period."""
    with pytest.raises(ValueError, match="Unknown period"):
        get_date_range("invalid-period")
