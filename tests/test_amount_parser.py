"""Tests for money and duration parsing."""

from decimal import Decimal

import pytest

from cleanops.utils.amount_parser import parse_amount, parse_duration


@pytest.mark.parametrize(
    "text,expected",
    [
        ("18.50", Decimal("18.50")),
        ("£18.50", Decimal("18.50")),
        ("1,250.00", Decimal("1250.00")),
        ("£1,250", Decimal("1250")),
        (" 20 ", Decimal("20")),
        ("-5", Decimal("-5")),
    ],
)
def test_parse_amount(text, expected):
    assert parse_amount(text) == expected


@pytest.mark.parametrize("text", ["", "   ", "abc", "£", "12.3.4", "inf"])
def test_parse_amount_invalid(text):
    with pytest.raises(ValueError):
        parse_amount(text)


@pytest.mark.parametrize(
    "text,expected",
    [
        ("2", Decimal("2")),
        ("2.5", Decimal("2.5")),
        ("2h", Decimal("2")),
        ("2h30m", Decimal("2.5")),
        ("2h 30m", Decimal("2.5")),
        ("90m", Decimal("1.5")),
        ("1:30", Decimal("1.5")),
        ("1.5H", Decimal("1.5")),
    ],
)
def test_parse_duration(text, expected):
    assert parse_duration(text) == expected


@pytest.mark.parametrize("text", ["", "two hours", "1:75", "h", "m"])
def test_parse_duration_invalid(text):
    with pytest.raises(ValueError):
        parse_duration(text)
