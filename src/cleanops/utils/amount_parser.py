"""Money and duration parsing utilities."""

import re
from decimal import Decimal, InvalidOperation

DURATION_RE = re.compile(r"^(?:(?P<hours>\d+(?:\.\d+)?)\s*h)?\s*(?:(?P<minutes>\d+)\s*m)?$")
CLOCK_DURATION_RE = re.compile(r"^(?P<hours>\d+):(?P<minutes>[0-5]\d)$")


def parse_amount(amount_str: str) -> Decimal:
    """Parse a money string into a Decimal.

    Handles various formats:
    - "18.50"
    - "£18.50"
    - "1,250.00"
    - "£1,250"

    Args:
        amount_str: Amount string

    Returns:
        Decimal amount

    Raises:
        ValueError: If amount string cannot be parsed
    """
    if not amount_str or not amount_str.strip():
        raise ValueError("Empty amount string")

    cleaned = re.sub(r"[£$€\s]", "", amount_str).replace(",", "")
    try:
        amount = Decimal(cleaned)
    except InvalidOperation:
        raise ValueError(f"Could not parse amount '{amount_str}'")
    if not amount.is_finite():
        raise ValueError(f"Could not parse amount '{amount_str}'")
    return amount


def parse_duration(duration_str: str) -> Decimal:
    """Parse a job duration into hours.

    Accepts plain hours ("2.5"), "2h", "2h30m", "90m" and "1:30".

    Raises:
        ValueError: If the duration cannot be parsed
    """
    text = (duration_str or "").strip().lower()
    if not text:
        raise ValueError("Empty duration string")

    try:
        return Decimal(text)
    except InvalidOperation:
        pass

    match = CLOCK_DURATION_RE.match(text) or DURATION_RE.match(text)
    if not match or not any(match.groupdict().values()):
        raise ValueError(f"Could not parse duration '{duration_str}'")

    hours = Decimal(match.group("hours") or "0")
    minutes = Decimal(match.group("minutes") or "0")
    return hours + minutes / Decimal(60)
