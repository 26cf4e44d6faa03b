"""Field validation shared by the domain services."""

import re
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Optional, TypeVar, Union

from cleanops.domain.errors import ValidationError

# UK phone numbers: starting 0 or +44, digits and spaces
PHONE_RE = re.compile(r"^(\+44|0)[0-9\s]{9,13}$")
# UK postcodes, e.g. "SW1A 1AA", "M1 1AE"
POSTCODE_RE = re.compile(r"^[A-Z]{1,2}[0-9][A-Z0-9]? ?[0-9][A-Z]{2}$", re.IGNORECASE)
EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
START_TIME_RE = re.compile(r"^([01][0-9]|2[0-3]):[0-5][0-9]$")

MIN_DURATION_HOURS = Decimal("0.5")

E = TypeVar("E", bound=Enum)


def require_name(value: str, label: str = "Name") -> str:
    value = (value or "").strip()
    if len(value) < 2:
        raise ValidationError(f"{label} must be at least 2 characters")
    return value


def require_text(value: str, label: str, min_length: int = 1) -> str:
    value = (value or "").strip()
    if len(value) < min_length:
        raise ValidationError(f"{label} is required")
    return value


def require_email(value: str) -> str:
    value = (value or "").strip()
    if not EMAIL_RE.match(value):
        raise ValidationError(f"Invalid email address: '{value}'")
    return value


def require_phone(value: str) -> str:
    value = (value or "").strip()
    if not PHONE_RE.match(value):
        raise ValidationError(f"Invalid UK phone number: '{value}'")
    return value


def require_postcode(value: str) -> str:
    value = (value or "").strip().upper()
    if not POSTCODE_RE.match(value):
        raise ValidationError(f"Invalid UK postcode: '{value}'")
    return value


def require_positive_amount(value: Union[Decimal, int, float, str], label: str) -> Decimal:
    """Coerce to Decimal and require a value greater than zero."""
    try:
        amount = Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise ValidationError(f"{label} must be a number, got '{value}'")
    if not amount.is_finite() or amount <= 0:
        raise ValidationError(f"{label} must be positive")
    return amount


def optional_positive_amount(
    value: Optional[Union[Decimal, int, float, str]], label: str
) -> Optional[Decimal]:
    if value is None:
        return None
    return require_positive_amount(value, label)


def require_duration(value: Union[Decimal, int, float, str]) -> Decimal:
    duration = require_positive_amount(value, "Duration")
    if duration < MIN_DURATION_HOURS:
        raise ValidationError(f"Duration must be at least {MIN_DURATION_HOURS} hours")
    return duration


def require_start_time(value: str) -> str:
    value = (value or "").strip()
    if not START_TIME_RE.match(value):
        raise ValidationError(f"Start time must be HH:MM, got '{value}'")
    return value


def coerce_enum(enum_type: type[E], value: Union[E, str], label: str) -> E:
    """Turn a string into a member of ``enum_type``, raising ValidationError if unknown."""
    if isinstance(value, enum_type):
        return value
    try:
        return enum_type(value)
    except ValueError:
        allowed = ", ".join(member.value for member in enum_type)
        raise ValidationError(f"Invalid {label} '{value}'. Expected one of: {allowed}")
