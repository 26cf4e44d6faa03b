"""Utility functions for cleanops."""

from cleanops.utils.date_parser import parse_date, get_date_range
from cleanops.utils.amount_parser import parse_amount, parse_duration
from cleanops.utils.entity_resolver import resolve_client, resolve_professional

__all__ = [
    "parse_date",
    "get_date_range",
    "parse_amount",
    "parse_duration",
    "resolve_client",
    "resolve_professional",
]
