"""Click parameter types for money, durations and dates."""

from datetime import date

import click

from cleanops.utils.amount_parser import parse_amount, parse_duration
from cleanops.utils.date_parser import parse_date


class MoneyType(click.ParamType):
    """Money amount such as ``18.50`` or ``£18.50``."""

    name = "amount"

    def convert(self, value, param, ctx):
        try:
            return parse_amount(str(value))
        except ValueError as e:
            self.fail(str(e), param, ctx)


class DurationType(click.ParamType):
    """Job length in hours: ``2.5``, ``2h30m``, ``90m`` or ``1:30``."""

    name = "hours"

    def convert(self, value, param, ctx):
        try:
            return parse_duration(str(value))
        except ValueError as e:
            self.fail(str(e), param, ctx)


class DateType(click.ParamType):
    """Calendar date, absolute or relative (``today``, ``next monday``)."""

    name = "date"

    def convert(self, value, param, ctx):
        if isinstance(value, date):
            return value
        try:
            return parse_date(str(value))
        except ValueError as e:
            self.fail(str(e), param, ctx)


MONEY = MoneyType()
DURATION = DurationType()
DATE = DateType()


def choice_of(enum_type) -> click.Choice:
    """Case-insensitive click.Choice over an enum's values."""
    return click.Choice([member.value for member in enum_type], case_sensitive=False)
