"""CLI helpers for date range resolution."""

from datetime import date

import click

from cleanops.utils.date_parser import get_date_range, parse_date


def period_options(func):
    """Add the --this-week/--last-month/... period flags to a command."""
    flags = [
        ("--this-week", "Current week (Monday to Sunday)"),
        ("--last-week", "Previous week"),
        ("--next-week", "Next week"),
        ("--this-month", "Current month"),
        ("--last-month", "Previous month"),
        ("--this-year", "Current year"),
        ("--last-year", "Previous year"),
    ]
    for flag, help_text in reversed(flags):
        func = click.option(flag, is_flag=True, help=help_text)(func)
    return func


def collect_period_flags(kwargs: dict) -> dict[str, bool]:
    """Pop the period flags added by ``period_options`` into ``{"this-week": bool, ...}``."""
    names = ["this_week", "last_week", "next_week", "this_month", "last_month", "this_year", "last_year"]
    return {name.replace("_", "-"): bool(kwargs.pop(name, False)) for name in names}


def parse_cli_date(ctx, value: str, label: str, today: date | None = None) -> date:
    """Parse a date argument, exiting with an error message if it is invalid."""
    try:
        return parse_date(value, today=today)
    except ValueError as e:
        click.echo(f"Error: Invalid {label}: {e}", err=True)
        ctx.exit(1)


def resolve_cli_date_range(
    ctx,
    *,
    start_date: str | None,
    end_date: str | None,
    period_flags: dict[str, bool],
    default_range: tuple[date, date] | None = None,
    today: date | None = None,
) -> tuple[date | None, date | None]:
    """Resolve CLI date range from period flags or explicit dates."""
    period_count = sum(1 for is_set in period_flags.values() if is_set)
    flag_names = ", ".join(f"--{period}" for period in period_flags)

    if period_count > 1:
        click.echo(
            f"Error: Only one period option ({flag_names}) can be specified at a time.",
            err=True,
        )
        ctx.exit(1)

    if period_count > 0 and (start_date or end_date):
        click.echo(
            "Error: Period options (--this-month, --last-week, etc.) cannot be combined with --start-date or --end-date.",
            err=True,
        )
        ctx.exit(1)

    start = None
    end = None

    if period_count == 1:
        for period, is_set in period_flags.items():
            if is_set:
                start, end = get_date_range(period, today=today)
                break
    else:
        if start_date:
            start = parse_cli_date(ctx, start_date, "start date", today=today)
        if end_date:
            end = parse_cli_date(ctx, end_date, "end date", today=today)

        if start is None and end is None and default_range is not None:
            start, end = default_range

    return start, end
