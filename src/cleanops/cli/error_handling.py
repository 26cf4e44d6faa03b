"""CLI error handling helpers."""

import click

from cleanops.domain.errors import DomainError


def handle_domain_error(ctx: click.Context, error: DomainError | ValueError) -> None:
    """Render a domain error and exit with failure."""
    click.echo(f"Error: {error}", err=True)
    ctx.exit(1)


def format_money(amount) -> str:
    """Format a money amount as pounds, e.g. ``£1,250.00``."""
    return f"£{amount:,.2f}"
