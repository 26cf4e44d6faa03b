"""Professional (cleaner) management commands."""

import click
from cleanops.cli.error_handling import format_money, handle_domain_error
from cleanops.cli.params import MONEY, choice_of
from cleanops.domain.entities import WEEKDAY_KEYS, Availability, ProfessionalStatus
from cleanops.domain.professional import ProfessionalService
from cleanops.utils.entity_resolver import resolve_professional


def _parse_days(ctx, days: str) -> Availability:
    """Parse "mon,tue,fri", "weekdays" or "all" into an Availability."""
    text = days.strip().lower()
    if text == "all":
        return Availability.every_day()
    if text == "weekdays":
        return Availability.from_dict({key: True for key in WEEKDAY_KEYS[:5]})

    selected = {part.strip()[:3] for part in text.split(",") if part.strip()}
    unknown = selected - set(WEEKDAY_KEYS)
    if unknown:
        click.echo(f"Error: Unknown day(s): {', '.join(sorted(unknown))}", err=True)
        ctx.exit(1)
    return Availability.from_dict({key: True for key in selected})


def _format_days(availability: Availability) -> str:
    days = [key for key in WEEKDAY_KEYS if availability.to_dict()[key]]
    return ",".join(days) if days else "none"


@click.group()
def professional_group():
    """Manage cleaners."""
    pass


@professional_group.command("create")
@click.argument("name", metavar="NAME")
@click.option("--email", required=True, help="Contact email address")
@click.option("--phone", required=True, help="UK phone number")
@click.option("--rate", "rate_per_hour", type=MONEY, required=True, help="Pay per hour")
@click.option("--deep-clean-rate", "deep_clean_rate_per_hour", type=MONEY, help="Pay per hour for deep cleans")
@click.option("--days", default="weekdays", show_default=True, help="Working days: 'mon,wed,fri', 'weekdays' or 'all'")
@click.option("--status", type=choice_of(ProfessionalStatus), default=ProfessionalStatus.ACTIVE.value, show_default=True)
@click.option("--bank-account-name", help="Name on the bank account")
@click.option("--sort-code", "bank_sort_code", help="Bank sort code")
@click.option("--account-number", "bank_account_number", help="Bank account number")
@click.pass_context
def create_professional(ctx, name: str, days: str, **fields) -> None:
    """Add a new cleaner.

    Examples:
        cleanops professional create "Maria Lopez" --email maria@example.com \\
            --phone "07700 900456" --rate 12.50 --days mon,tue,wed
    """
    service = ProfessionalService(ctx.obj["db"])
    availability = _parse_days(ctx, days)

    try:
        professional_id = service.create_professional(name=name, availability=availability, **fields)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created professional '{name.strip()}' (ID: {professional_id})")


@professional_group.command("list")
@click.option("--status", type=choice_of(ProfessionalStatus), help="Only show cleaners with this status")
@click.pass_context
def list_professionals(ctx, status: str | None) -> None:
    """List cleaners."""
    service = ProfessionalService(ctx.obj["db"])

    professionals = service.list_professionals(status=status)
    if not professionals:
        click.echo("No professionals found.")
        return

    click.echo("\nProfessionals:")
    click.echo("-" * 80)
    for p in professionals:
        deep = f" / deep {format_money(p.deep_clean_rate_per_hour)}" if p.deep_clean_rate_per_hour else ""
        click.echo(
            f"ID: {p.id:3d} | {p.name:25s} | {format_money(p.rate_per_hour)}/h{deep} | "
            f"{_format_days(p.availability)} | {p.status.value}"
        )


@professional_group.command("show")
@click.argument("professional", metavar="PROFESSIONAL")
@click.pass_context
def show_professional(ctx, professional: str) -> None:
    """Show a cleaner's details.

    PROFESSIONAL can be a name or ID.
    """
    service = ProfessionalService(ctx.obj["db"])
    try:
        p = service.require_professional(resolve_professional(service, professional))
    except ValueError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Professional {p.id}: {p.name}")
    click.echo(f"  Status:      {p.status.value}")
    click.echo(f"  Email:       {p.email}")
    click.echo(f"  Phone:       {p.phone}")
    click.echo(f"  Rate:        {format_money(p.rate_per_hour)}/h")
    if p.deep_clean_rate_per_hour:
        click.echo(f"  Deep clean:  {format_money(p.deep_clean_rate_per_hour)}/h")
    click.echo(f"  Works:       {_format_days(p.availability)}")
    if p.bank_account_number:
        click.echo(f"  Bank:        {p.bank_account_name or ''} {p.bank_sort_code or ''} {p.bank_account_number}")


@professional_group.command("update")
@click.argument("professional", metavar="PROFESSIONAL")
@click.option("--name", help="New name")
@click.option("--email")
@click.option("--phone")
@click.option("--rate", "rate_per_hour", type=MONEY, help="Pay per hour")
@click.option("--deep-clean-rate", "deep_clean_rate_per_hour", type=MONEY, help="Pay per hour for deep cleans")
@click.option("--clear-deep-clean-rate", is_flag=True, help="Remove the deep-clean rate")
@click.option("--days", help="Working days: 'mon,wed,fri', 'weekdays' or 'all'")
@click.option("--status", type=choice_of(ProfessionalStatus))
@click.option("--bank-account-name")
@click.option("--sort-code", "bank_sort_code")
@click.option("--account-number", "bank_account_number")
@click.pass_context
def update_professional(ctx, professional: str, clear_deep_clean_rate: bool, days: str | None, **fields) -> None:
    """Update a cleaner. Only the options given are changed.

    Examples:
        cleanops professional update "Maria Lopez" --status vacation
        cleanops professional update 2 --rate 13 --days all
    """
    service = ProfessionalService(ctx.obj["db"])
    updates = {name: value for name, value in fields.items() if value is not None}
    if clear_deep_clean_rate:
        updates["deep_clean_rate_per_hour"] = None
    if days is not None:
        updates["availability"] = _parse_days(ctx, days)
    if not updates:
        click.echo("Nothing to update.")
        return

    try:
        professional_id = resolve_professional(service, professional)
        updated = service.update_professional(professional_id, **updates)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Updated professional '{updated.name}' (ID: {updated.id})")


@professional_group.command("delete")
@click.argument("professional", metavar="PROFESSIONAL")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_professional(ctx, professional: str, yes: bool) -> None:
    """Delete a cleaner who is not assigned to any job."""
    service = ProfessionalService(ctx.obj["db"])
    try:
        p = service.require_professional(resolve_professional(service, professional))
    except ValueError as e:
        handle_domain_error(ctx, e)

    if not yes and not click.confirm(f"Are you sure you want to delete professional '{p.name}' (ID: {p.id})?"):
        click.echo("Deletion cancelled.")
        return

    try:
        service.delete_professional(p.id)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted professional '{p.name}'")


def register_commands(cli):
    """Register professional commands with main CLI."""
    cli.add_command(professional_group, name="professional")
