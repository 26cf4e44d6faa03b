"""Quote request commands."""

import click
from cleanops.cli.error_handling import handle_domain_error
from cleanops.cli.params import choice_of
from cleanops.domain.entities import ContactMethod, QuoteStatus
from cleanops.domain.professional import ProfessionalService
from cleanops.domain.quote import SERVICE_TYPES, QuoteService
from cleanops.utils.entity_resolver import resolve_professional


@click.group()
def quote_group():
    """Quote requests from prospective clients."""
    pass


@quote_group.command("submit")
@click.option("--name", "full_name", required=True, help="Full name")
@click.option("--email", required=True)
@click.option("--phone", required=True, help="UK phone number")
@click.option("--service", "service_type", type=click.Choice(SERVICE_TYPES), required=True)
@click.option("--postcode", required=True, help="UK postcode")
@click.option("--contact", "preferred_contact", type=choice_of(ContactMethod), default=ContactMethod.PHONE.value, show_default=True)
@click.option("--message", help="Anything else the client told us")
@click.option("--source", default="landing-page", show_default=True, help="Where the request came from")
@click.pass_context
def submit_quote(ctx, **fields) -> None:
    """Record a quote request.

    Example:
        cleanops quote submit --name "Tom Brown" --email tom@example.com \\
            --phone "07700 900789" --service "Deep Cleaning" --postcode "M1 1AE"
    """
    service = QuoteService(ctx.obj["db"])
    try:
        quote_id = service.submit_quote(**fields)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Recorded quote request {quote_id} from {fields['full_name'].strip()}")


@quote_group.command("list")
@click.option("--status", type=choice_of(QuoteStatus), help="Only show quotes with this status")
@click.pass_context
def list_quotes(ctx, status: str | None) -> None:
    """List quote requests, newest first."""
    db = ctx.obj["db"]
    quotes = QuoteService(db).list_quotes(status=status)
    if not quotes:
        click.echo("No quotes found.")
        return

    names = {p.id: p.name for p in ProfessionalService(db).list_professionals()}
    click.echo("\nQuotes:")
    click.echo("-" * 100)
    for q in quotes:
        assigned = f" -> {names.get(q.professional_id, q.professional_id)}" if q.professional_id else ""
        click.echo(
            f"ID: {q.id:3d} | {q.created_at:%Y-%m-%d} | {q.full_name[:20]:20s} | {q.service_type:20s} | "
            f"{q.postcode:8s} | {q.preferred_contact.value}: {q.phone if q.preferred_contact != ContactMethod.EMAIL else q.email} | "
            f"{q.status.value}{assigned}"
        )
        if q.message:
            click.echo(f"       {q.message}")


@quote_group.command("update")
@click.argument("quote_id", type=int)
@click.option("--status", type=choice_of(QuoteStatus))
@click.option("--assign", help="Cleaner name or ID to follow up")
@click.option("--unassign", is_flag=True, help="Clear the assigned cleaner")
@click.pass_context
def update_quote(ctx, quote_id: int, status: str | None, assign: str | None, unassign: bool) -> None:
    """Change a quote's status or assigned cleaner.

    Examples:
        cleanops quote update 5 --status approved --assign "Maria Lopez"
        cleanops quote update 5 --status converted
    """
    if status is None and assign is None and not unassign:
        click.echo("Nothing to update.")
        return
    if assign is not None and unassign:
        click.echo("Error: --assign and --unassign cannot be combined.", err=True)
        ctx.exit(1)

    db = ctx.obj["db"]
    service = QuoteService(db)
    try:
        if status is not None:
            service.update_status(quote_id, status)
        if assign is not None:
            service.assign_professional(quote_id, resolve_professional(ProfessionalService(db), assign))
        if unassign:
            service.assign_professional(quote_id, None)
        quote = service.require_quote(quote_id)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Quote {quote.id} is {quote.status.value}")


def register_commands(cli):
    """Register quote commands with main CLI."""
    cli.add_command(quote_group, name="quote")
