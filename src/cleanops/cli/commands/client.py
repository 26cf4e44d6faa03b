"""Client management commands."""

import click
from cleanops.cli.error_handling import format_money, handle_domain_error
from cleanops.cli.params import MONEY, choice_of
from cleanops.domain.client import ClientService
from cleanops.domain.entities import ClientStatus, ClientType, ContractType, Frequency
from cleanops.utils.entity_resolver import resolve_client


@click.group()
def client_group():
    """Manage clients."""
    pass


@client_group.command("create")
@click.argument("name", metavar="CLIENT_NAME")
@click.option("--email", required=True, help="Contact email address")
@click.option("--phone", required=True, help="UK phone number")
@click.option("--address", required=True, help="Street address")
@click.option("--postcode", required=True, help="UK postcode")
@click.option("--city", required=True, help="Town or city")
@click.option("--price", "price_per_hour", type=MONEY, required=True, help="Price per hour charged")
@click.option("--deep-clean-price", type=MONEY, help="Price per hour for deep cleans")
@click.option("--type", "client_type", type=choice_of(ClientType), default=ClientType.RESIDENTIAL.value, show_default=True)
@click.option("--contract", "contract_type", type=choice_of(ContractType), default=ContractType.FIXED.value, show_default=True)
@click.option("--frequency", type=choice_of(Frequency), help="Visit frequency for fixed contracts")
@click.option("--notes", help="Free-form notes")
@click.pass_context
def create_client(ctx, name: str, **fields) -> None:
    """Create a new client.

    Examples:
        cleanops client create "Jane Smith" --email jane@example.com \\
            --phone "07700 900123" --address "1 High Street" \\
            --postcode "SW1A 1AA" --city London --price 20
        cleanops client create "Acme Offices" ... --type commercial --deep-clean-price 28
    """
    service = ClientService(ctx.obj["db"])
    deep_clean_price = fields.pop("deep_clean_price")

    try:
        client_id = service.create_client(name=name, deep_clean_price_per_hour=deep_clean_price, **fields)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created client '{name.strip()}' (ID: {client_id})")


@client_group.command("list")
@click.option("--status", type=choice_of(ClientStatus), help="Only show clients with this status")
@click.pass_context
def list_clients(ctx, status: str | None) -> None:
    """List clients."""
    service = ClientService(ctx.obj["db"])

    clients = service.list_clients(status=status)
    if not clients:
        click.echo("No clients found.")
        return

    click.echo("\nClients:")
    click.echo("-" * 80)
    for c in clients:
        deep = f" / deep {format_money(c.deep_clean_price_per_hour)}" if c.deep_clean_price_per_hour else ""
        click.echo(
            f"ID: {c.id:3d} | {c.name:25s} | {c.postcode:8s} | "
            f"{format_money(c.price_per_hour)}/h{deep} | {c.status.value}"
        )


@client_group.command("show")
@click.argument("client", metavar="CLIENT")
@click.pass_context
def show_client(ctx, client: str) -> None:
    """Show a client's details.

    CLIENT can be a client name or ID.
    """
    service = ClientService(ctx.obj["db"])
    try:
        c = service.require_client(resolve_client(service, client))
    except ValueError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Client {c.id}: {c.name}")
    click.echo(f"  Status:      {c.status.value}")
    click.echo(f"  Email:       {c.email}")
    click.echo(f"  Phone:       {c.phone}")
    click.echo(f"  Address:     {c.address}, {c.city} {c.postcode}")
    click.echo(f"  Type:        {c.client_type.value} ({c.contract_type.value}"
               f"{', ' + c.frequency.value if c.frequency else ''})")
    click.echo(f"  Price:       {format_money(c.price_per_hour)}/h")
    if c.deep_clean_price_per_hour:
        click.echo(f"  Deep clean:  {format_money(c.deep_clean_price_per_hour)}/h")
    if c.notes:
        click.echo(f"  Notes:       {c.notes}")


@client_group.command("update")
@click.argument("client", metavar="CLIENT")
@click.option("--name", help="New name")
@click.option("--email")
@click.option("--phone")
@click.option("--address")
@click.option("--postcode")
@click.option("--city")
@click.option("--price", "price_per_hour", type=MONEY, help="Price per hour charged")
@click.option("--deep-clean-price", "deep_clean_price_per_hour", type=MONEY, help="Price per hour for deep cleans")
@click.option("--clear-deep-clean-price", is_flag=True, help="Remove the deep-clean price")
@click.option("--type", "client_type", type=choice_of(ClientType))
@click.option("--contract", "contract_type", type=choice_of(ContractType))
@click.option("--frequency", type=choice_of(Frequency))
@click.option("--status", type=choice_of(ClientStatus))
@click.option("--notes")
@click.pass_context
def update_client(ctx, client: str, clear_deep_clean_price: bool, **fields) -> None:
    """Update a client. Only the options given are changed.

    Rate changes apply to jobs scheduled or re-priced from now on; existing
    job prices are kept.

    Examples:
        cleanops client update "Jane Smith" --price 22
        cleanops client update 3 --status inactive
    """
    service = ClientService(ctx.obj["db"])
    updates = {name: value for name, value in fields.items() if value is not None}
    if clear_deep_clean_price:
        updates["deep_clean_price_per_hour"] = None
    if not updates:
        click.echo("Nothing to update.")
        return

    try:
        client_id = resolve_client(service, client)
        updated = service.update_client(client_id, **updates)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Updated client '{updated.name}' (ID: {updated.id})")


@client_group.command("delete")
@click.argument("client", metavar="CLIENT")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_client(ctx, client: str, yes: bool) -> None:
    """Delete a client.

    CLIENT can be a client name or ID. Clients with jobs or invoices cannot
    be deleted; mark them inactive instead.
    """
    service = ClientService(ctx.obj["db"])
    try:
        c = service.require_client(resolve_client(service, client))
    except ValueError as e:
        handle_domain_error(ctx, e)

    if not yes and not click.confirm(f"Are you sure you want to delete client '{c.name}' (ID: {c.id})?"):
        click.echo("Deletion cancelled.")
        return

    try:
        service.delete_client(c.id)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted client '{c.name}'")


def register_commands(cli):
    """Register client commands with main CLI."""
    cli.add_command(client_group, name="client")
