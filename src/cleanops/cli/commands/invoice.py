"""Invoicing commands."""

from datetime import date

import click
from cleanops.cli.date_filters import collect_period_flags, period_options, resolve_cli_date_range
from cleanops.cli.error_handling import format_money, handle_domain_error
from cleanops.domain.client import ClientService
from cleanops.domain.entities import Invoice
from cleanops.domain.errors import NotFoundError
from cleanops.domain.invoice import DEFAULT_DUE_DAYS, MAX_DUE_DAYS, InvoiceService, display_status
from cleanops.domain.occurrences import date_key
from cleanops.utils.date_parser import month_bounds
from cleanops.utils.entity_resolver import resolve_client

DUE_DAYS_ENV = "CLEANOPS_INVOICE_DUE_DAYS"


def _resolve_invoice(ctx, service: InvoiceService, reference: str) -> Invoice:
    """Find an invoice by ID or by number (e.g. INV-000012)."""
    reference = reference.strip()
    try:
        if reference.isdigit():
            return service.require_invoice(int(reference))
        invoice = service.get_invoice_by_number(reference)
        if invoice is None:
            raise NotFoundError(f"Invoice '{reference}' not found")
        return invoice
    except ValueError as e:
        handle_domain_error(ctx, e)


def _echo_invoice_line(invoice: Invoice, client_name: str, today: date) -> None:
    click.echo(
        f"{invoice.invoice_number}  {client_name[:25]:25s}  {date_key(invoice.issue_date)}  "
        f"due {date_key(invoice.due_date)}  {display_status(invoice, today).value:9s}  "
        f"{format_money(invoice.total):>12s}"
    )


@click.group()
def invoice_group():
    """Create and manage invoices."""
    pass


@invoice_group.command("generate")
@click.argument("client", metavar="CLIENT")
@click.option("--start-date", help="First day of the billed period")
@click.option("--end-date", help="Last day of the billed period")
@period_options
@click.option(
    "--due-days",
    type=click.IntRange(1, MAX_DUE_DAYS),
    default=DEFAULT_DUE_DAYS,
    show_default=True,
    envvar=DUE_DAYS_ENV,
    help=f"Days until payment is due (or set {DUE_DAYS_ENV})",
)
@click.option("--notes", help="Notes printed on the invoice")
@click.pass_context
def generate_invoice(ctx, client: str, start_date, end_date, due_days: int, notes, **period_kwargs) -> None:
    """Invoice a client's completed, uninvoiced jobs in a period.

    The period defaults to the current month. The invoice is created as a
    draft; use 'invoice send' once it has been checked.

    Examples:
        cleanops invoice generate "Jane Smith" --last-month
        cleanops invoice generate 4 --start-date 2024-03-01 --end-date 2024-03-15 --due-days 14
    """
    db = ctx.obj["db"]
    today = date.today()
    start, end = resolve_cli_date_range(
        ctx,
        start_date=start_date,
        end_date=end_date,
        period_flags=collect_period_flags(period_kwargs),
        default_range=month_bounds(today),
        today=today,
    )
    if start is None or end is None:
        click.echo("Error: Both --start-date and --end-date are required when either is given.", err=True)
        ctx.exit(1)

    service = InvoiceService(db)
    try:
        client_id = resolve_client(ClientService(db), client)
        invoice = service.generate_invoice(client_id, start, end, due_days=due_days, notes=notes)
    except ValueError as e:
        handle_domain_error(ctx, e)

    job_count = len(service.get_invoice_jobs(invoice.id))
    click.echo(f"Created draft invoice {invoice.invoice_number} (ID: {invoice.id})")
    click.echo(f"  Period: {date_key(invoice.period_start)} to {date_key(invoice.period_end)}")
    click.echo(f"  Jobs:   {job_count}")
    click.echo(f"  Total:  {format_money(invoice.total)}  due {date_key(invoice.due_date)}")
    if job_count == 0:
        click.echo("  Warning: no completed, uninvoiced jobs in this period.")


@invoice_group.command("list")
@click.option("--client", help="Client name or ID")
@click.pass_context
def list_invoices(ctx, client: str | None) -> None:
    """List invoices, newest first. Overdue invoices are flagged."""
    db = ctx.obj["db"]
    client_id = None
    if client is not None:
        try:
            client_id = resolve_client(ClientService(db), client)
        except ValueError as e:
            handle_domain_error(ctx, e)

    invoices = InvoiceService(db).list_invoices(client_id=client_id)
    if not invoices:
        click.echo("No invoices found.")
        return

    names = {c.id: c.name for c in ClientService(db).list_clients()}
    today = date.today()
    click.echo("\nInvoices:")
    click.echo("-" * 90)
    for invoice in invoices:
        _echo_invoice_line(invoice, names.get(invoice.client_id, "?"), today)


@invoice_group.command("show")
@click.argument("invoice", metavar="INVOICE")
@click.pass_context
def show_invoice(ctx, invoice: str) -> None:
    """Show an invoice and the jobs on it.

    INVOICE can be an invoice ID or number.
    """
    db = ctx.obj["db"]
    service = InvoiceService(db)
    inv = _resolve_invoice(ctx, service, invoice)
    client = ClientService(db).get_client(inv.client_id)

    click.echo(f"Invoice {inv.invoice_number} (ID: {inv.id})")
    click.echo(f"  Client:  {client.name if client else inv.client_id}")
    click.echo(f"  Status:  {display_status(inv, date.today()).value}")
    click.echo(f"  Period:  {date_key(inv.period_start)} to {date_key(inv.period_end)}")
    click.echo(f"  Issued:  {date_key(inv.issue_date)}  Due: {date_key(inv.due_date)}")
    if inv.notes:
        click.echo(f"  Notes:   {inv.notes}")
    click.echo("")
    for job in service.get_invoice_jobs(inv.id):
        click.echo(
            f"  job {job.id:<4d} {date_key(job.date)} {job.start_time}  {job.duration_hours}h "
            f"{job.service_kind.value:10s} {format_money(job.total_price):>10s}"
        )
    click.echo(f"  {'Subtotal':>44s} {format_money(inv.subtotal):>10s}")
    click.echo(f"  {'Tax':>44s} {format_money(inv.tax):>10s}")
    click.echo(f"  {'Total':>44s} {format_money(inv.total):>10s}")


@invoice_group.command("add-job")
@click.argument("invoice", metavar="INVOICE")
@click.argument("job_id", type=int)
@click.pass_context
def add_job(ctx, invoice: str, job_id: int) -> None:
    """Add a completed job to a draft invoice."""
    service = InvoiceService(ctx.obj["db"])
    inv = _resolve_invoice(ctx, service, invoice)
    try:
        updated = service.add_job(inv.id, job_id)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Added job {job_id} to {updated.invoice_number}; total {format_money(updated.total)}")


@invoice_group.command("remove-job")
@click.argument("invoice", metavar="INVOICE")
@click.argument("job_id", type=int)
@click.pass_context
def remove_job(ctx, invoice: str, job_id: int) -> None:
    """Remove a job from a draft invoice."""
    service = InvoiceService(ctx.obj["db"])
    inv = _resolve_invoice(ctx, service, invoice)
    try:
        updated = service.remove_job(inv.id, job_id)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Removed job {job_id} from {updated.invoice_number}; total {format_money(updated.total)}")


def _status_command(name: str, method: str, done: str, help_text: str):
    @invoice_group.command(name, help=help_text)
    @click.argument("invoice", metavar="INVOICE")
    @click.pass_context
    def command(ctx, invoice: str) -> None:
        service = InvoiceService(ctx.obj["db"])
        inv = _resolve_invoice(ctx, service, invoice)
        try:
            updated = getattr(service, method)(inv.id)
        except ValueError as e:
            handle_domain_error(ctx, e)
        click.echo(f"Invoice {updated.invoice_number} {done}")

    return command


send_invoice = _status_command("send", "send_invoice", "sent (pending payment)", "Send a draft invoice.")
pay_invoice = _status_command("pay", "mark_paid", "marked paid", "Record payment of a sent invoice.")
cancel_invoice = _status_command("cancel", "cancel_invoice", "cancelled", "Cancel a draft or sent invoice.")


@invoice_group.command("delete")
@click.argument("invoice", metavar="INVOICE")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_invoice(ctx, invoice: str, yes: bool) -> None:
    """Delete a draft or cancelled invoice, freeing its jobs.

    The invoice number is not reused.
    """
    service = InvoiceService(ctx.obj["db"])
    inv = _resolve_invoice(ctx, service, invoice)

    if not yes and not click.confirm(f"Are you sure you want to delete invoice {inv.invoice_number}?"):
        click.echo("Deletion cancelled.")
        return

    try:
        service.delete_invoice(inv.id)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted invoice {inv.invoice_number}")


@invoice_group.command("uninvoiced")
@click.option("--client", help="Show this client's uninvoiced completed jobs")
@click.option("--start-date", help="Start date")
@click.option("--end-date", help="End date")
@period_options
@click.pass_context
def uninvoiced(ctx, client: str | None, start_date, end_date, **period_kwargs) -> None:
    """Show completed work that has not been invoiced yet.

    Without --client, lists the active clients with uninvoiced work in the
    period (default: current month).
    """
    db = ctx.obj["db"]
    service = InvoiceService(db)
    today = date.today()

    if client is not None:
        try:
            client_id = resolve_client(ClientService(db), client)
        except ValueError as e:
            handle_domain_error(ctx, e)
        jobs = service.uninvoiced_completed_jobs(client_id)
        if not jobs:
            click.echo("No uninvoiced completed jobs.")
            return
        for job in jobs:
            click.echo(f"job {job.id:<4d} {date_key(job.date)} {job.start_time}  {format_money(job.total_price):>10s}")
        total = sum((job.total_price for job in jobs))
        click.echo(f"Total: {format_money(total)}")
        return

    start, end = resolve_cli_date_range(
        ctx,
        start_date=start_date,
        end_date=end_date,
        period_flags=collect_period_flags(period_kwargs),
        default_range=month_bounds(today),
        today=today,
    )
    if start is None or end is None:
        click.echo("Error: Both --start-date and --end-date are required when either is given.", err=True)
        ctx.exit(1)

    clients = service.clients_with_uninvoiced_work(start, end)
    if not clients:
        click.echo(f"No clients with uninvoiced work between {date_key(start)} and {date_key(end)}.")
        return
    click.echo(f"Clients with uninvoiced work between {date_key(start)} and {date_key(end)}:")
    for c in clients:
        click.echo(f"  ID: {c.id:3d} | {c.name}")


def register_commands(cli):
    """Register invoice commands with main CLI."""
    cli.add_command(invoice_group, name="invoice")
