"""Payment run commands."""

from datetime import date, timedelta

import click
from cleanops.cli.date_filters import collect_period_flags, period_options, resolve_cli_date_range
from cleanops.cli.error_handling import format_money, handle_domain_error
from cleanops.domain.occurrences import date_key
from cleanops.domain.payment_run import PaymentRunService
from cleanops.domain.professional import ProfessionalService
from cleanops.utils.date_parser import week_bounds


@click.group()
def payrun_group():
    """Pay cleaners for completed work."""
    pass


@payrun_group.command("create")
@click.option("--start-date", help="First day of the period")
@click.option("--end-date", help="Last day of the period")
@period_options
@click.option("--allow-duplicate", is_flag=True, help="Create a run even if one exists for this exact period")
@click.pass_context
def create_run(ctx, start_date, end_date, allow_duplicate: bool, **period_kwargs) -> None:
    """Create a payment run from completed jobs in a period.

    The period defaults to last week (Monday to Sunday).

    Examples:
        cleanops payrun create
        cleanops payrun create --start-date 2024-03-04 --end-date 2024-03-10
    """
    today = date.today()
    start, end = resolve_cli_date_range(
        ctx,
        start_date=start_date,
        end_date=end_date,
        period_flags=collect_period_flags(period_kwargs),
        default_range=week_bounds(today - timedelta(days=7)),
        today=today,
    )
    if start is None or end is None:
        click.echo("Error: Both --start-date and --end-date are required when either is given.", err=True)
        ctx.exit(1)

    service = PaymentRunService(ctx.obj["db"])
    try:
        run = service.generate_payment_run(start, end, allow_duplicate=allow_duplicate)
    except ValueError as e:
        handle_domain_error(ctx, e)

    items = service.list_items(run.id)
    click.echo(f"Created payment run {run.id} for {date_key(run.period_start)} to {date_key(run.period_end)}")
    click.echo(f"  {len(items)} cleaner(s), total {format_money(service.run_total(run.id))}")


@payrun_group.command("list")
@click.pass_context
def list_runs(ctx) -> None:
    """List payment runs, newest first."""
    service = PaymentRunService(ctx.obj["db"])
    runs = service.list_payment_runs()
    if not runs:
        click.echo("No payment runs found.")
        return

    click.echo("\nPayment runs:")
    click.echo("-" * 70)
    for run in runs:
        items = service.list_items(run.id)
        paid = sum(1 for item in items if item.paid_at is not None)
        click.echo(
            f"ID: {run.id:3d} | {date_key(run.period_start)} to {date_key(run.period_end)} | "
            f"{format_money(service.run_total(run.id)):>10s} | {paid}/{len(items)} paid"
        )


@payrun_group.command("show")
@click.argument("run_id", type=int)
@click.pass_context
def show_run(ctx, run_id: int) -> None:
    """Show what each cleaner is owed in a payment run."""
    db = ctx.obj["db"]
    service = PaymentRunService(db)
    try:
        run = service.require_payment_run(run_id)
        items = service.list_items(run_id)
    except ValueError as e:
        handle_domain_error(ctx, e)

    professionals = {p.id: p for p in ProfessionalService(db).list_professionals()}
    click.echo(f"Payment run {run.id}: {date_key(run.period_start)} to {date_key(run.period_end)}")
    if not items:
        click.echo("  No completed jobs in this period.")
        return
    for item in items:
        p = professionals.get(item.professional_id)
        name = p.name if p else str(item.professional_id)
        bank = f"{p.bank_sort_code} {p.bank_account_number}" if p and p.bank_account_number else "no bank details"
        paid = f"paid {item.paid_at:%Y-%m-%d}" if item.paid_at else "pending"
        click.echo(f"  item {item.id:<4d} {name[:25]:25s} {format_money(item.amount):>10s}  {paid:15s} {bank}")
    click.echo(f"  {'Total':>31s} {format_money(service.run_total(run.id)):>10s}")


@payrun_group.command("pay")
@click.argument("item_ids", metavar="ITEM_ID...", type=int, nargs=-1, required=True)
@click.pass_context
def pay_items(ctx, item_ids: tuple[int, ...]) -> None:
    """Record that payment run items have been paid.

    Paying an item twice keeps the original payment date.
    """
    service = PaymentRunService(ctx.obj["db"])
    for item_id in item_ids:
        try:
            item = service.mark_item_paid(item_id)
        except ValueError as e:
            handle_domain_error(ctx, e)
        click.echo(f"Item {item.id}: {format_money(item.amount)} paid {item.paid_at:%Y-%m-%d %H:%M} UTC")


def register_commands(cli):
    """Register payment run commands with main CLI."""
    cli.add_command(payrun_group, name="payrun")
