"""Finance summary and dashboard commands."""

from datetime import date

import click
from cleanops.cli.date_filters import collect_period_flags, period_options, resolve_cli_date_range
from cleanops.cli.error_handling import format_money, handle_domain_error
from cleanops.domain.client import ClientService
from cleanops.domain.finance import FinanceService
from cleanops.domain.occurrences import date_key
from cleanops.utils.date_parser import month_bounds
from cleanops.utils.entity_resolver import resolve_client


@click.group()
def finance_group():
    """Revenue, cost and profit."""
    pass


@finance_group.command("summary")
@click.option("--start-date", help="Start date (YYYY-MM-DD or relative like 'last month')")
@click.option("--end-date", help="End date (YYYY-MM-DD or relative like 'today')")
@period_options
@click.option("--client", help="Client name or ID")
@click.option("--jobs", "show_jobs", is_flag=True, help="List the jobs included")
@click.pass_context
def summary(ctx, start_date, end_date, client, show_jobs: bool, **period_kwargs) -> None:
    """Show revenue, cost and profit of completed jobs.

    Defaults to the current month.

    Examples:
        cleanops finance summary
        cleanops finance summary --last-month
        cleanops finance summary --start-date 2024-01-01 --end-date 2024-03-31 --client "Jane Smith"
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

    try:
        client_id = resolve_client(ClientService(db), client) if client is not None else None
        result = FinanceService(db).summarize(start, end, client_id=client_id)
    except ValueError as e:
        handle_domain_error(ctx, e)

    click.echo(f"\nCompleted jobs {date_key(result.start_date)} to {date_key(result.end_date)}: {result.job_count}")
    click.echo("-" * 40)
    click.echo(f"{'Revenue':20s} {format_money(result.revenue):>15s}")
    click.echo(f"{'Cleaner cost':20s} {format_money(result.cost):>15s}")
    click.echo(f"{'Profit':20s} {format_money(result.profit):>15s}")

    if show_jobs and result.jobs:
        click.echo("")
        for job in result.jobs:
            click.echo(
                f"job {job.id:<4d} {date_key(job.date)}  {format_money(job.total_price):>10s}  "
                f"{format_money(job.cost):>10s}"
            )


@finance_group.command("dashboard")
@click.pass_context
def dashboard(ctx) -> None:
    """Show headline numbers for this week."""
    db = ctx.obj["db"]
    stats = FinanceService(db).dashboard(date.today())
    names = {c.id: c.name for c in ClientService(db).list_clients()}

    click.echo(f"Active clients:        {stats.active_clients}")
    click.echo(f"Active cleaners:       {stats.active_professionals}")
    click.echo(f"Jobs this week:        {stats.jobs_this_week}")
    click.echo("\nUpcoming jobs:")
    if not stats.upcoming_jobs:
        click.echo("  none scheduled")
    for job in stats.upcoming_jobs:
        click.echo(f"  {date_key(job.date)} {job.start_time}  {names.get(job.client_id, '?')}")


def register_commands(cli):
    """Register finance commands with main CLI."""
    cli.add_command(finance_group, name="finance")
