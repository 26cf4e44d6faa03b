"""Job scheduling commands."""

from datetime import date

import click
from cleanops.cli.date_filters import collect_period_flags, period_options, resolve_cli_date_range
from cleanops.cli.error_handling import format_money, handle_domain_error
from cleanops.cli.params import DATE, DURATION, choice_of
from cleanops.domain.client import ClientService
from cleanops.domain.entities import JobStatus, JobType, ServiceKind
from cleanops.domain.job import JobService
from cleanops.domain.occurrences import date_key
from cleanops.domain.professional import ProfessionalService
from cleanops.utils.date_parser import week_bounds
from cleanops.utils.entity_resolver import resolve_client, resolve_professional


def _resolve_filters(ctx, client: str | None, cleaner: str | None) -> tuple[int | None, int | None]:
    db = ctx.obj["db"]
    client_id = professional_id = None
    try:
        if client is not None:
            client_id = resolve_client(ClientService(db), client)
        if cleaner is not None:
            professional_id = resolve_professional(ProfessionalService(db), cleaner)
    except ValueError as e:
        handle_domain_error(ctx, e)
    return client_id, professional_id


def _resolve_cleaners(ctx, cleaners: tuple[str, ...]) -> list[int]:
    service = ProfessionalService(ctx.obj["db"])
    try:
        return [resolve_professional(service, cleaner) for cleaner in cleaners]
    except ValueError as e:
        handle_domain_error(ctx, e)


def _name_lookup(ctx) -> tuple[dict[int, str], dict[int, str]]:
    db = ctx.obj["db"]
    clients = {c.id: c.name for c in ClientService(db).list_clients()}
    professionals = {p.id: p.name for p in ProfessionalService(db).list_professionals()}
    return clients, professionals


@click.group()
def job_group():
    """Schedule and manage jobs."""
    pass


@job_group.command("create")
@click.argument("client", metavar="CLIENT")
@click.option("--date", "job_date", type=DATE, required=True, help="Job date (first visit for weekly jobs)")
@click.option("--start", "start_time", required=True, help="Start time, HH:MM")
@click.option("--duration", type=DURATION, required=True, help="Length in hours, e.g. 2.5 or 2h30m")
@click.option("--cleaner", "cleaners", multiple=True, required=True, help="Cleaner name or ID (repeat for a team)")
@click.option("--weekly", is_flag=True, help="Repeat every week on the same weekday")
@click.option("--deep-clean", is_flag=True, help="Charge and pay deep-clean rates")
@click.option("--status", type=choice_of(JobStatus), default=JobStatus.SCHEDULED.value, show_default=True)
@click.option("--notes", help="Free-form notes")
@click.pass_context
def create_job(
    ctx,
    client: str,
    job_date: date,
    start_time: str,
    duration,
    cleaners: tuple[str, ...],
    weekly: bool,
    deep_clean: bool,
    status: str,
    notes: str | None,
) -> None:
    """Schedule a job for a client.

    CLIENT can be a client name or ID.

    Examples:
        cleanops job create "Jane Smith" --date 2024-03-04 --start 09:00 \\
            --duration 2 --cleaner "Maria Lopez" --cleaner 3
        cleanops job create 1 --date "next monday" --start 14:30 --duration 3h \\
            --cleaner Maria --weekly --deep-clean
    """
    db = ctx.obj["db"]
    service = JobService(db)
    try:
        client_id = resolve_client(ClientService(db), client)
    except ValueError as e:
        handle_domain_error(ctx, e)
    professional_ids = _resolve_cleaners(ctx, cleaners)

    try:
        job_id = service.create_job(
            client_id=client_id,
            professional_ids=professional_ids,
            date=job_date,
            start_time=start_time,
            duration_hours=duration,
            job_type=JobType.RECURRING if weekly else JobType.ONE_TIME,
            service_kind=ServiceKind.DEEP_CLEAN if deep_clean else ServiceKind.REGULAR,
            status=status,
            notes=notes,
        )
    except ValueError as e:
        handle_domain_error(ctx, e)

    job = service.require_job(job_id)
    click.echo(f"Created job {job_id} on {date_key(job.date)} at {job.start_time}")
    click.echo(f"  Price: {format_money(job.total_price)}  Cost: {format_money(job.cost)}")


@job_group.command("list")
@click.option("--start-date", help="Start date (YYYY-MM-DD or relative like 'last month')")
@click.option("--end-date", help="End date (YYYY-MM-DD or relative like 'today')")
@period_options
@click.option("--client", help="Client name or ID")
@click.option("--cleaner", help="Cleaner name or ID")
@click.option("--status", type=choice_of(JobStatus))
@click.pass_context
def list_jobs(ctx, start_date, end_date, client, cleaner, status, **period_kwargs) -> None:
    """List jobs by date, newest first.

    Weekly jobs are listed once, under their first date; use
    'job occurrences' to see every visit in a range.
    """
    start, end = resolve_cli_date_range(
        ctx, start_date=start_date, end_date=end_date, period_flags=collect_period_flags(period_kwargs)
    )
    client_id, professional_id = _resolve_filters(ctx, client, cleaner)
    service = JobService(ctx.obj["db"])

    jobs = service.list_jobs(
        start_date=start, end_date=end, client_id=client_id, professional_id=professional_id, status=status
    )
    if not jobs:
        click.echo("No jobs found.")
        return

    clients, professionals = _name_lookup(ctx)
    click.echo(f"\n{'ID':>4s}  {'Date':10s}  {'Time':5s}  {'Client':20s}  {'Type':9s}  {'Status':11s}  {'Price':>10s}  {'Cost':>10s}")
    click.echo("-" * 94)
    for job in jobs:
        kind = "weekly" if job.is_recurring else "one-off"
        if job.service_kind == ServiceKind.DEEP_CLEAN:
            kind += "*"
        click.echo(
            f"{job.id:4d}  {date_key(job.date)}  {job.start_time}  {clients.get(job.client_id, '?')[:20]:20s}  "
            f"{kind:9s}  {job.status.value:11s}  {format_money(job.total_price):>10s}  {format_money(job.cost):>10s}"
        )
    if any(job.service_kind == ServiceKind.DEEP_CLEAN for job in jobs):
        click.echo("\n* deep clean")


@job_group.command("show")
@click.argument("job_id", type=int)
@click.pass_context
def show_job(ctx, job_id: int) -> None:
    """Show a job with its cost breakdown."""
    service = JobService(ctx.obj["db"])
    try:
        job = service.require_job(job_id)
    except ValueError as e:
        handle_domain_error(ctx, e)

    clients, professionals = _name_lookup(ctx)
    click.echo(f"Job {job.id}: {clients.get(job.client_id, job.client_id)}")
    click.echo(f"  Date:      {date_key(job.date)}{' (weekly)' if job.is_recurring else ''}")
    click.echo(f"  Time:      {job.start_time} for {job.duration_hours}h")
    click.echo(f"  Service:   {job.service_kind.value}")
    click.echo(f"  Status:    {job.status.value}")
    click.echo(f"  Price:     {format_money(job.total_price)}")
    click.echo(f"  Cost:      {format_money(job.cost)}")
    if job.professional_costs:
        for part in job.professional_costs:
            click.echo(f"    {professionals.get(part.professional_id, part.professional_id)}: {format_money(part.cost)}")
    else:
        names = ", ".join(str(professionals.get(pid, pid)) for pid in job.professional_ids)
        click.echo(f"    Cleaners: {names} (no per-cleaner breakdown)")
    if job.occurrence_statuses:
        click.echo("  Overrides:")
        for day in sorted(job.occurrence_statuses):
            click.echo(f"    {date_key(day)}: {job.occurrence_statuses[day].value}")
    if job.notes:
        click.echo(f"  Notes:     {job.notes}")


@job_group.command("update")
@click.argument("job_id", type=int)
@click.option("--client", help="Client name or ID")
@click.option("--cleaner", "cleaners", multiple=True, help="Replace cleaners (repeat for a team)")
@click.option("--date", "job_date", type=DATE)
@click.option("--start", "start_time", help="Start time, HH:MM")
@click.option("--duration", type=DURATION)
@click.option("--type", "job_type", type=choice_of(JobType))
@click.option("--service", "service_kind", type=choice_of(ServiceKind))
@click.option("--status", type=choice_of(JobStatus))
@click.option("--notes")
@click.pass_context
def update_job(ctx, job_id: int, client, cleaners, job_date, start_time, duration, job_type, service_kind, status, notes) -> None:
    """Update a job. Only the options given are changed.

    Changing the client, cleaners, duration or service re-prices the job at
    current rates. Other changes keep the stored price and cost.

    Examples:
        cleanops job update 12 --status completed
        cleanops job update 12 --duration 3 --cleaner Maria --cleaner Ana
    """
    service = JobService(ctx.obj["db"])
    updates = {}
    if client is not None:
        updates["client_id"] = _resolve_filters(ctx, client, None)[0]
    if cleaners:
        updates["professional_ids"] = _resolve_cleaners(ctx, cleaners)
    optional = {
        "date": job_date,
        "start_time": start_time,
        "duration_hours": duration,
        "job_type": job_type,
        "service_kind": service_kind,
        "status": status,
        "notes": notes,
    }
    updates.update({name: value for name, value in optional.items() if value is not None})
    if not updates:
        click.echo("Nothing to update.")
        return

    try:
        before = service.require_job(job_id)
        job = service.update_job(job_id, **updates)
    except ValueError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Updated job {job.id}")
    if (job.total_price, job.cost) != (before.total_price, before.cost):
        click.echo(f"  Price: {format_money(job.total_price)}  Cost: {format_money(job.cost)}")


@job_group.command("delete")
@click.argument("job_id", type=int)
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_job(ctx, job_id: int, yes: bool) -> None:
    """Delete a job that is not on an invoice."""
    service = JobService(ctx.obj["db"])
    try:
        service.require_job(job_id)
    except ValueError as e:
        handle_domain_error(ctx, e)

    if not yes and not click.confirm(f"Are you sure you want to delete job {job_id}?"):
        click.echo("Deletion cancelled.")
        return

    try:
        service.delete_job(job_id)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted job {job_id}")


@job_group.command("occurrences")
@click.option("--start-date", help="Start date (defaults to Monday this week)")
@click.option("--end-date", help="End date (defaults to Sunday this week)")
@period_options
@click.option("--client", help="Client name or ID")
@click.option("--cleaner", help="Cleaner name or ID")
@click.pass_context
def list_occurrences(ctx, start_date, end_date, client, cleaner, **period_kwargs) -> None:
    """Show every visit in a date range, with weekly jobs expanded."""
    today = date.today()
    start, end = resolve_cli_date_range(
        ctx,
        start_date=start_date,
        end_date=end_date,
        period_flags=collect_period_flags(period_kwargs),
        default_range=week_bounds(today),
        today=today,
    )
    if start is None or end is None:
        click.echo("Error: Both --start-date and --end-date are required when either is given.", err=True)
        ctx.exit(1)
    client_id, professional_id = _resolve_filters(ctx, client, cleaner)

    occurrences = JobService(ctx.obj["db"]).occurrences(
        start, end, client_id=client_id, professional_id=professional_id
    )
    if not occurrences:
        click.echo(f"No jobs between {date_key(start)} and {date_key(end)}.")
        return

    clients, professionals = _name_lookup(ctx)
    click.echo(f"\nJobs {date_key(start)} to {date_key(end)}:")
    click.echo("-" * 80)
    for occ in occurrences:
        cleaners = ", ".join(professionals.get(pid, str(pid)) for pid in occ.job.professional_ids)
        click.echo(
            f"{date_key(occ.date)} {occ.date.strftime('%a')} {occ.job.start_time}  "
            f"job {occ.job.id:<4d} {clients.get(occ.job.client_id, '?')[:20]:20s}  "
            f"{occ.status.value:11s}  {cleaners}"
        )


@job_group.command("set-occurrence")
@click.argument("job_id", type=int)
@click.argument("on_date", metavar="DATE", type=DATE)
@click.argument("status", required=False, type=choice_of(JobStatus))
@click.option("--clear", is_flag=True, help="Remove the override so the visit follows the job status")
@click.pass_context
def set_occurrence(ctx, job_id: int, on_date: date, status: str | None, clear: bool) -> None:
    """Set the status of one visit of a weekly job.

    Examples:
        cleanops job set-occurrence 7 2024-03-11 completed
        cleanops job set-occurrence 7 2024-03-18 cancelled
        cleanops job set-occurrence 7 2024-03-18 --clear
    """
    if clear == (status is not None):
        click.echo("Error: Give either a STATUS or --clear.", err=True)
        ctx.exit(1)

    service = JobService(ctx.obj["db"])
    try:
        if clear:
            service.clear_occurrence_status(job_id, on_date)
            click.echo(f"Cleared status override for job {job_id} on {date_key(on_date)}")
        else:
            service.set_occurrence_status(job_id, on_date, status)
            click.echo(f"Job {job_id} on {date_key(on_date)} marked {status}")
    except ValueError as e:
        handle_domain_error(ctx, e)


@job_group.command("past-completed")
@click.option("--client", help="Client name or ID")
@click.option("--cleaner", help="Cleaner name or ID")
@click.option("--limit", type=int, default=20, show_default=True, help="Number of visits to show (0 for all)")
@click.pass_context
def past_completed(ctx, client, cleaner, limit: int) -> None:
    """Show completed visits before today, newest first."""
    client_id, professional_id = _resolve_filters(ctx, client, cleaner)
    occurrences = JobService(ctx.obj["db"]).past_completed(
        date.today(), client_id=client_id, professional_id=professional_id
    )
    if not occurrences:
        click.echo("No completed jobs found.")
        return

    clients, _ = _name_lookup(ctx)
    shown = occurrences[:limit] if limit > 0 else occurrences
    for occ in shown:
        click.echo(
            f"{date_key(occ.date)} {occ.job.start_time}  job {occ.job.id:<4d} "
            f"{clients.get(occ.job.client_id, '?')[:25]:25s}  {format_money(occ.job.total_price):>10s}"
        )
    if len(shown) < len(occurrences):
        click.echo(f"... {len(occurrences) - len(shown)} more (use --limit 0 to show all)")


def register_commands(cli):
    """Register job commands with main CLI."""
    cli.add_command(job_group, name="job")
