"""Main CLI entry point."""

import logging

import click
from cleanops.database.factories import DB_PATH_ENV, create_sqlite_database

# Import and register all commands at module level
from cleanops.cli.commands import (
    client,
    professional,
    job,
    invoice,
    payrun,
    finance,
    quote,
)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help=f"Path to database file (overrides {DB_PATH_ENV} environment variable)",
    envvar=DB_PATH_ENV,
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    envvar="CLEANOPS_VERBOSE",
    help="Log what each command does (debug level)",
)
@click.pass_context
def cli(ctx, db_path: str | None, verbose: bool):
    """Cleanops - back office for a cleaning-services company.

    Keep client and cleaner records, schedule one-off and weekly jobs,
    invoice completed work and pay cleaners through weekly payment runs.
    """
    ctx.ensure_object(dict)
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING, format=LOG_FORMAT)

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None and "db" not in ctx.obj:
        db = create_sqlite_database(database_path=db_path)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db
        ctx.call_on_close(db.disconnect)


# Register all commands
client.register_commands(cli)
professional.register_commands(cli)
job.register_commands(cli)
invoice.register_commands(cli)
payrun.register_commands(cli)
finance.register_commands(cli)
quote.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
