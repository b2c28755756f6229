"""Main CLI entry point."""

import logging

import click
from cashflow.database.factories import create_sqlite_database

# Import and register all commands at module level
from cashflow.cli.commands import (
    add,
    category,
    dashboard,
    import_cmd,
    simulate,
    transaction,
)

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides CASHFLOW_DB_PATH environment variable)",
    envvar="CASHFLOW_DB_PATH",
)
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default="WARNING",
    show_default=True,
    help="Logging verbosity",
    envvar="CASHFLOW_LOG_LEVEL",
)
@click.pass_context
def cli(ctx, db_path: str | None, log_level: str):
    """Cashflow - Monthly cash-flow dashboard.

    Record real and projected income and expenses, import monthly
    spreadsheets, and review runway, burn rate and other KPIs.
    """
    ctx.ensure_object(dict)
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        db = create_sqlite_database(database_path=db_path)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db
        ctx.call_on_close(db.disconnect)


# Register all commands
category.register_commands(cli)
add.register_commands(cli)
transaction.register_commands(cli)
dashboard.register_commands(cli)
simulate.register_commands(cli)
import_cmd.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
