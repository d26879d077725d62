"""Main CLI entry point."""

import logging

import click
from debtsync.database.factories import create_sqlite_database

# Import and register all commands at module level
from debtsync.cli.commands import (
    company,
    user,
    customer,
    debt,
    receivables,
    payment,
)


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides DEBTSYNC_DB_PATH environment variable)",
    envvar="DEBTSYNC_DB_PATH",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="WARNING",
    show_default=True,
    envvar="DEBTSYNC_LOG_LEVEL",
    help="Logging verbosity",
)
@click.pass_context
def cli(ctx, db_path: str | None, log_level: str):
    """Debtsync - receivables reconciliation.

    Keep a company's open debts in sync with an imported receivables list
    and allocate incoming payments to the oldest debts first.
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
company.register_commands(cli)
user.register_commands(cli)
customer.register_commands(cli)
debt.register_commands(cli)
receivables.register_commands(cli)
payment.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
