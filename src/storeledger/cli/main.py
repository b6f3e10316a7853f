"""Main CLI entry point."""

import logging

import click
from storeledger.database.factories import create_sqlite_database

# Import and register all commands at module level
from storeledger.cli.commands import (
    account,
    init_accounts,
    period,
    journal,
    event,
    report,
)


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides STORELEDGER_DB_PATH environment variable)",
    envvar="STORELEDGER_DB_PATH",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx, db_path: str | None, verbose: bool):
    """Storeledger - Double-entry bookkeeping for a retail store.

    Keep a chart of accounts, post balanced journal entries, book store events,
    report trial balances and statements, and close accounting periods.
    """
    ctx.ensure_object(dict)
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
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
account.register_commands(cli)
init_accounts.register_commands(cli)
period.register_commands(cli)
journal.register_commands(cli)
event.register_commands(cli)
report.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
