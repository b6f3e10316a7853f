"""Initialize the default chart of accounts."""

import click
from storeledger.cli.error_handling import handle_domain_error
from storeledger.domain.account import AccountService


@click.command("init-accounts")
@click.pass_context
def init_accounts(ctx):
    """Initialize database with the default store chart of accounts.

    Accounts whose code already exists are left untouched.
    """
    db = ctx.obj["db"]
    service = AccountService(db)

    click.echo("Creating default chart of accounts...")
    try:
        created, skipped = service.seed_chart()
    except ValueError as e:
        handle_domain_error(ctx, e)

    if skipped:
        click.echo(f"Created {len(created)} accounts, skipped {len(skipped)} existing codes.")
    else:
        click.echo(f"Successfully created {len(created)} accounts.")


def register_commands(cli):
    """Register init-accounts command with main CLI."""
    cli.add_command(init_accounts)
