"""Chart of accounts commands."""

import click
from storeledger.cli.error_handling import handle_domain_error
from storeledger.cli.resolution import resolve_account_or_exit
from storeledger.domain.account import AccountService
from storeledger.domain.entities import AccountCategory, AccountType

ACCOUNT_TYPES = [t.value for t in AccountType]
ACCOUNT_CATEGORIES = [c.value for c in AccountCategory]


@click.group()
def account_group():
    """Manage the chart of accounts."""
    pass


@account_group.command("create")
@click.argument("code", metavar="CODE")
@click.argument("name", metavar="NAME")
@click.option(
    "--type", "account_type", required=True,
    type=click.Choice(ACCOUNT_TYPES, case_sensitive=False),
    help="Account type",
)
@click.option(
    "--category", required=True,
    type=click.Choice(ACCOUNT_CATEGORIES, case_sensitive=False),
    help="Account category within its type",
)
@click.option("--parent", help="Parent account code")
@click.option("--description", help="Account description")
@click.pass_context
def create_account(
    ctx,
    code: str,
    name: str,
    account_type: str,
    category: str,
    parent: str | None,
    description: str | None,
):
    """Create a new account.

    Examples:
        storeledger account create 1005 "Petty Cash" --type ASSET --category CURRENT_ASSET --parent 1000
        storeledger account create 6001 "Interest Income" --type REVENUE --category OTHER_REVENUE
    """
    db = ctx.obj["db"]
    service = AccountService(db)

    parent_id = resolve_account_or_exit(ctx, service, parent) if parent else None

    try:
        account = service.create_account(
            code=code,
            name=name,
            account_type=AccountType(account_type.upper()),
            category=AccountCategory(category.upper()),
            parent_id=parent_id,
            description=description,
        )
        click.echo(f"Created account {account.code} '{account.name}' (ID: {account.id})")
    except ValueError as e:
        handle_domain_error(ctx, e)


@account_group.command("list")
@click.option(
    "--type", "account_type",
    type=click.Choice(ACCOUNT_TYPES, case_sensitive=False),
    help="Only list accounts of this type",
)
@click.option("--search", help="Match code or name")
@click.option("--all", "include_inactive", is_flag=True, help="Include deactivated accounts")
@click.pass_context
def list_accounts(ctx, account_type: str | None, search: str | None, include_inactive: bool):
    """List accounts ordered by code."""
    db = ctx.obj["db"]
    service = AccountService(db)

    accounts = service.list_accounts(
        account_type=AccountType(account_type.upper()) if account_type else None,
        include_inactive=include_inactive,
        search=search,
    )
    if not accounts:
        click.echo("No accounts found.")
        return

    click.echo("\nAccounts:")
    click.echo("-" * 78)
    for acc in accounts:
        indent = "  " * (acc.level - 1)
        status = "" if acc.is_active else " (inactive)"
        side = service.classify(acc).value.lower()
        click.echo(
            f"{acc.code:8s} | {indent + acc.name:34s} | {acc.account_type.value:9s} | {side}{status}"
        )


@account_group.command("update")
@click.argument("code", metavar="CODE")
@click.option("--code", "new_code", help="New account code")
@click.option("--name", help="New account name")
@click.option(
    "--category",
    type=click.Choice(ACCOUNT_CATEGORIES, case_sensitive=False),
    help="New category",
)
@click.option("--parent", help="New parent account code, or empty string for a root account")
@click.option("--description", help="New description")
@click.pass_context
def update_account(
    ctx,
    code: str,
    new_code: str | None,
    name: str | None,
    category: str | None,
    parent: str | None,
    description: str | None,
) -> None:
    """Update an account.

    Updates only the fields that are provided. The code cannot change once
    journal lines reference the account.

    Examples:
        storeledger account update 1005 --name "Store Petty Cash"
        storeledger account update 1005 --parent ""
    """
    db = ctx.obj["db"]
    service = AccountService(db)
    account_id = resolve_account_or_exit(ctx, service, code)

    parent_id = None
    clear_parent = False
    if parent is not None:
        if parent == "":
            clear_parent = True
        else:
            parent_id = resolve_account_or_exit(ctx, service, parent)

    try:
        account = service.update_account(
            account_id=account_id,
            code=new_code,
            name=name,
            category=AccountCategory(category.upper()) if category else None,
            parent_id=parent_id,
            clear_parent=clear_parent,
            description=description,
        )
        click.echo(f"Updated account {account.code} '{account.name}'")
    except ValueError as e:
        handle_domain_error(ctx, e)


@account_group.command("deactivate")
@click.argument("code", metavar="CODE")
@click.pass_context
def deactivate_account(ctx, code: str) -> None:
    """Deactivate an account.

    Accounts are never deleted; a deactivated account keeps its history but
    cannot receive new journal lines.
    """
    db = ctx.obj["db"]
    service = AccountService(db)
    account_id = resolve_account_or_exit(ctx, service, code)

    try:
        account = service.deactivate_account(account_id)
        click.echo(f"Deactivated account {account.code} '{account.name}'")
    except ValueError as e:
        handle_domain_error(ctx, e)


def register_commands(cli):
    """Register account commands with main CLI."""
    cli.add_command(account_group, name="account")
