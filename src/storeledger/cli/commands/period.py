"""Accounting period, opening balance and closing commands."""

import click
from storeledger.cli.error_handling import handle_domain_error
from storeledger.cli.formatting import format_amount
from storeledger.cli.resolution import resolve_account_or_exit, resolve_period_or_exit
from storeledger.domain.account import AccountService
from storeledger.domain.closing import PeriodClosingService
from storeledger.domain.period import PeriodService
from storeledger.utils.amount_parser import parse_amount
from storeledger.utils.date_parser import parse_date, parse_period_range


@click.group()
def period_group():
    """Manage accounting periods."""
    pass


@period_group.command("create")
@click.argument("name", metavar="NAME")
@click.option("--start", "start_date", help="First day (YYYY-MM-DD)")
@click.option("--end", "end_date", help="Last day (YYYY-MM-DD)")
@click.option("--active", is_flag=True, help="Make the new period the active one")
@click.pass_context
def create_period(ctx, name: str, start_date: str | None, end_date: str | None, active: bool):
    """Create an accounting period.

    Without --start/--end the range is derived from NAME when it is a year,
    month or quarter.

    Examples:
        storeledger period create 2024 --active
        storeledger period create 2024-Q1
        storeledger period create "Opening" --start 2023-07-01 --end 2023-12-31
    """
    db = ctx.obj["db"]
    service = PeriodService(db)

    try:
        if start_date is None and end_date is None:
            start, end = parse_period_range(name)
        elif start_date is not None and end_date is not None:
            start, end = parse_date(start_date), parse_date(end_date)
        else:
            raise ValueError("Provide both --start and --end, or neither")
    except ValueError as e:
        handle_domain_error(ctx, e)

    try:
        period = service.create_period(name=name, start_date=start, end_date=end, is_active=active)
        status = " (active)" if period.is_active else ""
        click.echo(
            f"Created period '{period.name}' {period.start_date} - {period.end_date}"
            f"{status} (ID: {period.id})"
        )
    except ValueError as e:
        handle_domain_error(ctx, e)


@period_group.command("list")
@click.pass_context
def list_periods(ctx):
    """List accounting periods, newest first."""
    db = ctx.obj["db"]
    service = PeriodService(db)

    periods = service.list_periods()
    if not periods:
        click.echo("No periods found.")
        return

    click.echo("\nPeriods:")
    click.echo("-" * 60)
    for p in periods:
        status = "closed" if p.is_closed else ("active" if p.is_active else "open")
        click.echo(f"ID: {p.id:3d} | {p.name:12s} | {p.start_date} - {p.end_date} | {status}")


@period_group.command("activate")
@click.argument("period", metavar="PERIOD")
@click.pass_context
def activate_period(ctx, period: str):
    """Make PERIOD (name or ID) the active period."""
    db = ctx.obj["db"]
    service = PeriodService(db)
    period_id = resolve_period_or_exit(ctx, service, period)

    try:
        activated = service.activate_period(period_id)
        click.echo(f"Period '{activated.name}' is now active")
    except ValueError as e:
        handle_domain_error(ctx, e)


@period_group.command("validate")
@click.argument("period", metavar="PERIOD", required=False)
@click.pass_context
def validate_period(ctx, period: str | None):
    """Run the pre-close checks for PERIOD (default: the active period)."""
    db = ctx.obj["db"]
    period_id = resolve_period_or_exit(ctx, PeriodService(db), period)

    try:
        validation = PeriodClosingService(db).validate_closable(period_id)
    except ValueError as e:
        handle_domain_error(ctx, e)

    summary = validation.summary
    click.echo(f"\nPeriod '{validation.period.name}':")
    click.echo(f"  Journal entries: {summary.total_entries} ({summary.unposted_entries} unposted)")
    click.echo(f"  Total revenue:   {format_amount(summary.total_revenue)}")
    click.echo(f"  Total expense:   {format_amount(summary.total_expense)}")
    click.echo(f"  Net income:      {format_amount(summary.net_income)}")
    if summary.successor_period is not None:
        click.echo(f"  Next period:     {summary.successor_period.name}")

    if validation.is_valid:
        click.echo("\nPeriod can be closed.")
        return
    click.echo("\nPeriod cannot be closed:")
    for issue in validation.issues:
        click.echo(f"  - {issue}")
    ctx.exit(1)


@period_group.command("close")
@click.argument("period", metavar="PERIOD")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.option("--user", "user_id", help="Acting user")
@click.pass_context
def close_period(ctx, period: str, yes: bool, user_id: str | None):
    """Close PERIOD into retained earnings. Closing cannot be undone."""
    db = ctx.obj["db"]
    period_service = PeriodService(db)
    period_id = resolve_period_or_exit(ctx, period_service, period)
    target = period_service.get_period(period_id)

    if not yes and not click.confirm(f"Close period '{target.name}'? This cannot be undone"):
        click.echo("Closing cancelled.")
        return

    try:
        result = PeriodClosingService(db).close(period_id, user_id=user_id)
    except ValueError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Closed period '{result.period.name}'")
    for entry in result.closing_entries:
        click.echo(f"  Closing entry {entry.number}: {format_amount(entry.total_debit)}")
    click.echo(f"  Net income: {format_amount(result.net_income)}")
    click.echo(f"  Opening balances carried forward: {len(result.opening_balances)}")


@period_group.command("status")
@click.argument("period", metavar="PERIOD")
@click.pass_context
def closing_status(ctx, period: str):
    """Show how PERIOD was closed."""
    db = ctx.obj["db"]
    period_id = resolve_period_or_exit(ctx, PeriodService(db), period)

    try:
        result = PeriodClosingService(db).closing_status(period_id)
    except ValueError as e:
        handle_domain_error(ctx, e)

    if result is None:
        click.echo("Period is open.")
        return
    click.echo(f"Period '{result.period.name}' closed at {result.closed_at:%Y-%m-%d %H:%M}")
    for entry in result.closing_entries:
        click.echo(f"  {entry.number}  {entry.description}")
    click.echo(f"  Net income: {format_amount(result.net_income)}")
    click.echo(f"  Opening balances carried forward: {len(result.opening_balances)}")


@period_group.group("opening-balance")
def opening_balance_group():
    """Manage opening balances of a period."""
    pass


@opening_balance_group.command("set")
@click.argument("account", metavar="ACCOUNT_CODE")
@click.argument("amount", metavar="AMOUNT")
@click.option("--period", help="Period name or ID (default: the active period)")
@click.pass_context
def set_opening_balance(ctx, account: str, amount: str, period: str | None):
    """Set the opening balance of an account.

    AMOUNT is signed on the account's normal side: 500 on a liability is a
    500 credit balance.
    """
    db = ctx.obj["db"]
    period_service = PeriodService(db)
    account_id = resolve_account_or_exit(ctx, AccountService(db), account)
    period_id = resolve_period_or_exit(ctx, period_service, period)

    try:
        opening = period_service.set_opening_balance(account_id, period_id, parse_amount(amount))
        click.echo(f"Opening balance of {account} set to {format_amount(opening.balance)}")
    except ValueError as e:
        handle_domain_error(ctx, e)


@opening_balance_group.command("list")
@click.option("--period", help="Period name or ID (default: the active period)")
@click.pass_context
def list_opening_balances(ctx, period: str | None):
    """List opening balances of a period."""
    db = ctx.obj["db"]
    period_service = PeriodService(db)
    period_id = resolve_period_or_exit(ctx, period_service, period)

    balances = period_service.list_opening_balances(period_id)
    if not balances:
        click.echo("No opening balances found.")
        return

    account_service = AccountService(db)
    for opening in balances:
        account = account_service.get_account(opening.account_id)
        click.echo(f"{account.code:8s} | {account.name:30s} | {format_amount(opening.balance):>18s}")


@opening_balance_group.command("delete")
@click.argument("account", metavar="ACCOUNT_CODE")
@click.option("--period", help="Period name or ID (default: the active period)")
@click.pass_context
def delete_opening_balance(ctx, account: str, period: str | None):
    """Delete the opening balance of an account."""
    db = ctx.obj["db"]
    period_service = PeriodService(db)
    account_id = resolve_account_or_exit(ctx, AccountService(db), account)
    period_id = resolve_period_or_exit(ctx, period_service, period)

    try:
        period_service.delete_opening_balance(account_id, period_id)
        click.echo(f"Deleted opening balance of {account}")
    except ValueError as e:
        handle_domain_error(ctx, e)


def register_commands(cli):
    """Register period commands with main CLI."""
    cli.add_command(period_group, name="period")
