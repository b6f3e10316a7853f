"""Balance and financial statement reports."""

import click
from storeledger.cli.error_handling import handle_domain_error
from storeledger.cli.formatting import format_amount, format_presented
from storeledger.cli.resolution import resolve_account_or_exit, resolve_period_or_exit
from storeledger.domain.account import AccountService
from storeledger.domain.balance import BalanceService
from storeledger.domain.entities import StatementSection
from storeledger.domain.period import PeriodService
from storeledger.utils.date_parser import parse_date

period_option = click.option("--period", help="Period name or ID (default: the active period)")


def _echo_section(section: StatementSection) -> None:
    click.echo(f"\n{section.title}")
    for line in section.lines:
        click.echo(f"  {line.account.code:8s} {line.account.name:32s} {format_amount(line.balance):>18s}")
    click.echo(f"  {'Total ' + section.title.lower():41s} {format_amount(section.total):>18s}")


@click.group()
def report_group():
    """Balances, ledgers and financial statements."""
    pass


@report_group.command("balance")
@click.argument("account", metavar="ACCOUNT_CODE")
@period_option
@click.option("--as-of", help="Include movements up to this date")
@click.pass_context
def account_balance(ctx, account: str, period: str | None, as_of: str | None):
    """Show the balance of one account."""
    db = ctx.obj["db"]
    account_service = AccountService(db)
    account_id = resolve_account_or_exit(ctx, account_service, account)
    period_id = resolve_period_or_exit(ctx, PeriodService(db), period)
    balance_service = BalanceService(db)

    try:
        balance = balance_service.account_balance(
            account_id, period_id, as_of=parse_date(as_of) if as_of else None
        )
    except ValueError as e:
        handle_domain_error(ctx, e)

    acc = account_service.get_account(account_id)
    presented = balance_service.present_balance(acc.account_type, balance)
    click.echo(f"{acc.code} {acc.name}: {format_presented(presented)}")


@report_group.command("trial-balance")
@period_option
@click.pass_context
def trial_balance(ctx, period: str | None):
    """Show the trial balance of a period."""
    db = ctx.obj["db"]
    period_id = resolve_period_or_exit(ctx, PeriodService(db), period)

    try:
        report = BalanceService(db).trial_balance(period_id)
    except ValueError as e:
        handle_domain_error(ctx, e)

    click.echo(f"\nTrial balance - {report.period.name}")
    click.echo("-" * 96)
    click.echo(
        f"{'Code':8s} {'Account':28s} {'Opening':>14s} {'Debit':>14s} {'Credit':>14s} {'Ending':>16s}"
    )
    for row in report.rows:
        click.echo(
            f"{row.account.code:8s} {row.account.name[:28]:28s} {format_amount(row.opening):>14s} "
            f"{format_amount(row.debit):>14s} {format_amount(row.credit):>14s} "
            f"{format_presented(row.presented):>16s}"
        )
    click.echo("-" * 96)
    click.echo(f"Debit column:  {format_amount(report.total_debit_column)}")
    click.echo(f"Credit column: {format_amount(report.total_credit_column)}")
    click.echo("Balanced" if report.is_balanced else "NOT BALANCED")


@report_group.command("ledger")
@click.argument("account", metavar="ACCOUNT_CODE")
@period_option
@click.option("--start-date", help="Start date (YYYY-MM-DD or relative like 'this month')")
@click.option("--end-date", help="End date (YYYY-MM-DD or relative like 'today')")
@click.pass_context
def ledger(ctx, account: str, period: str | None, start_date: str | None, end_date: str | None):
    """Show the general ledger of one account with a running balance."""
    db = ctx.obj["db"]
    account_id = resolve_account_or_exit(ctx, AccountService(db), account)
    period_id = resolve_period_or_exit(ctx, PeriodService(db), period)

    try:
        report = BalanceService(db).running_ledger(
            account_id,
            period_id,
            start_date=parse_date(start_date) if start_date else None,
            end_date=parse_date(end_date) if end_date else None,
        )
    except ValueError as e:
        handle_domain_error(ctx, e)

    click.echo(f"\nLedger {report.account.code} {report.account.name}")
    click.echo(f"Opening balance: {format_amount(report.opening_balance)}")
    for row in report.rows:
        click.echo(
            f"{row.entry_date} {row.entry_number:20s} {row.description[:28]:28s} "
            f"{format_amount(row.debit):>14s} {format_amount(row.credit):>14s} "
            f"{format_amount(row.running_balance):>16s}"
        )
    click.echo(f"Closing balance: {format_amount(report.closing_balance)}")


@report_group.command("income-statement")
@period_option
@click.option("--include-closing", is_flag=True, help="Include period closing entries")
@click.pass_context
def income_statement(ctx, period: str | None, include_closing: bool):
    """Show revenue, expenses and net income of a period."""
    db = ctx.obj["db"]
    period_id = resolve_period_or_exit(ctx, PeriodService(db), period)

    try:
        report = BalanceService(db).income_statement(period_id, include_closing=include_closing)
    except ValueError as e:
        handle_domain_error(ctx, e)

    click.echo(f"\nIncome statement - {report.period.name}")
    _echo_section(report.revenue)
    _echo_section(report.expenses)
    click.echo(f"\n{'Net income':43s} {format_amount(report.net_income):>18s}")


@report_group.command("balance-sheet")
@period_option
@click.option("--as-of", help="Balance sheet date (default: period end)")
@click.pass_context
def balance_sheet(ctx, period: str | None, as_of: str | None):
    """Show assets, liabilities and equity."""
    db = ctx.obj["db"]
    period_id = resolve_period_or_exit(ctx, PeriodService(db), period)

    try:
        report = BalanceService(db).balance_sheet(
            period_id, as_of=parse_date(as_of) if as_of else None
        )
    except ValueError as e:
        handle_domain_error(ctx, e)

    click.echo(f"\nBalance sheet as of {report.as_of}")
    _echo_section(report.assets)
    _echo_section(report.liabilities)
    _echo_section(report.equity)
    click.echo(f"  (of which current earnings: {format_amount(report.current_earnings)})")
    click.echo(f"\n{'Total liabilities and equity':43s} {format_amount(report.total_liabilities_equity):>18s}")
    click.echo("Balanced" if report.is_balanced else "NOT BALANCED")


def register_commands(cli):
    """Register report commands with main CLI."""
    cli.add_command(report_group, name="report")
