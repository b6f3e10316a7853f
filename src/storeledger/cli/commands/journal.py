"""Journal entry commands."""

import click
from storeledger.cli.error_handling import handle_domain_error
from storeledger.cli.formatting import format_amount
from storeledger.cli.resolution import resolve_period_or_exit
from storeledger.domain.account import AccountService
from storeledger.domain.entities import JournalLineInput, ReferenceType
from storeledger.domain.journal import JournalService
from storeledger.domain.period import PeriodService
from storeledger.utils.amount_parser import parse_non_negative_amount
from storeledger.utils.date_parser import parse_date
from storeledger.utils.resolvers import resolve_account


def parse_line(account_service: AccountService, spec: str) -> JournalLineInput:
    """Parse "ACCOUNT_CODE:DEBIT:CREDIT[:MEMO]" into a journal line.

    Empty amounts count as zero, so "1001:500:" is a 500 debit on 1001.

    Raises:
        ValueError: If the line is malformed or the account does not exist
    """
    parts = spec.split(":", 3)
    if len(parts) < 3:
        raise ValueError(f"Invalid line '{spec}': expected ACCOUNT_CODE:DEBIT:CREDIT[:MEMO]")
    code, debit, credit = parts[0], parts[1] or "0", parts[2] or "0"
    memo = parts[3] if len(parts) == 4 and parts[3] else None
    return JournalLineInput(
        account_id=resolve_account(account_service, code),
        debit=parse_non_negative_amount(debit),
        credit=parse_non_negative_amount(credit),
        description=memo,
    )


@click.group()
def journal_group():
    """Manage journal entries."""
    pass


@journal_group.command("add")
@click.argument("description")
@click.option(
    "--line", "lines", multiple=True, required=True,
    help="ACCOUNT_CODE:DEBIT:CREDIT[:MEMO], repeat for each line",
)
@click.option("--date", "entry_date", default="today", help="Entry date (default: today)")
@click.option("--period", help="Period name or ID (default: the active period)")
@click.option("--reference", help="External reference")
@click.option("--draft", is_flag=True, help="Save unposted; post later with 'journal post'")
@click.option("--user", "user_id", help="Acting user")
@click.pass_context
def add_entry(
    ctx,
    description: str,
    lines: tuple[str, ...],
    entry_date: str,
    period: str | None,
    reference: str | None,
    draft: bool,
    user_id: str | None,
):
    """Add a balanced journal entry.

    Examples:
        storeledger journal add "Owner contribution" --line 1001:1000000: --line 3001::1000000
        storeledger journal add "Electricity" --date 2024-03-05 --line 5003:250000: --line 1001::250000
    """
    db = ctx.obj["db"]
    journal_service = JournalService(db)
    account_service = AccountService(db)
    period_id = resolve_period_or_exit(ctx, PeriodService(db), period)

    try:
        parsed_date = parse_date(entry_date)
        parsed_lines = [parse_line(account_service, spec) for spec in lines]
        entry = journal_service.create_entry(
            entry_date=parsed_date,
            description=description,
            period_id=period_id,
            lines=parsed_lines,
            reference=reference,
            reference_type=ReferenceType.MANUAL,
            user_id=user_id,
            posted=not draft,
        )
    except ValueError as e:
        handle_domain_error(ctx, e)

    state = "draft" if draft else "posted"
    click.echo(
        f"Created journal entry {entry.number} ({state}, {format_amount(entry.total_debit)}, "
        f"ID: {entry.id})"
    )


@journal_group.command("post")
@click.argument("entry_id", type=int)
@click.pass_context
def post_entry(ctx, entry_id: int):
    """Post a draft journal entry."""
    db = ctx.obj["db"]
    try:
        entry = JournalService(db).post_entry(entry_id)
        click.echo(f"Posted journal entry {entry.number}")
    except ValueError as e:
        handle_domain_error(ctx, e)


@journal_group.command("reverse")
@click.argument("entry_id", type=int)
@click.option("--date", "entry_date", help="Reversal date (default: the original date)")
@click.option("--user", "user_id", help="Acting user")
@click.pass_context
def reverse_entry(ctx, entry_id: int, entry_date: str | None, user_id: str | None):
    """Reverse a posted journal entry with a mirrored entry."""
    db = ctx.obj["db"]
    try:
        reversal = JournalService(db).reverse_entry(
            entry_id,
            entry_date=parse_date(entry_date) if entry_date else None,
            user_id=user_id,
        )
        click.echo(f"Created reversal {reversal.number} (ID: {reversal.id})")
    except ValueError as e:
        handle_domain_error(ctx, e)


@journal_group.command("delete")
@click.argument("entry_id", type=int)
@click.pass_context
def delete_entry(ctx, entry_id: int):
    """Delete a draft journal entry."""
    db = ctx.obj["db"]
    try:
        JournalService(db).delete_entry(entry_id)
        click.echo(f"Deleted journal entry {entry_id}")
    except ValueError as e:
        handle_domain_error(ctx, e)


@journal_group.command("list")
@click.option("--period", help="Period name or ID")
@click.option("--start-date", help="Start date (YYYY-MM-DD or relative like 'this month')")
@click.option("--end-date", help="End date (YYYY-MM-DD or relative like 'today')")
@click.option(
    "--type", "reference_type",
    type=click.Choice([t.value for t in ReferenceType], case_sensitive=False),
    help="Only entries of this reference type",
)
@click.option("--search", help="Match number, description or reference")
@click.option("--lines", "show_lines", is_flag=True, help="Show entry lines")
@click.pass_context
def list_entries(
    ctx,
    period: str | None,
    start_date: str | None,
    end_date: str | None,
    reference_type: str | None,
    search: str | None,
    show_lines: bool,
):
    """List journal entries ordered by date."""
    db = ctx.obj["db"]
    journal_service = JournalService(db)
    account_service = AccountService(db)
    period_id = resolve_period_or_exit(ctx, PeriodService(db), period) if period else None

    try:
        entries = journal_service.list_entries(
            period_id=period_id,
            start_date=parse_date(start_date) if start_date else None,
            end_date=parse_date(end_date) if end_date else None,
            reference_type=ReferenceType(reference_type.upper()) if reference_type else None,
            search=search,
        )
    except ValueError as e:
        handle_domain_error(ctx, e)

    if not entries:
        click.echo("No journal entries found.")
        return

    for entry in entries:
        state = "" if entry.is_posted else " [draft]"
        click.echo(
            f"{entry.id:4d} | {entry.number:20s} | {entry.entry_date} | "
            f"{format_amount(entry.total_debit):>16s} | {entry.description}{state}"
        )
        if show_lines:
            for line in entry.lines:
                account = account_service.get_account(line.account_id)
                click.echo(
                    f"       {account.code:8s} {account.name:28s} "
                    f"{format_amount(line.debit):>16s} {format_amount(line.credit):>16s}"
                )


def register_commands(cli):
    """Register journal commands with main CLI."""
    cli.add_command(journal_group, name="journal")
