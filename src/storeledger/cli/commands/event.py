"""Commands booking store events into the journal."""

import click
from storeledger.cli.error_handling import handle_domain_error
from storeledger.cli.formatting import format_amount
from storeledger.domain.entities import ExpenseCategory, PaymentMethod, StockSource
from storeledger.domain.events import JournalEventService
from storeledger.utils.amount_parser import parse_amount
from storeledger.utils.date_parser import parse_date

date_option = click.option("--date", "entry_date", help="Event date (default: today)")
user_option = click.option("--user", "user_id", help="Acting user")
payment_option = click.option(
    "--payment",
    type=click.Choice([m.value for m in PaymentMethod], case_sensitive=False),
    default=PaymentMethod.CASH.value,
    show_default=True,
    help="Settlement channel",
)


def _book(ctx, record, *args, entry_date: str | None = None, **kwargs) -> None:
    try:
        entry = record(
            *args,
            entry_date=parse_date(entry_date) if entry_date else None,
            **kwargs,
        )
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(
        f"Booked {entry.number}: {entry.description} ({format_amount(entry.total_debit)})"
    )


@click.group()
def event_group():
    """Book store events (stock, expenses, sales, returns) into the journal."""
    pass


@event_group.command("stock-in")
@click.argument("reference_id")
@click.argument("amount")
@click.option(
    "--source",
    type=click.Choice([s.value for s in StockSource], case_sensitive=False),
    default=StockSource.CASH.value,
    show_default=True,
    help="How the stock was paid for",
)
@date_option
@user_option
@click.pass_context
def stock_in(ctx, reference_id: str, amount: str, source: str, entry_date, user_id):
    """Book incoming stock worth AMOUNT."""
    service = JournalEventService(ctx.obj["db"])
    try:
        value = parse_amount(amount)
    except ValueError as e:
        handle_domain_error(ctx, e)
    _book(
        ctx, service.record_stock_addition, reference_id, value,
        source=StockSource(source.upper()), entry_date=entry_date, user_id=user_id,
    )


@event_group.command("stock-out")
@click.argument("reference_id")
@click.argument("amount")
@date_option
@user_option
@click.pass_context
def stock_out(ctx, reference_id: str, amount: str, entry_date, user_id):
    """Book stock leaving without a sale."""
    service = JournalEventService(ctx.obj["db"])
    try:
        value = parse_amount(amount)
    except ValueError as e:
        handle_domain_error(ctx, e)
    _book(ctx, service.record_stock_outflow, reference_id, value, entry_date=entry_date, user_id=user_id)


@event_group.command("adjustment")
@click.argument("reference_id")
@click.argument("amount")
@click.option("--decrease", is_flag=True, help="Stock count found less than recorded")
@date_option
@user_option
@click.pass_context
def adjustment(ctx, reference_id: str, amount: str, decrease: bool, entry_date, user_id):
    """Book a stock count (opname) difference."""
    service = JournalEventService(ctx.obj["db"])
    try:
        value = parse_amount(amount)
    except ValueError as e:
        handle_domain_error(ctx, e)
    _book(
        ctx, service.record_stock_adjustment, reference_id, value,
        is_increase=not decrease, entry_date=entry_date, user_id=user_id,
    )


@event_group.command("expense")
@click.argument("reference_id")
@click.argument("amount")
@click.option(
    "--category",
    type=click.Choice([c.value for c in ExpenseCategory], case_sensitive=False),
    default=ExpenseCategory.OTHER.value,
    show_default=True,
)
@payment_option
@click.option("--amend", is_flag=True, help="Replace the expense booked under REFERENCE_ID")
@date_option
@user_option
@click.pass_context
def expense(
    ctx, reference_id: str, amount: str, category: str, payment: str, amend: bool, entry_date, user_id
):
    """Book a paid expense, or correct one with --amend."""
    service = JournalEventService(ctx.obj["db"])
    try:
        value = parse_amount(amount)
    except ValueError as e:
        handle_domain_error(ctx, e)
    record = service.amend_expense if amend else service.record_expense
    _book(
        ctx, record, reference_id, value,
        category=ExpenseCategory(category.upper()),
        payment_method=PaymentMethod(payment.upper()),
        entry_date=entry_date, user_id=user_id,
    )


@event_group.command("cancel-expense")
@click.argument("reference_id")
@date_option
@user_option
@click.pass_context
def cancel_expense(ctx, reference_id: str, entry_date, user_id):
    """Reverse the entry of a deleted expense."""
    service = JournalEventService(ctx.obj["db"])
    _book(ctx, service.cancel_expense, reference_id, entry_date=entry_date, user_id=user_id)


@event_group.command("sale")
@click.argument("reference_id")
@click.argument("amount")
@click.option("--cost", default="0", help="Cost of the goods sold")
@payment_option
@click.option("--return", "is_return", is_flag=True, help="Book a customer return instead")
@date_option
@user_option
@click.pass_context
def sale(ctx, reference_id: str, amount: str, cost: str, payment: str, is_return: bool, entry_date, user_id):
    """Book a sale (or a customer return) of AMOUNT."""
    service = JournalEventService(ctx.obj["db"])
    try:
        revenue, cost_value = parse_amount(amount), parse_amount(cost)
    except ValueError as e:
        handle_domain_error(ctx, e)
    record = service.record_sales_return if is_return else service.record_sale
    _book(
        ctx, record, reference_id, revenue, cost_value,
        payment_method=PaymentMethod(payment.upper()),
        entry_date=entry_date, user_id=user_id,
    )


@event_group.command("purchase-return")
@click.argument("reference_id")
@click.argument("amount")
@click.option("--credit", "on_credit", is_flag=True, help="The goods were bought on credit")
@date_option
@user_option
@click.pass_context
def purchase_return(ctx, reference_id: str, amount: str, on_credit: bool, entry_date, user_id):
    """Book goods returned to a supplier."""
    service = JournalEventService(ctx.obj["db"])
    try:
        value = parse_amount(amount)
    except ValueError as e:
        handle_domain_error(ctx, e)
    _book(
        ctx, service.record_purchase_return, reference_id, value,
        was_cash=not on_credit, entry_date=entry_date, user_id=user_id,
    )


@event_group.command("initial-capital")
@click.argument("reference_id")
@click.argument("amount")
@date_option
@user_option
@click.pass_context
def initial_capital(ctx, reference_id: str, amount: str, entry_date, user_id):
    """Book opening stock contributed by the owner."""
    service = JournalEventService(ctx.obj["db"])
    try:
        value = parse_amount(amount)
    except ValueError as e:
        handle_domain_error(ctx, e)
    _book(ctx, service.record_initial_capital, reference_id, value, entry_date=entry_date, user_id=user_id)


def register_commands(cli):
    """Register event commands with main CLI."""
    cli.add_command(event_group, name="event")
