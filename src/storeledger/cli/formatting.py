"""Output formatting helpers for CLI commands."""

from decimal import Decimal

from storeledger.domain.entities import PresentedBalance


def format_amount(amount: Decimal) -> str:
    """Format an amount with thousands separators and two decimals."""
    return f"{amount:,.2f}"


def format_presented(presented: PresentedBalance) -> str:
    """Format a presented balance as "<amount> Dr" or "<amount> Cr"."""
    suffix = "Dr" if presented.side.value == "DEBIT" else "Cr"
    return f"{format_amount(presented.amount)} {suffix}"
