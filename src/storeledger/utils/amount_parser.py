"""Amount parsing utilities."""

from decimal import Decimal
import re

from storeledger.domain.money import to_money


def parse_amount(amount_str: str) -> Decimal:
    """Parse an amount string into a cent-quantized Decimal.

    Handles various formats:
    - "123.45"
    - "Rp 1,000,000"
    - "$123.45"
    - "-123.45"
    - "(123.45)" (negative in parentheses)

    Args:
        amount_str: Amount string

    Returns:
        Decimal amount rounded half-up to cents

    Raises:
        ValueError: If amount string cannot be parsed
    """
    if not amount_str or not amount_str.strip():
        raise ValueError("Empty amount string")

    amount_str = amount_str.strip()

    # Handle parentheses notation (negative)
    is_negative = False
    if amount_str.startswith("(") and amount_str.endswith(")"):
        is_negative = True
        amount_str = amount_str[1:-1]

    # Remove currency symbols and thousands separators
    amount_str = re.sub(r"(?i)^rp\.?|[$€£¥]", "", amount_str.strip())
    amount_str = amount_str.replace(",", "").replace("_", "").strip()

    try:
        amount = to_money(amount_str)
    except ValueError as e:
        raise ValueError(f"Could not parse amount '{amount_str}': {e}")
    return -amount if is_negative else amount


def parse_non_negative_amount(amount_str: str) -> Decimal:
    """Parse an amount that must not be negative (debit/credit columns)."""
    amount = parse_amount(amount_str)
    if amount < 0:
        raise ValueError(f"Amount must not be negative: '{amount_str}'")
    return amount
