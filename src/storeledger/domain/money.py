"""Fixed-point money helpers.

All amounts are ``Decimal`` quantized to cents. ``EPSILON`` is only needed when
comparing against data that was entered with binary floating point.
"""

from decimal import Decimal, ROUND_HALF_UP, InvalidOperation
from typing import Iterable, Union

CENTS = Decimal("0.01")
ZERO = Decimal("0.00")
EPSILON = Decimal("0.01")

Amount = Union[Decimal, int, str, float]


def to_money(value: Amount) -> Decimal:
    """Convert a value to a cent-quantized Decimal.

    Floats go through ``str`` so that 0.1 becomes Decimal("0.10") rather than
    its binary expansion.

    Raises:
        ValueError: If the value is not a finite number
    """
    if isinstance(value, float):
        value = str(value)
    try:
        amount = Decimal(value)
    except (InvalidOperation, TypeError) as e:
        raise ValueError(f"Invalid amount '{value}'") from e
    if not amount.is_finite():
        raise ValueError(f"Invalid amount '{value}'")
    return amount.quantize(CENTS, rounding=ROUND_HALF_UP)


def total(amounts: Iterable[Decimal]) -> Decimal:
    """Sum amounts starting from a Decimal zero."""
    return sum(amounts, ZERO)


def is_zero(amount: Decimal) -> bool:
    """Return True if the amount is within EPSILON of zero."""
    return abs(amount) < EPSILON


def amounts_equal(left: Decimal, right: Decimal) -> bool:
    """Return True if two amounts differ by no more than EPSILON."""
    return abs(left - right) <= EPSILON
