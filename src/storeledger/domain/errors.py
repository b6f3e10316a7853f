"""Shared domain error messages and error types."""

from decimal import Decimal
from typing import Sequence


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations."""


class DuplicateCodeError(ConflictError):
    """Account code already used by another account."""


class UnbalancedEntryError(DomainError):
    """Journal entry debit and credit totals differ beyond tolerance."""

    def __init__(self, total_debit: Decimal, total_credit: Decimal):
        self.total_debit = total_debit
        self.total_credit = total_credit
        super().__init__(
            f"Total debit must equal total credit (debit {total_debit}, credit {total_credit})"
        )


class ImmutableEntryError(DomainError):
    """Attempted mutation of a posted entry or an entry in a closed period."""


class AlreadyReversedError(ImmutableEntryError):
    """Journal entry has already been reversed."""


class PeriodClosedError(DomainError):
    """Attempted write against a closed accounting period."""


class AlreadyClosedError(DomainError):
    """Accounting period is already closed."""


class ConcurrentCloseError(DomainError):
    """Accounting period is being closed by another caller."""


class PeriodNotClosableError(ValidationError):
    """Pre-close checks failed."""

    def __init__(self, period_name: str, issues: Sequence[str]):
        self.issues = tuple(issues)
        super().__init__(
            f"Period '{period_name}' cannot be closed: {'; '.join(self.issues)}"
        )


def account_not_found(account_id: int) -> str:
    """Return message for missing account."""
    return f"Account {account_id} not found"


def account_code_not_found(code: str) -> str:
    """Return message for missing account by code."""
    return f"Account with code '{code}' not found"


def duplicate_account_code(code: str) -> str:
    """Return message for account code collision."""
    return f"Account with code '{code}' already exists"


def period_not_found(period_id: int) -> str:
    """Return message for missing accounting period."""
    return f"Accounting period {period_id} not found"


def entry_not_found(entry_id: int) -> str:
    """Return message for missing journal entry."""
    return f"Journal entry {entry_id} not found"


def period_closed(period_name: str) -> str:
    """Return message for writes against a closed period."""
    return f"Accounting period '{period_name}' is closed"


def no_active_period() -> str:
    """Return message when no accounting period is active."""
    return "No active accounting period"
