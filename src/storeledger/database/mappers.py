"""Mapper functions to convert between domain models and SQLAlchemy models.

This layer isolates the conversion logic, so enum values, money types and the
entry/line join stay out of the domain services.
"""

from decimal import Decimal
from typing import Optional

from storeledger.domain import entities as domain
from storeledger.database.models import (
    Account as ORMAccount,
    AccountingPeriod as ORMAccountingPeriod,
    JournalEntry as ORMJournalEntry,
    JournalLine as ORMJournalLine,
    OpeningBalance as ORMOpeningBalance,
)


def _money(value) -> Decimal:
    # SQLite hands back Decimals; other backends or raw rows may not
    return Decimal(str(value) if value is not None else "0").quantize(Decimal("0.01"))


def _reference_type(value: Optional[str]) -> Optional[domain.ReferenceType]:
    return domain.ReferenceType(value) if value is not None else None


def account_to_domain(orm_account: ORMAccount) -> domain.Account:
    """Convert SQLAlchemy Account model to domain Account entity."""
    return domain.Account(
        id=orm_account.id,
        code=orm_account.code,
        name=orm_account.name,
        account_type=domain.AccountType(orm_account.account_type),
        category=domain.AccountCategory(orm_account.category),
        parent_id=orm_account.parent_id,
        level=orm_account.level,
        is_active=orm_account.is_active,
        created_at=orm_account.created_at,
        description=orm_account.description,
    )


def period_to_domain(orm_period: ORMAccountingPeriod) -> domain.AccountingPeriod:
    """Convert SQLAlchemy AccountingPeriod model to domain entity."""
    return domain.AccountingPeriod(
        id=orm_period.id,
        name=orm_period.name,
        start_date=orm_period.start_date,
        end_date=orm_period.end_date,
        is_active=orm_period.is_active,
        is_closed=orm_period.is_closed,
        created_at=orm_period.created_at,
        closed_at=orm_period.closed_at,
    )


def journal_line_to_domain(orm_line: ORMJournalLine) -> domain.JournalLine:
    """Convert SQLAlchemy JournalLine model to domain JournalLine entity."""
    return domain.JournalLine(
        id=orm_line.id,
        entry_id=orm_line.entry_id,
        account_id=orm_line.account_id,
        debit=_money(orm_line.debit),
        credit=_money(orm_line.credit),
        description=orm_line.description,
    )


def journal_entry_to_domain(orm_entry: ORMJournalEntry) -> domain.JournalEntry:
    """Convert SQLAlchemy JournalEntry model (with lines) to domain entity."""
    return domain.JournalEntry(
        id=orm_entry.id,
        number=orm_entry.number,
        entry_date=orm_entry.entry_date,
        description=orm_entry.description,
        period_id=orm_entry.period_id,
        is_posted=orm_entry.is_posted,
        created_at=orm_entry.created_at,
        lines=tuple(journal_line_to_domain(line) for line in orm_entry.lines),
        reference=orm_entry.reference,
        reference_type=_reference_type(orm_entry.reference_type),
        source_id=orm_entry.source_id,
        reversal_of_id=orm_entry.reversal_of_id,
        user_id=orm_entry.user_id,
    )


def ledger_line_to_domain(
    orm_line: ORMJournalLine, orm_entry: ORMJournalEntry
) -> domain.LedgerLine:
    """Convert a joined line/entry row to a domain LedgerLine."""
    return domain.LedgerLine(
        line_id=orm_line.id,
        entry_id=orm_entry.id,
        entry_number=orm_entry.number,
        entry_date=orm_entry.entry_date,
        period_id=orm_entry.period_id,
        account_id=orm_line.account_id,
        debit=_money(orm_line.debit),
        credit=_money(orm_line.credit),
        description=orm_line.description,
        entry_description=orm_entry.description,
        reference=orm_entry.reference,
        reference_type=_reference_type(orm_entry.reference_type),
    )


def opening_balance_to_domain(orm_balance: ORMOpeningBalance) -> domain.OpeningBalance:
    """Convert SQLAlchemy OpeningBalance model to domain entity."""
    return domain.OpeningBalance(
        id=orm_balance.id,
        account_id=orm_balance.account_id,
        period_id=orm_balance.period_id,
        balance=_money(orm_balance.balance),
    )
