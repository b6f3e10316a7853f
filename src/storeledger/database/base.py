"""Abstract database interface."""

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from datetime import date, datetime
from decimal import Decimal
from typing import Optional, Sequence

# Import entities directly to avoid circular import through domain/__init__.py
from storeledger.domain.entities import (
    Account,
    AccountCategory,
    AccountingPeriod,
    AccountType,
    JournalEntry,
    JournalLineInput,
    LedgerLine,
    OpeningBalance,
    ReferenceType,
)


class Database(ABC):
    """Abstract database interface for storeledger."""

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    @abstractmethod
    def transaction(self) -> AbstractContextManager[None]:
        """Group writes into one atomic unit.

        Writes inside the block are committed together when it exits normally
        and rolled back together when it raises. Nested blocks join the
        outermost one.
        """
        pass

    @abstractmethod
    def in_transaction(self) -> bool:
        """Return True inside a ``transaction()`` block."""
        pass

    # Account operations
    @abstractmethod
    def create_account(
        self,
        code: str,
        name: str,
        account_type: AccountType,
        category: AccountCategory,
        parent_id: Optional[int] = None,
        level: int = 1,
        description: Optional[str] = None,
    ) -> int:
        """Create an account. Returns account ID."""
        pass

    @abstractmethod
    def get_account(self, account_id: int) -> Optional[Account]:
        """Get account by ID."""
        pass

    @abstractmethod
    def get_account_by_code(self, code: str) -> Optional[Account]:
        """Get account by code, active or not."""
        pass

    @abstractmethod
    def list_accounts(
        self,
        account_type: Optional[AccountType] = None,
        include_inactive: bool = False,
        search: Optional[str] = None,
    ) -> list[Account]:
        """List accounts ordered by code."""
        pass

    @abstractmethod
    def update_account(
        self,
        account_id: int,
        code: Optional[str] = None,
        name: Optional[str] = None,
        category: Optional[AccountCategory] = None,
        parent_id: Optional[int] = None,
        level: Optional[int] = None,
        description: Optional[str] = None,
        is_active: Optional[bool] = None,
        update_parent: bool = False,
    ) -> None:
        """Update account fields.

        Args:
            update_parent: If True, set parent_id even when it is None (to detach)
        """
        pass

    @abstractmethod
    def list_child_accounts(self, parent_id: int) -> list[Account]:
        """List direct children of an account."""
        pass

    @abstractmethod
    def get_account_line_count(self, account_id: int) -> int:
        """Count journal lines referencing an account."""
        pass

    # Accounting period operations
    @abstractmethod
    def create_period(
        self, name: str, start_date: date, end_date: date, is_active: bool = False
    ) -> int:
        """Create an accounting period. Returns period ID."""
        pass

    @abstractmethod
    def get_period(self, period_id: int) -> Optional[AccountingPeriod]:
        """Get accounting period by ID."""
        pass

    @abstractmethod
    def list_periods(
        self, is_active: Optional[bool] = None, is_closed: Optional[bool] = None
    ) -> list[AccountingPeriod]:
        """List periods, newest start date first."""
        pass

    @abstractmethod
    def get_active_period(self) -> Optional[AccountingPeriod]:
        """Get the active period, if any."""
        pass

    @abstractmethod
    def find_overlapping_active_period(
        self, start_date: date, end_date: date, exclude_id: Optional[int] = None
    ) -> Optional[AccountingPeriod]:
        """Find an active period whose range intersects [start_date, end_date]."""
        pass

    @abstractmethod
    def set_period_active(self, period_id: int, is_active: bool) -> None:
        """Set a period's active flag."""
        pass

    @abstractmethod
    def deactivate_periods(self, exclude_id: Optional[int] = None) -> None:
        """Clear the active flag of every period except ``exclude_id``."""
        pass

    @abstractmethod
    def find_successor_period(
        self, after: date, include_closed: bool = False
    ) -> Optional[AccountingPeriod]:
        """Earliest period starting after ``after``, open ones only unless ``include_closed``."""
        pass

    @abstractmethod
    def claim_period_close(self, period_id: int, token: str) -> bool:
        """Atomically mark an open, unclaimed period as being closed.

        Returns False when the period is closed or already claimed.
        """
        pass

    @abstractmethod
    def mark_period_closed(self, period_id: int, closed_at: datetime) -> None:
        """Mark a period closed and inactive and release its closing claim."""
        pass

    # Opening balance operations
    @abstractmethod
    def upsert_opening_balance(
        self, account_id: int, period_id: int, balance: Decimal
    ) -> int:
        """Create or replace the opening balance of an account in a period."""
        pass

    @abstractmethod
    def get_opening_balance(
        self, account_id: int, period_id: int
    ) -> Optional[OpeningBalance]:
        """Get the opening balance of an account in a period."""
        pass

    @abstractmethod
    def list_opening_balances(self, period_id: int) -> list[OpeningBalance]:
        """List opening balances of a period."""
        pass

    @abstractmethod
    def delete_opening_balance(self, account_id: int, period_id: int) -> None:
        """Delete the opening balance of an account in a period."""
        pass

    @abstractmethod
    def clear_opening_balances(self, period_id: int) -> int:
        """Delete every opening balance of a period. Returns the number deleted."""
        pass

    # Journal operations
    @abstractmethod
    def next_entry_number(self, prefix: str, on_date: date) -> str:
        """Return the next free entry number for a prefix and day."""
        pass

    @abstractmethod
    def create_journal_entry(
        self,
        number: str,
        entry_date: date,
        description: str,
        period_id: int,
        lines: Sequence[JournalLineInput],
        reference: Optional[str] = None,
        reference_type: Optional[ReferenceType] = None,
        source_id: Optional[str] = None,
        reversal_of_id: Optional[int] = None,
        user_id: Optional[str] = None,
        is_posted: bool = True,
    ) -> int:
        """Create a journal entry with all its lines. Returns entry ID."""
        pass

    @abstractmethod
    def get_journal_entry(self, entry_id: int) -> Optional[JournalEntry]:
        """Get journal entry with lines by ID."""
        pass

    @abstractmethod
    def list_journal_entries(
        self,
        period_id: Optional[int] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        reference_type: Optional[ReferenceType] = None,
        is_posted: Optional[bool] = None,
        search: Optional[str] = None,
    ) -> list[JournalEntry]:
        """List journal entries in posting order (date, then creation)."""
        pass

    @abstractmethod
    def find_entries_by_source(
        self, reference_type: ReferenceType, source_id: str
    ) -> list[JournalEntry]:
        """List entries generated from one source event, oldest first."""
        pass

    @abstractmethod
    def get_reversal_of(self, entry_id: int) -> Optional[JournalEntry]:
        """Get the entry that reverses ``entry_id``, if any."""
        pass

    @abstractmethod
    def set_entry_posted(self, entry_id: int) -> None:
        """Mark an entry posted."""
        pass

    @abstractmethod
    def delete_journal_entry(self, entry_id: int) -> None:
        """Delete an entry and its lines."""
        pass

    @abstractmethod
    def list_ledger_lines(
        self,
        account_id: Optional[int] = None,
        period_id: Optional[int] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        posted_only: bool = True,
        exclude_reference_type: Optional[ReferenceType] = None,
    ) -> list[LedgerLine]:
        """List journal lines joined with their entries.

        Ordered by entry date, then entry creation order, then line order.
        """
        pass
