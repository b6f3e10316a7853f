"""Domain model entities for storeledger.

These are pure data classes representing bookkeeping concepts, independent of
the database schema. Services and reports exchange only these types, never ORM
rows, so callers outside the ledger core receive plain data.
"""

from dataclasses import dataclass, field
from datetime import datetime, date
from decimal import Decimal
from enum import Enum
from typing import Optional


class AccountType(str, Enum):
    """Top-level chart-of-accounts classification."""

    ASSET = "ASSET"
    LIABILITY = "LIABILITY"
    EQUITY = "EQUITY"
    REVENUE = "REVENUE"
    EXPENSE = "EXPENSE"


class NormalBalance(str, Enum):
    """Side on which an account's balance increases."""

    DEBIT = "DEBIT"
    CREDIT = "CREDIT"


class AccountCategory(str, Enum):
    """Sub-classification of an account within its type."""

    CURRENT_ASSET = "CURRENT_ASSET"
    FIXED_ASSET = "FIXED_ASSET"
    CURRENT_LIABILITY = "CURRENT_LIABILITY"
    LONG_TERM_LIABILITY = "LONG_TERM_LIABILITY"
    OWNER_EQUITY = "OWNER_EQUITY"
    RETAINED_EARNINGS = "RETAINED_EARNINGS"
    OPERATING_REVENUE = "OPERATING_REVENUE"
    OTHER_REVENUE = "OTHER_REVENUE"
    COST_OF_SALES = "COST_OF_SALES"
    OPERATING_EXPENSE = "OPERATING_EXPENSE"
    OTHER_EXPENSE = "OTHER_EXPENSE"


class ReferenceType(str, Enum):
    """Kind of source event a journal entry was generated from.

    Together with ``JournalEntry.source_id`` this forms the correlation key used
    to find the entry for a given event.
    """

    MANUAL = "MANUAL"
    PURCHASE = "PURCHASE"
    STOCK_OUT = "STOCK_OUT"
    ADJUSTMENT = "ADJUSTMENT"
    EXPENSE = "EXPENSE"
    PURCHASE_RETURN = "PURCHASE_RETURN"
    SALE = "SALE"
    SALES_RETURN = "SALES_RETURN"
    INITIAL_CAPITAL = "INITIAL_CAPITAL"
    REVERSAL = "REVERSAL"
    PERIOD_CLOSING = "PERIOD_CLOSING"


class StockSource(str, Enum):
    """How incoming stock was paid for."""

    CASH = "CASH"
    CREDIT = "CREDIT"
    SURPLUS = "SURPLUS"


class PaymentMethod(str, Enum):
    """Settlement channel of a sale, return or expense."""

    CASH = "CASH"
    BANK = "BANK"
    CREDIT = "CREDIT"


class ExpenseCategory(str, Enum):
    """Operating expense categories mapped to expense accounts."""

    SALARY = "SALARY"
    UTILITIES = "UTILITIES"
    RENT = "RENT"
    OFFICE_SUPPLIES = "OFFICE_SUPPLIES"
    TRANSPORTATION = "TRANSPORTATION"
    REPAIRS = "REPAIRS"
    ADVERTISING = "ADVERTISING"
    TAXES = "TAXES"
    INSURANCE = "INSURANCE"
    OTHER = "OTHER"


@dataclass(frozen=True)
class Account:
    """Chart-of-accounts node."""

    id: int
    code: str
    name: str
    account_type: AccountType
    category: AccountCategory
    parent_id: Optional[int]
    level: int
    is_active: bool
    created_at: datetime
    description: Optional[str] = None


@dataclass(frozen=True)
class AccountingPeriod:
    """Date range bookkeeping is organized into."""

    id: int
    name: str
    start_date: date
    end_date: date
    is_active: bool
    is_closed: bool
    created_at: datetime
    closed_at: Optional[datetime] = None

    def contains(self, day: date) -> bool:
        """Return True if ``day`` falls inside the period (inclusive)."""
        return self.start_date <= day <= self.end_date


@dataclass(frozen=True)
class JournalLineInput:
    """One requested debit or credit line of a new journal entry."""

    account_id: int
    debit: Decimal = Decimal("0.00")
    credit: Decimal = Decimal("0.00")
    description: Optional[str] = None


@dataclass(frozen=True)
class JournalLine:
    """Persisted journal detail line."""

    id: int
    entry_id: int
    account_id: int
    debit: Decimal
    credit: Decimal
    description: Optional[str]


@dataclass(frozen=True)
class JournalEntry:
    """Balanced accounting transaction with its lines."""

    id: int
    number: str
    entry_date: date
    description: str
    period_id: int
    is_posted: bool
    created_at: datetime
    lines: tuple[JournalLine, ...] = ()
    reference: Optional[str] = None
    reference_type: Optional[ReferenceType] = None
    source_id: Optional[str] = None
    reversal_of_id: Optional[int] = None
    user_id: Optional[str] = None

    @property
    def total_debit(self) -> Decimal:
        return sum((line.debit for line in self.lines), Decimal("0.00"))

    @property
    def total_credit(self) -> Decimal:
        return sum((line.credit for line in self.lines), Decimal("0.00"))


@dataclass(frozen=True)
class OpeningBalance:
    """Carried-forward balance of one account at the start of one period.

    The amount is signed on the account's normal side: a positive value on a
    credit-normal account is a credit balance.
    """

    id: int
    account_id: int
    period_id: int
    balance: Decimal


@dataclass(frozen=True)
class LedgerLine:
    """Journal line joined with the entry fields needed for aggregation."""

    line_id: int
    entry_id: int
    entry_number: str
    entry_date: date
    period_id: int
    account_id: int
    debit: Decimal
    credit: Decimal
    description: Optional[str]
    entry_description: str
    reference: Optional[str]
    reference_type: Optional[ReferenceType]


@dataclass(frozen=True)
class PresentedBalance:
    """Balance converted for display: an unsigned amount on a side."""

    side: NormalBalance
    amount: Decimal


@dataclass(frozen=True)
class TrialBalanceRow:
    """Trial balance line for one account."""

    account: Account
    opening: Decimal
    debit: Decimal
    credit: Decimal
    ending: Decimal
    presented: PresentedBalance


@dataclass(frozen=True)
class TrialBalance:
    """Trial balance for a period (or for all time when period is None)."""

    period: Optional[AccountingPeriod]
    rows: tuple[TrialBalanceRow, ...]
    total_debit_column: Decimal
    total_credit_column: Decimal
    total_debit_mutation: Decimal
    total_credit_mutation: Decimal
    is_balanced: bool


@dataclass(frozen=True)
class RunningLedgerRow:
    """General ledger line with the balance after it."""

    entry_id: int
    entry_number: str
    entry_date: date
    description: str
    reference: Optional[str]
    debit: Decimal
    credit: Decimal
    amount: Decimal
    running_balance: Decimal


@dataclass(frozen=True)
class RunningLedger:
    """General ledger for one account."""

    account: Account
    opening_balance: Decimal
    rows: tuple[RunningLedgerRow, ...]
    closing_balance: Decimal
    total_debit: Decimal
    total_credit: Decimal


@dataclass(frozen=True)
class StatementLine:
    """Account and its balance inside a financial statement section."""

    account: Account
    balance: Decimal


@dataclass(frozen=True)
class StatementSection:
    """Titled group of statement lines."""

    title: str
    lines: tuple[StatementLine, ...]
    total: Decimal


@dataclass(frozen=True)
class IncomeStatement:
    """Revenue and expense result of a period."""

    period: AccountingPeriod
    revenue: StatementSection
    expenses: StatementSection
    net_income: Decimal


@dataclass(frozen=True)
class BalanceSheet:
    """Assets against liabilities and equity at a point in time."""

    period: Optional[AccountingPeriod]
    as_of: Optional[date]
    assets: StatementSection
    liabilities: StatementSection
    equity: StatementSection
    current_earnings: Decimal
    total_assets: Decimal
    total_liabilities_equity: Decimal
    is_balanced: bool


@dataclass(frozen=True)
class ClosingSummary:
    """Figures gathered while checking whether a period can be closed."""

    total_entries: int
    unposted_entries: int
    unbalanced_entries: int
    total_revenue: Decimal
    total_expense: Decimal
    net_income: Decimal
    retained_earnings_account: Optional[Account]
    successor_period: Optional[AccountingPeriod]


@dataclass(frozen=True)
class ClosingValidation:
    """Outcome of the pre-close checks."""

    period: AccountingPeriod
    issues: tuple[str, ...]
    summary: ClosingSummary

    @property
    def is_valid(self) -> bool:
        return not self.issues


@dataclass(frozen=True)
class ClosingResult:
    """Result of closing a period."""

    period: AccountingPeriod
    closing_entries: tuple[JournalEntry, ...]
    opening_balances: tuple[OpeningBalance, ...]
    net_income: Decimal
    closed_at: Optional[datetime]


@dataclass(frozen=True)
class PostingOutcome:
    """Result of a best-effort journal posting for a domain event."""

    entry: Optional[JournalEntry] = None
    error: Optional[Exception] = field(default=None, compare=False)

    @property
    def ok(self) -> bool:
        return self.error is None
