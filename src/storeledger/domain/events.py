"""Posting rules that turn store events into journal entries.

Each ``record_*`` method books one balanced entry in the active period, tagged
with the event's reference type and ID so it can be found again with
``JournalService.find_by_source``. Every debit/credit pair is built from a
single amount, so the entries balance by construction.
"""

import logging
from datetime import date
from decimal import Decimal
from typing import Callable, Optional

from sqlalchemy.exc import SQLAlchemyError

from storeledger.database.base import Database
from storeledger.domain.chart import DEFAULT_ACCOUNT_CODES, AccountCodes
from storeledger.domain.entities import (
    ExpenseCategory,
    JournalEntry as JournalEntryEntity,
    JournalLineInput,
    PaymentMethod,
    PostingOutcome,
    ReferenceType,
    StockSource,
)
from storeledger.domain.errors import (
    DomainError,
    NotFoundError,
    ValidationError,
    account_code_not_found,
)
from storeledger.domain.journal import JournalService
from storeledger.domain.money import ZERO, Amount, to_money
from storeledger.domain.period import PeriodService

logger = logging.getLogger(__name__)


def _pair(
    debit_account_id: int,
    credit_account_id: int,
    amount: Decimal,
    description: Optional[str] = None,
) -> list[JournalLineInput]:
    """Debit one account and credit another by the same amount."""
    return [
        JournalLineInput(account_id=debit_account_id, debit=amount, description=description),
        JournalLineInput(account_id=credit_account_id, credit=amount, description=description),
    ]


class JournalEventService:
    """Service booking journal entries for inventory, cash and expense events."""

    def __init__(self, db: Database, codes: Optional[AccountCodes] = None):
        """Initialize event posting service.

        Args:
            db: Database instance
            codes: Account designations; the default store chart when omitted
        """
        self.db = db
        self.codes = codes or DEFAULT_ACCOUNT_CODES
        self.journal = JournalService(db)
        self.periods = PeriodService(db)

    # Stock
    def record_stock_addition(
        self,
        reference_id: str,
        amount: Amount,
        source: StockSource = StockSource.CASH,
        entry_date: Optional[date] = None,
        user_id: Optional[str] = None,
        description: Optional[str] = None,
    ) -> JournalEntryEntity:
        """Book incoming stock.

        Cash purchase: Dr Inventory / Cr Cash. Credit purchase: Dr Inventory /
        Cr Accounts Payable. Surplus found in a stock count: Dr Inventory /
        Cr Inventory Adjustment Gain.
        """
        value = self._positive(amount)
        source = StockSource(source)
        credit_code = {
            StockSource.CASH: self.codes.cash,
            StockSource.CREDIT: self.codes.accounts_payable,
            StockSource.SURPLUS: self.codes.inventory_gain,
        }[source]
        reference_type = (
            ReferenceType.ADJUSTMENT if source == StockSource.SURPLUS else ReferenceType.PURCHASE
        )
        return self._book(
            reference_type,
            reference_id,
            description or f"Stock addition {reference_id} ({source.value.lower()})",
            _pair(self._account_id(self.codes.inventory), self._account_id(credit_code), value),
            entry_date,
            user_id,
        )

    def record_stock_outflow(
        self,
        reference_id: str,
        amount: Amount,
        entry_date: Optional[date] = None,
        user_id: Optional[str] = None,
        description: Optional[str] = None,
    ) -> JournalEntryEntity:
        """Book stock leaving without a sale: Dr Inventory Adjustment Loss / Cr Inventory."""
        value = self._positive(amount)
        return self._book(
            ReferenceType.STOCK_OUT,
            reference_id,
            description or f"Stock outflow {reference_id}",
            _pair(
                self._account_id(self.codes.inventory_loss),
                self._account_id(self.codes.inventory),
                value,
            ),
            entry_date,
            user_id,
        )

    def record_stock_adjustment(
        self,
        reference_id: str,
        amount: Amount,
        is_increase: bool,
        entry_date: Optional[date] = None,
        user_id: Optional[str] = None,
        description: Optional[str] = None,
    ) -> JournalEntryEntity:
        """Book a stock count (opname) difference.

        Increase: Dr Inventory / Cr Inventory Adjustment Gain.
        Decrease: Dr Inventory Adjustment Loss / Cr Inventory.
        """
        value = self._positive(amount)
        inventory = self._account_id(self.codes.inventory)
        if is_increase:
            lines = _pair(inventory, self._account_id(self.codes.inventory_gain), value)
        else:
            lines = _pair(self._account_id(self.codes.inventory_loss), inventory, value)
        direction = "increase" if is_increase else "decrease"
        return self._book(
            ReferenceType.ADJUSTMENT,
            reference_id,
            description or f"Stock adjustment {reference_id} ({direction})",
            lines,
            entry_date,
            user_id,
        )

    # Expenses
    def record_expense(
        self,
        reference_id: str,
        amount: Amount,
        category: ExpenseCategory = ExpenseCategory.OTHER,
        payment_method: PaymentMethod = PaymentMethod.CASH,
        entry_date: Optional[date] = None,
        user_id: Optional[str] = None,
        description: Optional[str] = None,
    ) -> JournalEntryEntity:
        """Book a paid expense: Dr category expense account / Cr Cash or Bank."""
        value = self._positive(amount)
        category = ExpenseCategory(category)
        payment_method = PaymentMethod(payment_method)
        if payment_method == PaymentMethod.CREDIT:
            raise ValidationError("Expenses must be paid in cash or by bank transfer")
        return self._book(
            ReferenceType.EXPENSE,
            reference_id,
            description or f"Expense {reference_id} ({category.value.lower()})",
            _pair(
                self._account_id(self.codes.expense_code(category)),
                self._account_id(self._settlement_code(payment_method)),
                value,
            ),
            entry_date,
            user_id,
        )

    def amend_expense(
        self,
        reference_id: str,
        amount: Amount,
        category: ExpenseCategory = ExpenseCategory.OTHER,
        payment_method: PaymentMethod = PaymentMethod.CASH,
        entry_date: Optional[date] = None,
        user_id: Optional[str] = None,
        description: Optional[str] = None,
    ) -> JournalEntryEntity:
        """Correct a booked expense: reverse its current entry and book the new amount.

        Both steps commit together. When the expense has no entry yet, only the
        new entry is booked.
        """
        with self.db.transaction():
            current = self._current_entry(ReferenceType.EXPENSE, reference_id)
            if current is not None:
                self.journal.reverse_entry(current.id, entry_date=entry_date, user_id=user_id)
            else:
                logger.info("Expense %s has no journal entry to reverse", reference_id)
            return self.record_expense(
                reference_id,
                amount,
                category=category,
                payment_method=payment_method,
                entry_date=entry_date,
                user_id=user_id,
                description=description,
            )

    def cancel_expense(
        self,
        reference_id: str,
        entry_date: Optional[date] = None,
        user_id: Optional[str] = None,
    ) -> JournalEntryEntity:
        """Reverse the current entry of a deleted expense.

        Raises:
            NotFoundError: If the expense has no unreversed entry
        """
        current = self._current_entry(ReferenceType.EXPENSE, reference_id)
        if current is None:
            raise NotFoundError(f"No journal entry found for expense {reference_id}")
        return self.journal.reverse_entry(current.id, entry_date=entry_date, user_id=user_id)

    # Returns and sales
    def record_purchase_return(
        self,
        reference_id: str,
        amount: Amount,
        was_cash: bool,
        entry_date: Optional[date] = None,
        user_id: Optional[str] = None,
        description: Optional[str] = None,
    ) -> JournalEntryEntity:
        """Book goods returned to a supplier.

        Bought for cash: Dr Cash / Cr Inventory. Bought on credit:
        Dr Accounts Payable / Cr Inventory.
        """
        value = self._positive(amount)
        debit_code = self.codes.cash if was_cash else self.codes.accounts_payable
        return self._book(
            ReferenceType.PURCHASE_RETURN,
            reference_id,
            description or f"Purchase return {reference_id}",
            _pair(self._account_id(debit_code), self._account_id(self.codes.inventory), value),
            entry_date,
            user_id,
        )

    def record_sales_return(
        self,
        reference_id: str,
        revenue_amount: Amount,
        cost_amount: Amount = ZERO,
        payment_method: PaymentMethod = PaymentMethod.CASH,
        entry_date: Optional[date] = None,
        user_id: Optional[str] = None,
        description: Optional[str] = None,
    ) -> JournalEntryEntity:
        """Book goods returned by a customer.

        Dr Sales Revenue / Cr Cash, Bank or Receivable by the refunded amount,
        and Dr Inventory / Cr COGS by the cost of the returned goods.
        """
        revenue = self._positive(revenue_amount)
        cost = self._non_negative(cost_amount)
        settlement = self._account_id(self._settlement_code(PaymentMethod(payment_method)))
        lines = _pair(self._account_id(self.codes.sales_revenue), settlement, revenue)
        if cost > ZERO:
            lines += _pair(
                self._account_id(self.codes.inventory),
                self._account_id(self.codes.cost_of_goods_sold),
                cost,
            )
        return self._book(
            ReferenceType.SALES_RETURN,
            reference_id,
            description or f"Sales return {reference_id}",
            lines,
            entry_date,
            user_id,
        )

    def record_sale(
        self,
        reference_id: str,
        revenue_amount: Amount,
        cost_amount: Amount = ZERO,
        payment_method: PaymentMethod = PaymentMethod.CASH,
        entry_date: Optional[date] = None,
        user_id: Optional[str] = None,
        description: Optional[str] = None,
    ) -> JournalEntryEntity:
        """Book a sale.

        Dr Cash, Bank or Receivable / Cr Sales Revenue by the sale amount, and
        Dr COGS / Cr Inventory by the cost of the goods sold.
        """
        revenue = self._positive(revenue_amount)
        cost = self._non_negative(cost_amount)
        settlement = self._account_id(self._settlement_code(PaymentMethod(payment_method)))
        lines = _pair(settlement, self._account_id(self.codes.sales_revenue), revenue)
        if cost > ZERO:
            lines += _pair(
                self._account_id(self.codes.cost_of_goods_sold),
                self._account_id(self.codes.inventory),
                cost,
            )
        return self._book(
            ReferenceType.SALE,
            reference_id,
            description or f"Sale {reference_id}",
            lines,
            entry_date,
            user_id,
        )

    def record_initial_capital(
        self,
        reference_id: str,
        amount: Amount,
        entry_date: Optional[date] = None,
        user_id: Optional[str] = None,
        description: Optional[str] = None,
    ) -> JournalEntryEntity:
        """Book opening stock contributed by the owner: Dr Inventory / Cr Owner Equity.

        Recording the same reference twice returns the existing entry.
        """
        existing = self._current_entry(ReferenceType.INITIAL_CAPITAL, reference_id)
        if existing is not None:
            logger.info("Initial capital %s already booked as %s", reference_id, existing.number)
            return existing
        value = self._positive(amount)
        return self._book(
            ReferenceType.INITIAL_CAPITAL,
            reference_id,
            description or "Initial capital from opening stock",
            _pair(
                self._account_id(self.codes.inventory),
                self._account_id(self.codes.owner_equity),
                value,
            ),
            entry_date,
            user_id,
        )

    def best_effort(
        self, record: Callable[..., JournalEntryEntity], *args, **kwargs
    ) -> PostingOutcome:
        """Run a ``record_*`` call whose failure must not undo the calling event.

        The event itself is committed by the caller first. Domain and storage
        errors are logged and returned in the outcome instead of raised.

        Example:
            outcome = events.best_effort(events.record_stock_addition, "IN-42", 1500)
            if not outcome.ok:
                flash(f"Stock saved, journal failed: {outcome.error}")
        """
        try:
            entry = record(*args, **kwargs)
        except (DomainError, SQLAlchemyError) as e:
            logger.warning(
                "Journal posting %s failed: %s",
                getattr(record, "__name__", record),
                e,
                exc_info=True,
            )
            return PostingOutcome(error=e)
        return PostingOutcome(entry=entry)

    def _book(
        self,
        reference_type: ReferenceType,
        reference_id: str,
        description: str,
        lines: list[JournalLineInput],
        entry_date: Optional[date],
        user_id: Optional[str],
    ) -> JournalEntryEntity:
        if reference_id is None or not str(reference_id).strip():
            raise ValidationError("Event reference ID is required")
        period = self.periods.require_active_period()
        return self.journal.create_entry(
            entry_date=entry_date or date.today(),
            description=description,
            period_id=period.id,
            lines=lines,
            reference=f"{reference_type.value}-{reference_id}",
            reference_type=reference_type,
            source_id=str(reference_id),
            user_id=user_id,
        )

    def _current_entry(
        self, reference_type: ReferenceType, reference_id: str
    ) -> Optional[JournalEntryEntity]:
        """Latest entry of an event that has not been reversed."""
        for entry in reversed(self.journal.find_by_source(reference_type, str(reference_id))):
            if self.journal.get_reversal(entry.id) is None:
                return entry
        return None

    def _account_id(self, code: str) -> int:
        account = self.db.get_account_by_code(code)
        if account is None:
            raise NotFoundError(account_code_not_found(code))
        return account.id

    def _settlement_code(self, payment_method: PaymentMethod) -> str:
        return {
            PaymentMethod.CASH: self.codes.cash,
            PaymentMethod.BANK: self.codes.bank,
            PaymentMethod.CREDIT: self.codes.accounts_receivable,
        }[payment_method]

    @staticmethod
    def _positive(amount: Amount) -> Decimal:
        value = JournalEventService._non_negative(amount)
        if value == ZERO:
            raise ValidationError("Amount must be greater than zero")
        return value

    @staticmethod
    def _non_negative(amount: Amount) -> Decimal:
        try:
            value = to_money(amount)
        except ValueError as e:
            raise ValidationError(str(e)) from e
        if value < ZERO:
            raise ValidationError(f"Amount must not be negative: {value}")
        return value
