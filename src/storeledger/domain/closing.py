"""Period Closing Procedure domain service."""

import logging
import uuid
from datetime import datetime, UTC
from decimal import Decimal
from typing import Optional

from storeledger.database.base import Database
from storeledger.domain.balance import BalanceService
from storeledger.domain.chart import DEFAULT_ACCOUNT_CODES, AccountCodes
from storeledger.domain.entities import (
    Account,
    AccountingPeriod,
    AccountType,
    ClosingResult,
    ClosingSummary,
    ClosingValidation,
    JournalEntry,
    JournalLineInput,
    OpeningBalance,
    ReferenceType,
)
from storeledger.domain.errors import (
    AlreadyClosedError,
    ConcurrentCloseError,
    PeriodNotClosableError,
    period_closed,
)
from storeledger.domain.journal import CLOSING_PREFIX, JournalService
from storeledger.domain.money import ZERO, amounts_equal, is_zero, total
from storeledger.domain.period import PeriodService

logger = logging.getLogger(__name__)


class PeriodClosingService:
    """Service closing accounting periods into retained earnings.

    Closing moves through ``OPEN -> CLOSED`` once. The closing entries, the
    carried-forward opening balances and the closed flag are written in one
    database transaction.
    """

    def __init__(self, db: Database, codes: Optional[AccountCodes] = None):
        """Initialize closing service.

        Args:
            db: Database instance
            codes: Account designations; the retained earnings code is taken from it
        """
        self.db = db
        self.codes = codes or DEFAULT_ACCOUNT_CODES
        self.periods = PeriodService(db)
        self.journal = JournalService(db)
        self.balances = BalanceService(db)

    def validate_closable(self, period_id: int) -> ClosingValidation:
        """Run the pre-close checks for a period.

        Raises:
            NotFoundError: If the period does not exist
        """
        period = self.periods.require_period(period_id)
        issues = []
        if period.is_closed:
            issues.append(period_closed(period.name))

        entries = self.journal.list_entries(period_id=period.id)
        unposted = [entry for entry in entries if not entry.is_posted]
        unbalanced = [
            entry for entry in entries if not amounts_equal(entry.total_debit, entry.total_credit)
        ]
        if unposted:
            issues.append(f"{len(unposted)} journal entries are not posted")
        if unbalanced:
            numbers = ", ".join(entry.number for entry in unbalanced)
            issues.append(f"Unbalanced journal entries: {numbers}")

        retained = self.db.get_account_by_code(self.codes.retained_earnings)
        if retained is None:
            issues.append(
                f"Retained earnings account '{self.codes.retained_earnings}' does not exist"
            )
        elif not retained.is_active:
            issues.append(f"Retained earnings account '{retained.code}' is inactive")
        elif retained.account_type != AccountType.EQUITY:
            issues.append(f"Retained earnings account '{retained.code}' is not an equity account")

        successor = self.periods.find_successor(period)
        if successor is None:
            issues.append("No following accounting period to carry balances into")

        statement = self.balances.income_statement(period.id)
        for line in statement.revenue.lines + statement.expenses.lines:
            if not line.account.is_active:
                issues.append(f"Inactive account '{line.account.code}' has a balance")

        summary = ClosingSummary(
            total_entries=len(entries),
            unposted_entries=len(unposted),
            unbalanced_entries=len(unbalanced),
            total_revenue=statement.revenue.total,
            total_expense=statement.expenses.total,
            net_income=statement.net_income,
            retained_earnings_account=retained,
            successor_period=successor,
        )
        return ClosingValidation(period=period, issues=tuple(issues), summary=summary)

    def close(self, period_id: int, user_id: Optional[str] = None) -> ClosingResult:
        """Close a period.

        Zeroes every revenue and expense account into retained earnings with
        two closing entries dated at the period end, carries every non-zero
        ending balance into the following period and marks the period closed.

        Raises:
            NotFoundError: If the period does not exist
            AlreadyClosedError: If the period is already closed
            PeriodNotClosableError: If the pre-close checks fail
            ConcurrentCloseError: If another caller is closing the period
        """
        period = self.periods.require_period(period_id)
        if period.is_closed:
            raise AlreadyClosedError(period_closed(period.name))

        validation = self.validate_closable(period_id)
        if not validation.is_valid:
            raise PeriodNotClosableError(period.name, validation.issues)

        token = uuid.uuid4().hex
        with self.db.transaction():
            if not self.db.claim_period_close(period.id, token):
                current = self.db.get_period(period.id)
                if current is not None and current.is_closed:
                    raise AlreadyClosedError(period_closed(period.name))
                raise ConcurrentCloseError(
                    f"Accounting period '{period.name}' is being closed by another process"
                )

            # Entries may have changed between the first checks and the claim
            validation = self.validate_closable(period_id)
            if not validation.is_valid:
                raise PeriodNotClosableError(period.name, validation.issues)
            retained = validation.summary.retained_earnings_account
            successor = validation.summary.successor_period

            revenue = self._temporary_balances(period, AccountType.REVENUE)
            expense = self._temporary_balances(period, AccountType.EXPENSE)
            total_revenue = total(balance for _, balance in revenue)
            total_expense = total(balance for _, balance in expense)

            closing_entries = []
            if revenue:
                closing_entries.append(
                    self._post_closing_entry(
                        period,
                        f"Close revenue accounts of {period.name}",
                        self._zeroing_lines(revenue, retained, total_revenue, credit_normal=True),
                        user_id,
                    )
                )
            if expense:
                closing_entries.append(
                    self._post_closing_entry(
                        period,
                        f"Close expense accounts of {period.name}",
                        self._zeroing_lines(expense, retained, total_expense, credit_normal=False),
                        user_id,
                    )
                )

            opening_balances = self._carry_forward(period, successor)

            closed_at = datetime.now(UTC)
            self.db.mark_period_closed(period.id, closed_at)

        net_income = total_revenue - total_expense
        logger.info(
            "Closed period %s: net income %s, %d opening balances carried to %s",
            period.name,
            net_income,
            len(opening_balances),
            successor.name,
        )
        return ClosingResult(
            period=self.db.get_period(period.id),
            closing_entries=tuple(closing_entries),
            opening_balances=tuple(opening_balances),
            net_income=net_income,
            closed_at=closed_at,
        )

    def closing_status(self, period_id: int) -> Optional[ClosingResult]:
        """Rebuild the result of a closed period; None while it is still open.

        Raises:
            NotFoundError: If the period does not exist
        """
        period = self.periods.require_period(period_id)
        if not period.is_closed:
            return None

        entries = self.journal.find_by_source(ReferenceType.PERIOD_CLOSING, str(period.id))
        retained = self.db.get_account_by_code(self.codes.retained_earnings)
        net_income = ZERO
        if retained is not None:
            net_income = total(
                line.credit - line.debit
                for entry in entries
                for line in entry.lines
                if line.account_id == retained.id
            )

        successor = self.periods.find_successor(period, include_closed=True)
        opening_balances = (
            self.db.list_opening_balances(successor.id) if successor is not None else []
        )
        return ClosingResult(
            period=period,
            closing_entries=tuple(entries),
            opening_balances=tuple(opening_balances),
            net_income=net_income,
            closed_at=period.closed_at,
        )

    def _temporary_balances(
        self, period: AccountingPeriod, account_type: AccountType
    ) -> list[tuple[Account, Decimal]]:
        balances = []
        for account in self.db.list_accounts(account_type=account_type, include_inactive=True):
            balance = self.balances.account_balance(account.id, period.id, as_of=period.end_date)
            if not is_zero(balance):
                balances.append((account, balance))
        return balances

    @staticmethod
    def _zeroing_lines(
        balances: list[tuple[Account, Decimal]],
        retained: Account,
        amount: Decimal,
        credit_normal: bool,
    ) -> list[JournalLineInput]:
        """Lines moving temporary balances into retained earnings.

        A balance on the normal side is cleared from the opposite side; the
        retained earnings line takes the net amount.
        """
        lines = []
        for account, balance in balances:
            clear_with_debit = (balance > ZERO) == credit_normal
            lines.append(
                JournalLineInput(
                    account_id=account.id,
                    debit=abs(balance) if clear_with_debit else ZERO,
                    credit=ZERO if clear_with_debit else abs(balance),
                )
            )
        if not is_zero(amount):
            retained_credit = (amount > ZERO) == credit_normal
            lines.append(
                JournalLineInput(
                    account_id=retained.id,
                    debit=ZERO if retained_credit else abs(amount),
                    credit=abs(amount) if retained_credit else ZERO,
                )
            )
        return lines

    def _post_closing_entry(
        self,
        period: AccountingPeriod,
        description: str,
        lines: list[JournalLineInput],
        user_id: Optional[str],
    ) -> JournalEntry:
        return self.journal.create_entry(
            entry_date=period.end_date,
            description=description,
            period_id=period.id,
            lines=lines,
            reference=f"CLOSING-{period.name}",
            reference_type=ReferenceType.PERIOD_CLOSING,
            source_id=str(period.id),
            user_id=user_id,
            posted=True,
            prefix=CLOSING_PREFIX,
        )

    def _carry_forward(
        self, period: AccountingPeriod, successor: AccountingPeriod
    ) -> list[OpeningBalance]:
        """Replace the successor's opening balances with this period's ending balances.

        Inactive accounts are carried too; zero balances are not stored.
        """
        cleared = self.db.clear_opening_balances(successor.id)
        if cleared:
            logger.info("Replaced %d opening balances of %s", cleared, successor.name)
        carried = []
        for account in self.db.list_accounts(include_inactive=True):
            balance = self.balances.account_balance(account.id, period.id, as_of=period.end_date)
            if is_zero(balance):
                continue
            carried.append(self.periods.set_opening_balance(account.id, successor.id, balance))
        return carried
