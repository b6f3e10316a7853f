"""Balance Calculator and financial reports.

Every figure here comes from one formula. For a debit-normal account
``balance = opening + debit - credit``, for a credit-normal account
``balance = opening + credit - debit``; see ``signed_movement``. Balances stay
signed on the account's normal side until ``present_balance`` turns them into a
side and an unsigned amount for display.
"""

from collections import defaultdict
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Iterable, Optional

from storeledger.database.base import Database
from storeledger.domain.account import normal_balance
from storeledger.domain.entities import (
    Account,
    AccountingPeriod,
    AccountType,
    BalanceSheet,
    IncomeStatement,
    NormalBalance,
    PresentedBalance,
    ReferenceType,
    RunningLedger,
    RunningLedgerRow,
    StatementLine,
    StatementSection,
    TrialBalance,
    TrialBalanceRow,
)
from storeledger.domain.errors import NotFoundError, ValidationError, account_not_found
from storeledger.domain.money import ZERO, amounts_equal, is_zero, total
from storeledger.domain.period import PeriodService


def signed_movement(account_type: AccountType, debit: Decimal, credit: Decimal) -> Decimal:
    """Return the effect of a debit/credit pair on an account's balance."""
    if normal_balance(account_type) == NormalBalance.DEBIT:
        return debit - credit
    return credit - debit


def present_balance(account_type: AccountType, balance: Decimal) -> PresentedBalance:
    """Convert a signed normal-side balance to a side and an unsigned amount.

    A negative balance sits on the side opposite the account's normal side:
    a revenue account with balance -70 is presented as a 70 debit.
    """
    side = normal_balance(account_type)
    if balance < ZERO:
        side = NormalBalance.CREDIT if side == NormalBalance.DEBIT else NormalBalance.DEBIT
    return PresentedBalance(side=side, amount=abs(balance))


@dataclass
class _Totals:
    opening: Decimal = ZERO
    debit: Decimal = ZERO
    credit: Decimal = ZERO
    has_activity: bool = False


class BalanceService:
    """Service computing balances, ledgers and statements from posted entries."""

    def __init__(self, db: Database):
        """Initialize balance service.

        Args:
            db: Database instance
        """
        self.db = db
        self.periods = PeriodService(db)

    present_balance = staticmethod(present_balance)

    def account_balance(
        self,
        account_id: int,
        period_id: Optional[int] = None,
        as_of: Optional[date] = None,
    ) -> Decimal:
        """Return an account's signed balance.

        Args:
            account_id: Account ID
            period_id: Optional period; adds its opening balance and limits the
                movements to its entries
            as_of: Optional last date of movements to include

        Raises:
            NotFoundError: If the account or period does not exist
        """
        account = self._require_account(account_id)
        opening = ZERO
        if period_id is not None:
            self.periods.require_period(period_id)
            opening = self.periods.get_opening_balance(account_id, period_id)

        lines = self.db.list_ledger_lines(account_id=account_id, period_id=period_id, end_date=as_of)
        return opening + signed_movement(
            account.account_type,
            total(line.debit for line in lines),
            total(line.credit for line in lines),
        )

    def trial_balance(self, period_id: Optional[int] = None) -> TrialBalance:
        """Build the trial balance of a period, or of all entries when no period is given.

        Each account's ending balance is placed in the debit or credit column
        according to the side it sits on; the trial balance is balanced when
        both columns agree within 0.01.
        """
        period = self.periods.require_period(period_id) if period_id is not None else None
        totals = self._collect(period)

        rows = []
        debit_column = ZERO
        credit_column = ZERO
        for account in self.db.list_accounts(include_inactive=True):
            figures = totals.get(account.id, _Totals())
            if not account.is_active and not figures.has_activity and is_zero(figures.opening):
                continue
            ending = figures.opening + signed_movement(
                account.account_type, figures.debit, figures.credit
            )
            presented = present_balance(account.account_type, ending)
            if presented.side == NormalBalance.DEBIT:
                debit_column += presented.amount
            else:
                credit_column += presented.amount
            rows.append(
                TrialBalanceRow(
                    account=account,
                    opening=figures.opening,
                    debit=figures.debit,
                    credit=figures.credit,
                    ending=ending,
                    presented=presented,
                )
            )

        return TrialBalance(
            period=period,
            rows=tuple(rows),
            total_debit_column=debit_column,
            total_credit_column=credit_column,
            total_debit_mutation=total(row.debit for row in rows),
            total_credit_mutation=total(row.credit for row in rows),
            is_balanced=amounts_equal(debit_column, credit_column),
        )

    def running_ledger(
        self,
        account_id: int,
        period_id: Optional[int] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> RunningLedger:
        """Build the general ledger of one account with a running balance.

        Lines are ordered by entry date, then entry creation, then line order.
        Movements dated before ``start_date`` are folded into the opening balance.
        """
        account = self._require_account(account_id)
        if start_date is not None and end_date is not None and start_date > end_date:
            raise ValidationError("Ledger start date must not be after its end date")

        opening = ZERO
        if period_id is not None:
            self.periods.require_period(period_id)
            opening = self.periods.get_opening_balance(account_id, period_id)

        lines = self.db.list_ledger_lines(account_id=account_id, period_id=period_id, end_date=end_date)

        rows = []
        balance = opening
        for line in lines:
            amount = signed_movement(account.account_type, line.debit, line.credit)
            if start_date is not None and line.entry_date < start_date:
                opening += amount
                balance += amount
                continue
            balance += amount
            rows.append(
                RunningLedgerRow(
                    entry_id=line.entry_id,
                    entry_number=line.entry_number,
                    entry_date=line.entry_date,
                    description=line.description or line.entry_description,
                    reference=line.reference,
                    debit=line.debit,
                    credit=line.credit,
                    amount=amount,
                    running_balance=balance,
                )
            )

        return RunningLedger(
            account=account,
            opening_balance=opening,
            rows=tuple(rows),
            closing_balance=balance,
            total_debit=total(row.debit for row in rows),
            total_credit=total(row.credit for row in rows),
        )

    def income_statement(self, period_id: int, include_closing: bool = False) -> IncomeStatement:
        """Build the income statement of a period.

        Closing entries are left out by default so a closed period still shows
        the result it was closed with.
        """
        period = self.periods.require_period(period_id)
        totals = self._collect(
            period,
            exclude_reference_type=None if include_closing else ReferenceType.PERIOD_CLOSING,
        )
        balances = self._balances(totals, include_inactive=True)

        revenue = self._section("Revenue", balances, AccountType.REVENUE)
        expenses = self._section("Expenses", balances, AccountType.EXPENSE)
        return IncomeStatement(
            period=period,
            revenue=revenue,
            expenses=expenses,
            net_income=revenue.total - expenses.total,
        )

    def balance_sheet(
        self, period_id: Optional[int] = None, as_of: Optional[date] = None
    ) -> BalanceSheet:
        """Build the balance sheet of a period, or of all entries when no period is given.

        Revenue and expense not yet closed into retained earnings are shown as
        current earnings inside equity.
        """
        period = self.periods.require_period(period_id) if period_id is not None else None
        if period is not None and as_of is not None and as_of < period.start_date:
            raise ValidationError(
                f"Balance sheet date {as_of} is before period '{period.name}' starts"
            )
        totals = self._collect(period, end_date=as_of)
        balances = self._balances(totals, include_inactive=True)

        assets = self._section("Assets", balances, AccountType.ASSET)
        liabilities = self._section("Liabilities", balances, AccountType.LIABILITY)
        current_earnings = (
            self._section("Revenue", balances, AccountType.REVENUE).total
            - self._section("Expenses", balances, AccountType.EXPENSE).total
        )
        equity_section = self._section("Equity", balances, AccountType.EQUITY)
        equity = StatementSection(
            title=equity_section.title,
            lines=equity_section.lines,
            total=equity_section.total + current_earnings,
        )
        total_liabilities_equity = liabilities.total + equity.total

        return BalanceSheet(
            period=period,
            as_of=as_of or (period.end_date if period is not None else None),
            assets=assets,
            liabilities=liabilities,
            equity=equity,
            current_earnings=current_earnings,
            total_assets=assets.total,
            total_liabilities_equity=total_liabilities_equity,
            is_balanced=amounts_equal(assets.total, total_liabilities_equity),
        )

    def _require_account(self, account_id: int) -> Account:
        account = self.db.get_account(account_id)
        if account is None:
            raise NotFoundError(account_not_found(account_id))
        return account

    def _collect(
        self,
        period: Optional[AccountingPeriod],
        end_date: Optional[date] = None,
        exclude_reference_type: Optional[ReferenceType] = None,
    ) -> dict[int, _Totals]:
        """Opening balance and movement totals per account."""
        totals: dict[int, _Totals] = defaultdict(_Totals)
        if period is not None:
            for opening in self.db.list_opening_balances(period.id):
                totals[opening.account_id].opening = opening.balance

        lines = self.db.list_ledger_lines(
            period_id=period.id if period is not None else None,
            end_date=end_date,
            exclude_reference_type=exclude_reference_type,
        )
        for line in lines:
            figures = totals[line.account_id]
            figures.debit += line.debit
            figures.credit += line.credit
            figures.has_activity = True
        return totals

    def _balances(
        self, totals: dict[int, _Totals], include_inactive: bool = False
    ) -> list[tuple[Account, Decimal]]:
        balances = []
        for account in self.db.list_accounts(include_inactive=include_inactive):
            figures = totals.get(account.id)
            if figures is None:
                continue
            balances.append(
                (
                    account,
                    figures.opening
                    + signed_movement(account.account_type, figures.debit, figures.credit),
                )
            )
        return balances

    @staticmethod
    def _section(
        title: str,
        balances: Iterable[tuple[Account, Decimal]],
        account_type: AccountType,
    ) -> StatementSection:
        lines = tuple(
            StatementLine(account=account, balance=balance)
            for account, balance in balances
            if account.account_type == account_type and not is_zero(balance)
        )
        return StatementSection(
            title=title, lines=lines, total=total(line.balance for line in lines)
        )
