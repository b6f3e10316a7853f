"""Accounting period and opening balance domain service."""

import logging
from datetime import date
from decimal import Decimal
from typing import Optional

from storeledger.database.base import Database
from storeledger.domain.entities import (
    AccountingPeriod as PeriodEntity,
    OpeningBalance as OpeningBalanceEntity,
)
from storeledger.domain.errors import (
    ConflictError,
    NotFoundError,
    PeriodClosedError,
    ValidationError,
    account_not_found,
    no_active_period,
    period_closed,
    period_not_found,
)
from storeledger.domain.money import Amount, to_money

logger = logging.getLogger(__name__)


class PeriodService:
    """Service for managing accounting periods and their opening balances."""

    def __init__(self, db: Database):
        """Initialize period service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_period(
        self, name: str, start_date: date, end_date: date, is_active: bool = False
    ) -> PeriodEntity:
        """Create an accounting period.

        When the new period is active, any other active period is deactivated so
        that at most one period is active at a time.

        Args:
            name: Period name (e.g. "2024")
            start_date: First day of the period
            end_date: Last day of the period
            is_active: Make the new period the active one

        Returns:
            Created period

        Raises:
            ValidationError: If the name is empty or start_date is not before end_date
            ConflictError: If an active period overlaps the new range
        """
        name = (name or "").strip()
        if not name:
            raise ValidationError("Period name is required")
        if start_date >= end_date:
            raise ValidationError("Period start date must be before its end date")

        with self.db.transaction():
            if is_active:
                overlapping = self.db.find_overlapping_active_period(start_date, end_date)
                if overlapping is not None:
                    raise ConflictError(
                        f"Period overlaps active period '{overlapping.name}' "
                        f"({overlapping.start_date} - {overlapping.end_date})"
                    )
                self.db.deactivate_periods()
            period_id = self.db.create_period(
                name=name, start_date=start_date, end_date=end_date, is_active=is_active
            )

        logger.info("Created period %s (%s - %s)", name, start_date, end_date)
        return self.db.get_period(period_id)

    def get_period(self, period_id: int) -> Optional[PeriodEntity]:
        """Get accounting period by ID."""
        return self.db.get_period(period_id)

    def require_period(self, period_id: int) -> PeriodEntity:
        """Get accounting period by ID or raise NotFoundError."""
        period = self.db.get_period(period_id)
        if period is None:
            raise NotFoundError(period_not_found(period_id))
        return period

    def require_open_period(self, period_id: int) -> PeriodEntity:
        """Get a period that accepts writes.

        Raises:
            NotFoundError: If the period does not exist
            PeriodClosedError: If the period is closed
        """
        period = self.require_period(period_id)
        if period.is_closed:
            raise PeriodClosedError(period_closed(period.name))
        return period

    def list_periods(
        self, is_active: Optional[bool] = None, is_closed: Optional[bool] = None
    ) -> list[PeriodEntity]:
        """List periods, newest first."""
        return self.db.list_periods(is_active=is_active, is_closed=is_closed)

    def get_active_period(self) -> Optional[PeriodEntity]:
        """Get the active period, if any."""
        return self.db.get_active_period()

    def require_active_period(self) -> PeriodEntity:
        """Get the active period or raise NotFoundError."""
        period = self.db.get_active_period()
        if period is None:
            raise NotFoundError(no_active_period())
        return period

    def activate_period(self, period_id: int) -> PeriodEntity:
        """Make a period the active one, deactivating all others.

        Raises:
            NotFoundError: If the period does not exist
            PeriodClosedError: If the period is closed
        """
        period = self.require_open_period(period_id)
        with self.db.transaction():
            self.db.deactivate_periods(exclude_id=period_id)
            self.db.set_period_active(period_id, True)
        logger.info("Activated period %s", period.name)
        return self.db.get_period(period_id)

    def find_successor(
        self, period: PeriodEntity, include_closed: bool = False
    ) -> Optional[PeriodEntity]:
        """Earliest period starting after ``period`` ends.

        Closed periods are skipped unless ``include_closed`` is set.
        """
        return self.db.find_successor_period(period.end_date, include_closed=include_closed)

    # Opening balances
    def set_opening_balance(
        self, account_id: int, period_id: int, balance: Amount
    ) -> OpeningBalanceEntity:
        """Create or replace an account's opening balance for a period.

        The balance is signed on the account's normal side.

        Raises:
            NotFoundError: If the account or period does not exist
            PeriodClosedError: If the period is closed
            ValidationError: If the balance is not a valid amount
        """
        period = self.require_open_period(period_id)
        if self.db.get_account(account_id) is None:
            raise NotFoundError(account_not_found(account_id))
        try:
            amount = to_money(balance)
        except ValueError as e:
            raise ValidationError(str(e)) from e

        self.db.upsert_opening_balance(account_id, period.id, amount)
        logger.debug("Opening balance of account %s in %s set to %s", account_id, period.name, amount)
        return self.db.get_opening_balance(account_id, period.id)

    def get_opening_balance(self, account_id: int, period_id: int) -> Decimal:
        """Return an account's opening balance for a period, zero when unset."""
        opening = self.db.get_opening_balance(account_id, period_id)
        return opening.balance if opening is not None else Decimal("0.00")

    def list_opening_balances(self, period_id: int) -> list[OpeningBalanceEntity]:
        """List a period's opening balances ordered by account code."""
        self.require_period(period_id)
        return self.db.list_opening_balances(period_id)

    def delete_opening_balance(self, account_id: int, period_id: int) -> None:
        """Delete an account's opening balance for a period.

        Raises:
            NotFoundError: If the period or the opening balance does not exist
            PeriodClosedError: If the period is closed
        """
        self.require_open_period(period_id)
        self.db.delete_opening_balance(account_id, period_id)
