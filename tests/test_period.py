"""Tests for accounting periods and opening balances."""

import pytest
from datetime import date, datetime, UTC
from decimal import Decimal

from storeledger.domain.errors import (
    ConflictError,
    NotFoundError,
    PeriodClosedError,
    ValidationError,
)


class TestCreatePeriod:
    def test_create_active_period(self, period_service):
        period = period_service.create_period("2024", date(2024, 1, 1), date(2024, 12, 31), is_active=True)
        assert period.is_active
        assert not period.is_closed
        assert period_service.get_active_period() == period

    def test_start_must_precede_end(self, period_service):
        with pytest.raises(ValidationError):
            period_service.create_period("Bad", date(2024, 12, 31), date(2024, 1, 1))
        with pytest.raises(ValidationError):
            period_service.create_period("Bad", date(2024, 1, 1), date(2024, 1, 1))

    def test_overlapping_active_period_rejected(self, period_service, period_2024):
        with pytest.raises(ConflictError):
            period_service.create_period("H2", date(2024, 7, 1), date(2025, 6, 30), is_active=True)

    def test_overlapping_inactive_period_allowed(self, period_service, period_2024):
        period = period_service.create_period("Q3", date(2024, 7, 1), date(2024, 9, 30))
        assert not period.is_active

    def test_new_active_period_deactivates_previous(self, period_service, period_2024):
        period_2025 = period_service.create_period(
            "2025", date(2025, 1, 1), date(2025, 12, 31), is_active=True
        )
        assert period_service.get_active_period().id == period_2025.id
        assert not period_service.get_period(period_2024.id).is_active
        assert len(period_service.list_periods(is_active=True)) == 1


def test_list_periods_newest_first(period_service, period_2025):
    assert [p.name for p in period_service.list_periods()] == ["2025", "2024"]


def test_activate_period(period_service, period_2024, period_2025):
    activated = period_service.activate_period(period_2025.id)
    assert activated.is_active
    assert not period_service.get_period(period_2024.id).is_active


def test_activate_closed_period_rejected(temp_db, period_service, period_2024):
    temp_db.mark_period_closed(period_2024.id, datetime.now(UTC))
    with pytest.raises(PeriodClosedError):
        period_service.activate_period(period_2024.id)


def test_find_successor_skips_closed_periods(temp_db, period_service, period_2024, period_2025):
    assert period_service.find_successor(period_2024).id == period_2025.id
    temp_db.mark_period_closed(period_2025.id, datetime.now(UTC))
    assert period_service.find_successor(period_2024) is None
    assert period_service.find_successor(period_2024, include_closed=True).id == period_2025.id


class TestOpeningBalances:
    def test_set_and_replace(self, chart, period_service, period_2024):
        cash = chart["1001"]
        period_service.set_opening_balance(cash.id, period_2024.id, "1500.555")
        assert period_service.get_opening_balance(cash.id, period_2024.id) == Decimal("1500.56")

        period_service.set_opening_balance(cash.id, period_2024.id, 200)
        assert period_service.get_opening_balance(cash.id, period_2024.id) == Decimal("200.00")
        assert len(period_service.list_opening_balances(period_2024.id)) == 1

    def test_unset_balance_is_zero(self, chart, period_service, period_2024):
        assert period_service.get_opening_balance(chart["1001"].id, period_2024.id) == Decimal("0.00")

    def test_delete(self, chart, period_service, period_2024):
        cash = chart["1001"]
        period_service.set_opening_balance(cash.id, period_2024.id, 100)
        period_service.delete_opening_balance(cash.id, period_2024.id)
        assert period_service.list_opening_balances(period_2024.id) == []
        with pytest.raises(NotFoundError):
            period_service.delete_opening_balance(cash.id, period_2024.id)

    def test_closed_period_is_immutable(self, temp_db, chart, period_service, period_2024):
        cash = chart["1001"]
        period_service.set_opening_balance(cash.id, period_2024.id, 100)
        temp_db.mark_period_closed(period_2024.id, datetime.now(UTC))

        with pytest.raises(PeriodClosedError):
            period_service.set_opening_balance(cash.id, period_2024.id, 200)
        with pytest.raises(PeriodClosedError):
            period_service.delete_opening_balance(cash.id, period_2024.id)

    def test_unknown_account(self, period_service, period_2024):
        with pytest.raises(NotFoundError):
            period_service.set_opening_balance(999, period_2024.id, 100)

    def test_invalid_amount(self, chart, period_service, period_2024):
        with pytest.raises(ValidationError):
            period_service.set_opening_balance(chart["1001"].id, period_2024.id, "lots")
