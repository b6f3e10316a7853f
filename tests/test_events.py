"""Tests for event posting rules."""

import logging
import pytest
from datetime import date
from decimal import Decimal

from storeledger.domain.entities import (
    ExpenseCategory,
    PaymentMethod,
    ReferenceType,
    StockSource,
)
from storeledger.domain.errors import NotFoundError, ValidationError

DAY = date(2024, 5, 10)


@pytest.fixture
def booked(temp_db):
    """Return a helper mapping an entry's lines to {account code: (debit, credit)}."""

    def _booked(entry):
        result = {}
        for line in entry.lines:
            code = temp_db.get_account(line.account_id).code
            result[code] = (line.debit, line.credit)
        return result

    return _booked


def D(value):
    return Decimal(value).quantize(Decimal("0.01"))


class TestStockEvents:
    @pytest.mark.parametrize(
        "source,credit_code,reference_type",
        [
            (StockSource.CASH, "1001", ReferenceType.PURCHASE),
            (StockSource.CREDIT, "2001", ReferenceType.PURCHASE),
            (StockSource.SURPLUS, "4002", ReferenceType.ADJUSTMENT),
        ],
    )
    def test_stock_addition(self, chart, period_2024, event_service, booked, source, credit_code, reference_type):
        entry = event_service.record_stock_addition("IN-1", 1500, source=source, entry_date=DAY)
        assert booked(entry) == {"1003": (D(1500), D(0)), credit_code: (D(0), D(1500))}
        assert entry.reference_type == reference_type
        assert entry.source_id == "IN-1"
        assert entry.period_id == period_2024.id
        assert entry.is_posted

    def test_stock_outflow(self, chart, period_2024, event_service, booked):
        entry = event_service.record_stock_outflow("OUT-1", "250.50", entry_date=DAY)
        assert booked(entry) == {"5012": (D("250.50"), D(0)), "1003": (D(0), D("250.50"))}
        assert entry.reference_type == ReferenceType.STOCK_OUT

    def test_stock_adjustment_increase(self, chart, period_2024, event_service, booked):
        entry = event_service.record_stock_adjustment("OP-1", 80, is_increase=True, entry_date=DAY)
        assert booked(entry) == {"1003": (D(80), D(0)), "4002": (D(0), D(80))}

    def test_stock_adjustment_decrease(self, chart, period_2024, event_service, booked):
        entry = event_service.record_stock_adjustment("OP-2", 80, is_increase=False, entry_date=DAY)
        assert booked(entry) == {"5012": (D(80), D(0)), "1003": (D(0), D(80))}


class TestExpenses:
    def test_expense_paid_in_cash(self, chart, period_2024, event_service, booked):
        entry = event_service.record_expense(
            "EXP-1", 50000, category=ExpenseCategory.SALARY, entry_date=DAY
        )
        assert booked(entry) == {"5002": (D(50000), D(0)), "1001": (D(0), D(50000))}
        assert entry.reference_type == ReferenceType.EXPENSE

    def test_expense_paid_by_bank(self, chart, period_2024, event_service, booked):
        entry = event_service.record_expense(
            "EXP-2", 120, category=ExpenseCategory.RENT, payment_method=PaymentMethod.BANK, entry_date=DAY
        )
        assert booked(entry) == {"5011": (D(120), D(0)), "1004": (D(0), D(120))}

    def test_expense_on_credit_rejected(self, chart, period_2024, event_service):
        with pytest.raises(ValidationError):
            event_service.record_expense("EXP-3", 10, payment_method=PaymentMethod.CREDIT, entry_date=DAY)

    def test_amend_expense_reverses_and_rebooks(self, chart, period_2024, event_service, journal_service, balance_service):
        first = event_service.record_expense("EXP-9", 100, category=ExpenseCategory.UTILITIES, entry_date=DAY)
        amended = event_service.amend_expense(
            "EXP-9", 150, category=ExpenseCategory.UTILITIES, entry_date=DAY
        )

        assert amended.id != first.id
        assert journal_service.get_reversal(first.id) is not None
        assert balance_service.account_balance(chart["5003"].id, period_2024.id) == D(150)
        assert balance_service.account_balance(chart["1001"].id, period_2024.id) == D(-150)

        # Amending again reverses the amended entry, not the first one
        event_service.amend_expense("EXP-9", 90, category=ExpenseCategory.UTILITIES, entry_date=DAY)
        assert journal_service.get_reversal(amended.id) is not None
        assert balance_service.account_balance(chart["5003"].id, period_2024.id) == D(90)

    def test_cancel_expense(self, chart, period_2024, event_service, balance_service):
        event_service.record_expense("EXP-5", 75, entry_date=DAY)
        reversal = event_service.cancel_expense("EXP-5")
        assert reversal.reference_type == ReferenceType.REVERSAL
        assert balance_service.account_balance(chart["5004"].id, period_2024.id) == D(0)

        with pytest.raises(NotFoundError):
            event_service.cancel_expense("EXP-5")


class TestReturnsAndSales:
    def test_purchase_return_cash(self, chart, period_2024, event_service, booked):
        entry = event_service.record_purchase_return("PR-1", 40, was_cash=True, entry_date=DAY)
        assert booked(entry) == {"1001": (D(40), D(0)), "1003": (D(0), D(40))}

    def test_purchase_return_credit(self, chart, period_2024, event_service, booked):
        entry = event_service.record_purchase_return("PR-2", 40, was_cash=False, entry_date=DAY)
        assert booked(entry) == {"2001": (D(40), D(0)), "1003": (D(0), D(40))}

    def test_sales_return(self, chart, period_2024, event_service, booked):
        entry = event_service.record_sales_return("SR-1", 100, 60, entry_date=DAY)
        assert booked(entry) == {
            "4001": (D(100), D(0)),
            "1001": (D(0), D(100)),
            "1003": (D(60), D(0)),
            "5001": (D(0), D(60)),
        }
        assert entry.total_debit == entry.total_credit == D(160)

    def test_sales_return_on_credit_without_cost(self, chart, period_2024, event_service, booked):
        entry = event_service.record_sales_return(
            "SR-2", 100, payment_method=PaymentMethod.CREDIT, entry_date=DAY
        )
        assert booked(entry) == {"4001": (D(100), D(0)), "1002": (D(0), D(100))}

    def test_sale(self, chart, period_2024, event_service, booked):
        entry = event_service.record_sale("S-1", 500, 300, payment_method=PaymentMethod.BANK, entry_date=DAY)
        assert booked(entry) == {
            "1004": (D(500), D(0)),
            "4001": (D(0), D(500)),
            "5001": (D(300), D(0)),
            "1003": (D(0), D(300)),
        }

    def test_initial_capital_is_idempotent(self, chart, period_2024, event_service, journal_service, booked):
        first = event_service.record_initial_capital("OPENING", 1000000, entry_date=DAY)
        again = event_service.record_initial_capital("OPENING", 1000000, entry_date=DAY)
        assert again.id == first.id
        assert booked(first) == {"1003": (D(1000000), D(0)), "3001": (D(0), D(1000000))}
        assert len(journal_service.find_by_source(ReferenceType.INITIAL_CAPITAL, "OPENING")) == 1


class TestValidation:
    @pytest.mark.parametrize("amount", [0, -5, "abc"])
    def test_invalid_amounts(self, chart, period_2024, event_service, amount):
        with pytest.raises(ValidationError):
            event_service.record_stock_outflow("OUT-X", amount, entry_date=DAY)

    def test_requires_active_period(self, chart, event_service):
        with pytest.raises(NotFoundError):
            event_service.record_stock_outflow("OUT-X", 10, entry_date=DAY)

    def test_requires_designated_account(self, period_2024, event_service):
        with pytest.raises(NotFoundError):
            event_service.record_stock_outflow("OUT-X", 10, entry_date=DAY)

    def test_requires_reference(self, chart, period_2024, event_service):
        with pytest.raises(ValidationError):
            event_service.record_stock_outflow(" ", 10, entry_date=DAY)


class TestBestEffort:
    def test_success(self, chart, period_2024, event_service):
        outcome = event_service.best_effort(event_service.record_stock_outflow, "OUT-1", 10, entry_date=DAY)
        assert outcome.ok
        assert outcome.entry.source_id == "OUT-1"

    def test_failure_is_returned_and_logged(self, chart, event_service, caplog):
        with caplog.at_level(logging.WARNING, logger="storeledger.domain.events"):
            outcome = event_service.best_effort(
                event_service.record_stock_addition, "IN-1", 10, entry_date=DAY
            )
        assert not outcome.ok
        assert outcome.entry is None
        assert isinstance(outcome.error, NotFoundError)
        assert "record_stock_addition" in caplog.text

    def test_programming_errors_still_raise(self, event_service):
        def broken():
            raise RuntimeError("bug")

        with pytest.raises(RuntimeError):
            event_service.best_effort(broken)
