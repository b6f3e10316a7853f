"""Tests for Database interface returning domain models."""

import pytest
from datetime import date, datetime, UTC
from decimal import Decimal

from storeledger.domain import entities
from storeledger.domain.entities import AccountCategory, AccountType, JournalLineInput, ReferenceType
from storeledger.domain.errors import ConflictError, DuplicateCodeError, NotFoundError


@pytest.fixture
def cash_and_capital(temp_db):
    """Create a cash and a capital account directly in the database."""
    cash_id = temp_db.create_account(
        code="1001", name="Cash", account_type=AccountType.ASSET, category=AccountCategory.CURRENT_ASSET
    )
    capital_id = temp_db.create_account(
        code="3001", name="Capital", account_type=AccountType.EQUITY, category=AccountCategory.OWNER_EQUITY
    )
    return cash_id, capital_id


@pytest.fixture
def period_id(temp_db):
    return temp_db.create_period("2024", date(2024, 1, 1), date(2024, 12, 31), is_active=True)


def _lines(cash_id, capital_id, amount="100.00"):
    return [
        JournalLineInput(account_id=cash_id, debit=Decimal(amount)),
        JournalLineInput(account_id=capital_id, credit=Decimal(amount)),
    ]


class TestDatabaseInterface:
    """Tests to verify Database interface returns domain models."""

    def test_get_account_returns_domain_model(self, temp_db, cash_and_capital):
        """Test that get_account returns a domain Account entity."""
        cash_id, _ = cash_and_capital

        account = temp_db.get_account(cash_id)

        assert isinstance(account, entities.Account)
        assert account.code == "1001"
        assert account.account_type == AccountType.ASSET
        assert account.category == AccountCategory.CURRENT_ASSET
        assert account.level == 1
        assert account.is_active
        assert isinstance(account.created_at, datetime)

    def test_duplicate_code_rejected(self, temp_db, cash_and_capital):
        with pytest.raises(DuplicateCodeError):
            temp_db.create_account(
                code="1001", name="Petty cash",
                account_type=AccountType.ASSET, category=AccountCategory.CURRENT_ASSET,
            )
        # The session is usable after the failed insert
        assert temp_db.get_account_by_code("3001").name == "Capital"

    def test_period_returns_domain_model(self, temp_db, period_id):
        period = temp_db.get_period(period_id)
        assert isinstance(period, entities.AccountingPeriod)
        assert period.start_date == date(2024, 1, 1)
        assert period.is_active
        assert not period.is_closed
        assert period.closed_at is None
        assert temp_db.get_active_period().id == period_id

    def test_journal_entry_amounts_are_decimal(self, temp_db, cash_and_capital, period_id):
        entry_id = temp_db.create_journal_entry(
            number="JR-20240105-0001",
            entry_date=date(2024, 1, 5),
            description="Capital",
            period_id=period_id,
            lines=_lines(*cash_and_capital, amount="1234.50"),
            reference_type=ReferenceType.MANUAL,
        )

        entry = temp_db.get_journal_entry(entry_id)

        assert isinstance(entry, entities.JournalEntry)
        assert entry.reference_type == ReferenceType.MANUAL
        assert len(entry.lines) == 2
        for line in entry.lines:
            assert isinstance(line.debit, Decimal)
            assert isinstance(line.credit, Decimal)
        assert entry.total_debit == entry.total_credit == Decimal("1234.50")

    def test_duplicate_entry_number_is_conflict(self, temp_db, cash_and_capital, period_id):
        kwargs = dict(
            number="JR-20240105-0001",
            entry_date=date(2024, 1, 5),
            description="Capital",
            period_id=period_id,
            lines=_lines(*cash_and_capital),
        )
        temp_db.create_journal_entry(**kwargs)
        with pytest.raises(ConflictError):
            temp_db.create_journal_entry(**kwargs)
        assert len(temp_db.list_journal_entries()) == 1


class TestEntryNumbers:
    def test_first_number_of_the_day(self, temp_db):
        assert temp_db.next_entry_number("JR", date(2024, 3, 7)) == "JR-20240307-0001"

    def test_sequence_per_prefix_and_day(self, temp_db, cash_and_capital, period_id):
        for number in ("JR-20240307-0001", "JR-20240307-0002", "RV-20240307-0001", "JR-20240308-0001"):
            temp_db.create_journal_entry(
                number=number,
                entry_date=date(2024, 3, 7),
                description="Entry",
                period_id=period_id,
                lines=_lines(*cash_and_capital),
            )

        assert temp_db.next_entry_number("JR", date(2024, 3, 7)) == "JR-20240307-0003"
        assert temp_db.next_entry_number("RV", date(2024, 3, 7)) == "RV-20240307-0002"
        assert temp_db.next_entry_number("CL", date(2024, 3, 7)) == "CL-20240307-0001"


class TestTransactions:
    def test_rollback_discards_all_writes(self, temp_db, cash_and_capital, period_id):
        with pytest.raises(RuntimeError):
            with temp_db.transaction():
                temp_db.create_journal_entry(
                    number="JR-20240105-0001",
                    entry_date=date(2024, 1, 5),
                    description="Lost",
                    period_id=period_id,
                    lines=_lines(*cash_and_capital),
                )
                temp_db.upsert_opening_balance(cash_and_capital[0], period_id, Decimal("50.00"))
                raise RuntimeError("boom")

        assert temp_db.list_journal_entries() == []
        assert temp_db.get_opening_balance(cash_and_capital[0], period_id) is None

    def test_nested_transaction_joins_outer(self, temp_db, cash_and_capital, period_id):
        with pytest.raises(RuntimeError):
            with temp_db.transaction():
                with temp_db.transaction():
                    temp_db.upsert_opening_balance(cash_and_capital[0], period_id, Decimal("50.00"))
                raise RuntimeError("boom")

        assert temp_db.get_opening_balance(cash_and_capital[0], period_id) is None

    def test_commit_on_success(self, temp_db, cash_and_capital, period_id):
        with temp_db.transaction():
            temp_db.upsert_opening_balance(cash_and_capital[0], period_id, Decimal("50.00"))
            temp_db.upsert_opening_balance(cash_and_capital[0], period_id, Decimal("75.00"))

        opening = temp_db.get_opening_balance(cash_and_capital[0], period_id)
        assert opening.balance == Decimal("75.00")
        assert len(temp_db.list_opening_balances(period_id)) == 1


class TestPeriodClaim:
    def test_second_claim_fails(self, temp_db, period_id):
        assert temp_db.claim_period_close(period_id, "first")
        assert not temp_db.claim_period_close(period_id, "second")

    def test_closed_period_cannot_be_claimed(self, temp_db, period_id):
        temp_db.mark_period_closed(period_id, datetime.now(UTC))
        period = temp_db.get_period(period_id)
        assert period.is_closed
        assert not period.is_active
        assert period.closed_at is not None
        assert not temp_db.claim_period_close(period_id, "late")

    def test_mark_missing_period(self, temp_db):
        with pytest.raises(NotFoundError):
            temp_db.mark_period_closed(999, datetime.now(UTC))


def test_clear_opening_balances(temp_db, cash_and_capital, period_id):
    cash_id, capital_id = cash_and_capital
    temp_db.upsert_opening_balance(cash_id, period_id, Decimal("10.00"))
    temp_db.upsert_opening_balance(capital_id, period_id, Decimal("10.00"))

    assert temp_db.clear_opening_balances(period_id) == 2
    assert temp_db.list_opening_balances(period_id) == []
    assert temp_db.clear_opening_balances(period_id) == 0
