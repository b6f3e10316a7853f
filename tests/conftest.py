"""Shared pytest fixtures for storeledger tests."""

import tempfile
import os
from datetime import date
from decimal import Decimal
import pytest

from storeledger.database.factories import create_sqlite_database
from storeledger.domain.account import AccountService
from storeledger.domain.balance import BalanceService
from storeledger.domain.closing import PeriodClosingService
from storeledger.domain.entities import JournalLineInput
from storeledger.domain.events import JournalEventService
from storeledger.domain.journal import JournalService
from storeledger.domain.period import PeriodService


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def account_service(temp_db):
    """Create an AccountService with a temporary database."""
    return AccountService(temp_db)


@pytest.fixture
def period_service(temp_db):
    """Create a PeriodService with a temporary database."""
    return PeriodService(temp_db)


@pytest.fixture
def journal_service(temp_db):
    """Create a JournalService with a temporary database."""
    return JournalService(temp_db)


@pytest.fixture
def event_service(temp_db):
    """Create a JournalEventService with a temporary database."""
    return JournalEventService(temp_db)


@pytest.fixture
def balance_service(temp_db):
    """Create a BalanceService with a temporary database."""
    return BalanceService(temp_db)


@pytest.fixture
def closing_service(temp_db):
    """Create a PeriodClosingService with a temporary database."""
    return PeriodClosingService(temp_db)


@pytest.fixture
def chart(account_service):
    """Seed the default store chart and return accounts by code."""
    created, _ = account_service.seed_chart()
    return {account.code: account for account in created}


@pytest.fixture
def period_2024(period_service):
    """Create the active 2024 period."""
    return period_service.create_period("2024", date(2024, 1, 1), date(2024, 12, 31), is_active=True)


@pytest.fixture
def period_2025(period_service, period_2024):
    """Create the inactive 2025 period following 2024."""
    return period_service.create_period("2025", date(2025, 1, 1), date(2025, 12, 31))


@pytest.fixture
def post(journal_service):
    """Return a helper posting an entry from (account, debit, credit) triples."""

    def _post(period, entry_date, description, *lines, posted=True):
        return journal_service.create_entry(
            entry_date=entry_date,
            description=description,
            period_id=period.id,
            lines=[
                JournalLineInput(account_id=account.id, debit=Decimal(debit), credit=Decimal(credit))
                for account, debit, credit in lines
            ],
            posted=posted,
        )

    return _post


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
