"""End-to-end tests of the command line interface."""

import pytest

from storeledger.cli.main import cli


@pytest.fixture
def invoke(cli_runner, temp_db):
    """Return a helper invoking the CLI against the temporary database."""

    def _invoke(*args, input=None):
        return cli_runner.invoke(cli, ["--db-path", temp_db.database_path, *args], input=input)

    return _invoke


@pytest.fixture
def store(invoke):
    """Seed the default chart and create 2024 (active) and 2025."""
    assert invoke("init-accounts").exit_code == 0
    assert invoke("period", "create", "2024", "--active").exit_code == 0
    assert invoke("period", "create", "2025").exit_code == 0


def test_help_does_not_need_database(cli_runner):
    result = cli_runner.invoke(cli, ["--help"])
    assert result.exit_code == 0
    assert "journal" in result.output
    assert "period" in result.output


def test_init_accounts_twice(invoke):
    result = invoke("init-accounts")
    assert result.exit_code == 0
    assert "Successfully created 26 accounts" in result.output

    result = invoke("init-accounts")
    assert result.exit_code == 0
    assert "skipped 26 existing codes" in result.output


def test_account_create_and_list(invoke, store):
    result = invoke(
        "account", "create", "1005", "Petty Cash",
        "--type", "asset", "--category", "current_asset", "--parent", "1000",
    )
    assert result.exit_code == 0
    assert "Created account 1005 'Petty Cash'" in result.output

    result = invoke("account", "list", "--type", "ASSET")
    assert result.exit_code == 0
    assert "Petty Cash" in result.output
    assert "Sales Revenue" not in result.output

    result = invoke("account", "create", "1005", "Again", "--type", "ASSET", "--category", "CURRENT_ASSET")
    assert result.exit_code == 1
    assert "Error" in result.output


def test_account_unknown_parent(invoke, store):
    result = invoke(
        "account", "create", "1006", "Till", "--type", "ASSET", "--category", "CURRENT_ASSET",
        "--parent", "9999",
    )
    assert result.exit_code == 1
    assert "9999" in result.output


def test_period_create_derives_range(invoke):
    result = invoke("period", "create", "2024-Q2")
    assert result.exit_code == 0
    assert "2024-04-01 - 2024-06-30" in result.output

    result = invoke("period", "create", "Opening", "--start", "2024-01-01")
    assert result.exit_code == 1


def test_opening_balance_set_and_list(invoke, store):
    result = invoke("period", "opening-balance", "set", "1001", "Rp 500,000")
    assert result.exit_code == 0
    assert "Opening balance of 1001 set to 500,000.00" in result.output

    result = invoke("period", "opening-balance", "list", "--period", "2024")
    assert result.exit_code == 0
    assert "Cash" in result.output

    result = invoke("report", "balance", "1001")
    assert "500,000.00 Dr" in result.output


def test_journal_add_rejects_unbalanced(invoke, store):
    result = invoke(
        "journal", "add", "Broken", "--date", "2024-01-02",
        "--line", "1001:100:", "--line", "3001::90",
    )
    assert result.exit_code == 1
    assert "Error" in result.output

    result = invoke("journal", "list")
    assert "No journal entries found." in result.output


def test_journal_add_rejects_malformed_line(invoke, store):
    result = invoke("journal", "add", "Broken", "--date", "2024-01-02", "--line", "1001-100")
    assert result.exit_code == 1
    assert "ACCOUNT_CODE:DEBIT:CREDIT" in result.output


def test_draft_post_and_reverse(invoke, store):
    result = invoke(
        "journal", "add", "Capital", "--date", "2024-01-02", "--draft",
        "--line", "1001:1000:", "--line", "3001::1000",
    )
    assert result.exit_code == 0
    assert "(draft" in result.output

    result = invoke("report", "balance", "1001")
    assert "Cash: 0.00 Dr" in result.output

    assert invoke("journal", "post", "1").exit_code == 0
    result = invoke("report", "balance", "1001")
    assert "Cash: 1,000.00 Dr" in result.output

    result = invoke("journal", "reverse", "1")
    assert result.exit_code == 0
    assert "Created reversal RV-20240102-0001" in result.output

    result = invoke("journal", "reverse", "1")
    assert result.exit_code == 1

    result = invoke("report", "balance", "1001")
    assert "Cash: 0.00 Dr" in result.output


def test_store_year_end_workflow(invoke, store):
    """Capital, an expense and a sale, then close 2024 into 2025."""
    result = invoke(
        "journal", "add", "Owner contribution", "--date", "2024-01-02",
        "--line", "1001:1000000:", "--line", "3001::1000000",
    )
    assert result.exit_code == 0
    assert "Created journal entry JR-20240102-0001 (posted, 1,000,000.00" in result.output

    result = invoke(
        "event", "stock-in", "PO-1", "300000", "--date", "2024-02-01",
    )
    assert result.exit_code == 0
    assert "Booked" in result.output

    result = invoke(
        "event", "sale", "SO-1", "500000", "--cost", "300000", "--date", "2024-02-10",
    )
    assert result.exit_code == 0

    result = invoke(
        "event", "expense", "EXP-1", "250000", "--category", "utilities", "--date", "2024-03-05",
    )
    assert result.exit_code == 0
    assert "Booked" in result.output

    result = invoke("report", "trial-balance")
    assert result.exit_code == 0
    assert "Balanced" in result.output
    assert "NOT BALANCED" not in result.output

    result = invoke("report", "income-statement")
    assert "Net income" in result.output
    assert "-50,000.00" in result.output

    result = invoke("report", "ledger", "1001")
    assert result.exit_code == 0
    assert "Closing balance: 950,000.00" in result.output

    result = invoke("period", "validate", "2024")
    assert result.exit_code == 0
    assert "Period can be closed." in result.output

    result = invoke("period", "close", "2024", input="n\n")
    assert "Closing cancelled." in result.output

    result = invoke("period", "close", "2024", "--yes")
    assert result.exit_code == 0
    assert "Closed period '2024'" in result.output
    assert "Net income: -50,000.00" in result.output

    result = invoke("period", "status", "2024")
    assert result.exit_code == 0
    assert "closed at" in result.output

    result = invoke("period", "close", "2024", "--yes")
    assert result.exit_code == 1

    result = invoke("report", "balance", "1001", "--period", "2025")
    assert "950,000.00 Dr" in result.output
    result = invoke("report", "balance", "3002", "--period", "2025")
    assert "50,000.00 Dr" in result.output

    result = invoke(
        "journal", "add", "Late", "--date", "2024-12-01", "--period", "2024",
        "--line", "1001:1:", "--line", "3001::1",
    )
    assert result.exit_code == 1


def test_validate_reports_issues(invoke):
    assert invoke("init-accounts").exit_code == 0
    assert invoke("period", "create", "2024", "--active").exit_code == 0

    result = invoke("period", "validate")
    assert result.exit_code == 1
    assert "No following accounting period" in result.output

    result = invoke("period", "close", "2024", "--yes")
    assert result.exit_code == 1
    assert "period cannot be closed" in result.output


def test_status_of_open_period(invoke, store):
    result = invoke("period", "status", "2024")
    assert result.exit_code == 0
    assert "Period is open." in result.output
