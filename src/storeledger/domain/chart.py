"""Default chart of accounts and account designations."""

from dataclasses import dataclass, field
from typing import Optional

from storeledger.domain.entities import AccountCategory, AccountType, ExpenseCategory


@dataclass(frozen=True)
class AccountCodes:
    """Account codes the posting rules and the closing procedure resolve to."""

    cash: str = "1001"
    accounts_receivable: str = "1002"
    inventory: str = "1003"
    bank: str = "1004"
    accounts_payable: str = "2001"
    owner_equity: str = "3001"
    retained_earnings: str = "3002"
    sales_revenue: str = "4001"
    inventory_gain: str = "4002"
    cost_of_goods_sold: str = "5001"
    other_expense: str = "5004"
    inventory_loss: str = "5012"
    expense_categories: dict[ExpenseCategory, str] = field(
        default_factory=lambda: {
            ExpenseCategory.SALARY: "5002",
            ExpenseCategory.UTILITIES: "5003",
            ExpenseCategory.OFFICE_SUPPLIES: "5005",
            ExpenseCategory.TRANSPORTATION: "5006",
            ExpenseCategory.REPAIRS: "5007",
            ExpenseCategory.ADVERTISING: "5008",
            ExpenseCategory.TAXES: "5009",
            ExpenseCategory.INSURANCE: "5010",
            ExpenseCategory.RENT: "5011",
            ExpenseCategory.OTHER: "5004",
        }
    )

    def expense_code(self, category: ExpenseCategory) -> str:
        """Return the expense account code for a category, falling back to other expense."""
        return self.expense_categories.get(category, self.other_expense)


DEFAULT_ACCOUNT_CODES = AccountCodes()


# (code, name, type, category, parent code)
DEFAULT_CHART: list[tuple[str, str, AccountType, AccountCategory, Optional[str]]] = [
    ("1000", "Assets", AccountType.ASSET, AccountCategory.CURRENT_ASSET, None),
    ("1001", "Cash", AccountType.ASSET, AccountCategory.CURRENT_ASSET, "1000"),
    ("1002", "Accounts Receivable", AccountType.ASSET, AccountCategory.CURRENT_ASSET, "1000"),
    ("1003", "Inventory", AccountType.ASSET, AccountCategory.CURRENT_ASSET, "1000"),
    ("1004", "Bank", AccountType.ASSET, AccountCategory.CURRENT_ASSET, "1000"),
    ("2000", "Liabilities", AccountType.LIABILITY, AccountCategory.CURRENT_LIABILITY, None),
    ("2001", "Accounts Payable", AccountType.LIABILITY, AccountCategory.CURRENT_LIABILITY, "2000"),
    ("3000", "Equity", AccountType.EQUITY, AccountCategory.OWNER_EQUITY, None),
    ("3001", "Owner Equity", AccountType.EQUITY, AccountCategory.OWNER_EQUITY, "3000"),
    ("3002", "Retained Earnings", AccountType.EQUITY, AccountCategory.RETAINED_EARNINGS, "3000"),
    ("4000", "Revenue", AccountType.REVENUE, AccountCategory.OPERATING_REVENUE, None),
    ("4001", "Sales Revenue", AccountType.REVENUE, AccountCategory.OPERATING_REVENUE, "4000"),
    ("4002", "Inventory Adjustment Gain", AccountType.REVENUE, AccountCategory.OTHER_REVENUE, "4000"),
    ("5000", "Expenses", AccountType.EXPENSE, AccountCategory.OPERATING_EXPENSE, None),
    ("5001", "Cost of Goods Sold", AccountType.EXPENSE, AccountCategory.COST_OF_SALES, "5000"),
    ("5002", "Salary Expense", AccountType.EXPENSE, AccountCategory.OPERATING_EXPENSE, "5000"),
    ("5003", "Utility Expense", AccountType.EXPENSE, AccountCategory.OPERATING_EXPENSE, "5000"),
    ("5004", "Other Expense", AccountType.EXPENSE, AccountCategory.OTHER_EXPENSE, "5000"),
    ("5005", "Office Supplies Expense", AccountType.EXPENSE, AccountCategory.OPERATING_EXPENSE, "5000"),
    ("5006", "Transportation Expense", AccountType.EXPENSE, AccountCategory.OPERATING_EXPENSE, "5000"),
    ("5007", "Repair Expense", AccountType.EXPENSE, AccountCategory.OPERATING_EXPENSE, "5000"),
    ("5008", "Advertising Expense", AccountType.EXPENSE, AccountCategory.OPERATING_EXPENSE, "5000"),
    ("5009", "Tax Expense", AccountType.EXPENSE, AccountCategory.OPERATING_EXPENSE, "5000"),
    ("5010", "Insurance Expense", AccountType.EXPENSE, AccountCategory.OPERATING_EXPENSE, "5000"),
    ("5011", "Rent Expense", AccountType.EXPENSE, AccountCategory.OPERATING_EXPENSE, "5000"),
    ("5012", "Inventory Adjustment Loss", AccountType.EXPENSE, AccountCategory.OTHER_EXPENSE, "5000"),
]
