"""Utilities for resolving operator input to account and period IDs."""

from storeledger.domain.account import AccountService
from storeledger.domain.errors import NotFoundError, account_code_not_found, no_active_period
from storeledger.domain.period import PeriodService


def resolve_account(account_service: AccountService, code: str) -> int:
    """Resolve an account code to its account ID.

    Codes are matched exactly, so "1001" is always a code and never an ID.

    Raises:
        NotFoundError: If no account has that code
    """
    account = account_service.get_account_by_code(code.strip())
    if account is None:
        raise NotFoundError(account_code_not_found(code))
    return account.id


def resolve_period(period_service: PeriodService, period: str | int | None) -> int:
    """Resolve a period name or ID to a period ID.

    ``None`` and "active" resolve to the active period. Names take precedence
    over IDs, so a period named "2024" is found by name.

    Raises:
        NotFoundError: If the period is not found
    """
    if period is None or (isinstance(period, str) and period.strip().lower() == "active"):
        active = period_service.get_active_period()
        if active is None:
            raise NotFoundError(no_active_period())
        return active.id

    if isinstance(period, int):
        return period_service.require_period(period).id

    name = period.strip()
    for candidate in period_service.list_periods():
        if candidate.name == name:
            return candidate.id

    try:
        period_id = int(name)
    except ValueError:
        raise NotFoundError(f"Accounting period '{name}' not found")
    return period_service.require_period(period_id).id
