"""CLI helpers for account and period resolution."""

from __future__ import annotations

import click

from storeledger.cli.error_handling import handle_domain_error
from storeledger.domain.account import AccountService
from storeledger.domain.period import PeriodService
from storeledger.utils.resolvers import resolve_account, resolve_period


def resolve_account_or_exit(
    ctx: click.Context, account_service: AccountService, code: str
) -> int:
    """Resolve an account code, or exit with a CLI error."""
    try:
        return resolve_account(account_service, code)
    except ValueError as exc:
        handle_domain_error(ctx, exc)


def resolve_period_or_exit(
    ctx: click.Context, period_service: PeriodService, period: str | None
) -> int:
    """Resolve a period name or ID (default: the active period), or exit with a CLI error."""
    try:
        return resolve_period(period_service, period)
    except ValueError as exc:
        handle_domain_error(ctx, exc)
