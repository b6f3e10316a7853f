"""Tests for resolving operator input to account and period IDs."""

import pytest
from datetime import date

from storeledger.domain.errors import NotFoundError
from storeledger.utils.resolvers import resolve_account, resolve_period


class TestResolveAccount:
    def test_by_code(self, account_service, chart):
        assert resolve_account(account_service, " 1001 ") == chart["1001"].id

    def test_code_is_never_an_id(self, account_service, chart):
        # Account IDs are small integers, but "1" is not a code in the chart
        with pytest.raises(NotFoundError):
            resolve_account(account_service, "1")

    def test_unknown_code(self, account_service, chart):
        with pytest.raises(NotFoundError):
            resolve_account(account_service, "9999")


class TestResolvePeriod:
    def test_active_by_default(self, period_service, period_2024, period_2025):
        assert resolve_period(period_service, None) == period_2024.id
        assert resolve_period(period_service, "active") == period_2024.id

    def test_no_active_period(self, period_service):
        with pytest.raises(NotFoundError):
            resolve_period(period_service, None)

    def test_by_name(self, period_service, period_2024, period_2025):
        assert resolve_period(period_service, "2025") == period_2025.id

    def test_by_id(self, period_service, period_2024, period_2025):
        assert resolve_period(period_service, str(period_2025.id)) == period_2025.id
        assert resolve_period(period_service, period_2024.id) == period_2024.id

    def test_name_wins_over_id(self, period_service, period_2024):
        named = period_service.create_period(
            str(period_2024.id), date(2023, 1, 1), date(2023, 12, 31)
        )
        assert resolve_period(period_service, str(period_2024.id)) == named.id

    def test_unknown_period(self, period_service, period_2024):
        with pytest.raises(NotFoundError):
            resolve_period(period_service, "2030")
        with pytest.raises(NotFoundError):
            resolve_period(period_service, "999")
