"""Utility functions for storeledger."""

from storeledger.utils.date_parser import parse_date, parse_period_range
from storeledger.utils.amount_parser import parse_amount, parse_non_negative_amount
from storeledger.utils.resolvers import resolve_account, resolve_period

__all__ = [
    "parse_date",
    "parse_period_range",
    "parse_amount",
    "parse_non_negative_amount",
    "resolve_account",
    "resolve_period",
]
