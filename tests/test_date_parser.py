"""Tests for date parser with relative dates and period ranges."""

import pytest
from datetime import date, timedelta
from storeledger.utils.date_parser import parse_date, parse_period_range


def test_parse_absolute_date():
    """Test parsing absolute dates."""
    assert parse_date("2024-01-15") == date(2024, 1, 15)


def test_parse_today():
    """Test parsing 'today'."""
    assert parse_date("today") == date.today()


def test_parse_yesterday():
    """Test parsing 'yesterday'."""
    assert parse_date(" Yesterday ") == date.today() - timedelta(days=1)


def test_parse_this_month():
    """Test parsing 'this month'."""
    assert parse_date("this month") == date.today().replace(day=1)


def test_parse_last_year():
    """Test parsing 'last year'."""
    assert parse_date("last year") == date(date.today().year - 1, 1, 1)


def test_parse_invalid_date():
    """Test that invalid dates raise ValueError."""
    with pytest.raises(ValueError):
        parse_date("not a date")


@pytest.mark.parametrize(
    "name,expected",
    [
        ("2024", (date(2024, 1, 1), date(2024, 12, 31))),
        ("2024-02", (date(2024, 2, 1), date(2024, 2, 29))),
        ("2023-2", (date(2023, 2, 1), date(2023, 2, 28))),
        ("2024-q4", (date(2024, 10, 1), date(2024, 12, 31))),
        ("2024-Q1", (date(2024, 1, 1), date(2024, 3, 31))),
    ],
)
def test_parse_period_range(name, expected):
    """Test period names describing a year, a month or a quarter."""
    assert parse_period_range(name) == expected


@pytest.mark.parametrize("name", ["2024-13", "2024-Q5", "FY2024", ""])
def test_parse_period_range_invalid(name):
    """Test that unknown period names raise ValueError."""
    with pytest.raises(ValueError):
        parse_period_range(name)
