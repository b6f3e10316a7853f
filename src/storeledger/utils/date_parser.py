"""Date parsing utilities."""

import re
from datetime import date, timedelta
from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta


def parse_date(date_str: str) -> date:
    """Parse a date string into a date object.

    Supports various formats including relative dates:
    - Absolute dates: "2024-01-15", "January 15, 2024", etc.
    - Relative dates: "today", "yesterday", "last month", "this year", etc.

    Args:
        date_str: Date string in various formats

    Returns:
        Date object

    Raises:
        ValueError: If date string cannot be parsed
    """
    date_str = date_str.strip().lower()
    today = date.today()

    relative_dates = {
        "today": today,
        "yesterday": today - timedelta(days=1),
        "tomorrow": today + timedelta(days=1),
    }

    if date_str in relative_dates:
        return relative_dates[date_str]

    if date_str.startswith("last "):
        unit = date_str[5:]
        if unit == "month":
            return (today - relativedelta(months=1)).replace(day=1)
        elif unit == "year":
            return today.replace(month=1, day=1) - relativedelta(years=1)

    elif date_str.startswith("this "):
        unit = date_str[5:]
        if unit == "month":
            return today.replace(day=1)
        elif unit == "year":
            return today.replace(month=1, day=1)

    elif date_str.startswith("next "):
        unit = date_str[5:]
        if unit == "month":
            return (today + relativedelta(months=1)).replace(day=1)
        elif unit == "year":
            return today.replace(month=1, day=1) + relativedelta(years=1)

    try:
        dt = date_parser.parse(date_str)
        return dt.date()
    except (ValueError, TypeError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")


def parse_period_range(period: str) -> tuple[date, date]:
    """Get the start and end dates an accounting period name describes.

    Args:
        period: "2024" (calendar year), "2024-03" (month) or "2024-Q2" (quarter)

    Returns:
        Tuple of (start_date, end_date), both inclusive

    Raises:
        ValueError: If the period string is not recognized
    """
    period = period.strip().upper()

    if re.fullmatch(r"\d{4}", period):
        year = int(period)
        return (date(year, 1, 1), date(year, 12, 31))

    match = re.fullmatch(r"(\d{4})-(\d{1,2})", period)
    if match:
        year, month = int(match.group(1)), int(match.group(2))
        if not 1 <= month <= 12:
            raise ValueError(f"Invalid month in period '{period}'")
        start_date = date(year, month, 1)
        return (start_date, start_date + relativedelta(months=1) - timedelta(days=1))

    match = re.fullmatch(r"(\d{4})-Q([1-4])", period)
    if match:
        year, quarter = int(match.group(1)), int(match.group(2))
        start_date = date(year, 3 * (quarter - 1) + 1, 1)
        return (start_date, start_date + relativedelta(months=3) - timedelta(days=1))

    raise ValueError(
        f"Unknown period: '{period}'. Supported formats: YYYY, YYYY-MM, YYYY-Qn"
    )
