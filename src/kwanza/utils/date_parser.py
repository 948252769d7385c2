"""Date and accounting period parsing utilities."""

import re
from datetime import date, timedelta
from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

from kwanza.domain.errors import ValidationError, invalid_period


def parse_date(date_str: str) -> date:
    """Parse a date string into a date object.

    Supports ISO and day-first dates ("2024-01-15", "15/01/2024") and the
    relative forms "today", "yesterday", "this month" (first day) and
    "last month" (first day).

    Args:
        date_str: Date string

    Returns:
        Date object

    Raises:
        ValueError: If date string cannot be parsed
    """
    date_str = date_str.strip().lower()
    today = date.today()

    relative_dates = {
        "today": today,
        "hoje": today,
        "yesterday": today - timedelta(days=1),
        "this month": today.replace(day=1),
        "last month": (today - relativedelta(months=1)).replace(day=1),
    }
    if date_str in relative_dates:
        return relative_dates[date_str]

    # Angolan documents are written day first; ISO strings are unaffected.
    dayfirst = not re.match(r"^\d{4}-", date_str)
    try:
        return date_parser.parse(date_str, dayfirst=dayfirst).date()
    except (ValueError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")


def validate_period(year: int, month: int) -> None:
    """Raise ValidationError unless month is 1..12 and year is positive."""
    if not 1 <= month <= 12 or year < 1:
        raise ValidationError(invalid_period(year, month))


def month_range(year: int, month: int) -> tuple[date, date]:
    """First and last day of a month."""
    validate_period(year, month)
    start = date(year, month, 1)
    end = start + relativedelta(months=1) - timedelta(days=1)
    return (start, end)


def period_range(year: int, start_month: int = 1, end_month: int = 12) -> tuple[date, date]:
    """First day of start_month to last day of end_month, inclusive.

    Raises:
        ValidationError: If a month is invalid or start_month > end_month
    """
    start, _ = month_range(year, start_month)
    _, end = month_range(year, end_month)
    if start > end:
        raise ValidationError(f"Start month {start_month} is after end month {end_month}")
    return (start, end)


def parse_period(period_str: str) -> tuple[int, int]:
    """Parse a month reference into (year, month).

    Accepts "2024-03", "03/2024", "this-month" and "last-month".

    Raises:
        ValueError: If the string is not a recognized period
    """
    period_str = period_str.strip().lower()
    today = date.today()

    if period_str == "this-month":
        return (today.year, today.month)
    if period_str == "last-month":
        previous = today - relativedelta(months=1)
        return (previous.year, previous.month)

    match = re.match(r"^(\d{4})-(\d{1,2})$", period_str) or re.match(r"^(\d{1,2})/(\d{4})$", period_str)
    if match is None:
        raise ValueError(
            f"Unknown period: '{period_str}'. Supported formats: YYYY-MM, MM/YYYY, this-month, last-month"
        )
    first, second = match.groups()
    year, month = (int(first), int(second)) if len(first) == 4 else (int(second), int(first))
    validate_period(year, month)
    return (year, month)
