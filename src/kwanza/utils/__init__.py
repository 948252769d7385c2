"""Utility functions for kwanza."""

from kwanza.utils.date_parser import parse_date, parse_period, month_range, period_range
from kwanza.utils.amount_parser import parse_amount

__all__ = ["parse_date", "parse_period", "month_range", "period_range", "parse_amount"]
