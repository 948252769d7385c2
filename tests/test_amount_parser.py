"""Tests for amount parsing."""

import pytest
from decimal import Decimal

from kwanza.utils.amount_parser import parse_amount


@pytest.mark.parametrize(
    "text,expected",
    [
        ("1234.56", "1234.56"),
        ("1,234.56", "1234.56"),
        ("1.234,56", "1234.56"),
        ("150 000,00 Kz", "150000.00"),
        ("AOA 1234,5", "1234.5"),
        ("1.500.000", "1500000"),
        ("1,234", "1234"),
        ("12,5", "12.5"),
        ("(123.45)", "-123.45"),
        ("-50", "-50"),
    ],
)
def test_parse_amount(text, expected):
    assert parse_amount(text) == Decimal(expected)


@pytest.mark.parametrize("text", ["", "   ", "abc", "Kz", "inf", "-Infinity", "nan", "sNaN", "(inf)"])
def test_parse_amount_invalid(text):
    with pytest.raises(ValueError):
        parse_amount(text)
