"""Tests for INSS and IRT calculators."""

from decimal import Decimal

import pytest

from kwanza.domain.taxes import (
    calculate_inss,
    calculate_inss_entity,
    calculate_irt,
    find_irt_bracket,
    round_currency,
    IRT_TABLE,
    IRT_TOP_BRACKET,
)


def test_inss_is_three_percent():
    assert calculate_inss(Decimal("150000")) == Decimal("4500.00")


def test_inss_entity_is_eight_percent():
    assert calculate_inss_entity(Decimal("150000")) == Decimal("12000.00")


@pytest.mark.parametrize("gross", [Decimal("0"), Decimal("-100"), 0])
def test_zero_or_negative_salary_has_no_tax(gross):
    assert calculate_inss(gross) == Decimal("0.00")
    assert calculate_inss_entity(gross) == Decimal("0.00")
    assert calculate_irt(gross, calculate_inss(gross)) == Decimal("0.00")


def test_inss_accepts_floats_without_binary_noise():
    assert calculate_inss(1000.10) == Decimal("30.00")


def test_irt_reference_salary():
    """150,000 gross: taxable 145,500 falls in the 10% bracket over 100,000."""
    inss = calculate_inss(Decimal("150000"))
    assert calculate_irt(Decimal("150000"), inss) == Decimal("4550.00")


def test_irt_exempt_up_to_100000_taxable():
    assert calculate_irt(Decimal("100000"), Decimal("0")) == Decimal("0.00")
    assert calculate_irt(Decimal("103000"), Decimal("3090")) == Decimal("0.00")


def test_irt_third_bracket():
    gross = Decimal("200000")
    inss = calculate_inss(gross)
    # taxable 194,000: (194,000 - 150,000) * 13% + 5,000
    assert calculate_irt(gross, inss) == Decimal("10720.00")


def test_irt_top_bracket():
    # taxable 20,000,000: (20M - 10M) * 25% + 2,173,500
    assert calculate_irt(Decimal("20000000"), Decimal("0")) == Decimal("4673500.00")


def test_brackets_are_continuous():
    """The fixed part of each bracket equals the tax at the previous limit."""
    brackets = list(IRT_TABLE) + [IRT_TOP_BRACKET]
    for previous, current in zip(brackets[1:], brackets[2:]):
        tax_at_limit = (previous.limit - previous.over) * previous.rate + previous.fixed
        assert current.fixed == tax_at_limit


def test_find_irt_bracket_boundaries():
    assert find_irt_bracket(Decimal("150000")).rate == Decimal("0.10")
    assert find_irt_bracket(Decimal("150000.01")).rate == Decimal("0.13")
    assert find_irt_bracket(Decimal("10000000.01")) is IRT_TOP_BRACKET


def test_round_currency_half_up():
    assert round_currency(Decimal("1.005")) == Decimal("1.01")
    assert round_currency(Decimal("1.004")) == Decimal("1.00")


@pytest.mark.parametrize("gross", ["50000", "150000", "350000", "1200000", "7500000", "25000000"])
def test_net_never_exceeds_gross(gross):
    gross = Decimal(gross)
    inss = calculate_inss(gross)
    irt = calculate_irt(gross, inss)
    assert inss >= 0 and irt >= 0
    assert gross - inss - irt <= gross
