"""Angolan salary withholding calculators (INSS and IRT).

All functions are pure: they take a monthly amount in AOA and return the
withholding rounded to cents. Zero or negative salaries yield zero tax.
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import NamedTuple, Union

Number = Union[Decimal, int, float, str]

CENT = Decimal("0.01")

INSS_EMPLOYEE_RATE = Decimal("0.03")
INSS_EMPLOYER_RATE = Decimal("0.08")


class IRTBracket(NamedTuple):
    """IRT bracket: tax = (income - over) * rate + fixed, for income <= limit."""

    limit: Decimal
    rate: Decimal
    fixed: Decimal
    over: Decimal


IRT_TABLE: tuple[IRTBracket, ...] = (
    IRTBracket(Decimal("100000"), Decimal("0.00"), Decimal("0"), Decimal("0")),
    IRTBracket(Decimal("150000"), Decimal("0.10"), Decimal("0"), Decimal("100000")),
    IRTBracket(Decimal("200000"), Decimal("0.13"), Decimal("5000"), Decimal("150000")),
    IRTBracket(Decimal("300000"), Decimal("0.16"), Decimal("11500"), Decimal("200000")),
    IRTBracket(Decimal("500000"), Decimal("0.18"), Decimal("27500"), Decimal("300000")),
    IRTBracket(Decimal("1000000"), Decimal("0.19"), Decimal("63500"), Decimal("500000")),
    IRTBracket(Decimal("1500000"), Decimal("0.20"), Decimal("158500"), Decimal("1000000")),
    IRTBracket(Decimal("2000000"), Decimal("0.21"), Decimal("258500"), Decimal("1500000")),
    IRTBracket(Decimal("5000000"), Decimal("0.22"), Decimal("363500"), Decimal("2000000")),
    IRTBracket(Decimal("10000000"), Decimal("0.23"), Decimal("1023500"), Decimal("5000000")),
)

# Applies to everything above the last limit in IRT_TABLE.
IRT_TOP_BRACKET = IRTBracket(Decimal("Infinity"), Decimal("0.25"), Decimal("2173500"), Decimal("10000000"))


def to_decimal(value: Number) -> Decimal:
    """Convert a number to Decimal without going through binary floats."""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    return Decimal(value)


def round_currency(value: Number) -> Decimal:
    """Round an amount to cents (half up)."""
    return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def calculate_inss(gross: Number) -> Decimal:
    """Employee social security contribution (3% of gross)."""
    gross = to_decimal(gross)
    if gross <= 0:
        return round_currency(0)
    return round_currency(gross * INSS_EMPLOYEE_RATE)


def calculate_inss_entity(gross: Number) -> Decimal:
    """Employer social security contribution (8% of gross)."""
    gross = to_decimal(gross)
    if gross <= 0:
        return round_currency(0)
    return round_currency(gross * INSS_EMPLOYER_RATE)


def find_irt_bracket(taxable: Number) -> IRTBracket:
    """Return the bracket that applies to a taxable income."""
    taxable = to_decimal(taxable)
    for bracket in IRT_TABLE:
        if taxable <= bracket.limit:
            return bracket
    return IRT_TOP_BRACKET


def calculate_irt(gross: Number, inss: Number) -> Decimal:
    """Income tax on work (IRT) withheld from a monthly salary.

    The taxable income is the gross salary minus the employee INSS
    contribution; the progressive table is applied on top of that.

    Args:
        gross: Gross monthly salary
        inss: Employee INSS already computed for the same gross

    Returns:
        IRT amount rounded to cents
    """
    taxable = to_decimal(gross) - to_decimal(inss)
    if taxable <= 0:
        return round_currency(0)
    bracket = find_irt_bracket(taxable)
    tax = (taxable - bracket.over) * bracket.rate + bracket.fixed
    return round_currency(max(tax, Decimal("0")))
