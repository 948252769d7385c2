"""CLI helpers for parsing compound option values."""

from decimal import Decimal

import click

from kwanza.domain.entities import ItemInput, ItemType, OpeningBalanceInput
from kwanza.utils.amount_parser import parse_amount
from kwanza.utils.date_parser import parse_period


def parse_item_spec(spec: str, default_type: ItemType = ItemType.PRODUCT) -> ItemInput:
    """Parse "DESC|QTY|PRICE[|TAX%[|TYPE[|RUBRICA[|DISCOUNT%]]]]" into an ItemInput.

    Raises:
        ValueError: If the item has too few fields or a bad number
    """
    parts = [part.strip() for part in spec.split("|")]
    if len(parts) < 3:
        raise ValueError(f"Item '{spec}' must be DESC|QTY|PRICE[|TAX%|TYPE|RUBRICA|DISCOUNT%]")

    description, quantity, price = parts[:3]
    tax_rate = parse_amount(parts[3]) if len(parts) > 3 and parts[3] else Decimal("0")
    item_type = ItemType(parts[4].upper()) if len(parts) > 4 and parts[4] else default_type
    rubrica = parts[5] if len(parts) > 5 and parts[5] else None
    discount = parse_amount(parts[6]) if len(parts) > 6 and parts[6] else Decimal("0")

    return ItemInput(
        description=description,
        quantity=parse_amount(quantity),
        unit_price=parse_amount(price),
        tax_rate=tax_rate,
        discount=discount,
        item_type=item_type,
        rubrica=rubrica,
    )


def parse_opening_row(spec: str) -> OpeningBalanceInput:
    """Parse "CODE|DESC|DEBIT|CREDIT" into an OpeningBalanceInput."""
    parts = [part.strip() for part in spec.split("|")]
    if len(parts) != 4:
        raise ValueError(f"Row '{spec}' must be CODE|DESC|DEBIT|CREDIT")
    code, description, debit, credit = parts
    return OpeningBalanceInput(
        account_code=code,
        description=description,
        debit=parse_amount(debit) if debit else Decimal("0"),
        credit=parse_amount(credit) if credit else Decimal("0"),
    )


def parse_assignments(values: tuple[str, ...]) -> list[tuple[str, str]]:
    """Parse repeated KEY=CODE options."""
    pairs = []
    for value in values:
        key, sep, code = value.partition("=")
        if not sep or not key.strip() or not code.strip():
            raise ValueError(f"Expected KEY=CODE, got '{value}'")
        pairs.append((key.strip(), code.strip()))
    return pairs


def period_argument(ctx: click.Context, param: click.Parameter, value: str | None) -> tuple[int, int] | None:
    """Click callback turning "2024-03" / "03/2024" into (year, month)."""
    if value is None:
        return None
    try:
        return parse_period(value)
    except ValueError as e:
        raise click.BadParameter(str(e), ctx=ctx, param=param)
