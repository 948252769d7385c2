"""Tests for domain entities."""

from datetime import date
from decimal import Decimal

import pytest

from kwanza.domain.entities import (
    AccountingEntry,
    ClassificationMode,
    EntryLine,
    InvoiceLineSource,
    VatCalculation,
    VatPosition,
)


def _entry(**kwargs):
    values = dict(
        key="INV-1-1",
        source=InvoiceLineSource(invoice_id=1, item_id=1),
        date=date(2024, 3, 15),
        doc_number="FT 2024/1",
        description="Consultoria",
        entity="Cliente",
    )
    values.update(kwargs)
    return AccountingEntry(**values)


class TestAccountingEntry:
    """Tests for AccountingEntry line expansion."""

    def test_iva_on_credit(self):
        entry = _entry(
            debit_account="31.1.2.1.123",
            credit_account="62.1",
            iva_account="34.5.3.1",
            debit_amount=Decimal("11400"),
            credit_amount=Decimal("10000"),
            iva_amount=Decimal("1400"),
        )
        lines = entry.lines()

        assert lines[2] == EntryLine("34.5.3.1", credit=Decimal("1400"))
        assert entry.is_balanced

    def test_iva_on_debit(self):
        entry = _entry(
            debit_account="71.1",
            credit_account="32.1",
            iva_account="34.5.2.1",
            debit_amount=Decimal("5000"),
            credit_amount=Decimal("5700"),
            iva_amount=Decimal("700"),
            iva_on_debit=True,
        )
        assert entry.lines()[2].debit == Decimal("700")
        assert entry.is_balanced

    def test_extra_lines_skip_zero(self):
        entry = _entry(
            debit_account="72.1",
            credit_account="36.1",
            debit_amount=Decimal("100"),
            credit_amount=Decimal("90"),
            extra_lines=(EntryLine("34.7", credit=Decimal("10")), EntryLine("37.2")),
        )
        assert [line.account_code for line in entry.lines()] == ["72.1", "36.1", "34.7"]
        assert entry.is_balanced

    def test_unbalanced(self):
        entry = _entry(debit_account="1", credit_account="2", debit_amount=Decimal("1"))
        assert not entry.is_balanced

    def test_entries_are_immutable(self):
        entry = _entry()
        with pytest.raises(AttributeError):
            entry.debit_account = "61.1"


class TestClassificationMode:
    """Tests for diary codes."""

    @pytest.mark.parametrize(
        "mode,diary",
        [
            (ClassificationMode.SALES, "0001"),
            (ClassificationMode.PURCHASES, "0002"),
            (ClassificationMode.SALARY_PROC, "0003"),
            (ClassificationMode.SALARY_PAY, "0004"),
        ],
    )
    def test_diary(self, mode, diary):
        assert mode.diary == diary


class TestVatCalculation:
    """Tests for VAT position."""

    @pytest.mark.parametrize(
        "balance,position",
        [("560", VatPosition.PAYABLE), ("-10", VatPosition.RECOVERABLE), ("0", VatPosition.NIL)],
    )
    def test_position(self, balance, position):
        zero = Decimal("0")
        calc = VatCalculation(2024, 3, zero, zero, zero, zero, zero, zero, Decimal(balance))
        assert calc.position == position
