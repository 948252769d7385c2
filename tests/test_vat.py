"""Tests for VatSettlementService."""

from datetime import date
from decimal import Decimal

import pytest

from kwanza.domain.entities import InvoiceType, ItemInput, PurchaseType, VatPosition
from kwanza.domain.errors import ConflictError, ValidationError


def _item(price, tax="14"):
    return [ItemInput(description="Artigo", quantity=Decimal("1"), unit_price=Decimal(price), tax_rate=Decimal(tax))]


def test_empty_month_is_nil(vat_service):
    calc = vat_service.calculate(2024, 3)
    assert calc.balance == Decimal("0.00")
    assert calc.position == VatPosition.NIL
    assert calc.invoice_count == calc.purchase_count == 0


def test_liquidated_minus_deductible(vat_service, invoice_service, sample_invoice, sample_purchase):
    nc_id = invoice_service.create_invoice(
        invoice_type=InvoiceType.NC,
        number="NC 2024/1",
        date=date(2024, 3, 25),
        client_name="Cliente Exemplo",
        items=_item("1000"),
    )
    invoice_service.certify_invoice(nc_id)

    calc = vat_service.calculate(2024, 3)

    assert calc.iva_liquidado == Decimal("1260.00")
    assert calc.iva_dedutivel == Decimal("700.00")
    assert calc.total_credit == Decimal("1260.00")
    assert calc.total_debit == Decimal("700.00")
    assert calc.balance == Decimal("560.00")
    assert calc.position == VatPosition.PAYABLE
    assert calc.invoice_count == 2
    assert calc.purchase_count == 1


def test_documents_outside_the_ledger_are_ignored(vat_service, invoice_service, purchase_service):
    invoice_service.create_invoice(
        invoice_type=InvoiceType.FT, number="FT 2024/5", date=date(2024, 3, 1), client_name="C", items=_item("1000")
    )
    proforma = invoice_service.create_invoice(
        invoice_type=InvoiceType.PP, number="PP 2024/1", date=date(2024, 3, 1), client_name="C", items=_item("1000")
    )
    invoice_service.certify_invoice(proforma)
    purchase_service.create_purchase(
        purchase_type=PurchaseType.FT,
        document_number="F-7",
        date=date(2024, 3, 2),
        supplier_name="S",
        items=_item("1000"),
    )

    calc = vat_service.calculate(2024, 3)
    assert calc.iva_liquidado == Decimal("0.00")
    assert calc.iva_dedutivel == Decimal("0.00")


def test_supplier_credit_note_reduces_deductible(vat_service, purchase_service, sample_purchase):
    nc_id = purchase_service.create_purchase(
        purchase_type=PurchaseType.NC,
        document_number="NC-3",
        date=date(2024, 3, 28),
        supplier_name="Fornecedor X",
        items=_item("500"),
    )
    purchase_service.mark_paid(nc_id)

    assert vat_service.calculate(2024, 3).iva_dedutivel == Decimal("630.00")


def test_adjustments(vat_service, sample_purchase):
    calc = vat_service.calculate(2024, 3, sales_adjust=Decimal("100"), purchase_adjust=Decimal("50"))

    assert calc.total_credit == Decimal("100.00")
    assert calc.total_debit == Decimal("750.00")
    assert calc.balance == Decimal("-650.00")
    assert calc.position == VatPosition.RECOVERABLE


def test_other_months_are_ignored(vat_service, sample_invoice):
    assert vat_service.calculate(2024, 4).iva_liquidado == Decimal("0.00")


def test_invalid_month(vat_service):
    with pytest.raises(ValidationError):
        vat_service.calculate(2024, 0)


def test_register(vat_service, sample_invoice):
    settlement = vat_service.register(2024, 3)

    assert settlement.id is not None
    assert settlement.balance == Decimal("1400.00")
    assert settlement.total_credit == Decimal("1400.00")
    assert settlement.position == VatPosition.PAYABLE


def test_register_twice_is_rejected(vat_service):
    vat_service.register(2024, 3)
    with pytest.raises(ConflictError, match="already registered"):
        vat_service.register(2024, 3, sales_adjust=Decimal("1"))


def test_history_most_recent_first(vat_service):
    vat_service.register(2024, 2)
    vat_service.register(2024, 11)
    vat_service.register(2023, 12)

    assert [(s.year, s.month) for s in vat_service.history()] == [(2024, 11), (2024, 2), (2023, 12)]
