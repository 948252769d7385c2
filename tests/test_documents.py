"""Tests for invoice, purchase and employee services."""

from datetime import date
from decimal import Decimal

import pytest

from kwanza.domain.documents import compute_item_totals
from kwanza.domain.entities import (
    EmployeeStatus,
    HrTransactionType,
    InvoiceStatus,
    InvoiceType,
    ItemInput,
    ItemType,
    PurchaseStatus,
    PurchaseType,
)
from kwanza.domain.errors import ConflictError, NotFoundError, ValidationError


def _items(*prices, **kwargs):
    return [ItemInput(description=f"Item {i}", quantity=Decimal("1"), unit_price=Decimal(p), **kwargs) for i, p in enumerate(prices)]


def test_item_totals_with_discount():
    """Discount applies before tax; both are rounded to cents."""
    item = ItemInput(
        description="Cadeira",
        quantity=Decimal("3"),
        unit_price=Decimal("333.33"),
        discount=Decimal("10"),
        tax_rate=Decimal("14"),
    )
    base, tax = compute_item_totals(item)
    # 999.99 * 0.9 = 899.991
    assert base == Decimal("899.99")
    assert tax == Decimal("126.00")


@pytest.mark.parametrize(
    "field,value,message",
    [
        ("quantity", Decimal("0"), "Quantity"),
        ("unit_price", Decimal("-1"), "Unit price"),
        ("discount", Decimal("101"), "Discount"),
        ("tax_rate", Decimal("-14"), "Tax rate"),
        ("description", " ", "description"),
    ],
)
def test_item_validation(field, value, message):
    values = {"description": "X", "quantity": Decimal("1"), "unit_price": Decimal("1")}
    values[field] = value
    with pytest.raises(ValidationError, match=message):
        compute_item_totals(ItemInput(**values))


def test_create_invoice_totals_and_defaults(invoice_service, sample_invoice):
    assert sample_invoice.subtotal == Decimal("10000.00")
    assert sample_invoice.tax_amount == Decimal("1400.00")
    assert sample_invoice.total == Decimal("11400.00")
    assert sample_invoice.status == InvoiceStatus.PENDING
    assert sample_invoice.items[0].rubrica == "62.1"


def test_product_rubrica_default_and_override(invoice_service):
    invoice_id = invoice_service.create_invoice(
        invoice_type=InvoiceType.FT,
        number="FT 2024/2",
        date=date(2024, 3, 1),
        client_name="Cliente",
        items=[
            ItemInput(description="Caneta", quantity=Decimal("2"), unit_price=Decimal("50")),
            ItemInput(description="Renda", quantity=Decimal("1"), unit_price=Decimal("100"), rubrica="65.1"),
        ],
    )
    items = invoice_service.get_invoice(invoice_id).items
    assert [item.rubrica for item in items] == ["61.1", "65.1"]
    assert items[0].item_type == ItemType.PRODUCT


def test_cash_invoice_is_paid(invoice_service):
    invoice_id = invoice_service.create_invoice(
        invoice_type=InvoiceType.FR, number="FR 1", date=date(2024, 3, 1), client_name="C", items=_items("10")
    )
    assert invoice_service.get_invoice(invoice_id).status == InvoiceStatus.PAID


def test_duplicate_invoice_number(invoice_service, sample_invoice):
    with pytest.raises(ConflictError, match="already exists"):
        invoice_service.create_invoice(
            invoice_type=InvoiceType.FT, number="FT 2024/1", date=date(2024, 3, 1), client_name="C", items=_items("1")
        )


def test_invoice_requires_items(invoice_service):
    with pytest.raises(ValidationError, match="at least one item"):
        invoice_service.create_invoice(
            invoice_type=InvoiceType.FT, number="FT 9", date=date(2024, 3, 1), client_name="C", items=[]
        )


def test_invalid_invoice_type(invoice_service):
    with pytest.raises(ValueError):
        invoice_service.create_invoice(
            invoice_type="XX", number="XX 1", date=date(2024, 3, 1), client_name="C", items=_items("1")
        )


def test_certify_rules(invoice_service, sample_invoice):
    with pytest.raises(ValidationError, match="already certified"):
        invoice_service.certify_invoice(sample_invoice.id)

    invoice_service.cancel_invoice(sample_invoice.id)
    with pytest.raises(ValidationError, match="already cancelled"):
        invoice_service.cancel_invoice(sample_invoice.id)
    with pytest.raises(ValidationError, match="cancelled"):
        invoice_service.mark_paid(sample_invoice.id)


def test_assign_rubrica(invoice_service, sample_invoice):
    item_id = sample_invoice.items[0].id
    invoice_service.assign_rubrica(sample_invoice.id, item_id, "62.2")
    assert invoice_service.get_invoice(sample_invoice.id).items[0].rubrica == "62.2"

    with pytest.raises(ValidationError):
        invoice_service.assign_rubrica(sample_invoice.id, item_id, "abc")
    with pytest.raises(NotFoundError):
        invoice_service.assign_rubrica(sample_invoice.id, item_id + 100, "62.2")


def test_get_missing_invoice(invoice_service):
    with pytest.raises(NotFoundError, match="Invoice 42 not found"):
        invoice_service.get_invoice(42)


def test_list_invoices_by_month(invoice_service, sample_invoice):
    assert len(invoice_service.list_invoices(2024, 3)) == 1
    assert invoice_service.list_invoices(2024, 4) == []
    assert len(invoice_service.list_invoices(2024)) == 1
    assert len(invoice_service.list_invoices()) == 1


def test_purchase_totals(sample_purchase):
    assert sample_purchase.subtotal == Decimal("5000.00")
    assert sample_purchase.tax_amount == Decimal("700.00")
    assert sample_purchase.status == PurchaseStatus.PAID
    assert sample_purchase.items[0].rubrica == "71.1"


def test_purchase_lifecycle(purchase_service):
    purchase_id = purchase_service.create_purchase(
        purchase_type=PurchaseType.FT,
        document_number="F-1",
        date=date(2024, 3, 1),
        supplier_name="Fornecedor",
        items=_items("100", "200", tax_rate=Decimal("14")),
    )
    purchase = purchase_service.get_purchase(purchase_id)
    assert purchase.status == PurchaseStatus.PENDING
    assert purchase.tax_amount == Decimal("42.00")

    purchase_service.cancel_purchase(purchase_id)
    with pytest.raises(ValidationError, match="cancelled"):
        purchase_service.mark_paid(purchase_id)


def test_purchase_assign_rubrica(purchase_service, sample_purchase):
    purchase_service.assign_rubrica(sample_purchase.id, sample_purchase.items[0].id, "75.2")
    assert purchase_service.get_purchase(sample_purchase.id).items[0].rubrica == "75.2"


def test_create_employee_validation(employee_service):
    with pytest.raises(ValidationError, match="name is required"):
        employee_service.create_employee(name=" ", base_salary=Decimal("1"))
    with pytest.raises(ValidationError, match="subsidy_food cannot be negative"):
        employee_service.create_employee(name="X", base_salary=Decimal("1"), subsidy_food=Decimal("-5"))


def test_employee_status(employee_service, sample_employee):
    employee_service.set_status(sample_employee.id, EmployeeStatus.ON_LEAVE)
    assert employee_service.get_employee(sample_employee.id).status == EmployeeStatus.ON_LEAVE
    assert employee_service.list_employees(EmployeeStatus.ACTIVE) == []
    assert len(employee_service.list_employees()) == 1


def test_record_transaction(employee_service, sample_employee):
    employee_service.record_transaction(sample_employee.id, date(2024, 3, 4), HrTransactionType.ADVANCE, Decimal("2000"))

    transactions = employee_service.list_transactions(sample_employee.id, 2024, 3)
    assert len(transactions) == 1
    assert transactions[0].transaction_type == HrTransactionType.ADVANCE
    assert not transactions[0].processed

    with pytest.raises(ValidationError, match="must be positive"):
        employee_service.record_transaction(sample_employee.id, date(2024, 3, 4), HrTransactionType.BONUS, Decimal("0"))
    with pytest.raises(NotFoundError):
        employee_service.record_transaction(999, date(2024, 3, 4), HrTransactionType.BONUS, Decimal("1"))
