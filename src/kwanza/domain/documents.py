"""Document registration services: invoices, purchases and employees."""

import logging
from datetime import date
from decimal import Decimal
from typing import Optional, Any

from kwanza.database.base import Database
from kwanza.domain.entities import (
    ZERO,
    Invoice,
    InvoiceType,
    InvoiceStatus,
    ItemInput,
    ItemType,
    Purchase,
    PurchaseType,
    PurchaseStatus,
    Employee,
    EmployeeStatus,
    HrTransaction,
    HrTransactionType,
)
from kwanza.domain.errors import (
    ValidationError,
    NotFoundError,
    ConflictError,
    invoice_not_found,
    purchase_not_found,
    employee_not_found,
)
from kwanza.domain.mapping import AccountMappingService
from kwanza.domain.pgc import is_valid_code
from kwanza.domain.taxes import round_currency, to_decimal
from kwanza.utils.date_parser import month_range, period_range

logger = logging.getLogger(__name__)

HUNDRED = Decimal("100")

# Invoice types settled on issue.
_CASH_INVOICE_TYPES = frozenset({InvoiceType.FR, InvoiceType.VD})


def compute_item_totals(item: ItemInput) -> tuple[Decimal, Decimal]:
    """Net base and tax of a line: qty * price * (1 - discount%), then tax%."""
    quantity = to_decimal(item.quantity)
    unit_price = to_decimal(item.unit_price)
    discount = to_decimal(item.discount)
    tax_rate = to_decimal(item.tax_rate)

    if not item.description or not item.description.strip():
        raise ValidationError("Item description is required")
    if quantity <= 0:
        raise ValidationError(f"Quantity must be positive, got {quantity}")
    if unit_price < 0:
        raise ValidationError(f"Unit price cannot be negative, got {unit_price}")
    if not ZERO <= discount <= HUNDRED:
        raise ValidationError(f"Discount must be between 0 and 100, got {discount}")
    if tax_rate < 0:
        raise ValidationError(f"Tax rate cannot be negative, got {tax_rate}")

    base = round_currency(quantity * unit_price * (1 - discount / HUNDRED))
    tax = round_currency(base * tax_rate / HUNDRED)
    return base, tax


def _item_row(item: ItemInput, rubrica: str) -> dict[str, Any]:
    base, tax = compute_item_totals(item)
    if not is_valid_code(rubrica):
        raise ValidationError(f"Invalid rubrica '{rubrica}'")
    return {
        "description": item.description.strip(),
        "quantity": to_decimal(item.quantity),
        "unit_price": to_decimal(item.unit_price),
        "discount": to_decimal(item.discount),
        "tax_rate": to_decimal(item.tax_rate),
        "total": base,
        "tax_amount": tax,
        "rubrica": rubrica,
    }


class InvoiceService:
    """Service for sales documents."""

    def __init__(self, db: Database):
        """Initialize invoice service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_invoice(
        self,
        invoice_type: InvoiceType,
        number: str,
        date: date,
        client_name: str,
        items: list[ItemInput],
        client_code: Optional[str] = None,
        client_nif: Optional[str] = None,
    ) -> int:
        """Create a sales document and compute its totals.

        Item rubricas default to the product/service revenue accounts of
        the account mapping.

        Args:
            invoice_type: Document type (FT, FR, NC, ...)
            number: Document number (unique)
            date: Document date
            client_name: Client name
            items: Document lines
            client_code: Optional client code (drives the client sub-account)
            client_nif: Optional client tax number

        Returns:
            Invoice ID

        Raises:
            ValidationError: If the document or an item is invalid
            ConflictError: If the number is already used
        """
        invoice_type = InvoiceType(invoice_type)
        if not number or not number.strip():
            raise ValidationError("Document number is required")
        if not client_name or not client_name.strip():
            raise ValidationError("Client name is required")
        if not items:
            raise ValidationError("A document needs at least one item")
        if self.db.get_invoice_by_number(number.strip()) is not None:
            raise ConflictError(f"Invoice number '{number}' already exists")

        mapping = AccountMappingService(self.db).get_mapping()
        rows = []
        for item in items:
            item_type = ItemType(item.item_type)
            default = (
                mapping.sales_revenue_service if item_type == ItemType.SERVICE else mapping.sales_revenue_product
            )
            row = _item_row(item, item.rubrica or default)
            row["item_type"] = item_type.value
            rows.append(row)

        subtotal = sum((row["total"] for row in rows), ZERO)
        tax_amount = sum((row["tax_amount"] for row in rows), ZERO)
        status = InvoiceStatus.PAID if invoice_type in _CASH_INVOICE_TYPES else InvoiceStatus.PENDING

        invoice_id = self.db.create_invoice(
            invoice_type=invoice_type.value,
            number=number.strip(),
            date=date,
            client_name=client_name.strip(),
            subtotal=subtotal,
            tax_amount=tax_amount,
            total=subtotal + tax_amount,
            items=rows,
            client_code=client_code,
            client_nif=client_nif,
            status=status.value,
        )
        logger.info("Created %s %s (total %s)", invoice_type.value, number, subtotal + tax_amount)
        return invoice_id

    def get_invoice(self, invoice_id: int) -> Invoice:
        """Get invoice by ID.

        Raises:
            NotFoundError: If the invoice does not exist
        """
        invoice = self.db.get_invoice(invoice_id)
        if invoice is None:
            raise NotFoundError(invoice_not_found(invoice_id))
        return invoice

    def certify_invoice(self, invoice_id: int) -> None:
        """Certify a document; only certified documents reach the ledger.

        Raises:
            NotFoundError: If the invoice does not exist
            ValidationError: If it is cancelled or already certified
        """
        invoice = self.get_invoice(invoice_id)
        if invoice.status == InvoiceStatus.CANCELLED:
            raise ValidationError(f"Invoice {invoice.number} is cancelled")
        if invoice.is_certified:
            raise ValidationError(f"Invoice {invoice.number} is already certified")
        self.db.set_invoice_certified(invoice_id)
        logger.info("Certified invoice %s", invoice.number)

    def cancel_invoice(self, invoice_id: int) -> None:
        """Cancel a document.

        Raises:
            NotFoundError: If the invoice does not exist
            ValidationError: If it is already cancelled
        """
        invoice = self.get_invoice(invoice_id)
        if invoice.status == InvoiceStatus.CANCELLED:
            raise ValidationError(f"Invoice {invoice.number} is already cancelled")
        self.db.update_invoice_status(invoice_id, InvoiceStatus.CANCELLED.value)
        logger.info("Cancelled invoice %s", invoice.number)

    def mark_paid(self, invoice_id: int) -> None:
        """Mark a pending document as paid."""
        invoice = self.get_invoice(invoice_id)
        if invoice.status == InvoiceStatus.CANCELLED:
            raise ValidationError(f"Invoice {invoice.number} is cancelled")
        self.db.update_invoice_status(invoice_id, InvoiceStatus.PAID.value)

    def assign_rubrica(self, invoice_id: int, item_id: int, rubrica: str) -> None:
        """Set the revenue account of an invoice item.

        Raises:
            NotFoundError: If the invoice or item does not exist
            ValidationError: If the code is malformed
        """
        invoice = self.get_invoice(invoice_id)
        if not is_valid_code(rubrica):
            raise ValidationError(f"Invalid rubrica '{rubrica}'")
        if item_id not in {item.id for item in invoice.items}:
            raise NotFoundError(f"Item {item_id} not found on invoice {invoice.number}")
        self.db.update_invoice_item_rubrica(invoice_id, item_id, rubrica)

    def list_invoices(self, year: Optional[int] = None, month: Optional[int] = None) -> list[Invoice]:
        """List invoices, optionally restricted to a year or a month."""
        start, end = _range(year, month)
        return self.db.list_invoices(start_date=start, end_date=end)


class PurchaseService:
    """Service for supplier documents."""

    def __init__(self, db: Database):
        """Initialize purchase service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_purchase(
        self,
        purchase_type: PurchaseType,
        document_number: str,
        date: date,
        supplier_name: str,
        items: list[ItemInput],
        supplier_nif: Optional[str] = None,
    ) -> int:
        """Create a supplier document and compute its totals.

        Item rubricas default to the purchase cost account of the mapping.

        Returns:
            Purchase ID

        Raises:
            ValidationError: If the document or an item is invalid
        """
        purchase_type = PurchaseType(purchase_type)
        if not document_number or not document_number.strip():
            raise ValidationError("Document number is required")
        if not supplier_name or not supplier_name.strip():
            raise ValidationError("Supplier name is required")
        if not items:
            raise ValidationError("A document needs at least one item")

        mapping = AccountMappingService(self.db).get_mapping()
        rows = [_item_row(item, item.rubrica or mapping.purchase_cost) for item in items]
        subtotal = sum((row["total"] for row in rows), ZERO)
        tax_amount = sum((row["tax_amount"] for row in rows), ZERO)

        purchase_id = self.db.create_purchase(
            purchase_type=purchase_type.value,
            document_number=document_number.strip(),
            date=date,
            supplier_name=supplier_name.strip(),
            subtotal=subtotal,
            tax_amount=tax_amount,
            total=subtotal + tax_amount,
            items=rows,
            supplier_nif=supplier_nif,
        )
        logger.info("Created purchase %s from %s", document_number, supplier_name)
        return purchase_id

    def get_purchase(self, purchase_id: int) -> Purchase:
        """Get purchase by ID.

        Raises:
            NotFoundError: If the purchase does not exist
        """
        purchase = self.db.get_purchase(purchase_id)
        if purchase is None:
            raise NotFoundError(purchase_not_found(purchase_id))
        return purchase

    def mark_paid(self, purchase_id: int) -> None:
        """Mark a purchase paid; only paid purchases are classified and deducted."""
        purchase = self.get_purchase(purchase_id)
        if purchase.status == PurchaseStatus.CANCELLED:
            raise ValidationError(f"Purchase {purchase.document_number} is cancelled")
        self.db.update_purchase_status(purchase_id, PurchaseStatus.PAID.value)
        logger.info("Purchase %s marked paid", purchase.document_number)

    def cancel_purchase(self, purchase_id: int) -> None:
        """Cancel a purchase."""
        purchase = self.get_purchase(purchase_id)
        if purchase.status == PurchaseStatus.CANCELLED:
            raise ValidationError(f"Purchase {purchase.document_number} is already cancelled")
        self.db.update_purchase_status(purchase_id, PurchaseStatus.CANCELLED.value)

    def assign_rubrica(self, purchase_id: int, item_id: int, rubrica: str) -> None:
        """Set the cost account of a purchase item."""
        purchase = self.get_purchase(purchase_id)
        if not is_valid_code(rubrica):
            raise ValidationError(f"Invalid rubrica '{rubrica}'")
        if item_id not in {item.id for item in purchase.items}:
            raise NotFoundError(f"Item {item_id} not found on purchase {purchase.document_number}")
        self.db.update_purchase_item_rubrica(purchase_id, item_id, rubrica)

    def list_purchases(self, year: Optional[int] = None, month: Optional[int] = None) -> list[Purchase]:
        """List purchases, optionally restricted to a year or a month."""
        start, end = _range(year, month)
        return self.db.list_purchases(start_date=start, end_date=end)


class EmployeeService:
    """Service for employees and their monthly payroll variations."""

    def __init__(self, db: Database):
        """Initialize employee service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_employee(
        self,
        name: str,
        base_salary: Decimal,
        role: str = "",
        nif: Optional[str] = None,
        subsidy_transport: Decimal = ZERO,
        subsidy_food: Decimal = ZERO,
        subsidy_family: Decimal = ZERO,
        subsidy_housing: Decimal = ZERO,
    ) -> int:
        """Create an employee.

        Raises:
            ValidationError: If the name is missing or an amount is negative
        """
        if not name or not name.strip():
            raise ValidationError("Employee name is required")
        amounts = {
            "base_salary": base_salary,
            "subsidy_transport": subsidy_transport,
            "subsidy_food": subsidy_food,
            "subsidy_family": subsidy_family,
            "subsidy_housing": subsidy_housing,
        }
        for field_name, value in amounts.items():
            if to_decimal(value) < 0:
                raise ValidationError(f"{field_name} cannot be negative")

        return self.db.create_employee(
            name=name.strip(),
            role=role,
            nif=nif,
            **{key: round_currency(value) for key, value in amounts.items()},
        )

    def get_employee(self, employee_id: int) -> Employee:
        """Get employee by ID.

        Raises:
            NotFoundError: If the employee does not exist
        """
        employee = self.db.get_employee(employee_id)
        if employee is None:
            raise NotFoundError(employee_not_found(employee_id))
        return employee

    def list_employees(self, status: Optional[EmployeeStatus] = None) -> list[Employee]:
        """List employees, optionally filtered by status."""
        return self.db.list_employees(status=EmployeeStatus(status).value if status else None)

    def set_status(self, employee_id: int, status: EmployeeStatus) -> None:
        """Change employment status."""
        self.get_employee(employee_id)
        self.db.update_employee_status(employee_id, EmployeeStatus(status).value)

    def record_transaction(
        self,
        employee_id: int,
        date: date,
        transaction_type: HrTransactionType,
        amount: Decimal,
        description: Optional[str] = None,
    ) -> int:
        """Record a bonus, allowance, absence or advance.

        Raises:
            NotFoundError: If the employee does not exist
            ValidationError: If the amount is not positive
        """
        self.get_employee(employee_id)
        amount = round_currency(amount)
        if amount <= 0:
            raise ValidationError(f"Amount must be positive, got {amount}")
        return self.db.create_hr_transaction(
            employee_id=employee_id,
            date=date,
            transaction_type=HrTransactionType(transaction_type).value,
            amount=amount,
            description=description,
        )

    def list_transactions(
        self,
        employee_id: Optional[int] = None,
        year: Optional[int] = None,
        month: Optional[int] = None,
    ) -> list[HrTransaction]:
        """List payroll variations, optionally by employee and period."""
        start, end = _range(year, month)
        return self.db.list_hr_transactions(employee_id=employee_id, start_date=start, end_date=end)


def _range(year: Optional[int], month: Optional[int]) -> tuple[Optional[date], Optional[date]]:
    if year is None:
        return (None, None)
    if month is None:
        return period_range(year)
    return month_range(year, month)
