"""Mapper functions to convert between domain models and SQLAlchemy models.

This layer isolates the conversion logic, so enum coercion and Decimal
handling live in one place instead of in every query.
"""

from decimal import Decimal

from kwanza.domain import entities as domain
from kwanza.database.models import (
    PGCAccount as ORMPGCAccount,
    Invoice as ORMInvoice,
    InvoiceItem as ORMInvoiceItem,
    Purchase as ORMPurchase,
    PurchaseItem as ORMPurchaseItem,
    Employee as ORMEmployee,
    HrTransaction as ORMHrTransaction,
    PayrollRun as ORMPayrollRun,
    SalarySlip as ORMSalarySlip,
    OpeningBalance as ORMOpeningBalance,
    VatSettlement as ORMVatSettlement,
    JournalLine as ORMJournalLine,
    AccountMapping as ORMAccountMapping,
)


def _money(value) -> Decimal:
    """Normalize a stored numeric value to a Decimal."""
    if value is None:
        return domain.ZERO
    return Decimal(value)


def pgc_account_to_domain(orm_account: ORMPGCAccount) -> domain.PGCAccount:
    """Convert SQLAlchemy PGCAccount model to domain PGCAccount entity."""
    return domain.PGCAccount(
        id=orm_account.id,
        code=orm_account.code,
        description=orm_account.description,
        account_type=domain.AccountType(orm_account.account_type),
        nature=domain.AccountNature(orm_account.nature),
        parent_code=orm_account.parent_code,
        system_auto=orm_account.system_auto,
        created_at=orm_account.created_at,
    )


def invoice_item_to_domain(orm_item: ORMInvoiceItem) -> domain.InvoiceItem:
    """Convert SQLAlchemy InvoiceItem model to domain InvoiceItem entity."""
    return domain.InvoiceItem(
        id=orm_item.id,
        item_type=domain.ItemType(orm_item.item_type),
        description=orm_item.description,
        quantity=_money(orm_item.quantity),
        unit_price=_money(orm_item.unit_price),
        discount=_money(orm_item.discount),
        tax_rate=_money(orm_item.tax_rate),
        total=_money(orm_item.total),
        tax_amount=_money(orm_item.tax_amount),
        rubrica=orm_item.rubrica,
    )


def invoice_to_domain(orm_invoice: ORMInvoice) -> domain.Invoice:
    """Convert SQLAlchemy Invoice model (with items) to domain Invoice entity."""
    return domain.Invoice(
        id=orm_invoice.id,
        invoice_type=domain.InvoiceType(orm_invoice.invoice_type),
        number=orm_invoice.number,
        date=orm_invoice.date,
        client_code=orm_invoice.client_code,
        client_name=orm_invoice.client_name,
        client_nif=orm_invoice.client_nif,
        subtotal=_money(orm_invoice.subtotal),
        tax_amount=_money(orm_invoice.tax_amount),
        total=_money(orm_invoice.total),
        status=domain.InvoiceStatus(orm_invoice.status),
        is_certified=orm_invoice.is_certified,
        items=tuple(invoice_item_to_domain(item) for item in orm_invoice.items),
    )


def purchase_item_to_domain(orm_item: ORMPurchaseItem) -> domain.PurchaseItem:
    """Convert SQLAlchemy PurchaseItem model to domain PurchaseItem entity."""
    return domain.PurchaseItem(
        id=orm_item.id,
        description=orm_item.description,
        quantity=_money(orm_item.quantity),
        unit_price=_money(orm_item.unit_price),
        discount=_money(orm_item.discount),
        tax_rate=_money(orm_item.tax_rate),
        total=_money(orm_item.total),
        tax_amount=_money(orm_item.tax_amount),
        rubrica=orm_item.rubrica,
    )


def purchase_to_domain(orm_purchase: ORMPurchase) -> domain.Purchase:
    """Convert SQLAlchemy Purchase model (with items) to domain Purchase entity."""
    return domain.Purchase(
        id=orm_purchase.id,
        purchase_type=domain.PurchaseType(orm_purchase.purchase_type),
        document_number=orm_purchase.document_number,
        date=orm_purchase.date,
        supplier_name=orm_purchase.supplier_name,
        supplier_nif=orm_purchase.supplier_nif,
        subtotal=_money(orm_purchase.subtotal),
        tax_amount=_money(orm_purchase.tax_amount),
        total=_money(orm_purchase.total),
        status=domain.PurchaseStatus(orm_purchase.status),
        items=tuple(purchase_item_to_domain(item) for item in orm_purchase.items),
    )


def employee_to_domain(orm_employee: ORMEmployee) -> domain.Employee:
    """Convert SQLAlchemy Employee model to domain Employee entity."""
    return domain.Employee(
        id=orm_employee.id,
        name=orm_employee.name,
        role=orm_employee.role,
        nif=orm_employee.nif,
        base_salary=_money(orm_employee.base_salary),
        status=domain.EmployeeStatus(orm_employee.status),
        subsidy_transport=_money(orm_employee.subsidy_transport),
        subsidy_food=_money(orm_employee.subsidy_food),
        subsidy_family=_money(orm_employee.subsidy_family),
        subsidy_housing=_money(orm_employee.subsidy_housing),
    )


def hr_transaction_to_domain(orm_transaction: ORMHrTransaction) -> domain.HrTransaction:
    """Convert SQLAlchemy HrTransaction model to domain HrTransaction entity."""
    return domain.HrTransaction(
        id=orm_transaction.id,
        employee_id=orm_transaction.employee_id,
        date=orm_transaction.date,
        transaction_type=domain.HrTransactionType(orm_transaction.transaction_type),
        amount=_money(orm_transaction.amount),
        description=orm_transaction.description,
        processed=orm_transaction.processed,
    )


def salary_slip_to_domain(orm_slip: ORMSalarySlip, year: int, month: int) -> domain.SalarySlip:
    """Convert SQLAlchemy SalarySlip model to domain SalarySlip entity."""
    return domain.SalarySlip(
        employee_id=orm_slip.employee_id,
        employee_name=orm_slip.employee_name,
        employee_role=orm_slip.employee_role,
        year=year,
        month=month,
        base_salary=_money(orm_slip.base_salary),
        bonuses=_money(orm_slip.bonuses),
        allowances=_money(orm_slip.allowances),
        subsidy_transport=_money(orm_slip.subsidy_transport),
        subsidy_food=_money(orm_slip.subsidy_food),
        subsidy_family=_money(orm_slip.subsidy_family),
        subsidy_housing=_money(orm_slip.subsidy_housing),
        absences=_money(orm_slip.absences),
        advances=_money(orm_slip.advances),
        gross_total=_money(orm_slip.gross_total),
        inss=_money(orm_slip.inss),
        irt=_money(orm_slip.irt),
        net_total=_money(orm_slip.net_total),
        inss_employer=_money(orm_slip.inss_employer),
    )


def payroll_run_to_domain(orm_run: ORMPayrollRun) -> domain.PayrollRun:
    """Convert SQLAlchemy PayrollRun model (with slips) to domain PayrollRun entity."""
    return domain.PayrollRun(
        id=orm_run.id,
        year=orm_run.year,
        month=orm_run.month,
        certified_at=orm_run.certified_at,
        slips=tuple(salary_slip_to_domain(slip, orm_run.year, orm_run.month) for slip in orm_run.slips),
    )


def opening_balance_to_domain(orm_balance: ORMOpeningBalance) -> domain.OpeningBalance:
    """Convert SQLAlchemy OpeningBalance model to domain OpeningBalance entity."""
    return domain.OpeningBalance(
        id=orm_balance.id,
        account_code=orm_balance.account_code,
        description=orm_balance.description,
        debit=_money(orm_balance.debit),
        credit=_money(orm_balance.credit),
        year=orm_balance.year,
        balance_type=domain.BalanceType(orm_balance.balance_type),
    )


def vat_settlement_to_domain(orm_settlement: ORMVatSettlement) -> domain.VatSettlement:
    """Convert SQLAlchemy VatSettlement model to domain VatSettlement entity."""
    return domain.VatSettlement(
        id=orm_settlement.id,
        year=orm_settlement.year,
        month=orm_settlement.month,
        total_debit=_money(orm_settlement.total_debit),
        total_credit=_money(orm_settlement.total_credit),
        balance=_money(orm_settlement.balance),
        sales_adjust=_money(orm_settlement.sales_adjust),
        purchase_adjust=_money(orm_settlement.purchase_adjust),
        status=orm_settlement.status,
        processed_at=orm_settlement.processed_at,
    )


def journal_line_to_domain(orm_line: ORMJournalLine) -> domain.JournalLine:
    """Convert SQLAlchemy JournalLine model to domain JournalLine entity."""
    return domain.JournalLine(
        id=orm_line.id,
        diary=orm_line.diary,
        doc_number=orm_line.doc_number,
        date=orm_line.date,
        account_code=orm_line.account_code,
        description=orm_line.description,
        debit=_money(orm_line.debit),
        credit=_money(orm_line.credit),
        source_key=orm_line.source_key,
        posted_at=orm_line.posted_at,
    )


def account_mapping_to_domain(orm_mapping: ORMAccountMapping) -> domain.AccountMappingEntry:
    """Convert SQLAlchemy AccountMapping model to domain AccountMappingEntry entity."""
    return domain.AccountMappingEntry(
        id=orm_mapping.id,
        key=orm_mapping.key,
        account_code=orm_mapping.account_code,
    )
