"""Abstract database interface."""

from abc import ABC, abstractmethod
from typing import Optional, Any
from datetime import date
from decimal import Decimal

# Import entities directly to avoid circular import through domain/__init__.py
from kwanza.domain.entities import (
    PGCAccount,
    Invoice,
    Purchase,
    Employee,
    HrTransaction,
    PayrollRun,
    SalarySlip,
    OpeningBalance,
    VatSettlement,
    JournalLine,
    AccountMappingEntry,
)


class Database(ABC):
    """Abstract database interface for kwanza."""

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    # PGC account operations
    @abstractmethod
    def create_pgc_account(
        self,
        code: str,
        description: str,
        account_type: str,
        nature: str,
        parent_code: Optional[str] = None,
        system_auto: bool = False,
    ) -> int:
        """Create a PGC account. Returns account ID."""
        pass

    @abstractmethod
    def get_pgc_account(self, account_id: int) -> Optional[PGCAccount]:
        """Get PGC account by ID."""
        pass

    @abstractmethod
    def get_pgc_account_by_code(self, code: str) -> Optional[PGCAccount]:
        """Get PGC account by code."""
        pass

    @abstractmethod
    def list_pgc_accounts(self) -> list[PGCAccount]:
        """List all PGC accounts."""
        pass

    @abstractmethod
    def update_pgc_account(
        self,
        account_id: int,
        code: str,
        description: str,
        account_type: str,
        nature: str,
        parent_code: Optional[str],
    ) -> None:
        """Update every editable field of a PGC account."""
        pass

    # Invoice operations
    @abstractmethod
    def create_invoice(
        self,
        invoice_type: str,
        number: str,
        date: date,
        client_name: str,
        subtotal: Decimal,
        tax_amount: Decimal,
        total: Decimal,
        items: list[dict[str, Any]],
        client_code: Optional[str] = None,
        client_nif: Optional[str] = None,
        status: str = "PENDING",
    ) -> int:
        """Create an invoice with its items. Returns invoice ID.

        Each item dict carries the InvoiceItem column values (item_type,
        description, quantity, unit_price, discount, tax_rate, total,
        tax_amount, rubrica).
        """
        pass

    @abstractmethod
    def get_invoice(self, invoice_id: int) -> Optional[Invoice]:
        """Get invoice (with items) by ID."""
        pass

    @abstractmethod
    def get_invoice_by_number(self, number: str) -> Optional[Invoice]:
        """Get invoice (with items) by document number."""
        pass

    @abstractmethod
    def list_invoices(self, start_date: Optional[date] = None, end_date: Optional[date] = None) -> list[Invoice]:
        """List invoices ordered by date, optionally within a date range."""
        pass

    @abstractmethod
    def update_invoice_status(self, invoice_id: int, status: str) -> None:
        """Update invoice status."""
        pass

    @abstractmethod
    def set_invoice_certified(self, invoice_id: int) -> None:
        """Mark an invoice as certified."""
        pass

    @abstractmethod
    def update_invoice_item_rubrica(self, invoice_id: int, item_id: int, rubrica: Optional[str]) -> None:
        """Set the rubrica (PGC code) of an invoice item."""
        pass

    # Purchase operations
    @abstractmethod
    def create_purchase(
        self,
        purchase_type: str,
        document_number: str,
        date: date,
        supplier_name: str,
        subtotal: Decimal,
        tax_amount: Decimal,
        total: Decimal,
        items: list[dict[str, Any]],
        supplier_nif: Optional[str] = None,
        status: str = "PENDING",
    ) -> int:
        """Create a purchase with its items. Returns purchase ID."""
        pass

    @abstractmethod
    def get_purchase(self, purchase_id: int) -> Optional[Purchase]:
        """Get purchase (with items) by ID."""
        pass

    @abstractmethod
    def list_purchases(self, start_date: Optional[date] = None, end_date: Optional[date] = None) -> list[Purchase]:
        """List purchases ordered by date, optionally within a date range."""
        pass

    @abstractmethod
    def update_purchase_status(self, purchase_id: int, status: str) -> None:
        """Update purchase status."""
        pass

    @abstractmethod
    def update_purchase_item_rubrica(self, purchase_id: int, item_id: int, rubrica: Optional[str]) -> None:
        """Set the rubrica (PGC code) of a purchase item."""
        pass

    # Employee operations
    @abstractmethod
    def create_employee(
        self,
        name: str,
        base_salary: Decimal,
        role: str = "",
        nif: Optional[str] = None,
        subsidy_transport: Decimal = Decimal("0"),
        subsidy_food: Decimal = Decimal("0"),
        subsidy_family: Decimal = Decimal("0"),
        subsidy_housing: Decimal = Decimal("0"),
        status: str = "ACTIVE",
    ) -> int:
        """Create an employee. Returns employee ID."""
        pass

    @abstractmethod
    def get_employee(self, employee_id: int) -> Optional[Employee]:
        """Get employee by ID."""
        pass

    @abstractmethod
    def list_employees(self, status: Optional[str] = None) -> list[Employee]:
        """List employees, optionally filtered by status."""
        pass

    @abstractmethod
    def update_employee_status(self, employee_id: int, status: str) -> None:
        """Update employee status."""
        pass

    # HR transaction operations
    @abstractmethod
    def create_hr_transaction(
        self,
        employee_id: int,
        date: date,
        transaction_type: str,
        amount: Decimal,
        description: Optional[str] = None,
    ) -> int:
        """Create a payroll variation. Returns transaction ID."""
        pass

    @abstractmethod
    def list_hr_transactions(
        self,
        employee_id: Optional[int] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        processed: Optional[bool] = None,
    ) -> list[HrTransaction]:
        """List payroll variations with optional filters."""
        pass

    # Payroll run operations
    @abstractmethod
    def create_payroll_run(
        self, year: int, month: int, slips: list[SalarySlip], transaction_ids: list[int]
    ) -> int:
        """Persist a certified run and mark its transactions processed atomically.

        Returns payroll run ID.
        """
        pass

    @abstractmethod
    def get_payroll_run(self, year: int, month: int) -> Optional[PayrollRun]:
        """Get the certified run of a month."""
        pass

    @abstractmethod
    def get_payroll_run_by_id(self, run_id: int) -> Optional[PayrollRun]:
        """Get a certified run by ID."""
        pass

    @abstractmethod
    def list_payroll_runs(self) -> list[PayrollRun]:
        """List certified runs ordered by period."""
        pass

    # Opening balance operations
    @abstractmethod
    def list_opening_balances(self, year: Optional[int] = None) -> list[OpeningBalance]:
        """List opening balances, optionally for one year."""
        pass

    @abstractmethod
    def replace_opening_balances(self, year: int, rows: list[dict[str, Any]]) -> int:
        """Replace all opening balances of a year atomically. Returns row count."""
        pass

    # VAT settlement operations
    @abstractmethod
    def create_vat_settlement(
        self,
        year: int,
        month: int,
        total_debit: Decimal,
        total_credit: Decimal,
        balance: Decimal,
        sales_adjust: Decimal,
        purchase_adjust: Decimal,
    ) -> int:
        """Register a VAT settlement. Returns settlement ID."""
        pass

    @abstractmethod
    def get_vat_settlement(self, year: int, month: int) -> Optional[VatSettlement]:
        """Get the registered settlement of a month."""
        pass

    @abstractmethod
    def list_vat_settlements(self) -> list[VatSettlement]:
        """List registered settlements, most recent period first."""
        pass

    # Journal operations
    @abstractmethod
    def post_journal(self, mode: str, lines: list[dict[str, Any]], source_keys: list[str]) -> int:
        """Write journal lines and mark source keys processed atomically.

        Returns the number of lines written.
        """
        pass

    @abstractmethod
    def list_journal_lines(
        self, start_date: Optional[date] = None, end_date: Optional[date] = None
    ) -> list[JournalLine]:
        """List journal lines ordered by date and ID."""
        pass

    @abstractmethod
    def list_processed_keys(self, mode: str) -> set[str]:
        """Get the source keys already classified for a mode."""
        pass

    # Account mapping operations
    @abstractmethod
    def list_account_mappings(self) -> list[AccountMappingEntry]:
        """List stored account mapping overrides."""
        pass

    @abstractmethod
    def set_account_mapping(self, key: str, account_code: str) -> None:
        """Create or update an account mapping override."""
        pass

    @abstractmethod
    def delete_account_mapping(self, key: str) -> bool:
        """Delete an override. Returns True if one existed."""
        pass
