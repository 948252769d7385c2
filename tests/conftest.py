"""Shared pytest fixtures for kwanza tests."""

import tempfile
import os
from datetime import date
from decimal import Decimal
import pytest

from kwanza.database.factories import create_sqlite_database
from kwanza.domain.classification import ClassificationService
from kwanza.domain.documents import InvoiceService, PurchaseService, EmployeeService
from kwanza.domain.entities import InvoiceType, ItemInput, ItemType, PurchaseType
from kwanza.domain.ledger import LedgerService
from kwanza.domain.mapping import AccountMappingService
from kwanza.domain.payroll import PayrollService
from kwanza.domain.pgc import PGCService
from kwanza.domain.vat import VatSettlementService


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def pgc_service(temp_db):
    """Create a PGCService with a temporary database."""
    return PGCService(temp_db)


@pytest.fixture
def mapping_service(temp_db):
    """Create an AccountMappingService with a temporary database."""
    return AccountMappingService(temp_db)


@pytest.fixture
def invoice_service(temp_db):
    """Create an InvoiceService with a temporary database."""
    return InvoiceService(temp_db)


@pytest.fixture
def purchase_service(temp_db):
    """Create a PurchaseService with a temporary database."""
    return PurchaseService(temp_db)


@pytest.fixture
def employee_service(temp_db):
    """Create an EmployeeService with a temporary database."""
    return EmployeeService(temp_db)


@pytest.fixture
def payroll_service(temp_db):
    """Create a PayrollService with a temporary database."""
    return PayrollService(temp_db)


@pytest.fixture
def classification_service(temp_db):
    """Create a ClassificationService with a temporary database."""
    return ClassificationService(temp_db)


@pytest.fixture
def ledger_service(temp_db):
    """Create a LedgerService with a temporary database."""
    return LedgerService(temp_db)


@pytest.fixture
def vat_service(temp_db):
    """Create a VatSettlementService with a temporary database."""
    return VatSettlementService(temp_db)


@pytest.fixture
def seeded_pgc(pgc_service):
    """Seed the default chart of accounts."""
    pgc_service.seed_default_chart()
    return pgc_service


@pytest.fixture
def sample_invoice(invoice_service):
    """A certified FT: one 10,000 service at 14% for client code 123."""
    invoice_id = invoice_service.create_invoice(
        invoice_type=InvoiceType.FT,
        number="FT 2024/1",
        date=date(2024, 3, 15),
        client_name="Cliente Exemplo",
        client_code="123",
        items=[
            ItemInput(
                description="Consultoria",
                quantity=Decimal("1"),
                unit_price=Decimal("10000"),
                tax_rate=Decimal("14"),
                item_type=ItemType.SERVICE,
            )
        ],
    )
    invoice_service.certify_invoice(invoice_id)
    return invoice_service.get_invoice(invoice_id)


@pytest.fixture
def sample_purchase(purchase_service):
    """A paid FT purchase: 5,000 of goods at 14%."""
    purchase_id = purchase_service.create_purchase(
        purchase_type=PurchaseType.FT,
        document_number="F-889",
        date=date(2024, 3, 20),
        supplier_name="Fornecedor X",
        items=[
            ItemInput(
                description="Papel A4",
                quantity=Decimal("10"),
                unit_price=Decimal("500"),
                tax_rate=Decimal("14"),
            )
        ],
    )
    purchase_service.mark_paid(purchase_id)
    return purchase_service.get_purchase(purchase_id)


@pytest.fixture
def sample_employee(employee_service):
    """An active employee earning 150,000 with a 10,000 transport subsidy."""
    employee_id = employee_service.create_employee(
        name="Ana Silva",
        base_salary=Decimal("150000"),
        role="Contabilista",
        subsidy_transport=Decimal("10000"),
    )
    return employee_service.get_employee(employee_id)


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
