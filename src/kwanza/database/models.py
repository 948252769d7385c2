"""SQLAlchemy models for kwanza database."""

from datetime import datetime, UTC
from sqlalchemy import (
    Column,
    Integer,
    String,
    ForeignKey,
    DateTime,
    Date,
    Numeric,
    Boolean,
    UniqueConstraint,
    create_engine,
)
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, Session

Base = declarative_base()

MONEY = Numeric(14, 2)


def _now() -> datetime:
    return datetime.now(UTC)


class PGCAccount(Base):
    """Chart of accounts model."""

    __tablename__ = "pgc_accounts"

    id = Column(Integer, primary_key=True)
    code = Column(String, unique=True, nullable=False)
    description = Column(String, nullable=False)
    account_type = Column(String, nullable=False, default="CONTA")
    nature = Column(String, nullable=False, default="AMBOS")
    parent_code = Column(String, nullable=True)
    system_auto = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=_now, nullable=False)


class Invoice(Base):
    """Sales document model."""

    __tablename__ = "invoices"

    id = Column(Integer, primary_key=True)
    invoice_type = Column(String, nullable=False)
    number = Column(String, unique=True, nullable=False)
    date = Column(Date, nullable=False)
    client_code = Column(String, nullable=True)
    client_name = Column(String, nullable=False)
    client_nif = Column(String, nullable=True)
    subtotal = Column(MONEY, nullable=False, default=0)
    tax_amount = Column(MONEY, nullable=False, default=0)
    total = Column(MONEY, nullable=False, default=0)
    status = Column(String, nullable=False, default="PENDING")
    is_certified = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=_now, nullable=False)

    # Relationships
    items = relationship(
        "InvoiceItem", back_populates="invoice", cascade="all, delete-orphan", order_by="InvoiceItem.id"
    )


class InvoiceItem(Base):
    """Sales document line model."""

    __tablename__ = "invoice_items"

    id = Column(Integer, primary_key=True)
    invoice_id = Column(Integer, ForeignKey("invoices.id"), nullable=False)
    item_type = Column(String, nullable=False, default="PRODUCT")
    description = Column(String, nullable=False)
    quantity = Column(Numeric(12, 3), nullable=False)
    unit_price = Column(MONEY, nullable=False)
    discount = Column(Numeric(5, 2), nullable=False, default=0)
    tax_rate = Column(Numeric(5, 2), nullable=False, default=0)
    total = Column(MONEY, nullable=False)
    tax_amount = Column(MONEY, nullable=False, default=0)
    rubrica = Column(String, nullable=True)

    # Relationships
    invoice = relationship("Invoice", back_populates="items")


class Purchase(Base):
    """Supplier document model."""

    __tablename__ = "purchases"

    id = Column(Integer, primary_key=True)
    purchase_type = Column(String, nullable=False)
    document_number = Column(String, nullable=False)
    date = Column(Date, nullable=False)
    supplier_name = Column(String, nullable=False)
    supplier_nif = Column(String, nullable=True)
    subtotal = Column(MONEY, nullable=False, default=0)
    tax_amount = Column(MONEY, nullable=False, default=0)
    total = Column(MONEY, nullable=False, default=0)
    status = Column(String, nullable=False, default="PENDING")
    created_at = Column(DateTime, default=_now, nullable=False)

    # Relationships
    items = relationship(
        "PurchaseItem", back_populates="purchase", cascade="all, delete-orphan", order_by="PurchaseItem.id"
    )


class PurchaseItem(Base):
    """Supplier document line model."""

    __tablename__ = "purchase_items"

    id = Column(Integer, primary_key=True)
    purchase_id = Column(Integer, ForeignKey("purchases.id"), nullable=False)
    description = Column(String, nullable=False)
    quantity = Column(Numeric(12, 3), nullable=False)
    unit_price = Column(MONEY, nullable=False)
    discount = Column(Numeric(5, 2), nullable=False, default=0)
    tax_rate = Column(Numeric(5, 2), nullable=False, default=0)
    total = Column(MONEY, nullable=False)
    tax_amount = Column(MONEY, nullable=False, default=0)
    rubrica = Column(String, nullable=True)

    # Relationships
    purchase = relationship("Purchase", back_populates="items")


class Employee(Base):
    """Employee model."""

    __tablename__ = "employees"

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    role = Column(String, nullable=False, default="")
    nif = Column(String, nullable=True)
    base_salary = Column(MONEY, nullable=False)
    status = Column(String, nullable=False, default="ACTIVE")
    subsidy_transport = Column(MONEY, nullable=False, default=0)
    subsidy_food = Column(MONEY, nullable=False, default=0)
    subsidy_family = Column(MONEY, nullable=False, default=0)
    subsidy_housing = Column(MONEY, nullable=False, default=0)
    created_at = Column(DateTime, default=_now, nullable=False)

    # Relationships
    transactions = relationship("HrTransaction", back_populates="employee", cascade="all, delete-orphan")


class HrTransaction(Base):
    """Payroll variation model."""

    __tablename__ = "hr_transactions"

    id = Column(Integer, primary_key=True)
    employee_id = Column(Integer, ForeignKey("employees.id"), nullable=False)
    date = Column(Date, nullable=False)
    transaction_type = Column(String, nullable=False)
    amount = Column(MONEY, nullable=False)
    description = Column(String, nullable=True)
    processed = Column(Boolean, default=False, nullable=False)

    # Relationships
    employee = relationship("Employee", back_populates="transactions")


class PayrollRun(Base):
    """Certified monthly payroll model."""

    __tablename__ = "payroll_runs"

    id = Column(Integer, primary_key=True)
    year = Column(Integer, nullable=False)
    month = Column(Integer, nullable=False)
    certified_at = Column(DateTime, default=_now, nullable=False)

    __table_args__ = (UniqueConstraint("year", "month", name="uq_payroll_period"),)

    # Relationships
    slips = relationship(
        "SalarySlip", back_populates="run", cascade="all, delete-orphan", order_by="SalarySlip.id"
    )


class SalarySlip(Base):
    """Salary slip snapshot model."""

    __tablename__ = "salary_slips"

    id = Column(Integer, primary_key=True)
    run_id = Column(Integer, ForeignKey("payroll_runs.id"), nullable=False)
    employee_id = Column(Integer, ForeignKey("employees.id"), nullable=False)
    employee_name = Column(String, nullable=False)
    employee_role = Column(String, nullable=False, default="")
    base_salary = Column(MONEY, nullable=False)
    bonuses = Column(MONEY, nullable=False, default=0)
    allowances = Column(MONEY, nullable=False, default=0)
    subsidy_transport = Column(MONEY, nullable=False, default=0)
    subsidy_food = Column(MONEY, nullable=False, default=0)
    subsidy_family = Column(MONEY, nullable=False, default=0)
    subsidy_housing = Column(MONEY, nullable=False, default=0)
    absences = Column(MONEY, nullable=False, default=0)
    advances = Column(MONEY, nullable=False, default=0)
    gross_total = Column(MONEY, nullable=False)
    inss = Column(MONEY, nullable=False)
    irt = Column(MONEY, nullable=False)
    net_total = Column(MONEY, nullable=False)
    inss_employer = Column(MONEY, nullable=False, default=0)

    # Relationships
    run = relationship("PayrollRun", back_populates="slips")


class OpeningBalance(Base):
    """Opening balance model."""

    __tablename__ = "opening_balances"

    id = Column(Integer, primary_key=True)
    account_code = Column(String, nullable=False)
    description = Column(String, nullable=False, default="")
    debit = Column(MONEY, nullable=False, default=0)
    credit = Column(MONEY, nullable=False, default=0)
    year = Column(Integer, nullable=False)
    balance_type = Column(String, nullable=False)

    __table_args__ = (UniqueConstraint("year", "account_code", name="uq_opening_year_account"),)


class VatSettlement(Base):
    """Registered VAT settlement model."""

    __tablename__ = "vat_settlements"

    id = Column(Integer, primary_key=True)
    year = Column(Integer, nullable=False)
    month = Column(Integer, nullable=False)
    total_debit = Column(MONEY, nullable=False)
    total_credit = Column(MONEY, nullable=False)
    balance = Column(MONEY, nullable=False)
    sales_adjust = Column(MONEY, nullable=False, default=0)
    purchase_adjust = Column(MONEY, nullable=False, default=0)
    status = Column(String, nullable=False, default="PROCESSED")
    processed_at = Column(DateTime, default=_now, nullable=False)

    __table_args__ = (UniqueConstraint("year", "month", name="uq_vat_period"),)


class JournalLine(Base):
    """Posted ledger movement model."""

    __tablename__ = "journal_lines"

    id = Column(Integer, primary_key=True)
    diary = Column(String, nullable=False)
    doc_number = Column(String, nullable=False)
    date = Column(Date, nullable=False)
    account_code = Column(String, nullable=False, index=True)
    description = Column(String, nullable=False, default="")
    debit = Column(MONEY, nullable=False, default=0)
    credit = Column(MONEY, nullable=False, default=0)
    source_key = Column(String, nullable=False)
    posted_at = Column(DateTime, default=_now, nullable=False)


class ProcessedSource(Base):
    """Classified source key model."""

    __tablename__ = "processed_sources"

    id = Column(Integer, primary_key=True)
    mode = Column(String, nullable=False)
    source_key = Column(String, nullable=False)
    processed_at = Column(DateTime, default=_now, nullable=False)

    __table_args__ = (UniqueConstraint("mode", "source_key", name="uq_processed_source"),)


class AccountMapping(Base):
    """Override of a fixed classification account code."""

    __tablename__ = "account_mappings"

    id = Column(Integer, primary_key=True)
    key = Column(String, unique=True, nullable=False)
    account_code = Column(String, nullable=False)


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
