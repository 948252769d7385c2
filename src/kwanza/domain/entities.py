"""Domain model entities for kwanza.

These are pure data classes representing business concepts, independent of
database schema. Services exchange these objects; ORM models never leave the
database layer.
"""

from dataclasses import dataclass, field
from datetime import datetime, date
from decimal import Decimal
from enum import Enum
from typing import Optional, Union

ZERO = Decimal("0.00")


class AccountType(str, Enum):
    """Level of a PGC account in the chart hierarchy."""

    CLASSE = "CLASSE"
    GRUPO = "GRUPO"
    SUBGRUPO = "SUBGRUPO"
    CONTA = "CONTA"
    SUBCONTA = "SUBCONTA"


class AccountNature(str, Enum):
    """Side on which a PGC account normally carries its balance."""

    DEBITO = "DEBITO"
    CREDITO = "CREDITO"
    AMBOS = "AMBOS"


class InvoiceType(str, Enum):
    """Sales document types."""

    FT = "FT"  # Fatura
    FR = "FR"  # Fatura/Recibo
    VD = "VD"  # Venda a Dinheiro
    FS = "FS"  # Fatura Simplificada
    ND = "ND"  # Nota de Débito
    NC = "NC"  # Nota de Crédito
    PP = "PP"  # Fatura Pró-forma
    OR = "OR"  # Orçamento


# Document types that move the ledger; pro-formas and quotes never do.
FISCAL_INVOICE_TYPES = frozenset(
    {InvoiceType.FT, InvoiceType.FR, InvoiceType.VD, InvoiceType.FS, InvoiceType.ND, InvoiceType.NC}
)


class InvoiceStatus(str, Enum):
    """Invoice lifecycle status."""

    DRAFT = "DRAFT"
    PENDING = "PENDING"
    PAID = "PAID"
    CANCELLED = "CANCELLED"


class ItemType(str, Enum):
    """Kind of sales item; decides the revenue account."""

    PRODUCT = "PRODUCT"
    SERVICE = "SERVICE"


class PurchaseType(str, Enum):
    """Supplier document types."""

    FT = "FT"
    FR = "FR"
    ND = "ND"
    NC = "NC"
    VD = "VD"
    REC = "REC"


class PurchaseStatus(str, Enum):
    """Purchase lifecycle status."""

    PENDING = "PENDING"
    PAID = "PAID"
    CANCELLED = "CANCELLED"


class EmployeeStatus(str, Enum):
    """Employment status."""

    ACTIVE = "ACTIVE"
    ON_LEAVE = "ON_LEAVE"
    TERMINATED = "TERMINATED"


class HrTransactionType(str, Enum):
    """Monthly payroll variation types."""

    BONUS = "BONUS"
    ALLOWANCE = "ALLOWANCE"
    ABSENCE = "ABSENCE"
    ADVANCE = "ADVANCE"


class BalanceType(str, Enum):
    """Side of an opening balance."""

    DEBIT = "DEBIT"
    CREDIT = "CREDIT"


class ClassificationMode(str, Enum):
    """Source families handled by the classification engine."""

    SALES = "SALES"
    PURCHASES = "PURCHASES"
    SALARY_PROC = "SALARY_PROC"
    SALARY_PAY = "SALARY_PAY"

    @property
    def diary(self) -> str:
        """Journal (diário) code for postings of this mode."""
        return _DIARY_CODES[self]


_DIARY_CODES = {
    ClassificationMode.SALES: "0001",
    ClassificationMode.PURCHASES: "0002",
    ClassificationMode.SALARY_PROC: "0003",
    ClassificationMode.SALARY_PAY: "0004",
}

OPENING_DIARY = "0000"


class EntryStatus(str, Enum):
    """Classification state of an accounting entry."""

    PENDING = "PENDING"
    CLASSIFIED = "CLASSIFIED"


class VatPosition(str, Enum):
    """Direction of a VAT settlement balance."""

    PAYABLE = "A pagar"
    RECOVERABLE = "A recuperar"
    NIL = "Nulo"


@dataclass(frozen=True)
class PGCAccount:
    """Chart of accounts (PGC) entry."""

    id: int
    code: str
    description: str
    account_type: AccountType
    nature: AccountNature
    parent_code: Optional[str]
    system_auto: bool
    created_at: datetime


@dataclass(frozen=True)
class AccountTreeNode:
    """PGC account with nested children, for hierarchical display."""

    account: PGCAccount
    level: int
    children: tuple["AccountTreeNode", ...] = ()


@dataclass(frozen=True)
class InvoiceItem:
    """Sales document line."""

    id: int
    item_type: ItemType
    description: str
    quantity: Decimal
    unit_price: Decimal
    discount: Decimal
    tax_rate: Decimal
    total: Decimal
    tax_amount: Decimal
    rubrica: Optional[str]


@dataclass(frozen=True)
class Invoice:
    """Sales document."""

    id: int
    invoice_type: InvoiceType
    number: str
    date: date
    client_code: Optional[str]
    client_name: str
    client_nif: Optional[str]
    subtotal: Decimal
    tax_amount: Decimal
    total: Decimal
    status: InvoiceStatus
    is_certified: bool
    items: tuple[InvoiceItem, ...] = ()


@dataclass(frozen=True)
class PurchaseItem:
    """Supplier document line."""

    id: int
    description: str
    quantity: Decimal
    unit_price: Decimal
    discount: Decimal
    tax_rate: Decimal
    total: Decimal
    tax_amount: Decimal
    rubrica: Optional[str]


@dataclass(frozen=True)
class Purchase:
    """Supplier document."""

    id: int
    purchase_type: PurchaseType
    document_number: str
    date: date
    supplier_name: str
    supplier_nif: Optional[str]
    subtotal: Decimal
    tax_amount: Decimal
    total: Decimal
    status: PurchaseStatus
    items: tuple[PurchaseItem, ...] = ()


@dataclass(frozen=True)
class Employee:
    """Employee record with the fixed monthly subsidies."""

    id: int
    name: str
    role: str
    nif: Optional[str]
    base_salary: Decimal
    status: EmployeeStatus
    subsidy_transport: Decimal = ZERO
    subsidy_food: Decimal = ZERO
    subsidy_family: Decimal = ZERO
    subsidy_housing: Decimal = ZERO

    @property
    def total_subsidies(self) -> Decimal:
        return self.subsidy_transport + self.subsidy_food + self.subsidy_family + self.subsidy_housing


@dataclass(frozen=True)
class HrTransaction:
    """Monthly payroll variation (bonus, allowance, absence, advance)."""

    id: int
    employee_id: int
    date: date
    transaction_type: HrTransactionType
    amount: Decimal
    description: Optional[str]
    processed: bool


@dataclass(frozen=True)
class SalarySlip:
    """Monthly salary computation for one employee."""

    employee_id: int
    employee_name: str
    employee_role: str
    year: int
    month: int
    base_salary: Decimal
    bonuses: Decimal
    allowances: Decimal
    subsidy_transport: Decimal
    subsidy_food: Decimal
    subsidy_family: Decimal
    subsidy_housing: Decimal
    absences: Decimal
    advances: Decimal
    gross_total: Decimal
    inss: Decimal
    irt: Decimal
    net_total: Decimal
    inss_employer: Decimal
    transaction_ids: tuple[int, ...] = ()

    @property
    def subsidies(self) -> Decimal:
        return self.subsidy_transport + self.subsidy_food + self.subsidy_family + self.subsidy_housing


@dataclass(frozen=True)
class PayrollRun:
    """Certified payroll for a month."""

    id: int
    year: int
    month: int
    certified_at: datetime
    slips: tuple[SalarySlip, ...] = ()


@dataclass(frozen=True)
class OpeningBalance:
    """Opening balance of an account for a fiscal year."""

    id: int
    account_code: str
    description: str
    debit: Decimal
    credit: Decimal
    year: int
    balance_type: BalanceType


@dataclass(frozen=True)
class OpeningBalanceInput:
    """Row submitted to the opening balance map before validation."""

    account_code: str
    description: str = ""
    debit: Decimal = ZERO
    credit: Decimal = ZERO


@dataclass(frozen=True)
class VatCalculation:
    """VAT position of a month, before registration."""

    year: int
    month: int
    iva_liquidado: Decimal
    iva_dedutivel: Decimal
    sales_adjust: Decimal
    purchase_adjust: Decimal
    total_debit: Decimal
    total_credit: Decimal
    balance: Decimal
    invoice_count: int = 0
    purchase_count: int = 0

    @property
    def position(self) -> VatPosition:
        if self.balance > 0:
            return VatPosition.PAYABLE
        if self.balance < 0:
            return VatPosition.RECOVERABLE
        return VatPosition.NIL


@dataclass(frozen=True)
class VatSettlement:
    """Registered (immutable) VAT settlement."""

    id: int
    year: int
    month: int
    total_debit: Decimal
    total_credit: Decimal
    balance: Decimal
    sales_adjust: Decimal
    purchase_adjust: Decimal
    status: str
    processed_at: datetime

    @property
    def position(self) -> VatPosition:
        if self.balance > 0:
            return VatPosition.PAYABLE
        if self.balance < 0:
            return VatPosition.RECOVERABLE
        return VatPosition.NIL


@dataclass(frozen=True)
class AccountMappingEntry:
    """Stored override of a fixed classification account code."""

    id: int
    key: str
    account_code: str


@dataclass(frozen=True)
class InvoiceLineSource:
    """Entry source: one item of a sales document."""

    invoice_id: int
    item_id: int


@dataclass(frozen=True)
class PurchaseLineSource:
    """Entry source: one item of a supplier document."""

    purchase_id: int
    item_id: int


@dataclass(frozen=True)
class PayslipSource:
    """Entry source: one employee slip of a certified payroll run."""

    run_id: int
    employee_id: int
    mode: ClassificationMode = ClassificationMode.SALARY_PROC


EntrySource = Union[InvoiceLineSource, PurchaseLineSource, PayslipSource]


@dataclass(frozen=True)
class EntryLine:
    """Additional posting line attached to a classified entry."""

    account_code: str
    debit: Decimal = ZERO
    credit: Decimal = ZERO


@dataclass(frozen=True)
class AccountingEntry:
    """Classification row linking a source to a debit/credit/IVA triple."""

    key: str
    source: EntrySource
    date: date
    doc_number: str
    description: str
    entity: str
    debit_account: str = ""
    credit_account: str = ""
    iva_account: str = ""
    debit_amount: Decimal = ZERO
    credit_amount: Decimal = ZERO
    iva_amount: Decimal = ZERO
    iva_on_debit: bool = False
    extra_lines: tuple[EntryLine, ...] = ()
    status: EntryStatus = EntryStatus.PENDING

    def lines(self) -> list[EntryLine]:
        """Expand the entry into posting lines."""
        result = [
            EntryLine(self.debit_account, debit=self.debit_amount),
            EntryLine(self.credit_account, credit=self.credit_amount),
        ]
        if self.iva_amount and self.iva_account:
            if self.iva_on_debit:
                result.append(EntryLine(self.iva_account, debit=self.iva_amount))
            else:
                result.append(EntryLine(self.iva_account, credit=self.iva_amount))
        result.extend(line for line in self.extra_lines if line.debit or line.credit)
        return result

    @property
    def is_balanced(self) -> bool:
        lines = self.lines()
        return sum((line.debit for line in lines), ZERO) == sum((line.credit for line in lines), ZERO)


@dataclass(frozen=True)
class Classified:
    """Successful classification of an entry."""

    entry: AccountingEntry


@dataclass(frozen=True)
class Unresolved:
    """Entry whose source could not be resolved."""

    entry: AccountingEntry
    reason: str


ClassificationResult = Union[Classified, Unresolved]


@dataclass(frozen=True)
class ClassificationOutcome:
    """Entries after auto-classification plus the ones left unresolved."""

    entries: tuple[AccountingEntry, ...]
    unresolved: tuple[Unresolved, ...] = ()


@dataclass(frozen=True)
class JournalLine:
    """Posted ledger movement."""

    id: int
    diary: str
    doc_number: str
    date: date
    account_code: str
    description: str
    debit: Decimal
    credit: Decimal
    source_key: str
    posted_at: datetime


@dataclass(frozen=True)
class ExtractRow:
    """One line of an account extract with its running balance."""

    date: Optional[date]
    diary: str
    doc_number: str
    account_code: str
    description: str
    debit: Decimal
    credit: Decimal
    balance: Decimal
    is_opening: bool = False


@dataclass(frozen=True)
class AccountExtract:
    """Movements of an account (and its sub-accounts) for a year."""

    account_code: str
    description: str
    year: int
    rows: tuple[ExtractRow, ...]
    total_debit: Decimal
    total_credit: Decimal

    @property
    def balance(self) -> Decimal:
        return self.total_debit - self.total_credit


@dataclass(frozen=True)
class TrialBalanceRow:
    """Balancete line for one account."""

    code: str
    description: str
    level: int
    opening_debit: Decimal
    opening_credit: Decimal
    debit: Decimal
    credit: Decimal
    balance_debit: Decimal
    balance_credit: Decimal


@dataclass(frozen=True)
class TrialBalance:
    """Balancete for a range of months."""

    year: int
    start_month: int
    end_month: int
    rows: tuple[TrialBalanceRow, ...]
    total_debit: Decimal
    total_credit: Decimal
    total_balance_debit: Decimal
    total_balance_credit: Decimal

    @property
    def is_balanced(self) -> bool:
        return self.total_debit == self.total_credit


@dataclass(frozen=True)
class SalaryMap:
    """Column totals of a payroll run."""

    year: int
    month: int
    slips: tuple[SalarySlip, ...]
    totals: dict[str, Decimal] = field(default_factory=dict)


@dataclass(frozen=True)
class ItemInput:
    """Document line as entered, before totals are computed."""

    description: str
    quantity: Decimal
    unit_price: Decimal
    tax_rate: Decimal = ZERO
    discount: Decimal = ZERO
    item_type: ItemType = ItemType.PRODUCT
    rubrica: Optional[str] = None
