"""Automatic classification of source documents into journal postings.

Each source line (invoice item, purchase item, salary slip) becomes one
AccountingEntry keyed by a stable string. Entries are classified against the
account mapping, optionally edited by hand, and finally posted as journal
lines in a single commit.
"""

import logging
from dataclasses import replace
from typing import Optional, Iterable

from kwanza.database.base import Database
from kwanza.domain.entities import (
    ZERO,
    AccountingEntry,
    ClassificationMode,
    ClassificationOutcome,
    ClassificationResult,
    Classified,
    Unresolved,
    EntryLine,
    EntryStatus,
    Invoice,
    InvoiceLineSource,
    InvoiceStatus,
    InvoiceType,
    ItemType,
    FISCAL_INVOICE_TYPES,
    Purchase,
    PurchaseLineSource,
    PurchaseStatus,
    PurchaseType,
    PayrollRun,
    PayslipSource,
)
from kwanza.domain.errors import ValidationError, NotFoundError, ConflictError
from kwanza.domain.mapping import AccountMapping, AccountMappingService
from kwanza.domain.pgc import is_valid_code
from kwanza.utils.date_parser import month_range, period_range

logger = logging.getLogger(__name__)

ENTRY_SIDES = ("debit", "credit", "iva")

NO_CLIENT_SUFFIX = "999"
DEFAULT_CLIENT_SUFFIX = "1"


def client_account(base_code: str, client_code: Optional[str]) -> str:
    """Client sub-account: base code plus the digits of the client code's first 3 chars."""
    if not client_code:
        return f"{base_code}.{NO_CLIENT_SUFFIX}"
    suffix = "".join(ch for ch in client_code[:3] if ch.isdigit())
    return f"{base_code}.{suffix or DEFAULT_CLIENT_SUFFIX}"


def invoice_entry_key(invoice_id: int, item_id: int) -> str:
    return f"INV-{invoice_id}-{item_id}"


def purchase_entry_key(purchase_id: int, item_id: int) -> str:
    return f"PUR-{purchase_id}-{item_id}"


def payslip_entry_key(mode: ClassificationMode, run_id: int, employee_id: int) -> str:
    prefix = "SAL" if mode == ClassificationMode.SALARY_PROC else "PAY"
    return f"{prefix}-{run_id}-{employee_id}"


class _SourceCache:
    """Memoizes source documents while classifying a batch."""

    def __init__(self, db: Database):
        self.db = db
        self._invoices: dict[int, Optional[Invoice]] = {}
        self._purchases: dict[int, Optional[Purchase]] = {}
        self._runs: dict[int, Optional[PayrollRun]] = {}

    def invoice(self, invoice_id: int) -> Optional[Invoice]:
        if invoice_id not in self._invoices:
            self._invoices[invoice_id] = self.db.get_invoice(invoice_id)
        return self._invoices[invoice_id]

    def purchase(self, purchase_id: int) -> Optional[Purchase]:
        if purchase_id not in self._purchases:
            self._purchases[purchase_id] = self.db.get_purchase(purchase_id)
        return self._purchases[purchase_id]

    def run(self, run_id: int) -> Optional[PayrollRun]:
        if run_id not in self._runs:
            self._runs[run_id] = self.db.get_payroll_run_by_id(run_id)
        return self._runs[run_id]


class ClassificationService:
    """Service for loading, classifying and posting accounting entries."""

    def __init__(self, db: Database):
        """Initialize classification service.

        Args:
            db: Database instance
        """
        self.db = db

    def load_entries(
        self, mode: ClassificationMode, year: int, start_month: int = 1, end_month: int = 12
    ) -> list[AccountingEntry]:
        """Build PENDING entries for the unprocessed sources of a period.

        SALES: items of certified, non-cancelled fiscal invoices.
        PURCHASES: items of paid purchases.
        SALARY_PROC / SALARY_PAY: slips of certified payroll runs.

        Args:
            mode: Source family
            year: Fiscal year
            start_month: First month (inclusive)
            end_month: Last month (inclusive)

        Returns:
            Entries ordered by source date
        """
        mode = ClassificationMode(mode)
        start, end = period_range(year, start_month, end_month)
        processed = self.db.list_processed_keys(mode.value)

        if mode == ClassificationMode.SALES:
            entries = self._load_sales(start, end)
        elif mode == ClassificationMode.PURCHASES:
            entries = self._load_purchases(start, end)
        else:
            entries = self._load_payslips(mode, year, start_month, end_month)

        return [entry for entry in entries if entry.key not in processed]

    def _load_sales(self, start, end) -> list[AccountingEntry]:
        entries = []
        for invoice in self.db.list_invoices(start_date=start, end_date=end):
            if not invoice.is_certified or invoice.status == InvoiceStatus.CANCELLED:
                continue
            if invoice.invoice_type not in FISCAL_INVOICE_TYPES:
                continue
            for item in invoice.items:
                entries.append(
                    AccountingEntry(
                        key=invoice_entry_key(invoice.id, item.id),
                        source=InvoiceLineSource(invoice_id=invoice.id, item_id=item.id),
                        date=invoice.date,
                        doc_number=invoice.number,
                        description=item.description,
                        entity=invoice.client_name,
                    )
                )
        return entries

    def _load_purchases(self, start, end) -> list[AccountingEntry]:
        entries = []
        for purchase in self.db.list_purchases(start_date=start, end_date=end):
            if purchase.status != PurchaseStatus.PAID:
                continue
            for item in purchase.items:
                entries.append(
                    AccountingEntry(
                        key=purchase_entry_key(purchase.id, item.id),
                        source=PurchaseLineSource(purchase_id=purchase.id, item_id=item.id),
                        date=purchase.date,
                        doc_number=purchase.document_number,
                        description=item.description,
                        entity=purchase.supplier_name,
                    )
                )
        return entries

    def _load_payslips(
        self, mode: ClassificationMode, year: int, start_month: int, end_month: int
    ) -> list[AccountingEntry]:
        label = "Processamento salarial" if mode == ClassificationMode.SALARY_PROC else "Pagamento de salário"
        entries = []
        for run in self.db.list_payroll_runs():
            if run.year != year or not start_month <= run.month <= end_month:
                continue
            _, last_day = month_range(run.year, run.month)
            for slip in run.slips:
                entries.append(
                    AccountingEntry(
                        key=payslip_entry_key(mode, run.id, slip.employee_id),
                        source=PayslipSource(run_id=run.id, employee_id=slip.employee_id, mode=mode),
                        date=last_day,
                        doc_number=f"FS {run.month:02d}/{run.year}",
                        description=f"{label} {run.month:02d}/{run.year}",
                        entity=slip.employee_name,
                    )
                )
        return entries

    def auto_classify(
        self, entries: Iterable[AccountingEntry], selected: Optional[Iterable[str]] = None
    ) -> ClassificationOutcome:
        """Apply the classification rules.

        Entries that are PENDING, or whose key is in `selected`, are
        (re)classified; the rest are returned unchanged. Entries whose
        source no longer resolves are kept as they were and reported in
        `unresolved`.

        Args:
            entries: Entries to classify
            selected: Optional keys to reclassify even if already CLASSIFIED

        Returns:
            ClassificationOutcome with the entries in input order
        """
        selected_keys = set(selected or ())
        mapping = AccountMappingService(self.db).get_mapping()
        cache = _SourceCache(self.db)

        result_entries = []
        unresolved = []
        for entry in entries:
            if entry.status != EntryStatus.PENDING and entry.key not in selected_keys:
                result_entries.append(entry)
                continue
            result = self._classify(entry, mapping, cache)
            if isinstance(result, Unresolved):
                logger.warning("Could not classify %s: %s", entry.key, result.reason)
                unresolved.append(result)
                result_entries.append(entry)
            else:
                result_entries.append(result.entry)

        return ClassificationOutcome(entries=tuple(result_entries), unresolved=tuple(unresolved))

    def classify_entry(
        self, entry: AccountingEntry, mapping: Optional[AccountMapping] = None
    ) -> ClassificationResult:
        """Classify a single entry against its source document."""
        if mapping is None:
            mapping = AccountMappingService(self.db).get_mapping()
        return self._classify(entry, mapping, _SourceCache(self.db))

    def _classify(
        self, entry: AccountingEntry, mapping: AccountMapping, cache: _SourceCache
    ) -> ClassificationResult:
        source = entry.source
        if isinstance(source, InvoiceLineSource):
            return self._classify_sale(entry, source, mapping, cache)
        if isinstance(source, PurchaseLineSource):
            return self._classify_purchase(entry, source, mapping, cache)
        if isinstance(source, PayslipSource):
            return self._classify_payslip(entry, source, mapping, cache)
        return Unresolved(entry=entry, reason=f"Unsupported source {type(source).__name__}")

    def _classify_sale(
        self, entry: AccountingEntry, source: InvoiceLineSource, mapping: AccountMapping, cache: _SourceCache
    ) -> ClassificationResult:
        invoice = cache.invoice(source.invoice_id)
        if invoice is None:
            return Unresolved(entry=entry, reason=f"Invoice {source.invoice_id} not found")
        item = next((i for i in invoice.items if i.id == source.item_id), None)
        if item is None:
            return Unresolved(entry=entry, reason=f"Item {source.item_id} not found on invoice {invoice.number}")
        if invoice.status == InvoiceStatus.CANCELLED:
            return Unresolved(entry=entry, reason=f"Invoice {invoice.number} was cancelled")

        base = item.total
        tax = item.tax_amount
        is_service = item.item_type == ItemType.SERVICE
        client = client_account(mapping.sales_client, invoice.client_code)
        iva_account = mapping.sales_vat if tax > 0 else ""

        if invoice.invoice_type == InvoiceType.NC:
            contra = mapping.sales_return_service if is_service else mapping.sales_return_product
            classified = replace(
                entry,
                debit_account=contra,
                credit_account=client,
                iva_account=iva_account,
                debit_amount=base,
                credit_amount=base + tax,
                iva_amount=tax,
                iva_on_debit=True,
                status=EntryStatus.CLASSIFIED,
            )
        else:
            revenue = item.rubrica or (mapping.sales_revenue_service if is_service else mapping.sales_revenue_product)
            classified = replace(
                entry,
                debit_account=client,
                credit_account=revenue,
                iva_account=iva_account,
                debit_amount=base + tax,
                credit_amount=base,
                iva_amount=tax,
                iva_on_debit=False,
                status=EntryStatus.CLASSIFIED,
            )
        return Classified(entry=classified)

    def _classify_purchase(
        self, entry: AccountingEntry, source: PurchaseLineSource, mapping: AccountMapping, cache: _SourceCache
    ) -> ClassificationResult:
        purchase = cache.purchase(source.purchase_id)
        if purchase is None:
            return Unresolved(entry=entry, reason=f"Purchase {source.purchase_id} not found")
        item = next((i for i in purchase.items if i.id == source.item_id), None)
        if item is None:
            return Unresolved(
                entry=entry, reason=f"Item {source.item_id} not found on purchase {purchase.document_number}"
            )
        if purchase.status == PurchaseStatus.CANCELLED:
            return Unresolved(entry=entry, reason=f"Purchase {purchase.document_number} was cancelled")

        base = item.total
        tax = item.tax_amount
        cost = item.rubrica or mapping.purchase_cost
        iva_account = mapping.purchase_vat if tax > 0 else ""

        if purchase.purchase_type == PurchaseType.NC:
            classified = replace(
                entry,
                debit_account=mapping.purchase_supplier,
                credit_account=cost,
                iva_account=iva_account,
                debit_amount=base + tax,
                credit_amount=base,
                iva_amount=tax,
                iva_on_debit=False,
                status=EntryStatus.CLASSIFIED,
            )
        else:
            classified = replace(
                entry,
                debit_account=cost,
                credit_account=mapping.purchase_supplier,
                iva_account=iva_account,
                debit_amount=base,
                credit_amount=base + tax,
                iva_amount=tax,
                iva_on_debit=True,
                status=EntryStatus.CLASSIFIED,
            )
        return Classified(entry=classified)

    def _classify_payslip(
        self, entry: AccountingEntry, source: PayslipSource, mapping: AccountMapping, cache: _SourceCache
    ) -> ClassificationResult:
        run = cache.run(source.run_id)
        if run is None:
            return Unresolved(entry=entry, reason=f"Payroll run {source.run_id} not found")
        slip = next((s for s in run.slips if s.employee_id == source.employee_id), None)
        if slip is None:
            return Unresolved(
                entry=entry, reason=f"No slip for employee {source.employee_id} in {run.month:02d}/{run.year}"
            )

        if source.mode == ClassificationMode.SALARY_PAY:
            classified = replace(
                entry,
                debit_account=mapping.payroll_payable,
                credit_account=mapping.payroll_bank,
                iva_account="",
                debit_amount=slip.net_total,
                credit_amount=slip.net_total,
                iva_amount=ZERO,
                extra_lines=(),
                status=EntryStatus.CLASSIFIED,
            )
        else:
            classified = replace(
                entry,
                debit_account=mapping.payroll_cost,
                credit_account=mapping.payroll_payable,
                iva_account="",
                debit_amount=slip.gross_total,
                credit_amount=slip.net_total,
                iva_amount=ZERO,
                extra_lines=(
                    EntryLine(mapping.payroll_subsidies, debit=slip.subsidies),
                    EntryLine(mapping.payroll_irt, credit=slip.irt),
                    EntryLine(mapping.payroll_inss, credit=slip.inss),
                    EntryLine(mapping.payroll_advances, credit=slip.advances),
                ),
                status=EntryStatus.CLASSIFIED,
            )
        return Classified(entry=classified)

    def set_account(
        self, entries: Iterable[AccountingEntry], key: str, side: str, code: str
    ) -> list[AccountingEntry]:
        """Manually set the debit, credit or IVA account of one entry.

        The edited entry becomes CLASSIFIED; the others are returned as-is.
        A PENDING entry is first classified from its source so that it
        carries the document amounts.

        Args:
            entries: Current entries
            key: Key of the entry to edit
            side: "debit", "credit" or "iva"
            code: PGC account code

        Returns:
            New list of entries

        Raises:
            ValidationError: If the side or code is invalid, or the source
                of a PENDING entry cannot be resolved
            NotFoundError: If no entry has the key
        """
        if side not in ENTRY_SIDES:
            raise ValidationError(f"Invalid side '{side}'. Valid sides: {', '.join(ENTRY_SIDES)}")
        code = code.strip()
        if not is_valid_code(code):
            raise ValidationError(f"Invalid PGC code '{code}'")

        entries = list(entries)
        for index, entry in enumerate(entries):
            if entry.key == key:
                if entry.status == EntryStatus.PENDING:
                    result = self.classify_entry(entry)
                    if isinstance(result, Unresolved):
                        raise ValidationError(f"Cannot edit {key}: {result.reason}")
                    entry = result.entry
                entries[index] = replace(entry, **{f"{side}_account": code}, status=EntryStatus.CLASSIFIED)
                return entries
        raise NotFoundError(f"Entry '{key}' not found")

    def post_entries(self, mode: ClassificationMode, entries: Iterable[AccountingEntry]) -> int:
        """Write classified entries to the journal.

        All entries are validated first; nothing is written unless every
        entry is CLASSIFIED, balanced and not yet processed.

        Args:
            mode: Source family (decides the diary)
            entries: Entries to post

        Returns:
            Number of journal lines written

        Raises:
            ValidationError: If an entry is pending, unbalanced, has no movement
                or has a bad code
            ConflictError: If an entry was already posted
        """
        mode = ClassificationMode(mode)
        entries = list(entries)
        if not entries:
            raise ValidationError("No entries to post")

        processed = self.db.list_processed_keys(mode.value)
        seen: set[str] = set()
        lines = []
        for entry in entries:
            if entry.status != EntryStatus.CLASSIFIED:
                raise ValidationError(f"Entry {entry.key} is not classified")
            if entry.key in processed:
                raise ConflictError(f"Entry {entry.key} was already posted")
            if entry.key in seen:
                raise ValidationError(f"Entry {entry.key} appears more than once")
            seen.add(entry.key)

            entry_lines = entry.lines()
            for line in entry_lines:
                if not is_valid_code(line.account_code):
                    raise ValidationError(f"Entry {entry.key} has an invalid account '{line.account_code}'")
            if not entry.is_balanced:
                raise ValidationError(f"Entry {entry.key} is not balanced")
            if all(line.debit == ZERO and line.credit == ZERO for line in entry_lines):
                raise ValidationError(f"Entry {entry.key} has no movement")

            for line in entry_lines:
                if line.debit == ZERO and line.credit == ZERO:
                    continue
                lines.append(
                    {
                        "diary": mode.diary,
                        "doc_number": entry.doc_number,
                        "date": entry.date,
                        "account_code": line.account_code,
                        "description": f"{entry.description} - {entry.entity}" if entry.entity else entry.description,
                        "debit": line.debit,
                        "credit": line.credit,
                        "source_key": entry.key,
                    }
                )

        count = self.db.post_journal(mode.value, lines, [entry.key for entry in entries])
        logger.info("Posted %d entr(ies) as %d journal line(s) in diary %s", len(entries), count, mode.diary)
        return count
