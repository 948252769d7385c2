"""VAT (IVA) settlement service."""

import logging
from decimal import Decimal

from kwanza.database.base import Database
from kwanza.domain.entities import (
    ZERO,
    InvoiceStatus,
    InvoiceType,
    FISCAL_INVOICE_TYPES,
    PurchaseStatus,
    PurchaseType,
    VatCalculation,
    VatSettlement,
)
from kwanza.domain.errors import ConflictError, NotFoundError, vat_already_registered
from kwanza.domain.taxes import round_currency
from kwanza.utils.date_parser import month_range

logger = logging.getLogger(__name__)


class VatSettlementService:
    """Service for monthly VAT settlement (apuramento do IVA)."""

    def __init__(self, db: Database):
        """Initialize VAT settlement service.

        Args:
            db: Database instance
        """
        self.db = db

    def calculate(
        self, year: int, month: int, sales_adjust: Decimal = ZERO, purchase_adjust: Decimal = ZERO
    ) -> VatCalculation:
        """Compute the VAT position of a month without saving it.

        Liquidated VAT comes from certified, non-cancelled sales documents
        (credit notes subtract); deductible VAT from paid purchases (supplier
        credit notes subtract).

        balance = (liquidated + sales_adjust) - (deductible + purchase_adjust)

        Args:
            year: Year
            month: Month (1-12)
            sales_adjust: Manual regularization on the liquidated side
            purchase_adjust: Manual regularization on the deductible side

        Returns:
            VatCalculation; `position` tells whether the balance is payable
        """
        start, end = month_range(year, month)

        iva_liquidado = ZERO
        invoice_count = 0
        for invoice in self.db.list_invoices(start_date=start, end_date=end):
            if not invoice.is_certified or invoice.status == InvoiceStatus.CANCELLED:
                continue
            if invoice.invoice_type not in FISCAL_INVOICE_TYPES:
                continue
            sign = -1 if invoice.invoice_type == InvoiceType.NC else 1
            iva_liquidado += sign * invoice.tax_amount
            invoice_count += 1

        iva_dedutivel = ZERO
        purchase_count = 0
        for purchase in self.db.list_purchases(start_date=start, end_date=end):
            if purchase.status != PurchaseStatus.PAID:
                continue
            sign = -1 if purchase.purchase_type == PurchaseType.NC else 1
            iva_dedutivel += sign * purchase.tax_amount
            purchase_count += 1

        sales_adjust = round_currency(sales_adjust)
        purchase_adjust = round_currency(purchase_adjust)
        total_credit = round_currency(iva_liquidado + sales_adjust)
        total_debit = round_currency(iva_dedutivel + purchase_adjust)

        return VatCalculation(
            year=year,
            month=month,
            iva_liquidado=round_currency(iva_liquidado),
            iva_dedutivel=round_currency(iva_dedutivel),
            sales_adjust=sales_adjust,
            purchase_adjust=purchase_adjust,
            total_debit=total_debit,
            total_credit=total_credit,
            balance=total_credit - total_debit,
            invoice_count=invoice_count,
            purchase_count=purchase_count,
        )

    def register(
        self, year: int, month: int, sales_adjust: Decimal = ZERO, purchase_adjust: Decimal = ZERO
    ) -> VatSettlement:
        """Compute and store the settlement of a month.

        Registered settlements are immutable.

        Raises:
            ConflictError: If the month already has a settlement
        """
        if self.db.get_vat_settlement(year, month) is not None:
            raise ConflictError(vat_already_registered(year, month))

        calculation = self.calculate(year, month, sales_adjust, purchase_adjust)
        self.db.create_vat_settlement(
            year=year,
            month=month,
            total_debit=calculation.total_debit,
            total_credit=calculation.total_credit,
            balance=calculation.balance,
            sales_adjust=calculation.sales_adjust,
            purchase_adjust=calculation.purchase_adjust,
        )
        logger.info(
            "Registered VAT settlement %02d/%d: %s %s", month, year, calculation.position.value, calculation.balance
        )
        settlement = self.db.get_vat_settlement(year, month)
        if settlement is None:
            raise NotFoundError(f"VAT settlement for {month:02d}/{year} not found")
        return settlement

    def history(self) -> list[VatSettlement]:
        """Registered settlements, most recent first."""
        return self.db.list_vat_settlements()
