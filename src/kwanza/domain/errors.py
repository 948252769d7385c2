"""Shared domain error messages and error types."""

from decimal import Decimal


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations."""


class UnbalancedError(ValidationError):
    """Debits and credits of a balance set do not match."""

    def __init__(self, total_debit: Decimal, total_credit: Decimal):
        self.total_debit = total_debit
        self.total_credit = total_credit
        self.difference = total_debit - total_credit
        super().__init__(
            "Balancete is not balanced: "
            f"debit {total_debit:,.2f}, credit {total_credit:,.2f}, "
            f"difference {self.difference:,.2f}"
        )


def account_not_found(code: str) -> str:
    """Return message for missing PGC account."""
    return f"PGC account '{code}' not found"


def duplicate_account_code(code: str) -> str:
    """Return message for a PGC code already in use."""
    return f"PGC account with code '{code}' already exists"


def invoice_not_found(invoice_id: int) -> str:
    """Return message for missing invoice."""
    return f"Invoice {invoice_id} not found"


def purchase_not_found(purchase_id: int) -> str:
    """Return message for missing purchase."""
    return f"Purchase {purchase_id} not found"


def employee_not_found(employee_id: int) -> str:
    """Return message for missing employee."""
    return f"Employee {employee_id} not found"


def invalid_period(year: int, month: int) -> str:
    """Return message for a month outside 1..12."""
    return f"Invalid period {month:02d}/{year}"


def payroll_already_certified(year: int, month: int) -> str:
    """Return message when a payroll run exists for the month."""
    return f"Payroll for {month:02d}/{year} is already certified"


def vat_already_registered(year: int, month: int) -> str:
    """Return message when a VAT settlement exists for the month."""
    return f"VAT settlement for {month:02d}/{year} is already registered"
