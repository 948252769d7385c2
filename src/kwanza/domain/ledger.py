"""Ledger service: opening balances, account extracts and the balancete."""

import logging
from collections import defaultdict
from datetime import timedelta
from decimal import Decimal
from typing import Iterable

from kwanza.database.base import Database
from kwanza.domain.entities import (
    ZERO,
    OPENING_DIARY,
    BalanceType,
    OpeningBalance,
    OpeningBalanceInput,
    AccountExtract,
    ExtractRow,
    TrialBalance,
    TrialBalanceRow,
)
from kwanza.domain.errors import ValidationError, UnbalancedError
from kwanza.domain.pgc import (
    ancestor_codes,
    code_sort_key,
    derive_parent_code,
    display_level,
    is_valid_code,
    matches_account,
)
from kwanza.domain.taxes import round_currency
from kwanza.utils.date_parser import period_range

logger = logging.getLogger(__name__)

# Debits and credits may differ by rounding dust of up to one cent.
BALANCE_TOLERANCE = Decimal("0.01")


class LedgerService:
    """Service for opening balances and ledger reports."""

    def __init__(self, db: Database):
        """Initialize ledger service.

        Args:
            db: Database instance
        """
        self.db = db

    def save_opening_balances(self, year: int, rows: Iterable[OpeningBalanceInput]) -> int:
        """Replace the opening balances of a year.

        The whole map is checked before anything is written: total debit must
        equal total credit within one cent. Rows without a code, or with both
        sides zero, are dropped.

        Args:
            year: Fiscal year
            rows: Opening balance map as entered

        Returns:
            Number of balances stored

        Raises:
            UnbalancedError: If debits and credits differ by more than 0.01
            ValidationError: If an amount is negative, a code malformed or repeated
        """
        rows = list(rows)
        total_debit = ZERO
        total_credit = ZERO
        for row in rows:
            debit = round_currency(row.debit)
            credit = round_currency(row.credit)
            if debit < 0 or credit < 0:
                raise ValidationError(f"Negative amount on opening balance '{row.account_code}'")
            total_debit += debit
            total_credit += credit

        if abs(total_debit - total_credit) > BALANCE_TOLERANCE:
            raise UnbalancedError(total_debit, total_credit)

        accounts = {acc.code: acc for acc in self.db.list_pgc_accounts()}
        stored = []
        seen: set[str] = set()
        for row in rows:
            code = (row.account_code or "").strip()
            debit = round_currency(row.debit)
            credit = round_currency(row.credit)
            if not code or (debit == 0 and credit == 0):
                continue
            if not is_valid_code(code):
                raise ValidationError(f"Invalid PGC code '{code}'")
            if code in seen:
                raise ValidationError(f"Account '{code}' appears more than once")
            seen.add(code)

            description = row.description.strip()
            if not description and code in accounts:
                description = accounts[code].description
            stored.append(
                {
                    "account_code": code,
                    "description": description,
                    "debit": debit,
                    "credit": credit,
                    "balance_type": (BalanceType.DEBIT if debit > credit else BalanceType.CREDIT).value,
                }
            )

        count = self.db.replace_opening_balances(year, stored)
        logger.info("Saved %d opening balance(s) for %d", count, year)
        return count

    def list_opening_balances(self, year: int) -> list[OpeningBalance]:
        """Get the opening balances of a year in code order."""
        balances = self.db.list_opening_balances(year=year)
        return sorted(balances, key=lambda ob: code_sort_key(ob.account_code))

    def account_extract(self, code: str, year: int) -> AccountExtract:
        """Movements of an account and its sub-accounts in a year.

        The first row is the account's own opening balance (when one
        exists); every row carries the running balance debit - credit.

        Args:
            code: PGC account code
            year: Fiscal year

        Returns:
            AccountExtract with rows and totals
        """
        code = code.strip()
        if not is_valid_code(code):
            raise ValidationError(f"Invalid PGC code '{code}'")
        start, end = period_range(year)

        account = self.db.get_pgc_account_by_code(code)
        description = account.description if account is not None else ""

        rows = []
        balance = ZERO
        total_debit = ZERO
        total_credit = ZERO
        for opening in self.db.list_opening_balances(year=year):
            if opening.account_code != code:
                continue
            balance += opening.debit - opening.credit
            total_debit += opening.debit
            total_credit += opening.credit
            rows.append(
                ExtractRow(
                    date=start,
                    diary=OPENING_DIARY,
                    doc_number="Saldo inicial",
                    account_code=code,
                    description=opening.description or "Saldo inicial",
                    debit=opening.debit,
                    credit=opening.credit,
                    balance=balance,
                    is_opening=True,
                )
            )

        for line in self.db.list_journal_lines(start_date=start, end_date=end):
            if not matches_account(line.account_code, code):
                continue
            balance += line.debit - line.credit
            total_debit += line.debit
            total_credit += line.credit
            rows.append(
                ExtractRow(
                    date=line.date,
                    diary=line.diary,
                    doc_number=line.doc_number,
                    account_code=line.account_code,
                    description=line.description,
                    debit=line.debit,
                    credit=line.credit,
                    balance=balance,
                )
            )

        return AccountExtract(
            account_code=code,
            description=description,
            year=year,
            rows=tuple(rows),
            total_debit=total_debit,
            total_credit=total_credit,
        )

    def trial_balance(self, year: int, start_month: int = 1, end_month: int = 12) -> TrialBalance:
        """Build the balancete for a range of months.

        Opening columns hold the year's opening balances plus movements of
        the months before `start_month`; movement columns hold the range.
        Every figure is rolled up into all ancestor accounts. Grand totals
        add up root rows only, so nothing is counted twice.

        Args:
            year: Fiscal year
            start_month: First month (inclusive)
            end_month: Last month (inclusive)

        Returns:
            TrialBalance with rows in code order
        """
        start, end = period_range(year, start_month, end_month)
        year_start, _ = period_range(year)

        # code -> [opening debit, opening credit, debit, credit]
        sums: dict[str, list[Decimal]] = defaultdict(lambda: [ZERO, ZERO, ZERO, ZERO])

        def add(code: str, index: int, amount: Decimal) -> None:
            if not amount:
                return
            for target in [code, *ancestor_codes(code)]:
                sums[target][index] += amount

        for opening in self.db.list_opening_balances(year=year):
            add(opening.account_code, 0, opening.debit)
            add(opening.account_code, 1, opening.credit)

        if start > year_start:
            for line in self.db.list_journal_lines(start_date=year_start, end_date=start - timedelta(days=1)):
                add(line.account_code, 0, line.debit)
                add(line.account_code, 1, line.credit)

        for line in self.db.list_journal_lines(start_date=start, end_date=end):
            add(line.account_code, 2, line.debit)
            add(line.account_code, 3, line.credit)

        descriptions = {acc.code: acc.description for acc in self.db.list_pgc_accounts()}
        rows = []
        for code in sorted(sums, key=code_sort_key):
            opening_debit, opening_credit, debit, credit = sums[code]
            net = opening_debit + debit - opening_credit - credit
            rows.append(
                TrialBalanceRow(
                    code=code,
                    description=descriptions.get(code, ""),
                    level=display_level(code),
                    opening_debit=opening_debit,
                    opening_credit=opening_credit,
                    debit=debit,
                    credit=credit,
                    balance_debit=net if net > 0 else ZERO,
                    balance_credit=-net if net < 0 else ZERO,
                )
            )

        roots = [row for row in rows if derive_parent_code(row.code) is None]
        return TrialBalance(
            year=year,
            start_month=start_month,
            end_month=end_month,
            rows=tuple(rows),
            total_debit=sum((row.debit for row in roots), ZERO),
            total_credit=sum((row.credit for row in roots), ZERO),
            total_balance_debit=sum((row.balance_debit for row in roots), ZERO),
            total_balance_credit=sum((row.balance_credit for row in roots), ZERO),
        )
