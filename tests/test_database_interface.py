"""Tests for Database interface returning domain models."""

import pytest
from datetime import date, datetime
from decimal import Decimal
from sqlalchemy.exc import IntegrityError

from kwanza.domain import entities


class TestDatabaseInterface:
    """Tests to verify Database interface returns domain models."""

    def test_get_pgc_account_returns_domain_model(self, temp_db):
        """Test that get_pgc_account returns a domain PGCAccount entity."""
        account_id = temp_db.create_pgc_account(
            code="43.1", description="Depósitos à ordem", account_type="SUBGRUPO", nature="DEBITO", parent_code="43"
        )

        account = temp_db.get_pgc_account(account_id)

        assert isinstance(account, entities.PGCAccount)
        assert account.code == "43.1"
        assert account.account_type == entities.AccountType.SUBGRUPO
        assert isinstance(account.created_at, datetime)
        assert temp_db.get_pgc_account_by_code("43.1") == account
        assert temp_db.get_pgc_account(999) is None

    def test_create_invoice_stores_items(self, temp_db):
        """Test that invoice items are written with the invoice."""
        invoice_id = temp_db.create_invoice(
            invoice_type="FT",
            number="FT 1",
            date=date(2024, 3, 1),
            client_name="Cliente",
            subtotal=Decimal("200.00"),
            tax_amount=Decimal("28.00"),
            total=Decimal("228.00"),
            items=[
                {
                    "item_type": "PRODUCT",
                    "description": "A",
                    "quantity": Decimal("2"),
                    "unit_price": Decimal("100"),
                    "discount": Decimal("0"),
                    "tax_rate": Decimal("14"),
                    "total": Decimal("200.00"),
                    "tax_amount": Decimal("28.00"),
                    "rubrica": "61.1",
                }
            ],
        )

        invoice = temp_db.get_invoice(invoice_id)

        assert isinstance(invoice, entities.Invoice)
        assert invoice.status == entities.InvoiceStatus.PENDING
        assert not invoice.is_certified
        assert invoice.items[0].total == Decimal("200.00")
        assert temp_db.get_invoice_by_number("FT 1").id == invoice_id

    def test_list_invoices_date_range(self, temp_db):
        """Test that list_invoices filters on inclusive date bounds."""
        for number, day in [("A", date(2024, 2, 29)), ("B", date(2024, 3, 1)), ("C", date(2024, 3, 31))]:
            temp_db.create_invoice(
                invoice_type="FT",
                number=number,
                date=day,
                client_name="Cliente",
                subtotal=Decimal("0"),
                tax_amount=Decimal("0"),
                total=Decimal("0"),
                items=[],
            )

        invoices = temp_db.list_invoices(start_date=date(2024, 3, 1), end_date=date(2024, 3, 31))
        assert [inv.number for inv in invoices] == ["B", "C"]

    def test_payroll_run_marks_transactions_processed(self, temp_db):
        """Test that certifying a run consumes its transactions in the same commit."""
        employee_id = temp_db.create_employee(name="Ana", base_salary=Decimal("100000"))
        txn_id = temp_db.create_hr_transaction(
            employee_id=employee_id, date=date(2024, 3, 2), transaction_type="BONUS", amount=Decimal("500")
        )

        run_id = temp_db.create_payroll_run(2024, 3, slips=[], transaction_ids=[txn_id])

        assert temp_db.get_payroll_run_by_id(run_id).month == 3
        assert temp_db.list_hr_transactions(processed=False) == []
        assert len(temp_db.list_hr_transactions(processed=True)) == 1

    def test_post_journal_records_processed_keys(self, temp_db):
        """Test that journal lines and processed keys are written together."""
        line = {
            "diary": "0001",
            "doc_number": "FT 1",
            "date": date(2024, 3, 1),
            "account_code": "43.1",
            "description": "Teste",
            "debit": Decimal("10"),
            "credit": Decimal("0"),
            "source_key": "INV-1-1",
        }

        count = temp_db.post_journal("SALES", [line], ["INV-1-1"])

        assert count == 1
        assert temp_db.list_processed_keys("SALES") == {"INV-1-1"}
        assert temp_db.list_processed_keys("PURCHASES") == set()
        lines = temp_db.list_journal_lines()
        assert isinstance(lines[0], entities.JournalLine)
        assert lines[0].debit == Decimal("10.00")

    def test_post_journal_rolls_back_on_duplicate_key(self, temp_db):
        """Test that a duplicate processed key leaves the journal untouched."""
        temp_db.post_journal("SALES", [], ["INV-1-1"])
        line = {
            "diary": "0001",
            "doc_number": "FT 1",
            "date": date(2024, 3, 1),
            "account_code": "43.1",
            "description": "",
            "debit": Decimal("10"),
            "credit": Decimal("0"),
            "source_key": "INV-1-1",
        }

        with pytest.raises(IntegrityError):
            temp_db.post_journal("SALES", [line], ["INV-1-1"])

        assert temp_db.list_journal_lines() == []

    def test_replace_opening_balances(self, temp_db):
        """Test that replacing a year's balances leaves other years alone."""
        row = {"account_code": "43.1", "description": "", "debit": Decimal("1"), "credit": Decimal("0"), "balance_type": "DEBIT"}
        temp_db.replace_opening_balances(2023, [row])
        temp_db.replace_opening_balances(2024, [row, {**row, "account_code": "45.1"}])
        temp_db.replace_opening_balances(2024, [row])

        assert len(temp_db.list_opening_balances(year=2024)) == 1
        assert len(temp_db.list_opening_balances()) == 2

    def test_account_mappings(self, temp_db):
        """Test upsert and delete of mapping overrides."""
        temp_db.set_account_mapping("sales_vat", "34.5.3.2")
        temp_db.set_account_mapping("sales_vat", "34.5.3.3")

        mappings = temp_db.list_account_mappings()
        assert len(mappings) == 1
        assert isinstance(mappings[0], entities.AccountMappingEntry)
        assert mappings[0].account_code == "34.5.3.3"

        assert temp_db.delete_account_mapping("sales_vat") is True
        assert temp_db.delete_account_mapping("sales_vat") is False

    def test_vat_settlements_most_recent_first(self, temp_db):
        """Test that settlements list newest period first."""
        for year, month in [(2024, 1), (2024, 3), (2023, 12)]:
            temp_db.create_vat_settlement(
                year=year,
                month=month,
                total_debit=Decimal("0"),
                total_credit=Decimal("0"),
                balance=Decimal("0"),
                sales_adjust=Decimal("0"),
                purchase_adjust=Decimal("0"),
            )

        settlements = temp_db.list_vat_settlements()
        assert [(s.year, s.month) for s in settlements] == [(2024, 3), (2024, 1), (2023, 12)]
        assert all(isinstance(s, entities.VatSettlement) for s in settlements)
