"""Tests for PayrollService."""

from datetime import date
from decimal import Decimal

import pytest

from kwanza.domain.entities import EmployeeStatus, HrTransactionType
from kwanza.domain.errors import ConflictError, NotFoundError, ValidationError


def test_reference_slip_without_transactions(payroll_service, sample_employee):
    slip = payroll_service.calculate_slip(sample_employee, [], 2024, 3)

    assert slip.gross_total == Decimal("150000.00")
    assert slip.inss == Decimal("4500.00")
    assert slip.irt == Decimal("4550.00")
    # 140,950 plus the 10,000 transport subsidy
    assert slip.net_total == Decimal("150950.00")
    assert slip.inss_employer == Decimal("12000.00")
    assert slip.subsidies == Decimal("10000.00")


def test_slip_with_transactions(payroll_service, employee_service, temp_db):
    employee_id = employee_service.create_employee(
        name="Carlos Neto", base_salary=Decimal("200000"), subsidy_transport=Decimal("10000")
    )
    employee_service.record_transaction(employee_id, date(2024, 3, 5), HrTransactionType.BONUS, Decimal("20000"))
    employee_service.record_transaction(employee_id, date(2024, 3, 6), HrTransactionType.ABSENCE, Decimal("10000"))
    employee_service.record_transaction(employee_id, date(2024, 3, 7), HrTransactionType.ADVANCE, Decimal("15000"))
    # Outside the month: ignored
    employee_service.record_transaction(employee_id, date(2024, 4, 1), HrTransactionType.BONUS, Decimal("99999"))

    employee = employee_service.get_employee(employee_id)
    transactions = temp_db.list_hr_transactions(employee_id=employee_id)
    slip = payroll_service.calculate_slip(employee, transactions, 2024, 3)

    assert slip.bonuses == Decimal("20000.00")
    assert slip.absences == Decimal("10000.00")
    assert slip.advances == Decimal("15000.00")
    assert slip.gross_total == Decimal("210000.00")
    assert slip.inss == Decimal("6300.00")
    # taxable 203,700: (3,700 * 16%) + 11,500
    assert slip.irt == Decimal("12092.00")
    assert slip.net_total == Decimal("186608.00")
    assert len(slip.transaction_ids) == 3


def test_slip_ignores_processed_and_foreign_transactions(payroll_service, sample_employee, temp_db):
    from kwanza.domain.entities import HrTransaction

    transactions = [
        HrTransaction(1, sample_employee.id, date(2024, 3, 1), HrTransactionType.BONUS, Decimal("5000"), None, True),
        HrTransaction(2, sample_employee.id + 1, date(2024, 3, 1), HrTransactionType.BONUS, Decimal("5000"), None, False),
    ]
    slip = payroll_service.calculate_slip(sample_employee, transactions, 2024, 3)
    assert slip.bonuses == Decimal("0.00")
    assert slip.transaction_ids == ()


def test_net_identity_holds(payroll_service, employee_service):
    for salary in ["80000", "150000", "420000", "2500000"]:
        employee_id = employee_service.create_employee(
            name=f"Emp {salary}", base_salary=Decimal(salary), subsidy_food=Decimal("5000")
        )
        slip = payroll_service.calculate_slip(employee_service.get_employee(employee_id), [], 2024, 1)
        assert slip.net_total == slip.gross_total + slip.subsidies - slip.inss - slip.irt - slip.advances
        assert slip.net_total <= slip.gross_total + slip.subsidies


def test_preview_only_active_employees(payroll_service, employee_service, sample_employee):
    other_id = employee_service.create_employee(name="Saiu", base_salary=Decimal("100000"))
    employee_service.set_status(other_id, EmployeeStatus.TERMINATED)

    slips = payroll_service.preview_payroll(2024, 3)
    assert [slip.employee_name for slip in slips] == ["Ana Silva"]


def test_preview_has_no_side_effects(payroll_service, employee_service, sample_employee, temp_db):
    employee_service.record_transaction(sample_employee.id, date(2024, 3, 5), HrTransactionType.BONUS, Decimal("1000"))

    first = payroll_service.preview_payroll(2024, 3)
    second = payroll_service.preview_payroll(2024, 3)

    assert first == second
    assert temp_db.list_payroll_runs() == []
    assert all(not txn.processed for txn in temp_db.list_hr_transactions())


def test_certify_persists_run_and_consumes_transactions(payroll_service, employee_service, sample_employee, temp_db):
    employee_service.record_transaction(sample_employee.id, date(2024, 3, 5), HrTransactionType.BONUS, Decimal("1000"))

    run = payroll_service.certify_payroll(2024, 3)

    assert run.year == 2024 and run.month == 3
    assert len(run.slips) == 1
    assert run.slips[0].bonuses == Decimal("1000.00")
    assert all(txn.processed for txn in temp_db.list_hr_transactions())

    # Consumed transactions do not count again in a later preview
    assert payroll_service.preview_payroll(2024, 3)[0].bonuses == Decimal("0.00")


def test_certify_twice_is_rejected(payroll_service, sample_employee):
    payroll_service.certify_payroll(2024, 3)
    with pytest.raises(ConflictError, match="already certified"):
        payroll_service.certify_payroll(2024, 3)


def test_certify_without_employees(payroll_service):
    with pytest.raises(ValidationError, match="No active employees"):
        payroll_service.certify_payroll(2024, 3)


def test_invalid_month(payroll_service):
    with pytest.raises(ValidationError, match="Invalid period"):
        payroll_service.preview_payroll(2024, 13)


def test_salary_map_totals(payroll_service, employee_service, sample_employee):
    employee_service.create_employee(name="Bruno", base_salary=Decimal("100000"))
    payroll_service.certify_payroll(2024, 3)

    salary_map = payroll_service.salary_map(2024, 3)

    assert len(salary_map.slips) == 2
    assert salary_map.totals["gross_total"] == Decimal("250000.00")
    assert salary_map.totals["inss"] == Decimal("7500.00")
    assert salary_map.totals["subsidies"] == Decimal("10000.00")
    assert salary_map.totals["net_total"] == sum(slip.net_total for slip in salary_map.slips)


def test_get_run_missing(payroll_service):
    with pytest.raises(NotFoundError):
        payroll_service.get_run(2024, 1)


def test_list_runs_ordered(payroll_service, sample_employee):
    payroll_service.certify_payroll(2024, 4)
    payroll_service.certify_payroll(2024, 2)
    assert [(run.year, run.month) for run in payroll_service.list_runs()] == [(2024, 2), (2024, 4)]
