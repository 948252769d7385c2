"""Payroll domain service."""

import logging
from collections import defaultdict
from decimal import Decimal
from typing import Iterable

from kwanza.database.base import Database
from kwanza.domain.entities import (
    ZERO,
    Employee,
    EmployeeStatus,
    HrTransaction,
    HrTransactionType,
    PayrollRun,
    SalarySlip,
    SalaryMap,
)
from kwanza.domain.errors import (
    ValidationError,
    NotFoundError,
    ConflictError,
    payroll_already_certified,
)
from kwanza.domain.taxes import calculate_inss, calculate_inss_entity, calculate_irt, round_currency
from kwanza.utils.date_parser import month_range

logger = logging.getLogger(__name__)

SALARY_MAP_COLUMNS = (
    "base_salary",
    "bonuses",
    "allowances",
    "subsidies",
    "absences",
    "advances",
    "gross_total",
    "inss",
    "irt",
    "net_total",
    "inss_employer",
)


class PayrollService:
    """Service for monthly payroll computation and certification."""

    def __init__(self, db: Database):
        """Initialize payroll service.

        Args:
            db: Database instance
        """
        self.db = db

    def calculate_slip(
        self, employee: Employee, transactions: Iterable[HrTransaction], year: int, month: int
    ) -> SalarySlip:
        """Compute the salary slip of one employee for a month.

        Only the employee's unprocessed transactions dated inside the month
        are considered; everything else in `transactions` is ignored.

        gross = base + bonuses + allowances - absences
        net = gross + subsidies - INSS - IRT - advances

        Args:
            employee: Employee to compute
            transactions: Candidate payroll variations
            year: Payroll year
            month: Payroll month (1-12)

        Returns:
            SalarySlip for the month
        """
        start, end = month_range(year, month)
        sums: dict[HrTransactionType, Decimal] = defaultdict(lambda: ZERO)
        used_ids = []
        for txn in transactions:
            if txn.employee_id != employee.id or txn.processed:
                continue
            if not start <= txn.date <= end:
                continue
            sums[txn.transaction_type] += txn.amount
            used_ids.append(txn.id)

        bonuses = round_currency(sums[HrTransactionType.BONUS])
        allowances = round_currency(sums[HrTransactionType.ALLOWANCE])
        absences = round_currency(sums[HrTransactionType.ABSENCE])
        advances = round_currency(sums[HrTransactionType.ADVANCE])

        gross = round_currency(employee.base_salary + bonuses + allowances - absences)
        inss = calculate_inss(gross)
        irt = calculate_irt(gross, inss)
        subsidies = employee.total_subsidies
        net = round_currency(gross + subsidies - inss - irt - advances)

        return SalarySlip(
            employee_id=employee.id,
            employee_name=employee.name,
            employee_role=employee.role,
            year=year,
            month=month,
            base_salary=employee.base_salary,
            bonuses=bonuses,
            allowances=allowances,
            subsidy_transport=employee.subsidy_transport,
            subsidy_food=employee.subsidy_food,
            subsidy_family=employee.subsidy_family,
            subsidy_housing=employee.subsidy_housing,
            absences=absences,
            advances=advances,
            gross_total=gross,
            inss=inss,
            irt=irt,
            net_total=net,
            inss_employer=calculate_inss_entity(gross),
            transaction_ids=tuple(used_ids),
        )

    def preview_payroll(self, year: int, month: int) -> list[SalarySlip]:
        """Compute the slips of every active employee without saving anything."""
        start, end = month_range(year, month)
        employees = self.db.list_employees(status=EmployeeStatus.ACTIVE.value)
        transactions = self.db.list_hr_transactions(start_date=start, end_date=end, processed=False)
        return [self.calculate_slip(emp, transactions, year, month) for emp in employees]

    def certify_payroll(self, year: int, month: int) -> PayrollRun:
        """Persist the month's payroll and consume its transactions.

        Raises:
            ConflictError: If the month is already certified
            ValidationError: If there are no active employees
        """
        month_range(year, month)
        if self.db.get_payroll_run(year, month) is not None:
            raise ConflictError(payroll_already_certified(year, month))

        slips = self.preview_payroll(year, month)
        if not slips:
            raise ValidationError(f"No active employees to process for {month:02d}/{year}")

        transaction_ids = [txn_id for slip in slips for txn_id in slip.transaction_ids]
        run_id = self.db.create_payroll_run(year, month, slips, transaction_ids)
        logger.info(
            "Certified payroll %02d/%d: %d slip(s), %d transaction(s)", month, year, len(slips), len(transaction_ids)
        )
        run = self.db.get_payroll_run_by_id(run_id)
        if run is None:
            raise NotFoundError(f"Payroll run {run_id} not found")
        return run

    def list_runs(self) -> list[PayrollRun]:
        """List certified payroll runs."""
        return self.db.list_payroll_runs()

    def get_run(self, year: int, month: int) -> PayrollRun:
        """Get the certified run of a month.

        Raises:
            NotFoundError: If the month has not been certified
        """
        run = self.db.get_payroll_run(year, month)
        if run is None:
            raise NotFoundError(f"No certified payroll for {month:02d}/{year}")
        return run

    def salary_map(self, year: int, month: int) -> SalaryMap:
        """Column totals of a certified month."""
        run = self.get_run(year, month)
        totals = {column: ZERO for column in SALARY_MAP_COLUMNS}
        for slip in run.slips:
            for column in SALARY_MAP_COLUMNS:
                totals[column] += getattr(slip, column)
        return SalaryMap(year=year, month=month, slips=run.slips, totals=totals)
