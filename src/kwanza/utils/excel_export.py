"""Excel export of ledger and payroll reports.

Uses openpyxl for workbook generation. Every export writes one sheet with a
merged title row, a styled header row and the data, and returns the path.
"""

import logging
from decimal import Decimal
from pathlib import Path
from typing import Union

from openpyxl import Workbook
from openpyxl.cell.cell import MergedCell
from openpyxl.styles import Font, Alignment, PatternFill
from openpyxl.worksheet.worksheet import Worksheet

from kwanza.domain.entities import AccountExtract, SalaryMap, TrialBalance, VatSettlement
from kwanza.domain.payroll import SALARY_MAP_COLUMNS

logger = logging.getLogger(__name__)

MONEY_FORMAT = "#,##0.00"
HEADER_FILL = PatternFill(start_color="366092", end_color="366092", fill_type="solid")

PathLike = Union[str, Path]


def style_header_row(ws: Worksheet, row_num: int, col_count: int) -> None:
    """Apply header styling to a row."""
    for col in range(1, col_count + 1):
        cell = ws.cell(row=row_num, column=col)
        cell.font = Font(bold=True, color="FFFFFF")
        cell.fill = HEADER_FILL
        cell.alignment = Alignment(horizontal="center", vertical="center")


def style_title_row(ws: Worksheet, row_num: int, title: str, col_count: int) -> None:
    """Add and style a merged title row."""
    ws.merge_cells(start_row=row_num, start_column=1, end_row=row_num, end_column=col_count)
    cell = ws.cell(row=row_num, column=1, value=title)
    cell.font = Font(bold=True, size=14)
    cell.alignment = Alignment(horizontal="center")


def auto_width_columns(ws: Worksheet) -> None:
    """Size each column to its longest value, capped at 50."""
    for column_cells in ws.columns:
        max_length = 0
        column = None
        for cell in column_cells:
            if isinstance(cell, MergedCell):
                continue
            if column is None:
                column = cell.column_letter
            if cell.value is not None:
                max_length = max(max_length, len(str(cell.value)))
        if column:
            ws.column_dimensions[column].width = min(max_length + 2, 50)


def _write_table(ws: Worksheet, title: str, headers: list[str], rows: list[list], start_row: int = 1) -> int:
    """Write title, headers and rows; returns the next free row."""
    style_title_row(ws, start_row, title, len(headers))
    header_row = start_row + 2
    for col, header in enumerate(headers, 1):
        ws.cell(row=header_row, column=col, value=header)
    style_header_row(ws, header_row, len(headers))

    row_num = header_row + 1
    for values in rows:
        for col, value in enumerate(values, 1):
            cell = ws.cell(row=row_num, column=col, value=float(value) if isinstance(value, Decimal) else value)
            if isinstance(value, Decimal):
                cell.number_format = MONEY_FORMAT
        row_num += 1
    return row_num


def _bold_row(ws: Worksheet, row_num: int, values: list) -> None:
    for col, value in enumerate(values, 1):
        cell = ws.cell(row=row_num, column=col, value=float(value) if isinstance(value, Decimal) else value)
        cell.font = Font(bold=True)
        if isinstance(value, Decimal):
            cell.number_format = MONEY_FORMAT


def _save(wb: Workbook, path: PathLike) -> Path:
    path = Path(path)
    wb.save(path)
    logger.info("Exported %s", path)
    return path


def export_trial_balance(balance: TrialBalance, path: PathLike) -> Path:
    """Export a balancete to Excel."""
    wb = Workbook()
    ws = wb.active
    ws.title = "Balancete"

    headers = [
        "Conta",
        "Descrição",
        "Saldo Inicial Débito",
        "Saldo Inicial Crédito",
        "Débito",
        "Crédito",
        "Saldo Devedor",
        "Saldo Credor",
    ]
    rows = [
        [
            row.code,
            ("  " * row.level) + row.description,
            row.opening_debit,
            row.opening_credit,
            row.debit,
            row.credit,
            row.balance_debit,
            row.balance_credit,
        ]
        for row in balance.rows
    ]
    title = f"Balancete {balance.start_month:02d}-{balance.end_month:02d}/{balance.year}"
    next_row = _write_table(ws, title, headers, rows)
    _bold_row(
        ws,
        next_row,
        [
            "TOTAL",
            "",
            "",
            "",
            balance.total_debit,
            balance.total_credit,
            balance.total_balance_debit,
            balance.total_balance_credit,
        ],
    )
    auto_width_columns(ws)
    return _save(wb, path)


def export_account_extract(extract: AccountExtract, path: PathLike) -> Path:
    """Export an account extract to Excel."""
    wb = Workbook()
    ws = wb.active
    ws.title = "Extrato"

    headers = ["Data", "Diário", "Documento", "Conta", "Descrição", "Débito", "Crédito", "Saldo"]
    rows = [
        [
            row.date.isoformat() if row.date else "",
            row.diary,
            row.doc_number,
            row.account_code,
            row.description,
            row.debit,
            row.credit,
            row.balance,
        ]
        for row in extract.rows
    ]
    title = f"Extrato de conta {extract.account_code} {extract.description} ({extract.year})".replace("  ", " ")
    next_row = _write_table(ws, title, headers, rows)
    _bold_row(ws, next_row, ["TOTAL", "", "", "", "", extract.total_debit, extract.total_credit, extract.balance])
    auto_width_columns(ws)
    return _save(wb, path)


def export_salary_map(salary_map: SalaryMap, path: PathLike) -> Path:
    """Export the salary map of a certified payroll to Excel."""
    wb = Workbook()
    ws = wb.active
    ws.title = "Mapa Salarial"

    headers = [
        "Funcionário",
        "Cargo",
        "Salário Base",
        "Bónus",
        "Abonos",
        "Subsídios",
        "Faltas",
        "Adiantamentos",
        "Bruto",
        "INSS (3%)",
        "IRT",
        "Líquido",
        "INSS Entidade (8%)",
    ]
    rows = [
        [
            slip.employee_name,
            slip.employee_role,
            slip.base_salary,
            slip.bonuses,
            slip.allowances,
            slip.subsidies,
            slip.absences,
            slip.advances,
            slip.gross_total,
            slip.inss,
            slip.irt,
            slip.net_total,
            slip.inss_employer,
        ]
        for slip in salary_map.slips
    ]
    title = f"Mapa de Salários {salary_map.month:02d}/{salary_map.year}"
    next_row = _write_table(ws, title, headers, rows)
    totals = salary_map.totals
    _bold_row(
        ws,
        next_row,
        [
            "TOTAL",
            "",
            *(totals.get(column, Decimal("0")) for column in SALARY_MAP_COLUMNS),
        ],
    )
    auto_width_columns(ws)
    return _save(wb, path)


def export_vat_history(settlements: list[VatSettlement], path: PathLike) -> Path:
    """Export registered VAT settlements to Excel."""
    wb = Workbook()
    ws = wb.active
    ws.title = "Apuramento IVA"

    headers = [
        "Período",
        "IVA Dedutível + Regularizações",
        "IVA Liquidado + Regularizações",
        "Regularização Vendas",
        "Regularização Compras",
        "Saldo",
        "Situação",
        "Processado em",
    ]
    rows = [
        [
            f"{s.month:02d}/{s.year}",
            s.total_debit,
            s.total_credit,
            s.sales_adjust,
            s.purchase_adjust,
            s.balance,
            s.position.value,
            s.processed_at.strftime("%Y-%m-%d %H:%M"),
        ]
        for s in settlements
    ]
    _write_table(ws, "Histórico de Apuramento do IVA", headers, rows)
    auto_width_columns(ws)
    return _save(wb, path)
