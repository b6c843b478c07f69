"""
Excel export functionality for SplitLedger
"""
from __future__ import annotations
from datetime import date
from typing import Optional, Union

from openpyxl import Workbook
from openpyxl.styles import Font, Alignment, PatternFill, Border, Side
from openpyxl.utils import get_column_letter

from models import Ledger, SettlementStrategy
from computations import (
    compute_balances,
    compute_settlements,
    expense_amount,
    filter_expenses_by_date,
    total_spent,
)


def _style_header(ws, row=1):
    """Apply header styling to worksheet row"""
    header_font = Font(bold=True, color="FFFFFF")
    fill = PatternFill("solid", fgColor="4F81BD")
    align = Alignment(horizontal="center", vertical="center")
    thin = Side(style="thin", color="A0A0A0")
    border = Border(left=thin, right=thin, top=thin, bottom=thin)
    for cell in ws[row]:
        cell.font = header_font
        cell.fill = fill
        cell.alignment = align
        cell.border = border


def _autosize_columns(ws, min_width=10, max_width=45):
    """Auto-size columns based on content"""
    for col in range(1, ws.max_column + 1):
        letter = get_column_letter(col)
        max_len = 0
        for cell in ws[letter]:
            if cell.value is None:
                continue
            max_len = max(max_len, len(str(cell.value)))
        ws.column_dimensions[letter].width = max(min_width, min(max_width, max_len + 2))


def _money_format(ws, cols, first_row=2):
    for r in range(first_row, ws.max_row + 1):
        for c in cols:
            ws.cell(r, c).number_format = "0.00"


def export_excel(
    ledger: Ledger,
    filepath: str,
    strategy: Union[SettlementStrategy, str] = SettlementStrategy.SMART,
    start: Optional[date] = None,
    end: Optional[date] = None
) -> None:
    """
    Export ledger to Excel file with sheets:
    - Expenses
    - Balances (paid / share / net per participant)
    - Settlements (itemized transfers list their expense lines beneath)
    """
    strategy = SettlementStrategy(strategy)
    report = Ledger(
        participants=ledger.participants,
        expenses=tuple(filter_expenses_by_date(ledger.expenses, start, end)),
        version=ledger.version,
    )

    wb = Workbook()
    # remove default sheet
    wb.remove(wb.active)

    ws = wb.create_sheet("Expenses")
    ws.append(["Date", "Item", "Amount", "Paid By", "Split Among"])
    _style_header(ws, 1)
    ws.freeze_panes = "A2"
    for e in report.expenses:
        ws.append([e.date, e.description, expense_amount(e), e.paid_by, ", ".join(e.split_among)])
    if report.expenses:
        ws.append(["TOTAL", "", total_spent(report)])
        ws.cell(ws.max_row, 1).font = Font(bold=True)
    _money_format(ws, [3])
    _autosize_columns(ws)

    ws = wb.create_sheet("Balances")
    ws.append(["Person", "Paid", "Share", "Net (Paid-Share)"])
    _style_header(ws, 1)
    ws.freeze_panes = "A2"
    for b in compute_balances(report):
        ws.append([b.name, b.paid, b.share, b.net])
    _money_format(ws, [2, 3, 4])
    _autosize_columns(ws)

    ws = wb.create_sheet("Settlements")
    ws.append(["From (Debtor)", "To (Creditor)", "Amount", "Item"])
    _style_header(ws, 1)
    ws.freeze_panes = "A2"
    for t in compute_settlements(strategy, report):
        ws.append([t.debtor, t.creditor, t.amount, ""])
        ws.cell(ws.max_row, 1).font = Font(bold=True)
        for item in t.items:
            ws.append(["", "", item.amount, item.reason])
            ws.cell(ws.max_row, 4).fill = PatternFill("solid", fgColor="D9E1F2")
    _money_format(ws, [3])
    _autosize_columns(ws)

    wb.save(filepath)
