"""
CSV export and import functionality for SplitLedger
"""
from __future__ import annotations
import csv
import io
from typing import Iterable, List

from models import Expense
from utils import new_expense_id, safe_float

HEADERS = ['Date', 'Item', 'Amount', 'PaidBy', 'SplitAmong']
SPLIT_DELIMITER = '; '


def _expense_row(e: Expense) -> list:
    # commas are removed from the description so the row stays well-formed in naive readers
    safe_item = (e.description or '').replace(',', ' ')
    return [e.date, safe_item, e.amount, e.paid_by, SPLIT_DELIMITER.join(e.split_among)]


def write_expenses(expenses: Iterable[Expense], f) -> None:
    """Write header and expense rows to an open text file"""
    writer = csv.writer(f, lineterminator='\n')
    writer.writerow(HEADERS)
    for e in expenses:
        writer.writerow(_expense_row(e))


def expenses_to_csv_text(expenses: Iterable[Expense]) -> str:
    """Render expenses as CSV text"""
    buf = io.StringIO()
    write_expenses(expenses, buf)
    return buf.getvalue()


def export_expenses_to_csv(expenses: Iterable[Expense], filepath: str) -> None:
    """
    Export expenses list to CSV file
    CSV columns: Date, Item, Amount, PaidBy, SplitAmong
    """
    with open(filepath, 'w', newline='', encoding='utf-8') as f:
        write_expenses(expenses, f)


def import_expenses_from_csv(filepath: str) -> List[Expense]:
    """
    Import expenses list from CSV file
    Returns list of Expense objects with fresh ids
    """
    expenses = []

    with open(filepath, 'r', newline='', encoding='utf-8') as f:
        reader = csv.DictReader(f)

        for row in reader:
            split = [p.strip() for p in (row.get('SplitAmong') or '').split(';')]
            expenses.append(Expense(
                id=new_expense_id(),
                date=(row.get('Date') or '').strip(),
                description=row.get('Item') or '',
                amount=safe_float(row.get('Amount')),
                paid_by=(row.get('PaidBy') or '').strip(),
                split_among=tuple(p for p in split if p),
            ))

    return expenses
