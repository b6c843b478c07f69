"""
Ledger mutations for SplitLedger.

Every function takes a Ledger and returns a new one; ledgers are never
modified in place, so balances and settlements can always be recomputed
from a consistent snapshot.
"""
from __future__ import annotations
import logging
from dataclasses import replace
from typing import Iterable, Optional

from models import Expense, Ledger, LedgerError
from utils import new_expense_id, today_str

logger = logging.getLogger(__name__)

_EDITABLE_FIELDS = {"date", "description", "amount", "paid_by", "split_among"}


def add_participant(ledger: Ledger, name: str) -> Ledger:
    """Append a participant; blank or duplicate names leave the ledger unchanged"""
    name = (name or "").strip()
    if not name:
        return ledger
    if name in ledger.participants:
        logger.warning("Participant %r already exists", name)
        return ledger
    return replace(ledger, participants=ledger.participants + (name,))


def remove_participant(ledger: Ledger, name: str) -> Ledger:
    """
    Remove a participant and cascade to the expenses:
    - the name is stripped from every split list
    - expenses they paid for are reassigned to the first remaining
      participant, or left without a payer ("") if nobody is left
    """
    if name not in ledger.participants:
        return ledger
    remaining = tuple(p for p in ledger.participants if p != name)
    fallback_payer = remaining[0] if remaining else ""

    expenses = []
    for e in ledger.expenses:
        paid_by = e.paid_by
        if paid_by == name:
            paid_by = fallback_payer
            logger.info("Expense %s: payer %r removed, reassigned to %r", e.id, name, paid_by)
        expenses.append(replace(
            e,
            paid_by=paid_by,
            split_among=tuple(p for p in e.split_among if p != name),
        ))
    return replace(ledger, participants=remaining, expenses=tuple(expenses))


def new_expense(
    ledger: Ledger,
    description: str = "",
    amount=0.0,
    paid_by: Optional[str] = None,
    split_among: Optional[Iterable[str]] = None,
    date: Optional[str] = None,
) -> Expense:
    """Build an expense dated today, paid by the first participant and split among everyone"""
    if paid_by is None:
        paid_by = ledger.participants[0] if ledger.participants else ""
    if split_among is None:
        split_among = ledger.participants
    return Expense(
        id=new_expense_id(),
        date=date or today_str(),
        description=description,
        amount=amount,
        paid_by=paid_by,
        split_among=tuple(split_among),
    )


def add_expense(ledger: Ledger, expense: Expense) -> Ledger:
    """Append an expense; its id must be new to the ledger"""
    if any(e.id == expense.id for e in ledger.expenses):
        raise LedgerError(f"Expense id already in ledger: {expense.id}")
    return replace(ledger, expenses=ledger.expenses + (expense,))


def _index_of(ledger: Ledger, expense_id: str) -> int:
    for i, e in enumerate(ledger.expenses):
        if e.id == expense_id:
            return i
    raise LedgerError(f"No expense with id {expense_id}")


def update_expense(ledger: Ledger, expense_id: str, **changes) -> Ledger:
    """Replace fields of one expense; id cannot be changed"""
    unknown = set(changes) - _EDITABLE_FIELDS
    if unknown:
        raise LedgerError(f"Cannot update expense fields: {', '.join(sorted(unknown))}")
    if "split_among" in changes:
        changes["split_among"] = tuple(changes["split_among"])
    idx = _index_of(ledger, expense_id)
    expenses = list(ledger.expenses)
    expenses[idx] = replace(expenses[idx], **changes)
    return replace(ledger, expenses=tuple(expenses))


def remove_expense(ledger: Ledger, expense_id: str) -> Ledger:
    """Drop one expense by id"""
    _index_of(ledger, expense_id)
    return replace(ledger, expenses=tuple(e for e in ledger.expenses if e.id != expense_id))


def toggle_split_participant(ledger: Ledger, expense_id: str, name: str) -> Ledger:
    """Include or exclude a participant from an expense's split"""
    e = ledger.expenses[_index_of(ledger, expense_id)]
    if name in e.split_among:
        split = tuple(p for p in e.split_among if p != name)
    else:
        split = e.split_among + (name,)
    return update_expense(ledger, expense_id, split_among=split)
