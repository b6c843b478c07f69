"""
Business logic and computations for SplitLedger
"""
from __future__ import annotations
import logging
from datetime import date
from typing import Dict, Iterable, List, Optional, Sequence, Union

from models import (
    Balance,
    DebtPair,
    Expense,
    Ledger,
    LedgerError,
    SettlementStrategy,
    Transfer,
    TransferItem,
)
from utils import parse_date, safe_float

logger = logging.getLogger(__name__)

# one minor currency unit; balances closer than this to zero count as settled
SETTLED_EPSILON = 0.01

UNTITLED_ITEM = "Untitled"


def expense_amount(e: Expense) -> float:
    """Amount of an expense, non-numeric values counted as 0"""
    return safe_float(e.amount)


def valid_beneficiaries(e: Expense, participants: Sequence[str]) -> List[str]:
    """Split members that are still participants, deduplicated, in split order"""
    present = set(participants)
    out = []
    for p in e.split_among:
        if p in present and p not in out:
            out.append(p)
    return out


def _check_participants(participants: Sequence[str]) -> None:
    if len(set(participants)) != len(participants):
        dupes = sorted({p for p in participants if participants.count(p) > 1})
        raise LedgerError(f"Duplicate participant names: {', '.join(dupes)}")


def total_spent(ledger: Ledger) -> float:
    """Sum of all expense amounts, non-numeric values counted as 0"""
    return sum(expense_amount(e) for e in ledger.expenses)


def filter_expenses_by_date(
    expenses: Iterable[Expense],
    start: Optional[date],
    end: Optional[date]
) -> List[Expense]:
    """Filter expenses by inclusive date range; undated expenses are kept"""
    out = []
    for e in expenses:
        if start or end:
            try:
                ed = parse_date(e.date)
            except (AttributeError, ValueError):
                logger.debug("Expense %s has unparseable date %r; keeping it", e.id, e.date)
                out.append(e)
                continue
            if start and ed < start:
                continue
            if end and ed > end:
                continue
        out.append(e)
    return out


def compute_balances(ledger: Ledger) -> List[Balance]:
    """
    Compute paid / share / net for each participant, in participant order.

    An expense whose split list has no current participant is treated as
    self-paid: the payer becomes the sole beneficiary. A payer that is no
    longer a participant simply contributes nothing to "paid".
    """
    people = list(ledger.participants)
    _check_participants(people)

    paid = {p: 0.0 for p in people}
    share = {p: 0.0 for p in people}

    for e in ledger.expenses:
        amount = expense_amount(e)
        beneficiaries = valid_beneficiaries(e, people) or [e.paid_by]
        cost = amount / len(beneficiaries)

        if e.paid_by in paid:
            paid[e.paid_by] += amount
        for p in beneficiaries:
            if p in share:
                share[p] += cost

    return [Balance(name=p, paid=paid[p], share=share[p], net=paid[p] - share[p]) for p in people]


def compute_smart_settlements(balances: Sequence[Balance]) -> List[Transfer]:
    """
    Greedy settlement: the largest debtor pays the largest creditor until one
    of them is settled, then move on. Produces at most n-1 transfers.
    Returns list of Transfer records; input balances are left untouched.
    """
    debtors = [[b.name, b.net] for b in balances if b.net < -SETTLED_EPSILON]
    creditors = [[b.name, b.net] for b in balances if b.net > SETTLED_EPSILON]
    # stable sorts: ties keep participant order
    debtors.sort(key=lambda x: x[1])
    creditors.sort(key=lambda x: x[1], reverse=True)

    transfers = []
    i = j = 0
    while i < len(debtors) and j < len(creditors):
        debtor = debtors[i]
        creditor = creditors[j]

        amt = min(abs(debtor[1]), creditor[1])
        transfers.append(Transfer(debtor=debtor[0], creditor=creditor[0], amount=amt))

        debtor[1] += amt
        creditor[1] -= amt

        if abs(debtor[1]) < SETTLED_EPSILON:
            i += 1
        if creditor[1] < SETTLED_EPSILON:
            j += 1

    return transfers


def compute_itemized_settlements(ledger: Ledger) -> List[Transfer]:
    """
    Aggregate debts per (beneficiary, payer) pair without netting.
    Each transfer carries the expense lines it is made of.
    Expenses with no valid beneficiary are skipped.
    """
    people = list(ledger.participants)
    _check_participants(people)

    amounts: Dict[DebtPair, float] = {}
    items: Dict[DebtPair, List[TransferItem]] = {}

    for e in ledger.expenses:
        beneficiaries = valid_beneficiaries(e, people)
        if not beneficiaries:
            continue
        cost = expense_amount(e) / len(beneficiaries)
        reason = e.description or UNTITLED_ITEM

        for p in beneficiaries:
            if p == e.paid_by:
                continue
            key = DebtPair(debtor=p, creditor=e.paid_by)
            amounts[key] = amounts.get(key, 0.0) + cost
            items.setdefault(key, []).append(TransferItem(reason=reason, amount=cost))

    return [
        Transfer(debtor=k.debtor, creditor=k.creditor, amount=amounts[k], items=tuple(items[k]))
        for k in amounts
    ]


def compute_settlements(
    strategy: Union[SettlementStrategy, str],
    ledger: Ledger
) -> List[Transfer]:
    """Compute transfers for the ledger with the requested strategy"""
    try:
        strategy = SettlementStrategy(strategy)
    except ValueError:
        raise LedgerError(f"Unknown settlement strategy: {strategy!r}") from None

    if strategy is SettlementStrategy.SMART:
        return compute_smart_settlements(compute_balances(ledger))
    return compute_itemized_settlements(ledger)


def settlement_total(transfers: Iterable[Transfer]) -> float:
    """Total money moved by a list of transfers"""
    return sum(t.amount for t in transfers)

