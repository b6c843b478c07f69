"""
Data models for SplitLedger application
"""
from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import NamedTuple, Tuple, Union


class LedgerError(ValueError):
    """Raised when a ledger breaks one of its construction rules"""


class SettlementStrategy(Enum):
    """How debts are turned into transfers"""
    SMART = "smart"        # greedy minimal-transaction netting across the group
    ITEMIZED = "itemized"  # per-expense pairwise aggregation, not netted


@dataclass(frozen=True)
class Expense:
    """Single expense, split equally among the selected participants"""
    id: str
    date: str  # YYYY-MM-DD
    description: str
    amount: Union[float, str]  # raw value; non-numeric input counts as 0
    paid_by: str
    split_among: Tuple[str, ...] = ()


@dataclass(frozen=True)
class Ledger:
    """Participants and expenses at a point in time"""
    participants: Tuple[str, ...] = ()
    expenses: Tuple[Expense, ...] = ()
    version: int = 1


@dataclass(frozen=True)
class Balance:
    """Aggregate position of one participant"""
    name: str
    paid: float
    share: float
    net: float  # paid - share; positive -> should receive; negative -> should pay


@dataclass(frozen=True)
class TransferItem:
    """One expense line contributing to an itemized transfer"""
    reason: str
    amount: float


@dataclass(frozen=True)
class Transfer:
    """Directed payment instruction from debtor to creditor"""
    debtor: str
    creditor: str
    amount: float
    items: Tuple[TransferItem, ...] = field(default=())


class DebtPair(NamedTuple):
    """Ordered (debtor, creditor) key for itemized aggregation"""
    debtor: str
    creditor: str
