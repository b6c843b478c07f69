"""
Utility functions for SplitLedger application
"""
from __future__ import annotations
import math
import os
import uuid
from datetime import date, datetime

CURRENCY_SYMBOL = "₹"


def today_str() -> str:
    """Get today's date as ISO string"""
    return date.today().isoformat()


def parse_date(s: str) -> date:
    """Parse YYYY-MM-DD date string"""
    return datetime.strptime(s.strip(), "%Y-%m-%d").date()


def new_expense_id() -> str:
    """Fresh unique expense id"""
    return str(uuid.uuid4())


def safe_float(x, default: float = 0.0) -> float:
    """Convert value to float safely, returning default on error or non-finite input"""
    try:
        v = float(x)
    except (TypeError, ValueError):
        return default
    if not math.isfinite(v):
        return default
    return v


def app_dir() -> str:
    """
    Get application data directory.
    $SPLIT_LEDGER_HOME if set, otherwise ~/.split_ledger.
    Creates directory if it doesn't exist.
    """
    path = os.environ.get("SPLIT_LEDGER_HOME") or os.path.expanduser("~/.split_ledger")
    os.makedirs(path, exist_ok=True)
    return path


def group_indian(n: int) -> str:
    """Digit grouping used by the en-IN locale: 1,23,45,678"""
    sign = "-" if n < 0 else ""
    s = str(abs(n))
    if len(s) <= 3:
        return sign + s
    head, tail = s[:-3], s[-3:]
    groups = []
    while len(head) > 2:
        groups.insert(0, head[-2:])
        head = head[:-2]
    if head:
        groups.insert(0, head)
    return sign + ",".join(groups + [tail])


def format_transfer_amount(amount: float) -> str:
    """Transfers are rounded up to whole units so nothing is under-collected"""
    return f"{CURRENCY_SYMBOL}{group_indian(math.ceil(amount))}"


def format_balance(net: float) -> str:
    """Signed two-decimal balance, e.g. +1000.00 / -200.00"""
    sign = "+" if net > 0 else ""
    return f"{sign}{net:.2f}"


def format_money(amount: float) -> str:
    """Two-decimal amount for paid/share breakdowns"""
    return f"{CURRENCY_SYMBOL}{amount:.2f}"


def format_total(amount: float) -> str:
    """Grouped total with up to two decimals, e.g. ₹2,400 or ₹1,234.5"""
    rounded = round(amount, 2)
    whole = int(rounded)
    frac = f"{abs(rounded - whole):.2f}"[1:].rstrip("0").rstrip(".")
    sign = "-" if rounded < 0 and whole == 0 else ""
    return f"{CURRENCY_SYMBOL}{sign}{group_indian(whole)}{frac}"
