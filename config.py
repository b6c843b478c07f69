"""
Configuration and data loading/saving for SplitLedger
"""
from __future__ import annotations
import json
import logging
import os
from typing import List
from dataclasses import asdict

from models import Expense, Ledger, LedgerError
from utils import app_dir, new_expense_id, today_str

logger = logging.getLogger(__name__)

DEFAULT_PARTICIPANTS = ["Alice", "Bob", "Charlie"]


def load_people(path: str) -> List[str]:
    """Load people list from JSON file"""
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
        return list(data.get("people", []))
    except FileNotFoundError:
        return []
    except (json.JSONDecodeError, AttributeError) as ex:
        logger.warning("Ignoring malformed people file %s: %s", path, ex)
        return []


def get_default_ledger() -> Ledger:
    """Create default ledger with the saved people list and no expenses"""
    people = load_people(os.path.join(app_dir(), "people.json"))
    if not people:
        people = list(DEFAULT_PARTICIPANTS)  # fallback
    # keep first occurrence of each name
    return Ledger(participants=tuple(dict.fromkeys(people)), expenses=())


def ledger_to_dict(ledger: Ledger) -> dict:
    """Convert Ledger object to dictionary for JSON serialization"""
    return {
        "version": ledger.version,
        "participants": list(ledger.participants),
        "expenses": [
            dict(asdict(e), split_among=list(e.split_among)) for e in ledger.expenses
        ],
    }


def dict_to_expense(d: dict) -> Expense:
    """Convert one expense dictionary to an Expense, filling missing fields"""
    if not isinstance(d, dict):
        raise LedgerError(f"expense entry is not an object: {d!r}")
    split = d.get("split_among") or []
    if not isinstance(split, list):
        raise LedgerError(f"split_among is not a list: {split!r}")
    return Expense(
        id=str(d.get("id") or new_expense_id()),
        date=str(d.get("date") or today_str()),
        description=str(d.get("description") or ""),
        amount=d.get("amount", 0.0),
        paid_by=str(d.get("paid_by") or ""),
        split_among=tuple(str(p) for p in split),
    )


def dict_to_ledger(d: dict) -> Ledger:
    """Convert dictionary from JSON to Ledger object"""
    participants = d.get("participants", [])
    expenses = d.get("expenses", [])
    if not isinstance(participants, list) or not isinstance(expenses, list):
        raise LedgerError("participants and expenses must be lists")
    try:
        version = int(d.get("version", 1))
    except (TypeError, ValueError):
        raise LedgerError(f"version is not an integer: {d.get('version')!r}") from None
    return Ledger(
        version=version,
        participants=tuple(dict.fromkeys(str(p) for p in participants)),
        expenses=tuple(dict_to_expense(e) for e in expenses),
    )


def load_ledger(path: str) -> Ledger:
    """Load ledger from JSON file; a missing file gives the default ledger"""
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError:
        logger.info("No ledger at %s, starting with the default ledger", path)
        return get_default_ledger()
    # ValueError covers bad JSON and bad UTF-8
    except (ValueError, RecursionError) as ex:
        raise LedgerError(f"Ledger file {path} is not valid JSON: {ex}") from ex
    if not isinstance(data, dict):
        raise LedgerError(f"Ledger file {path} does not contain a JSON object")
    try:
        return dict_to_ledger(data)
    except LedgerError as ex:
        raise LedgerError(f"Ledger file {path} is malformed: {ex}") from ex


def save_ledger(ledger: Ledger, path: str) -> None:
    """Write ledger to a JSON file"""
    with open(path, "w", encoding="utf-8") as f:
        json.dump(ledger_to_dict(ledger), f, ensure_ascii=False, indent=2)
