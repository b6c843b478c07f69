"""
Share-link encoding for SplitLedger.

A ledger travels as base64 of a compact JSON payload in the ``data`` query
parameter: {"p": [participants...], "e": [expenses...]}, each expense as
{"id", "date", "item", "amount", "paidBy", "splitAmong"}.
"""
from __future__ import annotations
import base64
import json
import logging
from typing import Optional
from urllib.parse import parse_qs, urlencode, urlsplit, urlunsplit

from config import get_default_ledger
from models import Expense, Ledger
from utils import new_expense_id, today_str

logger = logging.getLogger(__name__)

QUERY_PARAM = "data"


class _PayloadError(ValueError):
    pass


def _expense_to_wire(e: Expense) -> dict:
    return {
        "id": e.id,
        "date": e.date,
        "item": e.description,
        "amount": e.amount,
        "paidBy": e.paid_by,
        "splitAmong": list(e.split_among),
    }


def _expense_from_wire(d) -> Expense:
    if not isinstance(d, dict):
        raise _PayloadError(f"expense entry is not an object: {d!r}")
    split = d.get("splitAmong") or []
    if not isinstance(split, list):
        raise _PayloadError(f"splitAmong is not a list: {split!r}")
    return Expense(
        id=str(d.get("id") or new_expense_id()),
        date=str(d.get("date") or today_str()),
        description=str(d.get("item") or ""),
        amount=d.get("amount", 0),
        paid_by=str(d.get("paidBy") or ""),
        split_among=tuple(str(p) for p in split),
    )


def encode_ledger(ledger: Ledger) -> str:
    """Serialize a ledger to a URL-safe token"""
    payload = {
        "p": list(ledger.participants),
        "e": [_expense_to_wire(e) for e in ledger.expenses],
    }
    raw = json.dumps(payload, separators=(",", ":"), ensure_ascii=False).encode("utf-8")
    return base64.urlsafe_b64encode(raw).decode("ascii")


def _b64decode(token: str) -> bytes:
    # a raw "+" turns into a space when the token went through a query string
    token = token.strip().replace(" ", "+")
    token += "=" * (-len(token) % 4)
    if "-" in token or "_" in token:
        return base64.urlsafe_b64decode(token)
    return base64.b64decode(token, validate=True)


def _parse_token(token: str) -> Ledger:
    try:
        payload = json.loads(_b64decode(token).decode("utf-8"))
    # ValueError covers bad base64, non-ASCII tokens, bad UTF-8 and bad JSON
    except (ValueError, RecursionError) as ex:
        raise _PayloadError(str(ex)) from ex
    if not isinstance(payload, dict) or "p" not in payload or "e" not in payload:
        raise _PayloadError("payload lacks participants or expenses")
    if not isinstance(payload["p"], list) or not isinstance(payload["e"], list):
        raise _PayloadError("participants and expenses must be lists")
    return Ledger(
        participants=tuple(dict.fromkeys(str(p) for p in payload["p"])),
        expenses=tuple(_expense_from_wire(e) for e in payload["e"]),
    )


def decode_ledger(token: str, default: Optional[Ledger] = None) -> Ledger:
    """
    Decode a share token. A malformed token never raises: a warning is logged
    and ``default`` (or the default ledger) is returned instead.
    """
    try:
        return _parse_token(token)
    except _PayloadError as ex:
        logger.warning("Failed to load shared ledger: %s", ex)
    if default is not None:
        return default
    return get_default_ledger()


def build_share_url(base_url: str, ledger: Ledger) -> str:
    """Attach the encoded ledger to base_url, keeping its other query parameters"""
    parts = urlsplit(base_url)
    query = [(k, v) for k, vs in parse_qs(parts.query).items() for v in vs if k != QUERY_PARAM]
    query.append((QUERY_PARAM, encode_ledger(ledger)))
    return urlunsplit((parts.scheme, parts.netloc, parts.path, urlencode(query), parts.fragment))


def ledger_from_url(url: str, default: Optional[Ledger] = None) -> Ledger:
    """Load the ledger carried by a share URL; no data parameter gives the default"""
    values = parse_qs(urlsplit(url).query).get(QUERY_PARAM)
    if not values:
        if default is not None:
            return default
        return get_default_ledger()
    return decode_ledger(values[0], default)
