import base64
import json
import logging

import pytest

from models import Expense, Ledger
from share_link import build_share_url, decode_ledger, encode_ledger, ledger_from_url


@pytest.fixture(autouse=True)
def ledger_home(tmp_path, monkeypatch):
    monkeypatch.setenv("SPLIT_LEDGER_HOME", str(tmp_path))


def sample_ledger():
    return Ledger(
        participants=("Asha", "Ravi"),
        expenses=(
            Expense(id="7", date="2025-04-02", description="Chai & samosa", amount=120.5, paid_by="Ravi", split_among=("Asha", "Ravi")),
        ),
    )


def test_encode_uses_source_wire_keys():
    payload = json.loads(base64.urlsafe_b64decode(encode_ledger(sample_ledger())))

    assert payload["p"] == ["Asha", "Ravi"]
    assert payload["e"] == [{
        "id": "7",
        "date": "2025-04-02",
        "item": "Chai & samosa",
        "amount": 120.5,
        "paidBy": "Ravi",
        "splitAmong": ["Asha", "Ravi"],
    }]


def test_decode_encoded_ledger():
    assert decode_ledger(encode_ledger(sample_ledger())) == sample_ledger()


def test_decode_standard_base64_from_browser():
    raw = json.dumps({
        "p": ["Alice", "Bob"],
        "e": [{"id": 1, "date": "2025-01-01", "item": "Dinner", "amount": "1800", "paidBy": "Alice", "splitAmong": ["Alice", "Bob"]}],
    })
    token = base64.b64encode(raw.encode()).decode()

    ledger = decode_ledger(token)
    assert ledger.participants == ("Alice", "Bob")
    assert ledger.expenses[0].id == "1"
    assert ledger.expenses[0].description == "Dinner"
    assert ledger.expenses[0].amount == "1800"


@pytest.mark.parametrize("token", [
    "not base64!!",
    base64.b64encode(b"{not json").decode(),
    base64.b64encode(b'{"p": ["A"]}').decode(),
    base64.b64encode(b'{"p": "A", "e": []}').decode(),
    base64.b64encode(b'{"p": ["A"], "e": [1]}').decode(),
    "\u00e9",
    "abc\u00e9",
    base64.b64encode(b"[" * 100000).decode(),
])
def test_malformed_token_falls_back_with_warning(token, caplog):
    fallback = Ledger(participants=("X",))
    with caplog.at_level(logging.WARNING, logger="share_link"):
        assert decode_ledger(token, fallback) is fallback
    assert "Failed to load shared ledger" in caplog.text


def test_malformed_token_without_default_gives_default_ledger():
    ledger = decode_ledger("%%%")
    assert ledger.participants == ("Alice", "Bob", "Charlie")
    assert ledger.expenses == ()


def test_share_url_roundtrip_keeps_other_params():
    url = build_share_url("https://example.org/split?lang=en", sample_ledger())

    assert url.startswith("https://example.org/split?lang=en&data=")
    assert ledger_from_url(url) == sample_ledger()


def test_url_without_data_gives_default():
    fallback = Ledger(participants=("X",))
    assert ledger_from_url("https://example.org/split", fallback) is fallback


def test_url_with_non_ascii_data_falls_back():
    fallback = Ledger(participants=("X",))
    assert ledger_from_url("http://h/?data=%C3%A9", fallback) is fallback
