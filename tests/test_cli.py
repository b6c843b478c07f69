import io

import pytest

from config import load_ledger, save_ledger
from models import Expense, Ledger
from split_ledger_cli import build_parser, main, run


@pytest.fixture(autouse=True)
def ledger_home(tmp_path, monkeypatch):
    monkeypatch.setenv("SPLIT_LEDGER_HOME", str(tmp_path / "home"))


@pytest.fixture
def ledger_path(tmp_path):
    everyone = ("Alice", "Bob", "Charlie")
    ledger = Ledger(
        participants=everyone,
        expenses=(
            Expense(id="1", date="2025-01-10", description="Dinner", amount=1800, paid_by="Alice", split_among=everyone),
            Expense(id="2", date="2025-01-11", description="Drinks", amount=600, paid_by="Bob", split_among=everyone),
        ),
    )
    path = str(tmp_path / "trip.json")
    save_ledger(ledger, path)
    return path


def cli(*argv):
    out = io.StringIO()
    assert run(build_parser().parse_args(list(argv)), out) == 0
    return out.getvalue()


def test_balances(ledger_path):
    text = cli("balances", ledger_path)
    assert "Total spent: ₹2,400" in text
    assert "+1000.00" in text
    assert "Share: ₹800.00" in text


def test_settle_smart(ledger_path):
    assert cli("settle", ledger_path).splitlines() == [
        "Charlie pays Alice ₹800",
        "Bob pays Alice ₹200",
    ]


def test_settle_itemized(ledger_path):
    lines = cli("settle", ledger_path, "--strategy", "itemized").splitlines()
    assert lines[:2] == ["Bob pays Alice ₹600", "    Dinner: ₹600"]


def test_settle_empty_ledger(tmp_path):
    path = str(tmp_path / "empty.json")
    save_ledger(Ledger(participants=("A",)), path)
    assert cli("settle", path).strip() == "Add expenses to calculate."


def test_remove_person_persists(ledger_path):
    cli("remove-person", ledger_path, "Alice")
    ledger = load_ledger(ledger_path)
    assert ledger.participants == ("Bob", "Charlie")
    assert ledger.expenses[0].paid_by == "Bob"


def test_share_and_import(ledger_path, tmp_path):
    url = cli("share", ledger_path, "--base-url", "https://example.org/").strip()
    target = str(tmp_path / "copy.json")
    cli("import-link", url, target)
    assert load_ledger(target) == load_ledger(ledger_path)


def test_main_reports_errors(tmp_path):
    path = tmp_path / "broken.json"
    path.write_text("[", encoding="utf-8")
    assert main(["balances", str(path)]) == 1


def test_main_reports_wrongly_shaped_ledger(tmp_path):
    path = tmp_path / "odd.json"
    path.write_text('{"participants": ["A"], "expenses": [1], "version": "x"}', encoding="utf-8")
    assert main(["balances", str(path)]) == 1


def test_import_link_with_bad_data_saves_default(tmp_path):
    target = str(tmp_path / "copy.json")
    cli("import-link", "http://h/?data=%C3%A9", target)
    assert load_ledger(target).participants == ("Alice", "Bob", "Charlie")
