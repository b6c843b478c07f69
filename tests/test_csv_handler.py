from models import Expense
from csv_handler import expenses_to_csv_text, export_expenses_to_csv, import_expenses_from_csv


def sample_expenses():
    return [
        Expense(id="1", date="2025-05-01", description="Pizza, pasta", amount=1800, paid_by="Alice", split_among=("Alice", "Bob")),
        Expense(id="2", date="2025-05-02", description="", amount=99.5, paid_by="Bob", split_among=()),
    ]


def test_csv_text_layout():
    lines = expenses_to_csv_text(sample_expenses()).splitlines()

    assert lines[0] == "Date,Item,Amount,PaidBy,SplitAmong"
    assert lines[1] == "2025-05-01,Pizza  pasta,1800,Alice,Alice; Bob"
    assert lines[2] == "2025-05-02,,99.5,Bob,"


def test_export_and_import(tmp_path):
    path = tmp_path / "expenses.csv"
    export_expenses_to_csv(sample_expenses(), str(path))

    imported = import_expenses_from_csv(str(path))
    assert [(e.date, e.description, e.amount, e.paid_by, e.split_among) for e in imported] == [
        ("2025-05-01", "Pizza  pasta", 1800.0, "Alice", ("Alice", "Bob")),
        ("2025-05-02", "", 99.5, "Bob", ()),
    ]
    assert imported[0].id != imported[1].id


def test_import_coerces_bad_amounts(tmp_path):
    path = tmp_path / "bad.csv"
    path.write_text("Date,Item,Amount,PaidBy,SplitAmong\n2025-05-01,Tea,lots,Ann,Ann;Ben\n", encoding="utf-8")

    (e,) = import_expenses_from_csv(str(path))
    assert e.amount == 0.0
    assert e.split_among == ("Ann", "Ben")
