"""
SplitLedger command line
- Record who paid what and who shares each expense.
- Show balances and the transfers that settle everyone up, either pooled
  ("smart", fewest transfers) or itemized per person pair.

Run:
  python split_ledger_cli.py balances trip.json
  python split_ledger_cli.py settle trip.json --strategy itemized
  python split_ledger_cli.py share trip.json --base-url https://example.org/split

Dependencies:
  pip install openpyxl
"""
from __future__ import annotations
import argparse
import logging
import sys
from typing import List, Optional

from models import Ledger, LedgerError, SettlementStrategy
from config import load_ledger, save_ledger
from computations import compute_balances, compute_settlements, total_spent
from csv_handler import export_expenses_to_csv
from excel_export import export_excel
from ledger_ops import add_participant, remove_participant
from share_link import build_share_url, ledger_from_url
from utils import (
    format_balance,
    format_money,
    format_total,
    format_transfer_amount,
    parse_date,
)

logger = logging.getLogger("split_ledger")


def _print_balances(ledger: Ledger, out) -> None:
    print(f"Total spent: {format_total(total_spent(ledger))}", file=out)
    for b in compute_balances(ledger):
        print(f"{b.name:<16} {format_balance(b.net):>12}   "
              f"Paid: {format_money(b.paid)}  Share: {format_money(b.share)}", file=out)


def _print_settlements(ledger: Ledger, strategy: SettlementStrategy, out) -> None:
    transfers = compute_settlements(strategy, ledger)
    if not transfers:
        msg = "Add expenses to calculate." if total_spent(ledger) == 0 else "Everyone is settled up!"
        print(msg, file=out)
        return
    for t in transfers:
        print(f"{t.debtor} pays {t.creditor} {format_transfer_amount(t.amount)}", file=out)
        for item in t.items:
            print(f"    {item.reason}: {format_transfer_amount(item.amount)}", file=out)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="split-ledger", description="Split group expenses and settle up.")
    parser.add_argument("-v", "--verbose", action="store_true", help="log debug output")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("balances", help="show paid / share / net per person")
    p.add_argument("ledger")

    p = sub.add_parser("settle", help="show transfers that settle all debts")
    p.add_argument("ledger")
    p.add_argument("--strategy", choices=[s.value for s in SettlementStrategy],
                   default=SettlementStrategy.SMART.value)

    p = sub.add_parser("add-person", help="add a participant")
    p.add_argument("ledger")
    p.add_argument("name")

    p = sub.add_parser("remove-person", help="remove a participant and cascade to expenses")
    p.add_argument("ledger")
    p.add_argument("name")

    p = sub.add_parser("export-csv", help="export expenses as CSV")
    p.add_argument("ledger")
    p.add_argument("output")

    p = sub.add_parser("export-excel", help="export an Excel report")
    p.add_argument("ledger")
    p.add_argument("output")
    p.add_argument("--strategy", choices=[s.value for s in SettlementStrategy],
                   default=SettlementStrategy.SMART.value)
    p.add_argument("--start", help="first date to include (YYYY-MM-DD)")
    p.add_argument("--end", help="last date to include (YYYY-MM-DD)")

    p = sub.add_parser("share", help="print a share link carrying the ledger")
    p.add_argument("ledger")
    p.add_argument("--base-url", default="http://localhost/")

    p = sub.add_parser("import-link", help="save the ledger carried by a share link")
    p.add_argument("url")
    p.add_argument("output")

    return parser


def run(args: argparse.Namespace, out=None) -> int:
    out = out or sys.stdout
    cmd = args.command

    if cmd == "import-link":
        ledger = ledger_from_url(args.url)
        save_ledger(ledger, args.output)
        print(f"Saved {len(ledger.expenses)} expenses to {args.output}", file=out)
        return 0

    ledger = load_ledger(args.ledger)

    if cmd == "balances":
        _print_balances(ledger, out)
    elif cmd == "settle":
        _print_settlements(ledger, SettlementStrategy(args.strategy), out)
    elif cmd == "add-person":
        save_ledger(add_participant(ledger, args.name), args.ledger)
    elif cmd == "remove-person":
        save_ledger(remove_participant(ledger, args.name), args.ledger)
    elif cmd == "export-csv":
        export_expenses_to_csv(ledger.expenses, args.output)
        print(f"Exported {len(ledger.expenses)} expenses to {args.output}", file=out)
    elif cmd == "export-excel":
        try:
            start = parse_date(args.start) if args.start else None
            end = parse_date(args.end) if args.end else None
        except ValueError:
            raise LedgerError("Dates must be YYYY-MM-DD.")
        export_excel(ledger, args.output, args.strategy, start, end)
        print(f"Exported: {args.output}", file=out)
    elif cmd == "share":
        print(build_share_url(args.base_url, ledger), file=out)
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the application"""
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    try:
        return run(args)
    except (LedgerError, OSError) as ex:
        logger.error("%s failed: %s", args.command, ex)
        return 1


if __name__ == "__main__":
    sys.exit(main())
