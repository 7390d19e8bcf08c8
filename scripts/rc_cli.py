#!/usr/bin/env python3
"""Command-line front end for rclookup.

Configuration comes from ``RC_*`` environment variables (see
``RcConfig.from_env``); ``--data-dir`` overrides ``RC_DATA_DIR``.

Examples::

    rc_cli.py topup 100
    rc_cli.py lookup "tn 01 ab 1234" --pdf out/
    rc_cli.py sample --pdf out/
    rc_cli.py history --search debit --page 2
    rc_cli.py export out/
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from rclookup import SAMPLE_RECORD, RcClient, RcConfig, RcError, format_identifier  # noqa: E402
from rclookup.render.document import document_fields  # noqa: E402


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Prepaid vehicle RC lookups")
    parser.add_argument("--data-dir", type=Path, default=None, help="Directory for balance, log and cache")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable DEBUG logging")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("balance", help="Show the current balance")

    topup = sub.add_parser("topup", help="Add money to the balance")
    topup.add_argument("amount", type=int)

    lookup = sub.add_parser("lookup", help="Look up a vehicle RC record")
    lookup.add_argument("vehicle_number")
    lookup.add_argument("--pdf", type=Path, default=None, help="Also save the RC document into this directory")

    sample = sub.add_parser("sample", help="Preview the sample RC (no charge)")
    sample.add_argument("--pdf", type=Path, default=None, help="Also save the sample document into this directory")

    history = sub.add_parser("history", help="Show transactions, latest first")
    history.add_argument("--search", default=None)
    history.add_argument("--page", type=int, default=1)

    export = sub.add_parser("export", help="Export transactions as CSV")
    export.add_argument("directory", type=Path)
    export.add_argument("--search", default=None)

    return parser


async def _run(args: argparse.Namespace) -> int:
    overrides = {"data_dir": args.data_dir} if args.data_dir is not None else {}
    config = RcConfig.from_env(**overrides)

    async with RcClient(config) as client:
        if args.command == "balance":
            print(f"Balance: ₹{client.balance}")
        elif args.command == "topup":
            balance = client.top_up(args.amount)
            print(f"₹{args.amount} added. New balance: ₹{balance}")
        elif args.command == "lookup":
            result = await client.lookup_detailed(args.vehicle_number)
            if result.charged:
                print(f"RC fetched; ₹{config.lookup_cost} deducted. Remaining: ₹{result.balance}")
            else:
                print("RC found in local cache (no charge applied)")
            print(f"Vehicle: {format_identifier(result.identifier)}")
            for label, value in document_fields(result.record, result.identifier):
                print(f"  {label} {value}")
            if args.pdf is not None:
                path = client.save_document(result.identifier.value, args.pdf)
                print(f"RC document saved as {path}")
        elif args.command == "sample":
            print("Sample RC (no charge applied)")
            for label, value in document_fields(SAMPLE_RECORD):
                print(f"  {label} {value}")
            if args.pdf is not None:
                path = client.sample_document(args.pdf)
                print(f"Sample RC document saved as {path}")
        elif args.command == "history":
            summary = client.summary()
            print(
                f"Transactions: {summary.total_transactions}  Spent: ₹{summary.total_spent}  "
                f"Added: ₹{summary.total_added}  RCs: {summary.lookups_billed}"
            )
            page = client.transactions_table(args.search, args.page)
            for row in page.rows:
                print("  " + " | ".join(row))
            print(f"Page {page.page} of {page.total_pages}")
        elif args.command == "export":
            path = client.export_transactions(args.directory, args.search)
            print(f"Transactions exported to {path}")
    return 0


def main() -> int:
    args = _build_parser().parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        return asyncio.run(_run(args))
    except RcError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
