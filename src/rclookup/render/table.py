"""Tabular views and CSV export of the transaction log."""

from __future__ import annotations

import csv
import io
import math
from collections.abc import Iterable, Sequence
from datetime import date, datetime, tzinfo
from typing import NamedTuple
from zoneinfo import ZoneInfo

from rclookup._constants import (
    CSV_HEADER,
    DEFAULT_PAGE_SIZE,
    DEFAULT_TIME_ZONE,
    MONTH_ABBREVIATIONS,
    TABLE_PLACEHOLDER,
)
from rclookup.models.transaction import Transaction


class TransactionRow(NamedTuple):
    date: str
    kind: str
    vehicle_number: str
    amount: str
    cost: str


class Page(NamedTuple):
    rows: list[TransactionRow]
    page: int
    total_pages: int
    total_rows: int


def format_datetime(value: datetime, tz: tzinfo | None = None) -> str:
    """Format a timestamp as ``05 Jan 2024, 03:04 pm`` in *tz*."""
    local = value.astimezone(tz or ZoneInfo(DEFAULT_TIME_ZONE))
    hour = local.hour % 12 or 12
    meridiem = "am" if local.hour < 12 else "pm"
    return (
        f"{local.day:02d} {MONTH_ABBREVIATIONS[local.month - 1]} {local.year:04d}, "
        f"{hour:02d}:{local.minute:02d} {meridiem}"
    )


def _matches(txn: Transaction, needle: str) -> bool:
    if needle in txn.kind.value:
        return True
    return bool(txn.vehicle_number) and needle in txn.vehicle_number.lower()


def filter_transactions(transactions: Iterable[Transaction], search: str | None = None) -> list[Transaction]:
    """Latest-first transactions whose vehicle number or kind contains *search*.

    Matching is case-insensitive; an empty search keeps everything.
    """
    ordered = list(transactions)[::-1]
    needle = (search or "").strip().lower()
    if not needle:
        return ordered
    return [txn for txn in ordered if _matches(txn, needle)]


def to_row(txn: Transaction, tz: tzinfo | None = None) -> TransactionRow:
    return TransactionRow(
        date=format_datetime(txn.timestamp, tz),
        kind=txn.kind.value,
        vehicle_number=txn.vehicle_number or TABLE_PLACEHOLDER,
        amount=str(txn.amount) if txn.amount else TABLE_PLACEHOLDER,
        cost=str(txn.cost) if txn.cost else TABLE_PLACEHOLDER,
    )


def to_table(
    transactions: Iterable[Transaction],
    search: str | None = None,
    *,
    tz: tzinfo | None = None,
) -> list[TransactionRow]:
    """One row per matching transaction, latest first."""
    return [to_row(txn, tz) for txn in filter_transactions(transactions, search)]


def paginate(rows: Sequence[TransactionRow], page: int = 1, page_size: int = DEFAULT_PAGE_SIZE) -> Page:
    """Slice *rows* into fixed-size pages; *page* is 1-based and clamped."""
    if page_size < 1:
        raise ValueError(f"page_size must be positive, got {page_size}")
    total_pages = max(1, math.ceil(len(rows) / page_size))
    current = min(max(1, page), total_pages)
    start = (current - 1) * page_size
    return Page(
        rows=list(rows[start : start + page_size]),
        page=current,
        total_pages=total_pages,
        total_rows=len(rows),
    )


def to_csv(
    transactions: Iterable[Transaction],
    search: str | None = None,
    *,
    tz: tzinfo | None = None,
) -> str:
    """CSV export with a ``Date,Type,Vehicle Number,Amount,Cost`` header."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(CSV_HEADER)
    writer.writerows(to_table(transactions, search, tz=tz))
    return buffer.getvalue()


def export_filename(day: date) -> str:
    return f"transactions_{day.isoformat()}.csv"
