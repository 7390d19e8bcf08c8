"""Data models for rclookup."""

from rclookup.models.record import SAMPLE_RECORD, RcRecord
from rclookup.models.transaction import Transaction, TransactionKind

__all__ = [
    "SAMPLE_RECORD",
    "RcRecord",
    "Transaction",
    "TransactionKind",
]
