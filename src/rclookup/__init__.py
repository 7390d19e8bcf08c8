"""rclookup - Prepaid vehicle RC lookups with a local ledger and record cache."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("rclookup")
except PackageNotFoundError:
    __version__ = "0+local"
from rclookup.cache import CacheWriteResult, RecordCache
from rclookup.client import RcClient
from rclookup.config import RcConfig
from rclookup.exceptions import (
    RcConfigError,
    RcError,
    RcFetchFailedError,
    RcInsufficientBalanceError,
    RcInvalidAmountError,
    RcInvalidFormatError,
    RcLookupInProgressError,
    RcStoreError,
)
from rclookup.identifier import VehicleIdentifier, format_identifier, format_partial, normalize
from rclookup.ledger import Ledger, LedgerSummary
from rclookup.models import SAMPLE_RECORD, RcRecord, Transaction, TransactionKind
from rclookup.orchestrator import LookupOrchestrator, LookupResult
from rclookup.storage import FileStore, KeyValueStore, MemoryStore

__all__ = [
    "__version__",
    "CacheWriteResult",
    "FileStore",
    "KeyValueStore",
    "Ledger",
    "LedgerSummary",
    "LookupOrchestrator",
    "LookupResult",
    "MemoryStore",
    "RcClient",
    "RcConfig",
    "RcConfigError",
    "RcError",
    "RcFetchFailedError",
    "RcInsufficientBalanceError",
    "RcInvalidAmountError",
    "RcInvalidFormatError",
    "RcLookupInProgressError",
    "RcRecord",
    "RcStoreError",
    "RecordCache",
    "SAMPLE_RECORD",
    "Transaction",
    "TransactionKind",
    "VehicleIdentifier",
    "format_identifier",
    "format_partial",
    "normalize",
]
