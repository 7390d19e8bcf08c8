"""Custom exception hierarchy for rclookup."""

from __future__ import annotations


class RcError(Exception):
    """Base exception for all rclookup errors."""


class RcConfigError(RcError):
    """Invalid or missing configuration."""


class RcInvalidFormatError(RcError):
    """Vehicle number does not match the ``AA00AA0000`` shape."""

    def __init__(self, message: str, *, canonical: str = "") -> None:
        self.canonical = canonical
        super().__init__(message)


class RcInvalidAmountError(RcError):
    """Top-up amount or lookup cost outside the accepted range."""

    def __init__(self, message: str, *, amount: object = None) -> None:
        self.amount = amount
        super().__init__(message)


class RcInsufficientBalanceError(RcError):
    """Balance does not cover the requested debit."""

    def __init__(self, message: str, *, balance: int, required: int) -> None:
        self.balance = balance
        self.required = required
        super().__init__(message)


class RcFetchFailedError(RcError):
    """The external RC lookup failed (network, non-200, malformed payload).

    A failed fetch is never billed nor cached.
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        endpoint: str = "",
    ) -> None:
        self.status_code = status_code
        self.endpoint = endpoint
        super().__init__(message)


class RcLookupInProgressError(RcError):
    """A lookup for the same vehicle number is still awaiting the fetcher."""

    def __init__(self, message: str, *, vehicle_number: str = "") -> None:
        self.vehicle_number = vehicle_number
        super().__init__(message)


class RcStoreError(RcError):
    """Durable storage failure.

    Raised when a key cannot be read, written or serialized.  The
    previously stored value for the key is left unchanged.
    """

    def __init__(self, message: str, *, key: str = "") -> None:
        self.key = key
        super().__init__(message)
