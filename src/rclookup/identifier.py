"""Vehicle registration number normalization.

Indian registration numbers are handled in a single canonical shape,
``AA00AA0000``: two letters (state/region), two digits (district RTO),
two letters (series) and four digits (serial).  Only the canonical form
is ever used as a storage key or compared; the spaced display form is
produced by :func:`format_identifier` for presentation only.
"""

from __future__ import annotations

import re

from pydantic import BaseModel, ConfigDict, field_validator

from rclookup.exceptions import RcInvalidFormatError

_STRIP_RE = re.compile(r"[^A-Za-z0-9]")
_CANONICAL_RE = re.compile(r"[A-Z]{2}[0-9]{2}[A-Z]{2}[0-9]{4}")

# Group boundaries of the canonical form: region, district, series, serial.
_GROUPS: tuple[tuple[int, int], ...] = ((0, 2), (2, 4), (4, 6), (6, 10))


def canonicalize(raw: str) -> str:
    """Strip separators and upper-case *raw* without validating it."""
    return _STRIP_RE.sub("", raw).upper()


class VehicleIdentifier(BaseModel):
    """A validated, canonical vehicle registration number."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    value: str

    @field_validator("value")
    @classmethod
    def _require_canonical(cls, value: str) -> str:
        if not _CANONICAL_RE.fullmatch(value):
            raise ValueError(f"not a canonical vehicle number: {value!r}")
        return value

    @property
    def region(self) -> str:
        return self.value[0:2]

    @property
    def district(self) -> str:
        return self.value[2:4]

    @property
    def series(self) -> str:
        return self.value[4:6]

    @property
    def serial(self) -> str:
        return self.value[6:10]

    def __str__(self) -> str:
        return self.value


def normalize(raw: str) -> VehicleIdentifier:
    """Canonicalize and validate a user-entered vehicle number.

    ``"tn 01 ab 1234"``, ``"TN-01-AB-1234"`` and ``"tn01ab1234"`` all
    normalize to ``TN01AB1234``.

    Raises
    ------
    RcInvalidFormatError
        If the canonicalized string is not exactly ``AA00AA0000``.  The
        offending canonical string is available as ``exc.canonical``.
    """
    if not isinstance(raw, str):
        raise RcInvalidFormatError(f"vehicle number must be a string, got {type(raw).__name__}")
    canonical = canonicalize(raw)
    if not _CANONICAL_RE.fullmatch(canonical):
        raise RcInvalidFormatError(
            f"invalid vehicle number {canonical!r} (expected format like TN01AB1234)",
            canonical=canonical,
        )
    return VehicleIdentifier(value=canonical)


def format_identifier(identifier: VehicleIdentifier) -> str:
    """Return the spaced display form, e.g. ``TN 01 AB 1234``."""
    value = identifier.value
    return " ".join(value[start:end] for start, end in _GROUPS)


def format_partial(raw: str) -> str:
    """Format possibly incomplete input for display while it is typed.

    Separators are inserted as soon as a group boundary is passed and
    anything past the tenth character is dropped.  No validation is done.
    """
    cleaned = canonicalize(raw)
    parts = [cleaned[start:end] for start, end in _GROUPS]
    return " ".join(part for part in parts if part)
