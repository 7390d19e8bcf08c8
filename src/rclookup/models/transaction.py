"""Ledger transaction model."""

from __future__ import annotations

from datetime import UTC, datetime
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel


class TransactionKind(StrEnum):
    TOPUP = "topup"
    DEBIT = "debit"


# Logs written by the earlier web app call billed lookups "rc_generation".
_LEGACY_KINDS: dict[str, TransactionKind] = {"rc_generation": TransactionKind.DEBIT}


class Transaction(BaseModel):
    """An immutable ledger entry.

    A ``topup`` carries ``amount``; a ``debit`` carries ``cost`` and the
    canonical ``vehicle_number`` that was billed.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
        alias_generator=to_camel,
    )

    id: int
    """Unique, strictly increasing identifier (epoch milliseconds)."""
    timestamp: datetime
    kind: TransactionKind = Field(alias="type")
    amount: int | None = None
    cost: int | None = None
    vehicle_number: str | None = None

    @field_validator("kind", mode="before")
    @classmethod
    def _map_legacy_kind(cls, value: Any) -> Any:
        if isinstance(value, str):
            return _LEGACY_KINDS.get(value, value)
        return value

    @field_validator("timestamp")
    @classmethod
    def _ensure_tz_aware(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value

    @model_validator(mode="after")
    def _check_shape(self) -> Transaction:
        if self.kind == TransactionKind.TOPUP:
            if self.amount is None or self.amount < 1:
                raise ValueError("topup transaction requires a positive amount")
        else:
            if self.cost is None or self.cost < 1:
                raise ValueError("debit transaction requires a positive cost")
            if not self.vehicle_number:
                raise ValueError("debit transaction requires a vehicle number")
        return self

    @property
    def delta(self) -> int:
        """Signed balance change of this entry."""
        if self.kind == TransactionKind.TOPUP:
            return self.amount or 0
        return -(self.cost or 0)

    def to_storage(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
