"""Base model for RC service payloads.

Every RC payload model inherits from :class:`RcBaseModel` which provides:

* ``alias_generator=to_camel`` so camelCase API keys map
  automatically to snake_case fields.
* A ``model_validator(mode="before")`` that strips sentinel values
  (``""``, ``"--"``, ``"NA"``, ``"null"``) so the field default is used.
* A ``raw`` dict that captures the original payload.
"""

from __future__ import annotations

import math
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

# Sentinel strings upstream RC services use for "not available".
_SENTINELS = frozenset({"", "--", "-", "NA", "N/A", "na", "n/a", "null", "None", "NaN", "nan"})


def is_sentinel(value: Any) -> bool:
    """Return ``True`` when *value* carries no information."""
    if value is None:
        return True
    if isinstance(value, str) and value.strip() in _SENTINELS:
        return True
    return isinstance(value, float) and math.isnan(value)


class RcBaseModel(BaseModel):
    """Base for RC payload models.

    Handles:
    * camelCase → snake_case via ``alias_generator=to_camel``
    * sentinel values → dropped so the field default is used instead
    * stashes the original payload dict in ``raw``
    """

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
        alias_generator=to_camel,
        protected_namespaces=(),
    )

    raw: dict[str, Any] = Field(default_factory=dict)
    """Original payload dict."""

    @staticmethod
    def _clean_dict(values: dict[str, Any], aliases: dict[str, str] | None = None) -> dict[str, Any]:
        """Strip sentinel values and apply key aliases on *values*."""
        working = dict(values)
        if aliases:
            for old_key, new_key in aliases.items():
                if old_key in working and new_key not in working:
                    working[new_key] = working.pop(old_key)

        return {key: value for key, value in working.items() if not is_sentinel(value)}

    @model_validator(mode="before")
    @classmethod
    def _clean_values(cls, values: Any) -> Any:
        """Strip sentinel values, apply key aliases, and stash the raw payload."""
        if not isinstance(values, dict):
            return values
        original = dict(values)

        aliases: dict[str, str] = getattr(cls, "_KEY_ALIASES", {})
        cleaned = RcBaseModel._clean_dict(original, aliases)

        # Keep an explicit raw= from the caller; otherwise stash the payload.
        if "raw" not in values:
            cleaned["raw"] = original
        return cleaned
