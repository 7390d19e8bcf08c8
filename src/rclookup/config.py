"""Client configuration for rclookup."""

from __future__ import annotations

import dataclasses
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from rclookup._constants import (
    BASE_URL,
    DEFAULT_LOOKUP_COST,
    DEFAULT_PAGE_SIZE,
    DEFAULT_TIME_ZONE,
)
from rclookup.exceptions import RcConfigError


def _default_data_dir() -> Path:
    return Path.home() / ".rclookup"


def _env_number(env: Mapping[str, str], key: str, cast: type) -> Any:
    raw = env.get(key)
    if raw is None:
        return None
    try:
        return cast(raw.strip())
    except ValueError as exc:
        raise RcConfigError(f"{key} must be a {cast.__name__}, got {raw!r}") from exc


@dataclasses.dataclass(frozen=True)
class RcConfig:
    """Client configuration.

    Parameters
    ----------
    api_token : str
        Value sent in the ``Authorization`` header of RC lookup requests.
    base_url : str
        RC lookup service base URL.
    data_dir : Path
        Directory holding the persisted balance, transaction log and
        cached records.
    lookup_cost : int
        Rupees charged for every billed (non-cached) lookup.
    fetch_timeout : float
        Seconds to wait for the RC service before the lookup is treated
        as failed.  ``0`` disables the timeout.
    page_size : int
        Rows per page of the transaction table.
    time_zone : str
        IANA time zone used to display transaction timestamps.
    """

    api_token: str = ""
    base_url: str = BASE_URL
    data_dir: Path = dataclasses.field(default_factory=_default_data_dir)
    lookup_cost: int = DEFAULT_LOOKUP_COST
    fetch_timeout: float = 30.0
    page_size: int = DEFAULT_PAGE_SIZE
    time_zone: str = DEFAULT_TIME_ZONE

    def __post_init__(self) -> None:
        if isinstance(self.lookup_cost, bool) or not isinstance(self.lookup_cost, int) or self.lookup_cost < 1:
            raise RcConfigError(f"lookup_cost must be a positive integer, got {self.lookup_cost!r}")
        if self.page_size < 1:
            raise RcConfigError(f"page_size must be positive, got {self.page_size!r}")
        if self.fetch_timeout < 0:
            raise RcConfigError(f"fetch_timeout must not be negative, got {self.fetch_timeout!r}")
        if not isinstance(self.data_dir, Path):
            object.__setattr__(self, "data_dir", Path(self.data_dir))

    @classmethod
    def from_env(cls, **overrides: Any) -> RcConfig:
        """Create configuration from environment variables.

        Reads ``RC_API_TOKEN`` and the optional ``RC_*`` variables.
        Explicit keyword arguments override environment values.
        """
        env = os.environ

        _ENV_CONFIG_MAP = {
            "RC_API_TOKEN": "api_token",
            "RC_BASE_URL": "base_url",
            "RC_TIME_ZONE": "time_zone",
        }
        config_kwargs: dict[str, Any] = {}
        for env_key, field_name in _ENV_CONFIG_MAP.items():
            val = env.get(env_key)
            if val is not None:
                config_kwargs[field_name] = val

        data_dir = env.get("RC_DATA_DIR")
        if data_dir:
            config_kwargs["data_dir"] = Path(data_dir).expanduser()

        # Numeric settings are parsed separately so a bad value fails loudly.
        _ENV_NUMERIC_MAP: dict[str, tuple[str, type]] = {
            "RC_LOOKUP_COST": ("lookup_cost", int),
            "RC_FETCH_TIMEOUT": ("fetch_timeout", float),
            "RC_PAGE_SIZE": ("page_size", int),
        }
        for env_key, (field_name, cast) in _ENV_NUMERIC_MAP.items():
            if field_name in overrides:
                continue
            val = _env_number(env, env_key, cast)
            if val is not None:
                config_kwargs[field_name] = val

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
