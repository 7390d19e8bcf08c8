"""HTTP fetcher for the external RC lookup service."""

from __future__ import annotations

import json
import logging
from collections.abc import Awaitable, Callable
from typing import Any

import aiohttp
from pydantic import ValidationError

from rclookup._constants import LOOKUP_ENDPOINT, USER_AGENT
from rclookup._redact import redact_for_log
from rclookup.config import RcConfig
from rclookup.exceptions import RcFetchFailedError
from rclookup.identifier import VehicleIdentifier
from rclookup.models.record import RcRecord

_logger = logging.getLogger(__name__)

RcFetcher = Callable[[VehicleIdentifier], Awaitable[RcRecord]]
"""Any coroutine function that resolves a vehicle number to its RC record.

Implementations raise on failure; the orchestrator maps every exception
to :class:`~rclookup.exceptions.RcFetchFailedError`.
"""

# Boolean-ish flags services use to signal an application-level failure.
_FAILURE_FLAGS: tuple[str, ...] = ("success", "status")


def _error_message(body: Any, default: str) -> str:
    if isinstance(body, dict):
        for key in ("message", "error", "msg"):
            value = body.get(key)
            if isinstance(value, str) and value.strip():
                return value.strip()
    return default


class HttpRcFetcher:
    """Posts ``{"vrn": "<number>"}`` to the RC service and parses the reply."""

    def __init__(self, config: RcConfig, http_session: aiohttp.ClientSession) -> None:
        self._config = config
        self._http = http_session

    async def __call__(self, identifier: VehicleIdentifier) -> RcRecord:
        return await self.fetch(identifier)

    async def fetch(self, identifier: VehicleIdentifier) -> RcRecord:
        endpoint = LOOKUP_ENDPOINT
        url = f"{self._config.base_url.rstrip('/')}{endpoint}"
        headers: dict[str, str] = {
            "content-type": "application/json",
            "user-agent": USER_AGENT,
        }
        if self._config.api_token:
            headers["authorization"] = self._config.api_token
        body = json.dumps({"vrn": identifier.value})

        _logger.debug("POST %s headers=%s", url, redact_for_log(headers))

        try:
            async with self._http.post(url, data=body, headers=headers) as resp:
                text = await resp.text()
                status = resp.status
        except aiohttp.ClientError as exc:
            raise RcFetchFailedError(
                f"Request to {endpoint} failed: {exc}",
                endpoint=endpoint,
            ) from exc

        try:
            body_json: Any = json.loads(text)
        except json.JSONDecodeError as exc:
            raise RcFetchFailedError(
                f"Invalid JSON from {endpoint} (HTTP {status}): {text[:200]}",
                status_code=status,
                endpoint=endpoint,
            ) from exc

        _logger.debug("Response %s status=%d body=%s", endpoint, status, redact_for_log(body_json))

        if status != 200:
            raise RcFetchFailedError(
                _error_message(body_json, f"HTTP {status} from {endpoint}"),
                status_code=status,
                endpoint=endpoint,
            )
        return self._parse(body_json, endpoint=endpoint, status=status)

    @staticmethod
    def _parse(body: Any, *, endpoint: str, status: int) -> RcRecord:
        if not isinstance(body, dict):
            raise RcFetchFailedError(
                f"Unexpected payload from {endpoint}: {type(body).__name__}",
                status_code=status,
                endpoint=endpoint,
            )
        for flag in _FAILURE_FLAGS:
            if body.get(flag) is False:
                raise RcFetchFailedError(
                    _error_message(body, "Failed to fetch RC data"),
                    status_code=status,
                    endpoint=endpoint,
                )
        try:
            record = RcRecord.from_payload(body)
        except (ValidationError, ValueError) as exc:
            raise RcFetchFailedError(
                f"Malformed RC payload from {endpoint}: {exc}",
                status_code=status,
                endpoint=endpoint,
            ) from exc
        if record.is_empty:
            raise RcFetchFailedError(
                _error_message(body, f"No RC data in response from {endpoint}"),
                status_code=status,
                endpoint=endpoint,
            )
        return record
