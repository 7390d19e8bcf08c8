from __future__ import annotations

import json
from typing import Any

import aiohttp
import pytest

from rclookup._transport import HttpRcFetcher
from rclookup.config import RcConfig
from rclookup.exceptions import RcFetchFailedError
from rclookup.identifier import normalize

VEHICLE = normalize("TN01AB1234")


class _FakeResponse:
    def __init__(self, status: int, text: str) -> None:
        self.status = status
        self._text = text

    async def text(self) -> str:
        return self._text

    async def __aenter__(self) -> _FakeResponse:
        return self

    async def __aexit__(self, *exc: Any) -> None:
        return None


class _FakeSession:
    def __init__(self, status: int = 200, body: Any = None, *, raw_text: str | None = None, error: Exception | None = None) -> None:
        self._status = status
        self._text = raw_text if raw_text is not None else json.dumps(body)
        self._error = error
        self.requests: list[dict[str, Any]] = []

    def post(self, url: str, *, data: str, headers: dict[str, str]) -> _FakeResponse:
        self.requests.append({"url": url, "data": json.loads(data), "headers": headers})
        if self._error is not None:
            raise self._error
        return _FakeResponse(self._status, self._text)


def _fetcher(session: _FakeSession, **config: Any) -> HttpRcFetcher:
    return HttpRcFetcher(RcConfig(api_token="secret-token", **config), session)  # type: ignore[arg-type]


@pytest.mark.asyncio
async def test_fetch_posts_vrn_with_authorization() -> None:
    session = _FakeSession(body={"vehicleNumber": "TN01AB1234", "ownerName": "Ravi"})

    record = await _fetcher(session, base_url="https://rc.example/")(VEHICLE)

    assert record.owner_name == "Ravi"
    [request] = session.requests
    assert request["url"] == "https://rc.example/api/b2b/get-rc"
    assert request["data"] == {"vrn": "TN01AB1234"}
    assert request["headers"]["authorization"] == "secret-token"


@pytest.mark.asyncio
async def test_fetch_unwraps_enveloped_payload() -> None:
    session = _FakeSession(body={"success": True, "data": {"regNo": "TN01AB1234", "maker": "TATA"}})

    record = await _fetcher(session).fetch(VEHICLE)

    assert record.manufacturer == "TATA"
    assert record.vehicle_number == "TN01AB1234"


@pytest.mark.asyncio
async def test_non_200_maps_to_fetch_failed_with_server_message() -> None:
    session = _FakeSession(status=402, body={"message": "Insufficient API credits"})

    with pytest.raises(RcFetchFailedError) as exc_info:
        await _fetcher(session).fetch(VEHICLE)

    assert exc_info.value.status_code == 402
    assert exc_info.value.endpoint == "/api/b2b/get-rc"
    assert "Insufficient API credits" in str(exc_info.value)


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "session",
    [
        _FakeSession(raw_text="<html>gateway error</html>"),
        _FakeSession(body=["not", "an", "object"]),
        _FakeSession(body={"success": False, "message": "Vehicle not found"}),
        _FakeSession(body={"status": False}),
        _FakeSession(body={"message": "ok"}),
        _FakeSession(error=aiohttp.ClientConnectionError("connection reset")),
    ],
)
async def test_malformed_or_failed_responses_map_to_fetch_failed(session: _FakeSession) -> None:
    with pytest.raises(RcFetchFailedError):
        await _fetcher(session).fetch(VEHICLE)


@pytest.mark.asyncio
async def test_no_authorization_header_without_token() -> None:
    session = _FakeSession(body={"ownerName": "Ravi"})

    await HttpRcFetcher(RcConfig(), session)(VEHICLE)  # type: ignore[arg-type]

    assert "authorization" not in session.requests[0]["headers"]
