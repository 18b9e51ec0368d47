"""Pytest configuration and fixtures for transmission_transport tests."""

from __future__ import annotations

import asyncio
import json
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from transmission_transport import TransmissionClient
from transmission_transport.protocol import SESSION_ID_HEADER

RPC_URL = "http://192.168.1.100:9091/transmission/rpc"


@pytest.fixture
def mock_session() -> MagicMock:
    """Create a mock aiohttp ClientSession."""
    import aiohttp

    return MagicMock(spec=aiohttp.ClientSession)


@pytest.fixture
def client(mock_session: MagicMock) -> TransmissionClient:
    """Client bound to the mock session."""
    return TransmissionClient(RPC_URL, session=mock_session)


def create_mock_response(
    status: int = 200,
    json_data: dict[str, Any] | None = None,
    read_data: bytes | None = None,
    headers: dict[str, str] | None = None,
) -> AsyncMock:
    """Create a configured mock response.

    Args:
        status: HTTP status code
        json_data: Object returned as the JSON body from read()
        read_data: Raw bytes returned from read(), used when json_data is None
        headers: Response headers

    Returns:
        Configured AsyncMock response
    """
    response = AsyncMock()
    response.status = status
    response.headers = headers if headers is not None else {}

    if json_data is not None:
        response.read.return_value = json.dumps(json_data).encode()
    else:
        response.read.return_value = read_data if read_data is not None else b""

    response.__aenter__.return_value = response
    response.__aexit__.return_value = None

    return response


def create_conflict_response(session_id: str | None) -> AsyncMock:
    """Create a 409 response carrying a new session id."""
    headers = {SESSION_ID_HEADER: session_id} if session_id is not None else {}
    return create_mock_response(status=409, headers=headers)


def create_rpc_response(
    arguments: dict[str, Any] | None = None, result: str = "success"
) -> AsyncMock:
    """Create a 200 response with an RPC envelope body."""
    return create_mock_response(
        status=200, json_data={"result": result, "arguments": arguments or {}}
    )


class FakeRpcServer:
    """In-memory daemon that issues a new session id on every 409.

    Any id it has issued is accepted. Each request yields to the event loop
    once so concurrent calls interleave.
    """

    def __init__(self, arguments: dict[str, Any] | None = None) -> None:
        self.arguments = arguments or {"port-is-open": True}
        self.issued: list[str] = []
        self.requests: list[dict[str, Any]] = []
        self.cancel_on_conflict = False

    def post(self, url: str, **kwargs: Any) -> _FakeResponse:
        self.requests.append(kwargs)
        return _FakeResponse(self, kwargs["headers"])


class _FakeResponse:
    def __init__(self, server: FakeRpcServer, headers: dict[str, str]) -> None:
        self._server = server
        self._token = headers.get(SESSION_ID_HEADER)
        self.status = 200
        self.headers: dict[str, str] = {}
        self._body = b""

    async def __aenter__(self) -> _FakeResponse:
        await asyncio.sleep(0)
        server = self._server
        if self._token not in server.issued:
            new_token = f"sid-{len(server.issued) + 1}"
            server.issued.append(new_token)
            self.status = 409
            self.headers = {SESSION_ID_HEADER: new_token}
            if server.cancel_on_conflict:
                task = asyncio.current_task()
                assert task is not None
                task.cancel()
        else:
            self._body = json.dumps(
                {"result": "success", "arguments": server.arguments}
            ).encode()
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        return None

    async def read(self) -> bytes:
        return self._body
