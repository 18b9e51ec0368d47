"""HTTP transport for the Transmission RPC endpoint."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import aiohttp

from .errors import (
    ConfigError,
    TransmissionConnectionError,
    TransmissionResponseError,
    TransmissionSessionRejected,
    TransmissionTimeout,
)
from .protocol import (
    HTTP_CONFLICT,
    SESSION_ID_HEADER,
    ShapeT,
    decode_response,
    encode_request,
)
from .session_token import SessionTokenCache

_LOGGER = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0


def _basic_auth_header(username: str, password: str) -> str | None:
    """Build the Authorization value, or None when no credentials are set."""
    if not username and not password:
        return None
    try:
        return aiohttp.BasicAuth(username, password, encoding="utf-8").encode()
    except ValueError as err:
        raise ConfigError(f"Invalid basic auth credentials: {err}") from err


class TransmissionHttpClient:
    """HTTP client wrapper for a Transmission RPC endpoint.

    Every call is a POST of a JSON envelope. The daemon protects the endpoint
    with an anti-CSRF session id: a request carrying a missing or stale id is
    answered with HTTP 409 and the valid id in the X-Transmission-Session-Id
    header. The client stores that id and replays the request once.
    """

    def __init__(
        self,
        address: str,
        *,
        username: str | None = None,
        password: str | None = None,
        session: aiohttp.ClientSession | None = None,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        self._address = address
        self._authorization = _basic_auth_header(username or "", password or "")
        self._session = session
        self._owns_session = session is None
        self._timeout = timeout
        self._tokens = SessionTokenCache()

    @property
    def address(self) -> str:
        return self._address

    @property
    def session_id(self) -> str | None:
        """Session id currently cached for this endpoint."""
        return self._tokens.token

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None:
            self._session = aiohttp.ClientSession()
        return self._session

    async def close(self) -> None:
        """Close the underlying HTTP session if this client created it."""
        if self._owns_session and self._session is not None:
            await self._session.close()
            self._session = None

    def _auth_headers(self, token: str | None) -> dict[str, str]:
        # A fresh mapping per attempt: the session id header is replaced,
        # never sent twice.
        headers = {"Content-Type": "application/json"}
        if self._authorization:
            headers["Authorization"] = self._authorization
        if token:
            headers[SESSION_ID_HEADER] = token
        return headers

    async def _post(self, body: bytes, token: str | None) -> tuple[int, str | None, bytes]:
        try:
            async with self._get_session().post(
                self._address,
                data=body,
                headers=self._auth_headers(token),
                timeout=aiohttp.ClientTimeout(total=self._timeout),
            ) as resp:
                payload = await resp.read()
                return resp.status, resp.headers.get(SESSION_ID_HEADER), payload
        except TimeoutError as err:
            raise TransmissionTimeout("RPC request timed out") from err
        except (aiohttp.ClientError, OSError) as err:
            raise TransmissionConnectionError("RPC request failed") from err

    async def execute(self, body: bytes) -> bytes:
        """Send an encoded request, replaying it once on a session id refresh.

        Args:
            body: Encoded request envelope. The same bytes are used for the
                replay.

        Returns:
            Body of the 2xx response.

        Raises:
            TransmissionSessionRejected: If the daemon answers 409 without a
                session id, or answers 409 again to the replay.
            TransmissionResponseError: If the daemon returns another non-2xx
                status.
            TransmissionTimeout: If the request times out.
            TransmissionConnectionError: If the network request fails.
        """
        seen = await self._tokens.snapshot()
        status, new_token, payload = await self._post(body, seen.token)

        if status == HTTP_CONFLICT:
            if not new_token:
                raise TransmissionSessionRejected(
                    f"Daemon returned 409 without a {SESSION_ID_HEADER} header"
                )
            current = await self._tokens.refresh(new_token, seen)
            _LOGGER.debug("Session id refreshed for %s, replaying request", self._address)

            # Deliver a pending cancellation before the second round trip.
            await asyncio.sleep(0)

            status, new_token, payload = await self._post(body, current.token)
            if status == HTTP_CONFLICT:
                if new_token:
                    await self._tokens.refresh(new_token, current)
                _LOGGER.warning(
                    "Session id rejected again by %s after refresh", self._address
                )
                raise TransmissionSessionRejected(
                    "Session id rejected again after refresh"
                )

        if not 200 <= status <= 299:
            raise TransmissionResponseError(status, f"Unexpected HTTP status: {status}")
        return payload

    async def request(
        self,
        method: str,
        arguments: dict[str, Any] | None,
        result_type: type[ShapeT],
    ) -> ShapeT:
        """Call an RPC method and decode its arguments into ``result_type``."""
        _LOGGER.debug("Calling %s on %s", method, self._address)
        payload = await self.execute(encode_request(method, arguments))
        return decode_response(payload, result_type)
