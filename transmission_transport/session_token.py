"""Session id cache shared by all calls made through one client."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class TokenSnapshot:
    """Session id as seen by one request.

    ``generation`` increases every time the cached id is replaced, so a
    request can tell whether someone else refreshed the id after it read it.
    """

    token: str | None
    generation: int


class SessionTokenCache:
    """Holds the most recent X-Transmission-Session-Id issued by the daemon.

    Reads and writes are serialized by an asyncio lock. The cache only ever
    stores values read from server responses.
    """

    def __init__(self) -> None:
        self._lock = asyncio.Lock()
        self._token: str | None = None
        self._generation = 0

    @property
    def token(self) -> str | None:
        """Current session id, or None before the first rejection."""
        return self._token

    async def snapshot(self) -> TokenSnapshot:
        async with self._lock:
            return TokenSnapshot(self._token, self._generation)

    async def refresh(self, token: str, seen: TokenSnapshot) -> TokenSnapshot:
        """Store a session id returned with a 409 response.

        The id replaces the cached one only if nothing was refreshed since
        ``seen`` was taken. Otherwise the newer cached id is kept.

        Returns:
            The snapshot a replayed request must use.
        """
        async with self._lock:
            if self._generation == seen.generation:
                self._token = token
                self._generation += 1
            return TokenSnapshot(self._token, self._generation)
