"""Client error types for Transmission RPC interactions."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .models import Torrent


class TransmissionClientError(Exception):
    """Base error for Transmission RPC client failures."""


class TransmissionConnectionError(TransmissionClientError):
    """Network connection to the daemon failed."""


class TransmissionTimeout(TransmissionConnectionError):
    """Timeout while communicating with the daemon."""


class TransmissionResponseError(TransmissionClientError):
    """HTTP response error from the daemon."""

    def __init__(self, status: int, message: str) -> None:
        super().__init__(message)
        self.status = status


class TransmissionSessionRejected(TransmissionResponseError):
    """The daemon kept rejecting the session id after a refresh."""

    def __init__(self, message: str) -> None:
        super().__init__(409, message)


class TransmissionDecodeError(TransmissionClientError):
    """Response body is not a well-formed RPC envelope."""


class TransmissionApplicationError(TransmissionClientError):
    """Well-formed response whose result is not "success"."""

    def __init__(self, result: str) -> None:
        super().__init__(f"Transmission error: {result}")
        self.result = result


class TransmissionDuplicateError(TransmissionClientError):
    """torrent-add succeeded but no new torrent was created."""

    def __init__(self, torrent: Torrent | None = None) -> None:
        super().__init__("Torrent already added")
        self.torrent = torrent


class ConfigError(TransmissionClientError):
    """Client configuration could not be loaded."""
