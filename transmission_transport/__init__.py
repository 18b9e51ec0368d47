"""Transmission RPC transport package."""

__version__ = "0.1.0"

from .client import TransmissionClient
from .config import TransmissionConfig, load_config
from .errors import (
    ConfigError,
    TransmissionApplicationError,
    TransmissionClientError,
    TransmissionConnectionError,
    TransmissionDecodeError,
    TransmissionDuplicateError,
    TransmissionResponseError,
    TransmissionSessionRejected,
    TransmissionTimeout,
)
from .http import TransmissionHttpClient
from .methods import METHODS, RpcMethod
from .models import AddTorrentArgs, Torrent, TorrentStatus
from .protocol import RpcResponse, build_request, decode_response, encode_request
from .session_token import SessionTokenCache

__all__ = [
    "METHODS",
    "AddTorrentArgs",
    "ConfigError",
    "RpcMethod",
    "RpcResponse",
    "SessionTokenCache",
    "Torrent",
    "TorrentStatus",
    "TransmissionApplicationError",
    "TransmissionClient",
    "TransmissionClientError",
    "TransmissionConfig",
    "TransmissionConnectionError",
    "TransmissionDecodeError",
    "TransmissionDuplicateError",
    "TransmissionHttpClient",
    "TransmissionResponseError",
    "TransmissionSessionRejected",
    "TransmissionTimeout",
    "__version__",
    "build_request",
    "decode_response",
    "encode_request",
    "load_config",
]
