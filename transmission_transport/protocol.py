"""Protocol helpers for Transmission RPC envelopes.

Requests are ``{"method": ..., "arguments": ...}`` objects and responses are
``{"result": ..., "arguments": ...}`` objects. The shape of the response
arguments depends on the method, so decoding is generic over a result type
chosen by the caller.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Final, Protocol, Self, TypeVar

from .errors import TransmissionApplicationError, TransmissionDecodeError

SESSION_ID_HEADER: Final = "X-Transmission-Session-Id"
RESULT_SUCCESS: Final = "success"
HTTP_CONFLICT: Final = 409

METHOD_TORRENT_GET: Final = "torrent-get"
METHOD_TORRENT_ADD: Final = "torrent-add"
METHOD_TORRENT_REMOVE: Final = "torrent-remove"
METHOD_TORRENT_START: Final = "torrent-start"
METHOD_TORRENT_START_NOW: Final = "torrent-start-now"
METHOD_TORRENT_STOP: Final = "torrent-stop"
METHOD_TORRENT_VERIFY: Final = "torrent-verify"
METHOD_TORRENT_REANNOUNCE: Final = "torrent-reannounce"
METHOD_QUEUE_MOVE_TOP: Final = "queue-move-top"
METHOD_QUEUE_MOVE_UP: Final = "queue-move-up"
METHOD_QUEUE_MOVE_DOWN: Final = "queue-move-down"
METHOD_QUEUE_MOVE_BOTTOM: Final = "queue-move-bottom"
METHOD_BLOCKLIST_UPDATE: Final = "blocklist-update"
METHOD_PORT_TEST: Final = "port-test"
METHOD_FREE_SPACE: Final = "free-space"


class ResultShape(Protocol):
    """A typed view over the ``arguments`` object of one RPC method."""

    @classmethod
    def from_arguments(cls, arguments: dict[str, Any]) -> Self:
        """Build the shape, raising KeyError/TypeError/ValueError on mismatch."""
        ...


ShapeT = TypeVar("ShapeT", bound=ResultShape)


@dataclass(frozen=True)
class RpcResponse:
    """Decoded response envelope."""

    result: str
    arguments: dict[str, Any] = field(default_factory=lambda: {})

    @property
    def ok(self) -> bool:
        return self.result == RESULT_SUCCESS


def build_request(method: str, arguments: dict[str, Any] | None = None) -> dict[str, Any]:
    """Build a request envelope.

    Args:
        method: RPC method name (e.g., "torrent-get").
        arguments: JSON-serializable arguments. Empty when omitted.

    Returns:
        Envelope dict ready for serialization.
    """
    return {"method": method, "arguments": arguments or {}}


def encode_request(method: str, arguments: dict[str, Any] | None = None) -> bytes:
    """Serialize a request envelope to the bytes sent on the wire."""
    return json.dumps(build_request(method, arguments)).encode("utf-8")


def parse_envelope(body: bytes) -> RpcResponse:
    """Parse a response body into an RpcResponse.

    Raises:
        TransmissionDecodeError: If the body is not a JSON envelope.
        TransmissionApplicationError: If result is not "success".
    """
    try:
        data = json.loads(body)
    except (UnicodeDecodeError, json.JSONDecodeError) as err:
        raise TransmissionDecodeError("Response body is not valid JSON") from err

    if not isinstance(data, dict):
        raise TransmissionDecodeError("Response body must be a JSON object")

    result = data.get("result")
    if not isinstance(result, str):
        raise TransmissionDecodeError("Response is missing a string result field")
    if result != RESULT_SUCCESS:
        raise TransmissionApplicationError(result)

    arguments = data.get("arguments")
    if arguments is None:
        arguments = {}
    if not isinstance(arguments, dict):
        raise TransmissionDecodeError("Response arguments must be a JSON object")

    return RpcResponse(result=result, arguments=arguments)


def decode_response(body: bytes, result_type: type[ShapeT]) -> ShapeT:
    """Decode a response body into the shape expected for its method.

    Args:
        body: Raw response body.
        result_type: Shape class selected by the caller for this method.

    Returns:
        Instance of ``result_type`` built from the response arguments.

    Raises:
        TransmissionDecodeError: If the body or its arguments do not match.
        TransmissionApplicationError: If result is not "success".
    """
    response = parse_envelope(body)
    try:
        return result_type.from_arguments(response.arguments)
    except (KeyError, TypeError, ValueError) as err:
        raise TransmissionDecodeError(
            f"Response arguments do not match {result_type.__name__}: {err}"
        ) from err
