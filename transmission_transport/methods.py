"""Registry of RPC methods and the shapes their responses decode into."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Generic

from . import protocol
from .errors import TransmissionDuplicateError
from .models import (
    BlocklistUpdate,
    FreeSpace,
    NoResult,
    PortTest,
    TorrentAdded,
    TorrentList,
)
from .protocol import ShapeT

if TYPE_CHECKING:
    from .client import TransmissionClient


@dataclass(frozen=True)
class RpcMethod(Generic[ShapeT]):
    """A registered RPC method.

    Attributes:
        name: Method name sent in the request envelope.
        result_type: Shape the response arguments decode into.
        postprocess: Optional hook run on the decoded result with the
            calling client. It may raise to turn a successful envelope
            into a failed call.
    """

    name: str
    result_type: type[ShapeT]
    postprocess: Callable[[ShapeT, TransmissionClient], None] | None = None


def _attach_torrents(result: TorrentList, client: TransmissionClient) -> None:
    for torrent in result.torrents:
        torrent.attach(client)


def _check_added(result: TorrentAdded, client: TransmissionClient) -> None:
    if result.added is None:
        if result.duplicate is not None:
            result.duplicate.attach(client)
        raise TransmissionDuplicateError(result.duplicate)
    result.added.attach(client)


METHODS: dict[str, RpcMethod[Any]] = {}


def register(method: RpcMethod[Any]) -> RpcMethod[Any]:
    """Add a method to the registry, replacing any previous entry."""
    METHODS[method.name] = method
    return method


def get_method(name: str) -> RpcMethod[Any]:
    try:
        return METHODS[name]
    except KeyError as err:
        raise ValueError(f"Unknown RPC method: {name}") from err


register(RpcMethod(protocol.METHOD_TORRENT_GET, TorrentList, _attach_torrents))
register(RpcMethod(protocol.METHOD_TORRENT_ADD, TorrentAdded, _check_added))
register(RpcMethod(protocol.METHOD_BLOCKLIST_UPDATE, BlocklistUpdate))
register(RpcMethod(protocol.METHOD_PORT_TEST, PortTest))
register(RpcMethod(protocol.METHOD_FREE_SPACE, FreeSpace))

for _name in (
    protocol.METHOD_TORRENT_REMOVE,
    protocol.METHOD_TORRENT_START,
    protocol.METHOD_TORRENT_START_NOW,
    protocol.METHOD_TORRENT_STOP,
    protocol.METHOD_TORRENT_VERIFY,
    protocol.METHOD_TORRENT_REANNOUNCE,
    protocol.METHOD_QUEUE_MOVE_TOP,
    protocol.METHOD_QUEUE_MOVE_UP,
    protocol.METHOD_QUEUE_MOVE_DOWN,
    protocol.METHOD_QUEUE_MOVE_BOTTOM,
):
    register(RpcMethod(_name, NoResult))
