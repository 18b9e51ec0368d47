"""High-level Transmission RPC client.

Usage:
    async with TransmissionClient("http://localhost:9091/transmission/rpc") as client:
        torrents = await client.get_torrents()
        await client.queue_move_top(torrents[:1])
        await torrents[0].stop()
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from types import TracebackType
from typing import Any, Self, cast

import aiohttp

from . import protocol
from .config import TransmissionConfig
from .http import DEFAULT_TIMEOUT, TransmissionHttpClient
from .methods import get_method
from .models import (
    DEFAULT_TORRENT_FIELDS,
    AddTorrentArgs,
    BlocklistUpdate,
    FreeSpace,
    PortTest,
    Torrent,
    TorrentAdded,
    TorrentList,
)

_LOGGER = logging.getLogger(__name__)

TorrentRef = Torrent | int | str


def _torrent_ids(torrents: Iterable[TorrentRef]) -> list[int | str]:
    return [t.rpc_id if isinstance(t, Torrent) else t for t in torrents]


class TransmissionClient:
    """Transmission daemon client.

    Each operation is one registered RPC method sent through a
    TransmissionHttpClient. Torrents returned by the client keep a weak
    reference to it, so per-torrent operations can be called on them
    directly.
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
        self._http = TransmissionHttpClient(
            address,
            username=username,
            password=password,
            session=session,
            timeout=timeout,
        )

    @classmethod
    def from_config(
        cls,
        config: TransmissionConfig,
        *,
        session: aiohttp.ClientSession | None = None,
    ) -> Self:
        return cls(
            config.address,
            username=config.username,
            password=config.password,
            session=session,
            timeout=config.timeout,
        )

    @property
    def http(self) -> TransmissionHttpClient:
        return self._http

    async def close(self) -> None:
        await self._http.close()

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.close()

    # -------------------------------------------------------------------------
    # Generic dispatch
    # -------------------------------------------------------------------------

    async def call(self, method: str, arguments: dict[str, Any] | None = None) -> Any:
        """Call a registered RPC method and return its decoded result.

        Raises:
            ValueError: If the method is not registered.
            TransmissionClientError: Any transport, status, decode,
                application or duplicate failure, unchanged.
        """
        rpc = get_method(method)
        result = await self._http.request(rpc.name, arguments, rpc.result_type)
        if rpc.postprocess is not None:
            rpc.postprocess(result, self)
        return result

    async def _ids_action(self, method: str, torrents: Iterable[TorrentRef]) -> None:
        await self.call(method, {"ids": _torrent_ids(torrents)})

    # -------------------------------------------------------------------------
    # Torrents
    # -------------------------------------------------------------------------

    async def get_torrents(
        self,
        fields: Sequence[str] | None = None,
        ids: Iterable[TorrentRef] | None = None,
    ) -> list[Torrent]:
        """Fetch torrents.

        Args:
            fields: Fields to return. A default set is used when empty.
            ids: Restrict the result to these torrents. All when omitted.

        Returns:
            Torrents bound to this client.
        """
        arguments: dict[str, Any] = {"fields": list(fields or DEFAULT_TORRENT_FIELDS)}
        if ids is not None:
            arguments["ids"] = _torrent_ids(ids)
        result: TorrentList = await self.call(protocol.METHOD_TORRENT_GET, arguments)
        return result.torrents

    async def get_torrent_map(self) -> dict[str, Torrent]:
        """Fetch all torrents indexed by hash string."""
        torrents = await self.get_torrents()
        return {t.hash_string: t for t in torrents if t.hash_string is not None}

    async def add(self, filename: str) -> Torrent:
        """Add a torrent by path, URL or magnet link."""
        return await self.add_torrent(AddTorrentArgs(filename=filename))

    async def add_torrent(self, args: AddTorrentArgs) -> Torrent:
        """Add a torrent.

        Raises:
            TransmissionDuplicateError: If the daemon already has the torrent.
        """
        result: TorrentAdded = await self.call(
            protocol.METHOD_TORRENT_ADD, args.to_arguments()
        )
        # The registered postprocess hook raises when nothing was added.
        added = cast(Torrent, result.added)
        _LOGGER.debug("Added torrent %s", added.name)
        return added

    async def remove_torrents(
        self, torrents: Iterable[TorrentRef], delete_local_data: bool = False
    ) -> None:
        arguments: dict[str, Any] = {"ids": _torrent_ids(torrents)}
        if delete_local_data:
            arguments["delete-local-data"] = True
        await self.call(protocol.METHOD_TORRENT_REMOVE, arguments)

    async def start_torrents(self, torrents: Iterable[TorrentRef]) -> None:
        await self._ids_action(protocol.METHOD_TORRENT_START, torrents)

    async def start_torrents_now(self, torrents: Iterable[TorrentRef]) -> None:
        """Start torrents, bypassing the download queue."""
        await self._ids_action(protocol.METHOD_TORRENT_START_NOW, torrents)

    async def stop_torrents(self, torrents: Iterable[TorrentRef]) -> None:
        await self._ids_action(protocol.METHOD_TORRENT_STOP, torrents)

    async def verify_torrents(self, torrents: Iterable[TorrentRef]) -> None:
        await self._ids_action(protocol.METHOD_TORRENT_VERIFY, torrents)

    async def reannounce_torrents(self, torrents: Iterable[TorrentRef]) -> None:
        await self._ids_action(protocol.METHOD_TORRENT_REANNOUNCE, torrents)

    # -------------------------------------------------------------------------
    # Queue
    # -------------------------------------------------------------------------

    async def queue_move_top(self, torrents: Iterable[TorrentRef]) -> None:
        await self._ids_action(protocol.METHOD_QUEUE_MOVE_TOP, torrents)

    async def queue_move_up(self, torrents: Iterable[TorrentRef]) -> None:
        await self._ids_action(protocol.METHOD_QUEUE_MOVE_UP, torrents)

    async def queue_move_down(self, torrents: Iterable[TorrentRef]) -> None:
        await self._ids_action(protocol.METHOD_QUEUE_MOVE_DOWN, torrents)

    async def queue_move_bottom(self, torrents: Iterable[TorrentRef]) -> None:
        await self._ids_action(protocol.METHOD_QUEUE_MOVE_BOTTOM, torrents)

    # -------------------------------------------------------------------------
    # Daemon
    # -------------------------------------------------------------------------

    async def blocklist_update(self) -> int:
        """Update the blocklist and return the number of rules."""
        result: BlocklistUpdate = await self.call(protocol.METHOD_BLOCKLIST_UPDATE)
        return result.blocklist_size

    async def port_test(self) -> bool:
        """Check whether the incoming peer port is reachable from outside."""
        result: PortTest = await self.call(protocol.METHOD_PORT_TEST)
        return result.port_is_open

    async def free_space(self, path: str) -> int:
        """Return the free space in bytes available in ``path`` on the daemon host."""
        result: FreeSpace = await self.call(protocol.METHOD_FREE_SPACE, {"path": path})
        return result.size_bytes
