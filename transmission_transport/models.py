"""Typed result shapes and argument builders for Transmission RPC methods."""

from __future__ import annotations

import base64
import weakref
from dataclasses import dataclass, field
from enum import IntEnum
from typing import TYPE_CHECKING, Any

from .errors import TransmissionClientError

if TYPE_CHECKING:
    from .client import TransmissionClient


class TorrentStatus(IntEnum):
    """Torrent activity as reported in the ``status`` field."""

    STOPPED = 0
    CHECK_WAIT = 1
    CHECK = 2
    DOWNLOAD_WAIT = 3
    DOWNLOAD = 4
    SEED_WAIT = 5
    SEED = 6


DEFAULT_TORRENT_FIELDS: tuple[str, ...] = (
    "id",
    "hashString",
    "name",
    "status",
    "error",
    "errorString",
    "downloadDir",
    "totalSize",
    "sizeWhenDone",
    "leftUntilDone",
    "percentDone",
    "rateDownload",
    "rateUpload",
    "uploadRatio",
    "eta",
    "peersConnected",
    "queuePosition",
    "addedDate",
    "doneDate",
    "isFinished",
    "isPrivate",
    "magnetLink",
)

_NUMBER = (int, float)

# Expected JSON types for the fields the client reads itself. Other fields
# are kept as returned.
_FIELD_TYPES: dict[str, type | tuple[type, ...]] = {
    "id": int,
    "hashString": str,
    "name": str,
    "status": int,
    "error": int,
    "errorString": str,
    "downloadDir": str,
    "totalSize": int,
    "sizeWhenDone": int,
    "leftUntilDone": int,
    "percentDone": _NUMBER,
    "rateDownload": int,
    "rateUpload": int,
    "uploadRatio": _NUMBER,
    "eta": int,
    "queuePosition": int,
    "isFinished": bool,
    "isPrivate": bool,
}


def _check_type(key: str, value: Any, expected: type | tuple[type, ...]) -> None:
    # bool is an int subclass; only accept it where a bool is expected.
    if isinstance(value, bool) and expected is not bool:
        raise TypeError(f"{key} must not be a boolean")
    if not isinstance(value, expected):
        raise TypeError(f"{key} has unexpected type {type(value).__name__}")


def _require(arguments: dict[str, Any], key: str, expected: type | tuple[type, ...]) -> Any:
    value = arguments[key]
    _check_type(key, value, expected)
    return value


@dataclass(eq=False)
class Torrent:
    """A torrent as returned by torrent-get or torrent-add.

    Only the requested fields are present in ``fields``. The owning client
    is held through a weak reference so torrent lists never keep a client
    alive.
    """

    fields: dict[str, Any]
    _client_ref: weakref.ReferenceType[TransmissionClient] | None = field(
        default=None, repr=False
    )

    @classmethod
    def from_dict(cls, data: Any) -> Torrent:
        if not isinstance(data, dict):
            raise TypeError("torrent entry must be an object")
        for key, expected in _FIELD_TYPES.items():
            if key in data:
                _check_type(key, data[key], expected)
        if "status" in data:
            TorrentStatus(data["status"])
        return cls(fields=dict(data))

    def attach(self, client: TransmissionClient) -> None:
        """Bind this torrent to the client that decoded it."""
        self._client_ref = weakref.ref(client)

    @property
    def client(self) -> TransmissionClient:
        client = self._client_ref() if self._client_ref is not None else None
        if client is None:
            raise TransmissionClientError("Torrent is not bound to a live client")
        return client

    @property
    def id(self) -> int | None:
        return self.fields.get("id")

    @property
    def hash_string(self) -> str | None:
        return self.fields.get("hashString")

    @property
    def name(self) -> str | None:
        return self.fields.get("name")

    @property
    def status(self) -> TorrentStatus | None:
        value = self.fields.get("status")
        return TorrentStatus(value) if value is not None else None

    @property
    def percent_done(self) -> float | None:
        return self.fields.get("percentDone")

    @property
    def download_dir(self) -> str | None:
        return self.fields.get("downloadDir")

    @property
    def total_size(self) -> int | None:
        return self.fields.get("totalSize")

    @property
    def queue_position(self) -> int | None:
        return self.fields.get("queuePosition")

    @property
    def rpc_id(self) -> int | str:
        """Identifier accepted in an ``ids`` list: the id, else the hash."""
        if self.id is not None:
            return self.id
        if self.hash_string is not None:
            return self.hash_string
        raise TransmissionClientError("Torrent has neither an id nor a hashString")

    async def remove(self, delete_local_data: bool = False) -> None:
        await self.client.remove_torrents([self], delete_local_data=delete_local_data)

    async def start(self) -> None:
        await self.client.start_torrents([self])

    async def start_now(self) -> None:
        await self.client.start_torrents_now([self])

    async def stop(self) -> None:
        await self.client.stop_torrents([self])

    async def verify(self) -> None:
        await self.client.verify_torrents([self])

    async def reannounce(self) -> None:
        await self.client.reannounce_torrents([self])

    async def queue_move_top(self) -> None:
        await self.client.queue_move_top([self])

    async def queue_move_up(self) -> None:
        await self.client.queue_move_up([self])

    async def queue_move_down(self) -> None:
        await self.client.queue_move_down([self])

    async def queue_move_bottom(self) -> None:
        await self.client.queue_move_bottom([self])


@dataclass
class AddTorrentArgs:
    """Arguments for torrent-add.

    Exactly one of ``filename`` (a path, URL or magnet link readable by the
    daemon) or ``metainfo`` (raw .torrent bytes) must be given. Unset
    options are left out of the request.
    """

    filename: str | None = None
    metainfo: bytes | None = None
    cookies: str | None = None
    download_dir: str | None = None
    paused: bool = False
    peer_limit: int | None = None
    bandwidth_priority: int | None = None
    files_wanted: list[int] = field(default_factory=list)
    files_unwanted: list[int] = field(default_factory=list)
    priority_high: list[int] = field(default_factory=list)
    priority_low: list[int] = field(default_factory=list)
    priority_normal: list[int] = field(default_factory=list)

    def to_arguments(self) -> dict[str, Any]:
        if (self.filename is None) == (self.metainfo is None):
            raise ValueError("Exactly one of filename or metainfo is required")

        arguments: dict[str, Any] = {}
        if self.filename is not None:
            arguments["filename"] = self.filename
        if self.metainfo is not None:
            arguments["metainfo"] = base64.b64encode(self.metainfo).decode("ascii")
        if self.cookies:
            arguments["cookies"] = self.cookies
        if self.download_dir:
            arguments["download-dir"] = self.download_dir
        if self.paused:
            arguments["paused"] = True
        if self.peer_limit is not None:
            arguments["peer-limit"] = self.peer_limit
        if self.bandwidth_priority is not None:
            arguments["bandwidthPriority"] = self.bandwidth_priority
        for key, indexes in (
            ("files-wanted", self.files_wanted),
            ("files-unwanted", self.files_unwanted),
            ("priority-high", self.priority_high),
            ("priority-low", self.priority_low),
            ("priority-normal", self.priority_normal),
        ):
            if indexes:
                arguments[key] = list(indexes)
        return arguments


# -----------------------------------------------------------------------------
# Result shapes
# -----------------------------------------------------------------------------


@dataclass(frozen=True)
class NoResult:
    """Methods whose response arguments carry nothing of interest."""

    @classmethod
    def from_arguments(cls, arguments: dict[str, Any]) -> NoResult:
        return cls()


@dataclass(frozen=True)
class TorrentList:
    """torrent-get response."""

    torrents: list[Torrent]
    removed: list[int] = field(default_factory=lambda: [])

    @classmethod
    def from_arguments(cls, arguments: dict[str, Any]) -> TorrentList:
        raw = arguments.get("torrents", [])
        if not isinstance(raw, list):
            raise TypeError("torrents must be a list")
        removed = arguments.get("removed", [])
        if not isinstance(removed, list):
            raise TypeError("removed must be a list")
        return cls(torrents=[Torrent.from_dict(item) for item in raw], removed=removed)


@dataclass(frozen=True)
class TorrentAdded:
    """torrent-add response.

    The daemon reports a new torrent under ``torrent-added`` and an already
    known one under ``torrent-duplicate``.
    """

    added: Torrent | None
    duplicate: Torrent | None = None

    @classmethod
    def from_arguments(cls, arguments: dict[str, Any]) -> TorrentAdded:
        added = arguments.get("torrent-added")
        duplicate = arguments.get("torrent-duplicate")
        return cls(
            added=Torrent.from_dict(added) if added is not None else None,
            duplicate=Torrent.from_dict(duplicate) if duplicate is not None else None,
        )


@dataclass(frozen=True)
class BlocklistUpdate:
    """blocklist-update response."""

    blocklist_size: int

    @classmethod
    def from_arguments(cls, arguments: dict[str, Any]) -> BlocklistUpdate:
        return cls(blocklist_size=_require(arguments, "blocklist-size", int))


@dataclass(frozen=True)
class PortTest:
    """port-test response."""

    port_is_open: bool

    @classmethod
    def from_arguments(cls, arguments: dict[str, Any]) -> PortTest:
        return cls(port_is_open=_require(arguments, "port-is-open", bool))


@dataclass(frozen=True)
class FreeSpace:
    """free-space response."""

    path: str
    size_bytes: int

    @classmethod
    def from_arguments(cls, arguments: dict[str, Any]) -> FreeSpace:
        return cls(
            path=_require(arguments, "path", str),
            size_bytes=_require(arguments, "size-bytes", int),
        )
