"""Connection settings for a Transmission daemon."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from .errors import ConfigError
from .http import DEFAULT_TIMEOUT


@dataclass(frozen=True)
class TransmissionConfig:
    """Static client configuration.

    Attributes:
        address: Full RPC URL (e.g., "http://localhost:9091/transmission/rpc").
        username: Basic auth user. Empty means no Authorization header.
        password: Basic auth password.
        timeout: Per-request timeout in seconds.
    """

    address: str
    username: str = ""
    password: str = ""
    timeout: float = DEFAULT_TIMEOUT


def _load_yaml(path: Path) -> dict[str, Any]:
    """Load a YAML file, returning an empty dict for an empty file."""
    try:
        with path.open() as f:
            return yaml.safe_load(f) or {}
    except OSError as err:
        raise ConfigError(f"Cannot read config file: {path}") from err
    except yaml.YAMLError as err:
        raise ConfigError(f"Invalid YAML in config file: {path}") from err


def load_config(path: Path) -> TransmissionConfig:
    """Load client settings from a YAML mapping.

    Expected keys: ``address`` (required), ``username``, ``password`` and
    ``timeout``.

    Raises:
        ConfigError: If the file is unreadable or the values are invalid.
    """
    data = _load_yaml(path)
    if not isinstance(data, dict):
        raise ConfigError(f"Config file must contain a mapping: {path}")

    address = data.get("address")
    if not isinstance(address, str) or not address:
        raise ConfigError("address is required")

    username = data.get("username") or ""
    password = data.get("password") or ""
    if not isinstance(username, str) or not isinstance(password, str):
        raise ConfigError("username and password must be strings")

    timeout = data.get("timeout", DEFAULT_TIMEOUT)
    if isinstance(timeout, bool) or not isinstance(timeout, (int, float)) or timeout <= 0:
        raise ConfigError("timeout must be a positive number")

    return TransmissionConfig(
        address=address,
        username=username,
        password=password,
        timeout=float(timeout),
    )
