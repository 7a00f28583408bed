"""Prover configuration read from a JSON file."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import timedelta
from os import PathLike
from typing import Any

DEFAULT_BODY_LIMIT = 52428800
DEFAULT_WORKERS = 10
DEFAULT_QUEUE_SIZE = 256
DEFAULT_L2_TIMEOUT_SECS = 60


def _uint(data: dict[str, Any], key: str, default: int | None) -> int | None:
    value = data.get(key)
    if value is None:
        return default
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ValueError(f"{key}: expected a non-negative integer, got {value!r}")
    return value


def _str(data: dict[str, Any], key: str, default: str | None) -> str | None:
    value = data.get(key)
    if value is None:
        return default
    if not isinstance(value, str):
        raise ValueError(f"{key}: expected a string, got {value!r}")
    return value


def _object(value: Any, name: str) -> dict[str, Any]:
    if not isinstance(value, dict):
        raise ValueError(f"{name}: expected an object, got {value!r}")
    return value


@dataclass(frozen=True)
class ScrollChain:
    """L1 endpoint used to fetch commit transactions."""

    endpoint: str = ""

    @classmethod
    def from_dict(cls, data: Any) -> ScrollChain:
        data = _object(data, "scroll_chain")
        if "endpoint" not in data:
            raise ValueError("scroll_chain: missing field endpoint")
        return cls(endpoint=_str(data, "endpoint", ""))


@dataclass(frozen=True)
class ServerConfig:
    """JSON-RPC server settings; an empty ``tls`` serves plain HTTP."""

    tls: str = ""
    body_limit: int = DEFAULT_BODY_LIMIT
    workers: int = DEFAULT_WORKERS
    queue_size: int = DEFAULT_QUEUE_SIZE

    @classmethod
    def from_dict(cls, data: Any) -> ServerConfig:
        data = _object(data, "server")
        return cls(
            tls=_str(data, "tls", ""),
            body_limit=_uint(data, "body_limit", DEFAULT_BODY_LIMIT),
            workers=_uint(data, "workers", DEFAULT_WORKERS),
            queue_size=_uint(data, "queue_size", DEFAULT_QUEUE_SIZE),
        )


@dataclass(frozen=True)
class Config:
    """Top-level prover configuration."""

    scroll_chain: ScrollChain | None = None
    server: ServerConfig = field(default_factory=ServerConfig)
    scroll_endpoint: str | None = None
    scroll_chain_id: int | None = None
    linea_endpoint: str | None = None
    linea_shomei: dict[str, Any] | None = None
    l2_timeout_secs: int = DEFAULT_L2_TIMEOUT_SECS

    @classmethod
    def from_dict(cls, data: Any) -> Config:
        """Build a config from parsed JSON; raise ValueError on malformed fields."""
        data = _object(data, "config")
        chain = data.get("scroll_chain")
        server = data.get("server")
        shomei = data.get("linea_shomei")
        return cls(
            scroll_chain=None if chain is None else ScrollChain.from_dict(chain),
            server=ServerConfig() if server is None else ServerConfig.from_dict(server),
            scroll_endpoint=_str(data, "scroll_endpoint", None),
            scroll_chain_id=_uint(data, "scroll_chain_id", None),
            linea_endpoint=_str(data, "linea_endpoint", None),
            linea_shomei=None if shomei is None else _object(shomei, "linea_shomei"),
            l2_timeout_secs=_uint(data, "l2_timeout_secs", DEFAULT_L2_TIMEOUT_SECS),
        )

    @classmethod
    def read_file(cls, path: str | PathLike[str]) -> Config:
        """Read a JSON config file."""
        with open(path, "rb") as fh:
            raw = fh.read()
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as err:
            raise ValueError(f"invalid config {path}: {err}") from err
        return cls.from_dict(data)


def get_timeout(timeout_secs: int) -> timedelta | None:
    """Return the timeout as a timedelta, or None when it is zero."""
    if timeout_secs > 0:
        return timedelta(seconds=timeout_secs)
    return None