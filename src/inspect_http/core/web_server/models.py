from __future__ import annotations

import os
from dataclasses import dataclass
from enum import Enum
from typing import Any

_SEPARATORS = frozenset({"/", os.sep})


class ServerState(str, Enum):
    STARTING = "starting"
    READY = "ready"
    FAILED = "failed"
    CLOSING = "closing"
    CLOSED = "closed"


@dataclass(frozen=True)
class ServerAddress:
    """Where a started server can be reached. ``family`` is always IPv4."""

    address: str
    port: int
    family: str = "IPv4"

    @property
    def url(self) -> str:
        return f"http://{self.address}:{self.port}/"

    def to_dict(self) -> dict[str, Any]:
        return {"address": self.address, "family": self.family, "port": self.port}


def normalize_root_path(path: str | os.PathLike[str]) -> str:
    """Strip a single trailing path separator so "/a/b/" and "/a/b" share a key."""
    raw = os.fspath(path)
    if raw and raw[-1] in _SEPARATORS:
        return raw[:-1]
    return raw


__all__ = ["ServerAddress", "ServerState", "normalize_root_path"]
