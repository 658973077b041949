"""Process-wide table of running inspect servers, one per normalized root path."""
from __future__ import annotations

import logging
import os
import threading
from collections.abc import Callable

from inspect_http.core.config import ServerConfig

from .instance import ServerInstance
from .models import ServerAddress, normalize_root_path

logger = logging.getLogger(__name__)


class ServerRegistry:
    """Map root paths to running servers with idempotent get/close semantics.

    The table lock is only held for lookups, inserts and removals; startup,
    the readiness probe and shutdown all run outside it. Two threads racing
    to create the same root both start an instance, but only the first insert
    wins and the loser is closed again, so a root never has two live entries.
    """

    def __init__(self, config: ServerConfig | None = None) -> None:
        self._config = config
        self._servers: dict[str, ServerInstance] = {}
        self._lock = threading.Lock()

    def _server_config(self) -> ServerConfig:
        return self._config if self._config is not None else ServerConfig()

    def get_or_create(self, root_path: str | os.PathLike[str]) -> ServerAddress:
        """Return the address of the server for ``root_path``, starting one if needed.

        Startup errors propagate and leave the table untouched.
        """
        key = normalize_root_path(root_path)
        with self._lock:
            existing = self._servers.get(key)
        if existing is not None:
            return existing.address

        instance = ServerInstance.start(root_path, config=self._server_config())
        with self._lock:
            winner = self._servers.setdefault(key, instance)
        if winner is not instance:
            logger.debug("Discarding duplicate server for %s at %s", key, instance.address.url)
            instance.close()
        return winner.address

    def close_if_exists(
        self,
        root_path: str | os.PathLike[str],
        callback: Callable[[ServerInstance], None] | None = None,
    ) -> bool:
        """Forget the server for ``root_path`` and close it in the background.

        Returns False when no server is registered for the root. Once this
        returns True the root is free for a fresh ``get_or_create``, although
        the old socket may still be draining.
        """
        key = normalize_root_path(root_path)
        with self._lock:
            instance = self._servers.pop(key, None)
        if instance is None:
            return False
        instance.close(callback)
        return True

    def get(self, root_path: str | os.PathLike[str]) -> ServerInstance | None:
        with self._lock:
            return self._servers.get(normalize_root_path(root_path))

    def roots(self) -> list[str]:
        with self._lock:
            return sorted(self._servers)

    def close_all(self) -> list[ServerInstance]:
        """Close every registered server; returns the instances being closed."""
        with self._lock:
            instances = list(self._servers.values())
            self._servers.clear()
        for instance in instances:
            instance.close()
        return instances

    def __len__(self) -> int:
        with self._lock:
            return len(self._servers)

    def __contains__(self, root_path: object) -> bool:
        if not isinstance(root_path, (str, os.PathLike)):
            return False
        return self.get(root_path) is not None


_default_registry: ServerRegistry | None = None
_default_lock = threading.Lock()


def get_registry() -> ServerRegistry:
    """Return the process-wide registry, creating it on first use."""
    global _default_registry
    with _default_lock:
        if _default_registry is None:
            _default_registry = ServerRegistry()
        return _default_registry


def reset_registry() -> None:
    """Close all servers in the process-wide registry and drop it."""
    global _default_registry
    with _default_lock:
        registry, _default_registry = _default_registry, None
    if registry is not None:
        registry.close_all()


__all__ = ["ServerRegistry", "get_registry", "reset_registry"]
