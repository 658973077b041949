"""Command domain exposing the server registry to an external caller.

A caller (typically an editor process talking over stdio) addresses commands
as ``<domain>.<command>`` with a parameter mapping. ``DomainManager.execute``
is the error boundary: whatever a handler raises comes back as an error
payload instead of propagating into the transport loop.
"""
from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any

from inspect_http.core.exceptions import InspectHttpError, UnknownCommandError
from inspect_http.core.web_server import ServerRegistry, get_registry

logger = logging.getLogger(__name__)

DOMAIN_NAME = "inspectHttpServer"
DOMAIN_VERSION = {"major": 0, "minor": 1}


@dataclass(frozen=True)
class CommandSpec:
    name: str
    handler: Callable[..., Any]
    description: str = ""
    parameters: list[dict[str, str]] = field(default_factory=list)
    returns: list[dict[str, str]] = field(default_factory=list)


class DomainManager:
    def __init__(self) -> None:
        self._domains: dict[str, dict[str, Any]] = {}

    def has_domain(self, name: str) -> bool:
        return name in self._domains

    def register_domain(self, name: str, version: Mapping[str, int]) -> None:
        self._domains[name] = {"version": dict(version), "commands": {}}

    def register_command(
        self,
        domain: str,
        command: str,
        handler: Callable[..., Any],
        *,
        description: str = "",
        parameters: list[dict[str, str]] | None = None,
        returns: list[dict[str, str]] | None = None,
    ) -> None:
        if domain not in self._domains:
            raise UnknownCommandError(f"Unknown domain: {domain}", context={"domain": domain})
        self._domains[domain]["commands"][command] = CommandSpec(
            name=command,
            handler=handler,
            description=description,
            parameters=list(parameters or []),
            returns=list(returns or []),
        )

    def describe(self) -> dict[str, Any]:
        """Return JSON-friendly metadata for every registered domain and command."""
        out: dict[str, Any] = {}
        for name, info in sorted(self._domains.items()):
            out[name] = {
                "version": info["version"],
                "commands": {
                    cmd.name: {
                        "description": cmd.description,
                        "parameters": cmd.parameters,
                        "returns": cmd.returns,
                    }
                    for cmd in info["commands"].values()
                },
            }
        return out

    def _lookup(self, domain: str, command: str) -> CommandSpec:
        info = self._domains.get(domain)
        entry = info["commands"].get(command) if info else None
        if entry is None:
            raise UnknownCommandError(
                f"Unknown command: {domain}.{command}",
                context={"domain": domain, "command": command},
            )
        return entry

    def execute(
        self,
        domain: str,
        command: str,
        parameters: list[Any] | Mapping[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Run a command and return ``{"response": ...}`` or ``{"error": {...}}``.

        Parameters may be positional (list) or named (mapping).
        """
        try:
            entry = self._lookup(domain, command)
            if isinstance(parameters, Mapping):
                result = entry.handler(**parameters)
            else:
                result = entry.handler(*(parameters or []))
        except InspectHttpError as exc:
            logger.warning("%s.%s failed: %s", domain, command, exc)
            return {"error": exc.to_json_error()}
        except Exception as exc:
            logger.exception("%s.%s raised an unexpected error", domain, command)
            return {"error": {"message": str(exc), "code": exc.__class__.__name__, "context": {}}}
        return {"response": result}


def init(domain_manager: DomainManager, registry: ServerRegistry | None = None) -> None:
    """Register the inspect server commands on ``domain_manager``.

    Commands use ``registry`` when given, otherwise the process-wide registry.
    """

    def _registry() -> ServerRegistry:
        return registry if registry is not None else get_registry()

    def get_server(path: str) -> dict[str, Any]:
        return _registry().get_or_create(path).to_dict()

    def close_server(path: str) -> bool:
        return _registry().close_if_exists(path)

    if not domain_manager.has_domain(DOMAIN_NAME):
        domain_manager.register_domain(DOMAIN_NAME, DOMAIN_VERSION)

    domain_manager.register_command(
        DOMAIN_NAME,
        "getServer",
        get_server,
        description="Starts or returns an existing server for the given path.",
        parameters=[
            {
                "name": "path",
                "type": "string",
                "description": "absolute filesystem path for root of server",
            }
        ],
        returns=[
            {
                "name": "address",
                "type": "{address: string, family: string, port: number}",
                "description": "hostname, port and socket family of the server; family is always 'IPv4'",
            }
        ],
    )
    domain_manager.register_command(
        DOMAIN_NAME,
        "closeServer",
        close_server,
        description="Closes the server for the given path.",
        parameters=[
            {
                "name": "path",
                "type": "string",
                "description": "absolute filesystem path for root of server",
            }
        ],
        returns=[
            {
                "name": "result",
                "type": "boolean",
                "description": "whether a server was found for the path and closed",
            }
        ],
    )


__all__ = ["CommandSpec", "DomainManager", "DOMAIN_NAME", "init"]
