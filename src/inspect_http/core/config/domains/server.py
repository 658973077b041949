"""Domain-specific configuration for the static inspect servers.

This config controls:
- How long the post-bind readiness GET may take
- The per-connection socket timeout
- The request body size cap applied after the subnet filter
- An optional fixed bind address that bypasses interface discovery
"""

from __future__ import annotations

import ipaddress
from functools import cached_property

from inspect_http.core.exceptions import ConfigValidationError

from ..base import BaseDomainConfig

DEFAULT_PROBE_TIMEOUT_SECONDS = 5.0
DEFAULT_REQUEST_TIMEOUT_SECONDS = 30.0
DEFAULT_MAX_BODY_BYTES = 1024 * 1024


class ServerConfig(BaseDomainConfig):
    def _config_section(self) -> str:
        return "inspect_server"

    @cached_property
    def probe_timeout_seconds(self) -> float:
        return float(self.section.get("probe_timeout_seconds", DEFAULT_PROBE_TIMEOUT_SECONDS))

    @cached_property
    def request_timeout_seconds(self) -> float:
        return float(self.section.get("request_timeout_seconds", DEFAULT_REQUEST_TIMEOUT_SECONDS))

    @cached_property
    def max_body_bytes(self) -> int:
        return int(self.section.get("max_body_bytes", DEFAULT_MAX_BODY_BYTES))

    @cached_property
    def bind_address(self) -> str | None:
        raw = self.section.get("bind_address")
        if raw is None:
            return None
        value = str(raw).strip()
        if not value:
            return None
        try:
            unspecified = ipaddress.IPv4Address(value).is_unspecified
        except ValueError as exc:
            raise ConfigValidationError(
                f"Invalid configuration at inspect_server.bind_address: {exc}",
                context={"path": "inspect_server.bind_address"},
            ) from exc
        if unspecified:
            # The bound address is handed to clients and seeds the subnet gate.
            raise ConfigValidationError(
                "Invalid configuration at inspect_server.bind_address: must be a concrete interface address",
                context={"path": "inspect_server.bind_address"},
            )
        return value


__all__ = ["ServerConfig"]
