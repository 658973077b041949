"""Same-subnet request gate.

Two addresses count as "same subnet" when their first three dotted octets
are identical. This is a /24 heuristic, not a netmask computation, so hosts
on wider or narrower networks can be misjudged.
"""
from __future__ import annotations

import logging

logger = logging.getLogger(__name__)

_PREFIX_OCTETS = 3


class SubnetFilter:
    """Admit only clients whose address shares the server's first three octets."""

    def __init__(self, server_address: str) -> None:
        self.server_address = server_address
        self._server_octets = server_address.split(".")

    def admit(self, client_address: str | None) -> bool:
        if client_address:
            client_octets = client_address.split(".")
            if (
                len(client_octets) >= _PREFIX_OCTETS
                and len(self._server_octets) >= _PREFIX_OCTETS
                and client_octets[:_PREFIX_OCTETS] == self._server_octets[:_PREFIX_OCTETS]
            ):
                return True

        logger.info("Rejecting off-subnet request from address: %s", client_address)
        return False

    def __repr__(self) -> str:
        return f"SubnetFilter(server_address={self.server_address!r})"


__all__ = ["SubnetFilter"]
