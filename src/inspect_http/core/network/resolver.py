"""External IPv4 address discovery.

psutil is used for interface enumeration so the same code path works on
Linux, macOS and Windows. The first qualifying address wins; interface order
is whatever the platform reports, so callers must not rely on a particular
adapter being chosen when several are up.
"""
from __future__ import annotations

import ipaddress
import logging
import socket
from collections.abc import Callable, Mapping, Sequence
from typing import Any

import psutil

from inspect_http.core.exceptions import NoAddressError

logger = logging.getLogger(__name__)

InterfaceMap = Mapping[str, Sequence[Any]]


def _is_external(address: str) -> bool:
    try:
        ip = ipaddress.IPv4Address(address)
    except ValueError:
        return False
    return not (ip.is_loopback or ip.is_link_local)


def list_external_addresses(interfaces: Callable[[], InterfaceMap] | None = None) -> list[str]:
    """Return every non-loopback, non-link-local IPv4 address in enumeration order.

    Args:
        interfaces: Callable returning ``{name: [snicaddr, ...]}``; defaults to
            ``psutil.net_if_addrs``.
    """
    enumerate_interfaces = interfaces or psutil.net_if_addrs
    addresses: list[str] = []
    for name, entries in enumerate_interfaces().items():
        for entry in entries:
            if entry.family != socket.AF_INET:
                continue
            if _is_external(entry.address):
                addresses.append(entry.address)
            else:
                logger.debug("Skipping address %s on interface %s", entry.address, name)
    return addresses


def resolve_external_address(interfaces: Callable[[], InterfaceMap] | None = None) -> str:
    """Return the first external IPv4 address of this host.

    Raises:
        NoAddressError: when no adapter has a qualifying address (for example
            airplane mode, or both Ethernet and Wi-Fi down).
    """
    addresses = list_external_addresses(interfaces)
    if not addresses:
        raise NoAddressError("Could not find an external IP address")
    if len(addresses) > 1:
        logger.debug("Multiple external addresses %s; using %s", addresses, addresses[0])
    return addresses[0]


__all__ = ["list_external_addresses", "resolve_external_address"]
