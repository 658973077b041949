"""
inspect-http addresses command.

SUMMARY: List the external IPv4 addresses a server could bind to
"""

from __future__ import annotations

import argparse

from inspect_http.cli import CommandOutput, add_json_flag
from inspect_http.core.network import list_external_addresses

SUMMARY = "List the external IPv4 addresses a server could bind to"


def register_args(parser: argparse.ArgumentParser) -> None:
    """Register command-specific arguments."""
    add_json_flag(parser)


def main(args: argparse.Namespace) -> int:
    out = CommandOutput(json_mode=getattr(args, "json", False))
    addresses = list_external_addresses()

    if not addresses and not out.json_mode:
        return out.fail("Could not find an external IP address", code="NoAddressError")

    out.emit(
        {"addresses": addresses, "selected": addresses[0] if addresses else None},
        [("* " if idx == 0 else "  ") + address for idx, address in enumerate(addresses)],
    )
    return 0 if addresses else 1
