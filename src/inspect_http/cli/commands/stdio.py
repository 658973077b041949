"""
inspect-http stdio command.

SUMMARY: Answer getServer/closeServer requests as JSON lines on stdin/stdout

Intended to be spawned by an editor. Every server started through this
session is closed when stdin reaches EOF.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from inspect_http.cli import add_config_dir_flag
from inspect_http.core.config import ServerConfig
from inspect_http.core.domain import DomainManager, init
from inspect_http.core.stdio import serve_stdio
from inspect_http.core.web_server import ServerRegistry

SUMMARY = "Answer getServer/closeServer requests as JSON lines on stdin/stdout"

logger = logging.getLogger(__name__)


def register_args(parser: argparse.ArgumentParser) -> None:
    """Register command-specific arguments."""
    add_config_dir_flag(parser)


def main(args: argparse.Namespace) -> int:
    config_dir = getattr(args, "config_dir", None)
    registry = ServerRegistry(config=ServerConfig(config_dir=Path(config_dir) if config_dir else None))
    domain_manager = DomainManager()
    init(domain_manager, registry)

    try:
        serve_stdio(domain_manager, sys.stdin, sys.stdout)
    finally:
        closed = registry.close_all()
        if closed:
            logger.info("Closed %d server(s) on exit", len(closed))
    return 0
