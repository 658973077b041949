"""
inspect-http serve command.

SUMMARY: Serve a directory to devices on the local subnet

Starts one subnet-restricted static server for ROOT, prints its address and
keeps it running until interrupted.
"""

from __future__ import annotations

import argparse
import threading
from pathlib import Path

from inspect_http.cli import CommandOutput, add_config_dir_flag, add_json_flag
from inspect_http.core.config import ServerConfig
from inspect_http.core.exceptions import InspectHttpError
from inspect_http.core.web_server import ServerRegistry

SUMMARY = "Serve a directory to devices on the local subnet"


def register_args(parser: argparse.ArgumentParser) -> None:
    """Register command-specific arguments."""
    parser.add_argument("root", help="Directory to use as the document root")
    add_json_flag(parser)
    add_config_dir_flag(parser)


def main(args: argparse.Namespace, *, stop_event: threading.Event | None = None) -> int:
    out = CommandOutput(json_mode=getattr(args, "json", False))

    root = Path(args.root).expanduser().resolve()
    if not root.is_dir():
        return out.fail(f"Not a directory: {root}", code="NotADirectoryError", context={"root_path": str(root)})

    config_dir = getattr(args, "config_dir", None)
    registry = ServerRegistry(config=ServerConfig(config_dir=Path(config_dir) if config_dir else None))
    try:
        address = registry.get_or_create(str(root))
    except InspectHttpError as exc:
        return out.fail_with(exc)

    out.emit(
        {"status": "serving", "root": str(root), "url": address.url, **address.to_dict()},
        f"Serving {root} at {address.url} (Ctrl+C to stop)",
    )

    stop = stop_event or threading.Event()
    try:
        stop.wait()
    except KeyboardInterrupt:
        pass
    finally:
        instance = registry.get(str(root))
        registry.close_if_exists(str(root))
        if instance is not None:
            instance.wait_closed(timeout=5.0)
    return 0
