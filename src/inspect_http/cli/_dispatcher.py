"""
Auto-discovery CLI dispatcher for inspect-http.

Scans cli/commands/ for command modules and registers them. Each module
exposes ``SUMMARY``, ``register_args(parser)`` and ``main(args) -> int``.
"""

from __future__ import annotations

import argparse
import importlib
import logging
import pkgutil
import sys
from functools import lru_cache
from pathlib import Path
from typing import Any

from inspect_http.core.exceptions import InspectHttpError
from inspect_http.core.stdlib_logging import configure_logging

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def discover_commands() -> dict[str, dict[str, Any]]:
    """Discover command modules under cli/commands."""
    commands_dir = Path(__file__).parent / "commands"
    commands: dict[str, dict[str, Any]] = {}

    for info in pkgutil.iter_modules([str(commands_dir)]):
        if info.name.startswith("_"):
            continue
        module_name = f"inspect_http.cli.commands.{info.name}"
        try:
            module = importlib.import_module(module_name)
        except ImportError as e:
            print(f"Warning: Could not import command {info.name}: {e}", file=sys.stderr)
            continue
        commands[info.name] = {
            "module": module,
            "summary": getattr(module, "SUMMARY", info.name),
            "register_args": getattr(module, "register_args", None),
            "main": getattr(module, "main", None),
        }

    return commands


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with auto-discovered commands."""
    parser = argparse.ArgumentParser(
        prog="inspect-http",
        description="On-demand static file servers restricted to the local subnet",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {_get_version()}",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        type=str.upper,
        help="Override logging.level from configuration",
    )
    parser.add_argument(
        "--log-file",
        type=str,
        help="Write logs to this file instead of stderr",
    )

    subparsers = parser.add_subparsers(
        dest="command",
        title="commands",
        metavar="<command>",
    )

    for cmd_name, cmd_info in sorted(discover_commands().items()):
        primary_name = cmd_name.replace("_", "-")
        aliases = [cmd_name] if primary_name != cmd_name else []
        cmd_parser = subparsers.add_parser(
            primary_name,
            aliases=aliases,
            help=cmd_info["summary"],
        )
        if cmd_info["register_args"]:
            cmd_info["register_args"](cmd_parser)
        if cmd_info["main"]:
            cmd_parser.set_defaults(_func=cmd_info["main"])

    return parser


def _get_version() -> str:
    from inspect_http import __version__

    return __version__


def _setup_logging(args: argparse.Namespace) -> None:
    from inspect_http.core.config import LoggingConfig

    config_dir = getattr(args, "config_dir", None)
    cfg = LoggingConfig(config_dir=Path(config_dir) if config_dir else None)
    level = args.log_level or cfg.level
    log_path = Path(args.log_file).expanduser() if args.log_file else cfg.path
    configure_logging(level=level, log_path=log_path)


def main(argv: list[str] | None = None) -> int:
    """
    Main entry point for the inspect-http CLI.

    Args:
        argv: Command line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    if argv is None:
        argv = sys.argv[1:]

    parser = build_parser()
    args = parser.parse_args(argv)

    if not getattr(args, "_func", None):
        parser.print_help()
        return 0

    try:
        _setup_logging(args)
    except InspectHttpError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    try:
        return int(args._func(args) or 0)
    except KeyboardInterrupt:
        return 130


if __name__ == "__main__":
    sys.exit(main())
