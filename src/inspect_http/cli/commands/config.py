"""
inspect-http config command.

SUMMARY: Show the effective configuration

Displays bundled defaults merged with user YAML files and
INSPECT_HTTP_* environment overrides.
"""

from __future__ import annotations

import argparse
from pathlib import Path

from inspect_http.cli import CommandOutput, add_config_dir_flag, add_json_flag
from inspect_http.core.config import ConfigManager
from inspect_http.core.exceptions import InspectHttpError

SUMMARY = "Show the effective configuration"


def register_args(parser: argparse.ArgumentParser) -> None:
    """Register command-specific arguments."""
    add_json_flag(parser)
    add_config_dir_flag(parser)


def main(args: argparse.Namespace) -> int:
    out = CommandOutput(json_mode=getattr(args, "json", False))
    config_dir = getattr(args, "config_dir", None)
    manager = ConfigManager(config_dir=Path(config_dir) if config_dir else None)

    try:
        cfg = manager.load_config(validate=True)
    except InspectHttpError as exc:
        return out.fail_with(exc)

    out.emit(cfg, manager.dump(cfg).rstrip())
    return 0
