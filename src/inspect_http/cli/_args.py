"""Common CLI argument registration utilities."""
from __future__ import annotations

import argparse


def add_json_flag(parser: argparse.ArgumentParser) -> None:
    """Add --json flag for JSON output mode.

    Args:
        parser: ArgumentParser to add the flag to
    """
    parser.add_argument(
        "--json",
        action="store_true",
        help="Output as JSON",
    )


def add_config_dir_flag(parser: argparse.ArgumentParser) -> None:
    """Add --config-dir flag for the user config directory override.

    Args:
        parser: ArgumentParser to add the flag to
    """
    parser.add_argument(
        "--config-dir",
        type=str,
        help="Directory of YAML config overrides (default: ~/.inspect-http/config)",
    )
