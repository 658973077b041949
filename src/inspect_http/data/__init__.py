"""Bundled configuration defaults and schemas."""

from __future__ import annotations

from importlib import resources
from pathlib import Path


def get_data_path(subpackage: str, filename: str = "") -> Path:
    """Return the path of a bundled data directory, or of a file inside it.

    Example:
        >>> get_data_path("schemas", "config.schema.yaml")
        PosixPath('.../inspect_http/data/schemas/config.schema.yaml')
    """
    base = Path(str(resources.files("inspect_http.data") / subpackage))
    return base / filename if filename else base


__all__ = ["get_data_path"]
