"""Centralized configuration caching.

Provides a single source of truth for loaded configuration across all domain
configs. The cache key fingerprints the user config files and the
INSPECT_HTTP_* environment so edits are picked up without a restart.
"""
from __future__ import annotations

import hashlib
import os
from pathlib import Path
from typing import Any, Dict, Optional

from inspect_http.core.utils import iter_yaml_files

_config_cache: Dict[str, Dict[str, Any]] = {}


def _cache_key(config_dir: Path) -> str:
    from .manager import ENV_PREFIX

    env_items = sorted(
        (k, os.environ.get(k, ""))
        for k in os.environ.keys()
        if k.startswith(ENV_PREFIX)
    )
    env_fp = hashlib.sha256(repr(env_items).encode("utf-8")).hexdigest()[:12]

    files: list[tuple[str, int, int]] = []
    for p in iter_yaml_files(config_dir):
        try:
            st = p.stat()
            files.append((p.name, int(st.st_mtime_ns), int(st.st_size)))
        except OSError:
            files.append((p.name, 0, 0))
    cfg_fp = hashlib.sha256(repr(files).encode("utf-8")).hexdigest()[:12]

    return f"{config_dir}:env={env_fp}:cfg={cfg_fp}"


def get_cached_config(config_dir: Optional[Path] = None, validate: bool = True) -> Dict[str, Any]:
    """Get configuration with caching.

    Args:
        config_dir: User config directory. Uses the default location if None.
        validate: Whether to validate against the bundled schema.

    Returns:
        Configuration dictionary (cached; treat as immutable).
    """
    from .manager import ConfigManager

    manager = ConfigManager(config_dir=config_dir)
    key = _cache_key(manager.user_config_dir)
    if key not in _config_cache:
        _config_cache[key] = manager.load_config(validate=validate)
    return _config_cache[key]


def clear_config_cache() -> None:
    """Drop every cached configuration."""
    _config_cache.clear()


__all__ = ["get_cached_config", "clear_config_cache"]
