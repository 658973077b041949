"""Base class for domain-specific configuration accessors.

Provides a standardized pattern for all domain configs with:
- Centralized caching via cache.py
- Type-safe section access
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from functools import cached_property
from pathlib import Path
from typing import Any, Dict, Optional

from .cache import get_cached_config


class BaseDomainConfig(ABC):
    """Abstract base class for domain-specific configuration accessors.

    Usage:
        class MyConfig(BaseDomainConfig):
            def _config_section(self) -> str:
                return "my_section"

            @cached_property
            def my_setting(self) -> str:
                return self.section.get("my_setting", "default")

        cfg = MyConfig()
        print(cfg.my_setting)

    A preloaded ``config`` mapping may be passed instead of reading from disk.
    """

    def __init__(
        self,
        config: Optional[Dict[str, Any]] = None,
        *,
        config_dir: Optional[Path] = None,
    ) -> None:
        if config is not None:
            self._config = config
        else:
            self._config = get_cached_config(config_dir=config_dir)

    @abstractmethod
    def _config_section(self) -> str:
        """Return the top-level config key for this domain."""
        ...

    @cached_property
    def section(self) -> Dict[str, Any]:
        """Get this domain's configuration section (empty dict if absent)."""
        return self._config.get(self._config_section(), {}) or {}


__all__ = ["BaseDomainConfig"]
