"""Domain-specific configuration for inspect-http logging."""

from __future__ import annotations

from functools import cached_property
from pathlib import Path

from ..base import BaseDomainConfig


class LoggingConfig(BaseDomainConfig):
    def _config_section(self) -> str:
        return "logging"

    @cached_property
    def level(self) -> str:
        return str(self.section.get("level", "INFO") or "INFO").upper()

    @cached_property
    def path(self) -> Path | None:
        raw = self.section.get("path")
        if not raw or not str(raw).strip():
            return None
        return Path(str(raw).strip()).expanduser()


__all__ = ["LoggingConfig"]
