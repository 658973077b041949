"""Configuration loading for inspect-http.

Bundled YAML defaults are layered with user YAML files and
INSPECT_HTTP_* environment overrides, then validated against the bundled
JSON Schema.
"""

from .base import BaseDomainConfig
from .cache import clear_config_cache, get_cached_config
from .domains import LoggingConfig, ServerConfig
from .manager import ConfigManager

__all__ = [
    "BaseDomainConfig",
    "ConfigManager",
    "LoggingConfig",
    "ServerConfig",
    "clear_config_cache",
    "get_cached_config",
]
