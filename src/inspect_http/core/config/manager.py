"""
inspect-http configuration management (YAML layers + environment overrides).
"""
from __future__ import annotations

import json
import logging
import os
import re
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Tuple

import jsonschema
import yaml

from inspect_http.core.exceptions import ConfigValidationError
from inspect_http.core.utils import deep_merge, iter_yaml_files, read_yaml
from inspect_http.data import get_data_path

logger = logging.getLogger(__name__)

ENV_PREFIX = "INSPECT_HTTP_"
CONFIG_DIR_ENV = "INSPECT_HTTP_CONFIG_DIR"
SCHEMA_NAME = "config.schema.yaml"


def default_user_config_dir() -> Path:
    """Return the user config directory (``$INSPECT_HTTP_CONFIG_DIR`` or ``~/.inspect-http/config``)."""
    raw = os.environ.get(CONFIG_DIR_ENV)
    if raw and raw.strip():
        return Path(raw.strip()).expanduser()
    return Path.home() / ".inspect-http" / "config"


class ConfigManager:
    """Load, merge, and validate inspect-http configuration.

    Configuration sources (highest to lowest priority):
    1. Environment variables: INSPECT_HTTP_<section>__<key>
    2. User config: <user-config-dir>/*.yaml (alphabetical order)
    3. Bundled defaults: inspect_http.data/config/*.yaml (alphabetical order)
    """

    def __init__(self, config_dir: Optional[Path] = None) -> None:
        self.core_config_dir = get_data_path("config")
        self.user_config_dir = Path(config_dir) if config_dir is not None else default_user_config_dir()

    # ---------- env overrides ----------

    def _as_bool(self, v: str) -> Optional[bool]:
        low = v.strip().lower()
        if low in {"true", "false"}:
            return low == "true"
        return None

    def _as_int(self, v: str) -> Optional[int]:
        if re.fullmatch(r"[-+]?\d+", v.strip() or " "):
            return int(v)
        return None

    def _as_float(self, v: str) -> Optional[float]:
        s = v.strip()
        if re.fullmatch(r"[-+]?\d*\.\d+", s) or re.fullmatch(r"[-+]?\d+\.\d*", s):
            return float(s)
        return None

    def _as_json(self, v: str) -> Optional[Any]:
        s = v.strip()
        if (s.startswith("{") and s.endswith("}")) or (s.startswith("[") and s.endswith("]")):
            try:
                return json.loads(s)
            except json.JSONDecodeError:
                return None
        return None

    def _coerce_type(self, value: str) -> Any:
        if value.strip().lower() in {"null", "none", "~"}:
            return None
        for caster in (self._as_bool, self._as_int, self._as_float, self._as_json):
            result = caster(value)
            if result is not None:
                return result
        return value.strip()

    def _iter_env_overrides(self) -> Iterator[Tuple[List[str], Any]]:
        for key in sorted(os.environ.keys()):
            if not key.startswith(ENV_PREFIX) or key == CONFIG_DIR_ENV:
                continue
            raw = key[len(ENV_PREFIX):]
            segs = [s.lower() for s in raw.split("__")]
            if not raw or any(s == "" for s in segs):
                logger.warning("Ignoring malformed config override: %s", key)
                continue
            yield segs, self._coerce_type(os.environ[key])

    def _set_nested(self, root: Dict[str, Any], path: List[str], value: Any) -> None:
        cur = root
        for part in path[:-1]:
            nxt = cur.get(part)
            if not isinstance(nxt, dict):
                nxt = {}
                cur[part] = nxt
            cur = nxt
        cur[path[-1]] = value

    def apply_env_overrides(self, cfg: Dict[str, Any]) -> None:
        for path, typed_value in self._iter_env_overrides():
            self._set_nested(cfg, path, typed_value)

    # ---------- loading ----------

    def _load_directory(self, directory: Path, cfg: Dict[str, Any]) -> Dict[str, Any]:
        for path in iter_yaml_files(directory):
            # Fail closed: configuration must never silently ignore invalid YAML.
            try:
                data = read_yaml(path, default={}, raise_on_error=True)
            except yaml.YAMLError as exc:
                raise ConfigValidationError(
                    f"Invalid YAML in {path}: {exc}",
                    context={"path": str(path)},
                ) from exc
            if not isinstance(data, dict):
                raise ConfigValidationError(
                    f"Config file must contain a mapping: {path}",
                    context={"path": str(path)},
                )
            cfg = deep_merge(cfg, data)
        return cfg

    def load_schema(self) -> Dict[str, Any]:
        schema = read_yaml(get_data_path("schemas", SCHEMA_NAME), default=None, raise_on_error=True)
        if not isinstance(schema, dict):
            raise ValueError(f"Schema must be a YAML mapping, got {type(schema).__name__}")
        return schema

    def validate_schema(self, config: Dict[str, Any]) -> None:
        try:
            jsonschema.validate(instance=config, schema=self.load_schema())
        except jsonschema.ValidationError as exc:
            location = ".".join(str(p) for p in exc.absolute_path) or "<root>"
            raise ConfigValidationError(
                f"Invalid configuration at {location}: {exc.message}",
                context={"path": location},
            ) from exc

    def load_config(self, validate: bool = True) -> Dict[str, Any]:
        """Load the merged configuration without consulting the cache."""
        cfg: Dict[str, Any] = {}
        cfg = self._load_directory(self.core_config_dir, cfg)
        cfg = self._load_directory(self.user_config_dir, cfg)
        self.apply_env_overrides(cfg)
        if validate:
            self.validate_schema(cfg)
        return cfg

    def dump(self, cfg: Dict[str, Any]) -> str:
        return yaml.safe_dump(cfg, sort_keys=True, default_flow_style=False)


__all__ = ["ConfigManager", "default_user_config_dir", "ENV_PREFIX", "CONFIG_DIR_ENV"]
