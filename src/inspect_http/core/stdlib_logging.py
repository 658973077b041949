from __future__ import annotations

import logging
import sys
from pathlib import Path

_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

_CONFIGURED_TARGET: str | None = None
_INSTALLED_HANDLER: logging.Handler | None = None


def _level_from_name(name: str) -> int:
    level = getattr(logging, str(name).upper(), None)
    return level if isinstance(level, int) else logging.INFO


def configure_logging(*, level: str = "INFO", log_path: Path | None = None) -> None:
    """Configure stdlib logging for the process.

    Logs go to ``log_path`` when given, otherwise to stderr. stdout is never
    used so the stdio command loop keeps a clean channel. Idempotent
    per-process: reconfiguring the same target only updates the level.
    """
    global _CONFIGURED_TARGET, _INSTALLED_HANDLER

    target = str(Path(log_path).resolve()) if log_path is not None else "<stderr>"
    root = logging.getLogger()
    root.setLevel(_level_from_name(level))

    if _CONFIGURED_TARGET == target and _INSTALLED_HANDLER is not None:
        _INSTALLED_HANDLER.setLevel(_level_from_name(level))
        return

    if _INSTALLED_HANDLER is not None:
        root.removeHandler(_INSTALLED_HANDLER)
        _INSTALLED_HANDLER.close()
        _INSTALLED_HANDLER = None

    handler: logging.Handler
    if log_path is not None:
        Path(target).parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(target, encoding="utf-8")
    else:
        handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(_level_from_name(level))
    handler.setFormatter(logging.Formatter(_LOG_FORMAT))
    root.addHandler(handler)

    _INSTALLED_HANDLER = handler
    _CONFIGURED_TARGET = target


def reset_logging_for_tests() -> None:
    """Test-only: remove the handler installed by configure_logging."""
    global _CONFIGURED_TARGET, _INSTALLED_HANDLER
    if _INSTALLED_HANDLER is not None:
        logging.getLogger().removeHandler(_INSTALLED_HANDLER)
        _INSTALLED_HANDLER.close()
    _CONFIGURED_TARGET = None
    _INSTALLED_HANDLER = None


__all__ = ["configure_logging", "reset_logging_for_tests"]
