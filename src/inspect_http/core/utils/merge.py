"""Deep merge used when layering configuration sources.

Mappings merge recursively; any other value (lists included) in the
override replaces the base value. A ``None`` override of a mapping is a
YAML key left empty (``section:``) and leaves the base mapping in place.
"""
from __future__ import annotations

from typing import Any, Dict


def deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively merge dictionaries without mutating inputs.

    Args:
        base: Base dictionary (lower priority)
        override: Override dictionary (higher priority)

    Returns:
        New merged dictionary

    Example:
        >>> deep_merge({"a": 1, "b": {"c": 2}}, {"b": {"d": 3}, "a": None})
        {'a': None, 'b': {'c': 2, 'd': 3}}
        >>> deep_merge({"b": {"c": 2}}, {"b": None})
        {'b': {'c': 2}}
    """
    result: Dict[str, Any] = dict(base)
    for key, value in (override or {}).items():
        current = result.get(key)
        if isinstance(current, dict) and value is None:
            continue
        if isinstance(current, dict) and isinstance(value, dict):
            result[key] = deep_merge(current, value)
        else:
            result[key] = value
    return result


__all__ = ["deep_merge"]
