"""Shared helpers for inspect-http core modules."""

from .merge import deep_merge
from .yaml import iter_yaml_files, read_yaml

__all__ = ["deep_merge", "iter_yaml_files", "read_yaml"]
