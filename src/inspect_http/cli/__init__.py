"""
inspect-http CLI package.

Provides the command-line interface with auto-discovery of commands
from the commands/ subfolder.

Framework utilities for building CLI commands:
- _output: result and error output (JSON/text modes)
- _args: Common argument registration helpers
"""
from ._args import add_json_flag, add_config_dir_flag
from ._output import CommandOutput

__all__ = [
    "CommandOutput",
    "add_json_flag",
    "add_config_dir_flag",
]
