"""Static inspect server lifecycle management.

Provides primitives for:
- Starting a subnet-restricted static server for a root path and warming it up
- Reusing one server per root through a process-wide registry
- Closing a root's server without waiting for its sockets to drain
"""

from .instance import ServerInstance
from .models import ServerAddress, ServerState, normalize_root_path
from .registry import ServerRegistry, get_registry, reset_registry

__all__ = [
    "ServerAddress",
    "ServerInstance",
    "ServerRegistry",
    "ServerState",
    "get_registry",
    "normalize_root_path",
    "reset_registry",
]
