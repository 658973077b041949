"""JSON-lines command transport over a pair of text streams.

Each input line is a request object::

    {"id": 1, "domain": "inspectHttpServer", "command": "getServer", "parameters": ["/path"]}

and each output line answers it with the same ``id`` plus either
``response`` or ``error``.
"""
from __future__ import annotations

import json
import logging
from typing import IO, Any

from .domain import DomainManager

logger = logging.getLogger(__name__)


def handle_line(domain_manager: DomainManager, line: str) -> dict[str, Any]:
    try:
        message = json.loads(line)
    except json.JSONDecodeError as exc:
        return {"id": None, "error": {"message": f"Invalid JSON: {exc}", "code": "ParseError", "context": {}}}
    if not isinstance(message, dict):
        return {"id": None, "error": {"message": "Request must be an object", "code": "ParseError", "context": {}}}

    result = domain_manager.execute(
        str(message.get("domain", "")),
        str(message.get("command", "")),
        message.get("parameters"),
    )
    return {"id": message.get("id"), **result}


def serve_stdio(domain_manager: DomainManager, stdin: IO[str], stdout: IO[str]) -> int:
    """Answer requests from ``stdin`` until EOF; returns the number handled."""
    handled = 0
    for line in stdin:
        if not line.strip():
            continue
        reply = handle_line(domain_manager, line)
        stdout.write(json.dumps(reply, default=str) + "\n")
        stdout.flush()
        handled += 1
    logger.debug("stdio transport reached EOF after %d request(s)", handled)
    return handled


__all__ = ["handle_line", "serve_stdio"]
