"""Command output for the inspect-http CLI.

stdout carries results only (one JSON document with ``--json``); every
error goes to stderr so ``serve --json`` output stays machine-readable.
"""
from __future__ import annotations

import json
import sys
from collections.abc import Iterable
from typing import Any

from inspect_http.core.exceptions import InspectHttpError


class CommandOutput:
    def __init__(self, json_mode: bool = False) -> None:
        self.json_mode = json_mode

    def emit(self, data: Any, text: str | Iterable[str]) -> None:
        """Print ``data`` as JSON, or ``text`` (a line or lines) otherwise."""
        if self.json_mode:
            print(json.dumps(data, indent=2, default=str), flush=True)
        elif isinstance(text, str):
            print(text, flush=True)
        else:
            for line in text:
                print(line)
            sys.stdout.flush()

    def fail(self, message: str, *, code: str = "error", context: dict[str, Any] | None = None) -> int:
        """Report an error on stderr and return the exit code for it."""
        if self.json_mode:
            payload = {"message": message, "code": code, "context": context or {}}
            print(json.dumps({"error": payload}, indent=2, default=str), file=sys.stderr)
        else:
            print(f"Error: {message}", file=sys.stderr)
        return 1

    def fail_with(self, exc: InspectHttpError) -> int:
        error = exc.to_json_error()
        return self.fail(error["message"], code=error["code"], context=error["context"])


__all__ = ["CommandOutput"]
