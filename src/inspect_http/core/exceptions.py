from __future__ import annotations

from typing import Any, Dict, Mapping


class InspectHttpError(Exception):
    """Base exception for inspect-http."""

    context: Dict[str, Any]

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        super().__init__(message)
        if context is not None:
            # Store a shallow copy to avoid accidental mutation.
            self.context = dict(context)
        else:
            self.context = {}

    def to_json_error(self) -> Dict[str, Any]:
        """Return a JSON-serializable error payload."""
        return {
            "message": str(self),
            "code": self.__class__.__name__,
            "context": self.context,
        }


class ServerStartError(InspectHttpError, RuntimeError):
    """Raised when a static server for a root cannot be brought up."""

    def __init__(
        self,
        message: str = "",
        *,
        root_path: str | None = None,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        ctx = dict(context or {})
        if root_path is not None:
            ctx["root_path"] = root_path
        InspectHttpError.__init__(self, message, context=ctx)
        RuntimeError.__init__(self, message)


class NoAddressError(ServerStartError):
    """Raised when no external (non-loopback, non-link-local) IPv4 address exists."""


class WarmupFailedError(ServerStartError):
    """Raised when the readiness GET against a freshly bound server fails."""


class ServerStateError(InspectHttpError, RuntimeError):
    """Raised for an illegal server lifecycle transition."""

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        InspectHttpError.__init__(self, message, context=context)
        RuntimeError.__init__(self, message)


class UnknownCommandError(InspectHttpError, LookupError):
    """Raised when dispatching a domain/command pair that was never registered."""

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        InspectHttpError.__init__(self, message, context=context)
        LookupError.__init__(self, message)


class ConfigValidationError(InspectHttpError, ValueError):
    """Raised when merged configuration does not satisfy the bundled schema."""

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        InspectHttpError.__init__(self, message, context=context)
        ValueError.__init__(self, message)


__all__ = [
    "InspectHttpError",
    "ServerStartError",
    "NoAddressError",
    "WarmupFailedError",
    "ServerStateError",
    "UnknownCommandError",
    "ConfigValidationError",
]
