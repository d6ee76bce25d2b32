"""Exception hierarchy for the bridge.

Callers of ``QueryRegistry.dispatch`` never see these directly: the
dispatcher converts them into ``{"success": False, "error": ...}``.
"""

from __future__ import annotations


class BridgeError(Exception):
    """Base class for every error raised by foundry-bridge."""


class QueryValidationError(BridgeError, ValueError):
    """A payload is missing a required field or has the wrong shape."""


class QueryError(BridgeError):
    """A handler failed; the message carries the operation prefix."""


class HandlerNotFoundError(BridgeError, LookupError):
    """No handler is registered under the requested name."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Query handler not found: {name}")
        self.name = name


class HostStateError(BridgeError):
    """The host world is not ready to serve requests."""


class FacadeLoadError(BridgeError):
    """The configured facade factory could not be imported or called."""
