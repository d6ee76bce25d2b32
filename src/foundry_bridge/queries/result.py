"""Response envelope: the uniform shape every dispatch returns.

INVARIANT: a response is a JSON-shaped dict with a boolean ``success``;
failures carry a short ``error`` string and nothing else that could leak
host internals (no tracebacks, no exception types).
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

ACCESS_DENIED = "Access denied"


def failure(message: str, **extra: Any) -> dict[str, Any]:
    """Build a failure envelope."""
    return {"error": message, "success": False, **extra}


def access_denied() -> dict[str, Any]:
    """The one response unprivileged callers ever see."""
    return failure(ACCESS_DENIED)


def normalize(result: Any) -> dict[str, Any]:
    """Shape a handler result into a response envelope.

    * Mappings that already carry ``success`` pass through (handlers that
      return structured failures, or explicit success payloads).
    * Other mappings get ``success: True``, replacing any non-boolean value.
    * Anything else (lists, scalars, ``None``) is placed under ``data``.

    Examples:
        >>> normalize({"id": "a"})
        {'id': 'a', 'success': True}
        >>> normalize([1, 2])
        {'success': True, 'data': [1, 2]}
    """
    if isinstance(result, Mapping):
        if isinstance(result.get("success"), bool):
            return dict(result)
        return {**result, "success": True}
    return {"success": True, "data": result}
