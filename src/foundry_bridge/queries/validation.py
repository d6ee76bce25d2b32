"""Ad hoc payload checks used by handlers before delegating to the host.

There is no schema engine at this layer: each handler names the fields it
needs and these helpers raise :class:`QueryValidationError` with a message
that names the offending field.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from foundry_bridge.queries.errors import QueryValidationError

Payload = Mapping[str, Any]


def _missing(value: Any) -> bool:
    return value is None or value == ""


def ensure_mapping(data: Any) -> Payload:
    """Return *data* as a mapping; ``None`` becomes an empty payload."""
    if data is None:
        return {}
    if not isinstance(data, Mapping):
        raise QueryValidationError("Invalid data parameter structure")
    return data


def require(data: Payload, field: str, message: str | None = None) -> Any:
    """Return ``data[field]`` or fail when it is absent or empty."""
    value = data.get(field)
    if _missing(value):
        raise QueryValidationError(message or f"{field} is required")
    return value


def require_all(data: Payload, *fields: str, message: str | None = None) -> None:
    """Fail unless every one of *fields* is present."""
    missing = [f for f in fields if _missing(data.get(f))]
    if missing:
        raise QueryValidationError(message or f"{', '.join(missing)} is required")


def require_str(data: Payload, field: str, message: str | None = None) -> str:
    """Return a non-empty string field."""
    value = data.get(field)
    if not isinstance(value, str) or not value:
        raise QueryValidationError(message or f"{field} is required and must be a string")
    return value


def is_number(value: Any) -> bool:
    """Numbers exclude booleans, which Python treats as ints."""
    return isinstance(value, int | float) and not isinstance(value, bool)


def require_numbers(data: Payload, *fields: str, message: str) -> tuple[Any, ...]:
    """Return the numeric values of *fields* or fail with *message*."""
    values = tuple(data.get(f) for f in fields)
    if not all(is_number(v) for v in values):
        raise QueryValidationError(message)
    return values


def require_bool(data: Payload, field: str) -> bool:
    value = data.get(field)
    if not isinstance(value, bool):
        raise QueryValidationError(f"{field} must be a boolean")
    return value


def require_mapping(data: Payload, field: str, message: str | None = None) -> Mapping[str, Any]:
    value = data.get(field)
    if not isinstance(value, Mapping):
        raise QueryValidationError(message or f"{field} object is required")
    return value


def require_list(data: Payload, field: str, message: str | None = None) -> list[Any]:
    """Return a non-empty list field."""
    value = data.get(field)
    if not isinstance(value, list | tuple) or not value:
        raise QueryValidationError(
            message or f"{field} array is required and must not be empty"
        )
    return list(value)


def require_choice(
    data: Payload, field: str, choices: Iterable[str], message: str | None = None
) -> str:
    """Return *field* when it is one of *choices*."""
    allowed = list(choices)
    value = data.get(field)
    if value not in allowed:
        quoted = " or ".join(f'"{c}"' for c in allowed)
        raise QueryValidationError(message or f"{field} must be {quoted}")
    return value
