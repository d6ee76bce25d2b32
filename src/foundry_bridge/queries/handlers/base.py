"""Handler plumbing shared by every operation module.

Each operation is a coroutine ``(ctx, data, user) -> result`` wrapped by
:func:`query` into a :class:`QueryDefinition`. Binding a definition to a
:class:`HandlerContext` produces the closure the registry stores:

1. access guard (silent ``Access denied``),
2. payload coercion and host readiness check,
3. the operation itself,
4. failure mapping: re-raise with the operation prefix (``raise`` mode)
   or return a structured failure (``return`` mode).
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass, field
from typing import Any, Literal

from foundry_bridge.config.models import MapsConfig
from foundry_bridge.domain.users import User
from foundry_bridge.host.facade import DataAccess, MapGenerator
from foundry_bridge.queries.errors import QueryError
from foundry_bridge.queries.guard import AccessGuard
from foundry_bridge.queries.result import access_denied, failure
from foundry_bridge.queries.validation import Payload, ensure_mapping

logger = logging.getLogger(__name__)

ErrorMode = Literal["raise", "return"]
QueryFunc = Callable[["HandlerContext", Payload, User | None], Awaitable[Any]]
Handler = Callable[[Any, User | None], Awaitable[Any]]


@dataclass(frozen=True)
class HandlerContext:
    """Collaborators every handler closure is bound to."""

    data_access: DataAccess
    guard: AccessGuard = field(default_factory=AccessGuard)
    module_id: str = "foundry-mcp-bridge"
    maps: MapGenerator | None = None
    maps_config: MapsConfig = field(default_factory=MapsConfig)


@dataclass(frozen=True)
class QueryDefinition:
    """One named operation of the fixed catalog."""

    name: str
    func: QueryFunc
    failure: str
    aliases: tuple[str, ...] = ()
    privileged: bool = True
    check_state: bool = True
    errors: ErrorMode = "raise"

    @property
    def names(self) -> tuple[str, ...]:
        return (self.name, *self.aliases)

    def bind(self, ctx: HandlerContext) -> Handler:
        """Close over *ctx* and return the dispatch-table handler."""

        async def handler(data: Any, user: User | None) -> Any:
            if self.privileged and not ctx.guard.check(user).allowed:
                return access_denied()
            try:
                payload = ensure_mapping(data)
                if self.check_state:
                    ctx.data_access.validate_state()
                return await self.func(ctx, payload, user)
            except Exception as exc:
                if self.errors == "return":
                    logger.warning("%s: %s", self.failure, exc)
                    return failure(str(exc) or self.failure)
                raise QueryError(f"{self.failure}: {str(exc) or 'Unknown error'}") from exc

        handler.__name__ = self.func.__name__
        handler.__qualname__ = f"{self.name}.handler"
        return handler


def query(
    name: str,
    failure: str,
    *,
    aliases: tuple[str, ...] = (),
    privileged: bool = True,
    check_state: bool = True,
    errors: ErrorMode = "raise",
) -> Callable[[QueryFunc], QueryDefinition]:
    """Declare an operation.

    Usage::

        @query("listJournals", "Failed to list journals")
        async def list_journals(ctx, data, user):
            return await ctx.data_access.list_journals()
    """

    def decorator(func: QueryFunc) -> QueryDefinition:
        return QueryDefinition(
            name=name,
            func=func,
            failure=failure,
            aliases=aliases,
            privileged=privileged,
            check_state=check_state,
            errors=errors,
        )

    return decorator


async def resolve_folder(
    ctx: HandlerContext,
    folder_type: str,
    *,
    folder_id: str | None = None,
    folder_name: str | None = None,
) -> str | None:
    """Return *folder_id*, or find-or-create a folder named *folder_name*."""
    if folder_id:
        return folder_id
    if not folder_name:
        return None
    for folder in await ctx.data_access.list_folders():
        if folder.get("type") == folder_type and folder.get("name") == folder_name:
            return folder["id"]
    created = await ctx.data_access.create_folder({"name": folder_name, "type": folder_type})
    return created["id"]


def folder_descriptor(folder: Mapping[str, Any]) -> dict[str, Any]:
    """The public ``{id, name, type, parent}`` view of a folder."""
    return {
        "id": folder.get("id"),
        "name": folder.get("name"),
        "type": folder.get("type"),
        "parent": folder.get("parent") or None,
    }
