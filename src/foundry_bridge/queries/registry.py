"""QueryRegistry: binds the operation catalog into a host dispatch table.

The dispatch table is owned by whoever constructs the registry (the host's
query table, or a private dict). Keys are ``"<module_id>.<name>"``; only
keys under this registry's prefix are ever written or removed.
"""

from __future__ import annotations

import time
from collections.abc import MutableMapping
from typing import TYPE_CHECKING, Any

import structlog

from foundry_bridge.domain.users import User
from foundry_bridge.host.facade import DataAccess
from foundry_bridge.queries.catalog import QUERY_CATALOG
from foundry_bridge.queries.errors import HandlerNotFoundError
from foundry_bridge.queries.guard import AccessGuard
from foundry_bridge.queries.handlers.base import Handler, HandlerContext, QueryDefinition
from foundry_bridge.queries.result import access_denied, failure, normalize

if TYPE_CHECKING:
    from foundry_bridge.config.settings import BridgeSettings

log = structlog.get_logger(__name__)


class QueryRegistry:
    """Registers, unregisters, and dispatches the bridge's operations."""

    def __init__(
        self,
        ctx: HandlerContext,
        *,
        table: MutableMapping[str, Any] | None = None,
        catalog: tuple[QueryDefinition, ...] = QUERY_CATALOG,
    ) -> None:
        self._ctx = ctx
        self._table: MutableMapping[str, Any] = {} if table is None else table
        self._catalog = catalog
        self._prefix = f"{ctx.module_id}."

    @classmethod
    def from_settings(
        cls,
        settings: BridgeSettings,
        *,
        table: MutableMapping[str, Any] | None = None,
    ) -> QueryRegistry:
        """Load the configured host collaborators and build an unregistered registry."""
        from foundry_bridge.host.loader import load_facade, load_map_generator

        ctx = HandlerContext(
            data_access=load_facade(settings),
            guard=AccessGuard(minimum_role=settings.bridge.minimum_role),
            module_id=settings.bridge.module_id,
            maps=load_map_generator(settings),
            maps_config=settings.maps,
        )
        return cls(ctx, table=table)

    @property
    def data_access(self) -> DataAccess:
        return self._ctx.data_access

    @property
    def catalog(self) -> tuple[QueryDefinition, ...]:
        return self._catalog

    @property
    def table(self) -> MutableMapping[str, Any]:
        return self._table

    @property
    def prefix(self) -> str:
        return self._prefix

    def qualify(self, name: str) -> str:
        """``"ping"`` -> ``"<module_id>.ping"``; qualified names pass through."""
        return name if name.startswith(self._prefix) else f"{self._prefix}{name}"

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def register(self) -> list[str]:
        """Insert every catalog handler; re-registering overwrites in place."""
        keys: list[str] = []
        for definition in self._catalog:
            handler = definition.bind(self._ctx)
            for name in definition.names:
                key = self.qualify(name)
                self._table[key] = handler
                keys.append(key)
        log.info("registry.registered", module=self._ctx.module_id, count=len(keys))
        return keys

    def unregister(self) -> list[str]:
        """Remove every key under this registry's prefix."""
        removed = [key for key in list(self._table) if key.startswith(self._prefix)]
        for key in removed:
            del self._table[key]
        log.info("registry.unregistered", module=self._ctx.module_id, count=len(removed))
        return removed

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    def registered_methods(self) -> list[str]:
        """Bare names of the handlers currently registered."""
        return [key[len(self._prefix) :] for key in self._table if key.startswith(self._prefix)]

    def is_method_registered(self, method: str) -> bool:
        return callable(self._table.get(self.qualify(method)))

    def _lookup(self, name: object) -> Handler:
        if not isinstance(name, str):
            raise HandlerNotFoundError(str(name))
        handler = self._table.get(self.qualify(name))
        if not callable(handler):
            raise HandlerNotFoundError(name)
        return handler

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    async def dispatch(self, name: str, data: Any = None, *, user: User | None) -> dict[str, Any]:
        """Run one operation and return its response envelope.

        Exceptions raised by the handler become ``{"success": False,
        "error": <message>}``. Unknown names look exactly like a denial to
        callers who would be denied anyway.
        """
        try:
            handler = self._lookup(name)
        except HandlerNotFoundError as exc:
            if not self._ctx.guard.check(user).allowed:
                return access_denied()
            log.warning("query.not_found", method=name)
            return failure(str(exc))

        start = time.perf_counter()
        try:
            result = await handler(data, user)
        except Exception as exc:
            log.warning(
                "query.failed",
                method=name,
                error=str(exc),
                duration_ms=round((time.perf_counter() - start) * 1000, 2),
            )
            return failure(str(exc) or "Unknown error")

        response = normalize(result)
        log.debug(
            "query.complete",
            method=name,
            ok=response["success"],
            duration_ms=round((time.perf_counter() - start) * 1000, 2),
        )
        return response
