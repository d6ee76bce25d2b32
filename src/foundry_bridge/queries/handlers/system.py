"""Liveness probe: the one operation open to every caller."""

from __future__ import annotations

import time
from typing import Any

from foundry_bridge.domain.users import User
from foundry_bridge.queries.handlers.base import HandlerContext, query
from foundry_bridge.queries.validation import Payload


@query("ping", "Failed to ping", privileged=False, check_state=False)
async def ping(ctx: HandlerContext, data: Payload, user: User | None) -> dict[str, Any]:
    info = ctx.data_access.host_info()
    return {
        "status": "ok",
        "timestamp": int(time.time() * 1000),
        "module": ctx.module_id,
        "foundryVersion": info.get("version"),
        "worldId": info.get("world_id"),
        "userId": user.id if user else None,
    }


QUERIES = (ping,)
