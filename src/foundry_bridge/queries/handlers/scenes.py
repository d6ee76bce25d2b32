"""Scene and world operations."""

from __future__ import annotations

from typing import Any

from foundry_bridge.domain.users import User
from foundry_bridge.queries.handlers.base import HandlerContext, query
from foundry_bridge.queries.validation import Payload, require, require_list


@query("getActiveScene", "Failed to get active scene")
async def get_active_scene(ctx: HandlerContext, data: Payload, _user: User | None) -> Any:
    return await ctx.data_access.get_active_scene()


@query("getWorldInfo", "Failed to get world info")
async def get_world_info(ctx: HandlerContext, data: Payload, _user: User | None) -> Any:
    return await ctx.data_access.get_world_info()


@query("list-scenes", "Failed to list scenes")
async def list_scenes(ctx: HandlerContext, data: Payload, _user: User | None) -> Any:
    return await ctx.data_access.list_scenes(data)


@query("switch-scene", "Failed to switch scene")
async def switch_scene(ctx: HandlerContext, data: Payload, _user: User | None) -> Any:
    require(data, "scene_identifier")
    return await ctx.data_access.switch_scene(data)


@query("addActorsToScene", "Failed to add actors to scene")
async def add_actors_to_scene(ctx: HandlerContext, data: Payload, _user: User | None) -> Any:
    actor_ids = require_list(data, "actorIds")
    return await ctx.data_access.add_actors_to_scene(
        {
            "actorIds": actor_ids,
            "placement": data.get("placement") or "random",
            "hidden": data.get("hidden") or False,
        }
    )


@query("validateWritePermissions", "Failed to validate write permissions")
async def validate_write_permissions(
    ctx: HandlerContext, data: Payload, _user: User | None
) -> Any:
    operation = require(data, "operation")
    return await ctx.data_access.validate_write_permissions(operation)


QUERIES = (
    get_active_scene,
    get_world_info,
    list_scenes,
    switch_scene,
    add_actors_to_scene,
    validate_write_permissions,
)
