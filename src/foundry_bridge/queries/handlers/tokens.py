"""Token manipulation operations.

Every operation here is registered under both its camelCase name and a
kebab-case alias; tool front ends in the wild use either spelling.
"""

from __future__ import annotations

from typing import Any

from foundry_bridge.domain.users import User
from foundry_bridge.queries.handlers.base import HandlerContext, query
from foundry_bridge.queries.validation import (
    Payload,
    require,
    require_bool,
    require_list,
    require_mapping,
    require_numbers,
)


@query("moveToken", "Failed to move token", aliases=("move-token",))
async def move_token(ctx: HandlerContext, data: Payload, _user: User | None) -> Any:
    require(data, "tokenId")
    require_numbers(
        data, "x", "y", message="x and y coordinates are required and must be numbers"
    )
    return await ctx.data_access.move_token(data)


@query("updateToken", "Failed to update token", aliases=("update-token",))
async def update_token(ctx: HandlerContext, data: Payload, _user: User | None) -> Any:
    require(data, "tokenId")
    require_mapping(data, "updates")
    return await ctx.data_access.update_token(data)


@query("deleteTokens", "Failed to delete tokens", aliases=("delete-tokens",))
async def delete_tokens(ctx: HandlerContext, data: Payload, _user: User | None) -> Any:
    require_list(data, "tokenIds")
    return await ctx.data_access.delete_tokens(data)


@query("getTokenDetails", "Failed to get token details", aliases=("get-token-details",))
async def get_token_details(ctx: HandlerContext, data: Payload, _user: User | None) -> Any:
    require(data, "tokenId")
    return await ctx.data_access.get_token_details(data)


@query(
    "toggleTokenCondition",
    "Failed to toggle token condition",
    aliases=("toggle-token-condition",),
)
async def toggle_token_condition(ctx: HandlerContext, data: Payload, _user: User | None) -> Any:
    require(data, "tokenId")
    require(data, "conditionId")
    require_bool(data, "active")
    return await ctx.data_access.toggle_token_condition(data)


@query(
    "getAvailableConditions",
    "Failed to get available conditions",
    aliases=("get-available-conditions",),
)
async def get_available_conditions(ctx: HandlerContext, data: Payload, _user: User | None) -> Any:
    return await ctx.data_access.get_available_conditions()


QUERIES = (
    move_token,
    update_token,
    delete_tokens,
    get_token_details,
    toggle_token_condition,
    get_available_conditions,
)
