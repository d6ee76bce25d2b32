"""Character, actor, ownership, and player operations."""

from __future__ import annotations

from typing import Any

from foundry_bridge.domain.users import User
from foundry_bridge.queries.errors import QueryValidationError
from foundry_bridge.queries.handlers.base import HandlerContext, query
from foundry_bridge.queries.validation import Payload, require, require_all


@query("getCharacterInfo", "Failed to get character info")
async def get_character_info(ctx: HandlerContext, data: Payload, _user: User | None) -> Any:
    identifier = data.get("characterName") or data.get("characterId")
    if not identifier:
        raise QueryValidationError("characterName or characterId is required")
    return await ctx.data_access.get_character_info(identifier)


@query("listActors", "Failed to list actors")
async def list_actors(ctx: HandlerContext, data: Payload, _user: User | None) -> Any:
    actors = await ctx.data_access.list_actors()
    actor_type = data.get("type")
    if actor_type:
        return [actor for actor in actors if actor.get("type") == actor_type]
    return actors


@query("setActorOwnership", "Failed to set actor ownership")
async def set_actor_ownership(ctx: HandlerContext, data: Payload, _user: User | None) -> Any:
    require_all(
        data,
        "actorId",
        "userId",
        "permission",
        message="actorId, userId, and permission are required",
    )
    return await ctx.data_access.set_actor_ownership(data)


@query("getActorOwnership", "Failed to get actor ownership")
async def get_actor_ownership(ctx: HandlerContext, data: Payload, _user: User | None) -> Any:
    return await ctx.data_access.get_actor_ownership(data)


@query("getFriendlyNPCs", "Failed to get friendly NPCs")
async def get_friendly_npcs(ctx: HandlerContext, data: Payload, _user: User | None) -> Any:
    return await ctx.data_access.get_friendly_npcs()


@query("getPartyCharacters", "Failed to get party characters")
async def get_party_characters(ctx: HandlerContext, data: Payload, _user: User | None) -> Any:
    return await ctx.data_access.get_party_characters()


@query("getConnectedPlayers", "Failed to get connected players")
async def get_connected_players(ctx: HandlerContext, data: Payload, _user: User | None) -> Any:
    return await ctx.data_access.get_connected_players()


@query("findPlayers", "Failed to find players")
async def find_players(ctx: HandlerContext, data: Payload, _user: User | None) -> Any:
    require(data, "identifier")
    return await ctx.data_access.find_players(data)


@query("findActor", "Failed to find actor")
async def find_actor(ctx: HandlerContext, data: Payload, _user: User | None) -> Any:
    require(data, "identifier")
    return await ctx.data_access.find_actor(data)


@query("useItem", "Failed to use item")
async def use_item(ctx: HandlerContext, data: Payload, _user: User | None) -> Any:
    actor = require(data, "actorIdentifier")
    item = require(data, "itemIdentifier")
    return await ctx.data_access.use_item(
        {
            "actorIdentifier": actor,
            "itemIdentifier": item,
            "targets": data.get("targets"),
            "options": data.get("options"),
        }
    )


@query("searchCharacterItems", "Failed to search character items")
async def search_character_items(ctx: HandlerContext, data: Payload, _user: User | None) -> Any:
    character = require(data, "characterIdentifier")
    return await ctx.data_access.search_character_items(
        {
            "characterIdentifier": character,
            "query": data.get("query"),
            "type": data.get("type"),
            "category": data.get("category"),
            "limit": data.get("limit"),
        }
    )


@query("request-player-rolls", "Failed to request player rolls")
async def request_player_rolls(ctx: HandlerContext, data: Payload, _user: User | None) -> Any:
    require_all(
        data,
        "rollType",
        "rollTarget",
        "targetPlayer",
        message="rollType, rollTarget, and targetPlayer are required",
    )
    return await ctx.data_access.request_player_rolls(data)


@query("updateCampaignProgress", "Failed to update campaign progress")
async def update_campaign_progress(
    ctx: HandlerContext, data: Payload, _user: User | None
) -> dict[str, Any]:
    # Campaign state lives with the tool front end; the world only acknowledges.
    return {
        "success": True,
        "message": f"Campaign progress updated: {data.get('partId')} is now {data.get('newStatus')}",
        "campaignId": data.get("campaignId"),
        "partId": data.get("partId"),
        "newStatus": data.get("newStatus"),
    }


QUERIES = (
    get_character_info,
    list_actors,
    set_actor_ownership,
    get_actor_ownership,
    get_friendly_npcs,
    get_party_characters,
    get_connected_players,
    find_players,
    find_actor,
    use_item,
    search_character_items,
    request_player_rolls,
    update_campaign_progress,
)
