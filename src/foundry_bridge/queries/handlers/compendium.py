"""Compendium search, browsing, and actor import operations."""

from __future__ import annotations

from typing import Any

from foundry_bridge.domain.users import User
from foundry_bridge.queries.errors import QueryError
from foundry_bridge.queries.handlers.base import HandlerContext, query
from foundry_bridge.queries.validation import (
    Payload,
    require,
    require_mapping,
    require_str,
)


@query("searchCompendium", "Failed to search compendium")
async def search_compendium(ctx: HandlerContext, data: Payload, _user: User | None) -> Any:
    search = require_str(data, "query", "query parameter is required and must be a string")
    return await ctx.data_access.search_compendium(
        search, data.get("packType"), data.get("filters")
    )


@query("listCreaturesByCriteria", "Failed to list creatures by criteria")
async def list_creatures_by_criteria(
    ctx: HandlerContext, data: Payload, _user: User | None
) -> dict[str, Any]:
    result = await ctx.data_access.list_creatures_by_criteria(data)
    return {"response": result}


@query("getAvailablePacks", "Failed to get available packs")
async def get_available_packs(ctx: HandlerContext, data: Payload, _user: User | None) -> Any:
    return await ctx.data_access.get_available_packs()


@query("listCompendiumEntries", "Failed to list compendium entries")
async def list_compendium_entries(ctx: HandlerContext, data: Payload, _user: User | None) -> Any:
    pack_id = require(data, "packId")
    return await ctx.data_access.list_compendium_entries(pack_id, data.get("type"))


@query("getCompendiumDocumentFull", "Failed to get compendium document")
async def get_compendium_document_full(
    ctx: HandlerContext, data: Payload, _user: User | None
) -> Any:
    pack_id = require(data, "packId")
    document_id = require(data, "documentId")
    return await ctx.data_access.get_compendium_document_full(pack_id, document_id)


@query("createActorFromCompendium", "Failed to create actor from compendium")
async def create_actor_from_compendium(
    ctx: HandlerContext, data: Payload, _user: User | None
) -> Any:
    request: dict[str, Any] = {
        "packId": require(data, "packId"),
        "itemId": require(data, "itemId"),
        "customNames": data.get("customNames") or [],
        "quantity": data.get("quantity") or 1,
        "addToScene": data.get("addToScene") or False,
    }
    if data.get("placement"):
        request["placement"] = data["placement"]
    return await ctx.data_access.create_actor_from_compendium_entry(request)


@query("getEnhancedCreatureIndex", "Failed to get enhanced creature index")
async def get_enhanced_creature_index(
    ctx: HandlerContext, data: Payload, _user: User | None
) -> Any:
    return await ctx.data_access.get_enhanced_creature_index()


@query("updateCompendiumEntry", "Failed to update compendium entry", check_state=False)
async def update_compendium_entry(
    ctx: HandlerContext, data: Payload, _user: User | None
) -> dict[str, Any]:
    pack_id = require(data, "packId")
    item_id = require(data, "itemId")
    updates = require_mapping(data, "updates")

    pack = await ctx.data_access.get_pack(pack_id)
    if not pack:
        raise QueryError(f"Compendium pack not found: {pack_id}")
    if pack.get("locked"):
        raise QueryError(
            f"Compendium pack is locked: {pack_id}. Unlock it in Foundry first."
        )

    document = await ctx.data_access.get_pack_document(pack_id, item_id)
    if not document:
        raise QueryError(f"Document not found: {item_id} in {pack_id}")

    updated = await ctx.data_access.update_pack_document(pack_id, item_id, updates)
    return {"success": True, "id": item_id, "name": updated.get("name", document.get("name"))}


QUERIES = (
    search_compendium,
    list_creatures_by_criteria,
    get_available_packs,
    list_compendium_entries,
    get_compendium_document_full,
    create_actor_from_compendium,
    get_enhanced_creature_index,
    update_compendium_entry,
)
