"""Tests for MCP tool implementations (no mcp package required)."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import pytest

from foundry_bridge.host.memory import InMemoryWorld
from foundry_bridge.mcp.tools import (
    batch_create_documents_impl,
    call_bridge_method_impl,
    create_document_impl,
    create_folder_impl,
    create_journal_entry_impl,
    create_roll_table_impl,
    create_scene_impl,
    delete_document_impl,
    export_folder_to_compendium_impl,
    generate_map_impl,
    get_character_impl,
    get_compendium_entry_full_impl,
    get_current_scene_impl,
    get_world_info_impl,
    list_actors_impl,
    list_folders_impl,
    list_scenes_impl,
    move_token_impl,
    place_scene_documents_impl,
    register_tools,
    search_compendium_impl,
    switch_scene_impl,
    toggle_token_condition_impl,
    update_document_impl,
    update_folder_impl,
)
from foundry_bridge.queries.registry import QueryRegistry

pytestmark = pytest.mark.anyio


class RecordingServer:
    """Stands in for FastMCP: records tools by name."""

    def __init__(self) -> None:
        self.tools: dict[str, Callable[..., Any]] = {}

    def tool(self, *, name: str) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
        def decorator(fn: Callable[..., Any]) -> Callable[..., Any]:
            self.tools[name] = fn
            return fn

        return decorator


class TestCoreTools:
    async def test_call_bridge_method(self, registry: QueryRegistry, world: InMemoryWorld) -> None:
        result = await call_bridge_method_impl(registry, world, "ping")
        assert result["status"] == "ok"
        assert result["userId"] == world.current_user().id

    async def test_call_unknown_method(self, registry: QueryRegistry, world: InMemoryWorld) -> None:
        result = await call_bridge_method_impl(registry, world, "nope", {})
        assert result == {"error": "Query handler not found: nope", "success": False}

    async def test_world_info(self, registry: QueryRegistry, world: InMemoryWorld) -> None:
        result = await get_world_info_impl(registry, world)
        assert result["title"] == "Demo World"

    async def test_get_character(self, registry: QueryRegistry, world: InMemoryWorld) -> None:
        result = await get_character_impl(registry, world, "Brom Ironfist")
        assert result["id"] == "aCtorBrom0000002"

    async def test_list_actors_by_type(self, registry: QueryRegistry, world: InMemoryWorld) -> None:
        result = await list_actors_impl(registry, world, actor_type="character")
        assert len(result["data"]) == 2

    async def test_search_and_fetch_compendium(
        self, registry: QueryRegistry, world: InMemoryWorld
    ) -> None:
        found = await search_compendium_impl(registry, world, "goblin", pack_type="Actor")
        entry = found["data"][0]
        full = await get_compendium_entry_full_impl(registry, world, entry["pack"], entry["id"])
        assert full["name"] == "Goblin"

    async def test_scenes(self, registry: QueryRegistry, world: InMemoryWorld) -> None:
        listed = await list_scenes_impl(registry, world)
        assert listed["total"] == 2
        await switch_scene_impl(registry, world, "Forest Road")
        current = await get_current_scene_impl(registry, world)
        assert current["name"] == "Forest Road"

    async def test_tokens(self, registry: QueryRegistry, world: InMemoryWorld) -> None:
        placed = await call_bridge_method_impl(
            registry, world, "addActorsToScene", {"actorIds": ["aCtorLyra0000001"]}
        )
        token_id = placed["tokenIds"][0]
        moved = await move_token_impl(registry, world, token_id, 10, 20, animate=True)
        assert moved["animated"] is True
        toggled = await toggle_token_condition_impl(registry, world, token_id, "stunned", True)
        assert toggled["active"] is True


class TestDocumentTools:
    async def test_create_document_message(
        self, registry: QueryRegistry, world: InMemoryWorld
    ) -> None:
        result = await create_document_impl(
            registry, world, "Item", {"name": "Torch", "type": "loot"}
        )
        assert result["message"] == f'Created Item "Torch" (ID: {result["id"]})'

    async def test_create_document_failure_has_no_message(
        self, registry: QueryRegistry, world: InMemoryWorld
    ) -> None:
        result = await create_document_impl(registry, world, "Scene", {"name": "x", "type": "y"})
        assert result["success"] is False
        assert "message" not in result

    async def test_batch_update_delete(self, registry: QueryRegistry, world: InMemoryWorld) -> None:
        created = await batch_create_documents_impl(
            registry, world, "Item", [{"name": "Torch", "type": "loot"}]
        )
        doc_id = created["created"][0]["id"]
        updated = await update_document_impl(
            registry, world, "Item", doc_id, updates={"name": "Lit Torch"}
        )
        assert updated["name"] == "Lit Torch"
        deleted = await delete_document_impl(registry, world, "Item", doc_id)
        assert deleted["deleted"] is True

    async def test_folders(self, registry: QueryRegistry, world: InMemoryWorld) -> None:
        folder = await create_folder_impl(registry, world, "Loot", "Item")
        renamed = await update_folder_impl(registry, world, folder["id"], name="Treasure")
        assert renamed["name"] == "Treasure"
        listed = await list_folders_impl(registry, world, folder_type="Item")
        assert [f["name"] for f in listed["folders"]] == ["Treasure"]

    async def test_export_empty_folder(self, registry: QueryRegistry, world: InMemoryWorld) -> None:
        folder = await create_folder_impl(registry, world, "Loot", "Item")
        result = await export_folder_to_compendium_impl(
            registry, world, folder["id"], "world.adventure-items"
        )
        assert result["exported"] == 0


class TestAdventureTools:
    async def test_journal_and_table(self, registry: QueryRegistry, world: InMemoryWorld) -> None:
        journal = await create_journal_entry_impl(
            registry, world, "Chapter 1", [{"name": "Intro", "type": "text", "content": "x"}]
        )
        assert journal["pageCount"] == 1
        table = await create_roll_table_impl(
            registry,
            world,
            "Loot",
            "1d2",
            [{"range": [1, 1], "text": "Gold"}, {"range": [2, 2], "text": "Gems"}],
            description="Random loot",
        )
        assert table["resultCount"] == 2

    async def test_scene_and_furniture(self, registry: QueryRegistry, world: InMemoryWorld) -> None:
        scene = await create_scene_impl(
            registry, world, "Crypt", "maps/crypt.webp", width=2000, height=2000
        )
        result = await place_scene_documents_impl(
            registry, world, "walls", scene["id"], [{"c": [0, 0, 100, 0]}]
        )
        assert result["count"] == 1

    async def test_unknown_scene_document_kind(
        self, registry: QueryRegistry, world: InMemoryWorld
    ) -> None:
        result = await place_scene_documents_impl(registry, world, "drawings", "s", [{}])
        assert result == {"success": False, "error": "Unknown scene document kind: drawings"}

    async def test_generate_map_without_backend(
        self, registry: QueryRegistry, world: InMemoryWorld
    ) -> None:
        result = await generate_map_impl(registry, world, "a cave", "Cave")
        assert result["error"] == "Map generation backend not configured"


class TestRegistration:
    def test_registers_kebab_case_tools(self, registry: QueryRegistry, world: InMemoryWorld) -> None:
        server = RecordingServer()
        register_tools(server, registry, world)
        assert {
            "call-bridge-method",
            "get-world-info",
            "get-character",
            "list-characters",
            "search-compendium",
            "move-token",
            "create-document",
            "export-folder-to-compendium",
            "create-journal-entry",
            "create-scene",
            "place-scene-documents",
            "generate-map",
        } <= set(server.tools)

    async def test_registered_tool_dispatches(
        self, registry: QueryRegistry, world: InMemoryWorld
    ) -> None:
        server = RecordingServer()
        register_tools(server, registry, world)
        result = await server.tools["get-current-scene"]()
        assert result["id"] == "sCeneTavern00001"
