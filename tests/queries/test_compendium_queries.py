"""Compendium search, import, and entry editing."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from foundry_bridge.domain.users import User
from foundry_bridge.host.memory import InMemoryWorld
from foundry_bridge.queries.registry import QueryRegistry
from tests.conftest import call_err, call_ok

pytestmark = pytest.mark.anyio


class TestSearch:
    async def test_partial_name_match(self, registry: QueryRegistry, gm: User) -> None:
        response = await call_ok(registry, "searchCompendium", gm, query="owl")
        assert [r["name"] for r in response["data"]] == ["Owlbear"]
        assert response["data"][0]["pack"] == "dnd5e.monsters"

    async def test_challenge_rating_range(self, registry: QueryRegistry, gm: User) -> None:
        response = await call_ok(
            registry,
            "searchCompendium",
            gm,
            query="o",
            packType="Actor",
            filters={"challengeRating": {"min": 2, "max": 3}},
        )
        assert {r["name"] for r in response["data"]} == {"Ogre", "Owlbear"}

    async def test_empty_query_rejected(self, registry: QueryRegistry, gm: User) -> None:
        error = await call_err(registry, "searchCompendium", gm, query="")
        assert "query parameter is required" in error

    async def test_search_passes_filters(
        self, fake_registry: QueryRegistry, facade: MagicMock, gm: User
    ) -> None:
        facade.search_compendium.return_value = []
        await call_ok(
            fake_registry, "searchCompendium", gm, query="wolf", packType="Actor", filters={"x": 1}
        )
        facade.search_compendium.assert_awaited_once_with("wolf", "Actor", {"x": 1})

    async def test_criteria_result_nested_under_response(
        self, registry: QueryRegistry, gm: User
    ) -> None:
        response = await call_ok(
            registry, "listCreaturesByCriteria", gm, creatureType="beast"
        )
        assert response["response"]["totalFound"] == 1
        assert response["response"]["creatures"][0]["name"] == "Wolf"


class TestBrowse:
    async def test_available_packs(self, registry: QueryRegistry, gm: User) -> None:
        response = await call_ok(registry, "getAvailablePacks", gm)
        sizes = {p["id"]: p["size"] for p in response["data"]}
        assert sizes == {"dnd5e.monsters": 5, "world.adventure-items": 1}

    async def test_list_entries(self, registry: QueryRegistry, gm: User) -> None:
        response = await call_ok(registry, "listCompendiumEntries", gm, packId="dnd5e.monsters")
        assert len(response["data"]) == 5

    async def test_full_document(self, registry: QueryRegistry, gm: User) -> None:
        response = await call_ok(
            registry,
            "getCompendiumDocumentFull",
            gm,
            packId="dnd5e.monsters",
            documentId="mOnsterGoblin001",
        )
        assert response["name"] == "Goblin"
        assert response["system"]["attributes"]["hp"]["max"] == 7

    async def test_unknown_pack(self, registry: QueryRegistry, gm: User) -> None:
        error = await call_err(registry, "listCompendiumEntries", gm, packId="nope")
        assert error == "Failed to list compendium entries: Compendium pack not found: nope"

    async def test_enhanced_index(self, registry: QueryRegistry, gm: User) -> None:
        response = await call_ok(registry, "getEnhancedCreatureIndex", gm)
        dragon = next(c for c in response["data"] if c["name"] == "Young Red Dragon")
        assert dragon["challengeRating"] == 10
        assert dragon["creatureType"] == "dragon"


class TestImport:
    async def test_create_with_custom_names(
        self, registry: QueryRegistry, world: InMemoryWorld, gm: User
    ) -> None:
        response = await call_ok(
            registry,
            "createActorFromCompendium",
            gm,
            packId="dnd5e.monsters",
            itemId="mOnsterGoblin001",
            customNames=["Snik"],
            quantity=3,
        )
        assert [a["name"] for a in response["actors"]] == ["Snik", "Goblin 2", "Goblin 3"]
        assert response["tokensPlaced"] == 0
        assert len(world.documents["Actor"]) == 6

    async def test_create_and_place(self, registry: QueryRegistry, world: InMemoryWorld, gm: User) -> None:
        response = await call_ok(
            registry,
            "createActorFromCompendium",
            gm,
            packId="dnd5e.monsters",
            itemId="mOnsterWolf00002",
            addToScene=True,
        )
        assert response["tokensPlaced"] == 1
        assert len(world.embedded["sCeneTavern00001"]["Token"]) == 1

    async def test_defaults_sent_to_host(
        self, fake_registry: QueryRegistry, facade: MagicMock, gm: User
    ) -> None:
        facade.create_actor_from_compendium_entry.return_value = {"success": True}
        await call_ok(fake_registry, "createActorFromCompendium", gm, packId="p", itemId="i")
        facade.create_actor_from_compendium_entry.assert_awaited_once_with(
            {"packId": "p", "itemId": "i", "customNames": [], "quantity": 1, "addToScene": False}
        )


class TestUpdateEntry:
    async def test_update_unlocked_pack(self, registry: QueryRegistry, world: InMemoryWorld, gm: User) -> None:
        response = await call_ok(
            registry,
            "updateCompendiumEntry",
            gm,
            packId="world.adventure-items",
            itemId="pItemAmulet00001",
            updates={"name": "Amulet of the Deep", "system.rarity": "veryRare"},
        )
        assert response == {"success": True, "id": "pItemAmulet00001", "name": "Amulet of the Deep"}
        stored = world.packs["world.adventure-items"]["documents"]["pItemAmulet00001"]
        assert stored["system"]["rarity"] == "veryRare"

    async def test_locked_pack(self, registry: QueryRegistry, gm: User) -> None:
        error = await call_err(
            registry,
            "updateCompendiumEntry",
            gm,
            packId="dnd5e.monsters",
            itemId="mOnsterGoblin001",
            updates={"name": "Hobgoblin"},
        )
        assert "Compendium pack is locked: dnd5e.monsters" in error

    async def test_missing_pack(self, registry: QueryRegistry, gm: User) -> None:
        error = await call_err(
            registry, "updateCompendiumEntry", gm, packId="nope", itemId="x", updates={"a": 1}
        )
        assert error == "Failed to update compendium entry: Compendium pack not found: nope"

    async def test_missing_document(self, registry: QueryRegistry, gm: User) -> None:
        error = await call_err(
            registry,
            "updateCompendiumEntry",
            gm,
            packId="world.adventure-items",
            itemId="missing",
            updates={"a": 1},
        )
        assert error.endswith("Document not found: missing in world.adventure-items")
