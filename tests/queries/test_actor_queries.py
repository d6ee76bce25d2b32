"""Character, actor, and player operations against the in-memory world."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from foundry_bridge.domain.users import User
from foundry_bridge.host import seed
from foundry_bridge.host.memory import InMemoryWorld
from foundry_bridge.queries.handlers.base import HandlerContext
from foundry_bridge.queries.registry import QueryRegistry
from tests.conftest import call_err, call_ok

pytestmark = pytest.mark.anyio


@pytest.fixture
def table_registry(gm: User) -> QueryRegistry:
    """A registry over a world that also knows the demo players."""
    world = InMemoryWorld(world_id="test-world", user=gm, players=seed.PLAYERS)
    world.seed_demo_content()
    registry = QueryRegistry(HandlerContext(data_access=world))
    registry.register()
    return registry


class TestCharacters:
    async def test_get_character_by_name(self, registry: QueryRegistry, gm: User) -> None:
        response = await call_ok(registry, "getCharacterInfo", gm, characterName="Lyra Dawnwhisper")
        assert response["id"] == "aCtorLyra0000001"
        assert "Fireball" in [i["name"] for i in response["items"]]

    async def test_get_character_by_id(self, registry: QueryRegistry, gm: User) -> None:
        response = await call_ok(registry, "getCharacterInfo", gm, characterId="aCtorBrom0000002")
        assert response["name"] == "Brom Ironfist"

    async def test_unknown_character(self, registry: QueryRegistry, gm: User) -> None:
        error = await call_err(registry, "getCharacterInfo", gm, characterName="Nobody")
        assert error == "Failed to get character info: Character not found: Nobody"

    async def test_list_actors_filters_by_type(self, registry: QueryRegistry, gm: User) -> None:
        response = await call_ok(registry, "listActors", gm, type="npc")
        assert [a["name"] for a in response["data"]] == ["Marta the Innkeeper"]

    async def test_list_actors_unfiltered(self, registry: QueryRegistry, gm: User) -> None:
        response = await call_ok(registry, "listActors", gm)
        assert len(response["data"]) == 3

    async def test_friendly_npcs(self, registry: QueryRegistry, gm: User) -> None:
        response = await call_ok(registry, "getFriendlyNPCs", gm)
        assert response["data"] == [{"id": "aCtorInnkeeper03", "name": "Marta the Innkeeper"}]

    async def test_find_actor_miss_is_none(self, registry: QueryRegistry, gm: User) -> None:
        response = await call_ok(registry, "findActor", gm, identifier="Nobody")
        assert response == {"success": True, "data": None}


class TestItems:
    async def test_use_item(self, registry: QueryRegistry, gm: User) -> None:
        response = await call_ok(
            registry, "useItem", gm, actorIdentifier="Lyra Dawnwhisper", itemIdentifier="Fireball"
        )
        assert response["message"] == "Lyra Dawnwhisper used Fireball"
        assert response["itemType"] == "spell"

    async def test_use_missing_item(self, registry: QueryRegistry, gm: User) -> None:
        error = await call_err(
            registry, "useItem", gm, actorIdentifier="Brom Ironfist", itemIdentifier="Fireball"
        )
        assert "Item not found on Brom Ironfist" in error

    async def test_search_character_items(self, registry: QueryRegistry, gm: User) -> None:
        response = await call_ok(
            registry, "searchCharacterItems", gm, characterIdentifier="aCtorLyra0000001", query="fire"
        )
        assert [i["name"] for i in response["items"]] == ["Fire Bolt", "Fireball"]
        assert response["totalMatches"] == 2

    async def test_search_by_category(self, registry: QueryRegistry, gm: User) -> None:
        response = await call_ok(
            registry,
            "searchCharacterItems",
            gm,
            characterIdentifier="Lyra Dawnwhisper",
            category="potion",
        )
        assert [i["name"] for i in response["items"]] == ["Potion of Healing"]


class TestPlayers:
    async def test_connected_players_skip_inactive(
        self, table_registry: QueryRegistry, gm: User
    ) -> None:
        response = await call_ok(table_registry, "getConnectedPlayers", gm)
        assert {p["name"] for p in response["data"]} == {"Alice", "Bob"}

    async def test_party_characters(self, table_registry: QueryRegistry, gm: User) -> None:
        response = await call_ok(table_registry, "getPartyCharacters", gm)
        owners = {p["name"]: p["owner"] for p in response["data"]}
        assert owners == {"Lyra Dawnwhisper": "Alice", "Brom Ironfist": "Bob"}

    async def test_find_players_through_character(
        self, table_registry: QueryRegistry, gm: User
    ) -> None:
        response = await call_ok(table_registry, "findPlayers", gm, identifier="lyra")
        assert response["data"] == [{"id": "pLayerAlice00001", "name": "Alice"}]

    async def test_set_and_get_ownership(self, table_registry: QueryRegistry, gm: User) -> None:
        await call_ok(
            table_registry,
            "setActorOwnership",
            gm,
            actorId="aCtorInnkeeper03",
            userId="Bob",
            permission="OBSERVER",
        )
        response = await call_ok(
            table_registry,
            "getActorOwnership",
            gm,
            actorIdentifier="Marta the Innkeeper",
            playerIdentifier="Bob",
        )
        assert response["data"][0]["ownership"] == {"Bob": "OBSERVER"}

    async def test_unknown_permission_level(
        self, table_registry: QueryRegistry, gm: User
    ) -> None:
        error = await call_err(
            table_registry,
            "setActorOwnership",
            gm,
            actorId="aCtorInnkeeper03",
            userId="Bob",
            permission="ADMIN",
        )
        assert error.endswith("Unknown permission level: ADMIN")

    async def test_request_player_rolls(self, table_registry: QueryRegistry, gm: User) -> None:
        response = await call_ok(
            table_registry,
            "request-player-rolls",
            gm,
            rollType="skill",
            rollTarget="perception",
            targetPlayer="Alice",
        )
        assert response["message"] == "Roll request sent to Alice: skill (perception)"


class TestCampaignProgress:
    async def test_acknowledged_without_host_call(
        self, fake_registry: QueryRegistry, facade: MagicMock, gm: User
    ) -> None:
        response = await call_ok(
            fake_registry,
            "updateCampaignProgress",
            gm,
            campaignId="c1",
            partId="p2",
            newStatus="completed",
        )
        assert response["message"] == "Campaign progress updated: p2 is now completed"
        assert response["campaignId"] == "c1"
        assert [c[0] for c in facade.mock_calls] == ["validate_state"]
