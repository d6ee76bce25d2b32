"""Adventure import: roll tables, scenes, and scene furniture."""

from __future__ import annotations

import base64
from unittest.mock import MagicMock

import pytest

from foundry_bridge.domain.users import User
from foundry_bridge.host.memory import InMemoryWorld
from foundry_bridge.queries.handlers.adventure import (
    build_light,
    build_note,
    build_table_result,
    build_token,
    build_wall,
)
from foundry_bridge.queries.registry import QueryRegistry
from tests.conftest import call_err, call_ok, png_bytes

pytestmark = pytest.mark.anyio

TAVERN = "sCeneTavern00001"


class TestBuilders:
    def test_table_result_defaults(self) -> None:
        assert build_table_result({"range": [1, 2], "text": "Rats"}) == {
            "range": [1, 2],
            "text": "Rats",
            "type": 0,
            "weight": 1,
        }

    def test_wall_reads_sense_as_sight(self) -> None:
        wall = build_wall({"c": [0, 0, 100, 0], "sense": 0, "door": 1})
        assert wall == {"c": [0, 0, 100, 0], "move": 20, "sight": 0, "door": 1, "ds": 0, "dir": 0}

    def test_light_defaults_and_animation(self) -> None:
        light = build_light({"x": 5, "y": 6, "config": {"animation": {"type": "torch"}}})
        assert light["config"] == {
            "dim": 10,
            "bright": 5,
            "color": "#ff9329",
            "angle": 360,
            "alpha": 0.5,
            "animation": {"type": "torch", "speed": 5, "intensity": 5},
        }

    def test_note_anchor_and_icon(self) -> None:
        note = build_note({"x": 1, "y": 2, "entryId": "j", "text": "Bar", "pageId": "p"})
        assert note["textAnchor"] == 1
        assert note["iconSize"] == 40
        assert note["pageId"] == "p"
        assert "iconTint" not in note

    def test_token_from_prototype(self) -> None:
        actor = {
            "name": "Ogre",
            "prototypeToken": {
                "name": "Big Ogre",
                "disposition": -1,
                "width": 2,
                "height": 2,
                "texture": {"src": "ogre.webp"},
                "sight": {"enabled": False},
            },
        }
        token = build_token({"actorId": "a", "x": 1, "y": 2, "disposition": 0}, actor)
        assert token["name"] == "Big Ogre"
        assert token["disposition"] == 0
        assert (token["width"], token["height"]) == (2, 2)
        assert token["texture"] == {"src": "ogre.webp"}
        assert token["sight"] == {"enabled": False}
        assert "bar1" not in token


class TestRollTables:
    async def test_create(self, registry: QueryRegistry, world: InMemoryWorld, gm: User) -> None:
        response = await call_ok(
            registry,
            "createRollTable",
            gm,
            name="Tavern Rumours",
            formula="1d4",
            results=[
                {"range": [1, 2], "text": "Dragon sighted"},
                {"range": [3, 4], "text": "Free ale", "weight": 2},
            ],
            folderName="Rumours",
        )
        assert response["resultCount"] == 2
        assert response["formula"] == "1d4"
        stored = world.documents["RollTable"][response["id"]]
        assert stored["replacement"] is True
        assert world.folders[stored["folder"]]["type"] == "RollTable"

    async def test_host_returns_nothing(
        self, fake_registry: QueryRegistry, facade: MagicMock, gm: User
    ) -> None:
        facade.create_roll_table.return_value = None
        error = await call_err(
            fake_registry, "createRollTable", gm, name="t", formula="1d6", results=[{}]
        )
        assert error == "Failed to create roll table: Failed to create roll table"


class TestCreateScene:
    async def test_reads_uploaded_background_size(
        self, registry: QueryRegistry, world: InMemoryWorld, gm: User
    ) -> None:
        await call_ok(
            registry,
            "uploadFile",
            gm,
            filename="cave.png",
            base64data=base64.b64encode(png_bytes(2800, 1400)).decode(),
            targetPath="worlds/test-world/maps",
        )
        response = await call_ok(
            registry,
            "createScene",
            gm,
            name="Cave",
            backgroundImage="worlds/test-world/maps/cave.png",
            gridSize=140,
        )
        assert (response["width"], response["height"], response["gridSize"]) == (2800, 1400, 140)
        assert world.documents["Scene"][response["id"]]["thumb"].endswith("-thumb.webp")

    async def test_unreadable_image_uses_defaults(
        self, registry: QueryRegistry, gm: User
    ) -> None:
        response = await call_ok(
            registry, "createScene", gm, name="Void", backgroundImage="missing.webp"
        )
        assert (response["width"], response["height"], response["gridSize"]) == (4000, 3000, 100)

    async def test_explicit_size_skips_lookup(
        self, fake_registry: QueryRegistry, facade: MagicMock, gm: User
    ) -> None:
        facade.create_scene.return_value = {"id": "s1", "name": "Hall"}
        await call_ok(
            fake_registry,
            "createScene",
            gm,
            name="Hall",
            backgroundImage="hall.webp",
            width=1000,
            height=800,
            globalLight=False,
            globalLightThreshold=0.4,
            initialViewPosition={"x": 10, "y": 20},
        )
        facade.probe_image_size.assert_not_awaited()
        sent = facade.create_scene.await_args.args[0]
        assert sent["environment"] == {
            "globalLight": {"enabled": False, "darkness": {"max": 0.4}}
        }
        assert sent["initial"] == {"x": 10, "y": 20, "scale": 1}
        assert sent["grid"] == {"size": 100, "type": 1, "distance": 5, "units": "ft"}

    async def test_thumbnail_failure_is_not_fatal(
        self, fake_registry: QueryRegistry, facade: MagicMock, gm: User
    ) -> None:
        facade.create_scene.return_value = {"id": "s1", "name": "Hall"}
        facade.create_scene_thumbnail.side_effect = RuntimeError("no canvas")
        response = await call_ok(
            fake_registry, "createScene", gm, name="Hall", backgroundImage="h.webp", width=1, height=1
        )
        assert response["id"] == "s1"


class TestSceneFurniture:
    async def test_place_notes(self, registry: QueryRegistry, world: InMemoryWorld, gm: User) -> None:
        response = await call_ok(
            registry,
            "placeNotes",
            gm,
            sceneId=TAVERN,
            notes=[{"x": 10, "y": 10, "entryId": "j1", "text": "Bar"}],
        )
        assert response["count"] == 1
        assert list(world.embedded[TAVERN]["Note"]) == response["noteIds"]

    async def test_create_walls(self, registry: QueryRegistry, world: InMemoryWorld, gm: User) -> None:
        response = await call_ok(
            registry,
            "createWalls",
            gm,
            sceneId=TAVERN,
            walls=[{"c": [0, 0, 100, 0]}, {"c": [100, 0, 100, 100], "door": 1}],
        )
        assert response["count"] == 2
        doors = [w["door"] for w in world.embedded[TAVERN]["Wall"].values()]
        assert doors == [0, 1]

    async def test_create_lights(self, registry: QueryRegistry, gm: User) -> None:
        response = await call_ok(
            registry, "createLights", gm, sceneId=TAVERN, lights=[{"x": 1, "y": 1}]
        )
        assert len(response["lightIds"]) == 1

    async def test_create_tokens(self, registry: QueryRegistry, world: InMemoryWorld, gm: User) -> None:
        response = await call_ok(
            registry,
            "createTokens",
            gm,
            sceneId=TAVERN,
            tokens=[{"actorId": "aCtorInnkeeper03", "x": 200, "y": 300}],
        )
        (token,) = world.embedded[TAVERN]["Token"].values()
        assert token["id"] == response["tokenIds"][0]
        assert token["name"] == "Marta the Innkeeper"
        assert token["disposition"] == 1

    async def test_unknown_actor(self, registry: QueryRegistry, gm: User) -> None:
        error = await call_err(
            registry, "createTokens", gm, sceneId=TAVERN, tokens=[{"actorId": "ghost"}]
        )
        assert error == "Failed to create tokens: Actor not found: ghost"

    @pytest.mark.parametrize(
        ("method", "field"),
        [("placeNotes", "notes"), ("createWalls", "walls"), ("createLights", "lights")],
    )
    async def test_unknown_scene(
        self, registry: QueryRegistry, gm: User, method: str, field: str
    ) -> None:
        error = await call_err(registry, method, gm, sceneId="nowhere", **{field: [{"x": 1}]})
        assert error.endswith("Scene not found: nowhere")
