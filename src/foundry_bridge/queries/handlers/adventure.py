"""Adventure import: roll tables, scenes, and scene furniture.

Scene-bound operations build fully-defaulted embedded document data here
so the facade only ever receives host-ready payloads.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from foundry_bridge.domain.documents import FolderType
from foundry_bridge.domain.users import User
from foundry_bridge.queries.errors import QueryError
from foundry_bridge.queries.handlers.base import HandlerContext, query, resolve_folder
from foundry_bridge.queries.validation import Payload, require, require_list

logger = logging.getLogger(__name__)

DEFAULT_SCENE_SIZE = (4000, 3000)
DEFAULT_GRID_SIZE = 100

# Wall restriction constants (host schema v13): 20 = NORMAL, 0 = NONE/CLOSED/BOTH.
WALL_DEFAULTS = {"move": 20, "sight": 20, "door": 0, "ds": 0, "dir": 0}

LIGHT_DEFAULTS = {"dim": 10, "bright": 5, "color": "#ff9329", "angle": 360, "alpha": 0.5}

NOTE_ICON_SIZE = 40
NOTE_TEXT_ANCHOR_TOP = 1


async def _get_scene(ctx: HandlerContext, scene_id: str) -> dict[str, Any]:
    scene = await ctx.data_access.get_scene(scene_id)
    if not scene:
        raise QueryError(f"Scene not found: {scene_id}")
    return scene


def _ids(created: list[Mapping[str, Any]]) -> list[Any]:
    return [doc.get("id") for doc in created]


def _default(value: Any, fallback: Any) -> Any:
    return fallback if value is None else value


# ---------------------------------------------------------------------------
# Roll tables
# ---------------------------------------------------------------------------


def build_table_result(result: Payload) -> dict[str, Any]:
    data: dict[str, Any] = {
        "range": result.get("range"),
        "text": result.get("text"),
        "type": _default(result.get("type"), 0),
        "weight": _default(result.get("weight"), 1),
    }
    for key in ("documentCollection", "documentId", "img"):
        if result.get(key):
            data[key] = result[key]
    return data


@query("createRollTable", "Failed to create roll table")
async def create_roll_table(
    ctx: HandlerContext, data: Payload, _user: User | None
) -> dict[str, Any]:
    name = require(data, "name")
    formula = require(data, "formula")
    results = require_list(data, "results")

    folder_id = await resolve_folder(
        ctx,
        FolderType.ROLL_TABLE,
        folder_id=data.get("folder"),
        folder_name=data.get("folderName"),
    )

    table_data: dict[str, Any] = {
        "name": name,
        "formula": formula,
        "description": data.get("description") or "",
        "results": [build_table_result(r) for r in results],
        "replacement": data.get("replacement") is not False,
        "displayRoll": data.get("displayRoll") is not False,
    }
    if data.get("img"):
        table_data["img"] = data["img"]
    if folder_id:
        table_data["folder"] = folder_id

    table = await ctx.data_access.create_roll_table(table_data)
    if not table:
        raise QueryError("Failed to create roll table")

    return {
        "id": table["id"],
        "name": table["name"],
        "formula": table.get("formula", formula),
        "resultCount": len(table.get("results", [])),
    }


# ---------------------------------------------------------------------------
# Scenes
# ---------------------------------------------------------------------------


async def _scene_dimensions(ctx: HandlerContext, data: Payload) -> tuple[int, int]:
    width, height = data.get("width"), data.get("height")
    if width and height:
        return width, height
    try:
        natural_width, natural_height = await ctx.data_access.probe_image_size(
            data["backgroundImage"]
        )
    except Exception as exc:
        logger.warning("Could not auto-detect image dimensions, using defaults: %s", exc)
        natural_width, natural_height = DEFAULT_SCENE_SIZE
    return width or natural_width, height or natural_height


def build_scene_data(
    data: Payload, width: int, height: int, folder_id: str | None
) -> dict[str, Any]:
    scene: dict[str, Any] = {
        "name": data["name"],
        "background": {"src": data["backgroundImage"]},
        "width": width,
        "height": height,
        "padding": _default(data.get("padding"), 0.25),
        "grid": {
            "size": data.get("gridSize") or DEFAULT_GRID_SIZE,
            "type": _default(data.get("gridType"), 1),
            "distance": _default(data.get("gridDistance"), 5),
            "units": data.get("gridUnits") or "ft",
        },
        "environment": {"globalLight": {"enabled": data.get("globalLight") is not False}},
    }
    threshold = data.get("globalLightThreshold")
    if threshold is not None:
        scene["environment"]["globalLight"]["darkness"] = {"max": threshold}

    view = data.get("initialViewPosition")
    if view:
        scene["initial"] = {"x": view.get("x"), "y": view.get("y"), "scale": view.get("scale") or 1}

    if folder_id:
        scene["folder"] = folder_id
    return scene


@query("createScene", "Failed to create scene")
async def create_scene(ctx: HandlerContext, data: Payload, _user: User | None) -> dict[str, Any]:
    require(data, "name")
    require(data, "backgroundImage")

    width, height = await _scene_dimensions(ctx, data)
    folder_id = await resolve_folder(
        ctx,
        FolderType.SCENE,
        folder_id=data.get("folder"),
        folder_name=data.get("folderName"),
    )
    scene_data = build_scene_data(data, width, height, folder_id)

    scene = await ctx.data_access.create_scene(scene_data)
    if not scene:
        raise QueryError("Failed to create scene")

    try:
        await ctx.data_access.create_scene_thumbnail(scene["id"])
    except Exception as exc:
        logger.warning("Could not generate scene thumbnail: %s", exc)

    return {
        "id": scene["id"],
        "name": scene["name"],
        "width": scene.get("width", width),
        "height": scene.get("height", height),
        "gridSize": (scene.get("grid") or {}).get("size") or scene_data["grid"]["size"],
    }


# ---------------------------------------------------------------------------
# Scene furniture
# ---------------------------------------------------------------------------


def build_note(note: Payload) -> dict[str, Any]:
    data: dict[str, Any] = {
        "x": note.get("x"),
        "y": note.get("y"),
        "entryId": note.get("entryId"),
        "text": note.get("text"),
        "iconSize": note.get("iconSize") or NOTE_ICON_SIZE,
        "textAnchor": NOTE_TEXT_ANCHOR_TOP,
    }
    if note.get("pageId"):
        data["pageId"] = note["pageId"]
    if note.get("iconTint"):
        data["iconTint"] = note["iconTint"]
    return data


def build_wall(wall: Payload) -> dict[str, Any]:
    # Input keeps the pre-v13 "sense" name; the host field is "sight".
    return {
        "c": wall.get("c"),
        "move": _default(wall.get("move"), WALL_DEFAULTS["move"]),
        "sight": _default(wall.get("sense"), WALL_DEFAULTS["sight"]),
        "door": _default(wall.get("door"), WALL_DEFAULTS["door"]),
        "ds": _default(wall.get("ds"), WALL_DEFAULTS["ds"]),
        "dir": _default(wall.get("dir"), WALL_DEFAULTS["dir"]),
    }


def build_light(light: Payload) -> dict[str, Any]:
    config = light.get("config") or {}
    data: dict[str, Any] = {
        "x": light.get("x"),
        "y": light.get("y"),
        "config": {
            "dim": _default(config.get("dim"), LIGHT_DEFAULTS["dim"]),
            "bright": _default(config.get("bright"), LIGHT_DEFAULTS["bright"]),
            "color": config.get("color") or LIGHT_DEFAULTS["color"],
            "angle": _default(config.get("angle"), LIGHT_DEFAULTS["angle"]),
            "alpha": LIGHT_DEFAULTS["alpha"],
        },
    }
    animation = config.get("animation")
    if animation:
        data["config"]["animation"] = {
            "type": animation.get("type"),
            "speed": _default(animation.get("speed"), 5),
            "intensity": _default(animation.get("intensity"), 5),
        }
    return data


def build_token(token: Payload, actor: Mapping[str, Any]) -> dict[str, Any]:
    """Token data derived from the actor's prototype token."""
    proto = actor.get("prototypeToken") or {}
    data: dict[str, Any] = {
        "actorId": token.get("actorId"),
        "name": _default(token.get("name"), proto.get("name", actor.get("name"))),
        "x": token.get("x"),
        "y": token.get("y"),
        "hidden": _default(token.get("hidden"), False),
        "elevation": _default(token.get("elevation"), 0),
        "disposition": _default(token.get("disposition"), proto.get("disposition")),
        "actorLink": _default(token.get("actorLink"), False),
        "texture": {"src": (proto.get("texture") or {}).get("src")},
        "width": proto.get("width", 1),
        "height": proto.get("height", 1),
    }
    for key in ("sight", "bar1", "bar2"):
        if proto.get(key):
            data[key] = dict(proto[key])
    return data


@query("placeNotes", "Failed to place notes")
async def place_notes(ctx: HandlerContext, data: Payload, _user: User | None) -> dict[str, Any]:
    scene_id = require(data, "sceneId")
    notes = require_list(data, "notes")
    await _get_scene(ctx, scene_id)
    created = await ctx.data_access.create_embedded_documents(
        scene_id, "Note", [build_note(n) for n in notes]
    )
    return {"count": len(created), "noteIds": _ids(created)}


@query("createWalls", "Failed to create walls")
async def create_walls(ctx: HandlerContext, data: Payload, _user: User | None) -> dict[str, Any]:
    scene_id = require(data, "sceneId")
    walls = require_list(data, "walls")
    await _get_scene(ctx, scene_id)
    created = await ctx.data_access.create_embedded_documents(
        scene_id, "Wall", [build_wall(w) for w in walls]
    )
    return {"count": len(created), "wallIds": _ids(created)}


@query("createLights", "Failed to create lights")
async def create_lights(ctx: HandlerContext, data: Payload, _user: User | None) -> dict[str, Any]:
    scene_id = require(data, "sceneId")
    lights = require_list(data, "lights")
    await _get_scene(ctx, scene_id)
    created = await ctx.data_access.create_embedded_documents(
        scene_id, "AmbientLight", [build_light(light) for light in lights]
    )
    return {"count": len(created), "lightIds": _ids(created)}


@query("createTokens", "Failed to create tokens")
async def create_tokens(ctx: HandlerContext, data: Payload, _user: User | None) -> dict[str, Any]:
    scene_id = require(data, "sceneId")
    tokens = require_list(data, "tokens")
    await _get_scene(ctx, scene_id)

    token_documents = []
    for token in tokens:
        actor = await ctx.data_access.get_actor(token.get("actorId"))
        if not actor:
            raise QueryError(f"Actor not found: {token.get('actorId')}")
        token_documents.append(build_token(token, actor))

    created = await ctx.data_access.create_embedded_documents(scene_id, "Token", token_documents)
    return {"count": len(created), "tokenIds": _ids(created)}


QUERIES = (
    create_roll_table,
    create_scene,
    place_notes,
    create_walls,
    create_lights,
    create_tokens,
)
