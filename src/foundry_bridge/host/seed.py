"""Demo content for the in-memory world.

A handful of actors, items, a scene, and two compendium packs: enough for
every operation in the catalog to return something meaningful out of the
box.
"""

from __future__ import annotations

from typing import Any

from foundry_bridge.domain.users import User, UserRole

PLAYERS = (
    User(id="pLayerAlice00001", name="Alice", role=UserRole.PLAYER),
    User(id="pLayerBob0000002", name="Bob", role=UserRole.TRUSTED),
    User(id="pLayerCarol00003", name="Carol", role=UserRole.PLAYER, active=False),
)

CONDITIONS = (
    "blinded",
    "charmed",
    "deafened",
    "frightened",
    "grappled",
    "incapacitated",
    "invisible",
    "paralyzed",
    "petrified",
    "poisoned",
    "prone",
    "restrained",
    "stunned",
    "unconscious",
    "dead",
)


def _token(name: str, disposition: int, size: int = 1) -> dict[str, Any]:
    return {
        "name": name,
        "disposition": disposition,
        "texture": {"src": f"tokens/{name.lower().replace(' ', '-')}.webp"},
        "width": size,
        "height": size,
        "sight": {"enabled": disposition == 1, "range": 60},
        "bar1": {"attribute": "attributes.hp"},
        "bar2": {"attribute": None},
    }


def _creature(
    doc_id: str,
    name: str,
    cr: float,
    creature_type: str,
    size: str,
    hp: int,
    ac: int,
) -> dict[str, Any]:
    token_size = {"tiny": 1, "sm": 1, "med": 1, "lg": 2, "huge": 3, "grg": 4}[size]
    return {
        "_id": doc_id,
        "name": name,
        "type": "npc",
        "img": f"icons/creatures/{name.lower().replace(' ', '-')}.webp",
        "system": {
            "details": {"cr": cr, "type": {"value": creature_type}},
            "traits": {"size": size},
            "attributes": {"hp": {"value": hp, "max": hp}, "ac": {"value": ac}},
        },
        "items": [],
        "prototypeToken": _token(name, -1, token_size),
    }


def characters() -> list[dict[str, Any]]:
    return [
        {
            "_id": "aCtorLyra0000001",
            "name": "Lyra Dawnwhisper",
            "type": "character",
            "img": "icons/characters/lyra.webp",
            "folder": None,
            "system": {
                "details": {"level": 5, "race": "Elf", "class": "Wizard"},
                "attributes": {"hp": {"value": 27, "max": 27}, "ac": {"value": 13}},
            },
            "items": [
                {"_id": "iTemFireBolt0001", "name": "Fire Bolt", "type": "spell",
                 "system": {"level": 0}},
                {"_id": "iTemFireball0002", "name": "Fireball", "type": "spell",
                 "system": {"level": 3}},
                {"_id": "iTemQuartStaff03", "name": "Quarterstaff", "type": "weapon",
                 "system": {"type": {"value": "simpleM"}}},
                {"_id": "iTemHealPotion04", "name": "Potion of Healing", "type": "consumable",
                 "system": {"type": {"value": "potion"}, "quantity": 2}},
            ],
            "ownership": {"default": 0, "pLayerAlice00001": 3},
            "prototypeToken": _token("Lyra Dawnwhisper", 1),
        },
        {
            "_id": "aCtorBrom0000002",
            "name": "Brom Ironfist",
            "type": "character",
            "img": "icons/characters/brom.webp",
            "folder": None,
            "system": {
                "details": {"level": 5, "race": "Dwarf", "class": "Fighter"},
                "attributes": {"hp": {"value": 49, "max": 49}, "ac": {"value": 18}},
            },
            "items": [
                {"_id": "iTemWarhammer005", "name": "Warhammer", "type": "weapon",
                 "system": {"type": {"value": "martialM"}}},
                {"_id": "iTemShield000006", "name": "Shield", "type": "equipment",
                 "system": {"type": {"value": "shield"}}},
            ],
            "ownership": {"default": 0, "pLayerBob0000002": 3},
            "prototypeToken": _token("Brom Ironfist", 1),
        },
        {
            "_id": "aCtorInnkeeper03",
            "name": "Marta the Innkeeper",
            "type": "npc",
            "img": "icons/npcs/marta.webp",
            "folder": None,
            "system": {
                "details": {"cr": 0, "type": {"value": "humanoid"}},
                "attributes": {"hp": {"value": 4, "max": 4}, "ac": {"value": 10}},
            },
            "items": [],
            "ownership": {"default": 0},
            "prototypeToken": _token("Marta the Innkeeper", 1),
        },
    ]


def world_items() -> list[dict[str, Any]]:
    return [
        {
            "_id": "wItemRopeHemp001",
            "name": "Hempen Rope (50 ft)",
            "type": "loot",
            "img": "icons/items/rope.webp",
            "folder": None,
            "system": {"weight": 10, "price": {"value": 1, "denomination": "gp"}},
        },
    ]


def scenes() -> list[dict[str, Any]]:
    return [
        {
            "_id": "sCeneTavern00001",
            "name": "The Prancing Pony",
            "active": True,
            "width": 3000,
            "height": 2000,
            "padding": 0.25,
            "background": {"src": "maps/tavern.webp"},
            "grid": {"size": 100, "type": 1, "distance": 5, "units": "ft"},
            "folder": None,
        },
        {
            "_id": "sCeneRoad0000002",
            "name": "Forest Road",
            "active": False,
            "width": 4000,
            "height": 3000,
            "padding": 0.25,
            "background": {"src": "maps/forest-road.webp"},
            "grid": {"size": 100, "type": 1, "distance": 5, "units": "ft"},
            "folder": None,
        },
    ]


def packs() -> list[dict[str, Any]]:
    return [
        {
            "id": "dnd5e.monsters",
            "label": "Monsters (SRD)",
            "type": "Actor",
            "system": "dnd5e",
            "locked": True,
            "documents": [
                _creature("mOnsterGoblin001", "Goblin", 0.25, "humanoid", "sm", 7, 15),
                _creature("mOnsterWolf00002", "Wolf", 0.25, "beast", "med", 11, 13),
                _creature("mOnsterOgre00003", "Ogre", 2, "giant", "lg", 59, 11),
                _creature("mOnsterOwlbear04", "Owlbear", 3, "monstrosity", "lg", 59, 13),
                _creature("mOnsterYDragon05", "Young Red Dragon", 10, "dragon", "lg", 178, 18),
            ],
        },
        {
            "id": "world.adventure-items",
            "label": "Adventure Items",
            "type": "Item",
            "system": "dnd5e",
            "locked": False,
            "documents": [
                {
                    "_id": "pItemAmulet00001",
                    "name": "Amulet of the Drowned",
                    "type": "equipment",
                    "img": "icons/items/amulet.webp",
                    "system": {"rarity": "rare"},
                },
            ],
        },
    ]
