"""In-memory world: a self-contained ``DataAccess`` implementation.

Backs the CLI's demo mode and the test suite. Documents are stored as the
raw dicts the host would hold (``_id``, ``folder``, ``system`` ...); every
method returns deep copies so callers can never mutate world state by
accident.
"""

from __future__ import annotations

import copy
import logging
import struct
from collections.abc import Iterable, Mapping, Sequence
from typing import TYPE_CHECKING, Any

from foundry_bridge.domain.documents import DocumentType, FolderType, is_foundry_id, random_id
from foundry_bridge.domain.users import User, UserRole
from foundry_bridge.host import seed
from foundry_bridge.queries.errors import HostStateError

if TYPE_CHECKING:
    from foundry_bridge.config.settings import BridgeSettings

logger = logging.getLogger(__name__)

Record = dict[str, Any]

EMBEDDED_DOCUMENT_TYPES = ("Token", "Note", "Wall", "AmbientLight")

OWNERSHIP_LEVELS = {"NONE": 0, "LIMITED": 1, "OBSERVER": 2, "OWNER": 3}

_PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"


class WorldError(LookupError):
    """A host-side lookup or write failed."""


# ── helpers ──────────────────────────────────────────────────────────


def apply_updates(target: Record, updates: Mapping[str, Any]) -> None:
    """Merge *updates* into *target*; dotted keys address nested fields.

    Examples:
        >>> doc = {"system": {"hp": 1}}
        >>> apply_updates(doc, {"system.hp": 5, "name": "Orc"})
        >>> doc
        {'system': {'hp': 5}, 'name': 'Orc'}
    """
    for key, value in updates.items():
        node = target
        *parents, leaf = key.split(".")
        for part in parents:
            node = node.setdefault(part, {})
        if isinstance(value, Mapping) and isinstance(node.get(leaf), dict):
            apply_updates(node[leaf], value)
        else:
            node[leaf] = copy.deepcopy(value)


def png_size(content: bytes) -> tuple[int, int]:
    """``(width, height)`` from a PNG IHDR chunk."""
    if len(content) < 24 or not content.startswith(_PNG_SIGNATURE):
        raise ValueError("not a PNG image")
    width, height = struct.unpack(">II", content[16:24])
    return width, height


def _matches(name: str, identifier: str, *, partial: bool = False) -> bool:
    name, identifier = name.lower(), identifier.lower()
    return identifier in name if partial else name == identifier


def _summary(doc: Mapping[str, Any]) -> Record:
    return {"id": doc["_id"], "name": doc.get("name"), "type": doc.get("type"), "img": doc.get("img")}


def _ownership_level(value: Any) -> int:
    if isinstance(value, str):
        try:
            return OWNERSHIP_LEVELS[value.upper()]
        except KeyError:
            raise WorldError(f"Unknown permission level: {value}") from None
    return int(value)


def _in_range(value: float | None, criterion: Any) -> bool:
    if criterion is None:
        return True
    if value is None:
        return False
    if isinstance(criterion, Mapping):
        low = criterion.get("min", float("-inf"))
        high = criterion.get("max", float("inf"))
        return low <= value <= high
    return value == criterion


class InMemoryWorld:
    """A single host world held entirely in dicts."""

    def __init__(
        self,
        *,
        world_id: str = "demo-world",
        title: str = "Demo World",
        system: str = "dnd5e",
        foundry_version: str = "13.345",
        user: User | None = None,
        players: Iterable[User] = (),
        ready: bool = True,
    ) -> None:
        self.world_id = world_id
        self.title = title
        self.system = system
        self.foundry_version = foundry_version
        self.ready = ready
        self.user = user or User(id=random_id(), name="Gamemaster", role=UserRole.GAMEMASTER)
        self.users: dict[str, User] = {self.user.id: self.user}
        self.users.update({p.id: p for p in players})

        self.documents: dict[str, dict[str, Record]] = {t.value: {} for t in FolderType}
        self.folders: dict[str, Record] = {}
        self.packs: dict[str, Record] = {}
        self.embedded: dict[str, dict[str, dict[str, Record]]] = {}
        self.files: dict[str, dict[str, bytes]] = {}
        self.directories: dict[str, set[str]] = {"data": {"worlds", f"worlds/{world_id}"}}
        self.conditions = list(seed.CONDITIONS)

    @classmethod
    def from_settings(cls, settings: BridgeSettings) -> InMemoryWorld:
        """Facade factory used by the default ``[host] facade`` setting."""
        world = settings.world
        instance = cls(
            world_id=world.world_id,
            title=world.title,
            system=world.system,
            foundry_version=world.foundry_version,
            user=User(id=random_id(), name=world.user_name, role=world.user_role),
            players=seed.PLAYERS if world.seed_demo_content else (),
        )
        if world.seed_demo_content:
            instance.seed_demo_content()
        return instance

    def seed_demo_content(self) -> None:
        for actor in seed.characters():
            self._store(DocumentType.ACTOR, actor)
        for item in seed.world_items():
            self._store(DocumentType.ITEM, item)
        for scene in seed.scenes():
            self._store(FolderType.SCENE, scene)
        for pack in seed.packs():
            documents = pack.pop("documents")
            self.packs[pack["id"]] = {**pack, "documents": {d["_id"]: d for d in documents}}

    # ------------------------------------------------------------------
    # Storage primitives
    # ------------------------------------------------------------------

    def _store(self, document_type: str, data: Mapping[str, Any]) -> Record:
        doc = copy.deepcopy(dict(data))
        if not is_foundry_id(doc.get("_id")):
            doc["_id"] = random_id()
        doc.setdefault("folder", None)
        self.documents[document_type][doc["_id"]] = doc
        if document_type == FolderType.SCENE:
            self.embedded.setdefault(doc["_id"], {name: {} for name in EMBEDDED_DOCUMENT_TYPES})
        return doc

    def _collection(self, document_type: str) -> dict[str, Record]:
        try:
            return self.documents[document_type]
        except KeyError:
            raise WorldError(f"Unsupported document type: {document_type}") from None

    def _find(self, document_type: str, identifier: str) -> Record | None:
        collection = self._collection(document_type)
        if identifier in collection:
            return collection[identifier]
        for doc in collection.values():
            if _matches(doc.get("name", ""), identifier):
                return doc
        return None

    def _get(self, document_type: str, identifier: str, label: str) -> Record:
        doc = self._find(document_type, identifier)
        if doc is None:
            raise WorldError(f"{label} not found: {identifier}")
        return doc

    def _pack(self, pack_id: str) -> Record:
        pack = self.packs.get(pack_id)
        if pack is None:
            raise WorldError(f"Compendium pack not found: {pack_id}")
        return pack

    def _active_scene(self) -> Record:
        for scene in self.documents[FolderType.SCENE].values():
            if scene.get("active"):
                return scene
        raise WorldError("No active scene")

    def _find_token(self, token_id: str) -> tuple[str, Record]:
        for scene_id, embedded in self.embedded.items():
            if token_id in embedded["Token"]:
                return scene_id, embedded["Token"][token_id]
        raise WorldError(f"Token not found: {token_id}")

    def _user(self, identifier: str) -> User | None:
        for user in self.users.values():
            if user.id == identifier or _matches(user.name, identifier):
                return user
        return None

    def _owners(self, actor: Mapping[str, Any]) -> list[User]:
        ownership = actor.get("ownership") or {}
        return [
            self.users[uid]
            for uid, level in ownership.items()
            if uid in self.users and level >= OWNERSHIP_LEVELS["OWNER"]
        ]

    # ------------------------------------------------------------------
    # Session
    # ------------------------------------------------------------------

    def current_user(self) -> User | None:
        return self.user

    def host_info(self) -> Record:
        return {"version": self.foundry_version, "world_id": self.world_id}

    def validate_state(self) -> None:
        if not self.ready:
            raise HostStateError("Foundry world is not ready")

    # ------------------------------------------------------------------
    # Characters and actors
    # ------------------------------------------------------------------

    async def get_character_info(self, identifier: str) -> Record:
        actor = self._get(DocumentType.ACTOR, identifier, "Character")
        return {
            **_summary(actor),
            "system": copy.deepcopy(actor.get("system", {})),
            "items": [
                {"id": i["_id"], "name": i["name"], "type": i.get("type")}
                for i in actor.get("items", [])
            ],
            "effects": copy.deepcopy(actor.get("effects", [])),
        }

    async def list_actors(self) -> list[Record]:
        return [_summary(a) for a in self.documents[DocumentType.ACTOR].values()]

    async def set_actor_ownership(self, request: Mapping[str, Any]) -> Record:
        actor = self._get(DocumentType.ACTOR, request["actorId"], "Actor")
        user = self._user(request["userId"])
        if user is None:
            raise WorldError(f"User not found: {request['userId']}")
        level = _ownership_level(request["permission"])
        actor.setdefault("ownership", {"default": 0})[user.id] = level
        return {
            "success": True,
            "message": f"Set {user.name} ownership of {actor['name']} to level {level}",
        }

    async def get_actor_ownership(self, request: Mapping[str, Any]) -> list[Record]:
        actors = list(self.documents[DocumentType.ACTOR].values())
        if request.get("actorIdentifier"):
            actors = [self._get(DocumentType.ACTOR, request["actorIdentifier"], "Actor")]
        users = list(self.users.values())
        if request.get("playerIdentifier"):
            user = self._user(request["playerIdentifier"])
            users = [user] if user else []
        names = {v: k for k, v in OWNERSHIP_LEVELS.items()}
        return [
            {
                "id": actor["_id"],
                "name": actor["name"],
                "ownership": {
                    u.name: names.get((actor.get("ownership") or {}).get(u.id, 0), "NONE")
                    for u in users
                },
            }
            for actor in actors
        ]

    async def get_friendly_npcs(self) -> list[Record]:
        return [
            {"id": a["_id"], "name": a["name"]}
            for a in self.documents[DocumentType.ACTOR].values()
            if a.get("type") == "npc" and (a.get("prototypeToken") or {}).get("disposition") == 1
        ]

    async def get_party_characters(self) -> list[Record]:
        party = []
        for actor in self.documents[DocumentType.ACTOR].values():
            owners = [u for u in self._owners(actor) if not u.is_gm]
            if actor.get("type") == "character" and owners:
                party.append({"id": actor["_id"], "name": actor["name"], "owner": owners[0].name})
        return party

    async def get_connected_players(self) -> list[Record]:
        return [
            {"id": u.id, "name": u.name}
            for u in self.users.values()
            if u.active and not u.is_gm
        ]

    async def find_players(self, request: Mapping[str, Any]) -> list[Record]:
        identifier = request["identifier"]
        partial = request.get("allowPartialMatch", True)
        found: dict[str, Record] = {}
        for user in self.users.values():
            if not user.is_gm and _matches(user.name, identifier, partial=partial):
                found[user.id] = {"id": user.id, "name": user.name}
        if request.get("includeCharacterOwners", True):
            for actor in self.documents[DocumentType.ACTOR].values():
                if _matches(actor["name"], identifier, partial=partial):
                    for owner in self._owners(actor):
                        if not owner.is_gm:
                            found[owner.id] = {"id": owner.id, "name": owner.name}
        return list(found.values())

    async def find_actor(self, request: Mapping[str, Any]) -> Record | None:
        actor = self._find(DocumentType.ACTOR, request["identifier"])
        return _summary(actor) if actor else None

    async def use_item(self, request: Mapping[str, Any]) -> Record:
        actor = self._get(DocumentType.ACTOR, request["actorIdentifier"], "Actor")
        identifier = request["itemIdentifier"]
        for item in actor.get("items", []):
            if item["_id"] == identifier or _matches(item["name"], identifier):
                return {
                    "success": True,
                    "message": f"{actor['name']} used {item['name']}",
                    "itemType": item.get("type"),
                    "targets": request.get("targets") or [],
                }
        raise WorldError(f"Item not found on {actor['name']}: {identifier}")

    async def search_character_items(self, request: Mapping[str, Any]) -> Record:
        actor = self._get(DocumentType.ACTOR, request["characterIdentifier"], "Character")
        items = actor.get("items", [])
        if request.get("query"):
            items = [i for i in items if _matches(i["name"], request["query"], partial=True)]
        if request.get("type"):
            items = [i for i in items if i.get("type") == request["type"]]
        if request.get("category"):
            category = request["category"]
            items = [
                i for i in items
                if ((i.get("system") or {}).get("type") or {}).get("value") == category
            ]
        limit = request.get("limit") or 20
        return {
            "characterId": actor["_id"],
            "characterName": actor["name"],
            "items": [{"id": i["_id"], "name": i["name"], "type": i.get("type")} for i in items[:limit]],
            "totalMatches": len(items),
        }

    async def request_player_rolls(self, request: Mapping[str, Any]) -> Record:
        players = await self.find_players({"identifier": request["targetPlayer"]})
        if not players:
            raise WorldError(f"Player not found: {request['targetPlayer']}")
        return {
            "success": True,
            "message": (
                f"Roll request sent to {players[0]['name']}: "
                f"{request['rollType']} ({request['rollTarget']})"
            ),
        }

    # ------------------------------------------------------------------
    # Compendium
    # ------------------------------------------------------------------

    def _pack_entries(self, pack_type: str | None = None) -> Iterable[tuple[Record, Record]]:
        for pack in self.packs.values():
            if pack_type and pack["type"] != pack_type:
                continue
            for doc in pack["documents"].values():
                yield pack, doc

    @staticmethod
    def _creature_stats(doc: Mapping[str, Any]) -> Record:
        system = doc.get("system") or {}
        details = system.get("details") or {}
        attributes = system.get("attributes") or {}
        return {
            "challengeRating": details.get("cr"),
            "creatureType": (details.get("type") or {}).get("value"),
            "size": (system.get("traits") or {}).get("size"),
            "hitPoints": (attributes.get("hp") or {}).get("max"),
            "armorClass": (attributes.get("ac") or {}).get("value"),
        }

    async def search_compendium(
        self,
        query: str,
        pack_type: str | None = None,
        filters: Mapping[str, Any] | None = None,
    ) -> list[Record]:
        filters = filters or {}
        results = []
        for pack, doc in self._pack_entries(pack_type):
            if not _matches(doc["name"], query, partial=True):
                continue
            stats = self._creature_stats(doc)
            if not _in_range(stats["challengeRating"], filters.get("challengeRating")):
                continue
            if filters.get("creatureType") and stats["creatureType"] != filters["creatureType"]:
                continue
            results.append({**_summary(doc), "pack": pack["id"], "packLabel": pack["label"]})
        return results[:50]

    async def list_creatures_by_criteria(self, criteria: Mapping[str, Any]) -> Record:
        creatures = []
        for pack, doc in self._pack_entries("Actor"):
            stats = self._creature_stats(doc)
            if not _in_range(stats["challengeRating"], criteria.get("challengeRating")):
                continue
            if criteria.get("creatureType") and stats["creatureType"] != criteria["creatureType"]:
                continue
            if criteria.get("size") and stats["size"] != criteria["size"]:
                continue
            creatures.append({"id": doc["_id"], "name": doc["name"], "pack": pack["id"], **stats})
        limit = criteria.get("limit") or 100
        return {
            "creatures": creatures[:limit],
            "totalFound": len(creatures),
            "criteria": dict(criteria),
        }

    async def get_available_packs(self) -> list[Record]:
        return [
            {k: pack[k] for k in ("id", "label", "type", "system", "locked")}
            | {"size": len(pack["documents"])}
            for pack in self.packs.values()
        ]

    async def list_compendium_entries(
        self, pack_id: str, entry_type: str | None = None
    ) -> list[Record]:
        entries = [_summary(d) for d in self._pack(pack_id)["documents"].values()]
        if entry_type:
            entries = [e for e in entries if e["type"] == entry_type]
        return entries

    async def get_compendium_document_full(self, pack_id: str, document_id: str) -> Record:
        doc = self._pack(pack_id)["documents"].get(document_id)
        if doc is None:
            raise WorldError(f"Document not found: {document_id} in {pack_id}")
        return {**copy.deepcopy(doc), "id": doc["_id"], "pack": pack_id}

    async def create_actor_from_compendium_entry(self, request: Mapping[str, Any]) -> Record:
        source = await self.get_compendium_document_full(request["packId"], request["itemId"])
        quantity = request.get("quantity") or 1
        names = list(request.get("customNames") or [])
        created = []
        for index in range(quantity):
            if index < len(names):
                name = names[index]
            elif quantity > 1:
                name = f"{source['name']} {index + 1}"
            else:
                name = source["name"]
            data = {k: v for k, v in source.items() if k not in ("_id", "id", "pack")}
            actor = self._store(DocumentType.ACTOR, {**data, "name": name})
            created.append({"id": actor["_id"], "name": name})

        tokens_placed = 0
        if request.get("addToScene"):
            placed = await self.add_actors_to_scene(
                {"actorIds": [c["id"] for c in created], "placement": request.get("placement")}
            )
            tokens_placed = placed["tokensCreated"]
        return {
            "success": True,
            "actors": created,
            "totalCreated": len(created),
            "tokensPlaced": tokens_placed,
        }

    async def get_enhanced_creature_index(self) -> list[Record]:
        return [
            {"id": doc["_id"], "name": doc["name"], "pack": pack["id"], **self._creature_stats(doc)}
            for pack, doc in self._pack_entries("Actor")
        ]

    async def get_pack(self, pack_id: str) -> Record | None:
        pack = self.packs.get(pack_id)
        if pack is None:
            return None
        return {k: pack[k] for k in ("id", "label", "type", "locked")}

    async def get_pack_index_ids(self, pack_id: str) -> list[str]:
        return list(self._pack(pack_id)["documents"])

    async def get_pack_document(self, pack_id: str, document_id: str) -> Record | None:
        doc = self._pack(pack_id)["documents"].get(document_id)
        return copy.deepcopy(doc) if doc else None

    def _writable_pack(self, pack_id: str) -> Record:
        pack = self._pack(pack_id)
        if pack["locked"]:
            raise WorldError(f"Compendium pack is locked: {pack_id}")
        return pack

    async def update_pack_document(
        self, pack_id: str, document_id: str, updates: Mapping[str, Any]
    ) -> Record:
        doc = self._writable_pack(pack_id)["documents"].get(document_id)
        if doc is None:
            raise WorldError(f"Document not found: {document_id} in {pack_id}")
        apply_updates(doc, updates)
        return copy.deepcopy(doc)

    async def create_pack_documents(
        self, pack_id: str, documents: Sequence[Mapping[str, Any]]
    ) -> list[Record]:
        pack = self._writable_pack(pack_id)
        created = []
        for data in documents:
            doc = copy.deepcopy(dict(data))
            if not is_foundry_id(doc.get("_id")) or doc["_id"] in pack["documents"]:
                doc["_id"] = random_id()
            pack["documents"][doc["_id"]] = doc
            created.append({"id": doc["_id"], "name": doc.get("name")})
        return created

    async def delete_pack_documents(self, pack_id: str, document_ids: Sequence[str]) -> None:
        pack = self._writable_pack(pack_id)
        for document_id in document_ids:
            pack["documents"].pop(document_id, None)

    # ------------------------------------------------------------------
    # Scenes and world
    # ------------------------------------------------------------------

    def _scene_summary(self, scene: Mapping[str, Any]) -> Record:
        embedded = self.embedded.get(scene["_id"], {})
        return {
            "id": scene["_id"],
            "name": scene["name"],
            "active": bool(scene.get("active")),
            "width": scene.get("width"),
            "height": scene.get("height"),
            "gridSize": (scene.get("grid") or {}).get("size"),
            "background": (scene.get("background") or {}).get("src"),
            "tokenCount": len(embedded.get("Token", {})),
            "noteCount": len(embedded.get("Note", {})),
            "wallCount": len(embedded.get("Wall", {})),
            "lightCount": len(embedded.get("AmbientLight", {})),
        }

    async def get_active_scene(self) -> Record:
        scene = self._active_scene()
        tokens = self.embedded[scene["_id"]]["Token"].values()
        return {
            **self._scene_summary(scene),
            "tokens": [
                {k: t.get(k) for k in ("id", "name", "x", "y", "actorId", "hidden")}
                for t in tokens
            ],
        }

    async def get_world_info(self) -> Record:
        return {
            "id": self.world_id,
            "title": self.title,
            "system": self.system,
            "foundryVersion": self.foundry_version,
            "users": [
                {"id": u.id, "name": u.name, "active": u.active, "isGM": u.is_gm}
                for u in self.users.values()
            ],
        }

    async def list_scenes(self, request: Mapping[str, Any]) -> Record:
        scenes = [self._scene_summary(s) for s in self.documents[FolderType.SCENE].values()]
        if request.get("filter"):
            scenes = [s for s in scenes if _matches(s["name"], request["filter"], partial=True)]
        if request.get("include_active_only"):
            scenes = [s for s in scenes if s["active"]]
        return {"scenes": scenes, "total": len(scenes)}

    async def switch_scene(self, request: Mapping[str, Any]) -> Record:
        target = self._get(FolderType.SCENE, request["scene_identifier"], "Scene")
        for scene in self.documents[FolderType.SCENE].values():
            scene["active"] = scene is target
        return {"success": True, "sceneId": target["_id"], "sceneName": target["name"]}

    async def add_actors_to_scene(self, request: Mapping[str, Any]) -> Record:
        scene = self._active_scene()
        grid = (scene.get("grid") or {}).get("size") or 100
        tokens = []
        for index, actor_id in enumerate(request["actorIds"]):
            actor = self._get(DocumentType.ACTOR, actor_id, "Actor")
            placement = request.get("placement") or "random"
            if placement == "center":
                x, y = scene["width"] // 2, scene["height"] // 2
            else:
                # Grid and random placement both lay tokens out left to right.
                x, y = grid * (index + 1), grid
            proto = actor.get("prototypeToken") or {}
            tokens.append(
                {
                    "actorId": actor["_id"],
                    "name": proto.get("name", actor["name"]),
                    "x": x,
                    "y": y,
                    "hidden": bool(request.get("hidden")),
                    "disposition": proto.get("disposition", 0),
                }
            )
        created = await self.create_embedded_documents(scene["_id"], "Token", tokens)
        return {
            "success": True,
            "tokensCreated": len(created),
            "tokenIds": [t["id"] for t in created],
        }

    async def validate_write_permissions(self, operation: str) -> Record:
        if self.user.is_gm:
            return {"allowed": True, "operation": operation}
        return {
            "allowed": False,
            "operation": operation,
            "reason": "Only Game Masters can modify the world",
        }

    async def get_scene(self, scene_id: str) -> Record | None:
        scene = self.documents[FolderType.SCENE].get(scene_id)
        return {**copy.deepcopy(scene), "id": scene_id} if scene else None

    async def create_scene(self, data: Mapping[str, Any]) -> Record:
        scene = self._store(FolderType.SCENE, {**data, "active": False})
        return {**copy.deepcopy(scene), "id": scene["_id"]}

    async def create_scene_thumbnail(self, scene_id: str) -> None:
        scene = self.documents[FolderType.SCENE].get(scene_id)
        if scene is None:
            raise WorldError(f"Scene not found: {scene_id}")
        scene["thumb"] = f"worlds/{self.world_id}/assets/scenes/{scene_id}-thumb.webp"

    async def probe_image_size(self, src: str) -> tuple[int, int]:
        for source_files in self.files.values():
            if src in source_files:
                return png_size(source_files[src])
        raise WorldError(f"Image not found: {src}")

    async def create_embedded_documents(
        self, scene_id: str, embedded_name: str, documents: Sequence[Mapping[str, Any]]
    ) -> list[Record]:
        if embedded_name not in EMBEDDED_DOCUMENT_TYPES:
            raise WorldError(f"Unsupported embedded document type: {embedded_name}")
        if scene_id not in self.embedded:
            raise WorldError(f"Scene not found: {scene_id}")
        collection = self.embedded[scene_id][embedded_name]
        created = []
        for data in documents:
            doc = {**copy.deepcopy(dict(data)), "id": random_id()}
            collection[doc["id"]] = doc
            created.append(copy.deepcopy(doc))
        return created

    # ------------------------------------------------------------------
    # Tokens
    # ------------------------------------------------------------------

    async def move_token(self, request: Mapping[str, Any]) -> Record:
        _, token = self._find_token(request["tokenId"])
        token["x"], token["y"] = request["x"], request["y"]
        return {
            "success": True,
            "tokenId": token["id"],
            "x": token["x"],
            "y": token["y"],
            "animated": request.get("animate", False),
        }

    async def update_token(self, request: Mapping[str, Any]) -> Record:
        _, token = self._find_token(request["tokenId"])
        apply_updates(token, request["updates"])
        return {"success": True, "tokenId": token["id"], "updated": list(request["updates"])}

    async def delete_tokens(self, request: Mapping[str, Any]) -> Record:
        deleted, errors = [], []
        for token_id in request["tokenIds"]:
            try:
                scene_id, _ = self._find_token(token_id)
            except WorldError as exc:
                errors.append(str(exc))
                continue
            del self.embedded[scene_id]["Token"][token_id]
            deleted.append(token_id)
        result: Record = {"success": bool(deleted), "deletedCount": len(deleted), "tokenIds": deleted}
        if errors:
            result["errors"] = errors
        return result

    async def get_token_details(self, request: Mapping[str, Any]) -> Record:
        _, token = self._find_token(request["tokenId"])
        details = copy.deepcopy(token)
        actor = self.documents[DocumentType.ACTOR].get(token.get("actorId"))
        details["actor"] = _summary(actor) if actor else None
        details.setdefault("statuses", [])
        return details

    async def toggle_token_condition(self, request: Mapping[str, Any]) -> Record:
        condition = request["conditionId"]
        if condition not in self.conditions:
            raise WorldError(f"Condition not found: {condition}")
        _, token = self._find_token(request["tokenId"])
        statuses = set(token.get("statuses", []))
        if request["active"]:
            statuses.add(condition)
        else:
            statuses.discard(condition)
        token["statuses"] = sorted(statuses)
        return {
            "success": True,
            "tokenId": token["id"],
            "conditionId": condition,
            "active": request["active"],
        }

    async def get_available_conditions(self) -> list[Record]:
        return [
            {"id": c, "name": c.capitalize(), "icon": f"icons/svg/{c}.svg"}
            for c in self.conditions
        ]

    # ------------------------------------------------------------------
    # Journals and tables
    # ------------------------------------------------------------------

    def _journal_result(self, journal: Mapping[str, Any]) -> Record:
        return {
            "id": journal["_id"],
            "name": journal["name"],
            "pages": [{"id": p["_id"], "name": p.get("name")} for p in journal["pages"]],
        }

    async def create_journal_entry(self, request: Mapping[str, Any]) -> Record:
        journal = await self.create_journal(
            {
                "name": request["name"],
                "pages": [
                    {"name": request["name"], "type": "text",
                     "text": {"content": request["content"]}},
                ],
            }
        )
        return {"id": journal["id"], "name": journal["name"]}

    async def list_journals(self) -> list[Record]:
        return [
            {"id": j["_id"], "name": j["name"], "type": "JournalEntry"}
            for j in self.documents[FolderType.JOURNAL_ENTRY].values()
        ]

    async def get_journal_content(self, journal_id: str) -> Record:
        journal = self._get(FolderType.JOURNAL_ENTRY, journal_id, "Journal")
        text = [
            (p.get("text") or {}).get("content", "")
            for p in journal["pages"]
            if p.get("type") == "text"
        ]
        return {"id": journal["_id"], "name": journal["name"], "content": "\n".join(text)}

    async def update_journal_content(self, request: Mapping[str, Any]) -> Record:
        journal = self._get(FolderType.JOURNAL_ENTRY, request["journalId"], "Journal")
        for page in journal["pages"]:
            if page.get("type") == "text":
                page["text"] = {"content": request["content"]}
                break
        else:
            journal["pages"].append(
                {"_id": random_id(), "name": journal["name"], "type": "text",
                 "text": {"content": request["content"]}}
            )
        return {"success": True, "id": journal["_id"]}

    async def create_journal(self, data: Mapping[str, Any]) -> Record | None:
        pages = [{**copy.deepcopy(dict(p)), "_id": random_id()} for p in data.get("pages", [])]
        journal = self._store(FolderType.JOURNAL_ENTRY, {**data, "pages": pages})
        return self._journal_result(journal)

    async def create_roll_table(self, data: Mapping[str, Any]) -> Record | None:
        results = [{**copy.deepcopy(dict(r)), "_id": random_id()} for r in data.get("results", [])]
        table = self._store(FolderType.ROLL_TABLE, {**data, "results": results})
        return {
            "id": table["_id"],
            "name": table["name"],
            "formula": table.get("formula"),
            "results": copy.deepcopy(results),
        }

    # ------------------------------------------------------------------
    # World documents
    # ------------------------------------------------------------------

    async def get_actor(self, actor_id: str) -> Record | None:
        actor = self.documents[DocumentType.ACTOR].get(actor_id)
        return copy.deepcopy(actor) if actor else None

    async def list_documents(self, document_type: str) -> list[Record]:
        return copy.deepcopy(list(self._collection(document_type).values()))

    def _folder_named(self, name: str, folder_type: str) -> str:
        for folder in self.folders.values():
            if folder["name"] == name and folder["type"] == folder_type:
                return folder["id"]
        return self._new_folder({"name": name, "type": folder_type})["id"]

    async def create_document(self, request: Mapping[str, Any]) -> Record:
        document_type = request["documentType"]
        data = dict(request["data"])
        if request.get("folderName"):
            data["folder"] = self._folder_named(request["folderName"], document_type)
        doc = self._store(document_type, data)
        return {"id": doc["_id"], "name": doc["name"], "type": doc.get("type"),
                "folder": doc.get("folder")}

    async def batch_create_documents(self, request: Mapping[str, Any]) -> Record:
        document_type = request["documentType"]
        folder_id = request.get("folderId")
        if folder_id and folder_id not in self.folders:
            raise WorldError(f"Folder not found: {folder_id}")
        created = []
        for data in request["documents"]:
            doc = self._store(document_type, {**data, "folder": folder_id or data.get("folder")})
            created.append({"id": doc["_id"], "name": doc.get("name")})
        return {"created": created, "count": len(created)}

    async def update_document(self, request: Mapping[str, Any]) -> Record:
        document_type = request["documentType"]
        doc = self._collection(document_type).get(request["documentId"])
        if doc is None:
            raise WorldError(f"{document_type} not found: {request['documentId']}")
        if request.get("updates"):
            apply_updates(doc, request["updates"])

        added = removed = 0
        if request.get("addItems") or request.get("removeItemIds"):
            if document_type != DocumentType.ACTOR:
                raise WorldError("Embedded items can only be changed on actors")
            items = doc.setdefault("items", [])
            for item in request.get("addItems") or []:
                items.append({**copy.deepcopy(dict(item)), "_id": random_id()})
                added += 1
            remove = set(request.get("removeItemIds") or [])
            kept = [i for i in items if i["_id"] not in remove]
            removed = len(items) - len(kept)
            doc["items"] = kept
        return {
            "id": doc["_id"],
            "name": doc.get("name"),
            "updated": True,
            "itemsAdded": added,
            "itemsRemoved": removed,
        }

    async def delete_document(self, request: Mapping[str, Any]) -> Record:
        document_type = request["documentType"]
        doc = self._collection(document_type).pop(request["documentId"], None)
        if doc is None:
            raise WorldError(f"{document_type} not found: {request['documentId']}")
        return {"id": doc["_id"], "name": doc.get("name"), "deleted": True}

    # ------------------------------------------------------------------
    # Folders
    # ------------------------------------------------------------------

    def _new_folder(self, data: Mapping[str, Any]) -> Record:
        if data["type"] not in self.documents:
            raise WorldError(f"Invalid folder type: {data['type']}")
        parent = data.get("parent")
        if parent and parent not in self.folders:
            raise WorldError(f"Folder not found: {parent}")
        folder = {"id": random_id(), "name": data["name"], "type": data["type"], "parent": parent}
        self.folders[folder["id"]] = folder
        return folder

    async def list_folders(self) -> list[Record]:
        return copy.deepcopy(list(self.folders.values()))

    async def get_folder(self, folder_id: str) -> Record | None:
        folder = self.folders.get(folder_id)
        return dict(folder) if folder else None

    async def create_folder(self, data: Mapping[str, Any]) -> Record:
        return dict(self._new_folder(data))

    async def update_folder(self, folder_id: str, updates: Mapping[str, Any]) -> Record:
        folder = self.folders.get(folder_id)
        if folder is None:
            raise WorldError(f"Folder not found: {folder_id}")
        parent = updates.get("parent")
        if parent and (parent == folder_id or parent not in self.folders):
            raise WorldError(f"Invalid parent folder: {parent}")
        folder.update({k: v for k, v in updates.items() if k in ("name", "parent")})
        return dict(folder)

    async def delete_folder(
        self, folder_id: str, *, delete_subfolders: bool, delete_contents: bool
    ) -> None:
        folder = self.folders.pop(folder_id, None)
        if folder is None:
            raise WorldError(f"Folder not found: {folder_id}")
        children = [f["id"] for f in self.folders.values() if f.get("parent") == folder_id]
        for child in children:
            if delete_subfolders:
                await self.delete_folder(
                    child, delete_subfolders=True, delete_contents=delete_contents
                )
            else:
                self.folders[child]["parent"] = folder.get("parent")

        collection = self.documents[folder["type"]]
        for doc_id in [d for d, doc in collection.items() if doc.get("folder") == folder_id]:
            if delete_contents:
                del collection[doc_id]
            else:
                collection[doc_id]["folder"] = None

    # ------------------------------------------------------------------
    # Files
    # ------------------------------------------------------------------

    async def browse_files(
        self, source: str, target: str, extensions: Sequence[str] | None = None
    ) -> Record:
        target = target.strip("/")
        prefix = f"{target}/" if target else ""
        dirs = sorted(
            d for d in self.directories.get(source, set())
            if d.startswith(prefix) and "/" not in d[len(prefix):]
        )
        files = sorted(
            path for path in self.files.get(source, {})
            if path.startswith(prefix) and "/" not in path[len(prefix):]
        )
        if extensions:
            wanted = tuple(e.lower() for e in extensions)
            files = [f for f in files if f.lower().endswith(wanted)]
        return {"target": target, "dirs": dirs, "files": files}

    async def create_directory(self, source: str, path: str) -> None:
        directories = self.directories.setdefault(source, set())
        if path in directories:
            raise FileExistsError(f"EEXIST: directory already exists: {path}")
        parent = path.rpartition("/")[0]
        if parent and parent not in directories:
            raise FileNotFoundError(f"ENOENT: parent directory does not exist: {parent}")
        directories.add(path)

    async def upload_file(
        self, source: str, path: str, filename: str, content: bytes, mime_type: str
    ) -> Record:
        if path and path not in self.directories.get(source, set()):
            raise FileNotFoundError(f"ENOENT: directory does not exist: {path}")
        full_path = f"{path}/{filename}" if path else filename
        self.files.setdefault(source, {})[full_path] = content
        logger.debug("Stored %s (%s, %d bytes)", full_path, mime_type, len(content))
        return {"path": full_path, "status": "success"}
