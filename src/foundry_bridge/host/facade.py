"""Host collaborator protocols.

``DataAccess`` is the single object every handler talks to. Each method
performs one host call and returns plain JSON-shaped data, or raises on
failure. Handlers never reach past it into host internals.

``MapGenerator`` is the optional map-generation backend used by the
``generate-map`` family of operations.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any, Protocol, runtime_checkable

from foundry_bridge.domain.users import User

Record = dict[str, Any]


@runtime_checkable
class DataAccess(Protocol):
    """Semantic and document-level access to a host world."""

    # --- Session --------------------------------------------------------

    def current_user(self) -> User | None:
        """The user the bridge acts as (the logged-in host user)."""
        ...

    def host_info(self) -> Record:
        """``{"version": ..., "world_id": ...}`` for liveness probes."""
        ...

    def validate_state(self) -> None:
        """Raise ``HostStateError`` when the world cannot serve requests."""
        ...

    # --- Characters and actors -----------------------------------------

    async def get_character_info(self, identifier: str) -> Record: ...

    async def list_actors(self) -> list[Record]: ...

    async def set_actor_ownership(self, request: Mapping[str, Any]) -> Record: ...

    async def get_actor_ownership(self, request: Mapping[str, Any]) -> Any: ...

    async def get_friendly_npcs(self) -> list[Record]: ...

    async def get_party_characters(self) -> list[Record]: ...

    async def get_connected_players(self) -> list[Record]: ...

    async def find_players(self, request: Mapping[str, Any]) -> list[Record]: ...

    async def find_actor(self, request: Mapping[str, Any]) -> Record | None: ...

    async def use_item(self, request: Mapping[str, Any]) -> Record: ...

    async def search_character_items(self, request: Mapping[str, Any]) -> Record: ...

    async def request_player_rolls(self, request: Mapping[str, Any]) -> Record: ...

    # --- Compendium -----------------------------------------------------

    async def search_compendium(
        self,
        query: str,
        pack_type: str | None = None,
        filters: Mapping[str, Any] | None = None,
    ) -> list[Record]: ...

    async def list_creatures_by_criteria(self, criteria: Mapping[str, Any]) -> Record: ...

    async def get_available_packs(self) -> list[Record]: ...

    async def list_compendium_entries(
        self, pack_id: str, entry_type: str | None = None
    ) -> list[Record]: ...

    async def get_compendium_document_full(self, pack_id: str, document_id: str) -> Record: ...

    async def create_actor_from_compendium_entry(self, request: Mapping[str, Any]) -> Record: ...

    async def get_enhanced_creature_index(self) -> list[Record]: ...

    async def get_pack(self, pack_id: str) -> Record | None:
        """Pack metadata: ``id``, ``label``, ``type``, ``locked``."""
        ...

    async def get_pack_index_ids(self, pack_id: str) -> list[str]: ...

    async def get_pack_document(self, pack_id: str, document_id: str) -> Record | None: ...

    async def update_pack_document(
        self, pack_id: str, document_id: str, updates: Mapping[str, Any]
    ) -> Record: ...

    async def create_pack_documents(
        self, pack_id: str, documents: Sequence[Mapping[str, Any]]
    ) -> list[Record]: ...

    async def delete_pack_documents(self, pack_id: str, document_ids: Sequence[str]) -> None: ...

    # --- Scenes and world -----------------------------------------------

    async def get_active_scene(self) -> Record: ...

    async def get_world_info(self) -> Record: ...

    async def list_scenes(self, request: Mapping[str, Any]) -> Record: ...

    async def switch_scene(self, request: Mapping[str, Any]) -> Record: ...

    async def add_actors_to_scene(self, request: Mapping[str, Any]) -> Record: ...

    async def validate_write_permissions(self, operation: str) -> Record: ...

    async def get_scene(self, scene_id: str) -> Record | None: ...

    async def create_scene(self, data: Mapping[str, Any]) -> Record: ...

    async def create_scene_thumbnail(self, scene_id: str) -> None: ...

    async def probe_image_size(self, src: str) -> tuple[int, int]:
        """Natural ``(width, height)`` of an image, or raise."""
        ...

    async def create_embedded_documents(
        self, scene_id: str, embedded_name: str, documents: Sequence[Mapping[str, Any]]
    ) -> list[Record]:
        """Create ``Note``/``Wall``/``AmbientLight``/``Token`` documents on a scene."""
        ...

    # --- Tokens ---------------------------------------------------------

    async def move_token(self, request: Mapping[str, Any]) -> Record: ...

    async def update_token(self, request: Mapping[str, Any]) -> Record: ...

    async def delete_tokens(self, request: Mapping[str, Any]) -> Record: ...

    async def get_token_details(self, request: Mapping[str, Any]) -> Record: ...

    async def toggle_token_condition(self, request: Mapping[str, Any]) -> Record: ...

    async def get_available_conditions(self) -> list[Record]: ...

    # --- Journals and tables --------------------------------------------

    async def create_journal_entry(self, request: Mapping[str, Any]) -> Record: ...

    async def list_journals(self) -> list[Record]: ...

    async def get_journal_content(self, journal_id: str) -> Record: ...

    async def update_journal_content(self, request: Mapping[str, Any]) -> Record: ...

    async def create_journal(self, data: Mapping[str, Any]) -> Record | None:
        """Create a multi-page journal; result lists ``pages`` as ``{id, name}``."""
        ...

    async def create_roll_table(self, data: Mapping[str, Any]) -> Record | None: ...

    # --- World documents ------------------------------------------------

    async def get_actor(self, actor_id: str) -> Record | None:
        """Raw actor data including ``prototypeToken``."""
        ...

    async def list_documents(self, document_type: str) -> list[Record]:
        """Raw data (``_id``, ``folder``, ...) of every world document of a type."""
        ...

    async def create_document(self, request: Mapping[str, Any]) -> Record: ...

    async def batch_create_documents(self, request: Mapping[str, Any]) -> Record: ...

    async def update_document(self, request: Mapping[str, Any]) -> Record: ...

    async def delete_document(self, request: Mapping[str, Any]) -> Record: ...

    # --- Folders --------------------------------------------------------

    async def list_folders(self) -> list[Record]:
        """Folder descriptors ``{id, name, type, parent}`` in host order."""
        ...

    async def get_folder(self, folder_id: str) -> Record | None: ...

    async def create_folder(self, data: Mapping[str, Any]) -> Record: ...

    async def update_folder(self, folder_id: str, updates: Mapping[str, Any]) -> Record: ...

    async def delete_folder(
        self, folder_id: str, *, delete_subfolders: bool, delete_contents: bool
    ) -> None: ...

    # --- Files ----------------------------------------------------------

    async def browse_files(
        self, source: str, target: str, extensions: Sequence[str] | None = None
    ) -> Record: ...

    async def create_directory(self, source: str, path: str) -> None:
        """Create one directory level; raise if it already exists."""
        ...

    async def upload_file(
        self, source: str, path: str, filename: str, content: bytes, mime_type: str
    ) -> Record:
        """Store a file and return ``{"path": ...}``."""
        ...


@runtime_checkable
class MapGenerator(Protocol):
    """Backend that renders battle maps from prompts."""

    async def generate_map(self, params: Mapping[str, Any]) -> Record: ...

    async def check_map_status(self, params: Mapping[str, Any]) -> Record: ...

    async def cancel_map_job(self, params: Mapping[str, Any]) -> Record: ...
