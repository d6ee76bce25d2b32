"""MCP tool definitions.

Categories: Core (world, actors, scenes, tokens), Document management,
Adventure import, plus a generic ``call-bridge-method`` escape hatch for the
rest of the catalog. Each tool has a ``<name>_impl`` coroutine testable
without the mcp package; ``register_tools()`` wraps them with FastMCP
decorators. Every call dispatches as the facade's current user.
"""

from __future__ import annotations

from typing import Any

from foundry_bridge.host.facade import DataAccess
from foundry_bridge.queries.registry import QueryRegistry


async def _dispatch(
    registry: QueryRegistry, facade: DataAccess, method: str, **payload: Any
) -> dict[str, Any]:
    """Dispatch *method* with the non-``None`` *payload* fields."""
    data = {key: value for key, value in payload.items() if value is not None}
    return await registry.dispatch(method, data, user=facade.current_user())


# ---------------------------------------------------------------------------
# Core tools
# ---------------------------------------------------------------------------


async def call_bridge_method_impl(
    registry: QueryRegistry,
    facade: DataAccess,
    method: str,
    data: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Dispatch any registered operation by name."""
    return await registry.dispatch(method, data or {}, user=facade.current_user())


async def get_world_info_impl(registry: QueryRegistry, facade: DataAccess) -> dict[str, Any]:
    return await _dispatch(registry, facade, "getWorldInfo")


async def get_character_impl(
    registry: QueryRegistry,
    facade: DataAccess,
    identifier: str,
) -> dict[str, Any]:
    return await _dispatch(registry, facade, "getCharacterInfo", characterName=identifier)


async def list_actors_impl(
    registry: QueryRegistry, facade: DataAccess, *, actor_type: str | None = None
) -> dict[str, Any]:
    return await _dispatch(registry, facade, "listActors", type=actor_type)


async def search_compendium_impl(
    registry: QueryRegistry,
    facade: DataAccess,
    query: str,
    *,
    pack_type: str | None = None,
    filters: dict[str, Any] | None = None,
) -> dict[str, Any]:
    return await _dispatch(
        registry, facade, "searchCompendium", query=query, packType=pack_type, filters=filters
    )


async def get_compendium_entry_full_impl(
    registry: QueryRegistry, facade: DataAccess, pack_id: str, document_id: str
) -> dict[str, Any]:
    return await _dispatch(
        registry, facade, "getCompendiumDocumentFull", packId=pack_id, documentId=document_id
    )


async def get_current_scene_impl(registry: QueryRegistry, facade: DataAccess) -> dict[str, Any]:
    return await _dispatch(registry, facade, "getActiveScene")


async def list_scenes_impl(
    registry: QueryRegistry,
    facade: DataAccess,
    *,
    filter: str | None = None,  # noqa: A002
    include_active_only: bool = False,
) -> dict[str, Any]:
    return await _dispatch(
        registry, facade, "list-scenes", filter=filter, include_active_only=include_active_only
    )


async def switch_scene_impl(
    registry: QueryRegistry, facade: DataAccess, scene_identifier: str
) -> dict[str, Any]:
    return await _dispatch(registry, facade, "switch-scene", scene_identifier=scene_identifier)


async def move_token_impl(
    registry: QueryRegistry,
    facade: DataAccess,
    token_id: str,
    x: float,
    y: float,
    *,
    animate: bool = False,
) -> dict[str, Any]:
    return await _dispatch(registry, facade, "move-token", tokenId=token_id, x=x, y=y, animate=animate)


async def toggle_token_condition_impl(
    registry: QueryRegistry,
    facade: DataAccess,
    token_id: str,
    condition_id: str,
    active: bool,
) -> dict[str, Any]:
    return await _dispatch(
        registry,
        facade,
        "toggle-token-condition",
        tokenId=token_id,
        conditionId=condition_id,
        active=active,
    )


# ---------------------------------------------------------------------------
# Document management tools
# ---------------------------------------------------------------------------


async def create_document_impl(
    registry: QueryRegistry,
    facade: DataAccess,
    document_type: str,
    data: dict[str, Any],
    *,
    folder_name: str | None = None,
) -> dict[str, Any]:
    response = await _dispatch(
        registry,
        facade,
        "createDocument",
        documentType=document_type,
        data=data,
        folderName=folder_name,
    )
    if response["success"]:
        response["message"] = (
            f'Created {document_type} "{response.get("name")}" (ID: {response.get("id")})'
        )
    return response


async def batch_create_documents_impl(
    registry: QueryRegistry,
    facade: DataAccess,
    document_type: str,
    documents: list[dict[str, Any]],
    *,
    folder_id: str | None = None,
) -> dict[str, Any]:
    return await _dispatch(
        registry,
        facade,
        "batchCreateDocuments",
        documentType=document_type,
        documents=documents,
        folderId=folder_id,
    )


async def update_document_impl(
    registry: QueryRegistry,
    facade: DataAccess,
    document_type: str,
    document_id: str,
    *,
    updates: dict[str, Any] | None = None,
    add_items: list[dict[str, Any]] | None = None,
    remove_item_ids: list[str] | None = None,
) -> dict[str, Any]:
    return await _dispatch(
        registry,
        facade,
        "updateDocument",
        documentType=document_type,
        documentId=document_id,
        updates=updates,
        addItems=add_items,
        removeItemIds=remove_item_ids,
    )


async def delete_document_impl(
    registry: QueryRegistry, facade: DataAccess, document_type: str, document_id: str
) -> dict[str, Any]:
    return await _dispatch(
        registry, facade, "deleteDocument", documentType=document_type, documentId=document_id
    )


async def browse_files_impl(
    registry: QueryRegistry,
    facade: DataAccess,
    target: str,
    *,
    source: str | None = None,
    extensions: list[str] | None = None,
) -> dict[str, Any]:
    return await _dispatch(
        registry, facade, "browseFiles", target=target, source=source, extensions=extensions
    )


async def create_folder_impl(
    registry: QueryRegistry,
    facade: DataAccess,
    name: str,
    folder_type: str,
    *,
    parent: str | None = None,
) -> dict[str, Any]:
    return await _dispatch(
        registry, facade, "createFolder", name=name, type=folder_type, parent=parent
    )


async def list_folders_impl(
    registry: QueryRegistry, facade: DataAccess, *, folder_type: str | None = None
) -> dict[str, Any]:
    return await _dispatch(registry, facade, "listFolders", type=folder_type)


async def delete_folder_impl(
    registry: QueryRegistry,
    facade: DataAccess,
    folder_id: str,
    *,
    delete_contents: bool = False,
) -> dict[str, Any]:
    return await _dispatch(
        registry, facade, "deleteFolder", folderId=folder_id, deleteContents=delete_contents
    )


async def update_folder_impl(
    registry: QueryRegistry,
    facade: DataAccess,
    folder_id: str,
    *,
    name: str | None = None,
    parent: str | None = None,
) -> dict[str, Any]:
    return await _dispatch(
        registry, facade, "updateFolder", folderId=folder_id, name=name, parent=parent
    )


async def export_folder_to_compendium_impl(
    registry: QueryRegistry,
    facade: DataAccess,
    folder_id: str,
    pack_id: str,
    *,
    recursive: bool = True,
    clear_first: bool = False,
) -> dict[str, Any]:
    return await _dispatch(
        registry,
        facade,
        "exportFolderToCompendium",
        folderId=folder_id,
        packId=pack_id,
        recursive=recursive,
        clearFirst=clear_first,
    )


# ---------------------------------------------------------------------------
# Adventure import tools
# ---------------------------------------------------------------------------


async def create_journal_entry_impl(
    registry: QueryRegistry,
    facade: DataAccess,
    name: str,
    pages: list[dict[str, Any]],
    *,
    folder: str | None = None,
    folder_name: str | None = None,
    ownership: dict[str, Any] | None = None,
) -> dict[str, Any]:
    return await _dispatch(
        registry,
        facade,
        "createJournalEntryMultiPage",
        name=name,
        pages=pages,
        folder=folder,
        folderName=folder_name,
        ownership=ownership,
    )


async def create_roll_table_impl(
    registry: QueryRegistry,
    facade: DataAccess,
    name: str,
    formula: str,
    results: list[dict[str, Any]],
    **options: Any,
) -> dict[str, Any]:
    """*options*: description, folder, folderName, img, replacement, displayRoll."""
    return await _dispatch(
        registry, facade, "createRollTable", name=name, formula=formula, results=results, **options
    )


async def upload_file_impl(
    registry: QueryRegistry,
    facade: DataAccess,
    filename: str,
    base64data: str,
    target_path: str,
) -> dict[str, Any]:
    return await _dispatch(
        registry,
        facade,
        "uploadFile",
        filename=filename,
        base64data=base64data,
        targetPath=target_path,
    )


async def create_scene_impl(
    registry: QueryRegistry,
    facade: DataAccess,
    name: str,
    background_image: str,
    **options: Any,
) -> dict[str, Any]:
    """*options* are forwarded verbatim (gridSize, width, height, folderName ...)."""
    return await _dispatch(
        registry, facade, "createScene", name=name, backgroundImage=background_image, **options
    )


async def place_scene_documents_impl(
    registry: QueryRegistry,
    facade: DataAccess,
    kind: str,
    scene_id: str,
    documents: list[dict[str, Any]],
) -> dict[str, Any]:
    """Place notes, walls, lights, or tokens on a scene."""
    methods = {
        "notes": "placeNotes",
        "walls": "createWalls",
        "lights": "createLights",
        "tokens": "createTokens",
    }
    if kind not in methods:
        return {"success": False, "error": f"Unknown scene document kind: {kind}"}
    return await _dispatch(registry, facade, methods[kind], sceneId=scene_id, **{kind: documents})


async def generate_map_impl(
    registry: QueryRegistry,
    facade: DataAccess,
    prompt: str,
    scene_name: str,
    *,
    size: str | None = None,
    grid_size: int | None = None,
) -> dict[str, Any]:
    return await _dispatch(
        registry,
        facade,
        "generate-map",
        prompt=prompt,
        scene_name=scene_name,
        size=size,
        grid_size=grid_size,
    )


# ---------------------------------------------------------------------------
# Registration
# ---------------------------------------------------------------------------


def register_tools(server: Any, registry: QueryRegistry, facade: DataAccess) -> None:
    """Register all MCP tools on the FastMCP server."""

    # --- Core ---

    @server.tool(name="call-bridge-method")  # type: ignore[untyped-decorator]
    async def call_bridge_method(method: str, data: dict[str, Any] | None = None) -> dict[str, Any]:
        """Call any bridge operation by name (e.g. "getPartyCharacters")."""
        return await call_bridge_method_impl(registry, facade, method, data)

    @server.tool(name="get-world-info")  # type: ignore[untyped-decorator]
    async def get_world_info() -> dict[str, Any]:
        """Get the world title, game system, and connected users."""
        return await get_world_info_impl(registry, facade)

    @server.tool(name="get-character")  # type: ignore[untyped-decorator]
    async def get_character(identifier: str) -> dict[str, Any]:
        """Get a character's stats and items by name or ID."""
        return await get_character_impl(registry, facade, identifier)

    @server.tool(name="list-characters")  # type: ignore[untyped-decorator]
    async def list_characters(type: str | None = None) -> dict[str, Any]:  # noqa: A002
        """List world actors, optionally filtered by actor type."""
        return await list_actors_impl(registry, facade, actor_type=type)

    @server.tool(name="search-compendium")  # type: ignore[untyped-decorator]
    async def search_compendium(
        query: str,
        packType: str | None = None,  # noqa: N803
        filters: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Search compendium packs by name with optional creature filters."""
        return await search_compendium_impl(
            registry, facade, query, pack_type=packType, filters=filters
        )

    @server.tool(name="get-compendium-entry-full")  # type: ignore[untyped-decorator]
    async def get_compendium_entry_full(packId: str, documentId: str) -> dict[str, Any]:  # noqa: N803
        """Get the full data of one compendium document."""
        return await get_compendium_entry_full_impl(registry, facade, packId, documentId)

    @server.tool(name="get-current-scene")  # type: ignore[untyped-decorator]
    async def get_current_scene() -> dict[str, Any]:
        """Get the active scene with its tokens."""
        return await get_current_scene_impl(registry, facade)

    @server.tool(name="list-scenes")  # type: ignore[untyped-decorator]
    async def list_scenes(
        filter: str | None = None,  # noqa: A002
        include_active_only: bool = False,
    ) -> dict[str, Any]:
        """List scenes, optionally filtered by name."""
        return await list_scenes_impl(
            registry, facade, filter=filter, include_active_only=include_active_only
        )

    @server.tool(name="switch-scene")  # type: ignore[untyped-decorator]
    async def switch_scene(scene_identifier: str) -> dict[str, Any]:
        """Activate a scene by name or ID."""
        return await switch_scene_impl(registry, facade, scene_identifier)

    @server.tool(name="move-token")  # type: ignore[untyped-decorator]
    async def move_token(
        tokenId: str,  # noqa: N803
        x: float,
        y: float,
        animate: bool = False,
    ) -> dict[str, Any]:
        """Move a token to canvas coordinates."""
        return await move_token_impl(registry, facade, tokenId, x, y, animate=animate)

    @server.tool(name="toggle-token-condition")  # type: ignore[untyped-decorator]
    async def toggle_token_condition(
        tokenId: str,  # noqa: N803
        conditionId: str,  # noqa: N803
        active: bool,
    ) -> dict[str, Any]:
        """Apply or remove a status condition on a token."""
        return await toggle_token_condition_impl(registry, facade, tokenId, conditionId, active)

    # --- Document management ---

    @server.tool(name="create-document")  # type: ignore[untyped-decorator]
    async def create_document(
        documentType: str,  # noqa: N803
        data: dict[str, Any],
        folderName: str | None = None,  # noqa: N803
    ) -> dict[str, Any]:
        """Create an Actor or Item from raw JSON (must include "name" and "type")."""
        return await create_document_impl(
            registry, facade, documentType, data, folder_name=folderName
        )

    @server.tool(name="batch-create-documents")  # type: ignore[untyped-decorator]
    async def batch_create_documents(
        documentType: str,  # noqa: N803
        documents: list[dict[str, Any]],
        folderId: str | None = None,  # noqa: N803
    ) -> dict[str, Any]:
        """Create several documents of one type in a single call."""
        return await batch_create_documents_impl(
            registry, facade, documentType, documents, folder_id=folderId
        )

    @server.tool(name="update-document")  # type: ignore[untyped-decorator]
    async def update_document(
        documentType: str,  # noqa: N803
        documentId: str,  # noqa: N803
        updates: dict[str, Any] | None = None,
        addItems: list[dict[str, Any]] | None = None,  # noqa: N803
        removeItemIds: list[str] | None = None,  # noqa: N803
    ) -> dict[str, Any]:
        """Update a document; dot-notation keys address nested fields."""
        return await update_document_impl(
            registry,
            facade,
            documentType,
            documentId,
            updates=updates,
            add_items=addItems,
            remove_item_ids=removeItemIds,
        )

    @server.tool(name="delete-document")  # type: ignore[untyped-decorator]
    async def delete_document(documentType: str, documentId: str) -> dict[str, Any]:  # noqa: N803
        """Permanently delete an Actor or Item."""
        return await delete_document_impl(registry, facade, documentType, documentId)

    @server.tool(name="browse-files")  # type: ignore[untyped-decorator]
    async def browse_files(
        target: str,
        source: str | None = None,
        extensions: list[str] | None = None,
    ) -> dict[str, Any]:
        """List files and subdirectories at a path."""
        return await browse_files_impl(
            registry, facade, target, source=source, extensions=extensions
        )

    @server.tool(name="create-folder")  # type: ignore[untyped-decorator]
    async def create_folder(name: str, type: str, parent: str | None = None) -> dict[str, Any]:  # noqa: A002
        """Create a folder for one document type."""
        return await create_folder_impl(registry, facade, name, type, parent=parent)

    @server.tool(name="list-folders")  # type: ignore[untyped-decorator]
    async def list_folders(type: str | None = None) -> dict[str, Any]:  # noqa: A002
        """List folders, optionally filtered by document type."""
        return await list_folders_impl(registry, facade, folder_type=type)

    @server.tool(name="delete-folder")  # type: ignore[untyped-decorator]
    async def delete_folder(folderId: str, deleteContents: bool = False) -> dict[str, Any]:  # noqa: N803
        """Delete a folder and its subfolders."""
        return await delete_folder_impl(registry, facade, folderId, delete_contents=deleteContents)

    @server.tool(name="update-folder")  # type: ignore[untyped-decorator]
    async def update_folder(
        folderId: str,  # noqa: N803
        name: str | None = None,
        parent: str | None = None,
    ) -> dict[str, Any]:
        """Rename a folder or move it under another parent."""
        return await update_folder_impl(registry, facade, folderId, name=name, parent=parent)

    @server.tool(name="export-folder-to-compendium")  # type: ignore[untyped-decorator]
    async def export_folder_to_compendium(
        folderId: str,  # noqa: N803
        packId: str,  # noqa: N803
        recursive: bool = True,
        clearFirst: bool = False,  # noqa: N803
    ) -> dict[str, Any]:
        """Copy a folder's documents into a compendium pack."""
        return await export_folder_to_compendium_impl(
            registry, facade, folderId, packId, recursive=recursive, clear_first=clearFirst
        )

    # --- Adventure import ---

    @server.tool(name="create-journal-entry")  # type: ignore[untyped-decorator]
    async def create_journal_entry(
        name: str,
        pages: list[dict[str, Any]],
        folder: str | None = None,
        folderName: str | None = None,  # noqa: N803
        ownership: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Create a multi-page journal of text and image pages."""
        return await create_journal_entry_impl(
            registry,
            facade,
            name,
            pages,
            folder=folder,
            folder_name=folderName,
            ownership=ownership,
        )

    @server.tool(name="create-roll-table")  # type: ignore[untyped-decorator]
    async def create_roll_table(
        name: str,
        formula: str,
        results: list[dict[str, Any]],
        description: str | None = None,
        folderName: str | None = None,  # noqa: N803
        img: str | None = None,
        replacement: bool | None = None,
        displayRoll: bool | None = None,  # noqa: N803
    ) -> dict[str, Any]:
        """Create a roll table with embedded results."""
        return await create_roll_table_impl(
            registry,
            facade,
            name,
            formula,
            results,
            description=description,
            folderName=folderName,
            img=img,
            replacement=replacement,
            displayRoll=displayRoll,
        )

    @server.tool(name="upload-file")  # type: ignore[untyped-decorator]
    async def upload_file(filename: str, base64data: str, targetPath: str) -> dict[str, Any]:  # noqa: N803
        """Upload a base64-encoded file into the data directory."""
        return await upload_file_impl(registry, facade, filename, base64data, targetPath)

    @server.tool(name="create-scene")  # type: ignore[untyped-decorator]
    async def create_scene(
        name: str,
        backgroundImage: str,  # noqa: N803
        gridSize: int | None = None,  # noqa: N803
        width: int | None = None,
        height: int | None = None,
        folderName: str | None = None,  # noqa: N803
    ) -> dict[str, Any]:
        """Create a scene from an uploaded background image."""
        return await create_scene_impl(
            registry,
            facade,
            name,
            backgroundImage,
            gridSize=gridSize,
            width=width,
            height=height,
            folderName=folderName,
        )

    @server.tool(name="place-scene-documents")  # type: ignore[untyped-decorator]
    async def place_scene_documents(
        kind: str,
        sceneId: str,  # noqa: N803
        documents: list[dict[str, Any]],
    ) -> dict[str, Any]:
        """Place notes, walls, lights, or tokens on a scene."""
        return await place_scene_documents_impl(registry, facade, kind, sceneId, documents)

    @server.tool(name="generate-map")  # type: ignore[untyped-decorator]
    async def generate_map(
        prompt: str,
        scene_name: str,
        size: str | None = None,
        grid_size: int | None = None,
    ) -> dict[str, Any]:
        """Start an AI battle-map generation job."""
        return await generate_map_impl(
            registry, facade, prompt, scene_name, size=size, grid_size=grid_size
        )
