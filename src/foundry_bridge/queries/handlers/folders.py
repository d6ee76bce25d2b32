"""Folder management and folder-to-compendium export."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from foundry_bridge.domain.documents import is_foundry_id
from foundry_bridge.domain.users import User
from foundry_bridge.queries.errors import QueryError
from foundry_bridge.queries.handlers.base import HandlerContext, folder_descriptor, query
from foundry_bridge.queries.validation import Payload, require


async def _get_folder(ctx: HandlerContext, folder_id: str) -> dict[str, Any]:
    folder = await ctx.data_access.get_folder(folder_id)
    if not folder:
        raise QueryError(f"Folder not found: {folder_id}")
    return folder


def descendant_folder_ids(root_id: str, folders: Iterable[Mapping[str, Any]]) -> set[str]:
    """*root_id* plus the ids of every folder nested beneath it."""
    folder_ids = {root_id}
    candidates = list(folders)
    changed = True
    while changed:
        changed = False
        for folder in candidates:
            parent = folder.get("parent")
            if parent in folder_ids and folder["id"] not in folder_ids:
                folder_ids.add(folder["id"])
                changed = True
    return folder_ids


def export_payload(document: Mapping[str, Any]) -> dict[str, Any]:
    """Strip world-only fields; keep ids the host can cross-reference."""
    data = dict(document)
    if not is_foundry_id(data.get("_id")):
        data.pop("_id", None)
    data.pop("folder", None)
    data.pop("_key", None)
    return data


@query("createFolder", "Failed to create folder", check_state=False)
async def create_folder(ctx: HandlerContext, data: Payload, _user: User | None) -> dict[str, Any]:
    folder_data: dict[str, Any] = {
        "name": require(data, "name"),
        "type": require(data, "type"),
    }
    if data.get("parent"):
        folder_data["parent"] = data["parent"]
    folder = await ctx.data_access.create_folder(folder_data)
    return folder_descriptor(folder)


@query("listFolders", "Failed to list folders", check_state=False)
async def list_folders(ctx: HandlerContext, data: Payload, _user: User | None) -> dict[str, Any]:
    folders = await ctx.data_access.list_folders()
    folder_type = data.get("type")
    if folder_type:
        folders = [f for f in folders if f.get("type") == folder_type]
    return {"folders": [folder_descriptor(f) for f in folders]}


@query("deleteFolder", "Failed to delete folder", check_state=False)
async def delete_folder(ctx: HandlerContext, data: Payload, _user: User | None) -> dict[str, Any]:
    folder_id = require(data, "folderId")
    folder = await _get_folder(ctx, folder_id)
    await ctx.data_access.delete_folder(
        folder_id,
        delete_subfolders=True,
        delete_contents=bool(data.get("deleteContents")),
    )
    return {"name": folder.get("name")}


@query("updateFolder", "Failed to update folder", check_state=False)
async def update_folder(ctx: HandlerContext, data: Payload, _user: User | None) -> dict[str, Any]:
    folder_id = require(data, "folderId")
    await _get_folder(ctx, folder_id)
    updates = {key: data[key] for key in ("name", "parent") if key in data}
    folder = await ctx.data_access.update_folder(folder_id, updates)
    return folder_descriptor(folder)


@query("exportFolderToCompendium", "Failed to export folder to compendium", check_state=False)
async def export_folder_to_compendium(
    ctx: HandlerContext, data: Payload, _user: User | None
) -> dict[str, Any]:
    folder_id = require(data, "folderId")
    pack_id = require(data, "packId")

    folder = await _get_folder(ctx, folder_id)
    pack = await ctx.data_access.get_pack(pack_id)
    if not pack:
        raise QueryError(f"Compendium pack not found: {pack_id}")

    document_type = folder.get("type")
    if data.get("recursive") is not False:
        same_type = [
            f for f in await ctx.data_access.list_folders() if f.get("type") == document_type
        ]
        folder_ids = descendant_folder_ids(folder_id, same_type)
    else:
        folder_ids = {folder_id}

    documents = [
        doc
        for doc in await ctx.data_access.list_documents(document_type)
        if doc.get("folder") in folder_ids
    ]
    if not documents:
        return {
            "success": True,
            "exported": 0,
            "message": f'No documents found in folder "{folder.get("name")}"',
        }

    to_create = [export_payload(doc) for doc in documents]

    cleared = 0
    clear_first = bool(data.get("clearFirst"))
    if clear_first:
        existing_ids = await ctx.data_access.get_pack_index_ids(pack_id)
        if existing_ids:
            await ctx.data_access.delete_pack_documents(pack_id, existing_ids)
            cleared = len(existing_ids)

    await ctx.data_access.create_pack_documents(pack_id, to_create)

    prefix = f"Cleared {cleared} existing entries. " if clear_first else ""
    return {
        "success": True,
        "exported": len(to_create),
        "cleared": cleared,
        "folderName": folder.get("name"),
        "packId": pack_id,
        "message": (
            f"{prefix}Exported {len(to_create)} documents from "
            f'"{folder.get("name")}" to compendium "{pack.get("label", pack_id)}"'
        ),
    }


QUERIES = (
    create_folder,
    list_folders,
    delete_folder,
    update_folder,
    export_folder_to_compendium,
)
