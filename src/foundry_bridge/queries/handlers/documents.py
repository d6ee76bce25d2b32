"""Generic world document CRUD from raw JSON."""

from __future__ import annotations

from typing import Any

from foundry_bridge.domain.documents import DocumentType
from foundry_bridge.domain.users import User
from foundry_bridge.queries.errors import QueryValidationError
from foundry_bridge.queries.handlers.base import HandlerContext, query
from foundry_bridge.queries.validation import (
    Payload,
    require_choice,
    require_list,
    require_mapping,
    require_str,
)

DOCUMENT_TYPES = [t.value for t in DocumentType]


@query("createDocument", "Failed to create document")
async def create_document(ctx: HandlerContext, data: Payload, _user: User | None) -> Any:
    document = require_mapping(data, "data")
    require_str(document, "name", "data.name is required and must be a string")
    require_str(document, "type", "data.type is required and must be a string")
    document_type = require_choice(data, "documentType", DOCUMENT_TYPES)
    return await ctx.data_access.create_document(
        {
            "documentType": document_type,
            "data": dict(document),
            "folderName": data.get("folderName"),
        }
    )


@query("batchCreateDocuments", "Failed to batch create documents")
async def batch_create_documents(ctx: HandlerContext, data: Payload, _user: User | None) -> Any:
    document_type = require_choice(data, "documentType", DOCUMENT_TYPES)
    documents = require_list(data, "documents")
    request: dict[str, Any] = {"documentType": document_type, "documents": documents}
    if data.get("folderId"):
        request["folderId"] = data["folderId"]
    return await ctx.data_access.batch_create_documents(request)


@query("updateDocument", "Failed to update document")
async def update_document(ctx: HandlerContext, data: Payload, _user: User | None) -> Any:
    document_id = require_str(data, "documentId", "documentId is required")
    document_type = require_choice(data, "documentType", DOCUMENT_TYPES)
    if not data.get("updates") and not data.get("addItems") and not data.get("removeItemIds"):
        raise QueryValidationError(
            "At least one of updates, addItems, or removeItemIds must be provided"
        )
    return await ctx.data_access.update_document(
        {
            "documentType": document_type,
            "documentId": document_id,
            "updates": data.get("updates"),
            "addItems": data.get("addItems"),
            "removeItemIds": data.get("removeItemIds"),
        }
    )


@query("deleteDocument", "Failed to delete document")
async def delete_document(ctx: HandlerContext, data: Payload, _user: User | None) -> Any:
    document_id = require_str(data, "documentId", "documentId is required")
    document_type = require_choice(data, "documentType", DOCUMENT_TYPES)
    return await ctx.data_access.delete_document(
        {"documentType": document_type, "documentId": document_id}
    )


QUERIES = (
    create_document,
    batch_create_documents,
    update_document,
    delete_document,
)
