"""Journal operations, including multi-page adventure journals."""

from __future__ import annotations

from typing import Any

from foundry_bridge.domain.documents import FolderType
from foundry_bridge.domain.users import User
from foundry_bridge.queries.errors import QueryError
from foundry_bridge.queries.handlers.base import HandlerContext, query, resolve_folder
from foundry_bridge.queries.validation import Payload, require, require_list

PAGE_SORT_STEP = 100_000


@query("createJournalEntry", "Failed to create journal entry", check_state=False)
async def create_journal_entry(ctx: HandlerContext, data: Payload, _user: User | None) -> Any:
    name = require(data, "name")
    content = require(data, "content")
    return await ctx.data_access.create_journal_entry({"name": name, "content": content})


@query("listJournals", "Failed to list journals")
async def list_journals(ctx: HandlerContext, data: Payload, _user: User | None) -> Any:
    return await ctx.data_access.list_journals()


@query("getJournalContent", "Failed to get journal content")
async def get_journal_content(ctx: HandlerContext, data: Payload, _user: User | None) -> Any:
    journal_id = require(data, "journalId")
    return await ctx.data_access.get_journal_content(journal_id)


@query("updateJournalContent", "Failed to update journal content")
async def update_journal_content(ctx: HandlerContext, data: Payload, _user: User | None) -> Any:
    journal_id = require(data, "journalId")
    content = require(data, "content")
    return await ctx.data_access.update_journal_content(
        {"journalId": journal_id, "content": content}
    )


def build_page(page: Payload, index: int) -> dict[str, Any]:
    """Host page data for one input page; sort keys keep input order."""
    page_data: dict[str, Any] = {
        "name": page.get("name"),
        "type": page.get("type"),
        "sort": (index + 1) * PAGE_SORT_STEP,
    }
    if page.get("type") == "text":
        page_data["text"] = {"content": page.get("content") or ""}
    elif page.get("type") == "image":
        page_data["src"] = page.get("src") or ""
        if page.get("caption"):
            page_data["image"] = {"caption": page["caption"]}
    return page_data


@query("createJournalEntryMultiPage", "Failed to create journal entry")
async def create_journal_entry_multi_page(
    ctx: HandlerContext, data: Payload, _user: User | None
) -> dict[str, Any]:
    name = require(data, "name")
    pages = require_list(data, "pages")

    folder_id = await resolve_folder(
        ctx,
        FolderType.JOURNAL_ENTRY,
        folder_id=data.get("folder"),
        folder_name=data.get("folderName"),
    )

    journal_data: dict[str, Any] = {
        "name": name,
        "pages": [build_page(page, i) for i, page in enumerate(pages)],
        "ownership": data.get("ownership") or {"default": 0},
    }
    if folder_id:
        journal_data["folder"] = folder_id

    journal = await ctx.data_access.create_journal(journal_data)
    if not journal:
        raise QueryError("Failed to create journal entry")

    created_pages = journal.get("pages", [])
    return {
        "id": journal["id"],
        "name": journal["name"],
        "pageCount": len(created_pages),
        "pageIds": [{"id": p["id"], "name": p["name"]} for p in created_pages],
    }


QUERIES = (
    create_journal_entry,
    list_journals,
    get_journal_content,
    update_journal_content,
    create_journal_entry_multi_page,
)
