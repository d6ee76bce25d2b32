"""File browsing and uploads into the host's data directory."""

from __future__ import annotations

import base64
import binascii
import logging
import re
from typing import Any

from foundry_bridge.domain.users import User
from foundry_bridge.queries.errors import QueryValidationError
from foundry_bridge.queries.handlers.base import HandlerContext, query
from foundry_bridge.queries.validation import Payload, require_str

logger = logging.getLogger(__name__)

UPLOAD_SOURCE = "data"

MIME_TYPES: dict[str, str] = {
    "png": "image/png",
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "webp": "image/webp",
    "svg": "image/svg+xml",
    "gif": "image/gif",
    "mp3": "audio/mpeg",
    "wav": "audio/wav",
    "ogg": "audio/ogg",
    "flac": "audio/flac",
    "m4a": "audio/mp4",
    "mp4": "video/mp4",
    "webm": "video/webm",
    "pdf": "application/pdf",
}

_UNSAFE_UPLOAD_CHARS = re.compile(r"[^a-zA-Z0-9_\-.\s]")


def sanitize_filename(filename: str, pattern: re.Pattern[str] = _UNSAFE_UPLOAD_CHARS) -> str:
    """Replace every character outside *pattern*'s allow-list with ``_``.

    Examples:
        >>> sanitize_filename("../maps/cave #1.png")
        '.._maps_cave _1.png'
    """
    return pattern.sub("_", filename)


def file_extension(filename: str) -> str:
    """Lower-cased text after the last dot (the whole name when there is none)."""
    return filename.rsplit(".", 1)[-1].lower()


def decode_base64(payload: str, field: str) -> bytes:
    """Strict decode; embedded whitespace is dropped first, anything else non-alphabet fails."""
    compact = "".join(payload.split())
    try:
        return base64.b64decode(compact, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise QueryValidationError(f"{field} is not valid base64") from exc


def _already_exists(exc: Exception) -> bool:
    message = str(exc)
    return "EEXIST" in message or "already exists" in message


async def ensure_directory(ctx: HandlerContext, path: str, *, recursive: bool = True) -> None:
    """Create *path* (each level when *recursive*); existing levels are fine."""
    if recursive:
        parts = path.split("/")
        levels = ["/".join(parts[: i + 1]) for i in range(len(parts))]
    else:
        levels = [path]
    for level in levels:
        try:
            await ctx.data_access.create_directory(UPLOAD_SOURCE, level)
        except Exception as exc:
            if not _already_exists(exc):
                logger.warning("Directory creation warning for %r: %s", level, exc)


@query("browseFiles", "Failed to browse files", check_state=False)
async def browse_files(ctx: HandlerContext, data: Payload, _user: User | None) -> dict[str, Any]:
    source = data.get("source") or "public"
    target = data.get("target") or ""
    extensions = data.get("extensions") or None
    result = await ctx.data_access.browse_files(source, target, extensions)
    return {
        "target": result.get("target"),
        "dirs": result.get("dirs") or [],
        "files": result.get("files") or [],
    }


@query("uploadFile", "Failed to upload file", check_state=False)
async def upload_file(ctx: HandlerContext, data: Payload, _user: User | None) -> dict[str, Any]:
    filename = require_str(data, "filename")
    encoded = require_str(data, "base64data")
    target = require_str(data, "targetPath")

    safe_name = sanitize_filename(filename)
    ext = file_extension(safe_name)
    mime_type = MIME_TYPES.get(ext)
    if mime_type is None:
        supported = ", ".join(MIME_TYPES)
        raise QueryValidationError(f"Unsupported file extension: .{ext}. Supported: {supported}")

    content = decode_base64(encoded, "base64data")
    target_path = target.strip("/")
    await ensure_directory(ctx, target_path)

    response = await ctx.data_access.upload_file(
        UPLOAD_SOURCE, target_path, safe_name, content, mime_type
    )
    return {"success": True, "path": response.get("path"), "filename": safe_name}


QUERIES = (browse_files, upload_file)
