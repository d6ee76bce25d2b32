"""Map generation operations backed by an external ``MapGenerator``.

Unlike the rest of the catalog these never raise: every failure, including
validation, comes back as ``{"success": False, "error": ...}``.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

from foundry_bridge.domain.users import User
from foundry_bridge.host.facade import MapGenerator
from foundry_bridge.queries.errors import QueryError, QueryValidationError
from foundry_bridge.queries.handlers.base import HandlerContext, query
from foundry_bridge.queries.handlers.files import (
    MIME_TYPES,
    UPLOAD_SOURCE,
    decode_base64,
    ensure_directory,
    sanitize_filename,
)
from foundry_bridge.queries.result import failure
from foundry_bridge.queries.validation import Payload, require, require_str

# Matched case-sensitively: "MAP.PNG" is rejected.
MAP_IMAGE_EXTENSIONS = (".png", ".jpg", ".jpeg")

_UNSAFE_MAP_CHARS = re.compile(r"[^a-zA-Z0-9_\-.]")


def _generator(ctx: HandlerContext) -> MapGenerator:
    if ctx.maps is None:
        raise QueryError("Map generation backend not configured")
    return ctx.maps


def _succeeded(response: Mapping[str, Any] | None) -> bool:
    if not response:
        return False
    if isinstance(response.get("success"), bool):
        return response["success"]
    return response.get("status") == "success"


def _backend_failure(response: Mapping[str, Any] | None, fallback: str) -> dict[str, Any]:
    response = response or {}
    message = response.get("error") or response.get("message") or fallback
    return failure(message, status=response.get("status") or "error")


@query("generate-map", "Map generation failed", check_state=False, errors="return")
async def generate_map(ctx: HandlerContext, data: Payload, _user: User | None) -> dict[str, Any]:
    prompt = require_str(data, "prompt", "Prompt is required and must be a string")
    scene_name = require_str(data, "scene_name", "Scene name is required and must be a string")
    generator = _generator(ctx)

    params = {
        "prompt": prompt.strip(),
        "scene_name": scene_name.strip(),
        "size": data.get("size") or ctx.maps_config.default_size,
        "grid_size": data.get("grid_size") or ctx.maps_config.default_grid_size,
        "quality": ctx.maps_config.quality,
    }
    response = await generator.generate_map(params)
    if not _succeeded(response):
        return _backend_failure(response, "Map generation failed")

    return {
        "success": True,
        "status": response.get("status") or "success",
        "jobId": response.get("jobId"),
        "message": response.get("message") or "Map generation started",
        "estimatedTime": response.get("estimatedTime") or "30-90 seconds",
    }


@query("check-map-status", "Status check failed", check_state=False, errors="return")
async def check_map_status(
    ctx: HandlerContext, data: Payload, _user: User | None
) -> dict[str, Any]:
    require(data, "job_id", "Job ID is required")
    response = await _generator(ctx).check_map_status(data)
    if not _succeeded(response):
        return _backend_failure(response, "Status check failed")
    return {
        "success": True,
        "status": response.get("status") or "success",
        "job": response.get("job"),
    }


@query("cancel-map-job", "Job cancellation failed", check_state=False, errors="return")
async def cancel_map_job(ctx: HandlerContext, data: Payload, _user: User | None) -> dict[str, Any]:
    require(data, "job_id", "Job ID is required")
    response = await _generator(ctx).cancel_map_job(data)
    if not _succeeded(response):
        return _backend_failure(response, "Job cancellation failed")
    return {
        "success": True,
        "status": response.get("status") or "success",
        "message": response.get("message") or "Job cancelled successfully",
    }


@query(
    "upload-generated-map",
    "Failed to upload generated map",
    check_state=False,
    errors="return",
)
async def upload_generated_map(
    ctx: HandlerContext, data: Payload, _user: User | None
) -> dict[str, Any]:
    filename = require_str(data, "filename", "Filename is required and must be a string")
    image_data = require_str(
        data, "imageData", "Image data is required and must be a base64 string"
    )

    safe_name = sanitize_filename(filename, _UNSAFE_MAP_CHARS)
    if not safe_name.endswith(MAP_IMAGE_EXTENSIONS):
        raise QueryValidationError("Only PNG and JPEG images are supported")
    ext = safe_name.rsplit(".", 1)[-1]
    content = decode_base64(image_data, "imageData")

    world_id = ctx.data_access.host_info().get("world_id") or "unknown-world"
    upload_path = f"worlds/{world_id}/{ctx.maps_config.upload_dir}"
    await ensure_directory(ctx, upload_path, recursive=False)

    response = await ctx.data_access.upload_file(
        UPLOAD_SOURCE, upload_path, safe_name, content, MIME_TYPES[ext]
    )
    path = response.get("path")
    return {
        "success": True,
        "path": path,
        "filename": safe_name,
        "message": f"Map uploaded successfully to {path}",
    }


QUERIES = (generate_map, check_map_status, cancel_map_job, upload_generated_map)
