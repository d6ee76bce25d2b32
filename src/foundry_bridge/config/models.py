"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, foundry-bridge.toml only
contains overrides. A fresh install needs no config file at all.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, field_validator

from foundry_bridge import MODULE_ID
from foundry_bridge.domain.users import UserRole

DEFAULT_FACADE = "foundry_bridge.host.memory:InMemoryWorld.from_settings"


class BridgeConfig(BaseModel):
    """[bridge] section."""

    model_config = {"frozen": True}

    module_id: str = MODULE_ID
    minimum_role: UserRole = UserRole.ASSISTANT

    @field_validator("minimum_role", mode="before")
    @classmethod
    def _parse_role(cls, value: object) -> UserRole:
        return UserRole.parse(value)  # type: ignore[arg-type]


class HostConfig(BaseModel):
    """[host] section."""

    model_config = {"frozen": True}

    facade: str = DEFAULT_FACADE
    map_generator: str | None = None


class WorldConfig(BaseModel):
    """[world] section: seed for the in-memory world."""

    model_config = {"frozen": True}

    world_id: str = "demo-world"
    title: str = "Demo World"
    system: str = "dnd5e"
    foundry_version: str = "13.345"
    user_name: str = "Gamemaster"
    user_role: UserRole = UserRole.GAMEMASTER
    seed_demo_content: bool = True

    @field_validator("user_role", mode="before")
    @classmethod
    def _parse_role(cls, value: object) -> UserRole:
        return UserRole.parse(value)  # type: ignore[arg-type]


class MapsConfig(BaseModel):
    """[maps] section."""

    model_config = {"frozen": True}

    quality: Literal["low", "medium", "high"] = "low"
    default_size: str = "medium"
    default_grid_size: int = 70
    upload_dir: str = "ai-generated-maps"


class McpConfig(BaseModel):
    """[mcp] section."""

    model_config = {"frozen": True}

    enabled: bool = True
    transport: Literal["stdio", "sse", "streamable-http"] = "stdio"
