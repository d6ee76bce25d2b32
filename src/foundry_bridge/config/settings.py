"""BridgeSettings: one frozen object built from flags, env, and TOML.

Sources, strongest first:

1. keyword arguments (the CLI's global flags)
2. ``FOUNDRY_BRIDGE_*`` environment variables, ``__`` for nested keys
   (``FOUNDRY_BRIDGE_MCP__TRANSPORT=sse``)
3. ``foundry-bridge.toml``
4. defaults on the section models in :mod:`foundry_bridge.config.models`
"""

from __future__ import annotations

import tomllib
from contextvars import ContextVar
from pathlib import Path
from typing import Any

import click
from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from foundry_bridge.config.discovery import find_config, read_toml
from foundry_bridge.config.models import (
    BridgeConfig,
    HostConfig,
    MapsConfig,
    McpConfig,
    WorldConfig,
)

# pydantic-settings builds sources inside __init__, so the file chosen by
# from_cli() is handed over through this variable.
_active_toml: ContextVar[Path | None] = ContextVar("_active_toml", default=None)


class TomlSettingsSource(PydanticBaseSettingsSource):
    """Feeds the sections of a parsed ``foundry-bridge.toml`` to pydantic."""

    def __init__(self, settings_cls: type[BaseSettings], path: Path | None) -> None:
        super().__init__(settings_cls)
        self._sections: dict[str, Any] = {}
        if path is None or not path.is_file():
            return
        try:
            self._sections = read_toml(path)
        except tomllib.TOMLDecodeError as exc:
            raise click.ClickException(f"Invalid TOML in {path}: {exc}") from exc

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        return self._sections.get(field_name), field_name, field_name in self._sections

    def __call__(self) -> dict[str, Any]:
        return dict(self._sections)


class BridgeSettings(BaseSettings):
    """Settings shared by the CLI, the MCP server, and the registry."""

    model_config = {
        "frozen": True,
        "env_prefix": "FOUNDRY_BRIDGE_",
        "env_nested_delimiter": "__",
    }

    config_path: Path | None = None

    json_output: bool = False
    verbose: bool = False
    log_json: bool = False

    bridge: BridgeConfig = Field(default_factory=BridgeConfig)
    host: HostConfig = Field(default_factory=HostConfig)
    world: WorldConfig = Field(default_factory=WorldConfig)
    maps: MapsConfig = Field(default_factory=MapsConfig)
    mcp: McpConfig = Field(default_factory=McpConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        # No dotenv or secrets dir: the TOML file replaces both.
        return init_settings, env_settings, TomlSettingsSource(settings_cls, _active_toml.get())

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | None = None,
        start: Path | None = None,
        **flags: Any,
    ) -> BridgeSettings:
        """Build settings for one CLI invocation.

        An explicit *config_path* that does not exist means "no file", not a
        fallback to discovery from *start*.
        """
        if config_path:
            explicit = Path(config_path)
            toml_path = explicit if explicit.is_file() else None
        else:
            toml_path = find_config(start)

        token = _active_toml.set(toml_path)
        try:
            return cls(config_path=toml_path, **flags)
        finally:
            _active_toml.reset(token)
