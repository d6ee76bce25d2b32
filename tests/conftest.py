"""Shared pytest fixtures and test helpers for foundry-bridge tests."""

from __future__ import annotations

import struct
from pathlib import Path
from typing import Any
from unittest.mock import MagicMock

import pytest
from click.testing import CliRunner

from foundry_bridge.domain.users import User, UserRole
from foundry_bridge.host.facade import DataAccess
from foundry_bridge.host.memory import InMemoryWorld
from foundry_bridge.queries.handlers.base import HandlerContext
from foundry_bridge.queries.registry import QueryRegistry

MODULE = "foundry-mcp-bridge"


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def gm() -> User:
    return User(id="gmUser0000000001", name="Gamemaster", role=UserRole.GAMEMASTER)


@pytest.fixture
def assistant() -> User:
    return User(id="aSsistant0000001", name="Assistant", role=UserRole.ASSISTANT)


@pytest.fixture
def player() -> User:
    return User(id="pLayer0000000001", name="Player", role=UserRole.PLAYER)


@pytest.fixture
def facade() -> MagicMock:
    """A ``DataAccess`` double: async methods are ``AsyncMock`` children.

    Tests set return values per method and assert on await counts.
    """
    mock = MagicMock(spec=DataAccess)
    mock.host_info.return_value = {"version": "13.345", "world_id": "test-world"}
    mock.validate_state.return_value = None
    return mock


@pytest.fixture
def fake_registry(facade: MagicMock) -> QueryRegistry:
    """Registered registry over the mock facade, with a private table."""
    registry = QueryRegistry(HandlerContext(data_access=facade))
    registry.register()
    return registry


@pytest.fixture
def world(gm: User) -> InMemoryWorld:
    """Seeded in-memory world acting as *gm*."""
    w = InMemoryWorld(world_id="test-world", user=gm)
    w.seed_demo_content()
    return w


@pytest.fixture
def registry(world: InMemoryWorld) -> QueryRegistry:
    """Registered registry over the seeded in-memory world."""
    r = QueryRegistry(HandlerContext(data_access=world))
    r.register()
    return r


@pytest.fixture
def _isolated_cwd(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Run from an empty temp dir so no foundry-bridge.toml is discovered."""
    monkeypatch.delenv("FOUNDRY_BRIDGE_CONFIG", raising=False)
    monkeypatch.chdir(tmp_path)


# ---------------------------------------------------------------------------
# Shared test helpers
# ---------------------------------------------------------------------------


async def call_ok(registry: QueryRegistry, method: str, user: User, **data: Any) -> dict[str, Any]:
    """Dispatch *method*, asserting success."""
    response = await registry.dispatch(method, data, user=user)
    assert response["success"] is True, response
    return response


async def call_err(registry: QueryRegistry, method: str, user: User, **data: Any) -> str:
    """Dispatch *method*, asserting failure; return the error message."""
    response = await registry.dispatch(method, data, user=user)
    assert response["success"] is False, response
    return response["error"]


def png_bytes(width: int, height: int) -> bytes:
    """A PNG signature and IHDR chunk; enough for size detection."""
    ihdr = struct.pack(">II", width, height) + b"\x08\x06\x00\x00\x00"
    return b"\x89PNG\r\n\x1a\n" + struct.pack(">I", 13) + b"IHDR" + ihdr + b"\x00" * 4
