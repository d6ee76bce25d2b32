"""FastMCP server setup.

Optional extra, guarded behind try/except ImportError.
Transport: stdio default, SSE and streamable HTTP optional.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from foundry_bridge.config.settings import BridgeSettings

mcp_available = False
_FastMCP: Any = None

try:
    from mcp.server.fastmcp import FastMCP as _FastMCP  # type: ignore[no-redef,import-not-found]

    mcp_available = True
except ImportError:
    pass

__all__ = ["create_server", "mcp_available"]


def create_server(
    settings: BridgeSettings | None = None,
    *,
    host: str = "127.0.0.1",
    port: int = 8000,
) -> Any:
    """Create and configure the MCP server.

    Loads the host facade named by *settings* (discovered from CWD when
    omitted), registers the operation catalog, and registers all tools.
    Returns the FastMCP instance.

    *host* and *port* configure the bind address for HTTP transports
    (sse, streamable-http). They are ignored when using stdio.

    Raises RuntimeError if the mcp extra is not installed.
    """
    if not mcp_available or _FastMCP is None:
        msg = "MCP extra not installed. Install with: pip install foundry-bridge[mcp]"
        raise RuntimeError(msg)

    from foundry_bridge.config.settings import BridgeSettings
    from foundry_bridge.mcp.tools import register_tools
    from foundry_bridge.queries.registry import QueryRegistry

    if settings is None:
        settings = BridgeSettings.from_cli()
    registry = QueryRegistry.from_settings(settings)
    registry.register()

    server = _FastMCP("foundry-bridge", host=host, port=port)
    register_tools(server, registry, registry.data_access)
    return server
