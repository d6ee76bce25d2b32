"""serve: start the MCP server (requires foundry-bridge[mcp] extra)."""

from __future__ import annotations

import click

from foundry_bridge.commands._base import BridgeCommand


@click.command(
    cls=BridgeCommand,
    examples="""\
  # Start the MCP server (stdio transport, default)
  foundry-bridge serve

  # Streamable HTTP on custom host/port
  foundry-bridge serve --transport streamable-http --host 0.0.0.0 --port 9000

  # SSE transport on default address
  foundry-bridge serve --transport sse""",
)
@click.option(
    "--transport",
    default=None,
    type=click.Choice(["stdio", "sse", "streamable-http"]),
    help="MCP transport protocol (default from [mcp] transport).",
)
@click.option("--host", default="127.0.0.1", help="Bind address (HTTP transports only).")
@click.option("--port", default=8000, type=int, help="Listen port (HTTP transports only).")
@click.pass_obj
def serve(app: object, transport: str | None, host: str, port: int) -> None:
    """Start the MCP server (requires foundry-bridge[mcp] extra)."""
    from foundry_bridge.mcp.server import create_server, mcp_available

    if not mcp_available:
        click.echo("MCP not installed. Install with: pip install foundry-bridge[mcp]", err=True)
        raise SystemExit(1)

    from foundry_bridge.commands._context import AppContext

    assert isinstance(app, AppContext)
    if not app.settings.mcp.enabled:
        click.echo("MCP server is disabled ([mcp] enabled = false).", err=True)
        raise SystemExit(1)

    server = create_server(app.settings, host=host, port=port)
    server.run(transport=transport or app.settings.mcp.transport)
