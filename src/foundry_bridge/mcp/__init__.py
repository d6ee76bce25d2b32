"""MCP front end (requires the ``mcp`` extra)."""
