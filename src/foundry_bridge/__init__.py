"""foundry-bridge: expose Foundry VTT world operations to MCP tool callers."""

__version__ = "0.4.0"

MODULE_ID = "foundry-mcp-bridge"
