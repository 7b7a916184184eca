"""Rx Sheet Coach MCP server package."""

from .server import SheetManager, create_mcp_server, main

__all__ = ["SheetManager", "create_mcp_server", "main"]
