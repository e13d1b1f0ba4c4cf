"""MCP server integration (FastMCP, stdio)."""

from .server import create_server, main, make_handler, tool_signature

__all__ = ["create_server", "main", "make_handler", "tool_signature"]
