"""
MCP (Model Context Protocol) server package for filegate.

This package exposes the guarded file readers as MCP tools.
"""

from filegate.mcp.context import MCPContext, create_mcp_context
from filegate.mcp.handlers import call_tool
from filegate.mcp.tools import list_tools

__all__ = [
    "MCPContext",
    "create_mcp_context",
    "list_tools",
    "call_tool",
]
