"""
MCP Server for filegate.

Exposes the guarded file readers over the Model Context Protocol (stdio).

The implementation is split across submodules:
- mcp/context.py: MCPContext dataclass and factory function
- mcp/tools.py: Tool definitions and schemas
- mcp/handlers.py: Tool handler implementations
"""

import asyncio
import logging
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

# Load .env before the config is read so FILEGATE_* overrides apply
if not load_dotenv():
    _env_file = Path(__file__).parent.parent.parent / ".env"  # src/filegate -> project root
    if _env_file.exists():
        load_dotenv(_env_file)

from mcp.server import Server
from mcp.server.stdio import stdio_server

from filegate.core.config import configure_logging
from filegate.mcp.context import MCPContext, create_mcp_context
from filegate.mcp.handlers import call_tool
from filegate.mcp.tools import list_tools

__all__ = ["app", "list_tools", "call_tool", "main"]

logger = logging.getLogger(__name__)

# Initialize MCP server
app = Server("filegate-mcp-server")

# Module-level context, created at startup
_ctx: MCPContext | None = None


@app.list_tools()
async def _list_tools():
    """List available MCP tools."""
    return list_tools()


@app.call_tool()
async def _call_tool(name: str, arguments):
    """Handle tool calls from MCP clients."""
    return await call_tool(name, arguments, _ctx)


async def _run_server():
    """Run the MCP server (async implementation)."""
    global _ctx

    _ctx = create_mcp_context(os.environ.get("FILEGATE_CONFIG") or None)
    # stdout carries the protocol; logs must go to stderr
    configure_logging(_ctx.config.logging, stream=sys.stderr)
    logger.info(f"Starting filegate MCP server in {Path.cwd()}")

    try:
        async with stdio_server() as (read_stream, write_stream):
            await app.run(read_stream, write_stream, app.create_initialization_options())
    finally:
        _ctx = None


def main():
    """Entry point for the MCP server."""
    asyncio.run(_run_server())


if __name__ == "__main__":
    main()
