"""MCP server exposing the daily thread export as a tool."""
from __future__ import annotations

import logging
from typing import Any

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import TextContent, Tool

from rdt.config import Settings
from rdt.jsonrpc import SERVER_NAME, TOOL_NAME, fetch_daily_threads, tool_definition

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Lazy singleton settings
# ---------------------------------------------------------------------------

_settings: Settings | None = None


def _get_settings() -> Settings:
    """Return (or load) the shared :class:`Settings`."""
    global _settings  # noqa: PLW0603
    if _settings is None:
        _settings = Settings.load()
    return _settings


# ---------------------------------------------------------------------------
# Tool handlers
# ---------------------------------------------------------------------------


async def _handle_fetch_daily_threads(arguments: dict[str, Any]) -> list[TextContent]:
    """Handle the ``fetch_reddit_daily_threads`` tool call."""
    text = fetch_daily_threads(arguments, _get_settings())
    return [TextContent(type="text", text=text)]


_TOOL_HANDLERS = {
    TOOL_NAME: _handle_fetch_daily_threads,
}


# ---------------------------------------------------------------------------
# Server factory
# ---------------------------------------------------------------------------


def create_server() -> Server:
    """Build and return a configured MCP :class:`Server`."""
    server = Server(SERVER_NAME)

    @server.list_tools()
    async def list_tools() -> list[Tool]:
        return [Tool(**tool_definition(_get_settings().subreddits))]

    @server.call_tool()
    async def call_tool(name: str, arguments: dict[str, Any]) -> list[TextContent]:
        handler = _TOOL_HANDLERS.get(name)
        if handler is None:
            return [TextContent(type="text", text=f"Unknown tool: {name}")]
        return await handler(arguments)

    return server


# ---------------------------------------------------------------------------
# Stdio runner
# ---------------------------------------------------------------------------


async def run_stdio() -> None:
    """Run the MCP server over stdio transport."""
    server = create_server()
    options = server.create_initialization_options()
    logger.info("Starting %s on stdio", SERVER_NAME)
    async with stdio_server() as (read_stream, write_stream):
        await server.run(read_stream, write_stream, options)
