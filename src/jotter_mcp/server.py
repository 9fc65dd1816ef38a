"""
MCP Server for Jotter.

Exposes note capture and listing as tools for MCP clients.
"""

import logging

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import Tool, TextContent

# Import jotter modules
from jotter.config import ensure_dirs
from jotter.errors import JotterError
from jotter.models import parse_directive
from jotter.session import NoteSession, SaveOutcome
from jotter.surfacing import format_display

logger = logging.getLogger(__name__)

# Create MCP server
server = Server("jotter")


@server.list_tools()
async def list_tools() -> list[Tool]:
    """List available tools."""
    return [
        Tool(
            name="jotter_add",
            description="Save a note to the local jotter note pad.",
            inputSchema={
                "type": "object",
                "properties": {
                    "note": {
                        "type": "string",
                        "description": "The note text",
                    },
                },
                "required": ["note"],
            },
        ),
        Tool(
            name="jotter_list",
            description="List all saved notes, newest first unless another order is given.",
            inputSchema={
                "type": "object",
                "properties": {
                    "sort": {
                        "type": "string",
                        "description": "Display order (default: the saved preference)",
                        "enum": ["newest", "oldest"],
                    },
                },
            },
        ),
    ]


@server.call_tool()
async def call_tool(name: str, arguments: dict) -> list[TextContent]:
    """Handle tool calls."""
    try:
        if name == "jotter_add":
            return await tool_add(arguments)
        elif name == "jotter_list":
            return await tool_list(arguments)
        else:
            return [TextContent(type="text", text=f"Unknown tool: {name}")]
    except JotterError as e:
        return [TextContent(type="text", text=f"Error: {e}")]
    except Exception as e:
        logger.exception("Tool %s failed", name)
        return [TextContent(type="text", text=f"Error: {e}")]


async def tool_add(args: dict) -> list[TextContent]:
    """Save a note."""
    notices: list[str] = []
    ensure_dirs()

    session = NoteSession(notify=notices.append)
    try:
        await session.store.open()
        outcome = await session.save(args.get("note", ""))
    finally:
        session.close()

    if outcome is SaveOutcome.SAVED:
        return [TextContent(type="text", text=f"Saved: {session.last_saved_id}")]
    return [TextContent(type="text", text=f"Error: {' '.join(notices)}")]


async def tool_list(args: dict) -> list[TextContent]:
    """List notes."""
    directive = parse_directive(args["sort"]) if args.get("sort") else None

    session = NoteSession()
    try:
        await session.store.open()
        if directive is None:
            directive = session.sort_preference.get()
        display = await session.refresh(directive)
    finally:
        session.close()

    return [TextContent(type="text", text=format_display(display, plain=True))]


async def run() -> None:
    """Run the MCP server."""
    async with stdio_server() as (read_stream, write_stream):
        await server.run(read_stream, write_stream, server.create_initialization_options())


def main() -> None:
    """Console entry point."""
    import asyncio
    asyncio.run(run())


if __name__ == "__main__":
    main()
