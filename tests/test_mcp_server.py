"""Tests for the MCP tool handlers."""

import sqlite3
from contextlib import closing

import pytest

from jotter.config import get_db_path

from jotter_mcp.server import call_tool, list_tools, tool_add, tool_list


@pytest.mark.asyncio
async def test_tools_are_listed() -> None:
    names = [tool.name for tool in await list_tools()]

    assert names == ["jotter_add", "jotter_list"]


@pytest.mark.asyncio
async def test_add_then_list() -> None:
    first = await tool_add({"note": "Buy milk"})
    await tool_add({"note": "Call the bank"})

    assert first[0].text == "Saved: 1"

    newest = (await tool_list({}))[0].text
    oldest = (await tool_list({"sort": "oldest"}))[0].text

    assert "Notes (2)" in newest
    assert oldest.index("Buy milk") < oldest.index("Call the bank")
    assert "\033[" not in newest


@pytest.mark.asyncio
async def test_add_blank_note() -> None:
    result = await tool_add({"note": "  "})

    assert result[0].text == "Error: Add note to save!"


@pytest.mark.asyncio
async def test_unknown_tool() -> None:
    result = await call_tool("jotter_delete", {})

    assert result[0].text == "Unknown tool: jotter_delete"


@pytest.mark.asyncio
async def test_storage_error_is_reported_as_text() -> None:
    await tool_add({"note": "Buy milk"})
    with closing(sqlite3.connect(get_db_path())) as conn:
        conn.execute("DROP TABLE notes")
        conn.commit()

    result = await call_tool("jotter_list", {})

    assert result[0].text.startswith("Error: Error fetching notes")
