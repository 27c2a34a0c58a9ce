"""
Tests for tool discovery, schemas and dispatch.
"""

from unittest.mock import AsyncMock, patch

import pytest

from coda_mcp.client import CodaClient
from coda_mcp.registry import (
    execute_tool,
    get_all_tools,
    get_mcp_tools_schema,
    get_tool,
    get_tools_by_category,
    list_tool_names,
)

EXPECTED_TOOLS = [
    "coda_list_documents",
    "coda_resolve_link",
    "coda_list_pages",
    "coda_create_page",
    "coda_get_page_content",
    "coda_peek_page",
    "coda_replace_page_content",
    "coda_append_page_content",
    "coda_duplicate_page",
    "coda_rename_page",
]


@pytest.fixture(autouse=True)
def _env(coda_env):
    yield


def test_discovers_all_tools_in_order():
    assert list_tool_names() == EXPECTED_TOOLS


def test_get_tool():
    definition = get_tool("coda_peek_page")

    assert definition is not None
    assert definition.category == "coda"
    assert [p.name for p in definition.parameters] == ["docId", "pageIdOrName", "numLines"]
    assert get_tool("nope") is None


def test_category_lookup():
    assert list(get_tools_by_category("coda")) == EXPECTED_TOOLS
    assert get_tools_by_category("other") == {}


def test_get_all_tools_returns_copy():
    tools = get_all_tools()
    tools.clear()

    assert len(get_all_tools()) == len(EXPECTED_TOOLS)


def test_input_schemas():
    schemas = {s["name"]: s for s in get_mcp_tools_schema()}

    list_pages = schemas["coda_list_pages"]["inputSchema"]
    assert list_pages["type"] == "object"
    assert list_pages["required"] == ["docId"]
    assert list_pages["properties"]["limit"] == {
        "type": "integer",
        "description": "The number of pages to return - optional, defaults to 25",
        "minimum": 1,
    }

    list_docs = schemas["coda_list_documents"]["inputSchema"]
    assert "required" not in list_docs
    assert list_docs["properties"]["query"]["type"] == "string"


@pytest.mark.asyncio
async def test_execute_unknown_tool():
    result = await execute_tool("coda_delete_everything")

    assert result == {
        "content": [{"type": "text", "text": "Failed to execute tool: Tool not found: coda_delete_everything"}],
        "isError": True,
    }


@pytest.mark.asyncio
async def test_execute_dispatches_with_env_client():
    with patch.object(CodaClient, "list_pages", new_callable=AsyncMock) as list_pages:
        list_pages.return_value = {"items": []}

        result = await execute_tool("coda_list_pages", docId="doc-1", limit=5, nextPageToken="tok")

    assert result == {"content": [{"type": "text", "text": '{"items": []}'}]}
    list_pages.assert_awaited_once_with("doc-1", limit=None, page_token="tok")


@pytest.mark.asyncio
async def test_execute_without_credentials(monkeypatch):
    from coda_mcp.config import get_settings
    from coda_mcp.registry import reset_registry

    monkeypatch.delenv("API_KEY")
    get_settings.cache_clear()
    reset_registry()

    result = await execute_tool("coda_list_documents")

    assert result["isError"] is True
    assert result["content"][0]["text"] == "Failed to list documents: API_KEY environment variable is not set"


@pytest.mark.asyncio
async def test_execute_accepts_name_argument():
    with patch.object(CodaClient, "create_page", new_callable=AsyncMock) as create_page:
        create_page.return_value = {"id": "page-789"}

        result = await execute_tool("coda_create_page", docId="doc-1", name="New Page")

    assert result == {"content": [{"type": "text", "text": '{"id": "page-789"}'}]}
    assert create_page.await_args.args[1]["name"] == "New Page"


def test_discovery_does_not_read_source(monkeypatch):
    from coda_mcp.registry import reset_registry

    def no_source(obj):
        raise OSError("could not get source code")

    monkeypatch.setattr("inspect.getsourcelines", no_source)
    monkeypatch.setattr("inspect.getsource", no_source)
    reset_registry()

    assert list_tool_names() == EXPECTED_TOOLS
