"""
Unit tests for the document tools.
"""

import json

import pytest

from coda_mcp.client import CodaAPIError
from coda_mcp.tools.documents import ListDocumentsTool, ResolveLinkTool


class TestListDocuments:

    @pytest.mark.asyncio
    async def test_without_query(self, mock_client, settings):
        payload = {"items": [{"id": "123", "name": "Test Document"}, {"id": "456", "name": "Another Document"}]}
        mock_client.list_docs.return_value = payload
        tool = ListDocumentsTool(client=mock_client, settings=settings)

        result = await tool.run()

        assert result == {"content": [{"type": "text", "text": json.dumps(payload)}]}
        mock_client.list_docs.assert_awaited_once_with(query=None)

    @pytest.mark.asyncio
    async def test_with_query(self, mock_client, settings):
        mock_client.list_docs.return_value = {"items": [{"id": "123", "name": "Test Document"}]}
        tool = ListDocumentsTool(client=mock_client, settings=settings)

        await tool.run(query="test")

        mock_client.list_docs.assert_awaited_once_with(query="test")

    @pytest.mark.asyncio
    async def test_error(self, mock_client, settings):
        mock_client.list_docs.side_effect = RuntimeError("foo")
        tool = ListDocumentsTool(client=mock_client, settings=settings)

        result = await tool.run(query="test")

        assert result == {
            "content": [{"type": "text", "text": "Failed to list documents: foo"}],
            "isError": True,
        }


class TestResolveLink:

    @pytest.mark.asyncio
    async def test_resolves_page_link(self, mock_client, settings):
        resource = {
            "type": "apiLink",
            "href": "https://coda.io/apis/v1/resolveBrowserLink?url=...",
            "browserLink": "https://coda.io/d/_dAbCDeFGH/Launch-Status_sumnO",
            "resource": {
                "type": "page",
                "id": "canvas-IjkLmnO",
                "name": "Launch Status",
                "href": "https://coda.io/apis/v1/docs/AbCDeFGH/pages/canvas-IjkLmnO",
            },
        }
        mock_client.resolve_browser_link.return_value = resource
        tool = ResolveLinkTool(client=mock_client, settings=settings)

        result = await tool.run(url="https://coda.io/d/_dAbCDeFGH/Launch-Status_sumnO")

        assert json.loads(result["content"][0]["text"]) == resource
        mock_client.resolve_browser_link.assert_awaited_once_with(
            "https://coda.io/d/_dAbCDeFGH/Launch-Status_sumnO"
        )

    @pytest.mark.asyncio
    async def test_empty_url_is_passed_through(self, mock_client, settings):
        mock_client.resolve_browser_link.return_value = None
        tool = ResolveLinkTool(client=mock_client, settings=settings)

        result = await tool.run(url="")

        assert result == {"content": [{"type": "text", "text": "null"}]}
        mock_client.resolve_browser_link.assert_awaited_once_with("")

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "error",
        [
            CodaAPIError(400, "Invalid URL"),
            CodaAPIError(403, "Access denied"),
            CodaAPIError(404, "Not found"),
        ],
    )
    async def test_errors(self, mock_client, settings, error):
        mock_client.resolve_browser_link.side_effect = error
        tool = ResolveLinkTool(client=mock_client, settings=settings)

        result = await tool.run(url="https://coda.io/d/bad")

        assert result == {
            "content": [{"type": "text", "text": f"Failed to resolve link: {error}"}],
            "isError": True,
        }

    @pytest.mark.asyncio
    async def test_missing_url(self, mock_client, settings):
        tool = ResolveLinkTool(client=mock_client, settings=settings)

        result = await tool.run()

        assert result["isError"] is True
        assert result["content"][0]["text"] == "Failed to resolve link: Missing required parameter: url"
        mock_client.resolve_browser_link.assert_not_awaited()
