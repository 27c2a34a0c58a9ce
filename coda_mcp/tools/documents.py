"""
Coda document tools

- coda_list_documents: list or search the documents the token can see
- coda_resolve_link: resolve a browser link to the object it points at
"""

from typing import Any, List

from ..base import CodaTool, ToolParameter


class ListDocumentsTool(CodaTool):
    """List or search available documents."""

    @property
    def name(self) -> str:
        return "coda_list_documents"

    @property
    def description(self) -> str:
        return "List or search available documents"

    @property
    def operation(self) -> str:
        return "list documents"

    @property
    def parameters(self) -> List[ToolParameter]:
        return [
            ToolParameter(
                name="query",
                type="string",
                description="The query to search for documents by - optional",
                required=False,
            ),
        ]

    async def execute(self, **kwargs) -> Any:
        return await self.client.list_docs(query=kwargs.get("query"))


class ResolveLinkTool(CodaTool):
    """
    Resolve metadata (id, type, name, canonical link) for a browser URL.

    The URL is passed through as given, an empty string included; the API
    decides whether it resolves.
    """

    @property
    def name(self) -> str:
        return "coda_resolve_link"

    @property
    def description(self) -> str:
        return "Resolve metadata given a browser link to a Coda object"

    @property
    def operation(self) -> str:
        return "resolve link"

    @property
    def parameters(self) -> List[ToolParameter]:
        return [
            ToolParameter(
                name="url",
                type="string",
                description="The URL to resolve",
                required=True,
            ),
        ]

    async def execute(self, **kwargs) -> Any:
        return await self.client.resolve_browser_link(kwargs["url"])


__all__ = ["ListDocumentsTool", "ResolveLinkTool"]
