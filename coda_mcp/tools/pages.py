"""
Coda page tools

Listing, creating, reading, updating, duplicating and renaming pages.
Page content is always exchanged as markdown canvas content. Reads go through
the export workflow in coda_mcp/export.py.
"""

import re
from typing import Any, Dict, List, Optional

from ..base import CodaTool, ExecutionError, ToolParameter

CONTENT_FORMAT = "markdown"

# Coda rejects an empty canvas body
EMPTY_PAGE_BODY = " "

_LINE_BREAK = re.compile(r"\r?\n")


def _doc_param(action: str) -> ToolParameter:
    return ToolParameter(
        name="docId",
        type="string",
        description=f"The ID of the document that contains the page to {action}",
        required=True,
    )


def _page_param(action: str) -> ToolParameter:
    return ToolParameter(
        name="pageIdOrName",
        type="string",
        description=f"The ID or name of the page to {action}",
        required=True,
    )


def canvas_page_content(content: str) -> Dict[str, Any]:
    """Page body for create calls."""
    return {
        "type": "canvas",
        "canvasContent": {"format": CONTENT_FORMAT, "content": content},
    }


def content_update(content: str, insertion_mode: str) -> Dict[str, Any]:
    """Update body for replace/append calls."""
    return {
        "contentUpdate": {
            "insertionMode": insertion_mode,
            "canvasContent": {"format": CONTENT_FORMAT, "content": content},
        }
    }


class ListPagesTool(CodaTool):
    """
    List pages of a document, one page of results at a time.

    The API fixes the page size when it issues a continuation token, so a
    given nextPageToken wins over limit and limit is not sent.
    """

    @property
    def name(self) -> str:
        return "coda_list_pages"

    @property
    def description(self) -> str:
        return "List pages in the current document with pagination"

    @property
    def operation(self) -> str:
        return "list pages"

    @property
    def parameters(self) -> List[ToolParameter]:
        return [
            ToolParameter(
                name="docId",
                type="string",
                description="The ID of the document to list pages from",
                required=True,
            ),
            ToolParameter(
                name="limit",
                type="integer",
                description="The number of pages to return - optional, defaults to 25",
                required=False,
                minimum=1,
            ),
            ToolParameter(
                name="nextPageToken",
                type="string",
                description=(
                    "The token need to get the next page of results, returned from a "
                    "previous call to this tool - optional"
                ),
                required=False,
            ),
        ]

    async def execute(self, **kwargs) -> Any:
        next_page_token: Optional[str] = kwargs.get("nextPageToken")
        limit = None if next_page_token else kwargs.get("limit")

        return await self.client.list_pages(
            kwargs["docId"],
            limit=limit,
            page_token=next_page_token or None,
        )


class CreatePageTool(CodaTool):
    """Create a page, optionally under a parent page and with markdown content."""

    @property
    def name(self) -> str:
        return "coda_create_page"

    @property
    def description(self) -> str:
        return "Create a page in the current document"

    @property
    def operation(self) -> str:
        return "create page"

    @property
    def parameters(self) -> List[ToolParameter]:
        return [
            ToolParameter(
                name="docId",
                type="string",
                description="The ID of the document to create the page in",
                required=True,
            ),
            ToolParameter(
                name="name",
                type="string",
                description="The name of the page to create",
                required=True,
            ),
            ToolParameter(
                name="content",
                type="string",
                description="The markdown content of the page to create - optional",
                required=False,
            ),
            ToolParameter(
                name="parentPageId",
                type="string",
                description="The ID of the parent page to create this page under - optional",
                required=False,
            ),
        ]

    async def execute(self, **kwargs) -> Any:
        content = kwargs.get("content")
        body: Dict[str, Any] = {
            "name": kwargs["name"],
            "pageContent": canvas_page_content(EMPTY_PAGE_BODY if content is None else content),
        }
        if kwargs.get("parentPageId") is not None:
            body["parentPageId"] = kwargs["parentPageId"]

        return await self.client.create_page(kwargs["docId"], body)


class GetPageContentTool(CodaTool):
    """Return the full content of a page as markdown."""

    @property
    def name(self) -> str:
        return "coda_get_page_content"

    @property
    def description(self) -> str:
        return "Get the content of a page as markdown"

    @property
    def operation(self) -> str:
        return "get page content"

    @property
    def parameters(self) -> List[ToolParameter]:
        return [
            _doc_param("get the content of"),
            _page_param("get the content of"),
        ]

    async def execute(self, **kwargs) -> Any:
        content = await self.fetch_markdown(kwargs["docId"], kwargs["pageIdOrName"])
        # "" is a valid (empty) page
        if content is None:
            raise ExecutionError("Unknown error has occurred", tool_name=self.name)
        return content


class PeekPageTool(CodaTool):
    """Return the first numLines lines of a page."""

    @property
    def name(self) -> str:
        return "coda_peek_page"

    @property
    def description(self) -> str:
        return "Peek into the beginning of a page and return a limited number of lines"

    @property
    def operation(self) -> str:
        return "peek page"

    @property
    def parameters(self) -> List[ToolParameter]:
        return [
            _doc_param("peek into"),
            _page_param("peek into"),
            ToolParameter(
                name="numLines",
                type="integer",
                description="The number of lines to return from the start of the page - usually 30 lines is enough",
                required=True,
                minimum=1,
            ),
        ]

    async def execute(self, **kwargs) -> Any:
        content = await self.fetch_markdown(kwargs["docId"], kwargs["pageIdOrName"])
        if content is None:
            raise ExecutionError("Unknown error has occurred", tool_name=self.name)

        lines = _LINE_BREAK.split(content)
        return "\n".join(lines[:kwargs["numLines"]])


class _UpdatePageContentTool(CodaTool):
    """Shared body for replace/append; subclasses set insertion_mode."""

    insertion_mode: str = ""

    async def execute(self, **kwargs) -> Any:
        return await self.client.update_page(
            kwargs["docId"],
            kwargs["pageIdOrName"],
            content_update(kwargs["content"], self.insertion_mode),
        )


class ReplacePageContentTool(_UpdatePageContentTool):
    insertion_mode = "replace"

    @property
    def name(self) -> str:
        return "coda_replace_page_content"

    @property
    def description(self) -> str:
        return "Replace the content of a page with new markdown content"

    @property
    def operation(self) -> str:
        return "replace page content"

    @property
    def parameters(self) -> List[ToolParameter]:
        return [
            _doc_param("replace the content of"),
            _page_param("replace the content of"),
            ToolParameter(
                name="content",
                type="string",
                description="The markdown content to replace the page with",
                required=True,
            ),
        ]


class AppendPageContentTool(_UpdatePageContentTool):
    insertion_mode = "append"

    @property
    def name(self) -> str:
        return "coda_append_page_content"

    @property
    def description(self) -> str:
        return "Append new markdown content to the end of a page"

    @property
    def operation(self) -> str:
        return "append page content"

    @property
    def parameters(self) -> List[ToolParameter]:
        return [
            _doc_param("append the content to"),
            _page_param("append the content to"),
            ToolParameter(
                name="content",
                type="string",
                description="The markdown content to append to the page",
                required=True,
            ),
        ]


class DuplicatePageTool(CodaTool):
    """
    Duplicate a page: read its markdown, then create a new page with it.

    If the read fails no page is created.
    """

    @property
    def name(self) -> str:
        return "coda_duplicate_page"

    @property
    def description(self) -> str:
        return "Duplicate a page in the current document"

    @property
    def operation(self) -> str:
        return "duplicate page"

    @property
    def parameters(self) -> List[ToolParameter]:
        return [
            _doc_param("duplicate"),
            _page_param("duplicate"),
            ToolParameter(
                name="newName",
                type="string",
                description="The name of the new page",
                required=True,
            ),
        ]

    async def execute(self, **kwargs) -> Any:
        doc_id = kwargs["docId"]
        content = await self.fetch_markdown(doc_id, kwargs["pageIdOrName"])

        return await self.client.create_page(
            doc_id,
            {"name": kwargs["newName"], "pageContent": canvas_page_content(content)},
        )


class RenamePageTool(CodaTool):
    """Rename a page."""

    @property
    def name(self) -> str:
        return "coda_rename_page"

    @property
    def description(self) -> str:
        return "Rename a page in the current document"

    @property
    def operation(self) -> str:
        return "rename page"

    @property
    def parameters(self) -> List[ToolParameter]:
        return [
            _doc_param("rename"),
            _page_param("rename"),
            ToolParameter(
                name="newName",
                type="string",
                description="The new name of the page",
                required=True,
            ),
        ]

    async def execute(self, **kwargs) -> Any:
        return await self.client.update_page(
            kwargs["docId"],
            kwargs["pageIdOrName"],
            {"name": kwargs["newName"]},
        )


__all__ = [
    "ListPagesTool",
    "CreatePageTool",
    "GetPageContentTool",
    "PeekPageTool",
    "ReplacePageContentTool",
    "AppendPageContentTool",
    "DuplicatePageTool",
    "RenamePageTool",
]
