"""
MCP stdio server.

Exposes every registered tool over the Model Context Protocol.
Tools are automatically discovered via registry.py
"""

import logging
from typing import Any, Dict, List

from mcp import types
from mcp.server import Server
from mcp.server.stdio import stdio_server

from . import __version__
from .registry import execute_tool, get_all_tools, get_mcp_tools_schema

logger = logging.getLogger(__name__)

server = Server("coda", version=__version__)


def to_call_tool_result(envelope: Dict[str, Any]) -> types.CallToolResult:
    """Convert a tool envelope into the MCP result type."""
    return types.CallToolResult(
        content=[
            types.TextContent(type="text", text=item["text"])
            for item in envelope.get("content", [])
        ],
        isError=bool(envelope.get("isError", False)),
    )


@server.list_tools()
async def list_tools() -> List[types.Tool]:
    return [
        types.Tool(
            name=schema["name"],
            description=schema["description"],
            inputSchema=schema["inputSchema"],
        )
        for schema in get_mcp_tools_schema()
    ]


# Arguments are validated by the tools themselves so that bad input comes
# back in the same "Failed to <operation>: ..." envelope as any other failure.
@server.call_tool(validate_input=False)
async def call_tool(name: str, arguments: Dict[str, Any]) -> types.CallToolResult:
    envelope = await execute_tool(name, **(arguments or {}))
    if envelope.get("isError"):
        logger.info(f"Tool {name} returned an error")
    return to_call_tool_result(envelope)


async def run_stdio() -> None:
    """Run the MCP server on stdin/stdout."""
    tools = get_all_tools()
    logger.info(f"Coda MCP server starting with {len(tools)} tools")

    async with stdio_server() as (read_stream, write_stream):
        logger.info("Coda MCP server running on stdio")
        await server.run(
            read_stream,
            write_stream,
            server.create_initialization_options()
        )
