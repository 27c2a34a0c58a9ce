"""
HTTP API surface

Same tools as the stdio server, exposed over plain HTTP for agents that do not
speak MCP. Run with:
  python -m coda_mcp --transport http
"""

import logging
from contextlib import asynccontextmanager
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel

from . import __version__
from .registry import (
    execute_tool,
    get_all_tools,
    get_input_schema,
    get_mcp_tools_schema,
    list_tool_names,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    tools = get_all_tools()
    logger.info(f"Coda MCP HTTP server starting with {len(tools)} tools")
    for name in tools:
        logger.info(f"  - {name}")

    yield

    logger.info("Coda MCP HTTP server shutting down")


app = FastAPI(
    title="Coda MCP Server",
    description="Coda document tools over HTTP",
    version=__version__,
    lifespan=lifespan,
)


class ToolRequest(BaseModel):
    """Request body for tool execution."""

    arguments: Dict[str, Any] = {}


class TextContent(BaseModel):
    type: str = "text"
    text: str


class ToolResponse(BaseModel):
    """Response from tool execution."""

    content: List[TextContent]
    isError: Optional[bool] = None


# ============== API Endpoints ==============


@app.get("/health")
async def health():
    return {"status": "healthy", "tools_loaded": len(list_tool_names())}


@app.get("/tools")
async def list_tools():
    tools = get_all_tools()
    return {
        "total": len(tools),
        "tools": [
            {
                "name": name,
                "description": tool.description,
                "category": tool.category,
                "parameters": [
                    {
                        "name": p.name,
                        "type": p.type,
                        "description": p.description,
                        "required": p.required,
                    }
                    for p in tool.parameters
                ],
            }
            for name, tool in tools.items()
        ],
    }


@app.get("/tools/schema")
async def get_tools_schema():
    return {"tools": get_mcp_tools_schema()}


@app.get("/tools/{tool_name}")
async def get_tool_info(tool_name: str):
    tools = get_all_tools()
    if tool_name not in tools:
        raise HTTPException(status_code=404, detail=f"Tool not found: {tool_name}")

    tool = tools[tool_name]
    return {
        "name": tool.name,
        "description": tool.description,
        "category": tool.category,
        "inputSchema": get_input_schema(tool),
    }


@app.post("/tools/{tool_name}/execute", response_model=ToolResponse, response_model_exclude_none=True)
async def execute_tool_endpoint(tool_name: str, request: ToolRequest):
    result = await execute_tool(tool_name, **request.arguments)
    return ToolResponse(**result)
