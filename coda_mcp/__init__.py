"""
Coda MCP server

Exposes Coda documents and pages as MCP tools.
All tools are auto-discovered via registry.py
"""

__version__ = "1.2.0"

from .base import CodaTool, MCPTool  # noqa: E402
from .registry import execute_tool, get_all_tools, get_tool  # noqa: E402

__all__ = ["CodaTool", "MCPTool", "execute_tool", "get_all_tools", "get_tool", "__version__"]
