"""
MCP Tool Registry

Single Source of Truth (SSOT) for tool discovery and collection.
Automatically discovers and registers all tools from coda_mcp/tools/.
"""

import importlib
import inspect
import logging
import pkgutil
from pathlib import Path
from typing import Any, Dict, List, Optional

from .base import MCPTool, ToolDefinition, error_result

logger = logging.getLogger(__name__)

# Global registry
_tool_registry: Dict[str, ToolDefinition] = {}
_initialized: bool = False


def _defined_in(module) -> List[type]:
    """Concrete MCPTool subclasses defined in a module, in definition order."""
    # module namespace keeps insertion order, so no source access is needed
    return [
        obj
        for obj in vars(module).values()
        if inspect.isclass(obj)
        and issubclass(obj, MCPTool)
        and obj.__module__ == module.__name__
        and not inspect.isabstract(obj)
    ]


def _discover_tools() -> None:
    """
    Discover and register all tools from coda_mcp/tools/.
    This is the ONLY place where tools are collected.
    """
    global _tool_registry, _initialized

    if _initialized:
        return

    tools_package = f"{__package__}.tools"
    tools_path = Path(__file__).parent / "tools"

    # sorted for a stable tool order
    for _, module_name, _ in sorted(pkgutil.iter_modules([str(tools_path)]), key=lambda m: m.name):
        if module_name.startswith("_"):
            continue

        full_module_name = f"{tools_package}.{module_name}"
        module = importlib.import_module(full_module_name)
        logger.debug(f"Loaded tool module: {full_module_name}")

        for cls in _defined_in(module):
            definition = cls().to_definition()
            if definition.name in _tool_registry:
                raise ValueError(f"Duplicate tool name: {definition.name}")
            _tool_registry[definition.name] = definition
            logger.info(f"Registered tool: {definition.name} ({module_name})")

    _initialized = True
    logger.info(f"Tool discovery complete. Total tools: {len(_tool_registry)}")


def get_all_tools() -> Dict[str, ToolDefinition]:
    """
    Get all registered tools.
    This is the public API for accessing tools.
    """
    _discover_tools()
    return _tool_registry.copy()


def get_tool(name: str) -> Optional[ToolDefinition]:
    """
    Get a specific tool by name.
    Returns None if tool not found.
    """
    _discover_tools()
    return _tool_registry.get(name)


def get_tools_by_category(category: str) -> Dict[str, ToolDefinition]:
    """Get all tools in a specific category."""
    _discover_tools()
    return {
        name: tool
        for name, tool in _tool_registry.items()
        if tool.category == category
    }


def list_tool_names() -> List[str]:
    """Get list of all registered tool names."""
    _discover_tools()
    return list(_tool_registry.keys())


def get_input_schema(definition: ToolDefinition) -> Dict[str, Any]:
    """JSON schema for a tool's arguments."""
    properties: Dict[str, Dict[str, Any]] = {}
    required: List[str] = []

    for param in definition.parameters:
        prop: Dict[str, Any] = {
            "type": param.type,
            "description": param.description,
        }
        if param.minimum is not None:
            prop["minimum"] = param.minimum
        if param.default is not None:
            prop["default"] = param.default

        properties[param.name] = prop

        if param.required:
            required.append(param.name)

    schema: Dict[str, Any] = {"type": "object", "properties": properties}
    if required:
        schema["required"] = required
    return schema


def get_mcp_tools_schema() -> List[Dict[str, Any]]:
    """
    Get all tools as MCP tool descriptors (name, description, inputSchema).
    """
    _discover_tools()
    return [
        {
            "name": name,
            "description": definition.description,
            "inputSchema": get_input_schema(definition),
        }
        for name, definition in _tool_registry.items()
    ]


async def execute_tool(name: str, /, **kwargs) -> Dict[str, Any]:
    """
    Execute a tool by name with given arguments.
    Returns the result envelope.
    """
    tool = get_tool(name)

    if tool is None:
        return error_result("execute tool", f"Tool not found: {name}")

    if tool.handler is None:
        return error_result("execute tool", f"Tool has no handler: {name}")

    return await tool.handler(**kwargs)


def reset_registry() -> None:
    """Reset the registry (mainly for testing)."""
    global _tool_registry, _initialized
    _tool_registry = {}
    _initialized = False
