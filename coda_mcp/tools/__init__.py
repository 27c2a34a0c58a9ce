"""
MCP Tools Package

All tools in this directory are auto-discovered by registry.py.
Each tool inherits from CodaTool (or MCPTool) and implements the
required properties and execute().
"""

# Tools are auto-discovered, no explicit imports needed
