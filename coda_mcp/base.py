"""
MCP Tool Base Classes

Provides common validation and error handling for all MCP tools.
Every tool call returns the same envelope:

    {"content": [{"type": "text", "text": "..."}], "isError": True}  # isError only on failure
"""

import json
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from .client import CodaClient
from .config import Settings, get_settings
from .export import fetch_page_markdown

logger = logging.getLogger(__name__)

# JSON schema type name -> accepted Python types
_JSON_TYPES = {
    "string": (str,),
    "integer": (int,),
    "number": (int, float),
    "boolean": (bool,),
    "array": (list,),
    "object": (dict,),
}


@dataclass
class ToolParameter:
    """Definition of a tool parameter."""
    name: str
    type: str
    description: str
    required: bool = True
    default: Any = None
    minimum: Optional[int] = None


@dataclass
class ToolDefinition:
    """Complete definition of an MCP tool."""
    name: str
    description: str
    parameters: List[ToolParameter] = field(default_factory=list)
    handler: Optional[Callable] = None
    category: str = "general"


class MCPToolError(Exception):
    """Base exception for MCP tool errors."""
    def __init__(self, message: str, tool_name: str = None, details: Dict = None):
        self.message = message
        self.tool_name = tool_name
        self.details = details or {}
        super().__init__(self.message)


class ValidationError(MCPToolError):
    """Raised when tool input validation fails."""
    pass


class ExecutionError(MCPToolError):
    """Raised when tool execution fails."""
    pass


def text_result(text: str) -> Dict[str, Any]:
    return {"content": [{"type": "text", "text": text}]}


def error_result(operation: str, error: Any) -> Dict[str, Any]:
    return {
        "content": [{"type": "text", "text": f"Failed to {operation}: {error}"}],
        "isError": True,
    }


def _matches_type(value: Any, type_name: str) -> bool:
    expected = _JSON_TYPES.get(type_name)
    if expected is None:
        return True
    # bool is an int subclass; never accept it where a number is declared
    if isinstance(value, bool) and type_name != "boolean":
        return False
    return isinstance(value, expected)


class MCPTool(ABC):
    """
    Abstract base class for MCP tools.

    All tools must inherit from this class and implement:
    - name: Tool identifier
    - description: What the tool does
    - operation: Phrase used in failure messages ("Failed to <operation>: ...")
    - parameters: List of ToolParameter definitions
    - execute(): The actual tool logic
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Unique identifier for the tool."""
        pass

    @property
    @abstractmethod
    def description(self) -> str:
        """Human-readable description of what the tool does."""
        pass

    @property
    @abstractmethod
    def operation(self) -> str:
        pass

    @property
    def parameters(self) -> List[ToolParameter]:
        """List of parameters the tool accepts."""
        return []

    @property
    def category(self) -> str:
        """Category for grouping tools."""
        return "general"

    def validate(self, **kwargs) -> Dict[str, Any]:
        """
        Validate input parameters.
        Returns validated/normalized parameters; absent optional values are
        the declared default (None unless stated). Unknown keys are dropped.
        Raises ValidationError if validation fails.
        """
        validated = {}

        for param in self.parameters:
            value = kwargs.get(param.name)

            if value is None:
                if param.required:
                    raise ValidationError(
                        f"Missing required parameter: {param.name}",
                        tool_name=self.name
                    )
                validated[param.name] = param.default
                continue

            if not _matches_type(value, param.type):
                raise ValidationError(
                    f"Parameter {param.name} must be of type {param.type}",
                    tool_name=self.name
                )

            if param.minimum is not None and value < param.minimum:
                raise ValidationError(
                    f"Parameter {param.name} must be >= {param.minimum}",
                    tool_name=self.name
                )

            validated[param.name] = value

        return validated

    @abstractmethod
    async def execute(self, **kwargs) -> Any:
        """
        Execute the tool with given parameters.
        Return a str to send it verbatim, anything else is sent as JSON.
        """
        pass

    async def run(self, **kwargs) -> Dict[str, Any]:
        """
        Public entry point: validate and execute.
        Returns the result envelope and never raises.
        """
        try:
            validated = self.validate(**kwargs)
            result = await self.execute(**validated)
            if isinstance(result, str):
                return text_result(result)
            return text_result(json.dumps(result))
        except ValidationError as e:
            logger.warning(f"Validation error in {self.name}: {e.message}")
            return error_result(self.operation, e.message)
        except Exception as e:
            logger.error(f"Error in {self.name}: {e}")
            return error_result(self.operation, e)

    def to_definition(self) -> ToolDefinition:
        """Convert tool to ToolDefinition for registry."""
        return ToolDefinition(
            name=self.name,
            description=self.description,
            parameters=self.parameters,
            handler=self.run,
            category=self.category
        )


class CodaTool(MCPTool):
    """
    Base for tools backed by the Coda API.

    A client and settings may be injected; otherwise both are built from the
    environment when the tool runs.
    """

    def __init__(self, client: Optional[CodaClient] = None, settings: Optional[Settings] = None):
        self._client = client
        self._settings = settings

    @property
    def category(self) -> str:
        return "coda"

    @property
    def settings(self) -> Settings:
        if self._settings is None:
            self._settings = get_settings()
        return self._settings

    @property
    def client(self) -> CodaClient:
        if self._client is None:
            self._client = CodaClient.from_settings(self.settings)
        return self._client

    async def fetch_markdown(self, doc_id: str, page_id_or_name: str) -> str:
        return await fetch_page_markdown(
            self.client,
            doc_id,
            page_id_or_name,
            poll_interval=self.settings.poll_interval,
            max_attempts=self.settings.max_poll_attempts,
        )
