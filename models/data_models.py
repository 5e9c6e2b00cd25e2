"""Core data models for the tool server."""

import asyncio
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, Optional, Type, Union

from mcp.types import Tool
from pydantic import BaseModel

RequestId = Union[str, int, float, None]


@dataclass
class SessionState:
    """Process-wide mutable state shared by every tool invocation.

    ``counter`` is only read or written while ``lock`` is held.
    """

    counter: int = 0
    lock: asyncio.Lock = field(default_factory=asyncio.Lock, repr=False, compare=False)

    async def increment(self) -> int:
        """Add one to the counter and return the new value."""
        async with self.lock:
            self.counter += 1
            return self.counter

    async def snapshot(self) -> int:
        """Read the counter under the lock."""
        async with self.lock:
            return self.counter


ToolHandler = Callable[[BaseModel, SessionState], Awaitable[Any]]


@dataclass(frozen=True)
class ToolDescriptor:
    """A registered tool: its public shape and the coroutine that runs it."""

    name: str
    description: str
    arguments_model: Type[BaseModel]
    handler: ToolHandler

    def __post_init__(self):
        """Validate descriptor fields."""
        if not self.name or not self.name.strip():
            raise ValueError("Tool name cannot be empty")

    @property
    def input_schema(self) -> Dict[str, Any]:
        """JSON Schema generated from the arguments model."""
        return self.arguments_model.model_json_schema()

    def to_tool(self) -> Tool:
        """Convert to the MCP ``Tool`` listing entry."""
        return Tool(name=self.name, description=self.description, inputSchema=self.input_schema)

    def __str__(self) -> str:
        return self.name


@dataclass
class ToolCallRequest:
    """A decoded ``tools/call`` request."""

    tool_name: str
    arguments: Dict[str, Any] = field(default_factory=dict)
    id: RequestId = None

    @classmethod
    def from_params(cls, params: Optional[Dict[str, Any]], request_id: RequestId = None) -> "ToolCallRequest":
        """Build from JSON-RPC ``params``.

        Raises:
            ValueError: If ``name`` is missing or ``arguments`` is not an object
        """
        if not isinstance(params, dict):
            raise ValueError("tools/call params must be an object")

        name = params.get("name")
        if not isinstance(name, str) or not name:
            raise ValueError("tools/call params.name must be a non-empty string")

        arguments = params.get("arguments")
        if arguments is None:
            arguments = {}
        if not isinstance(arguments, dict):
            raise ValueError("tools/call params.arguments must be an object")

        return cls(tool_name=name, arguments=arguments, id=request_id)
