"""Errors raised by the tool server, each mapped to a JSON-RPC error code."""

from typing import Optional

from mcp.shared.exceptions import McpError
from mcp.types import INVALID_PARAMS, INVALID_REQUEST, METHOD_NOT_FOUND, ErrorData
from pydantic import ValidationError


class InvalidRequestError(McpError):
    """The message is not a valid JSON-RPC 2.0 request."""

    def __init__(self, message: str = "Invalid Request"):
        super().__init__(ErrorData(code=INVALID_REQUEST, message=message))


class MethodNotFoundError(McpError):
    """The JSON-RPC method is not served."""

    def __init__(self, method: str):
        super().__init__(ErrorData(code=METHOD_NOT_FOUND, message=f"Method not found: {method}"))
        self.method = method


class ToolNotFoundError(McpError):
    """The requested tool is not in the registry."""

    def __init__(self, name: str):
        super().__init__(ErrorData(code=METHOD_NOT_FOUND, message=f"Tool not found: {name}"))
        self.tool_name = name


class InvalidArgumentsError(McpError):
    """Parameters or tool arguments failed validation."""

    def __init__(self, message: str, tool_name: Optional[str] = None):
        super().__init__(ErrorData(code=INVALID_PARAMS, message=message))
        self.tool_name = tool_name

    @classmethod
    def from_validation_error(cls, tool_name: str, exc: ValidationError) -> "InvalidArgumentsError":
        """Summarise a pydantic ValidationError, one clause per failing field."""
        problems = []
        for error in exc.errors():
            location = ".".join(str(part) for part in error["loc"]) or "arguments"
            problems.append(f"{location}: {error['msg']}")
        return cls(f"Invalid arguments for tool '{tool_name}': " + "; ".join(problems), tool_name)


class DuplicateToolError(ValueError):
    """A tool name was registered twice. Fatal at startup."""

    def __init__(self, name: str):
        super().__init__(f"Tool '{name}' is already registered")
        self.tool_name = name
