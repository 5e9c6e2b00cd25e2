"""JSON-RPC 2.0 dispatcher for the MCP tool methods.

Transport-independent: the stdio loop and the HTTP route both hand it decoded
messages and write back whatever envelope it returns.

Error mapping:
    -32700  body is not JSON (``handle_raw`` only)
    -32600  not a JSON-RPC 2.0 request object
    -32601  unknown method, or unknown tool in ``tools/call``
    -32602  malformed ``tools/call`` params or arguments failing the tool's model
    -32603  unexpected failure inside the dispatcher itself

A tool handler that raises is *not* a JSON-RPC error: the call succeeds at the
protocol level with ``isError: true`` and a text block describing the failure,
so MCP clients see it as a tool result. -32603 stays reserved for the
dispatcher's own failures.

A message without ``id`` is a notification only if its envelope is valid;
malformed messages always get a -32600 reply.
"""

import json
import logging
from typing import Any, Dict, List, Optional, Union

from mcp.shared.exceptions import McpError
from mcp.shared.version import SUPPORTED_PROTOCOL_VERSIONS
from mcp.types import (
    INTERNAL_ERROR,
    LATEST_PROTOCOL_VERSION,
    PARSE_ERROR,
    CallToolResult,
    ErrorData,
    Implementation,
    InitializeResult,
    ListToolsResult,
    ServerCapabilities,
    TextContent,
    ToolsCapability,
)
from pydantic import BaseModel, ValidationError

from mcp_server.errors import (
    InvalidArgumentsError,
    InvalidRequestError,
    MethodNotFoundError,
)
from mcp_server.registry import ToolRegistry
from models.data_models import RequestId, SessionState, ToolCallRequest

logger = logging.getLogger(__name__)

JSONRPC_VERSION = "2.0"

DEFAULT_INSTRUCTIONS = (
    "A minimal MCP tool server. Provides echo, counter, text reversal, dice and "
    "clock tools without any API key requirements."
)


def _dump(model: BaseModel) -> Dict[str, Any]:
    return model.model_dump(mode="json", by_alias=True, exclude_none=True)


def _valid_id(request_id: Any) -> bool:
    if request_id is None:
        return True
    return isinstance(request_id, (str, int, float)) and not isinstance(request_id, bool)


def success_response(request_id: RequestId, result: Dict[str, Any]) -> Dict[str, Any]:
    return {"jsonrpc": JSONRPC_VERSION, "id": request_id, "result": result}


def error_response(request_id: RequestId, error: ErrorData) -> Dict[str, Any]:
    return {"jsonrpc": JSONRPC_VERSION, "id": request_id, "error": error.model_dump(mode="json", exclude_none=True)}


def to_call_result(value: Any) -> CallToolResult:
    """Wrap a handler's return value as a CallToolResult.

    str -> one text block; dict -> JSON text block plus ``structuredContent``;
    a CallToolResult or a list of content blocks passes through.
    """
    if isinstance(value, CallToolResult):
        return value
    if isinstance(value, str):
        return CallToolResult(content=[TextContent(type="text", text=value)])
    if isinstance(value, dict):
        return CallToolResult(
            content=[TextContent(type="text", text=json.dumps(value))],
            structuredContent=value,
        )
    if isinstance(value, list):
        return CallToolResult(content=value)
    return CallToolResult(content=[TextContent(type="text", text=str(value))])


class Dispatcher:
    """Routes JSON-RPC requests to the tool registry."""

    def __init__(
        self,
        registry: ToolRegistry,
        state: Optional[SessionState] = None,
        server_name: str = "inferenco-mcp",
        server_version: str = "0.1.0",
        instructions: str = DEFAULT_INSTRUCTIONS,
    ):
        """Initialize dispatcher.

        Args:
            registry: Tools to serve. Frozen here if it is not already.
            state: Shared session state; a fresh one is created if omitted.
            server_name: Name reported by ``initialize``
            server_version: Version reported by ``initialize``
            instructions: Free-text hint for clients
        """
        registry.freeze()
        self.registry = registry
        self.state = state if state is not None else SessionState()
        self.server_info = Implementation(name=server_name, version=server_version)
        self.instructions = instructions

    async def handle_raw(self, raw: Union[str, bytes]) -> Optional[Dict[str, Any]]:
        """Decode one JSON-RPC message and handle it."""
        try:
            message = json.loads(raw)
        except (ValueError, UnicodeDecodeError) as e:
            logger.warning(f"Parse error: {e}")
            return error_response(None, ErrorData(code=PARSE_ERROR, message="Parse error"))

        return await self.handle(message)

    async def handle(self, message: Any) -> Optional[Dict[str, Any]]:
        """Handle one decoded JSON-RPC message.

        Returns:
            The response envelope, or None for notifications
        """
        request_id = message.get("id") if isinstance(message, dict) else None
        if not _valid_id(request_id):
            request_id = None

        # Only a well-formed envelope can be a notification; anything else is answered.
        try:
            method, params = self._parse_envelope(message)
        except McpError as e:
            logger.info(f"Rejected message: {e.error.message}")
            return error_response(request_id, e.error)

        is_notification = "id" not in message

        try:
            result = await self._route(method, params, request_id)
        except McpError as e:
            if is_notification:
                logger.warning(f"Dropping failed notification: {e}")
                return None
            logger.info(f"Request {request_id!r} failed with {e.error.code}: {e.error.message}")
            return error_response(request_id, e.error)
        except Exception as e:
            logger.error(f"Internal error handling request {request_id!r}: {e}", exc_info=True)
            if is_notification:
                return None
            return error_response(request_id, ErrorData(code=INTERNAL_ERROR, message=f"Internal error: {e}"))

        if is_notification:
            return None
        return success_response(request_id, result)

    def _parse_envelope(self, message: Any):
        if not isinstance(message, dict):
            raise InvalidRequestError("Invalid Request: expected a JSON object")
        if message.get("jsonrpc") != JSONRPC_VERSION:
            raise InvalidRequestError("Invalid Request: jsonrpc must be \"2.0\"")

        method = message.get("method")
        if not isinstance(method, str) or not method:
            raise InvalidRequestError("Invalid Request: method must be a non-empty string")

        if not _valid_id(message.get("id")):
            raise InvalidRequestError("Invalid Request: id must be a string, number or null")

        return method, message.get("params")

    async def _route(self, method: str, params: Any, request_id: RequestId) -> Dict[str, Any]:
        if method == "initialize":
            return self.initialize(params)
        if method == "ping":
            return {}
        if method.startswith("notifications/"):
            return {}
        if method == "tools/list":
            return _dump(self.list_tools())
        if method == "tools/call":
            try:
                request = ToolCallRequest.from_params(params, request_id)
            except ValueError as e:
                raise InvalidArgumentsError(str(e)) from e
            return _dump(await self.call_tool(request))
        raise MethodNotFoundError(method)

    def initialize(self, params: Any) -> Dict[str, Any]:
        """Answer ``initialize``, agreeing on the client's protocol version if we support it."""
        requested = params.get("protocolVersion") if isinstance(params, dict) else None
        if requested in SUPPORTED_PROTOCOL_VERSIONS:
            protocol_version = requested
        else:
            protocol_version = LATEST_PROTOCOL_VERSION

        result = InitializeResult(
            protocolVersion=protocol_version,
            capabilities=ServerCapabilities(tools=ToolsCapability(listChanged=False)),
            serverInfo=self.server_info,
            instructions=self.instructions,
        )
        return _dump(result)

    def list_tools(self) -> ListToolsResult:
        return ListToolsResult(tools=[descriptor.to_tool() for descriptor in self.registry.list()])

    def tool_names(self) -> List[str]:
        return self.registry.names()

    async def call_tool(self, request: ToolCallRequest) -> CallToolResult:
        """Resolve, validate and run one tool.

        Raises:
            ToolNotFoundError: Unknown tool name
            InvalidArgumentsError: Arguments rejected by the tool's model
        """
        descriptor = self.registry.resolve(request.tool_name)

        try:
            arguments = descriptor.arguments_model.model_validate(request.arguments)
        except ValidationError as e:
            raise InvalidArgumentsError.from_validation_error(descriptor.name, e) from e

        try:
            value = await descriptor.handler(arguments, self.state)
        except Exception as e:
            logger.error(f"Tool '{descriptor.name}' failed: {e}", exc_info=True)
            return CallToolResult(
                content=[TextContent(type="text", text=f"Tool '{descriptor.name}' failed: {e}")],
                isError=True,
            )

        return to_call_result(value)
