"""MCP client wrapper for talking to the tool server over stdio."""

import sys
from contextlib import AsyncExitStack
from pathlib import Path
from typing import Any, Dict, List, Optional

from mcp import ClientSession, StdioServerParameters
from mcp.client.stdio import stdio_client
from mcp.types import CallToolResult, TextContent

PROJECT_ROOT = Path(__file__).parent.parent


class ToolCallError(RuntimeError):
    """A tool ran but reported failure (``isError: true``)."""

    def __init__(self, tool_name: str, message: str):
        super().__init__(f"Tool '{tool_name}' returned error: {message}")
        self.tool_name = tool_name


def _text_of(result: CallToolResult) -> str:
    return "".join(block.text for block in result.content if isinstance(block, TextContent))


class ToolServerClient:
    """Client for the MCP tool server.

    Spawns the server as a subprocess speaking newline-delimited JSON-RPC on
    stdio and drives it through the SDK's ``ClientSession``.
    """

    def __init__(
        self,
        command: Optional[str] = None,
        args: Optional[List[str]] = None,
        env: Optional[Dict[str, str]] = None,
    ):
        """Initialize MCP client.

        Args:
            command: Executable to launch. Defaults to the current interpreter.
            args: Arguments for the command. Defaults to ``-m mcp_server.tool_server``.
            env: Environment for the server process (SDK defaults if None)
        """
        self.session: Optional[ClientSession] = None
        self._exit_stack: Optional[AsyncExitStack] = None

        self.server_params = StdioServerParameters(
            command=command or sys.executable,
            args=args if args is not None else ["-m", "mcp_server.tool_server"],
            env=env,
            cwd=str(PROJECT_ROOT),
        )

    async def connect(self):
        """Launch the server and run the MCP initialize handshake."""
        if self.session is not None:
            raise RuntimeError("Client is already connected")

        exit_stack = AsyncExitStack()
        try:
            read_stream, write_stream = await exit_stack.enter_async_context(stdio_client(self.server_params))
            session = await exit_stack.enter_async_context(ClientSession(read_stream, write_stream))
            await session.initialize()
        except BaseException:
            await exit_stack.aclose()
            raise

        self._exit_stack = exit_stack
        self.session = session

    def _require_session(self) -> ClientSession:
        if self.session is None:
            raise RuntimeError("Client is not connected. Call connect() first.")
        return self.session

    async def list_tools(self) -> List[str]:
        """Names of the tools the server advertises, in listing order."""
        result = await self._require_session().list_tools()
        return [tool.name for tool in result.tools]

    async def call_tool(self, tool_name: str, arguments: Optional[Dict[str, Any]] = None) -> str:
        """Call a tool and return the text of its result.

        Raises:
            RuntimeError: If client is not connected
            ToolCallError: If the tool reports ``isError``
            McpError: If the server answers with a JSON-RPC error
        """
        result = await self._require_session().call_tool(tool_name, arguments or {})
        text = _text_of(result)
        if result.isError:
            raise ToolCallError(tool_name, text)
        return text

    async def echo(self, message: str) -> str:
        return await self.call_tool("echo", {"message": message})

    async def increment(self) -> int:
        """Increment the server-side counter.

        Returns:
            The counter value after this call
        """
        return int(await self.call_tool("increment"))

    async def reverse(self, text: str) -> str:
        return await self.call_tool("reverse", {"text": text})

    async def dice(self, sides: int = 6) -> int:
        """Roll a die with ``sides`` sides on the server."""
        return int(await self.call_tool("dice", {"sides": sides}))

    async def clock(self) -> str:
        """Current server time, RFC 3339 UTC."""
        return await self.call_tool("clock")

    async def close(self):
        """Close the MCP connection and stop the server process."""
        if self._exit_stack is not None:
            await self._exit_stack.aclose()
        self._exit_stack = None
        self.session = None

    async def __aenter__(self):
        """Async context manager entry."""
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close()
