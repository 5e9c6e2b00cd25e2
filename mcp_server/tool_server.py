"""MCP tool server entry point.

Reads configuration once, builds the tool registry and dispatcher, then serves
over the configured transport:

    INFERENCO_MCP_TRANSPORT=stdio  newline-delimited JSON-RPC on stdin/stdout (default)
    INFERENCO_MCP_TRANSPORT=http   FastAPI app under uvicorn on INFERENCO_MCP_PORT

Usage:
    inferenco-mcp
    python -m mcp_server.tool_server
"""

import asyncio
import logging
import sys

import uvicorn
from pydantic import ValidationError

from api.app import create_app
from config.settings import Settings, load_settings
from mcp_server.dispatcher import Dispatcher
from mcp_server.stdio_transport import serve_stdio
from mcp_server.tools import build_registry
from models.data_models import SessionState

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    """Send all logging to stderr; stdout belongs to the stdio transport."""
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        stream=sys.stderr,
    )


def build_dispatcher(settings: Settings) -> Dispatcher:
    """Create the registry, the shared session state and the dispatcher.

    Raises:
        DuplicateToolError: If the tool set registers a name twice
    """
    registry = build_registry(settings.tool_set)
    return Dispatcher(
        registry,
        SessionState(),
        server_name=settings.server_name,
        server_version=settings.server_version,
    )


def run_http(settings: Settings, dispatcher: Dispatcher) -> None:
    app = create_app(settings, dispatcher)
    logger.info(f"Listening on http://{settings.host}:{settings.port}{settings.rpc_path}")
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())


def main() -> None:
    """Run the server. Exits with status 1 on invalid configuration."""
    try:
        settings = load_settings()
        configure_logging(settings.log_level)
        dispatcher = build_dispatcher(settings)
    except (ValidationError, ValueError) as e:
        print(f"✗ Invalid configuration: {e}", file=sys.stderr, flush=True)
        raise SystemExit(1)

    logger.info(
        f"{settings.server_name} {settings.server_version} starting "
        f"(transport={settings.transport}, tools={', '.join(dispatcher.tool_names())})"
    )

    if settings.transport == "http":
        run_http(settings, dispatcher)
    else:
        try:
            asyncio.run(serve_stdio(dispatcher))
        except KeyboardInterrupt:
            logger.info("Interrupted, shutting down")


if __name__ == "__main__":
    main()
