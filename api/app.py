"""
FastAPI binding for the MCP tool server.

ROUTES:
-------
POST {rpc_path}   one JSON-RPC 2.0 message in, one JSON-RPC response out
GET  /health      liveness and tool listing (never behind auth)
GET  /            same as /health

AUTH:
-----
When ``auth_enabled`` is set, the configured header must carry one of the
configured API keys. Anything else is rejected with HTTP 401 before the
dispatcher sees the request, so no tool logic runs.
"""

import json
import logging
import secrets

from fastapi import Depends, FastAPI, HTTPException, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from mcp.types import LATEST_PROTOCOL_VERSION

from api.models import ErrorResponse, HealthCheckResponse
from config.settings import Settings
from mcp_server.dispatcher import JSONRPC_VERSION, Dispatcher

logger = logging.getLogger(__name__)

# Returned for notifications, which get no JSON-RPC response but still need an HTTP body.
NOTIFICATION_ACK = {"jsonrpc": JSONRPC_VERSION, "id": None, "result": {}}


def create_app(settings: Settings, dispatcher: Dispatcher) -> FastAPI:
    """Build the FastAPI app serving ``dispatcher``.

    Args:
        settings: Loaded server settings (auth, rpc path, identity)
        dispatcher: Dispatcher shared by all requests

    Returns:
        Configured FastAPI application
    """
    app = FastAPI(
        title="Inferenco MCP Server",
        description="Minimal MCP tool server over JSON-RPC 2.0",
        version=settings.server_version,
        docs_url="/docs",
        redoc_url=None,
    )
    app.state.settings = settings
    app.state.dispatcher = dispatcher

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    accepted_keys = settings.accepted_api_keys

    async def require_api_key(request: Request) -> None:
        """Reject the request unless auth is off or the header holds an accepted key."""
        if not settings.auth_enabled:
            return

        provided = request.headers.get(settings.auth_header)
        if provided is None:
            logger.warning(f"Rejected {request.url.path}: missing {settings.auth_header} header")
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Authentication required")

        if not any(secrets.compare_digest(provided.encode(), key.encode()) for key in accepted_keys):
            logger.warning(f"Rejected {request.url.path}: unknown API key")
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")

    @app.post(
        settings.rpc_path,
        dependencies=[Depends(require_api_key)],
        responses={400: {"model": ErrorResponse}, 401: {"model": ErrorResponse}},
    )
    async def handle_rpc(request: Request) -> JSONResponse:
        """Handle one JSON-RPC message."""
        body = await request.body()
        try:
            message = json.loads(body)
        except (ValueError, UnicodeDecodeError):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Request body is not valid JSON",
            )

        response = await dispatcher.handle(message)
        if response is None:
            return JSONResponse(content=NOTIFICATION_ACK)
        return JSONResponse(content=response)

    @app.get("/health", response_model=HealthCheckResponse)
    @app.get("/", response_model=HealthCheckResponse, include_in_schema=False)
    async def health_check() -> HealthCheckResponse:
        """Health check endpoint."""
        return HealthCheckResponse(
            status="ok",
            service=settings.server_name,
            version=settings.server_version,
            protocol_version=LATEST_PROTOCOL_VERSION,
            tools=dispatcher.tool_names(),
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Global exception handler for unhandled errors."""
        logger.error(f"Unhandled exception: {exc}", exc_info=True)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": "An unexpected error occurred"},
        )

    logger.info(f"HTTP binding ready: POST {settings.rpc_path} (auth {'on' if settings.auth_enabled else 'off'})")
    return app
