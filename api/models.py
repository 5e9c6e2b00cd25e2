"""HTTP response models for the FastAPI binding."""

from typing import List

from pydantic import BaseModel, Field


class HealthCheckResponse(BaseModel):
    """GET /health response."""

    status: str = Field(..., description="Service health status")
    service: str = Field(..., description="Server name")
    version: str = Field(..., description="Server version")
    protocol_version: str = Field(..., description="Latest MCP protocol version supported")
    tools: List[str] = Field(default_factory=list, description="Registered tool names, in listing order")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "status": "ok",
                    "service": "inferenco-mcp",
                    "version": "0.1.0",
                    "protocol_version": "2025-06-18",
                    "tools": ["echo", "increment", "reverse", "dice", "clock"],
                }
            ]
        }
    }


class ErrorResponse(BaseModel):
    """Body of non-JSON-RPC HTTP errors (bad JSON, auth failures, 500s)."""

    detail: str = Field(..., description="Human-readable error message")
