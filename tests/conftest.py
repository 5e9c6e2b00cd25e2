"""Shared test fixtures and configuration for pytest."""

import os
from typing import Any, Dict, Optional

import pytest

from config.settings import CONFIG_FILE_ENV, Settings
from mcp_server.dispatcher import Dispatcher
from mcp_server.registry import ToolRegistry
from mcp_server.tools import build_registry
from models.data_models import SessionState


# ==================== Environment Fixtures ====================


@pytest.fixture(autouse=True)
def test_env(monkeypatch, tmp_path):
    """Isolate every test from the developer's environment, .env and TOML files."""
    for key in list(os.environ):
        if key.upper().startswith("INFERENCO_MCP_"):
            monkeypatch.delenv(key, raising=False)

    monkeypatch.setenv(CONFIG_FILE_ENV, str(tmp_path / "no-such-config.toml"))
    monkeypatch.setenv("INFERENCO_MCP_LOG_LEVEL", "ERROR")  # Reduce noise in tests
    monkeypatch.chdir(tmp_path)

    yield


@pytest.fixture
def temp_env(monkeypatch):
    """Fixture for temporarily modifying environment variables."""
    def set_env(**kwargs):
        for key, value in kwargs.items():
            monkeypatch.setenv(key, value)

    return set_env


# ==================== Server Fixtures ====================


@pytest.fixture
def settings() -> Settings:
    """Default settings, without any .env file."""
    return Settings(_env_file=None)


@pytest.fixture
def auth_settings() -> Settings:
    """Settings with header auth enabled and two accepted keys."""
    return Settings(_env_file=None, auth_enabled=True, api_keys="secret-one, secret-two")


@pytest.fixture
def session_state() -> SessionState:
    return SessionState()


@pytest.fixture
def registry() -> ToolRegistry:
    """Frozen registry with the full tool set."""
    return build_registry("full")


@pytest.fixture
def dispatcher(registry, session_state) -> Dispatcher:
    return Dispatcher(registry, session_state)


# ==================== Data Generation Helpers ====================


@pytest.fixture
def make_request():
    """Factory fixture for JSON-RPC request objects."""
    def _make(method: str, params: Optional[Dict[str, Any]] = None, request_id: Any = 1) -> Dict[str, Any]:
        message: Dict[str, Any] = {"jsonrpc": "2.0", "id": request_id, "method": method}
        if params is not None:
            message["params"] = params
        return message

    return _make


@pytest.fixture
def make_call():
    """Factory fixture for tools/call request objects."""
    def _make(name: str, arguments: Optional[Dict[str, Any]] = None, request_id: Any = 1) -> Dict[str, Any]:
        params: Dict[str, Any] = {"name": name}
        if arguments is not None:
            params["arguments"] = arguments
        return {"jsonrpc": "2.0", "id": request_id, "method": "tools/call", "params": params}

    return _make
