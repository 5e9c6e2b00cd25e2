"""Server configuration management using Pydantic Settings."""

import os
from pathlib import Path
from typing import FrozenSet, Literal, Tuple, Type

from pydantic import Field, field_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    TomlConfigSettingsSource,
)

DEFAULT_CONFIG_FILE = "inferenco-mcp.toml"
CONFIG_FILE_ENV = "INFERENCO_MCP_CONFIG_FILE"


class Settings(BaseSettings):
    """Server settings loaded from environment variables, .env and an optional TOML file."""

    # Transport selection
    transport: Literal["stdio", "http"] = "stdio"

    # HTTP binding (ignored for stdio)
    host: str = "0.0.0.0"
    port: int = Field(8080, ge=1, le=65535)
    rpc_path: str = Field("/rpc", pattern=r"^/")

    # Shared-secret header auth for the HTTP binding
    # API_KEYS is a comma-separated list; blank entries are dropped.
    auth_enabled: bool = False
    auth_header: str = "x-api-key"
    api_keys: str = ""

    # Tool set: "full" exposes all five tools, "minimal" only echo and increment
    tool_set: Literal["full", "minimal"] = "full"

    # Server identity reported by initialize and /health
    server_name: str = "inferenco-mcp"
    server_version: str = "0.1.0"

    # Logging
    log_level: Literal["CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"] = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="INFERENCO_MCP_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: Type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> Tuple[PydanticBaseSettingsSource, ...]:
        # Environment always wins over the TOML file.
        toml_file = Path(os.getenv(CONFIG_FILE_ENV, DEFAULT_CONFIG_FILE))
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            TomlConfigSettingsSource(settings_cls, toml_file=toml_file),
            file_secret_settings,
        )

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, value):
        return value.upper() if isinstance(value, str) else value

    @property
    def accepted_api_keys(self) -> FrozenSet[str]:
        """API keys accepted by the HTTP binding."""
        return frozenset(key.strip() for key in self.api_keys.split(",") if key.strip())

    def validate_auth_config(self) -> None:
        """Validate that auth, when enabled, has something to authenticate against."""
        if self.auth_enabled and not self.accepted_api_keys:
            raise ValueError(
                "INFERENCO_MCP_API_KEYS must contain at least one key when "
                "INFERENCO_MCP_AUTH_ENABLED=true"
            )
        if self.auth_enabled and not self.auth_header.strip():
            raise ValueError("INFERENCO_MCP_AUTH_HEADER cannot be empty when auth is enabled")


def load_settings(**overrides) -> Settings:
    """Load and validate settings once at startup.

    Raises:
        pydantic.ValidationError: On unparsable values (e.g. a non-numeric port)
        ValueError: On an inconsistent auth configuration
    """
    settings = Settings(**overrides)
    settings.validate_auth_config()
    return settings
