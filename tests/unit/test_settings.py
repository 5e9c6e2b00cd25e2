"""Unit tests for configuration settings."""

import pytest
from pydantic import ValidationError

from config.settings import CONFIG_FILE_ENV, Settings, load_settings


class TestSettings:
    """Tests for Settings configuration."""

    def test_default_values(self):
        """Test default configuration values."""
        settings = Settings(_env_file=None)

        assert settings.transport == "stdio"
        assert settings.host == "0.0.0.0"
        assert settings.port == 8080
        assert settings.rpc_path == "/rpc"
        assert settings.auth_enabled is False
        assert settings.auth_header == "x-api-key"
        assert settings.accepted_api_keys == frozenset()
        assert settings.tool_set == "full"
        assert settings.server_name == "inferenco-mcp"

    def test_custom_values_from_env(self, temp_env):
        """Test setting custom configuration values through the environment."""
        temp_env(
            INFERENCO_MCP_TRANSPORT="http",
            INFERENCO_MCP_PORT="9000",
            INFERENCO_MCP_AUTH_ENABLED="true",
            INFERENCO_MCP_AUTH_HEADER="x-custom-key",
            INFERENCO_MCP_API_KEYS="alpha, beta,,",
            INFERENCO_MCP_TOOL_SET="minimal",
        )

        settings = Settings(_env_file=None)

        assert settings.transport == "http"
        assert settings.port == 9000
        assert settings.auth_enabled is True
        assert settings.auth_header == "x-custom-key"
        assert settings.accepted_api_keys == frozenset({"alpha", "beta"})
        assert settings.tool_set == "minimal"

    def test_env_is_case_insensitive(self, temp_env):
        temp_env(inferenco_mcp_port="7000")

        assert Settings(_env_file=None).port == 7000

    @pytest.mark.parametrize("port", ["not-a-port", "0", "70000", "-1"])
    def test_invalid_port_rejected(self, temp_env, port):
        """Unparsable or out-of-range ports fail at load time."""
        temp_env(INFERENCO_MCP_PORT=port)

        with pytest.raises(ValidationError) as exc_info:
            Settings(_env_file=None)

        assert "port" in {err["loc"][0] for err in exc_info.value.errors()}

    def test_unknown_transport_rejected(self, temp_env):
        temp_env(INFERENCO_MCP_TRANSPORT="carrier-pigeon")

        with pytest.raises(ValidationError):
            Settings(_env_file=None)

    def test_unknown_tool_set_rejected(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, tool_set="everything")

    def test_log_level_normalized_to_upper_case(self, temp_env):
        temp_env(INFERENCO_MCP_LOG_LEVEL="warning")

        assert Settings(_env_file=None).log_level == "WARNING"

    def test_unknown_log_level_rejected(self, temp_env):
        temp_env(INFERENCO_MCP_LOG_LEVEL="verbose")

        with pytest.raises(ValidationError) as exc_info:
            Settings(_env_file=None)

        assert "log_level" in {err["loc"][0] for err in exc_info.value.errors()}

    @pytest.mark.parametrize("rpc_path", ["rpc", "", "http://host/rpc"])
    def test_rpc_path_must_be_absolute(self, rpc_path):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, rpc_path=rpc_path)


class TestTomlConfig:
    """Tests for the optional TOML configuration file."""

    def test_values_loaded_from_toml(self, tmp_path, temp_env):
        config_file = tmp_path / "server.toml"
        config_file.write_text('transport = "http"\nport = 8181\ntool_set = "minimal"\n')
        temp_env(**{CONFIG_FILE_ENV: str(config_file)})

        settings = Settings(_env_file=None)

        assert settings.transport == "http"
        assert settings.port == 8181
        assert settings.tool_set == "minimal"

    def test_env_overrides_toml(self, tmp_path, temp_env):
        config_file = tmp_path / "server.toml"
        config_file.write_text('transport = "http"\nport = 8181\n')
        temp_env(**{CONFIG_FILE_ENV: str(config_file)}, INFERENCO_MCP_PORT="9191")

        settings = Settings(_env_file=None)

        assert settings.transport == "http"
        assert settings.port == 9191

    def test_missing_toml_file_is_ignored(self, tmp_path, temp_env):
        temp_env(**{CONFIG_FILE_ENV: str(tmp_path / "missing.toml")})

        assert Settings(_env_file=None).transport == "stdio"


class TestAuthValidation:
    """Tests for validate_auth_config and load_settings."""

    def test_auth_disabled_needs_no_keys(self):
        Settings(_env_file=None).validate_auth_config()

    def test_auth_enabled_without_keys_rejected(self):
        settings = Settings(_env_file=None, auth_enabled=True, api_keys=" , ")

        with pytest.raises(ValueError, match="API_KEYS"):
            settings.validate_auth_config()

    def test_auth_enabled_with_empty_header_rejected(self):
        settings = Settings(_env_file=None, auth_enabled=True, api_keys="k", auth_header=" ")

        with pytest.raises(ValueError, match="AUTH_HEADER"):
            settings.validate_auth_config()

    def test_load_settings_validates(self, temp_env):
        temp_env(INFERENCO_MCP_AUTH_ENABLED="true")

        with pytest.raises(ValueError):
            load_settings(_env_file=None)

    def test_load_settings_success(self, temp_env):
        temp_env(INFERENCO_MCP_AUTH_ENABLED="true", INFERENCO_MCP_API_KEYS="k1")

        settings = load_settings(_env_file=None)

        assert settings.accepted_api_keys == frozenset({"k1"})
