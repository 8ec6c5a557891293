"""Tests for server configuration loading."""

import os
from pathlib import Path

import pytest

from mcp_toolhost.config import (
    ConfigLoadError,
    ServerConfig,
    expand_env_vars,
    load_config,
)
from mcp_toolhost.protocol.lifecycle import MCP_PROTOCOL_VERSION


class TestExpandEnvVars:
    """Tests for environment variable expansion."""

    def test_expands_home_variable(self):
        """Should expand ${HOME} to actual home directory."""
        result = expand_env_vars("${HOME}/logs")
        assert result == os.path.expanduser("~") + "/logs"

    def test_expands_custom_variable(self, monkeypatch):
        """Should expand custom environment variables."""
        monkeypatch.setenv("TEST_MCP_VAR", "/custom/path")
        assert expand_env_vars("${TEST_MCP_VAR}/subdir") == "/custom/path/subdir"

    def test_leaves_unknown_variables_unchanged(self):
        """Should leave unknown variables as-is."""
        assert expand_env_vars("${UNKNOWN_VAR_12345}/path") == "${UNKNOWN_VAR_12345}/path"


class TestServerConfig:
    """Tests for ServerConfig dataclass."""

    def test_defaults(self):
        """Should use built-in identity and no logging."""
        config = ServerConfig()

        assert config.server_info == {"name": "mcp-toolhost", "version": "0.1.0"}
        assert config.protocol_version == MCP_PROTOCOL_VERSION
        assert config.log_io is False
        assert config.log_path is None

    def test_from_dict_minimal(self):
        """Should fill defaults for missing sections."""
        config = ServerConfig.from_dict({"version": "1.0"})

        assert config.version == "1.0"
        assert config.server_name == "mcp-toolhost"
        assert config.log_file == ""

    def test_from_dict_full(self, monkeypatch):
        """Should parse every setting."""
        monkeypatch.setenv("MCP_LOG_DIR", "/var/log/mcp")
        config = ServerConfig.from_dict(
            {
                "version": "1.0",
                "server": {"name": "host", "version": "2.1", "protocol_version": "2024-11-05"},
                "logging": {"log_io": True, "log_file": "${MCP_LOG_DIR}/messages.log"},
            }
        )

        assert config.server_info == {"name": "host", "version": "2.1"}
        assert config.protocol_version == "2024-11-05"
        assert config.log_io is True
        assert config.log_path == Path("/var/log/mcp/messages.log")

    def test_from_dict_empty_sections(self):
        """Should accept sections left empty in YAML."""
        config = ServerConfig.from_dict({"version": "1.0", "server": None, "logging": None})
        assert config.server_name == "mcp-toolhost"

    def test_from_dict_non_string_log_file(self):
        """Should coerce a non-string log file to a path string."""
        config = ServerConfig.from_dict({"version": "1.0", "logging": {"log_file": 123}})
        assert config.log_path == Path("123")


class TestLoadConfig:
    """Tests for loading YAML files."""

    def test_loads_file(self, tmp_path: Path):
        """Should load a valid config."""
        path = tmp_path / "server.yaml"
        path.write_text('version: "1.0"\nlogging:\n  log_io: true\n')

        assert load_config(path).log_io is True

    def test_loads_shipped_config(self):
        """Should load the example config in the repository."""
        path = Path(__file__).parent.parent / "config" / "server.yaml"
        config = load_config(path)

        assert config.server_name == "mcp-toolhost"
        assert config.log_io is False

    def test_missing_file(self, tmp_path: Path):
        """Should raise for a missing file."""
        with pytest.raises(ConfigLoadError, match="not found"):
            load_config(tmp_path / "missing.yaml")

    def test_invalid_yaml(self, tmp_path: Path):
        """Should raise for unparsable YAML."""
        path = tmp_path / "server.yaml"
        path.write_text("version: [unclosed\n")

        with pytest.raises(ConfigLoadError, match="parse"):
            load_config(path)

    def test_non_mapping(self, tmp_path: Path):
        """Should raise when the document is not a mapping."""
        path = tmp_path / "server.yaml"
        path.write_text("- a\n- b\n")

        with pytest.raises(ConfigLoadError, match="mapping"):
            load_config(path)

    def test_missing_version(self, tmp_path: Path):
        """Should require the version field."""
        path = tmp_path / "server.yaml"
        path.write_text("server:\n  name: x\n")

        with pytest.raises(ConfigLoadError, match="version"):
            load_config(path)

    def test_section_must_be_mapping(self, tmp_path: Path):
        """Should reject a scalar section."""
        path = tmp_path / "server.yaml"
        path.write_text('version: "1.0"\nlogging: verbose\n')

        with pytest.raises(ConfigLoadError, match="logging"):
            load_config(path)

    def test_log_file_must_be_string(self, tmp_path: Path):
        """Should reject a log file that is not a string."""
        path = tmp_path / "server.yaml"
        path.write_text('version: "1.0"\nlogging:\n  log_file: 123\n')

        with pytest.raises(ConfigLoadError, match="log_file"):
            load_config(path)
