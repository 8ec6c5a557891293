"""Server configuration loader.

Loads server identity and logging settings from a YAML file.
"""

from __future__ import annotations

import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from mcp_toolhost.protocol.lifecycle import MCP_PROTOCOL_VERSION

DEFAULT_SERVER_NAME = "mcp-toolhost"
DEFAULT_SERVER_VERSION = "0.1.0"


class ConfigLoadError(Exception):
    """Raised when configuration loading or validation fails."""

    pass


def expand_env_vars(value: str) -> str:
    """Expand environment variables in a string.

    Supports ${VAR_NAME} syntax. Unknown variables are left unchanged.

    Args:
        value: String potentially containing environment variable references.

    Returns:
        String with known environment variables expanded.
    """
    pattern = re.compile(r"\$\{([^}]+)\}")

    def replacer(match: re.Match[str]) -> str:
        var_name = match.group(1)
        env_value = os.environ.get(var_name)
        if env_value is not None:
            return env_value
        if var_name == "HOME":
            return os.path.expanduser("~")
        return match.group(0)

    return pattern.sub(replacer, value)


@dataclass
class ServerConfig:
    """Server configuration."""

    version: str = "1.0"

    server_name: str = DEFAULT_SERVER_NAME
    server_version: str = DEFAULT_SERVER_VERSION
    protocol_version: str = MCP_PROTOCOL_VERSION

    # Record every inbound and outbound message
    log_io: bool = False
    log_file: str = ""

    @classmethod
    def from_dict(cls, config: dict[str, Any]) -> ServerConfig:
        """Create a ServerConfig from a configuration dictionary.

        Args:
            config: Dictionary parsed from YAML configuration.

        Returns:
            ServerConfig instance with all settings populated.
        """
        server = config.get("server") or {}
        log_settings = config.get("logging") or {}

        return cls(
            version=str(config.get("version", "")),
            server_name=str(server.get("name", DEFAULT_SERVER_NAME)),
            server_version=str(server.get("version", DEFAULT_SERVER_VERSION)),
            protocol_version=str(server.get("protocol_version", MCP_PROTOCOL_VERSION)),
            log_io=bool(log_settings.get("log_io", False)),
            log_file=expand_env_vars(str(log_settings.get("log_file") or "")),
        )

    @property
    def server_info(self) -> dict[str, str]:
        """Server identity advertised during the handshake."""
        return {"name": self.server_name, "version": self.server_version}

    @property
    def log_path(self) -> Path | None:
        """Path of the message log, or None when logging is disabled."""
        return Path(self.log_file) if self.log_file else None


def load_config(path: Path) -> ServerConfig:
    """Load server configuration from a YAML file.

    Args:
        path: Path to the configuration YAML file.

    Returns:
        ServerConfig instance.

    Raises:
        ConfigLoadError: If the file cannot be found, parsed, or validated.
    """
    if not path.exists():
        raise ConfigLoadError(f"Config file not found: {path}")

    try:
        with open(path) as f:
            config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigLoadError(f"Failed to parse config YAML: {e}") from e

    if not isinstance(config, dict):
        raise ConfigLoadError("Config must be a YAML mapping")

    if "version" not in config:
        raise ConfigLoadError("Config must include 'version' field")

    for section in ("server", "logging"):
        if section in config and not isinstance(config[section], dict | None):
            raise ConfigLoadError(f"Config section '{section}' must be a mapping")

    log_file = (config.get("logging") or {}).get("log_file")
    if log_file is not None and not isinstance(log_file, str):
        raise ConfigLoadError("Config field 'logging.log_file' must be a string")

    return ServerConfig.from_dict(config)
