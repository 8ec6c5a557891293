"""Server lifecycle and MCP handshake.

Tracks whether the server accepts messages at all, and answers the
initialize/initialized handshake.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

# Version advertised in the initialize response
MCP_PROTOCOL_VERSION = "2025-03-26"


class ServerState(Enum):
    """Server running states."""

    STOPPED = "stopped"
    RUNNING = "running"


class LifecycleError(Exception):
    """Raised when the lifecycle API is misused.

    Starting a running server, stopping a stopped one, or sending a
    message to a stopped server. These are caller bugs and are never
    reported as JSON-RPC errors.
    """

    pass


@dataclass
class LifecycleManager:
    """Manages the server running flag and the initialize handshake.

    Stopping does not tear anything down; it only gates message
    processing. The handshake state survives a stop/start cycle.
    """

    server_info: dict[str, str] = field(
        default_factory=lambda: {"name": "mcp-toolhost", "version": "0.1.0"}
    )
    protocol_version: str = MCP_PROTOCOL_VERSION
    state: ServerState = ServerState.STOPPED
    initialized: bool = False
    client_info: dict[str, Any] | None = None
    client_capabilities: dict[str, Any] | None = None

    @property
    def is_running(self) -> bool:
        """Check if the server accepts messages."""
        return self.state == ServerState.RUNNING

    def start(self) -> None:
        """Start accepting messages.

        Raises:
            LifecycleError: If already running.
        """
        if self.state == ServerState.RUNNING:
            raise LifecycleError("MCP server is already running")
        self.state = ServerState.RUNNING

    def stop(self) -> None:
        """Stop accepting messages.

        Raises:
            LifecycleError: If already stopped.
        """
        if self.state == ServerState.STOPPED:
            raise LifecycleError("MCP server is not running")
        self.state = ServerState.STOPPED

    def require_running(self) -> None:
        """Assert that the server is running.

        Raises:
            LifecycleError: If stopped.
        """
        if self.state != ServerState.RUNNING:
            raise LifecycleError("MCP server is not running")

    def handle_initialize(self, params: dict[str, Any], has_tools: bool) -> dict[str, Any]:
        """Handle initialize request.

        Any client protocol version is accepted; the server always answers
        with its own.

        Args:
            params: Initialize request parameters.
            has_tools: Whether any tool is registered.

        Returns:
            Initialize response result.
        """
        self.client_info = params.get("clientInfo")
        self.client_capabilities = params.get("capabilities", {})

        return {
            "protocolVersion": self.protocol_version,
            "capabilities": {
                "tools": {"listChanged": True} if has_tools else {},
                "resources": {},
                "prompts": {},
            },
            "serverInfo": dict(self.server_info),
        }

    def handle_initialized(self) -> None:
        """Handle initialized notification."""
        self.initialized = True
