"""MCP Server - message entry point.

Turns JSON-RPC messages from a transport into calls on registered tools.
"""

from __future__ import annotations

import json
from collections.abc import Callable
from pathlib import Path
from typing import Any

from mcp_toolhost.audit import MessageLog
from mcp_toolhost.config import ServerConfig, load_config
from mcp_toolhost.protocol.jsonrpc import (
    INTERNAL_ERROR,
    METHOD_NOT_FOUND,
    JsonRpcError,
    JsonRpcNotification,
    JsonRpcRequest,
    build_error,
    build_error_from,
    build_response,
    decode_message,
    validate_message,
)
from mcp_toolhost.protocol.lifecycle import LifecycleManager
from mcp_toolhost.protocol.tools import ToolsHandler
from mcp_toolhost.registry.base import ToolRegistration
from mcp_toolhost.registry.registry import ToolRegistry


class MCPServer:
    """MCP Server implementation.

    Each instance owns its own tool registry and running flag, so several
    servers can live in one process. Messages must be processed one at a
    time; a tool handler blocks the server until it returns.

    Handles:
    - The initialize handshake and its notifications
    - Tool listing and execution
    - JSON-RPC envelope validation and error reporting
    """

    def __init__(
        self,
        config: ServerConfig | None = None,
        message_log: MessageLog | None = None,
    ) -> None:
        """Initialize the server.

        Args:
            config: Server configuration. Defaults are used when omitted.
            message_log: Log for traffic and tool events. Opened from
                ``config.log_path`` when omitted.
        """
        self._config = config or ServerConfig()

        if message_log is None and self._config.log_path is not None:
            message_log = MessageLog(self._config.log_path)
        self._log = message_log

        self._registry = ToolRegistry()
        self._lifecycle = LifecycleManager(
            server_info=self._config.server_info,
            protocol_version=self._config.protocol_version,
        )
        self._tools_handler = ToolsHandler(self._registry, message_log=self._log)

    @classmethod
    def from_config_file(cls, path: Path) -> MCPServer:
        """Create a server from a YAML configuration file."""
        return cls(config=load_config(path))

    @property
    def config(self) -> ServerConfig:
        return self._config

    @property
    def registry(self) -> ToolRegistry:
        return self._registry

    @property
    def lifecycle(self) -> LifecycleManager:
        return self._lifecycle

    @property
    def is_running(self) -> bool:
        return self._lifecycle.is_running

    def start(self) -> None:
        """Start accepting messages.

        Raises:
            LifecycleError: If already running.
        """
        self._lifecycle.start()

    def stop(self) -> None:
        """Stop accepting messages. Registered tools are kept.

        Raises:
            LifecycleError: If not running.
        """
        self._lifecycle.stop()

    def register_tool(
        self,
        handler: Callable[..., Any],
        name: str,
        description: str,
        title: str | None = None,
        read_only: bool | None = None,
    ) -> ToolRegistration:
        """Register a tool.

        The handler takes no parameter, or a single one documented in an
        ``MCP Parameters:`` docstring section, and returns a string.

        Args:
            handler: Tool implementation.
            name: Unique tool identifier.
            description: Description shown to the client.
            title: Optional display title.
            read_only: Optional read-only hint.

        Returns:
            The new registration.

        Raises:
            RegistrationError: If the tool is invalid.
        """
        return self._registry.register(
            handler, name, description, title=title, read_only=read_only
        )

    def unregister_tool(self, name: str) -> bool:
        """Unregister a tool.

        Args:
            name: Tool identifier.

        Returns:
            True if the tool was registered.
        """
        return self._registry.unregister(name)

    def list_tools(self) -> list[dict[str, Any]]:
        """List all registered tools in MCP format."""
        return self._tools_handler.handle_list().tools

    def process(self, raw_message: str) -> str | None:
        """Handle an incoming JSON-RPC message.

        Args:
            raw_message: Raw JSON-RPC message string.

        Returns:
            Response string or None for notifications.

        Raises:
            LifecycleError: If the server is not running.
        """
        self._lifecycle.require_running()
        self._log_io("in", raw_message)

        try:
            message = decode_message(raw_message)
        except JsonRpcError as e:
            response: dict[str, Any] | None = build_error(None, e.code, e.message)
        else:
            response = self._handle(message)

        if response is None:
            return None

        raw_response = json.dumps(response)
        self._log_io("out", raw_response)
        return raw_response

    def process_parsed(self, message: Any) -> dict[str, Any] | None:
        """Handle an already decoded JSON-RPC message.

        Args:
            message: Decoded JSON value.

        Returns:
            Response envelope or None for notifications.

        Raises:
            LifecycleError: If the server is not running.
        """
        self._lifecycle.require_running()
        return self._handle(message)

    def _handle(self, data: Any) -> dict[str, Any] | None:
        """Validate and dispatch a decoded message, never raising."""
        try:
            message = validate_message(data)
        except JsonRpcError as e:
            return build_error_from(e)

        msg_id = message.id if isinstance(message, JsonRpcRequest) else None
        try:
            if isinstance(message, JsonRpcNotification):
                self._handle_notification(message)
                return None
            return self._handle_request(message)
        except JsonRpcError as e:
            return build_error_from(e, msg_id)
        except Exception as e:
            if self._log:
                self._log.log_error(str(e), {"method": message.method})
            return build_error(msg_id, INTERNAL_ERROR, f"Internal error: {e}")

    def _handle_notification(self, notification: JsonRpcNotification) -> None:
        """Handle a notification (no response).

        Args:
            notification: The notification to handle.
        """
        if notification.method == "notifications/initialized":
            self._lifecycle.handle_initialized()
        # notifications/cancelled is accepted, running handlers are not interrupted.
        # Other notifications are silently ignored.

    def _handle_request(self, request: JsonRpcRequest) -> dict[str, Any]:
        """Handle a request and return response.

        Args:
            request: The request to handle.

        Returns:
            JSON-RPC response envelope.

        Raises:
            JsonRpcError: If the request cannot be served.
        """
        method = request.method
        params = request.params if request.params is not None else {}

        if method == "initialize":
            result = self._lifecycle.handle_initialize(
                params if isinstance(params, dict) else {}, has_tools=len(self._registry) > 0
            )
            return build_response(request.id, result)

        elif method == "tools/list":
            return build_response(request.id, self._tools_handler.handle_list().to_dict())

        elif method == "tools/call":
            result = self._tools_handler.handle_call(params)
            return build_response(request.id, result.to_dict())

        else:
            raise JsonRpcError(METHOD_NOT_FOUND, f"Method not found: {method}")

    def _log_io(self, direction: str, message: str) -> None:
        if self._config.log_io and self._log:
            self._log.log_message(direction, message)

    def close(self) -> None:
        """Close the message log."""
        if self._log:
            self._log.close()

    def __enter__(self) -> MCPServer:
        """Context manager entry."""
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Context manager exit."""
        self.close()
