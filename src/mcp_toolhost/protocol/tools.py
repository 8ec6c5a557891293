"""MCP tools/list and tools/call handlers.

Handles tool-related MCP requests against the tool registry, and builds
tools requests for clients and tests.
"""

from __future__ import annotations

import json
import time
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from mcp_toolhost.protocol.jsonrpc import (
    INTERNAL_ERROR,
    INVALID_PARAMS,
    INVALID_REQUEST,
    JSONRPC_VERSION,
    JsonRpcError,
)
from mcp_toolhost.registry.base import MissingArgumentError, ToolError

if TYPE_CHECKING:
    from mcp_toolhost.audit import MessageLog
    from mcp_toolhost.registry.registry import ToolRegistry


@dataclass
class ToolsListResult:
    """Result of tools/list request."""

    tools: list[dict[str, Any]]

    def to_dict(self) -> dict[str, Any]:
        """Convert to MCP result format.

        Returns:
            Dictionary in MCP tools/list result format.
        """
        return {"tools": self.tools}


@dataclass
class ToolsCallResult:
    """Result of tools/call request."""

    content: list[dict[str, Any]]
    is_error: bool = False

    @classmethod
    def text(cls, text: str, is_error: bool = False) -> ToolsCallResult:
        """Build a result holding a single text item."""
        return cls(content=[{"type": "text", "text": text}], is_error=is_error)

    def to_dict(self) -> dict[str, Any]:
        """Convert to MCP result format.

        Returns:
            Dictionary in MCP tools/call result format.
        """
        return {
            "content": self.content,
            "isError": self.is_error,
        }


class ToolsHandler:
    """Handles tools/list and tools/call MCP requests.

    A ToolError raised by a handler becomes a tool result with
    ``isError: true``. Any other exception becomes an INTERNAL_ERROR
    response.
    """

    def __init__(self, registry: ToolRegistry, message_log: MessageLog | None = None) -> None:
        """Initialize the handler.

        Args:
            registry: Registry holding the tools.
            message_log: Optional log receiving tool call events.
        """
        self._registry = registry
        self._log = message_log

    def handle_list(self) -> ToolsListResult:
        """Handle tools/list request.

        Returns:
            ToolsListResult with all registered tools.
        """
        return ToolsListResult(tools=[tool.to_dict() for tool in self._registry.list()])

    def handle_call(self, params: Any) -> ToolsCallResult:
        """Handle tools/call request.

        Args:
            params: Request params holding ``name`` and ``arguments``.

        Returns:
            ToolsCallResult with the tool's text output.

        Raises:
            JsonRpcError: If the request is malformed, the tool is unknown
                or the handler failed unexpectedly.
        """
        params = params if isinstance(params, dict) else {}
        name = params.get("name")
        tool = self._registry.lookup(name) if isinstance(name, str) else None
        if tool is None:
            raise JsonRpcError(INVALID_REQUEST, f"Tool not found: {name}")

        arguments = params.get("arguments") or {}
        if not isinstance(arguments, dict):
            raise JsonRpcError(INVALID_PARAMS, "Invalid params: arguments must be an object")

        if self._log:
            self._log.log_tool_call(name, arguments)
        started = time.monotonic()

        try:
            text = self._registry.invoke(tool, arguments)
        except ToolError as e:
            self._log_result(name, "tool_error", started)
            return ToolsCallResult.text(e.message, is_error=True)
        except MissingArgumentError as e:
            self._log_result(name, "invalid_params", started)
            raise JsonRpcError(INVALID_PARAMS, f"Invalid params: {e}") from e
        except Exception as e:
            self._log_result(name, "internal_error", started)
            raise JsonRpcError(INTERNAL_ERROR, f"Internal error executing tool: {e}") from e

        self._log_result(name, "success", started)
        return ToolsCallResult.text(text)

    def _log_result(self, name: str, status: str, started: float) -> None:
        if self._log:
            duration_ms = (time.monotonic() - started) * 1000
            self._log.log_tool_result(name, status, duration_ms)


def create_tools_list_request(msg_id: int | str = 1) -> str:
    """Build a tools/list request.

    Args:
        msg_id: Request id.

    Returns:
        JSON-RPC request string.
    """
    return json.dumps({"jsonrpc": JSONRPC_VERSION, "id": msg_id, "method": "tools/list"})


def create_tools_call_request(
    name: str,
    msg_id: int | str = 1,
    arguments: Mapping[str, Any] | Iterable[tuple[str, Any]] | None = None,
) -> str:
    """Build a tools/call request.

    Args:
        name: Tool to call.
        msg_id: Request id.
        arguments: Ordered mapping or sequence of (name, value) pairs.

    Returns:
        JSON-RPC request string.
    """
    return json.dumps(
        {
            "jsonrpc": JSONRPC_VERSION,
            "id": msg_id,
            "method": "tools/call",
            "params": {"name": name, "arguments": dict(arguments or {})},
        }
    )
