"""Helpers for testing tools registered on an MCPServer.

Meant for host applications' own test suites: send a request through the
full JSON-RPC pipeline and get the decoded result back.
"""

from __future__ import annotations

import json
from collections.abc import Iterable, Mapping
from typing import Any

from mcp_toolhost.protocol.tools import create_tools_call_request
from mcp_toolhost.server import MCPServer


class ToolCallFailed(AssertionError):
    """Raised when a tool call does not produce the expected result."""

    pass


def send(server: MCPServer, request: str) -> dict[str, Any] | None:
    """Process a raw request and decode the response.

    Args:
        server: Running server.
        request: Raw JSON-RPC request string.

    Returns:
        Decoded response, or None for notifications.
    """
    response = server.process(request)
    return json.loads(response) if response is not None else None


def _call(
    server: MCPServer,
    name: str,
    arguments: Mapping[str, Any] | Iterable[tuple[str, Any]] | None,
) -> dict[str, Any]:
    response = send(server, create_tools_call_request(name, arguments=arguments))
    if response is None or "error" in response:
        raise ToolCallFailed(f"tools/call {name} returned a JSON-RPC error: {response}")
    return response["result"]


def call_tool(
    server: MCPServer,
    name: str,
    arguments: Mapping[str, Any] | Iterable[tuple[str, Any]] | None = None,
) -> str:
    """Call a tool and return its text output.

    Raises:
        ToolCallFailed: If the call fails or the tool reports an error.
    """
    result = _call(server, name, arguments)
    text = result["content"][0]["text"]
    if result["isError"]:
        raise ToolCallFailed(f"Tool {name} reported an error: {text}")
    return text


def assert_tool_error(
    server: MCPServer,
    name: str,
    arguments: Mapping[str, Any] | Iterable[tuple[str, Any]] | None = None,
    message: str | None = None,
) -> str:
    """Assert that a tool call reports a tool error.

    Args:
        server: Running server.
        name: Tool to call.
        arguments: Tool arguments.
        message: Expected error text, checked exactly when given.

    Returns:
        The error text.

    Raises:
        ToolCallFailed: If the tool succeeds, the call fails at the JSON-RPC
            level, or the message differs.
    """
    result = _call(server, name, arguments)
    text = result["content"][0]["text"]
    if not result["isError"]:
        raise ToolCallFailed(f"Tool {name} succeeded with: {text}")
    if message is not None and text != message:
        raise ToolCallFailed(f"Tool {name} error was {text!r}, expected {message!r}")
    return text
