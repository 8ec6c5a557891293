"""MCP Protocol layer for JSON-RPC communication."""

from mcp_toolhost.protocol.jsonrpc import (
    INTERNAL_ERROR,
    INVALID_PARAMS,
    INVALID_REQUEST,
    METHOD_NOT_FOUND,
    PARSE_ERROR,
    JsonRpcError,
    JsonRpcNotification,
    JsonRpcRequest,
    build_error,
    build_response,
    decode_message,
    validate_message,
)
from mcp_toolhost.protocol.lifecycle import (
    MCP_PROTOCOL_VERSION,
    LifecycleError,
    LifecycleManager,
    ServerState,
)
from mcp_toolhost.protocol.tools import (
    ToolsCallResult,
    ToolsHandler,
    ToolsListResult,
    create_tools_call_request,
    create_tools_list_request,
)

__all__ = [
    "INTERNAL_ERROR",
    "INVALID_PARAMS",
    "INVALID_REQUEST",
    "JsonRpcError",
    "JsonRpcNotification",
    "JsonRpcRequest",
    "LifecycleError",
    "LifecycleManager",
    "MCP_PROTOCOL_VERSION",
    "METHOD_NOT_FOUND",
    "PARSE_ERROR",
    "ServerState",
    "ToolsCallResult",
    "ToolsHandler",
    "ToolsListResult",
    "build_error",
    "build_response",
    "create_tools_call_request",
    "create_tools_list_request",
    "decode_message",
    "validate_message",
]
