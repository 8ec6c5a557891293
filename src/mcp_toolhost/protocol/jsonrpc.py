"""JSON-RPC 2.0 message validation and formatting.

Implements the parts of the JSON-RPC 2.0 specification used by MCP:
single (non-batch) requests and notifications, and success/error
response envelopes.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any

# Standard JSON-RPC 2.0 error codes
PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603

JSONRPC_VERSION = "2.0"

# Methods with this prefix are notifications and never carry an id
NOTIFICATION_PREFIX = "notifications/"

_MISSING = object()


class JsonRpcError(Exception):
    """JSON-RPC error with code and message."""

    def __init__(
        self,
        code: int,
        message: str,
        msg_id: int | str | None = None,
        data: Any | None = None,
    ) -> None:
        """Initialize the error.

        Args:
            code: JSON-RPC error code.
            message: Human-readable error message.
            msg_id: Id of the offending request, if one could be read.
            data: Optional additional error data.
        """
        super().__init__(message)
        self.code = code
        self.message = message
        self.msg_id = msg_id
        self.data = data


@dataclass
class JsonRpcRequest:
    """Represents a JSON-RPC request (has id)."""

    id: int | str
    method: str
    params: dict[str, Any] | list[Any] | None = None


@dataclass
class JsonRpcNotification:
    """Represents a JSON-RPC notification (no id)."""

    method: str
    params: dict[str, Any] | list[Any] | None = None


def decode_message(raw: str) -> Any:
    """Decode a raw JSON-RPC message.

    Args:
        raw: Raw JSON string.

    Returns:
        The decoded JSON value.

    Raises:
        JsonRpcError: PARSE_ERROR if the string is not valid JSON.
    """
    try:
        return json.loads(raw)
    except (json.JSONDecodeError, TypeError) as e:
        raise JsonRpcError(PARSE_ERROR, f"Parse error: {e}") from e


def validate_message(data: Any) -> JsonRpcRequest | JsonRpcNotification:
    """Validate a decoded JSON-RPC envelope.

    Args:
        data: Decoded JSON value.

    Returns:
        Validated request or notification.

    Raises:
        JsonRpcError: INVALID_REQUEST describing the first violation found.
    """
    # Batches are not supported
    if not isinstance(data, dict):
        raise JsonRpcError(INVALID_REQUEST, "Invalid Request: message must be an object")

    msg_id = data.get("id", _MISSING)
    echo_id = None if msg_id is _MISSING else msg_id
    method = data.get("method")
    is_notification = isinstance(method, str) and method.startswith(NOTIFICATION_PREFIX)

    if data.get("jsonrpc") != JSONRPC_VERSION:
        raise JsonRpcError(
            INVALID_REQUEST, "Invalid Request: Not JSON-RPC 2.0", msg_id=echo_id
        )

    if is_notification and msg_id is not _MISSING:
        raise JsonRpcError(
            INVALID_REQUEST,
            "Invalid Request: Notifications must not include 'id' field",
            msg_id=echo_id,
        )

    if not is_notification and msg_id is _MISSING:
        raise JsonRpcError(INVALID_REQUEST, "Invalid Request: Missing required 'id' field")

    if not isinstance(method, str):
        raise JsonRpcError(
            INVALID_REQUEST, "Invalid Request: Missing required 'method' field", msg_id=echo_id
        )

    params = data.get("params")
    if is_notification:
        return JsonRpcNotification(method=method, params=params)
    return JsonRpcRequest(id=msg_id, method=method, params=params)


def build_response(msg_id: int | str, result: Any) -> dict[str, Any]:
    """Build a successful JSON-RPC response envelope.

    Args:
        msg_id: Request ID to echo back.
        result: Result payload.

    Returns:
        Response envelope.
    """
    return {
        "jsonrpc": JSONRPC_VERSION,
        "id": msg_id,
        "result": result,
    }


def build_error(
    msg_id: int | str | None,
    code: int,
    message: str,
    data: Any | None = None,
) -> dict[str, Any]:
    """Build a JSON-RPC error response envelope.

    Args:
        msg_id: Request ID (or None for parse errors).
        code: Error code.
        message: Error message.
        data: Optional error data.

    Returns:
        Error envelope.
    """
    error_obj: dict[str, Any] = {
        "code": code,
        "message": message,
    }
    if data is not None:
        error_obj["data"] = data

    return {
        "jsonrpc": JSONRPC_VERSION,
        "id": msg_id,
        "error": error_obj,
    }


def build_error_from(error: JsonRpcError, msg_id: int | str | None = None) -> dict[str, Any]:
    """Build an error envelope from a JsonRpcError.

    The error's own id wins over ``msg_id`` when it carries one.
    """
    return build_error(
        error.msg_id if error.msg_id is not None else msg_id,
        error.code,
        error.message,
        error.data,
    )
