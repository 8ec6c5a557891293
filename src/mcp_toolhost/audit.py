"""Message and tool-call logging for the MCP server.

Append-only JSON Lines log of the raw JSON-RPC traffic (when I/O logging
is on), tool executions and internal errors.
"""

from __future__ import annotations

import json
import re
from datetime import UTC, datetime
from pathlib import Path
from typing import Any, Literal

Direction = Literal["in", "out"]

# Patterns for sensitive argument keys
SENSITIVE_PATTERNS = [
    re.compile(r"password", re.IGNORECASE),
    re.compile(r"secret", re.IGNORECASE),
    re.compile(r"api[_-]?key", re.IGNORECASE),
    re.compile(r"token", re.IGNORECASE),
    re.compile(r"auth", re.IGNORECASE),
    re.compile(r"credential", re.IGNORECASE),
    re.compile(r"private[_-]?key", re.IGNORECASE),
]


def _is_sensitive_key(key: str) -> bool:
    """Check if a key name indicates sensitive data."""
    return any(pattern.search(key) for pattern in SENSITIVE_PATTERNS)


def _sanitize_arguments(arguments: dict[str, Any]) -> dict[str, Any]:
    """Sanitize arguments by redacting sensitive values.

    Args:
        arguments: Original arguments dictionary.

    Returns:
        New dictionary with sensitive values redacted.
    """
    sanitized = {}
    for key, value in arguments.items():
        if _is_sensitive_key(key):
            sanitized[key] = "[REDACTED]"
        elif isinstance(value, dict):
            sanitized[key] = _sanitize_arguments(value)
        else:
            sanitized[key] = value
    return sanitized


def _get_timestamp() -> str:
    """Get current UTC timestamp in ISO 8601 format."""
    return datetime.now(UTC).isoformat().replace("+00:00", "Z")


class MessageLog:
    """Append-only message log with JSON Lines format.

    The log file is flushed after each write so a crashed host still
    leaves a complete trace.
    """

    def __init__(self, log_path: Path) -> None:
        """Initialize the message log.

        Args:
            log_path: Path to the log file.
        """
        self._log_path = log_path
        self._log_path.parent.mkdir(parents=True, exist_ok=True)
        self._file = open(log_path, "a", encoding="utf-8")  # noqa: SIM115
        self.dropped = 0

    @property
    def path(self) -> Path:
        return self._log_path

    def _write_line(self, data: dict[str, Any]) -> None:
        """Write a JSON line to the log file and flush.

        A failed write (closed file, full disk, revoked permissions) drops
        the event and counts it in ``dropped``; logging never interrupts
        message handling.
        """
        line = json.dumps(data, default=str)
        try:
            self._file.write(line + "\n")
            self._file.flush()
        except (OSError, ValueError):
            self.dropped += 1

    def log_message(self, direction: Direction, message: str) -> None:
        """Log a raw JSON-RPC message.

        Args:
            direction: "in" for client messages, "out" for responses.
            message: Raw message text.
        """
        self._write_line(
            {
                "type": "message",
                "timestamp": _get_timestamp(),
                "direction": direction,
                "message": message,
            }
        )

    def log_tool_call(self, tool_name: str, arguments: dict[str, Any]) -> None:
        """Log a tool invocation.

        Args:
            tool_name: Name of the tool being invoked.
            arguments: Tool arguments (will be sanitized).
        """
        self._write_line(
            {
                "type": "tool_call",
                "timestamp": _get_timestamp(),
                "tool_name": tool_name,
                "arguments": _sanitize_arguments(arguments),
            }
        )

    def log_tool_result(self, tool_name: str, status: str, duration_ms: float) -> None:
        """Log the outcome of a tool invocation.

        Args:
            tool_name: Name of the tool.
            status: success, tool_error, invalid_params or internal_error.
            duration_ms: Execution time in milliseconds.
        """
        self._write_line(
            {
                "type": "tool_result",
                "timestamp": _get_timestamp(),
                "tool_name": tool_name,
                "result_status": status,
                "execution_time_ms": duration_ms,
            }
        )

    def log_error(self, message: str, details: dict[str, Any] | None = None) -> None:
        """Log an internal server error.

        Args:
            message: Error description.
            details: Additional context.
        """
        self._write_line(
            {
                "type": "error",
                "timestamp": _get_timestamp(),
                "message": message,
                "details": details or {},
            }
        )

    def close(self) -> None:
        """Close the log file."""
        if self._file and not self._file.closed:
            self._file.close()

    def __enter__(self) -> MessageLog:
        """Context manager entry."""
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Context manager exit."""
        self.close()
