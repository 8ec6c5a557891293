"""Tool registration records and tool-level errors.

Defines the data a registered tool carries and the error a handler raises
to report a problem back to the client as a tool result.
"""

from __future__ import annotations

import copy
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from enum import Enum
from typing import Any, NoReturn


class ToolError(Exception):
    """Raised by a tool handler to report a user-facing failure.

    The message is returned to the client inside a normal tool result with
    ``isError: true``. Any other exception escaping a handler is treated as
    an internal server error instead.
    """

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class RegistrationError(Exception):
    """Raised when a tool cannot be registered."""

    pass


class MissingArgumentError(Exception):
    """Raised when a one-parameter tool is called without arguments."""

    pass


def tool_throw(message: str) -> NoReturn:
    """Signal a tool error from inside a handler.

    Args:
        message: Text shown to the client.

    Raises:
        ToolError: Always.
    """
    raise ToolError(message)


@contextmanager
def tool_errors() -> Iterator[None]:
    """Report any exception raised in the block as a tool error.

    Useful around host calls whose failures are the user's concern (a
    missing file, a bad pattern) rather than a server fault.
    """
    try:
        yield
    except ToolError:
        raise
    except Exception as e:
        raise ToolError(str(e)) from e


class HandlerKind(Enum):
    """How a handler is called."""

    NO_ARGS = "no_args"
    ONE_ARG = "one_arg"


@dataclass(frozen=True)
class ToolRegistration:
    """A tool registered with the server."""

    name: str
    description: str
    input_schema: dict[str, Any]
    handler: Callable[..., Any]
    kind: HandlerKind
    param_name: str | None = None
    keyword_only: bool = False
    title: str | None = None
    read_only: bool | None = None

    def annotations(self) -> dict[str, Any]:
        """Build the MCP annotations object.

        Returns:
            ``title`` and ``readOnlyHint`` entries for whichever were set.
        """
        annotations: dict[str, Any] = {}
        if self.title is not None:
            annotations["title"] = self.title
        if self.read_only is not None:
            annotations["readOnlyHint"] = bool(self.read_only)
        return annotations

    def to_dict(self) -> dict[str, Any]:
        """Convert to MCP tool format.

        Returns:
            Dictionary in MCP tools/list format.
        """
        tool: dict[str, Any] = {
            "name": self.name,
            "description": self.description,
            "inputSchema": copy.deepcopy(self.input_schema),
        }
        annotations = self.annotations()
        if annotations:
            tool["annotations"] = annotations
        return tool
