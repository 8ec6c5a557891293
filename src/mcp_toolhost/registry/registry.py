"""Tool registry - holds registered tools and invokes their handlers."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from mcp_toolhost.registry.base import (
    HandlerKind,
    MissingArgumentError,
    RegistrationError,
    ToolRegistration,
)
from mcp_toolhost.registry.schema import SchemaError, derive_schema


class ToolRegistry:
    """Maps tool names to their registrations.

    Listing follows registration order. Registering a name again replaces
    the earlier tool in place.
    """

    def __init__(self) -> None:
        """Initialize an empty registry."""
        self._tools: dict[str, ToolRegistration] = {}

    def __len__(self) -> int:
        return len(self._tools)

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def register(
        self,
        handler: Callable[..., Any],
        name: str,
        description: str,
        title: str | None = None,
        read_only: bool | None = None,
    ) -> ToolRegistration:
        """Register a tool.

        Args:
            handler: Callable taking zero or one string argument and
                returning a string.
            name: Unique tool identifier.
            description: Human-readable description shown to the client.
            title: Optional display title.
            read_only: Optional read-only hint. None leaves it unset.

        Returns:
            The new registration.

        Raises:
            RegistrationError: If any argument is invalid or the handler's
                schema cannot be derived.
        """
        if not callable(handler):
            raise RegistrationError("Tool handler must be callable")
        if not name:
            raise RegistrationError("Tool name is required")
        if not description:
            raise RegistrationError(f"Description is required for tool '{name}'")

        try:
            derived = derive_schema(handler)
        except SchemaError as e:
            raise RegistrationError(f"Cannot register tool '{name}': {e}") from e

        registration = ToolRegistration(
            name=name,
            description=description,
            input_schema=derived.schema,
            handler=handler,
            kind=derived.kind,
            param_name=derived.param_name,
            keyword_only=derived.keyword_only,
            title=title,
            read_only=read_only,
        )
        self._tools[name] = registration
        return registration

    def unregister(self, name: str) -> bool:
        """Remove a tool.

        Args:
            name: Tool identifier.

        Returns:
            True if a tool was removed, False if none was registered.
        """
        return self._tools.pop(name, None) is not None

    def lookup(self, name: str) -> ToolRegistration | None:
        """Find a tool by name.

        Args:
            name: Tool identifier.

        Returns:
            The registration, or None if not registered.
        """
        return self._tools.get(name)

    def list(self) -> list[ToolRegistration]:
        """Snapshot of all registered tools."""
        return list(self._tools.values())

    def invoke(self, registration: ToolRegistration, arguments: dict[str, Any] | None) -> str:
        """Call a tool's handler.

        A one-parameter handler receives the value of the first entry in
        ``arguments``; further entries are ignored.

        Args:
            registration: Tool to call.
            arguments: Arguments from the tools/call request.

        Returns:
            The handler's text result.

        Raises:
            MissingArgumentError: If a one-parameter tool is called without
                arguments.
            TypeError: If the handler does not return a string.
            ToolError: Raised by the handler itself.
        """
        if registration.kind is HandlerKind.NO_ARGS:
            result = registration.handler()
        else:
            if not arguments:
                raise MissingArgumentError(
                    f"Missing argument '{registration.param_name}' for tool: {registration.name}"
                )
            value = next(iter(arguments.values()))
            if registration.keyword_only:
                result = registration.handler(**{registration.param_name: value})
            else:
                result = registration.handler(value)

        if not isinstance(result, str):
            raise TypeError(
                f"Tool '{registration.name}' returned {type(result).__name__}, expected str"
            )
        return result
