"""Tool registry and schema derivation."""

from mcp_toolhost.registry.base import (
    HandlerKind,
    MissingArgumentError,
    RegistrationError,
    ToolError,
    ToolRegistration,
    tool_errors,
    tool_throw,
)
from mcp_toolhost.registry.registry import ToolRegistry
from mcp_toolhost.registry.schema import (
    PARAMETERS_MARKER,
    ParameterDoc,
    SchemaError,
    derive_schema,
    parse_mcp_parameters,
)

__all__ = [
    "HandlerKind",
    "MissingArgumentError",
    "PARAMETERS_MARKER",
    "ParameterDoc",
    "RegistrationError",
    "SchemaError",
    "ToolError",
    "ToolRegistration",
    "ToolRegistry",
    "derive_schema",
    "parse_mcp_parameters",
    "tool_errors",
    "tool_throw",
]
