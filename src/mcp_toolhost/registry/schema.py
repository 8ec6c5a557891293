"""Input schema derivation for tool handlers.

A handler takes zero or one parameter. A one-parameter handler documents
its argument in a trailing docstring section::

    def read_file(path):
        \"\"\"Return the contents of a file.

        MCP Parameters:
          path - absolute path of the file to read
        \"\"\"

Every tool argument is modeled as a string.
"""

from __future__ import annotations

import inspect
import re
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from jsonschema import Draft202012Validator
from jsonschema.exceptions import SchemaError as JsonSchemaError

from mcp_toolhost.registry.base import HandlerKind

PARAMETERS_MARKER = "MCP Parameters:"

# "name - description"
PARAMETER_LINE = re.compile(r"^\s*([A-Za-z_]\w*)\s+-\s*(.*?)\s*$")

VARIADIC_KINDS = (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD)


class SchemaError(Exception):
    """Raised when a handler's signature or docstring cannot be described."""

    pass


@dataclass(frozen=True)
class ParameterDoc:
    """A documented tool parameter."""

    name: str
    description: str


@dataclass(frozen=True)
class DerivedSchema:
    """Result of inspecting a handler."""

    kind: HandlerKind
    param_name: str | None
    keyword_only: bool
    schema: dict[str, Any]


def parse_mcp_parameters(docstring: str | None) -> list[ParameterDoc]:
    """Parse the ``MCP Parameters:`` section of a docstring.

    Args:
        docstring: Handler documentation, may be None.

    Returns:
        Documented parameters in order of appearance. Empty when the
        docstring has no parameters section.

    Raises:
        SchemaError: If a parameter is documented twice.
    """
    if not docstring:
        return []

    lines = docstring.splitlines()
    for index, line in enumerate(lines):
        if line.strip() == PARAMETERS_MARKER:
            section = lines[index + 1 :]
            break
    else:
        return []

    names: list[str] = []
    descriptions: dict[str, list[str]] = {}
    for line in section:
        if not line.strip():
            continue
        match = PARAMETER_LINE.match(line)
        if match:
            name, description = match.groups()
            if name in descriptions:
                raise SchemaError(f"Duplicate parameter '{name}' in MCP Parameters")
            names.append(name)
            descriptions[name] = [description] if description else []
        elif names:
            # Continuation of the previous entry
            descriptions[names[-1]].append(line.strip())

    return [ParameterDoc(name=name, description=" ".join(descriptions[name])) for name in names]


def _declared_parameters(handler: Callable[..., Any]) -> list[inspect.Parameter]:
    """Return the handler's non-variadic parameters."""
    try:
        signature = inspect.signature(handler)
    except (TypeError, ValueError) as e:
        raise SchemaError(f"Cannot inspect handler signature: {e}") from e
    return [p for p in signature.parameters.values() if p.kind not in VARIADIC_KINDS]


def derive_schema(handler: Callable[..., Any]) -> DerivedSchema:
    """Derive the input schema for a handler.

    Args:
        handler: Callable taking zero or one parameter.

    Returns:
        The handler kind, its parameter name and the JSON schema of its
        arguments.

    Raises:
        SchemaError: If the handler takes more than one parameter, or its
            single parameter is not documented exactly once.
    """
    params = _declared_parameters(handler)

    if not params:
        return DerivedSchema(
            kind=HandlerKind.NO_ARGS,
            param_name=None,
            keyword_only=False,
            schema={"type": "object"},
        )

    if len(params) > 1:
        names = ", ".join(p.name for p in params)
        raise SchemaError(f"Tool handlers take at most one parameter, got: {names}")

    param = params[0]
    documented = parse_mcp_parameters(inspect.getdoc(handler))

    for doc in documented:
        if doc.name != param.name:
            raise SchemaError(
                f"Documented parameter '{doc.name}' does not match "
                f"handler parameter '{param.name}'"
            )

    if not documented:
        raise SchemaError(
            f"Parameter '{param.name}' must be documented in an "
            f"'{PARAMETERS_MARKER}' section"
        )

    property_schema: dict[str, Any] = {"type": "string"}
    if documented[0].description:
        property_schema["description"] = documented[0].description

    schema = {
        "type": "object",
        "properties": {param.name: property_schema},
        "required": [param.name],
    }

    try:
        Draft202012Validator.check_schema(schema)
    except JsonSchemaError as e:
        raise SchemaError(f"Derived schema is invalid: {e.message}") from e

    return DerivedSchema(
        kind=HandlerKind.ONE_ARG,
        param_name=param.name,
        keyword_only=param.kind == inspect.Parameter.KEYWORD_ONLY,
        schema=schema,
    )
