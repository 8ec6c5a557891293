"""Expose in-process Python functions as MCP tools over JSON-RPC."""

from mcp_toolhost.config import ConfigLoadError, ServerConfig, load_config
from mcp_toolhost.protocol.lifecycle import LifecycleError
from mcp_toolhost.protocol.tools import create_tools_call_request, create_tools_list_request
from mcp_toolhost.registry.base import RegistrationError, ToolError, tool_errors, tool_throw
from mcp_toolhost.server import MCPServer

__version__ = "0.1.0"

__all__ = [
    "ConfigLoadError",
    "LifecycleError",
    "MCPServer",
    "RegistrationError",
    "ServerConfig",
    "ToolError",
    "create_tools_call_request",
    "create_tools_list_request",
    "load_config",
    "tool_errors",
    "tool_throw",
]
