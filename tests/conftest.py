"""Pytest configuration and shared fixtures."""

import pytest

from mcp_toolhost import MCPServer
from tests.sample_tools import echo


@pytest.fixture
def server():
    """A running server with no tools."""
    srv = MCPServer()
    srv.start()
    yield srv
    if srv.is_running:
        srv.stop()
    srv.close()


@pytest.fixture
def echo_server(server: MCPServer) -> MCPServer:
    """A running server with the echo tool registered."""
    server.register_tool(echo, "echo", "Echoes input")
    return server
