"""Tests for the tool registry and tool errors."""

import pytest

from mcp_toolhost.registry import (
    HandlerKind,
    MissingArgumentError,
    RegistrationError,
    ToolError,
    ToolRegistry,
    tool_errors,
    tool_throw,
)


def echo(text):
    """MCP Parameters:
    text - text to echo
    """
    return text


def greet():
    return "hello"


class TestRegister:
    """Tests for ToolRegistry.register."""

    def test_registers_tool(self):
        """Should store the registration under its name."""
        registry = ToolRegistry()
        tool = registry.register(echo, "echo", "Echoes input")

        assert registry.lookup("echo") is tool
        assert tool.kind is HandlerKind.ONE_ARG
        assert tool.input_schema["required"] == ["text"]
        assert len(registry) == 1
        assert "echo" in registry

    def test_rejects_non_callable(self):
        """Should reject a handler that cannot be called."""
        with pytest.raises(RegistrationError, match="callable"):
            ToolRegistry().register("not a function", "bad", "Bad tool")

    def test_rejects_empty_name(self):
        """Should require a tool name."""
        with pytest.raises(RegistrationError, match="name"):
            ToolRegistry().register(greet, "", "Greets")

    def test_rejects_missing_description(self):
        """Should require a description."""
        with pytest.raises(RegistrationError, match="Description"):
            ToolRegistry().register(greet, "greet", None)

    def test_rejects_undocumented_handler(self):
        """Should wrap schema derivation failures."""

        def undocumented(path):
            return path

        with pytest.raises(RegistrationError, match="undocumented"):
            ToolRegistry().register(undocumented, "undocumented", "No docs")

    def test_reregistration_replaces_tool(self):
        """Should overwrite a tool registered under the same name."""
        registry = ToolRegistry()
        registry.register(greet, "tool", "First")
        registry.register(echo, "tool", "Second")

        assert len(registry) == 1
        assert registry.lookup("tool").description == "Second"

    def test_list_keeps_registration_order(self):
        """Should list tools in registration order."""
        registry = ToolRegistry()
        registry.register(greet, "b", "B")
        registry.register(greet, "a", "A")

        assert [t.name for t in registry.list()] == ["b", "a"]


class TestUnregister:
    """Tests for ToolRegistry.unregister."""

    def test_removes_tool(self):
        """Should remove a registered tool and report it."""
        registry = ToolRegistry()
        registry.register(greet, "greet", "Greets")

        assert registry.unregister("greet") is True
        assert registry.lookup("greet") is None

    def test_missing_tool_is_not_an_error(self):
        """Should return False for unknown tools."""
        assert ToolRegistry().unregister("ghost") is False


class TestToolRegistration:
    """Tests for the tools/list representation of a tool."""

    def test_to_dict_without_annotations(self):
        """Should omit annotations when neither title nor hint is set."""
        tool = ToolRegistry().register(greet, "greet", "Greets")

        assert tool.to_dict() == {
            "name": "greet",
            "description": "Greets",
            "inputSchema": {"type": "object"},
        }

    def test_to_dict_with_title_and_read_only(self):
        """Should include title and readOnlyHint."""
        tool = ToolRegistry().register(greet, "greet", "Greets", title="Greeter", read_only=True)

        assert tool.to_dict()["annotations"] == {"title": "Greeter", "readOnlyHint": True}

    def test_explicit_false_read_only(self):
        """Should emit readOnlyHint false when explicitly set."""
        tool = ToolRegistry().register(greet, "greet", "Greets", read_only=False)

        assert tool.to_dict()["annotations"] == {"readOnlyHint": False}

    def test_schema_copy_does_not_leak(self):
        """Should not let callers mutate the cached schema."""
        tool = ToolRegistry().register(echo, "echo", "Echoes")
        tool.to_dict()["inputSchema"]["required"].append("other")

        assert tool.input_schema["required"] == ["text"]


class TestInvoke:
    """Tests for ToolRegistry.invoke."""

    def test_calls_zero_argument_handler(self):
        """Should call without arguments, ignoring any supplied."""
        registry = ToolRegistry()
        tool = registry.register(greet, "greet", "Greets")

        assert registry.invoke(tool, {"unused": "x"}) == "hello"

    def test_passes_first_argument_only(self):
        """Should pass the value of the first argument entry."""
        registry = ToolRegistry()
        tool = registry.register(echo, "echo", "Echoes")

        assert registry.invoke(tool, {"first": "a", "text": "b"}) == "a"

    def test_passes_keyword_only_argument(self):
        """Should pass keyword-only parameters by name."""

        def shout(*, text):
            """MCP Parameters:
            text - text to shout
            """
            return text.upper()

        registry = ToolRegistry()
        tool = registry.register(shout, "shout", "Shouts")

        assert registry.invoke(tool, {"text": "hi"}) == "HI"

    def test_missing_argument(self):
        """Should reject calling a one-argument tool without arguments."""
        registry = ToolRegistry()
        tool = registry.register(echo, "echo", "Echoes")

        with pytest.raises(MissingArgumentError, match="text"):
            registry.invoke(tool, {})

    def test_rejects_non_string_result(self):
        """Should reject handlers that do not return text."""
        registry = ToolRegistry()
        tool = registry.register(lambda: 42, "answer", "Answers")

        with pytest.raises(TypeError, match="int"):
            registry.invoke(tool, None)

    def test_propagates_tool_error(self):
        """Should let ToolError through for the caller to report."""

        def fail():
            tool_throw("nope")

        registry = ToolRegistry()
        tool = registry.register(fail, "fail", "Fails")

        with pytest.raises(ToolError, match="nope"):
            registry.invoke(tool, None)


class TestToolErrors:
    """Tests for tool error helpers."""

    def test_tool_throw_raises(self):
        """Should raise ToolError with the message."""
        with pytest.raises(ToolError) as exc_info:
            tool_throw("bad input")
        assert exc_info.value.message == "bad input"

    def test_tool_errors_converts_exceptions(self):
        """Should turn any exception into a ToolError."""
        with pytest.raises(ToolError) as exc_info:
            with tool_errors():
                raise FileNotFoundError("no such file: a.txt")
        assert exc_info.value.message == "no such file: a.txt"
        assert isinstance(exc_info.value.__cause__, FileNotFoundError)

    def test_tool_errors_keeps_tool_error(self):
        """Should re-raise ToolError unchanged."""
        original = ToolError("already a tool error")
        with pytest.raises(ToolError) as exc_info:
            with tool_errors():
                raise original
        assert exc_info.value is original
