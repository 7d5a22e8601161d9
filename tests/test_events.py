"""Tests for stream event encoding."""

import json

from tabletalk.agent.events import (
    DoneEvent,
    ErrorEvent,
    TokenEvent,
    ToolCallEvent,
    ToolResultEvent,
    encode_event,
    encode_ndjson,
    is_terminal,
)


def test_event_shapes():
    assert json.loads(encode_event(TokenEvent(chunk="Hello "))) == {
        "type": "token",
        "chunk": "Hello ",
    }
    assert json.loads(encode_event(ToolCallEvent(name="list_schemas", input={"catalog": "tpch"}))) == {
        "type": "tool_call",
        "name": "list_schemas",
        "input": {"catalog": "tpch"},
    }
    assert json.loads(encode_event(ToolResultEvent(name="list_catalogs", output="{}"))) == {
        "type": "tool_result",
        "name": "list_catalogs",
        "output": "{}",
    }
    assert json.loads(encode_event(DoneEvent())) == {"type": "done"}
    assert json.loads(encode_event(ErrorEvent(message="boom"))) == {
        "type": "error",
        "message": "boom",
    }


def test_encoding_is_single_line():
    """Newlines inside payloads are escaped so each record fits one frame."""
    encoded = encode_event(TokenEvent(chunk="| a |\n| 1 |\n"))

    assert "\n" not in encoded
    assert json.loads(encoded)["chunk"] == "| a |\n| 1 |\n"


def test_encoding_keeps_unicode():
    assert "Zürich" in encode_event(TokenEvent(chunk="Zürich"))


def test_ndjson_line():
    line = encode_ndjson(DoneEvent())

    assert line == '{"type": "done"}\n'


def test_terminal_events():
    assert is_terminal(DoneEvent())
    assert is_terminal(ErrorEvent(message="x"))
    assert not is_terminal(TokenEvent(chunk="x"))
    assert not is_terminal(ToolCallEvent(name="x"))


def test_tool_result_error_flag():
    assert ToolResultEvent(name="t", output="Error: Tool t failed: x").is_error
    assert not ToolResultEvent(name="t", output='{"catalogs": []}').is_error
