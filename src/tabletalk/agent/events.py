"""Events emitted by the agent loop and their wire encoding.

Every stream is a sequence of ``token``, ``tool_call`` and ``tool_result``
records closed by exactly one terminal record, ``done`` or ``error``. Each
record encodes to a single-line JSON object tagged by ``type``::

    {"type": "token", "chunk": "..."}
    {"type": "tool_call", "name": "...", "input": {...}}
    {"type": "tool_result", "name": "...", "output": "..."}
    {"type": "done"}
    {"type": "error", "message": "..."}
"""

import json
from dataclasses import dataclass, field
from typing import Any, ClassVar, Union


@dataclass(frozen=True)
class TokenEvent:
    """A fragment of the final answer."""

    chunk: str
    type: ClassVar[str] = "token"

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type, "chunk": self.chunk}


@dataclass(frozen=True)
class ToolCallEvent:
    """A tool is about to run with the given decoded arguments."""

    name: str
    input: dict[str, Any] = field(default_factory=dict)
    type: ClassVar[str] = "tool_call"

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type, "name": self.name, "input": self.input}


@dataclass(frozen=True)
class ToolResultEvent:
    """A tool finished; failures carry an ``Error:`` prefixed output."""

    name: str
    output: str
    type: ClassVar[str] = "tool_result"

    @property
    def is_error(self) -> bool:
        return self.output.startswith("Error:")

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type, "name": self.name, "output": self.output}


@dataclass(frozen=True)
class DoneEvent:
    """Normal end of stream."""

    type: ClassVar[str] = "done"

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type}


@dataclass(frozen=True)
class ErrorEvent:
    """Abnormal end of stream."""

    message: str
    type: ClassVar[str] = "error"

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type, "message": self.message}


StreamEvent = Union[TokenEvent, ToolCallEvent, ToolResultEvent, DoneEvent, ErrorEvent]


def is_terminal(event: StreamEvent) -> bool:
    """True for ``done`` and ``error``, the events that close a stream."""
    return isinstance(event, (DoneEvent, ErrorEvent))


def encode_event(event: StreamEvent) -> str:
    """Serialize an event to compact single-line JSON."""
    return json.dumps(event.to_dict(), ensure_ascii=False, default=str)


def encode_ndjson(event: StreamEvent) -> str:
    """Serialize an event as one newline-terminated JSON line."""
    return encode_event(event) + "\n"

