"""Streaming tool-use agent loop.

The loop alternates between asking the model for a completion and running
the tools it requests, and reports progress as a stream of tagged events
(``token``, ``tool_call``, ``tool_result``) closed by ``done`` or ``error``.
Tool failures are fed back to the model; only a failed completion request
ends a stream with ``error``.

Usage::

    from tabletalk.agent.builder import create_trino_client
    from tabletalk.agent.loop import AgentLoop
    from tabletalk.config.loader import load_config
    from tabletalk.llm.factory import create_llm_client
    from tabletalk.tools.trino import create_trino_registry

    config = load_config()
    registry = create_trino_registry(create_trino_client(config))
    loop = AgentLoop(llm=create_llm_client(config), registry=registry)
    async for event in loop.stream([], "What catalogs are available?"):
        print(event.to_dict())
"""

from tabletalk.agent.builder import build_agent_loop, create_trino_client, stream_chat
from tabletalk.agent.events import (
    DoneEvent,
    ErrorEvent,
    StreamEvent,
    TokenEvent,
    ToolCallEvent,
    ToolResultEvent,
    encode_event,
    encode_ndjson,
    is_terminal,
)
from tabletalk.agent.loop import AgentLoop, AgentPhase, AgentState, ChatTurn

__all__ = [
    "AgentLoop",
    "AgentPhase",
    "AgentState",
    "ChatTurn",
    "DoneEvent",
    "ErrorEvent",
    "StreamEvent",
    "TokenEvent",
    "ToolCallEvent",
    "ToolResultEvent",
    "build_agent_loop",
    "create_trino_client",
    "encode_event",
    "encode_ndjson",
    "is_terminal",
    "stream_chat",
]
