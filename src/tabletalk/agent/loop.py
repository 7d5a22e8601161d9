"""Streaming tool-use agent loop.

Each round asks the model for a completion. A completion without tool calls
is the final answer and is streamed as ``token`` events; otherwise every
requested tool runs through the registry, its outcome is appended to the
transcript, and the next round starts. The number of rounds is bounded so
the stream always terminates.
"""

import asyncio
import logging
import re
from collections.abc import AsyncIterator, Sequence
from contextlib import aclosing
from dataclasses import dataclass
from enum import Enum
from typing import Any

from tabletalk.agent.events import (
    DoneEvent,
    ErrorEvent,
    StreamEvent,
    TokenEvent,
    ToolCallEvent,
    ToolResultEvent,
)
from tabletalk.config.schema import DEFAULT_SYSTEM_PROMPT
from tabletalk.llm.client import CompletionResponse, LLMClient, Message
from tabletalk.tools.base import ToolError
from tabletalk.tools.registry import ToolRegistry

logger = logging.getLogger(__name__)

EMPTY_ANSWER_TOKEN = "I've completed the analysis. "
ROUND_LIMIT_MESSAGE = (
    "I've completed the tool execution but reached the maximum number of processing "
    "rounds. Please try rephrasing your question or ask for specific information."
)

# A word plus the whitespace after it, or a run of leading whitespace
_TOKEN_RE = re.compile(r"\S+\s*|\s+")


class AgentPhase(str, Enum):
    """Where a conversation is in the completion/tool cycle."""

    AWAITING_COMPLETION = "awaiting_completion"
    EXECUTING_TOOLS = "executing_tools"
    STREAMING_FINAL = "streaming_final"
    DONE = "done"
    FAILED = "failed"


@dataclass(frozen=True)
class ChatTurn:
    """A prior user or assistant turn supplied by the caller."""

    role: str  # "user" or "assistant"
    content: str


class AgentState:
    """Transcript, round counter and phase of one conversation."""

    def __init__(self, system_prompt: str):
        """Initialize agent state.

        Args:
            system_prompt: System message seeded as the first transcript entry
        """
        self.messages: list[Message] = [Message(role="system", content=system_prompt)]
        self.rounds = 0
        self.phase = AgentPhase.AWAITING_COMPLETION

    def add_turn(self, turn: ChatTurn) -> None:
        self.messages.append(Message(role=turn.role, content=turn.content))

    def add_user_message(self, content: str) -> None:
        self.messages.append(Message(role="user", content=content))

    def add_assistant_message(self, response: CompletionResponse) -> None:
        """Record a model turn, keeping tool call ids and argument text verbatim.

        Args:
            response: LLM completion response
        """
        self.messages.append(
            Message(
                role="assistant",
                content=response.content or None,
                tool_calls=response.tool_calls,
            )
        )

    def add_tool_result(self, tool_call_id: str, tool_name: str, result: str) -> None:
        """Record the output (or error text) answering a tool call.

        Args:
            tool_call_id: ID of the tool call
            tool_name: Name of the tool that was executed
            result: Tool output, or ``Error: ...`` text on failure
        """
        self.messages.append(
            Message(
                role="tool",
                content=result,
                tool_call_id=tool_call_id,
                name=tool_name,
            )
        )


def split_tokens(text: str) -> list[str]:
    """Split an answer into word-sized chunks whose concatenation is ``text``."""
    return _TOKEN_RE.findall(text)


class AgentLoop:
    """Drives one conversation between the model and the tool registry.

    Construct one per conversation; nothing is shared between instances
    except the read-only registry and the LLM client.
    """

    def __init__(
        self,
        llm: LLMClient,
        registry: ToolRegistry,
        max_rounds: int = 50,
        system_prompt: str = DEFAULT_SYSTEM_PROMPT,
        token_delay: float = 0.0,
    ):
        """Initialize the loop.

        Args:
            llm: LLM client for completions
            registry: Tools the model may call
            max_rounds: Maximum completion requests before giving up
            system_prompt: Instruction seeded at the start of the transcript
            token_delay: Pause in seconds between streamed answer tokens
        """
        if max_rounds < 1:
            raise ValueError("max_rounds must be at least 1")
        self.llm = llm
        self.registry = registry
        self.max_rounds = max_rounds
        self.system_prompt = system_prompt
        self.token_delay = token_delay
        self.state: AgentState | None = None
        self._streaming = False

    async def stream(
        self, history: Sequence[ChatTurn], user_input: str | None = None
    ) -> AsyncIterator[StreamEvent]:
        """Run the conversation, yielding events as they happen.

        The stream always ends with exactly one ``DoneEvent`` or
        ``ErrorEvent``. Closing the generator early abandons any pending
        completion or tool call.

        Only one stream may run on a loop at a time; ``state`` describes it.

        Args:
            history: Prior user/assistant turns, oldest first
            user_input: New user message appended after ``history``

        Yields:
            StreamEvent records in emission order

        Raises:
            RuntimeError: If another stream is already running on this loop
        """
        if self._streaming:
            raise RuntimeError("AgentLoop is already streaming; create one loop per conversation")
        self._streaming = True
        try:
            async with aclosing(self._run(history, user_input)) as events:
                async for event in events:
                    yield event
        finally:
            self._streaming = False

    async def _run(
        self, history: Sequence[ChatTurn], user_input: str | None
    ) -> AsyncIterator[StreamEvent]:
        state = AgentState(self.system_prompt)
        for turn in history:
            state.add_turn(turn)
        if user_input:
            state.add_user_message(user_input)
        self.state = state

        tools = self.registry.to_openai_format() or None

        while state.rounds < self.max_rounds:
            state.rounds += 1
            state.phase = AgentPhase.AWAITING_COMPLETION
            logger.info(
                "Agent round %d, conversation length: %d", state.rounds, len(state.messages)
            )

            try:
                response = await self.llm.complete(messages=list(state.messages), tools=tools)
            except Exception as e:
                state.phase = AgentPhase.FAILED
                logger.exception("Completion request failed in round %d", state.rounds)
                yield ErrorEvent(message=str(e) or type(e).__name__)
                return

            if not response.tool_calls:
                state.phase = AgentPhase.STREAMING_FINAL
                state.add_assistant_message(response)
                async for event in self._stream_answer(response.content):
                    yield event
                state.phase = AgentPhase.DONE
                yield DoneEvent()
                return

            state.phase = AgentPhase.EXECUTING_TOOLS
            state.add_assistant_message(response)

            for tool_call in response.tool_calls:
                args = tool_call.parse_arguments()
                yield ToolCallEvent(name=tool_call.name, input=args)

                output = await self._invoke(tool_call.name, args)
                state.add_tool_result(tool_call.id, tool_call.name, output)
                yield ToolResultEvent(name=tool_call.name, output=output)

        logger.warning("Agent reached max rounds (%d) without final response", self.max_rounds)
        state.phase = AgentPhase.DONE
        yield TokenEvent(chunk=ROUND_LIMIT_MESSAGE)
        yield DoneEvent()

    async def _stream_answer(self, content: str) -> AsyncIterator[TokenEvent]:
        if not content.strip():
            yield TokenEvent(chunk=EMPTY_ANSWER_TOKEN)
            return

        for chunk in split_tokens(content):
            yield TokenEvent(chunk=chunk)
            if self.token_delay:
                await asyncio.sleep(self.token_delay)

    async def _invoke(self, name: str, args: dict[str, Any]) -> str:
        try:
            return await self.registry.invoke(name, args)
        except ToolError as e:
            logger.warning("%s", e)
            return f"Error: {e}"
