"""Wire agent loops, clients and tools together from configuration."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Sequence
from typing import TYPE_CHECKING

from tabletalk.agent.events import DoneEvent, ErrorEvent, StreamEvent
from tabletalk.agent.loop import AgentLoop, ChatTurn
from tabletalk.llm.factory import MissingCredentialError, create_llm_client
from tabletalk.trino.client import TrinoClient

if TYPE_CHECKING:
    from tabletalk.config.schema import TabletalkConfig
    from tabletalk.llm.client import LLMClient
    from tabletalk.tools.registry import ToolRegistry

logger = logging.getLogger(__name__)


def create_trino_client(config: TabletalkConfig) -> TrinoClient:
    """Create a Trino client from the ``trino`` config section."""
    trino = config.trino
    return TrinoClient(
        host=trino.host,
        port=trino.port,
        scheme=trino.scheme,
        user=trino.user,
        catalog=trino.catalog,
        schema=trino.schema_,
        source=trino.source,
        timeout=trino.timeout,
    )


def build_agent_loop(config: TabletalkConfig, llm: LLMClient, registry: ToolRegistry) -> AgentLoop:
    """Create a fresh agent loop for one conversation."""
    return AgentLoop(
        llm=llm,
        registry=registry,
        max_rounds=config.agent.max_rounds,
        system_prompt=config.agent.system_prompt,
        token_delay=config.agent.token_delay,
    )


async def stream_chat(
    config: TabletalkConfig,
    registry: ToolRegistry,
    history: Sequence[ChatTurn],
    user_input: str | None = None,
    llm: LLMClient | None = None,
) -> AsyncIterator[StreamEvent]:
    """Stream one conversation turn end to end.

    When ``llm`` is not given a client is created from config and closed when
    the stream finishes or is abandoned. Without an API key the stream is
    ``error`` followed by ``done`` and the loop never starts.

    Args:
        config: tabletalk configuration
        registry: Tools available to the model
        history: Prior user/assistant turns
        user_input: New user message
        llm: Pre-built LLM client (not closed here)

    Yields:
        StreamEvent records ending in ``done`` or ``error``
    """
    owned = None
    if llm is None:
        try:
            llm = owned = create_llm_client(config)
        except MissingCredentialError as e:
            logger.error("%s", e)
            yield ErrorEvent(message=str(e))
            yield DoneEvent()
            return

    try:
        loop = build_agent_loop(config, llm, registry)
        async for event in loop.stream(history, user_input):
            yield event
    finally:
        if owned is not None:
            await owned.close()
