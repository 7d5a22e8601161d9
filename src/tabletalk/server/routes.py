"""API routes for the tabletalk server."""

import logging
from typing import Any, Literal

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field
from sse_starlette.sse import EventSourceResponse

from tabletalk import __version__
from tabletalk.agent.builder import stream_chat
from tabletalk.agent.events import ErrorEvent, encode_event
from tabletalk.agent.loop import ChatTurn
from tabletalk.config.schema import TabletalkConfig
from tabletalk.llm.client import LLMClient
from tabletalk.tools.registry import ToolRegistry
from tabletalk.trino.client import TrinoClient

logger = logging.getLogger(__name__)


class ChatMessage(BaseModel):
    """One prior conversation turn."""

    role: Literal["user", "assistant"]
    content: str


class ChatRequest(BaseModel):
    """Request body for the streaming chat endpoint."""

    messages: list[ChatMessage] = Field(default_factory=list)
    input: str = ""


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    model: str
    version: str


def create_router(
    config: TabletalkConfig,
    registry: ToolRegistry,
    trino_client: TrinoClient,
    llm: LLMClient | None = None,
) -> APIRouter:
    """Create API router.

    Args:
        config: tabletalk configuration
        registry: Tools exposed to the model
        trino_client: Client used by the connectivity probe
        llm: Shared LLM client; when None each request builds its own from config

    Returns:
        Configured API router
    """
    router = APIRouter()

    @router.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        """Health check endpoint."""
        return HealthResponse(
            status="healthy",
            model=config.llm.model,
            version=__version__,
        )

    @router.get("/api/health/trino")
    async def trino_health() -> Any:
        """Probe the Trino coordinator with ``SELECT 1`` and list the tools.

        Returns ``{ok, connection, url, toolCount, tools}``; an unexpected
        failure gives ``{ok: false, error}`` with status 500.
        """
        try:
            status = await trino_client.connection_status(features=registry.names())
        except Exception as e:
            logger.exception("Trino health check failed")
            return JSONResponse(
                status_code=500,
                content={"ok": False, "error": str(e) or type(e).__name__},
            )
        return {
            "ok": True,
            "connection": status.to_dict(),
            "url": status.endpoint,
            "toolCount": len(registry),
            "tools": [schema.describe() for schema in registry.list_definitions()],
        }

    @router.post("/api/chat/stream")
    async def chat_stream(request: ChatRequest) -> EventSourceResponse:
        """Chat endpoint - Server-Sent Events stream of agent events.

        Each SSE ``data`` frame holds one JSON event record. The stream ends
        with a ``done`` or ``error`` record.
        """
        history = [ChatTurn(role=m.role, content=m.content) for m in request.messages]

        async def event_generator() -> Any:
            """Generate SSE events."""
            try:
                async for event in stream_chat(
                    config, registry, history, user_input=request.input or None, llm=llm
                ):
                    yield {"data": encode_event(event)}
            except Exception as e:
                logger.exception("Chat stream failed")
                yield {"data": encode_event(ErrorEvent(message=str(e) or type(e).__name__))}

        return EventSourceResponse(event_generator())

    return router
