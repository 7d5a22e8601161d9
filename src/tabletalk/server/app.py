"""FastAPI application factory."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from tabletalk import __version__
from tabletalk.agent.builder import create_trino_client
from tabletalk.config.schema import TabletalkConfig
from tabletalk.llm.client import LLMClient
from tabletalk.server.routes import create_router
from tabletalk.tools.registry import ToolRegistry
from tabletalk.tools.trino import create_trino_registry
from tabletalk.trino.client import TrinoClient


def create_app(
    config: TabletalkConfig,
    llm: LLMClient | None = None,
    registry: ToolRegistry | None = None,
    trino_client: TrinoClient | None = None,
) -> FastAPI:
    """Create and configure FastAPI application.

    Args:
        config: tabletalk configuration
        llm: Optional shared LLM client (built per request from config if None)
        registry: Optional tool registry (Trino tools if None)
        trino_client: Optional Trino client (built from config if None)

    Returns:
        Configured FastAPI app
    """
    if trino_client is None:
        trino_client = create_trino_client(config)
    if registry is None:
        registry = create_trino_registry(trino_client)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await trino_client.close()

    app = FastAPI(
        title="tabletalk",
        description="Conversational data exploration for Trino",
        version=__version__,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.server.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(create_router(config, registry, trino_client, llm=llm))

    return app
