"""Pytest configuration and shared fixtures."""

from typing import Any

import pytest

from tabletalk.config.schema import TabletalkConfig
from tabletalk.tools.registry import ToolRegistry


@pytest.fixture
def default_config() -> TabletalkConfig:
    """Provide a default configuration for tests."""
    return TabletalkConfig()


@pytest.fixture
def custom_config() -> TabletalkConfig:
    """Provide a configuration with a key set and no streaming delay."""
    config = TabletalkConfig()
    config.llm.api_key = "sk-test"
    config.agent.max_rounds = 5
    config.agent.token_delay = 0.0
    return config


@pytest.fixture
def catalog_registry() -> ToolRegistry:
    """Registry with in-memory stand-ins for the Trino discovery tools."""
    registry = ToolRegistry()

    @registry.tool(description="List all available catalogs in Trino")
    async def list_catalogs() -> dict[str, Any]:
        return {"catalogs": ["system", "tpch"]}

    @registry.tool(description="List schemas in a given catalog")
    async def list_schemas(catalog: str) -> dict[str, Any]:
        """List schemas.

        Args:
            catalog: The catalog name
        """
        if catalog != "tpch":
            raise RuntimeError(f"Catalog '{catalog}' does not exist")
        return {"schemas": ["sf1", "tiny"]}

    @registry.tool(description="Echo text back")
    async def echo(text: str) -> str:
        """Echo.

        Args:
            text: Text to return
        """
        return text

    return registry
