"""Factory function for creating LLM clients from configuration."""

from __future__ import annotations

from typing import TYPE_CHECKING

from tabletalk.llm.openai_compat import OpenAICompatibleClient

if TYPE_CHECKING:
    from tabletalk.config.schema import TabletalkConfig


MISSING_API_KEY_MESSAGE = (
    "Missing OPENAI_API_KEY. Set it in your tabletalk.yaml (llm.api_key) "
    "or export it before starting the server."
)


class MissingCredentialError(RuntimeError):
    """Raised when no API key is configured for the LLM endpoint."""


def create_llm_client(config: TabletalkConfig) -> OpenAICompatibleClient:
    """Create an LLM client from the ``llm`` config section.

    Args:
        config: tabletalk configuration.

    Returns:
        A client for the configured OpenAI-compatible endpoint.

    Raises:
        MissingCredentialError: If no API key is set.
    """
    llm = config.llm
    if not llm.has_api_key:
        raise MissingCredentialError(MISSING_API_KEY_MESSAGE)

    return OpenAICompatibleClient(
        model=llm.model,
        api_key=llm.api_key.strip(),  # type: ignore[union-attr]
        base_url=llm.base_url,
        timeout=llm.timeout,
        temperature=llm.temperature,
    )
