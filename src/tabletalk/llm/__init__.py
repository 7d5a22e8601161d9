"""LLM client implementations."""

from .client import CompletionResponse, LLMClient, Message, ToolCall
from .factory import MISSING_API_KEY_MESSAGE, MissingCredentialError, create_llm_client
from .openai_compat import OpenAICompatibleClient

__all__ = [
    "MISSING_API_KEY_MESSAGE",
    "CompletionResponse",
    "LLMClient",
    "Message",
    "MissingCredentialError",
    "OpenAICompatibleClient",
    "ToolCall",
    "create_llm_client",
]
