"""Client for OpenAI and OpenAI-compatible chat completion endpoints."""

from typing import Any

from openai import AsyncOpenAI

from tabletalk.llm.client import CompletionResponse, Message, ToolCall


class OpenAICompatibleClient:
    """LLM client for OpenAI's ``/v1/chat/completions`` API.

    Any server exposing the same endpoint (vLLM, Ollama, llama.cpp, a proxy)
    works by passing its ``base_url``.
    """

    def __init__(
        self,
        model: str,
        api_key: str,
        base_url: str | None = None,
        timeout: int = 120,
        temperature: float | None = None,
    ) -> None:
        """Initialise the client.

        Args:
            model: Model name, e.g. ``gpt-4o-mini``.
            api_key: API key sent as a bearer token.
            base_url: Alternative endpoint (must include ``/v1``); None uses OpenAI.
            timeout: Request timeout in seconds.
            temperature: Default sampling temperature; None leaves it to the server.
        """
        self.model = model
        self.temperature = temperature
        self.client = AsyncOpenAI(base_url=base_url, api_key=api_key, timeout=timeout)

    def _convert_messages(self, messages: list[Message]) -> list[dict[str, Any]]:
        """Convert internal Message format to OpenAI format."""
        openai_messages: list[dict[str, Any]] = []

        for msg in messages:
            message_dict: dict[str, Any] = {
                "role": msg.role,
                "content": msg.content,
            }

            if msg.tool_calls:
                message_dict["tool_calls"] = [
                    {
                        "id": tc.id,
                        "type": "function",
                        "function": {
                            "name": tc.name,
                            "arguments": tc.arguments,
                        },
                    }
                    for tc in msg.tool_calls
                ]

            if msg.tool_call_id:
                message_dict["tool_call_id"] = msg.tool_call_id

            openai_messages.append(message_dict)

        return openai_messages

    def _parse_tool_calls(self, tool_calls: Any) -> list[ToolCall]:
        """Parse function tool calls from a chat completion message."""
        if not tool_calls:
            return []

        parsed: list[ToolCall] = []
        for tc in tool_calls:
            if getattr(tc, "type", "function") != "function":
                continue
            parsed.append(
                ToolCall(
                    id=tc.id,
                    name=tc.function.name,
                    arguments=tc.function.arguments or "",
                )
            )
        return parsed

    async def complete(
        self,
        messages: list[Message],
        tools: list[dict[str, Any]] | None = None,
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> CompletionResponse:
        """Generate a completion.

        Args:
            messages: Conversation history.
            tools: Available tools in OpenAI function format.
            temperature: Sampling temperature override.
            max_tokens: Maximum tokens to generate.

        Returns:
            CompletionResponse with content and optional tool calls.
        """
        params: dict[str, Any] = {
            "model": self.model,
            "messages": self._convert_messages(messages),
            "stream": False,
        }

        temperature = temperature if temperature is not None else self.temperature
        if temperature is not None:
            params["temperature"] = temperature

        if tools:
            params["tools"] = tools
            params["tool_choice"] = "auto"

        if max_tokens:
            params["max_tokens"] = max_tokens

        response = await self.client.chat.completions.create(**params)

        choice = response.choices[0]
        message = choice.message

        tool_calls = self._parse_tool_calls(message.tool_calls)

        return CompletionResponse(
            content=message.content or "",
            tool_calls=tool_calls if tool_calls else None,
            finish_reason=choice.finish_reason or "stop",
        )

    async def close(self) -> None:
        """Release the underlying HTTP connection pool."""
        await self.client.close()
