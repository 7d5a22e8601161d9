"""Base types for the tool system."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class ToolParameter:
    """Definition of a tool parameter."""

    name: str
    type: str  # JSON Schema type
    description: str
    required: bool = True
    enum: tuple[str, ...] | None = None


@dataclass(frozen=True)
class ToolSchema:
    """Name, description and input schema advertised to the model."""

    name: str
    description: str
    parameters: tuple[ToolParameter, ...] = ()

    @property
    def required(self) -> list[str]:
        return [p.name for p in self.parameters if p.required]

    def input_schema(self) -> dict[str, Any]:
        """Return the JSON Schema object describing accepted arguments."""
        properties = {}

        for param in self.parameters:
            param_schema: dict[str, Any] = {
                "type": param.type,
                "description": param.description,
            }
            if param.enum:
                param_schema["enum"] = list(param.enum)

            properties[param.name] = param_schema

        return {
            "type": "object",
            "properties": properties,
            "required": self.required,
        }

    def describe(self) -> dict[str, Any]:
        """Name, description and ``inputSchema`` as listed by the health endpoint."""
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": self.input_schema(),
        }

    def to_openai_format(self) -> dict[str, Any]:
        """Convert to OpenAI function calling format.

        Returns:
            Dictionary matching OpenAI's function schema format
        """
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": self.input_schema(),
            },
        }


# Tool handler signature: async function returning text or JSON-serialisable data
ToolFunction = Callable[..., Awaitable[Any]]


@dataclass(frozen=True)
class Tool:
    """A tool that the agent can use."""

    schema: ToolSchema
    fn: ToolFunction

    async def execute(self, **kwargs: Any) -> Any:
        """Execute the tool with given arguments.

        Args:
            **kwargs: Tool arguments

        Returns:
            Handler result, not yet rendered to text
        """
        return await self.fn(**kwargs)


class ToolError(Exception):
    """A tool invocation failed.

    Always recoverable: the agent loop reports it back to the model instead of
    ending the conversation.
    """

    def __init__(self, tool_name: str, cause: str) -> None:
        self.tool_name = tool_name
        self.cause = cause
        super().__init__(f"Tool {tool_name} failed: {cause}")
