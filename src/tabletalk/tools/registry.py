"""Tool registration and dispatch."""

import inspect
import json
import logging
from collections.abc import Callable
from typing import Any, Union, get_type_hints

from tabletalk.tools.base import Tool, ToolError, ToolFunction, ToolParameter, ToolSchema

logger = logging.getLogger(__name__)


def _python_type_to_json_schema(py_type: Any) -> str:
    """Convert Python type hint to JSON Schema type.

    Args:
        py_type: Python type annotation

    Returns:
        JSON Schema type string
    """
    origin = getattr(py_type, "__origin__", None)
    if origin is type(None):
        return "null"

    # Unwrap Optional[X] / X | None
    if origin is Union or type(py_type).__name__ == "UnionType":
        args = getattr(py_type, "__args__", ())
        non_none = [arg for arg in args if arg is not type(None)]
        if non_none:
            py_type = non_none[0]

    type_map = {
        str: "string",
        int: "integer",
        float: "number",
        bool: "boolean",
        list: "array",
        dict: "object",
    }

    return type_map.get(py_type, "string")


def _param_description(fn: Callable[..., Any], param_name: str) -> str:
    """Pull ``param_name: description`` out of a Google-style docstring."""
    if fn.__doc__:
        for line in fn.__doc__.split("\n"):
            line = line.strip()
            if line.startswith(f"{param_name}:"):
                return line[len(param_name) + 1 :].strip()
    return f"Parameter {param_name}"


def schema_from_function(fn: ToolFunction, description: str, name: str | None = None) -> ToolSchema:
    """Build a ToolSchema by introspecting a handler's signature and docstring."""
    hints = get_type_hints(fn)
    parameters: list[ToolParameter] = []

    for param_name, param in inspect.signature(fn).parameters.items():
        parameters.append(
            ToolParameter(
                name=param_name,
                type=_python_type_to_json_schema(hints.get(param_name, str)),
                description=_param_description(fn, param_name),
                required=param.default is inspect.Parameter.empty,
            )
        )

    return ToolSchema(
        name=name or fn.__name__,
        description=description,
        parameters=tuple(parameters),
    )


class ToolRegistry:
    """Name-keyed lookup table of tools.

    Built once at startup and shared read-only between conversations.

    Usage::

        registry = ToolRegistry()

        @registry.tool(description="List all available catalogs")
        async def list_catalogs() -> dict:
            ...

        output = await registry.invoke("list_catalogs", {})
    """

    def __init__(self) -> None:
        self._tools: dict[str, Tool] = {}

    def register(self, tool: Tool) -> Tool:
        """Add a tool. Names must be unique.

        Raises:
            ValueError: If a tool with the same name is already registered
        """
        name = tool.schema.name
        if name in self._tools:
            raise ValueError(f"Tool '{name}' is already registered")
        self._tools[name] = tool
        logger.debug("Registered tool %s", name)
        return tool

    def tool(
        self, description: str, name: str | None = None
    ) -> Callable[[ToolFunction], ToolFunction]:
        """Decorator registering an async function as a tool.

        The input schema is derived from the function signature; parameter
        descriptions come from the ``Args:`` section of its docstring.

        Args:
            description: Human-readable description shown to the model
            name: Tool name, defaults to the function name
        """

        def decorator(fn: ToolFunction) -> ToolFunction:
            self.register(Tool(schema=schema_from_function(fn, description, name), fn=fn))
            return fn

        return decorator

    def get(self, name: str) -> Tool | None:
        return self._tools.get(name)

    def names(self) -> list[str]:
        return list(self._tools)

    def list_definitions(self) -> list[ToolSchema]:
        """Tool definitions in registration order."""
        return [t.schema for t in self._tools.values()]

    def to_openai_format(self) -> list[dict[str, Any]]:
        """Tool definitions rendered for OpenAI function calling."""
        return [schema.to_openai_format() for schema in self.list_definitions()]

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def __len__(self) -> int:
        return len(self._tools)

    async def invoke(self, name: str, args: dict[str, Any]) -> str:
        """Run a tool and render its result as text.

        Only the keys the tool declares are passed to its handler. Required
        keys must be present and string-typed keys must hold strings; anything
        else is left to the handler.

        Args:
            name: Tool name
            args: Decoded argument object

        Returns:
            The handler's output; non-string results are JSON-encoded

        Raises:
            ToolError: Unknown tool, missing or mistyped argument, or handler failure
        """
        tool = self._tools.get(name)
        if tool is None:
            raise ToolError(name, f"Unknown tool: {name}")

        kwargs: dict[str, Any] = {}
        for param in tool.schema.parameters:
            if param.name not in args or args[param.name] is None:
                if param.required:
                    raise ToolError(name, f"Missing required argument '{param.name}'")
                continue
            value = args[param.name]
            if param.type == "string" and not isinstance(value, str):
                raise ToolError(
                    name, f"Argument '{param.name}' must be a string, got {type(value).__name__}"
                )
            kwargs[param.name] = value

        try:
            result = await tool.execute(**kwargs)
            if isinstance(result, str):
                return result
            return json.dumps(result, default=str)
        except ToolError:
            raise
        except Exception as e:
            raise ToolError(name, str(e) or type(e).__name__) from e
