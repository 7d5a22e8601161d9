"""Tool system for tabletalk agents.

A :class:`~tabletalk.tools.registry.ToolRegistry` maps tool names to async
handlers and advertises their JSON Schema to the model. Failures surface as
:class:`~tabletalk.tools.base.ToolError`, which the agent loop reports back to
the model rather than ending the conversation.

Built-in tools (:mod:`tabletalk.tools.trino`):

- **list_catalogs** - Catalogs configured on the Trino coordinator
- **list_schemas** - Schemas within a catalog
- **list_tables** - Tables within a schema
- **get_table_schema** - Column names and types of a table
- **execute_query** - Run a SQL statement and return columns and rows

Usage::

    from tabletalk.tools.trino import create_trino_registry
    from tabletalk.trino import TrinoClient

    registry = create_trino_registry(TrinoClient(host="localhost"))
"""

from .base import Tool, ToolError, ToolParameter, ToolSchema
from .registry import ToolRegistry

__all__ = ["Tool", "ToolError", "ToolParameter", "ToolRegistry", "ToolSchema"]
