"""Read-only Trino exploration tools.

The five tools mirror the order in which the agent is told to explore:
catalogs, then schemas, then tables, then a table's columns, then a query.
"""

from typing import Any

from tabletalk.tools.registry import ToolRegistry
from tabletalk.trino.client import TrinoClient, quote_identifier


def register_trino_tools(registry: ToolRegistry, client: TrinoClient) -> ToolRegistry:
    """Register the Trino tools on ``registry``, bound to ``client``.

    Args:
        registry: Registry to add the tools to
        client: Trino client the handlers query through

    Returns:
        The same registry, for chaining
    """

    @registry.tool(description="List all available catalogs in Trino")
    async def list_catalogs() -> dict[str, Any]:
        result = await client.execute("SHOW CATALOGS")
        return {"catalogs": [row[0] for row in result.data]}

    @registry.tool(description="List schemas in a given catalog")
    async def list_schemas(catalog: str) -> dict[str, Any]:
        """List schemas.

        Args:
            catalog: The catalog name
        """
        result = await client.execute(f"SHOW SCHEMAS FROM {quote_identifier(catalog)}")
        return {"schemas": [row[0] for row in result.data]}

    @registry.tool(description="List tables in a given schema")
    async def list_tables(catalog: str, schema: str) -> dict[str, Any]:
        """List tables.

        Args:
            catalog: The catalog name
            schema: The schema name
        """
        result = await client.execute(
            f"SHOW TABLES FROM {quote_identifier(catalog)}.{quote_identifier(schema)}"
        )
        return {"tables": [row[0] for row in result.data]}

    @registry.tool(description="Get the schema/structure of a specific table")
    async def get_table_schema(catalog: str, schema: str, table: str) -> dict[str, Any]:
        """Describe a table.

        Args:
            catalog: The catalog name
            schema: The schema name
            table: The table name
        """
        qualified = ".".join(quote_identifier(part) for part in (catalog, schema, table))
        result = await client.execute(f"DESCRIBE {qualified}")
        columns = []
        for row in result.data:
            column: dict[str, Any] = {
                "name": row[0],
                "type": row[1],
                "nullable": len(row) < 3 or row[2] != "NO",
            }
            if len(row) > 2 and row[2]:
                column["extra"] = row[2]
            if len(row) > 3 and row[3]:
                column["comment"] = row[3]
            columns.append(column)
        return {"columns": columns}

    @registry.tool(description="Execute a SQL query against Trino")
    async def execute_query(query: str) -> dict[str, Any]:
        """Run SQL.

        Args:
            query: The SQL query to execute
        """
        result = await client.execute(query)
        return result.to_dict()

    return registry


def create_trino_registry(client: TrinoClient) -> ToolRegistry:
    """Build a fresh registry holding only the Trino tools."""
    return register_trino_tools(ToolRegistry(), client)
