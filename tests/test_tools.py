"""Tests for the tool registry and the Trino tools."""

import json
from typing import Any

import pytest

from tabletalk.tools.base import Tool, ToolError, ToolParameter, ToolSchema
from tabletalk.tools.registry import ToolRegistry, schema_from_function
from tabletalk.tools.trino import create_trino_registry
from tabletalk.trino.client import QueryResult, TrinoQueryError


class FakeTrinoClient:
    """Records statements and answers them from a lookup table."""

    def __init__(self, results: dict[str, QueryResult] | None = None, error: Exception | None = None):
        self.results = results or {}
        self.error = error
        self.statements: list[str] = []

    async def execute(self, sql: str) -> QueryResult:
        self.statements.append(sql)
        if self.error is not None:
            raise self.error
        return self.results.get(sql, QueryResult())


def test_schema_from_function():
    """Test schema generation from signature and docstring."""

    async def list_tables(catalog: str, schema: str, limit: int = 10) -> dict:
        """List tables.

        Args:
            catalog: The catalog name
            schema: The schema name
        """
        return {}

    schema = schema_from_function(list_tables, "List tables in a given schema")

    assert schema.name == "list_tables"
    assert schema.required == ["catalog", "schema"]
    input_schema = schema.input_schema()
    assert input_schema["type"] == "object"
    assert input_schema["properties"]["catalog"] == {
        "type": "string",
        "description": "The catalog name",
    }
    assert input_schema["properties"]["limit"]["type"] == "integer"
    assert input_schema["properties"]["limit"]["description"] == "Parameter limit"


def test_tool_schema_to_openai_format():
    """Test conversion to OpenAI function format."""
    schema = ToolSchema(
        name="test_tool",
        description="A test tool",
        parameters=(
            ToolParameter(name="param1", type="string", description="First param", required=True),
            ToolParameter(
                name="mode",
                type="string",
                description="Mode",
                required=False,
                enum=("fast", "slow"),
            ),
        ),
    )

    openai_format = schema.to_openai_format()

    assert openai_format["type"] == "function"
    assert openai_format["function"]["name"] == "test_tool"
    assert openai_format["function"]["description"] == "A test tool"
    params = openai_format["function"]["parameters"]
    assert params["required"] == ["param1"]
    assert params["properties"]["mode"]["enum"] == ["fast", "slow"]


def test_parameterless_tool_schema():
    schema = ToolSchema(name="list_catalogs", description="List catalogs")

    assert schema.input_schema() == {"type": "object", "properties": {}, "required": []}


def test_duplicate_registration_rejected():
    registry = ToolRegistry()

    async def noop() -> str:
        return ""

    registry.register(Tool(schema=ToolSchema(name="noop", description="x"), fn=noop))
    with pytest.raises(ValueError, match="already registered"):
        registry.register(Tool(schema=ToolSchema(name="noop", description="y"), fn=noop))


def test_registry_lookup(catalog_registry):
    assert len(catalog_registry) == 3
    assert "list_catalogs" in catalog_registry
    assert "drop_table" not in catalog_registry
    assert catalog_registry.get("drop_table") is None
    assert catalog_registry.names() == ["list_catalogs", "list_schemas", "echo"]


def test_empty_registry():
    registry = ToolRegistry()

    assert len(registry) == 0
    assert registry.to_openai_format() == []


@pytest.mark.asyncio
async def test_invoke_renders_structured_result_as_json(catalog_registry):
    output = await catalog_registry.invoke("list_catalogs", {})

    assert json.loads(output) == {"catalogs": ["system", "tpch"]}


@pytest.mark.asyncio
async def test_invoke_passes_strings_through(catalog_registry):
    assert await catalog_registry.invoke("echo", {"text": "plain"}) == "plain"


@pytest.mark.asyncio
async def test_invoke_ignores_undeclared_arguments(catalog_registry):
    output = await catalog_registry.invoke("list_catalogs", {"verbose": True})

    assert "catalogs" in output


@pytest.mark.asyncio
async def test_invoke_unknown_tool(catalog_registry):
    with pytest.raises(ToolError) as exc_info:
        await catalog_registry.invoke("drop_table", {})

    assert str(exc_info.value) == "Tool drop_table failed: Unknown tool: drop_table"
    assert exc_info.value.tool_name == "drop_table"


@pytest.mark.asyncio
async def test_invoke_missing_argument(catalog_registry):
    with pytest.raises(ToolError, match="Missing required argument 'catalog'"):
        await catalog_registry.invoke("list_schemas", {})


@pytest.mark.asyncio
async def test_invoke_wrong_argument_type(catalog_registry):
    with pytest.raises(ToolError, match="Argument 'catalog' must be a string, got int"):
        await catalog_registry.invoke("list_schemas", {"catalog": 3})


@pytest.mark.asyncio
async def test_invoke_wraps_handler_failure(catalog_registry):
    with pytest.raises(ToolError) as exc_info:
        await catalog_registry.invoke("list_schemas", {"catalog": "hive"})

    assert exc_info.value.cause == "Catalog 'hive' does not exist"
    assert isinstance(exc_info.value.__cause__, RuntimeError)


@pytest.mark.asyncio
async def test_invoke_unrenderable_result_is_tool_error():
    registry = ToolRegistry()

    @registry.tool(description="Returns a self-referencing structure")
    async def loopy() -> dict:
        data: dict = {}
        data["self"] = data
        return data

    with pytest.raises(ToolError, match="Circular reference"):
        await registry.invoke("loopy", {})


def test_describe_matches_input_schema(catalog_registry):
    described = catalog_registry.get("list_schemas").schema.describe()

    assert described == {
        "name": "list_schemas",
        "description": "List schemas in a given catalog",
        "inputSchema": {
            "type": "object",
            "properties": {"catalog": {"type": "string", "description": "The catalog name"}},
            "required": ["catalog"],
        },
    }


def test_trino_registry_definitions():
    registry = create_trino_registry(FakeTrinoClient())

    assert registry.names() == [
        "list_catalogs",
        "list_schemas",
        "list_tables",
        "get_table_schema",
        "execute_query",
    ]
    by_name = {schema.name: schema for schema in registry.list_definitions()}
    assert by_name["list_catalogs"].required == []
    assert by_name["list_schemas"].required == ["catalog"]
    assert by_name["list_tables"].required == ["catalog", "schema"]
    assert by_name["get_table_schema"].required == ["catalog", "schema", "table"]
    assert by_name["execute_query"].required == ["query"]
    assert by_name["execute_query"].description == "Execute a SQL query against Trino"


@pytest.mark.asyncio
async def test_list_catalogs_tool():
    client = FakeTrinoClient({"SHOW CATALOGS": QueryResult(["Catalog"], [["system"], ["tpch"]])})
    registry = create_trino_registry(client)

    output = await registry.invoke("list_catalogs", {})

    assert client.statements == ["SHOW CATALOGS"]
    assert json.loads(output) == {"catalogs": ["system", "tpch"]}


@pytest.mark.asyncio
async def test_list_schemas_and_tables_quote_identifiers():
    client = FakeTrinoClient()
    registry = create_trino_registry(client)

    await registry.invoke("list_schemas", {"catalog": "tpch"})
    await registry.invoke("list_tables", {"catalog": "tpch", "schema": 'we"ird'})

    assert client.statements == [
        'SHOW SCHEMAS FROM "tpch"',
        'SHOW TABLES FROM "tpch"."we""ird"',
    ]


@pytest.mark.asyncio
async def test_get_table_schema_tool():
    sql = 'DESCRIBE "tpch"."tiny"."nation"'
    client = FakeTrinoClient(
        {
            sql: QueryResult(
                ["Column", "Type", "Extra", "Comment"],
                [
                    ["nationkey", "bigint", "", ""],
                    ["name", "varchar(25)", "", "country name"],
                    ["regionkey", "bigint", "NO", ""],
                ],
            )
        }
    )
    registry = create_trino_registry(client)

    output = await registry.invoke(
        "get_table_schema", {"catalog": "tpch", "schema": "tiny", "table": "nation"}
    )

    assert json.loads(output) == {
        "columns": [
            {"name": "nationkey", "type": "bigint", "nullable": True},
            {
                "name": "name",
                "type": "varchar(25)",
                "nullable": True,
                "comment": "country name",
            },
            {"name": "regionkey", "type": "bigint", "nullable": False, "extra": "NO"},
        ]
    }


@pytest.mark.asyncio
async def test_execute_query_tool():
    query = "SELECT name FROM tpch.tiny.region LIMIT 2"
    client = FakeTrinoClient({query: QueryResult(["name"], [["AFRICA"], ["AMERICA"]])})
    registry = create_trino_registry(client)

    output: Any = json.loads(await registry.invoke("execute_query", {"query": query}))

    assert output == {"columns": ["name"], "data": [["AFRICA"], ["AMERICA"]], "row_count": 2}


@pytest.mark.asyncio
async def test_trino_failure_becomes_tool_error():
    client = FakeTrinoClient(error=TrinoQueryError("Query failed: Table 'x' does not exist"))
    registry = create_trino_registry(client)

    with pytest.raises(ToolError) as exc_info:
        await registry.invoke("execute_query", {"query": "SELECT * FROM x"})

    assert str(exc_info.value) == (
        "Tool execute_query failed: Query failed: Table 'x' does not exist"
    )
