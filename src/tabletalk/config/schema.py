"""Pydantic models for tabletalk.yaml configuration."""

from typing import Literal

from pydantic import BaseModel, Field

DEFAULT_SYSTEM_PROMPT = """You are an expert Trino data assistant with intelligent discovery capabilities.

DISCOVERY STRATEGY:
When users ask about specific tables/data (like "customer", "orders", "sales"):
1. First use list_catalogs to see available data sources
2. Then use list_schemas on relevant catalogs (like 'tpch', 'main', etc.)
3. Then use list_tables to find tables matching the user's intent
4. Use get_table_schema to understand table structure before querying
5. Finally execute_query with appropriate SQL

INTELLIGENT CONTEXT BUILDING:
- Chain multiple tool calls in logical sequence
- Use results from previous calls to inform next ones
- When looking for "customer" data, check multiple catalogs/schemas
- Be proactive in discovering the data landscape
- Explain your discovery process to the user

QUERY SAFETY:
- Always use LIMIT clauses for exploratory queries
- Prefer SELECT over other operations
- Use proper schema.table syntax: catalog.schema.table
- Validate table existence before complex queries

RESPONSE FORMATTING:
- Format query results as tables when appropriate
- Use pipe-separated format for tabular data: | Column 1 | Column 2 |
- Include clear headers and separate data rows
- Explain what the data shows and any insights discovered
- Always provide a conversational summary after executing tools
- When you get data from execute_query, format it nicely and explain the results

Be conversational and explain what you're discovering as you explore the data. \
After using tools, always provide a summary of what you found."""


class LLMConfig(BaseModel):
    """Upstream chat-completions endpoint."""

    model: str = Field(default="gpt-4o-mini", description="Chat model name")
    base_url: str | None = Field(
        default=None,
        description="OpenAI-compatible endpoint including /v1 (None = api.openai.com)",
    )
    api_key: str | None = Field(default=None, description="API key (or set OPENAI_API_KEY)")
    timeout: int = Field(default=120, description="Request timeout in seconds", ge=1)
    temperature: float | None = Field(
        default=None, description="Sampling temperature (None = server default)", ge=0.0, le=2.0
    )

    @property
    def has_api_key(self) -> bool:
        return bool(self.api_key and self.api_key.strip())


class TrinoConfig(BaseModel):
    """Trino coordinator connection."""

    host: str = Field(default="localhost", description="Coordinator hostname")
    port: int = Field(default=8080, description="Coordinator port", ge=1, le=65535)
    scheme: Literal["http", "https"] = Field(default="http", description="URL scheme")
    user: str = Field(default="tabletalk", description="Trino user name")
    catalog: str | None = Field(default="tpch", description="Default session catalog")
    schema_: str | None = Field(
        default="tiny", alias="schema", description="Default session schema"
    )
    source: str = Field(default="tabletalk", description="Client source tag")
    timeout: float = Field(default=60.0, description="Per-request timeout in seconds", gt=0)

    model_config = {"populate_by_name": True}

    @property
    def endpoint(self) -> str:
        return f"{self.scheme}://{self.host}:{self.port}"


class AgentConfig(BaseModel):
    """Agent loop configuration."""

    max_rounds: int = Field(
        default=50, description="Maximum completion requests per conversation turn", ge=1
    )
    token_delay: float = Field(
        default=0.02, description="Pause between streamed answer tokens in seconds", ge=0.0
    )
    system_prompt: str = Field(
        default=DEFAULT_SYSTEM_PROMPT,
        description="System prompt seeded at the start of every transcript",
    )


class ServerConfig(BaseModel):
    """API server configuration."""

    host: str = Field(default="127.0.0.1", description="Server bind address")
    port: int = Field(default=8000, description="Server port", ge=1, le=65535)
    cors_origins: list[str] = Field(
        default=["http://localhost:3000", "http://localhost:8000"],
        description="Allowed CORS origins (use ['*'] for development only)",
    )


class LoggingConfig(BaseModel):
    """Log output configuration."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO", description="Root log level"
    )


class TabletalkConfig(BaseModel):
    """Root configuration schema for tabletalk."""

    llm: LLMConfig = Field(default_factory=LLMConfig)
    trino: TrinoConfig = Field(default_factory=TrinoConfig)
    agent: AgentConfig = Field(default_factory=AgentConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
