"""Async client for the Trino HTTP client protocol."""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any

import httpx

logger = logging.getLogger(__name__)

# Coordinator is busy; the protocol asks clients to retry after 50-100 ms
BUSY_STATUS_CODES = frozenset({502, 503, 504})
BUSY_RETRY_ATTEMPTS = 10
BUSY_RETRY_DELAY = 0.1


class TrinoError(Exception):
    """Trino could not be reached or returned an unusable response."""


class TrinoQueryError(TrinoError):
    """Trino accepted the statement but reported a query failure."""

    def __init__(self, message: str, error_name: str | None = None) -> None:
        self.error_name = error_name
        super().__init__(message)


@dataclass
class QueryResult:
    """Columns and rows of a finished statement."""

    columns: list[str] = field(default_factory=list)
    data: list[list[Any]] = field(default_factory=list)

    @property
    def row_count(self) -> int:
        return len(self.data)

    def to_dict(self) -> dict[str, Any]:
        return {
            "columns": self.columns,
            "data": self.data,
            "row_count": self.row_count,
        }


@dataclass
class ConnectionStatus:
    """Result of a connectivity probe, as reported by the health endpoint."""

    mode: str
    status: str
    message: str
    endpoint: str | None
    features: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "mode": self.mode,
            "status": self.status,
            "message": self.message,
            "endpoint": self.endpoint,
            "features": self.features,
        }


def quote_identifier(name: str) -> str:
    """Quote a catalog, schema or table name for interpolation into SQL."""
    return '"' + name.replace('"', '""') + '"'


class TrinoClient:
    """Minimal async Trino client.

    Statements are submitted with ``POST /v1/statement`` and results are
    collected by following ``nextUri`` until the server omits it. If the
    awaiting task is cancelled mid-query, the query is cancelled on the
    server with a ``DELETE`` on its current ``nextUri``. Busy responses
    (HTTP 502, 503, 504) are retried after a short pause.
    """

    def __init__(
        self,
        host: str = "localhost",
        port: int = 8080,
        scheme: str = "http",
        user: str = "tabletalk",
        catalog: str | None = "tpch",
        schema: str | None = "tiny",
        source: str = "tabletalk",
        timeout: float = 60.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            host: Trino coordinator hostname
            port: Coordinator port
            scheme: ``http`` or ``https``
            user: Value of the ``X-Trino-User`` header
            catalog: Default session catalog
            schema: Default session schema
            source: Value of the ``X-Trino-Source`` header
            timeout: Per-request timeout in seconds
            transport: Optional httpx transport (used by tests)
        """
        self.endpoint = f"{scheme}://{host}:{port}"
        headers = {
            "X-Trino-User": user,
            "X-Trino-Source": source,
        }
        if catalog:
            headers["X-Trino-Catalog"] = catalog
        if schema:
            headers["X-Trino-Schema"] = schema
        self._client = httpx.AsyncClient(
            base_url=self.endpoint,
            headers=headers,
            timeout=timeout,
            transport=transport,
        )

    async def execute(self, sql: str) -> QueryResult:
        """Run a statement and collect every page of results.

        Args:
            sql: SQL statement text

        Returns:
            QueryResult with column names and all rows

        Raises:
            TrinoQueryError: If Trino reports a query error
            TrinoError: On transport failure or malformed response
        """
        logger.debug("Executing Trino statement: %s", sql)
        result = QueryResult()
        next_uri: str | None = None

        try:
            payload = await self._request("POST", "/v1/statement", content=sql)
            while True:
                next_uri = None
                self._absorb(payload, result)
                next_uri = payload.get("nextUri")
                if not next_uri:
                    break
                payload = await self._request("GET", next_uri)
        finally:
            if next_uri:
                await self._cancel(next_uri)

        return result

    async def _request(self, method: str, url: str, **kwargs: Any) -> dict[str, Any]:
        try:
            response = await self._client.request(method, url, **kwargs)
            attempt = 1
            while response.status_code in BUSY_STATUS_CODES and attempt < BUSY_RETRY_ATTEMPTS:
                logger.debug(
                    "Trino busy (HTTP %d) on %s %s, retrying", response.status_code, method, url
                )
                await asyncio.sleep(BUSY_RETRY_DELAY)
                response = await self._client.request(method, url, **kwargs)
                attempt += 1
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPStatusError as e:
            raise TrinoError(
                f"Trino returned HTTP {e.response.status_code} for {method} {url}"
            ) from e
        except httpx.HTTPError as e:
            raise TrinoError(f"Could not reach Trino at {self.endpoint}: {e}") from e
        except ValueError as e:
            raise TrinoError(f"Trino returned a non-JSON response: {e}") from e

        if not isinstance(payload, dict):
            raise TrinoError("Trino returned an unexpected response shape")
        return payload

    def _absorb(self, payload: dict[str, Any], result: QueryResult) -> None:
        error = payload.get("error")
        if error:
            raise TrinoQueryError(
                f"Query failed: {error.get('message', 'unknown error')}",
                error_name=error.get("errorName"),
            )
        if not result.columns and payload.get("columns"):
            result.columns = [col["name"] for col in payload["columns"]]
        if payload.get("data"):
            result.data.extend(payload["data"])

    async def _cancel(self, next_uri: str) -> None:
        try:
            await self._client.delete(next_uri)
        except httpx.HTTPError as e:
            logger.debug("Failed to cancel Trino query at %s: %s", next_uri, e)

    async def ping(self) -> None:
        """Run ``SELECT 1`` to confirm the coordinator answers queries.

        Raises:
            TrinoError: If the probe fails
        """
        await self.execute("SELECT 1 AS test")

    async def connection_status(self, features: list[str] | None = None) -> ConnectionStatus:
        """Probe connectivity and describe the outcome.

        Args:
            features: Tool names to advertise when the probe succeeds
        """
        try:
            await self.ping()
        except TrinoError as e:
            return ConnectionStatus(
                mode="error",
                status="error",
                message=str(e),
                endpoint=None,
            )
        return ConnectionStatus(
            mode="direct_trino",
            status="connected",
            message="Connected directly to Trino database",
            endpoint=self.endpoint,
            features=list(features or []),
        )

    async def close(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()

    async def __aenter__(self) -> "TrinoClient":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()
