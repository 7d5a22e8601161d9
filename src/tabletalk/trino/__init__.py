"""Async Trino access used by the built-in data tools."""

from .client import (
    ConnectionStatus,
    QueryResult,
    TrinoClient,
    TrinoError,
    TrinoQueryError,
    quote_identifier,
)

__all__ = [
    "ConnectionStatus",
    "QueryResult",
    "TrinoClient",
    "TrinoError",
    "TrinoQueryError",
    "quote_identifier",
]
