"""
Exa MCP Server - Model Context Protocol adapter for Exa neural search

Exposes:
- the `search` tool, which always queries Exa and stores the raw result
- `exa://last-search/result`, the most recent stored result
- `exa://search/{query}`, the stored result for a query, fetched on a miss

Raw results are persisted in a single JSON document so later sessions can
re-read them without querying Exa again.
"""

from .config import DEFAULT_MCP_CONFIG, MCPConfig
from .errors import (
    ExaMCPError,
    InvalidResourceError,
    MethodNotFoundError,
    NotFoundError,
    StorageError,
    UpstreamError,
    ValidationError,
)
from .models import FormattedItem, FormattedResult, RawSearchPayload, SearchParams, StoredSearches
from .render import format_search_results
from .resources import MCPResources
from .server import ExaMCPServer
from .store import ResultStore
from .tools import MCPTools

__all__ = [
    "ExaMCPServer",
    "MCPTools",
    "MCPResources",
    "ResultStore",
    "MCPConfig",
    "DEFAULT_MCP_CONFIG",
    "format_search_results",
    "FormattedItem",
    "FormattedResult",
    "RawSearchPayload",
    "SearchParams",
    "StoredSearches",
    "ExaMCPError",
    "ValidationError",
    "MethodNotFoundError",
    "InvalidResourceError",
    "NotFoundError",
    "UpstreamError",
    "StorageError",
]

__version__ = "0.1.0"
