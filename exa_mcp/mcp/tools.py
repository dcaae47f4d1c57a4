"""
MCP Tools - the search operation

A tool call always queries Exa, even for a query that is already stored, and
the fresh payload replaces the stored one.
"""

from typing import Any, Optional

from loguru import logger
from mcp import types
from pydantic import ValidationError as PydanticValidationError

from .config import DEFAULT_MCP_CONFIG, MCPConfig
from .errors import MethodNotFoundError, ValidationError
from .interface import SearchGateway
from .models import FormattedResult, RawSearchPayload, SearchParams
from .render import format_search_results
from .store import ResultStore

SEARCH_TOOL = "search"


class MCPTools:
    """Implements MCP tool operations over the Exa API"""

    def __init__(self, store: ResultStore, gateway: SearchGateway, config: MCPConfig = DEFAULT_MCP_CONFIG):
        self.store: ResultStore = store
        self.gateway: SearchGateway = gateway
        self.config: MCPConfig = config

    def list_tools(self) -> list[types.Tool]:
        return [
            types.Tool(
                name=SEARCH_TOOL,
                description="Perform an AI-powered search using Exa API",
                inputSchema={
                    "type": "object",
                    "properties": {
                        "query": {
                            "type": "string",
                            "description": "Search query",
                            "minLength": 1,
                        },
                        "numResults": {
                            "type": "integer",
                            "description": f"Number of results to return (default: {self.config.default_num_results})",
                            "minimum": 1,
                            "maximum": 100,
                            "default": self.config.default_num_results,
                        },
                    },
                    "required": ["query"],
                },
            )
        ]

    async def call(self, name: str, arguments: Optional[dict[str, Any]]) -> FormattedResult:
        if name != SEARCH_TOOL:
            raise MethodNotFoundError(f"Unknown tool: {name}")
        return await self.search(self.parse_arguments(arguments))

    def parse_arguments(self, arguments: Optional[dict[str, Any]]) -> SearchParams:
        arguments = {"numResults": self.config.default_num_results} | (arguments or {})
        try:
            return SearchParams.model_validate(arguments)
        except PydanticValidationError as e:
            details: str = "; ".join(f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors())
            raise ValidationError(f"Invalid arguments for tool '{SEARCH_TOOL}': {details}") from e

    async def search(self, params: SearchParams) -> FormattedResult:
        logger.info(f"search: query='{params.query}', numResults={params.num_results}")

        payload: RawSearchPayload = await self.gateway.search(params.query, params.num_results)
        self.store.put(params.query, payload)

        result: FormattedResult = format_search_results(payload)
        logger.debug(f"search: {len(result.results)} results for '{params.query}'")
        return result
