"""
MCP Resources - cached search results addressed by URI

Two resources are exposed:
- <scheme>://last-search/result   the most recent stored result
- <scheme>://search/{query}       the result for a percent-encoded query,
                                  fetched from Exa and stored on a cache miss
"""

import re
from typing import Optional
from urllib.parse import unquote

from loguru import logger
from mcp import types

from .config import DEFAULT_MCP_CONFIG, MCPConfig
from .errors import InvalidResourceError, NotFoundError
from .interface import SearchGateway
from .models import FormattedResult, RawSearchPayload
from .render import format_search_results
from .store import ResultStore

JSON_MIME_TYPE = "application/json"

MALFORMED_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")


class MCPResources:
    """Resolves resource URIs against the result store"""

    def __init__(self, store: ResultStore, gateway: SearchGateway, config: MCPConfig = DEFAULT_MCP_CONFIG):
        self.store: ResultStore = store
        self.gateway: SearchGateway = gateway
        self.config: MCPConfig = config

    def list_resources(self) -> list[types.Resource]:
        return [
            types.Resource(
                uri=self.config.last_result_uri,
                name="Last Search Result",
                description="Results from the most recent search query",
                mimeType=JSON_MIME_TYPE,
            )
        ]

    def list_resource_templates(self) -> list[types.ResourceTemplate]:
        return [
            types.ResourceTemplate(
                uriTemplate=self.config.search_uri_template,
                name="Search Results by Query",
                description="Search results for a specific query",
                mimeType=JSON_MIME_TYPE,
            )
        ]

    async def read(self, uri: str) -> FormattedResult:
        """Resolve either resource form, anything else is an InvalidResourceError"""
        if uri == self.config.last_result_uri:
            return self.read_last_result()

        match: Optional[re.Match[str]] = self.config.search_uri_pattern.fullmatch(uri)
        if match:
            return await self.read_search(self.decode_query(uri, match.group(1)))

        raise InvalidResourceError(f"Invalid resource URI: {uri}")

    def read_last_result(self) -> FormattedResult:
        payload: Optional[RawSearchPayload] = self.store.last_result()
        if payload is None:
            raise NotFoundError("No search has been performed yet")
        return format_search_results(payload)

    async def read_search(self, query: str) -> FormattedResult:
        payload: Optional[RawSearchPayload] = self.store.get(query)
        if payload is not None:
            logger.debug(f"Cache hit for query '{query}'")
            return format_search_results(payload)

        logger.info(f"Cache miss for query '{query}', searching Exa")
        payload = await self.gateway.search(query, self.config.default_num_results)
        self.store.put(query, payload)
        return format_search_results(payload)

    @staticmethod
    def decode_query(uri: str, encoded: str) -> str:
        """Percent-decode the query segment; malformed escapes reject the URI"""
        if MALFORMED_ESCAPE.search(encoded):
            raise InvalidResourceError(f"Invalid resource URI: {uri}")
        try:
            return unquote(encoded, errors="strict")
        except UnicodeDecodeError as e:
            raise InvalidResourceError(f"Invalid resource URI: {uri}") from e
