"""
Exa MCP Server - Main facade

Owns the result store and the search gateway, serializes requests and binds
tools and resources to the MCP SDK.
"""

import asyncio
from typing import Any, Iterable, Optional

from loguru import logger
from mcp import types
from mcp.server.lowlevel import Server
from mcp.server.lowlevel.helper_types import ReadResourceContents
from mcp.server.stdio import stdio_server

from .config import DEFAULT_MCP_CONFIG, MCPConfig
from .errors import ExaMCPError
from .interface import SearchGateway
from .models import FormattedResult
from .resources import JSON_MIME_TYPE, MCPResources
from .store import ResultStore
from .tools import MCPTools


class ExaMCPServer:
    """
    MCP server exposing Exa search as a tool and cached results as resources

    Requests are handled one at a time: the SDK may dispatch concurrently, so
    every tool call and resource read runs under a single lock, which keeps the
    cache-miss get-then-put sequence atomic.

    Usage:
        async with ExaProxy(api_key=key) as exa:
            server = ExaMCPServer(ResultStore("data").load(), exa)
            await server.run_stdio()
    """

    def __init__(self, store: ResultStore, gateway: SearchGateway, config: MCPConfig = DEFAULT_MCP_CONFIG) -> None:
        self.store: ResultStore = store
        self.gateway: SearchGateway = gateway
        self.config: MCPConfig = config
        self.resources = MCPResources(store, gateway, config)
        self.tools = MCPTools(store, gateway, config)
        self._lock = asyncio.Lock()

        logger.info(f"Exa MCP Server initialized (v{config.version}, {len(store)} stored searches)")

    def list_tools(self) -> list[types.Tool]:
        return self.tools.list_tools()

    def list_resources(self) -> list[types.Resource]:
        return self.resources.list_resources()

    def list_resource_templates(self) -> list[types.ResourceTemplate]:
        return self.resources.list_resource_templates()

    async def call_tool(self, name: str, arguments: Optional[dict[str, Any]] = None) -> list[types.TextContent]:
        """Run a tool and return its formatted result as a single JSON text block"""
        async with self._lock:
            result: FormattedResult = await self.tools.call(name, arguments)
        return [types.TextContent(type="text", text=result.to_json())]

    async def read_resource(self, uri: str) -> str:
        """Resolve a resource URI to the formatted result as JSON text"""
        async with self._lock:
            result: FormattedResult = await self.resources.read(uri)
        return result.to_json()

    def create_protocol_server(self) -> Server:
        """Register handlers on an SDK server; ExaMCPError variants become McpError"""
        server: Server = Server(self.config.server_name, version=self.config.version)

        @server.list_tools()
        async def _list_tools() -> list[types.Tool]:
            return self.list_tools()

        @server.call_tool()
        async def _call_tool(name: str, arguments: dict[str, Any] | None) -> list[types.TextContent]:
            try:
                return await self.call_tool(name, arguments)
            except ExaMCPError as e:
                logger.warning(f"Tool '{name}' failed: {e.message}")
                raise e.to_mcp_error() from e

        @server.list_resources()
        async def _list_resources() -> list[types.Resource]:
            return self.list_resources()

        @server.list_resource_templates()
        async def _list_resource_templates() -> list[types.ResourceTemplate]:
            return self.list_resource_templates()

        @server.read_resource()
        async def _read_resource(uri: Any) -> Iterable[ReadResourceContents]:
            try:
                text: str = await self.read_resource(str(uri))
            except ExaMCPError as e:
                logger.warning(f"Reading resource '{uri}' failed: {e.message}")
                raise e.to_mcp_error() from e
            return [ReadResourceContents(content=text, mime_type=JSON_MIME_TYPE)]

        return server

    async def run_stdio(self) -> None:
        server: Server = self.create_protocol_server()
        async with stdio_server() as (read_stream, write_stream):
            logger.info("Exa MCP server running on stdio")
            await server.run(read_stream, write_stream, server.create_initialization_options())
