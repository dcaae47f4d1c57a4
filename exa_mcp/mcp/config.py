"""
MCP Configuration

Server identity, the resource URI scheme and result-count defaults.
"""

import re

from pydantic import BaseModel, Field


class MCPConfig(BaseModel):
    """Main MCP server configuration"""

    server_name: str = Field(default="exa-server", description="Server name announced during initialization")
    version: str = Field(default="0.1.0", description="MCP server version")
    uri_scheme: str = Field(default="exa", description="Scheme of all resource URIs", pattern=r"^[a-z][a-z0-9+.-]*$")
    default_num_results: int = Field(default=10, description="Tool default and fixed count for resource reads", ge=1, le=100)

    @property
    def last_result_uri(self) -> str:
        return f"{self.uri_scheme}://last-search/result"

    @property
    def search_uri_template(self) -> str:
        return f"{self.uri_scheme}://search/{{query}}"

    @property
    def search_uri_pattern(self) -> re.Pattern[str]:
        return re.compile(rf"{re.escape(self.uri_scheme)}://search/(.+)")


DEFAULT_MCP_CONFIG = MCPConfig()
