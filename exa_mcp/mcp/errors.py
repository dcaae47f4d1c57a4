"""
MCP error taxonomy

Every failure a tool call or resource read can produce is one of the
variants below. Components raise them; only the server facade converts
them into protocol errors (see ExaMCPError.to_mcp_error).
"""

from typing import Any, Optional

from mcp.shared.exceptions import McpError
from mcp.types import INTERNAL_ERROR, INVALID_PARAMS, INVALID_REQUEST, METHOD_NOT_FOUND, ErrorData

# MCP error code for a missing resource; JSON-RPC itself does not define it
RESOURCE_NOT_FOUND = -32002


class ExaMCPError(Exception):
    """Base class for all errors surfaced to MCP callers"""

    code: int = INTERNAL_ERROR

    def __init__(self, message: str, data: Optional[dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.message: str = message
        self.data: Optional[dict[str, Any]] = data

    def to_error_data(self) -> ErrorData:
        return ErrorData(code=self.code, message=self.message, data=self.data)

    def to_mcp_error(self) -> McpError:
        return McpError(self.to_error_data())


class ValidationError(ExaMCPError):
    """Malformed caller input, never retried"""

    code = INVALID_PARAMS


class MethodNotFoundError(ValidationError):
    code = METHOD_NOT_FOUND


class InvalidResourceError(ValidationError):
    """Resource URI matches neither the fixed nor the templated form"""

    code = INVALID_REQUEST


class NotFoundError(ExaMCPError):
    """Well-formed request for state that does not exist"""

    code = RESOURCE_NOT_FOUND


class UpstreamError(ExaMCPError):
    """The Exa API failed or could not be reached"""

    code = INTERNAL_ERROR

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(f"Exa API error: {message}", data={"status_code": status_code} if status_code else None)
        self.upstream_message: str = message
        self.status_code: Optional[int] = status_code


class StorageError(ExaMCPError):
    """Local persistence failed; the triggering mutation is not committed"""

    code = INTERNAL_ERROR
