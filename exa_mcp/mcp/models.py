"""
MCP data models for the Exa search server

Raw Exa payloads stay loosely typed (RawSearchPayload) and are converted into
FormattedResult at the formatting boundary.
"""

from typing import Any, Optional

from loguru import logger
from pydantic import BaseModel, ConfigDict, Field, model_validator

RawSearchPayload = dict[str, Any]

NO_CONTENT = "No content available"


class StoredSearches(BaseModel):
    """The persisted document: query -> raw payload, plus the most recent query"""

    model_config = ConfigDict(populate_by_name=True)

    searches: dict[str, RawSearchPayload] = Field(default_factory=dict, description="Raw payloads keyed by verbatim query")
    last_query: Optional[str] = Field(None, alias="lastQuery", description="Most recently stored query")

    @model_validator(mode="after")
    def drop_dangling_pointer(self) -> "StoredSearches":
        if self.last_query is not None and self.last_query not in self.searches:
            logger.warning(f"lastQuery '{self.last_query}' has no stored result, clearing pointer")
            self.last_query = None
        return self


class SearchParams(BaseModel):
    """Arguments accepted by the search tool"""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    query: str = Field(description="Search query", min_length=1)
    num_results: int = Field(10, alias="numResults", description="Number of results to return", ge=1, le=100, strict=True)


class FormattedItem(BaseModel):
    """A single simplified search hit"""

    model_config = ConfigDict(populate_by_name=True)

    title: Optional[str] = None
    score: Optional[float] = None
    published_date: Optional[str] = Field(None, alias="publishedDate")
    author: Optional[str] = None
    content: str = NO_CONTENT


class FormattedResult(BaseModel):
    """Caller-facing projection of a raw Exa payload"""

    model_config = ConfigDict(populate_by_name=True)

    request_id: Optional[str] = Field(None, alias="requestId")
    resolved_search_type: Optional[str] = Field(None, alias="resolvedSearchType")
    results: list[FormattedItem] = Field(default_factory=list)

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True, indent=2)
