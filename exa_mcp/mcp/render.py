"""Turns raw Exa payloads into the caller-facing result shape."""

from typing import Any

from .models import NO_CONTENT, FormattedItem, FormattedResult, RawSearchPayload


def format_item(item: dict[str, Any]) -> FormattedItem:
    return FormattedItem(
        title=item.get("title"),
        score=item.get("score"),
        published_date=item.get("publishedDate"),
        author=item.get("author"),
        content=item.get("text") or NO_CONTENT,
    )


def format_search_results(payload: RawSearchPayload) -> FormattedResult:
    """
    Project a raw payload onto FormattedResult.

    The payload is only read, never modified. Missing optional fields become
    None and a hit without extracted text gets the NO_CONTENT placeholder.
    """
    return FormattedResult(
        request_id=payload.get("requestId"),
        resolved_search_type=payload.get("resolvedSearchType"),
        results=[format_item(item) for item in payload.get("results") or [] if isinstance(item, dict)],
    )
