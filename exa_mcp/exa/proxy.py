from typing import Any, Self

import httpx
from loguru import logger

from exa_mcp.mcp.errors import UpstreamError, ValidationError
from exa_mcp.mcp.models import RawSearchPayload

MIN_NUM_RESULTS = 1
MAX_NUM_RESULTS = 100


class ExaProxy:
    """
    Minimal async proxy around the Exa search API using httpx.

    Usage:
        async with ExaProxy(api_key="...") as exa:
            payload = await exa.search("rust vs go", num_results=5)
    """

    def __init__(
        self,
        *,
        api_key: str,
        base_url: str = "https://api.exa.ai",
        search_type: str = "neural",
        timeout: float = 30.0,
        user_agent: str = "exa-mcp-server/0.1.0",
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.api_key: str = api_key
        self.base_url: str = base_url.rstrip("/")
        self.search_type: str = search_type
        self.timeout: float = timeout
        self.user_agent: str = user_agent
        self.transport: httpx.AsyncBaseTransport | None = transport
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> Self:
        self._client = self._create_client()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

    def _create_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=self.timeout,
            transport=self.transport,
            headers={
                "x-api-key": self.api_key,
                "Content-Type": "application/json",
                "User-Agent": self.user_agent,
            },
        )

    async def search(self, query: str, num_results: int = 10) -> RawSearchPayload:
        """
        Run one neural search and return Exa's response body unmodified.
        See https://docs.exa.ai/reference/search for the request format.
        query: The search query, used verbatim
        num_results: Number of results to request, 1..100 (rejected, not clamped, when outside)
        """
        if not isinstance(query, str) or not query:
            raise ValidationError("Argument 'query' must be a non-empty string")

        if isinstance(num_results, bool) or not isinstance(num_results, int) or not MIN_NUM_RESULTS <= num_results <= MAX_NUM_RESULTS:
            raise ValidationError(f"numResults must be an integer between {MIN_NUM_RESULTS} and {MAX_NUM_RESULTS}, got {num_results!r}")

        body: dict[str, Any] = {
            "query": query,
            "type": self.search_type,
            "numResults": num_results,
            "contents": {"text": True},
        }

        logger.debug(f"Exa search: query='{query}', numResults={num_results}")

        return await self._post_json("/search", body)

    async def _post_json(self, path: str, body: dict[str, Any]) -> dict[str, Any]:
        """
        Internal POST helper normalizing every failure into UpstreamError.
        """
        try:
            if self._client is None:
                # One-shot client when used without the context manager
                async with self._create_client() as client:
                    resp: httpx.Response = await client.post(f"{self.base_url}{path}", json=body)
            else:
                resp = await self._client.post(f"{self.base_url}{path}", json=body)
        except httpx.HTTPError as e:
            logger.error(f"Exa request failed: {e}")
            raise UpstreamError(str(e) or type(e).__name__) from e

        return self._ensure_ok(resp)

    @staticmethod
    def _ensure_ok(resp: httpx.Response) -> dict[str, Any]:
        try:
            resp.raise_for_status()
        except httpx.HTTPStatusError as e:
            error_body: Any = _safe_json(resp)
            logger.error(f"Full error response: {error_body if error_body is not None else resp.text}")
            message: str = str(e)
            if isinstance(error_body, dict):
                # Exa encodes errors as {"error": "..."}; some gateways use {"message": "..."}
                message = error_body.get("error") or error_body.get("message") or message
            raise UpstreamError(str(message), status_code=resp.status_code) from e

        data: Any = _safe_json(resp)
        if not isinstance(data, dict):
            raise UpstreamError(f"unexpected response body: {resp.text[:200]!r}", status_code=resp.status_code)
        return data


def _safe_json(resp: httpx.Response) -> Any:
    try:
        return resp.json()
    except ValueError:
        return None
