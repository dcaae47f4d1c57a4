from typing import Protocol

from .models import RawSearchPayload


class SearchGateway(Protocol):
    """Anything that can run a remote search (ExaProxy in production)"""

    async def search(self, query: str, num_results: int = 10) -> RawSearchPayload: ...
