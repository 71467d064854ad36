"""Open Food Facts search API client."""

from dataclasses import dataclass
from typing import Protocol

import httpx

OFF_FIELDS = "product_name,brands,nutriments,code"


class OffClient(Protocol):
    """Interface for Open Food Facts product search."""

    async def search_products(
        self, query: str, page_size: int = 8
    ) -> dict[str, object]:
        """Search packaged products and return raw API data."""


@dataclass
class HttpxOffClient(OffClient):
    """HTTPX-backed Open Food Facts client."""

    base_url: str
    http_client: httpx.AsyncClient
    timeout_seconds: float = 15

    @classmethod
    def create(cls, base_url: str, timeout_seconds: float = 15) -> "HttpxOffClient":
        """Create an Open Food Facts client with a managed httpx session."""
        return cls(
            base_url=base_url,
            http_client=httpx.AsyncClient(),
            timeout_seconds=timeout_seconds,
        )

    async def search_products(
        self, query: str, page_size: int = 8
    ) -> dict[str, object]:
        """Full-text product search."""
        url = f"{self.base_url}/cgi/search.pl"
        response = await self.http_client.get(
            url,
            params={
                "search_terms": query,
                "search_simple": 1,
                "action": "process",
                "json": 1,
                "page_size": page_size,
                "fields": OFF_FIELDS,
            },
            timeout=self.timeout_seconds,
        )
        response.raise_for_status()
        return response.json()

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
