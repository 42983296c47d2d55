"""Nutritionix v2 API client."""

from dataclasses import dataclass
from typing import Protocol

import httpx


class NutritionixClient(Protocol):
    """Interface for Nutritionix API interactions."""

    async def search_instant(self, query: str) -> dict[str, object]:
        """Search branded and common foods by query and return raw API data."""

    async def natural_nutrients(self, query: str) -> dict[str, object]:
        """Resolve a natural-language query to detailed foods."""


@dataclass
class HttpxNutritionixClient(NutritionixClient):
    """HTTPX-backed Nutritionix client."""

    app_id: str
    app_key: str
    base_url: str
    http_client: httpx.AsyncClient

    @classmethod
    def create(
        cls, app_id: str, app_key: str, base_url: str
    ) -> "HttpxNutritionixClient":
        """Create a Nutritionix client with a managed httpx session."""
        return cls(
            app_id=app_id,
            app_key=app_key,
            base_url=base_url,
            http_client=httpx.AsyncClient(),
        )

    async def search_instant(self, query: str) -> dict[str, object]:
        """Search foods with the instant endpoint."""
        response = await self.http_client.get(
            f"{self.base_url}/search/instant",
            params={"query": query},
            headers=self._headers(),
            timeout=15,
        )
        response.raise_for_status()
        return response.json()

    async def natural_nutrients(self, query: str) -> dict[str, object]:
        """Fetch full nutrients for a natural-language query."""
        response = await self.http_client.post(
            f"{self.base_url}/natural/nutrients",
            json={"query": query},
            headers=self._headers(),
            timeout=15,
        )
        response.raise_for_status()
        return response.json()

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()

    def _headers(self) -> dict[str, str]:
        return {"x-app-id": self.app_id, "x-app-key": self.app_key}
