"""Edamam nutrition-data API client."""

from dataclasses import dataclass

import httpx

from healthy_meal_track.services.nutrition import NutrientClient


@dataclass
class HttpxEdamamClient(NutrientClient):
    """HTTPX-backed client for Edamam's single-ingredient analysis."""

    app_id: str
    app_key: str
    base_url: str
    http_client: httpx.AsyncClient
    timeout_seconds: float = 5.0

    @classmethod
    def create(
        cls,
        app_id: str,
        app_key: str,
        base_url: str,
        timeout_seconds: float = 5.0,
    ) -> "HttpxEdamamClient":
        """Create an Edamam client with a managed httpx session."""
        return cls(
            app_id=app_id,
            app_key=app_key,
            base_url=base_url,
            http_client=httpx.AsyncClient(),
            timeout_seconds=timeout_seconds,
        )

    async def lookup(self, food_name: str) -> dict[str, object]:
        """Fetch nutrient data for one ingredient phrase."""
        response = await self.http_client.get(
            self.base_url,
            params={"app_id": self.app_id, "app_key": self.app_key, "ingr": food_name},
            timeout=self.timeout_seconds,
        )
        response.raise_for_status()
        return response.json()

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
