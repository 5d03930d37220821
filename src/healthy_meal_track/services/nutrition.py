"""Nutrient lookup and meal-level aggregation."""

import asyncio
import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from functools import reduce
from typing import TYPE_CHECKING, Protocol

from healthy_meal_track.domain.foods import FoodItem
from healthy_meal_track.domain.nutrition import (
    Fallback,
    LookupOutcome,
    NutrientVector,
    Resolved,
)
from healthy_meal_track.services.cache import NutrientCache
from healthy_meal_track.services.nutrient_table import match_local

# Edamam totalNutrients code -> NutrientVector field.
_NUTRIENT_CODES = {
    "ENERC_KCAL": "calories",
    "PROCNT": "protein",
    "CHOCDF": "carbs",
    "FAT": "fat",
    "FIBTG": "fiber",
    "SUGAR": "sugar",
    "NA": "sodium",
    "K": "potassium",
    "CHOLE": "cholesterol",
    "FASAT": "saturated_fat",
    "FATRN": "trans_fat",
    "VITA_RAE": "vitamin_a",
    "VITC": "vitamin_c",
    "CA": "calcium",
    "FE": "iron",
}

_logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable


class NutrientClient(Protocol):
    """Interface for the external nutrition database."""

    async def lookup(self, food_name: str) -> dict[str, object]:
        """Return raw nutrient data for a single ingredient."""


@dataclass
class NutritionService:
    """Resolves foods to nutrient vectors and combines them per meal."""

    client: NutrientClient | None
    cache: NutrientCache
    timeout_seconds: float = 5.0
    cache_ttl_seconds: int = 86400
    retry_attempts: int = 0
    retry_delay_seconds: float = 0.3

    async def lookup(self, food_name: str) -> LookupOutcome:
        """Resolve one food, falling back locally on any lookup problem.

        Never raises for lookup failures.
        """
        query = food_name.strip().lower()
        cached = self.cache.get(query)
        if cached is not None:
            return Resolved(food_name=food_name, vector=cached)
        if self.client is None:
            return _fallback(food_name, "lookup not configured")

        client = self.client
        try:
            payload = await self._call_with_retry(
                lambda: client.lookup(query), action=f"lookup:{query}"
            )
        except Exception as exc:  # noqa: BLE001
            _logger.warning(
                "Nutrient lookup failed for %s (status=%s): %s",
                query,
                _status_code_from_exception(exc),
                str(exc) or type(exc).__name__,
            )
            return _fallback(food_name, f"lookup failed: {type(exc).__name__}")

        vector = _parse_total_nutrients(payload)
        if vector is None:
            return _fallback(food_name, "no nutrients returned")
        self.cache.set(query, vector, ttl_seconds=self.cache_ttl_seconds)
        return Resolved(food_name=food_name, vector=vector)

    async def resolve_all(self, foods: Sequence[FoodItem]) -> list[LookupOutcome]:
        """Look up every food concurrently and collect all outcomes."""
        return list(await asyncio.gather(*(self.lookup(food.name) for food in foods)))

    async def aggregate(
        self, foods: Sequence[FoodItem]
    ) -> tuple[NutrientVector, list[LookupOutcome]]:
        """Return the confidence-weighted meal vector and per-food outcomes."""
        outcomes = await self.resolve_all(foods)
        weighted = (
            (outcome.vector, food.weight)
            for food, outcome in zip(foods, outcomes, strict=True)
        )
        return combine_nutrients(weighted), outcomes

    async def _call_with_retry(
        self, func: "Callable[[], Awaitable[dict[str, object]]]", *, action: str
    ) -> dict[str, object]:
        """Call an async function with a per-attempt timeout and short retry."""
        attempt = 0
        while True:
            try:
                return await asyncio.wait_for(func(), timeout=self.timeout_seconds)
            except Exception:
                attempt += 1
                if attempt > self.retry_attempts:
                    raise
                _logger.info(
                    "Retrying nutrient %s (attempt %s/%s)",
                    action,
                    attempt + 1,
                    self.retry_attempts + 1,
                )
                await asyncio.sleep(self.retry_delay_seconds)


def combine_nutrients(
    weighted: Iterable[tuple[NutrientVector, float]],
) -> NutrientVector:
    """Fold (vector, weight) pairs into a fresh meal-level vector."""
    return reduce(
        lambda total, pair: total + pair[0].scaled(pair[1]),
        weighted,
        NutrientVector(),
    )


def _fallback(food_name: str, reason: str) -> Fallback:
    matched_key, vector = match_local(food_name)
    _logger.info(
        "Using local nutrients for %s (%s, match=%s)",
        food_name,
        reason,
        matched_key or "default",
    )
    return Fallback(
        food_name=food_name, vector=vector, reason=reason, matched_key=matched_key
    )


def _status_code_from_exception(exc: Exception) -> str:
    """Extract HTTP status code from an exception, if available."""
    response = getattr(exc, "response", None)
    status_code = getattr(response, "status_code", None)
    if isinstance(status_code, int):
        return str(status_code)
    return "n/a"


def _parse_total_nutrients(payload: object) -> NutrientVector | None:
    """Map Edamam totalNutrients into a vector; None when nothing is usable."""
    if not isinstance(payload, dict):
        return None
    total = payload.get("totalNutrients")
    if not isinstance(total, dict) or not total:
        return None
    values: dict[str, object] = {}
    for code, name in _NUTRIENT_CODES.items():
        nutrient = total.get(code)
        if isinstance(nutrient, dict):
            values[name] = nutrient.get("quantity")
    return NutrientVector.from_dict(values)
