"""Nutrient lookup cache."""

from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from typing import Protocol

from healthy_meal_track.domain.nutrition import NutrientVector


class NutrientCache(Protocol):
    """Cache of resolved per-food nutrient vectors keyed by food name."""

    def get(self, food_name: str) -> NutrientVector | None:
        """Return a cached vector if present and not expired."""

    def set(self, food_name: str, vector: NutrientVector, ttl_seconds: int) -> None:
        """Store a vector with a TTL in seconds."""


@dataclass
class _CacheEntry:
    vector: NutrientVector
    expires_at: datetime


@dataclass
class InMemoryNutrientCache(NutrientCache):
    """Process-local cache; the oldest entry is evicted when full."""

    max_entries: int = 1024
    _entries: dict[str, _CacheEntry] = field(
        default_factory=dict, init=False, repr=False
    )

    def get(self, food_name: str) -> NutrientVector | None:
        """Return a cached vector if it hasn't expired."""
        key = _normalize(food_name)
        entry = self._entries.get(key)
        if entry is None:
            return None
        if datetime.now(tz=UTC) >= entry.expires_at:
            self._entries.pop(key, None)
            return None
        return entry.vector

    def set(self, food_name: str, vector: NutrientVector, ttl_seconds: int) -> None:
        """Store a vector with a TTL."""
        key = _normalize(food_name)
        self._entries.pop(key, None)
        while self._entries and len(self._entries) >= self.max_entries:
            oldest = next(iter(self._entries))
            self._entries.pop(oldest, None)
        expires_at = datetime.now(tz=UTC) + timedelta(seconds=ttl_seconds)
        self._entries[key] = _CacheEntry(vector=vector, expires_at=expires_at)

    def __len__(self) -> int:
        return len(self._entries)


def _normalize(food_name: str) -> str:
    return food_name.strip().lower()
