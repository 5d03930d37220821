"""User health profile management."""

from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

from healthy_meal_track.domain.health import ConditionEntry, UserProfile


class UserRepository(Protocol):
    """Persistence interface for user health profiles."""

    def get_profile(self, user_id: UUID) -> UserProfile | None:
        """Return the user's profile, if the user exists."""

    def replace_health_conditions(
        self, user_id: UUID, conditions: list[ConditionEntry]
    ) -> None:
        """Replace every stored condition of the user."""


@dataclass
class UserService:
    """Application service for reading and updating health profiles."""

    repository: UserRepository

    def get_profile(self, user_id: UUID) -> UserProfile | None:
        """Return the user's health profile."""
        return self.repository.get_profile(user_id)

    def update_health_conditions(
        self, user_id: UUID, conditions: list[ConditionEntry]
    ) -> UserProfile | None:
        """Store the user's conditions and return the refreshed profile."""
        if self.repository.get_profile(user_id) is None:
            return None
        cleaned = [
            ConditionEntry(
                condition=entry.condition,
                details=(entry.details or "").strip() or None,
            )
            for entry in conditions
        ]
        self.repository.replace_health_conditions(user_id, cleaned)
        return self.repository.get_profile(user_id)
