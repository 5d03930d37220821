"""Supabase-backed user health profile repository."""

import logging
from dataclasses import dataclass
from uuid import UUID

from supabase import Client

from healthy_meal_track.domain.health import (
    ConditionEntry,
    HealthCondition,
    UserProfile,
)
from healthy_meal_track.services.users import UserRepository

_logger = logging.getLogger(__name__)


@dataclass
class SupabaseUserRepository(UserRepository):
    """Supabase implementation for users and their health conditions."""

    client: Client

    def get_profile(self, user_id: UUID) -> UserProfile | None:
        """Return the user with declared conditions, if present."""
        response = (
            self.client.table("users")
            .select("id, name")
            .eq("id", str(user_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        row = response.data[0]
        conditions = (
            self.client.table("health_conditions")
            .select("condition, details")
            .eq("user_id", str(user_id))
            .execute()
        )
        return UserProfile(
            id=UUID(str(row["id"])),
            name=row.get("name"),
            health_conditions=_parse_conditions(conditions.data or []),
        )

    def replace_health_conditions(
        self, user_id: UUID, conditions: list[ConditionEntry]
    ) -> None:
        """Delete existing conditions and insert the new set."""
        self.client.table("health_conditions").delete().eq(
            "user_id", str(user_id)
        ).execute()
        if not conditions:
            return
        self.client.table("health_conditions").insert(
            [
                {
                    "user_id": str(user_id),
                    "condition": entry.condition.value,
                    "details": entry.details,
                }
                for entry in conditions
            ]
        ).execute()


def _parse_conditions(rows: list[dict[str, object]]) -> list[ConditionEntry]:
    entries: list[ConditionEntry] = []
    for row in rows:
        try:
            condition = HealthCondition(str(row.get("condition", "")))
        except ValueError:
            _logger.warning(
                "Ignoring unknown health condition %r", row.get("condition")
            )
            continue
        details = row.get("details")
        entries.append(
            ConditionEntry(
                condition=condition,
                details=str(details) if details else None,
            )
        )
    return entries
