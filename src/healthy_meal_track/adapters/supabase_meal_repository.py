"""Supabase repository for meals and their analysis results."""

from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID

from supabase import Client

from healthy_meal_track.domain.health import MealCategory
from healthy_meal_track.domain.meals import (
    AnalysisResult,
    AnalysisStatus,
    MealFeedback,
    MealRecord,
    MealType,
)
from healthy_meal_track.services.meals import MealRepository
from healthy_meal_track.services.stats import StatsRepository

_MEAL_COLUMNS = (
    "id, user_id, meal_type, description, image_url, image_path, consumed_at, "
    "analysis_status, analysis_error, analysis, analyzed_at, category, feedback"
)


@dataclass
class SupabaseMealRepository(MealRepository, StatsRepository):
    """Supabase implementation for meal persistence."""

    client: Client

    def create_meal(  # noqa: PLR0913
        self,
        user_id: UUID,
        meal_type: MealType,
        description: str | None,
        image_url: str | None,
        image_path: str | None,
        status: AnalysisStatus,
        consumed_at: datetime,
    ) -> MealRecord:
        """Create a meal row and return it."""
        response = (
            self.client.table("meals")
            .insert(
                {
                    "user_id": str(user_id),
                    "meal_type": meal_type.value,
                    "description": description,
                    "image_url": image_url,
                    "image_path": image_path,
                    "analysis_status": status.value,
                    "consumed_at": consumed_at.isoformat(),
                    "category": MealCategory.UNKNOWN.value,
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create meal")
        return _parse_meal(response.data[0])

    def get_meal(self, meal_id: UUID) -> MealRecord | None:
        """Return a meal by id."""
        response = (
            self.client.table("meals")
            .select(_MEAL_COLUMNS)
            .eq("id", str(meal_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_meal(response.data[0])

    def delete_meal(self, meal_id: UUID) -> None:
        """Delete a meal row."""
        self.client.table("meals").delete().eq("id", str(meal_id)).execute()

    def record_analysis_result(
        self, meal_id: UUID, result: AnalysisResult, analyzed_at: datetime
    ) -> bool:
        """Store the completed analysis and derived category."""
        response = (
            self.client.table("meals")
            .update(
                {
                    "analysis_status": AnalysisStatus.COMPLETED.value,
                    "analysis_error": None,
                    "analysis": result.to_dict(),
                    "analyzed_at": analyzed_at.isoformat(),
                    "category": result.category.value,
                }
            )
            .eq("id", str(meal_id))
            .execute()
        )
        return bool(response.data)

    def record_analysis_failure(self, meal_id: UUID, reason: str) -> bool:
        """Mark a meal's analysis as failed."""
        response = (
            self.client.table("meals")
            .update(
                {
                    "analysis_status": AnalysisStatus.FAILED.value,
                    "analysis_error": reason,
                }
            )
            .eq("id", str(meal_id))
            .execute()
        )
        return bool(response.data)

    def save_feedback(self, meal_id: UUID, feedback: MealFeedback) -> None:
        """Store user feedback."""
        self.client.table("meals").update({"feedback": feedback.to_dict()}).eq(
            "id", str(meal_id)
        ).execute()

    def count_by_status(self, user_id: UUID, status: AnalysisStatus) -> int:
        """Count a user's meals in a status."""
        response = (
            self.client.table("meals")
            .select("id", count="exact")
            .eq("user_id", str(user_id))
            .eq("analysis_status", status.value)
            .execute()
        )
        if response.count is not None:
            return int(response.count)
        return len(response.data or [])

    def list_meals(  # noqa: PLR0913
        self,
        user_id: UUID,
        *,
        meal_type: MealType | None = None,
        category: MealCategory | None = None,
        start: datetime | None = None,
        end: datetime | None = None,
        limit: int = 20,
        offset: int = 0,
    ) -> list[MealRecord]:
        """Return a page of the user's meals, newest first."""
        query = (
            self.client.table("meals")
            .select(_MEAL_COLUMNS)
            .eq("user_id", str(user_id))
        )
        if meal_type is not None:
            query = query.eq("meal_type", meal_type.value)
        if category is not None:
            query = query.eq("category", category.value)
        if start is not None:
            query = query.gte("consumed_at", start.isoformat())
        if end is not None:
            query = query.lte("consumed_at", end.isoformat())
        response = (
            query.order("consumed_at", desc=True)
            .range(offset, offset + limit - 1)
            .execute()
        )
        return [_parse_meal(row) for row in response.data or []]

    def list_completed_meals(
        self, user_id: UUID, start: datetime, end: datetime
    ) -> list[MealRecord]:
        """Return completed meals consumed in the time range."""
        response = (
            self.client.table("meals")
            .select(_MEAL_COLUMNS)
            .eq("user_id", str(user_id))
            .eq("analysis_status", AnalysisStatus.COMPLETED.value)
            .gte("consumed_at", start.isoformat())
            .lte("consumed_at", end.isoformat())
            .order("consumed_at", desc=False)
            .execute()
        )
        return [_parse_meal(row) for row in response.data or []]


def _parse_meal(row: dict[str, object]) -> MealRecord:
    analysis_raw = row.get("analysis")
    feedback_raw = row.get("feedback")
    return MealRecord(
        id=UUID(str(row["id"])),
        user_id=UUID(str(row["user_id"])),
        meal_type=MealType(str(row.get("meal_type", MealType.SNACK.value))),
        consumed_at=(
            _parse_datetime(row.get("consumed_at")) or datetime.min.replace(tzinfo=UTC)
        ),
        analysis_status=AnalysisStatus(
            str(row.get("analysis_status") or AnalysisStatus.PENDING.value)
        ),
        description=row.get("description"),
        image_url=row.get("image_url"),
        image_path=row.get("image_path"),
        analysis_error=row.get("analysis_error"),
        analysis=(
            AnalysisResult.from_dict(analysis_raw)
            if isinstance(analysis_raw, dict)
            else None
        ),
        analyzed_at=_parse_datetime(row.get("analyzed_at")),
        category=MealCategory(str(row.get("category") or MealCategory.UNKNOWN.value)),
        feedback=(
            MealFeedback(
                accuracy=feedback_raw.get("accuracy"),
                helpful=feedback_raw.get("helpful"),
                comments=feedback_raw.get("comments"),
            )
            if isinstance(feedback_raw, dict)
            else None
        ),
    )


def _parse_datetime(value: object) -> datetime | None:
    if isinstance(value, datetime):
        return value
    if isinstance(value, str) and value:
        return datetime.fromisoformat(value)
    return None
