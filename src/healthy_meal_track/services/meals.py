"""Meal submission, background analysis and result recording."""

import logging
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Protocol
from uuid import UUID, uuid4

from healthy_meal_track.domain.health import MealCategory, UserProfile
from healthy_meal_track.domain.meals import (
    AnalysisResult,
    AnalysisStatus,
    MealFeedback,
    MealRecord,
    MealType,
)
from healthy_meal_track.services.analysis import MealAnalyzer

_logger = logging.getLogger(__name__)

MAX_PAGE_SIZE = 100

_EXTENSIONS = {
    "image/jpeg": ".jpg",
    "image/png": ".png",
    "image/webp": ".webp",
    "image/gif": ".gif",
}


class MealRepository(Protocol):
    """Persistence interface for meals; also the analysis result sink."""

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

    def get_meal(self, meal_id: UUID) -> MealRecord | None:
        """Return a meal by id, if present."""

    def delete_meal(self, meal_id: UUID) -> None:
        """Delete a meal row."""

    def record_analysis_result(
        self, meal_id: UUID, result: AnalysisResult, analyzed_at: datetime
    ) -> bool:
        """Store a completed analysis; return false when the meal is gone."""

    def record_analysis_failure(self, meal_id: UUID, reason: str) -> bool:
        """Mark the analysis failed; return false when the meal is gone."""

    def save_feedback(self, meal_id: UUID, feedback: MealFeedback) -> None:
        """Store user feedback for a meal."""

    def count_by_status(self, user_id: UUID, status: AnalysisStatus) -> int:
        """Count a user's meals in the given analysis status."""

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


class PhotoStorage(Protocol):
    """Storage for uploaded meal photos."""

    def upload(self, path: str, data: bytes, content_type: str) -> str:
        """Store the photo and return its public URL."""

    def remove(self, path: str) -> None:
        """Delete a stored photo."""


@dataclass(frozen=True)
class QueueStatus:
    """Meals of a user still waiting for analysis."""

    pending: int
    processing: int

    @property
    def total(self) -> int:
        return self.pending + self.processing


@dataclass
class MealService:
    """Coordinates meal records with the analysis pipeline."""

    analyzer: MealAnalyzer
    repository: MealRepository
    photo_storage: PhotoStorage

    def submit_meal(  # noqa: PLR0913
        self,
        user_id: UUID,
        meal_type: MealType,
        description: str | None,
        image_bytes: bytes,
        content_type: str,
    ) -> MealRecord:
        """Store the photo and create a meal awaiting analysis."""
        image_path = f"{user_id}/{uuid4()}{_EXTENSIONS.get(content_type, '.jpg')}"
        image_url = self.photo_storage.upload(image_path, image_bytes, content_type)
        return self.repository.create_meal(
            user_id=user_id,
            meal_type=meal_type,
            description=description,
            image_url=image_url,
            image_path=image_path,
            status=AnalysisStatus.PROCESSING,
            consumed_at=datetime.now(tz=UTC),
        )

    async def run_analysis(
        self, meal_id: UUID, image_bytes: bytes, profile: UserProfile | None
    ) -> AnalysisResult | None:
        """Analyze a submitted meal and record the outcome exactly once.

        Returns the stored result, or None when the analysis failed or the
        meal disappeared before the result could be written.
        """
        _logger.info("Starting analysis for meal %s", meal_id)
        try:
            result = await self.analyzer.analyze(image_bytes, profile)
        except Exception as exc:
            _logger.exception("Analysis failed for meal %s", meal_id)
            self._mark_failed(meal_id, f"Image analysis failed: {exc}")
            return None

        try:
            stored = self.repository.record_analysis_result(
                meal_id, result, datetime.now(tz=UTC)
            )
        except Exception:
            _logger.exception("Failed to store analysis for meal %s", meal_id)
            return None
        if not stored:
            _logger.warning("Meal %s not found for analysis update", meal_id)
            return None
        _logger.info(
            "Analysis completed for meal %s: category=%s foods=%s in %.0fms",
            meal_id,
            result.category,
            len(result.recognized_foods),
            result.processing_time_ms,
        )
        return result

    def get_meal(self, user_id: UUID, meal_id: UUID) -> MealRecord | None:
        """Return a meal owned by the user."""
        meal = self.repository.get_meal(meal_id)
        if meal is None or meal.user_id != user_id:
            return None
        return meal

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
        """Return the user's meals newest first, filtered and paged."""
        return self.repository.list_meals(
            user_id,
            meal_type=meal_type,
            category=category,
            start=start,
            end=end,
            limit=min(max(limit, 1), MAX_PAGE_SIZE),
            offset=max(offset, 0),
        )

    def delete_meal(self, user_id: UUID, meal_id: UUID) -> bool:
        """Delete a meal and its photo; return false when not found."""
        meal = self.get_meal(user_id, meal_id)
        if meal is None:
            return False
        if meal.image_path:
            try:
                self.photo_storage.remove(meal.image_path)
            except Exception:
                _logger.exception("Failed to delete photo for meal %s", meal_id)
        self.repository.delete_meal(meal_id)
        return True

    def submit_feedback(
        self, user_id: UUID, meal_id: UUID, feedback: MealFeedback
    ) -> bool:
        """Store feedback for a meal; return false when not found."""
        if self.get_meal(user_id, meal_id) is None:
            return False
        self.repository.save_feedback(meal_id, feedback)
        return True

    def analysis_queue_status(self, user_id: UUID) -> QueueStatus:
        """Return how many of the user's meals are still being analyzed."""
        return QueueStatus(
            pending=self.repository.count_by_status(user_id, AnalysisStatus.PENDING),
            processing=self.repository.count_by_status(
                user_id, AnalysisStatus.PROCESSING
            ),
        )

    def _mark_failed(self, meal_id: UUID, reason: str) -> None:
        try:
            if not self.repository.record_analysis_failure(meal_id, reason):
                _logger.warning("Meal %s not found to mark as failed", meal_id)
        except Exception:
            _logger.exception("Failed to update status for meal %s", meal_id)
