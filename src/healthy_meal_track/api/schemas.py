"""Request and response models for the HTTP API."""

from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel, Field

from healthy_meal_track.domain.health import (
    ConditionEntry,
    HealthCondition,
    MealCategory,
    RiskLevel,
    UserProfile,
)
from healthy_meal_track.domain.meals import AnalysisStatus, MealRecord, MealType
from healthy_meal_track.services.categories import risk_level
from healthy_meal_track.services.stats import DailyTrend, NutritionalSummary


class MealSubmitted(BaseModel):
    """Accepted meal submission."""

    meal_id: UUID
    image_url: str | None
    status: AnalysisStatus


class MealView(BaseModel):
    """Meal with its analysis state."""

    id: UUID
    meal_type: MealType
    description: str | None
    image_url: str | None
    consumed_at: datetime
    analysis_status: AnalysisStatus
    analysis_error: str | None = None
    analysis: dict[str, object] | None = None
    analyzed_at: datetime | None = None
    category: MealCategory
    risk_level: RiskLevel
    total_calories: float
    feedback: dict[str, object] | None = None

    @classmethod
    def from_record(cls, meal: MealRecord) -> "MealView":
        findings = meal.analysis.health_risks if meal.analysis else None
        return cls(
            id=meal.id,
            meal_type=meal.meal_type,
            description=meal.description,
            image_url=meal.image_url,
            consumed_at=meal.consumed_at,
            analysis_status=meal.analysis_status,
            analysis_error=meal.analysis_error,
            analysis=meal.analysis.to_dict() if meal.analysis else None,
            analyzed_at=meal.analyzed_at,
            category=meal.category,
            risk_level=risk_level(findings),
            total_calories=round(meal.total_calories, 1),
            feedback=meal.feedback.to_dict() if meal.feedback else None,
        )


class FeedbackRequest(BaseModel):
    """User feedback payload."""

    accuracy: int | None = Field(default=None, ge=1, le=5)
    helpful: bool | None = None
    comments: str | None = Field(default=None, max_length=1000)


class QueueStatusView(BaseModel):
    """Meals still awaiting analysis."""

    pending: int
    processing: int
    total: int


class ConditionPayload(BaseModel):
    """Declared health condition."""

    condition: HealthCondition
    details: str | None = Field(default=None, max_length=500)


class HealthConditionsRequest(BaseModel):
    """Replacement set of health conditions."""

    health_conditions: list[ConditionPayload]

    def to_entries(self) -> list[ConditionEntry]:
        return [
            ConditionEntry(condition=item.condition, details=item.details)
            for item in self.health_conditions
        ]


class UserProfileView(BaseModel):
    """User health profile."""

    id: UUID
    name: str | None
    health_conditions: list[ConditionPayload]

    @classmethod
    def from_profile(cls, profile: UserProfile) -> "UserProfileView":
        return cls(
            id=profile.id,
            name=profile.name,
            health_conditions=[
                ConditionPayload(condition=entry.condition, details=entry.details)
                for entry in profile.health_conditions
            ],
        )


class SummaryView(BaseModel):
    """Nutrition totals over a period."""

    days: int
    total_calories: float
    total_protein: float
    total_carbs: float
    total_fat: float
    total_sodium: float
    total_sugar: float
    meal_count: int
    healthy_meals: int
    average_calories: float

    @classmethod
    def from_summary(cls, days: int, summary: NutritionalSummary) -> "SummaryView":
        return cls(
            days=days,
            total_calories=round(summary.total_calories, 1),
            total_protein=round(summary.total_protein, 1),
            total_carbs=round(summary.total_carbs, 1),
            total_fat=round(summary.total_fat, 1),
            total_sodium=round(summary.total_sodium, 1),
            total_sugar=round(summary.total_sugar, 1),
            meal_count=summary.meal_count,
            healthy_meals=summary.healthy_meals,
            average_calories=round(summary.average_calories, 1),
        )


class TrendView(BaseModel):
    """Nutrient sums for one day."""

    day: date
    calories: float
    protein: float
    carbs: float
    fat: float
    sodium: float
    sugar: float
    risk_count: int

    @classmethod
    def from_trend(cls, trend: DailyTrend) -> "TrendView":
        return cls(
            day=trend.day,
            calories=round(trend.calories, 1),
            protein=round(trend.protein, 1),
            carbs=round(trend.carbs, 1),
            fat=round(trend.fat, 1),
            sodium=round(trend.sodium, 1),
            sugar=round(trend.sugar, 1),
            risk_count=trend.risk_count,
        )
