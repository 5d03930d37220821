"""Domain models for meals and their analysis."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from uuid import UUID

from healthy_meal_track.domain.foods import FoodItem
from healthy_meal_track.domain.health import (
    GenericWarning,
    MealCategory,
    Priority,
    Recommendation,
    RiskFinding,
)
from healthy_meal_track.domain.nutrition import Fallback, LookupOutcome, NutrientVector


class MealType(StrEnum):
    """When the meal was eaten."""

    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    DINNER = "dinner"
    SNACK = "snack"


class AnalysisStatus(StrEnum):
    """Lifecycle of a meal's analysis."""

    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass(frozen=True)
class AnalysisResult:
    """Terminal output of one meal analysis."""

    recognized_foods: list[FoodItem]
    nutrition: NutrientVector
    health_risks: list[RiskFinding]
    warnings: list[GenericWarning]
    recommendations: list[Recommendation]
    category: MealCategory
    processing_time_ms: float
    lookups: list[LookupOutcome] = field(default_factory=list)

    def to_dict(self) -> dict[str, object]:
        """Serialize for storage and API responses."""
        return {
            "recognizedFoods": [food.to_dict() for food in self.recognized_foods],
            "nutrition": self.nutrition.to_dict(),
            "healthRisks": [risk.to_dict() for risk in self.health_risks],
            "warnings": [warning.to_dict() for warning in self.warnings],
            "recommendations": [rec.to_dict() for rec in self.recommendations],
            "category": self.category.value,
            "processingTime": round(self.processing_time_ms, 2),
            "lookups": [_lookup_to_dict(outcome) for outcome in self.lookups],
        }

    @classmethod
    def from_dict(cls, data: dict[str, object]) -> "AnalysisResult":
        """Rebuild a stored analysis. Lookup outcomes are not restored."""
        return cls(
            recognized_foods=[
                FoodItem.from_dict(item)
                for item in _as_list(data.get("recognizedFoods"))
            ],
            nutrition=NutrientVector.from_dict(_as_dict(data.get("nutrition"))),
            health_risks=[
                RiskFinding.from_dict(item)
                for item in _as_list(data.get("healthRisks"))
            ],
            warnings=[
                GenericWarning(
                    type=str(item.get("type", "")),
                    message=str(item.get("message", "")),
                )
                for item in _as_list(data.get("warnings"))
            ],
            recommendations=[
                Recommendation(
                    message=str(item.get("message", "")),
                    priority=Priority(str(item.get("priority", "low"))),
                    type=str(item.get("type", "dietary")),
                )
                for item in _as_list(data.get("recommendations"))
            ],
            category=MealCategory(str(data.get("category", "unknown"))),
            processing_time_ms=float(data.get("processingTime", 0.0)),
        )


@dataclass(frozen=True)
class MealFeedback:
    """User feedback on an analysis."""

    accuracy: int | None = None
    helpful: bool | None = None
    comments: str | None = None

    def to_dict(self) -> dict[str, object]:
        return {
            "accuracy": self.accuracy,
            "helpful": self.helpful,
            "comments": self.comments,
        }


@dataclass(frozen=True)
class MealRecord:
    """Stored meal with its analysis state."""

    id: UUID
    user_id: UUID
    meal_type: MealType
    consumed_at: datetime
    analysis_status: AnalysisStatus
    description: str | None = None
    image_url: str | None = None
    image_path: str | None = None
    analysis_error: str | None = None
    analysis: AnalysisResult | None = None
    analyzed_at: datetime | None = None
    category: MealCategory = MealCategory.UNKNOWN
    feedback: MealFeedback | None = None

    @property
    def total_calories(self) -> float:
        if self.analysis is None:
            return 0.0
        return self.analysis.nutrition.calories


def _lookup_to_dict(outcome: LookupOutcome) -> dict[str, object]:
    if isinstance(outcome, Fallback):
        return {
            "food": outcome.food_name,
            "source": "fallback",
            "reason": outcome.reason,
            "matchedKey": outcome.matched_key,
        }
    return {"food": outcome.food_name, "source": outcome.source}


def _as_list(value: object) -> list[dict[str, object]]:
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, dict)]


def _as_dict(value: object) -> dict[str, object]:
    return value if isinstance(value, dict) else {}
