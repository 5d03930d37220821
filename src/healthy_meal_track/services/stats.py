"""Nutrition statistics over analyzed meals."""

from dataclasses import dataclass
from datetime import UTC, date, datetime, timedelta
from typing import Protocol
from uuid import UUID

from healthy_meal_track.domain.health import MealCategory
from healthy_meal_track.domain.meals import MealRecord


class StatsRepository(Protocol):
    """Read interface for completed meals."""

    def list_completed_meals(
        self, user_id: UUID, start: datetime, end: datetime
    ) -> list[MealRecord]:
        """Return completed meals consumed within a time range."""


@dataclass(frozen=True)
class NutritionalSummary:
    """Totals across completed meals in a period."""

    total_calories: float
    total_protein: float
    total_carbs: float
    total_fat: float
    total_sodium: float
    total_sugar: float
    meal_count: int
    healthy_meals: int

    @property
    def average_calories(self) -> float:
        if self.meal_count == 0:
            return 0.0
        return self.total_calories / self.meal_count


@dataclass(frozen=True)
class DailyTrend:
    """Per-day nutrient sums and risk count."""

    day: date
    calories: float
    protein: float
    carbs: float
    fat: float
    sodium: float
    sugar: float
    risk_count: int


@dataclass
class StatsService:
    """Service for nutrition summaries and daily trends."""

    repository: StatsRepository

    def nutritional_summary(
        self, user_id: UUID, start: datetime, end: datetime
    ) -> NutritionalSummary:
        """Return totals for completed meals between start and end."""
        meals = self.repository.list_completed_meals(user_id, start, end)
        summary = NutritionalSummary(0, 0, 0, 0, 0, 0, 0, 0)
        for meal in meals:
            if meal.analysis is None:
                continue
            nutrition = meal.analysis.nutrition
            summary = NutritionalSummary(
                total_calories=summary.total_calories + nutrition.calories,
                total_protein=summary.total_protein + nutrition.protein,
                total_carbs=summary.total_carbs + nutrition.carbs,
                total_fat=summary.total_fat + nutrition.fat,
                total_sodium=summary.total_sodium + nutrition.sodium,
                total_sugar=summary.total_sugar + nutrition.sugar,
                meal_count=summary.meal_count + 1,
                healthy_meals=summary.healthy_meals
                + (1 if meal.category == MealCategory.HEALTHY else 0),
            )
        return summary

    def recent_summary(self, user_id: UUID, days: int = 7) -> NutritionalSummary:
        """Return totals for the last ``days`` days."""
        end = datetime.now(tz=UTC)
        return self.nutritional_summary(user_id, end - timedelta(days=days), end)

    def health_trends(self, user_id: UUID, days: int = 30) -> list[DailyTrend]:
        """Return per-day sums for the last ``days`` days, oldest first."""
        end = datetime.now(tz=UTC)
        meals = self.repository.list_completed_meals(
            user_id, end - timedelta(days=days), end
        )
        by_day: dict[date, DailyTrend] = {}
        for meal in meals:
            if meal.analysis is None:
                continue
            day = meal.consumed_at.astimezone(UTC).date()
            nutrition = meal.analysis.nutrition
            current = by_day.get(day) or DailyTrend(day, 0, 0, 0, 0, 0, 0, 0)
            by_day[day] = DailyTrend(
                day=day,
                calories=current.calories + nutrition.calories,
                protein=current.protein + nutrition.protein,
                carbs=current.carbs + nutrition.carbs,
                fat=current.fat + nutrition.fat,
                sodium=current.sodium + nutrition.sodium,
                sugar=current.sugar + nutrition.sugar,
                risk_count=current.risk_count + len(meal.analysis.health_risks),
            )
        return [by_day[day] for day in sorted(by_day)]
