"""Meal analysis pipeline: recognition, nutrients, risks, advice."""

import logging
import time
from collections.abc import Sequence
from dataclasses import dataclass

from healthy_meal_track.domain.foods import FoodItem
from healthy_meal_track.domain.health import UserProfile
from healthy_meal_track.domain.meals import AnalysisResult
from healthy_meal_track.services.categories import categorize
from healthy_meal_track.services.food_extractor import (
    collect_detections,
    extract_food_items,
)
from healthy_meal_track.services.nutrition import NutritionService
from healthy_meal_track.services.recommendations import generate_recommendations
from healthy_meal_track.services.risk import evaluate_risks
from healthy_meal_track.services.vision import VisionService

_logger = logging.getLogger(__name__)


@dataclass
class MealAnalyzer:
    """Runs one meal photo through the full analysis pipeline."""

    vision_service: VisionService
    nutrition_service: NutritionService

    async def analyze(
        self, image_bytes: bytes, profile: UserProfile | None
    ) -> AnalysisResult:
        """Analyze a meal photo for the given profile.

        Raises RecognitionError when the vision step fails.
        """
        started = time.perf_counter()
        signals = await self.vision_service.detect_food_signals(image_bytes)
        foods = extract_food_items(collect_detections(signals))
        _logger.info(
            "Recognized %s food items from %s labels and %s objects",
            len(foods),
            len(signals.labels),
            len(signals.objects),
        )
        return await self.analyze_foods(foods, profile, started=started)

    async def analyze_foods(
        self,
        foods: Sequence[FoodItem],
        profile: UserProfile | None,
        *,
        started: float | None = None,
    ) -> AnalysisResult:
        """Run the nutrient and risk stages for already recognized foods."""
        started = time.perf_counter() if started is None else started
        nutrition, lookups = await self.nutrition_service.aggregate(foods)
        conditions = profile.health_conditions if profile else None
        assessment = evaluate_risks(nutrition, conditions)
        return AnalysisResult(
            recognized_foods=list(foods),
            nutrition=nutrition,
            health_risks=assessment.findings,
            warnings=assessment.warnings,
            recommendations=generate_recommendations(assessment.findings),
            category=categorize(assessment.findings),
            processing_time_ms=(time.perf_counter() - started) * 1000,
            lookups=lookups,
        )
