"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from healthy_meal_track.adapters.edamam_client import HttpxEdamamClient
from healthy_meal_track.adapters.openai_vision_client import OpenAIVisionClient
from healthy_meal_track.adapters.supabase_meal_repository import (
    SupabaseMealRepository,
)
from healthy_meal_track.adapters.supabase_photo_storage import SupabasePhotoStorage
from healthy_meal_track.adapters.supabase_user_repository import (
    SupabaseUserRepository,
)
from healthy_meal_track.config import Settings
from healthy_meal_track.services.analysis import MealAnalyzer
from healthy_meal_track.services.cache import InMemoryNutrientCache
from healthy_meal_track.services.meals import MealService
from healthy_meal_track.services.nutrition import NutritionService
from healthy_meal_track.services.stats import StatsService
from healthy_meal_track.services.users import UserService
from healthy_meal_track.services.vision import VisionService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    vision_service: VisionService
    nutrition_service: NutritionService
    meal_analyzer: MealAnalyzer
    meal_service: MealService
    user_service: UserService
    stats_service: StatsService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    meal_repository = SupabaseMealRepository(supabase_client)
    user_repository = SupabaseUserRepository(supabase_client)
    photo_storage = SupabasePhotoStorage(
        supabase_client, bucket=resolved_settings.supabase_photo_bucket
    )

    openai_client = OpenAIVisionClient.create(resolved_settings.openai_api_key)
    vision_service = VisionService(
        client=openai_client,
        model=resolved_settings.openai_model,
        reasoning_effort=resolved_settings.openai_reasoning_effort,
        store=resolved_settings.openai_store,
    )
    edamam_client = None
    if resolved_settings.edamam_configured:
        edamam_client = HttpxEdamamClient.create(
            app_id=resolved_settings.edamam_app_id or "",
            app_key=resolved_settings.edamam_app_key or "",
            base_url=resolved_settings.edamam_base_url,
            timeout_seconds=resolved_settings.nutrition_timeout_seconds,
        )
    nutrition_service = NutritionService(
        client=edamam_client,
        cache=InMemoryNutrientCache(),
        timeout_seconds=resolved_settings.nutrition_timeout_seconds,
        cache_ttl_seconds=resolved_settings.nutrition_cache_ttl_seconds,
    )
    meal_analyzer = MealAnalyzer(
        vision_service=vision_service, nutrition_service=nutrition_service
    )
    meal_service = MealService(
        analyzer=meal_analyzer,
        repository=meal_repository,
        photo_storage=photo_storage,
    )

    async def close_resources() -> None:
        await openai_client.close()
        if edamam_client is not None:
            await edamam_client.close()

    return AppContainer(
        settings=resolved_settings,
        vision_service=vision_service,
        nutrition_service=nutrition_service,
        meal_analyzer=meal_analyzer,
        meal_service=meal_service,
        user_service=UserService(user_repository),
        stats_service=StatsService(meal_repository),
        close_resources=close_resources,
    )
