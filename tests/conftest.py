"""Shared test fixtures."""

from dataclasses import dataclass, field, replace
from datetime import datetime
from uuid import UUID, uuid4

import pytest

from healthy_meal_track.config import Settings
from healthy_meal_track.containers import AppContainer
from healthy_meal_track.domain.health import (
    ConditionEntry,
    MealCategory,
    UserProfile,
)
from healthy_meal_track.domain.meals import (
    AnalysisResult,
    AnalysisStatus,
    MealFeedback,
    MealRecord,
    MealType,
)
from healthy_meal_track.services.analysis import MealAnalyzer
from healthy_meal_track.services.cache import InMemoryNutrientCache
from healthy_meal_track.services.meals import (
    MealRepository,
    MealService,
    PhotoStorage,
)
from healthy_meal_track.services.nutrition import NutrientClient, NutritionService
from healthy_meal_track.services.stats import StatsRepository, StatsService
from healthy_meal_track.services.users import UserRepository, UserService
from healthy_meal_track.services.vision import VisionClient, VisionService

JPEG_BYTES = b"\xff\xd8\xff\xe0fake-jpeg-body"


def edamam_payload(**quantities: float) -> dict[str, object]:
    """Build an Edamam-style response from code=quantity pairs."""
    return {
        "calories": quantities.get("ENERC_KCAL", 0),
        "totalNutrients": {
            code: {"label": code, "quantity": quantity, "unit": "g"}
            for code, quantity in quantities.items()
        },
    }


@dataclass
class FakeVisionClient(VisionClient):
    """Fake vision client returning a fixed payload."""

    payload: object = field(
        default_factory=lambda: {
            "labels": [
                {"name": "Rice", "confidence": 0.9},
                {"name": "Chicken", "confidence": 0.85},
                {"name": "Table", "confidence": 0.95},
            ],
            "objects": [],
            "texts": [],
        }
    )
    calls: list[dict[str, object]] = field(default_factory=list)

    async def extract(  # noqa: PLR0913
        self,
        *,
        model: str,
        reasoning_effort: str | None,
        store: bool,
        image_data_url: str,
        schema: dict[str, object],
        prompt: str,
    ) -> dict[str, object]:
        self.calls.append(
            {"model": model, "image_data_url": image_data_url, "store": store}
        )
        return self.payload


@dataclass
class FailingVisionClient(VisionClient):
    """Vision client that always raises."""

    error: Exception = field(default_factory=lambda: RuntimeError("quota exceeded"))

    async def extract(  # noqa: PLR0913
        self,
        *,
        model: str,
        reasoning_effort: str | None,
        store: bool,
        image_data_url: str,
        schema: dict[str, object],
        prompt: str,
    ) -> dict[str, object]:
        raise self.error


@dataclass
class FakeNutrientClient(NutrientClient):
    """Fake nutrient client with per-food payloads and failures."""

    payloads: dict[str, dict[str, object]] = field(default_factory=dict)
    failures: dict[str, Exception] = field(default_factory=dict)
    calls: list[str] = field(default_factory=list)

    async def lookup(self, food_name: str) -> dict[str, object]:
        self.calls.append(food_name)
        if food_name in self.failures:
            raise self.failures[food_name]
        return self.payloads.get(food_name, {"totalNutrients": {}})


@dataclass
class InMemoryMealRepository(MealRepository, StatsRepository):
    """In-memory meal repository for tests."""

    meals: dict[UUID, MealRecord] = field(default_factory=dict)
    status_writes: list[tuple[UUID, AnalysisStatus]] = field(default_factory=list)

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
        meal = MealRecord(
            id=uuid4(),
            user_id=user_id,
            meal_type=meal_type,
            consumed_at=consumed_at,
            analysis_status=status,
            description=description,
            image_url=image_url,
            image_path=image_path,
        )
        self.meals[meal.id] = meal
        return meal

    def add(self, meal: MealRecord) -> MealRecord:
        self.meals[meal.id] = meal
        return meal

    def get_meal(self, meal_id: UUID) -> MealRecord | None:
        return self.meals.get(meal_id)

    def delete_meal(self, meal_id: UUID) -> None:
        self.meals.pop(meal_id, None)

    def record_analysis_result(
        self, meal_id: UUID, result: AnalysisResult, analyzed_at: datetime
    ) -> bool:
        meal = self.meals.get(meal_id)
        if meal is None:
            return False
        self.status_writes.append((meal_id, AnalysisStatus.COMPLETED))
        self.meals[meal_id] = replace(
            meal,
            analysis_status=AnalysisStatus.COMPLETED,
            analysis=result,
            analyzed_at=analyzed_at,
            category=result.category,
        )
        return True

    def record_analysis_failure(self, meal_id: UUID, reason: str) -> bool:
        meal = self.meals.get(meal_id)
        if meal is None:
            return False
        self.status_writes.append((meal_id, AnalysisStatus.FAILED))
        self.meals[meal_id] = replace(
            meal, analysis_status=AnalysisStatus.FAILED, analysis_error=reason
        )
        return True

    def save_feedback(self, meal_id: UUID, feedback: MealFeedback) -> None:
        self.meals[meal_id] = replace(self.meals[meal_id], feedback=feedback)

    def count_by_status(self, user_id: UUID, status: AnalysisStatus) -> int:
        return sum(
            1
            for meal in self.meals.values()
            if meal.user_id == user_id and meal.analysis_status == status
        )

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
        matching = [
            meal
            for meal in self.meals.values()
            if meal.user_id == user_id
            and (meal_type is None or meal.meal_type == meal_type)
            and (category is None or meal.category == category)
            and (start is None or meal.consumed_at >= start)
            and (end is None or meal.consumed_at <= end)
        ]
        matching.sort(key=lambda meal: meal.consumed_at, reverse=True)
        return matching[offset : offset + limit]

    def list_completed_meals(
        self, user_id: UUID, start: datetime, end: datetime
    ) -> list[MealRecord]:
        return sorted(
            (
                meal
                for meal in self.meals.values()
                if meal.user_id == user_id
                and meal.analysis_status == AnalysisStatus.COMPLETED
                and start <= meal.consumed_at <= end
            ),
            key=lambda meal: meal.consumed_at,
        )


@dataclass
class InMemoryUserRepository(UserRepository):
    """In-memory user repository for tests."""

    profiles: dict[UUID, UserProfile] = field(default_factory=dict)

    def add(self, profile: UserProfile) -> UserProfile:
        self.profiles[profile.id] = profile
        return profile

    def get_profile(self, user_id: UUID) -> UserProfile | None:
        return self.profiles.get(user_id)

    def replace_health_conditions(
        self, user_id: UUID, conditions: list[ConditionEntry]
    ) -> None:
        self.profiles[user_id] = replace(
            self.profiles[user_id], health_conditions=list(conditions)
        )


@dataclass
class InMemoryPhotoStorage(PhotoStorage):
    """In-memory photo storage for tests."""

    objects: dict[str, bytes] = field(default_factory=dict)
    fail_remove: bool = False

    def upload(self, path: str, data: bytes, content_type: str) -> str:
        self.objects[path] = data
        return f"https://cdn.example.com/{path}"

    def remove(self, path: str) -> None:
        if self.fail_remove:
            raise RuntimeError("storage unavailable")
        self.objects.pop(path, None)


def build_meal_service(
    vision_client: VisionClient | None = None,
    nutrient_client: NutrientClient | None = None,
    repository: InMemoryMealRepository | None = None,
    photo_storage: InMemoryPhotoStorage | None = None,
) -> MealService:
    """Wire a meal service over in-memory collaborators."""
    vision_service = VisionService(
        client=vision_client or FakeVisionClient(),
        model="test-model",
        reasoning_effort=None,
        store=False,
    )
    nutrition_service = NutritionService(
        client=nutrient_client, cache=InMemoryNutrientCache()
    )
    return MealService(
        analyzer=MealAnalyzer(
            vision_service=vision_service, nutrition_service=nutrition_service
        ),
        repository=repository if repository is not None else InMemoryMealRepository(),
        photo_storage=(
            photo_storage if photo_storage is not None else InMemoryPhotoStorage()
        ),
    )


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key="service-key",
        openai_api_key="openai-key",
    )


@pytest.fixture
def meal_repository() -> InMemoryMealRepository:
    return InMemoryMealRepository()


@pytest.fixture
def user_repository() -> InMemoryUserRepository:
    return InMemoryUserRepository()


@pytest.fixture
def photo_storage() -> InMemoryPhotoStorage:
    return InMemoryPhotoStorage()


@pytest.fixture
def user(user_repository: InMemoryUserRepository) -> UserProfile:
    return user_repository.add(UserProfile(id=uuid4(), name="Test User"))


@pytest.fixture
def container(
    settings: Settings,
    meal_repository: InMemoryMealRepository,
    user_repository: InMemoryUserRepository,
    photo_storage: InMemoryPhotoStorage,
) -> AppContainer:
    meal_service = build_meal_service(
        repository=meal_repository, photo_storage=photo_storage
    )

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        vision_service=meal_service.analyzer.vision_service,
        nutrition_service=meal_service.analyzer.nutrition_service,
        meal_analyzer=meal_service.analyzer,
        meal_service=meal_service,
        user_service=UserService(user_repository),
        stats_service=StatsService(meal_repository),
        close_resources=close_resources,
    )
