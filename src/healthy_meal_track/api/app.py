"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import datetime
from uuid import UUID

from fastapi import (
    BackgroundTasks,
    Depends,
    FastAPI,
    File,
    Form,
    Header,
    HTTPException,
    Query,
    Request,
    UploadFile,
    status,
)

from healthy_meal_track.api.schemas import (
    FeedbackRequest,
    HealthConditionsRequest,
    MealSubmitted,
    MealView,
    QueueStatusView,
    SummaryView,
    TrendView,
    UserProfileView,
)
from healthy_meal_track.app_logging import configure_logging
from healthy_meal_track.containers import AppContainer
from healthy_meal_track.domain.health import MealCategory, UserProfile
from healthy_meal_track.domain.meals import MealFeedback, MealType
from healthy_meal_track.services.meals import MAX_PAGE_SIZE

MAX_DESCRIPTION_LENGTH = 500


def _get_container(request: Request) -> AppContainer:
    return request.app.state.container


async def require_user(
    x_user_id: UUID = Header(),
    container: AppContainer = Depends(_get_container),
) -> UserProfile:
    """Resolve the calling user from the X-User-Id header."""
    profile = container.user_service.get_profile(x_user_id)
    if profile is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="User not found"
        )
    return profile


def create_app(container: AppContainer) -> FastAPI:  # noqa: PLR0915
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post(
        "/api/analysis/meal",
        status_code=status.HTTP_202_ACCEPTED,
        response_model=MealSubmitted,
    )
    async def submit_meal(  # noqa: PLR0913
        background_tasks: BackgroundTasks,
        image: UploadFile = File(),
        meal_type: MealType = Form(),
        description: str | None = Form(
            default=None, max_length=MAX_DESCRIPTION_LENGTH
        ),
        profile: UserProfile = Depends(require_user),
        container: AppContainer = Depends(_get_container),
    ) -> MealSubmitted:
        """Store a meal photo and queue its analysis."""
        content_type = image.content_type or ""
        if not content_type.startswith("image/"):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Only image files are allowed",
            )
        image_bytes = await image.read()
        if not image_bytes:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Image file is empty",
            )
        if len(image_bytes) > container.settings.max_upload_bytes:
            raise HTTPException(
                status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
                detail="Image file is too large",
            )

        meal = container.meal_service.submit_meal(
            user_id=profile.id,
            meal_type=meal_type,
            description=(description or "").strip() or None,
            image_bytes=image_bytes,
            content_type=content_type,
        )
        background_tasks.add_task(
            container.meal_service.run_analysis, meal.id, image_bytes, profile
        )
        logger.info("Queued analysis for meal %s", meal.id)
        return MealSubmitted(
            meal_id=meal.id,
            image_url=meal.image_url,
            status=meal.analysis_status,
        )

    @app.get("/api/analysis/meal/{meal_id}", response_model=MealView)
    async def get_meal(
        meal_id: UUID,
        profile: UserProfile = Depends(require_user),
        container: AppContainer = Depends(_get_container),
    ) -> MealView:
        """Return a meal with its analysis."""
        meal = container.meal_service.get_meal(profile.id, meal_id)
        if meal is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND, detail="Meal not found"
            )
        return MealView.from_record(meal)

    @app.get("/api/meals", response_model=list[MealView])
    async def list_meals(  # noqa: PLR0913
        meal_type: MealType | None = Query(default=None),
        category: MealCategory | None = Query(default=None),
        start: datetime | None = Query(default=None),
        end: datetime | None = Query(default=None),
        limit: int = Query(default=20, ge=1, le=MAX_PAGE_SIZE),
        offset: int = Query(default=0, ge=0),
        profile: UserProfile = Depends(require_user),
        container: AppContainer = Depends(_get_container),
    ) -> list[MealView]:
        """Return the caller's meal history, newest first."""
        meals = container.meal_service.list_meals(
            profile.id,
            meal_type=meal_type,
            category=category,
            start=start,
            end=end,
            limit=limit,
            offset=offset,
        )
        return [MealView.from_record(meal) for meal in meals]

    @app.post("/api/analysis/feedback/{meal_id}")
    async def submit_feedback(
        meal_id: UUID,
        payload: FeedbackRequest,
        profile: UserProfile = Depends(require_user),
        container: AppContainer = Depends(_get_container),
    ) -> dict[str, str]:
        """Store user feedback on an analysis."""
        feedback = MealFeedback(
            accuracy=payload.accuracy,
            helpful=payload.helpful,
            comments=payload.comments,
        )
        if not container.meal_service.submit_feedback(profile.id, meal_id, feedback):
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND, detail="Meal not found"
            )
        return {"status": "ok"}

    @app.get("/api/analysis/status", response_model=QueueStatusView)
    async def analysis_status(
        profile: UserProfile = Depends(require_user),
        container: AppContainer = Depends(_get_container),
    ) -> QueueStatusView:
        """Return how many meals are still being analyzed."""
        queue = container.meal_service.analysis_queue_status(profile.id)
        return QueueStatusView(
            pending=queue.pending, processing=queue.processing, total=queue.total
        )

    @app.delete("/api/analysis/meal/{meal_id}")
    async def delete_meal(
        meal_id: UUID,
        profile: UserProfile = Depends(require_user),
        container: AppContainer = Depends(_get_container),
    ) -> dict[str, str]:
        """Delete a meal and its photo."""
        if not container.meal_service.delete_meal(profile.id, meal_id):
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND, detail="Meal not found"
            )
        return {"status": "deleted"}

    @app.get("/api/users/me", response_model=UserProfileView)
    async def current_user(
        profile: UserProfile = Depends(require_user),
    ) -> UserProfileView:
        """Return the caller's health profile."""
        return UserProfileView.from_profile(profile)

    @app.put("/api/users/me/health-conditions", response_model=UserProfileView)
    async def update_health_conditions(
        payload: HealthConditionsRequest,
        profile: UserProfile = Depends(require_user),
        container: AppContainer = Depends(_get_container),
    ) -> UserProfileView:
        """Replace the caller's declared health conditions."""
        updated = container.user_service.update_health_conditions(
            profile.id, payload.to_entries()
        )
        if updated is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND, detail="User not found"
            )
        return UserProfileView.from_profile(updated)

    @app.get("/api/health/stats", response_model=SummaryView)
    async def health_stats(
        days: int = Query(default=7, ge=1, le=365),
        profile: UserProfile = Depends(require_user),
        container: AppContainer = Depends(_get_container),
    ) -> SummaryView:
        """Return nutrition totals for the last days."""
        summary = container.stats_service.recent_summary(profile.id, days=days)
        return SummaryView.from_summary(days, summary)

    @app.get("/api/health/trends", response_model=list[TrendView])
    async def health_trends(
        days: int = Query(default=30, ge=1, le=365),
        profile: UserProfile = Depends(require_user),
        container: AppContainer = Depends(_get_container),
    ) -> list[TrendView]:
        """Return per-day nutrient sums, oldest first."""
        trends = container.stats_service.health_trends(profile.id, days=days)
        return [TrendView.from_trend(trend) for trend in trends]

    return app
