"""Tests for the HTTP API."""

from datetime import UTC, datetime
from uuid import uuid4

import httpx
from fastapi.testclient import TestClient

from healthy_meal_track.api.app import create_app
from healthy_meal_track.domain.health import UserProfile
from healthy_meal_track.domain.meals import AnalysisStatus, MealRecord, MealType
from tests.conftest import (
    JPEG_BYTES,
    InMemoryMealRepository,
    InMemoryPhotoStorage,
    InMemoryUserRepository,
)


def _headers(user: UserProfile) -> dict[str, str]:
    return {"X-User-Id": str(user.id)}


def _upload(
    client: TestClient,
    user: UserProfile,
    content_type: str = "image/jpeg",
    data: bytes = JPEG_BYTES,
    **form: str,
) -> httpx.Response:
    return client.post(
        "/api/analysis/meal",
        headers=_headers(user),
        files={"image": ("meal.jpg", data, content_type)},
        data={"meal_type": "lunch", **form},
    )


def test_health(container) -> None:
    client = TestClient(create_app(container))

    assert client.get("/health").json() == {"status": "ok"}


def test_unknown_user_is_rejected(container) -> None:
    client = TestClient(create_app(container))

    response = client.get("/api/users/me", headers={"X-User-Id": str(uuid4())})

    assert response.status_code == 404


def test_submit_meal_runs_analysis_in_background(
    container,
    user: UserProfile,
    meal_repository: InMemoryMealRepository,
    photo_storage: InMemoryPhotoStorage,
) -> None:
    client = TestClient(create_app(container))

    response = _upload(client, user, description="  Chicken rice  ")

    assert response.status_code == 202
    body = response.json()
    assert body["status"] == "processing"
    assert body["image_url"].startswith("https://cdn.example.com/")
    meal_id = body["meal_id"]
    assert len(photo_storage.objects) == 1

    detail = client.get(f"/api/analysis/meal/{meal_id}", headers=_headers(user))

    assert detail.status_code == 200
    meal = detail.json()
    assert meal["analysis_status"] == "completed"
    assert meal["description"] == "Chicken rice"
    assert meal["category"] == "healthy"
    assert meal["risk_level"] == "low"
    assert meal["total_calories"] > 0
    foods = [food["name"] for food in meal["analysis"]["recognizedFoods"]]
    assert foods == ["rice", "chicken"]


def test_submit_meal_validates_upload(container, user: UserProfile) -> None:
    container.settings.max_upload_bytes = 16
    client = TestClient(create_app(container))

    assert _upload(client, user, content_type="application/pdf").status_code == 400
    assert _upload(client, user, data=b"").status_code == 400
    assert _upload(client, user, data=b"\xff\xd8\xff" + b"0" * 32).status_code == 413
    assert _upload(client, user, description="x" * 501).status_code == 422
    response = client.post(
        "/api/analysis/meal",
        headers=_headers(user),
        files={"image": ("meal.jpg", b"\xff\xd8\xff", "image/jpeg")},
        data={"meal_type": "brunch"},
    )
    assert response.status_code == 422


def test_meal_of_other_user_is_not_found(
    container,
    user: UserProfile,
    user_repository: InMemoryUserRepository,
) -> None:
    other = user_repository.add(UserProfile(id=uuid4()))
    client = TestClient(create_app(container))
    meal_id = _upload(client, user).json()["meal_id"]

    url = f"/api/analysis/meal/{meal_id}"
    assert client.get(url, headers=_headers(other)).status_code == 404
    assert client.delete(url, headers=_headers(other)).status_code == 404
    assert client.get(url, headers=_headers(user)).status_code == 200


def test_feedback_status_and_delete(
    container,
    user: UserProfile,
    meal_repository: InMemoryMealRepository,
) -> None:
    client = TestClient(create_app(container))
    meal_id = _upload(client, user).json()["meal_id"]
    meal_repository.add(
        MealRecord(
            id=uuid4(),
            user_id=user.id,
            meal_type=MealType.SNACK,
            consumed_at=datetime.now(tz=UTC),
            analysis_status=AnalysisStatus.PENDING,
        )
    )

    feedback = client.post(
        f"/api/analysis/feedback/{meal_id}",
        headers=_headers(user),
        json={"accuracy": 4, "helpful": True},
    )
    assert feedback.status_code == 200
    invalid = client.post(
        f"/api/analysis/feedback/{meal_id}",
        headers=_headers(user),
        json={"accuracy": 9},
    )
    assert invalid.status_code == 422

    status = client.get("/api/analysis/status", headers=_headers(user)).json()
    assert status == {"pending": 1, "processing": 0, "total": 1}

    deleted = client.delete(f"/api/analysis/meal/{meal_id}", headers=_headers(user))
    assert deleted.status_code == 200
    missing = client.get(f"/api/analysis/meal/{meal_id}", headers=_headers(user))
    assert missing.status_code == 404


def test_update_health_conditions(container, user: UserProfile) -> None:
    client = TestClient(create_app(container))

    response = client.put(
        "/api/users/me/health-conditions",
        headers=_headers(user),
        json={
            "health_conditions": [
                {"condition": "kidney", "details": "  stage 2 "},
                {"condition": "bp"},
            ]
        },
    )

    assert response.status_code == 200
    conditions = response.json()["health_conditions"]
    assert conditions == [
        {"condition": "kidney", "details": "stage 2"},
        {"condition": "bp", "details": None},
    ]
    me = client.get("/api/users/me", headers=_headers(user)).json()
    assert me["health_conditions"] == conditions

    rejected = client.put(
        "/api/users/me/health-conditions",
        headers=_headers(user),
        json={"health_conditions": [{"condition": "astigmatism"}]},
    )
    assert rejected.status_code == 422


def test_stats_and_trends(container, user: UserProfile) -> None:
    client = TestClient(create_app(container))
    _upload(client, user)
    _upload(client, user)

    stats = client.get("/api/health/stats?days=7", headers=_headers(user)).json()
    trends = client.get("/api/health/trends", headers=_headers(user)).json()

    assert stats["days"] == 7
    assert stats["meal_count"] == 2
    assert stats["healthy_meals"] == 2
    assert stats["average_calories"] > 0
    assert len(trends) == 1
    assert trends[0]["risk_count"] == 0
    invalid = client.get("/api/health/stats?days=0", headers=_headers(user))
    assert invalid.status_code == 422


def test_list_meals_history(
    container,
    user: UserProfile,
    meal_repository: InMemoryMealRepository,
) -> None:
    client = TestClient(create_app(container))
    first, second = (
        str(
            meal_repository.add(
                MealRecord(
                    id=uuid4(),
                    user_id=user.id,
                    meal_type=meal_type,
                    consumed_at=datetime(2026, 3, day, 12, tzinfo=UTC),
                    analysis_status=AnalysisStatus.COMPLETED,
                )
            ).id
        )
        for day, meal_type in ((1, MealType.LUNCH), (2, MealType.DINNER))
    )

    history = client.get("/api/meals", headers=_headers(user))
    dinners = client.get("/api/meals?meal_type=dinner", headers=_headers(user))
    paged = client.get("/api/meals?limit=1&offset=1", headers=_headers(user))

    assert history.status_code == 200
    assert [meal["id"] for meal in history.json()] == [second, first]
    assert [meal["id"] for meal in dinners.json()] == [second]
    assert [meal["id"] for meal in paged.json()] == [first]
    too_large = client.get("/api/meals?limit=101", headers=_headers(user))
    assert too_large.status_code == 422
