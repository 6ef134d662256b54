"""Analytics endpoints: authentication, role gate, parameters and error mapping."""

from unittest.mock import AsyncMock

import pytest
from fastapi import FastAPI
from httpx import AsyncClient

from app.api.v1.dependencies import get_actor_repo, get_analytics_service
from app.application.use_cases.analytics import AnalyticsService
from app.domain.entities.actor import ActorContext
from app.domain.enums import UserRole
from app.infrastructure.security import create_access_token

ACTORS = {
    "admin-1": ActorContext(user_id="admin-1", role=UserRole.ADMIN),
    "citizen-1": ActorContext(user_id="citizen-1", role=UserRole.CITIZEN),
    "leader-1": ActorContext(user_id="leader-1", role=UserRole.VILLAGE_LEADER),
}


class StubActorRepository:
    async def get_actor(self, user_id: str) -> ActorContext | None:
        return ACTORS.get(user_id)


def _auth(user_id: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token({'sub': user_id})}"}


@pytest.fixture
def analytics_app(app: FastAPI, mock_stores) -> FastAPI:
    service = AnalyticsService(mock_stores, AsyncMock())
    app.dependency_overrides[get_actor_repo] = StubActorRepository
    app.dependency_overrides[get_analytics_service] = lambda: service
    return app


async def test_missing_token_is_401(analytics_app, client: AsyncClient) -> None:
    response = await client.get("/api/v1/analytics/core-metrics")
    assert response.status_code == 401
    assert response.headers["WWW-Authenticate"] == "Bearer"
    assert response.json()["error"] == "AUTHENTICATION_ERROR"


async def test_invalid_token_is_401(analytics_app, client: AsyncClient) -> None:
    response = await client.get(
        "/api/v1/analytics/core-metrics", headers={"Authorization": "Bearer not-a-jwt"}
    )
    assert response.status_code == 401
    assert response.json()["message"] == "Invalid or expired token"


async def test_unknown_user_is_401(analytics_app, client: AsyncClient) -> None:
    response = await client.get("/api/v1/analytics/core-metrics", headers=_auth("ghost"))
    assert response.status_code == 401
    assert response.json()["message"] == "User not found or inactive"


async def test_citizen_is_forbidden(analytics_app, client: AsyncClient) -> None:
    response = await client.get("/api/v1/analytics/core-metrics", headers=_auth("citizen-1"))
    assert response.status_code == 403
    assert response.json()["error"] == "AUTHORIZATION_ERROR"


async def test_unbound_leader_is_scope_violation(analytics_app, client: AsyncClient) -> None:
    response = await client.get("/api/v1/analytics/core-metrics", headers=_auth("leader-1"))
    assert response.status_code == 403
    assert response.json()["error"] == "SCOPE_VIOLATION"


async def test_admin_core_metrics(analytics_app, client: AsyncClient) -> None:
    response = await client.get(
        "/api/v1/analytics/core-metrics",
        params={"time_range": "7d"},
        headers=_auth("admin-1"),
    )
    assert response.status_code == 200
    body = response.json()
    assert set(body) == {
        "user_distribution",
        "location_coverage",
        "activity_stats",
        "report_stats",
        "financial",
        "participation",
        "task_performance",
        "date_range",
    }
    assert body["financial"]["budget_efficiency"] == 100


async def test_explicit_window_time_series(analytics_app, client: AsyncClient) -> None:
    response = await client.get(
        "/api/v1/analytics/time-series",
        params={"start_date": "2024-03-01T00:00:00Z", "end_date": "2024-03-04T00:00:00Z"},
        headers=_auth("admin-1"),
    )
    assert response.status_code == 200
    assert [point["date"] for point in response.json()] == [
        "2024-03-01",
        "2024-03-02",
        "2024-03-03",
    ]


async def test_single_bound_is_400(analytics_app, client: AsyncClient) -> None:
    response = await client.get(
        "/api/v1/analytics/core-metrics",
        params={"start_date": "2024-03-01T00:00:00Z"},
        headers=_auth("admin-1"),
    )
    assert response.status_code == 400
    assert response.json()["error"] == "VALIDATION_ERROR"


async def test_unknown_time_range_is_422(analytics_app, client: AsyncClient) -> None:
    response = await client.get(
        "/api/v1/analytics/core-metrics",
        params={"time_range": "2w"},
        headers=_auth("admin-1"),
    )
    assert response.status_code == 422
    assert response.json()["error"] == "VALIDATION_ERROR"


async def test_malformed_location_id_is_422(analytics_app, client: AsyncClient) -> None:
    response = await client.get(
        "/api/v1/analytics/location-performance",
        params={"location_id": "not-a-uuid"},
        headers=_auth("admin-1"),
    )
    assert response.status_code == 422


async def test_admin_dashboard_summary(analytics_app, client: AsyncClient) -> None:
    response = await client.get("/api/v1/analytics/dashboard-summary", headers=_auth("admin-1"))
    assert response.status_code == 200
    body = response.json()
    assert len(body["time_series"]) == 30
    assert body["location_performance"] == []
    assert body["engagement"]["total_citizens"] == 0
