"""Presentation-layer dependency injection (composition root).

Provides FastAPI Depends() for the session factory, the authenticated
actor and the application services. All services are built from
infrastructure implementations here; routes depend only on these
dependencies, not on infra directly.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.application.use_cases.analytics import AnalyticsService, AnalyticsStores
from app.application.use_cases.search import (
    AdapterBinding,
    LocationSearchService,
    SearchService,
)
from app.core.config import Settings, get_settings
from app.domain.entities.actor import ActorContext
from app.domain.enums import ScopeTarget, SearchEntity, TimeRange
from app.domain.exceptions import AuthenticationException, AuthorizationException
from app.infrastructure.persistence.database import get_session_factory
from app.infrastructure.persistence.models import (
    Activity,
    Cell,
    Isibo,
    Report,
    ReportAttendance,
    ReportEvidence,
    Task,
    User,
    Village,
)
from app.infrastructure.persistence.repositories import (
    ActivitySearchRepository,
    ActorRepository,
    CellSearchRepository,
    IsiboSearchRepository,
    LocationDirectoryRepository,
    LocationHierarchyRepository,
    ReportSearchRepository,
    SqlEntityStore,
    TaskSearchRepository,
    UserSearchRepository,
    VillageSearchRepository,
)
from app.infrastructure.security.jwt import verify_token

SessionFactory = async_sessionmaker[AsyncSession]


def get_app_settings() -> Settings:
    """Settings provider (overridable in tests)."""
    return get_settings()


def get_db_session_factory() -> SessionFactory:
    """Process-wide async session factory; stores open one session per query."""
    return get_session_factory()


# ---- Auth (actor from JWT) ----

_http_bearer = HTTPBearer(auto_error=False)


async def get_actor_repo(
    session_factory: Annotated[SessionFactory, Depends(get_db_session_factory)],
) -> ActorRepository:
    return ActorRepository(session_factory)


async def get_current_actor(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(_http_bearer)],
    actor_repo: Annotated[ActorRepository, Depends(get_actor_repo)],
) -> ActorContext:
    """Resolve the caller from the Bearer token; 401 if missing, invalid or inactive."""
    if credentials is None:
        raise AuthenticationException("Not authenticated")
    try:
        payload = verify_token(credentials.credentials)
    except ValueError as e:
        raise AuthenticationException("Invalid or expired token") from e
    actor = await actor_repo.get_actor(str(payload["sub"]))
    if actor is None:
        raise AuthenticationException("User not found or inactive")
    return actor


async def require_analytics_actor(
    actor: Annotated[ActorContext, Depends(get_current_actor)],
) -> ActorContext:
    """Admins and leaders only; other roles get 403."""
    if not actor.is_admin and actor.jurisdiction_level is None:
        raise AuthorizationException(
            role=actor.role.value,
            action="analytics:read",
            message="Analytics are available to administrators and leaders only",
        )
    return actor


# ---- Application services ----


def get_analytics_service(
    session_factory: Annotated[SessionFactory, Depends(get_db_session_factory)],
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> AnalyticsService:
    """Analytics orchestrator over SQL entity stores (composition root)."""

    def store(model: type) -> SqlEntityStore:
        return SqlEntityStore(session_factory, model)

    stores = AnalyticsStores(
        users=store(User),
        cells=store(Cell),
        villages=store(Village),
        isibos=store(Isibo),
        activities=store(Activity),
        tasks=store(Task),
        reports=store(Report),
        report_evidence=store(ReportEvidence),
        report_attendance=store(ReportAttendance),
    )
    return AnalyticsService(
        stores,
        LocationHierarchyRepository(session_factory),
        timeout_seconds=settings.analytics_timeout_seconds,
        default_time_range=TimeRange(settings.analytics_default_time_range),
        max_time_series_days=settings.analytics_max_time_series_days,
        top_villages_limit=settings.analytics_top_villages_limit,
        engagement_top_villages=settings.engagement_top_villages_limit,
    )


def get_search_service(
    session_factory: Annotated[SessionFactory, Depends(get_db_session_factory)],
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> SearchService:
    """Global search with one adapter per entity kind (locations split by level)."""
    limit = settings.search_adapter_limit
    location_limit = settings.search_location_subtype_limit
    bindings = [
        AdapterBinding(
            SearchEntity.ACTIVITIES,
            ScopeTarget.ACTIVITY,
            ActivitySearchRepository(session_factory),
            limit,
        ),
        AdapterBinding(
            SearchEntity.TASKS, ScopeTarget.TASK, TaskSearchRepository(session_factory), limit
        ),
        AdapterBinding(
            SearchEntity.REPORTS,
            ScopeTarget.REPORT,
            ReportSearchRepository(session_factory),
            limit,
        ),
        AdapterBinding(
            SearchEntity.USERS, ScopeTarget.USER, UserSearchRepository(session_factory), limit
        ),
        AdapterBinding(
            SearchEntity.LOCATIONS,
            ScopeTarget.VILLAGE,
            VillageSearchRepository(session_factory),
            location_limit,
        ),
        AdapterBinding(
            SearchEntity.LOCATIONS,
            ScopeTarget.CELL,
            CellSearchRepository(session_factory),
            location_limit,
        ),
        AdapterBinding(
            SearchEntity.LOCATIONS,
            ScopeTarget.ISIBO,
            IsiboSearchRepository(session_factory),
            location_limit,
        ),
    ]
    return SearchService(
        bindings,
        timeout_seconds=settings.search_timeout_seconds,
        max_page_size=settings.search_max_page_size,
    )


def get_location_search_service(
    session_factory: Annotated[SessionFactory, Depends(get_db_session_factory)],
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> LocationSearchService:
    return LocationSearchService(
        LocationDirectoryRepository(session_factory),
        per_level_limit=settings.location_search_limit,
        timeout_seconds=settings.search_timeout_seconds,
        max_page_size=settings.search_max_page_size,
    )
