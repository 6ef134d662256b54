"""Search API: federated search across activities, tasks, reports, users and locations."""

from datetime import datetime
from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request

from app.api.v1.dependencies import get_current_actor, get_search_service
from app.application.dtos.search import GlobalSearchQuery, SearchFilters
from app.application.use_cases.search import SearchService
from app.core.limiter import limit_search
from app.domain.entities.actor import ActorContext
from app.domain.enums import SearchEntity
from app.schemas.search import (
    GlobalSearchResponse,
    SearchBucketsResponse,
    SearchMetaResponse,
    SearchResultItemResponse,
)

router = APIRouter()


@router.get("/global", response_model=GlobalSearchResponse)
@limit_search
async def global_search(
    request: Request,
    actor: Annotated[ActorContext, Depends(get_current_actor)],
    search_svc: Annotated[SearchService, Depends(get_search_service)],
    q: str = Query(..., min_length=1, max_length=200),
    entities: list[SearchEntity] = Query([SearchEntity.ALL]),
    location_ids: list[str] = Query([]),
    user_ids: list[str] = Query([]),
    activity_ids: list[str] = Query([]),
    task_ids: list[str] = Query([]),
    isibo_ids: list[str] = Query([]),
    statuses: list[str] = Query([]),
    date_from: datetime | None = None,
    date_to: datetime | None = None,
    min_cost: float | None = Query(None, ge=0),
    max_cost: float | None = Query(None, ge=0),
    min_participants: int | None = Query(None, ge=0),
    max_participants: int | None = Query(None, ge=0),
    has_evidence: bool | None = None,
    page: int = Query(1, ge=1),
    size: int = Query(10, ge=1),
):
    """Search within the caller's jurisdiction; results are ranked by relevance and paged."""
    query = GlobalSearchQuery(
        q=q,
        entities=tuple(entities),
        filters=SearchFilters(
            date_from=date_from,
            date_to=date_to,
            location_ids=tuple(location_ids),
            user_ids=tuple(user_ids),
            activity_ids=tuple(activity_ids),
            task_ids=tuple(task_ids),
            isibo_ids=tuple(isibo_ids),
            statuses=tuple(statuses),
            min_cost=min_cost,
            max_cost=max_cost,
            min_participants=min_participants,
            max_participants=max_participants,
            has_evidence=has_evidence,
        ),
        page=page,
        size=size,
    )
    result = await search_svc.global_search(query, actor)
    return GlobalSearchResponse(
        results=SearchBucketsResponse(
            **{
                entity.value: [SearchResultItemResponse.model_validate(c) for c in hits]
                for entity, hits in result.results.items()
            }
        ),
        total_results=result.total_results,
        meta=SearchMetaResponse.model_validate(result.meta),
    )
