"""Locations API: hierarchy-aware search across all seven levels."""

from datetime import datetime
from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request

from app.api.v1.dependencies import get_current_actor, get_location_search_service
from app.application.dtos.search import LocationSearchQuery
from app.application.use_cases.search import LocationSearchService
from app.core.limiter import limit_search
from app.domain.entities.actor import ActorContext
from app.domain.enums import LocationType
from app.schemas.location import LocationSearchResponse

router = APIRouter()


@router.get("/search", response_model=LocationSearchResponse)
@limit_search
async def search_locations(
    request: Request,
    actor: Annotated[ActorContext, Depends(get_current_actor)],
    search_svc: Annotated[LocationSearchService, Depends(get_location_search_service)],
    q: str | None = Query(None, max_length=200),
    type: LocationType | None = None,
    types: list[LocationType] = Query([]),
    parent_ids: list[str] = Query([]),
    province_id: str | None = None,
    district_id: str | None = None,
    sector_id: str | None = None,
    cell_id: str | None = None,
    village_id: str | None = None,
    province_name: str | None = None,
    district_name: str | None = None,
    sector_name: str | None = None,
    cell_name: str | None = None,
    village_name: str | None = None,
    created_from: datetime | None = None,
    created_to: datetime | None = None,
    min_population: int | None = Query(None, ge=0),
    max_population: int | None = Query(None, ge=0),
    leader_ids: list[str] = Query([]),
    page: int = Query(1, ge=1),
    size: int = Query(10, ge=1),
):
    """Search locations within the caller's jurisdiction, ranked by relevance then recency."""
    selected = tuple(types) or ((type,) if type is not None else ())
    query = LocationSearchQuery(
        q=q,
        types=selected,
        parent_ids=tuple(parent_ids),
        province_id=province_id,
        district_id=district_id,
        sector_id=sector_id,
        cell_id=cell_id,
        village_id=village_id,
        province_name=province_name,
        district_name=district_name,
        sector_name=sector_name,
        cell_name=cell_name,
        village_name=village_name,
        created_from=created_from,
        created_to=created_to,
        min_population=min_population,
        max_population=max_population,
        leader_ids=tuple(leader_ids),
        page=page,
        size=size,
    )
    page_result = await search_svc.search(query, actor)
    return LocationSearchResponse.model_validate(page_result)
