"""Global search API schemas."""

from datetime import datetime
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from app.domain.enums import SearchEntity


class SearchMetaResponse(BaseModel):
    """Paging and timing information shared by both search surfaces."""

    model_config = ConfigDict(from_attributes=True)

    query: str
    search_time_ms: int
    entities_searched: list[str] = Field(default_factory=list)
    total_items: int
    item_count: int
    items_per_page: int
    total_pages: int
    current_page: int


class SearchResultItemResponse(BaseModel):
    """Single search hit of any entity kind."""

    model_config = ConfigDict(from_attributes=True)

    entity: SearchEntity = Field(
        ..., validation_alias=AliasChoices("entity_kind", "entity")
    )
    id: str
    title: str
    description: str | None = None
    relevance_score: int
    metadata: dict[str, Any] = Field(default_factory=dict)
    created_at: datetime
    updated_at: datetime | None = None


class SearchBucketsResponse(BaseModel):
    """Hits of the current page grouped by entity kind."""

    activities: list[SearchResultItemResponse] = Field(default_factory=list)
    tasks: list[SearchResultItemResponse] = Field(default_factory=list)
    reports: list[SearchResultItemResponse] = Field(default_factory=list)
    users: list[SearchResultItemResponse] = Field(default_factory=list)
    locations: list[SearchResultItemResponse] = Field(default_factory=list)


class GlobalSearchResponse(BaseModel):
    """Federated search response: one page of hits, bucketed, plus paging meta."""

    results: SearchBucketsResponse
    total_results: int
    meta: SearchMetaResponse
