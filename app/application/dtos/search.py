"""DTOs for federated search and location search (no dependency on ORM)."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from app.domain.enums import LocationType, SearchEntity


@dataclass(frozen=True)
class SearchFilters:
    """Structural constraints ANDed with the text match.

    Each adapter applies the filters that make sense for its entity and
    ignores the rest (e.g. has_evidence only narrows reports).
    """

    date_from: datetime | None = None
    date_to: datetime | None = None
    location_ids: tuple[str, ...] = ()
    user_ids: tuple[str, ...] = ()
    activity_ids: tuple[str, ...] = ()
    task_ids: tuple[str, ...] = ()
    isibo_ids: tuple[str, ...] = ()
    statuses: tuple[str, ...] = ()
    min_cost: float | None = None
    max_cost: float | None = None
    min_participants: int | None = None
    max_participants: int | None = None
    has_evidence: bool | None = None


@dataclass(frozen=True)
class GlobalSearchQuery:
    q: str
    entities: tuple[SearchEntity, ...] = (SearchEntity.ALL,)
    filters: SearchFilters = field(default_factory=SearchFilters)
    page: int = 1
    size: int = 10


@dataclass(frozen=True)
class SearchCandidate:
    """Normalized hit produced by every entity search adapter."""

    entity_kind: SearchEntity
    id: str
    title: str
    description: str | None
    relevance_score: int
    metadata: dict[str, Any]
    created_at: datetime
    updated_at: datetime | None = None


@dataclass(frozen=True)
class SearchMeta:
    query: str
    search_time_ms: int
    entities_searched: list[str]
    total_items: int
    item_count: int
    items_per_page: int
    total_pages: int
    current_page: int


@dataclass(frozen=True)
class GlobalSearchResult:
    results: dict[SearchEntity, list[SearchCandidate]]
    total_results: int
    meta: SearchMeta


@dataclass(frozen=True)
class LocationSearchQuery:
    """Filters of the dedicated location search.

    Ancestor ids/names narrow every searched level to the subtree below
    that ancestor; a level above the ancestor yields nothing.
    """

    q: str | None = None
    types: tuple[LocationType, ...] = ()
    parent_ids: tuple[str, ...] = ()
    province_id: str | None = None
    district_id: str | None = None
    sector_id: str | None = None
    cell_id: str | None = None
    village_id: str | None = None
    province_name: str | None = None
    district_name: str | None = None
    sector_name: str | None = None
    cell_name: str | None = None
    village_name: str | None = None
    created_from: datetime | None = None
    created_to: datetime | None = None
    min_population: int | None = None
    max_population: int | None = None
    leader_ids: tuple[str, ...] = ()
    page: int = 1
    size: int = 10

    def ancestor_ids(self) -> dict[LocationType, str]:
        pairs = {
            LocationType.PROVINCE: self.province_id,
            LocationType.DISTRICT: self.district_id,
            LocationType.SECTOR: self.sector_id,
            LocationType.CELL: self.cell_id,
            LocationType.VILLAGE: self.village_id,
        }
        return {level: value for level, value in pairs.items() if value}

    def ancestor_names(self) -> dict[LocationType, str]:
        pairs = {
            LocationType.PROVINCE: self.province_name,
            LocationType.DISTRICT: self.district_name,
            LocationType.SECTOR: self.sector_name,
            LocationType.CELL: self.cell_name,
            LocationType.VILLAGE: self.village_name,
        }
        return {level: value for level, value in pairs.items() if value and value.strip()}

    @property
    def filters_population(self) -> bool:
        return self.min_population is not None or self.max_population is not None


@dataclass(frozen=True)
class LocationRef:
    id: str
    name: str
    type: LocationType


@dataclass(frozen=True)
class LeaderRef:
    id: str
    names: str
    role: str


@dataclass(frozen=True)
class LocationSearchResult:
    id: str
    name: str
    type: LocationType
    description: str
    population: int | None
    parent_location: LocationRef | None
    leader: LeaderRef | None
    children_count: int
    relevance_score: int
    created_at: datetime
    updated_at: datetime | None = None


@dataclass(frozen=True)
class LocationSearchPage:
    items: list[LocationSearchResult]
    meta: SearchMeta
