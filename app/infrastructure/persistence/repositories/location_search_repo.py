"""Location directory: per-level search behind the dedicated location search.

Implements ILocationDirectory. Every level is searched through the same
entity store machinery as the global search; ancestor filters are
expressed as relationship paths walking up the hierarchy (each level's
relationship to its parent is named after the parent level).
"""

import logging
from dataclasses import dataclass
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.application.dtos.search import (
    LeaderRef,
    LocationRef,
    LocationSearchQuery,
    LocationSearchResult,
)
from app.application.services.relevance import score_relevance
from app.domain.enums import LocationType
from app.domain.value_objects.predicates import (
    MATCH_NONE,
    Predicate,
    all_of,
    count_in_range,
    equals,
    in_range,
    optional_in_set,
    text_match,
)
from app.infrastructure.persistence.repositories.entity_store import SqlEntityStore
from app.infrastructure.persistence.repositories.location_hierarchy_repo import LEVELS
from app.shared.utils.datetime import ensure_utc

logger = logging.getLogger(__name__)


def ancestor_path(level: LocationType, ancestor: LocationType, field: str = "id") -> str | None:
    """Dotted path from a level record to field of its ancestor at ancestor level.

    The level itself resolves to field; levels below level resolve to None.
    """
    if ancestor is level:
        return field
    segments: list[str] = []
    current = level.parent
    while current is not None:
        segments.append(current.value)
        if current is ancestor:
            return ".".join([*segments, field])
        current = current.parent
    return None


@dataclass(frozen=True)
class LevelSearch:
    """Search-specific layout of one level.

    population is the collection path whose rows are counted as residents;
    levels without one carry no population.
    """

    text_fields: tuple[str, ...]
    load: tuple[str, ...]
    leader: str | None = None
    population: str | None = None


SEARCH_LEVELS: dict[LocationType, LevelSearch] = {
    LocationType.PROVINCE: LevelSearch(("name",), ("districts",)),
    LocationType.DISTRICT: LevelSearch(("name",), ("province", "sectors")),
    LocationType.SECTOR: LevelSearch(("name",), ("district", "cells")),
    LocationType.CELL: LevelSearch(("name",), ("sector", "villages", "leader"), "leader"),
    LocationType.VILLAGE: LevelSearch(("name",), ("cell", "isibos", "leader"), "leader"),
    LocationType.ISIBO: LevelSearch(
        ("name",), ("village", "houses.members", "leader"), "leader", "houses.members"
    ),
    LocationType.HOUSE: LevelSearch(
        ("code", "address"),
        ("isibo.village", "members", "representative"),
        "representative",
        "members",
    ),
}


def _population(level: LocationType, row: Any) -> int | None:
    if level is LocationType.HOUSE:
        return len(row.members)
    if level is LocationType.ISIBO:
        return sum(len(house.members) for house in row.houses)
    return None


def _describe(level: LocationType, row: Any) -> str:
    match level:
        case LocationType.PROVINCE:
            return f"Province with {len(row.districts)} districts"
        case LocationType.HOUSE:
            village = row.isibo.village.name if row.isibo is not None else None
            return f"House at {row.address or row.code} in {village}"
    parent = getattr(row, level.parent.value)
    return f"{level.value.capitalize()} in {parent.name if parent is not None else None}"


class LocationDirectoryRepository:
    """Search one location level at a time (implements ILocationDirectory)."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._stores = {
            level: SqlEntityStore(session_factory, layout.model)
            for level, layout in LEVELS.items()
        }

    def filter_predicate(self, level: LocationType, query: LocationSearchQuery) -> Predicate:
        """Structural filters of query as they apply to level records."""
        layout = LEVELS[level]
        search = SEARCH_LEVELS[level]
        parts: list[Predicate] = [
            in_range("created_at", gte=query.created_from, lte=query.created_to),
        ]
        if query.parent_ids:
            parts.append(
                optional_in_set(layout.parent_key, query.parent_ids)
                if layout.parent_key
                else MATCH_NONE
            )
        for ancestor, ancestor_id in query.ancestor_ids().items():
            path = ancestor_path(level, ancestor)
            parts.append(equals(path, ancestor_id) if path else MATCH_NONE)
        for ancestor, name in query.ancestor_names().items():
            path = ancestor_path(level, ancestor, "name")
            parts.append(text_match((path,), name) if path else MATCH_NONE)
        if query.leader_ids:
            parts.append(
                optional_in_set(f"{search.leader}_id", query.leader_ids)
                if search.leader
                else MATCH_NONE
            )
        if query.filters_population:
            parts.append(
                count_in_range(
                    search.population, gte=query.min_population, lte=query.max_population
                )
                if search.population
                else MATCH_NONE
            )
        return all_of(*parts)

    def to_result(self, level: LocationType, row: Any, q: str | None) -> LocationSearchResult:
        layout = LEVELS[level]
        search = SEARCH_LEVELS[level]
        name = getattr(row, layout.name_field)
        description = _describe(level, row)

        parent_location = None
        if level.parent is not None:
            parent = getattr(row, level.parent.value)
            if parent is not None:
                parent_location = LocationRef(
                    id=parent.id,
                    name=getattr(parent, LEVELS[level.parent].name_field),
                    type=level.parent,
                )

        leader = None
        person = getattr(row, search.leader) if search.leader else None
        if person is not None:
            leader = LeaderRef(id=person.id, names=person.names, role=person.role)

        return LocationSearchResult(
            id=row.id,
            name=name,
            type=level,
            description=description,
            population=_population(level, row),
            parent_location=parent_location,
            leader=leader,
            children_count=len(getattr(row, layout.children)),
            relevance_score=score_relevance(q, name) if q else 0,
            created_at=ensure_utc(row.created_at),
            updated_at=ensure_utc(row.updated_at),
        )

    async def search_level(
        self,
        level: LocationType,
        query: LocationSearchQuery,
        scope: Predicate,
        limit: int,
    ) -> list[LocationSearchResult]:
        predicate = all_of(
            text_match(SEARCH_LEVELS[level].text_fields, query.q),
            self.filter_predicate(level, query),
            scope,
        )
        rows = await self._stores[level].find_many(
            predicate, limit=limit, load=SEARCH_LEVELS[level].load
        )
        logger.debug("location search on %s matched %d rows", level.value, len(rows))
        return [self.to_result(level, row, query.q) for row in rows]
