"""Search orchestrators: federated global search and the location search."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import TYPE_CHECKING

from app.application.dtos.search import (
    GlobalSearchQuery,
    GlobalSearchResult,
    LocationSearchPage,
    LocationSearchQuery,
    LocationSearchResult,
    SearchCandidate,
    SearchMeta,
)
from app.application.services.scope_resolver import resolve_scope
from app.domain.entities.actor import ActorContext
from app.domain.enums import LocationType, ScopeTarget, SearchEntity
from app.domain.value_objects import Pagination
from app.shared.telemetry.tracing import add_span_attributes, traced
from app.shared.utils.concurrency import gather_all

if TYPE_CHECKING:
    from app.application.interfaces.repositories import (
        IEntitySearchAdapter,
        ILocationDirectory,
    )

logger = logging.getLogger(__name__)


def expand_entities(entities: tuple[SearchEntity, ...] | list[SearchEntity]) -> list[SearchEntity]:
    """Concrete buckets requested, in presentation order; ALL (or nothing) means every bucket."""
    requested = set(entities)
    if not requested or SearchEntity.ALL in requested:
        return SearchEntity.concrete()
    return [entity for entity in SearchEntity.concrete() if entity in requested]


def _elapsed_ms(started: float) -> int:
    return int((time.perf_counter() - started) * 1000)


def _meta(
    query: str | None,
    started: float,
    entities: list[str],
    total: int,
    pagination: Pagination,
) -> SearchMeta:
    return SearchMeta(
        query=query or "",
        search_time_ms=_elapsed_ms(started),
        entities_searched=entities,
        total_items=total,
        item_count=pagination.item_count(total),
        items_per_page=pagination.size,
        total_pages=pagination.total_pages(total),
        current_page=pagination.page,
    )


@dataclass(frozen=True)
class AdapterBinding:
    """One adapter searched for a bucket, with the scope target it is restricted by."""

    entity: SearchEntity
    target: ScopeTarget
    adapter: IEntitySearchAdapter
    limit: int


class SearchService:
    """Federated search across activities, tasks, reports, users and locations.

    Adapters run concurrently; the merged list is stable-sorted by score
    (ties keep adapter order, then newest first) before paging.
    """

    def __init__(
        self,
        bindings: list[AdapterBinding],
        *,
        timeout_seconds: float = 15.0,
        max_page_size: int = 100,
    ) -> None:
        self._bindings = bindings
        self._timeout = timeout_seconds
        self._max_page_size = max_page_size

    @traced("search.global_search")
    async def global_search(
        self, query: GlobalSearchQuery, actor: ActorContext
    ) -> GlobalSearchResult:
        """Search the requested buckets within the actor's scope and return one page.

        Raises:
            ValidationException: Invalid page or size.
            ScopeViolationException: Leader without a bound location.
            UpstreamTimeoutException: Adapters did not finish in time.
        """
        started = time.perf_counter()
        pagination = Pagination(query.page, query.size, max_size=self._max_page_size)
        entities = expand_entities(query.entities)
        bindings = [b for b in self._bindings if b.entity in entities]
        scopes = {b.target: resolve_scope(actor, b.target) for b in bindings}
        add_span_attributes(role=actor.role.value, entities=",".join(e.value for e in entities))

        batches = await gather_all(
            *(
                b.adapter.search(query.q, query.filters, scopes[b.target], b.limit)
                for b in bindings
            ),
            timeout=self._timeout,
            operation="search.global",
        )
        candidates: list[SearchCandidate] = [c for batch in batches for c in batch]
        candidates.sort(key=lambda c: c.relevance_score, reverse=True)

        page = pagination.slice(candidates)
        results: dict[SearchEntity, list[SearchCandidate]] = {e: [] for e in SearchEntity.concrete()}
        for candidate in page:
            results[candidate.entity_kind].append(candidate)

        meta = _meta(
            query.q, started, [e.value for e in entities], len(candidates), pagination
        )
        logger.info(
            "Global search over %d adapters returned %d candidates in %dms",
            len(bindings),
            len(candidates),
            meta.search_time_ms,
        )
        return GlobalSearchResult(results=results, total_results=len(candidates), meta=meta)


class LocationSearchService:
    """Search across location levels with hierarchy-aware filters."""

    def __init__(
        self,
        directory: ILocationDirectory,
        *,
        per_level_limit: int = 50,
        timeout_seconds: float = 15.0,
        max_page_size: int = 100,
    ) -> None:
        self._directory = directory
        self._limit = per_level_limit
        self._timeout = timeout_seconds
        self._max_page_size = max_page_size

    @traced("search.locations")
    async def search(
        self, query: LocationSearchQuery, actor: ActorContext
    ) -> LocationSearchPage:
        started = time.perf_counter()
        pagination = Pagination(query.page, query.size, max_size=self._max_page_size)
        wanted = set(query.types)
        levels = [t for t in LocationType if not wanted or t in wanted]
        scopes = {
            level: resolve_scope(actor, ScopeTarget.for_location(level)) for level in levels
        }
        add_span_attributes(role=actor.role.value, types=",".join(t.value for t in levels))

        batches = await gather_all(
            *(
                self._directory.search_level(level, query, scopes[level], self._limit)
                for level in levels
            ),
            timeout=self._timeout,
            operation="search.locations",
        )
        items: list[LocationSearchResult] = [r for batch in batches for r in batch]
        items.sort(key=lambda r: r.created_at, reverse=True)
        items.sort(key=lambda r: r.relevance_score, reverse=True)

        meta = _meta(
            query.q, started, [level.value for level in levels], len(items), pagination
        )
        logger.debug("Location search matched %d locations in %dms", len(items), meta.search_time_ms)
        return LocationSearchPage(items=pagination.slice(items), meta=meta)
