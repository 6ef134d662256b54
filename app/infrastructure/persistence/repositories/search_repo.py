"""Entity search adapters for the global search.

One adapter per searchable entity kind (implements IEntitySearchAdapter).
Each adapter ORs a case-insensitive substring match across its text
fields, ANDs it with the structural filters that apply to its entity and
with the caller's scope, fetches at most ``limit`` rows newest first and
maps every row to a scored SearchCandidate.
"""

import logging
from typing import Any, ClassVar

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.application.dtos.search import SearchCandidate, SearchFilters
from app.application.services.relevance import score_relevance
from app.domain.enums import SearchEntity
from app.domain.value_objects.predicates import (
    MATCH_ALL,
    Predicate,
    all_of,
    any_of,
    exists,
    in_range,
    in_set,
    negate,
    optional_in_set,
    text_match,
)
from app.infrastructure.persistence.models import (
    Activity,
    Cell,
    Isibo,
    Report,
    Task,
    User,
    Village,
)
from app.infrastructure.persistence.repositories.entity_store import SqlEntityStore
from app.shared.utils.datetime import ensure_utc

logger = logging.getLogger(__name__)


def _name(obj: Any, attr: str = "name") -> Any:
    return getattr(obj, attr) if obj is not None else None


def located_in(location_ids: tuple[str, ...], *paths: str) -> Predicate:
    """Record sits under any of location_ids along any of paths; no ids, no constraint."""
    if not location_ids:
        return MATCH_ALL
    return any_of(*(in_set(path, location_ids) for path in paths))


class EntitySearchRepository:
    """Base adapter: text match + filters + scope over one model."""

    model: ClassVar[type]
    entity_kind: ClassVar[SearchEntity]
    text_fields: ClassVar[tuple[str, ...]]
    load: ClassVar[tuple[str, ...]] = ()

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._store = SqlEntityStore(session_factory, self.model)

    def filter_predicate(self, filters: SearchFilters) -> Predicate:
        """Structural filters for this entity; the default covers the creation window."""
        return in_range("created_at", gte=filters.date_from, lte=filters.date_to)

    def to_candidate(self, row: Any, query: str) -> SearchCandidate:
        raise NotImplementedError

    def _candidate(
        self,
        row: Any,
        *,
        title: str,
        description: str | None,
        score: int,
        metadata: dict[str, Any],
    ) -> SearchCandidate:
        return SearchCandidate(
            entity_kind=self.entity_kind,
            id=row.id,
            title=title,
            description=description,
            relevance_score=score,
            metadata=metadata,
            created_at=ensure_utc(row.created_at),
            updated_at=ensure_utc(row.updated_at),
        )

    async def search(
        self,
        query: str,
        filters: SearchFilters,
        scope: Predicate,
        limit: int,
    ) -> list[SearchCandidate]:
        predicate = all_of(
            text_match(self.text_fields, query),
            self.filter_predicate(filters),
            scope,
        )
        rows = await self._store.find_many(predicate, limit=limit, load=self.load)
        logger.debug("%s search matched %d rows", self._store.name, len(rows))
        return [self.to_candidate(row, query) for row in rows]


class ActivitySearchRepository(EntitySearchRepository):
    model = Activity
    entity_kind = SearchEntity.ACTIVITIES
    text_fields = ("title", "description")
    load = ("village.cell",)

    def filter_predicate(self, filters: SearchFilters) -> Predicate:
        return all_of(
            super().filter_predicate(filters),
            located_in(filters.location_ids, "village_id", "village.cell_id"),
            optional_in_set("organizer_id", filters.user_ids),
            optional_in_set("id", filters.activity_ids),
            exists("tasks", in_set("isibo_id", filters.isibo_ids))
            if filters.isibo_ids
            else MATCH_ALL,
            optional_in_set("status", filters.statuses),
        )

    def to_candidate(self, row: Activity, query: str) -> SearchCandidate:
        village = row.village
        return self._candidate(
            row,
            title=row.title,
            description=row.description,
            score=score_relevance(query, row.title, row.description),
            metadata={
                "village": _name(village),
                "cell": _name(village.cell) if village is not None else None,
                "date": row.date.isoformat() if row.date else None,
                "status": row.status,
            },
        )


class TaskSearchRepository(EntitySearchRepository):
    model = Task
    entity_kind = SearchEntity.TASKS
    text_fields = ("title", "description")
    load = ("activity.village", "isibo")

    def filter_predicate(self, filters: SearchFilters) -> Predicate:
        return all_of(
            super().filter_predicate(filters),
            located_in(
                filters.location_ids,
                "isibo_id",
                "isibo.village_id",
                "isibo.village.cell_id",
            ),
            optional_in_set("activity_id", filters.activity_ids),
            optional_in_set("id", filters.task_ids),
            optional_in_set("isibo_id", filters.isibo_ids),
            optional_in_set("status", filters.statuses),
            in_range("estimated_cost", gte=filters.min_cost, lte=filters.max_cost),
            in_range(
                "expected_participants",
                gte=filters.min_participants,
                lte=filters.max_participants,
            ),
        )

    def to_candidate(self, row: Task, query: str) -> SearchCandidate:
        activity = row.activity
        return self._candidate(
            row,
            title=row.title,
            description=row.description,
            score=score_relevance(query, row.title, row.description),
            metadata={
                "activity": _name(activity, "title"),
                "isibo": _name(row.isibo),
                "village": _name(activity.village) if activity is not None else None,
                "status": row.status,
                "estimated_cost": row.estimated_cost,
                "actual_cost": row.actual_cost,
            },
        )


class ReportSearchRepository(EntitySearchRepository):
    model = Report
    entity_kind = SearchEntity.REPORTS
    text_fields = ("comment", "suggestions", "challenges_faced")
    load = ("task.isibo", "activity", "evidence")

    def filter_predicate(self, filters: SearchFilters) -> Predicate:
        if filters.has_evidence is None:
            evidence = MATCH_ALL
        elif filters.has_evidence:
            evidence = exists("evidence")
        else:
            evidence = negate(exists("evidence"))
        return all_of(
            super().filter_predicate(filters),
            optional_in_set("activity_id", filters.activity_ids),
            optional_in_set("task_id", filters.task_ids),
            optional_in_set("task.isibo_id", filters.isibo_ids),
            located_in(
                filters.location_ids,
                "task.isibo_id",
                "task.isibo.village_id",
                "task.isibo.village.cell_id",
            ),
            exists("attendance", in_set("user_id", filters.user_ids))
            if filters.user_ids
            else MATCH_ALL,
            evidence,
        )

    def to_candidate(self, row: Report, query: str) -> SearchCandidate:
        task = row.task
        subject = _name(task, "title") or _name(row.activity, "title")
        return self._candidate(
            row,
            title=f"Report for {subject}",
            description=row.comment,
            score=score_relevance(query, row.comment, row.suggestions),
            metadata={
                "task": _name(task, "title"),
                "activity": _name(row.activity, "title"),
                "isibo": _name(task.isibo) if task is not None else None,
                "has_evidence": bool(row.evidence),
                "evidence_count": len(row.evidence),
            },
        )


class UserSearchRepository(EntitySearchRepository):
    model = User
    entity_kind = SearchEntity.USERS
    text_fields = ("names", "email", "phone")
    load = ("profile.village", "profile.cell")

    def filter_predicate(self, filters: SearchFilters) -> Predicate:
        return all_of(
            super().filter_predicate(filters),
            optional_in_set("id", filters.user_ids),
            located_in(
                filters.location_ids,
                "profile.cell_id",
                "profile.village_id",
                "profile.isibo_id",
                "profile.house_id",
            ),
        )

    def to_candidate(self, row: User, query: str) -> SearchCandidate:
        profile = row.profile
        return self._candidate(
            row,
            title=row.names,
            description=f"{row.role} - {row.email}",
            score=score_relevance(query, row.names, row.email),
            metadata={
                "role": row.role,
                "email": row.email,
                "phone": row.phone,
                "village": _name(profile.village) if profile is not None else None,
                "cell": _name(profile.cell) if profile is not None else None,
            },
        )


class LocationSubtypeSearchRepository(EntitySearchRepository):
    """Name search over one location level, reported in the locations bucket."""

    entity_kind = SearchEntity.LOCATIONS
    text_fields = ("name",)
    location_type: ClassVar[str]

    def filter_predicate(self, filters: SearchFilters) -> Predicate:
        return all_of(
            super().filter_predicate(filters),
            optional_in_set("id", filters.location_ids),
        )

    def describe(self, row: Any) -> tuple[str, dict[str, Any]]:
        raise NotImplementedError

    def to_candidate(self, row: Any, query: str) -> SearchCandidate:
        description, extra = self.describe(row)
        return self._candidate(
            row,
            title=row.name,
            description=description,
            score=score_relevance(query, row.name),
            metadata={"type": self.location_type, **extra},
        )


class CellSearchRepository(LocationSubtypeSearchRepository):
    model = Cell
    location_type = "cell"
    load = ("sector",)

    def describe(self, row: Cell) -> tuple[str, dict[str, Any]]:
        return "Cell", {"sector": _name(row.sector)}


class VillageSearchRepository(LocationSubtypeSearchRepository):
    model = Village
    location_type = "village"
    load = ("cell",)

    def describe(self, row: Village) -> tuple[str, dict[str, Any]]:
        cell = _name(row.cell)
        return f"Village in {cell}", {"cell": cell}


class IsiboSearchRepository(LocationSubtypeSearchRepository):
    model = Isibo
    location_type = "isibo"
    load = ("village",)

    def describe(self, row: Isibo) -> tuple[str, dict[str, Any]]:
        village = _name(row.village)
        return f"Isibo in {village}", {"village": village}
