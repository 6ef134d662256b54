"""Repository interfaces (ports) for the application layer.

Protocols define contracts that infrastructure implementations must fulfill (DIP).
All types reference domain values or application DTOs only; no infrastructure imports.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from app.application.dtos.search import (
        LocationSearchQuery,
        LocationSearchResult,
        SearchCandidate,
        SearchFilters,
    )
    from app.domain.entities import ActorContext, LocationNode
    from app.domain.enums import LocationType
    from app.domain.value_objects import Predicate


class IEntityStore(Protocol):
    """Read-only, predicate-filtered access to one entity kind.

    Field paths may cross many-to-one relationships (e.g. "activity.village_id").
    """

    async def count(self, predicate: Predicate = ...) -> int:
        """Number of matching records."""

    async def sum_fields(
        self, fields: Sequence[str], predicate: Predicate = ...
    ) -> dict[str, float]:
        """Sum of each numeric field; 0 for an empty match."""

    async def group_count(self, field: str, predicate: Predicate = ...) -> dict[Any, int]:
        """Counts of matching records per value of field."""

    async def values(
        self,
        fields: Sequence[str],
        predicate: Predicate = ...,
        limit: int | None = None,
    ) -> list[tuple[Any, ...]]:
        """Projected tuples of fields for matching records."""


class ILocationHierarchyRepository(Protocol):
    """Read API over the Province > ... > House tree."""

    async def get_node(
        self, node_id: str, level: LocationType | None = None
    ) -> LocationNode | None:
        """Node by id (optionally restricted to one level), or None."""

    async def get_ancestor_chain(
        self, node_id: str, level: LocationType | None = None
    ) -> list[LocationNode]:
        """[node, parent, ..., province]; raises ResourceNotFoundException if absent."""

    async def get_children(self, node_id: str, level: LocationType) -> list[LocationNode]:
        """Direct children of a node of the given level."""


class IActorRepository(Protocol):
    async def get_actor(self, user_id: str) -> ActorContext | None:
        """Actor context for an active user, or None."""


class IEntitySearchAdapter(Protocol):
    """Text search over one entity kind, mapped to SearchCandidate."""

    async def search(
        self,
        query: str,
        filters: SearchFilters,
        scope: Predicate,
        limit: int,
    ) -> list[SearchCandidate]:
        """Matching candidates (at most limit), scored against query."""


class ILocationDirectory(Protocol):
    """Per-level search behind the dedicated location search."""

    async def search_level(
        self,
        level: LocationType,
        query: LocationSearchQuery,
        scope: Predicate,
        limit: int,
    ) -> list[LocationSearchResult]:
        """Matching locations of one level (at most limit), scored against query.q."""
