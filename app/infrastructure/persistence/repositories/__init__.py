"""Persistence repositories. Re-exports for dependency injection."""

from app.infrastructure.persistence.repositories.actor_repo import ActorRepository
from app.infrastructure.persistence.repositories.entity_store import SqlEntityStore
from app.infrastructure.persistence.repositories.location_hierarchy_repo import (
    LEVELS,
    LocationHierarchyRepository,
)
from app.infrastructure.persistence.repositories.location_search_repo import (
    LocationDirectoryRepository,
)
from app.infrastructure.persistence.repositories.search_repo import (
    ActivitySearchRepository,
    CellSearchRepository,
    IsiboSearchRepository,
    ReportSearchRepository,
    TaskSearchRepository,
    UserSearchRepository,
    VillageSearchRepository,
)

__all__ = [
    "LEVELS",
    "ActivitySearchRepository",
    "ActorRepository",
    "CellSearchRepository",
    "IsiboSearchRepository",
    "LocationDirectoryRepository",
    "LocationHierarchyRepository",
    "ReportSearchRepository",
    "SqlEntityStore",
    "TaskSearchRepository",
    "UserSearchRepository",
    "VillageSearchRepository",
]
