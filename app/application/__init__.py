"""Application layer: interfaces, services, use cases.

Depends only on domain and protocol definitions (DIP).
Infrastructure implements the interfaces (entity stores, hierarchy, search adapters).
"""

from app.application.interfaces import (
    IActorRepository,
    IEntitySearchAdapter,
    IEntityStore,
    ILocationDirectory,
    ILocationHierarchyRepository,
)
from app.application.use_cases import (
    AnalyticsService,
    LocationSearchService,
    SearchService,
)

__all__ = [
    "AnalyticsService",
    "IActorRepository",
    "IEntitySearchAdapter",
    "IEntityStore",
    "ILocationDirectory",
    "ILocationHierarchyRepository",
    "LocationSearchService",
    "SearchService",
]
