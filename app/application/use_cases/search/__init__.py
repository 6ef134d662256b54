"""Search use cases: federated global search and location search."""

from app.application.use_cases.search.service import (
    AdapterBinding,
    LocationSearchService,
    SearchService,
    expand_entities,
)

__all__ = [
    "AdapterBinding",
    "LocationSearchService",
    "SearchService",
    "expand_entities",
]
