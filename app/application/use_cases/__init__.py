"""Application use cases: one entry point per workflow."""

from app.application.use_cases.analytics import AnalyticsService
from app.application.use_cases.search import LocationSearchService, SearchService

__all__ = [
    "AnalyticsService",
    "LocationSearchService",
    "SearchService",
]
