"""Pydantic request/response schemas for the API."""

from app.schemas.analytics import (
    CoreMetricsResponse,
    DashboardSummaryResponse,
    EngagementMetricsResponse,
    LocationPerformanceResponse,
    TimeSeriesPointResponse,
)
from app.schemas.health import HealthResponse
from app.schemas.location import LocationSearchResponse
from app.schemas.search import GlobalSearchResponse

__all__ = [
    "CoreMetricsResponse",
    "DashboardSummaryResponse",
    "EngagementMetricsResponse",
    "GlobalSearchResponse",
    "HealthResponse",
    "LocationPerformanceResponse",
    "LocationSearchResponse",
    "TimeSeriesPointResponse",
]
