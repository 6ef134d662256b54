"""Application DTOs (no ORM dependency)."""

from app.application.dtos.analytics import (
    ActivityStats,
    AnalyticsQuery,
    CoreMetrics,
    DashboardSummary,
    EngagementMetrics,
    FinancialAnalytics,
    LocationCoverage,
    LocationPerformance,
    ParticipationAnalytics,
    ReportStats,
    RoleCount,
    TaskPerformance,
    TimeSeriesPoint,
    UserDistribution,
)
from app.application.dtos.search import (
    GlobalSearchQuery,
    GlobalSearchResult,
    LeaderRef,
    LocationRef,
    LocationSearchPage,
    LocationSearchQuery,
    LocationSearchResult,
    SearchCandidate,
    SearchFilters,
    SearchMeta,
)

__all__ = [
    "ActivityStats",
    "AnalyticsQuery",
    "CoreMetrics",
    "DashboardSummary",
    "EngagementMetrics",
    "FinancialAnalytics",
    "GlobalSearchQuery",
    "GlobalSearchResult",
    "LeaderRef",
    "LocationCoverage",
    "LocationPerformance",
    "LocationRef",
    "LocationSearchPage",
    "LocationSearchQuery",
    "LocationSearchResult",
    "ParticipationAnalytics",
    "ReportStats",
    "RoleCount",
    "SearchCandidate",
    "SearchFilters",
    "SearchMeta",
    "TaskPerformance",
    "TimeSeriesPoint",
    "UserDistribution",
]
