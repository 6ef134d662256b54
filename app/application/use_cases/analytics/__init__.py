"""Analytics use cases: role-scoped metric families over a time window."""

from app.application.use_cases.analytics.aggregators import (
    AnalyticsScopes,
    AnalyticsStores,
)
from app.application.use_cases.analytics.service import AnalyticsService

__all__ = [
    "AnalyticsScopes",
    "AnalyticsService",
    "AnalyticsStores",
]
