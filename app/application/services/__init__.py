"""Application services: scope resolution, metric arithmetic, relevance scoring."""

from app.application.services.metrics_math import (
    budget_efficiency,
    percentage,
    ratio,
    rounded_average,
    variance_percentage,
)
from app.application.services.relevance import score_relevance
from app.application.services.scope_resolver import (
    location_scope,
    resolve_scope,
    resolve_scopes,
)

__all__ = [
    "budget_efficiency",
    "location_scope",
    "percentage",
    "ratio",
    "resolve_scope",
    "resolve_scopes",
    "rounded_average",
    "score_relevance",
    "variance_percentage",
]
