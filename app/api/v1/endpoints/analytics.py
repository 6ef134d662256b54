"""Analytics API: role-scoped metrics, time series, village ranking and dashboard."""

from datetime import datetime
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query

from app.api.v1.dependencies import get_analytics_service, require_analytics_actor
from app.application.dtos.analytics import AnalyticsQuery
from app.application.use_cases.analytics import AnalyticsService
from app.domain.entities.actor import ActorContext
from app.domain.enums import TimeRange
from app.schemas.analytics import (
    CoreMetricsResponse,
    DashboardSummaryResponse,
    EngagementMetricsResponse,
    LocationPerformanceResponse,
    TimeSeriesPointResponse,
)

router = APIRouter()


def analytics_query(
    time_range: TimeRange | None = Query(
        None, description="Look-back preset ending now; ignored when start_date/end_date are set"
    ),
    start_date: datetime | None = Query(None, description="Window start (with end_date)"),
    end_date: datetime | None = Query(None, description="Window end (with start_date)"),
    location_id: UUID | None = Query(
        None, description="Narrow to a cell, village or isibo inside your jurisdiction"
    ),
) -> AnalyticsQuery:
    """Common analytics query parameters."""
    return AnalyticsQuery(
        time_range=time_range,
        start_date=start_date,
        end_date=end_date,
        location_id=str(location_id) if location_id else None,
    )


AnalyticsParams = Annotated[AnalyticsQuery, Depends(analytics_query)]
Actor = Annotated[ActorContext, Depends(require_analytics_actor)]
Service = Annotated[AnalyticsService, Depends(get_analytics_service)]


@router.get("/core-metrics", response_model=CoreMetricsResponse)
async def get_core_metrics(query: AnalyticsParams, actor: Actor, service: Service):
    """Users, coverage, activities, reports, finance, participation and task performance."""
    metrics = await service.get_core_metrics(query, actor)
    return CoreMetricsResponse.model_validate(metrics)


@router.get("/time-series", response_model=list[TimeSeriesPointResponse])
async def get_time_series(query: AnalyticsParams, actor: Actor, service: Service):
    """One point per 24-hour bucket from the window start."""
    points = await service.get_time_series(query, actor)
    return [TimeSeriesPointResponse.model_validate(p) for p in points]


@router.get("/location-performance", response_model=list[LocationPerformanceResponse])
async def get_location_performance(query: AnalyticsParams, actor: Actor, service: Service):
    """Villages ranked by activities in the window."""
    ranked = await service.get_location_performance(query, actor)
    return [LocationPerformanceResponse.model_validate(v) for v in ranked]


@router.get("/engagement-metrics", response_model=EngagementMetricsResponse)
async def get_engagement_metrics(query: AnalyticsParams, actor: Actor, service: Service):
    engagement = await service.get_engagement_metrics(query, actor)
    return EngagementMetricsResponse.model_validate(engagement)


@router.get("/dashboard-summary", response_model=DashboardSummaryResponse)
async def get_dashboard_summary(query: AnalyticsParams, actor: Actor, service: Service):
    """Everything above in one call, computed concurrently."""
    summary = await service.get_dashboard_summary(query, actor)
    return DashboardSummaryResponse.model_validate(summary)
