"""Analytics orchestrator: scope resolution, window resolution and fan-out."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from datetime import datetime, timedelta
from typing import TYPE_CHECKING

from app.application.dtos.analytics import (
    AnalyticsQuery,
    CoreMetrics,
    DashboardSummary,
    EngagementMetrics,
    LocationPerformance,
    TimeSeriesPoint,
)
from app.application.services.scope_resolver import location_scope
from app.application.services.scope_resolver import resolve_scopes as resolve_actor_scopes
from app.application.use_cases.analytics.aggregators import (
    ActivityStatsAggregator,
    AnalyticsScopes,
    AnalyticsStores,
    EngagementAggregator,
    FinancialAggregator,
    LocationCoverageAggregator,
    LocationPerformanceAggregator,
    ParticipationAggregator,
    ReportStatsAggregator,
    TaskPerformanceAggregator,
    TimeSeriesAggregator,
    UserDistributionAggregator,
)
from app.domain.entities.actor import ActorContext
from app.domain.enums import JURISDICTION_LEVELS, ScopeTarget, TimeRange
from app.domain.exceptions import ScopeViolationException, ValidationException
from app.domain.value_objects import DateRange, all_of
from app.shared.telemetry.tracing import add_span_attributes, traced
from app.shared.utils.concurrency import gather_all
from app.shared.utils.datetime import subtract_years, utc_now

if TYPE_CHECKING:
    from app.application.interfaces.repositories import ILocationHierarchyRepository

logger = logging.getLogger(__name__)

_PRESET_DAYS = {
    TimeRange.LAST_7_DAYS: 7,
    TimeRange.LAST_30_DAYS: 30,
    TimeRange.LAST_90_DAYS: 90,
}

_SCOPE_FIELDS: dict[str, ScopeTarget] = {
    "users": ScopeTarget.USER,
    "cells": ScopeTarget.CELL,
    "villages": ScopeTarget.VILLAGE,
    "isibos": ScopeTarget.ISIBO,
    "activities": ScopeTarget.ACTIVITY,
    "tasks": ScopeTarget.TASK,
    "reports": ScopeTarget.REPORT,
}


class AnalyticsService:
    """Role-scoped analytics over the community hierarchy.

    Every operation resolves the actor's scopes once, resolves the window,
    then runs the relevant aggregators concurrently under one timeout.
    A failure in any branch fails the whole call.
    """

    def __init__(
        self,
        stores: AnalyticsStores,
        hierarchy: ILocationHierarchyRepository,
        *,
        timeout_seconds: float = 30.0,
        default_time_range: TimeRange = TimeRange.LAST_30_DAYS,
        max_time_series_days: int = 366,
        top_villages_limit: int = 10,
        engagement_top_villages: int = 5,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._hierarchy = hierarchy
        self._timeout = timeout_seconds
        self._default_time_range = TimeRange(default_time_range)
        self._max_time_series_days = max_time_series_days
        self._top_villages_limit = top_villages_limit
        self._engagement_top_villages = engagement_top_villages
        self._clock = clock

        self._user_distribution = UserDistributionAggregator(stores.users)
        self._location_coverage = LocationCoverageAggregator(
            stores.cells, stores.villages, stores.isibos
        )
        self._activity_stats = ActivityStatsAggregator(stores.activities, stores.tasks)
        self._report_stats = ReportStatsAggregator(
            stores.reports, stores.report_evidence, stores.report_attendance
        )
        self._financial = FinancialAggregator(stores.activities, stores.tasks)
        self._participation = ParticipationAggregator(stores.activities, stores.tasks)
        self._task_performance = TaskPerformanceAggregator(stores.activities, stores.tasks)
        self._time_series = TimeSeriesAggregator(
            stores.activities, stores.tasks, stores.reports
        )
        self._location_performance = LocationPerformanceAggregator(
            stores.villages, stores.activities, stores.tasks
        )
        self._engagement = EngagementAggregator(
            stores.users, stores.isibos, stores.reports, self._location_performance
        )

    # ------------------------------------------------------------------
    # Request preparation
    # ------------------------------------------------------------------

    def resolve_date_range(self, query: AnalyticsQuery) -> DateRange:
        """Explicit start/end when both are given, otherwise a preset ending now.

        Raises:
            ValidationException: Only one bound given, or end not after start.
        """
        if query.start_date is not None or query.end_date is not None:
            if query.start_date is None or query.end_date is None:
                raise ValidationException(
                    "start_date and end_date must be provided together",
                    field="start_date" if query.start_date is None else "end_date",
                )
            return DateRange(query.start_date, query.end_date)

        preset = TimeRange(query.time_range or self._default_time_range)
        end = self._clock()
        if preset is TimeRange.LAST_YEAR:
            return DateRange(subtract_years(end, 1), end)
        return DateRange(end - timedelta(days=_PRESET_DAYS[preset]), end)

    async def resolve_scopes(
        self, actor: ActorContext, location_id: str | None = None
    ) -> AnalyticsScopes:
        """Actor scopes per target, narrowed to location_id when given.

        Raises:
            ResourceNotFoundException: location_id does not exist.
            ValidationException: location_id is not a cell, village or isibo.
            ScopeViolationException: location_id is outside the actor's jurisdiction,
                or a leader has no bound node.
        """
        scopes = resolve_actor_scopes(actor, _SCOPE_FIELDS.values())
        if location_id:
            chain = await self._hierarchy.get_ancestor_chain(location_id)
            node = chain[0]
            if node.type not in JURISDICTION_LEVELS.values():
                raise ValidationException(
                    f"location_id must reference a cell, village or isibo, got {node.type.value}",
                    field="location_id",
                )
            if not actor.is_admin:
                jurisdiction = actor.jurisdiction
                if jurisdiction is None or jurisdiction[1] not in {n.id for n in chain}:
                    raise ScopeViolationException(
                        "Location is outside your jurisdiction",
                        role=actor.role.value,
                        location_id=location_id,
                    )
            scopes = {
                target: all_of(predicate, location_scope(node.type, node.id, target))
                for target, predicate in scopes.items()
            }
        return AnalyticsScopes(
            **{name: scopes[target] for name, target in _SCOPE_FIELDS.items()}
        )

    def _check_time_series_window(self, date_range: DateRange) -> None:
        if date_range.days > self._max_time_series_days:
            raise ValidationException(
                f"time series window may span at most {self._max_time_series_days} days",
                field="end_date",
            )

    async def _prepare(
        self, query: AnalyticsQuery, actor: ActorContext
    ) -> tuple[AnalyticsScopes, DateRange]:
        date_range = self.resolve_date_range(query)
        scopes = await self.resolve_scopes(actor, query.location_id)
        add_span_attributes(role=actor.role.value, days=date_range.days)
        return scopes, date_range

    # ------------------------------------------------------------------
    # Computation over prepared scopes
    # ------------------------------------------------------------------

    async def _core_metrics(
        self, scopes: AnalyticsScopes, date_range: DateRange
    ) -> CoreMetrics:
        (
            users,
            coverage,
            activities,
            reports,
            financial,
            participation,
            performance,
        ) = await gather_all(
            self._user_distribution.compute(scopes),
            self._location_coverage.compute(scopes),
            self._activity_stats.compute(scopes, date_range),
            self._report_stats.compute(scopes, date_range),
            self._financial.compute(scopes, date_range),
            self._participation.compute(scopes, date_range),
            self._task_performance.compute(scopes, date_range),
            timeout=self._timeout,
            operation="analytics.core_metrics",
        )
        return CoreMetrics(
            user_distribution=users,
            location_coverage=coverage,
            activity_stats=activities,
            report_stats=reports,
            financial=financial,
            participation=participation,
            task_performance=performance,
            date_range=date_range,
        )

    async def _time_series_points(
        self, scopes: AnalyticsScopes, date_range: DateRange
    ) -> list[TimeSeriesPoint]:
        (points,) = await gather_all(
            self._time_series.compute(scopes, date_range),
            timeout=self._timeout,
            operation="analytics.time_series",
        )
        return points

    async def _ranked_villages(
        self, scopes: AnalyticsScopes, date_range: DateRange
    ) -> list[LocationPerformance]:
        (ranked,) = await gather_all(
            self._location_performance.compute(
                scopes, date_range, limit=self._top_villages_limit
            ),
            timeout=self._timeout,
            operation="analytics.location_performance",
        )
        return ranked

    async def _engagement_metrics(
        self, scopes: AnalyticsScopes, date_range: DateRange
    ) -> EngagementMetrics:
        (engagement,) = await gather_all(
            self._engagement.compute(
                scopes, date_range, top_villages=self._engagement_top_villages
            ),
            timeout=self._timeout,
            operation="analytics.engagement",
        )
        return engagement

    # ------------------------------------------------------------------
    # Public operations
    # ------------------------------------------------------------------

    @traced("analytics.get_core_metrics")
    async def get_core_metrics(
        self, query: AnalyticsQuery, actor: ActorContext
    ) -> CoreMetrics:
        """All seven metric families for the actor's scope and window."""
        started = time.perf_counter()
        scopes, date_range = await self._prepare(query, actor)
        metrics = await self._core_metrics(scopes, date_range)
        logger.info(
            "Core metrics computed for %s in %.1fms",
            actor.role.value,
            (time.perf_counter() - started) * 1000,
        )
        return metrics

    @traced("analytics.get_time_series")
    async def get_time_series(
        self, query: AnalyticsQuery, actor: ActorContext
    ) -> list[TimeSeriesPoint]:
        """One point per 24-hour bucket of [start, end), counted from start.

        Raises:
            ValidationException: Window longer than the configured maximum.
        """
        scopes, date_range = await self._prepare(query, actor)
        self._check_time_series_window(date_range)
        return await self._time_series_points(scopes, date_range)

    @traced("analytics.get_location_performance")
    async def get_location_performance(
        self, query: AnalyticsQuery, actor: ActorContext
    ) -> list[LocationPerformance]:
        scopes, date_range = await self._prepare(query, actor)
        return await self._ranked_villages(scopes, date_range)

    @traced("analytics.get_engagement_metrics")
    async def get_engagement_metrics(
        self, query: AnalyticsQuery, actor: ActorContext
    ) -> EngagementMetrics:
        scopes, date_range = await self._prepare(query, actor)
        return await self._engagement_metrics(scopes, date_range)

    @traced("analytics.get_dashboard_summary")
    async def get_dashboard_summary(
        self, query: AnalyticsQuery, actor: ActorContext
    ) -> DashboardSummary:
        """Core metrics, time series, village ranking and engagement in one call."""
        started = time.perf_counter()
        scopes, date_range = await self._prepare(query, actor)
        self._check_time_series_window(date_range)
        core, series, ranked, engagement = await gather_all(
            self._core_metrics(scopes, date_range),
            self._time_series_points(scopes, date_range),
            self._ranked_villages(scopes, date_range),
            self._engagement_metrics(scopes, date_range),
            timeout=self._timeout,
            operation="analytics.dashboard_summary",
        )
        logger.info(
            "Dashboard summary computed for %s over %d days in %.1fms",
            actor.role.value,
            date_range.days,
            (time.perf_counter() - started) * 1000,
        )
        return DashboardSummary(
            core_metrics=core,
            time_series=series,
            location_performance=ranked,
            engagement=engagement,
            generated_at=self._clock(),
            date_range=date_range,
        )
