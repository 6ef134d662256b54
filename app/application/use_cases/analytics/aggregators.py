"""Metric aggregators: one class per metric family.

Each aggregator receives the entity stores it reads at construction and
computes its family from pre-resolved scopes plus an optional window.
Aggregators never resolve scopes themselves and never touch each other's
state; the service runs them concurrently. Independent queries inside an
aggregator are fanned out as well.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from app.application.dtos.analytics import (
    ActivityStats,
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
from app.application.services.metrics_math import (
    budget_efficiency,
    percentage,
    ratio,
    rounded_average,
    variance_percentage,
)
from app.domain.enums import TaskStatus, UserRole
from app.domain.value_objects import (
    MATCH_ALL,
    DateRange,
    Predicate,
    all_of,
    equals,
    exists,
    in_range,
    not_blank,
)
from app.shared.utils.concurrency import gather_all
from app.shared.utils.datetime import day_offset

if TYPE_CHECKING:
    from app.application.interfaces.repositories import IEntityStore

_COMPLETED = equals("status", TaskStatus.COMPLETED.value)
_HAS_LEADER = equals("has_leader", True)

FINANCIAL_FIELDS = (
    "estimated_cost",
    "actual_cost",
    "expected_financial_impact",
    "actual_financial_impact",
)
PARTICIPATION_FIELDS = ("expected_participants", "actual_participants")


def created_within(date_range: DateRange | None, field: str = "created_at") -> Predicate:
    """Inclusive window on field, or no constraint without a range."""
    if date_range is None:
        return MATCH_ALL
    return in_range(field, gte=date_range.start, lte=date_range.end)


@dataclass(frozen=True)
class AnalyticsScopes:
    """Visibility predicate per target kind for one request."""

    users: Predicate
    cells: Predicate
    villages: Predicate
    isibos: Predicate
    activities: Predicate
    tasks: Predicate
    reports: Predicate


@dataclass(frozen=True)
class AnalyticsStores:
    """Read stores the analytics engine depends on."""

    users: IEntityStore
    cells: IEntityStore
    villages: IEntityStore
    isibos: IEntityStore
    activities: IEntityStore
    tasks: IEntityStore
    reports: IEntityStore
    report_evidence: IEntityStore
    report_attendance: IEntityStore


def _status_breakdown(by_status: dict[str, int]) -> tuple[dict[str, int], int, int, int, int]:
    """(every status with its count, total, completed, cancelled, pending)."""
    breakdown = {status: int(by_status.get(status, 0)) for status in TaskStatus.values()}
    for status, count in by_status.items():
        if status not in breakdown:
            breakdown[str(status)] = int(count)
    total = sum(breakdown.values())
    completed = breakdown[TaskStatus.COMPLETED.value]
    cancelled = breakdown[TaskStatus.CANCELLED.value]
    return breakdown, total, completed, cancelled, total - completed - cancelled


class UserDistributionAggregator:
    """Users per role within the user scope (no time window)."""

    def __init__(self, users: IEntityStore) -> None:
        self._users = users

    async def compute(
        self, scopes: AnalyticsScopes, date_range: DateRange | None = None
    ) -> UserDistribution:
        counts = await self._users.group_count("role", scopes.users)
        total = sum(counts.values())
        ordered = sorted(counts.items(), key=lambda item: (-item[1], str(item[0])))
        return UserDistribution(
            total_users=total,
            by_role=[
                RoleCount(role=str(role), count=count, percentage=percentage(count, total))
                for role, count in ordered
            ],
        )


class LocationCoverageAggregator:
    """Leadership coverage of villages and isibos, plus the cell count."""

    def __init__(
        self, cells: IEntityStore, villages: IEntityStore, isibos: IEntityStore
    ) -> None:
        self._cells = cells
        self._villages = villages
        self._isibos = isibos

    async def compute(
        self, scopes: AnalyticsScopes, date_range: DateRange | None = None
    ) -> LocationCoverage:
        total_cells, total_villages, led_villages, total_isibos, led_isibos = await gather_all(
            self._cells.count(scopes.cells),
            self._villages.count(scopes.villages),
            self._villages.count(all_of(scopes.villages, _HAS_LEADER)),
            self._isibos.count(scopes.isibos),
            self._isibos.count(all_of(scopes.isibos, _HAS_LEADER)),
            operation="analytics.location_coverage",
        )
        return LocationCoverage(
            total_cells=total_cells,
            total_villages=total_villages,
            villages_with_leaders=led_villages,
            villages_without_leaders=total_villages - led_villages,
            village_leadership_coverage=percentage(led_villages, total_villages),
            total_isibos=total_isibos,
            isibos_with_leaders=led_isibos,
            isibos_without_leaders=total_isibos - led_isibos,
            isibo_leadership_coverage=percentage(led_isibos, total_isibos),
        )


class ActivityStatsAggregator:
    """Activities with/without reports and the task status breakdown."""

    def __init__(self, activities: IEntityStore, tasks: IEntityStore) -> None:
        self._activities = activities
        self._tasks = tasks

    async def compute(
        self, scopes: AnalyticsScopes, date_range: DateRange | None = None
    ) -> ActivityStats:
        window = created_within(date_range)
        activity_filter = all_of(scopes.activities, window)
        total_activities, reported_activities, by_status = await gather_all(
            self._activities.count(activity_filter),
            self._activities.count(all_of(activity_filter, exists("tasks.reports"))),
            self._tasks.group_count("status", all_of(scopes.tasks, window)),
            operation="analytics.activity_stats",
        )
        breakdown, total_tasks, completed, cancelled, pending = _status_breakdown(by_status)
        return ActivityStats(
            total_activities=total_activities,
            activities_with_reports=reported_activities,
            activities_without_reports=total_activities - reported_activities,
            activity_reporting_rate=percentage(reported_activities, total_activities),
            total_tasks=total_tasks,
            completed_tasks=completed,
            cancelled_tasks=cancelled,
            pending_tasks=pending,
            task_completion_rate=percentage(completed, total_tasks),
            tasks_by_status=breakdown,
        )


class ReportStatsAggregator:
    """Evidence, attendance and content completeness of reports."""

    def __init__(
        self,
        reports: IEntityStore,
        report_evidence: IEntityStore,
        report_attendance: IEntityStore,
    ) -> None:
        self._reports = reports
        self._evidence = report_evidence
        self._attendance = report_attendance

    async def compute(
        self, scopes: AnalyticsScopes, date_range: DateRange | None = None
    ) -> ReportStats:
        report_filter = all_of(scopes.reports, created_within(date_range))
        (
            total,
            with_evidence,
            with_challenges,
            with_suggestions,
            with_materials,
            evidence_items,
            attendance,
        ) = await gather_all(
            self._reports.count(report_filter),
            self._reports.count(all_of(report_filter, exists("evidence"))),
            self._reports.count(all_of(report_filter, not_blank("challenges_faced"))),
            self._reports.count(all_of(report_filter, not_blank("suggestions"))),
            self._reports.count(all_of(report_filter, not_blank("materials_used"))),
            self._evidence.count(exists("report", report_filter)),
            self._attendance.count(exists("report", report_filter)),
            operation="analytics.report_stats",
        )
        return ReportStats(
            total_reports=total,
            reports_with_evidence=with_evidence,
            reports_without_evidence=total - with_evidence,
            evidence_percentage=percentage(with_evidence, total),
            total_attendance=attendance,
            average_attendance=rounded_average(attendance, total),
            reports_with_challenges=with_challenges,
            reports_with_suggestions=with_suggestions,
            reports_with_materials=with_materials,
            average_evidence_per_report=ratio(evidence_items, total),
        )


def reported_tasks(scopes: AnalyticsScopes, date_range: DateRange | None) -> Predicate:
    """In-scope tasks with at least one report inside the window."""
    return all_of(scopes.tasks, exists("reports", created_within(date_range)))


class FinancialAggregator:
    """Cost and financial-impact totals over reported tasks."""

    def __init__(self, activities: IEntityStore, tasks: IEntityStore) -> None:
        self._activities = activities
        self._tasks = tasks

    async def compute(
        self, scopes: AnalyticsScopes, date_range: DateRange | None = None
    ) -> FinancialAnalytics:
        task_filter = reported_tasks(scopes, date_range)
        sums, task_count, activity_count = await gather_all(
            self._tasks.sum_fields(FINANCIAL_FIELDS, task_filter),
            self._tasks.count(task_filter),
            self._activities.count(all_of(scopes.activities, created_within(date_range))),
            operation="analytics.financial",
        )
        estimated = sums["estimated_cost"]
        actual = sums["actual_cost"]
        expected_impact = sums["expected_financial_impact"]
        actual_impact = sums["actual_financial_impact"]
        return FinancialAnalytics(
            total_estimated_cost=estimated,
            total_actual_cost=actual,
            cost_variance=round(actual - estimated, 2),
            cost_variance_percentage=variance_percentage(actual, estimated),
            budget_efficiency=budget_efficiency(actual, estimated),
            total_expected_impact=expected_impact,
            total_actual_impact=actual_impact,
            impact_variance=round(actual_impact - expected_impact, 2),
            impact_variance_percentage=variance_percentage(actual_impact, expected_impact),
            average_cost_per_activity=ratio(actual, activity_count),
            average_cost_per_task=ratio(actual, task_count),
        )


class ParticipationAggregator:
    """Expected vs. actual participants over reported tasks."""

    def __init__(self, activities: IEntityStore, tasks: IEntityStore) -> None:
        self._activities = activities
        self._tasks = tasks

    async def compute(
        self, scopes: AnalyticsScopes, date_range: DateRange | None = None
    ) -> ParticipationAnalytics:
        task_filter = reported_tasks(scopes, date_range)
        sums, task_count, activity_count = await gather_all(
            self._tasks.sum_fields(PARTICIPATION_FIELDS, task_filter),
            self._tasks.count(task_filter),
            self._activities.count(all_of(scopes.activities, created_within(date_range))),
            operation="analytics.participation",
        )
        expected = int(sums["expected_participants"])
        actual = int(sums["actual_participants"])
        return ParticipationAnalytics(
            total_expected_participants=expected,
            total_actual_participants=actual,
            participation_rate=percentage(actual, expected),
            average_participants_per_activity=rounded_average(actual, activity_count),
            average_participants_per_task=rounded_average(actual, task_count),
        )


class TaskPerformanceAggregator:
    """Completion rate and task density per activity."""

    def __init__(self, activities: IEntityStore, tasks: IEntityStore) -> None:
        self._activities = activities
        self._tasks = tasks

    async def compute(
        self, scopes: AnalyticsScopes, date_range: DateRange | None = None
    ) -> TaskPerformance:
        window = created_within(date_range)
        by_status, activity_count = await gather_all(
            self._tasks.group_count("status", all_of(scopes.tasks, window)),
            self._activities.count(all_of(scopes.activities, window)),
            operation="analytics.task_performance",
        )
        _, total, completed, cancelled, pending = _status_breakdown(by_status)
        return TaskPerformance(
            total_tasks=total,
            completed_tasks=completed,
            pending_tasks=pending,
            cancelled_tasks=cancelled,
            completion_rate=percentage(completed, total),
            average_tasks_per_activity=ratio(total, activity_count),
        )


class TimeSeriesAggregator:
    """Counts per 24-hour bucket of [start, end), counted from start.

    Buckets line up with UTC days only when start is midnight; each point is
    dated by the UTC date its bucket starts on.
    """

    def __init__(
        self, activities: IEntityStore, tasks: IEntityStore, reports: IEntityStore
    ) -> None:
        self._activities = activities
        self._tasks = tasks
        self._reports = reports

    async def compute(
        self, scopes: AnalyticsScopes, date_range: DateRange
    ) -> list[TimeSeriesPoint]:
        created = in_range("created_at", gte=date_range.start, lt=date_range.end)
        completed = in_range("completed_at", gte=date_range.start, lt=date_range.end)
        series = await gather_all(
            self._activities.values(("created_at",), all_of(scopes.activities, created)),
            self._tasks.values(("created_at",), all_of(scopes.tasks, created)),
            self._reports.values(("created_at",), all_of(scopes.reports, created)),
            self._tasks.values(("completed_at",), all_of(scopes.tasks, completed)),
            operation="analytics.time_series",
        )
        days = date_range.days
        buckets = [[0, 0, 0, 0] for _ in range(days)]
        for column, rows in enumerate(series):
            for (moment,) in rows:
                if moment is None:
                    continue
                offset = day_offset(date_range.start, moment)
                if 0 <= offset < days:
                    buckets[offset][column] += 1
        return [
            TimeSeriesPoint(
                date=date_range.day_start(offset).date(),
                activities=counts[0],
                tasks=counts[1],
                reports=counts[2],
                completed_tasks=counts[3],
            )
            for offset, counts in enumerate(buckets)
        ]


class LocationPerformanceAggregator:
    """Villages ranked by activities in the window, with task completion."""

    def __init__(
        self, villages: IEntityStore, activities: IEntityStore, tasks: IEntityStore
    ) -> None:
        self._villages = villages
        self._activities = activities
        self._tasks = tasks

    async def compute(
        self,
        scopes: AnalyticsScopes,
        date_range: DateRange | None = None,
        limit: int = 10,
    ) -> list[LocationPerformance]:
        window = created_within(date_range)
        task_filter = all_of(scopes.tasks, exists("activity", window))
        villages, activity_counts, task_totals, task_completed = await gather_all(
            self._villages.values(("id", "name", "cell.name"), scopes.villages),
            self._activities.group_count("village_id", all_of(scopes.activities, window)),
            self._tasks.group_count("activity.village_id", task_filter),
            self._tasks.group_count("activity.village_id", all_of(task_filter, _COMPLETED)),
            operation="analytics.location_performance",
        )
        ranked = [
            LocationPerformance(
                village_id=village_id,
                village_name=name,
                cell_name=cell_name,
                total_activities=activity_counts.get(village_id, 0),
                total_tasks=task_totals.get(village_id, 0),
                completed_tasks=task_completed.get(village_id, 0),
                completion_rate=percentage(
                    task_completed.get(village_id, 0), task_totals.get(village_id, 0)
                ),
            )
            for village_id, name, cell_name in villages
        ]
        ranked.sort(key=lambda item: (-item.total_activities, item.village_name, item.village_id))
        return ranked[:limit]


class EngagementAggregator:
    """Citizen and isibo engagement, plus the most active villages."""

    def __init__(
        self,
        users: IEntityStore,
        isibos: IEntityStore,
        reports: IEntityStore,
        location_performance: LocationPerformanceAggregator,
    ) -> None:
        self._users = users
        self._isibos = isibos
        self._reports = reports
        self._location_performance = location_performance

    async def compute(
        self,
        scopes: AnalyticsScopes,
        date_range: DateRange | None = None,
        top_villages: int = 5,
    ) -> EngagementMetrics:
        window = created_within(date_range)
        citizens, isibos, active_isibos, reports, most_active = await gather_all(
            self._users.count(all_of(scopes.users, equals("role", UserRole.CITIZEN.value))),
            self._isibos.count(scopes.isibos),
            self._isibos.count(all_of(scopes.isibos, exists("tasks", window))),
            self._reports.count(all_of(scopes.reports, window)),
            self._location_performance.compute(scopes, date_range, limit=top_villages),
            operation="analytics.engagement",
        )
        return EngagementMetrics(
            total_citizens=citizens,
            total_isibos=isibos,
            average_citizens_per_isibo=rounded_average(citizens, isibos),
            active_isibos=active_isibos,
            most_active_villages=most_active,
            report_submission_frequency=ratio(reports, date_range.days if date_range else 0),
        )
