"""DTOs for role-scoped analytics (no dependency on ORM)."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime

from app.domain.enums import TimeRange
from app.domain.value_objects import DateRange


@dataclass(frozen=True)
class AnalyticsQuery:
    """Analytics request window and optional location narrowing.

    Explicit start/end win over time_range; supplying only one of them is
    rejected. With neither, time_range (or the configured default) applies.
    """

    time_range: TimeRange | None = None
    start_date: datetime | None = None
    end_date: datetime | None = None
    location_id: str | None = None


@dataclass
class RoleCount:
    role: str
    count: int
    percentage: int


@dataclass
class UserDistribution:
    total_users: int
    by_role: list[RoleCount]


@dataclass
class LocationCoverage:
    total_cells: int
    total_villages: int
    villages_with_leaders: int
    villages_without_leaders: int
    village_leadership_coverage: int
    total_isibos: int
    isibos_with_leaders: int
    isibos_without_leaders: int
    isibo_leadership_coverage: int


@dataclass
class ActivityStats:
    total_activities: int
    activities_with_reports: int
    activities_without_reports: int
    activity_reporting_rate: int
    total_tasks: int
    completed_tasks: int
    cancelled_tasks: int
    pending_tasks: int
    task_completion_rate: int
    tasks_by_status: dict[str, int] = field(default_factory=dict)


@dataclass
class ReportStats:
    total_reports: int
    reports_with_evidence: int
    reports_without_evidence: int
    evidence_percentage: int
    total_attendance: int
    average_attendance: int
    reports_with_challenges: int
    reports_with_suggestions: int
    reports_with_materials: int
    average_evidence_per_report: float


@dataclass
class FinancialAnalytics:
    total_estimated_cost: float
    total_actual_cost: float
    cost_variance: float
    cost_variance_percentage: float
    budget_efficiency: float
    total_expected_impact: float
    total_actual_impact: float
    impact_variance: float
    impact_variance_percentage: float
    average_cost_per_activity: float
    average_cost_per_task: float


@dataclass
class ParticipationAnalytics:
    total_expected_participants: int
    total_actual_participants: int
    participation_rate: int
    average_participants_per_activity: int
    average_participants_per_task: int


@dataclass
class TaskPerformance:
    total_tasks: int
    completed_tasks: int
    pending_tasks: int
    cancelled_tasks: int
    completion_rate: int
    average_tasks_per_activity: float


@dataclass
class CoreMetrics:
    """Composite of all metric families for one scope and window."""

    user_distribution: UserDistribution
    location_coverage: LocationCoverage
    activity_stats: ActivityStats
    report_stats: ReportStats
    financial: FinancialAnalytics
    participation: ParticipationAnalytics
    task_performance: TaskPerformance
    date_range: DateRange


@dataclass
class TimeSeriesPoint:
    date: date
    activities: int
    tasks: int
    reports: int
    completed_tasks: int


@dataclass
class LocationPerformance:
    village_id: str
    village_name: str
    cell_name: str | None
    total_activities: int
    total_tasks: int
    completed_tasks: int
    completion_rate: int


@dataclass
class EngagementMetrics:
    total_citizens: int
    total_isibos: int
    average_citizens_per_isibo: int
    active_isibos: int
    most_active_villages: list[LocationPerformance]
    report_submission_frequency: float


@dataclass
class DashboardSummary:
    core_metrics: CoreMetrics
    time_series: list[TimeSeriesPoint]
    location_performance: list[LocationPerformance]
    engagement: EngagementMetrics
    generated_at: datetime
    date_range: DateRange
