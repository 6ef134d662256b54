"""Analytics API schemas.

Response models mirror the application DTOs and are built from them with
model_validate (from_attributes), so field names stay identical.
"""

import datetime as dt

from pydantic import BaseModel, ConfigDict, Field


class _FromDTO(BaseModel):
    model_config = ConfigDict(from_attributes=True)


class DateRangeResponse(_FromDTO):
    """Window the metrics were computed over (UTC)."""

    start: dt.datetime
    end: dt.datetime
    days: int = Field(..., description="Calendar-day buckets covering the window")


class RoleCountResponse(_FromDTO):
    role: str
    count: int
    percentage: int


class UserDistributionResponse(_FromDTO):
    total_users: int
    by_role: list[RoleCountResponse] = Field(default_factory=list)


class LocationCoverageResponse(_FromDTO):
    total_cells: int
    total_villages: int
    villages_with_leaders: int
    villages_without_leaders: int
    village_leadership_coverage: int
    total_isibos: int
    isibos_with_leaders: int
    isibos_without_leaders: int
    isibo_leadership_coverage: int


class ActivityStatsResponse(_FromDTO):
    total_activities: int
    activities_with_reports: int
    activities_without_reports: int
    activity_reporting_rate: int
    total_tasks: int
    completed_tasks: int
    cancelled_tasks: int
    pending_tasks: int
    task_completion_rate: int
    tasks_by_status: dict[str, int] = Field(default_factory=dict)


class ReportStatsResponse(_FromDTO):
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


class FinancialAnalyticsResponse(_FromDTO):
    total_estimated_cost: float
    total_actual_cost: float
    cost_variance: float
    cost_variance_percentage: float
    budget_efficiency: float = Field(
        ..., description="Actual cost as a percentage of estimated cost (100 when nothing was estimated)"
    )
    total_expected_impact: float
    total_actual_impact: float
    impact_variance: float
    impact_variance_percentage: float
    average_cost_per_activity: float
    average_cost_per_task: float


class ParticipationAnalyticsResponse(_FromDTO):
    total_expected_participants: int
    total_actual_participants: int
    participation_rate: int
    average_participants_per_activity: int
    average_participants_per_task: int


class TaskPerformanceResponse(_FromDTO):
    total_tasks: int
    completed_tasks: int
    pending_tasks: int
    cancelled_tasks: int
    completion_rate: int
    average_tasks_per_activity: float


class CoreMetricsResponse(_FromDTO):
    """All metric families for the caller's scope."""

    user_distribution: UserDistributionResponse
    location_coverage: LocationCoverageResponse
    activity_stats: ActivityStatsResponse
    report_stats: ReportStatsResponse
    financial: FinancialAnalyticsResponse
    participation: ParticipationAnalyticsResponse
    task_performance: TaskPerformanceResponse
    date_range: DateRangeResponse


class TimeSeriesPointResponse(_FromDTO):
    date: dt.date
    activities: int
    tasks: int
    reports: int
    completed_tasks: int


class LocationPerformanceResponse(_FromDTO):
    village_id: str
    village_name: str
    cell_name: str | None = None
    total_activities: int
    total_tasks: int
    completed_tasks: int
    completion_rate: int


class EngagementMetricsResponse(_FromDTO):
    total_citizens: int
    total_isibos: int
    average_citizens_per_isibo: int
    active_isibos: int
    most_active_villages: list[LocationPerformanceResponse] = Field(default_factory=list)
    report_submission_frequency: float = Field(..., description="Reports per day over the window")


class DashboardSummaryResponse(_FromDTO):
    """Core metrics, daily series, village ranking and engagement in one payload."""

    core_metrics: CoreMetricsResponse
    time_series: list[TimeSeriesPointResponse]
    location_performance: list[LocationPerformanceResponse]
    engagement: EngagementMetricsResponse
    generated_at: dt.datetime
    date_range: DateRangeResponse
