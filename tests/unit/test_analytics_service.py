"""Unit tests for AnalyticsService: window resolution, scope narrowing, orchestration."""

import asyncio
from datetime import UTC, datetime, timedelta
from unittest.mock import AsyncMock

import pytest

from app.application.dtos.analytics import AnalyticsQuery
from app.application.use_cases.analytics import AnalyticsService, AnalyticsStores
from app.domain.entities.actor import ActorContext
from app.domain.entities.location import LocationNode
from app.domain.enums import LocationType, TimeRange, UserRole
from app.domain.exceptions import (
    ResourceNotFoundException,
    ScopeViolationException,
    UpstreamTimeoutException,
    ValidationException,
)
from app.domain.value_objects.predicates import MATCH_ALL, MATCH_NONE, And, Equals

NOW = datetime(2024, 2, 29, 12, tzinfo=UTC)

CHAIN = [
    LocationNode("v1", "UBUMWE BWIZA", LocationType.VILLAGE, "c1"),
    LocationNode("c1", "UBUMWE", LocationType.CELL, "s1"),
    LocationNode("s1", "KIMIRONKO", LocationType.SECTOR, "d1"),
    LocationNode("d1", "GASABO", LocationType.DISTRICT, "p1"),
    LocationNode("p1", "KIGALI", LocationType.PROVINCE),
]

ADMIN = ActorContext(user_id="admin", role=UserRole.ADMIN)
CELL_LEADER = ActorContext(user_id="u1", role=UserRole.CELL_LEADER, cell_id="c1")
VILLAGE_LEADER = ActorContext(user_id="u2", role=UserRole.VILLAGE_LEADER, village_id="v1")
OTHER_VILLAGE_LEADER = ActorContext(
    user_id="u3", role=UserRole.VILLAGE_LEADER, village_id="v2"
)


def _hierarchy(chain: list[LocationNode] = CHAIN) -> AsyncMock:
    hierarchy = AsyncMock()
    hierarchy.get_ancestor_chain.return_value = chain
    return hierarchy


def _service(
    stores: AnalyticsStores, hierarchy: AsyncMock | None = None, **kwargs
) -> AnalyticsService:
    return AnalyticsService(stores, hierarchy or _hierarchy(), clock=lambda: NOW, **kwargs)


class TestResolveDateRange:
    def test_explicit_bounds_win(self, mock_stores: AnalyticsStores) -> None:
        start = datetime(2024, 1, 1, tzinfo=UTC)
        end = datetime(2024, 1, 8, tzinfo=UTC)
        window = _service(mock_stores).resolve_date_range(
            AnalyticsQuery(time_range=TimeRange.LAST_90_DAYS, start_date=start, end_date=end)
        )
        assert (window.start, window.end) == (start, end)

    @pytest.mark.parametrize("missing", ["start_date", "end_date"])
    def test_one_bound_alone_is_rejected(
        self, mock_stores: AnalyticsStores, missing: str
    ) -> None:
        bounds = {"start_date": NOW - timedelta(days=1), "end_date": NOW}
        bounds[missing] = None
        with pytest.raises(ValidationException) as exc_info:
            _service(mock_stores).resolve_date_range(AnalyticsQuery(**bounds))
        assert exc_info.value.details["field"] == missing

    def test_end_before_start_is_rejected(self, mock_stores: AnalyticsStores) -> None:
        with pytest.raises(ValidationException):
            _service(mock_stores).resolve_date_range(
                AnalyticsQuery(start_date=NOW, end_date=NOW - timedelta(days=1))
            )

    @pytest.mark.parametrize(
        ("preset", "days"),
        [(TimeRange.LAST_7_DAYS, 7), (TimeRange.LAST_30_DAYS, 30), (TimeRange.LAST_90_DAYS, 90)],
    )
    def test_presets_end_now(
        self, mock_stores: AnalyticsStores, preset: TimeRange, days: int
    ) -> None:
        window = _service(mock_stores).resolve_date_range(AnalyticsQuery(time_range=preset))
        assert window.end == NOW
        assert window.start == NOW - timedelta(days=days)

    def test_last_year_from_leap_day(self, mock_stores: AnalyticsStores) -> None:
        window = _service(mock_stores).resolve_date_range(
            AnalyticsQuery(time_range=TimeRange.LAST_YEAR)
        )
        assert window.start == datetime(2023, 2, 28, 12, tzinfo=UTC)

    def test_configured_default(self, mock_stores: AnalyticsStores) -> None:
        service = _service(mock_stores, default_time_range=TimeRange.LAST_7_DAYS)
        assert service.resolve_date_range(AnalyticsQuery()).days == 7


class TestResolveScopes:
    async def test_without_location_uses_actor_scopes(
        self, mock_stores: AnalyticsStores
    ) -> None:
        hierarchy = _hierarchy()
        scopes = await _service(mock_stores, hierarchy).resolve_scopes(VILLAGE_LEADER)
        assert scopes.activities == Equals("village_id", "v1")
        assert scopes.cells == Equals("villages.id", "v1")
        hierarchy.get_ancestor_chain.assert_not_awaited()

    async def test_admin_narrowed_to_village(self, mock_stores: AnalyticsStores) -> None:
        scopes = await _service(mock_stores).resolve_scopes(ADMIN, "v1")
        assert scopes.activities == Equals("village_id", "v1")
        assert scopes.tasks == Equals("isibo.village_id", "v1")

    async def test_cell_leader_may_narrow_to_village_in_cell(
        self, mock_stores: AnalyticsStores
    ) -> None:
        scopes = await _service(mock_stores).resolve_scopes(CELL_LEADER, "v1")
        assert scopes.activities == And(
            (Equals("village.cell_id", "c1"), Equals("village_id", "v1"))
        )

    async def test_location_outside_jurisdiction_is_a_scope_violation(
        self, mock_stores: AnalyticsStores
    ) -> None:
        with pytest.raises(ScopeViolationException) as exc_info:
            await _service(mock_stores).resolve_scopes(OTHER_VILLAGE_LEADER, "v1")
        assert exc_info.value.details["location_id"] == "v1"

    async def test_location_must_be_cell_village_or_isibo(
        self, mock_stores: AnalyticsStores
    ) -> None:
        service = _service(mock_stores, _hierarchy(CHAIN[2:]))
        with pytest.raises(ValidationException, match="sector"):
            await service.resolve_scopes(ADMIN, "s1")

    async def test_unknown_location_propagates_not_found(
        self, mock_stores: AnalyticsStores
    ) -> None:
        hierarchy = AsyncMock()
        hierarchy.get_ancestor_chain.side_effect = ResourceNotFoundException("location", "x")
        with pytest.raises(ResourceNotFoundException):
            await _service(mock_stores, hierarchy).resolve_scopes(ADMIN, "x")

    async def test_unbound_leader_is_rejected(self, mock_stores: AnalyticsStores) -> None:
        actor = ActorContext(user_id="u9", role=UserRole.ISIBO_LEADER)
        with pytest.raises(ScopeViolationException):
            await _service(mock_stores).resolve_scopes(actor)

    async def test_citizen_scopes_match_nothing(self, mock_stores: AnalyticsStores) -> None:
        actor = ActorContext(user_id="u8", role=UserRole.CITIZEN)
        scopes = await _service(mock_stores).resolve_scopes(actor)
        assert scopes.reports is MATCH_NONE
        assert scopes.users is MATCH_NONE


async def test_core_metrics_over_empty_stores(mock_stores: AnalyticsStores) -> None:
    metrics = await _service(mock_stores).get_core_metrics(
        AnalyticsQuery(time_range=TimeRange.LAST_7_DAYS), ADMIN
    )
    assert metrics.user_distribution.total_users == 0
    assert metrics.activity_stats.total_activities == 0
    assert metrics.financial.budget_efficiency == 100.0
    assert metrics.participation.participation_rate == 0
    assert metrics.date_range.days == 7
    mock_stores.users.group_count.assert_awaited_once_with("role", MATCH_ALL)


async def test_time_series_window_is_bounded(mock_stores: AnalyticsStores) -> None:
    service = _service(mock_stores, max_time_series_days=30)
    with pytest.raises(ValidationException, match="at most 30 days"):
        await service.get_time_series(AnalyticsQuery(time_range=TimeRange.LAST_YEAR), ADMIN)


async def test_time_series_one_point_per_day(mock_stores: AnalyticsStores) -> None:
    start = datetime(2024, 3, 1, tzinfo=UTC)
    points = await _service(mock_stores).get_time_series(
        AnalyticsQuery(start_date=start, end_date=start + timedelta(days=7)), VILLAGE_LEADER
    )
    assert len(points) == 7
    assert points[0].date == start.date()


async def test_location_performance_uses_configured_limit(
    mock_stores: AnalyticsStores,
) -> None:
    mock_stores.villages.values.return_value = [(f"v{n}", f"V{n:02d}", "C1") for n in range(15)]
    ranked = await _service(mock_stores, top_villages_limit=3).get_location_performance(
        AnalyticsQuery(), ADMIN
    )
    assert [v.village_name for v in ranked] == ["V00", "V01", "V02"]


async def test_dashboard_summary_combines_every_part(mock_stores: AnalyticsStores) -> None:
    summary = await _service(mock_stores).get_dashboard_summary(
        AnalyticsQuery(time_range=TimeRange.LAST_7_DAYS), CELL_LEADER
    )
    assert summary.generated_at == NOW
    assert summary.date_range.days == 7
    assert len(summary.time_series) == 7
    assert summary.location_performance == []
    assert summary.engagement.most_active_villages == []
    assert summary.core_metrics.date_range == summary.date_range


async def test_slow_store_times_out(mock_stores: AnalyticsStores) -> None:
    async def slow_count(predicate=None) -> int:
        await asyncio.sleep(1)
        return 0

    mock_stores.cells.count.side_effect = slow_count
    service = _service(mock_stores, timeout_seconds=0.05)
    with pytest.raises(UpstreamTimeoutException):
        await service.get_core_metrics(AnalyticsQuery(), ADMIN)
