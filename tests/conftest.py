"""Pytest configuration and fixtures for community-admin.

Uses app.main:create_app for HTTP tests and an aiosqlite database file
per test for repository/integration tests. Required settings are set in
the environment before anything reads them. All imports use app.*.
"""

import os
from collections.abc import AsyncIterator
from datetime import timedelta
from types import SimpleNamespace
from unittest.mock import AsyncMock

os.environ.setdefault("SECRET_KEY", "test-secret-key-not-for-production")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from app.application.use_cases.analytics import AnalyticsStores
from app.core.config import get_settings
from app.domain.enums import TaskStatus, UserRole
from app.infrastructure.persistence.database import Base, build_session_factory
from app.infrastructure.persistence.models import (
    Activity,
    Cell,
    District,
    House,
    Isibo,
    Profile,
    Province,
    Report,
    ReportAttendance,
    ReportEvidence,
    Sector,
    Task,
    User,
    Village,
)
from app.main import create_app
from app.shared.utils.datetime import utc_now

get_settings.cache_clear()


@pytest.fixture
def app() -> FastAPI:
    """Fresh FastAPI app; dependency overrides do not leak between tests."""
    application = create_app()
    yield application
    application.dependency_overrides.clear()


@pytest.fixture
async def client(app: FastAPI) -> AsyncIterator[AsyncClient]:
    """Async HTTP client against the FastAPI app (ASGI)."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def mock_stores() -> AnalyticsStores:
    """Entity stores that match nothing: zero counts, empty groups and rows."""

    def store() -> AsyncMock:
        mock = AsyncMock()
        mock.count.return_value = 0
        mock.group_count.return_value = {}
        mock.values.return_value = []
        mock.sum_fields.side_effect = lambda fields, predicate=None: {f: 0.0 for f in fields}
        return mock

    return AnalyticsStores(
        users=store(),
        cells=store(),
        villages=store(),
        isibos=store(),
        activities=store(),
        tasks=store(),
        reports=store(),
        report_evidence=store(),
        report_attendance=store(),
    )


@pytest.fixture
async def session_factory(tmp_path) -> AsyncIterator[async_sessionmaker[AsyncSession]]:
    """Session factory over a fresh SQLite file with the full schema created.

    A file (not :memory:) so the concurrent per-query sessions of the
    stores all see the same data.
    """
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'community.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield build_session_factory(engine)
    await engine.dispose()


@pytest.fixture
async def seed(session_factory: async_sessionmaker[AsyncSession]) -> SimpleNamespace:
    """Small two-cell community.

    KIGALI > GASABO > KIMIRONKO > {UBUMWE (C1), AMAHORO (C2)}
    C1 > UBUMWE BWIZA (V1) > ISIBO YA MBERE (I1) > H-001 (2 members)
    C2 > INTWARI (V2) > ISIBO YA KABIRI (I2) > H-002 (1 member)

    V1 has 10 activities, V2 has 5. One V1 task is completed and reported
    (with evidence and attendance); one V2 task is pending, unreported and
    has no estimated cost.
    """
    now = utc_now()
    recent = now - timedelta(days=1)

    province = Province(name="KIGALI", created_at=recent)
    district = District(name="GASABO", province=province, created_at=recent)
    sector = Sector(name="KIMIRONKO", district=district, created_at=recent)

    admin = User(names="ADMIN USER", email="admin@example.rw", role=UserRole.ADMIN.value)
    cell_leader = User(
        names="ALICE UWASE", email="alice@example.rw", role=UserRole.CELL_LEADER.value
    )
    village_leader = User(
        names="JEAN MUGABO", email="jean@example.rw", role=UserRole.VILLAGE_LEADER.value
    )
    isibo_leader = User(
        names="DIANE ISHIMWE", email="diane@example.rw", role=UserRole.ISIBO_LEADER.value
    )
    citizen_1 = User(names="ERIC NDAYISABA", email="eric@example.rw", phone="0788000001")
    citizen_2 = User(names="GRACE MUKAMANA", email="grace@example.rw", phone="0788000002")
    citizen_3 = User(names="PAUL HABIMANA", email="paul@example.rw", phone="0788000003")
    inactive = User(names="OLD ACCOUNT", email="old@example.rw", is_active=False)

    cell_1 = Cell(
        name="UBUMWE", sector=sector, has_leader=True, leader=cell_leader, created_at=recent
    )
    cell_2 = Cell(name="AMAHORO", sector=sector, created_at=recent - timedelta(hours=1))
    village_1 = Village(
        name="UBUMWE BWIZA",
        cell=cell_1,
        has_leader=True,
        leader=village_leader,
        created_at=recent,
    )
    village_2 = Village(name="INTWARI", cell=cell_2, created_at=recent)
    isibo_1 = Isibo(
        name="ISIBO YA MBERE",
        village=village_1,
        has_leader=True,
        leader=isibo_leader,
        created_at=recent,
    )
    isibo_2 = Isibo(name="ISIBO YA KABIRI", village=village_2, created_at=recent)
    house_1 = House(
        code="H-001",
        address="KG 11 AVE",
        isibo=isibo_1,
        representative=citizen_1,
        created_at=recent,
    )
    house_2 = House(code="H-002", isibo=isibo_2, created_at=recent)

    profiles = [
        Profile(user=village_leader, village=village_1),
        Profile(user=isibo_leader, village=village_1, isibo=isibo_1),
        Profile(user=cell_leader),
        Profile(user=citizen_1, village=village_1, isibo=isibo_1, house=house_1),
        Profile(user=citizen_2, village=village_1, isibo=isibo_1, house=house_1),
        Profile(user=citizen_3, village=village_2, isibo=isibo_2, house=house_2),
    ]

    v1_activities = [
        Activity(
            title=f"UMUGANDA V1 #{n}",
            description="Monthly community work",
            village=village_1,
            organizer=village_leader,
            created_at=recent - timedelta(minutes=n),
        )
        for n in range(10)
    ]
    v2_activities = [
        Activity(
            title=f"CLEAN WATER V2 #{n}",
            village=village_2,
            created_at=recent - timedelta(minutes=n),
        )
        for n in range(5)
    ]
    completed_task = Task(
        title="ROAD CLEANING",
        description="Clear the main road",
        activity=v1_activities[0],
        isibo=isibo_1,
        status=TaskStatus.COMPLETED.value,
        estimated_cost=1000,
        actual_cost=1200,
        expected_participants=20,
        actual_participants=15,
        expected_financial_impact=5000,
        actual_financial_impact=4000,
        completed_at=recent,
        created_at=recent,
    )
    pending_task = Task(
        title="WATER PIPE REPAIR",
        activity=v2_activities[0],
        isibo=isibo_2,
        status=TaskStatus.PENDING.value,
        expected_participants=10,
        created_at=recent,
    )
    report = Report(
        activity=v1_activities[0],
        task=completed_task,
        comment="Road cleaned before the rains",
        suggestions="Buy more hoes",
        challenges_faced="Rain",
        created_at=recent,
    )
    evidence = [
        ReportEvidence(report=report, url="https://files.example.rw/1.jpg"),
        ReportEvidence(report=report, url="https://files.example.rw/2.jpg"),
    ]
    attendance = [
        ReportAttendance(report=report, user=citizen_1),
        ReportAttendance(report=report, user=citizen_2),
    ]

    async with session_factory() as session:
        session.add_all(
            [
                province,
                admin,
                inactive,
                *profiles,
                *v1_activities,
                *v2_activities,
                completed_task,
                pending_task,
                report,
                *evidence,
                *attendance,
                house_1,
                house_2,
            ]
        )
        await session.commit()

    return SimpleNamespace(
        now=now,
        province_id=province.id,
        district_id=district.id,
        sector_id=sector.id,
        cell_1=cell_1.id,
        cell_2=cell_2.id,
        village_1=village_1.id,
        village_2=village_2.id,
        isibo_1=isibo_1.id,
        isibo_2=isibo_2.id,
        house_1=house_1.id,
        house_2=house_2.id,
        admin=admin.id,
        cell_leader=cell_leader.id,
        village_leader=village_leader.id,
        isibo_leader=isibo_leader.id,
        citizen_1=citizen_1.id,
        citizen_2=citizen_2.id,
        citizen_3=citizen_3.id,
        inactive=inactive.id,
        completed_task=completed_task.id,
        pending_task=pending_task.id,
        report=report.id,
    )
