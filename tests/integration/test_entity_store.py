"""SqlEntityStore integration tests over a seeded SQLite database."""

import pytest

from app.domain.exceptions import UpstreamFailureException
from app.domain.value_objects.predicates import (
    MATCH_NONE,
    all_of,
    count_in_range,
    equals,
    exists,
    in_range,
    negate,
    not_blank,
    text_match,
)
from app.infrastructure.persistence.models import (
    Activity,
    House,
    Isibo,
    Report,
    Task,
    User,
    Village,
)
from app.infrastructure.persistence.repositories import SqlEntityStore

pytestmark = pytest.mark.requires_db


async def test_count_through_relationship_path(session_factory, seed) -> None:
    tasks = SqlEntityStore(session_factory, Task)
    assert await tasks.count() == 2
    assert await tasks.count(equals("isibo.village_id", seed.village_1)) == 1
    assert await tasks.count(equals("isibo.village.cell_id", seed.cell_2)) == 1


async def test_count_through_collection_does_not_duplicate_rows(session_factory, seed) -> None:
    activities = SqlEntityStore(session_factory, Activity)
    assert await activities.count() == 15
    assert await activities.count(exists("tasks.reports")) == 1
    assert await activities.count(negate(exists("tasks"))) == 13


async def test_match_none_short_circuits(session_factory, seed) -> None:
    activities = SqlEntityStore(session_factory, Activity)
    assert await activities.count(MATCH_NONE) == 0
    assert await activities.group_count("status", MATCH_NONE) == {}
    assert await activities.values(("id",), MATCH_NONE) == []
    assert await activities.sum_fields(("x",), MATCH_NONE) == {"x": 0.0}


async def test_group_count_across_many_to_one(session_factory, seed) -> None:
    activities = SqlEntityStore(session_factory, Activity)
    by_village = await activities.group_count("village_id")
    assert by_village == {seed.village_1: 10, seed.village_2: 5}
    by_cell = await activities.group_count("village.cell_id")
    assert by_cell == {seed.cell_1: 10, seed.cell_2: 5}


async def test_sum_fields_and_empty_sum(session_factory, seed) -> None:
    tasks = SqlEntityStore(session_factory, Task)
    sums = await tasks.sum_fields(("estimated_cost", "actual_cost"))
    assert sums == {"estimated_cost": 1000.0, "actual_cost": 1200.0}
    empty = await tasks.sum_fields(("actual_cost",), equals("status", "cancelled"))
    assert empty == {"actual_cost": 0.0}


async def test_count_in_range_counts_related_rows(session_factory, seed) -> None:
    houses = SqlEntityStore(session_factory, House)
    assert await houses.values(("id",), count_in_range("members", gte=2)) == [(seed.house_1,)]
    assert await houses.values(("id",), count_in_range("members", lte=1)) == [(seed.house_2,)]
    assert await houses.count(count_in_range("members", gte=1, lte=2)) == 2
    assert await houses.count(count_in_range("members", gte=3)) == 0


async def test_count_in_range_across_nested_collections(session_factory, seed) -> None:
    isibos = SqlEntityStore(session_factory, Isibo)
    assert await isibos.values(("id",), count_in_range("houses.members", gte=2)) == [
        (seed.isibo_1,)
    ]
    assert await isibos.values(("id",), count_in_range("houses.members", lte=1)) == [
        (seed.isibo_2,)
    ]


async def test_values_newest_first_with_limit(session_factory, seed) -> None:
    activities = SqlEntityStore(session_factory, Activity)
    rows = await activities.values(
        ("title", "village.name"), equals("village_id", seed.village_1), limit=3
    )
    assert rows == [
        ("UMUGANDA V1 #0", "UBUMWE BWIZA"),
        ("UMUGANDA V1 #1", "UBUMWE BWIZA"),
        ("UMUGANDA V1 #2", "UBUMWE BWIZA"),
    ]


async def test_values_rejects_collection_paths(session_factory, seed) -> None:
    villages = SqlEntityStore(session_factory, Village)
    with pytest.raises(ValueError, match="collection"):
        await villages.values(("isibos.name",))


async def test_text_match_is_case_insensitive_and_escapes_wildcards(
    session_factory, seed
) -> None:
    users = SqlEntityStore(session_factory, User)
    assert await users.count(text_match(("names", "email"), "eric")) == 1
    assert await users.count(text_match(("names",), "%")) == 0
    assert await users.count(text_match(("email",), "_")) == 0


async def test_not_blank_and_range(session_factory, seed) -> None:
    reports = SqlEntityStore(session_factory, Report)
    assert await reports.count(not_blank("challenges_faced")) == 1
    assert await reports.count(not_blank("materials_used")) == 0
    tasks = SqlEntityStore(session_factory, Task)
    assert await tasks.count(in_range("estimated_cost", gte=500, lte=1500)) == 1
    assert await tasks.count(all_of(in_range("expected_participants", lt=15))) == 1


async def test_find_many_loads_relationships(session_factory, seed) -> None:
    tasks = SqlEntityStore(session_factory, Task)
    rows = await tasks.find_many(limit=10, load=("activity.village", "isibo"))
    assert {row.activity.village.name for row in rows} == {"UBUMWE BWIZA", "INTWARI"}
    assert await tasks.find_many(limit=0) == []


async def test_database_errors_surface_as_upstream_failure(tmp_path) -> None:
    from sqlalchemy.ext.asyncio import create_async_engine

    from app.infrastructure.persistence.database import build_session_factory

    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'empty.db'}")
    try:
        store = SqlEntityStore(build_session_factory(engine), Activity)
        with pytest.raises(UpstreamFailureException) as exc_info:
            await store.count()
        assert exc_info.value.details["operation"] == "activity.count"
    finally:
        await engine.dispose()
