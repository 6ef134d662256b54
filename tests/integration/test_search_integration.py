"""Global search over the SQL search adapters."""

import pytest

from app.application.dtos.search import GlobalSearchQuery, SearchFilters
from app.application.use_cases.search import AdapterBinding, SearchService
from app.domain.entities.actor import ActorContext
from app.domain.enums import ScopeTarget, SearchEntity, UserRole
from app.domain.value_objects.predicates import MATCH_ALL, equals
from app.infrastructure.persistence.repositories import (
    ActivitySearchRepository,
    CellSearchRepository,
    IsiboSearchRepository,
    ReportSearchRepository,
    TaskSearchRepository,
    UserSearchRepository,
    VillageSearchRepository,
)

pytestmark = pytest.mark.requires_db

ADMIN = ActorContext(user_id="admin", role=UserRole.ADMIN)


@pytest.fixture
def search_service(session_factory) -> SearchService:
    return SearchService(
        [
            AdapterBinding(
                SearchEntity.ACTIVITIES,
                ScopeTarget.ACTIVITY,
                ActivitySearchRepository(session_factory),
                50,
            ),
            AdapterBinding(
                SearchEntity.TASKS, ScopeTarget.TASK, TaskSearchRepository(session_factory), 50
            ),
            AdapterBinding(
                SearchEntity.REPORTS,
                ScopeTarget.REPORT,
                ReportSearchRepository(session_factory),
                50,
            ),
            AdapterBinding(
                SearchEntity.USERS, ScopeTarget.USER, UserSearchRepository(session_factory), 50
            ),
            AdapterBinding(
                SearchEntity.LOCATIONS,
                ScopeTarget.VILLAGE,
                VillageSearchRepository(session_factory),
                20,
            ),
            AdapterBinding(
                SearchEntity.LOCATIONS,
                ScopeTarget.CELL,
                CellSearchRepository(session_factory),
                20,
            ),
            AdapterBinding(
                SearchEntity.LOCATIONS,
                ScopeTarget.ISIBO,
                IsiboSearchRepository(session_factory),
                20,
            ),
        ]
    )


async def test_exact_cell_ranks_above_partial_village(search_service, seed) -> None:
    result = await search_service.global_search(GlobalSearchQuery(q="UBUMWE"), ADMIN)
    locations = result.results[SearchEntity.LOCATIONS]
    assert [(c.id, c.relevance_score) for c in locations] == [
        (seed.cell_1, 110),
        (seed.village_1, 60),
    ]
    assert locations[0].description == "Cell"
    assert locations[0].metadata == {"type": "cell", "sector": "KIMIRONKO"}
    assert locations[1].description == "Village in UBUMWE"
    assert result.total_results == 2


async def test_village_leader_search_is_scoped(search_service, seed) -> None:
    leader = ActorContext(
        user_id=seed.village_leader, role=UserRole.VILLAGE_LEADER, village_id=seed.village_1
    )
    query = GlobalSearchQuery(q="V", entities=(SearchEntity.ACTIVITIES,), size=100)
    admin_hits = await search_service.global_search(query, ADMIN)
    leader_hits = await search_service.global_search(query, leader)
    admin_ids = {c.id for c in admin_hits.results[SearchEntity.ACTIVITIES]}
    leader_ids = {c.id for c in leader_hits.results[SearchEntity.ACTIVITIES]}
    assert len(admin_ids) == 15
    assert len(leader_ids) == 10
    assert leader_ids < admin_ids


async def test_citizen_finds_nothing(search_service, seed) -> None:
    citizen = ActorContext(user_id=seed.citizen_1, role=UserRole.CITIZEN)
    result = await search_service.global_search(GlobalSearchQuery(q="a"), citizen)
    assert result.total_results == 0


async def test_pages_over_real_results(search_service, seed) -> None:
    query = dict(q="UMUGANDA", entities=(SearchEntity.ACTIVITIES,), size=4)
    counts = [
        (await search_service.global_search(GlobalSearchQuery(page=page, **query), ADMIN))
        .meta.item_count
        for page in (1, 2, 3)
    ]
    assert counts == [4, 4, 2]


async def test_activity_candidate_metadata(session_factory, seed) -> None:
    hits = await ActivitySearchRepository(session_factory).search(
        "UMUGANDA V1 #0", SearchFilters(), MATCH_ALL, 10
    )
    assert len(hits) == 1
    hit = hits[0]
    assert hit.entity_kind == SearchEntity.ACTIVITIES
    assert hit.relevance_score == 100 + 30
    assert hit.metadata["village"] == "UBUMWE BWIZA"
    assert hit.metadata["cell"] == "UBUMWE"
    assert hit.created_at.tzinfo is not None


async def test_activity_filters(session_factory, seed) -> None:
    repo = ActivitySearchRepository(session_factory)
    by_cell = await repo.search("#", SearchFilters(location_ids=(seed.cell_2,)), MATCH_ALL, 50)
    assert len(by_cell) == 5
    by_isibo = await repo.search("#", SearchFilters(isibo_ids=(seed.isibo_1,)), MATCH_ALL, 50)
    assert [hit.title for hit in by_isibo] == ["UMUGANDA V1 #0"]
    by_organizer = await repo.search(
        "#", SearchFilters(user_ids=(seed.village_leader,)), MATCH_ALL, 50
    )
    assert len(by_organizer) == 10


async def test_task_filters(session_factory, seed) -> None:
    repo = TaskSearchRepository(session_factory)
    costly = await repo.search("R", SearchFilters(min_cost=500), MATCH_ALL, 50)
    assert [hit.id for hit in costly] == [seed.completed_task]
    assert costly[0].metadata["isibo"] == "ISIBO YA MBERE"
    assert costly[0].metadata["actual_cost"] == 1200.0
    pending = await repo.search("R", SearchFilters(statuses=("pending",)), MATCH_ALL, 50)
    assert [hit.id for hit in pending] == [seed.pending_task]
    crowded = await repo.search("R", SearchFilters(min_participants=15), MATCH_ALL, 50)
    assert [hit.id for hit in crowded] == [seed.completed_task]


async def test_report_filters_and_title(session_factory, seed) -> None:
    repo = ReportSearchRepository(session_factory)
    with_evidence = await repo.search("road", SearchFilters(has_evidence=True), MATCH_ALL, 10)
    assert [hit.id for hit in with_evidence] == [seed.report]
    assert with_evidence[0].title == "Report for ROAD CLEANING"
    assert with_evidence[0].metadata["evidence_count"] == 2
    assert await repo.search("road", SearchFilters(has_evidence=False), MATCH_ALL, 10) == []
    attended = await repo.search(
        "rain", SearchFilters(user_ids=(seed.citizen_2,)), MATCH_ALL, 10
    )
    assert len(attended) == 1
    outsider = SearchFilters(user_ids=(seed.citizen_3,))
    assert await repo.search("rain", outsider, MATCH_ALL, 10) == []


async def test_user_search_by_email_and_location(session_factory, seed) -> None:
    repo = UserSearchRepository(session_factory)
    hits = await repo.search("grace@", SearchFilters(), MATCH_ALL, 10)
    assert [hit.id for hit in hits] == [seed.citizen_2]
    assert hits[0].description == "CITIZEN - grace@example.rw"
    assert hits[0].metadata["village"] == "UBUMWE BWIZA"
    in_house = await repo.search(
        "@", SearchFilters(location_ids=(seed.house_1,)), MATCH_ALL, 10
    )
    assert {hit.id for hit in in_house} == {seed.citizen_1, seed.citizen_2}


async def test_adapter_limit_and_scope(session_factory, seed) -> None:
    repo = ActivitySearchRepository(session_factory)
    assert len(await repo.search("V1", SearchFilters(), MATCH_ALL, 3)) == 3
    scoped = await repo.search("#", SearchFilters(), equals("village_id", seed.village_2), 50)
    assert {hit.metadata["village"] for hit in scoped} == {"INTWARI"}
