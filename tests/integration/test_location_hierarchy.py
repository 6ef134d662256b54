"""Location hierarchy and actor repository integration tests."""

import pytest

from app.domain.enums import LocationType, UserRole
from app.domain.exceptions import ResourceNotFoundException
from app.infrastructure.persistence.repositories import (
    ActorRepository,
    LocationHierarchyRepository,
)

pytestmark = pytest.mark.requires_db


async def test_get_node_searches_every_level(session_factory, seed) -> None:
    repo = LocationHierarchyRepository(session_factory)
    node = await repo.get_node(seed.isibo_1)
    assert node is not None
    assert (node.name, node.type, node.parent_id) == (
        "ISIBO YA MBERE",
        LocationType.ISIBO,
        seed.village_1,
    )
    assert await repo.get_node(seed.isibo_1, LocationType.CELL) is None
    assert await repo.get_node("missing") is None


async def test_ancestor_chain_runs_up_to_the_province(session_factory, seed) -> None:
    chain = await LocationHierarchyRepository(session_factory).get_ancestor_chain(seed.house_1)
    assert [node.type for node in chain] == list(reversed(LocationType))
    assert [node.id for node in chain] == [
        seed.house_1,
        seed.isibo_1,
        seed.village_1,
        seed.cell_1,
        seed.sector_id,
        seed.district_id,
        seed.province_id,
    ]
    assert chain[0].name == "H-001"


async def test_ancestor_chain_unknown_node(session_factory, seed) -> None:
    with pytest.raises(ResourceNotFoundException) as exc_info:
        await LocationHierarchyRepository(session_factory).get_ancestor_chain("missing")
    assert exc_info.value.error_code == "RESOURCE_NOT_FOUND"


async def test_ancestor_chain_with_dangling_parent(session_factory, seed, monkeypatch) -> None:
    repo = LocationHierarchyRepository(session_factory)
    fetch = repo._fetch

    async def without_isibos(session, level, node_id):
        if level is LocationType.ISIBO:
            return None
        return await fetch(session, level, node_id)

    monkeypatch.setattr(repo, "_fetch", without_isibos)
    with pytest.raises(ResourceNotFoundException) as exc_info:
        await repo.get_ancestor_chain(seed.house_1, LocationType.HOUSE)
    assert seed.isibo_1 in str(exc_info.value)


async def test_children_ordered_by_name(session_factory, seed) -> None:
    repo = LocationHierarchyRepository(session_factory)
    cells = await repo.get_children(seed.sector_id, LocationType.SECTOR)
    assert [cell.name for cell in cells] == ["AMAHORO", "UBUMWE"]
    assert all(cell.parent_id == seed.sector_id for cell in cells)
    assert await repo.get_children(seed.house_1, LocationType.HOUSE) == []


async def test_actor_from_profile(session_factory, seed) -> None:
    actor = await ActorRepository(session_factory).get_actor(seed.village_leader)
    assert actor is not None
    assert actor.role == UserRole.VILLAGE_LEADER
    assert actor.jurisdiction == (LocationType.VILLAGE, seed.village_1)


async def test_leader_without_profile_binding_falls_back_to_led_node(
    session_factory, seed
) -> None:
    actor = await ActorRepository(session_factory).get_actor(seed.cell_leader)
    assert actor is not None
    assert actor.jurisdiction == (LocationType.CELL, seed.cell_1)


async def test_inactive_or_unknown_user_has_no_actor(session_factory, seed) -> None:
    repo = ActorRepository(session_factory)
    assert await repo.get_actor(seed.inactive) is None
    assert await repo.get_actor("missing") is None


async def test_citizen_actor_has_no_jurisdiction(session_factory, seed) -> None:
    actor = await ActorRepository(session_factory).get_actor(seed.citizen_1)
    assert actor is not None
    assert actor.role == UserRole.CITIZEN
    assert actor.jurisdiction is None
    assert actor.isibo_id == seed.isibo_1
