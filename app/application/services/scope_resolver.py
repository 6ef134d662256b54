"""Scope resolver: which records of a target kind an actor may see.

Table driven. JURISDICTION_PATHS maps (jurisdiction level, target) to
the relationship paths that lead from a target record to the id of the
governing node; a record is visible when any of those paths equals the
actor's bound node. Ancestors of the node (sector, district, province)
are visible through their descendants.

Policy is fail-closed throughout:
- ADMIN sees everything.
- A leader without a bound node at its level raises ScopeViolationException.
- Roles without jurisdiction and unmapped (level, target) pairs see nothing.
"""

from collections.abc import Iterable

from app.domain.entities.actor import ActorContext
from app.domain.enums import LocationType, ScopeTarget
from app.domain.exceptions import ScopeViolationException
from app.domain.value_objects.predicates import (
    MATCH_ALL,
    MATCH_NONE,
    Predicate,
    any_of,
    equals,
)

_C, _V, _I = LocationType.CELL, LocationType.VILLAGE, LocationType.ISIBO
T = ScopeTarget

JURISDICTION_PATHS: dict[tuple[LocationType, ScopeTarget], tuple[str, ...]] = {
    # Cell leader
    (_C, T.PROVINCE): ("districts.sectors.cells.id",),
    (_C, T.DISTRICT): ("sectors.cells.id",),
    (_C, T.SECTOR): ("cells.id",),
    (_C, T.CELL): ("id",),
    (_C, T.VILLAGE): ("cell_id",),
    (_C, T.ISIBO): ("village.cell_id",),
    (_C, T.HOUSE): ("isibo.village.cell_id",),
    (_C, T.USER): (
        "profile.cell_id",
        "profile.village.cell_id",
        "profile.isibo.village.cell_id",
    ),
    (_C, T.ACTIVITY): ("village.cell_id",),
    (_C, T.TASK): ("isibo.village.cell_id",),
    (_C, T.REPORT): ("task.isibo.village.cell_id",),
    # Village leader
    (_V, T.PROVINCE): ("districts.sectors.cells.villages.id",),
    (_V, T.DISTRICT): ("sectors.cells.villages.id",),
    (_V, T.SECTOR): ("cells.villages.id",),
    (_V, T.CELL): ("villages.id",),
    (_V, T.VILLAGE): ("id",),
    (_V, T.ISIBO): ("village_id",),
    (_V, T.HOUSE): ("isibo.village_id",),
    (_V, T.USER): ("profile.village_id", "profile.isibo.village_id"),
    (_V, T.ACTIVITY): ("village_id",),
    (_V, T.TASK): ("isibo.village_id",),
    (_V, T.REPORT): ("task.isibo.village_id",),
    # Isibo leader
    (_I, T.PROVINCE): ("districts.sectors.cells.villages.isibos.id",),
    (_I, T.DISTRICT): ("sectors.cells.villages.isibos.id",),
    (_I, T.SECTOR): ("cells.villages.isibos.id",),
    (_I, T.CELL): ("villages.isibos.id",),
    (_I, T.VILLAGE): ("isibos.id",),
    (_I, T.ISIBO): ("id",),
    (_I, T.HOUSE): ("isibo_id",),
    (_I, T.USER): ("profile.isibo_id",),
    (_I, T.ACTIVITY): ("tasks.isibo_id",),
    (_I, T.TASK): ("isibo_id",),
    (_I, T.REPORT): ("task.isibo_id",),
}


def location_scope(level: LocationType, location_id: str, target: ScopeTarget) -> Predicate:
    """Records of target kind located under (or above) the level node location_id."""
    paths = JURISDICTION_PATHS.get((level, target))
    if not paths:
        return MATCH_NONE
    return any_of(*(equals(path, location_id) for path in paths))


def resolve_scope(actor: ActorContext, target: ScopeTarget) -> Predicate:
    """Predicate restricting target records to the actor's jurisdiction."""
    if actor.is_admin:
        return MATCH_ALL
    level = actor.jurisdiction_level
    if level is None:
        return MATCH_NONE
    node_id = actor.bound_location(level)
    if not node_id:
        raise ScopeViolationException(
            f"{actor.role.value} has no assigned {level.value}",
            role=actor.role.value,
        )
    return location_scope(level, node_id, target)


def resolve_scopes(
    actor: ActorContext, targets: Iterable[ScopeTarget]
) -> dict[ScopeTarget, Predicate]:
    """resolve_scope for several targets at once (built fresh per request)."""
    return {target: resolve_scope(actor, target) for target in targets}
