"""Actor context: who is asking, and over which part of the hierarchy."""

from dataclasses import dataclass

from app.domain.enums import JURISDICTION_LEVELS, LocationType, UserRole


@dataclass(frozen=True)
class ActorContext:
    """Caller identity resolved per request from the authenticated user.

    Leaders are bound to at most one node per level (cell, village, isibo).
    ADMIN carries no restriction; the other roles have no jurisdiction.
    """

    user_id: str
    role: UserRole
    cell_id: str | None = None
    village_id: str | None = None
    isibo_id: str | None = None

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    @property
    def jurisdiction_level(self) -> LocationType | None:
        """Level the role governs, or None for roles without jurisdiction."""
        return JURISDICTION_LEVELS.get(self.role)

    def bound_location(self, level: LocationType) -> str | None:
        """Return the node id bound at level, if any."""
        return {
            LocationType.CELL: self.cell_id,
            LocationType.VILLAGE: self.village_id,
            LocationType.ISIBO: self.isibo_id,
        }.get(level)

    @property
    def jurisdiction(self) -> tuple[LocationType, str] | None:
        """(level, node id) the actor governs, or None when unbound or not a leader."""
        level = self.jurisdiction_level
        if level is None:
            return None
        node_id = self.bound_location(level)
        if not node_id:
            return None
        return level, node_id
