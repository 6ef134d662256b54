"""Location hierarchy repository (read-only structural queries).

Resolves nodes, ancestor chains and children across the seven location
tables. Table and key layout per level is described by LEVELS.
"""

import logging
from dataclasses import dataclass
from typing import Any

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.domain.entities.location import LocationNode
from app.domain.enums import LocationType
from app.domain.exceptions import ResourceNotFoundException, UpstreamFailureException
from app.infrastructure.persistence.models import (
    Cell,
    District,
    House,
    Isibo,
    Province,
    Sector,
    Village,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LevelLayout:
    """Mapping of one location level onto its table."""

    model: Any
    parent_key: str | None
    children: str
    name_field: str = "name"


LEVELS: dict[LocationType, LevelLayout] = {
    LocationType.PROVINCE: LevelLayout(Province, None, "districts"),
    LocationType.DISTRICT: LevelLayout(District, "province_id", "sectors"),
    LocationType.SECTOR: LevelLayout(Sector, "district_id", "cells"),
    LocationType.CELL: LevelLayout(Cell, "sector_id", "villages"),
    LocationType.VILLAGE: LevelLayout(Village, "cell_id", "isibos"),
    LocationType.ISIBO: LevelLayout(Isibo, "village_id", "houses"),
    LocationType.HOUSE: LevelLayout(House, "isibo_id", "members", name_field="code"),
}


class LocationHierarchyRepository:
    """Read API over the location tree (implements ILocationHierarchyRepository)."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def _fetch(
        self, session: AsyncSession, level: LocationType, node_id: str
    ) -> LocationNode | None:
        layout = LEVELS[level]
        model = layout.model
        parent_column = getattr(model, layout.parent_key) if layout.parent_key else None
        columns = [model.id, getattr(model, layout.name_field)]
        if parent_column is not None:
            columns.append(parent_column)
        row = (await session.execute(select(*columns).where(model.id == node_id))).first()
        if row is None:
            return None
        parent_id = row[2] if parent_column is not None else None
        return LocationNode(id=row[0], name=row[1], type=level, parent_id=parent_id)

    async def get_node(
        self, node_id: str, level: LocationType | None = None
    ) -> LocationNode | None:
        """Return the node with node_id (searching every level unless level is given)."""
        levels = [level] if level is not None else list(LocationType)
        try:
            async with self._session_factory() as session:
                for candidate in levels:
                    node = await self._fetch(session, candidate, node_id)
                    if node is not None:
                        return node
        except SQLAlchemyError as e:
            raise UpstreamFailureException("location.get_node", str(e)) from e
        return None

    async def get_ancestor_chain(
        self, node_id: str, level: LocationType | None = None
    ) -> list[LocationNode]:
        """Return [node, parent, ..., province]. Raises ResourceNotFoundException if absent."""
        node = await self.get_node(node_id, level)
        if node is None:
            raise ResourceNotFoundException("location", node_id)
        chain = [node]
        try:
            async with self._session_factory() as session:
                current = node
                while current.parent_id is not None:
                    parent_level = current.type.parent
                    if parent_level is None:
                        break
                    parent = await self._fetch(session, parent_level, current.parent_id)
                    if parent is None:
                        raise ResourceNotFoundException("location", current.parent_id)
                    chain.append(parent)
                    current = parent
        except SQLAlchemyError as e:
            raise UpstreamFailureException("location.get_ancestor_chain", str(e)) from e
        return chain

    async def get_children(self, node_id: str, level: LocationType) -> list[LocationNode]:
        """Direct children of the level node node_id, ordered by name. Houses have none."""
        child_level = level.child
        if child_level is None:
            return []
        layout = LEVELS[child_level]
        model = layout.model
        name_column = getattr(model, layout.name_field)
        stmt = (
            select(model.id, name_column)
            .where(getattr(model, layout.parent_key) == node_id)
            .order_by(name_column, model.id)
        )
        try:
            async with self._session_factory() as session:
                rows = (await session.execute(stmt)).all()
        except SQLAlchemyError as e:
            raise UpstreamFailureException("location.get_children", str(e)) from e
        return [
            LocationNode(id=row[0], name=row[1], type=child_level, parent_id=node_id)
            for row in rows
        ]
