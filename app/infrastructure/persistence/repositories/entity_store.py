"""Generic read-only entity store over one mapped model.

Implements IEntityStore for SQLAlchemy: counts, sums, grouped counts,
projected values and row fetches, each filtered by a domain predicate.
Every call opens its own short-lived session from the factory so calls
can run concurrently; SQLAlchemy errors surface as
UpstreamFailureException.
"""

import logging
from collections.abc import Callable, Sequence
from typing import Any

from sqlalchemy import Select, func, select
from sqlalchemy.engine import Result
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.orm import selectinload
from sqlalchemy.orm.strategy_options import Load

from app.domain.exceptions import UpstreamFailureException
from app.domain.value_objects.predicates import MATCH_ALL, MatchNone, Predicate
from app.infrastructure.persistence.database import Base
from app.infrastructure.persistence.predicate_compiler import (
    compile_predicate,
    resolve_column,
)

logger = logging.getLogger(__name__)


def _load_options(model: type, paths: Sequence[str]) -> list[Load]:
    """selectinload chains for dotted relationship paths (e.g. "village.cell")."""
    options = []
    for path in paths:
        target: Any = model
        option = None
        for name in path.split("."):
            attr = getattr(target, name)
            option = selectinload(attr) if option is None else option.selectinload(attr)
            target = attr.property.mapper.class_
        if option is not None:
            options.append(option)
    return options


class SqlEntityStore[ModelType: Base]:
    """Predicate-driven reads for a single model."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        model: type[ModelType],
    ) -> None:
        self._session_factory = session_factory
        self.model = model

    @property
    def name(self) -> str:
        return self.model.__tablename__

    async def _run[R](
        self,
        operation: str,
        stmt: Select[Any],
        extract: Callable[[Result[Any]], R],
    ) -> R:
        try:
            async with self._session_factory() as session:
                result = await session.execute(stmt)
                return extract(result)
        except SQLAlchemyError as e:
            logger.error("%s.%s failed: %s", self.name, operation, e)
            raise UpstreamFailureException(f"{self.name}.{operation}", str(e)) from e

    def _where(self, stmt: Select[Any], predicate: Predicate) -> Select[Any]:
        return stmt.where(compile_predicate(self.model, predicate))

    def _projection(self, fields: Sequence[str]) -> tuple[list[Any], list[Any]]:
        columns: list[Any] = []
        joins: list[Any] = []
        for field in fields:
            column, path_joins = resolve_column(self.model, field)
            columns.append(column)
            for join in path_joins:
                if join not in joins:
                    joins.append(join)
        return columns, joins

    def _select(self, *exprs: Any, joins: Sequence[Any] = ()) -> Select[Any]:
        stmt = select(*exprs).select_from(self.model)
        for join in joins:
            stmt = stmt.join(join)
        return stmt

    async def count(self, predicate: Predicate = MATCH_ALL) -> int:
        """Number of rows matching predicate."""
        if isinstance(predicate, MatchNone):
            return 0
        stmt = self._where(self._select(func.count()), predicate)
        return await self._run("count", stmt, lambda r: int(r.scalar_one() or 0))

    async def sum_fields(
        self, fields: Sequence[str], predicate: Predicate = MATCH_ALL
    ) -> dict[str, float]:
        """Sum of each field over matching rows; empty sets sum to 0."""
        if isinstance(predicate, MatchNone):
            return {field: 0.0 for field in fields}
        columns, joins = self._projection(fields)
        stmt = self._where(
            self._select(*(func.coalesce(func.sum(c), 0) for c in columns), joins=joins),
            predicate,
        )
        row = await self._run("sum", stmt, lambda r: r.one())
        return {field: float(value or 0) for field, value in zip(fields, row, strict=True)}

    async def group_count(self, field: str, predicate: Predicate = MATCH_ALL) -> dict[Any, int]:
        """Row counts per value of field (NULL values are skipped)."""
        if isinstance(predicate, MatchNone):
            return {}
        (column,), joins = self._projection([field])
        stmt = self._where(
            self._select(column, func.count(), joins=joins), predicate
        ).group_by(column)
        rows = await self._run("group_count", stmt, lambda r: r.all())
        return {value: int(count) for value, count in rows if value is not None}

    async def values(
        self,
        fields: Sequence[str],
        predicate: Predicate = MATCH_ALL,
        limit: int | None = None,
    ) -> list[tuple[Any, ...]]:
        """Projected field tuples for matching rows, newest first."""
        if isinstance(predicate, MatchNone):
            return []
        columns, joins = self._projection(fields)
        model: Any = self.model
        stmt = self._where(self._select(*columns, joins=joins), predicate).order_by(
            model.created_at.desc(), model.id
        )
        if limit is not None:
            stmt = stmt.limit(limit)
        rows = await self._run("values", stmt, lambda r: r.all())
        return [tuple(row) for row in rows]

    async def find_many(
        self,
        predicate: Predicate = MATCH_ALL,
        *,
        limit: int,
        load: Sequence[str] = (),
    ) -> list[ModelType]:
        """Matching rows (newest first, capped at limit) with relationships in load eager-loaded."""
        if isinstance(predicate, MatchNone) or limit <= 0:
            return []
        model: Any = self.model
        stmt = (
            self._where(select(self.model), predicate)
            .options(*_load_options(self.model, load))
            .order_by(model.created_at.desc(), model.id)
            .limit(limit)
        )
        return await self._run("find_many", stmt, lambda r: list(r.scalars().all()))
