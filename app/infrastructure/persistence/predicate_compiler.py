"""Translate domain predicates into SQLAlchemy boolean expressions.

Dotted paths walk mapped relationships: a many-to-one segment compiles to
``relationship.has(...)`` and a one-to-many segment to
``relationship.any(...)``. Both produce correlated EXISTS subqueries, so
filtering through a collection never duplicates root rows and the result
can be combined freely with aggregates on the root entity. CountRange
compiles to a correlated COUNT subquery over the same relationship paths.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from sqlalchemy import and_, false, func, inspect as sa_inspect, not_, or_, select, true
from sqlalchemy.orm import InstrumentedAttribute, RelationshipProperty, aliased
from sqlalchemy.sql.elements import ColumnElement

from app.domain.value_objects.predicates import (
    And,
    CountRange,
    Equals,
    Exists,
    InSet,
    MatchAll,
    MatchNone,
    Not,
    NotBlank,
    Or,
    Predicate,
    Range,
    TextMatch,
)

LIKE_ESCAPE = "\\"


def like_pattern(query: str) -> str:
    """Return a %query% pattern with LIKE wildcards escaped."""
    escaped = (
        query.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )
    return f"%{escaped}%"


def _attribute(model: type, name: str) -> InstrumentedAttribute[Any]:
    mapper = sa_inspect(model)
    if name not in mapper.attrs:
        raise ValueError(f"{model.__name__} has no mapped attribute {name!r}")
    return getattr(model, name)


def _relationship(model: type, name: str) -> tuple[InstrumentedAttribute[Any], RelationshipProperty[Any]]:
    attr = _attribute(model, name)
    prop = attr.property
    if not isinstance(prop, RelationshipProperty):
        raise ValueError(f"{model.__name__}.{name} is not a relationship")
    return attr, prop


def _through(model: type, segments: list[str], leaf: Callable[[type], ColumnElement[bool]]) -> ColumnElement[bool]:
    """Apply leaf to the model reached by walking segments from model."""
    if not segments:
        return leaf(model)
    attr, prop = _relationship(model, segments[0])
    inner = _through(prop.mapper.class_, segments[1:], leaf)
    return attr.any(inner) if prop.uselist else attr.has(inner)


def _on_column(
    model: type, path: str, condition: Callable[[InstrumentedAttribute[Any]], ColumnElement[bool]]
) -> ColumnElement[bool]:
    *relations, column = path.split(".")
    return _through(model, relations, lambda target: condition(_attribute(target, column)))


def _range(column: InstrumentedAttribute[Any], predicate: Range) -> ColumnElement[bool]:
    conditions = []
    if predicate.gte is not None:
        conditions.append(column >= predicate.gte)
    if predicate.lte is not None:
        conditions.append(column <= predicate.lte)
    if predicate.lt is not None:
        conditions.append(column < predicate.lt)
    return and_(true(), *conditions)


def _related_count(model: type, path: str) -> ColumnElement[int]:
    """Correlated COUNT of the rows reached from model along path.

    The root is aliased inside the subquery so the outer row is matched by
    primary key; every segment is an inner join, so an empty collection
    counts as 0.
    """
    root = aliased(model)
    (key,) = sa_inspect(model).primary_key
    stmt = select(func.count()).select_from(root)
    target: type = model
    source: Any = root
    for name in path.split("."):
        _, prop = _relationship(target, name)
        stmt = stmt.join(getattr(source, name))
        target = source = prop.mapper.class_
    stmt = stmt.where(getattr(root, key.key) == getattr(model, key.key))
    return stmt.correlate(model).scalar_subquery()


def compile_predicate(model: type, predicate: Predicate) -> ColumnElement[bool]:
    """Compile predicate against model into a WHERE-clause expression."""
    match predicate:
        case MatchAll():
            return true()
        case MatchNone():
            return false()
        case Equals(path=path, value=None):
            return _on_column(model, path, lambda column: column.is_(None))
        case Equals(path=path, value=value):
            return _on_column(model, path, lambda column: column == value)
        case InSet(path=path, values=values):
            return _on_column(model, path, lambda column: column.in_(values))
        case Range(path=path):
            return _on_column(model, path, lambda column: _range(column, predicate))
        case TextMatch(paths=paths, query=query):
            pattern = like_pattern(query)
            return or_(
                *(
                    _on_column(
                        model, path, lambda column: column.ilike(pattern, escape=LIKE_ESCAPE)
                    )
                    for path in paths
                )
            )
        case NotBlank(path=path):
            return _on_column(
                model, path, lambda column: and_(column.is_not(None), column != "")
            )
        case Exists(path=path, predicate=inner):
            *relations, last = path.split(".")

            def _exists(target: type) -> ColumnElement[bool]:
                attr, prop = _relationship(target, last)
                if isinstance(inner, MatchAll):
                    return attr.any() if prop.uselist else attr.has()
                criterion = compile_predicate(prop.mapper.class_, inner)
                return attr.any(criterion) if prop.uselist else attr.has(criterion)

            return _through(model, relations, _exists)
        case CountRange(path=path, gte=gte, lte=lte):
            count = _related_count(model, path)
            conditions = []
            if gte is not None:
                conditions.append(count >= gte)
            if lte is not None:
                conditions.append(count <= lte)
            return and_(true(), *conditions)
        case Not(predicate=inner):
            return not_(compile_predicate(model, inner))
        case And(parts=parts):
            return and_(*(compile_predicate(model, part) for part in parts))
        case Or(parts=parts):
            return or_(*(compile_predicate(model, part) for part in parts))
    raise TypeError(f"Unsupported predicate: {predicate!r}")


def resolve_column(model: type, path: str) -> tuple[InstrumentedAttribute[Any], list[InstrumentedAttribute[Any]]]:
    """Resolve a dotted field path to (column, joins) for SELECT / GROUP BY.

    Only many-to-one segments are allowed so the joins never multiply rows.
    """
    *relations, column = path.split(".")
    joins: list[InstrumentedAttribute[Any]] = []
    target = model
    for name in relations:
        attr, prop = _relationship(target, name)
        if prop.uselist:
            raise ValueError(
                f"{target.__name__}.{name} is a collection; aggregate through a many-to-one path"
            )
        joins.append(attr)
        target = prop.mapper.class_
    return _attribute(target, column), joins
