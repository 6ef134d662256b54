"""Typed, composable record filters.

A predicate is an immutable value describing which rows of one entity
are selected. Paths are dotted attribute paths relative to the root
entity; intermediate segments name relationships (e.g.
``"isibo.village.cell_id"`` from a task). Each store interprets the
predicate against its own backend.

Build predicates with the helper functions (all_of, any_of, equals,
in_set, ...) rather than the raw classes: the helpers fold MatchAll and
MatchNone so scope and filter composition stays small.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class MatchAll:
    """Selects every row."""


@dataclass(frozen=True)
class MatchNone:
    """Selects no row."""


@dataclass(frozen=True)
class Equals:
    path: str
    value: Any


@dataclass(frozen=True)
class InSet:
    path: str
    values: tuple[Any, ...]


@dataclass(frozen=True)
class Range:
    """Bounded comparison; a None bound is open."""

    path: str
    gte: Any = None
    lte: Any = None
    lt: Any = None


@dataclass(frozen=True)
class TextMatch:
    """Case-insensitive substring match of query against any of paths."""

    paths: tuple[str, ...]
    query: str


@dataclass(frozen=True)
class NotBlank:
    """Value is neither NULL nor the empty string."""

    path: str


@dataclass(frozen=True)
class Exists:
    """At least one related row along path satisfies predicate."""

    path: str
    predicate: Predicate = MatchAll()


@dataclass(frozen=True)
class CountRange:
    """Number of related rows reached along a collection path lies within bounds."""

    path: str
    gte: int | None = None
    lte: int | None = None


@dataclass(frozen=True)
class Not:
    """Complement of predicate."""

    predicate: Predicate


@dataclass(frozen=True)
class And:
    parts: tuple[Predicate, ...]


@dataclass(frozen=True)
class Or:
    parts: tuple[Predicate, ...]


type Predicate = (
    MatchAll
    | MatchNone
    | Equals
    | InSet
    | Range
    | TextMatch
    | NotBlank
    | Exists
    | CountRange
    | Not
    | And
    | Or
)

MATCH_ALL = MatchAll()
MATCH_NONE = MatchNone()


def all_of(*parts: Predicate) -> Predicate:
    """Conjunction of parts; MatchNone absorbs, MatchAll is dropped."""
    flat: list[Predicate] = []
    for part in parts:
        if isinstance(part, MatchNone):
            return MATCH_NONE
        if isinstance(part, MatchAll):
            continue
        if isinstance(part, And):
            flat.extend(part.parts)
        else:
            flat.append(part)
    if not flat:
        return MATCH_ALL
    if len(flat) == 1:
        return flat[0]
    return And(tuple(flat))


def any_of(*parts: Predicate) -> Predicate:
    """Disjunction of parts; MatchAll absorbs, MatchNone is dropped."""
    flat: list[Predicate] = []
    for part in parts:
        if isinstance(part, MatchAll):
            return MATCH_ALL
        if isinstance(part, MatchNone):
            continue
        if isinstance(part, Or):
            flat.extend(part.parts)
        else:
            flat.append(part)
    if not flat:
        return MATCH_NONE
    if len(flat) == 1:
        return flat[0]
    return Or(tuple(flat))


def equals(path: str, value: Any) -> Predicate:
    return Equals(path, value)


def in_set(path: str, values: Iterable[Any]) -> Predicate:
    """Membership test; an empty collection selects nothing."""
    items = tuple(dict.fromkeys(values))
    if not items:
        return MATCH_NONE
    if len(items) == 1:
        return Equals(path, items[0])
    return InSet(path, items)


def in_range(path: str, gte: Any = None, lte: Any = None, lt: Any = None) -> Predicate:
    """Range test; with no bound at all it selects everything."""
    if gte is None and lte is None and lt is None:
        return MATCH_ALL
    return Range(path, gte=gte, lte=lte, lt=lt)


def text_match(paths: Iterable[str], query: str | None) -> Predicate:
    """Substring match across paths; a blank query selects everything."""
    query = (query or "").strip()
    if not query:
        return MATCH_ALL
    return TextMatch(tuple(paths), query)


def exists(path: str, predicate: Predicate = MATCH_ALL) -> Predicate:
    if isinstance(predicate, MatchNone):
        return MATCH_NONE
    return Exists(path, predicate)


def count_in_range(path: str, gte: int | None = None, lte: int | None = None) -> Predicate:
    """Related-row count test; with no bound at all it selects everything."""
    if gte is None and lte is None:
        return MATCH_ALL
    return CountRange(path, gte=gte, lte=lte)


def not_blank(path: str) -> Predicate:
    return NotBlank(path)


def negate(predicate: Predicate) -> Predicate:
    """Complement; MatchAll and MatchNone swap, double negation cancels."""
    if isinstance(predicate, MatchAll):
        return MATCH_NONE
    if isinstance(predicate, MatchNone):
        return MATCH_ALL
    if isinstance(predicate, Not):
        return predicate.predicate
    return Not(predicate)


def optional_in_set(path: str, values: Iterable[Any] | None) -> Predicate:
    """Filter helper: None or empty means no constraint."""
    if not values:
        return MATCH_ALL
    return in_set(path, values)
