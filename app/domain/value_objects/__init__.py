"""Domain value objects and shared value types."""

from app.domain.value_objects.core import DateRange, Pagination
from app.domain.value_objects.predicates import (
    MATCH_ALL,
    MATCH_NONE,
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
    all_of,
    any_of,
    count_in_range,
    equals,
    exists,
    in_range,
    in_set,
    negate,
    not_blank,
    optional_in_set,
    text_match,
)

__all__ = [
    "DateRange",
    "Pagination",
    "MATCH_ALL",
    "MATCH_NONE",
    "And",
    "CountRange",
    "Equals",
    "Exists",
    "InSet",
    "MatchAll",
    "MatchNone",
    "Not",
    "NotBlank",
    "Or",
    "Predicate",
    "Range",
    "TextMatch",
    "all_of",
    "any_of",
    "count_in_range",
    "equals",
    "exists",
    "in_range",
    "in_set",
    "negate",
    "not_blank",
    "optional_in_set",
    "text_match",
]
