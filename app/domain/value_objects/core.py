"""Domain value objects for analytics windows and result paging.

Value objects are immutable types that represent domain concepts with
self-validation. They have no identity, only value.
"""

import math
from dataclasses import dataclass
from datetime import datetime, timedelta

from app.domain.exceptions import ValidationException
from app.shared.utils.datetime import ensure_utc

_ONE_DAY = timedelta(days=1)


@dataclass(frozen=True)
class DateRange:
    """Half-open-friendly window [start, end] in UTC.

    Metric aggregates treat both bounds as inclusive; the daily time series
    buckets [start, end). End must lie strictly after start.
    """

    start: datetime
    end: datetime

    def __post_init__(self) -> None:
        start = ensure_utc(self.start)
        end = ensure_utc(self.end)
        if end <= start:
            raise ValidationException(
                "end_date must be after start_date", field="end_date"
            )
        object.__setattr__(self, "start", start)
        object.__setattr__(self, "end", end)

    @property
    def days(self) -> int:
        """Number of 24-hour buckets covering the window (rounded up)."""
        return math.ceil((self.end - self.start) / _ONE_DAY)

    def day_start(self, offset: int) -> datetime:
        """Start of the bucket offset days after start."""
        return self.start + offset * _ONE_DAY


@dataclass(frozen=True)
class Pagination:
    """1-based page request with a bounded page size."""

    page: int = 1
    size: int = 10
    max_size: int = 100

    def __post_init__(self) -> None:
        if self.page < 1:
            raise ValidationException("page must be >= 1", field="page")
        if self.size < 1:
            raise ValidationException("size must be >= 1", field="size")
        if self.size > self.max_size:
            raise ValidationException(
                f"size must be <= {self.max_size}", field="size"
            )

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.size

    def total_pages(self, total_items: int) -> int:
        return math.ceil(total_items / self.size) if total_items > 0 else 0

    def item_count(self, total_items: int) -> int:
        """Items on this page: min(size, remaining), never negative."""
        return max(0, min(self.size, total_items - self.offset))

    def slice[T](self, items: list[T]) -> list[T]:
        return items[self.offset : self.offset + self.size]
