"""Shared utilities: datetime and concurrency helpers."""

from app.shared.utils.concurrency import gather_all
from app.shared.utils.datetime import (
    day_offset,
    ensure_utc,
    subtract_years,
    utc_now,
)

__all__ = [
    "gather_all",
    "utc_now",
    "ensure_utc",
    "day_offset",
    "subtract_years",
]
